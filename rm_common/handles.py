"""Hardware handles shared between the hardware layer and controllers, and a registry for them."""

import enum
from dataclasses import dataclass, fields
from typing import Generic, Protocol, TypeVar

__all__ = [
    "HardwareInterfaceError",
    "ActuatorExtraHandle",
    "GpioType",
    "GpioStateHandle",
    "GpioCommandHandle",
    "TofRadarHandle",
    "HandleRegistry",
]


class HardwareInterfaceError(Exception):
    """Raised when a handle is malformed or a requested resource does not exist."""


def _check_set(handle) -> None:
    for field in fields(handle):
        if getattr(handle, field.name) is None:
            raise HardwareInterfaceError(
                f"Cannot create handle '{handle.name}'. {field.name} is not set."
            )


@dataclass
class ActuatorExtraHandle:
    """Calibration-related state of one actuator."""

    name: str
    halted: bool
    need_calibration: bool
    calibrated: bool
    calibration_reading: bool
    position: float
    offset: float

    def __post_init__(self) -> None:
        _check_set(self)


class GpioType(enum.IntEnum):
    INPUT = 0
    OUTPUT = 1


@dataclass
class GpioStateHandle:
    """State of one GPIO pin."""

    name: str
    type: GpioType
    value: bool

    def __post_init__(self) -> None:
        _check_set(self)


@dataclass
class GpioCommandHandle:
    """Command written to one GPIO pin."""

    name: str
    type: GpioType
    command: bool

    def __post_init__(self) -> None:
        _check_set(self)


@dataclass
class TofRadarHandle:
    """Reading of one time-of-flight radar."""

    name: str
    distance: float
    strength: float

    def __post_init__(self) -> None:
        _check_set(self)


class _Named(Protocol):
    name: str


H = TypeVar("H", bound=_Named)


class HandleRegistry(Generic[H]):
    """Handles of one kind, looked up by name."""

    def __init__(self) -> None:
        self._handles: dict[str, H] = {}

    def register_handle(self, handle: H) -> None:
        """Add ``handle``, replacing any handle registered under the same name."""
        self._handles[handle.name] = handle

    def get_handle(self, name: str) -> H:
        try:
            return self._handles[name]
        except KeyError:
            raise HardwareInterfaceError(f"Could not find resource '{name}'") from None

    def names(self) -> list[str]:
        """Registered names in sorted order."""
        return sorted(self._handles)