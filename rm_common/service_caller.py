"""Asynchronous callers for the services used by the decision layer."""

import enum
import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "Strictness",
    "SwitchControllerRequest",
    "SwitchControllerResponse",
    "QueryCalibrationRequest",
    "QueryCalibrationResponse",
    "EnemyColor",
    "TargetType",
    "ArmorTarget",
    "ExposureLevel",
    "StatusChangeRequest",
    "StatusChangeResponse",
    "ServiceCaller",
    "SwitchControllersCaller",
    "QueryCalibrationCaller",
    "SwitchDetectionCaller",
]

_log = logging.getLogger(__name__)

SWITCH_CONTROLLER_SERVICE = "/controller_manager/switch_controller"
STATUS_SWITCH_SERVICE = "/detection_nodelet/status_switch"


class Strictness(enum.IntEnum):
    BEST_EFFORT = 1
    STRICT = 2


@dataclass
class SwitchControllerRequest:
    start_controllers: list[str] = field(default_factory=list)
    stop_controllers: list[str] = field(default_factory=list)
    strictness: int = Strictness.BEST_EFFORT
    start_asap: bool = False
    timeout: float = 0.0


@dataclass
class SwitchControllerResponse:
    ok: bool = False


@dataclass
class QueryCalibrationRequest:
    pass


@dataclass
class QueryCalibrationResponse:
    is_calibrated: bool = False


class EnemyColor(enum.IntEnum):
    RED = 0
    BLUE = 1


class TargetType(enum.IntEnum):
    ARMOR = 0
    BUFF = 1


class ArmorTarget(enum.IntEnum):
    ARMOR_ALL = 0
    ARMOR_WITHOUT_OUTPOST = 1
    ARMOR_OUTPOST_BASE = 2


class ExposureLevel(enum.IntEnum):
    EXPOSURE_LEVEL_0 = 0
    EXPOSURE_LEVEL_1 = 1
    EXPOSURE_LEVEL_2 = 2
    EXPOSURE_LEVEL_3 = 3
    EXPOSURE_LEVEL_4 = 4


@dataclass
class StatusChangeRequest:
    color: int = EnemyColor.RED
    target: int = TargetType.ARMOR
    armor_target: int = ArmorTarget.ARMOR_ALL
    exposure: int = ExposureLevel.EXPOSURE_LEVEL_0


@dataclass
class StatusChangeResponse:
    switch_is_success: bool = False


Client = Callable[[Any], Any]


class ServiceCaller:
    """Calls a service in a background thread, at most one call at a time.

    ``client`` is called with :attr:`request` and returns the response; returning
    ``None`` or raising counts as a failed call and leaves :attr:`response` as it was.
    """

    def __init__(self, client: Client, service_name: str = "", fail_limit: int = 0) -> None:
        if not service_name:
            raise ValueError("Service name no defined")
        self._client = client
        self.service_name = service_name
        self._fail_limit = fail_limit
        self._fail_count = 0
        self.request: Any = None
        self.response: Any = None
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._retry_logged = False
        self._failure_logged = False

    def call_service(self) -> None:
        """Start a call unless one is already running."""
        if not self._lock.acquire(blocking=False):
            return
        try:
            self._thread = threading.Thread(target=self._calling_thread, daemon=True)
            self._thread.start()
        except BaseException:
            self._lock.release()
            raise

    def is_calling(self) -> bool:
        return self._lock.locked()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the running call to finish; return True if no call is running."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.is_calling()

    def _calling_thread(self) -> None:
        try:
            try:
                response = self._client(self.request)
            except Exception:
                response = None
            if response is None:
                self._on_failure()
            else:
                self.response = response
        finally:
            self._lock.release()

    def _on_failure(self) -> None:
        if not self._retry_logged:
            self._retry_logged = True
            _log.info("Failed to call service on %s. Retrying now ...", self.service_name)
        if self._fail_limit == 0:
            return
        self._fail_count += 1
        if self._fail_count >= self._fail_limit:
            if not self._failure_logged:
                self._failure_logged = True
                _log.error("Failed to call service on %s", self.service_name)
            self._fail_count = 0


class SwitchControllersCaller(ServiceCaller):
    """Asks the controller manager to start and stop controllers."""

    def __init__(self, client: Client) -> None:
        super().__init__(client, SWITCH_CONTROLLER_SERVICE)
        self.request = SwitchControllerRequest(strictness=Strictness.BEST_EFFORT, start_asap=True)
        self.response = SwitchControllerResponse()

    def start_controllers(self, controllers: Iterable[str]) -> None:
        self.request.start_controllers = list(controllers)

    def stop_controllers(self, controllers: Iterable[str]) -> None:
        self.request.stop_controllers = list(controllers)

    def ok(self) -> bool:
        if self.is_calling():
            return False
        return bool(self.response.ok)


class QueryCalibrationCaller(ServiceCaller):
    """Asks a calibration controller whether it has finished."""

    def __init__(self, client: Client, service_name: str) -> None:
        super().__init__(client, service_name)
        self.request = QueryCalibrationRequest()
        self.response = QueryCalibrationResponse()

    def is_calibrated(self) -> bool:
        if self.is_calling():
            return False
        return bool(self.response.is_calibrated)


class SwitchDetectionCaller(ServiceCaller):
    """Configures the vision detector; sends its defaults on construction."""

    def __init__(self, client: Client) -> None:
        super().__init__(client, STATUS_SWITCH_SERVICE)
        self.request = StatusChangeRequest(
            target=TargetType.ARMOR,
            exposure=ExposureLevel.EXPOSURE_LEVEL_0,
            armor_target=ArmorTarget.ARMOR_ALL,
        )
        self.response = StatusChangeResponse()
        self.call_service()

    def set_enemy_color(self, robot_id: int, robot_color: str) -> None:
        """Target the colour opposite to our own; ignored while the referee is offline (id 0)."""
        if robot_id == 0:
            _log.info("Set enemy color failed: referee offline")
            return
        self.request.color = EnemyColor.RED if robot_color == "blue" else EnemyColor.BLUE
        _log.info("Set enemy color: %s", "red" if self.request.color == EnemyColor.RED else "blue")
        self.call_service()

    def set_color(self, color: int) -> None:
        self.request.color = color

    def switch_enemy_color(self) -> None:
        self.request.color = int(self.request.color == EnemyColor.RED)

    def switch_target_type(self) -> None:
        self.request.target = int(self.request.target == TargetType.ARMOR)

    def set_target_type(self, target: int) -> None:
        self.request.target = target

    def switch_armor_target_type(self) -> None:
        self.request.armor_target = int(self.request.armor_target == ArmorTarget.ARMOR_ALL)

    def set_armor_target_type(self, armor_target: int) -> None:
        self.request.armor_target = armor_target

    def switch_exposure_level(self) -> None:
        if self.request.exposure == ExposureLevel.EXPOSURE_LEVEL_4:
            self.request.exposure = ExposureLevel.EXPOSURE_LEVEL_0
        else:
            self.request.exposure = self.request.exposure + 1

    def is_switch(self) -> bool:
        if self.is_calling():
            return False
        return bool(self.response.switch_is_success)