"""Sequential calibration of actuators by switching calibration controllers in and out."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from rm_common.controller_manager import ControllerManager
from rm_common.service_caller import QueryCalibrationCaller

__all__ = ["CalibrationService", "CalibrationQueue"]

_QUERY_INTERVAL = 0.2

CallerFactory = Callable[[str], QueryCalibrationCaller]


def _name_list(config: Mapping[str, Any], key: str) -> list[str]:
    if key not in config:
        raise KeyError(f"calibration entry has no {key!r}")
    value = config[key]
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"{key!r} must be a list of names")
    return [str(item) for item in value]


class CalibrationService:
    """One calibration step: controllers to switch and services to query for completion."""

    def __init__(self, config: Mapping[str, Any], make_caller: CallerFactory) -> None:
        self.start_controllers = _name_list(config, "start_controllers")
        self.stop_controllers = _name_list(config, "stop_controllers")
        self.query_services = [make_caller(name) for name in _name_list(config, "services_name")]

    def set_calibrated_false(self) -> None:
        for service in self.query_services:
            service.response.is_calibrated = False

    def is_calibrated(self) -> bool:
        return all(service.is_calibrated() for service in self.query_services)

    def call_service(self) -> None:
        for service in self.query_services:
            service.call_service()


class CalibrationQueue:
    """Runs calibration steps one after another.

    It starts out calibrated; call :meth:`reset` to begin. With ``use_sim_time`` or a
    configuration that is not a list, the queue is empty and always calibrated.
    """

    def __init__(
        self,
        config: Any,
        controller_manager: ControllerManager,
        make_caller: CallerFactory,
        now: float,
        use_sim_time: bool = False,
    ) -> None:
        self._controller_manager = controller_manager
        self._switched = False
        self._services: list[CalibrationService] = []
        if not use_sim_time and isinstance(config, list):
            self._services = [CalibrationService(entry, make_caller) for entry in config]
        self._last_query = now
        self._index = len(self._services)

    def reset(self) -> None:
        if not self._services:
            return
        self._index = 0
        self._switched = False
        for service in self._services:
            service.set_calibrated_false()

    def update(self, time: float, flip_controllers: bool = True) -> None:
        if not self._services or self.is_calibrated():
            return
        current = self._services[self._index]
        if self._switched:
            if current.is_calibrated():
                if flip_controllers:
                    self._controller_manager.start_controllers(current.stop_controllers)
                self._controller_manager.stop_controllers(current.start_controllers)
                self._index += 1
                self._switched = False
            elif time - self._last_query > _QUERY_INTERVAL:
                self._last_query = time
                current.call_service()
        else:
            self._switched = True
            self._controller_manager.start_controllers(current.start_controllers)
            self._controller_manager.stop_controllers(current.stop_controllers)

    def is_calibrated(self) -> bool:
        return self._index == len(self._services)

    def stop_controller(self) -> None:
        if not self._services:
            return
        if not self.is_calibrated() and self._switched:
            self._controller_manager.stop_controllers(self._services[self._index].stop_controllers)

    def stop(self) -> None:
        if self._switched:
            self._index = len(self._services)
            self._switched = False