"""Buffers controller start/stop requests and forwards them to the controller manager."""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from rm_common.service_caller import SwitchControllersCaller

__all__ = ["ControllerManager"]

_log = logging.getLogger(__name__)


class ControllerManager:
    """Loads the configured controllers and batches switch requests.

    ``controllers_list`` may hold ``state_controllers``, ``main_controllers`` and
    ``calibration_controllers``; ``load_client`` loads one controller by name and
    returns whether it succeeded.
    """

    def __init__(
        self,
        controllers_list: Mapping[str, Sequence[str]] | None,
        load_client: Callable[[str], bool],
        switch_caller: SwitchControllersCaller,
    ) -> None:
        self._load_client = load_client
        self._switch_caller = switch_caller
        self._start_buffer: list[str] = []
        self._stop_buffer: list[str] = []
        if controllers_list is None:
            _log.error("No controllers defined")
            controllers_list = {}
        self._state_controllers = self._load_group(controllers_list, "state_controllers")
        self._main_controllers = self._load_group(controllers_list, "main_controllers")
        self._calibration_controllers = self._load_group(controllers_list, "calibration_controllers")

    def _load_group(self, controllers_list: Mapping[str, Sequence[str]], key: str) -> list[str]:
        group: list[str] = []
        for controller in controllers_list.get(key, ()):
            group.append(str(controller))
            self.load_controller(str(controller))
        return group

    @property
    def start_buffer(self) -> list[str]:
        """Controllers waiting to be started."""
        return list(self._start_buffer)

    @property
    def stop_buffer(self) -> list[str]:
        """Controllers waiting to be stopped."""
        return list(self._stop_buffer)

    def update(self) -> None:
        """Send the buffered requests unless a switch call is still running."""
        if self._switch_caller.is_calling():
            return
        self._switch_caller.start_controllers(self._start_buffer)
        self._switch_caller.stop_controllers(self._stop_buffer)
        if self._start_buffer or self._stop_buffer:
            self._switch_caller.call_service()
            self._start_buffer.clear()
            self._stop_buffer.clear()

    def load_controller(self, controller: str) -> bool:
        ok = bool(self._load_client(controller))
        if ok:
            _log.info("Loaded %s", controller)
        else:
            _log.error("Fail to load %s", controller)
        return ok

    def start_controller(self, controller: str) -> None:
        if controller not in self._start_buffer:
            self._start_buffer.append(controller)
        # A controller must not be started and stopped at the same time.
        if controller in self._stop_buffer:
            self._stop_buffer.remove(controller)

    def stop_controller(self, controller: str) -> None:
        if controller not in self._stop_buffer:
            self._stop_buffer.append(controller)
        if controller in self._start_buffer:
            self._start_buffer.remove(controller)

    def start_controllers(self, controllers: Iterable[str]) -> None:
        for controller in controllers:
            self.start_controller(controller)

    def stop_controllers(self, controllers: Iterable[str]) -> None:
        for controller in controllers:
            self.stop_controller(controller)

    def start_state_controllers(self) -> None:
        self.start_controllers(self._state_controllers)

    def start_main_controllers(self) -> None:
        self.start_controllers(self._main_controllers)

    def stop_main_controllers(self) -> None:
        self.stop_controllers(self._main_controllers)

    def start_calibration_controllers(self) -> None:
        self.start_controllers(self._calibration_controllers)

    def stop_calibration_controllers(self) -> None:
        self.stop_controllers(self._calibration_controllers)

    def is_calling(self) -> bool:
        return self._switch_caller.is_calling()