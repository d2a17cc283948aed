import pytest

from rm_common.calibration_queue import CalibrationQueue, CalibrationService
from rm_common.controller_manager import ControllerManager
from rm_common.service_caller import (
    QueryCalibrationCaller,
    QueryCalibrationResponse,
    SwitchControllerResponse,
    SwitchControllersCaller,
)

CONFIG = [{"start_controllers": ["calib"], "stop_controllers": ["main"], "services_name": ["svc"]}]


class Callers:
    def __init__(self, result=True):
        self.result = result
        self.created = {}
        self.queries = []

    def __call__(self, name):
        def client(request):
            self.queries.append(name)
            return QueryCalibrationResponse(is_calibrated=self.result)

        caller = QueryCalibrationCaller(client, name)
        self.created[name] = caller
        return caller


def make_manager():
    switch = SwitchControllersCaller(lambda request: SwitchControllerResponse(ok=True))
    return ControllerManager({}, lambda name: True, switch), switch


def test_service_requires_keys():
    with pytest.raises(KeyError):
        CalibrationService({"start_controllers": [], "stop_controllers": []}, Callers())


def test_service_requires_lists():
    with pytest.raises(TypeError):
        CalibrationService(
            {"start_controllers": "calib", "stop_controllers": [], "services_name": []}, Callers()
        )


def test_service_calibration_state():
    callers = Callers()
    service = CalibrationService(
        {"start_controllers": ["c"], "stop_controllers": [], "services_name": ["a", "b"]}, callers
    )
    assert service.is_calibrated() is False
    service.call_service()
    for caller in callers.created.values():
        caller.wait(5.0)
    assert service.is_calibrated() is True
    service.set_calibrated_false()
    assert service.is_calibrated() is False


def test_starts_calibrated_until_reset():
    manager, _ = make_manager()
    queue = CalibrationQueue(CONFIG, manager, Callers(), now=0.0, use_sim_time=False)
    assert queue.is_calibrated() is True
    queue.reset()
    assert queue.is_calibrated() is False


def test_sim_time_or_bad_config_gives_empty_queue():
    manager, _ = make_manager()
    for queue in (
        CalibrationQueue(CONFIG, manager, Callers(), now=0.0, use_sim_time=True),
        CalibrationQueue({"not": "a list"}, manager, Callers(), now=0.0, use_sim_time=False),
    ):
        queue.reset()
        queue.update(1.0)
        assert queue.is_calibrated() is True
        assert manager.start_buffer == []


def test_full_calibration_flow():
    manager, _ = make_manager()
    callers = Callers()
    queue = CalibrationQueue(CONFIG, manager, callers, now=0.0, use_sim_time=False)
    queue.reset()
    queue.update(1.0)
    assert manager.start_buffer == ["calib"]
    assert manager.stop_buffer == ["main"]
    queue.update(1.1)
    callers.created["svc"].wait(5.0)
    assert callers.queries == ["svc"]
    assert queue.is_calibrated() is False
    queue.update(1.2)
    assert queue.is_calibrated() is True
    assert manager.start_buffer == ["main"]
    assert manager.stop_buffer == ["calib"]


def test_without_flip_controllers_stay_stopped():
    manager, _ = make_manager()
    callers = Callers()
    queue = CalibrationQueue(CONFIG, manager, callers, now=0.0, use_sim_time=False)
    queue.reset()
    queue.update(1.0)
    queue.update(1.1)
    callers.created["svc"].wait(5.0)
    queue.update(1.2, flip_controllers=False)
    assert queue.is_calibrated() is True
    assert manager.start_buffer == []
    assert manager.stop_buffer == ["main", "calib"]


def test_query_is_throttled():
    manager, _ = make_manager()
    callers = Callers()
    queue = CalibrationQueue(CONFIG, manager, callers, now=1.0, use_sim_time=False)
    queue.reset()
    queue.update(1.0)
    queue.update(1.1)
    callers.created["svc"].wait(5.0)
    assert callers.queries == []
    assert queue.is_calibrated() is False


def test_not_calibrated_keeps_querying():
    manager, _ = make_manager()
    callers = Callers(result=False)
    queue = CalibrationQueue(CONFIG, manager, callers, now=0.0, use_sim_time=False)
    queue.reset()
    queue.update(1.0)
    queue.update(1.5)
    callers.created["svc"].wait(5.0)
    queue.update(2.0)
    callers.created["svc"].wait(5.0)
    assert callers.queries == ["svc", "svc"]
    assert queue.is_calibrated() is False


def test_stop_controller_and_stop():
    manager, switch = make_manager()
    queue = CalibrationQueue(CONFIG, manager, Callers(), now=0.0, use_sim_time=False)
    queue.reset()
    queue.update(1.0)
    manager.update()
    switch.wait(5.0)
    assert manager.stop_buffer == []
    queue.stop_controller()
    assert manager.stop_buffer == ["main"]
    queue.stop()
    assert queue.is_calibrated() is True


def test_stop_before_switch_does_nothing():
    manager, _ = make_manager()
    queue = CalibrationQueue(CONFIG, manager, Callers(), now=0.0, use_sim_time=False)
    queue.reset()
    queue.stop()
    queue.stop_controller()
    assert queue.is_calibrated() is False
    assert manager.stop_buffer == []