import logging
import threading

import pytest

from rm_common.service_caller import (
    ArmorTarget,
    EnemyColor,
    ExposureLevel,
    QueryCalibrationCaller,
    QueryCalibrationResponse,
    ServiceCaller,
    StatusChangeResponse,
    Strictness,
    SwitchControllerResponse,
    SwitchControllersCaller,
    SwitchDetectionCaller,
    TargetType,
)


class RecordingClient:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(
            request.__class__(**vars(request)) if hasattr(request, "__dict__") else request
        )
        return self.response


def test_empty_service_name_is_rejected():
    with pytest.raises(ValueError):
        ServiceCaller(lambda request: None, "")


def test_switch_request_defaults():
    caller = SwitchControllersCaller(RecordingClient(SwitchControllerResponse(ok=True)))
    assert caller.request.strictness == Strictness.BEST_EFFORT
    assert caller.request.start_asap is True
    assert caller.service_name == "/controller_manager/switch_controller"


def test_switch_call_stores_response():
    client = RecordingClient(SwitchControllerResponse(ok=True))
    caller = SwitchControllersCaller(client)
    assert caller.ok() is False
    caller.start_controllers(["a", "b"])
    caller.stop_controllers(["c"])
    caller.call_service()
    assert caller.wait(5.0)
    assert caller.ok() is True
    assert client.requests[0].start_controllers == ["a", "b"]
    assert client.requests[0].stop_controllers == ["c"]


def test_only_one_call_at_a_time():
    release = threading.Event()
    calls = []

    def blocking(request):
        calls.append(request)
        release.wait(5.0)
        return SwitchControllerResponse(ok=True)

    caller = SwitchControllersCaller(blocking)
    caller.call_service()
    assert caller.is_calling()
    assert caller.ok() is False
    caller.call_service()
    release.set()
    assert caller.wait(5.0)
    assert len(calls) == 1
    assert caller.ok() is True


def test_failed_call_keeps_previous_response():
    def failing(request):
        raise ConnectionError("down")

    caller = QueryCalibrationCaller(failing, "calib")
    caller.response = QueryCalibrationResponse(is_calibrated=True)
    caller.call_service()
    assert caller.wait(5.0)
    assert caller.is_calibrated() is True


def test_fail_limit_logs_error_once(caplog):
    caller = ServiceCaller(lambda request: None, "svc", 2)
    with caplog.at_level(logging.INFO, logger="rm_common.service_caller"):
        caller.call_service()
        caller.wait(5.0)
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors == []
        for _ in range(3):
            caller.call_service()
            caller.wait(5.0)
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    infos = [r for r in caplog.records if r.levelno == logging.INFO]
    assert len(errors) == 1
    assert len(infos) == 1


def test_query_calibration():
    client = RecordingClient(QueryCalibrationResponse(is_calibrated=True))
    caller = QueryCalibrationCaller(client, "/joint/calibration_state")
    assert caller.is_calibrated() is False
    caller.call_service()
    caller.wait(5.0)
    assert caller.is_calibrated() is True
    assert caller.service_name == "/joint/calibration_state"


def test_detection_sends_defaults_on_construction():
    client = RecordingClient(StatusChangeResponse(switch_is_success=True))
    caller = SwitchDetectionCaller(client)
    assert caller.wait(5.0)
    assert len(client.requests) == 1
    sent = client.requests[0]
    assert sent.target == TargetType.ARMOR
    assert sent.armor_target == ArmorTarget.ARMOR_ALL
    assert sent.exposure == ExposureLevel.EXPOSURE_LEVEL_0
    assert caller.is_switch() is True


def test_set_enemy_color():
    client = RecordingClient(StatusChangeResponse())
    caller = SwitchDetectionCaller(client)
    caller.wait(5.0)
    caller.set_enemy_color(1, "blue")
    caller.wait(5.0)
    assert caller.request.color == EnemyColor.RED
    caller.set_enemy_color(101, "red")
    caller.wait(5.0)
    assert caller.request.color == EnemyColor.BLUE
    assert len(client.requests) == 3
    caller.set_enemy_color(0, "blue")
    caller.wait(5.0)
    assert caller.request.color == EnemyColor.BLUE
    assert len(client.requests) == 3


def test_toggles():
    caller = SwitchDetectionCaller(RecordingClient(StatusChangeResponse()))
    caller.wait(5.0)
    caller.set_color(EnemyColor.RED)
    caller.switch_enemy_color()
    assert caller.request.color == EnemyColor.BLUE
    caller.switch_enemy_color()
    assert caller.request.color == EnemyColor.RED

    caller.switch_target_type()
    assert caller.request.target == TargetType.BUFF
    caller.switch_target_type()
    assert caller.request.target == TargetType.ARMOR
    caller.set_target_type(TargetType.BUFF)
    assert caller.request.target == TargetType.BUFF

    caller.switch_armor_target_type()
    assert caller.request.armor_target == ArmorTarget.ARMOR_WITHOUT_OUTPOST
    caller.switch_armor_target_type()
    assert caller.request.armor_target == ArmorTarget.ARMOR_ALL
    caller.set_armor_target_type(ArmorTarget.ARMOR_OUTPOST_BASE)
    assert caller.request.armor_target == ArmorTarget.ARMOR_OUTPOST_BASE


def test_exposure_cycles():
    caller = SwitchDetectionCaller(RecordingClient(StatusChangeResponse()))
    caller.wait(5.0)
    seen = []
    for _ in range(len(ExposureLevel)):
        caller.switch_exposure_level()
        seen.append(caller.request.exposure)
    assert seen[-1] == ExposureLevel.EXPOSURE_LEVEL_0
    assert sorted(seen) == sorted(ExposureLevel)