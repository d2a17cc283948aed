from collections import defaultdict

import pytest

from rm_common.handles import HandleRegistry, TofRadarHandle
from rm_common.tof_radar_controller import TofRadarController, TofRadarData


def setup():
    registry = HandleRegistry()
    front = TofRadarHandle("front", 250.0, 7.0)
    back = TofRadarHandle("back", 0.0, 0.0)
    registry.register_handle(front)
    registry.register_handle(back)
    topics = defaultdict(list)
    created = []

    def make_publisher(topic):
        created.append(topic)
        return topics[topic].append

    controller = TofRadarController(registry, make_publisher)
    return controller, front, topics, created


def test_publishers_created_per_radar_in_order():
    _, _, _, created = setup()
    assert created == ["back/data", "front/data"]


def test_update_converts_centimetres_to_metres():
    controller, _, topics, _ = setup()
    controller.update(1.25)
    assert topics["front/data"] == [TofRadarData(distance=2.5, strength=7.0, stamp=1.25)]
    assert topics["back/data"][0].distance == 0.0


def test_update_follows_handle_changes():
    controller, front, topics, _ = setup()
    controller.update(1.0)
    front.distance = 100.0
    front.strength = 3.0
    controller.update(2.0)
    latest = topics["front/data"][-1]
    assert latest.distance == pytest.approx(1.0)
    assert (latest.strength, latest.stamp) == (3.0, 2.0)
    assert len(topics["front/data"]) == 2


def test_empty_registry_publishes_nothing():
    sent = []
    controller = TofRadarController(HandleRegistry(), lambda topic: sent.append)
    controller.update(0.0)
    assert sent == []