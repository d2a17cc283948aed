import pytest

from rm_common.heat_limit import HeatLimit, ShootHz
from rm_common.messages import GameRobotStatus, PowerHeatData, SpeedLimit


def make_params(shooter_type="ID1_17MM", **extra):
    params = {
        "low_shoot_frequency": 5.0,
        "high_shoot_frequency": 12.0,
        "burst_shoot_frequency": 20.0,
        "minimal_shoot_frequency": 2.0,
        "safe_shoot_frequency": 3.0,
        "heat_coeff": 3.0,
        "type": shooter_type,
    }
    params.update(extra)
    return params


def online_limit(shooter_type="ID1_17MM", limit=240, rate=40, heat=0, speed=15):
    heat_limit = HeatLimit(make_params(shooter_type))
    heat_limit.set_referee_status(True)
    heat_limit.set_status_of_shooter(
        GameRobotStatus(
            shooter_id_1_17_mm_cooling_limit=limit,
            shooter_id_1_17_mm_cooling_rate=rate,
            shooter_id_1_17_mm_speed_limit=speed,
            shooter_id_2_17_mm_cooling_limit=limit,
            shooter_id_2_17_mm_cooling_rate=rate,
            shooter_id_2_17_mm_speed_limit=speed,
            shooter_id_1_42_mm_cooling_limit=limit,
            shooter_id_1_42_mm_cooling_rate=rate,
            shooter_id_1_42_mm_speed_limit=speed,
        )
    )
    heat_limit.set_cooling_heat_of_shooter(
        PowerHeatData(
            shooter_id_1_17_mm_cooling_heat=heat,
            shooter_id_2_17_mm_cooling_heat=heat,
            shooter_id_1_42_mm_cooling_heat=heat,
        )
    )
    return heat_limit


@pytest.mark.parametrize("missing", ["low_shoot_frequency", "heat_coeff", "type"])
def test_missing_parameter_raises(missing):
    params = make_params()
    del params[missing]
    with pytest.raises(KeyError):
        HeatLimit(params)


def test_safe_speed_limit_used_before_referee_data():
    heat_limit = HeatLimit(make_params(safe_speed_limit=30))
    assert heat_limit.speed_limit() is SpeedLimit.SPEED_30M_PER_SECOND


@pytest.mark.parametrize(
    "shooter_type, speed, expected",
    [
        ("ID1_17MM", 18, SpeedLimit.SPEED_18M_PER_SECOND),
        ("ID2_17MM", 30, SpeedLimit.SPEED_30M_PER_SECOND),
        ("ID1_17MM", 25, SpeedLimit.SPEED_15M_PER_SECOND),
        ("ID1_42MM", 16, SpeedLimit.SPEED_16M_PER_SECOND),
        ("ID1_42MM", 12, SpeedLimit.SPEED_10M_PER_SECOND),
    ],
)
def test_speed_limit_mapping(shooter_type, speed, expected):
    assert online_limit(shooter_type, speed=speed).speed_limit() is expected


def test_unknown_type_speed_limit_raises():
    with pytest.raises(ValueError):
        HeatLimit(make_params("ID9_99MM")).speed_limit()


def test_offline_referee_uses_safe_frequency():
    params = make_params()
    heat_limit = HeatLimit(params)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == params["safe_shoot_frequency"]


def test_burst_ignores_referee_and_heat():
    params = make_params()
    heat_limit = HeatLimit(params)
    heat_limit.set_shoot_frequency(ShootHz.BURST)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == params["burst_shoot_frequency"]


def test_plenty_of_heat_gives_mode_frequency():
    heat_limit = online_limit(heat=0)
    heat_limit.set_shoot_frequency(ShootHz.HIGH)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == make_params()["high_shoot_frequency"]


def test_unknown_mode_falls_back_to_safe_frequency():
    heat_limit = online_limit(heat=0)
    heat_limit.set_shoot_frequency(7)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == make_params()["safe_shoot_frequency"]


def test_no_heat_left_stops_shooting():
    heat_limit = online_limit(limit=100, heat=95)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == 0.0


def test_exactly_one_bullet_left_uses_cooling_rate():
    heat_limit = online_limit(limit=100, rate=40, heat=90)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == pytest.approx(40 / 10.0)


def test_large_bullet_heat_for_42mm():
    heat_limit = online_limit("ID1_42MM", limit=200, heat=150)
    heat_limit.speed_limit()
    assert heat_limit.shoot_frequency() == 0.0


def test_interpolated_region_lies_between_bounds():
    heat_limit = online_limit(limit=100, rate=40, heat=80)
    heat_limit.set_shoot_frequency(ShootHz.HIGH)
    heat_limit.speed_limit()
    value = heat_limit.shoot_frequency()
    assert 40 / 10.0 < value < make_params()["high_shoot_frequency"]


def test_frequency_does_not_increase_with_heat():
    values = []
    for heat in range(0, 100, 5):
        heat_limit = online_limit(limit=100, rate=40, heat=heat)
        heat_limit.set_shoot_frequency(ShootHz.HIGH)
        heat_limit.speed_limit()
        values.append(heat_limit.shoot_frequency())
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_cooling_getters_follow_shooter_type():
    heat_limit = HeatLimit(make_params("ID2_17MM"))
    heat_limit.set_status_of_shooter(
        GameRobotStatus(shooter_id_1_17_mm_cooling_limit=50, shooter_id_2_17_mm_cooling_limit=240)
    )
    heat_limit.set_cooling_heat_of_shooter(
        PowerHeatData(shooter_id_1_17_mm_cooling_heat=7, shooter_id_2_17_mm_cooling_heat=33)
    )
    assert heat_limit.cooling_limit() == 240
    assert heat_limit.cooling_heat() == 33


def test_shoot_frequency_mode_round_trip():
    heat_limit = HeatLimit(make_params())
    assert heat_limit.shoot_frequency_mode() == ShootHz.LOW
    heat_limit.set_shoot_frequency(ShootHz.MINIMAL)
    assert heat_limit.shoot_frequency_mode() == ShootHz.MINIMAL