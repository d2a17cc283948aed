"""Shooting frequency and muzzle speed limits derived from barrel heat."""

import enum
from collections.abc import Mapping
from typing import Any

from rm_common.messages import GameRobotStatus, PowerHeatData, SpeedLimit
from rm_common.params import as_float

__all__ = ["ShootHz", "HeatLimit"]


class ShootHz(enum.IntEnum):
    LOW = 0
    HIGH = 1
    BURST = 2
    MINIMAL = 3


_FREQUENCY_PARAMS = {
    "low_shoot_frequency": "Low shoot frequency",
    "high_shoot_frequency": "High shoot frequency",
    "burst_shoot_frequency": "Burst shoot frequency",
    "minimal_shoot_frequency": "Minimal shoot frequency",
    "safe_shoot_frequency": "Safe shoot frequency",
    "heat_coeff": "Heat coeff",
}

_SPEEDS_17MM = {
    15: SpeedLimit.SPEED_15M_PER_SECOND,
    18: SpeedLimit.SPEED_18M_PER_SECOND,
    30: SpeedLimit.SPEED_30M_PER_SECOND,
}
_SPEEDS_42MM = {
    10: SpeedLimit.SPEED_10M_PER_SECOND,
    16: SpeedLimit.SPEED_16M_PER_SECOND,
}


class HeatLimit:
    """Limits one shooter so that its barrel heat stays below the referee's cooling limit."""

    def __init__(self, params: Mapping[str, Any]) -> None:
        values = {}
        for key, label in _FREQUENCY_PARAMS.items():
            if key not in params:
                raise KeyError(f"{label} no defined ({key})")
            values[key] = as_float(params[key])
        if "type" not in params:
            raise KeyError("Shooter type no defined (type)")
        self._type = str(params["type"])
        self._low = values["low_shoot_frequency"]
        self._high = values["high_shoot_frequency"]
        self._burst = values["burst_shoot_frequency"]
        self._minimal = values["minimal_shoot_frequency"]
        self._safe = values["safe_shoot_frequency"]
        self._heat_coeff = values["heat_coeff"]
        self._speed_limit = int(params.get("safe_speed_limit", 15))
        self._bullet_heat = 100.0 if self._type == "ID1_42MM" else 10.0
        self._state = int(ShootHz.LOW)
        self._shoot_frequency = 0.0
        self._referee_online = False
        self._cooling_limit = 0
        self._cooling_rate = 0
        self._cooling_heat = 0

    def set_status_of_shooter(self, data: GameRobotStatus) -> None:
        if self._type == "ID1_17MM":
            self._cooling_limit = data.shooter_id_1_17_mm_cooling_limit
            self._cooling_rate = data.shooter_id_1_17_mm_cooling_rate
            self._speed_limit = data.shooter_id_1_17_mm_speed_limit
        elif self._type == "ID2_17MM":
            self._cooling_limit = data.shooter_id_2_17_mm_cooling_limit
            self._cooling_rate = data.shooter_id_2_17_mm_cooling_rate
            self._speed_limit = data.shooter_id_2_17_mm_speed_limit
        elif self._type == "ID1_42MM":
            self._cooling_limit = data.shooter_id_1_42_mm_cooling_limit
            self._cooling_rate = data.shooter_id_1_42_mm_cooling_rate
            self._speed_limit = data.shooter_id_1_42_mm_speed_limit

    def set_cooling_heat_of_shooter(self, data: PowerHeatData) -> None:
        if self._type == "ID1_17MM":
            self._cooling_heat = data.shooter_id_1_17_mm_cooling_heat
        elif self._type == "ID2_17MM":
            self._cooling_heat = data.shooter_id_2_17_mm_cooling_heat
        elif self._type == "ID1_42MM":
            self._cooling_heat = data.shooter_id_1_42_mm_cooling_heat

    def set_referee_status(self, status: bool) -> None:
        self._referee_online = bool(status)

    def shoot_frequency(self) -> float:
        """Allowed shooting frequency given the remaining heat budget."""
        if self._state == ShootHz.BURST:
            return self._shoot_frequency
        if not self._referee_online:
            return self._safe
        remaining = self._cooling_limit - self._cooling_heat
        recover = self._cooling_rate / self._bullet_heat
        if remaining < self._bullet_heat:
            return 0.0
        if remaining == self._bullet_heat:
            return recover
        if remaining <= self._bullet_heat * self._heat_coeff:
            return remaining / (self._bullet_heat * self._heat_coeff) * (self._shoot_frequency - recover) + recover
        return self._shoot_frequency

    def speed_limit(self) -> SpeedLimit:
        """Muzzle speed class; also refreshes the expected frequency for the current mode."""
        self._update_expect_shoot_frequency()
        if self._type in ("ID1_17MM", "ID2_17MM"):
            return _SPEEDS_17MM.get(self._speed_limit, SpeedLimit.SPEED_15M_PER_SECOND)
        if self._type == "ID1_42MM":
            return _SPEEDS_42MM.get(self._speed_limit, SpeedLimit.SPEED_10M_PER_SECOND)
        raise ValueError(f"unknown shooter type {self._type!r}")

    def cooling_limit(self) -> int:
        return self._cooling_limit

    def cooling_heat(self) -> int:
        return self._cooling_heat

    def set_shoot_frequency(self, mode: int) -> None:
        self._state = int(mode)

    def shoot_frequency_mode(self) -> int:
        return self._state

    def _update_expect_shoot_frequency(self) -> None:
        by_mode = {
            ShootHz.BURST: self._burst,
            ShootHz.LOW: self._low,
            ShootHz.HIGH: self._high,
            ShootHz.MINIMAL: self._minimal,
        }
        self._shoot_frequency = by_mode.get(self._state, self._safe)