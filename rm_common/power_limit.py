"""Chassis power limit selection from referee and super-capacitor data."""

import enum
import logging
from collections.abc import Mapping
from typing import Any

from rm_common.messages import CapacityData, ChassisCmd, GameRobotStatus, PowerHeatData, RobotId
from rm_common.params import as_float

__all__ = ["PowerMode", "PowerLimit"]

_log = logging.getLogger(__name__)

_ENGINEER_POWER = 400.0
_CAPACITY_TIMEOUT = 0.3

_REQUIRED = {
    "safety_power": "Safety power",
    "capacitor_threshold": "Capacitor threshold",
    "charge_power": "Charge power",
    "extra_power": "Extra power",
    "burst_power": "Burst power",
    "power_gain": "power gain",
    "buffer_threshold": "buffer threshold",
}


class PowerMode(enum.IntEnum):
    CHARGE = 0
    BURST = 1
    NORMAL = 2
    ALLOFF = 3
    TEST = 4


class PowerLimit:
    """Chooses the chassis power limit for the current referee and capacitor state."""

    def __init__(self, params: Mapping[str, Any]) -> None:
        values = {}
        for key, label in _REQUIRED.items():
            if key not in params:
                raise KeyError(f"{label} no defined ({key})")
            values[key] = as_float(params[key])
        self._safety_power = values["safety_power"]
        self._capacitor_threshold = values["capacitor_threshold"]
        self._charge_power = values["charge_power"]
        self._extra_power = values["extra_power"]
        self._burst_power = values["burst_power"]
        self._power_gain = values["power_gain"]
        self._buffer_threshold = values["buffer_threshold"]
        self._chassis_power_buffer = 0
        self._robot_id = 0
        self._chassis_power_limit = 0
        self._cap_energy = 0.0
        self._expect_state = 0
        self._cap_state = 0
        self._referee_online = False
        self._capacity_online = False

    def update_safety_power(self, safety_power: int) -> None:
        if safety_power > 0:
            self._safety_power = float(safety_power)
        _log.info("update safety power: %d", safety_power)

    def update_state(self, state: int) -> None:
        self._expect_state = int(state)

    def set_game_robot_data(self, data: GameRobotStatus) -> None:
        self._robot_id = data.robot_id
        self._chassis_power_limit = data.chassis_power_limit

    def set_chassis_power_buffer(self, data: PowerHeatData) -> None:
        self._chassis_power_buffer = data.chassis_power_buffer

    def set_capacity_data(self, data: CapacityData, now: float) -> None:
        """Record a capacitor sample; it counts as online if younger than 0.3 s at ``now``."""
        self._capacity_online = now - data.stamp < _CAPACITY_TIMEOUT
        self._cap_energy = data.capacity_remain_charge
        self._cap_state = data.state_machine_running_state

    def set_referee_status(self, status: bool) -> None:
        self._referee_online = bool(status)

    def state(self) -> int:
        return self._expect_state

    def set_limit_power(self, chassis_cmd: ChassisCmd, is_gyro: bool) -> float:
        """Write the power limit into ``chassis_cmd`` and return it."""
        if self._robot_id in (RobotId.BLUE_ENGINEER, RobotId.RED_ENGINEER):
            chassis_cmd.power_limit = _ENGINEER_POWER
        elif not self._referee_online:
            chassis_cmd.power_limit = self._safety_power
        elif not self._capacity_online:
            self._normal(chassis_cmd)
        elif self._chassis_power_limit > self._burst_power:
            chassis_cmd.power_limit = self._burst_power
        elif self._cap_state == PowerMode.NORMAL:
            self._normal(chassis_cmd)
        elif self._cap_state == PowerMode.BURST:
            self._burst(chassis_cmd, is_gyro)
        elif self._cap_state == PowerMode.CHARGE:
            chassis_cmd.power_limit = self._chassis_power_limit * 0.70
        else:
            chassis_cmd.power_limit = 0.0
        return chassis_cmd.power_limit

    def _normal(self, chassis_cmd: ChassisCmd) -> None:
        buffer_energy_error = self._chassis_power_buffer - self._buffer_threshold
        chassis_cmd.power_limit = self._chassis_power_limit + buffer_energy_error * self._power_gain

    def _burst(self, chassis_cmd: ChassisCmd, is_gyro: bool) -> None:
        if self._cap_energy > self._capacitor_threshold:
            if is_gyro:
                chassis_cmd.power_limit = self._chassis_power_limit + self._extra_power
            else:
                chassis_cmd.power_limit = self._burst_power
        else:
            self._expect_state = PowerMode.NORMAL