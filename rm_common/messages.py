"""Message types exchanged between the decision layer and the controllers."""

import enum
from dataclasses import dataclass, field

__all__ = [
    "ShootMode",
    "SpeedLimit",
    "RobotId",
    "GameRobotStatus",
    "PowerHeatData",
    "CapacityData",
    "Vector3",
    "Twist",
    "ChassisCmd",
    "GimbalCmd",
    "ShootCmd",
    "MultiDofCmd",
]


class ShootMode(enum.IntEnum):
    """Operating mode of a shooter."""

    STOP = 0
    READY = 1
    PUSH = 2


class SpeedLimit(enum.IntEnum):
    """Muzzle speed classes a shooter can be limited to."""

    SPEED_10M_PER_SECOND = 0
    SPEED_15M_PER_SECOND = 1
    SPEED_16M_PER_SECOND = 2
    SPEED_18M_PER_SECOND = 3
    SPEED_30M_PER_SECOND = 4


class RobotId(enum.IntEnum):
    """Robot identifiers that the limits treat specially."""

    RED_ENGINEER = 2
    BLUE_ENGINEER = 102


@dataclass
class GameRobotStatus:
    """Robot status reported by the referee system."""

    robot_id: int = 0
    chassis_power_limit: int = 0
    shooter_id_1_17_mm_cooling_limit: int = 0
    shooter_id_1_17_mm_cooling_rate: int = 0
    shooter_id_1_17_mm_speed_limit: int = 0
    shooter_id_2_17_mm_cooling_limit: int = 0
    shooter_id_2_17_mm_cooling_rate: int = 0
    shooter_id_2_17_mm_speed_limit: int = 0
    shooter_id_1_42_mm_cooling_limit: int = 0
    shooter_id_1_42_mm_cooling_rate: int = 0
    shooter_id_1_42_mm_speed_limit: int = 0


@dataclass
class PowerHeatData:
    """Chassis power buffer and shooter heat reported by the referee system."""

    chassis_power_buffer: int = 0
    shooter_id_1_17_mm_cooling_heat: int = 0
    shooter_id_2_17_mm_cooling_heat: int = 0
    shooter_id_1_42_mm_cooling_heat: int = 0


@dataclass
class CapacityData:
    """Sample of the super-capacitor power manager."""

    stamp: float = 0.0
    capacity_remain_charge: float = 0.0
    state_machine_running_state: int = 0


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Twist:
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)


@dataclass
class ChassisCmd:
    mode: int = 0
    accel: Twist = field(default_factory=Twist)
    power_limit: float = 0.0
    stamp: float = 0.0


@dataclass
class GimbalCmd:
    mode: int = 0
    rate_yaw: float = 0.0
    rate_pitch: float = 0.0
    bullet_speed: float = 0.0
    target_pos: Vector3 = field(default_factory=Vector3)
    stamp: float = 0.0


@dataclass
class ShootCmd:
    mode: int = ShootMode.STOP
    speed: int = SpeedLimit.SPEED_10M_PER_SECOND
    wheel_speed: float = 0.0
    hz: float = 0.0
    stamp: float = 0.0


@dataclass
class MultiDofCmd:
    mode: int = 0
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)
    stamp: float = 0.0