"""Command senders that turn operator input into controller command messages."""

import abc
import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from rm_common.heat_limit import HeatLimit
from rm_common.linear_interpolation import LinearInterp
from rm_common.messages import (
    CapacityData,
    ChassisCmd,
    GameRobotStatus,
    GimbalCmd,
    PowerHeatData,
    ShootCmd,
    ShootMode,
    SpeedLimit,
    Twist,
    Vector3,
)
from rm_common.params import as_float
from rm_common.power_limit import PowerLimit
from rm_common.service_caller import ArmorTarget

__all__ = [
    "DataMsg",
    "TwistStamped",
    "CommandSender",
    "Vel2DCommandSender",
    "ChassisCommandSender",
    "GimbalCommandSender",
    "ShooterCommandSender",
    "BalanceCommandSender",
    "Vel3DCommandSender",
]

_log = logging.getLogger(__name__)

_GIMBAL_ERROR_TIMEOUT = 0.1

Publish = Callable[[Any], None]


@dataclass
class DataMsg:
    """A message carrying a single value."""

    data: Any = 0


@dataclass
class TwistStamped:
    twist: Twist = field(default_factory=Twist)
    stamp: float = 0.0


def _required_float(params: Mapping[str, Any], key: str, label: str) -> float:
    if key not in params:
        raise KeyError(f"{label} no defined ({key})")
    return as_float(params[key])


def _required_interp(params: Mapping[str, Any], key: str, label: str) -> LinearInterp:
    if key not in params:
        raise KeyError(f"{label} no defined ({key})")
    return LinearInterp(params[key])


class CommandSender(abc.ABC):
    """Holds one command message and publishes a snapshot of it on request.

    ``params`` must name the ``topic``; ``publish`` receives each sent message.
    """

    message_type: ClassVar[Callable[[], Any]]

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        if "topic" not in params:
            raise KeyError("Topic name no defined (topic)")
        self.topic = str(params["topic"])
        self.queue_size = int(params.get("queue_size", 1))
        self._publish = publish
        self.msg = self.message_type()

    def set_mode(self, mode: int) -> None:
        """Set the command mode; messages without a mode ignore it."""
        if hasattr(self.msg, "mode"):
            self.msg.mode = mode

    def send_command(self, time: float) -> None:
        """Stamp the message (when it carries a stamp) and publish a copy of it."""
        if hasattr(self.msg, "stamp"):
            self.msg.stamp = time
        self._publish(copy.deepcopy(self.msg))

    def update_game_robot_status(self, data: GameRobotStatus) -> None:
        pass

    def update_power_heat_data(self, data: PowerHeatData) -> None:
        pass

    def update_capacity_data(self, data: CapacityData, now: float) -> None:
        pass

    @abc.abstractmethod
    def set_zero(self) -> None:
        """Reset the command to a safe resting value."""


class Vel2DCommandSender(CommandSender):
    """Planar chassis velocity whose maxima depend on the chassis power limit."""

    message_type = Twist

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._max_linear_x = _required_interp(params, "max_linear_x", "Max X linear velocity")
        self._max_linear_y = _required_interp(params, "max_linear_y", "Max Y linear velocity")
        self._max_angular_z = _required_interp(params, "max_angular_z", "Max Z angular velocity")
        self._power_limit = 0.0

    def set_power_limit(self, power_limit: float) -> None:
        """Record the chassis power limit currently in force."""
        self._power_limit = power_limit

    def set_linear_x_vel(self, scale: float) -> None:
        self.msg.linear.x = scale * self._max_linear_x.output(self._power_limit)

    def set_linear_y_vel(self, scale: float) -> None:
        self.msg.linear.y = scale * self._max_linear_y.output(self._power_limit)

    def set_angular_z_vel(self, scale: float) -> None:
        self.msg.angular.z = scale * self._max_angular_z.output(self._power_limit)

    def set_2d_vel(self, scale_x: float, scale_y: float, scale_z: float) -> None:
        self.set_linear_x_vel(scale_x)
        self.set_linear_y_vel(scale_y)
        self.set_angular_z_vel(scale_z)

    def set_zero(self) -> None:
        self.msg.linear.x = 0.0
        self.msg.linear.y = 0.0
        self.msg.angular.z = 0.0


class ChassisCommandSender(CommandSender):
    """Chassis command with a power limit and power-dependent accelerations."""

    message_type = ChassisCmd

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self.power_limit = PowerLimit(params)
        self._accel_x = _required_interp(params, "accel_x", "Accel X")
        self._accel_y = _required_interp(params, "accel_y", "Accel Y")
        self._accel_z = _required_interp(params, "accel_z", "Accel Z")

    def update_safety_power(self, safety_power: int) -> None:
        self.power_limit.update_safety_power(safety_power)

    def update_game_robot_status(self, data: GameRobotStatus) -> None:
        self.power_limit.set_game_robot_data(data)

    def update_power_heat_data(self, data: PowerHeatData) -> None:
        self.power_limit.set_chassis_power_buffer(data)

    def update_capacity_data(self, data: CapacityData, now: float) -> None:
        self.power_limit.set_capacity_data(data, now)

    def update_referee_status(self, status: bool) -> None:
        self.power_limit.set_referee_status(status)

    def send_chassis_command(self, time: float, is_gyro: bool) -> None:
        """Fill in power limit and accelerations, then publish."""
        self.power_limit.set_limit_power(self.msg, is_gyro)
        self.msg.accel.linear.x = self._accel_x.output(self.msg.power_limit)
        self.msg.accel.linear.y = self._accel_y.output(self.msg.power_limit)
        self.msg.accel.angular.z = self._accel_z.output(self.msg.power_limit)
        self.send_command(time)

    def set_zero(self) -> None:
        pass


class GimbalCommandSender(CommandSender):
    """Gimbal rate command, scaled down while ejecting."""

    message_type = GimbalCmd

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._max_yaw_vel = _required_float(params, "max_yaw_vel", "Max yaw velocity")
        self._max_pitch_vel = _required_float(params, "max_pitch_vel", "Max pitch velocity")
        self.track_timeout = _required_float(params, "track_timeout", "Track timeout")
        self._eject_sensitivity = as_float(params.get("eject_sensitivity", 1.0))
        self._eject = False

    def set_rate(self, scale_yaw: float, scale_pitch: float) -> None:
        """Set yaw and pitch rates from scales clamped to [-1, 1]."""
        if abs(scale_yaw) > 1:
            scale_yaw = 1.0 if scale_yaw > 0 else -1.0
        if abs(scale_pitch) > 1:
            scale_pitch = 1.0 if scale_pitch > 0 else -1.0
        self.msg.rate_yaw = scale_yaw * self._max_yaw_vel
        self.msg.rate_pitch = scale_pitch * self._max_pitch_vel
        if self._eject:
            self.msg.rate_yaw *= self._eject_sensitivity
            self.msg.rate_pitch *= self._eject_sensitivity

    def set_zero(self) -> None:
        self.msg.rate_yaw = 0.0
        self.msg.rate_pitch = 0.0

    def set_bullet_speed(self, bullet_speed: float) -> None:
        self.msg.bullet_speed = bullet_speed

    def set_eject(self, flag: bool) -> None:
        self._eject = bool(flag)

    @property
    def eject(self) -> bool:
        return self._eject

    def set_point(self, point: Vector3) -> None:
        self.msg.target_pos = point


class ShooterCommandSender(CommandSender):
    """Shooter command with heat-limited frequency and speed-dependent friction wheel speed.

    ``params["heat_limit"]`` configures the :class:`HeatLimit`.
    """

    message_type = ShootCmd

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self.heat_limit = HeatLimit(params.get("heat_limit", {}))
        self._speeds = {
            SpeedLimit.SPEED_10M_PER_SECOND: (
                as_float(params.get("speed_10m_per_speed", 10.0)),
                as_float(params.get("wheel_speed_10", 0.0)),
            ),
            SpeedLimit.SPEED_15M_PER_SECOND: (
                as_float(params.get("speed_15m_per_speed", 15.0)),
                as_float(params.get("wheel_speed_15", 0.0)),
            ),
            SpeedLimit.SPEED_16M_PER_SECOND: (
                as_float(params.get("speed_16m_per_speed", 16.0)),
                as_float(params.get("wheel_speed_16", 0.0)),
            ),
            SpeedLimit.SPEED_18M_PER_SECOND: (
                as_float(params.get("speed_18m_per_speed", 18.0)),
                as_float(params.get("wheel_speed_18", 0.0)),
            ),
            SpeedLimit.SPEED_30M_PER_SECOND: (
                as_float(params.get("speed_30m_per_speed", 30.0)),
                as_float(params.get("wheel_speed_30", 0.0)),
            ),
        }
        self._extra_wheel_speed_once = as_float(params.get("extra_wheel_speed_once", 0.0))
        self._gimbal_error_tolerance = _required_float(
            params, "gimbal_error_tolerance", "gimbal error tolerance"
        )
        if "target_acceleration_tolerance" in params:
            self._target_acceleration_tolerance = as_float(params["target_acceleration_tolerance"])
        else:
            _log.info("target_acceleration_tolerance no defined, set to zero.")
            self._target_acceleration_tolerance = 0.0
        self._speed_des = 0.0
        self._wheel_speed_des = 0.0
        self._total_extra_wheel_speed = 0.0
        self._gimbal_error = 0.0
        self._gimbal_error_stamp = 0.0
        self._track_accel = 0.0
        self._suggest_fire = False
        self._armor_type = 0

    def update_game_robot_status(self, data: GameRobotStatus) -> None:
        self.heat_limit.set_status_of_shooter(data)

    def update_power_heat_data(self, data: PowerHeatData) -> None:
        self.heat_limit.set_cooling_heat_of_shooter(data)

    def update_referee_status(self, status: bool) -> None:
        self.heat_limit.set_referee_status(status)

    def update_gimbal_des_error(self, error: float, stamp: float) -> None:
        self._gimbal_error = error
        self._gimbal_error_stamp = stamp

    def update_track_accel(self, accel: float) -> None:
        self._track_accel = accel

    def update_suggest_fire(self, suggest: bool) -> None:
        self._suggest_fire = bool(suggest)

    def check_error(self, time: float) -> None:
        """Hold fire (PUSH becomes READY) while aiming is off or firing is not advised."""
        gimbal_off = (
            self._gimbal_error > self._gimbal_error_tolerance
            and time - self._gimbal_error_stamp < _GIMBAL_ERROR_TIMEOUT
        )
        target_jerky = self._track_accel > self._target_acceleration_tolerance
        hold_outpost = not self._suggest_fire and self._armor_type == ArmorTarget.ARMOR_OUTPOST_BASE
        if (gimbal_off or target_jerky or hold_outpost) and self.msg.mode == ShootMode.PUSH:
            self.set_mode(ShootMode.READY)

    def send_command(self, time: float) -> None:
        self.msg.wheel_speed = self.wheel_speed_des()
        self.msg.hz = self.heat_limit.shoot_frequency()
        super().send_command(time)

    def _update_speed_des(self) -> None:
        self._speed_des, self._wheel_speed_des = self._speeds[self.heat_limit.speed_limit()]

    def speed(self) -> float:
        """Expected muzzle speed for the current speed limit."""
        self._update_speed_des()
        return self._speed_des

    def wheel_speed_des(self) -> float:
        """Friction wheel speed including the operator's accumulated adjustment."""
        self._update_speed_des()
        return self._wheel_speed_des + self._total_extra_wheel_speed

    def drop_speed(self) -> None:
        self._total_extra_wheel_speed -= self._extra_wheel_speed_once

    def raise_speed(self) -> None:
        self._total_extra_wheel_speed += self._extra_wheel_speed_once

    def set_armor_type(self, armor_type: int) -> None:
        self._armor_type = armor_type

    def set_shoot_frequency(self, mode: int) -> None:
        self.heat_limit.set_shoot_frequency(mode)

    def shoot_frequency_mode(self) -> int:
        return self.heat_limit.shoot_frequency_mode()

    def set_zero(self) -> None:
        pass


class BalanceCommandSender(CommandSender):
    """Balance mode of a self-balancing chassis."""

    message_type = DataMsg

    def set_balance_mode(self, mode: int) -> None:
        self.msg.data = mode

    def balance_mode(self) -> int:
        return self.msg.data

    def set_zero(self) -> None:
        pass


class Vel3DCommandSender(CommandSender):
    """Six-axis velocity command scaled by configured maxima."""

    message_type = TwistStamped

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._max_linear = Vector3(
            _required_float(params, "max_linear_x", "Max X linear velocity"),
            _required_float(params, "max_linear_y", "Max Y linear velocity"),
            _required_float(params, "max_linear_z", "Max Z linear velocity"),
        )
        self._max_angular = Vector3(
            _required_float(params, "max_angular_x", "Max X angular velocity"),
            _required_float(params, "max_angular_y", "Max Y angular velocity"),
            _required_float(params, "max_angular_z", "Max Z angular velocity"),
        )

    def set_linear_vel(self, scale_x: float, scale_y: float, scale_z: float) -> None:
        linear = self.msg.twist.linear
        linear.x = self._max_linear.x * scale_x
        linear.y = self._max_linear.y * scale_y
        linear.z = self._max_linear.z * scale_z

    def set_angular_vel(self, scale_x: float, scale_y: float, scale_z: float) -> None:
        angular = self.msg.twist.angular
        angular.x = self._max_angular.x * scale_x
        angular.y = self._max_angular.y * scale_y
        angular.z = self._max_angular.z * scale_z

    def set_zero(self) -> None:
        self.msg.twist = Twist()