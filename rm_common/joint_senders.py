"""Command senders for single joints, cameras, multi-DOF groups and double-barrel shooters."""

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rm_common.command_sender import CommandSender, DataMsg, Publish, ShooterCommandSender
from rm_common.messages import GameRobotStatus, MultiDofCmd, PowerHeatData, ShootMode
from rm_common.params import as_float

__all__ = [
    "JointState",
    "JointPositionBinaryCommandSender",
    "CardCommandSender",
    "JointJogCommandSender",
    "JointPointCommandSender",
    "CameraSwitchCommandSender",
    "MultiDofCommandSender",
    "DoubleBarrelCommandSender",
]

_log = logging.getLogger(__name__)


@dataclass
class JointState:
    """Names and positions of the robot's joints."""

    name: list[str] = field(default_factory=list)
    position: list[float] = field(default_factory=list)


def _required(params: Mapping[str, Any], key: str) -> Any:
    if key not in params:
        raise KeyError(f"parameter {key!r} no defined")
    return params[key]


class JointPositionBinaryCommandSender(CommandSender):
    """Moves a joint between an "on" and an "off" position."""

    message_type = DataMsg

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._on_pos = as_float(_required(params, "on_pos"))
        self._off_pos = as_float(_required(params, "off_pos"))
        self.state = False

    def on(self) -> None:
        self.msg.data = self._on_pos
        self.state = True

    def off(self) -> None:
        self.msg.data = self._off_pos
        self.state = False

    def set_zero(self) -> None:
        pass


class CardCommandSender(CommandSender):
    """Moves a card joint to a long, short or retracted position."""

    message_type = DataMsg

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._long_pos = as_float(_required(params, "long_pos"))
        self._short_pos = as_float(_required(params, "short_pos"))
        self._off_pos = as_float(_required(params, "off_pos"))
        self.state = False

    def long_on(self) -> None:
        self.msg.data = self._long_pos
        self.state = True

    def short_on(self) -> None:
        self.msg.data = self._short_pos
        self.state = True

    def off(self) -> None:
        self.msg.data = self._off_pos
        self.state = False

    def set_zero(self) -> None:
        pass


def _joint_index(joint_state: JointState, joint: str) -> int:
    try:
        return joint_state.name.index(joint)
    except ValueError:
        raise ValueError(f"Can not find joint {joint}") from None


class JointJogCommandSender(CommandSender):
    """Jogs a joint in fixed steps starting from its measured position."""

    message_type = DataMsg

    def __init__(self, params: Mapping[str, Any], publish: Publish, joint_state: JointState) -> None:
        super().__init__(params, publish)
        self.joint = str(_required(params, "joint"))
        self._step = as_float(_required(params, "step"))
        self._joint_state = joint_state

    def reset(self) -> None:
        """Start from the joint's measured position, or NaN if it is not reported."""
        try:
            index = _joint_index(self._joint_state, self.joint)
        except ValueError:
            self.msg.data = math.nan
        else:
            self.msg.data = self._joint_state.position[index]

    def plus(self) -> None:
        self.msg.data += self._step
        self.send_command(0.0)

    def minus(self) -> None:
        self.msg.data -= self._step
        self.send_command(0.0)

    def set_zero(self) -> None:
        pass


class JointPointCommandSender(CommandSender):
    """Sends a position set point to one joint."""

    message_type = DataMsg

    def __init__(self, params: Mapping[str, Any], publish: Publish, joint_state: JointState) -> None:
        super().__init__(params, publish)
        self.joint = str(_required(params, "joint"))
        self._joint_state = joint_state

    def set_point(self, point: float) -> None:
        self.msg.data = point

    def index(self) -> int:
        """Position of the joint in the joint state; raises ValueError if it is absent."""
        return _joint_index(self._joint_state, self.joint)

    def set_zero(self) -> None:
        pass


class CameraSwitchCommandSender(CommandSender):
    """Selects which of two cameras is streamed."""

    message_type = DataMsg

    def __init__(self, params: Mapping[str, Any], publish: Publish) -> None:
        super().__init__(params, publish)
        self._camera1 = str(_required(params, "camera1_name"))
        self._camera2 = str(_required(params, "camera2_name"))
        self.msg.data = self._camera1

    def switch_camera(self) -> None:
        self.msg.data = self._camera2 if self.msg.data == self._camera1 else self._camera1

    def set_zero(self) -> None:
        pass


class MultiDofCommandSender(CommandSender):
    """Six-value command for a multi-degree-of-freedom mechanism."""

    message_type = MultiDofCmd

    @property
    def mode(self) -> int:
        return self.msg.mode

    def set_group_value(
        self,
        linear_x: float,
        linear_y: float,
        linear_z: float,
        angular_x: float,
        angular_y: float,
        angular_z: float,
    ) -> None:
        self.msg.linear.x = linear_x
        self.msg.linear.y = linear_y
        self.msg.linear.z = linear_z
        self.msg.angular.x = angular_x
        self.msg.angular.y = angular_y
        self.msg.angular.z = angular_z

    def set_zero(self) -> None:
        self.set_group_value(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


class DoubleBarrelCommandSender:
    """Two shooters sharing one feed, switched by a barrel joint when one overheats.

    ``params`` holds ``shooter_ID1``, ``shooter_ID2`` and ``barrel`` sections;
    ``make_publisher`` maps a topic name to a publish callable; ``clock`` returns
    the current time in seconds.
    """

    def __init__(
        self,
        params: Mapping[str, Any],
        make_publisher: Callable[[str], Publish],
        clock: Callable[[], float],
    ) -> None:
        self._clock = clock
        self._joint_state = JointState()

        def sender_publisher(section: Mapping[str, Any]) -> Publish:
            return make_publisher(str(_required(section, "topic")))

        id1_params = _required(params, "shooter_ID1")
        id2_params = _required(params, "shooter_ID2")
        barrel_params = _required(params, "barrel")
        self.shooter_id1 = ShooterCommandSender(id1_params, sender_publisher(id1_params))
        self.shooter_id2 = ShooterCommandSender(id2_params, sender_publisher(id2_params))
        self.barrel = JointPointCommandSender(
            barrel_params, sender_publisher(barrel_params), self._joint_state
        )

        self._is_double_barrel = bool(barrel_params.get("is_double_barrel", False))
        self._id1_point = as_float(barrel_params.get("id1_point", 0.0))
        self._id2_point = as_float(barrel_params.get("id2_point", 0.0))
        self._frequency_threshold = as_float(barrel_params.get("frequency_threshold", 0.0))
        self._check_launch_threshold = as_float(barrel_params.get("check_launch_threshold", 0.0))
        self._check_switch_threshold = as_float(barrel_params.get("check_switch_threshold", 0.0))
        self._ready_duration = as_float(barrel_params.get("ready_duration", 0.0))
        self._switching_duration = as_float(barrel_params.get("switching_duration", 0.0))

        self._need_switch = False
        self._is_switching = False
        self._last_switch_time = 0.0
        self._last_push_time = 0.0
        self._trigger_error = 0.0
        self._cooling_limit_warned = False

    @property
    def shooters(self) -> tuple[ShooterCommandSender, ShooterCommandSender]:
        return self.shooter_id1, self.shooter_id2

    def on_joint_state(self, joint_state: JointState) -> None:
        """Record the latest joint state."""
        self._joint_state.name = list(joint_state.name)
        self._joint_state.position = list(joint_state.position)

    def on_trigger_error(self, error: float) -> None:
        """Record the latest trigger position error."""
        self._trigger_error = error

    def update_game_robot_status(self, data: GameRobotStatus) -> None:
        for shooter in self.shooters:
            shooter.update_game_robot_status(data)

    def update_power_heat_data(self, data: PowerHeatData) -> None:
        for shooter in self.shooters:
            shooter.heat_limit.set_cooling_heat_of_shooter(data)

    def update_referee_status(self, status: bool) -> None:
        for shooter in self.shooters:
            shooter.update_referee_status(status)

    def update_gimbal_des_error(self, error: float, stamp: float) -> None:
        for shooter in self.shooters:
            shooter.update_gimbal_des_error(error, stamp)

    def update_track_accel(self, accel: float) -> None:
        for shooter in self.shooters:
            shooter.update_track_accel(accel)

    def update_suggest_fire(self, suggest: bool) -> None:
        for shooter in self.shooters:
            shooter.update_suggest_fire(suggest)

    def set_armor_type(self, armor_type: int) -> None:
        for shooter in self.shooters:
            shooter.set_armor_type(armor_type)

    def set_mode(self, mode: int) -> None:
        self._active().set_mode(mode)

    def set_zero(self) -> None:
        self._active().set_zero()

    def check_error(self, time: float) -> None:
        self._active().check_error(time)

    def send_command(self, time: float) -> None:
        if self._check_switch():
            self._need_switch = True
        if self._need_switch:
            self._switch_barrel()
        self._check_launch()
        active = self._active()
        if active.msg.mode == ShootMode.PUSH:
            self._last_push_time = time
        active.send_command(time)

    def init(self) -> None:
        """Select the first barrel and stop both shooters."""
        time = self._clock()
        self.barrel.set_point(self._id1_point)
        self.shooter_id1.set_mode(ShootMode.STOP)
        self.shooter_id2.set_mode(ShootMode.STOP)
        self.barrel.send_command(time)
        self.shooter_id1.send_command(time)
        self.shooter_id2.send_command(time)

    def set_shoot_frequency(self, mode: int) -> None:
        self._active().set_shoot_frequency(mode)

    def shoot_frequency_mode(self) -> int:
        return self._active().shoot_frequency_mode()

    def speed(self) -> float:
        return self._active().speed()

    def _active(self) -> ShooterCommandSender:
        return self.shooter_id1 if self.barrel.msg.data == self._id1_point else self.shooter_id2

    def _switch_barrel(self) -> None:
        time = self._clock()
        time_to_switch = math.fmod(abs(self._trigger_error), 2.0 * math.pi) < self._check_switch_threshold
        self.set_mode(ShootMode.READY)
        if time_to_switch or time - self._last_push_time > self._ready_duration:
            if self.barrel.msg.data == self._id2_point:
                self.barrel.set_point(self._id1_point)
            else:
                self.barrel.set_point(self._id2_point)
            self.barrel.send_command(time)
            self._last_switch_time = time
            self._need_switch = False
            self._is_switching = True

    def _barrel_in_place(self) -> bool:
        try:
            index = self.barrel.index()
        except ValueError:
            return False
        return abs(self._joint_state.position[index] - self.barrel.msg.data) < self._check_launch_threshold

    def _check_launch(self) -> None:
        time = self._clock()
        if not self._is_switching:
            return
        self.set_mode(ShootMode.READY)
        if time - self._last_switch_time > self._switching_duration or self._barrel_in_place():
            self._is_switching = False

    def _check_switch(self) -> bool:
        if not self._is_double_barrel:
            return False
        limit1 = self.shooter_id1.heat_limit
        limit2 = self.shooter_id2.heat_limit
        if limit1.cooling_limit() == 0 or limit2.cooling_limit() == 0:
            if not self._cooling_limit_warned:
                self._cooling_limit_warned = True
                _log.warning("Can not get cooling limit")
            return False
        threshold = self._frequency_threshold
        freq1 = limit1.shoot_frequency()
        freq2 = limit2.shoot_frequency()
        if freq1 >= threshold and freq2 >= threshold:
            return False
        if self._active() is self.shooter_id1:
            return freq1 < threshold and freq2 > threshold
        return freq2 < threshold and freq1 > threshold