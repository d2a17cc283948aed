"""Simple one-dimensional trajectory generators."""

import math

from rm_common.math_utilities import sgn

__all__ = ["RampTraj", "MinTimeTraj"]


class RampTraj:
    """Trapezoidal-velocity trajectory between two positions in a fixed time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._target = 0.0
        self._time_total = 0.0
        self._time_acc = 0.0
        self._time_start = 0.0
        self._acc = 0.0
        self._speed = 0.0
        self._a0 = self._b0 = self._c0 = 0.0
        self._a1 = self._b1 = self._c1 = 0.0

    def set_limit(self, max_acc: float) -> None:
        self._acc = max_acc

    def set_state(self, start: float, end: float, time_now: float) -> None:
        self._start = start
        self._target = end
        self._time_start = time_now

    def is_reach(self, t: float) -> bool:
        return t >= self._time_total + self._time_start

    def calc(self, t: float) -> bool:
        """Plan the trajectory to last ``t``; return False if the acceleration limit is too small."""
        distance = self._target - self._start
        if distance < 0:
            self._acc = -self._acc
        self._time_total = t
        if abs(self._acc) < abs(4.0 * distance) / (t * t):
            return False
        acc = self._acc
        total = self._time_total
        self._time_acc = total / 2.0 - math.sqrt(acc * acc * total * total - 4.0 * acc * distance) / abs(2.0 * acc)
        self._a0 = self._start
        self._b0 = 0.0
        self._c0 = 0.5 * acc
        self._a1 = self._target - (acc * total * total) / 2.0
        self._b1 = acc * total
        self._c1 = -0.5 * acc
        self._speed = self._b0 + 2.0 * self._c0 * self._time_acc
        return True

    def pos(self, t: float) -> float:
        t -= self._time_start
        if t < 0.0:
            return self._start
        if t > self._time_total:
            return self._target
        if t < self._time_acc:
            return self._a0 + self._b0 * t + self._c0 * t * t
        if t < self._time_total - self._time_acc:
            return self._speed * (t - self._time_acc) + self._a0 + self._c0 * self._time_acc * self._time_acc
        return self._a1 + self._b1 * t + self._c1 * t * t

    def vel(self, t: float) -> float:
        t -= self._time_start
        if t < 0.0 or t > self._time_total:
            return 0.0
        if t < self._time_acc:
            return self._b0 + 2.0 * self._c0 * t
        if t < self._time_total - self._time_acc:
            return self._speed
        return self._b1 + 2.0 * self._c1 * t

    def acc(self, t: float) -> float:
        t -= self._time_start
        if t < 0.0 or t > self._time_total:
            return 0.0
        if t < self._time_acc:
            return 2.0 * self._c0
        if t < self._time_total - self._time_acc:
            return 0.0
        return 2.0 * self._c1


class MinTimeTraj:
    """Bang-bang controller that drives an inertia to a target in minimum time."""

    def __init__(self) -> None:
        self._target = 0.0
        self._inertia = 0.0
        self._max_tau = 0.0
        self._tolerance = 0.0
        self._is_reach = False

    def set_limit(self, max_tau: float, inertia: float, tolerance: float) -> None:
        self._max_tau = max_tau
        self._inertia = inertia
        self._tolerance = tolerance

    def set_target(self, target: float) -> None:
        self._target = target
        self._is_reach = False

    def is_reach(self) -> bool:
        return self._is_reach

    def tau(self, pos: float, vel: float) -> float:
        """Torque to apply at the given position and velocity."""
        dx = pos - self._target
        if abs(dx) > self._tolerance:
            return self._max_tau * sgn(-self._max_tau * dx - 0.5 * self._inertia * vel * abs(vel))
        self._is_reach = True
        return 0.0