"""The 1-euro adaptive low-pass filter."""

from rm_common.math_utilities import alpha

__all__ = ["OneEuroFilter"]


class OneEuroFilter:
    """Speed-adaptive low-pass filter: smooth when slow, responsive when fast."""

    def __init__(self, freq: float, mincutoff: float, beta: float, dcutoff: float) -> None:
        self._freq = freq
        self._mincutoff = mincutoff
        self._beta = beta
        self._dcutoff = dcutoff
        self._first_time = True
        self._x_prev = 0.0
        self._hat_x_prev = 0.0
        self._d_hat_x_prev = 0.0
        self._filtered = 0.0

    def input(self, value: float) -> None:
        dx = 0.0 if self._first_time else (value - self._x_prev) * self._freq
        if self._first_time:
            self._d_hat_x_prev = dx
        a_d = alpha(self._dcutoff, self._freq)
        edx = a_d * dx + (1.0 - a_d) * self._d_hat_x_prev
        self._d_hat_x_prev = edx
        cutoff = self._mincutoff + self._beta * abs(edx)
        if self._first_time:
            self._hat_x_prev = value
        a = alpha(cutoff, self._freq)
        self._filtered = a * value + (1.0 - a) * self._hat_x_prev
        self._hat_x_prev = self._filtered
        self._first_time = False

    def output(self) -> float:
        return self._filtered

    def clear(self) -> None:
        """Restart the filter; the next input is passed through unchanged."""
        self._first_time = True
        self._x_prev = 0.0
        self._hat_x_prev = 0.0
        self._d_hat_x_prev = 0.0