"""Small numeric helpers shared by the filters and trajectory generators."""

import math

__all__ = ["angular_minus", "min_abs", "sgn", "square", "alpha"]


def angular_minus(a: float, b: float) -> float:
    """Return the shortest signed angular difference ``a - b`` in radians."""
    a = math.fmod(a, 2.0 * math.pi)
    b = math.fmod(b, 2.0 * math.pi)
    direct = a - b
    wrapped = (a + 2.0 * math.pi - b) if a < b else (a - 2.0 * math.pi - b)
    return direct if abs(direct) < abs(wrapped) else wrapped


def min_abs(a: float, b: float) -> float:
    """Clamp the magnitude of ``a`` to ``b`` while keeping the sign of ``a``."""
    sign = -1.0 if a < 0.0 else 1.0
    return sign * min(abs(a), b)


def sgn(val: float) -> int:
    """Return -1, 0 or 1 according to the sign of ``val``."""
    return int(0 < val) - int(val < 0)


def square(val: float) -> float:
    """Return ``val`` squared."""
    return val * val


def alpha(cutoff: float, freq: float) -> float:
    """Smoothing factor of a first-order low-pass filter at ``cutoff`` Hz sampled at ``freq`` Hz."""
    tau = 1.0 / (2.0 * math.pi * cutoff)
    te = 1.0 / freq
    return 1.0 / (1.0 + tau / te)