"""Piecewise linear interpolation over a sorted table of points."""

from collections.abc import Iterable, Sequence
from itertools import pairwise

from rm_common.params import as_float

__all__ = ["LinearInterp"]


class LinearInterp:
    """Piecewise linear map defined by ``(input, output)`` points, clamped at both ends."""

    def __init__(self, points: Iterable[Sequence[float]]) -> None:
        self._points: list[tuple[float, float]] = []
        for point in points:
            if isinstance(point, (str, bytes)) or not isinstance(point, Sequence):
                raise TypeError(f"point must be a pair of numbers, got {point!r}")
            if len(point) != 2:
                raise ValueError(f"point must have exactly two values, got {len(point)}")
            x, y = as_float(point[0]), as_float(point[1])
            if self._points and x < self._points[-1][0]:
                raise ValueError(
                    "points must be sorted by abscissa from smallest to largest: "
                    f"{x} < {self._points[-1][0]}"
                )
            self._points.append((x, y))

    def output(self, value: float) -> float:
        """Interpolate the output for ``value``."""
        if not self._points:
            raise ValueError("no interpolation points configured")
        first_x, first_y = self._points[0]
        last_x, last_y = self._points[-1]
        if value >= last_x:
            return last_y
        if value <= first_x:
            return first_y
        for (x0, y0), (x1, y1) in pairwise(self._points):
            if x0 <= value <= x1:
                return y0 + (y1 - y0) / (x1 - x0) * (value - x0)
        raise ValueError("interpolation points are not sorted")