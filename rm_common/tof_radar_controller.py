"""Publishes readings of every registered time-of-flight radar."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rm_common.handles import HandleRegistry, TofRadarHandle

__all__ = ["TofRadarData", "TofRadarController"]

_log = logging.getLogger(__name__)


@dataclass
class TofRadarData:
    """One radar reading: distance in metres and signal strength."""

    distance: float = 0.0
    strength: float = 0.0
    stamp: float = 0.0


class TofRadarController:
    """Publishes each radar on ``<name>/data``; the hardware reports distance in centimetres."""

    def __init__(
        self,
        registry: HandleRegistry[TofRadarHandle],
        make_publisher: Callable[[str], Callable[[Any], None]],
    ) -> None:
        self._outputs: list[tuple[TofRadarHandle, Callable[[Any], None]]] = []
        for name in registry.names():
            _log.debug("Got radar %s", name)
            self._outputs.append((registry.get_handle(name), make_publisher(f"{name}/data")))

    def update(self, time: float) -> None:
        for handle, publish in self._outputs:
            publish(TofRadarData(distance=handle.distance / 100.0, strength=handle.strength, stamp=time))