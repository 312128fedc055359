"""Scripted steering

Replays recorded samples, used for demos without hardware and for tests.
"""

import time
from pathlib import Path
from typing import Iterable, Sequence, Union

import yaml

from ..core.models import SensorSample
from .base import Clock

ScriptItem = Union[SensorSample, Sequence[float]]


def load_script(path: Union[str, Path]) -> list[list[float]]:
    """Load a YAML list of six-value readings.

    Args:
        path: script file

    Returns:
        list of readings (acc xyz, gyro xyz)
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    readings = []
    for item in data:
        values = [float(v) for v in item]
        if len(values) != 6:
            raise ValueError(f"script reading needs 6 values, got {len(values)}")
        readings.append(values)
    return readings


class ScriptedSteering:
    """Steering source replaying a fixed list of readings."""

    name = "scripted"

    def __init__(
        self,
        items: Iterable[ScriptItem] = (),
        *,
        loop: bool = False,
        clock: Clock = time.monotonic,
    ):
        self._items = list(items)
        self._loop = loop
        self._clock = clock
        self._index = 0
        self.active = False

    def start(self) -> None:
        self.active = True

    def stop(self) -> None:
        self.active = False

    @property
    def exhausted(self) -> bool:
        return not self._loop and self._index >= len(self._items)

    def sample(self) -> SensorSample:
        # neutral reading once the script has run out
        if not self._items or self.exhausted:
            return SensorSample(timestamp=self._clock())

        item = self._items[self._index % len(self._items)]
        self._index += 1
        # replayed readings are stamped with the current time
        if isinstance(item, SensorSample):
            return item.model_copy(update={"timestamp": self._clock()})
        return SensorSample.from_values(list(item), self._clock())
