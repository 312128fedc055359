"""Steering source capability.

A steering source delivers raw motion samples to the game loop. Readings are
pushed in by a sensor callback on another thread and pulled by ``sample()``.
"""

import threading
from typing import Callable, Iterable, Protocol

from ..core.models import SensorSample

Clock = Callable[[], float]


class SteeringSource(Protocol):
    """What the game loop needs from a motion source."""

    name: str

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def sample(self) -> SensorSample: ...


class LatestReading:
    """Thread-safe holder of the most recent accelerometer and gyroscope values."""

    def __init__(self):
        self.lock = threading.Lock()
        self._acc = (0.0, 0.0, 0.0)
        self._gyro = (0.0, 0.0, 0.0)

    def set_acceleration(self, values: Iterable[float]) -> None:
        x, y, z = (float(v) for v in values)
        with self.lock:
            self._acc = (x, y, z)

    def set_rotation(self, values: Iterable[float]) -> None:
        x, y, z = (float(v) for v in values)
        with self.lock:
            self._gyro = (x, y, z)

    def set_all(self, values: Iterable[float]) -> None:
        """Store six values ordered acc xyz, gyro xyz."""
        ax, ay, az, gx, gy, gz = (float(v) for v in values)
        with self.lock:
            self._acc = (ax, ay, az)
            self._gyro = (gx, gy, gz)

    def snapshot(self, timestamp: float) -> SensorSample:
        with self.lock:
            acc, gyro = self._acc, self._gyro
        return SensorSample.from_values([*acc, *gyro], timestamp)
