"""Device motion steering.

Readings come from the device's own accelerometer and gyroscope through a
listener registered with the platform sensor service.
"""

import time
from typing import Callable, Iterable, Optional

from ..core.models import SensorSample
from .base import Clock, LatestReading

SensorListener = Callable[[str, Iterable[float]], None]

ACCELEROMETER = "accelerometer"
GYROSCOPE = "gyroscope"


class DeviceSteering:
    """Steering fed by the device's motion sensors."""

    name = "phone"

    def __init__(
        self,
        *,
        register: Optional[Callable[[SensorListener], None]] = None,
        unregister: Optional[Callable[[SensorListener], None]] = None,
        clock: Clock = time.monotonic,
    ):
        self._register = register
        self._unregister = unregister
        self._clock = clock
        self.reading = LatestReading()
        self.listening = False

    def start(self) -> None:
        self.listening = True
        if self._register is not None:
            self._register(self.on_sensor_changed)
        print("[Steering] device motion listener activated")

    def stop(self) -> None:
        self.listening = False
        if self._unregister is not None:
            self._unregister(self.on_sensor_changed)

    def on_sensor_changed(self, sensor_type: str, values: Iterable[float]) -> None:
        if not self.listening:
            return
        values = list(values)[:3]
        if sensor_type == ACCELEROMETER:
            self.reading.set_acceleration(values)
        elif sensor_type == GYROSCOPE:
            self.reading.set_rotation(values)

    def sample(self) -> SensorSample:
        return self.reading.snapshot(self._clock())
