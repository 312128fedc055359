"""Sensor-board steering.

The board publishes ``(ax,ay,az,gx,gy,gz)`` strings on the MPU topic. The
transport that receives them is external; it forwards each message to
``on_message`` and is asked to (un)subscribe through the injected callables.
"""

import time
from typing import Callable, Optional, Union

from ..core.models import SensorSample
from .base import Clock, LatestReading


def parse_sensor_message(message: Union[str, bytes]) -> Optional[list[float]]:
    """Parse a six-value sensor message.

    Args:
        message: text such as "(0.1,0.2,9.8,0.0,1.5,-0.3)"

    Returns:
        six floats, or None when the message is malformed
    """
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    parts = message.replace("(", "").replace(")", "").split(",")
    if len(parts) != 6:
        print(f"[Steering] invalid number of values: {len(parts)}")
        return None
    try:
        return [float(part) for part in parts]
    except ValueError as exc:
        print(f"[Steering] error parsing values: {exc}")
        return None


class WiredSteering:
    """Steering fed by the external sensor board."""

    name = "esp32"

    def __init__(
        self,
        topic: str = "mpu/K05",
        *,
        subscribe: Optional[Callable[[str], None]] = None,
        unsubscribe: Optional[Callable[[str], None]] = None,
        clock: Clock = time.monotonic,
    ):
        self.topic = topic
        self._subscribe = subscribe
        self._unsubscribe = unsubscribe
        self._clock = clock
        self.reading = LatestReading()
        self.active = False

    def start(self) -> None:
        self.active = True
        if self._subscribe is not None:
            self._subscribe(self.topic)
        print(f"[Steering] sensor board feed started ({self.topic})")

    def stop(self) -> None:
        self.active = False
        if self._unsubscribe is not None:
            self._unsubscribe(self.topic)

    def on_message(self, topic: str, payload: Union[str, bytes]) -> bool:
        """Transport callback. Returns True when the reading was stored."""
        if topic != self.topic or not self.active:
            return False
        values = parse_sensor_message(payload)
        if values is None:
            return False
        self.reading.set_all(values)
        return True

    def sample(self) -> SensorSample:
        return self.reading.snapshot(self._clock())
