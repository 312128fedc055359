"""Steering source selection by configuration."""

import time
from typing import Callable, Optional

from ..core.state import Settings
from .base import Clock, SteeringSource
from .device import DeviceSteering, SensorListener
from .scripted import ScriptedSteering, load_script
from .wired import WiredSteering

STEERING_METHODS = ("esp32", "phone", "scripted")


def create_steering_source(
    settings: Settings,
    *,
    subscribe: Optional[Callable[[str], None]] = None,
    unsubscribe: Optional[Callable[[str], None]] = None,
    register: Optional[Callable[[SensorListener], None]] = None,
    unregister: Optional[Callable[[SensorListener], None]] = None,
    clock: Clock = time.monotonic,
) -> SteeringSource:
    """Build the steering source named by ``settings.steering_method``.

    Raises:
        ValueError: unknown steering method
    """
    method = settings.steering_method.lower()

    if method == "esp32":
        return WiredSteering(
            settings.mpu_topic,
            subscribe=subscribe,
            unsubscribe=unsubscribe,
            clock=clock,
        )
    if method == "phone":
        return DeviceSteering(register=register, unregister=unregister, clock=clock)
    if method == "scripted":
        readings = load_script(settings.steering_script) if settings.steering_script else []
        return ScriptedSteering(readings, loop=bool(readings), clock=clock)

    raise ValueError(f"Invalid steering method: {settings.steering_method}. Choose one of {STEERING_METHODS}.")
