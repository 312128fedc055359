"""Motion fusion.

Turns raw accelerometer / gyroscope samples into one latched movement
direction. The accelerometer goes through a high-pass filter, the gyroscope
is integrated over time, both are cleaned by a dead zone and blended per axis.
A lock keeps the chosen direction until the device returns close to neutral.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, Field

from .models import SensorSample


class FusionConfig(BaseModel):
    """Fusion constants."""

    max_accelerometer_range: float = Field(default=9.81, gt=0, description="m/s^2")
    max_gyroscope_range: float = Field(default=2000.0, gt=0, description="deg/s")
    alpha: float = 0.5
    accelerometer_weight: float = 0.7
    gyroscope_weight: float = 0.3
    dead_zone_threshold: float = Field(default=0.05, ge=0)
    tilt_threshold: float = Field(default=0.1, ge=0)
    lock_threshold: float = Field(default=0.2, ge=0)
    update_baseline: bool = Field(
        default=False,
        description="Refresh the high-pass reference with every reading (off: reference stays at zero)",
    )

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "FusionConfig":
        """Build a config from a mapping, ignoring unknown keys.

        Raises:
            ValueError: a value cannot be parsed (pydantic ValidationError)
        """
        return cls.model_validate(data or {})


def _zeros() -> list[float]:
    return [0.0, 0.0, 0.0]


@dataclass
class FusionState:
    """Mutable filter state carried from one sample to the next."""

    high_pass: list[float] = field(default_factory=_zeros)
    orientation: list[float] = field(default_factory=_zeros)
    last_raw_acc: list[float] = field(default_factory=_zeros)
    locked: bool = False
    direction: Optional[str] = None
    last_timestamp: Optional[float] = None

    def reset_orientation(self) -> None:
        self.high_pass = _zeros()
        self.orientation = _zeros()


def _magnitude(vector: list[float]) -> float:
    return math.sqrt(sum(component * component for component in vector))


def _pick_direction(combined_x: float, combined_y: float, tilt_threshold: float) -> Optional[str]:
    if abs(combined_x) > tilt_threshold and abs(combined_x) > abs(combined_y):
        return "right" if combined_x > 0 else "left"
    if abs(combined_y) > tilt_threshold:
        # tilting forward moves up the board, backward moves down
        return "up" if combined_y > 0 else "down"
    return None


def fuse(
    sample: SensorSample,
    state: FusionState,
    config: Optional[FusionConfig] = None,
) -> tuple[Optional[str], FusionState]:
    """Fuse one sample into the state and return the latched direction.

    The state is updated in place and returned alongside the direction.

    Args:
        sample: raw 6-axis reading with its capture time
        state: filter state from the previous call
        config: fusion constants (defaults when None)

    Returns:
        (last emitted direction or None if none was ever emitted, state)
    """
    if config is None:
        config = FusionConfig()

    acc = [value / config.max_accelerometer_range for value in sample.acceleration()]
    gyro = [value / config.max_gyroscope_range for value in sample.rotation()]

    for i in range(3):
        state.high_pass[i] = config.alpha * (state.high_pass[i] + acc[i] - state.last_raw_acc[i])
    if config.update_baseline:
        state.last_raw_acc = list(acc)

    # first sample has no predecessor, so nothing is integrated
    if state.last_timestamp is None:
        dt = 0.0
    else:
        dt = max(0.0, sample.timestamp - state.last_timestamp)
    state.last_timestamp = sample.timestamp

    for i in range(3):
        state.orientation[i] += gyro[i] * dt

    if _magnitude(state.high_pass) < config.dead_zone_threshold:
        state.high_pass = _zeros()
    if _magnitude(state.orientation) < config.dead_zone_threshold:
        state.orientation = _zeros()

    combined = [
        config.accelerometer_weight * state.high_pass[i] + config.gyroscope_weight * state.orientation[i]
        for i in range(3)
    ]
    combined_x, combined_y = combined[0], combined[1]

    if state.locked:
        if abs(combined_x) < config.lock_threshold and abs(combined_y) < config.lock_threshold:
            state.locked = False
            state.reset_orientation()
    else:
        chosen = _pick_direction(combined_x, combined_y, config.tilt_threshold)
        if chosen is not None:
            state.direction = chosen
            state.locked = True
            state.reset_orientation()

    return state.direction, state


class DirectionFusion:
    """Owns a fusion state and feeds samples through ``fuse``."""

    def __init__(self, config: Optional[FusionConfig] = None):
        self.config = config or FusionConfig()
        self.state = FusionState()

    @property
    def direction(self) -> Optional[str]:
        return self.state.direction

    @property
    def locked(self) -> bool:
        return self.state.locked

    def update(self, sample: SensorSample) -> Optional[str]:
        direction, self.state = fuse(sample, self.state, self.config)
        return direction

    def reset(self) -> None:
        """Forget everything, used when a new attempt starts."""
        self.state = FusionState()
