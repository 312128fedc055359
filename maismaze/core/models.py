"""Data models (Pydantic) for sensor samples, scores and session snapshots."""

from typing import Optional
from pydantic import BaseModel, Field


class SensorSample(BaseModel):
    """One raw 6-axis motion reading."""

    acc_x: float = Field(default=0.0, description="Accelerometer x (m/s^2)")
    acc_y: float = Field(default=0.0, description="Accelerometer y (m/s^2)")
    acc_z: float = Field(default=0.0, description="Accelerometer z (m/s^2)")
    gyro_x: float = Field(default=0.0, description="Gyroscope x (deg/s)")
    gyro_y: float = Field(default=0.0, description="Gyroscope y (deg/s)")
    gyro_z: float = Field(default=0.0, description="Gyroscope z (deg/s)")
    timestamp: float = Field(default=0.0, description="Capture time in seconds")

    @classmethod
    def from_values(cls, values: list[float], timestamp: float) -> "SensorSample":
        """Build a sample from six floats ordered acc xyz, gyro xyz."""
        acc_x, acc_y, acc_z, gyro_x, gyro_y, gyro_z = values
        return cls(
            acc_x=acc_x,
            acc_y=acc_y,
            acc_z=acc_z,
            gyro_x=gyro_x,
            gyro_y=gyro_y,
            gyro_z=gyro_z,
            timestamp=timestamp,
        )

    def acceleration(self) -> tuple[float, float, float]:
        return (self.acc_x, self.acc_y, self.acc_z)

    def rotation(self) -> tuple[float, float, float]:
        return (self.gyro_x, self.gyro_y, self.gyro_z)


class ScoreEntry(BaseModel):
    """Leaderboard row produced when an attempt is solved."""

    player_name: str = Field(..., description="Player name from settings")
    play_time: int = Field(..., ge=0, description="Accumulated play-time ticks")
    collected_count: int = Field(..., ge=0, description="Collectibles picked up")
    score: float = Field(..., description="Weighted final score")


class SessionSnapshot(BaseModel):
    """State payload for presentation / telemetry layers."""

    running: bool
    solved: bool
    play_time: int = Field(..., ge=0)
    collected_count: int = Field(..., ge=0)
    temperature: float
    direction: Optional[str] = Field(default=None, description="Last latched direction")
    size: int = Field(..., ge=0, description="Labyrinth edge length")
    steering: Optional[str] = Field(default=None, description="Active steering source")
