import threading

from maismaze.core.models import SensorSample


def tilt(acc_x=0.0, acc_y=0.0, acc_z=0.0, gyro=(0.0, 0.0, 0.0), t=0.0) -> SensorSample:
    return SensorSample.from_values([acc_x, acc_y, acc_z, *gyro], t)


class RecordingFeedback:
    def __init__(self):
        self.collected = 0
        self.wins = 0

    def on_collect(self):
        self.collected += 1

    def on_win(self):
        self.wins += 1


class MemoryScoreBoard:
    def __init__(self):
        self.entries = []

    def record(self, entry):
        self.entries.append(entry)


class BlockingSteering:
    """Steering whose ``sample()`` holds the loop thread until released."""

    name = "blocking"

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()

    def start(self):
        pass

    def stop(self):
        pass

    def sample(self):
        self.entered.set()
        self.release.wait(5)
        return SensorSample()
