"""Settings and game session management."""

import random
import threading
from typing import Callable, Optional, Protocol

from .fusion import DirectionFusion, FusionConfig
from .maze import Grid, generate_maze
from .models import ScoreEntry, SessionSnapshot
from .movement import apply_move, is_labyrinth_empty
from .rules import (
    COLLECTIBLE_PROBABILITY,
    DEFAULT_LABYRINTH_SIZE,
    DEFAULT_MAX_GENERATION_ATTEMPTS,
    clamp_size,
    compute_score,
)


class SessionFeedback(Protocol):
    """Player feedback (sound, vibration) triggered by the session."""

    def on_collect(self) -> None: ...

    def on_win(self) -> None: ...


class ScoreRecorder(Protocol):
    """Receives the score of a solved attempt."""

    def record(self, entry: ScoreEntry) -> None: ...


class Settings:
    """Game settings."""

    def __init__(self):
        # Player
        self.player_name = "Player"
        self.audio = False

        # Maze
        self.labyrinth_size = DEFAULT_LABYRINTH_SIZE
        self.maze_seed: Optional[int] = None
        self.max_generation_attempts = DEFAULT_MAX_GENERATION_ATTEMPTS
        self.collectible_probability = COLLECTIBLE_PROBABILITY

        # Steering
        self.steering_method = "esp32"
        self.mpu_topic = "mpu/K05"
        self.temp_topic = "temp/K05"
        self.finished_topic = "finished/K05"
        self.steering_script: Optional[str] = None

        # Fusion overrides, see FusionConfig
        self.fusion: dict = {}

        # Game loop
        self.tick_interval_ms = 40

        # Web server
        self.server_host = "127.0.0.1"
        self.server_port = 8000

    def load_from_dict(self, config: dict) -> None:
        if "player" in config:
            p = config["player"]
            self.player_name = p.get("name", self.player_name)
            self.audio = bool(p.get("audio", self.audio))

        if "maze" in config:
            m = config["maze"]
            self.labyrinth_size = int(m.get("size", self.labyrinth_size))
            self.maze_seed = m.get("seed", self.maze_seed)
            self.max_generation_attempts = int(m.get("max_attempts", self.max_generation_attempts))
            self.collectible_probability = float(
                m.get("collectible_probability", self.collectible_probability)
            )

        if "steering" in config:
            s = config["steering"]
            self.steering_method = str(s.get("method", self.steering_method)).lower()
            self.mpu_topic = s.get("mpu_topic", self.mpu_topic)
            self.temp_topic = s.get("temp_topic", self.temp_topic)
            self.finished_topic = s.get("finished_topic", self.finished_topic)
            self.steering_script = s.get("script", self.steering_script)

        if "fusion" in config:
            self.fusion = dict(config["fusion"] or {})

        if "game" in config:
            g = config["game"]
            self.tick_interval_ms = int(g.get("tick_interval_ms", self.tick_interval_ms))

        if "server" in config:
            srv = config["server"]
            self.server_host = srv.get("host", self.server_host)
            self.server_port = srv.get("port", self.server_port)


class GameSession:
    """One play session: grid, fusion, counters and the running flag.

    The stepping loop owns the grid and the fusion state. The running flag,
    play time and counters are also touched by the telemetry callback and
    are guarded by a single lock.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        rng: Optional[random.Random] = None,
        grid: Optional[Grid] = None,
        fusion: Optional[DirectionFusion] = None,
        feedback: Optional[SessionFeedback] = None,
        score_recorder: Optional[ScoreRecorder] = None,
        publish: Optional[Callable[[str, str], None]] = None,
    ):
        self.settings = settings or Settings()
        self.size = clamp_size(self.settings.labyrinth_size)
        self._rng = rng if rng is not None else random.Random(self.settings.maze_seed)
        self.fusion = fusion or DirectionFusion(FusionConfig.from_dict(self.settings.fusion))
        self.feedback = feedback
        self.score_recorder = score_recorder
        self._publish = publish

        self._lock = threading.Lock()
        self._running = False
        self._play_time = 0
        self._collected_count = 0
        self._temperature = 0.0

        self.solved = False
        self.last_score: Optional[ScoreEntry] = None
        self.grid: Grid = grid if grid is not None else self._generate()

        self._notify_finished("0")

    def _generate(self) -> Grid:
        grid = generate_maze(
            self.size,
            self._rng,
            max_attempts=self.settings.max_generation_attempts,
            collectible_probability=self.settings.collectible_probability,
        )
        print(f"[Session] labyrinth generated ({self.size}x{self.size})")
        return grid

    def _notify_finished(self, payload: str) -> None:
        if self._publish is not None:
            self._publish(self.settings.finished_topic, payload)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def step(self, source) -> bool:
        """Run one tick: read a sample, fuse it, move the player.

        Args:
            source: steering source providing ``sample()``

        Returns:
            True once the labyrinth is solved
        """
        direction = self.fusion.update(source.sample())

        if direction is not None:
            outcome = apply_move(self.grid, direction)
            if outcome == "collected":
                with self._lock:
                    self._collected_count += 1
                print(f"[Session] collectible picked up ({self.get_collected_count()})")
                if self.feedback is not None and self.settings.audio:
                    self.feedback.on_collect()

        solved = is_labyrinth_empty(self.grid)
        if solved and not self.solved:
            self.solved = True
            self._finish()
        return solved

    def _finish(self) -> None:
        self.set_running(False)
        entry = self.build_score_entry()
        self.last_score = entry
        print(
            f"[Session] labyrinth solved: time={entry.play_time} "
            f"collected={entry.collected_count} score={entry.score}"
        )

        if self.feedback is not None and self.settings.audio:
            self.feedback.on_win()
        self._notify_finished("1")
        if self.score_recorder is not None:
            self.score_recorder.record(entry)

    def restart(self) -> None:
        """Start a new attempt on a freshly generated labyrinth."""
        with self._lock:
            self._running = False
            self._play_time = 0
            self._collected_count = 0
        self.fusion.reset()
        self.solved = False
        self.last_score = None
        self.grid = self._generate()
        self._notify_finished("0")

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------
    def record_temperature(self, value: float) -> None:
        """Store a telemetry value; each one counts as a play-time tick while running."""
        with self._lock:
            self._temperature = value
            if self._running:
                self._play_time += 1

    def parse_temperature(self, message: str) -> float:
        """Parse a telemetry message and record it.

        Raises:
            ValueError: message is not a number; nothing is recorded
        """
        value = float(message)
        self.record_temperature(value)
        return value

    def on_message(self, topic: str, payload: str) -> bool:
        """Telemetry feed callback. Returns True when the message was used."""
        if topic != self.settings.temp_topic:
            return False
        try:
            self.parse_temperature(payload)
        except ValueError:
            print(f"[Session] invalid temperature message on {topic}: {payload!r}")
            return False
        return True

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def set_running(self, running: bool) -> None:
        with self._lock:
            self._running = running

    def get_running(self) -> bool:
        with self._lock:
            return self._running

    def get_play_time(self) -> int:
        with self._lock:
            return self._play_time

    def get_collected_count(self) -> int:
        with self._lock:
            return self._collected_count

    def get_temperature(self) -> float:
        with self._lock:
            return self._temperature

    def build_score_entry(self) -> ScoreEntry:
        with self._lock:
            play_time = self._play_time
            collected = self._collected_count
        return ScoreEntry(
            player_name=self.settings.player_name,
            play_time=play_time,
            collected_count=collected,
            score=compute_score(play_time, collected),
        )

    def snapshot(self, steering: Optional[str] = None) -> SessionSnapshot:
        with self._lock:
            running = self._running
            play_time = self._play_time
            collected = self._collected_count
            temperature = self._temperature
        return SessionSnapshot(
            running=running,
            solved=self.solved,
            play_time=play_time,
            collected_count=collected,
            temperature=temperature,
            direction=self.fusion.direction,
            size=len(self.grid),
            steering=steering,
        )
