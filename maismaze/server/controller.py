"""Game backend controller.

Runs the fixed-delay stepping loop on a background thread, forwards sensor and
telemetry messages from the outside and exposes payloads for the API.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional

from ..core.maze import Tile, grid_to_text
from ..core.state import GameSession, ScoreRecorder, SessionFeedback, Settings
from ..steering.base import SteeringSource
from ..steering.registry import create_steering_source


class GameController:
    """Wrap the session and its stepping loop for the web layer."""

    def __init__(
        self,
        *,
        settings: Settings,
        session: GameSession,
        steering: SteeringSource,
        stop_timeout: float = 2.0,
    ) -> None:
        self.settings = settings
        self.stop_timeout = stop_timeout
        self.session = session
        self.steering = steering

        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Loop control
    # ------------------------------------------------------------------
    @property
    def loop_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start_game(self) -> dict:
        with self._lock:
            if self.loop_alive:
                return self.get_state_payload()
            if self.session.solved:
                raise ValueError("Labyrinth already solved; restart first")

            self._stop_requested.clear()
            self.session.set_running(True)
            self.steering.start()
            self._thread = threading.Thread(target=self._run_loop, name="maismaze-loop", daemon=True)
            self._thread.start()
        print(f"[Loop] started ({self.steering.name}, {self.settings.tick_interval_ms} ms)")
        return self.get_state_payload()

    def stop_game(self, timeout: Optional[float] = None) -> dict:
        """Request a stop and wait up to ``timeout`` (default ``stop_timeout``) seconds."""
        with self._lock:
            thread = self._thread
            self._stop_requested.set()
            self.session.set_running(False)
        if thread is not None and thread is not threading.current_thread():
            thread.join(self.stop_timeout if timeout is None else timeout)
        return self.get_state_payload()

    def restart_game(self, timeout: Optional[float] = None) -> tuple[dict, dict]:
        """Stop the loop and start a new attempt.

        Raises:
            ValueError: the loop thread is still inside a tick after the wait
        """
        self.stop_game(timeout)
        # the grid and fusion state belong to the loop thread until it exits
        if self.loop_alive:
            raise ValueError("Game loop is still stopping; try again")
        self.session.restart()
        return self.get_state_payload(), self.get_maze_payload()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the loop ends. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run_loop(self) -> None:
        interval = max(0, self.settings.tick_interval_ms) / 1000.0
        try:
            while not self._stop_requested.is_set():
                if self.session.step(self.steering):
                    print("[Loop] labyrinth solved, loop finished")
                    break
                self._stop_requested.wait(interval)
        finally:
            self.steering.stop()
            print("[Loop] stopped")

    def step_once(self) -> bool:
        """Single manual tick, only while the loop is idle."""
        if self.loop_alive:
            raise ValueError("Game loop is running")
        return self.session.step(self.steering)

    # ------------------------------------------------------------------
    # Incoming messages
    # ------------------------------------------------------------------
    def ingest_message(self, topic: str, payload: str) -> bool:
        """Route a transport message to telemetry or the wired feed."""
        if topic == self.settings.temp_topic:
            return self.session.on_message(topic, payload)
        handler = getattr(self.steering, "on_message", None)
        if handler is None:
            raise ValueError(f"Steering '{self.steering.name}' does not accept messages")
        return handler(topic, payload)

    def ingest_device_event(self, sensor_type: str, values: Iterable[float]) -> None:
        handler = getattr(self.steering, "on_sensor_changed", None)
        if handler is None:
            raise ValueError(f"Steering '{self.steering.name}' does not accept device events")
        values = list(values)
        if len(values) < 3:
            raise ValueError("Device events need three values")
        handler(sensor_type, values)

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------
    def get_state_payload(self) -> dict:
        payload = self.session.snapshot(steering=self.steering.name).model_dump()
        payload["loop_alive"] = self.loop_alive
        return payload

    def get_maze_payload(self) -> dict:
        grid = [[int(value) for value in row] for row in self.session.grid]
        return {
            "size": len(grid),
            "grid": grid,
            "text": grid_to_text(grid),
            "legend": {tile.name.lower(): int(tile) for tile in Tile},
        }

    def get_score_payload(self) -> dict:
        entry = self.session.last_score or self.session.build_score_entry()
        payload = entry.model_dump()
        payload["final"] = self.session.last_score is not None
        return payload


def build_controller(
    *,
    settings: Settings,
    session: Optional[GameSession] = None,
    steering: Optional[SteeringSource] = None,
    feedback: Optional[SessionFeedback] = None,
    score_recorder: Optional[ScoreRecorder] = None,
    publish: Optional[Callable[[str, str], None]] = None,
) -> GameController:
    """Factory helper for the controller."""
    if session is None:
        session = GameSession(
            settings,
            feedback=feedback,
            score_recorder=score_recorder,
            publish=publish,
        )
    if steering is None:
        steering = create_steering_source(settings)
    return GameController(settings=settings, session=session, steering=steering)
