"""FastAPI application."""

from __future__ import annotations

from typing import List, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .controller import GameController


class MessageRequest(BaseModel):
    topic: str
    payload: str


class DeviceEventRequest(BaseModel):
    sensor: Literal["accelerometer", "gyroscope"]
    values: List[float]


def create_app(controller: GameController) -> FastAPI:
    """Build the FastAPI instance around a controller."""
    app = FastAPI(title="Mais Maze API", version="1.0.0")
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/ping")
    async def ping():
        return {"status": "ok"}

    @app.get("/api/state")
    async def get_state():
        return controller.get_state_payload()

    @app.get("/api/maze")
    async def get_maze():
        return controller.get_maze_payload()

    @app.get("/api/score")
    async def get_score():
        return controller.get_score_payload()

    @app.post("/api/game/start")
    async def start_game():
        try:
            return controller.start_game()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    # stop and restart join the loop thread, so they run in the threadpool
    @app.post("/api/game/stop")
    def stop_game():
        return controller.stop_game()

    @app.post("/api/game/restart")
    def restart_game():
        try:
            state_payload, maze_payload = controller.restart_game()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"state": state_payload, "maze": maze_payload}

    @app.post("/api/game/step")
    async def step_game():
        try:
            solved = controller.step_once()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"solved": solved, "state": controller.get_state_payload()}

    @app.post("/api/messages")
    async def ingest_message(payload: MessageRequest):
        try:
            accepted = controller.ingest_message(payload.topic, payload.payload)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"accepted": accepted}

    @app.post("/api/sensors/device")
    async def ingest_device_event(payload: DeviceEventRequest):
        try:
            controller.ingest_device_event(payload.sensor, payload.values)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"accepted": True}

    return app
