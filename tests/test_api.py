import pytest
from fastapi.testclient import TestClient

from maismaze.core.state import GameSession
from maismaze.server.api import create_app
from maismaze.server.controller import GameController, build_controller
from maismaze.steering.scripted import ScriptedSteering
from maismaze.steering.wired import WiredSteering

from helpers import BlockingSteering, MemoryScoreBoard, tilt

G = 9.81


def fixed_clock():
    return 0.0


@pytest.fixture
def board():
    return MemoryScoreBoard()


@pytest.fixture
def controller(settings, winning_grid, board):
    session = GameSession(settings, grid=winning_grid, score_recorder=board)
    steering = ScriptedSteering([tilt(acc_x=G)], loop=True, clock=fixed_clock)
    return GameController(settings=settings, session=session, steering=steering)


@pytest.fixture
def client(controller):
    return TestClient(create_app(controller))


def test_ping(client):
    assert client.get("/api/ping").json() == {"status": "ok"}


def test_state_and_maze(client):
    state = client.get("/api/state").json()
    assert state["running"] is False
    assert state["solved"] is False
    assert state["steering"] == "scripted"
    assert state["loop_alive"] is False

    maze = client.get("/api/maze").json()
    assert maze["size"] == 3
    assert maze["grid"] == [[1, 1, 1], [1, 2, 0], [1, 1, 3]]
    assert maze["legend"]["collectible"] == 6
    assert maze["text"] == "111\n120\n113"


def test_manual_step_solves(client, board):
    response = client.post("/api/game/step")
    assert response.status_code == 200
    body = response.json()
    assert body["solved"] is True
    assert body["state"]["solved"] is True

    score = client.get("/api/score").json()
    assert score["final"] is True
    assert score["score"] == 0
    assert len(board.entries) == 1


def test_loop_runs_until_solved(controller, client):
    assert client.post("/api/game/start").status_code == 200
    assert controller.wait(timeout=5)

    state = client.get("/api/state").json()
    assert state["solved"] is True
    assert state["running"] is False
    assert state["loop_alive"] is False

    # solved attempts need a restart before playing again
    assert client.post("/api/game/start").status_code == 400


def test_step_rejected_while_loop_runs(settings, winning_grid):
    session = GameSession(settings, grid=winning_grid)
    idle = ScriptedSteering([], clock=fixed_clock)
    controller = GameController(settings=settings, session=session, steering=idle)
    client = TestClient(create_app(controller))

    client.post("/api/game/start")
    try:
        assert controller.loop_alive
        assert client.post("/api/game/step").status_code == 400
    finally:
        state = client.post("/api/game/stop").json()
    assert state["running"] is False
    assert state["loop_alive"] is False
    assert idle.active is False


def test_restart(client):
    client.post("/api/game/step")
    body = client.post("/api/game/restart").json()
    assert body["state"]["solved"] is False
    assert body["state"]["play_time"] == 0
    assert body["maze"]["size"] == 10


def test_telemetry_message(controller, client):
    controller.session.set_running(True)
    response = client.post("/api/messages", json={"topic": "temp/K05", "payload": "23.5"})
    assert response.json() == {"accepted": True}
    assert client.get("/api/state").json()["play_time"] == 1

    response = client.post("/api/messages", json={"topic": "temp/K05", "payload": "warm"})
    assert response.json() == {"accepted": False}


def test_sensor_message_needs_wired_steering(client):
    response = client.post("/api/messages", json={"topic": "mpu/K05", "payload": "(1,2,3,4,5,6)"})
    assert response.status_code == 400


def test_wired_sensor_message(settings, winning_grid):
    steering = WiredSteering(settings.mpu_topic, clock=fixed_clock)
    controller = build_controller(
        settings=settings,
        session=GameSession(settings, grid=winning_grid),
        steering=steering,
    )
    client = TestClient(create_app(controller))

    steering.start()
    response = client.post("/api/messages", json={"topic": "mpu/K05", "payload": "(9.81,0,0,0,0,0)"})
    assert response.json() == {"accepted": True}
    assert client.post("/api/game/step").json()["solved"] is True

    response = client.post("/api/sensors/device", json={"sensor": "accelerometer", "values": [1, 2, 3]})
    assert response.status_code == 400


def test_device_event(settings, winning_grid):
    settings.steering_method = "phone"
    controller = build_controller(settings=settings, session=GameSession(settings, grid=winning_grid))
    client = TestClient(create_app(controller))

    controller.steering.start()
    response = client.post("/api/sensors/device", json={"sensor": "accelerometer", "values": [9.81, 0, 0]})
    assert response.json() == {"accepted": True}
    assert controller.steering.sample().acc_x == 9.81

    response = client.post("/api/sensors/device", json={"sensor": "gyroscope", "values": [1, 2]})
    assert response.status_code == 400


def test_restart_refused_while_tick_in_flight(settings, winning_grid):
    session = GameSession(settings, grid=winning_grid)
    steering = BlockingSteering()
    controller = GameController(settings=settings, session=session, steering=steering, stop_timeout=0.05)
    client = TestClient(create_app(controller))
    grid = session.grid

    client.post("/api/game/start")
    try:
        assert steering.entered.wait(2)
        response = client.post("/api/game/restart")
        assert response.status_code == 400
        with pytest.raises(ValueError):
            controller.restart_game()
        assert controller.loop_alive
        assert session.grid is grid
    finally:
        steering.release.set()

    assert controller.wait(timeout=5)
    body = client.post("/api/game/restart").json()
    assert controller.loop_alive is False
    assert session.grid is not grid
    assert body["maze"]["size"] == 10
    assert body["state"]["loop_alive"] is False
