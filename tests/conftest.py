import random

import pytest

from maismaze.core.state import Settings


@pytest.fixture
def settings():
    s = Settings()
    s.tick_interval_ms = 1
    return s


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def winning_grid():
    # finish sits right below the cell to the right of the player
    return [
        [1, 1, 1],
        [1, 2, 0],
        [1, 1, 3],
    ]
