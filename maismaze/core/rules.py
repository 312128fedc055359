"""Game rules and constants.

Tile probabilities, board limits, the direction delta table and the score formula.
"""

from typing import Literal

# Movement direction type
Direction = Literal["up", "down", "left", "right"]

# (row, col) offsets, rows grow downwards
DIRECTION_DELTAS: dict[str, tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}

# Board limits
MIN_LABYRINTH_SIZE = 10
DEFAULT_LABYRINTH_SIZE = 10
DEFAULT_MAX_GENERATION_ATTEMPTS = 100

# Chance for each empty cell to become a collectible
COLLECTIBLE_PROBABILITY = 0.1

# Score weights
TIME_WEIGHT = -0.5
COLLECTIBLE_WEIGHT = 1.3


def clamp_size(size: int) -> int:
    """Clamp a configured labyrinth size up to the minimum.

    Args:
        size: configured size

    Returns:
        size, never below MIN_LABYRINTH_SIZE
    """
    return max(MIN_LABYRINTH_SIZE, int(size))


def compute_score(play_time: int, collected_count: int) -> float:
    """Final score of a solved attempt.

    Longer play time costs points, every collectible earns some back.

    Args:
        play_time: accumulated play-time ticks
        collected_count: number of collectibles picked up

    Returns:
        the score
    """
    return TIME_WEIGHT * play_time + COLLECTIBLE_WEIGHT * collected_count


def is_direction(value: object) -> bool:
    return isinstance(value, str) and value in DIRECTION_DELTAS
