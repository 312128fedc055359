"""Player movement on the labyrinth grid.

Moves are applied in place. Rejected moves leave the grid untouched; reaching
a cell next to the finish clears the whole grid, which is the solved signal.
"""

from typing import Callable, Literal, Optional

from .maze import Grid, Tile, find_tile
from .rules import DIRECTION_DELTAS, is_direction

MoveOutcome = Literal[
    "no_player",
    "invalid_direction",
    "out_of_bounds",
    "wall",
    "moved",
    "collected",
    "won",
]


def is_labyrinth_empty(grid: Grid) -> bool:
    """True when every cell is empty (the solved grid)."""
    return all(value == Tile.EMPTY for row in grid for value in row)


def clear_grid(grid: Grid) -> None:
    for row in grid:
        row[:] = [int(Tile.EMPTY)] * len(row)


def apply_move(grid: Grid, direction: Optional[str]) -> MoveOutcome:
    """Move the player one cell and report what happened.

    Args:
        grid: labyrinth, mutated in place
        direction: one of "up", "down", "left", "right"

    Returns:
        the outcome of the move
    """
    player = find_tile(grid, Tile.PLAYER)
    finish = find_tile(grid, Tile.FINISH)

    if player is None:
        return "no_player"

    if not is_direction(direction):
        print(f"[Move] invalid direction: {direction!r}")
        return "invalid_direction"
    delta = DIRECTION_DELTAS[direction]

    target_row, target_col = player[0] + delta[0], player[1] + delta[1]
    if not (0 <= target_row < len(grid) and 0 <= target_col < len(grid[target_row])):
        return "out_of_bounds"

    target = grid[target_row][target_col]
    if target == Tile.WALL:
        return "wall"

    # finishing pre-empts the collectible on the same cell
    if finish is not None and abs(target_row - finish[0]) + abs(target_col - finish[1]) == 1:
        clear_grid(grid)
        return "won"

    outcome: MoveOutcome = "collected" if target == Tile.COLLECTIBLE else "moved"

    grid[player[0]][player[1]] = Tile.EMPTY
    grid[target_row][target_col] = Tile.PLAYER
    return outcome


def move_player(
    grid: Grid,
    direction: Optional[str],
    on_collect: Optional[Callable[[], None]] = None,
) -> Grid:
    """Apply one move and return the same grid.

    ``on_collect`` is called once when the player steps onto a collectible.
    """
    if apply_move(grid, direction) == "collected" and on_collect is not None:
        on_collect()
    return grid
