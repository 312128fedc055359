"""Labyrinth generation.

Randomized depth-first carving on the step-2 sublattice, followed by
collectible seeding. The grid is a square list of rows holding ``Tile`` codes.
"""

import random
from collections import deque
from enum import IntEnum
from typing import Optional

from .rules import (
    COLLECTIBLE_PROBABILITY,
    DEFAULT_MAX_GENERATION_ATTEMPTS,
    clamp_size,
)


class Tile(IntEnum):
    """Cell codes stored in the grid."""

    EMPTY = 0
    WALL = 1
    PLAYER = 2
    FINISH = 3
    COLLECTIBLE = 6


Grid = list[list[int]]

# (row, col) offsets of the four edge neighbors
NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def get_random_number(min_value: int, max_value: int, rng: Optional[random.Random] = None) -> int:
    """Inclusive uniform integer draw.

    Args:
        min_value: lower bound (inclusive)
        max_value: upper bound (inclusive)
        rng: random source (module-level generator when None)

    Returns:
        an integer in [min_value, max_value]
    """
    if rng is None:
        return random.randint(min_value, max_value)
    return rng.randint(min_value, max_value)


def new_grid(size: int, fill: int = Tile.WALL) -> Grid:
    return [[int(fill)] * size for _ in range(size)]


def find_tile(grid: Grid, tile: int) -> Optional[tuple[int, int]]:
    """Return (row, col) of the first cell holding ``tile`` or None."""
    for row_index, row in enumerate(grid):
        for col_index, value in enumerate(row):
            if value == tile:
                return row_index, col_index
    return None


def count_tiles(grid: Grid, tile: int) -> int:
    return sum(1 for row in grid for value in row if value == tile)


def grid_to_text(grid: Grid) -> str:
    """Render the grid as one line of codes per row (diagnostics)."""
    return "\n".join("".join(str(value) for value in row) for row in grid)


def get_unvisited_neighbors(grid: Grid, row: int, col: int) -> list[tuple[int, int]]:
    """Cells two steps away that are still walls.

    Args:
        grid: grid being carved
        row: current row
        col: current column

    Returns:
        [(row, col), ...] of carving candidates
    """
    size = len(grid)
    neighbors = []
    if row > 1 and grid[row - 2][col] == Tile.WALL:
        neighbors.append((row - 2, col))
    if row < size - 2 and grid[row + 2][col] == Tile.WALL:
        neighbors.append((row + 2, col))
    if col > 1 and grid[row][col - 2] == Tile.WALL:
        neighbors.append((row, col - 2))
    if col < size - 2 and grid[row][col + 2] == Tile.WALL:
        neighbors.append((row, col + 2))
    return neighbors


def has_adjacent_empty(grid: Grid, row: int, col: int) -> bool:
    """Check whether an edge neighbor of (row, col) is an empty cell."""
    size = len(grid)
    for d_row, d_col in NEIGHBOR_OFFSETS:
        n_row, n_col = row + d_row, col + d_col
        if 0 <= n_row < size and 0 <= n_col < size and grid[n_row][n_col] == Tile.EMPTY:
            return True
    return False


def carve_passages(grid: Grid, start: tuple[int, int], rng: random.Random) -> None:
    """Depth-first backtracking carve from ``start``.

    Produces a spanning tree over the sublattice reachable from the start cell.
    """
    stack = [start]

    while stack:
        row, col = stack[-1]

        candidates = get_unvisited_neighbors(grid, row, col)
        if candidates:
            n_row, n_col = candidates[get_random_number(0, len(candidates) - 1, rng)]

            # open the wall between both cells, then the neighbor itself
            grid[(row + n_row) // 2][(col + n_col) // 2] = Tile.EMPTY
            grid[n_row][n_col] = Tile.EMPTY
            stack.append((n_row, n_col))
        else:
            stack.pop()


def place_collectibles(
    grid: Grid,
    rng: Optional[random.Random] = None,
    probability: float = COLLECTIBLE_PROBABILITY,
) -> int:
    """Turn each empty cell into a collectible with the given probability.

    Returns:
        number of collectibles placed
    """
    if rng is None:
        rng = random.Random()

    placed = 0
    for row in grid:
        for col_index, value in enumerate(row):
            if value == Tile.EMPTY and rng.random() < probability:
                row[col_index] = Tile.COLLECTIBLE
                placed += 1
    return placed


def force_finish_link(grid: Grid, finish: tuple[int, int]) -> int:
    """Carve the shortest wall path from the finish to the nearest open cell.

    Returns:
        number of wall cells opened
    """
    size = len(grid)
    previous: dict[tuple[int, int], Optional[tuple[int, int]]] = {finish: None}
    queue = deque([finish])

    while queue:
        current = queue.popleft()
        for d_row, d_col in NEIGHBOR_OFFSETS:
            nxt = (current[0] + d_row, current[1] + d_col)
            if not (0 <= nxt[0] < size and 0 <= nxt[1] < size) or nxt in previous:
                continue
            if grid[nxt[0]][nxt[1]] != Tile.WALL:
                opened = 0
                cell = current
                while cell is not None and cell != finish:
                    grid[cell[0]][cell[1]] = Tile.EMPTY
                    opened += 1
                    cell = previous[cell]
                return opened
            previous[nxt] = current
            queue.append(nxt)
    return 0


def _carve_attempt(size: int, rng: random.Random) -> tuple[Grid, tuple[int, int]]:
    grid = new_grid(size)

    # start on the top row, finish on the bottom row, both away from the corners
    start = (0, get_random_number(1, size - 2, rng))
    grid[start[0]][start[1]] = Tile.PLAYER

    finish = (size - 1, get_random_number(1, size - 2, rng))
    grid[finish[0]][finish[1]] = Tile.FINISH

    carve_passages(grid, start, rng)
    return grid, finish


def generate_maze(
    size: int,
    rng: Optional[random.Random] = None,
    *,
    seed: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
    collectible_probability: float = COLLECTIBLE_PROBABILITY,
) -> Grid:
    """Generate a labyrinth with one player, one finish and scattered collectibles.

    A layout whose finish has no empty edge neighbor is thrown away and
    carved again. After ``max_attempts`` failed layouts the last one gets a
    forced link from the finish to the carved passages.

    Args:
        size: edge length (clamped up to the minimum size)
        rng: random source; a new ``random.Random(seed)`` when None
        seed: seed used when no rng is given
        max_attempts: upper bound on carving attempts
        collectible_probability: chance for each empty cell to hold a collectible

    Returns:
        the generated grid
    """
    size = clamp_size(size)
    if rng is None:
        rng = random.Random(seed)
    max_attempts = max(1, max_attempts)

    for attempt in range(1, max_attempts + 1):
        grid, finish = _carve_attempt(size, rng)
        if has_adjacent_empty(grid, *finish):
            break
        print(f"[Maze] finish unreachable, regenerating (attempt {attempt}/{max_attempts})")
    else:
        opened = force_finish_link(grid, finish)
        print(f"[Maze] no valid layout after {max_attempts} attempts, opened {opened} cell(s) to the finish")

    place_collectibles(grid, rng, collectible_probability)
    return grid
