import random
from collections import deque

import pytest

from maismaze.core.maze import (
    Tile,
    count_tiles,
    find_tile,
    force_finish_link,
    generate_maze,
    get_random_number,
    get_unvisited_neighbors,
    grid_to_text,
    has_adjacent_empty,
    place_collectibles,
)
from maismaze.core.rules import MIN_LABYRINTH_SIZE


def open_cells(grid, exclude=()):
    return {
        (r, c)
        for r, row in enumerate(grid)
        for c, value in enumerate(row)
        if value != Tile.WALL and value not in exclude
    }


def is_tree(cells):
    if not cells:
        return False
    edges = 0
    for r, c in cells:
        if (r + 1, c) in cells:
            edges += 1
        if (r, c + 1) in cells:
            edges += 1

    start = next(iter(cells))
    seen = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for nxt in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
            if nxt in cells and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return len(seen) == len(cells) and edges == len(cells) - 1


def finish_has_open_neighbor(grid):
    fr, fc = find_tile(grid, Tile.FINISH)
    size = len(grid)
    for r, c in ((fr - 1, fc), (fr + 1, fc), (fr, fc - 1), (fr, fc + 1)):
        if 0 <= r < size and 0 <= c < size and grid[r][c] in (Tile.EMPTY, Tile.COLLECTIBLE):
            return True
    return False


def test_random_number_is_inclusive():
    rng = random.Random(7)
    draws = {get_random_number(1, 4, rng) for _ in range(500)}
    assert draws == {1, 2, 3, 4}


def test_random_number_without_rng():
    assert 3 <= get_random_number(3, 5) <= 5


@pytest.mark.parametrize("size", [10, 11, 12, 15, 20])
@pytest.mark.parametrize("seed", range(10))
def test_generated_maze_invariants(size, seed):
    grid = generate_maze(size, random.Random(seed))

    assert len(grid) == size
    assert all(len(row) == size for row in grid)
    assert count_tiles(grid, Tile.PLAYER) == 1
    assert count_tiles(grid, Tile.FINISH) == 1

    start_row, start_col = find_tile(grid, Tile.PLAYER)
    assert start_row == 0 and 1 <= start_col <= size - 2
    finish_row, finish_col = find_tile(grid, Tile.FINISH)
    assert finish_row == size - 1 and 1 <= finish_col <= size - 2

    assert finish_has_open_neighbor(grid)


@pytest.mark.parametrize("size", [10, 12, 16])
@pytest.mark.parametrize("seed", range(10))
def test_even_sized_maze_is_a_spanning_tree(size, seed):
    grid = generate_maze(size, random.Random(seed))
    assert is_tree(open_cells(grid))


@pytest.mark.parametrize("size", [11, 13])
@pytest.mark.parametrize("seed", range(10))
def test_odd_sized_maze_passages_form_a_tree(size, seed):
    grid = generate_maze(size, random.Random(seed))
    assert is_tree(open_cells(grid, exclude=(Tile.FINISH,)))


def test_small_sizes_are_clamped():
    grid = generate_maze(4, random.Random(3))
    assert len(grid) == MIN_LABYRINTH_SIZE


def test_same_seed_gives_same_maze():
    assert generate_maze(12, seed=99) == generate_maze(12, seed=99)


@pytest.mark.parametrize("seed", range(30))
def test_single_attempt_still_reaches_finish(seed):
    grid = generate_maze(10, random.Random(seed), max_attempts=1)
    assert finish_has_open_neighbor(grid)
    assert count_tiles(grid, Tile.PLAYER) == 1


def test_no_collectibles_when_probability_zero():
    grid = generate_maze(10, random.Random(5), collectible_probability=0.0)
    assert count_tiles(grid, Tile.COLLECTIBLE) == 0


def test_place_collectibles_only_touches_empty_cells():
    grid = [
        [1, 2, 1],
        [0, 0, 0],
        [1, 3, 1],
    ]
    placed = place_collectibles(grid, random.Random(0), probability=1.0)
    assert placed == 3
    assert grid == [
        [1, 2, 1],
        [6, 6, 6],
        [1, 3, 1],
    ]


def test_unvisited_neighbors_all_four():
    grid = [[Tile.WALL] * 5 for _ in range(5)]
    grid[2][2] = Tile.EMPTY
    assert sorted(get_unvisited_neighbors(grid, 2, 2)) == [(0, 2), (2, 0), (2, 4), (4, 2)]


def test_unvisited_neighbors_none_left():
    grid = [[Tile.EMPTY] * 5 for _ in range(5)]
    assert get_unvisited_neighbors(grid, 2, 2) == []


def test_has_adjacent_empty():
    grid = [
        [1, 1, 1, 1, 1],
        [1, 1, 0, 1, 1],
        [1, 0, 0, 1, 1],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
    ]
    assert has_adjacent_empty(grid, 2, 2)
    assert not has_adjacent_empty(grid, 4, 4)


def test_force_finish_link_opens_shortest_path():
    grid = [
        [1, 1, 2, 1, 1],
        [1, 1, 0, 1, 1],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
        [1, 1, 3, 1, 1],
    ]
    opened = force_finish_link(grid, (4, 2))
    assert opened == 2
    assert grid[3][2] == Tile.EMPTY and grid[2][2] == Tile.EMPTY
    assert has_adjacent_empty(grid, 4, 2)


def test_grid_to_text():
    assert grid_to_text([[1, 2], [0, 3]]) == "12\n03"
