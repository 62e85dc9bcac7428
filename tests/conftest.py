import pytest

from starbattle.puzzle_state import PuzzleState

# A 5x5, one-star puzzle with a single solution.
UNIQUE_REGIONS = [
    [0, 4, 4, 4, 4],
    [4, 4, 1, 4, 4],
    [4, 4, 1, 4, 2],
    [4, 3, 4, 4, 2],
    [4, 3, 4, 4, 4],
]
UNIQUE_SOLUTION_STARS = {0, 7, 14, 16, 23}

# Every row is its own group.
BAND_REGIONS = [[y] * 5 for y in range(5)]


def solution_cells(stars, size=5):
    return [1 if i in stars else 2 for i in range(size * size)]


@pytest.fixture
def unique_state():
    return PuzzleState.from_region_grid(UNIQUE_REGIONS, 1)


@pytest.fixture
def unique_solution():
    return solution_cells(UNIQUE_SOLUTION_STARS)


@pytest.fixture
def band_state():
    return PuzzleState.from_region_grid(BAND_REGIONS, 1)


@pytest.fixture
def unique_regions():
    return [list(row) for row in UNIQUE_REGIONS]


@pytest.fixture
def unique_stars():
    return set(UNIQUE_SOLUTION_STARS)
