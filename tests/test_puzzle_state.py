import pytest

from starbattle.constants import STATE_BLANK, STATE_STAR, STATE_MARKED
from starbattle.puzzle_state import PuzzleState, PuzzleStateError, PuzzleStep
from starbattle.regions import build_rows, build_columns


def test_from_region_grid_derives_partitions(unique_state):
    assert unique_state.size == 5
    assert unique_state.star_count == 1
    assert unique_state.cells == [STATE_BLANK] * 25
    assert len(unique_state.groups) == 5
    assert unique_state.region_grid()[0][0] != unique_state.region_grid()[0][1]


def test_puzzle_data_round_trip(unique_state):
    unique_state.cells[3] = STATE_STAR
    data = unique_state.to_puzzle_data()
    assert set(data) == {'size', 'starCount', 'cells', 'horizontalWalls', 'verticalWalls'}

    restored = PuzzleState.from_puzzle_data(data)
    assert restored.cells == unique_state.cells
    assert restored.groups == unique_state.groups


def test_copy_does_not_alias_cells(unique_state):
    clone = unique_state.copy()
    clone.cells[0] = STATE_STAR
    assert unique_state.cells[0] == STATE_BLANK
    assert clone.groups is unique_state.groups


def test_apply_step(band_state):
    band_state.apply_step(PuzzleStep(indices=[1, 2], cell_type=STATE_MARKED))
    assert band_state.cells[:3] == [STATE_BLANK, STATE_MARKED, STATE_MARKED]


def test_remaining_stars(band_state):
    band_state.cells[0] = STATE_STAR
    assert band_state.remaining_stars(band_state.rows[0]) == 0
    assert band_state.remaining_stars(band_state.rows[0] + band_state.rows[1], 2) == 1


@pytest.mark.parametrize("data", [
    {'size': 5, 'starCount': 1, 'horizontalWalls': [False] * 19, 'verticalWalls': [False] * 20},
    {'size': 0, 'starCount': 1, 'horizontalWalls': [], 'verticalWalls': []},
    {'size': 2, 'starCount': 0, 'horizontalWalls': [False] * 2, 'verticalWalls': [False] * 2},
    {'size': 2, 'starCount': 1, 'cells': [0, 0, 0], 'horizontalWalls': [False] * 2, 'verticalWalls': [False] * 2},
    {'size': 2, 'starCount': 1, 'cells': [0, 0, 0, 7], 'horizontalWalls': [False] * 2, 'verticalWalls': [False] * 2},
    {'size': 2, 'starCount': 1, 'cells': [[0], 0, 0, 0], 'horizontalWalls': [False] * 2, 'verticalWalls': [False] * 2},
    {'size': 2, 'starCount': 1, 'cells': 5, 'horizontalWalls': [False] * 2, 'verticalWalls': [False] * 2},
    {'size': 2, 'starCount': 1, 'horizontalWalls': 3, 'verticalWalls': [False] * 2},
    {'starCount': 1, 'horizontalWalls': [], 'verticalWalls': []},
])
def test_malformed_puzzle_data_is_rejected(data):
    with pytest.raises(PuzzleStateError):
        PuzzleState.from_puzzle_data(data)


def test_malformed_partitions_are_rejected():
    rows, columns = build_rows(2), build_columns(2)
    cells = [STATE_BLANK] * 4
    with pytest.raises(PuzzleStateError):
        PuzzleState(cells, 2, 1, [[0, 1], [2, 2]], columns, [[0, 1, 2, 3]], [0] * 4)
    with pytest.raises(PuzzleStateError):
        PuzzleState(cells, 2, 1, rows, columns, [[0, 1], [2]], [0, 0, 1, 1])
    with pytest.raises(PuzzleStateError):
        PuzzleState(cells, 2, 1, rows, columns, [[0, 1], [2, 3]], [0, 0, 0, 1])


def test_region_grid_must_be_square(unique_regions):
    with pytest.raises(PuzzleStateError):
        PuzzleState.from_region_grid([row[:4] for row in unique_regions], 1)


def test_puzzle_step_serialization():
    step = PuzzleStep(indices=[4], other_indices=[0, 1], cell_type=STATE_MARKED, message="Because.")
    assert step.to_dict() == {'indices': [4], 'otherIndices': [0, 1], 'type': STATE_MARKED, 'message': "Because."}
    assert PuzzleStep.from_dict(step.to_dict()) == step

    assert PuzzleStep().to_dict() == {}
    assert PuzzleStep().is_empty()
    assert not PuzzleStep(message="Unknown").is_empty()
