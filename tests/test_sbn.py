import pytest

from starbattle.constants import STATE_BLANK, STATE_STAR, STATE_MARKED
from starbattle.puzzle_state import PuzzleState
from starbattle.sbn import decode_sbn, encode_sbn, encode_annotations, decode_annotations, SBNDecodeError


def test_decode_open_grid():
    data = decode_sbn("551W0000000")
    assert data['size'] == 5
    assert data['starCount'] == 1
    assert data['cells'] == [STATE_BLANK] * 25
    assert data['horizontalWalls'] == [False] * 20
    assert data['verticalWalls'] == [False] * 20
    assert len(PuzzleState.from_puzzle_data(data).groups) == 1


def test_decode_fully_walled_grid():
    data = decode_sbn("551W_______")
    assert all(data['horizontalWalls']) and all(data['verticalWalls'])
    assert len(PuzzleState.from_puzzle_data(data).groups) == 25


def test_encode_then_decode_keeps_layout_and_cells(unique_state):
    unique_state.cells[0] = STATE_STAR
    unique_state.cells[1] = STATE_MARKED
    sbn = encode_sbn(unique_state.to_puzzle_data())
    assert sbn.startswith("551e")

    restored = PuzzleState.from_puzzle_data(decode_sbn(sbn))
    assert restored.groups == unique_state.groups
    assert restored.cells == unique_state.cells


def test_plain_layout_has_no_annotations(unique_state):
    sbn = encode_sbn(unique_state.to_puzzle_data())
    assert sbn.startswith("551W")
    assert len(sbn) == 4 + 7


def test_annotations_with_leading_digit():
    cells = [STATE_STAR] + [STATE_BLANK] * 98 + [STATE_MARKED]
    tail = encode_annotations(cells, 10)
    assert tail[0] == "2"
    assert len(tail) == 1 + 33
    assert decode_annotations(tail, 10) == cells


@pytest.mark.parametrize("sbn", ["55", "ZZ1W0000000", "550W0000000", "551X0000000", "551W00*0000"])
def test_invalid_sbn(sbn):
    with pytest.raises(SBNDecodeError):
        decode_sbn(sbn)


def test_unencodable_size():
    data = PuzzleState.from_walls(4, 1, [False] * 12, [False] * 12).to_puzzle_data()
    with pytest.raises(ValueError):
        encode_sbn(data)
