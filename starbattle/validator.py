"""**********************************************************************************
 * Title: validator.py
 *
 * @version 1.1.0
 * -------------------------------------------------------------------------------
 * Description:
 * Checks a (possibly partial) placement against the Star Battle rules and
 * reports the first violation found. A violation is returned as a
 * PuzzleStep citing the offending cells; an empty step means nothing is
 * wrong so far. The same check is the contradiction detector used by the
 * backtracking solver and the lookahead deduction mode.
 **********************************************************************************"""

from starbattle.constants import (
    STATE_STAR, MSG_ADJACENT_STARS, MSG_TOO_MANY_STARS, MSG_TOO_FEW_BLANKS
)
from starbattle.geometry import neighbours
from starbattle.puzzle_state import PuzzleStep


def find_adjacent_stars(state):
    """
    Finds the first pair of stars that touch each other.

    :param PuzzleState state: The puzzle to inspect.
    :returns: The two cell indices, or None if no stars touch.
    :rtype: tuple[int, int] | None
    """
    cells = state.cells
    for i, cell in enumerate(cells):
        if cell != STATE_STAR:
            continue
        for n in neighbours(state.size, i):
            if cells[n] == STATE_STAR:
                return i, n
    return None


def get_solution_error(state):
    """
    Returns the first rule violation in `state`.

    Checks are made in a fixed order: touching stars, then any row, column or
    group holding too many stars, then any row, column or group without enough
    blank cells left for the stars it still needs.

    :param PuzzleState state: The puzzle to validate. Not modified.
    :returns: A step describing the violation, or an empty step.
    :rtype: PuzzleStep
    """
    pair = find_adjacent_stars(state)
    if pair:
        return PuzzleStep(indices=list(pair), message=MSG_ADJACENT_STARS)

    for name, partition in state.partitions():
        if state.count_stars(partition) > state.star_count:
            return PuzzleStep(indices=partition, message=MSG_TOO_MANY_STARS.format(name=name))

    for name, partition in state.partitions():
        if state.remaining_stars(partition) > len(state.blank_cells(partition)):
            return PuzzleStep(indices=partition, message=MSG_TOO_FEW_BLANKS.format(name=name))

    return PuzzleStep()
