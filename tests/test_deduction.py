from starbattle.constants import STATE_BLANK, STATE_STAR, STATE_MARKED
from starbattle.deduction import DeductionEngine, get_next_step, is_solved
from starbattle.puzzle_state import PuzzleState
from starbattle.validator import get_solution_error


def mark_all_except(state, indices, keep):
    for i in indices:
        if i not in keep:
            state.cells[i] = STATE_MARKED


# --- INDIVIDUAL RULES ---
def test_last_spaces_stars_a_single_cell_group(unique_state):
    step = get_next_step(unique_state)
    assert step.indices == [0]
    assert step.cell_type == STATE_STAR
    assert step.message == "The remaining stars in this group can only be placed here."


def test_adjacency_exclusion(band_state):
    band_state.cells[12] = STATE_STAR
    step = DeductionEngine(band_state).adjacency_exclusion()
    assert step.indices == [6, 7, 8, 11, 13, 16, 17, 18]
    assert step.other_indices == [12]
    assert step.cell_type == STATE_MARKED


def test_adjacency_exclusion_only_marks_blank_cells(band_state):
    band_state.cells[12] = STATE_STAR
    band_state.cells[6] = STATE_MARKED
    step = DeductionEngine(band_state).adjacency_exclusion()
    assert 6 not in step.indices


def test_no_stars_left(band_state):
    band_state.cells[12] = STATE_STAR
    step = DeductionEngine(band_state).no_stars_left()
    assert step.indices == [10, 11, 13, 14]
    assert step.other_indices == [12]
    assert step.message == "No more stars can be placed in this row."


def test_isolated_group_exclusion(band_state):
    mark_all_except(band_state, band_state.rows[0], keep=(0, 1))
    step = get_next_step(band_state)
    assert step.indices == [5]
    assert step.other_indices == [0, 1]
    assert step.cell_type == STATE_MARKED
    assert step.message.startswith("Stars cannot be placed here.")


def test_no_crowding(band_state):
    mark_all_except(band_state, band_state.rows[1], keep=(5, 6))
    step = DeductionEngine(band_state).no_crowding()
    assert step.indices == [0]
    assert step.other_indices == [5, 6]
    assert step.message.endswith("enough room left for the stars in this row.")


def test_block_exact_fit_single_cell(unique_state):
    engine = DeductionEngine(unique_state)
    step = engine.block_exact_fit()
    assert step.indices == [0]
    assert step.cell_type == STATE_STAR
    assert "there is only 1 block," in step.message
    assert step.message.endswith("so it must be a star.")


def test_block_exact_fit_shared_neighbours(band_state):
    mark_all_except(band_state, band_state.rows[0], keep=(0, 1))
    engine = DeductionEngine(band_state)
    step = engine.block_exact_fit()
    assert step.indices == [5, 6]
    assert step.other_indices == [0, 1]
    assert step.cell_type == STATE_MARKED
    assert [0, 1] in engine.confirmed_clusters


def test_block_exact_fit_on_a_pair_of_rows():
    # Two stars, one group per column. Neither row fits alone, but together
    # their six blanks form exactly four blocks.
    state = PuzzleState.from_region_grid([list(range(10)) for _ in range(10)], 2)
    mark_all_except(state, state.rows[0] + state.rows[1], keep=(0, 3, 6, 10, 13, 19))
    engine = DeductionEngine(state)
    step = engine.next_step()
    assert step.indices == [6]
    assert step.cell_type == STATE_STAR
    assert "this pair of rows, there are only 4 blocks," in step.message
    assert engine.confirmed_clusters == [[0, 10], [3, 13], [6], [19]]


def test_block_exact_fit_on_a_pair_of_columns():
    # The same layout turned on its side.
    state = PuzzleState.from_region_grid([[y] * 10 for y in range(10)], 2)
    mark_all_except(state, state.columns[0] + state.columns[1], keep=(0, 30, 60, 1, 31, 91))
    step = get_next_step(state)
    assert step.indices == [60]
    assert step.cell_type == STATE_STAR
    assert "this pair of columns, there are only 4 blocks," in step.message


def test_fill_lines():
    # Group 0 is column 0 plus the cell to the right of its bottom.
    grid = [
        [0, 1, 2, 3, 4],
        [0, 1, 2, 3, 4],
        [0, 1, 2, 3, 4],
        [0, 1, 2, 3, 4],
        [0, 0, 2, 3, 4],
    ]
    state = PuzzleState.from_region_grid(grid, 1)
    step = DeductionEngine(state).fill_lines()
    assert step.indices == [21]
    assert step.other_indices == [0, 5, 10, 15, 20]
    assert step.message == ("Stars cannot be placed in this group outside this column. "
                            "Otherwise, there will not be enough stars in this column.")


def test_fill_lines_finds_nothing_in_bands(band_state):
    assert DeductionEngine(band_state).fill_lines() is None


def test_fill_lines_over_four_rows():
    # Rows 1-4 hold exactly groups 0, 2, 3 and 4, so group 1 (cells 1 and 2)
    # owns the star of row 0.
    grid = [
        [0, 1, 1, 2, 2],
        [0, 0, 0, 2, 2],
        [0, 0, 3, 2, 2],
        [0, 3, 3, 4, 4],
        [3, 3, 3, 4, 4],
    ]
    state = PuzzleState.from_region_grid(grid, 1)
    state.cells[6] = state.cells[7] = STATE_MARKED
    step = get_next_step(state)
    assert step.indices == [0, 3, 4]
    assert step.cell_type == STATE_MARKED
    assert step.other_indices == [5, 8, 9] + list(range(10, 25))
    assert step.message == ("Stars cannot be placed in these groups outside these rows. "
                            "Otherwise, there will not be enough stars in these rows.")

    # Block-Exact-Fit confirms the same group as a block without acting on it,
    # which is enough for the confirmed block rule to reach the same cells.
    engine = DeductionEngine(state)
    assert engine.block_exact_fit() is None
    assert [1, 2] in engine.confirmed_clusters
    step = engine.confirmed_block_exclusion()
    assert step.indices == [0, 3, 4]
    assert step.other_indices == [1, 2]
    assert "this row" in step.message


def test_confirmed_block_exclusion_follows_an_exact_fit():
    # Rows 0 and 1 are down to two vertical blocks, one of them in column 0,
    # and no earlier rule has anything to say about it.
    grid = [
        [0, 0, 1, 1, 2, 2],
        [3, 0, 1, 1, 2, 2],
        [3, 0, 0, 1, 2, 2],
        [3, 4, 4, 1, 2, 2],
        [3, 4, 4, 1, 5, 5],
        [3, 3, 4, 1, 5, 5],
    ]
    state = PuzzleState.from_region_grid(grid, 1)
    mark_all_except(state, state.rows[0] + state.rows[1], keep=(0, 3, 6, 9))
    engine = DeductionEngine(state)
    step = engine.next_step()
    assert step.indices == [12, 18, 24, 30]
    assert step.other_indices == [0, 6]
    assert step.cell_type == STATE_MARKED
    assert step.message == ("The only remaining star in this column must be placed in this block. "
                            "Stars cannot be placed anywhere else in this column.")
    assert [3, 9] in engine.confirmed_clusters


def test_confirmed_block_exclusion(band_state):
    engine = DeductionEngine(band_state)
    engine.confirmed_clusters = [[0, 5]]
    step = engine.confirmed_block_exclusion()
    assert step.indices == [10, 15, 20]
    assert step.other_indices == [0, 5]
    assert "this column" in step.message


def test_lookahead_marks_a_contradicting_star(band_state):
    mark_all_except(band_state, band_state.rows[0], keep=(0, 1))
    mark_all_except(band_state, band_state.rows[1], keep=(5,))
    step = DeductionEngine(band_state, lookahead_depth=1).lookahead()
    assert step.indices == [0]
    assert step.cell_type == STATE_MARKED
    assert step.message == ("Placing a star here leads to a contradiction. "
                            "This row contains too few blank spaces.")


def test_unknown_when_nothing_applies():
    # A fully marked grid leaves no rule anything to act on.
    state = PuzzleState.from_walls(4, 1, [False] * 12, [False] * 12)
    state.cells = [STATE_MARKED] * 16
    step = get_next_step(state)
    assert step.indices is None
    assert step.message == "Unknown"


# --- ENGINE PROPERTIES ---
def test_rule_precedence_last_spaces_first(band_state):
    mark_all_except(band_state, band_state.rows[0], keep=(0, 1))
    mark_all_except(band_state, band_state.rows[4], keep=(24,))
    step = get_next_step(band_state)
    assert step.indices == [24]
    assert step.cell_type == STATE_STAR
    assert step.message == "The remaining stars in this row can only be placed here."


def test_get_next_step_is_idempotent(unique_state):
    unique_state.cells[0] = STATE_STAR
    before = list(unique_state.cells)
    first = get_next_step(unique_state)
    second = get_next_step(unique_state)
    assert first == second
    assert unique_state.cells == before


def test_steps_agree_with_the_unique_solution(unique_state, unique_stars):
    state = unique_state
    for _ in range(100):
        step = get_next_step(state)
        if not step.indices:
            break
        for i in step.indices:
            assert state.cells[i] == STATE_BLANK
            if step.cell_type == STATE_STAR:
                assert i in unique_stars
            else:
                assert i not in unique_stars
        state.apply_step(step)
        assert get_solution_error(state).is_empty()


def test_is_solved(unique_state, unique_solution):
    assert not is_solved(unique_state)
    assert is_solved(unique_state.copy(unique_solution))

    wrong = unique_state.copy(unique_solution)
    wrong.cells[0] = STATE_MARKED
    assert not is_solved(wrong)
