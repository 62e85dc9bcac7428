"""**********************************************************************************
 * Title: deduction.py
 *
 * @version 3.2.0
 * -------------------------------------------------------------------------------
 * Description:
 * The logical core of the Star Battle engine. DeductionEngine applies an
 * ordered battery of deduction rules to a PuzzleState and returns the first
 * step one of them finds: the cells to star or mark, the cells that justify
 * it and a message explaining why. The same steps drive the hint feature and
 * the unit propagation of the backtracking solver.
 *
 * Rules are tried in a fixed priority order, cheap and obvious rules first,
 * the combinatorial block rules last:
 *
 *   1. Last-Spaces               - the remaining blanks must all be stars
 *   2. Adjacency-Exclusion       - cells touching a star are marked
 *   3. No-Stars-Left             - blanks in a full row/column/group are marked
 *   4. Isolated-Group-Exclusion  - a star here would cover a group's last room
 *   5. No-Crowding               - a star here would starve a nearby partition
 *   6. Block-Exact-Fit           - 2x2 blocks match the stars still needed
 *   7. Fill-Lines                - N lines covered by exactly N groups
 *   8. Confirmed-Block-Exclusion - a confirmed block takes the last star
 *
 * When nothing applies the engine can optionally look ahead: each candidate
 * star is tried on a scratch copy and marked if the rules quickly lead to a
 * contradiction. Otherwise the step carries only the message "Unknown".
 *
 * The engine never modifies the state it is given.
 **********************************************************************************"""

# --- IMPORTS ---
import logging

from starbattle.constants import (
    STATE_BLANK, STATE_STAR, STATE_MARKED, ROW, COLUMN, GROUP, DEFAULT_LOOKAHEAD_DEPTH,
    MSG_LAST_SPACES, MSG_NEIGHBOURS_STAR, MSG_NO_STARS_LEFT, MSG_ISOLATED_GROUP,
    MSG_NO_CROWDING, MSG_BLOCK_BASE, MSG_BLOCK_SINGLE, MSG_BLOCK_SHARED, MSG_FILL_LINES,
    MSG_CONFIRMED_BLOCK, MSG_LOOKAHEAD, MSG_UNKNOWN
)
from starbattle.geometry import neighbours, shared_neighbours, are_adjacent
from starbattle.partitioner import partition_cells
from starbattle.puzzle_state import PuzzleStep
from starbattle.validator import find_adjacent_stars, get_solution_error

ROW_PAIR = "pair of rows"
COLUMN_PAIR = "pair of columns"


# --- ENGINE ---
class DeductionEngine:
    """Applies the ordered rule battery to a single puzzle state."""

    def __init__(self, state, lookahead_depth=DEFAULT_LOOKAHEAD_DEPTH):
        """
        :param PuzzleState state: The puzzle to reason about. Read only.
        :param int lookahead_depth: Steps tried per hypothetical star; 0 disables lookahead.
        """
        self.state = state
        self.size = state.size
        self.cells = state.cells
        self.lookahead_depth = lookahead_depth
        # Clusters proven to hold exactly one star by Block-Exact-Fit.
        self.confirmed_clusters = []

    def rules(self):
        """Returns the rule battery as (name, method) pairs in priority order."""
        return (
            ("Last-Spaces", self.last_spaces),
            ("Adjacency-Exclusion", self.adjacency_exclusion),
            ("No-Stars-Left", self.no_stars_left),
            ("Isolated-Group-Exclusion", self.isolated_group_exclusion),
            ("No-Crowding", self.no_crowding),
            ("Block-Exact-Fit", self.block_exact_fit),
            ("Fill-Lines", self.fill_lines),
            ("Confirmed-Block-Exclusion", self.confirmed_block_exclusion),
        )

    def next_step(self):
        """
        Returns the step produced by the highest priority rule that applies.

        :returns: The deduced step, or a step with only the message "Unknown".
        :rtype: PuzzleStep
        """
        self.confirmed_clusters = []
        for name, rule in self.rules():
            step = rule()
            if step:
                logging.debug(f"{name}: {len(step.indices)} cell(s) -> state {step.cell_type}")
                return step

        if self.lookahead_depth > 0:
            step = self.lookahead()
            if step:
                logging.debug(f"Lookahead: cell {step.indices[0]} leads to a contradiction")
                return step
        return PuzzleStep(message=MSG_UNKNOWN)

    # --- HELPERS ---
    def can_host_star(self, i):
        """
        True when cell `i` is blank, touches no star and its row, column and
        group still need stars.
        """
        state = self.state
        if self.cells[i] != STATE_BLANK:
            return False
        if any(self.cells[n] == STATE_STAR for n in neighbours(self.size, i)):
            return False
        row = state.rows[i // self.size]
        column = state.columns[i % self.size]
        group = state.groups[state.cell_to_group[i]]
        return all(state.remaining_stars(p) > 0 for p in (row, column, group))

    def window_scopes(self):
        """Yields (name, cells, quota) for every pair of adjacent rows, then columns."""
        state, quota = self.state, 2 * self.state.star_count
        for y in range(self.size - 1):
            yield ROW_PAIR, state.rows[y] + state.rows[y + 1], quota
        for x in range(self.size - 1):
            yield COLUMN_PAIR, state.columns[x] + state.columns[x + 1], quota

    def partitions_touching(self, cells):
        """Yields (name, partition) for each row, column and group containing any of `cells`."""
        state = self.state
        for y in sorted({i // self.size for i in cells}):
            yield ROW, state.rows[y]
        for x in sorted({i % self.size for i in cells}):
            yield COLUMN, state.columns[x]
        for g in sorted({state.cell_to_group[i] for i in cells}):
            yield GROUP, state.groups[g]

    # --- RULE 1 ---
    def last_spaces(self):
        """Every blank cell of a partition must be a star when blanks equal the stars still needed."""
        state = self.state
        for name, partition in state.partitions():
            blanks = state.blank_cells(partition)
            if not blanks or state.remaining_stars(partition) != len(blanks):
                continue
            if not all(self.can_host_star(i) for i in blanks):
                continue
            if any(are_adjacent(self.size, a, b) for a in blanks for b in blanks):
                continue
            return PuzzleStep(
                indices=blanks,
                cell_type=STATE_STAR,
                message=MSG_LAST_SPACES.format(name=name)
            )
        return None

    # --- RULE 2 ---
    def adjacency_exclusion(self):
        for i, cell in enumerate(self.cells):
            if cell != STATE_STAR:
                continue
            indices = [n for n in neighbours(self.size, i) if self.cells[n] == STATE_BLANK]
            if indices:
                return PuzzleStep(indices=indices, other_indices=[i], cell_type=STATE_MARKED,
                                  message=MSG_NEIGHBOURS_STAR)
        return None

    # --- RULE 3 ---
    def no_stars_left(self):
        state = self.state
        for name, partition in state.partitions():
            if state.remaining_stars(partition) > 0:
                continue
            blanks = state.blank_cells(partition)
            if blanks:
                stars = [i for i in partition if self.cells[i] == STATE_STAR]
                return PuzzleStep(indices=blanks, other_indices=stars, cell_type=STATE_MARKED,
                                  message=MSG_NO_STARS_LEFT.format(name=name))
        return None

    # --- RULE 4 ---
    def isolated_group_exclusion(self):
        """
        Marks a cell whose neighbours include every blank cell of a group that
        still needs stars: a star there would leave the group no room at all.
        """
        state = self.state
        open_groups = []
        for group in state.groups:
            blanks = state.blank_cells(group)
            if blanks and state.remaining_stars(group) > 0:
                open_groups.append(blanks)

        for i in range(len(self.cells)):
            if not self.can_host_star(i):
                continue
            around = neighbours(self.size, i)
            for blanks in open_groups:
                if all(b in around for b in blanks):
                    return PuzzleStep(indices=[i], other_indices=blanks, cell_type=STATE_MARKED,
                                      message=MSG_ISOLATED_GROUP)
        return None

    # --- RULE 5 ---
    def no_crowding(self):
        """
        Marks a cell when a star there would leave some row, column or group
        with fewer 2x2 blocks of room than the stars it still needs.
        """
        state = self.state
        for i in range(len(self.cells)):
            if not self.can_host_star(i):
                continue
            covered = set(neighbours(self.size, i))
            covered.add(i)
            for name, partition in self.partitions_touching(covered):
                need = state.remaining_stars(partition) - (1 if i in partition else 0)
                if need <= 0:
                    continue
                blanks = state.blank_cells(partition)
                left = [b for b in blanks if b not in covered]
                if len(partition_cells(self.size, left)) < need:
                    return PuzzleStep(indices=[i], other_indices=blanks, cell_type=STATE_MARKED,
                                      message=MSG_NO_CROWDING.format(name=name))
        return None

    # --- RULE 6 ---
    def block_exact_fit(self):
        """
        When the blanks of a partition split into exactly as many 2x2 blocks as
        stars still needed, every block holds exactly one star. A single-cell
        block is therefore a star, and any cell touching every cell of a larger
        block cannot be a star. Each such block is remembered as confirmed.
        """
        state = self.state
        scopes = [(GROUP, g, state.star_count) for g in state.groups]
        scopes += [(ROW, r, state.star_count) for r in state.rows]
        scopes += [(COLUMN, c, state.star_count) for c in state.columns]
        scopes += list(self.window_scopes())

        for name, partition, quota in scopes:
            need = state.remaining_stars(partition, quota)
            if need <= 0:
                continue
            clusters = partition_cells(self.size, state.blank_cells(partition))
            if len(clusters) != need:
                continue
            self.confirmed_clusters.extend(clusters)

            base_message = MSG_BLOCK_BASE.format(
                name=name, verb='are' if need > 1 else 'is', count=need, plural='s' if need > 1 else ''
            )
            for cluster in clusters:
                if len(cluster) == 1:
                    if self.can_host_star(cluster[0]):
                        return PuzzleStep(indices=cluster, cell_type=STATE_STAR,
                                          message=base_message + MSG_BLOCK_SINGLE)
                    continue
                indices = [n for n in shared_neighbours(self.size, cluster) if self.cells[n] == STATE_BLANK]
                if indices:
                    return PuzzleStep(indices=indices, other_indices=cluster, cell_type=STATE_MARKED,
                                      message=base_message + MSG_BLOCK_SHARED)
        return None

    # --- RULE 7 ---
    def fill_lines(self):
        """
        If the unmarked cells of N adjacent rows (or columns) belong to exactly
        N groups, those groups must place all their stars inside these lines.

        For example, if all the cells in 2 adjacent rows are in 2 groups, the
        stars in those groups must be in those rows. The rest of the cells in
        those groups cannot contain stars.
        """
        state = self.state
        for count in range(1, self.size + 1):
            for start in range(0, self.size - count + 1):
                step = self._fill_lines_window(ROW, state.rows[start:start + count])
                if step:
                    return step
                step = self._fill_lines_window(COLUMN, state.columns[start:start + count])
                if step:
                    return step
        return None

    def _fill_lines_window(self, name, lines):
        state = self.state
        line_cells = [i for line in lines for i in line if self.cells[i] != STATE_MARKED]
        group_ids = []
        for i in line_cells:
            g = state.cell_to_group[i]
            if g not in group_ids:
                group_ids.append(g)
                if len(group_ids) > len(lines):
                    return None
        if len(group_ids) != len(lines):
            return None

        window = set(line_cells)
        indices = [
            i for g in group_ids for i in state.groups[g]
            if i not in window and self.cells[i] == STATE_BLANK
        ]
        if not indices:
            return None
        groups_text = "these groups" if len(lines) > 1 else "this group"
        lines_text = f"these {name}s" if len(lines) > 1 else f"this {name}"
        return PuzzleStep(indices=indices, other_indices=line_cells, cell_type=STATE_MARKED,
                          message=MSG_FILL_LINES.format(groups=groups_text, lines=lines_text))

    # --- RULE 8 ---
    def confirmed_block_exclusion(self):
        """
        A partition needing exactly one more star that fully contains a
        confirmed block must place that star in the block.
        """
        if not self.confirmed_clusters:
            return None
        state = self.state
        scopes = [(name, p, state.star_count) for name, p in state.partitions()]
        scopes += list(self.window_scopes())

        for name, partition, quota in scopes:
            if state.remaining_stars(partition, quota) != 1:
                continue
            members = set(partition)
            for cluster in self.confirmed_clusters:
                if not all(i in members for i in cluster):
                    continue
                indices = [i for i in partition if self.cells[i] == STATE_BLANK and i not in cluster]
                if indices:
                    return PuzzleStep(indices=indices, other_indices=cluster, cell_type=STATE_MARKED,
                                      message=MSG_CONFIRMED_BLOCK.format(name=name))
        return None

    # --- LOOKAHEAD ---
    def lookahead(self):
        """
        Tries each possible star on a scratch copy and marks the first one
        that leads to a rule violation within `lookahead_depth` steps.
        """
        for i in range(len(self.cells)):
            if not self.can_host_star(i):
                continue
            trial = self.state.copy()
            trial.cells[i] = STATE_STAR
            error = self._probe(trial)
            if error:
                return PuzzleStep(indices=[i], other_indices=error.indices, cell_type=STATE_MARKED,
                                  message=MSG_LOOKAHEAD.format(reason=error.message))
        return None

    def _probe(self, trial):
        for _ in range(self.lookahead_depth):
            error = get_solution_error(trial)
            if not error.is_empty():
                return error
            step = DeductionEngine(trial).next_step()
            if not step.indices:
                return None
            trial.apply_step(step)
        error = get_solution_error(trial)
        return None if error.is_empty() else error


# --- PUBLIC API ---
def get_next_step(state, lookahead_depth=DEFAULT_LOOKAHEAD_DEPTH):
    """
    Computes one logical next step for `state`.

    :param PuzzleState state: The puzzle to reason about. Not modified.
    :param int lookahead_depth: Steps tried per hypothetical star; 0 disables lookahead.
    :returns: The deduced step, or a step carrying only the message "Unknown".
    :rtype: PuzzleStep
    """
    return DeductionEngine(state, lookahead_depth).next_step()


def is_solved(state):
    """True when no stars touch and every row, column and group has exactly the required stars."""
    if find_adjacent_stars(state):
        return False
    return all(state.count_stars(p) == state.star_count for _, p in state.partitions())
