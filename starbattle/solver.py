"""**********************************************************************************
 * Title: solver.py
 *
 * @version 2.1.0
 * -------------------------------------------------------------------------------
 * Description:
 * A logic-directed backtracking solver for Star Battle. Every node of the
 * search first saturates the grid with the deduction engine (the equivalent
 * of unit propagation) and only guesses when the rules stall. Guesses are
 * made in row-major order from a resumable cursor: a cell is tried as a star
 * and, if that branch fails, marked instead before moving on.
 *
 * A branch is abandoned as soon as the validator reports a violation, or
 * when a row, column or group lies entirely behind the cursor without its
 * full quota of stars, since no later guess can reach it.
 *
 * The solver works on its own copy of the cells; the caller's state is never
 * modified.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
import time

from starbattle.constants import STATE_STAR, STATE_MARKED
from starbattle.deduction import DeductionEngine, get_next_step, is_solved
from starbattle.geometry import coords
from starbattle.validator import get_solution_error


# --- HELPER FUNCTIONS ---
def format_duration(seconds):
    """
    Formats a time duration in seconds into a more human-readable string.

    :param float seconds: The duration in seconds to format.
    :returns: The formatted time string (e.g., "1.234 s", "5.67 ms", "1 min 30.00 s").
    :rtype: str
    """
    if seconds >= 60: return f"{int(seconds//60)} min {seconds%60:.2f} s"
    if seconds >= 1: return f"{seconds:.3f} s"
    return f"{seconds*1000:.2f} ms"


def debug_print(message, depth=0):
    """Logs a debug message indented by the current search depth."""
    logging.debug("  " * depth + message)


# --- SOLVER CLASS ---
class BacktrackingSolver:
    """Finds one complete solution for a puzzle state, or proves there is none."""

    def __init__(self, state):
        """
        :param PuzzleState state: The puzzle to solve. Copied, never modified.
        """
        self.state = state.copy()
        self.guesses = 0
        self.backtracks = 0
        self.duration = 0.0

        # Partitions keyed by their highest cell index: once the cursor passes
        # that index, no further guess can add a star to them.
        self.closing = {}
        for _, partition in self.state.partitions():
            self.closing.setdefault(max(partition), []).append(partition)

    def solve(self):
        """
        Runs the search.

        :returns: The solved cells, or None if the puzzle has no solution.
        :rtype: list[int] | None
        """
        start_time = time.time()
        cells = self._search(self.state.copy(), 0, 0)
        self.duration = time.time() - start_time

        outcome = "Solved" if cells is not None else "No solution"
        logging.info(f"{outcome} after {self.guesses} guesses and {self.backtracks} backtracks "
                     f"in {format_duration(self.duration)}.")
        return cells

    def stats(self):
        return {'guesses': self.guesses, 'backtracks': self.backtracks,
                'time': format_duration(self.duration)}

    # --- SEARCH ---
    def _saturate(self, work, depth):
        """Applies deduction steps until none remain. Returns False on a contradiction."""
        while True:
            error = get_solution_error(work)
            if not error.is_empty():
                debug_print(f"Contradiction: {error.message}", depth)
                return False
            step = get_next_step(work)
            if not step.indices:
                return True
            work.apply_step(step)

    def _is_pruned(self, work, cursor):
        """True when a partition lying entirely before `cursor` is short of stars."""
        for last in range(cursor):
            for partition in self.closing.get(last, ()):
                if work.remaining_stars(partition) > 0:
                    return True
        return False

    def _closes_short(self, work, i):
        """True when passing cell `i` leaves a partition short of stars."""
        return any(work.remaining_stars(p) > 0 for p in self.closing.get(i, ()))

    def _search(self, work, cursor, depth):
        if not self._saturate(work, depth):
            return None
        if is_solved(work):
            return list(work.cells)
        if self._is_pruned(work, cursor):
            debug_print(f"Pruned: a finished partition lacks stars before cell {cursor}.", depth)
            return None

        i = cursor
        while i < len(work.cells):
            if DeductionEngine(work).can_host_star(i):
                self.guesses += 1
                x, y = coords(i, work.size)
                debug_print(f"Guess: star at ({x}, {y})", depth)

                trial = work.copy()
                trial.cells[i] = STATE_STAR
                result = self._search(trial, i + 1, depth + 1)
                if result is not None:
                    return result

                self.backtracks += 1
                debug_print(f"Backtrack: ({x}, {y}) cannot be a star", depth)
                work.cells[i] = STATE_MARKED
                if not self._saturate(work, depth):
                    return None
                if is_solved(work):
                    return list(work.cells)
                if self._is_pruned(work, i):
                    debug_print(f"Pruned: a finished partition lacks stars before cell {i}.", depth)
                    return None

            if self._closes_short(work, i):
                debug_print(f"Pruned: a partition ending at cell {i} lacks stars.", depth)
                return None
            i += 1
        return None


# --- PUBLIC API ---
def find_solution(state):
    """
    Solves `state` by deduction and backtracking.

    :param PuzzleState state: The puzzle to solve. Not modified.
    :returns: The complete list of cell states, or None if the puzzle is unsolvable.
    :rtype: list[int] | None
    """
    return BacktrackingSolver(state).solve()
