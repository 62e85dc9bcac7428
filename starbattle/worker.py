"""**********************************************************************************
 * Title: worker.py
 *
 * @version 1.3.0
 * -------------------------------------------------------------------------------
 * Description:
 * Runs solves outside the calling process. SolveJob isolates a single solve
 * in a one-process multiprocessing pool so an interactive caller (the HTTP
 * API) can wait with a timeout and abandon a runaway search by terminating
 * the worker. batch_solve distributes many SBN puzzles across a pool of
 * worker processes and reports progress with a tqdm progress bar.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
import multiprocessing

from tqdm import tqdm

from starbattle.puzzle_state import PuzzleState
from starbattle.sbn import decode_sbn
from starbattle.solver import BacktrackingSolver


# --- WORKER FUNCTIONS ---
# These run inside the worker processes and must stay importable at module level.
def solve_puzzle_data(puzzle_data):
    """
    Solves one puzzle given in the flat puzzle structure.

    :param dict puzzle_data: The puzzle, as accepted by PuzzleState.from_puzzle_data.
    :returns: A tuple of the solved cells (or None) and the solver stats.
    :rtype: tuple[list[int] | None, dict]
    """
    solver = BacktrackingSolver(PuzzleState.from_puzzle_data(puzzle_data))
    cells = solver.solve()
    return cells, solver.stats()


def solve_sbn_worker(sbn):
    """
    Decodes and solves a single SBN puzzle for batch_solve.

    :param str sbn: The SBN string.
    :returns: A result dictionary with 'sbn', 'status', 'cells' and 'stats'.
    :rtype: dict
    """
    try:
        cells, stats = solve_puzzle_data(decode_sbn(sbn))
    except ValueError as e:
        logging.warning(f"Skipping invalid puzzle {sbn!r}: {e}")
        return {'sbn': sbn, 'status': 'invalid', 'cells': None, 'stats': {'error': str(e)}}
    status = 'solved' if cells is not None else 'unsolvable'
    return {'sbn': sbn, 'status': status, 'cells': cells, 'stats': stats}


# --- SINGLE SOLVE ISOLATION ---
class SolveJob:
    """A background solve running in its own worker process."""

    def __init__(self, puzzle_data):
        """
        Starts solving immediately.

        :param dict puzzle_data: The puzzle, as accepted by PuzzleState.from_puzzle_data.
        """
        self.pool = multiprocessing.Pool(processes=1)
        self.async_result = self.pool.apply_async(solve_puzzle_data, (puzzle_data,))
        self.pool.close()
        logging.info("Started background solve.")

    def wait(self, timeout=None):
        """
        Blocks until the solve finishes or `timeout` seconds pass.

        :returns: True if the solve has finished.
        :rtype: bool
        """
        self.async_result.wait(timeout)
        return self.async_result.ready()

    def result(self):
        """
        Returns the outcome of a finished solve, re-raising any worker exception.

        :returns: The solved cells (or None) and the solver stats.
        :rtype: tuple[list[int] | None, dict]
        """
        try:
            cells, stats = self.async_result.get()
        finally:
            self.pool.join()
        logging.info(f"Background solve finished: {'solved' if cells is not None else 'no solution'}.")
        return cells, stats

    def cancel(self):
        """Abandons the solve by terminating its worker process."""
        logging.warning("Terminating background solve.")
        self.pool.terminate()
        self.pool.join()


# --- BATCH SOLVING ---
def batch_solve(puzzles, workers=None):
    """
    Solves many SBN puzzles in parallel.

    :param list[str] puzzles: The SBN strings to solve.
    :param int | None workers: Number of worker processes; defaults to the CPU count.
    :returns: One result dictionary per puzzle, in input order.
    :rtype: list[dict]
    """
    if not puzzles:
        return []
    with multiprocessing.Pool(processes=workers) as pool:
        results = list(tqdm(pool.imap(solve_sbn_worker, puzzles), total=len(puzzles), desc="Solving Puzzles"))
    solved = sum(1 for r in results if r['status'] == 'solved')
    logging.info(f"Batch finished: {solved}/{len(results)} puzzles solved.")
    return results
