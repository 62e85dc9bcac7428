"""**********************************************************************************
 * Title: z3_solver.py
 *
 * @version 2.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * An independent reference solver built on the Z3 theorem prover. The rules
 * of the game (stars per row, column and group, and no adjacent stars) are
 * translated into pseudo-boolean constraints over one Bool per cell. Asking
 * Z3 for a second model after blocking the first one proves whether a puzzle
 * has a unique solution, which is how the command-line tool, the HTTP API and
 * the test-suite cross-check the deduction engine and the backtracking solver.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
import time

from z3 import Solver, Bool, PbEq, Implies, And, Not, Or, sat, is_true

from starbattle.constants import STATE_STAR, STATE_MARKED
from starbattle.geometry import neighbours
from starbattle.solver import format_duration


# --- SOLVER CLASS ---
class Z3StarBattleSolver:
    """A class to solve Star Battle puzzles using the Z3 SMT solver."""

    def __init__(self, state, respect_cells=False):
        """
        Initializes the solver with the puzzle's constraints.

        :param PuzzleState state: The puzzle to model.
        :param bool respect_cells: If True, the stars and marks already in
                                   `state.cells` are added as constraints.
        """
        self.state = state
        self.respect_cells = respect_cells

    def solve(self, max_solutions=2):
        """
        Formulates the puzzle constraints and uses Z3 to find solutions.

        :param int max_solutions: Stop after this many distinct solutions.
        :returns: A tuple containing a list of solutions and a stats dictionary.
                  Each solution is a flat list of 1s (star) and 0s.
        :rtype: tuple[list[list[int]], dict]
        """
        state = self.state
        start_time = time.time()
        s = Solver()
        grid_vars = [Bool(f"c_{i}") for i in range(state.size * state.size)]

        # Rule: N stars per row, column and group
        for _, partition in state.partitions():
            s.add(PbEq([(grid_vars[i], 1) for i in partition], state.star_count))

        # Rule: Stars cannot be adjacent (including diagonally)
        for i, var in enumerate(grid_vars):
            around = [Not(grid_vars[n]) for n in neighbours(state.size, i)]
            if around:
                s.add(Implies(var, And(around)))

        if self.respect_cells:
            for i, cell in enumerate(state.cells):
                if cell == STATE_STAR: s.add(grid_vars[i])
                elif cell == STATE_MARKED: s.add(Not(grid_vars[i]))

        solutions = []
        while len(solutions) < max_solutions and s.check() == sat:
            model = s.model()
            solution = [1 if is_true(model.evaluate(var, model_completion=True)) else 0 for var in grid_vars]
            solutions.append(solution)
            # Block this solution to look for another one
            s.add(Or([Not(var) if solution[i] else var for i, var in enumerate(grid_vars)]))

        duration = time.time() - start_time
        logging.info(f"Z3 found {len(solutions)} solution(s) in {format_duration(duration)}.")
        return solutions, {'time': format_duration(duration), 'solutions': len(solutions)}

    def is_unique(self):
        """True when the puzzle has exactly one solution."""
        solutions, _ = self.solve(max_solutions=2)
        return len(solutions) == 1
