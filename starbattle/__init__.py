"""Star Battle deduction engine, validator and backtracking solver."""

from starbattle.deduction import get_next_step, is_solved
from starbattle.puzzle_state import PuzzleState, PuzzleStateError, PuzzleStep
from starbattle.solver import find_solution
from starbattle.validator import get_solution_error

__version__ = "1.0.0"
