"""**********************************************************************************
 * Title: cli.py
 *
 * @version 1.4.0
 * -------------------------------------------------------------------------------
 * Description:
 * A command-line front end for the Star Battle engine. Puzzles are given as
 * Star Battle Notation (SBN) strings and drawn in the terminal with one
 * background colour per group.
 *
 * Commands:
 *   check  - report the first rule violation in the puzzle's annotations
 *   hint   - print the next logical step
 *   steps  - apply logical steps until the rules stall, printing each one
 *   solve  - solve by deduction and backtracking (--verify checks uniqueness with Z3)
 *   batch  - solve every SBN line of a file or folder in parallel
 *
 * --debug writes a detailed log of the rules and the search to a file.
 **********************************************************************************"""

# --- IMPORTS ---
import argparse
import logging
import os
import sys

from starbattle import constants as const
from starbattle.deduction import get_next_step, is_solved
from starbattle.puzzle_state import PuzzleState
from starbattle.sbn import decode_sbn
from starbattle.solver import BacktrackingSolver
from starbattle.validator import get_solution_error
from starbattle.worker import batch_solve
from starbattle.z3_solver import Z3StarBattleSolver


# --- DISPLAY ---
def display_grid(state, title="--- Puzzle ---", highlight=()):
    """
    Prints the grid with each group in its own colour.

    :param PuzzleState state: The puzzle to draw.
    :param str title: A heading printed above the grid.
    :param highlight: Cells drawn in brackets, e.g. the cells of a hint.
    """
    print(f"\n{title}")
    for row in state.rows:
        colored_chars = []
        for i in row:
            color_ansi = const.UNIFIED_COLORS_BG[state.cell_to_group[i] % len(const.UNIFIED_COLORS_BG)][1]
            symbol = const.STATE_SYMBOLS[state.cells[i]]
            cell = f"[{symbol}]" if i in highlight else f" {symbol} "
            colored_chars.append(f"{color_ansi}{cell}{const.RESET}")
        print("".join(colored_chars))
    print("-" * len(title) + "\n")


def describe_step(step):
    """Returns a one-line summary of a step for the terminal."""
    if not step.indices:
        return step.message or "No step found."
    action = {const.STATE_STAR: "Star", const.STATE_MARKED: "Mark"}.get(step.cell_type, "Check")
    return f"{action} {step.indices}: {step.message}"


# --- FILE I/O ---
def read_sbn_lines(path):
    """
    Reads non-empty SBN lines from a file, or from every file in a folder.

    :param str path: A file or directory path.
    :rtype: list[str]
    :raises FileNotFoundError: If the path is neither a file nor a directory.
    """
    if os.path.isdir(path):
        filepaths = [os.path.join(path, name) for name in sorted(os.listdir(path))]
        filepaths = [p for p in filepaths if os.path.isfile(p)]
    elif os.path.isfile(path):
        filepaths = [path]
    else:
        raise FileNotFoundError(f"Path '{path}' is not a valid file or directory")

    lines = []
    for filepath in filepaths:
        with open(filepath, 'r') as f:
            lines.extend(line.strip() for line in f if line.strip())
    return lines


def load_state(sbn):
    return PuzzleState.from_puzzle_data(decode_sbn(sbn))


# --- COMMANDS ---
def do_check(args):
    state = load_state(args.sbn)
    error = get_solution_error(state)
    display_grid(state, highlight=error.indices or ())
    if error.is_empty():
        print("\033[92m[OK]\033[0m No rule violations found.")
        return 0
    print(f"\033[91m[ERROR]\033[0m {error.message}")
    return 1


def do_hint(args):
    state = load_state(args.sbn)
    step = get_next_step(state, args.lookahead)
    display_grid(state, highlight=step.indices or ())
    print(describe_step(step))
    return 0


def do_steps(args):
    state = load_state(args.sbn)
    count = 0
    while True:
        error = get_solution_error(state)
        if not error.is_empty():
            print(f"\033[91m[ERROR]\033[0m {error.message}")
            break
        step = get_next_step(state, args.lookahead)
        if not step.indices:
            break
        count += 1
        print(f"{count:>3}. {describe_step(step)}")
        state.apply_step(step)

    display_grid(state, title=f"--- After {count} steps ---")
    print("Solved by logic alone." if is_solved(state) else "The rules could not finish this puzzle.")
    return 0


def do_solve(args):
    state = load_state(args.sbn)
    display_grid(state)
    solver = BacktrackingSolver(state)
    cells = solver.solve()
    stats = solver.stats()
    print(f"Guesses: {stats['guesses']}, backtracks: {stats['backtracks']}, time: {stats['time']}")
    if cells is None:
        print("RESULT: No solution found.")
        return 1
    display_grid(state.copy(cells), title="--- Solution ---")

    if args.verify:
        solutions, z3_stats = Z3StarBattleSolver(state).solve(max_solutions=2)
        if len(solutions) == 1:
            print(f"\033[92m[UNIQUE]\033[0m Z3 confirms a unique solution ({z3_stats['time']}).")
        else:
            print(f"\033[93m[NOT UNIQUE]\033[0m Z3 found {len(solutions)} solutions ({z3_stats['time']}).")
    return 0


def do_batch(args):
    puzzles = list(dict.fromkeys(read_sbn_lines(args.path)))
    if not puzzles:
        print("No puzzles found.")
        return 0
    print(f"Found {len(puzzles)} puzzles to solve.")
    results = batch_solve(puzzles, args.workers)
    for status in ('solved', 'unsolvable', 'invalid'):
        print(f"  {status}: {sum(1 for r in results if r['status'] == status)}")
    return 0


# --- MAIN ---
def build_parser():
    parser = argparse.ArgumentParser(description="A command-line Star Battle deduction engine and solver.")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging to a log file.")
    parser.add_argument("--log-file", default=const.DEFAULT_DEBUG_LOG_FILE,
                        help=f"Debug log path (default: {const.DEFAULT_DEBUG_LOG_FILE}).")
    subparsers = parser.add_subparsers(dest='command', required=True, help='Available commands')

    p_check = subparsers.add_parser('check', help='Report the first rule violation.')
    p_check.add_argument('sbn', help='The puzzle as an SBN string.')
    p_check.set_defaults(func=do_check)

    for name, func, help_text in (('hint', do_hint, 'Print the next logical step.'),
                                  ('steps', do_steps, 'Apply logical steps until the rules stall.')):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument('sbn', help='The puzzle as an SBN string.')
        p.add_argument('--lookahead', type=int, default=const.DEFAULT_LOOKAHEAD_DEPTH,
                       help='Steps tried per hypothetical star (0 disables lookahead).')
        p.set_defaults(func=func)

    p_solve = subparsers.add_parser('solve', help='Solve by deduction and backtracking.')
    p_solve.add_argument('sbn', help='The puzzle as an SBN string.')
    p_solve.add_argument('--verify', action='store_true', help='Check uniqueness with Z3.')
    p_solve.set_defaults(func=do_solve)

    p_batch = subparsers.add_parser('batch', help='Solve every SBN line of a file or folder.')
    p_batch.add_argument('path', help='A file or folder of SBN strings, one per line.')
    p_batch.add_argument('--workers', type=int, default=None, help='Worker processes (default: CPU count).')
    p_batch.set_defaults(func=do_batch)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format=const.LOG_FORMAT, filename=args.log_file, filemode='w')
        print(f"Debug mode enabled. Logging to {args.log_file}")
    else:
        logging.basicConfig(level=logging.INFO, format=const.LOG_FORMAT)

    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
