"""**********************************************************************************
 * Title: app.py
 *
 * @version 2.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * The Flask HTTP API in front of the deduction engine. Every endpoint takes
 * a JSON body holding the flat puzzle structure ('size', 'starCount',
 * 'cells', 'horizontalWalls', 'verticalWalls'):
 *
 *   POST /api/check   - the first rule violation in the current cells
 *   POST /api/hint    - the next logical step (optional 'lookahead' depth)
 *   POST /api/solve   - a full solution, computed in a worker process with a
 *                       timeout (optional 'verify' for a Z3 uniqueness check)
 *   POST /api/import  - an SBN 'importString' decoded into puzzle data
 *   POST /api/export  - puzzle data encoded as an SBN 'exportString'
 *
 * Malformed puzzles are answered with 400, an expired solve with 504 and any
 * unexpected failure with 500.
 **********************************************************************************"""

# --- IMPORTS ---
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from starbattle import constants as const
from starbattle.deduction import get_next_step
from starbattle.puzzle_state import PuzzleState, PuzzleStateError
from starbattle.sbn import decode_sbn, encode_sbn
from starbattle.validator import get_solution_error
from starbattle.worker import SolveJob
from starbattle.z3_solver import Z3StarBattleSolver

app = Flask(__name__)
CORS(app)
app.config.setdefault('SOLVE_TIMEOUT', const.SOLVE_TIMEOUT_SECONDS)
app.config.setdefault('LOOKAHEAD_DEPTH', const.DEFAULT_LOOKAHEAD_DEPTH)


def _request_data():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise PuzzleStateError("Request body must be a JSON object.")
    return data


@app.errorhandler(PuzzleStateError)
def handle_bad_puzzle(e):
    logging.warning(f"Rejected malformed puzzle: {e}")
    return jsonify({'error': str(e)}), 400


@app.route('/api/check', methods=['POST'])
def check_puzzle():
    try:
        state = PuzzleState.from_puzzle_data(_request_data())
        step = get_solution_error(state)
        return jsonify({'valid': step.is_empty(), 'error': step.to_dict()})
    except PuzzleStateError:
        raise
    except Exception as e:
        logging.error(f"Error in /api/check: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/hint', methods=['POST'])
def get_hint():
    try:
        data = _request_data()
        state = PuzzleState.from_puzzle_data(data)
        lookahead = data.get('lookahead', app.config['LOOKAHEAD_DEPTH'])
        if not isinstance(lookahead, int) or lookahead < 0:
            return jsonify({'error': 'lookahead must be a non-negative integer'}), 400
        step = get_next_step(state, lookahead)
        return jsonify({'step': step.to_dict()})
    except PuzzleStateError:
        raise
    except Exception as e:
        logging.error(f"Error in /api/hint: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/solve', methods=['POST'])
def solve_puzzle():
    try:
        data = _request_data()
        state = PuzzleState.from_puzzle_data(data)

        job = SolveJob(state.to_puzzle_data())
        timeout = app.config['SOLVE_TIMEOUT']
        if not job.wait(timeout):
            job.cancel()
            logging.warning(f"Solve abandoned after {timeout} seconds.")
            return jsonify({'error': f'Solve did not finish within {timeout} seconds'}), 504
        cells, stats = job.result()

        response = {'solution': cells, 'stats': stats}
        if data.get('verify'):
            response['unique'] = Z3StarBattleSolver(state).is_unique()
        return jsonify(response)
    except PuzzleStateError:
        raise
    except Exception as e:
        logging.error(f"Error in /api/solve: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/import', methods=['POST'])
def import_puzzle():
    try:
        import_string = _request_data().get('importString')
        if not import_string or not isinstance(import_string, str):
            return jsonify({'error': 'No import string provided'}), 400
        puzzle_data = decode_sbn(import_string)
        PuzzleState.from_puzzle_data(puzzle_data)
        return jsonify(puzzle_data)
    except PuzzleStateError:
        raise
    except ValueError as e:
        logging.warning(f"Could not import puzzle: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logging.error(f"Error in /api/import: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/export', methods=['POST'])
def export_puzzle():
    try:
        state = PuzzleState.from_puzzle_data(_request_data())
        return jsonify({'exportString': encode_sbn(state.to_puzzle_data())})
    except PuzzleStateError:
        raise
    except ValueError as e:
        logging.warning(f"Could not export puzzle: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logging.error(f"Error in /api/export: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500
