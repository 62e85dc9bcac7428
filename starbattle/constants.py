"""**********************************************************************************
 * Title: constants.py
 *
 * @version 3.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * This file contains all the static data and configuration values for the Star
 * Battle deduction engine. It centralizes the cell state identifiers, the names
 * used for each kind of partition, the user-facing rule messages, the Star
 * Battle Notation (SBN) alphabet and size codes, and the runtime knobs used by
 * the solver, the worker pool and the HTTP API.
 **********************************************************************************"""

# --- CELL STATE CONSTANTS ---
# Defines the possible states for a single cell on the puzzle grid.
# A marked cell is one that has been proven not to hold a star (drawn as an X).
STATE_BLANK = 0
STATE_STAR = 1
STATE_MARKED = 2

CELL_STATES = (STATE_BLANK, STATE_STAR, STATE_MARKED)
STATE_SYMBOLS = {STATE_BLANK: '.', STATE_STAR: '★', STATE_MARKED: 'X'}

# --- PARTITION NAMES ---
# Used when composing messages about a row, column, group or sliding window.
ROW = "row"
COLUMN = "column"
GROUP = "group"

# --- RULE MESSAGES ---
MSG_ADJACENT_STARS = "Stars cannot be next to each other."
MSG_TOO_MANY_STARS = "This {name} contains too many stars."
MSG_TOO_FEW_BLANKS = "This {name} contains too few blank spaces."

MSG_LAST_SPACES = "The remaining stars in this {name} can only be placed here."
MSG_NEIGHBOURS_STAR = "Stars cannot be placed in cells neighbouring a star (including diagonals)."
MSG_NO_STARS_LEFT = "No more stars can be placed in this {name}."
MSG_ISOLATED_GROUP = "Stars cannot be placed here. Otherwise, no stars can be placed within this group."
MSG_NO_CROWDING = ("Stars cannot be placed here. Otherwise, there will not be enough room left "
                   "for the stars in this {name}.")
MSG_BLOCK_BASE = ("There can be at most 1 star in each 2x2 square. When the remaining space within "
                  "this {name} is split into blocks at most 2x2 in size, there {verb} only {count} "
                  "block{plural}, which is equal to the number of remaining stars. Therefore, each "
                  "block must contain a star.")
MSG_BLOCK_SINGLE = " This block only has one space, so it must be a star."
MSG_BLOCK_SHARED = " If stars are placed here, there will be no place to put a star in this block."
MSG_FILL_LINES = ("Stars cannot be placed in {groups} outside {lines}. Otherwise, there will not be "
                  "enough stars in {lines}.")
MSG_CONFIRMED_BLOCK = ("The only remaining star in this {name} must be placed in this block. "
                       "Stars cannot be placed anywhere else in this {name}.")
MSG_LOOKAHEAD = "Placing a star here leads to a contradiction. {reason}"
MSG_UNKNOWN = "Unknown"

# --- SOLVER CONFIGURATION ---
# Number of speculative steps tried per cell by the lookahead deduction mode.
# Zero disables lookahead entirely.
DEFAULT_LOOKAHEAD_DEPTH = 0

# Seconds the HTTP API waits on a background solve before abandoning it.
SOLVE_TIMEOUT_SECONDS = 30

# --- API CONFIGURATION ---
API_HOST = '0.0.0.0'
API_PORT = 5001

# --- LOGGING CONFIGURATION ---
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_DEBUG_LOG_FILE = 'debug_log.txt'

# --- SBN (STAR BATTLE NOTATION) CONSTANTS ---
# These constants are used for encoding and decoding puzzles to and from the
# compact Star Battle Notation string format.

# The custom Base64 alphabet used for SBN encoding.
SBN_B64_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_'

# Pre-computed mappings between SBN characters and their integer values.
SBN_CHAR_TO_INT = {c: i for i, c in enumerate(SBN_B64_ALPHABET)}
SBN_INT_TO_CHAR = {i: c for i, c in enumerate(SBN_B64_ALPHABET)}

# Maps two-character SBN codes to their corresponding puzzle dimensions.
SBN_CODE_TO_DIM_MAP = {
    '55': 5,  '66': 6,  '77': 7,  '88': 8,  '99': 9, 'AA': 10, 'BB': 11, 'CC': 12, 'DD': 13,
    'EE': 14, 'FF': 15, 'GG': 16, 'HH': 17, 'II': 18, 'JJ': 19, 'KK': 20, 'LL': 21, 'MM': 22,
    'NN': 23, 'OO': 24, 'PP': 25
}
DIM_TO_SBN_CODE_MAP = {v: k for k, v in SBN_CODE_TO_DIM_MAP.items()}

# SBN flag characters: 'W' for a bare layout, 'e' when cell annotations follow.
SBN_FLAG_PLAIN = 'W'
SBN_FLAG_ANNOTATED = 'e'

# Annotation digits used by SBN, mapped to and from cell states.
STATE_TO_SBN = {STATE_BLANK: 0, STATE_MARKED: 1, STATE_STAR: 2}
SBN_TO_STATE = {v: k for k, v in STATE_TO_SBN.items()}

# --- TERMINAL DISPLAY ---
RESET = "\033[0m"
UNIFIED_COLORS_BG = [
    ("Bright Red", "\033[48;2;255;204;204m\033[38;2;0;0;0m"), ("Bright Green", "\033[48;2;204;255;204m\033[38;2;0;0;0m"),
    ("Bright Yellow", "\033[48;2;255;255;204m\033[38;2;0;0;0m"), ("Bright Blue", "\033[48;2;204;229;255m\033[38;2;0;0;0m"),
    ("Bright Magenta", "\033[48;2;255;204;255m\033[38;2;0;0;0m"), ("Bright Cyan", "\033[48;2;204;255;255m\033[38;2;0;0;0m"),
    ("Light Orange", "\033[48;2;255;229;204m\033[38;2;0;0;0m"), ("Light Purple", "\033[48;2;229;204;255m\033[38;2;0;0;0m"),
    ("Light Gray", "\033[48;2;224;224;224m\033[38;2;0;0;0m"), ("Mint", "\033[48;2;210;240;210m\033[38;2;0;0;0m"),
    ("Peach", "\033[48;2;255;218;185m\033[38;2;0;0;0m"), ("Sky Blue", "\033[48;2;173;216;230m\033[38;2;0;0;0m"),
]
