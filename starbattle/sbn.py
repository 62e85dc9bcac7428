"""**********************************************************************************
 * Title: sbn.py
 *
 * @version 2.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Encoder and decoder for Star Battle Notation (SBN), the compact string
 * format used to share puzzles. An SBN string is laid out as:
 *
 *   [size code: 2 chars][stars: 1 char][flag: 'W' or 'e'][borders][annotations]
 *
 * The borders are a base-64 bitfield holding every vertical border in
 * row-major order followed by every horizontal border in column-major order,
 * left-padded with zeros to a multiple of 6 bits. The optional annotation
 * tail packs three cells per character (value = a*16 + b*4 + c, where 0 is
 * blank, 1 is a mark and 2 is a star); 10x10 and 11x11 grids store their
 * first cell as a leading plain digit.
 *
 * Decoded puzzles use the same flat structure as PuzzleState.from_puzzle_data,
 * so the borders map directly onto the wall arrays.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
import math

from starbattle.constants import (
    STATE_BLANK, SBN_B64_ALPHABET, SBN_CHAR_TO_INT, SBN_INT_TO_CHAR, SBN_CODE_TO_DIM_MAP,
    DIM_TO_SBN_CODE_MAP, SBN_FLAG_PLAIN, SBN_FLAG_ANNOTATED, STATE_TO_SBN, SBN_TO_STATE
)

# Grid sizes whose annotation tail starts with a single plain digit.
LEADING_DIGIT_DIMS = (10, 11)


class SBNDecodeError(ValueError):
    """Raised when a string is not valid Star Battle Notation."""


# --- ANNOTATIONS ---
def encode_annotations(cells, dim):
    """
    Packs cell states into the SBN annotation tail.

    :param list[int] cells: The row-major cell states.
    :param int dim: The side length of the grid.
    :returns: The annotation characters, or an empty string when every cell is blank.
    :rtype: str
    """
    flat = [STATE_TO_SBN[cell] for cell in cells]
    if not any(flat): return ""
    sbn_states = [str(flat.pop(0))] if dim in LEADING_DIGIT_DIMS and flat else []
    for i in range(0, len(flat), 3):
        chunk = flat[i:i+3]; chunk.extend([0] * (3 - len(chunk)))
        value = chunk[0] * 16 + chunk[1] * 4 + chunk[2]
        sbn_states.append(SBN_INT_TO_CHAR[value])
    return "".join(sbn_states)


def decode_annotations(annotation_data, dim):
    """Unpacks an SBN annotation tail into a flat list of cell states."""
    cell_count = dim * dim
    cells = [STATE_BLANK] * cell_count
    if not annotation_data: return cells

    char_cursor, cell_cursor = 0, 0
    if dim in LEADING_DIGIT_DIMS and annotation_data[0].isdigit():
        cells[0] = _annotation_state(int(annotation_data[0]))
        char_cursor, cell_cursor = 1, 1
    while cell_cursor < cell_count and char_cursor < len(annotation_data):
        char = annotation_data[char_cursor]
        if char not in SBN_CHAR_TO_INT:
            raise SBNDecodeError(f"Invalid annotation character {char!r}.")
        value = SBN_CHAR_TO_INT[char]
        states = [(value // 16), (value % 16) // 4, value % 4]
        for offset in range(3):
            if cell_cursor + offset < cell_count:
                cells[cell_cursor + offset] = _annotation_state(states[offset])
        cell_cursor, char_cursor = cell_cursor + 3, char_cursor + 1
    return cells


def _annotation_state(value):
    if value not in SBN_TO_STATE:
        raise SBNDecodeError(f"Invalid annotation value {value}.")
    return SBN_TO_STATE[value]


# --- PUZZLES ---
def encode_sbn(puzzle_data):
    """
    Encodes a puzzle into an SBN string.

    :param dict puzzle_data: The flat puzzle structure ('size', 'starCount',
                             'horizontalWalls', 'verticalWalls', optional 'cells').
    :returns: The SBN string.
    :rtype: str
    :raises ValueError: If the grid size has no SBN size code.
    """
    dim, stars = puzzle_data['size'], puzzle_data['starCount']
    sbn_code = DIM_TO_SBN_CODE_MAP.get(dim)
    if not sbn_code:
        raise ValueError(f"SBN cannot encode a {dim}x{dim} grid.")
    if not 0 < stars < 10:
        raise ValueError(f"SBN cannot encode a star count of {stars}.")
    horizontal_walls, vertical_walls = puzzle_data['horizontalWalls'], puzzle_data['verticalWalls']

    # Vertical borders are stored row by row, horizontal borders column by column.
    vertical_bits = ['1' if wall else '0' for wall in vertical_walls]
    horizontal_bits = ['1' if horizontal_walls[r * dim + c] else '0' for c in range(dim) for r in range(dim - 1)]
    clean_bitfield = "".join(vertical_bits) + "".join(horizontal_bits)

    padding_needed = (6 - len(clean_bitfield) % 6) % 6
    padded_bitfield = ('0' * padding_needed) + clean_bitfield
    region_data = "".join(SBN_INT_TO_CHAR[int(padded_bitfield[i:i+6], 2)] for i in range(0, len(padded_bitfield), 6))

    cells = puzzle_data.get('cells')
    annotation_data = encode_annotations(cells, dim) if cells else ""
    flag = SBN_FLAG_ANNOTATED if annotation_data else SBN_FLAG_PLAIN
    return f"{sbn_code}{stars}{flag}{region_data}{annotation_data}"


def decode_sbn(sbn_string):
    """
    Decodes an SBN string into the flat puzzle structure.

    :param str sbn_string: The SBN string. Surrounding whitespace is ignored.
    :returns: A dictionary with 'size', 'starCount', 'cells', 'horizontalWalls'
              and 'verticalWalls'.
    :rtype: dict
    :raises SBNDecodeError: If the string is not valid SBN.
    """
    sbn_string = sbn_string.strip()
    if len(sbn_string) < 4:
        raise SBNDecodeError(f"SBN string is too short: {sbn_string!r}.")
    dim = SBN_CODE_TO_DIM_MAP.get(sbn_string[0:2])
    if not dim:
        raise SBNDecodeError(f"Unknown SBN size code {sbn_string[0:2]!r}.")
    if not sbn_string[2].isdigit() or sbn_string[2] == '0':
        raise SBNDecodeError(f"Invalid SBN star count {sbn_string[2]!r}.")
    stars = int(sbn_string[2])
    if sbn_string[3] not in (SBN_FLAG_PLAIN, SBN_FLAG_ANNOTATED):
        raise SBNDecodeError(f"Unknown SBN flag {sbn_string[3]!r}.")

    wall_count = dim * (dim - 1)
    border_bits_needed = 2 * wall_count
    border_chars = math.ceil(border_bits_needed / 6)
    region_data = sbn_string[4:4+border_chars].ljust(border_chars, SBN_B64_ALPHABET[0])
    invalid = [c for c in region_data if c not in SBN_CHAR_TO_INT]
    if invalid:
        raise SBNDecodeError(f"Invalid SBN border characters: {''.join(invalid)!r}.")
    full_bitfield = "".join(bin(SBN_CHAR_TO_INT[c])[2:].zfill(6) for c in region_data)[-border_bits_needed:]
    v_bits, h_bits = full_bitfield[:wall_count], full_bitfield[wall_count:]

    vertical_walls = [bit == '1' for bit in v_bits]
    horizontal_walls = [h_bits[c * (dim - 1) + r] == '1' for r in range(dim - 1) for c in range(dim)]
    cells = decode_annotations(sbn_string[4+border_chars:], dim)

    logging.debug(f"Decoded SBN into a {dim}x{dim} grid with {stars} star(s).")
    return {
        'size': dim,
        'starCount': stars,
        'cells': cells,
        'horizontalWalls': horizontal_walls,
        'verticalWalls': vertical_walls,
    }
