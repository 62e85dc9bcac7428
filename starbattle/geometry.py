"""**********************************************************************************
 * Title: geometry.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Pure coordinate helpers for a square Star Battle grid stored as a flat,
 * row-major list. Converts between a linear cell index and (x, y)
 * coordinates, enumerates the up-to-eight neighbours of a cell and performs
 * bounds checks.
 **********************************************************************************"""

from functools import lru_cache

# Neighbour offsets in reading order: the row above, the same row, the row below.
NEIGHBOUR_OFFSETS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


def coords(i, size):
    """
    Converts a linear cell index into grid coordinates.

    :param int i: The row-major cell index.
    :param int size: The side length of the grid.
    :returns: The (x, y) coordinates of the cell.
    :rtype: tuple[int, int]
    """
    return i % size, i // size


def index(x, y, size):
    """Converts (x, y) coordinates into a row-major cell index."""
    return y * size + x


def out_of_bounds(x, y, x_size, y_size):
    return x < 0 or x >= x_size or y < 0 or y >= y_size


@lru_cache(maxsize=None)
def neighbours(size, i):
    """
    Returns the cells at Chebyshev distance 1 from cell `i`.

    The order is fixed (top-left to bottom-right) so that every rule that walks
    a neighbourhood proposes the same step for the same state.

    :param int size: The side length of the grid.
    :param int i: The row-major cell index.
    :returns: The neighbouring cell indices, clipped to the grid.
    :rtype: tuple[int, ...]
    """
    x, y = coords(i, size)
    return tuple(
        index(x + dx, y + dy, size)
        for dx, dy in NEIGHBOUR_OFFSETS
        if not out_of_bounds(x + dx, y + dy, size, size)
    )


def are_adjacent(size, a, b):
    """True when two distinct cells touch, including diagonally."""
    ax, ay = coords(a, size)
    bx, by = coords(b, size)
    return a != b and abs(ax - bx) <= 1 and abs(ay - by) <= 1


def shared_neighbours(size, indices):
    """
    Returns the cells that neighbour every cell in `indices`.

    :param int size: The side length of the grid.
    :param list[int] indices: A non-empty list of cell indices.
    :returns: The common neighbours, in the neighbour order of the first cell.
    :rtype: list[int]
    """
    common = list(neighbours(size, indices[0]))
    for i in indices[1:]:
        others = neighbours(size, i)
        common = [n for n in common if n in others]
    return common
