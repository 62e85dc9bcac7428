"""**********************************************************************************
 * Title: regions.py
 *
 * @version 1.2.0
 * -------------------------------------------------------------------------------
 * Description:
 * Derives the three partitions of a Star Battle grid. Rows and columns are
 * fixed by the grid size; groups are the connected components of the grid
 * once the caller's walls are taken into account. The module also converts a
 * two-dimensional region-id grid into the wall arrays the group builder
 * consumes, and back.
 *
 * Wall layout:
 *   horizontal walls - `size` columns x `size - 1` rows. Entry y*size + x
 *                      separates cell (x, y) from cell (x, y + 1).
 *   vertical walls   - `size - 1` columns x `size` rows. Entry y*(size-1) + x
 *                      separates cell (x, y) from cell (x + 1, y).
 **********************************************************************************"""

# --- IMPORTS ---
import logging

from starbattle.geometry import index


# --- ROWS AND COLUMNS ---
def build_rows(size):
    """Returns the row partition: `size` lists of row-major cell indices."""
    return [[index(x, y, size) for x in range(size)] for y in range(size)]


def build_columns(size):
    """Returns the column partition: `size` lists of cell indices, top to bottom."""
    return [[index(x, y, size) for y in range(size)] for x in range(size)]


# --- WALLS ---
def horizontal_wall_exists(horizontal_walls, x, y, size):
    """True when a wall separates (x, y) from the cell below it."""
    if x < 0 or x >= size or y < 0 or y >= size - 1:
        return False
    return bool(horizontal_walls[index(x, y, size)])


def vertical_wall_exists(vertical_walls, x, y, size):
    """True when a wall separates (x, y) from the cell to its right."""
    if x < 0 or x >= size - 1 or y < 0 or y >= size:
        return False
    return bool(vertical_walls[index(x, y, size - 1)])


def walls_from_region_grid(region_grid):
    """
    Converts a 2D grid of region ids into horizontal and vertical wall arrays.

    A wall is placed between every pair of orthogonally adjacent cells whose
    region ids differ.

    :param list[list[int]] region_grid: The 2D grid of region ids, indexed [row][col].
    :returns: The horizontal and vertical wall arrays.
    :rtype: tuple[list[bool], list[bool]]
    """
    dim = len(region_grid)
    horizontal_walls = [region_grid[y][x] != region_grid[y + 1][x] for y in range(dim - 1) for x in range(dim)]
    vertical_walls = [region_grid[y][x] != region_grid[y][x + 1] for y in range(dim) for x in range(dim - 1)]
    return horizontal_walls, vertical_walls


def region_grid_from_groups(size, groups):
    """Builds a 2D grid of 1-based region ids from a group partition."""
    grid = [[0] * size for _ in range(size)]
    for group_index, group in enumerate(groups):
        for i in group:
            grid[i // size][i % size] = group_index + 1
    return grid


# --- GROUPS ---
def build_groups(size, horizontal_walls, vertical_walls):
    """
    Computes the group partition from the wall layout.

    Cells are visited in row-major order. A cell without a group starts a new
    one; every right or down neighbour not separated by a wall is merged into
    the current cell's group. When two existing groups meet, the one created
    first absorbs the other. Absorbed groups are dropped and the remaining
    member lists are sorted ascending.

    :param int size: The side length of the grid.
    :param list[bool] horizontal_walls: Walls between vertically adjacent cells.
    :param list[bool] vertical_walls: Walls between horizontally adjacent cells.
    :returns: The groups (in creation order) and the cell-to-group mapping.
    :rtype: tuple[list[list[int]], list[int]]
    """
    cell_count = size * size
    slot_of = [None] * cell_count
    slots = []

    for i in range(cell_count):
        if slot_of[i] is None:
            slot_of[i] = len(slots)
            slots.append([i])
        x, y = i % size, i // size

        candidates = []
        if not vertical_wall_exists(vertical_walls, x, y, size) and x < size - 1:
            candidates.append(i + 1)
        if not horizontal_wall_exists(horizontal_walls, x, y, size) and y < size - 1:
            candidates.append(i + size)

        for j in candidates:
            current, other = slot_of[i], slot_of[j]
            if other is None:
                slots[current].append(j)
                slot_of[j] = current
            elif other != current:
                keep, drop = min(current, other), max(current, other)
                for member in slots[drop]:
                    slot_of[member] = keep
                slots[keep].extend(slots[drop])
                slots[drop] = None

    groups = [sorted(members) for members in slots if members is not None]
    cell_to_group = [0] * cell_count
    for group_index, group in enumerate(groups):
        for i in group:
            cell_to_group[i] = group_index

    logging.debug(f"Built {len(groups)} groups for a {size}x{size} grid.")
    return groups, cell_to_group
