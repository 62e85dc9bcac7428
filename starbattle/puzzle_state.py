"""**********************************************************************************
 * Title: puzzle_state.py
 *
 * @version 2.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Defines the two values that flow through the engine. PuzzleState is the
 * unit of work: the flat cell list, the grid size, the star quota and the
 * row, column and group partitions derived from the wall layout. PuzzleStep
 * is the result of a validation or deduction: the cells to act on, the cells
 * cited as justification, the state to assign and a human readable message.
 *
 * A PuzzleState checks its own structure on construction and raises
 * PuzzleStateError for malformed input, so the validator, the rule battery
 * and the solver can assume a well-formed grid.
 **********************************************************************************"""

# --- IMPORTS ---
import copy

from starbattle.constants import CELL_STATES, STATE_BLANK, STATE_STAR, ROW, COLUMN, GROUP
from starbattle.regions import (
    build_rows, build_columns, build_groups, walls_from_region_grid, region_grid_from_groups
)


class PuzzleStateError(ValueError):
    """Raised when a puzzle state or its partitions are malformed."""


# --- PUZZLE STEP ---
class PuzzleStep:
    """A proposed change to the grid, or a reported rule violation."""

    def __init__(self, indices=None, other_indices=None, cell_type=None, message=None):
        """
        :param list[int] | None indices: The cells to act upon.
        :param list[int] | None other_indices: Cells cited as context. Never mutated.
        :param int | None cell_type: The state to assign to `indices`.
        :param str | None message: The human readable rationale.
        """
        self.indices = list(indices) if indices is not None else None
        self.other_indices = list(other_indices) if other_indices is not None else None
        self.cell_type = cell_type
        self.message = message

    def is_empty(self):
        """True when the step carries neither a message nor any cells."""
        return self.message is None and not self.indices

    def to_dict(self):
        """
        Serializes the step for the caller, omitting absent fields.

        :returns: A dictionary with camelCase keys.
        :rtype: dict
        """
        data = {}
        if self.indices is not None: data['indices'] = self.indices
        if self.other_indices is not None: data['otherIndices'] = self.other_indices
        if self.cell_type is not None: data['type'] = self.cell_type
        if self.message is not None: data['message'] = self.message
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('indices'), data.get('otherIndices'), data.get('type'), data.get('message'))

    def __eq__(self, other):
        if not isinstance(other, PuzzleStep):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"PuzzleStep(indices={self.indices}, other_indices={self.other_indices}, "
                f"cell_type={self.cell_type}, message={self.message!r})")


# --- PUZZLE STATE ---
class PuzzleState:
    """
    The complete state of one puzzle: cells, size, star quota and partitions.

    The partitions are fixed for the lifetime of the grid and may be shared
    between copies. Only `cells` is ever mutated.
    """

    def __init__(self, cells, size, star_count, rows, columns, groups, cell_to_group,
                 horizontal_walls=None, vertical_walls=None):
        """
        :param list[int] cells: The row-major cell states, length size**2.
        :param int size: The side length of the grid.
        :param int star_count: Stars required in every row, column and group.
        :param list[list[int]] rows: The row partition.
        :param list[list[int]] columns: The column partition.
        :param list[list[int]] groups: The group partition.
        :param list[int] cell_to_group: The owning group index of every cell.
        :raises PuzzleStateError: If any of the inputs is malformed.
        """
        if not isinstance(cells, (list, tuple)):
            raise PuzzleStateError(f"Cells must be a list of cell states, got {type(cells).__name__}.")
        self.cells = list(cells)
        self.size = size
        self.star_count = star_count
        self.rows = rows
        self.columns = columns
        self.groups = groups
        self.cell_to_group = cell_to_group
        self.horizontal_walls = horizontal_walls
        self.vertical_walls = vertical_walls
        self._check()

    # --- CONSTRUCTORS ---
    @classmethod
    def from_walls(cls, size, star_count, horizontal_walls, vertical_walls, cells=None):
        """
        Builds a state from a wall layout, deriving rows, columns and groups.

        :param int size: The side length of the grid.
        :param int star_count: Stars required in every row, column and group.
        :param list[bool] horizontal_walls: `size * (size - 1)` walls below cells.
        :param list[bool] vertical_walls: `(size - 1) * size` walls right of cells.
        :param list[int] | None cells: The initial cells; all blank when omitted.
        :rtype: PuzzleState
        """
        if not isinstance(size, int) or size < 1:
            raise PuzzleStateError(f"Grid size must be a positive integer, got {size!r}.")
        if not isinstance(horizontal_walls, (list, tuple)) or not isinstance(vertical_walls, (list, tuple)):
            raise PuzzleStateError("Wall layouts must be lists of booleans.")
        wall_count = size * (size - 1)
        if len(horizontal_walls) != wall_count or len(vertical_walls) != wall_count:
            raise PuzzleStateError(
                f"Expected {wall_count} horizontal and vertical walls, got "
                f"{len(horizontal_walls)} and {len(vertical_walls)}."
            )
        horizontal_walls = [bool(w) for w in horizontal_walls]
        vertical_walls = [bool(w) for w in vertical_walls]
        groups, cell_to_group = build_groups(size, horizontal_walls, vertical_walls)
        if cells is None:
            cells = [STATE_BLANK] * (size * size)
        return cls(cells, size, star_count, build_rows(size), build_columns(size), groups, cell_to_group,
                   horizontal_walls, vertical_walls)

    @classmethod
    def from_region_grid(cls, region_grid, star_count, cells=None):
        """Builds a state from a 2D grid of region ids, indexed [row][col]."""
        size = len(region_grid)
        if any(len(row) != size for row in region_grid):
            raise PuzzleStateError("Region grid must be square.")
        horizontal_walls, vertical_walls = walls_from_region_grid(region_grid)
        return cls.from_walls(size, star_count, horizontal_walls, vertical_walls, cells)

    @classmethod
    def from_puzzle_data(cls, data):
        """
        Builds a state from the flat structure persisted by the caller.

        :param dict data: A dictionary with 'size', 'starCount', 'horizontalWalls',
                          'verticalWalls' and optionally 'cells'.
        :rtype: PuzzleState
        :raises PuzzleStateError: If a required key is missing or malformed.
        """
        try:
            size = data['size']
            star_count = data['starCount']
            horizontal_walls = data['horizontalWalls']
            vertical_walls = data['verticalWalls']
        except (KeyError, TypeError) as e:
            raise PuzzleStateError(f"Puzzle data is missing a required field: {e}") from e
        return cls.from_walls(size, star_count, horizontal_walls, vertical_walls, data.get('cells'))

    def to_puzzle_data(self):
        """Serializes the state into the flat structure accepted by from_puzzle_data."""
        horizontal_walls, vertical_walls = self.horizontal_walls, self.vertical_walls
        if horizontal_walls is None or vertical_walls is None:
            horizontal_walls, vertical_walls = walls_from_region_grid(self.region_grid())
        return {
            'size': self.size,
            'starCount': self.star_count,
            'cells': list(self.cells),
            'horizontalWalls': list(horizontal_walls),
            'verticalWalls': list(vertical_walls),
        }

    def copy(self, cells=None):
        """
        Returns a state with its own cell list, sharing the read-only partitions.

        :param list[int] | None cells: Replacement cells; a clone of this state's cells when omitted.
        :rtype: PuzzleState
        """
        clone = copy.copy(self)
        clone.cells = list(self.cells if cells is None else cells)
        return clone

    # --- QUERIES ---
    def partitions(self):
        """Yields (name, cells) for every row, then every column, then every group."""
        for row in self.rows: yield ROW, row
        for column in self.columns: yield COLUMN, column
        for group in self.groups: yield GROUP, group

    def count_stars(self, indices):
        return sum(1 for i in indices if self.cells[i] == STATE_STAR)

    def blank_cells(self, indices):
        return [i for i in indices if self.cells[i] == STATE_BLANK]

    def remaining_stars(self, indices, quota=None):
        """Stars still needed in `indices`; `quota` defaults to the per-partition star count."""
        if quota is None:
            quota = self.star_count
        return quota - self.count_stars(indices)

    def region_grid(self):
        return region_grid_from_groups(self.size, self.groups)

    # --- MUTATION ---
    def apply_step(self, step):
        """Assigns `step.cell_type` to every cell in `step.indices`."""
        for i in step.indices or ():
            self.cells[i] = step.cell_type

    # --- STRUCTURE CHECKS ---
    def _check(self):
        size = self.size
        if not isinstance(size, int) or size < 1:
            raise PuzzleStateError(f"Grid size must be a positive integer, got {size!r}.")
        if not isinstance(self.star_count, int) or self.star_count < 1:
            raise PuzzleStateError(f"Star count must be a positive integer, got {self.star_count!r}.")
        cell_count = size * size
        if len(self.cells) != cell_count:
            raise PuzzleStateError(f"Expected {cell_count} cells, got {len(self.cells)}.")
        # Cells may be unhashable (e.g. nested lists from JSON), so no set here.
        bad_states = [c for c in self.cells if c not in CELL_STATES]
        if bad_states:
            raise PuzzleStateError(f"Unknown cell states: {bad_states!r}.")

        for name, lines in ((ROW, self.rows), (COLUMN, self.columns)):
            if len(lines) != size or any(len(line) != size for line in lines):
                raise PuzzleStateError(f"Expected {size} {name}s of {size} cells each.")
            self._check_partition(name, lines, cell_count)
        self._check_partition(GROUP, self.groups, cell_count)

        if len(self.cell_to_group) != cell_count:
            raise PuzzleStateError(f"Expected {cell_count} cell-to-group entries, got {len(self.cell_to_group)}.")
        for group_index, group in enumerate(self.groups):
            for i in group:
                if self.cell_to_group[i] != group_index:
                    raise PuzzleStateError(f"Cell {i} is mapped to group {self.cell_to_group[i]}, not {group_index}.")

    @staticmethod
    def _check_partition(name, parts, cell_count):
        seen = [0] * cell_count
        for part in parts:
            if not part:
                raise PuzzleStateError(f"The {name} partition contains an empty {name}.")
            for i in part:
                if not isinstance(i, int) or i < 0 or i >= cell_count:
                    raise PuzzleStateError(f"The {name} partition references an invalid cell {i!r}.")
                seen[i] += 1
        if any(count != 1 for count in seen):
            raise PuzzleStateError(f"The {name}s do not cover every cell exactly once.")
