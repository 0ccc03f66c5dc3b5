"""
floor_map.py

Floor maps: the physical layout of a library branch as a fixed-size grid of
single-character cells, backed by a numpy character array.
"""

from __future__ import annotations
import logging
import types
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import numpy as np

from city_library import config
from city_library.exceptions import CellOutOfBoundsError, InvalidInputError, ValidationError

logger = logging.getLogger(__name__)

# Symbols the pathfinder may not step on; every other symbol is walkable.
OBSTACLES = frozenset({config.WALL, config.START_MARKER, config.GOAL_MARKER})


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (row, col) cell position. Rows grow downwards, columns to the right."""
    row: int
    col: int

    def __post_init__(self):
        for name in ("row", "col"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidInputError(f"{name} must be non-negative, got {value}")

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


class FloorMap:
    """
    A library floor map.

    Built in two steps: `FloorMap.build` declares the dimensions and legend and
    returns a blank map, then one of the `populate_*` methods fills the cells.
    Population validates the grid and makes it read-only.
    """

    def __init__(self, width: int, height: int, legend: Mapping[str, str]):
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise ValidationError(f"width must be a positive integer, got {width!r}")
        if isinstance(height, bool) or not isinstance(height, int) or height <= 0:
            raise ValidationError(f"height must be a positive integer, got {height!r}")
        if legend is None:
            raise ValidationError("legend must not be None")
        checked: Dict[str, str] = {}
        for symbol, description in legend.items():
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise ValidationError(f"legend symbol must be a single character, got {symbol!r}")
            if description is None or not str(description).strip():
                raise ValidationError(f"legend contains blank description for {symbol!r}")
            checked[symbol] = str(description)

        self.width = width
        self.height = height
        self._legend = checked
        # blank grid, filled in by populate_grid / populate_from_rows
        self._grid = np.full((height, width), config.WALKWAY, dtype="<U1")
        self._populated = False

    @classmethod
    def build(cls, width: int, height: int, legend: Optional[Mapping[str, str]] = None) -> "FloorMap":
        """Declare a blank map of the given size; the legend defaults to walls/walkway/entrance."""
        return cls(width, height, config.DEFAULT_LEGEND if legend is None else legend)

    # ---------------- Population ----------------
    def populate_grid(self) -> "FloorMap":
        """
        Fill the standard layout: walls on the border, the entrance at (1, 1)
        and walkway everywhere else.
        """
        grid = np.full((self.height, self.width), config.WALKWAY, dtype="<U1")
        grid[0, :] = config.WALL
        grid[-1, :] = config.WALL
        grid[:, 0] = config.WALL
        grid[:, -1] = config.WALL
        if self.height > 2 and self.width > 2:
            grid[1, 1] = config.ENTRANCE
        self._install(grid)
        return self

    def populate_from_rows(self, rows: Iterable[str]) -> "FloorMap":
        """
        Fill the map from explicit text rows, one string per grid row.

        Raises:
            ValidationError: when the row count or a row width does not match the
                declared dimensions, or more than one entrance is present.
        """
        rows = list(rows)
        if len(rows) != self.height:
            raise ValidationError(f"expected {self.height} rows, got {len(rows)}")
        for r, row in enumerate(rows):
            if len(row) != self.width:
                raise ValidationError(f"row {r} has {len(row)} cells, expected {self.width}")
        self._install(np.array([list(row) for row in rows], dtype="<U1").reshape(self.height, self.width))
        return self

    def _install(self, grid: np.ndarray) -> None:
        if self._populated:
            raise ValidationError("floor map is already populated")
        entrances = int(np.count_nonzero(grid == config.ENTRANCE))
        if entrances > 1:
            raise ValidationError(f"floor map may have at most one entrance, found {entrances}")
        grid.setflags(write=False)
        self._grid = grid
        self._populated = True
        logger.debug("Populated %dx%d floor map (%d entrance)", self.width, self.height, entrances)

    # ---------------- Queries ----------------
    @property
    def populated(self) -> bool:
        return self._populated

    @property
    def legend(self) -> Mapping[str, str]:
        return types.MappingProxyType(self._legend)

    @property
    def grid(self) -> np.ndarray:
        """A writable copy of the cells; changing it does not touch the map."""
        return self._grid.copy()

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cell_at(self, row: int, col: int) -> str:
        if not self.in_bounds(row, col):
            raise CellOutOfBoundsError(
                f"cell ({row},{col}) is outside the {self.width}x{self.height} map")
        return str(self._grid[row, col])

    def is_walkable(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and str(self._grid[row, col]) not in OBSTACLES

    def entrance_coordinate(self) -> Optional[Coordinate]:
        """The entrance cell, or None when the map has no entrance."""
        hits = np.argwhere(self._grid == config.ENTRANCE)
        if len(hits) == 0:
            return None
        return Coordinate(int(hits[0][0]), int(hits[0][1]))

    def describe(self, symbol: str) -> str:
        return self._legend.get(symbol, "Unknown")

    def rows(self) -> List[str]:
        return ["".join(row) for row in self._grid]

    def __str__(self) -> str:
        return "\n".join(self.rows())
