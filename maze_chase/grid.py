"""Grid model: the maze as an immutable, row-major table of tiles.

The grid is never modified in place. Clearing pellets returns a new Grid
that shares every untouched row with its predecessor, so a renderer that is
still holding last tick's grid never sees a half-updated buffer.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple


class Tile(IntEnum):
    """Classification of a single maze cell."""

    EMPTY = 0
    WALL = 1
    PELLET = 2
    POWER_PELLET = 3  # reserved, no rule consumes it
    DOOR = 4  # reserved, no rule consumes it
    GHOST_SPAWN = 9


# Characters used by Grid.from_strings / Grid.to_strings
TILE_CHARS: Dict[str, Tile] = {
    "#": Tile.WALL,
    ".": Tile.PELLET,
    " ": Tile.EMPTY,
    "G": Tile.GHOST_SPAWN,
    "o": Tile.POWER_PELLET,
    "-": Tile.DOOR,
}
_CHAR_FOR_TILE = {tile: char for char, tile in TILE_CHARS.items()}


class Grid:
    """Rectangular maze of ``cols`` x ``rows`` tiles, indexed as (x, y)."""

    __slots__ = ("_rows", "_cols")

    def __init__(self, rows: Sequence[Sequence[int]]) -> None:
        if not rows or not rows[0]:
            raise ValueError("Grid needs at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("Grid rows must all have the same length")
        self._rows: Tuple[Tuple[Tile, ...], ...] = tuple(
            tuple(Tile(cell) for cell in row) for row in rows
        )
        self._cols = width

    @classmethod
    def _from_tuples(cls, rows: Tuple[Tuple[Tile, ...], ...]) -> "Grid":
        grid = cls.__new__(cls)
        grid._rows = rows
        grid._cols = len(rows[0])
        return grid

    @classmethod
    def from_strings(cls, lines: Iterable[str]) -> "Grid":
        """Build a grid from text art ('#' wall, '.' pellet, ' ' empty, 'G' spawn)."""
        return cls([[TILE_CHARS[char] for char in line] for line in lines])

    @classmethod
    def filled(cls, cols: int, rows: int, tile: Tile = Tile.PELLET, border: bool = True) -> "Grid":
        """Create a grid filled with ``tile``, optionally ringed by walls."""
        cells: List[List[Tile]] = []
        for y in range(rows):
            row = []
            for x in range(cols):
                on_border = x in (0, cols - 1) or y in (0, rows - 1)
                row.append(Tile.WALL if border and on_border else tile)
            cells.append(row)
        return cls(cells)

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def rows(self) -> int:
        return len(self._rows)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._cols and 0 <= y < len(self._rows)

    def tile_at(self, x: int, y: int) -> Tile:
        """Return the tile at (x, y). Raises IndexError when out of bounds."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self._cols}x{self.rows} grid")
        return self._rows[y][x]

    def is_border(self, x: int, y: int) -> bool:
        return x in (0, self._cols - 1) or y in (0, self.rows - 1)

    def cells(self) -> Iterator[Tuple[int, int, Tile]]:
        """Iterate (x, y, tile) in row-major order."""
        for y, row in enumerate(self._rows):
            for x, tile in enumerate(row):
                yield x, y, tile

    def positions_of(self, tile: Tile) -> List[Tuple[int, int]]:
        return [(x, y) for x, y, cell in self.cells() if cell == tile]

    def count(self, tile: Tile) -> int:
        return sum(row.count(tile) for row in self._rows)

    def with_tiles(self, changes: Dict[Tuple[int, int], Tile]) -> "Grid":
        """Return a copy with ``changes`` applied; untouched rows are shared."""
        if not changes:
            return self
        by_row: Dict[int, Dict[int, Tile]] = {}
        for (x, y), tile in changes.items():
            if not self.in_bounds(x, y):
                raise IndexError(f"Cell ({x}, {y}) outside {self._cols}x{self.rows} grid")
            by_row.setdefault(y, {})[x] = tile
        new_rows = list(self._rows)
        for y, row_changes in by_row.items():
            row = list(new_rows[y])
            for x, tile in row_changes.items():
                row[x] = tile
            new_rows[y] = tuple(row)
        return Grid._from_tuples(tuple(new_rows))

    def to_lists(self) -> List[List[int]]:
        """Plain nested lists of tile values (row-major), for renderers and tests."""
        return [[int(tile) for tile in row] for row in self._rows]

    def to_strings(self) -> List[str]:
        return ["".join(_CHAR_FOR_TILE[tile] for tile in row) for row in self._rows]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Grid(cols={self._cols}, rows={self.rows})"
