"""Procedural maze generation.

Generation happens in two stages:

1. Sizing: pick a cell size (and so a column/row count) that fills the
   available pixel area well while matching its aspect ratio. Layouts that
   come out narrower than the screen are widened, because width-bound mazes
   centre more gracefully than height-bound ones.
2. Structure: wall border, pellet interior, an empty band reserved for
   overlay text, ghost spawn points, then a declarative list of obstacles.
   Obstacles are committed cell by cell through a guard. An obstacle that
   would disconnect the open area, or leave a cell that no player footprint
   reachable from the start can overlap, is rolled back. Every generated
   maze is therefore connected for the entities that actually move in it.

When no size hints are available at all, a hand-authored layout is returned.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

from maze_chase.config.display import (
    ASPECT_MISMATCH_PENALTY,
    ASPECT_WIDEN_EXTRA_COLS,
    ASPECT_WIDEN_TOLERANCE,
    CELL_SIZE_BIAS,
    CELL_SIZE_STEP,
    FALLBACK_MAX_COLS,
    FALLBACK_MAX_ROWS,
    FALLBACK_MIN_COLS,
    FALLBACK_MIN_ROWS,
    FULL_FIT_BONUS,
    GOOD_FIT_BONUS,
    HEIGHT_UTILIZATION_WEIGHT,
    IDEAL_CELL_SIZE,
    MAX_CELL_SIZE,
    MAX_COLS,
    MAX_ROWS,
    MIN_CELL_SIZE,
    MIN_COLS,
    MIN_ROWS,
    WIDTH_UTILIZATION_WEIGHT,
)
from maze_chase.config.gameplay import (
    GHOST_SIZE,
    PLAYER_ASPECT_RATIO,
    PLAYER_HEIGHT,
    PLAYER_START_COL_FRACTION,
    PLAYER_START_ROW_FRACTION,
)
from maze_chase.config.maze import (
    FALLBACK_LAYOUT,
    FALLBACK_TEXT_AREA,
    FORCE_ODD_ROWS,
    MIN_EXITS_PER_CELL,
    OBSTACLES,
    SHAPE_OFFSETS,
    SPAWN_AVOIDANCE_OFFSETS,
    SPAWN_POINTS,
    TEXT_AREA_BOTTOM_FRACTION,
    TEXT_AREA_LEFT_FRACTION,
    TEXT_AREA_MIN_BOTTOM,
    TEXT_AREA_MIN_LEFT,
    TEXT_AREA_MIN_TOP,
    TEXT_AREA_RIGHT_FRACTION,
    TEXT_AREA_TOP_FRACTION,
    ObstacleSpec,
)
from maze_chase.entities import ALL_DIRECTIONS, Position
from maze_chase.exceptions import MazeGenerationError
from maze_chase.grid import Grid, Tile
from maze_chase.movement import find_valid_position, is_valid_move, step_target
from maze_chase.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# Supplies (width, height) in pixels, or None when it cannot measure
ViewportProvider = Callable[[], Optional[Tuple[float, float]]]

Cell = Tuple[int, int]

# (width, height) of the player footprint the maze must stay playable for
Footprint = Tuple[int, int]
DEFAULT_PLAYER_FOOTPRINT: Footprint = (
    max(1, math.floor(PLAYER_HEIGHT * PLAYER_ASPECT_RATIO)),
    PLAYER_HEIGHT,
)

_NEIGHBOR_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass(frozen=True)
class TextArea:
    """Rectangle kept free of walls for overlay text; right/bottom are exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    def contains(self, x: int, y: int) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass(frozen=True)
class MazeDimensions:
    """Outcome of the sizing search."""

    cols: int
    rows: int
    cell_size: float
    used_fallback: bool = False


@dataclass(frozen=True)
class MazeLayout:
    """A generated maze plus the metadata the session needs to populate it."""

    grid: Grid
    spawn_points: Tuple[Position, ...]
    text_area: TextArea
    cell_size: Optional[float] = None
    is_fallback: bool = False


# ============================================================================
# Sizing
# ============================================================================


def _score_candidate(
    cols: int, rows: int, cell_size: float, width: float, height: float, screen_ratio: float
) -> float:
    width_utilization = cols * cell_size / width
    height_utilization = rows * cell_size / height

    score = (
        WIDTH_UTILIZATION_WEIGHT * width_utilization
        + HEIGHT_UTILIZATION_WEIGHT * height_utilization
    )
    if width_utilization > 0.95 and height_utilization > 0.9:
        score += FULL_FIT_BONUS
    elif width_utilization > 0.9 and height_utilization > 0.9:
        score += GOOD_FIT_BONUS
    score += CELL_SIZE_BIAS * cell_size
    score -= ASPECT_MISMATCH_PENALTY * abs(cols / rows - screen_ratio) / screen_ratio
    return score


def choose_dimensions(
    available_width: float,
    available_height: float,
    force_odd_rows: bool = FORCE_ODD_ROWS,
) -> MazeDimensions:
    """Pick grid dimensions for an area of ``available_width`` x ``available_height`` pixels.

    Never fails: when no candidate cell size satisfies the grid bounds, the
    ideal cell size is used and the result clamped to the fallback bounds.
    """
    screen_ratio = available_width / available_height if available_height > 0 else 1.0
    if screen_ratio <= 0:
        screen_ratio = 1.0

    best: Optional[MazeDimensions] = None
    best_score = -math.inf
    steps = int(round((MAX_CELL_SIZE - MIN_CELL_SIZE) / CELL_SIZE_STEP))
    for i in range(steps + 1):
        cell_size = MIN_CELL_SIZE + i * CELL_SIZE_STEP
        cols = math.floor(available_width / cell_size)
        rows = math.floor(available_height / cell_size)
        if not (MIN_COLS <= cols <= MAX_COLS and MIN_ROWS <= rows <= MAX_ROWS):
            continue
        score = _score_candidate(
            cols, rows, cell_size, available_width, available_height, screen_ratio
        )
        if score > best_score:
            best_score = score
            best = MazeDimensions(cols, rows, cell_size)

    if best is None:
        cols = math.floor(available_width / IDEAL_CELL_SIZE) if available_width > 0 else 0
        rows = math.floor(available_height / IDEAL_CELL_SIZE) if available_height > 0 else 0
        best = MazeDimensions(
            cols=max(FALLBACK_MIN_COLS, min(FALLBACK_MAX_COLS, cols)),
            rows=max(FALLBACK_MIN_ROWS, min(FALLBACK_MAX_ROWS, rows)),
            cell_size=IDEAL_CELL_SIZE,
            used_fallback=True,
        )
        logger.info(
            "No cell size fits %.0fx%.0f; using fallback %dx%d",
            available_width, available_height, best.cols, best.rows,
        )

    cols, rows, cell_size = best.cols, best.rows, best.cell_size

    # Widen layouts that are noticeably narrower than the screen
    if cols / rows < screen_ratio * (1 - ASPECT_WIDEN_TOLERANCE):
        target_cols = math.ceil(rows * screen_ratio) + ASPECT_WIDEN_EXTRA_COLS
        widened = min(MAX_COLS, max(cols, target_cols))
        if widened != cols:
            logger.debug(
                "Widening %dx%d to %d columns (screen ratio %.3f)",
                cols, rows, widened, screen_ratio,
            )
            cols = widened
            if available_width > 0:
                cell_size = min(cell_size, available_width / cols)

    if force_odd_rows and rows % 2 == 0:
        rows = rows - 1 if rows - 1 >= MIN_ROWS else rows + 1

    return MazeDimensions(cols, rows, cell_size, best.used_fallback)


# ============================================================================
# Connectivity helpers
# ============================================================================


def _is_open(cells: Sequence[Sequence[Tile]], x: int, y: int) -> bool:
    return 0 <= y < len(cells) and 0 <= x < len(cells[0]) and cells[y][x] != Tile.WALL


def count_exits(cells: Sequence[Sequence[Tile]], x: int, y: int) -> int:
    """Number of open 4-neighbours of (x, y)."""
    return sum(1 for dx, dy in _NEIGHBOR_OFFSETS if _is_open(cells, x + dx, y + dy))


def would_create_dead_end(cells: Sequence[Sequence[Tile]], x: int, y: int) -> bool:
    """True if walling (x, y) leaves an open neighbour with too few exits."""
    for dx, dy in _NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if not _is_open(cells, nx, ny):
            continue
        # (x, y) is still open in ``cells``; it stops counting once walled
        if count_exits(cells, nx, ny) - 1 < MIN_EXITS_PER_CELL:
            return True
    return False


def reachable_cells(cells: Sequence[Sequence[Tile]]) -> Set[Cell]:
    """Flood fill from the first open cell in row-major order."""
    start = next(
        ((x, y) for y, row in enumerate(cells) for x, tile in enumerate(row) if tile != Tile.WALL),
        None,
    )
    if start is None:
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in _NEIGHBOR_OFFSETS:
            nxt = (x + dx, y + dy)
            if nxt not in seen and _is_open(cells, *nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def is_connected(grid: Grid) -> bool:
    """True if every non-wall cell of ``grid`` is reachable from every other."""
    open_count = grid.cols * grid.rows - grid.count(Tile.WALL)
    return len(reachable_cells(grid.to_lists())) == open_count


def player_start_position(grid: Grid, width: int, height: int) -> Position:
    """Where a session places a ``width`` x ``height`` player on ``grid``."""
    return find_valid_position(
        grid,
        math.floor(grid.cols * PLAYER_START_COL_FRACTION),
        math.floor(grid.rows * PLAYER_START_ROW_FRACTION),
        width,
        height,
    )


def reachable_positions(grid: Grid, start: Position, width: int, height: int) -> Set[Position]:
    """Every footprint position reachable from ``start`` one step at a time."""
    if not is_valid_move(grid, start, width, height):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        pos = queue.popleft()
        for direction in ALL_DIRECTIONS:
            nxt = step_target(grid, pos, direction, width, height)
            if nxt is not None and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def unreachable_open_cells(grid: Grid, width: int, height: int) -> Set[Cell]:
    """Open cells that no footprint reachable from the player start overlaps.

    Ghosts and pellets only ever sit on open cells, so an empty result means
    the player can collect every pellet and touch every ghost.
    """
    start = player_start_position(grid, width, height)
    covered: Set[Cell] = set()
    for pos in reachable_positions(grid, start, width, height):
        for dy in range(height):
            for dx in range(width):
                covered.add((pos.x + dx, pos.y + dy))
    return {(x, y) for x, y, tile in grid.cells() if tile != Tile.WALL and (x, y) not in covered}


def is_playable(grid: Grid, player_size: Footprint = DEFAULT_PLAYER_FOOTPRINT) -> bool:
    width, height = player_size
    return not unreachable_open_cells(grid, width, height)


# ============================================================================
# Structure
# ============================================================================


def compute_text_area(cols: int, rows: int) -> TextArea:
    return TextArea(
        left=max(TEXT_AREA_MIN_LEFT, math.floor(cols * TEXT_AREA_LEFT_FRACTION)),
        top=max(TEXT_AREA_MIN_TOP, math.floor(rows * TEXT_AREA_TOP_FRACTION)),
        right=min(cols - 2, math.floor(cols * TEXT_AREA_RIGHT_FRACTION)),
        bottom=max(TEXT_AREA_MIN_BOTTOM, math.floor(rows * TEXT_AREA_BOTTOM_FRACTION)),
    )


class MazeBuilder:
    """Mutable working buffer for one maze; ``build()`` freezes it into a Grid."""

    def __init__(
        self,
        cols: int,
        rows: int,
        ghost_size: int = GHOST_SIZE,
        player_size: Footprint = DEFAULT_PLAYER_FOOTPRINT,
    ) -> None:
        if cols < MIN_COLS or rows < MIN_ROWS:
            raise MazeGenerationError(
                f"Maze must be at least {MIN_COLS}x{MIN_ROWS}, got {cols}x{rows}"
            )
        self.cols = cols
        self.rows = rows
        self.ghost_size = ghost_size
        self.player_size = player_size
        self.text_area = compute_text_area(cols, rows)
        self.spawn_points: List[Position] = []
        self._spawn_reserved: Set[Cell] = set()
        self.cells: List[List[Tile]] = [
            [self._base_tile(x, y) for x in range(cols)] for y in range(rows)
        ]

    def _base_tile(self, x: int, y: int) -> Tile:
        if x in (0, self.cols - 1) or y in (0, self.rows - 1):
            return Tile.WALL
        if self.text_area.contains(x, y):
            return Tile.EMPTY
        return Tile.PELLET

    def _in_interior(self, x: int, y: int) -> bool:
        return 1 <= x <= self.cols - 2 and 1 <= y <= self.rows - 2

    def stamp_spawns(self, spawn_fractions: Sequence[Tuple[float, float]] = SPAWN_POINTS) -> None:
        """Mark spawn anchors and reserve a ghost-sized block under each one."""
        max_x = self.cols - 1 - self.ghost_size
        max_y = self.rows - 1 - self.ghost_size
        for fx, fy in spawn_fractions:
            x = max(1, min(max_x, round(fx * (self.cols - 1))))
            y = max(1, min(max_y, round(fy * (self.rows - 1))))
            if self.text_area.contains(x, y):
                y = min(max_y, self.text_area.bottom)
            anchor = Position(x, y)
            if anchor in self.spawn_points:
                continue
            self.spawn_points.append(anchor)
            self.cells[y][x] = Tile.GHOST_SPAWN
            for dy in range(self.ghost_size):
                for dx in range(self.ghost_size):
                    self._spawn_reserved.add((x + dx, y + dy))

    def can_place_wall(self, x: int, y: int) -> bool:
        """Interior, outside the text band, off spawn blocks, and currently a pellet."""
        return (
            self._in_interior(x, y)
            and not self.text_area.contains(x, y)
            and (x, y) not in self._spawn_reserved
            and self.cells[y][x] == Tile.PELLET
        )

    def _shape_cells(self, spec: ObstacleSpec) -> List[Cell]:
        """Absolute cells for ``spec``, shifted so the shape fits the interior."""
        offsets = SHAPE_OFFSETS[spec.shape]
        min_dx = min(dx for dx, _ in offsets)
        max_dx = max(dx for dx, _ in offsets)
        min_dy = min(dy for _, dy in offsets)
        max_dy = max(dy for _, dy in offsets)

        cx = round(spec.x * (self.cols - 1))
        cy = round(spec.y * (self.rows - 1))
        cx = max(1 - min_dx, min(self.cols - 2 - max_dx, cx))
        cy = max(1 - min_dy, min(self.rows - 2 - max_dy, cy))
        return [(cx + dx, cy + dy) for dx, dy in offsets]

    def _clear_of_spawns(self, cells: Sequence[Cell]) -> bool:
        return all(self._in_interior(x, y) and (x, y) not in self._spawn_reserved for x, y in cells)

    def place_obstacle(self, spec: ObstacleSpec) -> Result[List[Cell], str]:
        """Rasterize one obstacle. Returns the committed cells, or Err if skipped."""
        base = self._shape_cells(spec)
        chosen = base
        if not self._clear_of_spawns(base):
            for offset in SPAWN_AVOIDANCE_OFFSETS:
                shifted = [(x, y + offset) for x, y in base]
                if self._clear_of_spawns(shifted):
                    chosen = shifted
                    break

        committed: List[Cell] = []
        for x, y in chosen:
            if not self.can_place_wall(x, y) or would_create_dead_end(self.cells, x, y):
                continue
            self.cells[y][x] = Tile.WALL
            committed.append((x, y))

        if not committed:
            return Err(f"{spec.shape.value} at ({spec.x:.2f}, {spec.y:.2f}) has no placeable cells")

        if not self._open_area_connected():
            self._rollback(committed)
            return Err(f"{spec.shape.value} at ({spec.x:.2f}, {spec.y:.2f}) would disconnect the maze")

        if not is_playable(Grid(self.cells), self.player_size):
            self._rollback(committed)
            return Err(
                f"{spec.shape.value} at ({spec.x:.2f}, {spec.y:.2f}) "
                "would leave cells the player cannot reach"
            )

        return Ok(committed)

    def _rollback(self, cells: Sequence[Cell]) -> None:
        for x, y in cells:
            self.cells[y][x] = Tile.PELLET

    def _open_area_connected(self) -> bool:
        open_count = sum(1 for row in self.cells for tile in row if tile != Tile.WALL)
        return len(reachable_cells(self.cells)) == open_count

    def place_obstacles(self, obstacles: Sequence[ObstacleSpec] = OBSTACLES) -> int:
        """Place every obstacle that fits; returns how many were committed."""
        placed = 0
        for spec in obstacles:
            result = self.place_obstacle(spec)
            if result.is_err():
                logger.debug("Skipped obstacle: %s", result.error)
            else:
                placed += 1
        return placed

    def build(self, cell_size: Optional[float] = None) -> MazeLayout:
        return MazeLayout(
            grid=Grid(self.cells),
            spawn_points=tuple(self.spawn_points),
            text_area=self.text_area,
            cell_size=cell_size,
        )


def generate_maze_for_grid(
    cols: int,
    rows: int,
    ghost_size: int = GHOST_SIZE,
    cell_size: Optional[float] = None,
    spawn_fractions: Sequence[Tuple[float, float]] = SPAWN_POINTS,
    obstacles: Sequence[ObstacleSpec] = OBSTACLES,
    player_size: Footprint = DEFAULT_PLAYER_FOOTPRINT,
) -> MazeLayout:
    """Generate a maze with an explicit column and row count.

    Raises:
        MazeGenerationError: If the dimensions are below the playable minimum
    """
    builder = MazeBuilder(cols, rows, ghost_size, player_size)
    builder.stamp_spawns(spawn_fractions)
    placed = builder.place_obstacles(obstacles)
    logger.debug("Placed %d/%d obstacles on %dx%d maze", placed, len(obstacles), cols, rows)
    return builder.build(cell_size)


def fallback_layout() -> MazeLayout:
    """The fixed hand-authored maze."""
    grid = Grid.from_strings(FALLBACK_LAYOUT)
    spawns = tuple(Position(x, y) for x, y in grid.positions_of(Tile.GHOST_SPAWN))
    left, top, right, bottom = FALLBACK_TEXT_AREA
    return MazeLayout(
        grid=grid,
        spawn_points=spawns,
        text_area=TextArea(left, top, right, bottom),
        is_fallback=True,
    )


def generate_maze(
    available_width: Optional[float] = None,
    available_height: Optional[float] = None,
    viewport: Optional[ViewportProvider] = None,
    ghost_size: int = GHOST_SIZE,
    force_odd_rows: bool = FORCE_ODD_ROWS,
    player_size: Footprint = DEFAULT_PLAYER_FOOTPRINT,
) -> MazeLayout:
    """Generate a maze sized for the given pixel area.

    Missing hints are requested from ``viewport``. If neither is available,
    the hand-authored fallback layout is returned.
    """
    if available_width is None or available_height is None:
        hint = viewport() if viewport is not None else None
        if hint is None:
            logger.warning("No size hints available; using the fallback layout")
            return fallback_layout()
        available_width, available_height = hint

    dims = choose_dimensions(available_width, available_height, force_odd_rows)
    logger.info(
        "Maze %dx%d at %.1fpx cells for %.0fx%.0f area",
        dims.cols, dims.rows, dims.cell_size, available_width, available_height,
    )
    return generate_maze_for_grid(
        dims.cols, dims.rows, ghost_size, dims.cell_size, player_size=player_size
    )
