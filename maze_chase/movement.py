"""Movement engine: footprint legality, toroidal wrap and per-tick advance.

One engine serves every entity. The only thing that differs between the
player and a ghost is the footprint size, which is read from the entity.

Wrap-around works in two stages. While a raw target is within one cell of
the legal range it is validated against the clamped (in-range) position, so
an entity crossing the seam keeps moving instead of teleporting early. The
committed position is then normalized to the opposite edge. The normalized
position must itself be legal, otherwise the entity stays put.
"""

import logging
from dataclasses import replace
from typing import Iterator, Optional, TypeVar

from maze_chase.entities import Direction, Entity, Position
from maze_chase.grid import Grid, Tile

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


def is_valid_move(grid: Grid, pos: Position, width: int, height: int) -> bool:
    """Return True if a width x height footprint at ``pos`` lies in bounds and off walls."""
    if pos.x < 0 or pos.y < 0:
        return False
    if pos.x + width > grid.cols or pos.y + height > grid.rows:
        return False
    for dy in range(height):
        for dx in range(width):
            if grid.tile_at(pos.x + dx, pos.y + dy) == Tile.WALL:
                return False
    return True


def _provisional_wrap(grid: Grid, pos: Position, width: int, height: int) -> Position:
    """Wrap used when probing a queued turn: any overshoot snaps across."""
    max_x = grid.cols - width
    max_y = grid.rows - height
    x, y = pos.x, pos.y
    if x < 0:
        x = max_x
    elif x > max_x:
        x = 0
    if y < 0:
        y = max_y
    elif y > max_y:
        y = 0
    return Position(x, y)


def _snap_beyond_band(grid: Grid, pos: Position, width: int, height: int) -> Position:
    """Snap only when the target overshoots the legal range by more than one cell."""
    max_x = grid.cols - width
    max_y = grid.rows - height
    x, y = pos.x, pos.y
    if x < -1:
        x = max_x
    elif x > max_x + 1:
        x = 0
    if y < -1:
        y = max_y
    elif y > max_y + 1:
        y = 0
    return Position(x, y)


def _clamp(grid: Grid, pos: Position, width: int, height: int) -> Position:
    return Position(
        max(0, min(pos.x, grid.cols - width)),
        max(0, min(pos.y, grid.rows - height)),
    )


def step_target(
    grid: Grid, pos: Position, direction: Direction, width: int, height: int
) -> Optional[Position]:
    """Where one step in ``direction`` would land, or None if the step is blocked."""
    raw = _snap_beyond_band(grid, pos.step(direction), width, height)
    if not is_valid_move(grid, _clamp(grid, raw, width, height), width, height):
        return None
    wrapped = _provisional_wrap(grid, raw, width, height)
    if not is_valid_move(grid, wrapped, width, height):
        return None
    return wrapped


def can_move(grid: Grid, entity: Entity, direction: Direction) -> bool:
    """True if ``entity`` could take one step in ``direction`` this tick."""
    return step_target(grid, entity.pos, direction, entity.width, entity.height) is not None


def can_turn(grid: Grid, entity: Entity, direction: Direction) -> bool:
    """True if the queued turn ``direction`` may become the active heading."""
    turned = _provisional_wrap(grid, entity.pos.step(direction), entity.width, entity.height)
    return is_valid_move(grid, turned, entity.width, entity.height)


def advance(entity: E, grid: Grid) -> E:
    """Resolve one tick of movement for ``entity``.

    The queued turn is adopted when legal; otherwise the current heading is
    kept. A blocked step leaves the position unchanged but still updates the
    heading, so the entity moves as soon as the way opens. The queued turn is
    not consumed.
    """
    direction = entity.direction
    if entity.next_direction is not None and can_turn(grid, entity, entity.next_direction):
        direction = entity.next_direction

    pos = entity.pos
    if direction is not None:
        target = step_target(grid, entity.pos, direction, entity.width, entity.height)
        if target is not None:
            pos = target

    return replace(entity, pos=pos, direction=direction)


def _spiral_candidates(start_x: int, start_y: int, limit: int) -> Iterator[Position]:
    for offset in range(limit):
        yield Position(start_x, start_y)
        yield Position(start_x + offset, start_y)
        yield Position(start_x - offset, start_y)
        yield Position(start_x, start_y + offset)
        yield Position(start_x, start_y - offset)
        yield Position(start_x + offset, start_y + offset)
        yield Position(start_x - offset, start_y - offset)
        yield Position(start_x + offset, start_y - offset)
        yield Position(start_x - offset, start_y + offset)


def find_valid_position(grid: Grid, start_x: int, start_y: int, width: int, height: int) -> Position:
    """Find a legal spot for a footprint near (start_x, start_y). Never fails.

    Searches outward ring by ring, then scans a band near the bottom centre,
    and finally returns a fixed last-resort coordinate.
    """
    for candidate in _spiral_candidates(start_x, start_y, max(grid.cols, grid.rows)):
        if is_valid_move(grid, candidate, width, height):
            return candidate

    center = grid.cols // 2
    for y in range(grid.rows - 5, grid.rows - 11, -1):
        for x in range(center - 2, center + 3):
            candidate = Position(x, y)
            if is_valid_move(grid, candidate, width, height):
                return candidate

    fallback = Position(max(1, center - 2), max(1, grid.rows - 5))
    logger.warning(
        "No legal %dx%d spot near (%d, %d); using last-resort %s",
        width, height, start_x, start_y, fallback,
    )
    return fallback
