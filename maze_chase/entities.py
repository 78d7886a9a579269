"""Entities that move through the maze: the player and the ghost pool.

All entity types are frozen dataclasses. The session never mutates an
entity in place; movement and lifecycle changes produce a new instance via
``dataclasses.replace`` so a snapshot handed to a renderer stays stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Direction(Enum):
    """Cardinal movement directions."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def vector(self) -> Tuple[int, int]:
        return MOVEMENT_VECTORS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)


MOVEMENT_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Fixed evaluation order; ties in every ghost policy resolve to the earliest entry
ALL_DIRECTIONS: Tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


@dataclass(frozen=True)
class Position:
    """Integer cell coordinate of an entity's top-left corner."""

    x: int
    y: int

    def step(self, direction: Direction) -> "Position":
        dx, dy = direction.vector
        return Position(self.x + dx, self.y + dy)

    def distance_sq(self, other: "Position") -> int:
        return (self.x - other.x) ** 2 + (self.y - other.y) ** 2


class GhostBehavior(Enum):
    """The closed set of ghost movement policies.

    Each ghost gets exactly one at creation and keeps it for the session.
    """

    WANDERER = "wanderer"
    HORIZONTAL_PATROL = "horizontal"
    VERTICAL_PATROL = "vertical"
    ERRATIC = "erratic"
    CORNER_HUGGER = "corner"
    SLOW_MOVER = "slow"
    ZIGZAG = "zigzag"
    DISTANCE_KEEPER = "distance"


@dataclass(frozen=True)
class Entity:
    """Anything occupying a width x height block of cells.

    Attributes:
        entity_id: Stable identity ("p1" for the player, "g1".."g8" for ghosts)
        pos: Top-left cell of the footprint
        direction: Current heading, or None when standing still
        next_direction: Queued turn, taken as soon as it becomes legal
        width: Footprint width in cells
        height: Footprint height in cells
        color: Cosmetic colour for renderers
    """

    entity_id: str
    pos: Position
    direction: Optional[Direction] = None
    next_direction: Optional[Direction] = None
    width: int = 1
    height: int = 1
    color: str = "#FFFF00"

    def get_rect(self) -> Tuple[int, int, int, int]:
        """Return the footprint as (x, y, width, height)."""
        return (self.pos.x, self.pos.y, self.width, self.height)

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (x, y) cell covered by the footprint."""
        for dy in range(self.height):
            for dx in range(self.width):
                yield (self.pos.x + dx, self.pos.y + dy)


@dataclass(frozen=True)
class Ghost(Entity):
    """A ghost slot in the fixed-size pool.

    ``is_active`` means the ghost is simulated and visible this tick.
    ``is_eaten`` is permanent for the session; an eaten ghost never returns.
    A ghost that is neither active nor eaten is pending activation.
    """

    behavior: GhostBehavior = GhostBehavior.WANDERER
    name: str = ""
    is_active: bool = False
    is_eaten: bool = False

    @property
    def is_pending(self) -> bool:
        return not self.is_active and not self.is_eaten
