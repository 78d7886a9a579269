"""Collision detection between the player and ghosts.

Architecture Notes:
- CollisionDetector implements the Strategy pattern so the session can be
  handed a different test (tests use this to force or suppress contact)
- Footprints are integer cell rectangles; sharing an edge is not a collision
"""

from typing import List, Sequence, Tuple

from maze_chase.entities import Entity, Ghost

Rect = Tuple[int, int, int, int]


def rects_overlap(rect1: Rect, rect2: Rect) -> bool:
    """Check if two (x, y, width, height) rectangles share at least one cell."""
    x1, y1, w1, h1 = rect1
    x2, y2, w2, h2 = rect2
    return x1 < x2 + w2 and x1 + w1 > x2 and y1 < y2 + h2 and y1 + h1 > y2


class CollisionDetector:
    """Base class for collision detection strategies."""

    def collides(self, entity1: Entity, entity2: Entity) -> bool:
        raise NotImplementedError("Subclasses must implement collides()")


class RectCollisionDetector(CollisionDetector):
    """Axis-aligned bounding-box test on cell footprints."""

    def collides(self, entity1: Entity, entity2: Entity) -> bool:
        return rects_overlap(entity1.get_rect(), entity2.get_rect())


default_collision_detector = RectCollisionDetector()


def find_touched_ghosts(
    player: Entity,
    ghosts: Sequence[Ghost],
    detector: CollisionDetector = default_collision_detector,
) -> List[int]:
    """Return pool indices of active, uneaten ghosts overlapping the player."""
    return [
        index
        for index, ghost in enumerate(ghosts)
        if ghost.is_active and not ghost.is_eaten and detector.collides(player, ghost)
    ]
