"""Ghost roster: identity, display name, colour and movement policy."""

from dataclasses import dataclass
from typing import Tuple

from maze_chase.entities import GhostBehavior


@dataclass(frozen=True)
class GhostType:
    """Static description of one ghost in the roster."""

    ghost_id: str
    name: str
    color: str
    behavior: GhostBehavior


GHOST_TYPES: Tuple[GhostType, ...] = (
    GhostType("g1", "Dry Skin", "#FF6B6B", GhostBehavior.WANDERER),
    GhostType("g2", "Dull Skin", "#95A5A6", GhostBehavior.HORIZONTAL_PATROL),
    GhostType("g3", "Flaky Skin", "#F39C12", GhostBehavior.VERTICAL_PATROL),
    GhostType("g4", "Itchy Skin", "#E74C3C", GhostBehavior.ERRATIC),
    GhostType("g5", "Papery Skin", "#ECF0F1", GhostBehavior.CORNER_HUGGER),
    GhostType("g6", "Rough Skin", "#8B4513", GhostBehavior.SLOW_MOVER),
    GhostType("g7", "Inelastic Skin", "#9B59B6", GhostBehavior.ZIGZAG),
    GhostType("g8", "Unhealthy Skin", "#34495E", GhostBehavior.DISTANCE_KEEPER),
)


def ghost_type_for_slot(index: int) -> GhostType:
    """Roster entry for pool slot ``index``; pools larger than the roster cycle."""
    return GHOST_TYPES[index % len(GHOST_TYPES)]

