"""Maze layout tables: reserved text band, spawn points, obstacles, fallback map.

Positions are fractions of the grid size so the same tables scale to any
generated width and height.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Reserved band for overlay text, as fractions of rows/cols (end exclusive)
TEXT_AREA_TOP_FRACTION = 0.12
TEXT_AREA_BOTTOM_FRACTION = 0.22
TEXT_AREA_LEFT_FRACTION = 0.2
TEXT_AREA_RIGHT_FRACTION = 0.8

# Minimum extents of the text band so tiny grids still get one
TEXT_AREA_MIN_TOP = 2
TEXT_AREA_MIN_BOTTOM = 4
TEXT_AREA_MIN_LEFT = 2

# Force an odd row count after sizing (keeps the maze vertically symmetric)
FORCE_ODD_ROWS = True

# Vertical nudges tried when an obstacle lands on a spawn point
SPAWN_AVOIDANCE_OFFSETS: Tuple[int, ...] = (0, -1, 1, -2, 2)

# An open cell next to a new wall must keep at least this many open neighbours
MIN_EXITS_PER_CELL = 2


class ObstacleShape(Enum):
    """Shapes an obstacle entry can rasterize to."""

    SINGLE = "single"
    HORIZONTAL_PAIR = "horizontal_pair"
    VERTICAL_PAIR = "vertical_pair"
    U_SHAPE = "u_shape"


# Cell offsets from the obstacle anchor for each shape
SHAPE_OFFSETS = {
    ObstacleShape.SINGLE: ((0, 0),),
    ObstacleShape.HORIZONTAL_PAIR: ((0, 0), (1, 0)),
    ObstacleShape.VERTICAL_PAIR: ((0, 0), (0, 1)),
    ObstacleShape.U_SHAPE: ((-1, -1), (-1, 0), (0, 0), (1, 0), (1, -1)),
}


@dataclass(frozen=True)
class ObstacleSpec:
    """One declarative obstacle: normalized anchor position plus a shape."""

    x: float
    y: float
    shape: ObstacleShape


# Ghost spawn points: corners, side edges, centre and upper centre
SPAWN_POINTS: Tuple[Tuple[float, float], ...] = (
    (0.15, 0.08),
    (0.85, 0.08),
    (0.08, 0.5),
    (0.92, 0.5),
    (0.5, 0.5),
    (0.15, 0.92),
    (0.85, 0.92),
    (0.5, 0.3),
)

OBSTACLES: Tuple[ObstacleSpec, ...] = (
    ObstacleSpec(0.25, 0.32, ObstacleShape.U_SHAPE),
    ObstacleSpec(0.75, 0.32, ObstacleShape.U_SHAPE),
    ObstacleSpec(0.12, 0.30, ObstacleShape.SINGLE),
    ObstacleSpec(0.88, 0.30, ObstacleShape.SINGLE),
    ObstacleSpec(0.5, 0.40, ObstacleShape.HORIZONTAL_PAIR),
    ObstacleSpec(0.2, 0.45, ObstacleShape.VERTICAL_PAIR),
    ObstacleSpec(0.8, 0.45, ObstacleShape.VERTICAL_PAIR),
    ObstacleSpec(0.35, 0.56, ObstacleShape.SINGLE),
    ObstacleSpec(0.65, 0.56, ObstacleShape.SINGLE),
    ObstacleSpec(0.5, 0.64, ObstacleShape.U_SHAPE),
    ObstacleSpec(0.2, 0.68, ObstacleShape.HORIZONTAL_PAIR),
    ObstacleSpec(0.8, 0.68, ObstacleShape.HORIZONTAL_PAIR),
    ObstacleSpec(0.3, 0.78, ObstacleShape.VERTICAL_PAIR),
    ObstacleSpec(0.7, 0.78, ObstacleShape.VERTICAL_PAIR),
)

# Hand-authored map used when no size hints are available (20 x 29).
# '#' wall, '.' pellet, ' ' empty (text band), 'G' ghost spawn
FALLBACK_LAYOUT: Tuple[str, ...] = (
    "####################",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#...             ..#",
    "#...             ..#",
    "#...             ..#",
    "#..................#",
    "#.....##....##.....#",
    "#.....#GGGGGG#.....#",
    "#.....#GGGGGG#.....#",
    "#.....########.....#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "###.....##.......###",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "####################",
)

# Text band of the fallback map as (left, top, right, bottom), end exclusive
FALLBACK_TEXT_AREA = (4, 5, 17, 8)
