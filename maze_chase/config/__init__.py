"""Configuration layer: constants and typed config dataclasses."""

from maze_chase.config.display import FRAME_RATE, SCREEN_HEIGHT, SCREEN_WIDTH
from maze_chase.config.game_config import (
    EntityConfig,
    GameConfig,
    GhostConfig,
    MazeConfig,
    ScoringConfig,
    TimingConfig,
)
from maze_chase.config.gameplay import (
    GHOST_EATEN_REWARD,
    GHOST_POOL_SIZE,
    PELLET_REWARD,
    RULESET,
    TICK_DURATION_MS,
)
from maze_chase.config.ghosts import GHOST_TYPES, GhostType

__all__ = [
    "EntityConfig",
    "FRAME_RATE",
    "GHOST_EATEN_REWARD",
    "GHOST_POOL_SIZE",
    "GHOST_TYPES",
    "GameConfig",
    "GhostConfig",
    "GhostType",
    "MazeConfig",
    "PELLET_REWARD",
    "RULESET",
    "SCREEN_HEIGHT",
    "SCREEN_WIDTH",
    "ScoringConfig",
    "TICK_DURATION_MS",
    "TimingConfig",
]
