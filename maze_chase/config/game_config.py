"""Typed game configuration assembled from the constants modules."""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from maze_chase.config.gameplay import (
    GHOST_EATEN_REWARD,
    GHOST_POOL_SIZE,
    GHOST_SIZE,
    GLOBAL_GHOST_SKIP_PERIOD,
    INITIAL_ACTIVE_GHOSTS,
    MESSAGE_DURATION_MS,
    PELLET_REWARD,
    PLAYER_ASPECT_RATIO,
    PLAYER_HEIGHT,
    RULESET,
    TICK_DURATION_MS,
    WIN_GRACE_PERIOD_MS,
)
from maze_chase.config.maze import FORCE_ODD_ROWS
from maze_chase.exceptions import ConfigurationError


@dataclass
class MazeConfig:
    """How the maze is sized.

    Attributes:
        available_width: Width hint in pixels (None lets the viewport decide)
        available_height: Height hint in pixels
        cols: Explicit column count; skips the cell-size search when set with rows
        rows: Explicit row count
        force_odd_rows: Decrement an even row count after sizing
    """

    available_width: Optional[float] = None
    available_height: Optional[float] = None
    cols: Optional[int] = None
    rows: Optional[int] = None
    force_odd_rows: bool = FORCE_ODD_ROWS


@dataclass
class EntityConfig:
    """Entity footprints in cells."""

    player_height: int = PLAYER_HEIGHT
    player_aspect_ratio: float = PLAYER_ASPECT_RATIO
    ghost_size: int = GHOST_SIZE

    @property
    def player_width(self) -> int:
        return max(1, math.floor(self.player_height * self.player_aspect_ratio))

    @property
    def player_footprint(self) -> Tuple[int, int]:
        return (self.player_width, self.player_height)


@dataclass
class GhostConfig:
    """Ghost pool sizing and pacing."""

    pool_size: int = GHOST_POOL_SIZE
    initial_active: int = INITIAL_ACTIVE_GHOSTS
    global_skip_period: int = GLOBAL_GHOST_SKIP_PERIOD


@dataclass
class ScoringConfig:
    pellet_reward: int = PELLET_REWARD
    ghost_eaten_reward: int = GHOST_EATEN_REWARD


@dataclass
class TimingConfig:
    """Tick cadence and the cosmetic delays layered on top of it (milliseconds)."""

    tick_ms: int = TICK_DURATION_MS
    message_duration_ms: int = MESSAGE_DURATION_MS
    win_grace_ms: int = WIN_GRACE_PERIOD_MS


@dataclass
class GameConfig:
    """Everything a session needs besides its RNG.

    Attributes:
        ruleset: Collision ruleset; only "eat_ghosts" is supported
    """

    maze: MazeConfig = field(default_factory=MazeConfig)
    entities: EntityConfig = field(default_factory=EntityConfig)
    ghosts: GhostConfig = field(default_factory=GhostConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    ruleset: str = RULESET

    def validate(self) -> None:
        """Raise ConfigurationError if any setting is unusable."""
        if self.ruleset != RULESET:
            raise ConfigurationError(f"Unsupported ruleset {self.ruleset!r}; expected {RULESET!r}")
        if self.entities.player_height < 1 or self.entities.player_aspect_ratio <= 0:
            raise ConfigurationError("Player footprint must be at least one cell")
        if self.entities.ghost_size < 1:
            raise ConfigurationError("Ghost footprint must be at least one cell")
        if self.ghosts.pool_size < 1:
            raise ConfigurationError("Ghost pool needs at least one slot")
        if not 1 <= self.ghosts.initial_active <= self.ghosts.pool_size:
            raise ConfigurationError(
                f"initial_active={self.ghosts.initial_active} must be within "
                f"[1, pool_size={self.ghosts.pool_size}]"
            )
        if self.ghosts.global_skip_period < 2:
            raise ConfigurationError("global_skip_period must be at least 2")
        if self.timing.tick_ms <= 0:
            raise ConfigurationError("tick_ms must be positive")
        if self.scoring.pellet_reward < 0 or self.scoring.ghost_eaten_reward < 0:
            raise ConfigurationError("Rewards cannot be negative")
        if (self.maze.cols is None) != (self.maze.rows is None):
            raise ConfigurationError("cols and rows must be given together")
