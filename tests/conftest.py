"""Pytest configuration and fixtures for maze chase tests."""

import random
from typing import Optional, Sequence

import pytest

from maze_chase.config.game_config import EntityConfig, GameConfig, GhostConfig
from maze_chase.entities import Position
from maze_chase.grid import Grid, Tile
from maze_chase.maze_generator import MazeLayout, TextArea
from maze_chase.session import GameSession


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def open_grid():
    """20x10 grid: wall border around an interior full of pellets."""
    return Grid.filled(20, 10, Tile.PELLET)


@pytest.fixture
def small_config():
    """2x2 player, 1x1 ghosts, two ghosts both active."""
    return GameConfig(
        entities=EntityConfig(player_height=2, player_aspect_ratio=1.0, ghost_size=1),
        ghosts=GhostConfig(pool_size=2, initial_active=2),
    )


@pytest.fixture
def session_factory(small_config):
    """Build a session on a fixed grid instead of a generated maze."""

    def make(
        grid: Grid,
        spawn_points: Sequence[Position] = (Position(2, 2), Position(17, 7)),
        config: Optional[GameConfig] = None,
        seed: int = 42,
        **kwargs,
    ) -> GameSession:
        layout = MazeLayout(grid=grid, spawn_points=tuple(spawn_points), text_area=TextArea(0, 0, 0, 0))
        return GameSession(
            config if config is not None else small_config,
            seed=seed,
            maze_factory=lambda: layout,
            **kwargs,
        )

    return make
