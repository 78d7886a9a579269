"""Maze chase simulation engine.

This package contains the pure game logic, with no UI dependencies:

- grid / entities: the maze tiles, the player and the ghost pool
- maze_generator: sizing and procedural layout that stays playable for the player footprint
- movement / collision: footprint legality, toroidal wrap and contact tests
- ghost_ai: the eight ghost movement policies
- session: tick resolution, scoring, ghost lifecycle and win detection
- game_loop: frame-driven scheduling of fixed-duration ticks

Rendering lives in the top-level ``rendering`` package.
"""

from maze_chase.entities import Direction, Entity, Ghost, GhostBehavior, Position
from maze_chase.game_loop import GameLoop, ManualFrameHost
from maze_chase.grid import Grid, Tile
from maze_chase.maze_generator import MazeLayout, generate_maze, generate_maze_for_grid
from maze_chase.session import GameSession, SessionState, TickResult
from maze_chase.state_machine import GameStatus

__all__ = [
    "Direction",
    "Entity",
    "GameLoop",
    "GameSession",
    "GameStatus",
    "Ghost",
    "GhostBehavior",
    "Grid",
    "ManualFrameHost",
    "MazeLayout",
    "Position",
    "SessionState",
    "Tile",
    "TickResult",
    "generate_maze",
    "generate_maze_for_grid",
]
