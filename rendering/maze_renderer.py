"""Pygame rendering of maze-chase session snapshots.

The renderer only reads ``SessionState``; it never touches the session.
"""

from typing import Tuple

import pygame

from maze_chase.config.display import (
    BACKGROUND_COLOR,
    GAME_OVER_COLOR,
    HUD_HEIGHT,
    PELLET_COLOR,
    TEXT_COLOR,
    WALL_BORDER_COLOR,
    WALL_COLOR,
    WIN_OVERLAY_COLOR,
)
from maze_chase.entities import Entity
from maze_chase.grid import Grid, Tile
from maze_chase.session import SessionState
from maze_chase.state_machine import GameStatus


class MazeRenderer:
    """Draws the maze, entities, HUD and status overlays onto a surface.

    Attributes:
        screen: Pygame surface to render to
        font: Font for the HUD and overlays
        hud_height: Pixels reserved above the maze for the score line
    """

    def __init__(self, screen: pygame.Surface, font: pygame.font.Font, hud_height: int = HUD_HEIGHT) -> None:
        self.screen = screen
        self.font = font
        self.hud_height = hud_height

    def cell_size(self, grid: Grid) -> float:
        """Largest cell size that fits the grid below the HUD."""
        width, height = self.screen.get_size()
        return min(width / grid.cols, (height - self.hud_height) / grid.rows)

    def maze_origin(self, grid: Grid) -> Tuple[float, float]:
        """Top-left pixel of the maze, centred horizontally."""
        size = self.cell_size(grid)
        width, _ = self.screen.get_size()
        return ((width - grid.cols * size) / 2, float(self.hud_height))

    def _cell_rect(self, grid: Grid, x: int, y: int, w: int = 1, h: int = 1) -> pygame.Rect:
        size = self.cell_size(grid)
        ox, oy = self.maze_origin(grid)
        return pygame.Rect(
            int(ox + x * size),
            int(oy + y * size),
            max(1, int(w * size)),
            max(1, int(h * size)),
        )

    def draw(self, state: SessionState) -> None:
        """Render one snapshot. Does not flip the display."""
        self.screen.fill(BACKGROUND_COLOR)
        self.draw_grid(state.grid)
        for ghost in state.active_ghosts:
            self.draw_entity(state.grid, ghost)
        self.draw_entity(state.grid, state.player)
        self.draw_hud(state)
        self.draw_overlay(state)

    def draw_grid(self, grid: Grid) -> None:
        size = self.cell_size(grid)
        pellet_radius = max(1, int(size / 6))
        for x, y, tile in grid.cells():
            rect = self._cell_rect(grid, x, y)
            if tile == Tile.WALL:
                pygame.draw.rect(self.screen, WALL_COLOR, rect)
                pygame.draw.rect(self.screen, WALL_BORDER_COLOR, rect, 1)
            elif tile == Tile.PELLET:
                pygame.draw.circle(self.screen, PELLET_COLOR, rect.center, pellet_radius)
            elif tile == Tile.POWER_PELLET:
                pygame.draw.circle(self.screen, PELLET_COLOR, rect.center, pellet_radius * 2)

    def draw_entity(self, grid: Grid, entity: Entity) -> None:
        rect = self._cell_rect(grid, entity.pos.x, entity.pos.y, entity.width, entity.height)
        pygame.draw.ellipse(self.screen, pygame.Color(entity.color), rect)

    def draw_hud(self, state: SessionState) -> None:
        score_text = self.font.render(f"Score: {state.score}", True, TEXT_COLOR)
        self.screen.blit(score_text, (8, (self.hud_height - score_text.get_height()) // 2))

        if state.active_message:
            message = self.font.render(state.active_message, True, TEXT_COLOR)
            width, _ = self.screen.get_size()
            self.screen.blit(message, (width - message.get_width() - 8, (self.hud_height - message.get_height()) // 2))

    def draw_overlay(self, state: SessionState) -> None:
        if state.status == GameStatus.WON:
            self._draw_centered("You Win!  Press R to play again", WIN_OVERLAY_COLOR)
        elif state.status == GameStatus.GAME_OVER:
            self._draw_centered("Game Over  Press R to restart", GAME_OVER_COLOR)
        elif state.status == GameStatus.IDLE:
            self._draw_centered("Press an arrow key to start", TEXT_COLOR)

    def _draw_centered(self, text: str, color: Tuple[int, int, int]) -> None:
        surface = self.font.render(text, True, color)
        width, height = self.screen.get_size()
        self.screen.blit(surface, ((width - surface.get_width()) // 2, (height - surface.get_height()) // 2))
