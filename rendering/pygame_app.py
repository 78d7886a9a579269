"""Windowed maze-chase game on pygame."""

import logging
from typing import Dict, Optional

import pygame

from maze_chase.config.display import FRAME_RATE, HUD_HEIGHT, SCREEN_HEIGHT, SCREEN_WIDTH
from maze_chase.config.game_config import GameConfig
from maze_chase.entities import Direction
from maze_chase.game_loop import FrameCallback, GameLoop
from maze_chase.session import GameSession
from rendering.maze_renderer import MazeRenderer

logger = logging.getLogger(__name__)

KEY_DIRECTIONS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}


class PygameFrameHost:
    """Frame host backed by the pygame main loop; fired once per loop pass."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def fire(self, now_ms: float) -> None:
        callbacks = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback(now_ms)


class MazeChaseApp:
    """Window, input and main loop around a ``GameSession``.

    Attributes:
        width: Window width in pixels
        height: Window height in pixels
        session: The game being played
        loop: Tick scheduler fed by the pygame clock
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
    ) -> None:
        self.width = width
        self.height = height
        self.clock = pygame.time.Clock()
        self.host = PygameFrameHost()
        self.session = GameSession(
            config,
            seed=seed,
            viewport=lambda: (float(self.width), float(self.height - HUD_HEIGHT)),
        )
        self.loop = GameLoop(self.session, self.host)
        self.screen: Optional[pygame.Surface] = None
        self.renderer: Optional[MazeRenderer] = None

    def setup(self) -> None:
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("Maze Chase")
        self.renderer = MazeRenderer(self.screen, pygame.font.Font(None, 24))

    def handle_events(self) -> bool:
        """Handle user input. Returns False when the game should quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type != pygame.KEYDOWN:
                continue
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key == pygame.K_r:
                self.loop.restart()
            elif event.key in KEY_DIRECTIONS:
                self.session.submit_direction(KEY_DIRECTIONS[event.key])
        return True

    def render(self) -> None:
        if self.renderer is None:
            return
        self.renderer.draw(self.session.state)
        pygame.display.flip()

    def run(self) -> None:
        self.setup()
        self.loop.start()
        logger.info("Controls: arrows/WASD move, R restarts, Esc quits")

        while self.handle_events():
            self.host.fire(float(pygame.time.get_ticks()))
            self.render()
            self.clock.tick(FRAME_RATE)

        self.loop.stop()
        state = self.session.state
        logger.info(
            "Final score %d, %d/%d ghosts eaten, status %s",
            state.score, state.ghosts_eaten, len(state.ghosts), state.status.value,
        )


def run_windowed(config: Optional[GameConfig] = None, seed: Optional[int] = None) -> None:
    """Entry point for the windowed game."""
    pygame.init()
    try:
        MazeChaseApp(config, seed=seed).run()
    finally:
        pygame.quit()
