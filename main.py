"""Main entry point for the maze chase game.

This module provides command-line options to run the game:
- Windowed mode (default): pygame window with keyboard controls
- Headless mode: drives the engine with a synthetic clock, for testing
"""

import argparse
import logging
import random
from typing import Optional

from maze_chase.config.display import HUD_HEIGHT, SCREEN_HEIGHT, SCREEN_WIDTH
from maze_chase.config.game_config import GameConfig, MazeConfig
from maze_chase.entities import Direction
from maze_chase.game_loop import GameLoop, ManualFrameHost
from maze_chase.session import GameSession

logger = logging.getLogger(__name__)

SCRIPT_DIRECTIONS = {
    "U": Direction.UP,
    "D": Direction.DOWN,
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
}

# Headless random input changes direction this often (in ticks)
RANDOM_TURN_INTERVAL = 6


def build_config(args: argparse.Namespace) -> GameConfig:
    maze = MazeConfig(
        available_width=args.width,
        available_height=args.height,
        cols=args.cols,
        rows=args.rows,
    )
    return GameConfig(maze=maze)


def run_headless(config: GameConfig, ticks: int, seed: Optional[int] = None, script: str = "") -> None:
    """Run ``ticks`` ticks without a window and log a summary.

    Args:
        config: Game configuration
        ticks: Number of ticks to resolve
        seed: Optional random seed for deterministic behavior
        script: Letters U/D/L/R; one is submitted per tick, then random input takes over
    """
    session = GameSession(config, seed=seed)
    input_rng = random.Random(seed)
    host = ManualFrameHost()
    loop = GameLoop(session, host)
    loop.start()
    host.advance(0)  # first frame only sets the clock

    tick_ms = config.timing.tick_ms
    for index in range(ticks):
        if index < len(script):
            session.submit_direction(SCRIPT_DIRECTIONS[script[index].upper()])
        elif index % RANDOM_TURN_INTERVAL == 0:
            session.submit_direction(input_rng.choice(list(Direction)))
        host.advance(tick_ms)
        if session.status_machine.is_terminal:
            logger.info("Session ended after %d ticks", loop.ticks_resolved)
            break

    # let a pending win resolve
    if session.win_pending:
        host.advance(config.timing.win_grace_ms)
    loop.stop()

    state = session.state
    logger.info("Status: %s", state.status.value)
    logger.info("Score: %d", state.score)
    logger.info("Pellets left: %d", state.pellets_remaining)
    logger.info("Ghosts eaten: %d/%d", state.ghosts_eaten, len(state.ghosts))


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Maze Chase",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play in a window (default)
  python main.py

  # Headless run with a fixed seed
  python main.py --headless --ticks 2000 --seed 42

  # Headless run on an explicit 28x31 maze with scripted opening moves
  python main.py --headless --cols 28 --rows 31 --script RRRUUULLL
        """,
    )
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument(
        "--ticks", type=int, default=1000, help="Ticks to simulate in headless mode (default: 1000)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument("--width", type=float, default=None, help="Maze area width hint in pixels")
    parser.add_argument("--height", type=float, default=None, help="Maze area height hint in pixels")
    parser.add_argument("--cols", type=int, default=None, help="Explicit maze column count")
    parser.add_argument("--rows", type=int, default=None, help="Explicit maze row count")
    parser.add_argument(
        "--script", type=str, default="", help="Headless input script of U/D/L/R letters"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    if bool(args.cols) != bool(args.rows):
        parser.error("--cols and --rows must be given together")
    if (args.width is None) != (args.height is None):
        parser.error("--width and --height must be given together")
    if any(char.upper() not in SCRIPT_DIRECTIONS for char in args.script):
        parser.error("--script may only contain the letters U, D, L and R")

    config = build_config(args)

    if args.headless:
        logger.info("Starting headless run: %d ticks, seed %s", args.ticks, args.seed)
        if config.maze.available_width is None and config.maze.cols is None:
            config.maze.available_width = float(SCREEN_WIDTH)
            config.maze.available_height = float(SCREEN_HEIGHT - HUD_HEIGHT)
        run_headless(config, args.ticks, seed=args.seed, script=args.script)
    else:
        from rendering.pygame_app import run_windowed

        run_windowed(config, seed=args.seed)


if __name__ == "__main__":
    main()
