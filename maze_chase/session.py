"""Game session: owns one game from maze generation to WON.

The session holds a single immutable ``SessionState`` snapshot and replaces
it wholesale on every tick, so a renderer can keep drawing the previous
snapshot while the next one is being resolved.

Per-tick resolution order:
1. Advance the player (queued turn first, then the step)
2. Clear pellets under the player's footprint and score them
3. Move every active ghost (subject to global pacing)
4. Eat touched ghosts; activate at most one pending ghost if any were eaten
5. Schedule the win once every ghost in the pool has been eaten

The win itself is deferred by a grace period and applied by ``poll()``.
"""

import logging
import math
import random
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from maze_chase.collision import CollisionDetector, default_collision_detector, find_touched_ghosts
from maze_chase.config.game_config import GameConfig
from maze_chase.config.gameplay import FALLBACK_SPAWN_ROW_FRACTION
from maze_chase.config.ghosts import GHOST_TYPES, ghost_type_for_slot
from maze_chase.entities import Direction, Entity, Ghost, Position
from maze_chase.ghost_ai import GhostBrain
from maze_chase.grid import Grid, Tile
from maze_chase.maze_generator import (
    MazeLayout,
    ViewportProvider,
    generate_maze,
    generate_maze_for_grid,
    player_start_position,
)
from maze_chase.movement import advance, find_valid_position, is_valid_move
from maze_chase.state_machine import GameStatus, StateMachine, create_game_status_machine

logger = logging.getLogger(__name__)

PLAYER_ID = "p1"
PLAYER_COLOR = "#FFFF00"

MazeFactory = Callable[[], MazeLayout]


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot handed to renderers once per tick.

    Attributes:
        grid: Maze tiles for this tick
        player: The player entity
        ghosts: The whole ghost pool, in slot order
        score: Points so far; never decreases
        status: Current game status
        active_message: Transient UI text, e.g. "Dry Skin Gone."
        message_expire_ms: Clock time after which the message is cleared
        tick: Number of resolved ticks
    """

    grid: Grid
    player: Entity
    ghosts: Tuple[Ghost, ...]
    score: int = 0
    status: GameStatus = GameStatus.IDLE
    active_message: Optional[str] = None
    message_expire_ms: Optional[float] = None
    tick: int = 0

    @property
    def pellets_remaining(self) -> int:
        return self.grid.count(Tile.PELLET)

    @property
    def active_ghosts(self) -> Tuple[Ghost, ...]:
        return tuple(g for g in self.ghosts if g.is_active)

    @property
    def ghosts_eaten(self) -> int:
        return sum(1 for g in self.ghosts if g.is_eaten)


@dataclass(frozen=True)
class TickResult:
    """What one call to ``GameSession.tick`` changed."""

    advanced: bool
    pellets_eaten: int = 0
    ghosts_eaten: Tuple[str, ...] = ()
    ghosts_activated: Tuple[str, ...] = ()
    score_delta: int = 0


class GameSession:
    """One maze-chase game.

    Args:
        config: Game configuration; validated on construction
        rng: Random source shared with the ghost AI
        seed: Seed for a fresh ``random.Random`` when ``rng`` is not given
        maze_factory: Produces the maze layout; defaults to generating one
            from ``config.maze``
        viewport: Supplies a pixel size when ``config.maze`` has no hints
        collision_detector: Player/ghost contact test

    Raises:
        ConfigurationError: If the configuration is invalid
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        maze_factory: Optional[MazeFactory] = None,
        viewport: Optional[ViewportProvider] = None,
        collision_detector: CollisionDetector = default_collision_detector,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.config.validate()
        self.rng = rng if rng is not None else random.Random(seed)
        self.brain = GhostBrain(self.rng, self.config.ghosts.global_skip_period)
        self.collision_detector = collision_detector
        self._maze_factory = maze_factory if maze_factory is not None else self._generate_layout
        self._viewport = viewport
        self._now_ms = 0.0
        self._win_at_ms: Optional[float] = None
        self._machine: StateMachine[GameStatus] = create_game_status_machine()
        self.layout: MazeLayout
        self._state: SessionState
        self._reset()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _generate_layout(self) -> MazeLayout:
        maze = self.config.maze
        ghost_size = self.config.entities.ghost_size
        player_size = self.config.entities.player_footprint
        if maze.cols is not None and maze.rows is not None:
            return generate_maze_for_grid(maze.cols, maze.rows, ghost_size, player_size=player_size)
        return generate_maze(
            maze.available_width,
            maze.available_height,
            viewport=self._viewport,
            ghost_size=ghost_size,
            force_odd_rows=maze.force_odd_rows,
            player_size=player_size,
        )

    def _spawn_positions(self, grid: Grid) -> List[Position]:
        spawns = list(self.layout.spawn_points)
        if not spawns:
            spawns = [Position(x, y) for x, y in grid.positions_of(Tile.GHOST_SPAWN)]
        if not spawns:
            spawns = [Position(grid.cols // 2, math.floor(grid.rows * FALLBACK_SPAWN_ROW_FRACTION))]
        return spawns

    def _place_ghost(self, grid: Grid, spawn: Position) -> Position:
        size = self.config.entities.ghost_size
        if is_valid_move(grid, spawn, size, size):
            return spawn
        return find_valid_position(grid, spawn.x, spawn.y, size, size)

    def _create_player(self, grid: Grid) -> Entity:
        width, height = self.config.entities.player_footprint
        start = player_start_position(grid, width, height)
        return Entity(PLAYER_ID, start, width=width, height=height, color=PLAYER_COLOR)

    def _create_ghosts(self, grid: Grid) -> Tuple[Ghost, ...]:
        size = self.config.entities.ghost_size
        initial_active = self.config.ghosts.initial_active
        ghosts = []
        for index in range(self.config.ghosts.pool_size):
            ghost_type = ghost_type_for_slot(index)
            ghost_id = ghost_type.ghost_id
            if index >= len(GHOST_TYPES):
                ghost_id = f"{ghost_id}-{index // len(GHOST_TYPES) + 1}"
            spawn = self._spawns[index % len(self._spawns)]
            active = index < initial_active
            ghosts.append(
                Ghost(
                    entity_id=ghost_id,
                    pos=self._place_ghost(grid, spawn),
                    direction=Direction.UP if active else None,
                    width=size,
                    height=size,
                    color=ghost_type.color,
                    behavior=ghost_type.behavior,
                    name=ghost_type.name,
                    is_active=active,
                )
            )
        return tuple(ghosts)

    def _reset(self) -> None:
        self.layout = self._maze_factory()
        grid = self.layout.grid
        self._spawns = self._spawn_positions(grid)
        self._machine = create_game_status_machine()
        self._win_at_ms = None
        self.brain.reset()
        self._state = SessionState(
            grid=grid,
            player=self._create_player(grid),
            ghosts=self._create_ghosts(grid),
        )
        logger.info(
            "New session on %dx%d maze with %d ghosts (%d active)",
            grid.cols, grid.rows, len(self._state.ghosts), len(self._state.active_ghosts),
        )

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> GameStatus:
        return self._machine.state

    @property
    def status_machine(self) -> StateMachine[GameStatus]:
        return self._machine

    @property
    def spawn_points(self) -> Tuple[Position, ...]:
        return tuple(self._spawns)

    @property
    def win_pending(self) -> bool:
        return self._win_at_ms is not None and self.status == GameStatus.PLAYING

    def set_state(self, state: SessionState) -> None:
        """Replace the current snapshot, e.g. to stage a scripted scenario.

        Status stays under the state machine's control, so ``state.status``
        must match the current status.
        """
        if state.status != self.status:
            raise ValueError(
                f"Snapshot status {state.status.value} does not match session status {self.status.value}"
            )
        self._state = state

    def submit_direction(self, direction: Direction) -> None:
        """Queue a turn for the player. Ignored once the game has ended."""
        if self._machine.is_terminal:
            logger.debug("Ignoring %s input in %s", direction.value, self.status.value)
            return
        if self.status == GameStatus.IDLE:
            self._machine.transition(GameStatus.PLAYING, self._state.tick, reason="first input")
        player = replace(self._state.player, next_direction=direction)
        self._state = replace(self._state, player=player, status=self.status)

    def restart(self) -> None:
        """Discard the current game and start a fresh one on a new maze."""
        logger.info("Restarting session (was %s, score %d)", self.status.value, self._state.score)
        self._reset()

    def poll(self, now_ms: float) -> None:
        """Apply deferred work that is due at ``now_ms``: the win and message expiry."""
        self._now_ms = now_ms
        state = self._state

        if (
            state.active_message is not None
            and state.message_expire_ms is not None
            and now_ms > state.message_expire_ms
        ):
            state = replace(state, active_message=None, message_expire_ms=None)

        if self.win_pending and now_ms >= self._win_at_ms:
            if self._machine.try_transition(GameStatus.WON, state.tick, "all ghosts eaten").is_ok():
                state = replace(state, status=GameStatus.WON)

        self._state = state

    def tick(self, now_ms: Optional[float] = None) -> TickResult:
        """Resolve one tick at clock time ``now_ms``.

        Without a clock the session advances its own by one tick duration.
        Outside PLAYING the snapshot is left unchanged apart from deferred work.
        """
        now = now_ms if now_ms is not None else self._now_ms + self.config.timing.tick_ms
        self._now_ms = now

        if self.status != GameStatus.PLAYING:
            self.poll(now)
            return TickResult(advanced=False)

        state = self._state
        scoring = self.config.scoring

        # 1. Player
        player = advance(state.player, state.grid)

        # 2. Pellets
        grid = state.grid
        eaten_cells = {cell: Tile.EMPTY for cell in player.cells() if grid.tile_at(*cell) == Tile.PELLET}
        grid = grid.with_tiles(eaten_cells)
        score_delta = len(eaten_cells) * scoring.pellet_reward

        # 3. Ghosts
        ghosts = list(state.ghosts)
        if self.brain.begin_tick():
            for index, ghost in enumerate(ghosts):
                if not ghost.is_active or ghost.is_eaten:
                    continue
                direction = self.brain.choose_direction(ghost, grid, player)
                if direction is None:
                    continue
                ghosts[index] = advance(replace(ghost, direction=direction, next_direction=None), grid)

        # 4. Collisions
        message = state.active_message
        expire_ms = state.message_expire_ms
        eaten_ids = []
        for index in find_touched_ghosts(player, ghosts, self.collision_detector):
            ghost = replace(ghosts[index], is_active=False, is_eaten=True)
            ghosts[index] = ghost
            eaten_ids.append(ghost.entity_id)
            score_delta += scoring.ghost_eaten_reward
            message = f"{ghost.name} Gone."
            expire_ms = now + self.config.timing.message_duration_ms
            logger.info("Ghost %s (%s) eaten at tick %d", ghost.entity_id, ghost.name, state.tick + 1)

        activated_ids = []
        if eaten_ids:
            activated = self._activate_next_ghost(ghosts, grid, player)
            if activated is not None:
                activated_ids.append(activated)

        # 5. Win
        if self._win_at_ms is None and all(g.is_eaten for g in ghosts):
            self._win_at_ms = now + self.config.timing.win_grace_ms
            logger.info("All ghosts eaten; win scheduled for %.0f ms", self._win_at_ms)

        self._state = SessionState(
            grid=grid,
            player=player,
            ghosts=tuple(ghosts),
            score=state.score + score_delta,
            status=self.status,
            active_message=message,
            message_expire_ms=expire_ms,
            tick=state.tick + 1,
        )
        self.poll(now)

        return TickResult(
            advanced=True,
            pellets_eaten=len(eaten_cells),
            ghosts_eaten=tuple(eaten_ids),
            ghosts_activated=tuple(activated_ids),
            score_delta=score_delta,
        )

    # ------------------------------------------------------------------
    # Ghost lifecycle
    # ------------------------------------------------------------------

    def farthest_spawn(self, from_pos: Position) -> Position:
        """Spawn point with the largest squared distance to ``from_pos``."""
        best = self._spawns[0]
        best_dist = best.distance_sq(from_pos)
        for spawn in self._spawns[1:]:
            dist = spawn.distance_sq(from_pos)
            if dist > best_dist:
                best, best_dist = spawn, dist
        return best

    def _activate_next_ghost(self, ghosts: List[Ghost], grid: Grid, player: Entity) -> Optional[str]:
        """Activate the first pending ghost in place; returns its id."""
        for index, ghost in enumerate(ghosts):
            if not ghost.is_pending:
                continue
            pos = self._place_ghost(grid, self.farthest_spawn(player.pos))
            ghosts[index] = replace(
                ghost,
                pos=pos,
                direction=Direction.UP,
                next_direction=None,
                is_active=True,
            )
            logger.info("Ghost %s (%s) activated at (%d, %d)", ghost.entity_id, ghost.name, pos.x, pos.y)
            return ghost.entity_id
        return None
