"""Ghost AI: per-tick direction choice for every active ghost.

Each behaviour is a plain function of the ghost, the grid, the player, the
ghost's own counters and the candidate directions. ``GhostBrain`` owns the
RNG, the global pacing counter and a per-ghost counter table, filters the
candidate directions and dispatches to the policy for the ghost's behaviour.

Ties between equally scored directions resolve to the earliest entry of
``ALL_DIRECTIONS`` (UP, DOWN, LEFT, RIGHT).
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from maze_chase.config.gameplay import (
    CORNER_EDGE_SCORE_BASE,
    CORNER_PLAYER_DISTANCE_WEIGHT,
    DISTANCE_KEEPER_IDEAL_SQ,
    DISTANCE_KEEPER_TOO_CLOSE_SQ,
    ERRATIC_MAX_TURN_INTERVAL,
    ERRATIC_MIN_TURN_INTERVAL,
    ERRATIC_REVERSE_CHANCE,
    GLOBAL_GHOST_SKIP_PERIOD,
    PATROL_AXIS_CHANCE,
    SLOW_MOVER_SKIP_PERIOD,
    WANDERER_FLEE_CHANCE,
    ZIGZAG_PHASE_LENGTH,
)
from maze_chase.entities import ALL_DIRECTIONS, Direction, Entity, Ghost, GhostBehavior
from maze_chase.grid import Grid
from maze_chase.movement import can_move

logger = logging.getLogger(__name__)


@dataclass
class GhostCounters:
    """Private pacing state for one ghost.

    Attributes:
        slow_ticks: Eligible ticks seen by a slow mover
        zigzag_ticks: Moves made by a zigzag ghost
        erratic_ticks: Moves made by an erratic ghost
        last_turn_tick: erratic_ticks value at the last forced turn
        turn_interval: Ticks until the next forced turn (0 = not drawn yet)
    """

    slow_ticks: int = 0
    zigzag_ticks: int = 0
    erratic_ticks: int = 0
    last_turn_tick: int = 0
    turn_interval: int = 0


def _pick_best(
    candidates: Sequence[Direction], score: Callable[[Direction], float]
) -> Optional[Direction]:
    """Highest-scoring candidate; the first one wins ties."""
    best: Optional[Direction] = None
    best_score = 0.0
    for direction in candidates:
        value = score(direction)
        if best is None or value > best_score:
            best = direction
            best_score = value
    return best


def _flee(ghost: Ghost, player: Entity, candidates: Sequence[Direction]) -> Optional[Direction]:
    return _pick_best(candidates, lambda d: ghost.pos.step(d).distance_sq(player.pos))


def wanderer_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Mostly flee the player, otherwise drift at random."""
    if rng.random() < WANDERER_FLEE_CHANCE:
        return _flee(ghost, player, candidates)
    return rng.choice(candidates)


def horizontal_patrol_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    if rng.random() < PATROL_AXIS_CHANCE:
        on_axis = [d for d in candidates if d.is_horizontal]
        if on_axis:
            return _pick_best(on_axis, lambda d: abs(ghost.pos.step(d).x - player.pos.x))
    return _flee(ghost, player, candidates)


def vertical_patrol_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    if rng.random() < PATROL_AXIS_CHANCE:
        on_axis = [d for d in candidates if d.is_vertical]
        if on_axis:
            return _pick_best(on_axis, lambda d: abs(ghost.pos.step(d).y - player.pos.y))
    return _flee(ghost, player, candidates)


def erratic_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Keep going straight, but force a random new heading every few moves.

    The interval is redrawn after every forced turn.
    """
    counters.erratic_ticks += 1
    if counters.turn_interval == 0:
        counters.turn_interval = rng.randint(ERRATIC_MIN_TURN_INTERVAL, ERRATIC_MAX_TURN_INTERVAL)
        counters.last_turn_tick = counters.erratic_ticks

    if counters.erratic_ticks - counters.last_turn_tick >= counters.turn_interval:
        counters.last_turn_tick = counters.erratic_ticks
        counters.turn_interval = rng.randint(ERRATIC_MIN_TURN_INTERVAL, ERRATIC_MAX_TURN_INTERVAL)
        fresh = [d for d in candidates if d != ghost.direction]
        return rng.choice(fresh or list(candidates))

    if ghost.direction in candidates:
        return ghost.direction
    return rng.choice(candidates)


def corner_hugger_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Hug the map edges while keeping some distance from the player."""

    def score(direction: Direction) -> float:
        nxt = ghost.pos.step(direction)
        edge_distance = min(nxt.x, nxt.y, grid.cols - 1 - nxt.x, grid.rows - 1 - nxt.y)
        return (
            CORNER_EDGE_SCORE_BASE
            - edge_distance
            + CORNER_PLAYER_DISTANCE_WEIGHT * nxt.distance_sq(player.pos)
        )

    return _pick_best(candidates, score)


def slow_mover_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    # pacing is applied by GhostBrain before dispatch
    return _flee(ghost, player, candidates)


def zigzag_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Alternate between the vertical and horizontal axis every few moves."""
    phase_vertical = (counters.zigzag_ticks // ZIGZAG_PHASE_LENGTH) % 2 == 0
    counters.zigzag_ticks += 1
    if phase_vertical:
        on_axis = [d for d in candidates if d.is_vertical]
        return _pick_best(on_axis, lambda d: abs(ghost.pos.step(d).y - player.pos.y))
    on_axis = [d for d in candidates if d.is_horizontal]
    return _pick_best(on_axis, lambda d: abs(ghost.pos.step(d).x - player.pos.x))


def distance_keeper_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Back off when the player is close, otherwise orbit at the ideal distance."""
    if ghost.pos.distance_sq(player.pos) < DISTANCE_KEEPER_TOO_CLOSE_SQ:
        return _flee(ghost, player, candidates)
    return _pick_best(
        candidates,
        lambda d: -abs(ghost.pos.step(d).distance_sq(player.pos) - DISTANCE_KEEPER_IDEAL_SQ),
    )


def run_policy(
    ghost: Ghost,
    grid: Grid,
    player: Entity,
    counters: GhostCounters,
    candidates: Sequence[Direction],
    rng: random.Random,
) -> Optional[Direction]:
    """Dispatch to the policy for ``ghost.behavior``."""
    match ghost.behavior:
        case GhostBehavior.WANDERER:
            policy = wanderer_policy
        case GhostBehavior.HORIZONTAL_PATROL:
            policy = horizontal_patrol_policy
        case GhostBehavior.VERTICAL_PATROL:
            policy = vertical_patrol_policy
        case GhostBehavior.ERRATIC:
            policy = erratic_policy
        case GhostBehavior.CORNER_HUGGER:
            policy = corner_hugger_policy
        case GhostBehavior.SLOW_MOVER:
            policy = slow_mover_policy
        case GhostBehavior.ZIGZAG:
            policy = zigzag_policy
        case GhostBehavior.DISTANCE_KEEPER:
            policy = distance_keeper_policy
        case _:
            raise ValueError(f"Unknown ghost behavior: {ghost.behavior!r}")
    return policy(ghost, grid, player, counters, candidates, rng)


def candidate_directions(
    grid: Grid, ghost: Ghost, allow_reverse: bool = False
) -> List[Direction]:
    """Directions the ghost can step in, without a U-turn unless it is stuck."""
    valid = [d for d in ALL_DIRECTIONS if can_move(grid, ghost, d)]
    if allow_reverse or ghost.direction is None:
        return valid
    forward = [d for d in valid if d != ghost.direction.opposite]
    return forward or valid


class GhostBrain:
    """Chooses ghost directions and owns all ghost pacing state.

    One brain belongs to one session; restarting the session resets it so no
    counter leaks between games.
    """

    def __init__(self, rng: random.Random, global_skip_period: int = GLOBAL_GHOST_SKIP_PERIOD):
        self.rng = rng
        self.global_skip_period = global_skip_period
        self._tick_count = 0
        self._counters: Dict[str, GhostCounters] = {}

    def reset(self) -> None:
        self._tick_count = 0
        self._counters.clear()

    def counters_for(self, ghost_id: str) -> GhostCounters:
        counters = self._counters.get(ghost_id)
        if counters is None:
            counters = GhostCounters()
            self._counters[ghost_id] = counters
        return counters

    def begin_tick(self) -> bool:
        """Advance the shared pacing counter; False means ghosts sit this tick out."""
        self._tick_count += 1
        return self._tick_count % self.global_skip_period != 0

    def choose_direction(self, ghost: Ghost, grid: Grid, player: Entity) -> Optional[Direction]:
        """Direction for ``ghost`` this tick, or None to hold position."""
        counters = self.counters_for(ghost.entity_id)

        if ghost.behavior is GhostBehavior.SLOW_MOVER:
            counters.slow_ticks += 1
            if counters.slow_ticks % SLOW_MOVER_SKIP_PERIOD == 0:
                return None

        allow_reverse = (
            ghost.behavior is GhostBehavior.ERRATIC and self.rng.random() < ERRATIC_REVERSE_CHANCE
        )
        candidates = candidate_directions(grid, ghost, allow_reverse)
        if not candidates:
            logger.debug("Ghost %s has no exit at (%d, %d); holding", ghost.entity_id, ghost.pos.x, ghost.pos.y)
            return None

        choice = run_policy(ghost, grid, player, counters, candidates, self.rng)
        if choice is None or choice not in candidates:
            choice = self.rng.choice(candidates)
        return choice
