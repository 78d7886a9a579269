"""State machine abstractions for explicit session status management.

A session moves through a small, closed set of statuses. Rather than
assigning ``status = ...`` wherever it is convenient, every change goes
through a StateMachine that knows which transitions are legal:

    IDLE -> PLAYING -> WON
                    -> GAME_OVER

WON and GAME_OVER are terminal; only a restart (which builds a brand new
machine) leaves them.

Usage:
------
    machine = create_game_status_machine()
    machine.transition(GameStatus.PLAYING, tick=0, reason="first input")
    machine.try_transition(GameStatus.IDLE)  # Err(...), PLAYING -> IDLE is not allowed
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from maze_chase.exceptions import InvalidTransitionError
from maze_chase.result import Err, Ok, Result

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)


@dataclass(frozen=True)
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        tick: The session tick when the transition occurred
        reason: Optional description of why the transition happened
    """

    from_state: S
    to_state: S
    tick: int
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation."""

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 50,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history

        Raises:
            ValueError: If initial_state is missing from the transition map
        """
        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

    @property
    def state(self) -> S:
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Transition history (empty if tracking disabled)."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return not self._transitions.get(self._state)

    def can_transition(self, target: S) -> bool:
        return target in self._transitions.get(self._state, [])

    def try_transition(self, target: S, tick: int = 0, reason: str = "") -> Result[S, str]:
        """Attempt to move to ``target``.

        Returns:
            Ok(new_state) on success, Err(message) if the table forbids it
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            logger.warning("Rejected status change %s -> %s at tick %d", self._state.name, target.name, tick)
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target
        if self._track_history:
            self._history.append(StateTransition(old_state, target, tick, reason))
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history :]

        logger.info("Status %s -> %s at tick %d (%s)", old_state.name, target.name, tick, reason)
        return Ok(target)

    def transition(self, target: S, tick: int = 0, reason: str = "") -> S:
        """Transition to a new state, raising on an invalid transition.

        Use this when an invalid transition would be a programming error.

        Raises:
            InvalidTransitionError: If the transition is not in the table
        """
        result = self.try_transition(target, tick, reason)
        if result.is_err():
            raise InvalidTransitionError(result.error)
        return result.unwrap()

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Game Status State Machine
# ============================================================================


class GameStatus(Enum):
    """Lifecycle of a single play session."""

    IDLE = "IDLE"  # Maze shown, waiting for the first direction input
    PLAYING = "PLAYING"
    WON = "WON"  # Every ghost in the pool has been eaten
    GAME_OVER = "GAME_OVER"


GAME_STATUS_TRANSITIONS: Dict[GameStatus, List[GameStatus]] = {
    GameStatus.IDLE: [GameStatus.PLAYING],
    GameStatus.PLAYING: [GameStatus.WON, GameStatus.GAME_OVER],
    GameStatus.WON: [],
    GameStatus.GAME_OVER: [],
}


def create_game_status_machine(track_history: bool = True) -> StateMachine[GameStatus]:
    """Create the status machine for a fresh session, starting in IDLE."""
    return StateMachine(
        initial_state=GameStatus.IDLE,
        valid_transitions=GAME_STATUS_TRANSITIONS,
        track_history=track_history,
    )
