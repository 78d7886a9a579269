"""Tests for the generic state machine and the game status table."""

import pytest

from maze_chase.exceptions import InvalidTransitionError
from maze_chase.state_machine import (
    GAME_STATUS_TRANSITIONS,
    GameStatus,
    StateMachine,
    create_game_status_machine,
)


class TestGameStatusMachine:
    """IDLE -> PLAYING -> {WON, GAME_OVER}."""

    def test_starts_idle(self):
        machine = create_game_status_machine()
        assert machine.state == GameStatus.IDLE
        assert not machine.is_terminal

    def test_happy_path_to_won(self):
        machine = create_game_status_machine()
        machine.transition(GameStatus.PLAYING, tick=0, reason="first input")
        machine.transition(GameStatus.WON, tick=42, reason="all ghosts eaten")

        assert machine.state == GameStatus.WON
        assert machine.is_terminal
        assert [(t.from_state, t.to_state) for t in machine.history] == [
            (GameStatus.IDLE, GameStatus.PLAYING),
            (GameStatus.PLAYING, GameStatus.WON),
        ]
        assert machine.history[-1].tick == 42

    def test_idle_cannot_skip_to_won(self):
        machine = create_game_status_machine()
        with pytest.raises(InvalidTransitionError):
            machine.transition(GameStatus.WON)
        assert machine.state == GameStatus.IDLE

    def test_try_transition_returns_err_without_raising(self):
        machine = create_game_status_machine()
        machine.transition(GameStatus.PLAYING)
        machine.transition(GameStatus.GAME_OVER)

        result = machine.try_transition(GameStatus.PLAYING)

        assert result.is_err()
        assert "GAME_OVER -> PLAYING" in result.error
        assert machine.state == GameStatus.GAME_OVER

    def test_terminal_states_have_no_targets(self):
        assert GAME_STATUS_TRANSITIONS[GameStatus.WON] == []
        assert GAME_STATUS_TRANSITIONS[GameStatus.GAME_OVER] == []

    def test_valid_transitions_from_playing(self):
        machine = create_game_status_machine()
        machine.transition(GameStatus.PLAYING)
        assert machine.can_transition(GameStatus.WON)
        assert machine.can_transition(GameStatus.GAME_OVER)
        assert not machine.can_transition(GameStatus.IDLE)


class TestStateMachineConstruction:
    def test_unknown_initial_state_rejected(self):
        with pytest.raises(ValueError):
            StateMachine(GameStatus.WON, {GameStatus.IDLE: []})

    def test_history_is_bounded(self):
        table = {GameStatus.IDLE: [GameStatus.PLAYING], GameStatus.PLAYING: [GameStatus.IDLE]}
        machine = StateMachine(GameStatus.IDLE, table, track_history=True, max_history=3)
        for _ in range(5):
            machine.transition(GameStatus.PLAYING)
            machine.transition(GameStatus.IDLE)
        assert len(machine.history) == 3

    def test_history_disabled_by_default(self):
        machine = StateMachine(GameStatus.IDLE, GAME_STATUS_TRANSITIONS)
        machine.transition(GameStatus.PLAYING)
        assert machine.history == []
