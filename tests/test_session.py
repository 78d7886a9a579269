"""Tests for session tick resolution, scoring and ghost lifecycle."""

from dataclasses import replace

import pytest

from maze_chase.collision import CollisionDetector
from maze_chase.config.game_config import EntityConfig, GameConfig, GhostConfig, MazeConfig
from maze_chase.entities import Direction, Position
from maze_chase.exceptions import ConfigurationError
from maze_chase.grid import Tile
from maze_chase.movement import is_valid_move
from maze_chase.session import GameSession
from maze_chase.state_machine import GameStatus


class AlwaysCollide(CollisionDetector):
    """Every active ghost touches the player every tick."""

    def collides(self, entity1, entity2):
        return True


def _stage(session, player_pos=None, ghost_positions=None, clear_input=False):
    """Move entities in the current snapshot without changing status."""
    state = session.state
    player = state.player
    if player_pos is not None:
        player = replace(player, pos=player_pos)
    if clear_input:
        player = replace(player, direction=None, next_direction=None)
    ghosts = list(state.ghosts)
    for index, pos in (ghost_positions or {}).items():
        ghosts[index] = replace(ghosts[index], pos=pos, direction=None)
    session.set_state(replace(state, player=player, ghosts=tuple(ghosts)))


def _pocket_grid(open_grid):
    """Open grid where a 1x1 ghost at (5, 5) can only move right or down."""
    return open_grid.with_tiles({(4, 5): Tile.WALL, (5, 4): Tile.WALL})


class TestSessionSetup:
    """Initial lifecycle of a fresh session."""

    def test_starts_idle_with_zero_score(self, session_factory, open_grid):
        session = session_factory(open_grid)
        assert session.status == GameStatus.IDLE
        assert session.state.score == 0
        assert session.state.tick == 0

    def test_initial_ghosts(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=4, initial_active=2))
        session = session_factory(open_grid, config=config)
        ghosts = session.state.ghosts

        assert [g.entity_id for g in ghosts] == ["g1", "g2", "g3", "g4"]
        assert [g.is_active for g in ghosts] == [True, True, False, False]
        assert ghosts[0].name == "Dry Skin"
        assert all(g.direction == Direction.UP for g in ghosts if g.is_active)
        assert all(g.direction is None for g in ghosts if not g.is_active)

    def test_ghosts_start_at_spawns_in_turn(self, session_factory, open_grid):
        session = session_factory(open_grid, spawn_points=(Position(2, 2), Position(17, 7)))
        assert [g.pos for g in session.state.ghosts] == [Position(2, 2), Position(17, 7)]

    def test_pool_larger_than_roster_gets_unique_ids(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=10, initial_active=2))
        ids = [g.entity_id for g in session_factory(open_grid, config=config).state.ghosts]

        assert len(set(ids)) == 10
        assert ids[8] == "g1-2"

    def test_missing_spawns_use_fallback_point(self, session_factory, open_grid):
        session = session_factory(open_grid, spawn_points=())
        assert session.spawn_points == (Position(10, 3),)

    def test_player_placed_on_legal_cells(self, session_factory, open_grid):
        player = session_factory(open_grid).state.player
        assert is_valid_move(open_grid, player.pos, player.width, player.height)

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError):
            GameSession(GameConfig(ghosts=GhostConfig(pool_size=2, initial_active=3)))


class TestInput:
    """Direction input and restart."""

    def test_first_input_starts_game_and_queues_turn(self, session_factory, open_grid):
        session = session_factory(open_grid)
        session.submit_direction(Direction.LEFT)

        assert session.status == GameStatus.PLAYING
        assert session.state.status == GameStatus.PLAYING
        assert session.state.player.next_direction == Direction.LEFT

    def test_idle_session_does_not_tick(self, session_factory, open_grid):
        session = session_factory(open_grid)
        before = session.state

        result = session.tick()

        assert not result.advanced
        assert session.state == before

    def test_input_ignored_after_win(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=1, initial_active=1))
        session = session_factory(open_grid, config=config, collision_detector=AlwaysCollide())
        session.submit_direction(Direction.RIGHT)
        session.tick(0)
        session.poll(config.timing.win_grace_ms)
        assert session.status == GameStatus.WON

        session.submit_direction(Direction.LEFT)

        assert session.status == GameStatus.WON
        assert session.state.player.next_direction == Direction.RIGHT

    def test_restart_resets_everything(self, session_factory, open_grid):
        session = session_factory(open_grid)
        session.submit_direction(Direction.RIGHT)
        for _ in range(5):
            session.tick()
        assert session.state.score > 0

        session.restart()

        assert session.status == GameStatus.IDLE
        assert session.state.score == 0
        assert session.state.tick == 0
        assert session.state.grid == open_grid
        assert session.brain.counters_for("g1").slow_ticks == 0

    def test_restart_allowed_from_won(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=1, initial_active=1))
        session = session_factory(open_grid, config=config, collision_detector=AlwaysCollide())
        session.submit_direction(Direction.RIGHT)
        session.tick(0)
        session.poll(10_000)

        session.restart()

        assert session.status == GameStatus.IDLE
        assert session.state.ghosts_eaten == 0

    def test_set_state_rejects_status_change(self, session_factory, open_grid):
        session = session_factory(open_grid)
        with pytest.raises(ValueError):
            session.set_state(replace(session.state, status=GameStatus.WON))


class TestScenarios:
    """End-to-end tick resolution on a 20x10 open grid."""

    def test_player_steps_right(self, session_factory, open_grid):
        session = session_factory(open_grid)
        session.submit_direction(Direction.RIGHT)
        _stage(session, player_pos=Position(1, 1))

        session.tick()

        assert session.state.player.pos == Position(2, 1)

    def test_touching_ghost_is_eaten(self, session_factory, open_grid):
        session = session_factory(_pocket_grid(open_grid))
        session.submit_direction(Direction.RIGHT)
        _stage(
            session,
            player_pos=Position(5, 5),
            ghost_positions={0: Position(5, 5), 1: Position(15, 2)},
            clear_input=True,
        )

        result = session.tick()
        eaten = session.state.ghosts[0]

        assert eaten.is_eaten
        assert not eaten.is_active
        assert not session.state.ghosts[1].is_eaten
        assert result.ghosts_eaten == ("g1",)
        assert result.ghosts_activated == ()
        assert session.state.score == 200 + 10 * result.pellets_eaten
        assert session.state.active_message == "Dry Skin Gone."

    def test_eating_activates_pending_ghost_at_farthest_spawn(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=3, initial_active=2))
        spawns = (Position(1, 1), Position(17, 8), Position(10, 1))
        session = session_factory(_pocket_grid(open_grid), spawn_points=spawns, config=config)
        session.submit_direction(Direction.RIGHT)
        _stage(
            session,
            player_pos=Position(5, 5),
            ghost_positions={0: Position(5, 5), 1: Position(15, 2)},
            clear_input=True,
        )

        result = session.tick()
        activated = session.state.ghosts[2]

        assert result.ghosts_activated == ("g3",)
        assert activated.is_active
        assert activated.pos == Position(17, 8)
        assert activated.direction == Direction.UP
        assert activated.next_direction is None
        assert len(session.state.active_ghosts) == 2

    def test_win_fires_once_after_grace(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=3, initial_active=1))
        session = session_factory(open_grid, config=config, collision_detector=AlwaysCollide())
        session.submit_direction(Direction.RIGHT)

        for _ in range(3):
            session.tick()
        assert session.state.ghosts_eaten == 3
        assert session.status == GameStatus.PLAYING
        assert session.win_pending

        grace_ticks = 0
        while session.status == GameStatus.PLAYING:
            session.tick()
            grace_ticks += 1
        for _ in range(5):
            session.tick()

        assert session.status == GameStatus.WON
        # 1000 ms grace at 180 ms per tick
        assert grace_ticks == 6
        won = [t for t in session.status_machine.history if t.to_state == GameStatus.WON]
        assert len(won) == 1


class TestMessages:
    def test_message_expires(self, session_factory, open_grid, small_config):
        session = session_factory(open_grid, collision_detector=AlwaysCollide())
        session.submit_direction(Direction.RIGHT)
        session.tick(100)
        assert session.state.message_expire_ms == 1100

        session.poll(1100)
        assert session.state.active_message is not None
        session.poll(1101)
        assert session.state.active_message is None


class TestInvariants:
    """Properties that hold on every tick of a full game."""

    @pytest.fixture
    def played_session(self):
        config = GameConfig(maze=MazeConfig(cols=28, rows=31))
        session = GameSession(config, seed=7)
        session.submit_direction(Direction.LEFT)
        return session

    def test_footprints_never_touch_walls(self, played_session):
        directions = list(Direction)
        for tick in range(300):
            if tick % 7 == 0:
                played_session.submit_direction(directions[(tick // 7) % 4])
            played_session.tick()
            state = played_session.state
            player = state.player
            assert is_valid_move(state.grid, player.pos, player.width, player.height)
            for ghost in state.active_ghosts:
                assert is_valid_move(state.grid, ghost.pos, ghost.width, ghost.height)

    def test_pellets_and_score_accounting(self, played_session):
        directions = list(Direction)
        for tick in range(300):
            if tick % 5 == 0:
                played_session.submit_direction(directions[(tick // 5) % 4])
            before = played_session.state
            result = played_session.tick()
            after = played_session.state

            assert after.pellets_remaining <= before.pellets_remaining
            assert before.pellets_remaining - after.pellets_remaining == result.pellets_eaten
            assert after.score - before.score == 10 * result.pellets_eaten + 200 * len(result.ghosts_eaten)
            assert after.score >= before.score

    def test_previous_snapshot_grid_is_untouched(self, played_session):
        before = played_session.state
        pellets_before = before.grid.count(Tile.PELLET)
        for _ in range(20):
            played_session.tick()
        assert before.grid.count(Tile.PELLET) == pellets_before

    def test_same_seed_same_game(self):
        def play(seed):
            config = GameConfig(maze=MazeConfig(cols=28, rows=31))
            session = GameSession(config, seed=seed)
            session.submit_direction(Direction.UP)
            for tick in range(120):
                if tick % 9 == 0:
                    session.submit_direction(list(Direction)[tick % 4])
                session.tick()
            return session.state

        assert play(11) == play(11)

    def test_default_footprints(self):
        session = GameSession(GameConfig(maze=MazeConfig(cols=28, rows=31)), seed=1)
        assert (session.state.player.width, session.state.player.height) == (3, 2)
        assert all(g.width == g.height == 2 for g in session.state.ghosts)

    def test_entity_config_override(self, open_grid, session_factory):
        config = GameConfig(entities=EntityConfig(player_height=1, player_aspect_ratio=1.0, ghost_size=1))
        session = session_factory(open_grid, config=config)
        assert (session.state.player.width, session.state.player.height) == (1, 1)
