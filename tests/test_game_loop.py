"""Tests for frame-driven tick scheduling."""

from dataclasses import replace

from maze_chase.collision import CollisionDetector
from maze_chase.config.game_config import GhostConfig
from maze_chase.entities import Direction
from maze_chase.game_loop import GameLoop, ManualFrameHost
from maze_chase.state_machine import GameStatus


class AlwaysCollide(CollisionDetector):
    def collides(self, entity1, entity2):
        return True


class RecordingHost(ManualFrameHost):
    """Manual host that remembers every callback it was handed."""

    def __init__(self):
        super().__init__()
        self.requested = []

    def request_frame(self, callback):
        self.requested.append(callback)
        return super().request_frame(callback)


def _playing_loop(session_factory, open_grid, **kwargs):
    session = session_factory(open_grid, **kwargs)
    session.submit_direction(Direction.RIGHT)
    host = ManualFrameHost()
    loop = GameLoop(session, host)
    loop.start()
    host.advance(0)
    return session, host, loop


class TestAccumulator:
    """Exactly one tick per frame once the tick duration has elapsed."""

    def test_first_frame_only_sets_clock(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)
        assert loop.ticks_resolved == 0
        assert session.state.tick == 0

    def test_ticks_at_fixed_cadence(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)

        for _ in range(10):
            host.advance(1000 / 60)

        # 166 ms elapsed, not yet one tick
        assert loop.ticks_resolved == 0
        host.advance(1000 / 60)
        assert loop.ticks_resolved == 1
        assert session.state.tick == 1

    def test_long_frame_resolves_single_tick(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)

        host.advance(1000)
        assert loop.ticks_resolved == 1

        # accumulator was reset, not carried over
        host.advance(100)
        assert loop.ticks_resolved == 1

    def test_run_for_counts_frames(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)
        frames = host.run_for(1000, frame_ms=20)

        assert frames == 50
        # a tick every 9 frames of 20 ms
        assert loop.ticks_resolved == 5

    def test_custom_tick_duration(self, session_factory, open_grid):
        session = session_factory(open_grid)
        session.submit_direction(Direction.RIGHT)
        host = ManualFrameHost()
        loop = GameLoop(session, host, tick_ms=50)
        loop.start()
        host.advance(0)

        host.advance(50)
        assert loop.ticks_resolved == 1

    def test_frame_listener_sees_every_snapshot(self, session_factory, open_grid):
        session = session_factory(open_grid)
        seen = []
        host = ManualFrameHost()
        loop = GameLoop(session, host, on_frame=seen.append)
        loop.start()

        host.advance(0)
        host.advance(200)

        assert len(seen) == 2
        assert seen[-1] is session.state


class TestCancellation:
    """Stopping and restarting never leaves an orphaned tick."""

    def test_stop_cancels_pending_frame(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)
        assert host.pending_count == 1

        loop.stop()

        assert host.pending_count == 0
        assert not loop.running
        host.advance(500)
        assert session.state.tick == 0

    def test_stale_callback_is_ignored(self, session_factory, open_grid):
        session = session_factory(open_grid)
        session.submit_direction(Direction.RIGHT)
        host = RecordingHost()
        loop = GameLoop(session, host)
        loop.start()
        host.advance(0)
        stale = host.requested[-1]

        loop.stop()
        stale(10_000)

        assert session.state.tick == 0
        assert host.pending_count == 0

    def test_restart_resets_session_and_keeps_running(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)
        host.advance(200)
        assert session.state.tick == 1

        loop.restart()

        assert loop.running
        assert host.pending_count == 1
        assert session.status == GameStatus.IDLE
        assert session.state.tick == 0

    def test_start_twice_schedules_once(self, session_factory, open_grid):
        session, host, loop = _playing_loop(session_factory, open_grid)
        loop.start()
        assert host.pending_count == 1


class TestDeferredWin:
    def test_win_applied_by_frame_after_grace(self, session_factory, open_grid, small_config):
        config = replace(small_config, ghosts=GhostConfig(pool_size=1, initial_active=1))
        session, host, loop = _playing_loop(
            session_factory, open_grid, config=config, collision_detector=AlwaysCollide()
        )

        host.advance(180)
        assert session.state.ghosts_eaten == 1
        assert session.status == GameStatus.PLAYING

        host.advance(999)
        assert session.status == GameStatus.PLAYING
        host.advance(1)
        assert session.status == GameStatus.WON
