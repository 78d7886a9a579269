"""Frame-driven scheduler that turns host frames into fixed-duration ticks.

The host owns the real clock and calls back once per frame, like a browser's
requestAnimationFrame or a pygame main loop. Elapsed time accumulates until a
full tick is due; exactly one tick is resolved per frame and the accumulator
then resets to zero, so a long frame never triggers a burst of catch-up ticks.
"""

import logging
from typing import Callable, Dict, List, Optional, Protocol

from maze_chase.session import GameSession, SessionState

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
FrameListener = Callable[[SessionState], None]


class FrameHost(Protocol):
    """Anything that can schedule a one-shot per-frame callback."""

    def request_frame(self, callback: FrameCallback) -> int:
        ...

    def cancel_frame(self, handle: int) -> None:
        ...


class GameLoop:
    """Drives a ``GameSession`` from host frames.

    Each scheduled callback carries the loop's generation number. ``stop()``
    bumps the generation, so a callback that was already in flight when the
    loop was stopped or restarted does nothing.
    """

    def __init__(
        self,
        session: GameSession,
        host: FrameHost,
        tick_ms: Optional[float] = None,
        on_frame: Optional[FrameListener] = None,
    ) -> None:
        self.session = session
        self.host = host
        self.tick_ms = tick_ms if tick_ms is not None else session.config.timing.tick_ms
        self.on_frame = on_frame
        self.ticks_resolved = 0
        self._handle: Optional[int] = None
        self._generation = 0
        self._last_frame_ms: Optional[float] = None
        self._accumulator = 0.0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self.running:
            return
        self._generation += 1
        self._last_frame_ms = None
        self._accumulator = 0.0
        self._schedule()

    def stop(self) -> None:
        """Cancel the pending frame; in-flight callbacks become no-ops."""
        if self._handle is not None:
            self.host.cancel_frame(self._handle)
            self._handle = None
        self._generation += 1

    def restart(self) -> None:
        """Tear down the current game, start a new one and resume scheduling."""
        self.stop()
        self.session.restart()
        self.start()

    def _schedule(self) -> None:
        generation = self._generation
        self._handle = self.host.request_frame(lambda now_ms: self._on_frame(generation, now_ms))

    def _on_frame(self, generation: int, now_ms: float) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale frame from generation %d", generation)
            return
        self._handle = None

        if self._last_frame_ms is None:
            self._last_frame_ms = now_ms
        self._accumulator += now_ms - self._last_frame_ms
        self._last_frame_ms = now_ms

        self.session.poll(now_ms)
        if self._accumulator >= self.tick_ms:
            self.session.tick(now_ms)
            self._accumulator = 0.0
            self.ticks_resolved += 1

        if self.on_frame is not None:
            self.on_frame(self.session.state)

        # on_frame may have stopped or restarted the loop
        if generation == self._generation and self._handle is None:
            self._schedule()


class ManualFrameHost:
    """Deterministic frame host driven by a synthetic clock.

    Used for headless runs and tests: nothing happens until ``advance()``.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and fire one frame. Returns callbacks run."""
        self.now_ms += ms
        callbacks: List[FrameCallback] = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback(self.now_ms)
        return len(callbacks)

    def run_for(self, total_ms: float, frame_ms: float = 1000 / 60) -> int:
        """Fire frames every ``frame_ms`` until ``total_ms`` has elapsed."""
        frames = 0
        elapsed = 0.0
        while elapsed + frame_ms <= total_ms + 1e-9:
            self.advance(frame_ms)
            elapsed += frame_ms
            frames += 1
        return frames
