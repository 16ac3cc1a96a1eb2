"""
frames.py - Per-Frame Callback Facilities
=========================================
The Stepper advances on rendering frames: while playing it keeps exactly
one frame callback requested, and every callback re-requests the next.
Where those frames come from is the host's business:

    ManualFrameScheduler   – frames run only when the host calls run_frame().
                             Used by tests and by the polling HTTP layer.
    AsyncioFrameScheduler  – frames are `loop.call_later(1 / fps, …)` timers.

A scheduler hands back an opaque handle from request_frame(); passing it
to cancel_frame() guarantees the callback will not run.

ManualClock is a deterministic stand-in for time.monotonic.
"""

import asyncio
import itertools
from typing import Any, Callable, Dict, Optional


FrameCallback = Callable[[], None]


class FrameScheduler:
    """Interface: request one callback on the next frame, or cancel it."""

    def request_frame(self, callback: FrameCallback) -> Any:
        raise NotImplementedError

    def cancel_frame(self, handle: Any) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Manual
# ---------------------------------------------------------------------------
class ManualFrameScheduler(FrameScheduler):
    """
    Frames are driven by the host.  run_frame() runs every callback that
    was pending when it was called; callbacks requested during the frame
    wait for the next one, like requestAnimationFrame.
    """

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self.frames_run: int = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        """Run one frame.  Returns how many callbacks ran."""
        batch = list(self._pending.items())
        self._pending.clear()
        ran = 0
        for _, callback in batch:
            callback()
            ran += 1
        self.frames_run += 1
        return ran

    @property
    def pending_count(self) -> int:
        return len(self._pending)


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------
class AsyncioFrameScheduler(FrameScheduler):
    """Frames as event-loop timers at a fixed rate (default 60 fps)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, fps: float = 60.0):
        self._loop = loop
        self.interval: float = 1.0 / max(1.0, fps)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, callback)

    def cancel_frame(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------
class ManualClock:
    """Callable monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now: float = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now
