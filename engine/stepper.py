"""
stepper.py - Step-by-Step Playback Engine
=========================================
The Stepper turns a finished SnapshotSequence into a time-driven or
manually-driven presentation.  It never looks inside a snapshot.

State machine:
    IDLE     →  play()            →  PLAYING
    PLAYING  →  pause()           →  PAUSED
    PLAYING  →  (final index)     →  PAUSED   + on_complete()
    PAUSED   →  play()            →  PLAYING
    any      →  load(sequence)    →  IDLE     (position 0, loop cancelled)

Advancing loop:
  While PLAYING the stepper keeps one frame callback requested from its
  FrameScheduler.  Each frame runs tick(): once the time since the last
  advance reaches base_step_duration / speed, the position moves by one.
  Speed changes therefore apply on the very next frame without any
  timer rescheduling.  Hosts without a scheduler (e.g. the polling HTTP
  layer) may call tick() themselves.

Notifications (two independent channels):
    on_step_changed(snapshot, index, total)  – position changed
    on_status_changed(PlaybackStatus)        – play state / speed changed,
                                               or a manual position change
  Auto-advance fires only on_step_changed.

Thread safety:
  This class is NOT thread-safe.  Drive it from a single thread or a
  single event loop.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from algorithms.step import Snapshot, SnapshotSequence
from engine.frames import FrameScheduler

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PLAYING  = "playing"
    PAUSED   = "paused"


# ---------------------------------------------------------------------------
# Speed (multipliers of the base step duration)
# ---------------------------------------------------------------------------
MIN_SPEED = 0.25
MAX_SPEED = 4.0

SPEED_PRESETS = {
    "slow":   0.5,    # teaching mode
    "normal": 1.0,
    "fast":   2.0,
    "turbo":  4.0,
}


# ---------------------------------------------------------------------------
# Derived status
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PlaybackStatus:
    is_playing:        bool
    current_index:     int
    total_steps:       int
    speed_multiplier:  float
    progress_percent:  float
    state:             str = StepperState.IDLE.value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


StepCallback = Callable[[Snapshot, int, int], None]
StatusCallback = Callable[[PlaybackStatus], None]


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state               : Current StepperState.
        snapshots           : The loaded SnapshotSequence (empty until load()).
        current_index       : Playback position, always in [0, N-1] once loaded.
        speed               : Speed multiplier in [MIN_SPEED, MAX_SPEED].
        base_step_duration  : Seconds between advances at 1x.
        pause_on_manual_step: If True, step_forward / step_backward while
                              PLAYING pause first.  If False the loop keeps
                              running and the manual move simply lands
                              between two auto-advances.
    """

    def __init__(
        self,
        base_step_duration: float = 0.5,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        on_step_changed: Optional[StepCallback] = None,
        on_status_changed: Optional[StatusCallback] = None,
        on_complete: Optional[Callable[[], None]] = None,
        pause_on_manual_step: bool = True,
    ):
        self.snapshots:            SnapshotSequence = SnapshotSequence()
        self.current_index:        int          = 0
        self.state:                StepperState = StepperState.IDLE
        self.speed:                float        = 1.0
        self.base_step_duration:   float        = max(0.001, float(base_step_duration))
        self.pause_on_manual_step: bool         = pause_on_manual_step

        self.on_step_changed:   Optional[StepCallback]         = on_step_changed
        self.on_status_changed: Optional[StatusCallback]       = on_status_changed
        self.on_complete:       Optional[Callable[[], None]]   = on_complete

        self._scheduler:     Optional[FrameScheduler] = scheduler
        self._clock:         Callable[[], float]      = clock
        self._frame_handle:  Any                      = None
        self._last_advance:  float                    = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, snapshots: Iterable[Snapshot]) -> None:
        """Replace the sequence, rewind to 0 and stop any playback."""
        self._cancel_frame()
        if not isinstance(snapshots, SnapshotSequence):
            snapshots = SnapshotSequence(snapshots)
        self.snapshots     = snapshots
        self.current_index = 0
        self.state         = StepperState.IDLE
        logger.debug("Loaded %d snapshots", len(snapshots))
        self._notify_step()
        self._notify_status()

    def close(self) -> None:
        """Stop the loop and drop every callback.  The stepper stays usable."""
        self._cancel_frame()
        if self.state == StepperState.PLAYING:
            self.state = StepperState.PAUSED
        self.on_step_changed   = None
        self.on_status_changed = None
        self.on_complete       = None

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if not self.snapshots or self.state == StepperState.PLAYING:
            return
        if self.current_index >= self.last_index:
            # play after completion restarts
            self.current_index = 0
            self._notify_step()
        self.state         = StepperState.PLAYING
        self._last_advance = self._clock()
        self._request_frame()
        self._notify_status()

    def pause(self) -> None:
        if self.state != StepperState.PLAYING:
            return
        self._cancel_frame()
        self.state = StepperState.PAUSED
        self._notify_status()

    def toggle(self) -> None:
        if self.state == StepperState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one snapshot.  Returns False (and does nothing) at the end."""
        if not self.snapshots or self.current_index >= self.last_index:
            return False
        self._interrupt_for_manual_step()
        self._goto(self.current_index + 1)
        return True

    def step_backward(self) -> bool:
        """Rewind one snapshot.  Returns False (and does nothing) at the start."""
        if not self.snapshots or self.current_index <= 0:
            return False
        self._interrupt_for_manual_step()
        self._goto(self.current_index - 1)
        return True

    def go_to_step(self, index: int) -> None:
        """Seek; out-of-range indices are clamped.  Play state is untouched."""
        if not self.snapshots:
            return
        if isinstance(index, float) and math.isinf(index):
            index = self.last_index if index > 0 else 0
        try:
            index = int(index)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring non-integer step index %r", index)
            return
        self._goto(max(0, min(self.last_index, index)))

    def scrub(self, fraction: float) -> None:
        """Seek proportionally, e.g. from a click on a progress bar."""
        if not self.snapshots:
            return
        try:
            fraction = float(fraction)
        except (TypeError, ValueError, OverflowError):
            return
        if math.isnan(fraction):
            return
        fraction = max(0.0, min(1.0, fraction))
        self.go_to_step(math.floor(fraction * self.last_index))

    def reset(self) -> None:
        """Back to snapshot 0 without changing play state."""
        if not self.snapshots:
            return
        self._goto(0)

    def jump_to_end(self) -> None:
        if not self.snapshots:
            return
        self._goto(self.last_index)

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, multiplier: float) -> None:
        try:
            multiplier = float(multiplier)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring non-numeric speed %r", multiplier)
            return
        if math.isnan(multiplier):
            return
        self.speed = max(MIN_SPEED, min(MAX_SPEED, multiplier))
        self._notify_status()

    def set_speed_preset(self, preset: str) -> None:
        self.set_speed(SPEED_PRESETS.get(preset, 1.0))

    # ------------------------------------------------------------------
    # Tick  (the body of one frame)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> bool:
        """
        Advance by one if PLAYING and enough time has passed.  Returns True
        if the position moved.  Reaching the final index ends playback.
        """
        if self.state != StepperState.PLAYING:
            return False
        if not self.snapshots or self.current_index >= self.last_index:
            self._finish()
            return False

        now = self._clock() if now is None else now
        if now - self._last_advance < self.effective_step_duration:
            return False

        self._last_advance  = now
        self.current_index += 1
        self._notify_step()
        if self.current_index >= self.last_index:
            self._finish()
        return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def total_steps(self) -> int:
        return len(self.snapshots)

    @property
    def last_index(self) -> int:
        return max(0, len(self.snapshots) - 1)

    @property
    def current_snapshot(self) -> Optional[Snapshot]:
        if self.snapshots:
            return self.snapshots[self.current_index]
        return None

    @property
    def is_playing(self) -> bool:
        return self.state == StepperState.PLAYING

    @property
    def is_at_end(self) -> bool:
        return bool(self.snapshots) and self.current_index >= self.last_index

    @property
    def effective_step_duration(self) -> float:
        return self.base_step_duration / self.speed

    @property
    def status(self) -> PlaybackStatus:
        total = len(self.snapshots)
        progress = self.current_index / (total - 1) * 100 if total > 1 else 0.0
        return PlaybackStatus(
            is_playing=self.is_playing,
            current_index=self.current_index,
            total_steps=total,
            speed_multiplier=self.speed,
            progress_percent=round(progress, 2),
            state=self.state.value,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, index: int) -> None:
        self.current_index = index
        self._notify_step()
        self._notify_status()

    def _interrupt_for_manual_step(self) -> None:
        if self.state == StepperState.PLAYING and self.pause_on_manual_step:
            self._cancel_frame()
            self.state = StepperState.PAUSED

    def _finish(self) -> None:
        self._cancel_frame()
        self.state = StepperState.PAUSED
        logger.debug("Playback complete at %d/%d", self.current_index, len(self.snapshots))
        self._notify_status()
        if self.on_complete:
            self.on_complete()

    def _on_frame(self) -> None:
        self._frame_handle = None
        self.tick()
        if self.state == StepperState.PLAYING:
            self._request_frame()

    def _request_frame(self) -> None:
        if self._scheduler is None or self._frame_handle is not None:
            return
        self._frame_handle = self._scheduler.request_frame(self._on_frame)

    def _cancel_frame(self) -> None:
        if self._scheduler is not None and self._frame_handle is not None:
            self._scheduler.cancel_frame(self._frame_handle)
        self._frame_handle = None

    def _notify_step(self) -> None:
        snap = self.current_snapshot
        if self.on_step_changed and snap is not None:
            self.on_step_changed(snap, self.current_index, len(self.snapshots))

    def _notify_status(self) -> None:
        if self.on_status_changed:
            self.on_status_changed(self.status)
