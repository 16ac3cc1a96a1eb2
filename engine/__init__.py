"""
engine/
-------
Production, playback & recording layer.

    from engine import Stepper, StepProducer, VisualizerPage, Recorder
"""

from engine.frames   import FrameScheduler, ManualFrameScheduler, AsyncioFrameScheduler, ManualClock
from engine.stepper  import Stepper, StepperState, PlaybackStatus, SPEED_PRESETS, MIN_SPEED, MAX_SPEED
from engine.producer import StepProducer
from engine.recorder import Recorder, RunMetrics
from engine.page     import VisualizerPage, PageStore

__all__ = [
    "FrameScheduler",
    "ManualFrameScheduler",
    "AsyncioFrameScheduler",
    "ManualClock",
    "Stepper",
    "StepperState",
    "PlaybackStatus",
    "SPEED_PRESETS",
    "MIN_SPEED",
    "MAX_SPEED",
    "StepProducer",
    "Recorder",
    "RunMetrics",
    "VisualizerPage",
    "PageStore",
]
