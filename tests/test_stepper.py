"""
Tests for the playback engine.

Tests cover:
- Loading and the two notification channels
- Play / pause / toggle and the frame-driven advancing loop
- Completion handling and restart after completion
- Manual navigation, seeking and scrubbing
- Speed clamping and presets
- Position / speed bounds under arbitrary operation sequences
"""

import math
import random

import pytest

from algorithms.step import Snapshot, SnapshotSequence
from engine import MAX_SPEED, MIN_SPEED, ManualClock, ManualFrameScheduler, Stepper, StepperState


def advance_frames(stepper, clock, scheduler, count, seconds=0.5):
    for _ in range(count):
        clock.advance(seconds)
        scheduler.run_frame()


# =============================================================================
# Loading
# =============================================================================

class TestLoad:

    def test_load_rewinds_and_is_idle(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        assert stepper.current_index == 0
        assert stepper.state == StepperState.IDLE
        assert stepper.total_steps == 5
        assert stepper.current_snapshot.description == "step 0"

    def test_load_fires_both_channels(self, stepper, five_snapshots, events):
        stepper.load(five_snapshots)
        assert events["step"] == [0]
        assert len(events["status"]) == 1
        assert events["status"][0].state == "idle"
        assert events["status"][0].total_steps == 5

    def test_load_accepts_plain_list(self, stepper):
        stepper.load([Snapshot("only", is_final=True)])
        assert isinstance(stepper.snapshots, SnapshotSequence)
        assert stepper.total_steps == 1

    def test_load_while_playing_stops_the_loop(self, stepper, five_snapshots, clock, scheduler):
        stepper.load(five_snapshots)
        stepper.play()
        advance_frames(stepper, clock, scheduler, 2)
        stepper.load(five_snapshots)
        assert stepper.state == StepperState.IDLE
        assert stepper.current_index == 0
        assert scheduler.pending_count == 0

    def test_empty_sequence(self, stepper):
        stepper.load([])
        stepper.play()
        assert stepper.state == StepperState.IDLE
        assert stepper.current_snapshot is None
        assert stepper.status.total_steps == 0
        assert stepper.status.progress_percent == 0.0
        assert stepper.step_forward() is False


# =============================================================================
# Play / Pause
# =============================================================================

class TestPlayback:

    def test_play_requests_a_frame(self, stepper, five_snapshots, scheduler):
        stepper.load(five_snapshots)
        stepper.play()
        assert stepper.is_playing
        assert scheduler.pending_count == 1

    def test_advances_once_per_step_duration(self, stepper, five_snapshots, clock, scheduler):
        stepper.load(five_snapshots)
        stepper.play()

        clock.advance(0.4)
        scheduler.run_frame()
        assert stepper.current_index == 0

        clock.advance(0.1)
        scheduler.run_frame()
        assert stepper.current_index == 1
        assert scheduler.pending_count == 1

    def test_auto_advance_only_fires_step_channel(self, stepper, five_snapshots, clock, scheduler, events):
        stepper.load(five_snapshots)
        stepper.play()
        statuses = len(events["status"])
        advance_frames(stepper, clock, scheduler, 2)
        assert events["step"] == [0, 1, 2]
        assert len(events["status"]) == statuses

    def test_pause_cancels_the_frame(self, stepper, five_snapshots, clock, scheduler):
        stepper.load(five_snapshots)
        stepper.play()
        stepper.pause()
        assert stepper.state == StepperState.PAUSED
        assert scheduler.pending_count == 0
        advance_frames(stepper, clock, scheduler, 3)
        assert stepper.current_index == 0

    def test_pause_when_not_playing_is_a_noop(self, stepper, five_snapshots, events):
        stepper.load(five_snapshots)
        statuses = len(events["status"])
        stepper.pause()
        assert stepper.state == StepperState.IDLE
        assert len(events["status"]) == statuses

    def test_toggle(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.toggle()
        assert stepper.is_playing
        stepper.toggle()
        assert stepper.state == StepperState.PAUSED

    def test_tick_without_scheduler(self, five_snapshots):
        clock = ManualClock()
        stepper = Stepper(base_step_duration=0.5, clock=clock)
        stepper.load(five_snapshots)
        stepper.play()
        clock.advance(0.5)
        assert stepper.tick() is True
        assert stepper.current_index == 1
        assert stepper.tick() is False


# =============================================================================
# Completion
# =============================================================================

class TestCompletion:

    def test_reaching_the_end_pauses_and_completes(self, stepper, five_snapshots, clock, scheduler, events):
        stepper.load(five_snapshots)
        stepper.play()
        advance_frames(stepper, clock, scheduler, 4)

        assert stepper.current_index == 4
        assert stepper.is_at_end
        assert stepper.state == StepperState.PAUSED
        assert events["complete"] == [True]
        assert events["status"][-1].is_playing is False
        assert scheduler.pending_count == 0

    def test_no_frames_after_completion(self, stepper, five_snapshots, clock, scheduler, events):
        stepper.load(five_snapshots)
        stepper.play()
        advance_frames(stepper, clock, scheduler, 10)
        assert stepper.current_index == 4
        assert events["complete"] == [True]

    def test_play_after_completion_restarts(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.jump_to_end()
        stepper.play()
        assert stepper.current_index == 0
        assert stepper.is_playing

    def test_single_snapshot_completes_on_first_frame(self, stepper, scheduler, events):
        stepper.load([Snapshot("only", is_final=True)])
        stepper.play()
        scheduler.run_frame()
        assert stepper.state == StepperState.PAUSED
        assert events["complete"] == [True]
        assert stepper.status.progress_percent == 0.0


# =============================================================================
# Navigation
# =============================================================================

class TestNavigation:

    def test_step_forward_and_backward(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        assert stepper.step_forward() is True
        assert stepper.step_forward() is True
        assert stepper.step_backward() is True
        assert stepper.current_index == 1

    def test_bounds_are_noops(self, stepper, five_snapshots, events):
        stepper.load(five_snapshots)
        assert stepper.step_backward() is False
        stepper.jump_to_end()
        steps = len(events["step"])
        assert stepper.step_forward() is False
        assert len(events["step"]) == steps

    def test_manual_step_fires_both_channels(self, stepper, five_snapshots, events):
        stepper.load(five_snapshots)
        stepper.step_forward()
        assert events["step"][-1] == 1
        assert events["status"][-1].current_index == 1

    def test_manual_step_while_playing_pauses(self, stepper, five_snapshots, scheduler):
        stepper.load(five_snapshots)
        stepper.play()
        stepper.step_forward()
        assert stepper.state == StepperState.PAUSED
        assert stepper.current_index == 1
        assert scheduler.pending_count == 0

    def test_manual_step_can_keep_playing(self, five_snapshots, clock, scheduler):
        stepper = Stepper(base_step_duration=0.5, scheduler=scheduler, clock=clock,
                          pause_on_manual_step=False)
        stepper.load(five_snapshots)
        stepper.play()

        clock.advance(0.3)
        stepper.step_forward()
        assert stepper.is_playing
        assert stepper.current_index == 1

        # the advance timer was not reset by the manual step
        clock.advance(0.2)
        scheduler.run_frame()
        assert stepper.current_index == 2

    def test_go_to_step_clamps(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.go_to_step(99)
        assert stepper.current_index == 4
        stepper.go_to_step(-3)
        assert stepper.current_index == 0

    def test_go_to_step_ignores_garbage(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.go_to_step(2)
        stepper.go_to_step("two")
        stepper.go_to_step(None)
        assert stepper.current_index == 2

    @pytest.mark.parametrize("index, expected", [
        (float("inf"), 4), (float("-inf"), 0), (float("nan"), 2), (1e300, 4),
    ])
    def test_go_to_step_non_finite(self, stepper, five_snapshots, index, expected):
        stepper.load(five_snapshots)
        stepper.go_to_step(2)
        stepper.go_to_step(index)
        assert stepper.current_index == expected

    def test_go_to_step_keeps_play_state(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.play()
        stepper.go_to_step(2)
        assert stepper.is_playing
        assert stepper.current_index == 2

    @pytest.mark.parametrize("fraction, expected", [
        (0.0, 0), (0.5, 2), (0.99, 3), (1.0, 4), (-1, 0), (7, 4),
    ])
    def test_scrub(self, stepper, five_snapshots, fraction, expected):
        stepper.load(five_snapshots)
        stepper.scrub(fraction)
        assert stepper.current_index == expected

    def test_scrub_ignores_nan(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.go_to_step(3)
        stepper.scrub(float("nan"))
        assert stepper.current_index == 3

    @pytest.mark.parametrize("fraction, expected", [(float("inf"), 4), (float("-inf"), 0)])
    def test_scrub_infinite(self, stepper, five_snapshots, fraction, expected):
        stepper.load(five_snapshots)
        stepper.go_to_step(2)
        stepper.scrub(fraction)
        assert stepper.current_index == expected

    def test_reset_and_jump_to_end(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.jump_to_end()
        assert stepper.current_index == 4
        stepper.reset()
        assert stepper.current_index == 0
        assert stepper.state == StepperState.IDLE


# =============================================================================
# Speed
# =============================================================================

class TestSpeed:

    @pytest.mark.parametrize("requested, expected", [
        (1.0, 1.0), (2.5, 2.5), (10, MAX_SPEED), (0.1, MIN_SPEED), (0, MIN_SPEED), ("2", 2.0),
    ])
    def test_set_speed_clamps(self, stepper, requested, expected):
        stepper.set_speed(requested)
        assert stepper.speed == expected

    def test_set_speed_ignores_garbage(self, stepper):
        stepper.set_speed(2.0)
        stepper.set_speed(float("nan"))
        stepper.set_speed("fast")
        stepper.set_speed(None)
        assert stepper.speed == 2.0

    @pytest.mark.parametrize("requested, expected", [
        (float("inf"), MAX_SPEED), (float("-inf"), MIN_SPEED), ("1e999", MAX_SPEED), (10 ** 400, 2.0),
    ])
    def test_set_speed_infinite(self, stepper, requested, expected):
        stepper.set_speed(2.0)
        stepper.set_speed(requested)
        assert stepper.speed == expected

    def test_presets(self, stepper):
        stepper.set_speed_preset("turbo")
        assert stepper.speed == 4.0
        stepper.set_speed_preset("slow")
        assert stepper.speed == 0.5
        stepper.set_speed_preset("warp")
        assert stepper.speed == 1.0

    def test_speed_notifies_status(self, stepper, events):
        stepper.set_speed(2.0)
        assert events["status"][-1].speed_multiplier == 2.0

    def test_speed_change_applies_on_next_frame(self, stepper, five_snapshots, clock, scheduler):
        stepper.load(five_snapshots)
        stepper.play()
        clock.advance(0.25)
        scheduler.run_frame()
        assert stepper.current_index == 0

        stepper.set_speed(2.0)
        scheduler.run_frame()
        assert stepper.current_index == 1
        assert stepper.effective_step_duration == 0.25


# =============================================================================
# Status
# =============================================================================

class TestStatus:

    def test_progress_percent(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        stepper.go_to_step(2)
        assert stepper.status.progress_percent == 50.0
        stepper.jump_to_end()
        assert stepper.status.progress_percent == 100.0

    def test_to_dict(self, stepper, five_snapshots):
        stepper.load(five_snapshots)
        data = stepper.status.to_dict()
        assert data == {
            "is_playing": False,
            "current_index": 0,
            "total_steps": 5,
            "speed_multiplier": 1.0,
            "progress_percent": 0.0,
            "state": "idle",
        }

    def test_close_drops_callbacks(self, stepper, five_snapshots, scheduler, events):
        stepper.load(five_snapshots)
        stepper.play()
        stepper.close()
        assert scheduler.pending_count == 0
        steps = len(events["step"])
        stepper.step_forward()
        assert len(events["step"]) == steps


# =============================================================================
# Bounds under arbitrary operation sequences
# =============================================================================

class TestInvariants:

    def test_index_and_speed_stay_in_bounds(self, stepper, five_snapshots, clock, scheduler):
        rng = random.Random(1234)
        non_finite = [float("inf"), float("-inf"), float("nan")]
        stepper.load(five_snapshots)
        ops = [
            stepper.play, stepper.pause, stepper.toggle, stepper.step_forward,
            stepper.step_backward, stepper.reset, stepper.jump_to_end,
            lambda: stepper.go_to_step(rng.randint(-10, 10)),
            lambda: stepper.scrub(rng.uniform(-1, 2)),
            lambda: stepper.set_speed(rng.uniform(-5, 10)),
            lambda: stepper.go_to_step(rng.choice(non_finite)),
            lambda: stepper.scrub(rng.choice(non_finite)),
            lambda: stepper.set_speed(rng.choice(non_finite)),
            lambda: advance_frames(stepper, clock, scheduler, 1, rng.uniform(0, 1)),
        ]
        for _ in range(500):
            rng.choice(ops)()
            assert 0 <= stepper.current_index <= stepper.last_index
            assert MIN_SPEED <= stepper.speed <= MAX_SPEED
            assert not math.isnan(stepper.speed)
            assert scheduler.pending_count <= 1
            if not stepper.is_playing:
                assert scheduler.pending_count == 0
