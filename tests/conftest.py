"""
Shared test fixtures for the visualizer tests.

Provides a deterministic clock and frame scheduler, a small snapshot
sequence, a Stepper wired to a notification log, and a Flask client.
"""

import pytest
from typing import Any, Dict, List

from algorithms.step import SnapshotBuilder, SnapshotSequence
from engine import ManualClock, ManualFrameScheduler, Stepper


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture
def five_snapshots() -> SnapshotSequence:
    """Five numbered snapshots, the last one final."""
    sb = SnapshotBuilder()
    return SnapshotSequence(
        sb.build(f"step {i}", line=i, final=(i == 4), value=i) for i in range(5)
    )


@pytest.fixture
def events() -> Dict[str, List[Any]]:
    return {"step": [], "status": [], "complete": []}


@pytest.fixture
def stepper(clock, scheduler, events) -> Stepper:
    """Stepper at 0.5 s per step that logs every notification into `events`."""
    return Stepper(
        base_step_duration=0.5,
        scheduler=scheduler,
        clock=clock,
        on_step_changed=lambda snap, index, total: events["step"].append(index),
        on_status_changed=lambda status: events["status"].append(status),
        on_complete=lambda: events["complete"].append(True),
    )


@pytest.fixture
def app():
    from main import create_app
    return create_app({"TESTING": True, "SECRET_KEY": "test-secret", "MAX_PAGES": 8})


@pytest.fixture
def client(app):
    return app.test_client()
