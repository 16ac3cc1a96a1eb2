"""
recorder.py - Run Recorder & Analytics
======================================
Records a complete algorithm run (all Snapshots), then computes the
analytics card and a serialisable export that can be replayed later.

Usage:
    rec = Recorder()
    rec.start(algo_key="kmp", text="ABABDABACDABABCABAB", pattern="ABABCABAB")
    metrics = rec.run_to_completion()   # exhausts the producer
    data = rec.export()                 # JSON-ready dict for save / replay
    seq = Recorder.replay(data)         # SnapshotSequence for a fresh Stepper
"""

import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from algorithms import AlgoInfo, get_algorithm
from algorithms.step import Snapshot, SnapshotSequence
from engine.producer import StepProducer


# ---------------------------------------------------------------------------
# Metrics dataclass - what the analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:           str   = ""
    algo_label:         str   = ""
    params:             Dict[str, Any] = field(default_factory=dict)
    total_steps:        int   = 0          # number of Snapshots produced
    wall_time_ms:       float = 0.0        # wall-clock time to run to completion
    memory_bytes:       int   = 0          # approx size of the snapshot buffer
    final_description:  str   = ""
    playback_seconds:   float = 0.0        # full playback at 1x

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        snapshots   : Full SnapshotSequence from the run.
        metrics     : Computed RunMetrics (available after run_to_completion).
        producer    : The StepProducer driving the run.
    """

    def __init__(self):
        self.snapshots:  SnapshotSequence       = SnapshotSequence()
        self.metrics:    Optional[RunMetrics]   = None
        self.producer:   Optional[StepProducer] = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, **params: Any) -> None:
        """Prepare a producer for this run."""
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")
        self.producer  = StepProducer(info, **params)
        self.snapshots = SnapshotSequence()
        self.metrics   = None

    def attach(self, producer: StepProducer) -> None:
        """Record an existing producer's most recent run without re-running it."""
        self.producer  = producer
        self.snapshots = producer.last_run
        self.metrics   = self._compute_metrics(0.0)

    def run_to_completion(self) -> RunMetrics:
        """Run the producer, record every snapshot, compute metrics."""
        if self.producer is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.snapshots = self.producer.run()
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export / replay
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        info = self.producer.info if self.producer else None
        return {
            "algo_key":           info.key if info else "",
            "params":             dict(self.producer.params) if self.producer else {},
            "base_step_duration": info.base_step_duration if info else 0.0,
            "metrics":            self.metrics.to_dict() if self.metrics else {},
            "snapshots":          self.snapshots.to_list(),
        }

    @staticmethod
    def replay(data: Dict[str, Any]) -> SnapshotSequence:
        """Rebuild the SnapshotSequence of an export()."""
        return SnapshotSequence.from_list(data.get("snapshots", []))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info: Optional[AlgoInfo] = self.producer.info if self.producer else None
        last: Optional[Snapshot] = self.snapshots.final

        # approximate memory: sizeof the buffer plus each snapshot's payload dict
        mem = sys.getsizeof(self.snapshots)
        for s in self.snapshots:
            mem += sys.getsizeof(s) + sys.getsizeof(s.payload)

        steps = len(self.snapshots)
        per_step = info.base_step_duration if info else 0.0
        params: Dict[str, Any] = dict(self.producer.params) if self.producer else {}

        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            params=params,
            total_steps=steps,
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            final_description=last.description if last else "",
            playback_seconds=round(max(0, steps - 1) * per_step, 2),
        )


def final_snapshots_match(a: List[Snapshot], b: List[Snapshot]) -> bool:
    """True if two runs end on the same content (description and payload)."""
    if not a or not b:
        return not a and not b
    return a[-1].description == b[-1].description and a[-1].payload == b[-1].payload
