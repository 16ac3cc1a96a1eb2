"""
producer.py - Step Producer
===========================
Wraps one registry card (AlgoInfo) with the configure → run contract the
Playback Engine consumes:

    producer = StepProducer(get_algorithm("tower_of_hanoi"), num_disks=3)
    seq = producer.run()             # SnapshotSequence, never empty
    stepper.load(seq)

One producer instance lives as long as its page.  Parameters persist
between runs; every run starts from an empty buffer and returns a fresh
sequence.
"""

import logging
import random
import time
from typing import Any, Dict, Iterator, Optional

from algorithms import AlgoInfo
from algorithms.step import Snapshot, SnapshotSequence

logger = logging.getLogger(__name__)


class StepProducer:
    """
    Attributes:
        info      : The registry card being produced.
        params    : Current, already-clamped parameter values.
        last_run  : The most recent SnapshotSequence (empty before the first run).
    """

    def __init__(self, info: AlgoInfo, **params: Any):
        self.info:     AlgoInfo          = info
        self.params:   Dict[str, Any]    = info.defaults()
        self.last_run: SnapshotSequence  = SnapshotSequence()
        self._buffer:  list              = []
        self.configure(**params)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure(self, **params: Any) -> Dict[str, Any]:
        """Merge `params` into the current settings, clamping each value."""
        for name, raw in params.items():
            spec = self.info.param(name)
            if spec is None:
                logger.debug("%s: ignoring unknown parameter %r", self.info.key, name)
                continue
            self.params[name] = spec.coerce(raw)
        return dict(self.params)

    def randomize(self, seed: Optional[int] = None) -> Dict[str, Any]:
        """Replace the card's inputs with random ones (no-op for cards without a generator)."""
        if self.info.randomize is None:
            return dict(self.params)
        rng = random.Random(seed)
        fresh = self.info.randomize(rng, dict(self.params))
        logger.debug("%s: randomised %s (seed=%s)", self.info.key, sorted(fresh), seed)
        return self.configure(**fresh)

    def generator_kwargs(self) -> Dict[str, Any]:
        return {
            spec.name: self.params[spec.name]
            for spec in self.info.params
            if not spec.randomize_only
        }

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------
    def iter_snapshots(self) -> Iterator[Snapshot]:
        """Lazy view of a run.  Each call starts a fresh generator."""
        return iter(self.info.fn(**self.generator_kwargs()))

    def run(self, **params: Any) -> SnapshotSequence:
        """Configure (optional), run to completion and return the sequence."""
        if params:
            self.configure(**params)

        self._buffer = []
        started = time.monotonic()
        for snap in self.iter_snapshots():
            self._buffer.append(snap)

        if not self._buffer:
            self._buffer.append(Snapshot(
                description=f"{self.info.label}: nothing to show for these inputs",
                is_final=True,
            ))

        self.last_run = SnapshotSequence(self._buffer)
        self._carry_over(self.last_run.final)

        logger.info(
            "%s produced %d snapshots in %.1f ms",
            self.info.key, len(self.last_run), (time.monotonic() - started) * 1000,
        )
        return self.last_run

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _carry_over(self, final: Optional[Snapshot]) -> None:
        """Copy persisted payload keys from the final snapshot into params."""
        if final is None:
            return
        carried = {key: final.get(key) for key in self.info.persist if key in final}
        if carried:
            self.configure(**carried)
