"""
page.py - Visualizer Page Context
=================================
Everything one visualizer page owns, held in one explicit object instead
of module-level globals:

    • one StepProducer   (the algorithm and its current inputs)
    • one Stepper        (playback over the producer's latest run)
    • an optional renderer callback, handed every snapshot the Stepper shows
    • the latest snapshot / status the Stepper broadcast, and a completed flag

    page = VisualizerPage.bootstrap("merge_sort", renderer=draw, array=[5, 3, 1])
    page.stepper.play()

PageStore keeps pages for the HTTP layer, keyed by an opaque id, and drops
the least recently used page once `max_pages` is exceeded.
"""

import logging
import secrets
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from algorithms import get_algorithm
from algorithms.step import Snapshot, SnapshotSequence
from engine.frames import FrameScheduler
from engine.producer import StepProducer
from engine.recorder import Recorder
from engine.stepper import PlaybackStatus, Stepper

logger = logging.getLogger(__name__)

Renderer = Callable[[Snapshot], None]


class VisualizerPage:
    """
    Attributes:
        producer   : StepProducer for this page's algorithm.
        stepper    : Stepper replaying the producer's latest run.
        renderer   : Optional callback(snapshot) for drawing.
        snapshot   : Last snapshot the Stepper announced.
        status     : Last PlaybackStatus the Stepper announced.
        completed  : True once playback reached the end; cleared by a new run.
    """

    def __init__(
        self,
        producer: StepProducer,
        stepper: Stepper,
        renderer: Optional[Renderer] = None,
    ):
        self.producer:  StepProducer             = producer
        self.stepper:   Stepper                  = stepper
        self.renderer:  Optional[Renderer]       = renderer
        self.snapshot:  Optional[Snapshot]       = None
        self.status:    Optional[PlaybackStatus] = None
        self.completed: bool                     = False

        stepper.on_step_changed   = self._on_step
        stepper.on_status_changed = self._on_status
        stepper.on_complete       = self._on_complete

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    @classmethod
    def bootstrap(
        cls,
        algo_key: str,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        renderer: Optional[Renderer] = None,
        pause_on_manual_step: bool = True,
        **params: Any,
    ) -> Optional["VisualizerPage"]:
        """Wire producer, stepper and renderer, then perform the first run.  None for unknown keys."""
        info = get_algorithm(algo_key)
        if info is None:
            logger.warning("Cannot bootstrap unknown algorithm %r", algo_key)
            return None
        producer = StepProducer(info, **params)
        stepper = Stepper(
            base_step_duration=info.base_step_duration,
            scheduler=scheduler,
            clock=clock,
            pause_on_manual_step=pause_on_manual_step,
        )
        page = cls(producer, stepper, renderer)
        page.run()
        return page

    # ------------------------------------------------------------------
    # Page actions
    # ------------------------------------------------------------------
    def run(self, **params: Any) -> SnapshotSequence:
        """Re-run the producer (optionally with new inputs) and load the result."""
        sequence = self.producer.run(**params)
        self.completed = False
        self.stepper.load(sequence)
        return sequence

    def randomize(self, seed: Optional[int] = None) -> SnapshotSequence:
        self.producer.randomize(seed)
        return self.run()

    def close(self) -> None:
        self.stepper.close()
        self.renderer = None

    @property
    def algo_key(self) -> str:
        return self.producer.info.key

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def view(self) -> Dict[str, Any]:
        """JSON-ready picture of the page: status, current snapshot, inputs."""
        snap = self.stepper.current_snapshot
        return {
            "algo_key":   self.algo_key,
            "params":     dict(self.producer.params),
            "status":     self.stepper.status.to_dict(),
            "completed":  self.completed,
            "snapshot":   snap.to_dict() if snap else None,
            "pseudocode_line": snap.pseudocode_line if snap else -1,
        }

    def export(self) -> Dict[str, Any]:
        rec = Recorder()
        rec.attach(self.producer)
        return rec.export()

    # ------------------------------------------------------------------
    # Stepper notifications
    # ------------------------------------------------------------------
    def _on_step(self, snapshot: Snapshot, index: int, total: int) -> None:
        self.snapshot = snapshot
        if self.renderer:
            self.renderer(snapshot)

    def _on_status(self, status: PlaybackStatus) -> None:
        self.status = status

    def _on_complete(self) -> None:
        self.completed = True
        logger.debug("%s playback complete", self.algo_key)


# ---------------------------------------------------------------------------
# PageStore
# ---------------------------------------------------------------------------
class PageStore:
    """In-memory LRU of pages keyed by an opaque id."""

    def __init__(self, max_pages: int = 256):
        self.max_pages: int = max(1, int(max_pages))
        self._pages: "OrderedDict[str, VisualizerPage]" = OrderedDict()

    def add(self, page: VisualizerPage, page_id: Optional[str] = None) -> str:
        page_id = page_id or secrets.token_hex(8)
        old = self._pages.pop(page_id, None)
        if old is not None and old is not page:
            old.close()
        self._pages[page_id] = page
        while len(self._pages) > self.max_pages:
            evicted_id, evicted = self._pages.popitem(last=False)
            evicted.close()
            logger.debug("Evicted page %s", evicted_id)
        return page_id

    def get(self, page_id: Optional[str]) -> Optional[VisualizerPage]:
        if page_id is None or page_id not in self._pages:
            return None
        self._pages.move_to_end(page_id)
        return self._pages[page_id]

    def discard(self, page_id: str) -> None:
        page = self._pages.pop(page_id, None)
        if page is not None:
            page.close()

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages
