"""
step.py - Algorithm Snapshot
============================
Every algorithm is a generator that yields Snapshot objects.
A Snapshot is a frozen-in-time picture of everything a renderer
needs to draw one frame of a run:

    • A plain-English description of what just happened
    • The algorithm-specific state (array contents, board, DP table, …)
    • Which line of pseudocode is executing right now

Design decisions:
  - Snapshot is a frozen dataclass.  The producer is the only writer;
    the stepper / renderer are pure readers.
  - `payload` is a free-form dict so each algorithm can push whatever
    state its renderer wants.  Values are JSON-friendly (lists, dicts,
    ints, strings, None) so a run can be exported and replayed.
  - SnapshotBuilder deep-copies the payload at capture time.  Producers
    keep mutating their working arrays after a yield and the snapshot
    must not see that.
"""

import copy
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        description     : Human-readable "what happened" text.  Always present.
        payload         : Algorithm-specific state for the renderer.
        step_number     : 0-based index of this snapshot in the run.
        pseudocode_line : 0-based index of the pseudocode line executing now
                          (-1 when the snapshot is not tied to a line).
        is_final        : True on the very last snapshot of a run.
    """

    description:      str
    payload:          Dict[str, Any]   = field(default_factory=dict)
    step_number:      int              = 0
    pseudocode_line:  int              = -1
    is_final:         bool             = False

    # mapping-style access so renderers can write snap["pegs"]
    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __contains__(self, key: object) -> bool:
        return key in self.payload

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "description":     self.description,
            "pseudocode_line": self.pseudocode_line,
            "is_final":        self.is_final,
            "payload":         copy.deepcopy(self.payload),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        return cls(
            description=str(data.get("description", "")),
            payload=copy.deepcopy(data.get("payload", {})),
            step_number=int(data.get("step_number", 0)),
            pseudocode_line=int(data.get("pseudocode_line", -1)),
            is_final=bool(data.get("is_final", False)),
        )


# ---------------------------------------------------------------------------
# SnapshotSequence - the read-only result of one run
# ---------------------------------------------------------------------------
class SnapshotSequence(Sequence):
    """Ordered, immutable list of Snapshots produced by a single run."""

    __slots__ = ("_items",)

    def __init__(self, snapshots: Iterable[Snapshot] = ()):
        self._items = tuple(snapshots)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return SnapshotSequence(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"SnapshotSequence(len={len(self._items)})"

    @property
    def first(self) -> Optional[Snapshot]:
        return self._items[0] if self._items else None

    @property
    def final(self) -> Optional[Snapshot]:
        return self._items[-1] if self._items else None

    def descriptions(self) -> List[str]:
        return [s.description for s in self._items]

    def to_list(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self._items]

    @classmethod
    def from_list(cls, items: Iterable[Dict[str, Any]]) -> "SnapshotSequence":
        return cls(Snapshot.from_dict(d) for d in items)


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to count steps themselves
# ---------------------------------------------------------------------------
class SnapshotBuilder:
    """
    Numbering scratch-pad that algorithms use to capture Snapshots.

    Usage inside an algorithm generator:
        sb = SnapshotBuilder()
        yield sb.build("Starting Merge Sort", line=0, array=arr, comparisons=0)
        ...
        yield sb.build("Array is now sorted!", final=True, array=arr)
    """

    def __init__(self):
        self.count: int = 0

    def build(
        self,
        description: str,
        *,
        line: int = -1,
        final: bool = False,
        **payload: Any,
    ) -> Snapshot:
        snap = Snapshot(
            description=description,
            payload=copy.deepcopy(payload),
            step_number=self.count,
            pseudocode_line=line,
            is_final=final,
        )
        self.count += 1
        return snap
