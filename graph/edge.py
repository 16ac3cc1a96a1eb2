"""
edge.py - Graph Edge
====================
Connects two nodes with an optional weight.

`source` and `target` are node-id strings, not Node references, which
keeps edges serialisable.  Weight defaults to 1 so the unweighted
traversal graph can share the same class.
"""

from typing import Any, Dict, Optional


class Edge:
    """
    Attributes:
        id       : Unique identifier, "<source>-<target>" unless supplied.
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Non-negative numeric cost (default 1).
        directed : If False, traversal works in both directions.
    """

    __slots__ = ("id", "source", "target", "weight", "directed")

    def __init__(
        self,
        source: str,
        target: str,
        weight: float = 1,
        directed: bool = False,
        edge_id: Optional[str] = None,
    ):
        self.id:       str   = str(edge_id) if edge_id else f"{source}-{target}"
        self.source:   str   = source
        self.target:   str   = target
        self.weight:   float = weight
        self.directed: bool  = directed

    def connects(self, node_a: str, node_b: str) -> bool:
        """True if this edge links node_a ↔ node_b (respects directedness)."""
        if self.directed:
            return self.source == node_a and self.target == node_b
        return {self.source, self.target} == {node_a, node_b}

    def other_end(self, node_id: str) -> Optional[str]:
        if node_id == self.source:
            return self.target
        if node_id == self.target and not self.directed:
            return self.source
        return None

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":       self.id,
            "source":   self.source,
            "target":   self.target,
            "weight":   self.weight,
            "directed": self.directed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            weight=data.get("weight", 1),
            directed=data.get("directed", False),
            edge_id=data.get("id"),
        )

    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
