from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Identity (id, label) plus a layout position for the renderer.

    Attributes:
        id       : Unique identifier.  Sample and random graphs use the
                   letter label ("A", "B", …) as the id.
        label    : Human-readable name shown next to the node.
        x, y     : Layout coordinates in pixels.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id:    str   = str(node_id)
        self.label: str   = label or self.id
        self.x:     float = x
        self.y:     float = y

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     round(self.x, 2),
            "y":     round(self.y, 2),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            node_id=data["id"],
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            label=data.get("label"),
        )

    def __repr__(self) -> str:
        return f"Node(id={self.id}, pos=({self.x:.1f},{self.y:.1f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
