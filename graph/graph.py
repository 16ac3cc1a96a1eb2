"""
graph.py - Graph Container & Generators
=======================================
The graph the pathfinding producers (Dijkstra, BFS / DFS traversal) walk.

Responsibilities:
  1. Building nodes & edges                 (create_node / create_edge)
  2. Adjacency queries                      (neighbours, get_edge_between)
  3. Sample graphs and random generators    (weighted_sample, traversal_sample,
                                             generate_random, generate_tree)
  4. Serialisation round-trip               (to_dict / from_dict / coerce)

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup.
  - A separate adjacency dict  `_adj[node_id] → [edge_id]`
    is maintained incrementally; Edge.other_end gives the far end.  Its
    order is insertion order, which is the order producers explore
    neighbours in.
  - Generators take a `random.Random` so runs are reproducible per seed
    without touching the module-level RNG.
"""

import logging
import math
import random
from typing import Any, Dict, List, Optional, Tuple

from graph.node import Node
from graph.edge import Edge

logger = logging.getLogger(__name__)

MAX_NODES = 26      # single-letter labels


def letter(index: int) -> str:
    return chr(ord("A") + index)


class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        directed   : bool – graph-level directedness
        _adj       : {node_id: [edge_id, …]}
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool           = directed
        self._adj:     Dict[str, List[str]] = {}

    # ==================================================================
    # BUILDING
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, node_id: str, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Node:
        return self.add_node(Node(node_id, x=x, y=y, label=label))

    def add_edge(self, edge: Edge) -> Edge:
        if edge.id in self.edges:
            return self.edges[edge.id]
        self.edges[edge.id] = edge
        self._adj.setdefault(edge.source, []).append(edge.id)
        if not edge.directed:
            self._adj.setdefault(edge.target, []).append(edge.id)
        return edge

    def create_edge(self, source: str, target: str, weight: float = 1) -> Edge:
        return self.add_edge(Edge(source=source, target=target, weight=weight, directed=self.directed))

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def get_edge_between(self, a: str, b: str) -> Optional[Edge]:
        """First edge connecting a and b (direction-aware)."""
        for eid in self._adj.get(a, []):
            e = self.edges[eid]
            if e.connects(a, b):
                return e
        return None

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] in insertion order."""
        edges = [self.edges[eid] for eid in self._adj.get(node_id, [])]
        return [(e.other_end(node_id), e) for e in edges]

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def label_of(self, node_id: str) -> str:
        node = self.nodes.get(node_id)
        return node.label if node else str(node_id)

    def resolve(self, node_id: Optional[str], fallback_index: int = 0) -> Optional[str]:
        """`node_id` if the graph has it, else the node at `fallback_index`."""
        if node_id is not None and str(node_id) in self.nodes:
            return str(node_id)
        ids = self.node_ids()
        if not ids:
            return None
        return ids[fallback_index] if -len(ids) <= fallback_index < len(ids) else ids[0]

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        g = cls(directed=data.get("directed", False))
        for nd in data.get("nodes", []):
            g.add_node(Node.from_dict(nd))
        for ed in data.get("edges", []):
            edge = Edge.from_dict(ed)
            if edge.source in g.nodes and edge.target in g.nodes:
                g.add_edge(edge)
        return g

    @classmethod
    def coerce(cls, raw: Any) -> Optional[Dict[str, Any]]:
        """
        Normalise an incoming graph description into a clean dict, or None
        when it cannot be read.  Edges pointing at unknown nodes are dropped,
        negative weights are clamped to 0 (Dijkstra needs w >= 0) and
        non-finite weights or coordinates are discarded.
        """
        if isinstance(raw, Graph):
            return raw.to_dict()
        if not isinstance(raw, dict) or not isinstance(raw.get("nodes"), list):
            return None
        try:
            nodes = [Node.from_dict(nd).to_dict() for nd in raw["nodes"][:MAX_NODES]]
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.debug("Unreadable graph nodes: %r", raw.get("nodes"))
            return None
        if not nodes:
            return None
        for nd in nodes:
            if not (math.isfinite(nd["x"]) and math.isfinite(nd["y"])):
                nd["x"], nd["y"] = 0.0, 0.0
        known = {n["id"] for n in nodes}

        raw_edges = raw.get("edges")
        if not isinstance(raw_edges, list):
            raw_edges = []
        edges, seen = [], set()
        for ed in raw_edges:
            try:
                edge = Edge.from_dict(ed)
                weight = max(0.0, float(edge.weight))
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
            if not math.isfinite(weight) or edge.id in seen:
                continue
            if edge.source not in known or edge.target not in known:
                continue
            edge.weight = int(weight) if weight.is_integer() else weight
            seen.add(edge.id)
            edges.append(edge.to_dict())
        return {"directed": bool(raw.get("directed", False)), "nodes": nodes, "edges": edges}

    # ==================================================================
    # SAMPLES
    # ==================================================================
    @classmethod
    def weighted_sample(cls) -> "Graph":
        """Six-node weighted graph A–F used by Dijkstra."""
        g = cls()
        for i, (x, y) in enumerate([(100, 200), (250, 100), (250, 300), (400, 100), (400, 300), (550, 200)]):
            g.create_node(letter(i), x, y)
        for a, b, w in [(0, 1, 4), (0, 2, 2), (1, 2, 1), (1, 3, 5), (2, 3, 8),
                        (2, 4, 10), (3, 4, 2), (3, 5, 6), (4, 5, 3)]:
            g.create_edge(letter(a), letter(b), weight=w)
        return g

    @classmethod
    def traversal_sample(cls) -> "Graph":
        """Seven-node tree-ish graph A–G used by BFS / DFS."""
        g = cls()
        for i, (x, y) in enumerate([(300, 50), (150, 150), (450, 150), (80, 270),
                                    (220, 270), (380, 270), (520, 270)]):
            g.create_node(letter(i), x, y)
        for a, b in [(0, 1), (0, 2), (1, 3), (1, 4), (2, 5), (2, 6), (4, 5)]:
            g.create_edge(letter(a), letter(b))
        return g

    # ==================================================================
    # GENERATORS
    # ==================================================================
    @classmethod
    def _circle(
        cls,
        num_nodes: int,
        width: float,
        height: float,
        padding: float,
        scale: float = 1.0,
    ) -> "Graph":
        g = cls()
        radius = min(width, height) / 2 - padding
        for i in range(num_nodes):
            angle = 2 * math.pi * i / num_nodes - math.pi / 2
            g.create_node(
                letter(i),
                width / 2 + radius * math.cos(angle) * scale,
                height / 2 + radius * math.sin(angle) * scale,
            )
        return g

    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 6,
        rng: Optional[random.Random] = None,
        edge_probability: float = 0.5,
        weight_range: Tuple[int, int] = (1, 9),
    ) -> "Graph":
        """
        Weighted random graph laid out on a circle.  Each pair is joined
        with `edge_probability`; any node with no edge back to an earlier
        node is then linked to its predecessor, so the graph is connected.
        """
        rng = rng or random.Random()
        num_nodes = max(1, min(MAX_NODES, num_nodes))
        g = cls._circle(num_nodes, 500, 350, 80)
        ids = g.node_ids()

        for i in range(num_nodes):
            for j in range(i + 1, num_nodes):
                if rng.random() < edge_probability:
                    g.create_edge(ids[i], ids[j], weight=rng.randint(*weight_range))

        for i in range(1, num_nodes):
            linked = any(g.get_edge_between(ids[i], ids[k]) for k in range(i))
            if not linked:
                g.create_edge(ids[i - 1], ids[i], weight=rng.randint(*weight_range))
        return g

    @classmethod
    def generate_tree(cls, num_nodes: int = 7, rng: Optional[random.Random] = None) -> "Graph":
        """
        Unweighted random graph: a random spanning tree (every node hangs off
        an earlier one) plus up to num_nodes / 2 extra edges.
        """
        rng = rng or random.Random()
        num_nodes = max(1, min(MAX_NODES, num_nodes))
        g = cls._circle(num_nodes, 600, 350, 60, scale=0.8)
        ids = g.node_ids()

        for i in range(1, num_nodes):
            g.create_edge(ids[rng.randrange(i)], ids[i])

        for _ in range(num_nodes // 2 + num_nodes % 2):
            a, b = rng.randrange(num_nodes), rng.randrange(num_nodes)
            if a != b and not g.get_edge_between(ids[a], ids[b]):
                g.create_edge(ids[a], ids[b])
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"
