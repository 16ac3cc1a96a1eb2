"""
dijkstra.py - Dijkstra's Shortest-Path Algorithm
================================================
Generator-based Dijkstra using a min-heap (heapq) over an undirected,
non-negatively weighted Graph.

Yields a Snapshot at:
  1. Initialise distances / push source                     (phase "init")
  2. Pop minimum-distance node, mark it visited             (phase "visit")
  3. Each edge to an unvisited neighbour                    (phase "explore")
  4. Successful relaxation                                  (phase "update")
  5. Target popped → path reconstructed, or heap empty      (phase "done")

Stale heap entries (already-visited nodes) are skipped without a snapshot.
When no target is given the run continues until every reachable node is
settled.

Payload:
  • "graph"     – graph.to_dict() for the renderer
  • "distances" – {node_id: dist or None for ∞}
  • "visited"   – settled node ids, in settle order
  • "pq"        – [{"node", "dist"}] heap contents, smallest first
  • "current" / "exploring" / "updated" / "path" / "phase"
"""

import heapq
import random
from typing import Any, Dict, Generator, List, Optional

from graph import Graph
from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, source, target):",        # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0; pq ← [(0, source)]",    # 2
    "    while pq is not empty:",                  # 3
    "        (d, node) ← pq.pop_min()",            # 4
    "        if node visited: continue",           # 5
    "        mark node visited",                   # 6
    "        if node == target: return path",      # 7
    "        for (neighbour, w) in adj(node):",    # 8
    "            new_dist ← dist[node] + w",       # 9
    "            if new_dist < dist[neighbour]:",  # 10
    "                dist[neighbour] ← new_dist",  # 11
    "                pq.push((new_dist, nbr))",    # 12
    "    return NOT FOUND",                        # 13
]


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    g = Graph.generate_random(params.get("node_count", 6), rng)
    ids = g.node_ids()
    return {"graph": g.to_dict(), "source": ids[0], "target": ids[-1]}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(
    graph: Optional[Dict[str, Any]] = None,
    source: str = "A",
    target: str = "F",
) -> Generator[Snapshot, None, None]:
    g = Graph.from_dict(graph) if graph else Graph.weighted_sample()
    sb = SnapshotBuilder()
    layout = g.to_dict()

    source = g.resolve(source)
    target = g.resolve(target, -1) if target else None
    if source is None:
        yield sb.build("Graph has no nodes", final=True, graph=layout, phase="done",
                       distances={}, visited=[], pq=[], current=None, exploring=None, path=[])
        return

    INF = float("inf")
    dist: Dict[str, float] = {nid: INF for nid in g.nodes}
    previous: Dict[str, Optional[str]] = {nid: None for nid in g.nodes}
    visited: List[str] = []
    seen = set()
    counter = 0
    pq = [(0, counter, source)]
    dist[source] = 0

    def snap(description, line, phase, current=None, exploring=None, path=(), final=False, **extra):
        return sb.build(
            description, line=line, final=final, graph=layout, phase=phase,
            distances={n: (None if d == INF else d) for n, d in dist.items()},
            visited=visited, pq=[{"node": n, "dist": d} for d, _, n in sorted(pq)],
            current=current, exploring=exploring, path=list(path), **extra,
        )

    yield snap(f"Starting from node {g.label_of(source)}", 2, "init")

    while pq:
        d, _, current = heapq.heappop(pq)
        if current in seen:
            continue

        yield snap(f"Visiting node {g.label_of(current)} (distance: {d})", 4, "visit", current=current)
        seen.add(current)
        visited.append(current)

        if current == target:
            path = _reconstruct(previous, target)
            yield snap(f"Found shortest path! Distance: {dist[target]}", 7, "done",
                       path=path, final=True, distance=dist[target])
            return

        for nbr, edge in g.neighbours(current):
            if nbr in seen:
                continue
            new_dist = dist[current] + edge.weight
            exploring = {"from": current, "to": nbr, "weight": edge.weight}
            yield snap(
                f"Checking edge to {g.label_of(nbr)} ({dist[current]} + {edge.weight} = {new_dist})",
                9, "explore", current=current, exploring=exploring,
            )
            if new_dist < dist[nbr]:
                dist[nbr] = new_dist
                previous[nbr] = current
                counter += 1
                heapq.heappush(pq, (new_dist, counter, nbr))
                yield snap(f"Updated distance to {g.label_of(nbr)}: {new_dist}", 11, "update",
                           current=current, exploring=exploring, updated=nbr)

    if target is None:
        yield snap("All reachable nodes settled", 13, "done", final=True)
    else:
        yield snap(f"No path found to {g.label_of(target)}", 13, "done", final=True, distance=None)


# ---------------------------------------------------------------------------
def _reconstruct(previous: Dict[str, Optional[str]], target: str) -> List[str]:
    path, cur = [], target
    while cur is not None:
        path.append(cur)
        cur = previous.get(cur)
    path.reverse()
    return path
