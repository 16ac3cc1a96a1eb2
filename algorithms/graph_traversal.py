"""
graph_traversal.py - Breadth-First & Depth-First Traversal
==========================================================
BFS walks a FIFO deque: a neighbour is enqueued only if it has never been
queued before, tracked in a set.  DFS walks a LIFO stack and pushes
neighbours in reverse adjacency order, so they pop in adjacency order.

Payload:
  • "graph"    – graph.to_dict()
  • "visited"  – visited node ids (visit order)
  • "queue" (BFS) or "stack" (DFS) – the frontier container
  • "current" / "exploring" – node being expanded, neighbour being added
  • "order"    – traversal order so far
"""

import random
from collections import deque
from typing import Any, Dict, Generator, List, Optional

from graph import Graph
from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE_BFS: List[str] = [
    "def bfs(start):",                                   # 0
    "    queue ← [start]",                               # 1
    "    while queue:",                                  # 2
    "        node ← queue.pop_front()",                  # 3
    "        if node visited: continue",                 # 4
    "        visit(node)",                               # 5
    "        for nbr in adj(node):",                     # 6
    "            if nbr not visited and not queued:",    # 7
    "                queue.push_back(nbr)",              # 8
]

PSEUDOCODE_DFS: List[str] = [
    "def dfs(start):",                                   # 0
    "    stack ← [start]",                               # 1
    "    while stack:",                                  # 2
    "        node ← stack.pop()",                        # 3
    "        if node visited: continue",                 # 4
    "        visit(node)",                               # 5
    "        for nbr in reversed(adj(node)):",           # 6
    "            if nbr not visited:",                   # 7
    "                stack.push(nbr)",                   # 8
]

PSEUDOCODE = PSEUDOCODE_BFS

MODES = ("bfs", "dfs")


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    g = Graph.generate_tree(params.get("node_count", 7), rng)
    return {"graph": g.to_dict(), "start": g.node_ids()[0]}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def graph_traversal(
    graph: Optional[Dict[str, Any]] = None,
    mode: str = "bfs",
    start: str = "A",
) -> Generator[Snapshot, None, None]:
    g = Graph.from_dict(graph) if graph else Graph.traversal_sample()
    sb = SnapshotBuilder()
    layout = g.to_dict()
    name = "DFS" if mode == "dfs" else "BFS"
    key = "stack" if mode == "dfs" else "queue"

    start = g.resolve(start)
    if start is None:
        yield sb.build("Graph has no nodes", final=True, graph=layout, mode=mode,
                       visited=[], order=[], current=None, **{key: []})
        return

    frontier = deque([start])
    queued   = {start}
    visited: List[str] = []
    seen = set()

    def snap(description, line, current=None, final=False, **extra):
        extra[key] = list(frontier)
        return sb.build(description, line=line, final=final, graph=layout, mode=mode,
                        visited=visited, order=visited, current=current, **extra)

    yield snap(f"Starting {name} from node {g.label_of(start)}", 1)

    while frontier:
        current = frontier.pop() if mode == "dfs" else frontier.popleft()
        if current in seen:
            continue
        seen.add(current)
        visited.append(current)
        yield snap(f"Visiting node {g.label_of(current)}", 5, current=current)

        neighbours = [nbr for nbr, _ in g.neighbours(current)]
        if mode == "dfs":
            neighbours.reverse()
        for nbr in neighbours:
            if nbr in seen or (mode != "dfs" and nbr in queued):
                continue
            frontier.append(nbr)
            queued.add(nbr)
            yield snap(f"Adding {g.label_of(nbr)} to {key}", 8, current=current, exploring=nbr)

    order = " → ".join(g.label_of(n) for n in visited)
    yield snap(f"{name} complete! Order: {order}", 2, final=True, complete=True)
