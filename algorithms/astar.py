"""
astar.py - A* Grid Search
=========================
A* on a 4-connected grid of unit-cost cells with the Manhattan-distance
heuristic, which is admissible there, so the path found is a shortest one.

The open set is a heapq of (f, h, tie, row, col).  Ties on f prefer the
cell closer to the goal, then insertion order.

Yields a Snapshot at:
  1. Start (open set = [start])
  2. Every cell popped for expansion
  3. Goal reached → path, or open set exhausted → no path

Payload (cells are [row, col] pairs):
  • "rows", "cols", "walls", "start", "end"
  • "open_set", "closed_set", "current", "path"
  • "g_score", "f_score" – scores of the current cell (None when idle)
"""

import heapq
import random
from typing import Any, Dict, Generator, List, Optional, Set, Tuple

from algorithms.step import Snapshot, SnapshotBuilder


Cell = Tuple[int, int]

PSEUDOCODE: List[str] = [
    "open ← {start}; g[start] ← 0",                  # 0
    "while open is not empty:",                      # 1
    "    current ← cell in open with lowest f",      # 2
    "    if current == end: return path",            # 3
    "    closed.add(current)",                       # 4
    "    for nbr in 4-neighbours(current):",         # 5
    "        if nbr is wall or in closed: continue", # 6
    "        tentative ← g[current] + 1",            # 7
    "        if tentative < g[nbr]:",                # 8
    "            g[nbr] ← tentative; f ← g + h",     # 9
    "            came_from[nbr] ← current",          # 10
    "return NO PATH",                                # 11
]

DIRECTIONS: List[Cell] = [(-1, 0), (1, 0), (0, -1), (0, 1)]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def default_start(rows: int, cols: int) -> Cell:
    return (rows // 2, min(2, cols - 1))


def default_end(rows: int, cols: int) -> Cell:
    return (rows // 2, max(0, cols - 3))


def normalise_cells(raw: Any) -> Optional[List[List[int]]]:
    """[[r, c], …] with anything unreadable dropped; None if `raw` is not a list."""
    if not isinstance(raw, (list, tuple)):
        return None
    cells = []
    for item in raw:
        try:
            r, c = int(item[0]), int(item[1])
        except (TypeError, ValueError, OverflowError, IndexError, KeyError):
            continue
        if [r, c] not in cells:
            cells.append([r, c])
    return cells


def normalise_cell(raw: Any) -> Optional[List[int]]:
    cells = normalise_cells([raw])
    return cells[0] if cells else None


def generate_maze(
    rng: random.Random,
    rows: int,
    cols: int,
    start: Cell,
    end: Cell,
    density: float = 0.25,
) -> List[List[int]]:
    """Random walls: each non-endpoint cell is a wall with probability `density`."""
    walls = []
    for r in range(rows):
        for c in range(cols):
            if (r, c) in (start, end):
                continue
            if rng.random() < density:
                walls.append([r, c])
    return walls


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    rows, cols = params.get("rows", 15), params.get("cols", 30)
    start, end = default_start(rows, cols), default_end(rows, cols)
    walls = generate_maze(rng, rows, cols, start, end, params.get("wall_density", 0.25))
    return {"walls": walls, "start": list(start), "end": list(end)}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def astar(
    rows: int = 15,
    cols: int = 30,
    walls: Optional[List[List[int]]] = None,
    start: Optional[List[int]] = None,
    end: Optional[List[int]] = None,
) -> Generator[Snapshot, None, None]:
    sb = SnapshotBuilder()

    def inside(cell) -> bool:
        return cell is not None and 0 <= cell[0] < rows and 0 <= cell[1] < cols

    s: Cell = tuple(start) if inside(start) else default_start(rows, cols)
    e: Cell = tuple(end) if inside(end) else default_end(rows, cols)
    blocked: Set[Cell] = {(r, c) for r, c in (walls or []) if inside((r, c))}
    blocked.discard(s)
    blocked.discard(e)

    g_score: Dict[Cell, int] = {s: 0}
    came_from: Dict[Cell, Cell] = {}
    closed: Set[Cell] = set()
    tie = 0
    open_heap = [(manhattan(s, e), manhattan(s, e), tie, s)]
    in_open: Set[Cell] = {s}

    grid = {
        "rows": rows, "cols": cols, "start": list(s), "end": list(e),
        "walls": sorted([list(c) for c in blocked]),
    }

    def snap(description, line, current=None, path=(), final=False):
        scores = {}
        if current is not None:
            scores = {"g_score": g_score[current],
                      "f_score": g_score[current] + manhattan(current, e)}
        return sb.build(
            description, line=line, final=final, **grid,
            open_set=sorted(list(c) for c in in_open),
            closed_set=sorted(list(c) for c in closed),
            current=list(current) if current is not None else None,
            path=[list(c) for c in path],
            **scores,
        )

    yield snap("Starting A* search", 0)

    while open_heap:
        f, _, _, current = heapq.heappop(open_heap)
        if current in closed or current not in in_open:
            continue
        in_open.discard(current)

        yield snap(f"Exploring ({current[0]}, {current[1]}) - f: {float(f):.1f}", 2, current=current)

        if current == e:
            path = [current]
            while path[-1] in came_from:
                path.append(came_from[path[-1]])
            path.reverse()
            in_open.clear()
            yield snap(f"Path found! Length: {len(path)}", 3, path=path, final=True)
            return

        closed.add(current)
        for dr, dc in DIRECTIONS:
            nbr = (current[0] + dr, current[1] + dc)
            if not inside(nbr) or nbr in blocked or nbr in closed:
                continue
            tentative = g_score[current] + 1
            if tentative < g_score.get(nbr, float("inf")):
                came_from[nbr] = current
                g_score[nbr] = tentative
                h = manhattan(nbr, e)
                tie += 1
                heapq.heappush(open_heap, (tentative + h, h, tie, nbr))
                in_open.add(nbr)

    yield snap("No path found!", 11, final=True)
