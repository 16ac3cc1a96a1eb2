"""
algorithms/__init__.py - Algorithm Registry
===========================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "merge_sort": AlgoInfo(key, label, fn, pseudocode, category, params, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and the HTTP layer both
consume it, so adding a new algorithm is: write the generator, add one
entry here.  That's the plugin system.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from algorithms.params import ParamSpec, optional_int
from graph import Graph

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms import astar as _astar_mod
from algorithms import bst as _bst_mod
from algorithms import dijkstra as _dij_mod
from algorithms import graph_traversal as _trav_mod
from algorithms import kmp as _kmp_mod
from algorithms import lcs as _lcs_mod
from algorithms import merge_sort as _merge_mod
from algorithms import n_queens as _nq_mod
from algorithms import quick_sort as _quick_mod
from algorithms import sudoku as _sudoku_mod
from algorithms import tower_of_hanoi as _hanoi_mod


CATEGORIES: Dict[str, str] = {
    "backtracking": "Backtracking",
    "sorting":      "Sorting",
    "pathfinding":  "Pathfinding & Graphs",
    "trees":        "Trees",
    "strings":      "String Algorithms",
    "dynamic":      "Dynamic Programming",
}


# ---------------------------------------------------------------------------
# AlgoInfo - metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:                 str                     # registry key, e.g. "merge_sort"
    label:               str                     # human label, e.g. "Merge Sort"
    fn:                  Callable                # the generator function
    pseudocode:          List[str]               # lines for the side-panel
    category:            str                     # one of CATEGORIES
    params:              List[ParamSpec] = field(default_factory=list)
    base_step_duration:  float    = 0.5          # seconds per snapshot at 1x
    complexity_time:     str      = ""           # e.g. "O(n log n)"
    complexity_space:    str      = ""           # e.g. "O(n)"
    description:         str      = ""           # one-liner for the UI card
    randomize:           Optional[Callable[[random.Random, Dict[str, Any]], Dict[str, Any]]] = None
    persist:             Tuple[str, ...] = ()    # final-payload keys carried into the next run

    def param(self, name: str) -> Optional[ParamSpec]:
        for spec in self.params:
            if spec.name == name:
                return spec
        return None

    def defaults(self) -> Dict[str, Any]:
        return {spec.name: spec.default_value() for spec in self.params}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key":                self.key,
            "label":              self.label,
            "category":           self.category,
            "category_label":     CATEGORIES.get(self.category, self.category),
            "pseudocode":         list(self.pseudocode),
            "params":             [p.to_dict() for p in self.params],
            "base_step_duration": self.base_step_duration,
            "complexity_time":    self.complexity_time,
            "complexity_space":   self.complexity_space,
            "description":        self.description,
            "can_randomize":      self.randomize is not None,
        }


def _seed() -> ParamSpec:
    return ParamSpec("seed", "custom", None, normalise=optional_int, label="Random seed")


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "tower_of_hanoi": AlgoInfo(
        key="tower_of_hanoi", label="Tower of Hanoi", fn=_hanoi_mod.tower_of_hanoi,
        pseudocode=_hanoi_mod.PSEUDOCODE, category="backtracking",
        params=[ParamSpec("num_disks", "int", 4, minimum=1, maximum=8, label="Disks")],
        base_step_duration=0.8,
        complexity_time="O(2^n)", complexity_space="O(n)",
        description="Move the tower one disk at a time; never a larger disk on a smaller one.",
    ),

    "n_queens": AlgoInfo(
        key="n_queens", label="N-Queens", fn=_nq_mod.n_queens,
        pseudocode=_nq_mod.PSEUDOCODE, category="backtracking",
        params=[
            ParamSpec("n", "int", 6, minimum=4, maximum=12, label="Board size"),
            ParamSpec("find_first", "bool", True, label="Stop at first solution"),
        ],
        base_step_duration=0.3,
        complexity_time="O(n!)", complexity_space="O(n)",
        description="Place N queens so that none attack each other, backtracking on conflicts.",
    ),

    "sudoku": AlgoInfo(
        key="sudoku", label="Sudoku Solver", fn=_sudoku_mod.sudoku,
        pseudocode=_sudoku_mod.PSEUDOCODE, category="backtracking",
        params=[
            ParamSpec("grid", "custom", _sudoku_mod.DEFAULT_PUZZLE,
                      normalise=_sudoku_mod.normalise_grid, label="Puzzle (0 = empty)"),
            ParamSpec("difficulty", "choice", "medium", choices=list(_sudoku_mod.EMPTY_CELLS),
                      randomize_only=True, label="Difficulty"),
        ],
        base_step_duration=0.05,
        complexity_time="O(9^m)", complexity_space="O(m)",
        description="Fill the grid cell by cell, undoing any digit that leads to a dead end.",
        randomize=_sudoku_mod.randomize,
    ),

    "merge_sort": AlgoInfo(
        key="merge_sort", label="Merge Sort", fn=_merge_mod.merge_sort,
        pseudocode=_merge_mod.PSEUDOCODE, category="sorting",
        params=[
            ParamSpec("array", "int_list", _merge_mod.DEFAULT_ARRAY, minimum=1, maximum=999,
                      max_length=50, label="Array"),
            ParamSpec("size", "int", 20, minimum=5, maximum=50, randomize_only=True,
                      label="Random array size"),
        ],
        base_step_duration=0.2,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Split in halves, sort each half, merge the sorted halves.",
        randomize=_merge_mod.randomize,
    ),

    "quick_sort": AlgoInfo(
        key="quick_sort", label="Quick Sort", fn=_quick_mod.quick_sort,
        pseudocode=_quick_mod.PSEUDOCODE, category="sorting",
        params=[
            ParamSpec("array", "int_list", _merge_mod.DEFAULT_ARRAY, minimum=1, maximum=999,
                      max_length=50, label="Array"),
            ParamSpec("pivot", "choice", "last", choices=list(_quick_mod.PIVOT_STRATEGIES),
                      label="Pivot strategy"),
            _seed(),
            ParamSpec("size", "int", 20, minimum=5, maximum=50, randomize_only=True,
                      label="Random array size"),
        ],
        base_step_duration=0.15,
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Partition around a pivot, then sort each side.",
        randomize=_quick_mod.randomize,
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=_dij_mod.dijkstra,
        pseudocode=_dij_mod.PSEUDOCODE, category="pathfinding",
        params=[
            ParamSpec("graph", "custom", None, normalise=Graph.coerce, label="Graph"),
            ParamSpec("source", "text", "A", max_length=8, label="Source"),
            ParamSpec("target", "text", "F", max_length=8, label="Target"),
            ParamSpec("node_count", "int", 6, minimum=3, maximum=10, randomize_only=True,
                      label="Random graph size"),
        ],
        base_step_duration=0.6,
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Greedily expands the closest node. Optimal for non-negative weights.",
        randomize=_dij_mod.randomize,
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", fn=_astar_mod.astar,
        pseudocode=_astar_mod.PSEUDOCODE, category="pathfinding",
        params=[
            ParamSpec("rows", "int", 15, minimum=5, maximum=30, label="Rows"),
            ParamSpec("cols", "int", 30, minimum=5, maximum=50, label="Columns"),
            ParamSpec("walls", "custom", [], normalise=_astar_mod.normalise_cells, label="Walls"),
            ParamSpec("start", "custom", None, normalise=_astar_mod.normalise_cell, label="Start"),
            ParamSpec("end", "custom", None, normalise=_astar_mod.normalise_cell, label="End"),
            ParamSpec("wall_density", "float", 0.25, minimum=0.0, maximum=0.5,
                      randomize_only=True, label="Maze density"),
        ],
        base_step_duration=0.05,
        complexity_time="O(E log V)", complexity_space="O(V)",
        description="Dijkstra guided by the Manhattan distance to the goal.",
        randomize=_astar_mod.randomize,
    ),

    "graph_traversal": AlgoInfo(
        key="graph_traversal", label="Graph Traversal (BFS / DFS)", fn=_trav_mod.graph_traversal,
        pseudocode=_trav_mod.PSEUDOCODE, category="pathfinding",
        params=[
            ParamSpec("graph", "custom", None, normalise=Graph.coerce, label="Graph"),
            ParamSpec("mode", "choice", "bfs", choices=list(_trav_mod.MODES), label="Mode"),
            ParamSpec("start", "text", "A", max_length=8, label="Start node"),
            ParamSpec("node_count", "int", 7, minimum=3, maximum=10, randomize_only=True,
                      label="Random graph size"),
        ],
        base_step_duration=0.5,
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Layer-by-layer with a queue, or deep-first with a stack.",
        randomize=_trav_mod.randomize,
    ),

    "bst": AlgoInfo(
        key="bst", label="Binary Search Tree", fn=_bst_mod.bst,
        pseudocode=_bst_mod.PSEUDOCODE, category="trees",
        params=[
            ParamSpec("values", "int_list", _bst_mod.DEFAULT_VALUES, minimum=1, maximum=100,
                      max_length=_bst_mod.MAX_VALUES, label="Tree values (insertion order)"),
            ParamSpec("operation", "choice", "insert", choices=list(_bst_mod.OPERATIONS),
                      label="Operation"),
            ParamSpec("value", "int", 50, minimum=1, maximum=99, label="Value"),
        ],
        base_step_duration=0.6,
        complexity_time="O(h)", complexity_space="O(n)",
        description="Insert, search and walk a binary search tree.",
        randomize=_bst_mod.randomize,
        persist=("values",),
    ),

    "kmp": AlgoInfo(
        key="kmp", label="KMP String Matching", fn=_kmp_mod.kmp,
        pseudocode=_kmp_mod.PSEUDOCODE, category="strings",
        params=[
            ParamSpec("text", "text", _kmp_mod.DEFAULT_TEXT, max_length=40, label="Text"),
            ParamSpec("pattern", "text", _kmp_mod.DEFAULT_PATTERN, max_length=15, label="Pattern"),
            ParamSpec("mode", "choice", "search", choices=list(_kmp_mod.MODES), label="Mode"),
        ],
        base_step_duration=0.4,
        complexity_time="O(n + m)", complexity_space="O(m)",
        description="Linear-time pattern search that never re-reads the text.",
    ),

    "lcs": AlgoInfo(
        key="lcs", label="Longest Common Subsequence", fn=_lcs_mod.lcs,
        pseudocode=_lcs_mod.PSEUDOCODE, category="dynamic",
        params=[
            ParamSpec("str1", "text", _lcs_mod.DEFAULT_STR1, max_length=10, label="First string"),
            ParamSpec("str2", "text", _lcs_mod.DEFAULT_STR2, max_length=10, label="Second string"),
        ],
        base_step_duration=0.2,
        complexity_time="O(m × n)", complexity_space="O(m × n)",
        description="Fill the DP table, then walk back from the corner to read the answer.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    if not isinstance(key, str):
        return None
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_category(category: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.category == category]


__all__ = [
    "AlgoInfo",
    "CATEGORIES",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_category",
]
