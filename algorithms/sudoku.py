"""
sudoku.py - Sudoku Backtracking Solver
======================================
Naive backtracking: take the first empty cell (row-major), try 1..9,
recurse on every valid placement, undo on failure.

Yields a Snapshot at every try, every placement and every backtrack, so
even an easy puzzle produces a long run.  Givens (the original clues)
are reported separately so a renderer can style them.
"""

import random
from typing import Any, Dict, Generator, List, Optional, Tuple

from algorithms.step import Snapshot, SnapshotBuilder


Grid = List[List[int]]

PSEUDOCODE: List[str] = [
    "def solve(grid):",                                  # 0
    "    cell ← first empty cell",                       # 1
    "    if no empty cell: return True",                 # 2
    "    for num in 1..9:",                              # 3
    "        if valid(grid, cell, num):",                # 4
    "            grid[cell] ← num",                      # 5
    "            if solve(grid): return True",           # 6
    "            grid[cell] ← 0",                        # 7
    "    return False",                                  # 8
]

EMPTY_CELLS = {"easy": 30, "medium": 40, "hard": 50}

# two blanks per row and column, used until the page randomises
DEFAULT_PUZZLE: Grid = [
    [0, 3, 4, 6, 0, 8, 9, 1, 2],
    [6, 0, 2, 1, 9, 0, 3, 4, 8],
    [1, 9, 0, 3, 4, 2, 0, 6, 7],
    [8, 5, 9, 0, 6, 1, 4, 0, 3],
    [4, 2, 6, 8, 0, 3, 7, 9, 0],
    [0, 1, 3, 9, 2, 0, 8, 5, 6],
    [9, 0, 1, 5, 3, 7, 0, 8, 4],
    [2, 8, 0, 4, 1, 9, 6, 0, 5],
    [3, 4, 5, 0, 8, 6, 1, 7, 0],
]


def empty_grid() -> Grid:
    return [[0] * 9 for _ in range(9)]


def normalise_grid(raw: Any) -> Optional[Grid]:
    """9×9 list of ints 0..9; anything else in a cell becomes 0.  None if unreadable."""
    if not isinstance(raw, (list, tuple)) or len(raw) != 9:
        return None
    grid = empty_grid()
    for r, row in enumerate(raw):
        if not isinstance(row, (list, tuple)) or len(row) != 9:
            return None
        for c, cell in enumerate(row):
            try:
                value = int(cell)
            except (TypeError, ValueError, OverflowError):
                value = 0
            grid[r][c] = value if 0 <= value <= 9 else 0
    return grid


def is_valid(grid: Grid, row: int, col: int, num: int) -> bool:
    if num in grid[row]:
        return False
    if any(grid[r][col] == num for r in range(9)):
        return False
    br, bc = row // 3 * 3, col // 3 * 3
    return all(grid[br + i][bc + j] != num for i in range(3) for j in range(3))


def find_empty(grid: Grid) -> Optional[Tuple[int, int]]:
    for r in range(9):
        for c in range(9):
            if grid[r][c] == 0:
                return r, c
    return None


def givens_conflict(grid: Grid) -> bool:
    """True if two givens already clash, which makes the puzzle unsolvable."""
    for r in range(9):
        for c in range(9):
            v = grid[r][c]
            if v:
                grid[r][c] = 0
                bad = not is_valid(grid, r, c, v)
                grid[r][c] = v
                if bad:
                    return True
    return False


def _fill(grid: Grid, rng: random.Random) -> bool:
    cell = find_empty(grid)
    if cell is None:
        return True
    r, c = cell
    nums = list(range(1, 10))
    rng.shuffle(nums)
    for num in nums:
        if is_valid(grid, r, c, num):
            grid[r][c] = num
            if _fill(grid, rng):
                return True
            grid[r][c] = 0
    return False


def generate_puzzle(rng: random.Random, difficulty: str = "medium") -> Grid:
    """
    Seed the three diagonal boxes (they never constrain each other), solve
    the rest with shuffled candidates, then blank out 30 / 40 / 50 cells.
    """
    grid = empty_grid()
    for box in range(0, 9, 3):
        nums = list(range(1, 10))
        rng.shuffle(nums)
        for i in range(3):
            for j in range(3):
                grid[box + i][box + j] = nums[i * 3 + j]
    _fill(grid, rng)

    positions = [(r, c) for r in range(9) for c in range(9)]
    rng.shuffle(positions)
    for r, c in positions[:EMPTY_CELLS.get(difficulty, 40)]:
        grid[r][c] = 0
    return grid


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"grid": generate_puzzle(rng, params.get("difficulty", "medium"))}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def sudoku(grid: Optional[Grid] = None) -> Generator[Snapshot, None, None]:
    work = [list(row) for row in (grid or DEFAULT_PUZZLE)]
    givens = [[1 if v else 0 for v in row] for row in work]
    sb = SnapshotBuilder()

    def snap(description, line, final=False, **extra):
        extra.setdefault("current", None)
        return sb.build(description, line=line, final=final, grid=work, givens=givens, **extra)

    yield snap("Starting Sudoku solver", 0)

    if givens_conflict(work):
        yield snap("No solution exists: the givens conflict", 8, final=True, solved=False)
        return

    def solve():
        cell = find_empty(work)
        if cell is None:
            return True
        r, c = cell
        for num in range(1, 10):
            yield snap(f"Trying {num} at ({r + 1}, {c + 1})", 3, current=[r, c], trying=num)
            if not is_valid(work, r, c, num):
                continue
            work[r][c] = num
            yield snap(f"Placed {num} at ({r + 1}, {c + 1})", 5, current=[r, c], placed=num, valid=True)
            solved = yield from solve()
            if solved:
                return True
            work[r][c] = 0
            yield snap(f"Backtracking from ({r + 1}, {c + 1})", 7, current=[r, c], backtrack=True)
        return False

    solved = yield from solve()
    yield snap("Puzzle solved!" if solved else "No solution exists", 2 if solved else 8,
               final=True, solved=solved)
