"""
n_queens.py - N-Queens Backtracking
===================================
Place N queens on an N×N board so no two attack each other.  One queen
per row; for each row try every column, recurse when safe, undo when the
recursion comes back empty-handed.

Yields a Snapshot at:
  1. Start (empty board)
  2. Every candidate square checked (safe or conflicting)
  3. Every placement
  4. Every backtrack
  5. Every complete solution
  6. A closing summary with the number of solutions found

With find_first=True the search stops at the first solution.
"""

from typing import Dict, Generator, List

from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "def solve(row):",                               # 0
    "    if row == n: record solution",              # 1
    "    for col in 0 .. n-1:",                       # 2
    "        if safe(row, col):",                     # 3
    "            place queen at (row, col)",          # 4
    "            if solve(row + 1) and find_first:",  # 5
    "                return True",                    # 6
    "            remove queen from (row, col)",       # 7
    "    return False",                               # 8
]


def _grid(n: int, cols: List[int]) -> List[List[int]]:
    grid = [[0] * n for _ in range(n)]
    for r, c in enumerate(cols):
        if c >= 0:
            grid[r][c] = 1
    return grid


def _queens(cols: List[int]) -> List[Dict[str, int]]:
    return [{"row": r, "col": c} for r, c in enumerate(cols) if c >= 0]


def find_conflicts(cols: List[int], row: int, col: int) -> List[Dict[str, int]]:
    """Queens in rows above `row` that attack (row, col)."""
    conflicts = []
    for r in range(row):
        c = cols[r]
        if c == col or abs(r - row) == abs(c - col):
            conflicts.append({"row": r, "col": c})
    return conflicts


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def n_queens(n: int = 6, find_first: bool = True) -> Generator[Snapshot, None, None]:
    sb = SnapshotBuilder()
    cols: List[int] = [-1] * n      # cols[row] = column of the queen, -1 = empty
    found = [0]

    yield sb.build(
        "Starting N-Queens solver",
        line=0,
        board=_grid(n, cols), queens=[], current_row=0, current_col=-1,
        checking=None, conflicts=[], solutions_found=0,
    )

    def solve(row: int):
        if row >= n:
            found[0] += 1
            yield sb.build(
                f"Solution {found[0]} found!",
                line=1,
                board=_grid(n, cols), queens=_queens(cols), current_row=-1,
                current_col=-1, checking=None, conflicts=[],
                solutions_found=found[0], is_solution=True,
            )
            return find_first

        for col in range(n):
            above = cols[:row] + [-1] * (n - row)
            conflicts = find_conflicts(cols, row, col)
            safe = not conflicts
            yield sb.build(
                f"Row {row + 1}, Col {col + 1}: Safe position" if safe
                else f"Row {row + 1}, Col {col + 1}: Conflicts detected",
                line=3,
                board=_grid(n, above), queens=_queens(above), current_row=row,
                current_col=col, checking={"row": row, "col": col},
                conflicts=conflicts, safe=safe, solutions_found=found[0],
            )
            if not safe:
                continue

            cols[row] = col
            yield sb.build(
                f"Placed queen at row {row + 1}, column {col + 1}",
                line=4,
                board=_grid(n, cols[:row + 1] + [-1] * (n - row - 1)),
                queens=_queens(cols[:row + 1]), current_row=row, current_col=col,
                checking=None, conflicts=[], solutions_found=found[0],
            )

            done = yield from solve(row + 1)
            if done:
                return True

            cols[row] = -1
            yield sb.build(
                f"Backtracking from row {row + 1}",
                line=7,
                board=_grid(n, cols[:row] + [-1] * (n - row)),
                queens=_queens(cols[:row]), current_row=row, current_col=col,
                checking=None, conflicts=[], solutions_found=found[0],
                is_backtrack=True,
            )
        return False

    yield from solve(0)

    if found[0] == 0:
        summary = f"No solution exists for {n} queens"
    elif find_first:
        summary = f"Done: first solution for {n} queens shown"
    else:
        summary = f"Done: {found[0]} solution(s) for {n} queens"
    yield sb.build(
        summary,
        line=8,
        final=True,
        board=_grid(n, cols), queens=_queens(cols), current_row=-1,
        current_col=-1, checking=None, conflicts=[], solutions_found=found[0],
    )
