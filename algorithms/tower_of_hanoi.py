"""
tower_of_hanoi.py - Tower of Hanoi
==================================
Classic recursive solution: move n-1 disks out of the way, move the
largest disk, move the n-1 disks back on top.

Yields a Snapshot at:
  1. Initial state (all disks on Peg 1)
  2. Every single disk move, 2^n - 1 of them

Payload:
  • "pegs"        – three lists, bottom → top, disk sizes 1..n
  • "move"        – {"disk", "from", "to"} or None on the initial snapshot
  • "move_number" – 1-based move counter
"""

from typing import Generator, List

from algorithms.step import Snapshot, SnapshotBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def hanoi(n, source, target, aux):",          # 0
    "    if n == 0: return",                        # 1
    "    hanoi(n - 1, source, aux, target)",        # 2
    "    move disk n from source to target",        # 3
    "    hanoi(n - 1, aux, target, source)",        # 4
]


def min_moves(num_disks: int) -> int:
    return 2 ** num_disks - 1


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def tower_of_hanoi(num_disks: int = 4) -> Generator[Snapshot, None, None]:
    pegs: List[List[int]] = [list(range(num_disks, 0, -1)), [], []]
    sb = SnapshotBuilder()
    total = min_moves(num_disks)

    yield sb.build(
        "Initial state: All disks on the first peg",
        line=0,
        final=(total == 0),
        pegs=pegs,
        move=None,
        move_number=0,
        total_moves=total,
    )

    moves_done = [0]

    def solve(n: int, source: int, target: int, aux: int):
        if n == 0:
            return
        yield from solve(n - 1, source, aux, target)

        disk = pegs[source].pop()
        pegs[target].append(disk)
        moves_done[0] += 1
        yield sb.build(
            f"Move disk {disk} from Peg {source + 1} to Peg {target + 1}",
            line=3,
            final=(moves_done[0] == total),
            pegs=pegs,
            move={"disk": disk, "from": source, "to": target},
            move_number=moves_done[0],
            total_moves=total,
            moving_disk=disk,
            from_peg=source,
            to_peg=target,
        )

        yield from solve(n - 1, aux, target, source)

    yield from solve(num_disks, 0, 2, 1)
