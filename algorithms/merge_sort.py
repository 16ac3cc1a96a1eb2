"""
merge_sort.py - Merge Sort
==========================
Top-down merge sort.  Snapshots show the divide phase, every comparison
during a merge, and every element written back into the array.

Payload:
  • "array"       – current contents
  • "comparing"   – indices being compared
  • "merging"     – index range currently being merged
  • "sorted"      – indices already in merged order within the active range
  • "dividing"    – {"left", "mid", "right"} during the divide phase
  • "comparisons" – running comparison count
"""

import random
from typing import Any, Dict, Generator, List

from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "def merge_sort(arr, left, right):",                 # 0
    "    if left >= right: return",                      # 1
    "    mid = (left + right) // 2",                     # 2
    "    merge_sort(arr, left, mid)",                    # 3
    "    merge_sort(arr, mid + 1, right)",               # 4
    "    merge(arr, left, mid, right)",                  # 5
    "def merge(arr, left, mid, right):",                 # 6
    "    while both halves have elements:",              # 7
    "        take the smaller head into arr[k]",         # 8
    "    copy the remaining elements",                   # 9
]

DEFAULT_ARRAY: List[int] = [
    38, 27, 43, 3, 9, 82, 10, 64, 51, 17,
    95, 22, 70, 45, 12, 88, 33, 59, 76, 5,
]


def random_array(rng: random.Random, size: int = 20, low: int = 10, high: int = 100) -> List[int]:
    return [rng.randint(low, high) for _ in range(size)]


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    """Fresh random array of the configured size."""
    return {"array": random_array(rng, params.get("size", 20))}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def merge_sort(array: List[int]) -> Generator[Snapshot, None, None]:
    arr = list(array)
    sb = SnapshotBuilder()
    stats = {"comparisons": 0}

    yield sb.build(
        "Starting Merge Sort",
        line=0,
        array=arr, comparing=[], sorted=[], merging=[], comparisons=0,
    )

    def sort(left: int, right: int):
        if left >= right:
            return
        mid = (left + right) // 2
        yield sb.build(
            f"Dividing: [{left}-{mid}] and [{mid + 1}-{right}]",
            line=2,
            array=arr, comparing=[], sorted=[], merging=[],
            dividing={"left": left, "mid": mid, "right": right},
            comparisons=stats["comparisons"],
        )
        yield from sort(left, mid)
        yield from sort(mid + 1, right)
        yield from merge(left, mid, right)

    def merge(left: int, mid: int, right: int):
        left_part = arr[left:mid + 1]
        right_part = arr[mid + 1:right + 1]
        span = list(range(left, right + 1))

        yield sb.build(
            f"Merging [{left}-{mid}] with [{mid + 1}-{right}]",
            line=6,
            array=arr, comparing=[], sorted=[], merging=span,
            left_subarray=left_part, right_subarray=right_part,
            comparisons=stats["comparisons"],
        )

        i = j = 0
        k = left
        while i < len(left_part) and j < len(right_part):
            stats["comparisons"] += 1
            yield sb.build(
                f"Comparing {left_part[i]} and {right_part[j]}",
                line=7,
                array=arr, comparing=[left + i, mid + 1 + j], sorted=[],
                merging=span, comparisons=stats["comparisons"],
            )
            if left_part[i] <= right_part[j]:
                arr[k] = left_part[i]
                i += 1
            else:
                arr[k] = right_part[j]
                j += 1
            k += 1
            yield sb.build(
                f"Placed element at position {k - 1}",
                line=8,
                array=arr, comparing=[], sorted=list(range(left, k)),
                merging=span, comparisons=stats["comparisons"],
            )

        for rest, label in ((left_part[i:], "left"), (right_part[j:], "right")):
            for value in rest:
                arr[k] = value
                k += 1
                yield sb.build(
                    f"Copying remaining {label} elements",
                    line=9,
                    array=arr, comparing=[], sorted=list(range(left, k)),
                    merging=span, comparisons=stats["comparisons"],
                )

    yield from sort(0, len(arr) - 1)

    yield sb.build(
        "Array is now sorted!",
        line=0,
        final=True,
        array=arr, comparing=[], sorted=list(range(len(arr))), merging=[],
        comparisons=stats["comparisons"],
    )
