"""
quick_sort.py - Quick Sort
==========================
Lomuto-partition quick sort with a selectable pivot strategy:

    last    – always the rightmost element
    first   – leftmost element, swapped to the end before partitioning
    random  – uniformly random index in [low, high]
    median  – median-of-three (low, mid, high), which also orders those three

"sorted" in the payload lists the indices whose value already equals the
value at that position in the fully sorted input.
"""

import random
from typing import Any, Dict, Generator, List, Optional

from algorithms.step import Snapshot, SnapshotBuilder
from algorithms.merge_sort import random_array


PSEUDOCODE: List[str] = [
    "def quick_sort(arr, low, high):",                   # 0
    "    if low < high:",                                # 1
    "        p = partition(arr, low, high)",             # 2
    "        quick_sort(arr, low, p - 1)",               # 3
    "        quick_sort(arr, p + 1, high)",              # 4
    "def partition(arr, low, high):",                    # 5
    "    pivot = arr[high]; i = low - 1",                # 6
    "    for j in low .. high-1:",                        # 7
    "        if arr[j] < pivot: i += 1; swap(i, j)",     # 8
    "    swap(i + 1, high); return i + 1",               # 9
]

PIVOT_STRATEGIES = ("last", "first", "random", "median")


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"array": random_array(rng, params.get("size", 20))}


def median_of_three(arr: List[int], low: int, high: int) -> int:
    mid = (low + high) // 2
    if arr[low] > arr[mid]:
        arr[low], arr[mid] = arr[mid], arr[low]
    if arr[low] > arr[high]:
        arr[low], arr[high] = arr[high], arr[low]
    if arr[mid] > arr[high]:
        arr[mid], arr[high] = arr[high], arr[mid]
    return mid


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def quick_sort(
    array: List[int],
    pivot: str = "last",
    seed: Optional[int] = None,
) -> Generator[Snapshot, None, None]:
    arr = list(array)
    target = sorted(arr)
    rng = random.Random(seed)
    sb = SnapshotBuilder()
    stats = {"comparisons": 0, "swaps": 0}

    def sorted_indices(upto: int) -> List[int]:
        return [i for i in range(min(upto + 1, len(arr))) if arr[i] == target[i]]

    def snap(description, line, **extra):
        extra.setdefault("pivot", None)
        extra.setdefault("comparing", [])
        extra.setdefault("sorted", [])
        extra.setdefault("partitioning", [])
        return sb.build(description, line=line, array=arr,
                        comparisons=stats["comparisons"], swaps=stats["swaps"], **extra)

    yield snap("Starting Quick Sort", 0)

    def sort(low: int, high: int):
        if low < high:
            p = yield from partition(low, high)
            yield from sort(low, p - 1)
            yield from sort(p + 1, high)
        elif low == high:
            yield snap(f"Element at {low} is in place", 1, sorted=sorted_indices(high))

    def partition(low: int, high: int):
        if pivot == "first":
            pivot_index = low
        elif pivot == "random":
            pivot_index = rng.randint(low, high)
        elif pivot == "median":
            pivot_index = median_of_three(arr, low, high)
        else:
            pivot_index = high
        if pivot_index != high:
            arr[pivot_index], arr[high] = arr[high], arr[pivot_index]

        pivot_value = arr[high]
        span = list(range(low, high + 1))
        yield snap(f"Partitioning [{low}-{high}] with pivot {pivot_value}", 6,
                   pivot=high, partitioning=span)

        i = low - 1
        for j in range(low, high):
            stats["comparisons"] += 1
            yield snap(f"Comparing {arr[j]} with pivot {pivot_value}", 7,
                       pivot=high, comparing=[j, high], partitioning=span, i=i, j=j)
            if arr[j] < pivot_value:
                i += 1
                if i != j:
                    arr[i], arr[j] = arr[j], arr[i]
                    stats["swaps"] += 1
                    yield snap(f"Swapped {arr[j]} and {arr[i]}", 8,
                               pivot=high, comparing=[i, j], swapping=[i, j],
                               partitioning=span)

        pos = i + 1
        if pos != high:
            arr[pos], arr[high] = arr[high], arr[pos]
            stats["swaps"] += 1
        yield snap(f"Pivot {pivot_value} placed at position {pos}", 9,
                   pivot=pos, sorted=sorted_indices(pos))
        return pos

    yield from sort(0, len(arr) - 1)

    yield sb.build(
        "Array is now sorted!",
        line=0,
        final=True,
        array=arr, pivot=None, comparing=[], sorted=list(range(len(arr))),
        partitioning=[], comparisons=stats["comparisons"], swaps=stats["swaps"],
    )

