"""
bst.py - Binary Search Tree
===========================
Insert, search and in-order traversal on an unbalanced BST.  Equal keys go
to the right subtree.

The tree is rebuilt from `values` (insertion order) at the start of every
run.  The final snapshot carries the updated `values`, and the registry
card declares `persist=("values",)`, so an insert survives into the next
run on the same page.  A tree already holding MAX_VALUES values refuses
further inserts, so what the final snapshot shows is what persists.

Every snapshot carries a deep copy of the tree as nested dicts with layout
coordinates:
    {"value": 50, "x": 300, "y": 40, "left": {...} | None, "right": ...}
"""

import random
from typing import Any, Dict, Generator, List, Optional

from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "def insert(node, v):",                              # 0
    "    if node is None: return Node(v)",               # 1
    "    if v < node.value: node.left ← insert(left, v)",# 2
    "    else: node.right ← insert(right, v)",           # 3
    "def search(node, v):",                              # 4
    "    if node is None: return False",                 # 5
    "    if v == node.value: return True",               # 6
    "    recurse left if v < node.value else right",     # 7
    "def inorder(node):",                                # 8
    "    inorder(left); visit(node); inorder(right)",    # 9
]

OPERATIONS = ("insert", "search", "inorder")

DEFAULT_VALUES: List[int] = [50, 30, 70, 20, 40, 60, 80]
MAX_VALUES = 31      # five full levels

ROOT_X, ROOT_Y, ROOT_SPREAD = 300, 40, 120
LEVEL_GAP, SPREAD_DECAY = 60, 0.6


class TreeNode:
    __slots__ = ("value", "left", "right", "x", "y")

    def __init__(self, value: int):
        self.value: int = value
        self.left:  Optional["TreeNode"] = None
        self.right: Optional["TreeNode"] = None
        self.x:     float = 0
        self.y:     float = 0


class BinarySearchTree:
    """Plain BST plus the layout and cloning helpers the producer needs."""

    def __init__(self, values: Optional[List[int]] = None):
        self.root: Optional[TreeNode] = None
        self.values: List[int] = []
        for v in values or []:
            self.add(v)
        self.layout()

    def add(self, value: int) -> None:
        """Silent insert, no snapshots."""
        self.values.append(value)
        node = TreeNode(value)
        if self.root is None:
            self.root = node
            return
        cur = self.root
        while True:
            if value < cur.value:
                if cur.left is None:
                    cur.left = node
                    return
                cur = cur.left
            else:
                if cur.right is None:
                    cur.right = node
                    return
                cur = cur.right

    def layout(self) -> None:
        def place(node, x, y, spread):
            if node is None:
                return
            node.x, node.y = x, y
            place(node.left, x - spread, y + LEVEL_GAP, spread * SPREAD_DECAY)
            place(node.right, x + spread, y + LEVEL_GAP, spread * SPREAD_DECAY)
        place(self.root, ROOT_X, ROOT_Y, ROOT_SPREAD)

    def clone(self) -> Optional[Dict[str, Any]]:
        def walk(node):
            if node is None:
                return None
            return {
                "value": node.value,
                "x":     round(node.x, 2),
                "y":     round(node.y, 2),
                "left":  walk(node.left),
                "right": walk(node.right),
            }
        return walk(self.root)

    def inorder_values(self) -> List[int]:
        out: List[int] = []

        def walk(node):
            if node is not None:
                walk(node.left)
                out.append(node.value)
                walk(node.right)
        walk(self.root)
        return out

    def __len__(self) -> int:
        return len(self.values)


def random_values(rng: random.Random, count: int = 7) -> List[int]:
    return rng.sample(range(1, 101), count)


def randomize(rng: random.Random, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"values": random_values(rng)}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bst(
    values: Optional[List[int]] = None,
    operation: str = "insert",
    value: int = 50,
) -> Generator[Snapshot, None, None]:
    tree = BinarySearchTree(DEFAULT_VALUES if values is None else values)
    sb = SnapshotBuilder()

    def snap(description, line, final=False, **extra):
        extra.setdefault("highlight", [])
        extra.setdefault("current", None)
        return sb.build(description, line=line, final=final, operation=operation,
                        tree=tree.clone(), values=tree.values, **extra)

    if operation == "search":
        yield snap(f"Searching for {value}", 4)
        node, found = tree.root, False
        while node is not None:
            yield snap(f"Checking node {node.value}", 6, current=node.value)
            if value == node.value:
                found = True
                break
            node = node.left if value < node.value else node.right
        yield snap(f"Found {value}!" if found else f"{value} not found", 6 if found else 5,
                   final=True, highlight=[value] if found else [], found=found)
        return

    if operation == "inorder":
        yield snap("Starting in-order traversal", 8, visited=[])
        visited: List[int] = []

        def walk(node):
            if node is None:
                return
            yield from walk(node.left)
            visited.append(node.value)
            yield snap(f"Visiting {node.value}", 9, current=node.value, visited=visited)
            yield from walk(node.right)

        yield from walk(tree.root)
        yield snap(f"In-order: {', '.join(map(str, visited))}" if visited else "Tree is empty",
                   9, final=True, visited=visited)
        return

    # insert
    if len(tree) >= MAX_VALUES:
        yield snap(f"Tree is full ({MAX_VALUES} values), {value} not inserted", 0, final=True)
        return
    if tree.root is None:
        tree.add(value)
        tree.layout()
        yield snap(f"Inserted {value} as root", 1, final=True, highlight=[value])
        return

    yield snap(f"Inserting {value}", 0)
    node = tree.root
    while node is not None:
        yield snap(f"Comparing {value} with {node.value}", 2 if value < node.value else 3,
                   current=node.value)
        node = node.left if value < node.value else node.right
    tree.add(value)
    tree.layout()
    yield snap(f"Inserted {value}", 1, final=True, highlight=[value])
