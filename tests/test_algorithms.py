"""
Tests for the snapshot producers.

Tests cover:
- Every producer ends with exactly one final snapshot, numbered in order
- Algorithm results (move order, sort order, paths, matches, solutions)
- Payload content the renderers rely on
- Snapshot isolation from later mutation
"""

import random

import pytest

from algorithms import REGISTRY, get_algorithm, list_algorithms, algorithms_by_category
from algorithms.astar import astar, manhattan, normalise_cell, normalise_cells
from algorithms.bst import MAX_VALUES, BinarySearchTree, bst
from algorithms.dijkstra import dijkstra
from algorithms.graph_traversal import graph_traversal
from algorithms.kmp import build_lps, kmp
from algorithms.lcs import lcs
from algorithms.merge_sort import DEFAULT_ARRAY, merge_sort
from algorithms.n_queens import n_queens
from algorithms.quick_sort import PIVOT_STRATEGIES, quick_sort
from algorithms.step import SnapshotBuilder
from algorithms.sudoku import DEFAULT_PUZZLE, is_valid, normalise_grid, sudoku
from algorithms.tower_of_hanoi import tower_of_hanoi
from graph import Graph


# =============================================================================
# Shared contract
# =============================================================================

class TestRegistry:

    def test_lookup(self):
        assert get_algorithm("merge_sort").label == "Merge Sort"
        assert get_algorithm("nope") is None
        assert len(list_algorithms()) == len(REGISTRY) == 11

    def test_categories(self):
        keys = [a.key for a in algorithms_by_category("sorting")]
        assert keys == ["merge_sort", "quick_sort"]

    def test_cards_serialise(self):
        data = get_algorithm("bst").to_dict()
        assert data["category_label"] == "Trees"
        assert data["can_randomize"] is True
        assert [p["name"] for p in data["params"]] == ["values", "operation", "value"]

    @pytest.mark.parametrize("key", sorted(REGISTRY))
    def test_default_run_is_well_formed(self, key):
        info = REGISTRY[key]
        kwargs = {p.name: p.default_value() for p in info.params if not p.randomize_only}
        snaps = list(info.fn(**kwargs))

        assert snaps
        assert [s.step_number for s in snaps] == list(range(len(snaps)))
        assert snaps[-1].is_final
        assert not any(s.is_final for s in snaps[:-1])
        assert all(s.description for s in snaps)
        assert all(-1 <= s.pseudocode_line < len(info.pseudocode) for s in snaps)


class TestSnapshotBuilder:

    def test_payload_is_copied_at_capture(self):
        sb = SnapshotBuilder()
        arr = [1, 2, 3]
        snap = sb.build("before", array=arr)
        arr.append(4)
        assert snap["array"] == [1, 2, 3]
        assert "array" in snap
        assert snap.get("missing", "x") == "x"

    def test_snapshots_are_frozen(self):
        snap = SnapshotBuilder().build("frozen")
        with pytest.raises(AttributeError):
            snap.description = "changed"


# =============================================================================
# Backtracking
# =============================================================================

class TestTowerOfHanoi:

    def test_three_disks(self):
        snaps = list(tower_of_hanoi(3))
        assert len(snaps) == 8
        assert snaps[0]["pegs"] == [[3, 2, 1], [], []]
        assert snaps[-1].description == "Move disk 1 from Peg 1 to Peg 3"
        assert snaps[-1]["pegs"] == [[], [], [3, 2, 1]]
        assert snaps[-1]["move_number"] == 7

    def test_never_a_larger_disk_on_a_smaller_one(self):
        for snap in tower_of_hanoi(4):
            for peg in snap["pegs"]:
                assert peg == sorted(peg, reverse=True)


class TestNQueens:

    def test_find_first(self):
        snaps = list(n_queens(4, find_first=True))
        assert snaps[-1]["solutions_found"] == 1
        assert sum(1 for s in snaps if s.get("is_solution")) == 1

    def test_all_solutions(self):
        snaps = list(n_queens(4, find_first=False))
        assert snaps[-1]["solutions_found"] == 2
        assert any(s.get("is_backtrack") for s in snaps)

    def test_solution_is_non_attacking(self):
        solution = next(s for s in n_queens(6) if s.get("is_solution"))
        queens = solution["queens"]
        assert len(queens) == 6
        for i, a in enumerate(queens):
            for b in queens[i + 1:]:
                assert a["col"] != b["col"]
                assert abs(a["row"] - b["row"]) != abs(a["col"] - b["col"])


class TestSudoku:

    def test_default_puzzle_is_solved(self):
        final = list(sudoku())[-1]
        grid = final["grid"]
        assert final["solved"] is True
        assert all(0 not in row for row in grid)
        for r in range(9):
            for c in range(9):
                value = grid[r][c]
                grid[r][c] = 0
                assert is_valid(grid, r, c, value)
                grid[r][c] = value

    def test_givens_are_kept(self):
        final = list(sudoku())[-1]
        for r in range(9):
            for c in range(9):
                if DEFAULT_PUZZLE[r][c]:
                    assert final["grid"][r][c] == DEFAULT_PUZZLE[r][c]
                    assert final["givens"][r][c] == 1

    def test_conflicting_givens(self):
        grid = [list(row) for row in DEFAULT_PUZZLE]
        grid[0][0] = 3          # row 0 already holds a 3
        snaps = list(sudoku(grid))
        assert len(snaps) == 2
        assert snaps[-1]["solved"] is False

    def test_normalise_grid_zeroes_unreadable_cells(self):
        grid = [list(row) for row in DEFAULT_PUZZLE]
        grid[0][2], grid[0][3], grid[0][5], grid[0][6] = float("inf"), float("nan"), "x", 12
        clean = normalise_grid(grid)
        assert clean[0][:2] == DEFAULT_PUZZLE[0][:2]
        assert clean[0][2] == clean[0][3] == clean[0][5] == clean[0][6] == 0
        assert clean[1:] == [list(row) for row in DEFAULT_PUZZLE[1:]]

    @pytest.mark.parametrize("raw", [None, 5, "grid", [[0] * 9] * 8, [[0] * 9] * 8 + [5]])
    def test_normalise_grid_rejects_wrong_shapes(self, raw):
        assert normalise_grid(raw) is None


# =============================================================================
# Sorting
# =============================================================================

class TestSorting:

    def test_merge_sort(self):
        final = list(merge_sort(DEFAULT_ARRAY))[-1]
        assert final["array"] == sorted(DEFAULT_ARRAY)
        assert final["comparisons"] > 0

    def test_merge_sort_leaves_input_untouched(self):
        data = [5, 4, 3]
        list(merge_sort(data))
        assert data == [5, 4, 3]

    @pytest.mark.parametrize("pivot", PIVOT_STRATEGIES)
    def test_quick_sort(self, pivot):
        data = random.Random(3).sample(range(1, 200), 25)
        final = list(quick_sort(data, pivot=pivot, seed=1))[-1]
        assert final["array"] == sorted(data)
        assert final["sorted"] == list(range(25))

    def test_quick_sort_handles_duplicates_and_empty(self):
        assert list(quick_sort([4, 4, 1, 4]))[-1]["array"] == [1, 4, 4, 4]
        assert list(quick_sort([]))[-1]["array"] == []


# =============================================================================
# Pathfinding & graphs
# =============================================================================

class TestDijkstra:

    def test_sample_shortest_path(self):
        final = list(dijkstra())[-1]
        assert final["phase"] == "done"
        assert final["distance"] == 13
        assert final["path"] == ["A", "C", "B", "D", "E", "F"]

    def test_distances_never_increase(self):
        best = {}
        for snap in dijkstra():
            for node, dist in snap["distances"].items():
                if dist is None:
                    continue
                assert dist <= best.get(node, float("inf"))
                best[node] = dist

    def test_no_target_settles_everything(self):
        final = list(dijkstra(target=""))[-1]
        assert sorted(final["visited"]) == list("ABCDEF")

    def test_unreachable_target(self):
        g = Graph()
        for i, nid in enumerate("ABC"):
            g.create_node(nid, i * 100, 0)
        g.create_edge("A", "B", 2)
        final = list(dijkstra(g.to_dict(), "A", "C"))[-1]
        assert final.description == "No path found to C"
        assert final["distance"] is None


class TestGraphTraversal:

    def test_bfs_order(self):
        final = list(graph_traversal(mode="bfs"))[-1]
        assert final["order"] == list("ABCDEFG")
        assert "queue" in final

    def test_dfs_order(self):
        final = list(graph_traversal(mode="dfs"))[-1]
        assert final["order"] == list("ABDEFCG")
        assert "stack" in final

    def test_final_description(self):
        final = list(graph_traversal(mode="bfs"))[-1]
        assert final.description == "BFS complete! Order: A → B → C → D → E → F → G"

    def test_bfs_queue_holds_each_node_once(self):
        snaps = list(graph_traversal(mode="bfs"))
        enqueued = [s["exploring"] for s in snaps if "exploring" in s]
        assert sorted(enqueued) == list("BCDEFG")
        for snap in snaps:
            assert isinstance(snap["queue"], list)
            assert len(snap["queue"]) == len(set(snap["queue"]))


class TestAStar:

    def test_open_grid_path_is_shortest(self):
        final = list(astar(rows=6, cols=8, start=[0, 0], end=[5, 7]))[-1]
        assert final["path"][0] == [0, 0]
        assert final["path"][-1] == [5, 7]
        assert len(final["path"]) == manhattan((0, 0), (5, 7)) + 1
        assert final.description == f"Path found! Length: {len(final['path'])}"

    def test_path_avoids_walls(self):
        walls = [[r, 3] for r in range(5)]
        final = list(astar(rows=6, cols=7, walls=walls, start=[0, 0], end=[0, 6]))[-1]
        path = final["path"]
        assert not any(cell in walls for cell in path)
        for a, b in zip(path, path[1:]):
            assert manhattan(a, b) == 1

    def test_blocked_goal(self):
        walls = [[r, 2] for r in range(5)]
        final = list(astar(rows=5, cols=5, walls=walls, start=[0, 0], end=[0, 4]))[-1]
        assert final.description == "No path found!"
        assert final["path"] == []

    def test_normalise_cells_drops_unreadable_items(self):
        raw = [[1e999, 2], [float("nan"), 1], [1, 2], [1, 2], [3], "ab", {"r": 1}, [2.9, "4"]]
        assert normalise_cells(raw) == [[1, 2], [2, 4]]
        assert normalise_cells(5) is None
        assert normalise_cell([float("-inf"), 0]) is None
        assert normalise_cell([3, 4]) == [3, 4]


# =============================================================================
# Trees
# =============================================================================

class TestBST:

    def test_insert_carries_values(self):
        final = list(bst([50, 30, 70], "insert", 65))[-1]
        assert final["values"] == [50, 30, 70, 65]
        assert final["tree"]["right"]["left"]["value"] == 65

    def test_insert_into_empty_tree(self):
        snaps = list(bst([], "insert", 10))
        assert len(snaps) == 1
        assert snaps[0]["tree"]["value"] == 10

    def test_full_tree_refuses_insert(self):
        values = list(range(1, MAX_VALUES + 1))
        snaps = list(bst(values, "insert", 99))
        assert len(snaps) == 1
        final = snaps[0]
        assert final.is_final
        assert final.description == f"Tree is full ({MAX_VALUES} values), 99 not inserted"
        assert final["values"] == values
        assert final["highlight"] == []

    def test_search(self):
        assert list(bst(operation="search", value=60))[-1]["found"] is True
        assert list(bst(operation="search", value=99))[-1]["found"] is False

    def test_inorder_is_sorted(self):
        final = list(bst([8, 3, 10, 1, 6, 14], "inorder"))[-1]
        assert final["visited"] == [1, 3, 6, 8, 10, 14]

    def test_layout(self):
        tree = BinarySearchTree([50, 30, 70])
        data = tree.clone()
        assert (data["x"], data["y"]) == (300, 40)
        assert (data["left"]["x"], data["left"]["y"]) == (180, 100)
        assert tree.inorder_values() == [30, 50, 70]


# =============================================================================
# Strings & dynamic programming
# =============================================================================

class TestKMP:

    def test_lps(self):
        assert build_lps("ABABCABAB") == [0, 0, 1, 2, 0, 1, 2, 3, 4]

    def test_default_search(self):
        final = list(kmp())[-1]
        assert final["matches"] == [10]

    def test_overlapping_matches(self):
        final = list(kmp("AAAA", "AA"))[-1]
        assert final["matches"] == [0, 1, 2]

    def test_empty_input(self):
        snaps = list(kmp("", "A"))
        assert len(snaps) == 1
        assert snaps[0].is_final

    def test_lps_walkthrough(self):
        final = list(kmp(pattern="AABAAA", mode="lps"))[-1]
        assert final["lps"] == build_lps("AABAAA")


class TestLCS:

    def test_default(self):
        final = list(lcs())[-1]
        assert final["lcs"] == "GTAB"
        assert final["length"] == 4
        assert final["phase"] == "done"

    def test_indices_spell_the_answer(self):
        final = list(lcs("ABCBDAB", "BDCABA"))[-1]
        idx = final["lcs_indices"]
        assert "".join("ABCBDAB"[i] for i in idx["indices1"]) == final["lcs"]
        assert "".join("BDCABA"[j] for j in idx["indices2"]) == final["lcs"]
        assert final["length"] == 4

    def test_empty_string(self):
        final = list(lcs("", "ABC"))[-1]
        assert final["lcs"] == ""
        assert final["length"] == 0
