"""
Tests for the visualizer page context and the page store.
"""

import pytest

from engine import PageStore, VisualizerPage


@pytest.fixture
def page(clock, scheduler):
    rendered = []
    page = VisualizerPage.bootstrap(
        "tower_of_hanoi", scheduler=scheduler, clock=clock,
        renderer=rendered.append, num_disks=2,
    )
    page.rendered = rendered
    return page


class TestVisualizerPage:

    def test_bootstrap_runs_and_renders(self, page):
        assert page.stepper.total_steps == 4
        assert len(page.rendered) == 1
        assert page.snapshot.step_number == 0
        assert page.status.state == "idle"

    def test_unknown_algorithm(self):
        assert VisualizerPage.bootstrap("bogo_sort") is None

    def test_playback_completes(self, page, clock, scheduler):
        page.stepper.play()
        for _ in range(3):
            clock.advance(1.0)
            scheduler.run_frame()
        assert page.completed
        assert page.snapshot.is_final
        assert [s.step_number for s in page.rendered] == [0, 1, 2, 3]

    def test_rerun_clears_completion(self, page):
        page.completed = True
        page.run(num_disks=3)
        assert not page.completed
        assert page.stepper.total_steps == 8
        assert page.stepper.current_index == 0

    def test_randomize_reruns(self, clock, scheduler):
        page = VisualizerPage.bootstrap("bst", scheduler=scheduler, clock=clock)
        page.randomize(11)
        assert page.producer.params["values"] != [50, 30, 70, 20, 40, 60, 80]
        assert page.stepper.current_index == 0

    def test_view(self, page):
        page.stepper.step_forward()
        view = page.view()
        assert view["algo_key"] == "tower_of_hanoi"
        assert view["params"] == {"num_disks": 2}
        assert view["status"]["current_index"] == 1
        assert view["snapshot"]["description"] == "Move disk 1 from Peg 1 to Peg 2"
        assert view["pseudocode_line"] == 3
        assert view["completed"] is False

    def test_export(self, page):
        data = page.export()
        assert data["algo_key"] == "tower_of_hanoi"
        assert len(data["snapshots"]) == 4

    def test_close_detaches_renderer(self, page, scheduler):
        page.stepper.play()
        page.close()
        assert page.renderer is None
        assert scheduler.pending_count == 0


class TestPageStore:

    def test_add_and_get(self, page):
        store = PageStore()
        page_id = store.add(page)
        assert page_id in store
        assert store.get(page_id) is page
        assert store.get("missing") is None
        assert store.get(None) is None

    def test_least_recently_used_is_evicted(self, clock, scheduler):
        store = PageStore(max_pages=2)
        pages = [VisualizerPage.bootstrap("lcs", scheduler=scheduler, clock=clock) for _ in range(3)]
        first = store.add(pages[0])
        second = store.add(pages[1])
        store.get(first)
        store.add(pages[2])
        assert len(store) == 2
        assert first in store
        assert second not in store

    def test_replacing_a_page_closes_the_old_one(self, page, clock, scheduler):
        store = PageStore()
        page_id = store.add(page)
        replacement = VisualizerPage.bootstrap("kmp", scheduler=scheduler, clock=clock)
        assert store.add(replacement, page_id) == page_id
        assert store.get(page_id) is replacement
        assert page.renderer is None

    def test_discard(self, page):
        store = PageStore()
        page_id = store.add(page)
        store.discard(page_id)
        assert page_id not in store
        assert len(store) == 0
