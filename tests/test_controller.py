import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from fakes import FakeFetcher, ensure_app, make_page

from encounter_browser.core.controller import QueryInputs, ReactiveQueryController
from encounter_browser.core.models import (
    DEFAULT_MIN_DURATION,
    EncountersOverview,
    FetchState,
    SearchFilter,
)


class TestQueryInputs(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = ensure_app()

    def setUp(self):
        self.inputs = QueryInputs()
        self.changes = []
        self.inputs.inputs_changed.connect(self.changes.append)

    def test_starting_search_resets_page_in_one_update(self):
        self.inputs.set_page(3)
        self.changes.clear()

        self.inputs.set_search_text("brel")

        self.assertEqual(self.inputs.page, 1)
        self.assertEqual(self.changes, [frozenset({"search", "page"})])

    def test_refining_search_keeps_page(self):
        self.inputs.set_search_text("br")
        self.inputs.set_page(2)
        self.changes.clear()

        self.inputs.set_search_text("brel")

        self.assertEqual(self.inputs.page, 2)
        self.assertEqual(self.changes, [frozenset({"search"})])

    def test_clearing_search_keeps_page(self):
        self.inputs.set_search_text("brel")
        self.inputs.set_page(2)

        self.inputs.set_search_text("")

        self.assertEqual(self.inputs.page, 2)

    def test_back_navigation_keeps_page_once(self):
        self.inputs.set_page(3)
        self.inputs.mark_back_navigation()
        self.inputs.mark_back_navigation()

        self.inputs.set_search_text("a")
        self.assertEqual(self.inputs.page, 3)

        self.inputs.set_search_text("")
        self.inputs.set_search_text("b")
        self.assertEqual(self.inputs.page, 1)

    def test_back_navigation_consumed_even_on_page_one(self):
        self.inputs.mark_back_navigation()
        self.inputs.set_search_text("a")
        self.inputs.set_search_text("")
        self.inputs.set_page(4)

        self.inputs.set_search_text("b")

        self.assertEqual(self.inputs.page, 1)

    def test_unchanged_values_do_not_emit(self):
        self.inputs.set_search_text("")
        self.inputs.set_page(1)
        self.inputs.set_filter(SearchFilter())
        self.inputs.update_filter(cleared_only=False)

        self.assertEqual(self.changes, [])

    def test_filter_is_stored_by_copy(self):
        search_filter = SearchFilter(bosses={"Valtan"})
        self.inputs.set_filter(search_filter)

        search_filter.bosses.add("Vykas")
        self.inputs.search_filter.bosses.add("Kakul")

        self.assertEqual(self.inputs.search_filter.bosses, {"Valtan"})

    def test_update_filter(self):
        self.inputs.update_filter(favorites_only=True)

        self.assertTrue(self.inputs.search_filter.favorites_only)
        self.assertEqual(self.changes, [frozenset({"filter"})])

    def test_filter_change_keeps_page(self):
        self.inputs.set_page(3)
        self.inputs.update_filter(cleared_only=True)
        self.assertEqual(self.inputs.page, 3)

    def test_invalid_page(self):
        with self.assertRaises(ValueError):
            self.inputs.set_page(0)


class TestReactiveQueryController(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = ensure_app()

    def setUp(self):
        self.inputs = QueryInputs()
        self.fetcher = FakeFetcher()
        self.controller = ReactiveQueryController(self.inputs, self.fetcher)

        self.overviews = []
        self.failures = []
        self.states = []
        self.controller.overview_changed.connect(self.overviews.append)
        self.controller.fetch_failed.connect(self.failures.append)
        self.controller.state_changed.connect(self.states.append)

    def test_each_change_issues_one_fetch(self):
        self.inputs.set_page(2)
        self.inputs.update_filter(cleared_only=True)
        self.inputs.set_search_text("vykas")

        self.assertEqual(len(self.fetcher.requests), 3)
        seqs = [seq for seq, _ in self.fetcher.requests]
        self.assertEqual(seqs, sorted(seqs))
        self.assertEqual(len(set(seqs)), 3)

    def test_no_op_changes_issue_nothing(self):
        self.inputs.set_page(1)
        self.inputs.set_search_text("")
        self.inputs.set_filter(SearchFilter())

        self.assertEqual(self.fetcher.requests, [])

    def test_search_start_issues_single_fetch_for_page_one(self):
        self.inputs.set_page(3)
        self.fetcher.requests.clear()

        self.inputs.set_search_text("brel")

        self.assertEqual(len(self.fetcher.requests), 1)
        query = self.fetcher.last_query
        self.assertEqual(query.page, 1)
        self.assertEqual(query.search, "brel")

    def test_back_navigation_fetches_current_page(self):
        self.inputs.set_page(3)
        self.inputs.mark_back_navigation()
        self.fetcher.requests.clear()

        self.inputs.set_search_text("brel")

        self.assertEqual(len(self.fetcher.requests), 1)
        self.assertEqual(self.fetcher.last_query.page, 3)

    def test_stale_response_is_discarded(self):
        self.inputs.set_search_text("a")
        first_seq = self.fetcher.last_seq
        self.inputs.set_search_text("ab")
        second_seq = self.fetcher.last_seq

        latest = make_page(1, 4, boss_name="Argos")
        stale = make_page(1, 9, boss_name="Valtan")
        self.fetcher.complete(second_seq, latest)
        self.fetcher.complete(first_seq, stale)

        self.assertIs(self.controller.overview, latest)
        self.assertEqual(self.overviews, [latest])
        self.assertEqual(self.controller.state, FetchState.IDLE)

    def test_stale_response_before_latest_is_discarded(self):
        self.inputs.set_search_text("a")
        first_seq = self.fetcher.last_seq
        self.inputs.set_search_text("ab")

        self.fetcher.complete(first_seq, make_page(1, 9))

        self.assertEqual(self.overviews, [])
        self.assertEqual(self.controller.state, FetchState.FETCHING)

    def test_state_transitions(self):
        self.inputs.set_page(2)
        self.assertEqual(self.controller.state, FetchState.FETCHING)

        self.fetcher.complete(self.fetcher.last_seq, make_page(2, 25))

        self.assertEqual(self.controller.state, FetchState.IDLE)
        self.assertEqual(self.states, [FetchState.FETCHING, FetchState.IDLE])

    def test_failure_keeps_previous_overview(self):
        self.controller.refresh()
        previous = make_page(1, 25)
        self.fetcher.complete(self.fetcher.last_seq, previous)

        self.inputs.set_page(2)
        self.fetcher.fail(self.fetcher.last_seq, "disk I/O error")

        self.assertIs(self.controller.overview, previous)
        self.assertEqual(self.controller.state, FetchState.IDLE)
        self.assertEqual(self.failures, ["disk I/O error"])

    def test_stale_failure_is_ignored(self):
        self.inputs.set_search_text("a")
        first_seq = self.fetcher.last_seq
        self.inputs.set_search_text("ab")

        self.fetcher.fail(first_seq)

        self.assertEqual(self.failures, [])
        self.assertEqual(self.controller.state, FetchState.FETCHING)

    def test_out_of_range_page_is_clamped_and_refetched(self):
        self.inputs.set_page(5)
        self.fetcher.requests.clear()

        self.fetcher.complete(
            self.controller.latest_sequence,
            EncountersOverview(encounters=(), total_encounters=25),
        )

        self.assertEqual(self.inputs.page, 3)
        self.assertEqual(len(self.fetcher.requests), 1)
        self.assertEqual(self.fetcher.last_query.page, 3)
        self.assertEqual(self.overviews, [])

        page = make_page(3, 25)
        self.fetcher.complete(self.fetcher.last_seq, page)
        self.assertIs(self.controller.overview, page)

    def test_filter_with_no_matches_returns_to_first_page(self):
        self.controller.refresh()
        self.fetcher.complete(self.fetcher.last_seq, make_page(1, 25))
        self.inputs.set_page(3)
        self.fetcher.complete(self.fetcher.last_seq, make_page(3, 25))

        self.inputs.update_filter(cleared_only=True)
        self.fetcher.requests.clear()
        self.fetcher.complete(
            self.controller.latest_sequence,
            EncountersOverview(encounters=(), total_encounters=0),
        )

        self.assertEqual(self.inputs.page, 1)
        self.assertEqual(len(self.fetcher.requests), 1)
        self.assertEqual(self.fetcher.last_query.page, 1)
        self.assertTrue(self.fetcher.last_query.cleared)

        empty = EncountersOverview(encounters=(), total_encounters=0)
        self.fetcher.complete(self.fetcher.last_seq, empty)
        self.assertIs(self.controller.overview, empty)
        self.assertEqual(len(self.fetcher.requests), 1)

    def test_applied_sequence_tracks_accepted_response(self):
        first = self.controller.refresh()
        second = self.controller.refresh()
        self.fetcher.complete(first, make_page(1, 5))
        self.assertEqual(self.controller.applied_sequence, 0)

        self.fetcher.complete(second, make_page(1, 5))
        self.assertEqual(self.controller.applied_sequence, second)

    def test_empty_result_on_first_page_is_applied(self):
        self.inputs.set_search_text("nobody")
        empty = EncountersOverview(encounters=(), total_encounters=0)

        self.fetcher.complete(self.fetcher.last_seq, empty)

        self.assertIs(self.controller.overview, empty)
        self.assertEqual(self.inputs.page, 1)

    def test_build_query_is_deterministic(self):
        self.inputs.set_search_text("kakul")
        self.inputs.update_filter(bosses={"Kakul"})
        self.assertEqual(self.controller.build_query(), self.controller.build_query())

    def test_default_min_duration_resolved_at_query_time(self):
        default = {"value": 30_000}
        controller = ReactiveQueryController(
            self.inputs, FakeFetcher(), default_min_duration=lambda: default["value"]
        )
        self.assertEqual(self.inputs.search_filter.min_duration, DEFAULT_MIN_DURATION)
        self.assertEqual(controller.build_query().min_duration, 30_000)

        default["value"] = 90_000
        self.assertEqual(controller.build_query().min_duration, 90_000)

    def test_refresh_issues_new_sequence(self):
        first = self.controller.refresh()
        second = self.controller.refresh()
        self.assertGreater(second, first)
        self.assertEqual(self.controller.latest_sequence, second)
        self.assertEqual(self.controller.current_query, self.fetcher.last_query)


if __name__ == "__main__":
    unittest.main()
