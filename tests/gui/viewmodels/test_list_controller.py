"""Tests for the pure-Python list controller."""

import logging
from unittest.mock import Mock

import pytest

from listkit.application.services.fetch_executor import DeferredFetchExecutor
from listkit.domain.models.query import SortDirection
from listkit.domain.models.result import PageSelection
from listkit.errors import FetchError
from listkit.errors.handler import ErrorHandler, ErrorSeverity
from listkit.events.bus import EventBus
from listkit.events.list_events import (
    FetchFailedEvent,
    QueryChangedEvent,
    ResultsAcceptedEvent,
    SelectionChangedEvent,
)
from listkit.gui.viewmodels.list_controller import ListController
from listkit.gui.viewmodels.search_governor import ManualDebounceTimer

STATUS_ROWS = [
    {"id": 1, "name": "Bob", "status": "active"},
    {"id": 2, "name": "Amy", "status": "inactive"},
    {"id": 3, "name": "Cid", "status": "active"},
]


def _names(controller):
    return [r["name"] for r in controller.get_view_model().records]


@pytest.fixture
def timer():
    return ManualDebounceTimer()


@pytest.fixture
def local(people, timer):
    controller = ListController(records=people, page_size=2, timer=timer)
    emissions = []
    controller.changed.connect(emissions.append)
    return controller, emissions


@pytest.fixture
def remote(timer):
    executor = DeferredFetchExecutor()
    controller = ListController(fetch=lambda q: [], executor=executor, page_size=2, timer=timer)
    emissions = []
    controller.changed.connect(emissions.append)
    return controller, executor, emissions


class TestLocalMode:
    def test_initial_view_model(self, local):
        controller, emissions = local
        vm = controller.get_view_model()
        assert [r["id"] for r in vm.records] == [1, 2]
        assert vm.total_count == 5
        assert vm.total_pages == 3
        assert vm.query_version == 1
        assert not vm.is_loading
        assert vm.error is None
        assert vm.page_selection is PageSelection.NONE
        assert emissions == []

    def test_end_to_end_filter_and_sort(self, timer):
        controller = ListController(records=STATUS_ROWS, page_size=2, timer=timer)

        controller.on_filter_change("status", "active")
        vm = controller.get_view_model()
        assert _names(controller) == ["Bob", "Cid"]
        assert vm.total_count == 2
        assert vm.query_state.page == 1

        controller.on_sort_change("name")
        assert _names(controller) == ["Bob", "Cid"]

        controller.on_sort_change("name")
        assert controller.query_state.sort.direction is SortDirection.DESC
        assert _names(controller) == ["Cid", "Bob"]

    def test_sort_toggle_cycles(self, local):
        controller, _emissions = local
        controller.on_sort_change("name")
        controller.on_sort_change("name")
        assert controller.query_state.sort.direction is SortDirection.DESC
        controller.on_sort_change("name")
        assert controller.query_state.sort.direction is SortDirection.ASC

    def test_filter_change_resets_page(self, local):
        controller, _emissions = local
        controller.on_page_change(3)
        assert controller.query_state.page == 3

        controller.on_filter_change("role", "user")

        assert controller.query_state.page == 1

    def test_page_change_is_clamped_to_known_pages(self, local):
        controller, _emissions = local
        controller.on_page_change(9)
        assert controller.query_state.page == 3
        controller.on_page_change(0)
        assert controller.query_state.page == 1

    def test_one_notification_per_call(self, local):
        controller, emissions = local
        controller.on_filter_change("role", "admin")
        assert len(emissions) == 1
        controller.on_sort_change("name")
        assert len(emissions) == 2
        controller.on_toggle_all_on_page()
        assert len(emissions) == 3
        assert emissions[-1].page_selection is PageSelection.ALL

    def test_no_op_transition_does_not_notify(self, local):
        controller, emissions = local
        version = controller.get_view_model().query_version
        controller.on_filter_change("role", "")
        controller.on_page_change(1)
        controller.on_clear_selection()
        assert emissions == []
        assert controller.get_view_model().query_version == version

    def test_search_input_is_debounced(self, local, timer):
        controller, emissions = local
        for raw in ("c", "ca", "car"):
            controller.on_search_input(raw)

        vm = controller.get_view_model()
        assert vm.search_input == "car"
        assert vm.query_state.search_text == ""
        assert len(emissions) == 3

        timer.fire()

        assert controller.query_state.search_text == "car"
        assert [r["id"] for r in controller.get_view_model().records] == [3]
        assert len(emissions) == 4

    def test_search_commit_resets_page(self, local, timer):
        controller, _emissions = local
        controller.on_page_change(2)
        controller.on_search_input("a")
        timer.fire()
        assert controller.query_state.page == 1

    def test_search_flush_commits_now(self, local):
        controller, _emissions = local
        controller.on_search_input("eve")
        controller.on_search_flush()
        assert controller.query_state.search_text == "eve"

    def test_short_search_clears_active_search(self, people, timer):
        controller = ListController(records=people, min_chars=2, timer=timer)
        controller.on_search_input("bo")
        timer.fire()
        assert controller.query_state.search_text == "bo"

        controller.on_search_input("b")
        timer.fire()

        assert controller.query_state.search_text == ""
        assert controller.get_view_model().total_count == len(people)

    def test_clear_filters_drops_pending_search(self, local, timer):
        controller, emissions = local
        controller.on_filter_change("role", "admin")
        controller.on_sort_change("name")
        controller.on_search_input("ali")
        emissions.clear()

        controller.on_clear_filters()
        timer.fire()

        vm = controller.get_view_model()
        assert vm.query_state.active_filters() == {}
        assert vm.query_state.search_text == ""
        assert not vm.query_state.sort.is_active
        assert vm.search_input == ""
        assert len(emissions) == 1

    def test_selection_survives_paging(self, local, people):
        controller, _emissions = local
        controller.on_toggle_row(1)
        controller.on_page_change(2)

        vm = controller.get_view_model()
        assert 1 in vm.selection
        assert vm.selected_records == (people[0],)
        assert vm.page_selection is PageSelection.NONE

    def test_selection_survives_filtering(self, local):
        controller, _emissions = local
        controller.on_toggle_row(2)
        controller.on_filter_change("role", "admin")
        assert controller.get_view_model().selection == frozenset({2})

    def test_toggle_all_on_page(self, local):
        controller, _emissions = local
        controller.on_toggle_row(1)
        assert controller.get_view_model().page_selection is PageSelection.PARTIAL

        controller.on_toggle_all_on_page()
        assert controller.get_view_model().selection == frozenset({1, 2})

        controller.on_toggle_all_on_page()
        assert controller.get_view_model().selection == frozenset()

    def test_set_records_hard_reset_drops_missing_ids(self, local, people):
        controller, emissions = local
        controller.on_toggle_row(1)
        controller.on_toggle_row(5)
        emissions.clear()

        controller.set_records(people[:3], hard_reset=True)

        assert controller.get_view_model().selection == frozenset({1})
        assert len(emissions) == 1

    def test_set_records_soft_keeps_selection(self, local, people):
        controller, _emissions = local
        controller.on_toggle_row(5)
        controller.set_records(people[:3])
        assert controller.get_view_model().selection == frozenset({5})

    def test_shrinking_data_returns_to_first_page(self, local, people):
        controller, emissions = local
        controller.on_page_change(3)
        emissions.clear()

        controller.set_records(people[:2])

        vm = controller.get_view_model()
        assert vm.query_state.page == 1
        assert [r["id"] for r in vm.records] == [1, 2]
        assert len(emissions) == 1

    def test_soft_source_change_forgets_removed_records(self, timer):
        rows = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        controller = ListController(records=rows, timer=timer)
        controller.on_toggle_row(2)

        controller.set_records(rows[:1])

        vm = controller.get_view_model()
        assert vm.selection == frozenset({2})
        assert vm.selected_records == ()

        controller.set_records(rows)
        assert controller.get_view_model().selected_records == (rows[1],)

    def test_page_size_change(self, local):
        controller, _emissions = local
        controller.on_page_change(2)
        controller.on_page_size_change(5)
        vm = controller.get_view_model()
        assert vm.query_state.page == 1
        assert len(vm.records) == 5
        assert vm.total_pages == 1


class TestRemoteMode:
    def test_loading_then_results(self, remote):
        controller, executor, emissions = remote
        assert controller.get_view_model().is_loading
        assert controller.get_view_model().total_pages is None

        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 6})

        vm = controller.get_view_model()
        assert not vm.is_loading
        assert vm.total_pages == 3
        assert len(emissions) == 1

    def test_query_change_sets_loading_once(self, remote):
        controller, executor, emissions = remote
        executor.resolve(1, [])
        emissions.clear()

        controller.on_sort_change("name")

        assert len(emissions) == 1
        assert emissions[0].is_loading
        assert executor.pending_versions == [2]

    def test_out_of_order_responses(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, [])
        controller.on_filter_change("status", "a")
        controller.on_filter_change("status", "ab")
        assert executor.pending_versions == [2, 3]

        executor.resolve(3, {"records": [{"id": "fresh"}], "total_count": 1})
        executor.resolve(2, {"records": [{"id": "stale"}], "total_count": 1})

        vm = controller.get_view_model()
        assert [r["id"] for r in vm.records] == ["fresh"]
        assert vm.result_set.query_version == 3

    def test_failure_keeps_records_and_reports(self, timer):
        executor = DeferredFetchExecutor()
        handler = Mock(spec=ErrorHandler)
        bus = EventBus()
        failures = []
        bus.subscribe(FetchFailedEvent, failures.append)
        controller = ListController(
            fetch=lambda q: [],
            executor=executor,
            timer=timer,
            error_handler=handler,
            event_bus=bus,
            list_id="users",
        )
        executor.resolve(1, [{"id": 1}])
        controller.on_page_change(2)

        executor.reject(2, RuntimeError("boom"))

        vm = controller.get_view_model()
        assert vm.error == "boom"
        assert vm.records == ({"id": 1},)
        assert not vm.is_loading
        error, severity = handler.handle.call_args[0][:2]
        assert isinstance(error, FetchError)
        assert severity is ErrorSeverity.WARNING
        assert failures[0].list_id == "users"
        assert failures[0].query_version == 2

    def test_forwarded_failure_is_not_logged_as_warning(self, timer, caplog):
        executor = DeferredFetchExecutor()
        controller = ListController(
            fetch=lambda q: [],
            executor=executor,
            timer=timer,
            error_handler=Mock(spec=ErrorHandler),
        )

        executor.reject(1, RuntimeError("boom"))

        assert controller.get_view_model().error == "boom"
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_refresh_retries(self, remote):
        controller, executor, _emissions = remote
        executor.reject(1, RuntimeError("boom"))
        controller.on_refresh()
        executor.resolve(2, [])
        assert controller.get_view_model().error is None

    def test_out_of_range_page_refetches_first_page(self, remote):
        controller, executor, emissions = remote
        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 10})
        controller.on_page_change(5)
        emissions.clear()

        executor.resolve(2, {"records": [], "total_count": 4})

        assert controller.query_state.page == 1
        assert executor.pending_versions == [3]
        assert executor.pending_query(3).page == 1
        assert len(emissions) == 1

    def test_selection_accumulates_across_pages(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 4})
        controller.on_toggle_row(1)
        controller.on_page_change(2)
        executor.resolve(2, {"records": [{"id": 3}, {"id": 4}], "total_count": 4})
        controller.on_toggle_row(4)

        vm = controller.get_view_model()
        assert vm.selection == frozenset({1, 4})
        assert [r["id"] for r in vm.selected_records] == [1, 4]

    def test_reload_hard_reset_drops_missing_ids(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 2})
        controller.on_toggle_row(1)
        controller.on_toggle_row(2)

        controller.reload(hard_reset=True)
        executor.resolve(2, {"records": [{"id": 2}, {"id": 7}], "total_count": 2})

        assert controller.get_view_model().selection == frozenset({2})

    def test_hard_reset_waits_for_first_in_range_page(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 6})
        controller.on_toggle_row(1)
        controller.on_page_change(3)
        executor.resolve(2, {"records": [{"id": 5}, {"id": 6}], "total_count": 6})
        controller.on_toggle_row(5)

        controller.reload(hard_reset=True)
        executor.resolve(3, {"records": [], "total_count": 2})

        assert controller.query_state.page == 1
        assert controller.get_view_model().selection == frozenset({1, 5})

        executor.resolve(4, [{"id": 1}, {"id": 2}])

        vm = controller.get_view_model()
        assert vm.selection == frozenset({1})
        assert vm.selected_records == ({"id": 1},)

    def test_paging_does_not_accumulate_unselected_records(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, {"records": [{"id": 1}, {"id": 2}], "total_count": 98})
        controller.on_toggle_row(1)
        version = 1
        for page in range(2, 50):
            controller.on_page_change(page)
            version += 1
            executor.resolve(
                version,
                {"records": [{"id": page * 2 - 1}, {"id": page * 2}], "total_count": 98},
            )

        assert controller._selection.known_count == 3
        assert controller.get_view_model().selected_records == ({"id": 1},)

        controller.on_toggle_row(1)
        assert controller._selection.known_count == 2

    def test_reload_without_reset_keeps_selection(self, remote):
        controller, executor, _emissions = remote
        executor.resolve(1, {"records": [{"id": 1}], "total_count": 1})
        controller.on_toggle_row(1)

        controller.reload()
        executor.resolve(2, {"records": [{"id": 9}], "total_count": 1})

        assert controller.get_view_model().selection == frozenset({1})


class TestEvents:
    def test_events_are_published(self, people, timer):
        bus = EventBus()
        seen = []
        for event_type in (QueryChangedEvent, ResultsAcceptedEvent, SelectionChangedEvent):
            bus.subscribe(event_type, seen.append)
        controller = ListController(records=people, timer=timer, event_bus=bus, list_id="people")
        seen.clear()

        controller.on_filter_change("role", "admin")
        controller.on_toggle_row(1)

        kinds = [type(e) for e in seen]
        assert kinds == [QueryChangedEvent, ResultsAcceptedEvent, SelectionChangedEvent]
        assert seen[0].query.active_filters() == {"role": "admin"}
        assert seen[1].total_count == 2
        assert seen[1].query_version == seen[0].query_version
        assert seen[2].selected_ids == frozenset({1})
        assert all(e.list_id == "people" for e in seen)


class TestDispose:
    def test_handlers_are_no_ops_after_dispose(self, local, timer):
        controller, emissions = local
        controller.on_search_input("al")
        controller.dispose()
        emissions.clear()

        controller.on_filter_change("role", "admin")
        controller.on_sort_change("name")
        controller.on_toggle_row(1)
        controller.on_page_change(2)
        timer.fire()

        assert emissions == []
        assert controller.query_state.active_filters() == {}
        assert controller.is_disposed

    def test_in_flight_results_are_ignored_after_dispose(self, remote):
        controller, executor, emissions = remote
        controller.dispose()
        executor.resolve(1, [{"id": 1}])
        assert emissions == []
        assert controller.get_view_model().records == ()

    def test_dispose_is_idempotent(self, local):
        controller, _emissions = local
        controller.dispose()
        controller.dispose()
        assert controller.is_disposed
