"""Tests for the page-independent selection tracker."""

from listkit.application.services.selection_tracker import SelectionTracker
from listkit.domain.models.result import PageSelection


def test_toggle_adds_and_removes():
    tracker = SelectionTracker()
    tracker.toggle(1)
    tracker.toggle(2)
    tracker.toggle(1)
    assert tracker.selection == frozenset({2})


def test_toggle_all_selects_missing_then_clears():
    tracker = SelectionTracker()
    tracker.toggle(2)

    tracker.toggle_all([1, 2, 3])
    assert tracker.selection == frozenset({1, 2, 3})

    tracker.toggle_all([1, 2, 3])
    assert tracker.selection == frozenset()


def test_toggle_all_leaves_other_pages_alone():
    tracker = SelectionTracker()
    tracker.toggle(99)
    tracker.toggle_all([1, 2])
    tracker.toggle_all([1, 2])
    assert tracker.selection == frozenset({99})


def test_page_selection_tri_state():
    tracker = SelectionTracker()
    assert tracker.page_selection([]) is PageSelection.NONE
    assert tracker.page_selection([1, 2]) is PageSelection.NONE
    tracker.toggle(1)
    assert tracker.page_selection([1, 2]) is PageSelection.PARTIAL
    tracker.toggle(2)
    assert tracker.page_selection([1, 2]) is PageSelection.ALL


def test_soft_reconcile_keeps_unseen_ids(people):
    tracker = SelectionTracker()
    tracker.toggle(1)
    tracker.toggle(42)

    tracker.reconcile(people[:2], hard_reset=False)

    assert tracker.selection == frozenset({1, 42})
    assert tracker.selected_records == (people[0],)


def test_hard_reconcile_drops_missing_ids(people):
    tracker = SelectionTracker()
    tracker.toggle(1)
    tracker.toggle(42)
    events = []
    tracker.changed.connect(lambda sel, recs: events.append(sel))

    tracker.reconcile(people, hard_reset=True)

    assert tracker.selection == frozenset({1})
    assert events == [frozenset({1})]


def test_hard_reconcile_without_drops_is_silent(people):
    tracker = SelectionTracker()
    tracker.toggle(1)
    events = []
    tracker.changed.connect(lambda sel, recs: events.append(sel))
    tracker.reconcile(people, hard_reset=True)
    assert events == []


def test_selected_records_follow_selection_order(people):
    tracker = SelectionTracker()
    tracker.reconcile(people, hard_reset=False)
    tracker.toggle(3)
    tracker.toggle(1)
    assert [r["id"] for r in tracker.selected_records] == [3, 1]


def test_clear_on_empty_selection_does_not_emit():
    tracker = SelectionTracker()
    events = []
    tracker.changed.connect(lambda sel, recs: events.append(sel))
    tracker.clear()
    assert events == []


def test_complete_reconcile_forgets_removed_records(people):
    tracker = SelectionTracker()
    tracker.reconcile(people, hard_reset=True, complete=True)
    tracker.toggle(5)

    tracker.reconcile(people[:3], hard_reset=False, complete=True)

    assert tracker.selection == frozenset({5})
    assert tracker.selected_records == ()
    assert tracker.known_count == 3


def test_page_reconcile_keeps_only_page_and_selected_records(people):
    tracker = SelectionTracker()
    tracker.reconcile(people[:2], hard_reset=False)
    tracker.toggle(1)

    tracker.reconcile(people[2:4], hard_reset=False)

    assert tracker.known_count == 3
    assert tracker.selected_records == (people[0],)


def test_deselecting_off_page_id_prunes_its_record(people):
    tracker = SelectionTracker()
    tracker.reconcile(people[:2], hard_reset=False)
    tracker.toggle(1)
    tracker.toggle(2)
    tracker.reconcile(people[2:4], hard_reset=False)

    tracker.toggle(1)
    assert tracker.known_count == 3

    tracker.clear()
    assert tracker.known_count == 2
