"""Tests for per-message source selection."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from repochat.conversation import ChatMessage, SelectionState


def _log(count: int) -> list[ChatMessage]:
    return [ChatMessage(query=f"q{i}") for i in range(count)]


class TestSelectionState:
    """Tests for SelectionState."""

    def test_reconcile_creates_collapsed_cursors(self):
        """Test that reconcile adds a collapsed cursor per message."""
        selection = SelectionState()

        selection.reconcile(_log(3))

        assert selection.snapshot() == {0: None, 1: None, 2: None}

    def test_toggle_expands_then_collapses(self):
        """Test that toggling twice collapses the source."""
        selection = SelectionState()
        selection.reconcile(_log(1))

        assert selection.toggle(0, 2) == 2
        assert selection.selected(0) == 2
        assert selection.toggle(0, 2) is None
        assert selection.selected(0) is None

    def test_toggle_other_source_switches(self):
        """Test that toggling another source switches to it."""
        selection = SelectionState()
        selection.reconcile(_log(1))
        selection.toggle(0, 1)

        assert selection.toggle(0, 0) == 0

    def test_cursors_are_independent_per_message(self):
        """Test that cursors are independent per message."""
        selection = SelectionState()
        selection.reconcile(_log(2))

        selection.toggle(0, 1)
        selection.toggle(1, 0)
        selection.toggle(1, 0)

        assert selection.snapshot() == {0: 1, 1: None}

    def test_reconcile_preserves_selected_index_zero(self):
        """Test that a selected first source survives reconcile."""
        selection = SelectionState()
        selection.reconcile(_log(1))
        selection.toggle(0, 0)

        selection.reconcile(_log(2))

        assert selection.selected(0) == 0
        assert selection.selected(1) is None

    def test_toggle_unknown_message_raises(self):
        """Test that toggling an unknown message raises."""
        selection = SelectionState()

        with pytest.raises(IndexError):
            selection.toggle(0, 0)

    def test_clear_drops_cursors(self):
        """Test that clear drops every cursor."""
        selection = SelectionState()
        selection.reconcile(_log(2))

        selection.clear()

        assert len(selection) == 0
        assert selection.selected(0) is None

    @given(st.integers(min_value=0, max_value=20), st.sampled_from([None, 0, 1, 5]))
    def test_double_toggle_collapses_unless_reselecting(self, source_index: int, initial: int | None):
        """Property test: Double toggle collapses a selected source."""
        selection = SelectionState()
        selection.reconcile(_log(1))
        if initial is not None:
            selection.toggle(0, initial)

        selection.toggle(0, source_index)
        selection.toggle(0, source_index)

        if initial == source_index:
            assert selection.selected(0) == initial
        else:
            assert selection.selected(0) is None
