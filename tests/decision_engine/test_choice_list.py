"""
Tests for the Choice List.

============================================================
PURPOSE
============================================================
- Trimming and silent rejection of blank input
- Positional removal with index shifting
- Tolerance of stale / out-of-range indices
- Read-only snapshots
- Exactly one notification per applied mutation

============================================================
"""

import pytest

from decision_engine.choice_list import ChoiceList, normalize_option
from decision_engine.models import ChangeKind, ChoiceListChange


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def choices():
    return ChoiceList(["Pizza", "Tacos", "Sushi"])


@pytest.fixture
def recorded(choices):
    """Changes delivered to a listener on the fixture list."""
    changes = []
    choices.register_listener(changes.append)
    return changes


# ============================================================
# ADD
# ============================================================

class TestAdd:
    """Test ChoiceList.add."""

    def test_add_preserves_call_order(self):
        choices = ChoiceList()
        for text in ["b", "a", "c", "a"]:
            choices.add(text)

        assert choices.length() == 4
        assert choices.entries() == ("b", "a", "c", "a")

    def test_add_trims_whitespace(self):
        choices = ChoiceList()
        choices.add("  Go for a walk \n")

        assert choices.entries() == ("Go for a walk",)

    @pytest.mark.parametrize("text", ["", "   ", "\t\n", " 　 "])
    def test_blank_add_is_ignored(self, text):
        choices = ChoiceList(["A"])
        choices.add(text)

        assert choices.length() == 1
        assert choices.entries() == ("A",)

    def test_duplicates_are_distinct_entries(self):
        choices = ChoiceList()
        choices.add("Pizza")
        choices.add("Pizza")

        assert len(choices) == 2

    def test_add_notifies_once(self, choices, recorded):
        choices.add(" Ramen ")

        assert recorded == [
            ChoiceListChange(kind=ChangeKind.ADDED, index=3, option="Ramen", size=4),
        ]

    def test_blank_add_does_not_notify(self, choices, recorded):
        choices.add("   ")

        assert recorded == []

    def test_initial_options_are_normalized(self):
        choices = ChoiceList([" A ", "", "B", "  "])

        assert choices.entries() == ("A", "B")


# ============================================================
# REMOVE
# ============================================================

class TestRemoveAt:
    """Test ChoiceList.remove_at."""

    def test_remove_shifts_later_entries(self, choices):
        choices.remove_at(1)

        assert choices.length() == 2
        assert choices.entries() == ("Pizza", "Sushi")

    def test_remove_first_and_last(self, choices):
        choices.remove_at(0)
        choices.remove_at(1)

        assert choices.entries() == ("Tacos",)

    @pytest.mark.parametrize("index", [3, 4, 100, -1, -3])
    def test_out_of_range_is_ignored(self, choices, index):
        choices.remove_at(index)

        assert choices.entries() == ("Pizza", "Tacos", "Sushi")

    @pytest.mark.parametrize("index", [None, "1", 1.0, True])
    def test_non_integer_index_is_ignored(self, choices, index):
        choices.remove_at(index)

        assert choices.length() == 3

    def test_remove_on_empty_list(self):
        choices = ChoiceList()
        choices.remove_at(0)

        assert choices.length() == 0

    def test_remove_notifies_once(self, choices, recorded):
        choices.remove_at(1)

        assert recorded == [
            ChoiceListChange(kind=ChangeKind.REMOVED, index=1, option="Tacos", size=2),
        ]

    def test_ignored_remove_does_not_notify(self, choices, recorded):
        choices.remove_at(9)

        assert recorded == []


# ============================================================
# READ ACCESS
# ============================================================

class TestReadAccess:
    """Test snapshots and iteration."""

    def test_entries_is_immutable_snapshot(self, choices):
        snapshot = choices.entries()

        with pytest.raises(TypeError):
            snapshot[0] = "Burgers"

        choices.add("Ramen")
        assert snapshot == ("Pizza", "Tacos", "Sushi")

    def test_iteration_survives_mutation(self, choices):
        seen = []
        for option in choices:
            seen.append(option)
            choices.remove_at(0)

        assert seen == ["Pizza", "Tacos", "Sushi"]
        assert choices.length() == 0

    def test_len_matches_length(self, choices):
        assert len(choices) == choices.length() == 3


# ============================================================
# LISTENERS
# ============================================================

class TestListeners:
    """Test listener registration and isolation."""

    def test_unregister_stops_notifications(self, choices):
        changes = []
        choices.register_listener(changes.append)
        choices.unregister_listener(changes.append)
        choices.add("Ramen")

        assert changes == []

    def test_unregister_unknown_listener_is_harmless(self, choices):
        choices.unregister_listener(lambda change: None)

    def test_failing_listener_does_not_block_others(self, choices, caplog):
        def broken(change):
            raise RuntimeError("render failed")

        changes = []
        choices.register_listener(broken)
        choices.register_listener(changes.append)
        choices.add("Ramen")

        assert choices.length() == 4
        assert len(changes) == 1
        assert "Choice list listener error" in caplog.text

    def test_listener_sees_applied_change(self, choices):
        seen = []
        choices.register_listener(lambda change: seen.append(choices.entries()))
        choices.remove_at(0)

        assert seen == [("Tacos", "Sushi")]


# ============================================================
# HELPERS
# ============================================================

class TestNormalizeOption:

    def test_returns_trimmed_text(self):
        assert normalize_option("  x ") == "x"

    def test_blank_is_none(self):
        assert normalize_option("  ") is None

    def test_non_string_is_none(self):
        assert normalize_option(None) is None
