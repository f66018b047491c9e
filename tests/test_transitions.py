"""
Tests for the transition table.
"""
import pytest

from markov_service.services.transitions import SENTINEL, TransitionTable


def _no_empty_entries(table: TransitionTable) -> bool:
    return all(table.successors(a) for a in table.keys())


class TestIncrement:
    """Test suite for TransitionTable.increment."""

    def test_creates_entry(self):
        """Test first increment creates the pair with the amount."""
        table = TransitionTable()

        assert table.increment("a", "b") == 1
        assert table.to_dict() == {"a": {"b": 1}}

    def test_accumulates(self):
        """Test repeated increments add up."""
        table = TransitionTable()
        table.increment("a", "b")

        assert table.increment("a", "b", 4) == 5
        assert table.count("a", "b") == 5

    @pytest.mark.parametrize("amount", [0, -1, -10])
    def test_non_positive_amount_is_noop(self, amount):
        """Test non-positive amounts change nothing and return 0."""
        table = TransitionTable()

        assert table.increment("a", "b", amount) == 0
        assert "a" not in table
        assert len(table) == 0

    def test_sentinel_is_an_ordinary_key(self):
        """Test the empty-string sentinel is stored like any token."""
        table = TransitionTable()
        table.increment(SENTINEL, "hi")
        table.increment("hi", SENTINEL)

        assert table.to_dict() == {"": {"hi": 1}, "hi": {"": 1}}


class TestDecrement:
    """Test suite for TransitionTable.decrement."""

    def test_reduces_count(self):
        """Test decrement leaves a positive remainder."""
        table = TransitionTable.from_dict({"a": {"b": 3}})

        assert table.decrement("a", "b") == 2
        assert table.count("a", "b") == 2

    def test_prunes_successor_at_zero(self):
        """Test a pair reaching zero is deleted but siblings remain."""
        table = TransitionTable.from_dict({"a": {"b": 1, "c": 2}})

        assert table.decrement("a", "b") == 0
        assert table.to_dict() == {"a": {"c": 2}}

    def test_prunes_outer_key_when_empty(self):
        """Test removing the last successor removes the token too."""
        table = TransitionTable.from_dict({"a": {"b": 1}, "x": {"y": 1}})

        table.decrement("a", "b")

        assert "a" not in table
        assert table.to_dict() == {"x": {"y": 1}}
        assert _no_empty_entries(table)

    def test_over_decrement_prunes(self):
        """Test removing more than the count prunes instead of going negative."""
        table = TransitionTable.from_dict({"a": {"b": 2}})

        assert table.decrement("a", "b", 10) == 0
        assert len(table) == 0

    def test_missing_token_not_found(self):
        """Test decrementing an unknown token reports not found."""
        table = TransitionTable.from_dict({"a": {"b": 1}})

        assert table.decrement("zzz", "b") is None
        assert table.to_dict() == {"a": {"b": 1}}

    def test_missing_successor_not_found(self):
        """Test a known token with an unknown successor reports not found."""
        table = TransitionTable.from_dict({"a": {"b": 1}})

        assert table.decrement("a", "zzz") is None
        assert table.to_dict() == {"a": {"b": 1}}

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_amount_is_noop(self, amount):
        """Test non-positive amounts report not found and change nothing."""
        table = TransitionTable.from_dict({"a": {"b": 1}})

        assert table.decrement("a", "b", amount) is None
        assert table.count("a", "b") == 1


class TestMergeSubtract:
    """Test suite for table merge and subtract."""

    def test_merge_adds_counts(self):
        """Test merge sums counts for every pair."""
        table = TransitionTable.from_dict({"foo": {"bar": 1}, "x": {"y": 2}})
        other = TransitionTable.from_dict({"foo": {"bar": 4, "baz": 2}, "hello": {"world": 1}})

        table.merge(other)

        assert table.to_dict() == {
            "foo": {"bar": 5, "baz": 2},
            "x": {"y": 2},
            "hello": {"world": 1},
        }
        # source untouched
        assert other.to_dict() == {"foo": {"bar": 4, "baz": 2}, "hello": {"world": 1}}

    def test_merge_then_subtract_restores(self):
        """Test subtract undoes merge exactly."""
        original = {"foo": {"bar": 1}, "": {"foo": 3}}
        table = TransitionTable.from_dict(original)
        other = TransitionTable.from_dict({"foo": {"bar": 4, "baz": 2}, "": {"foo": 1}})

        table.merge(other)
        table.subtract(other)

        assert table.to_dict() == original

    def test_subtract_prunes(self):
        """Test subtract removes pairs that drop to zero."""
        table = TransitionTable.from_dict({"foo": {"bar": 5, "baz": 3}, "hello": {"world": 2, "friends": 1}})
        other = TransitionTable.from_dict({"foo": {"bar": 4, "baz": 2}, "hello": {"world": 1, "friends": 1}})

        table.subtract(other)

        assert table.to_dict() == {"foo": {"bar": 1, "baz": 1}, "hello": {"world": 1}}

    def test_self_merge_doubles(self):
        """Test merging a table into itself doubles every count once."""
        table = TransitionTable.from_dict({"a": {"b": 2, "c": 1}, "b": {"": 1}})

        table.merge(table)

        assert table.to_dict() == {"a": {"b": 4, "c": 2}, "b": {"": 2}}

    def test_self_subtract_empties(self):
        """Test subtracting a table from itself leaves it empty."""
        table = TransitionTable.from_dict({"a": {"b": 2, "c": 1}, "b": {"": 1}})

        table.subtract(table)

        assert len(table) == 0


class TestReads:
    """Test suite for read helpers."""

    def test_from_dict_drops_zero_counts(self):
        """Test zero counts and empty inner maps never become entries."""
        table = TransitionTable.from_dict({"a": {"b": 0}, "c": {}, "d": {"e": 1, "f": 0}})

        assert table.to_dict() == {"d": {"e": 1}}

    def test_successors_is_read_only(self):
        """Test successors cannot be used to mutate the table."""
        table = TransitionTable.from_dict({"a": {"b": 1}})
        view = table.successors("a")

        with pytest.raises(TypeError):
            view["c"] = 1  # type: ignore[index]
        assert table.successors("missing") is None

    def test_total_weight(self):
        """Test total outgoing weight per token."""
        table = TransitionTable.from_dict({"a": {"b": 2, "c": 3}})

        assert table.total_weight("a") == 5
        assert table.total_weight("missing") == 0

    def test_to_dict_is_a_copy(self):
        """Test mutating the exported dict leaves the table alone."""
        table = TransitionTable.from_dict({"a": {"b": 1}})
        exported = table.to_dict()
        exported["a"]["b"] = 99

        assert table.count("a", "b") == 1

    def test_clear(self):
        """Test clear empties the table."""
        table = TransitionTable.from_dict({"a": {"b": 1}})
        table.clear()

        assert len(table) == 0
        assert table.to_dict() == {}

    def test_equality(self):
        """Test tables compare by content."""
        assert TransitionTable.from_dict({"a": {"b": 1}}) == TransitionTable.from_dict({"a": {"b": 1}})
        assert TransitionTable.from_dict({"a": {"b": 1}}) != TransitionTable.from_dict({"a": {"b": 2}})
