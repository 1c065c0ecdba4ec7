"""
Tests for cart reconciliation policies.
"""

from cart_client.merge import (
    MergeStrategy,
    merge_max,
    merge_server_wins,
    reconcile,
    scale_to_cap,
)

from conftest import line_item


def quantities(items):
    return [(i.id, i.quantity) for i in items]


class TestMaxMerge:
    """Larger quantity wins per id."""

    def test_larger_quantity_wins_and_server_items_kept(self):
        local = [line_item("a", quantity=3)]
        server = [line_item("a", quantity=5), line_item("b", quantity=2)]

        assert quantities(merge_max(local, server)) == [("a", 5), ("b", 2)]

    def test_local_quantity_wins_when_larger(self):
        local = [line_item("a", quantity=8)]
        server = [line_item("a", quantity=5)]

        assert quantities(merge_max(local, server)) == [("a", 8)]

    def test_local_only_items_are_appended(self):
        local = [line_item("c", quantity=1), line_item("a", quantity=1)]
        server = [line_item("a", quantity=2), line_item("b", quantity=2)]

        assert quantities(merge_max(local, server)) == [("a", 2), ("b", 2), ("c", 1)]

    def test_quantities_are_not_summed(self):
        local = [line_item("a", quantity=4)]
        server = [line_item("a", quantity=4)]

        assert quantities(merge_max(local, server)) == [("a", 4)]

    def test_empty_sides(self):
        assert merge_max([], []) == []
        assert quantities(merge_max([line_item("a")], [])) == [("a", 1)]
        assert quantities(merge_max([], [line_item("b")])) == [("b", 1)]


class TestScaleToCap:
    """Proportional scaling when a merge overflows."""

    def test_overflow_is_scaled_down(self):
        items, scaled = scale_to_cap([line_item("a", quantity=60), line_item("b", quantity=50)], cap=99)

        assert scaled is True
        assert sum(i.quantity for i in items) <= 99
        assert all(i.quantity >= 1 for i in items)
        assert quantities(items) == [("a", 54), ("b", 45)]

    def test_small_items_keep_at_least_one(self):
        items, scaled = scale_to_cap([line_item("a", quantity=150), line_item("b", quantity=1)], cap=99)

        assert scaled is True
        assert quantities(items) == [("a", 98), ("b", 1)]

    def test_within_cap_is_untouched(self):
        original = [line_item("a", quantity=40), line_item("b", quantity=59)]
        items, scaled = scale_to_cap(original, cap=99)

        assert scaled is False
        assert quantities(items) == [("a", 40), ("b", 59)]


class TestServerWins:
    """Alternate policy: the server cart replaces the local cart."""

    def test_server_replaces_local(self):
        local = [line_item("a", quantity=3), line_item("c", quantity=1)]
        server = [line_item("a", quantity=1)]

        assert quantities(merge_server_wins(local, server)) == [("a", 1)]

    def test_empty_server_keeps_local(self):
        local = [line_item("a", quantity=3)]

        assert quantities(merge_server_wins(local, [])) == [("a", 3)]


class TestReconcile:
    def test_reconcile_uses_strategy_then_cap(self):
        local = [line_item("a", quantity=70)]
        server = [line_item("b", quantity=70)]

        merged, scaled = reconcile(local, server, MergeStrategy.MAX, cap=99)
        assert scaled is True
        assert quantities(merged) == [("b", 49), ("a", 49)]

        merged, scaled = reconcile(local, server, MergeStrategy.SERVER_WINS, cap=99)
        assert scaled is False
        assert quantities(merged) == [("b", 70)]
