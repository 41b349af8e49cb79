"""
Trust-Tiered Selection Tests

Test Coverage:
- Tier order as a hard priority
- Trust ranking and insertion-order tie-break within a tier
- Empty table and no-match failures
- Trust floor and full ranking
"""

import pytest

from medmesh.core.errors import EmptyTableError, NoMatchError
from medmesh.p2p.neighbors.table import NeighborTable
from medmesh.p2p.selection.tiers import (
    DEFAULT_TIERS,
    TrustTieredSelector,
    rank_by_tiers,
    select_by_tiers,
)


@pytest.fixture
def table():
    """A: doctor 0.5, B: doctor 0.9, C: nurse 0.7"""
    table = NeighborTable()
    table.register("A", "doctor", [], 0.5)
    table.register("B", "doctor", [], 0.9)
    table.register("C", "nurse", [], 0.7)
    return table


@pytest.fixture
def selector(table):
    return TrustTieredSelector(table)


class TestTieredSelection:
    """Test select_by_tiers semantics."""

    def test_highest_trust_in_first_tier(self, selector):
        assert selector.select_by_tiers(["doctor", "nurse"]) == "B"

    def test_unmatched_tier_is_skipped(self, selector):
        assert selector.select_by_tiers(["caregiver", "doctor"]) == "B"

    def test_no_match(self, selector):
        with pytest.raises(NoMatchError) as exc_info:
            selector.select_by_tiers(["caregiver"])

        assert exc_info.value.tiers == ["caregiver"]
        assert selector.stats["no_match"] == 1

    def test_tier_order_beats_trust(self, table, selector):
        """A later tier is never consulted once an earlier tier matches."""
        table.register("D", "caregiver", [], 0.99)

        assert selector.select_by_tiers(["nurse", "caregiver"]) == "C"
        assert selector.select_by_tiers(["caregiver", "nurse"]) == "D"

    def test_tie_keeps_first_registered(self):
        table = NeighborTable()
        table.register("first", "nurse", [], 0.8)
        table.register("second", "nurse", [], 0.8)
        table.register("third", "nurse", [], 0.8)

        assert TrustTieredSelector(table).select_by_tiers(["nurse"]) == "first"

    def test_tie_follows_upsert_position(self):
        """An upserted neighbor keeps its original tie-break position."""
        table = NeighborTable()
        table.register("first", "nurse", [], 0.8)
        table.register("second", "nurse", [], 0.8)
        table.register("first", "nurse", [], 0.8)

        assert TrustTieredSelector(table).select_by_tiers(["nurse"]) == "first"

    def test_empty_table(self):
        selector = TrustTieredSelector(NeighborTable())

        with pytest.raises(EmptyTableError):
            selector.select_by_tiers(["doctor"])
        with pytest.raises(EmptyTableError):
            selector.select_by_tiers([])

        assert selector.stats["empty_table"] == 2

    def test_empty_tiers_is_no_match(self, selector):
        with pytest.raises(NoMatchError):
            selector.select_by_tiers([])

    def test_default_tiers(self, table):
        selector = TrustTieredSelector(table)
        assert selector.default_tiers == DEFAULT_TIERS
        assert selector.select_by_tiers() == "B"

        selector = TrustTieredSelector(table, default_tiers=["nurse"])
        assert selector.select_by_tiers() == "C"

    def test_zero_and_negative_trust_eligible(self):
        table = NeighborTable()
        table.register("low", "doctor", [], -0.5)
        table.register("zero", "doctor", [], 0.0)

        assert select_by_tiers(table.records(), ["doctor"]) == "zero"

    def test_liveness_does_not_affect_selection(self, table, selector):
        """Stale neighbors stay selectable until pruned."""
        table.mark_all_down()
        assert selector.select_by_tiers(["doctor"]) == "B"

        table.prune_dead()
        with pytest.raises(EmptyTableError):
            selector.select_by_tiers(["doctor"])

    def test_selection_counter(self, selector):
        selector.select_by_tiers(["doctor"])
        selector.select_by_tiers(["nurse"])

        assert selector.get_stats()["selections"] == 2


class TestTrustFloor:
    """Test the optional min_trust floor."""

    def test_floor_skips_low_trust(self, table):
        table.register("F", "doctor", [], 0.95)

        assert select_by_tiers(table.records(), ["doctor"], min_trust=0.6) == "F"

    def test_floor_is_exclusive(self, selector):
        # Nurse C has exactly 0.7, which does not clear a 0.7 floor
        with pytest.raises(NoMatchError):
            selector.select_by_tiers(["nurse"], min_trust=0.7)

    def test_floor_moves_to_next_tier(self, table):
        table.register("E", "caregiver", [], 0.95)

        # Doctors top out at 0.9, so the caregiver tier decides
        assert select_by_tiers(table.records(), ["doctor", "caregiver"], min_trust=0.92) == "E"

    def test_zero_floor_excludes_non_positive_trust(self):
        table = NeighborTable()
        table.register("zero", "doctor", [], 0.0)
        table.register("nurse", "nurse", [], 0.1)

        assert select_by_tiers(table.records(), ["doctor", "nurse"], min_trust=0.0) == "nurse"

    def test_floor_no_match(self, selector):
        with pytest.raises(NoMatchError) as exc_info:
            selector.select_by_tiers(["doctor", "nurse"], min_trust=0.95)

        assert exc_info.value.min_trust == 0.95


class TestRanking:
    """Test rank_by_tiers ordering."""

    def test_rank_order(self, table):
        table.register("D", "nurse", [], 0.7)
        table.register("E", "caregiver", [], 1.0)

        ranked = rank_by_tiers(table.records(), ["doctor", "nurse"])

        assert ranked == ["B", "A", "C", "D"]

    def test_rank_head_matches_selection(self, table, selector):
        table.register("D", "caregiver", [], 0.3)

        for tiers in (["doctor", "nurse"], ["caregiver", "doctor"], ["nurse"], DEFAULT_TIERS):
            assert selector.rank_by_tiers(tiers)[0] == selector.select_by_tiers(tiers)

    def test_rank_repeated_tier(self, table):
        assert rank_by_tiers(table.records(), ["nurse", "nurse"]) == ["C"]

    def test_rank_empty(self):
        assert rank_by_tiers([], ["doctor"]) == []
