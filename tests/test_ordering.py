"""Tests for candidate ordering and bound precomputation."""
import pytest

from valuepack.core.ordering import prepare_candidates
from valuepack.core.utils_geometry import checked_volume
from valuepack.models.container import Container
from valuepack.models.item import Item


class TestPrepareCandidates:
    def test_orders_by_value_descending(self, demo_items, demo_container):
        candidates = prepare_candidates(demo_items, demo_container)
        # C(7), A(6), B(5), D(3)
        assert candidates.order == [2, 0, 1, 3]

    def test_ties_keep_input_order(self):
        items = [Item("a", 1, 1, 1, 5), Item("b", 1, 1, 1, 9), Item("c", 1, 1, 1, 5), Item("d", 1, 1, 1, 9)]
        candidates = prepare_candidates(items, Container(2, 2, 2))
        assert candidates.order == [1, 3, 0, 2]

    def test_suffix_values(self, demo_items, demo_container):
        candidates = prepare_candidates(demo_items, demo_container)
        assert candidates.suffix_values == [21, 14, 8, 3, 0]

    def test_oversized_items_excluded_from_bound(self):
        items = [Item("huge", 5, 1, 1, 100), Item("ok", 1, 1, 1, 2), Item("tall", 1, 1, 9, 50)]
        candidates = prepare_candidates(items, Container(2, 2, 2))
        assert candidates.order == [1]
        assert candidates.excluded == [0, 2]
        assert candidates.suffix_values == [2, 0]

    def test_volumes_follow_order(self, demo_items, demo_container):
        candidates = prepare_candidates(demo_items, demo_container)
        assert candidates.volumes == [4, 4, 3, 2]
        assert candidates.capacity == 36

    def test_empty_input(self):
        candidates = prepare_candidates([], Container(1, 1, 1))
        assert len(candidates) == 0
        assert candidates.suffix_values == [0]


class TestCheckedVolume:
    def test_product(self):
        assert checked_volume((2, 3, 4)) == 24

    def test_no_wraparound(self):
        assert checked_volume((2 ** 31, 2 ** 31, 2 ** 31)) == 2 ** 93

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            checked_volume((1, 0, 1))
