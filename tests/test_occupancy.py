"""Tests for the occupancy grid."""
import pytest

from valuepack.core.occupancy import EMPTY_CELL, OccupancyGrid, PlacementToken
from valuepack.models.container import Container


@pytest.fixture
def grid():
    return OccupancyGrid(Container(3, 2, 2))


class TestOccupancyGrid:
    def test_starts_empty(self, grid):
        assert grid.capacity == 12
        assert grid.used_volume == 0
        assert grid.cells == [EMPTY_CELL] * 12

    def test_index_is_z_innermost(self, grid):
        assert grid.index(0, 0, 1) == 1
        assert grid.index(0, 1, 0) == 2
        assert grid.index(1, 0, 0) == 4
        assert grid.index(2, 1, 1) == 11

    def test_can_place_bounds(self, grid):
        assert grid.can_place((3, 2, 2), (0, 0, 0))
        assert not grid.can_place((3, 2, 2), (0, 0, 1))
        assert not grid.can_place((1, 1, 1), (3, 0, 0))
        assert not grid.can_place((1, 1, 1), (-1, 0, 0))

    def test_place_marks_cells(self, grid):
        token = grid.place(7, (2, 1, 2), (1, 1, 0))
        assert token == PlacementToken(item_id=7, origin=(1, 1, 0), dims=(2, 1, 2), volume=4)
        assert grid.used_volume == 4
        marked = {i for i, cell in enumerate(grid.cells) if cell == 7}
        expected = {grid.index(x, 1, z) for x in (1, 2) for z in (0, 1)}
        assert marked == expected

    def test_overlap_detected(self, grid):
        grid.place(0, (1, 1, 1), (1, 1, 1))
        assert not grid.can_place((2, 2, 2), (0, 0, 0))
        assert grid.can_place((1, 2, 2), (0, 0, 0))

    def test_remove_restores_state(self, grid):
        first = grid.place(0, (1, 2, 2), (0, 0, 0))
        before = grid.snapshot()
        token = grid.place(1, (2, 2, 1), (1, 0, 1))
        grid.remove(token)
        assert grid.cells == before
        assert grid.used_volume == first.volume

    def test_snapshot_is_a_copy(self, grid):
        snap = grid.snapshot()
        grid.place(0, (1, 1, 1), (0, 0, 0))
        assert snap[0] == EMPTY_CELL

    def test_mismatched_token_is_fatal(self, grid):
        grid.place(0, (1, 1, 1), (0, 0, 0))
        forged = PlacementToken(item_id=0, origin=(1, 0, 0), dims=(1, 1, 1), volume=1)
        with pytest.raises(AssertionError):
            grid.remove(forged)

    def test_double_remove_is_fatal(self, grid):
        token = grid.place(3, (1, 1, 1), (0, 0, 0))
        grid.remove(token)
        with pytest.raises(AssertionError):
            grid.remove(token)
