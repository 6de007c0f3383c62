"""
Shared fixtures for the value packing tests.
"""
import itertools
from typing import Dict, List, Sequence, Tuple

import pytest

from valuepack.models.container import Container
from valuepack.models.item import Item


@pytest.fixture
def demo_container():
    """The 4x3x3 container used by the demo request."""
    return Container(size_x=4, size_y=3, size_z=3)


@pytest.fixture
def demo_items():
    return [
        Item("A", 2, 2, 1, 6),
        Item("B", 1, 3, 1, 5),
        Item("C", 1, 2, 2, 7),
        Item("D", 2, 1, 1, 3),
    ]


def _brute_force_best(items: Sequence[Item], container: Container) -> int:
    """Try every subset and every origin for every item, with no pruning at all."""
    limits = container.dimensions

    def cells_of(item: Item, origin: Tuple[int, int, int]):
        ranges = [range(o, o + d) for o, d in zip(origin, item.dimensions)]
        return set(itertools.product(*ranges))

    def walk(index: int, occupied: set) -> int:
        if index == len(items):
            return 0
        best = walk(index + 1, occupied)
        item = items[index]
        if not item.fits_within(limits):
            return best
        origins = itertools.product(*(range(limit - extent + 1) for limit, extent in zip(limits, item.dimensions)))
        for origin in origins:
            cells = cells_of(item, origin)
            if cells & occupied:
                continue
            best = max(best, item.value + walk(index + 1, occupied | cells))
        return best

    return walk(0, set())


def _cells_by_name_index(grid: List[List[List[int]]]) -> Dict[int, List[Tuple[int, int, int]]]:
    """Collect (x, y, z) cells per name index from a [z][x][y] grid."""
    found: Dict[int, List[Tuple[int, int, int]]] = {}
    for z, layer in enumerate(grid):
        for x, row in enumerate(layer):
            for y, cell in enumerate(row):
                if cell >= 0:
                    found.setdefault(cell, []).append((x, y, z))
    return found


@pytest.fixture
def brute_force_best():
    return _brute_force_best


@pytest.fixture
def cells_by_name_index():
    return _cells_by_name_index
