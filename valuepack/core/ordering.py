"""
Candidate ordering and bound precomputation for the branch-and-bound search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from valuepack.core.utils_geometry import checked_volume
from valuepack.models.container import Container
from valuepack.models.item import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateOrder:
    """
    Feasible items in search order plus the arrays the search prunes with.

    ``order[pos]`` is an index into the submitted item list. ``suffix_values``
    has one more entry than ``order``; its last entry is always 0.
    """

    order: List[int]
    suffix_values: List[int]
    volumes: List[int]
    capacity: int
    excluded: List[int]

    def __len__(self) -> int:
        return len(self.order)


def prepare_candidates(items: Sequence[Item], container: Container) -> CandidateOrder:
    """
    Drop items that cannot fit in any position and order the rest by value.

    Items wider than the container on some axis are removed here rather than
    during the search, which also keeps them out of the suffix bound.
    """
    limits = container.dimensions
    feasible: List[int] = []
    excluded: List[int] = []
    for index, item in enumerate(items):
        if item.fits_within(limits):
            feasible.append(index)
        else:
            excluded.append(index)

    # sorted() is stable, so equal values keep input order
    order = sorted(feasible, key=lambda index: -items[index].value)

    suffix_values = [0] * (len(order) + 1)
    for pos in range(len(order) - 1, -1, -1):
        suffix_values[pos] = suffix_values[pos + 1] + items[order[pos]].value

    volumes = [checked_volume(items[index].dimensions) for index in order]

    if excluded:
        logger.debug(
            "Excluded %d oversized item(s): %s",
            len(excluded),
            [items[index].label for index in excluded],
        )

    return CandidateOrder(
        order=order,
        suffix_values=suffix_values,
        volumes=volumes,
        capacity=checked_volume(limits),
        excluded=excluded,
    )
