"""
Exact branch-and-bound search for the value-maximising packing of one container.

Items are considered one at a time in descending value order. For each item
the search first tries every free origin (x outermost, z innermost), then the
branch that leaves the item out. A branch is abandoned as soon as the value
collected so far plus the value of every remaining item cannot beat the best
complete assignment already recorded.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from valuepack.core.occupancy import OccupancyGrid, PlacementToken
from valuepack.core.ordering import CandidateOrder, prepare_candidates
from valuepack.core.result import PackingResult, SearchStats, extract_result
from valuepack.core.utils_geometry import iter_origins
from valuepack.models.container import Container
from valuepack.models.item import Item

logger = logging.getLogger(__name__)

DEFAULT_MAX_CELLS = 5_000_000


@dataclass
class SolverSettings:
    # None disables the guard
    max_cells: Optional[int] = DEFAULT_MAX_CELLS


@dataclass
class SearchContext:
    """All mutable state of one in-flight solve."""

    items: Sequence[Item]
    container: Container
    candidates: CandidateOrder
    grid: OccupancyGrid
    selection: List[PlacementToken] = field(default_factory=list)
    best_value: int = 0
    best_cells: List[int] = field(default_factory=list)
    best_selection: List[PlacementToken] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)

    def record_if_better(self, value: int) -> None:
        # strict: the first assignment reaching a value keeps it
        if value > self.best_value:
            self.best_value = value
            self.best_cells = self.grid.snapshot()
            self.best_selection = list(self.selection)
            self.stats.improvements += 1
            logger.debug(
                "New best value %d with %d item(s) after %d nodes",
                value,
                len(self.selection),
                self.stats.nodes,
            )


def search(ctx: SearchContext, pos: int, accumulated: int) -> None:
    ctx.stats.nodes += 1
    candidates = ctx.candidates

    if accumulated + candidates.suffix_values[pos] <= ctx.best_value:
        ctx.stats.bound_prunes += 1
        return

    grid = ctx.grid
    # A full container cannot take anything else, rotation being excluded.
    if grid.used_volume == grid.capacity:
        ctx.stats.saturated_leaves += 1
        ctx.record_if_better(accumulated)
        return

    if pos == len(candidates):
        ctx.stats.exhausted_leaves += 1
        ctx.record_if_better(accumulated)
        return

    item_id = candidates.order[pos]
    item = ctx.items[item_id]
    dims = item.dimensions

    if candidates.volumes[pos] <= grid.free_volume:
        for origin in iter_origins(ctx.container.dimensions, dims):
            if not grid.can_place(dims, origin):
                continue
            token = grid.place(item_id, dims, origin)
            ctx.selection.append(token)
            search(ctx, pos + 1, accumulated + item.value)
            ctx.selection.pop()
            grid.remove(token)

    search(ctx, pos + 1, accumulated)


@contextmanager
def _recursion_budget(depth: int) -> Iterator[None]:
    # search() nests one frame per candidate on top of whatever the caller uses
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(previous + depth + 1)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def solve(
    items: Sequence[Item],
    container: Container,
    settings: SolverSettings | None = None,
) -> PackingResult:
    """
    Return the optimal selection and placement of ``items`` inside ``container``.

    The result is deterministic: among assignments of equal value, the first
    one reached by the fixed traversal order is returned.
    """
    settings = settings or SolverSettings()
    capacity = container.capacity
    if settings.max_cells is not None and capacity > settings.max_cells:
        raise ValueError(
            f"container has {capacity} cells, more than the configured limit of {settings.max_cells}"
        )

    candidates = prepare_candidates(items, container)
    grid = OccupancyGrid(container)
    ctx = SearchContext(
        items=items,
        container=container,
        candidates=candidates,
        grid=grid,
        best_cells=grid.snapshot(),
    )

    with _recursion_budget(len(candidates)):
        search(ctx, 0, 0)

    logger.info(
        "Solved %d item(s) (%d feasible, %d excluded) in %s container: best=%d nodes=%d prunes=%d improvements=%d",
        len(items),
        len(candidates),
        len(candidates.excluded),
        container.dimensions,
        ctx.best_value,
        ctx.stats.nodes,
        ctx.stats.bound_prunes,
        ctx.stats.improvements,
    )

    return extract_result(
        items,
        container,
        best_cells=ctx.best_cells,
        best_tokens=ctx.best_selection,
        best_value=ctx.best_value,
        excluded=candidates.excluded,
        stats=ctx.stats,
    )
