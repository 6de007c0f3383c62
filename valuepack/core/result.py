"""
Conversion of the winning search state into the externally addressable result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Sequence

from valuepack.core.occupancy import EMPTY_CELL, PlacementToken
from valuepack.core.utils_geometry import Placement, footprint_coverage, volume_utilization
from valuepack.models.container import Container
from valuepack.models.item import Item


@dataclass
class SearchStats:
    nodes: int = 0
    bound_prunes: int = 0
    saturated_leaves: int = 0
    exhausted_leaves: int = 0
    improvements: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class PackingResult:
    names: List[str]
    grid: List[List[List[int]]]
    selected: List[Item]
    best: int
    placements: List[Placement]
    volume_utilisation_pct: float
    footprint_utilisation_pct: float
    excluded: List[str] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)

    def to_dict(self) -> dict:
        """Response payload: ``names``, ``grid`` indexed [z][x][y], ``selected``, ``best``."""
        return {
            "names": list(self.names),
            "grid": self.grid,
            "selected": [item.to_dict() for item in self.selected],
            "best": self.best,
        }

    def to_report_dict(self) -> dict:
        payload = self.to_dict()
        payload.update(
            {
                "positions": [placement.as_dict() for placement in self.placements],
                "volume_utilization": self.volume_utilisation_pct,
                "footprint_utilization": self.footprint_utilisation_pct,
                "excluded": list(self.excluded),
                "stats": self.stats.to_dict(),
            }
        )
        return payload


def extract_result(
    items: Sequence[Item],
    container: Container,
    best_cells: Sequence[int],
    best_tokens: Sequence[PlacementToken],
    best_value: int,
    excluded: Sequence[int] = (),
    stats: SearchStats | None = None,
) -> PackingResult:
    """
    Re-encode the best flat grid into the ``[z][x][y]`` name-index grid.

    Names are ordered by ascending item id, which does not depend on the
    order in which the search happened to place them.
    """
    size_x, size_y, size_z = container.dimensions

    used_ids = sorted({cell for cell in best_cells if cell != EMPTY_CELL})
    names = [items[item_id].label for item_id in used_ids]
    position_of = {item_id: pos for pos, item_id in enumerate(used_ids)}

    grid = [[[EMPTY_CELL] * size_y for _ in range(size_x)] for _ in range(size_z)]
    for x in range(size_x):
        for y in range(size_y):
            base = (x * size_y + y) * size_z
            for z in range(size_z):
                cell = best_cells[base + z]
                if cell != EMPTY_CELL:
                    grid[z][x][y] = position_of[cell]

    placements = [
        Placement(
            x=token.origin[0],
            y=token.origin[1],
            z=token.origin[2],
            dims=token.dims,
            item_index=token.item_id,
        )
        for token in best_tokens
    ]
    used_volume = sum(token.volume for token in best_tokens)

    return PackingResult(
        names=names,
        grid=grid,
        selected=[items[token.item_id] for token in best_tokens],
        best=best_value,
        placements=placements,
        volume_utilisation_pct=volume_utilization(used_volume, container.capacity),
        footprint_utilisation_pct=footprint_coverage(placements, size_x, size_y),
        excluded=[items[index].label for index in excluded],
        stats=stats or SearchStats(),
    )
