"""
Independent CP-SAT model of the same packing problem, used to cross-check the
optimum reported by the branch-and-bound search.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

try:
    from ortools.sat.python import cp_model  # type: ignore[import]
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "Google OR-Tools is required for the CP-SAT cross-check. "
        "Install it via `pip install ortools`."
    ) from exc

from valuepack.core.utils_geometry import Placement, iter_origins
from valuepack.models.container import Container
from valuepack.models.item import Item

logger = logging.getLogger(__name__)

# Every (item, origin) pair becomes a boolean; refuse models larger than this.
MAX_CANDIDATES = 200_000


@dataclass
class CpSatCheck:
    status: str
    value: int
    placements: List[Placement]

    @property
    def proven_optimal(self) -> bool:
        return self.status == "OPTIMAL"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "value": self.value,
            "positions": [placement.as_dict() for placement in self.placements],
        }


def _generate_candidate_placements(items: Sequence[Item], container: Container) -> List[Placement]:
    candidates: List[Placement] = []
    limits = container.dimensions
    for item_index, item in enumerate(items):
        if not item.fits_within(limits) or item.value == 0:
            continue
        for (x, y, z) in iter_origins(limits, item.dimensions):
            candidates.append(Placement(x=x, y=y, z=z, dims=item.dimensions, item_index=item_index))
            if len(candidates) > MAX_CANDIDATES:
                raise ValueError(
                    f"CP-SAT model would need more than {MAX_CANDIDATES} placement candidates"
                )
    return candidates


def max_value_cpsat(
    items: Sequence[Item],
    container: Container,
    time_limit_sec: float = 10.0,
) -> CpSatCheck:
    """
    Solve the value-maximising packing with CP-SAT and report the objective.

    Only the value is comparable with the branch-and-bound result; CP-SAT is
    free to return any of several equal-value placements.
    """
    candidates = _generate_candidate_placements(items, container)
    if not candidates:
        return CpSatCheck(status="OPTIMAL", value=0, placements=[])

    model = cp_model.CpModel()
    decision_vars: List[cp_model.IntVar] = []
    by_item: Dict[int, List[cp_model.IntVar]] = defaultdict(list)
    by_cell: Dict[tuple, List[cp_model.IntVar]] = defaultdict(list)

    for idx, candidate in enumerate(candidates):
        var = model.NewBoolVar(f"place_{candidate.item_index}_{idx}")
        decision_vars.append(var)
        by_item[candidate.item_index].append(var)
        for cell in candidate.cells():
            by_cell[cell].append(var)

    # Each item is placed at most once.
    for item_vars in by_item.values():
        model.AddAtMostOne(item_vars)

    # Non-overlap constraints
    for cell_vars in by_cell.values():
        if len(cell_vars) > 1:
            model.AddAtMostOne(cell_vars)

    model.Maximize(
        sum(items[candidate.item_index].value * var for candidate, var in zip(candidates, decision_vars))
    )

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit_sec
    solver.parameters.num_search_workers = 8

    status = solver.Solve(model)
    status_name = solver.StatusName(status)
    logger.info(
        "CP-SAT cross-check: status=%s candidates=%d objective=%s",
        status_name,
        len(candidates),
        solver.ObjectiveValue() if status in (cp_model.OPTIMAL, cp_model.FEASIBLE) else None,
    )

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return CpSatCheck(status=status_name, value=0, placements=[])

    chosen = [candidate for candidate, var in zip(candidates, decision_vars) if solver.Value(var)]
    value = sum(items[placement.item_index].value for placement in chosen)
    return CpSatCheck(status=status_name, value=value, placements=chosen)
