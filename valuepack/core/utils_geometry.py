"""
Geometry helper utilities shared across solver and presentation modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

Extents = Tuple[int, int, int]
Origin = Tuple[int, int, int]


def checked_volume(dimensions: Sequence[int]) -> int:
    """
    Return the product of three extents.

    Python integers do not wrap, so the only failure mode is a non-positive
    extent, which is rejected rather than producing a zero or negative volume.
    """
    volume = 1
    for value in dimensions:
        if value <= 0:
            raise ValueError(f"extents must be positive, got {tuple(dimensions)!r}")
        volume *= int(value)
    return volume


def rects_overlap_1d(a_start: int, a_len: int, b_start: int, b_len: int) -> bool:
    """
    Determine if two line segments on the same axis overlap (touching is not overlap).
    """
    return not (a_start + a_len <= b_start or b_start + b_len <= a_start)


def boxes_overlap(
    a_origin: Origin,
    a_dims: Extents,
    b_origin: Origin,
    b_dims: Extents,
) -> bool:
    """
    Check whether two axis-aligned cuboids intersect.
    """
    return (
        rects_overlap_1d(a_origin[0], a_dims[0], b_origin[0], b_dims[0])
        and rects_overlap_1d(a_origin[1], a_dims[1], b_origin[1], b_dims[1])
        and rects_overlap_1d(a_origin[2], a_dims[2], b_origin[2], b_dims[2])
    )


@dataclass(frozen=True)
class Placement:
    """
    Represents the placement of an item within the container.
    """

    x: int
    y: int
    z: int
    dims: Extents
    item_index: int

    @property
    def origin(self) -> Origin:
        return self.x, self.y, self.z

    def cells(self) -> Iterable[Tuple[int, int, int]]:
        for cx in range(self.x, self.x + self.dims[0]):
            for cy in range(self.y, self.y + self.dims[1]):
                for cz in range(self.z, self.z + self.dims[2]):
                    yield cx, cy, cz

    def as_dict(self) -> dict:
        return {
            "item_index": self.item_index,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "dims": list(self.dims),
        }


def iter_origins(container_dims: Extents, item_dims: Extents) -> Iterable[Origin]:
    """
    Yield every integer origin at which the item stays inside the container.

    The traversal order is fixed: x outermost, then y, then z innermost.
    """
    max_x = container_dims[0] - item_dims[0]
    max_y = container_dims[1] - item_dims[1]
    max_z = container_dims[2] - item_dims[2]
    for ox in range(max_x + 1):
        for oy in range(max_y + 1):
            for oz in range(max_z + 1):
                yield ox, oy, oz


def find_overlaps(placements: Sequence[Placement]) -> List[Tuple[int, int]]:
    """
    Return index pairs of placements whose boxes intersect.

    Pairwise checks are plenty for the handful of objects an exact search can handle.
    """
    clashes: List[Tuple[int, int]] = []
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            if boxes_overlap(placements[i].origin, placements[i].dims, placements[j].origin, placements[j].dims):
                clashes.append((i, j))
    return clashes


def volume_utilization(used_volume: int, container_volume: int) -> float:
    """
    Simple volume utilisation metric expressed as a percentage (0.0 - 100.0).
    """
    if container_volume <= 0:
        return 0.0
    return float(used_volume) / float(container_volume) * 100.0


def footprint_coverage(
    placements: Sequence[Placement],
    container_x: int,
    container_y: int,
) -> float:
    """
    Compute the percentage of the XY footprint covered by placements using a plane sweep.
    """
    if not placements:
        return 0.0

    container_area = float(container_x * container_y)
    if container_area <= 0:
        return 0.0

    x_edges: List[int] = []
    rects: List[Tuple[int, int, int, int]] = []
    for placement in placements:
        x0, y0 = placement.x, placement.y
        x1, y1 = x0 + placement.dims[0], y0 + placement.dims[1]
        x_edges.extend([x0, x1])
        rects.append((x0, x1, y0, y1))

    x_edges = sorted(set(x_edges))
    area = 0.0
    for i in range(len(x_edges) - 1):
        x_start, x_end = x_edges[i], x_edges[i + 1]
        # Collect y-intervals for rectangles spanning this x-slice.
        intervals = sorted((y0, y1) for x0, x1, y0, y1 in rects if x0 <= x_start and x1 >= x_end)
        if not intervals:
            continue

        # Merge Y-intervals.
        merged: List[Tuple[int, int]] = []
        cur_start, cur_end = intervals[0]
        for start, end in intervals[1:]:
            if start <= cur_end:
                cur_end = max(cur_end, end)
            else:
                merged.append((cur_start, cur_end))
                cur_start, cur_end = start, end
        merged.append((cur_start, cur_end))

        slice_width = x_end - x_start
        for y_start, y_end in merged:
            area += slice_width * (y_end - y_start)

    area = min(area, container_area)
    return area / container_area * 100.0
