"""
Unit-cell occupancy store for one container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from valuepack.core.utils_geometry import Extents, Origin, checked_volume
from valuepack.models.container import Container

EMPTY_CELL = -1


@dataclass(frozen=True)
class PlacementToken:
    """Restore token returned by ``OccupancyGrid.place``; ``remove`` consumes it."""

    item_id: int
    origin: Origin
    dims: Extents
    volume: int


class OccupancyGrid:
    """
    Flat cell array addressed as ``(x * Y + y) * Z + z``.

    Each cell holds ``EMPTY_CELL`` or the id of the single item covering it.
    The z axis is innermost, so the cells of one (x, y) column are contiguous.
    """

    def __init__(self, container: Container) -> None:
        self.size_x, self.size_y, self.size_z = container.dimensions
        self.capacity = checked_volume(container.dimensions)
        self.cells: List[int] = [EMPTY_CELL] * self.capacity
        self.used_volume = 0

    def index(self, x: int, y: int, z: int) -> int:
        return (x * self.size_y + y) * self.size_z + z

    @property
    def free_volume(self) -> int:
        return self.capacity - self.used_volume

    def can_place(self, dims: Extents, origin: Origin) -> bool:
        """True if the box fits inside the container at ``origin`` and covers only empty cells."""
        ox, oy, oz = origin
        dx, dy, dz = dims
        if ox < 0 or oy < 0 or oz < 0:
            return False
        if ox + dx > self.size_x or oy + dy > self.size_y or oz + dz > self.size_z:
            return False

        cells = self.cells
        for x in range(ox, ox + dx):
            for y in range(oy, oy + dy):
                base = self.index(x, y, oz)
                for offset in range(dz):
                    if cells[base + offset] != EMPTY_CELL:
                        return False
        return True

    def place(self, item_id: int, dims: Extents, origin: Origin) -> PlacementToken:
        """
        Mark every cell of the box with ``item_id``.

        The caller must have checked ``can_place``; it is not re-checked here.
        """
        self._fill(dims, origin, item_id)
        volume = dims[0] * dims[1] * dims[2]
        self.used_volume += volume
        return PlacementToken(item_id=item_id, origin=origin, dims=dims, volume=volume)

    def remove(self, token: PlacementToken) -> None:
        """Undo the ``place`` call that produced ``token``."""
        assert self._holds(token), f"grid does not hold item {token.item_id} at {token.origin}"
        self._fill(token.dims, token.origin, EMPTY_CELL)
        self.used_volume -= token.volume

    def snapshot(self) -> List[int]:
        return list(self.cells)

    def _fill(self, dims: Extents, origin: Origin, marker: int) -> None:
        ox, oy, oz = origin
        dx, dy, dz = dims
        cells = self.cells
        for x in range(ox, ox + dx):
            for y in range(oy, oy + dy):
                base = self.index(x, y, oz)
                cells[base:base + dz] = [marker] * dz

    def _holds(self, token: PlacementToken) -> bool:
        ox, oy, oz = token.origin
        dx, dy, dz = token.dims
        for x in range(ox, ox + dx):
            for y in range(oy, oy + dy):
                base = self.index(x, y, oz)
                if any(cell != token.item_id for cell in self.cells[base:base + dz]):
                    return False
        return True
