"""
Container model describing the fixed region objects are packed into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from valuepack.models.item import _require_positive, check_record_keys

LIMIT_FIELDS = ("size_x", "size_y", "size_z")


@dataclass(frozen=True)
class Container:
    """Immutable container limit; valid cells are [0, x) x [0, y) x [0, z)."""

    size_x: int
    size_y: int
    size_z: int
    name: str = field(default="Container", compare=False)

    def __post_init__(self) -> None:
        _require_positive("size_x", self.size_x)
        _require_positive("size_y", self.size_y)
        _require_positive("size_z", self.size_z)

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        return self.size_x, self.size_y, self.size_z

    @property
    def capacity(self) -> int:
        """Return the number of unit cells in the container."""
        return self.size_x * self.size_y * self.size_z

    def to_dict(self) -> Dict[str, int]:
        return {
            "size_x": self.size_x,
            "size_y": self.size_y,
            "size_z": self.size_z,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Container":
        """Instantiate from a raw limit record."""
        check_record_keys("limit", payload, LIMIT_FIELDS)
        return cls(
            size_x=payload["size_x"],
            size_y=payload["size_y"],
            size_z=payload["size_z"],
        )
