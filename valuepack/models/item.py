"""
Data model representing a valued object that may be packed into the container.

Extents are integer grid units and the value is a non-negative integer score.
Validation is strict: a record that is not exactly the expected shape is
rejected at the boundary instead of being coerced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

ITEM_FIELDS = ("label", "size_x", "size_y", "size_z", "value")


def _require_int(name: str, value: Any) -> int:
    # bool is an int subclass; a JSON true/false is never a size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _require_positive(name: str, value: Any) -> int:
    value = _require_int(name, value)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return value


def _require_non_negative(name: str, value: Any) -> int:
    value = _require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value!r}")
    return value


def check_record_keys(kind: str, payload: Mapping[str, Any], expected: Tuple[str, ...]) -> None:
    """Reject records with missing or unknown keys."""
    if not isinstance(payload, Mapping):
        raise ValueError(f"{kind} record must be an object, got {type(payload).__name__}")
    missing = [key for key in expected if key not in payload]
    if missing:
        raise ValueError(f"{kind} record is missing field(s): {', '.join(missing)}")
    unknown = sorted(set(payload) - set(expected))
    if unknown:
        raise ValueError(f"{kind} record has unknown field(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class Item:
    """Immutable box with a value, as submitted by the caller."""

    label: str
    size_x: int
    size_y: int
    size_z: int
    value: int = field(default=0)

    def __post_init__(self) -> None:
        if not isinstance(self.label, str):
            raise ValueError(f"label must be a string, got {self.label!r}")
        _require_positive("size_x", self.size_x)
        _require_positive("size_y", self.size_y)
        _require_positive("size_z", self.size_z)
        _require_non_negative("value", self.value)

    @property
    def volume(self) -> int:
        """Return the number of unit cells the item covers."""
        return self.size_x * self.size_y * self.size_z

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        """Expose extents as an (x, y, z) tuple."""
        return self.size_x, self.size_y, self.size_z

    def fits_within(self, limits: Tuple[int, int, int]) -> bool:
        return all(extent <= limit for extent, limit in zip(self.dimensions, limits))

    def to_dict(self) -> Dict[str, int | str]:
        return {
            "label": self.label,
            "size_x": self.size_x,
            "size_y": self.size_y,
            "size_z": self.size_z,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Item":
        """Instantiate from a raw request record."""
        check_record_keys("object", payload, ITEM_FIELDS)
        return cls(
            label=payload["label"],
            size_x=payload["size_x"],
            size_y=payload["size_y"],
            size_z=payload["size_z"],
            value=payload["value"],
        )
