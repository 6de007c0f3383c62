"""
JSON request/response boundary for the solver.

A request is ``{"limit": {...}, "objects": [...]}``; the response is the
``PackingResult.to_dict()`` payload.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Tuple

from valuepack.models.container import Container
from valuepack.models.item import Item

logger = logging.getLogger(__name__)

REQUEST_FIELDS = ("limit", "objects")


def parse_request(payload: Mapping[str, Any]) -> Tuple[List[Item], Container]:
    """
    Validate a decoded request and return ``(items, container)``.

    Errors name the offending record so a caller can point at the bad input.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"request must be an object, got {type(payload).__name__}")
    missing = [key for key in REQUEST_FIELDS if key not in payload]
    if missing:
        raise ValueError(f"request is missing field(s): {', '.join(missing)}")

    container = Container.from_dict(payload["limit"])

    raw_objects = payload["objects"]
    if not isinstance(raw_objects, list):
        raise ValueError(f"objects must be a list, got {type(raw_objects).__name__}")

    items: List[Item] = []
    for index, record in enumerate(raw_objects):
        try:
            items.append(Item.from_dict(record))
        except ValueError as exc:
            raise ValueError(f"objects[{index}]: {exc}") from exc

    logger.debug("Parsed request: container=%s objects=%d", container.dimensions, len(items))
    return items, container


def load_request(path: str | Path) -> Tuple[List[Item], Container]:
    with open(path, "r", encoding="utf-8") as file:
        try:
            payload = json.load(file)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: invalid JSON ({exc})") from exc
    return parse_request(payload)


def dump_response(response: Mapping[str, Any], path: str | Path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as file:
        json.dump(response, file, indent=2)
    return output_path
