"""JSON text helpers used to suppress formatting-only differences."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def normalize_json(text: str) -> str:
    """Re-render JSON text with sorted keys and two-space indentation."""
    if text == "":
        return ""
    return json.dumps(json.loads(text), sort_keys=True, indent=2, ensure_ascii=False)


def compare_json_semantically(left: str, right: str) -> bool:
    """Return True when both documents parse to the same structure.

    Key order and whitespace are ignored. Numbers compare by value (``1`` equals
    ``1.0``), but booleans never equal numbers. Raises ``ValueError`` when either
    side is not valid JSON.
    """
    return _deep_equal(json.loads(left), json.loads(right))


def _deep_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(_deep_equal(left[key], right[key]) for key in left)
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return False
        return all(_deep_equal(a, b) for a, b in zip(left, right))
    if type(left) is not type(right):
        return False
    return left == right


def keep_equivalent_json(planned: str | None, server: str) -> str:
    """Prefer the caller's formatting when it matches the server document."""
    if planned is None or planned == "":
        return server
    try:
        same = compare_json_semantically(planned, server)
    except ValueError as error:
        logger.warning("unable to compare JSON documents semantically, using server value: %s", error)
        return server
    if same:
        logger.debug("JSON documents are semantically equal, keeping planned format")
        return planned
    logger.debug("JSON documents differ semantically, using server value")
    return server
