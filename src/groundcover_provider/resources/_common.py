"""Helpers shared by resource adapters."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..errors import GroundcoverError, is_not_found

logger = logging.getLogger(__name__)


def parse_import_id(import_id: str) -> tuple[str, str]:
    """Split a ``"<type>:<id>"`` import identifier on its first colon."""
    kind, sep, ident = import_id.partition(":")
    if not sep or not kind or not ident:
        raise ValueError(f"import identifier must have the form '<type>:<id>', got {import_id!r}")
    return kind, ident


def require_rfc3339(value: str, field_name: str) -> str:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00").replace("z", "+00:00"))
    except ValueError as error:
        raise ValueError(f"{field_name} must be an RFC3339 timestamp, got {value!r}") from error
    if "T" not in value.upper() or parsed.tzinfo is None:
        raise ValueError(f"{field_name} must be an RFC3339 timestamp with a timezone, got {value!r}")
    return value


def delete_ignoring_absence(delete: Callable[[], Any], resource: str, identifier: str) -> None:
    """Run ``delete()``; a not-found failure counts as already deleted."""
    try:
        delete()
    except GroundcoverError as error:
        if not is_not_found(error):
            raise
        logger.debug("%s %s already deleted", resource, identifier)


def read_or_none(get: Callable[[], Any], resource: str, identifier: str) -> Any | None:
    """Run ``get()``; a not-found failure means the resource is gone upstream."""
    try:
        return get()
    except GroundcoverError as error:
        if not is_not_found(error):
            raise
        logger.warning("%s %s not found, removing from state", resource, identifier)
        return None


def compact(**fields: Any) -> dict[str, Any]:
    """Drop ``None`` values so unset optional fields stay absent on the wire."""
    return {key: value for key, value in fields.items() if value is not None}
