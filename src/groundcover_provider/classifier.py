"""Map raw API failures onto the provider's error vocabulary.

Rules are evaluated in a fixed order and the first match wins:

1. ``policies.create``, ``service_accounts.create`` or ``api_keys.create``
   with status 409 or "conflict" in the text: name collision.
2. Status 404, or "not found" / " 404 " / "[404]" in the text: not found.
3. ``service_accounts.delete`` with 400: not found. (``ingestion_keys.delete``
   softens any not-found signal, which rule 2 already covers.)
4. "read-only" / "read only" in the text: read only.
5. ``policies.update`` with 409 or "conflict": concurrency conflict.
6. Anything else: generic error naming the operation.
"""

from __future__ import annotations

import logging
import re

from .errors import (
    ApiError,
    ConflictError,
    GroundcoverError,
    NameCollisionError,
    NotFoundError,
    ReadOnlyError,
    RequestDetails,
)

logger = logging.getLogger(__name__)

_STATUS_PATTERN = re.compile(r"status code (\d+)")

_CREATE_LABELS: dict[str, str] = {
    "policies.create": "policy",
    "service_accounts.create": "service account",
    "api_keys.create": "API Key",
}

_SOFT_DELETE_BAD_REQUEST = "service_accounts.delete"
_CONCURRENCY_OPERATION = "policies.update"


def extract_status_code(error: BaseException) -> int | None:
    if isinstance(error, ApiError) and error.status_code is not None:
        return error.status_code

    match = _STATUS_PATTERN.search(str(error))
    if match is None:
        return None
    return int(match.group(1))


def _has_not_found_signal(status: int | None, text: str) -> bool:
    return status == 404 or "not found" in text.lower() or " 404 " in text or "[404]" in text


def classify_error(
    error: BaseException | None,
    operation: str,
    resource_id: str | None = None,
) -> GroundcoverError | None:
    """Return the classified counterpart of ``error``, or ``None`` for ``None``."""
    if error is None:
        return None

    text = str(error)
    lowered = text.lower()
    status = extract_status_code(error)
    details: RequestDetails | None = error.details if isinstance(error, ApiError) else None
    context = {"details": details, "operation": operation, "resource_id": resource_id}

    label = _CREATE_LABELS.get(operation)
    if label is not None and (status == 409 or "conflict" in lowered):
        logger.debug("classified %s failure as name collision", operation)
        return NameCollisionError(
            f"{label} name '{resource_id}' was previously used or is currently in use. "
            "Please choose a different name",
            name=resource_id or "",
            **context,
        )

    if _has_not_found_signal(status, text):
        logger.debug("classified %s failure as not found", operation)
        return NotFoundError(f"{operation}: resource '{resource_id}' not found: {text}", **context)

    if operation == _SOFT_DELETE_BAD_REQUEST and (status == 400 or "[400]" in text):
        logger.debug("treating %s bad request as not found", operation)
        return NotFoundError(f"{operation}: resource '{resource_id}' not found: {text}", **context)

    if "read-only" in lowered or "read only" in lowered:
        logger.debug("classified %s failure as read only", operation)
        return ReadOnlyError(f"{operation}: resource '{resource_id}' is read-only: {text}", **context)

    if operation == _CONCURRENCY_OPERATION and (status == 409 or "conflict" in lowered):
        logger.debug("classified %s failure as concurrency conflict", operation)
        return ConflictError(
            f"{operation}: resource '{resource_id}' was modified concurrently: {text}",
            **context,
        )

    logger.debug("classified %s failure as generic", operation)
    return ApiError(f"{operation} failed: {text}", **context)
