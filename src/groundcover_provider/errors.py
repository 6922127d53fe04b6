"""Error hierarchy for the groundcover provider client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    NOT_FOUND = "not-found"
    CONCURRENCY = "concurrency-conflict"
    READ_ONLY = "read-only"
    NAME_COLLISION = "name-collision"
    GENERIC = "generic"
    CONFIGURATION = "configuration"
    SERIALIZATION = "serialization"


@dataclass(slots=True)
class RequestDetails:
    operation: str
    method: str
    path: str
    status_code: int | None = None
    response_body: Any | None = None
    resource_id: str | None = None


class GroundcoverError(Exception):
    """Base class for all client errors."""

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: str, *, operation: str | None = None, resource_id: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.resource_id = resource_id


class ConfigurationError(GroundcoverError):
    """Raised before any network call when required settings are missing."""

    kind = ErrorKind.CONFIGURATION


class TransportError(GroundcoverError):
    """Raised on network/transport failures."""


class ClientTimeoutError(TransportError):
    """Raised when request times out."""


class RequestCancelledError(TransportError):
    """Raised when a caller cancels a request during a retry wait."""


class ApiError(GroundcoverError):
    """Raised when the API rejects a request."""

    def __init__(
        self,
        message: str,
        *,
        details: RequestDetails | None = None,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation or (details.operation if details else None),
            resource_id=resource_id or (details.resource_id if details else None),
        )
        self.details = details

    @property
    def status_code(self) -> int | None:
        return self.details.status_code if self.details else None


class NotFoundError(ApiError):
    """Raised when the requested resource does not exist upstream."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(ApiError):
    """Raised when an update races a concurrent modification."""

    kind = ErrorKind.CONCURRENCY


class ReadOnlyError(ApiError):
    """Raised when the target resource cannot be modified."""

    kind = ErrorKind.READ_ONLY


class NameCollisionError(ApiError):
    """Raised when a create call reuses a name that is taken."""

    kind = ErrorKind.NAME_COLLISION

    def __init__(self, message: str, *, name: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.name = name


class SerializationError(GroundcoverError):
    """Raised when a request or response body cannot be encoded, decoded or validated."""

    kind = ErrorKind.SERIALIZATION

    def __init__(
        self,
        *,
        operation: str,
        model_name: str,
        errors: Any,
        boundary: str | None = None,
        status_code: int | None = None,
        raw_sample: Any | None = None,
        resource_id: str | None = None,
    ) -> None:
        location = boundary or "boundary"
        super().__init__(
            f"{operation} {location} serialization failed for {model_name}",
            operation=operation,
            resource_id=resource_id,
        )
        self.model_name = model_name
        self.errors = errors
        self.boundary = boundary
        self.status_code = status_code
        self.raw_sample = raw_sample


class WaitTimeoutError(GroundcoverError):
    """Raised when a wait helper times out before predicate match."""


def is_not_found(error: BaseException | None) -> bool:
    return isinstance(error, GroundcoverError) and error.kind is ErrorKind.NOT_FOUND
