"""groundcover provider client core.

This module uses lazy exports so lightweight utilities (for example config parsing
or the error classifier) can be imported without immediately importing
transport dependencies.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ApiError",
    "AsyncGroundcoverClient",
    "AsyncHookMiddleware",
    "AsyncRequestExecutor",
    "ClientTimeoutError",
    "ConfigurationError",
    "ConflictError",
    "ErrorKind",
    "GroundcoverClient",
    "GroundcoverError",
    "HookRegistry",
    "NameCollisionError",
    "NotFoundError",
    "ProviderConfig",
    "ReadOnlyError",
    "RequestCancelledError",
    "ResourceAdapter",
    "SerializationError",
    "SyncHookMiddleware",
    "SyncRequestExecutor",
    "TransportError",
    "classify_error",
    "is_not_found",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "AsyncGroundcoverClient": (".client", "AsyncGroundcoverClient"),
    "GroundcoverClient": (".client", "GroundcoverClient"),
    "ProviderConfig": (".config", "ProviderConfig"),
    "classify_error": (".classifier", "classify_error"),
    "ApiError": (".errors", "ApiError"),
    "ClientTimeoutError": (".errors", "ClientTimeoutError"),
    "ConfigurationError": (".errors", "ConfigurationError"),
    "ConflictError": (".errors", "ConflictError"),
    "ErrorKind": (".errors", "ErrorKind"),
    "GroundcoverError": (".errors", "GroundcoverError"),
    "NameCollisionError": (".errors", "NameCollisionError"),
    "NotFoundError": (".errors", "NotFoundError"),
    "ReadOnlyError": (".errors", "ReadOnlyError"),
    "RequestCancelledError": (".errors", "RequestCancelledError"),
    "SerializationError": (".errors", "SerializationError"),
    "TransportError": (".errors", "TransportError"),
    "is_not_found": (".errors", "is_not_found"),
    "HookRegistry": (".hooks", "HookRegistry"),
    "AsyncHookMiddleware": (".protocols", "AsyncHookMiddleware"),
    "AsyncRequestExecutor": (".protocols", "AsyncRequestExecutor"),
    "ResourceAdapter": (".protocols", "ResourceAdapter"),
    "SyncHookMiddleware": (".protocols", "SyncHookMiddleware"),
    "SyncRequestExecutor": (".protocols", "SyncRequestExecutor"),
}

if TYPE_CHECKING:
    from .classifier import classify_error
    from .client import AsyncGroundcoverClient, GroundcoverClient
    from .config import ProviderConfig
    from .errors import (
        ApiError,
        ClientTimeoutError,
        ConfigurationError,
        ConflictError,
        ErrorKind,
        GroundcoverError,
        NameCollisionError,
        NotFoundError,
        ReadOnlyError,
        RequestCancelledError,
        SerializationError,
        TransportError,
        is_not_found,
    )
    from .hooks import HookRegistry
    from .protocols import (
        AsyncHookMiddleware,
        AsyncRequestExecutor,
        ResourceAdapter,
        SyncHookMiddleware,
        SyncRequestExecutor,
    )


def __getattr__(name: str) -> Any:
    module_info = _EXPORTS.get(name)
    if module_info is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute = module_info
    module = import_module(module_name, __name__)
    value = getattr(module, attribute)
    globals()[name] = value
    return value
