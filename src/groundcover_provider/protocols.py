"""Protocol contracts for groundcover provider client extension points."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .hooks import RequestCall

StateT = TypeVar("StateT")


@runtime_checkable
class SyncRequestExecutor(Protocol):
    def request(
        self,
        *,
        operation: str,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        json_body: Any | None = None,
        yaml_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
        resource_id: str | None = None,
        response_model: Any | None = None,
    ) -> Any: ...


@runtime_checkable
class AsyncRequestExecutor(Protocol):
    async def request(
        self,
        *,
        operation: str,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        json_body: Any | None = None,
        yaml_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
        resource_id: str | None = None,
        response_model: Any | None = None,
    ) -> Any: ...


@runtime_checkable
class ResourceAdapter(Protocol[StateT]):
    """Lifecycle every resource adapter implements.

    ``read`` returns ``None`` when the object is gone upstream, and ``delete``
    treats an already-absent object as success.
    """

    def create(self, plan: StateT) -> StateT: ...

    def read(self, state: StateT) -> StateT | None: ...

    def update(self, state: StateT, plan: StateT) -> StateT: ...

    def delete(self, state: StateT) -> None: ...

    def import_state(self, import_id: str) -> StateT: ...


@runtime_checkable
class SyncHookMiddleware(Protocol):
    def before(self, call: RequestCall) -> None: ...

    def after(self, call: RequestCall, response: Any) -> None: ...

    def on_error(self, call: RequestCall, error: Exception) -> None: ...


@runtime_checkable
class AsyncHookMiddleware(Protocol):
    async def before(self, call: RequestCall) -> None: ...

    async def after(self, call: RequestCall, response: Any) -> None: ...

    async def on_error(self, call: RequestCall, error: Exception) -> None: ...
