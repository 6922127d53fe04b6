"""Request hook registry for the groundcover provider client.

Hooks are registered per operation name (for example ``dashboards.update``) or
under ``"*"`` for every operation. Wildcard hooks run first.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from .protocols import AsyncHookMiddleware, SyncHookMiddleware

logger = logging.getLogger(__name__)

WILDCARD = "*"

Stage = Literal["before", "after", "error"]


@dataclass(slots=True)
class RequestCall:
    operation: str
    method: str
    path: str
    query: dict[str, Any] | None = None
    json_body: Any | None = None
    yaml_body: Any | None = None
    headers: dict[str, str] | None = None
    resource_id: str | None = None


BeforeHook = Callable[[RequestCall], None | Awaitable[None]]
AfterHook = Callable[[RequestCall, Any], None | Awaitable[None]]
ErrorHook = Callable[[RequestCall, Exception], None | Awaitable[None]]


def _empty_stages() -> dict[Stage, dict[str, list[Callable[..., Any]]]]:
    return {"before": {}, "after": {}, "error": {}}


@dataclass(slots=True)
class HookRegistry:
    _stages: dict[Stage, dict[str, list[Callable[..., Any]]]] = field(default_factory=_empty_stages)

    def add_before(self, operation: str, hook: BeforeHook) -> None:
        self._register("before", operation, hook)

    def add_after(self, operation: str, hook: AfterHook) -> None:
        self._register("after", operation, hook)

    def add_error(self, operation: str, hook: ErrorHook) -> None:
        self._register("error", operation, hook)

    def add_middleware(self, operation: str, middleware: SyncHookMiddleware | AsyncHookMiddleware) -> None:
        before = _require_hook_callable(middleware, "before")
        after = _require_hook_callable(middleware, "after")
        on_error = _require_hook_callable(middleware, "on_error")
        self.add_before(operation, before)
        self.add_after(operation, after)
        self.add_error(operation, on_error)

    def run_before(self, call: RequestCall) -> None:
        self._run("before", call)

    def run_after(self, call: RequestCall, response: Any) -> None:
        self._run("after", call, response)

    def run_error(self, call: RequestCall, error: Exception) -> None:
        self._run("error", call, error)

    async def run_before_async(self, call: RequestCall) -> None:
        await self._run_async("before", call)

    async def run_after_async(self, call: RequestCall, response: Any) -> None:
        await self._run_async("after", call, response)

    async def run_error_async(self, call: RequestCall, error: Exception) -> None:
        await self._run_async("error", call, error)

    def _register(self, stage: Stage, operation: str, hook: Callable[..., Any]) -> None:
        self._stages[stage].setdefault(operation, []).append(hook)

    def _hooks_for(self, stage: Stage, operation: str) -> list[Callable[..., Any]]:
        registered = self._stages[stage]
        return [*registered.get(WILDCARD, []), *registered.get(operation, [])]

    def _run(self, stage: Stage, call: RequestCall, *extra: Any) -> None:
        for hook in self._hooks_for(stage, call.operation):
            _reject_awaitable(hook(call, *extra), stage)

    async def _run_async(self, stage: Stage, call: RequestCall, *extra: Any) -> None:
        for hook in self._hooks_for(stage, call.operation):
            result = hook(call, *extra)
            if inspect.isawaitable(result):
                await result


class LoggingMiddleware:
    """Logs the start, success and failure of every call."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def before(self, call: RequestCall) -> None:
        self._logger.debug(
            "executing %s: %s %s (resource %s)", call.operation, call.method, call.path, call.resource_id or "-"
        )

    def after(self, call: RequestCall, _response: Any) -> None:
        self._logger.debug("%s succeeded (resource %s)", call.operation, call.resource_id or "-")

    def on_error(self, call: RequestCall, error: Exception) -> None:
        self._logger.warning("%s failed (resource %s): %s", call.operation, call.resource_id or "-", error)


def _reject_awaitable(result: Any, stage: Stage) -> None:
    if not inspect.isawaitable(result):
        return
    # Close the coroutine so it is not reported as never awaited.
    close = getattr(result, "close", None)
    if callable(close):
        close()
    raise TypeError(f"sync clients cannot execute async {stage} hooks")


def _require_hook_callable(middleware: object, name: str) -> Callable[..., Any]:
    hook = getattr(middleware, name, None)
    if not callable(hook):
        raise TypeError(f"hook middleware must provide callable {name}()")
    return hook
