"""Top-level groundcover API clients (sync + async)."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx

from .api import (
    ApiKeysApi,
    ConnectedAppsApi,
    DashboardsApi,
    DataIntegrationsApi,
    IngestionKeysApi,
    LogsPipelineApi,
    MetricsAggregationApi,
    MonitorsApi,
    PoliciesApi,
    RawApi,
    ServiceAccountsApi,
    SilencesApi,
)
from .config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_RETRY_WAIT,
    DEFAULT_MIN_RETRY_WAIT,
    DEFAULT_TIMEOUT_SECONDS,
    ProviderConfig,
)
from .content_types import AsyncYamlContentTypeTransport, YamlContentTypeTransport
from .hooks import HookRegistry, LoggingMiddleware, RequestCall
from .protocols import AsyncHookMiddleware, AsyncRequestExecutor, SyncHookMiddleware, SyncRequestExecutor
from .retry import AsyncRateLimitRetryTransport, RateLimitRetryTransport
from .transport import AsyncTransport, SyncTransport


def _default_hooks(hook_registry: HookRegistry | None) -> HookRegistry:
    if hook_registry is not None:
        return hook_registry
    registry = HookRegistry()
    registry.add_middleware("*", LoggingMiddleware())
    return registry


def _config_kwargs(cfg: ProviderConfig) -> dict[str, Any]:
    return {
        "base_url": cfg.base_url,
        "api_key": cfg.api_key,
        "backend_id": cfg.backend_id,
        "timeout_seconds": cfg.timeout_seconds,
        "max_retries": cfg.max_retries,
        "min_retry_wait": cfg.min_retry_wait,
        "max_retry_wait": cfg.max_retry_wait,
        "headers": cfg.headers,
    }


class _ClientBase:
    def _init_common(
        self,
        *,
        base_url: str,
        api_key: str,
        backend_id: str,
        timeout_seconds: float,
        max_retries: int,
        min_retry_wait: float,
        max_retry_wait: float,
        headers: dict[str, str] | None,
        hook_registry: HookRegistry | None,
    ) -> None:
        self.provider_config = ProviderConfig(
            base_url=base_url,
            api_key=api_key,
            backend_id=backend_id,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            min_retry_wait=min_retry_wait,
            max_retry_wait=max_retry_wait,
            headers=dict(headers or {}),
        )
        self.provider_config.validate()
        self._hooks = _default_hooks(hook_registry)

    def _bind_apis(self) -> None:
        self.policies = PoliciesApi(self._request)
        self.service_accounts = ServiceAccountsApi(self._request)
        self.api_keys = ApiKeysApi(self._request)
        self.dashboards = DashboardsApi(self._request)
        self.silences = SilencesApi(self._request)
        self.connected_apps = ConnectedAppsApi(self._request)
        self.data_integrations = DataIntegrationsApi(self._request)
        self.ingestion_keys = IngestionKeysApi(self._request)
        self.logs_pipeline = LogsPipelineApi(self._request)
        self.metrics_aggregation = MetricsAggregationApi(self._request)
        self.monitors = MonitorsApi(self._request)
        self.raw = RawApi(self._request)

    def before(self, operation: str = "*") -> Callable[[Callable[[RequestCall], Any]], Callable[[RequestCall], Any]]:
        def decorator(func: Callable[[RequestCall], Any]) -> Callable[[RequestCall], Any]:
            self._hooks.add_before(operation, func)
            return func

        return decorator

    def after(self, operation: str = "*") -> Callable[[Callable[[RequestCall, Any], Any]], Callable[[RequestCall, Any], Any]]:
        def decorator(func: Callable[[RequestCall, Any], Any]) -> Callable[[RequestCall, Any], Any]:
            self._hooks.add_after(operation, func)
            return func

        return decorator

    def on_error(self, operation: str = "*") -> Callable[[Callable[[RequestCall, Exception], Any]], Callable[[RequestCall, Exception], Any]]:
        def decorator(func: Callable[[RequestCall, Exception], Any]) -> Callable[[RequestCall, Exception], Any]:
            self._hooks.add_error(operation, func)
            return func

        return decorator

    def use_middleware(self, middleware: SyncHookMiddleware | AsyncHookMiddleware, *, operation: str = "*") -> None:
        self._hooks.add_middleware(operation, middleware)


class GroundcoverClient(_ClientBase):
    """Synchronous groundcover API client."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        backend_id: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_retry_wait: float = DEFAULT_MIN_RETRY_WAIT,
        max_retry_wait: float = DEFAULT_MAX_RETRY_WAIT,
        headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        request_executor: SyncRequestExecutor | None = None,
        hook_registry: HookRegistry | None = None,
        cancel_event: threading.Event | None = None,
        retry_sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._init_common(
            base_url=base_url,
            api_key=api_key,
            backend_id=backend_id,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            min_retry_wait=min_retry_wait,
            max_retry_wait=max_retry_wait,
            headers=headers,
            hook_registry=hook_registry,
        )
        cfg = self.provider_config

        if http_client is None:
            retry_kwargs: dict[str, Any] = {"sleep": retry_sleep} if retry_sleep is not None else {}
            stack = YamlContentTypeTransport(
                RateLimitRetryTransport(
                    transport or httpx.HTTPTransport(),
                    max_retries=cfg.max_retries,
                    min_wait=cfg.min_retry_wait,
                    max_wait=cfg.max_retry_wait,
                    **retry_kwargs,
                )
            )
            http_client = httpx.Client(
                base_url=cfg.base_url,
                timeout=cfg.timeout_seconds,
                headers=cfg.headers,
                transport=stack,
            )
        self._client = http_client
        self._transport = SyncTransport(
            self._client,
            api_key=cfg.api_key,
            backend_id=cfg.backend_id,
            cancel_event=cancel_event,
        )
        self._executor = request_executor or self._transport
        self._bind_apis()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "GroundcoverClient":
        return cls(**_config_kwargs(ProviderConfig.from_env()), **kwargs)

    @classmethod
    def from_file(cls, config_path: str | Path, **kwargs: Any) -> "GroundcoverClient":
        return cls(**_config_kwargs(ProviderConfig.from_file(config_path)), **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GroundcoverClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        json_body: Any | None = None,
        yaml_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
        resource_id: str | None = None,
        response_model: Any | None = None,
    ) -> Any:
        call = RequestCall(
            operation=operation,
            method=method.upper(),
            path=path,
            query=dict(query or {}),
            json_body=json_body,
            yaml_body=yaml_body,
            headers=dict(headers or {}),
            resource_id=resource_id,
        )

        self._hooks.run_before(call)
        try:
            response = self._executor.request(
                operation=call.operation,
                method=call.method,
                path=call.path,
                query=call.query,
                json_body=call.json_body,
                yaml_body=call.yaml_body,
                headers=call.headers or None,
                allow_statuses=allow_statuses,
                resource_id=call.resource_id,
                response_model=response_model,
            )
        except Exception as error:
            self._hooks.run_error(call, error)
            raise
        self._hooks.run_after(call, response)
        return response


class AsyncGroundcoverClient(_ClientBase):
    """Asynchronous groundcover API client."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        backend_id: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_retry_wait: float = DEFAULT_MIN_RETRY_WAIT,
        max_retry_wait: float = DEFAULT_MAX_RETRY_WAIT,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        request_executor: AsyncRequestExecutor | None = None,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self._init_common(
            base_url=base_url,
            api_key=api_key,
            backend_id=backend_id,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            min_retry_wait=min_retry_wait,
            max_retry_wait=max_retry_wait,
            headers=headers,
            hook_registry=hook_registry,
        )
        cfg = self.provider_config

        if http_client is None:
            stack = AsyncYamlContentTypeTransport(
                AsyncRateLimitRetryTransport(
                    transport or httpx.AsyncHTTPTransport(),
                    max_retries=cfg.max_retries,
                    min_wait=cfg.min_retry_wait,
                    max_wait=cfg.max_retry_wait,
                )
            )
            http_client = httpx.AsyncClient(
                base_url=cfg.base_url,
                timeout=cfg.timeout_seconds,
                headers=cfg.headers,
                transport=stack,
            )
        self._client = http_client
        self._transport = AsyncTransport(self._client, api_key=cfg.api_key, backend_id=cfg.backend_id)
        self._executor = request_executor or self._transport
        self._bind_apis()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AsyncGroundcoverClient":
        return cls(**_config_kwargs(ProviderConfig.from_env()), **kwargs)

    @classmethod
    def from_file(cls, config_path: str | Path, **kwargs: Any) -> "AsyncGroundcoverClient":
        return cls(**_config_kwargs(ProviderConfig.from_file(config_path)), **kwargs)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncGroundcoverClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        json_body: Any | None = None,
        yaml_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
        resource_id: str | None = None,
        response_model: Any | None = None,
    ) -> Any:
        call = RequestCall(
            operation=operation,
            method=method.upper(),
            path=path,
            query=dict(query or {}),
            json_body=json_body,
            yaml_body=yaml_body,
            headers=dict(headers or {}),
            resource_id=resource_id,
        )

        await self._hooks.run_before_async(call)
        try:
            response = await self._executor.request(
                operation=call.operation,
                method=call.method,
                path=call.path,
                query=call.query,
                json_body=call.json_body,
                yaml_body=call.yaml_body,
                headers=call.headers or None,
                allow_statuses=allow_statuses,
                resource_id=call.resource_id,
                response_model=response_model,
            )
        except Exception as error:
            await self._hooks.run_error_async(call, error)
            raise
        await self._hooks.run_after_async(call, response)
        return response
