"""Per-entity HTTP APIs.

Every API takes the client's request callable, so the same classes serve the
sync client (methods return values) and the async client (methods return
awaitables).
"""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import quote

from .models import (
    ApiKey,
    ApiKeyCreated,
    ConfigEntry,
    ConfigEntryRequest,
    ConnectedApp,
    ConnectedAppCreated,
    ConnectedAppRequest,
    CreateApiKeyRequest,
    CreateDashboardRequest,
    CreateIngestionKeyRequest,
    CreatePolicyRequest,
    CreateServiceAccountRequest,
    Dashboard,
    DataIntegration,
    DataIntegrationRequest,
    DeleteIngestionKeyRequest,
    IngestionKey,
    ListIngestionKeysRequest,
    MetricsAggregation,
    MetricsAggregationRequest,
    MonitorCreated,
    Policy,
    ServiceAccount,
    ServiceAccountCreated,
    Silence,
    SilenceRequest,
    UpdateDashboardRequest,
    UpdatePolicyRequest,
    UpdateServiceAccountRequest,
)

RequestFn = Callable[..., Any]

POLICIES_PATH = "/api/rbac/policies"
SERVICE_ACCOUNTS_PATH = "/api/rbac/service-accounts"
API_KEYS_PATH = "/api/rbac/api-keys"
INGESTION_KEYS_PATH = "/api/rbac/ingestion-keys"
DASHBOARDS_PATH = "/api/dashboards"
SILENCES_PATH = "/api/silences"
CONNECTED_APPS_PATH = "/api/connected-apps"
DATA_INTEGRATIONS_PATH = "/api/integrations/data/config"
LOGS_PIPELINE_PATH = "/api/pipelines/logs/config"
METRICS_AGGREGATION_PATH = "/api/pipelines/metrics/aggregations/config"
MONITORS_PATH = "/api/monitors"


def _segment(value: str) -> str:
    return quote(value, safe="")


class RawApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def request(
        self,
        method: str,
        path: str,
        *,
        operation: str = "raw.request",
        query: dict[str, Any] | None = None,
        body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: tuple[int, ...] | None = None,
    ) -> Any:
        return self._request(
            operation=operation,
            method=method,
            path=path,
            query=query,
            json_body=body,
            headers=headers,
            allow_statuses=allow_statuses,
        )


class PoliciesApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: CreatePolicyRequest) -> Any:
        return self._request(
            "policies.create",
            "POST",
            POLICIES_PATH,
            json_body=body,
            resource_id=body.name,
            response_model=Policy,
        )

    def get(self, uuid: str) -> Any:
        return self._request(
            "policies.get", "GET", f"{POLICIES_PATH}/{_segment(uuid)}", resource_id=uuid, response_model=Policy
        )

    def update(self, uuid: str, body: UpdatePolicyRequest) -> Any:
        return self._request(
            "policies.update",
            "PUT",
            f"{POLICIES_PATH}/{_segment(uuid)}",
            json_body=body,
            resource_id=uuid,
            response_model=Policy,
        )

    def delete(self, uuid: str) -> Any:
        return self._request("policies.delete", "DELETE", f"{POLICIES_PATH}/{_segment(uuid)}", resource_id=uuid)


class ServiceAccountsApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: CreateServiceAccountRequest) -> Any:
        return self._request(
            "service_accounts.create",
            "POST",
            SERVICE_ACCOUNTS_PATH,
            json_body=body,
            resource_id=body.name,
            response_model=ServiceAccountCreated,
        )

    def list(self) -> Any:
        return self._request("service_accounts.list", "GET", SERVICE_ACCOUNTS_PATH, response_model=list[ServiceAccount])

    def update(self, service_account_id: str, body: UpdateServiceAccountRequest) -> Any:
        return self._request(
            "service_accounts.update",
            "PUT",
            f"{SERVICE_ACCOUNTS_PATH}/{_segment(service_account_id)}",
            json_body=body,
            resource_id=service_account_id,
        )

    def delete(self, service_account_id: str) -> Any:
        return self._request(
            "service_accounts.delete",
            "DELETE",
            f"{SERVICE_ACCOUNTS_PATH}/{_segment(service_account_id)}",
            resource_id=service_account_id,
        )


class ApiKeysApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: CreateApiKeyRequest) -> Any:
        return self._request(
            "api_keys.create",
            "POST",
            API_KEYS_PATH,
            json_body=body,
            resource_id=body.name,
            response_model=ApiKeyCreated,
        )

    def list(self, *, with_revoked: bool | None = None, with_expired: bool | None = None) -> Any:
        return self._request(
            "api_keys.list",
            "GET",
            API_KEYS_PATH,
            query={"withRevoked": with_revoked, "withExpired": with_expired},
            response_model=list[ApiKey],
        )

    def delete(self, api_key_id: str) -> Any:
        return self._request(
            "api_keys.delete", "DELETE", f"{API_KEYS_PATH}/{_segment(api_key_id)}", resource_id=api_key_id
        )


class DashboardsApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: CreateDashboardRequest) -> Any:
        return self._request(
            "dashboards.create",
            "POST",
            DASHBOARDS_PATH,
            json_body=body,
            resource_id=body.name,
            response_model=Dashboard,
        )

    def get(self, uuid: str) -> Any:
        return self._request(
            "dashboards.get", "GET", f"{DASHBOARDS_PATH}/{_segment(uuid)}", resource_id=uuid, response_model=Dashboard
        )

    def list(self) -> Any:
        return self._request("dashboards.list", "GET", DASHBOARDS_PATH, response_model=list[Dashboard])

    def update(self, uuid: str, body: UpdateDashboardRequest) -> Any:
        return self._request(
            "dashboards.update",
            "PUT",
            f"{DASHBOARDS_PATH}/{_segment(uuid)}",
            json_body=body,
            resource_id=uuid,
            response_model=Dashboard,
        )

    def delete(self, uuid: str) -> Any:
        return self._request("dashboards.delete", "DELETE", f"{DASHBOARDS_PATH}/{_segment(uuid)}", resource_id=uuid)


class SilencesApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: SilenceRequest) -> Any:
        return self._request(
            "silences.create", "POST", SILENCES_PATH, json_body=body, resource_id=body.comment, response_model=Silence
        )

    def get(self, silence_id: str) -> Any:
        return self._request(
            "silences.get",
            "GET",
            f"{SILENCES_PATH}/{_segment(silence_id)}",
            resource_id=silence_id,
            response_model=Silence,
        )

    def update(self, silence_id: str, body: SilenceRequest) -> Any:
        return self._request(
            "silences.update",
            "PUT",
            f"{SILENCES_PATH}/{_segment(silence_id)}",
            json_body=body,
            resource_id=silence_id,
            response_model=Silence,
        )

    def delete(self, silence_id: str) -> Any:
        return self._request(
            "silences.delete", "DELETE", f"{SILENCES_PATH}/{_segment(silence_id)}", resource_id=silence_id
        )


class ConnectedAppsApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: ConnectedAppRequest) -> Any:
        return self._request(
            "connected_apps.create",
            "POST",
            CONNECTED_APPS_PATH,
            json_body=body,
            resource_id=body.name,
            response_model=ConnectedAppCreated,
        )

    def get(self, app_id: str) -> Any:
        return self._request(
            "connected_apps.get",
            "GET",
            f"{CONNECTED_APPS_PATH}/{_segment(app_id)}",
            resource_id=app_id,
            response_model=ConnectedApp,
        )

    def update(self, app_id: str, body: ConnectedAppRequest) -> Any:
        return self._request(
            "connected_apps.update",
            "PUT",
            f"{CONNECTED_APPS_PATH}/{_segment(app_id)}",
            json_body=body,
            resource_id=app_id,
        )

    def delete(self, app_id: str) -> Any:
        return self._request(
            "connected_apps.delete", "DELETE", f"{CONNECTED_APPS_PATH}/{_segment(app_id)}", resource_id=app_id
        )


class DataIntegrationsApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, integration_type: str, body: DataIntegrationRequest) -> Any:
        return self._request(
            "data_integrations.create",
            "POST",
            f"{DATA_INTEGRATIONS_PATH}/{_segment(integration_type)}",
            json_body=body,
            resource_id=body.name or integration_type,
            response_model=DataIntegration,
        )

    def get(self, integration_type: str, integration_id: str) -> Any:
        return self._request(
            "data_integrations.get",
            "GET",
            f"{DATA_INTEGRATIONS_PATH}/{_segment(integration_type)}/{_segment(integration_id)}",
            resource_id=integration_id,
            response_model=DataIntegration,
        )

    def update(self, integration_type: str, integration_id: str, body: DataIntegrationRequest) -> Any:
        return self._request(
            "data_integrations.update",
            "PUT",
            f"{DATA_INTEGRATIONS_PATH}/{_segment(integration_type)}/{_segment(integration_id)}",
            json_body=body,
            resource_id=integration_id,
            response_model=DataIntegration,
        )

    def delete(
        self,
        integration_type: str,
        integration_id: str,
        *,
        env: str | None = None,
        cluster: str | None = None,
        instance: str | None = None,
    ) -> Any:
        return self._request(
            "data_integrations.delete",
            "DELETE",
            f"{DATA_INTEGRATIONS_PATH}/{_segment(integration_type)}/{_segment(integration_id)}",
            query={"env": env or None, "cluster": cluster or None, "instance": instance or None},
            resource_id=integration_id,
        )


class IngestionKeysApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: CreateIngestionKeyRequest) -> Any:
        return self._request(
            "ingestion_keys.create",
            "POST",
            f"{INGESTION_KEYS_PATH}/create",
            json_body=body,
            resource_id=body.name,
            response_model=IngestionKey,
        )

    def list(self, body: ListIngestionKeysRequest | None = None) -> Any:
        body = body or ListIngestionKeysRequest()
        return self._request(
            "ingestion_keys.list",
            "POST",
            f"{INGESTION_KEYS_PATH}/list",
            json_body=body,
            resource_id=body.name,
            response_model=list[IngestionKey],
        )

    def delete(self, name: str) -> Any:
        return self._request(
            "ingestion_keys.delete",
            "DELETE",
            f"{INGESTION_KEYS_PATH}/delete",
            json_body=DeleteIngestionKeyRequest(name=name),
            resource_id=name,
        )


class LogsPipelineApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: ConfigEntryRequest) -> Any:
        return self._request(
            "logs_pipeline.create",
            "POST",
            LOGS_PIPELINE_PATH,
            json_body=body,
            resource_id=body.key,
            response_model=ConfigEntry,
        )

    def get(self) -> Any:
        return self._request("logs_pipeline.get", "GET", LOGS_PIPELINE_PATH, response_model=ConfigEntry)

    def update(self, body: ConfigEntryRequest) -> Any:
        return self._request(
            "logs_pipeline.update",
            "PUT",
            f"{LOGS_PIPELINE_PATH}/{_segment(body.key)}",
            json_body=body,
            resource_id=body.key,
            response_model=ConfigEntry,
        )

    def delete(self) -> Any:
        return self._request("logs_pipeline.delete", "DELETE", LOGS_PIPELINE_PATH, allow_statuses=(404,))


class MetricsAggregationApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, body: MetricsAggregationRequest) -> Any:
        return self._request(
            "metrics_aggregation.create",
            "POST",
            METRICS_AGGREGATION_PATH,
            json_body=body,
            response_model=MetricsAggregation,
        )

    def get(self) -> Any:
        return self._request(
            "metrics_aggregation.get", "GET", METRICS_AGGREGATION_PATH, response_model=MetricsAggregation
        )

    def update(self, body: MetricsAggregationRequest) -> Any:
        return self._request(
            "metrics_aggregation.update",
            "PUT",
            METRICS_AGGREGATION_PATH,
            json_body=body,
            response_model=MetricsAggregation,
        )

    def delete(self) -> Any:
        return self._request("metrics_aggregation.delete", "DELETE", METRICS_AGGREGATION_PATH)


class MonitorsApi:
    """Monitors are sent and returned as raw YAML documents."""

    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create(self, monitor_yaml: str, *, title: str | None = None) -> Any:
        return self._request(
            "monitors.create",
            "POST",
            MONITORS_PATH,
            yaml_body=monitor_yaml,
            resource_id=title,
            response_model=MonitorCreated,
        )

    def get(self, monitor_id: str) -> Any:
        return self._request("monitors.get", "GET", f"{MONITORS_PATH}/{_segment(monitor_id)}", resource_id=monitor_id)

    def update(self, monitor_id: str, monitor_yaml: str) -> Any:
        return self._request(
            "monitors.update",
            "PUT",
            f"{MONITORS_PATH}/{_segment(monitor_id)}",
            yaml_body=monitor_yaml,
            resource_id=monitor_id,
        )

    def delete(self, monitor_id: str) -> Any:
        return self._request(
            "monitors.delete", "DELETE", f"{MONITORS_PATH}/{_segment(monitor_id)}", resource_id=monitor_id
        )
