from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import pytest
import yaml

from groundcover_provider.client import GroundcoverClient
from groundcover_provider.errors import ConflictError, GroundcoverError, NameCollisionError, NotFoundError
from groundcover_provider.models import SilenceMatcher
from groundcover_provider.protocols import ResourceAdapter
from groundcover_provider.resources import (
    ApiKeyResource,
    ApiKeyState,
    ConnectedAppResource,
    ConnectedAppState,
    DashboardResource,
    DashboardState,
    DataIntegrationResource,
    DataIntegrationState,
    IngestionKeyResource,
    IngestionKeyState,
    LogsPipelineResource,
    LogsPipelineState,
    MetricsAggregationResource,
    MetricsAggregationState,
    MonitorResource,
    MonitorState,
    PolicyResource,
    PolicyState,
    ServiceAccountResource,
    ServiceAccountState,
    SilenceResource,
    SilenceState,
    parse_import_id,
)
from groundcover_provider.resources.logs_pipeline import validate_ottl_rules
from groundcover_provider.values import StringValue, map_from_wire


class _Routes:
    """In-memory API: queued responses per (method, path); the last one repeats."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: httpx.Response) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(500, json={"error": f"unexpected {request.method} {request.url.path}"})
        template = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(template.status_code, headers=template.headers, content=template.content)

    def bodies(self, method: str, path: str) -> list[Any]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == method and request.url.path == path and request.content
        ]


def _client(routes: _Routes) -> GroundcoverClient:
    return GroundcoverClient(
        base_url="https://api.example.test",
        api_key="secret-key",
        backend_id="groundcover",
        transport=httpx.MockTransport(routes),
        retry_sleep=lambda _delay: None,
    )


def _ok(payload: Any = None) -> httpx.Response:
    if payload is None:
        return httpx.Response(200)
    return httpx.Response(200, json=payload)


_POLICY = {"uuid": "p-1", "name": "viewer", "role": {"read": "*"}, "revisionNumber": 3}


@pytest.mark.parametrize(
    "adapter_type",
    [
        ApiKeyResource,
        ConnectedAppResource,
        DashboardResource,
        DataIntegrationResource,
        IngestionKeyResource,
        LogsPipelineResource,
        MetricsAggregationResource,
        MonitorResource,
        PolicyResource,
        ServiceAccountResource,
        SilenceResource,
    ],
)
def test_every_adapter_implements_the_lifecycle(adapter_type: type) -> None:
    client = _client(_Routes())
    try:
        assert isinstance(adapter_type(client), ResourceAdapter)
    finally:
        client.close()


# Policies


def test_policy_read_of_missing_id_returns_none() -> None:
    routes = _Routes()
    routes.on("GET", "/api/rbac/policies/missing-id", httpx.Response(404))
    client = _client(routes)
    try:
        result = PolicyResource(client).read(PolicyState(name="viewer", uuid="missing-id"))
    finally:
        client.close()

    assert result is None


def test_policy_delete_twice_succeeds() -> None:
    routes = _Routes()
    routes.on("DELETE", "/api/rbac/policies/p-1", _ok(), httpx.Response(404, json={"error": "policy not found"}))
    client = _client(routes)
    resource = PolicyResource(client)
    try:
        resource.delete(PolicyState(name="viewer", uuid="p-1"))
        resource.delete(PolicyState(name="viewer", uuid="p-1"))
    finally:
        client.close()

    assert len(routes.requests) == 2


def test_policy_create_name_collision() -> None:
    routes = _Routes()
    routes.on("POST", "/api/rbac/policies", httpx.Response(409, json={"error": "conflict"}))
    client = _client(routes)
    try:
        with pytest.raises(NameCollisionError) as exc_info:
            PolicyResource(client).create(PolicyState(name="dup-policy", role={"read": "*"}))
    finally:
        client.close()

    assert str(exc_info.value) == (
        "policy name 'dup-policy' was previously used or is currently in use. Please choose a different name"
    )


def test_policy_update_sends_current_revision_and_surfaces_conflicts() -> None:
    routes = _Routes()
    routes.on("PUT", "/api/rbac/policies/p-1", httpx.Response(409, json={"error": "revision mismatch"}))
    client = _client(routes)
    state = PolicyState(name="viewer", role={"read": "*"}, uuid="p-1", revision_number=3)
    try:
        with pytest.raises(ConflictError):
            PolicyResource(client).update(state, PolicyState(name="viewer", role={"read": "*", "write": "*"}))
    finally:
        client.close()

    body = routes.bodies("PUT", "/api/rbac/policies/p-1")[0]
    assert body["currentRevision"] == 3
    assert body["role"] == {"read": "*", "write": "*"}


def test_policy_import_reads_by_uuid() -> None:
    routes = _Routes()
    routes.on("GET", "/api/rbac/policies/p-1", _ok(_POLICY))
    client = _client(routes)
    try:
        state = PolicyResource(client).import_state("p-1")
    finally:
        client.close()

    assert (state.uuid, state.name, state.revision_number) == ("p-1", "viewer", 3)


# Service accounts

_ACCOUNTS = [
    {
        "serviceAccountId": "sa-1",
        "name": "ci-bot",
        "email": "ci@example.test",
        "policies": [{"uuid": "p-2"}, {"uuid": "p-1"}],
    }
]


def test_service_account_read_scans_listing_and_keeps_policy_order() -> None:
    routes = _Routes()
    routes.on("GET", "/api/rbac/service-accounts", _ok(_ACCOUNTS))
    client = _client(routes)
    state = ServiceAccountState(name="ci-bot", email="ci@example.test", policy_uuids=["p-2", "p-1"], id="sa-1")
    try:
        refreshed = ServiceAccountResource(client).read(state)
        missing = ServiceAccountResource(client).read(ServiceAccountState(name="x", email="x", id="sa-9"))
    finally:
        client.close()

    assert refreshed is not None
    assert refreshed.policy_uuids == ["p-2", "p-1"]
    assert missing is None


def test_service_account_update_fails_when_account_disappears() -> None:
    routes = _Routes()
    routes.on("PUT", "/api/rbac/service-accounts/sa-1", _ok())
    routes.on("GET", "/api/rbac/service-accounts", _ok([]))
    client = _client(routes)
    state = ServiceAccountState(name="ci-bot", email="ci@example.test", id="sa-1")
    try:
        with pytest.raises(NotFoundError):
            ServiceAccountResource(client).update(state, state)
    finally:
        client.close()

    body = routes.bodies("PUT", "/api/rbac/service-accounts/sa-1")[0]
    assert body["serviceAccountId"] == "sa-1"
    assert body["policyUUIDs"] == []


def test_service_account_delete_bad_request_counts_as_deleted() -> None:
    routes = _Routes()
    routes.on("DELETE", "/api/rbac/service-accounts/sa-1", httpx.Response(400, json={"error": "no such account"}))
    client = _client(routes)
    try:
        ServiceAccountResource(client).delete(ServiceAccountState(name="ci-bot", email="x", id="sa-1"))
    finally:
        client.close()


# API keys

_KEY = {"id": "k-1", "name": "ci-key", "serviceAccountId": "sa-1", "creationDate": "2026-01-01T00:00:00Z"}


def test_api_key_create_keeps_secret_and_refreshes_from_listing() -> None:
    routes = _Routes()
    routes.on("POST", "/api/rbac/api-keys", _ok({"id": "k-1", "apiKey": "gcsa_secret"}))
    routes.on("GET", "/api/rbac/api-keys", _ok([_KEY]))
    client = _client(routes)
    try:
        state = ApiKeyResource(client).create(ApiKeyState(name="ci-key", service_account_id="sa-1"))
    finally:
        client.close()

    assert state.id == "k-1"
    assert state.api_key == "gcsa_secret"
    assert state.creation_date == "2026-01-01T00:00:00Z"


def test_api_key_read_falls_back_to_revoked_listing() -> None:
    routes = _Routes()
    revoked = dict(_KEY, revokedAt="2026-02-01T00:00:00Z")
    routes.on("GET", "/api/rbac/api-keys", _ok([]), _ok([revoked]))
    client = _client(routes)
    try:
        state = ApiKeyResource(client).read(ApiKeyState(name="ci-key", service_account_id="sa-1", id="k-1"))
    finally:
        client.close()

    assert state is not None
    assert state.revoked_at == "2026-02-01T00:00:00Z"
    assert routes.requests[1].url.params["withRevoked"] == "true"


def test_api_key_update_makes_no_network_call() -> None:
    routes = _Routes()
    client = _client(routes)
    state = ApiKeyState(name="ci-key", service_account_id="sa-1", id="k-1", api_key="gcsa_secret")
    try:
        result = ApiKeyResource(client).update(state, ApiKeyState(name="renamed", service_account_id="sa-1"))
    finally:
        client.close()

    assert result is state
    assert routes.requests == []


def test_api_key_expiration_must_be_rfc3339() -> None:
    routes = _Routes()
    client = _client(routes)
    try:
        with pytest.raises(ValueError, match="expiration_date"):
            ApiKeyResource(client).create(
                ApiKeyState(name="ci-key", service_account_id="sa-1", expiration_date="2026-01-01")
            )
    finally:
        client.close()

    assert routes.requests == []


# Dashboards

_SERVER_PRESET = '{"title":"latency","panels":[]}'
_PLANNED_PRESET = '{\n  "panels": [],\n  "title": "latency"\n}'


def _dashboard(revision: int, **extra: Any) -> dict[str, Any]:
    return {"uuid": "d-1", "name": "latency", "preset": _SERVER_PRESET, "revisionNumber": revision, **extra}


def test_dashboard_update_uses_server_revision(caplog: pytest.LogCaptureFixture) -> None:
    routes = _Routes()
    routes.on("GET", "/api/dashboards/d-1", _ok(_dashboard(5)))
    routes.on("PUT", "/api/dashboards/d-1", _ok(_dashboard(6)))
    client = _client(routes)
    state = DashboardState(name="latency", preset=_PLANNED_PRESET, uuid="d-1", revision_number=3)
    try:
        with caplog.at_level(logging.WARNING, logger="groundcover_provider.resources.dashboard"):
            updated = DashboardResource(client).update(state, DashboardState(name="latency", preset=_PLANNED_PRESET))
    finally:
        client.close()

    body = routes.bodies("PUT", "/api/dashboards/d-1")[0]
    assert body["currentRevision"] == 5
    assert body["isProvisioned"] is True
    assert body["override"] is False
    assert updated.revision_number == 6
    assert updated.preset == _PLANNED_PRESET
    assert updated.team is None
    assert any("changed outside of configuration" in record.getMessage() for record in caplog.records)


def test_dashboard_update_warns_when_revision_does_not_advance(caplog: pytest.LogCaptureFixture) -> None:
    routes = _Routes()
    routes.on("GET", "/api/dashboards/d-1", _ok(_dashboard(5)))
    routes.on("PUT", "/api/dashboards/d-1", _ok(_dashboard(5)))
    client = _client(routes)
    state = DashboardState(name="latency", preset=_PLANNED_PRESET, uuid="d-1", revision_number=5)
    try:
        with caplog.at_level(logging.WARNING, logger="groundcover_provider.resources.dashboard"):
            DashboardResource(client).update(state, state)
    finally:
        client.close()

    assert any("expected greater than 5" in record.getMessage() for record in caplog.records)


def test_dashboard_read_replaces_semantically_different_preset() -> None:
    routes = _Routes()
    routes.on("GET", "/api/dashboards/d-1", _ok(_dashboard(7, team="")))
    client = _client(routes)
    try:
        state = DashboardResource(client).read(DashboardState(name="latency", preset='{"title": "old"}', uuid="d-1"))
    finally:
        client.close()

    assert state is not None
    assert state.preset == _SERVER_PRESET
    assert state.team is None


def test_dashboard_plan_keeps_stored_preset_when_only_formatting_changes() -> None:
    client = _client(_Routes())
    resource = DashboardResource(client)
    state = DashboardState(name="latency", preset=_SERVER_PRESET, uuid="d-1", revision_number=7)
    try:
        reformatted = resource.modify_plan(state, DashboardState(name="latency", preset=_PLANNED_PRESET))
        changed = resource.modify_plan(state, DashboardState(name="latency", preset='{"title": "p99"}'))
        unparseable = resource.modify_plan(state, DashboardState(name="latency", preset="{broken"))
    finally:
        client.close()

    assert reformatted.preset == _SERVER_PRESET
    assert changed.preset == '{"title": "p99"}'
    assert unparseable.preset == "{broken"


# Silences


def test_silence_rejects_non_rfc3339_timestamps() -> None:
    routes = _Routes()
    client = _client(routes)
    plan = SilenceState(starts_at="2026-01-01", ends_at="2026-01-02T00:00:00Z")
    try:
        with pytest.raises(ValueError, match="starts_at"):
            SilenceResource(client).create(plan)
    finally:
        client.close()

    assert routes.requests == []


def test_silence_create_round_trips_matchers() -> None:
    routes = _Routes()
    silence = {
        "id": "s-1",
        "startsAt": "2026-01-01T00:00:00Z",
        "endsAt": "2026-01-02T00:00:00Z",
        "matchers": [{"name": "workload", "value": "api", "isEqual": True, "isRegex": False}],
    }
    routes.on("POST", "/api/silences", _ok(silence))
    client = _client(routes)
    plan = SilenceState(
        starts_at="2026-01-01T00:00:00Z",
        ends_at="2026-01-02T00:00:00Z",
        matchers=[SilenceMatcher(name="workload", value="api")],
    )
    try:
        state = SilenceResource(client).create(plan)
    finally:
        client.close()

    assert state.id == "s-1"
    assert state.matchers[0].name == "workload"


# Connected apps


def test_connected_app_create_reads_back_the_app() -> None:
    routes = _Routes()
    routes.on("POST", "/api/connected-apps", _ok({"id": "app-1"}))
    routes.on(
        "GET",
        "/api/connected-apps/app-1",
        _ok({"id": "app-1", "name": "slack", "type": "slack-webhook", "data": {"url": "https://hooks.example.test"}}),
    )
    client = _client(routes)
    plan = ConnectedAppState(name="slack", type="slack-webhook", data=map_from_wire({"url": "https://hooks.example.test"}))
    try:
        state = ConnectedAppResource(client).create(plan)
    finally:
        client.close()

    assert routes.bodies("POST", "/api/connected-apps")[0]["data"] == {"url": "https://hooks.example.test"}
    assert state.id == "app-1"
    assert state.data["url"] == StringValue("https://hooks.example.test")


# Data integrations


def test_data_integration_import_and_delete() -> None:
    routes = _Routes()
    routes.on(
        "GET",
        "/api/integrations/data/config/kafka/i-1",
        _ok({"id": "i-1", "type": "kafka", "config": '{"brokers":["b1"]}', "cluster": "prod"}),
    )
    routes.on("DELETE", "/api/integrations/data/config/kafka/i-1", httpx.Response(404))
    client = _client(routes)
    resource = DataIntegrationResource(client)
    try:
        state = resource.import_state("kafka:i-1")
        resource.delete(state)
    finally:
        client.close()

    assert (state.type, state.id, state.cluster) == ("kafka", "i-1", "prod")
    assert state.config == '{"brokers":["b1"]}'
    assert routes.requests[-1].url.params["cluster"] == "prod"


def test_data_integration_delete_forwards_scope_parameters() -> None:
    routes = _Routes()
    routes.on("DELETE", "/api/integrations/data/config/kafka/i-1", _ok())
    client = _client(routes)
    state = DataIntegrationState(type="kafka", config="{}", id="i-1", env="staging", cluster="prod", instance="broker-2")
    try:
        DataIntegrationResource(client).delete(state)
    finally:
        client.close()

    params = routes.requests[0].url.params
    assert (params["env"], params["cluster"], params["instance"]) == ("staging", "prod", "broker-2")


def test_data_integration_read_keeps_local_scope() -> None:
    routes = _Routes()
    routes.on("GET", "/api/integrations/data/config/kafka/i-1", _ok({"id": "i-1", "type": "kafka", "config": "{}"}))
    client = _client(routes)
    try:
        state = DataIntegrationResource(client).read(
            DataIntegrationState(type="kafka", config="{}", id="i-1", env="staging", instance="broker-2")
        )
    finally:
        client.close()

    assert state is not None
    assert (state.env, state.instance) == ("staging", "broker-2")


def test_data_integration_empty_body_means_absent() -> None:
    routes = _Routes()
    routes.on("GET", "/api/integrations/data/config/kafka/i-1", _ok())
    client = _client(routes)
    try:
        state = DataIntegrationResource(client).read(DataIntegrationState(type="kafka", config="{}", id="i-1"))
    finally:
        client.close()

    assert state is None


def test_data_integration_config_must_be_json() -> None:
    routes = _Routes()
    client = _client(routes)
    try:
        with pytest.raises(ValueError, match="valid JSON"):
            DataIntegrationResource(client).create(DataIntegrationState(type="kafka", config="{brokers"))
    finally:
        client.close()

    assert routes.requests == []


@pytest.mark.parametrize(
    ("import_id", "expected"),
    [("kafka:i-1", ("kafka", "i-1")), ("kafka:ns:i-1", ("kafka", "ns:i-1"))],
)
def test_parse_import_id_splits_on_first_colon(import_id: str, expected: tuple[str, str]) -> None:
    assert parse_import_id(import_id) == expected


@pytest.mark.parametrize("import_id", ["kafka", ":i-1", "kafka:", ""])
def test_parse_import_id_rejects_malformed_ids(import_id: str) -> None:
    with pytest.raises(ValueError):
        parse_import_id(import_id)


# Ingestion keys

_INGESTION_LIST = "/api/rbac/ingestion-keys/list"


def test_ingestion_key_read_polls_until_visible() -> None:
    routes = _Routes()
    routes.on("POST", _INGESTION_LIST, _ok([]), _ok([]), _ok([{"name": "sensor-a", "type": "sensor", "key": "k"}]))
    client = _client(routes)
    sleeps: list[float] = []
    try:
        state = IngestionKeyResource(client, sleep=sleeps.append).read(IngestionKeyState(name="sensor-a", type="sensor"))
    finally:
        client.close()

    assert state is not None
    assert state.id == "sensor-a"
    assert state.key == "k"
    assert sleeps == [1.0, 1.0]
    assert routes.bodies("POST", _INGESTION_LIST)[0] == {"name": "sensor-a"}


def test_ingestion_key_read_gives_up_after_timeout() -> None:
    routes = _Routes()
    routes.on("POST", _INGESTION_LIST, _ok([]))
    client = _client(routes)
    try:
        resource = IngestionKeyResource(client, read_timeout_seconds=3, read_interval_seconds=1, sleep=lambda _d: None)
        state = resource.read(IngestionKeyState(name="sensor-a", type="sensor"))
    finally:
        client.close()

    assert state is None
    assert len(routes.requests) == 3


def test_ingestion_key_update_is_a_no_op() -> None:
    routes = _Routes()
    client = _client(routes)
    state = IngestionKeyState(name="sensor-a", type="sensor", id="sensor-a")
    try:
        assert IngestionKeyResource(client).update(state, IngestionKeyState(name="sensor-a", type="other")) is state
    finally:
        client.close()

    assert routes.requests == []


# Logs pipeline

_LOGS_PATH = "/api/pipelines/logs/config"


def test_logs_pipeline_round_trips_as_json() -> None:
    routes = _Routes()
    entry = {"key": "logs", "value": "ottlRules: []\n", "updatedAt": "2026-03-01T00:00:00Z"}
    routes.on("POST", _LOGS_PATH, _ok(entry))
    routes.on("GET", _LOGS_PATH, _ok(entry))
    client = _client(routes)
    resource = LogsPipelineResource(client)
    try:
        created = resource.create(LogsPipelineState(key="logs", value="ottlRules: []\n"))
        state = resource.read(created)
    finally:
        client.close()

    assert routes.requests[0].headers["content-type"] == "application/json"
    assert routes.bodies("POST", _LOGS_PATH) == [{"key": "logs", "value": "ottlRules: []\n"}]
    assert state is not None
    assert state.value == "ottlRules: []\n"
    assert state.updated_at == "2026-03-01T00:00:00Z"


def test_logs_pipeline_delete_tolerates_missing_config() -> None:
    routes = _Routes()
    routes.on("DELETE", _LOGS_PATH, httpx.Response(404))
    client = _client(routes)
    try:
        LogsPipelineResource(client).delete(LogsPipelineState(key="logs", value=""))
    finally:
        client.close()

    assert len(routes.requests) == 1


def test_validate_ottl_rules() -> None:
    rules = validate_ottl_rules(
        "ottlRules:\n  - ruleName: drop-debug\n    conditions: ['level == \"debug\"']\n    statements: ['drop()']\n"
    )

    assert rules.ottl_rules[0].rule_name == "drop-debug"
    assert validate_ottl_rules("").ottl_rules == []
    with pytest.raises(ValueError):
        validate_ottl_rules("ottlRules: [unclosed")
    with pytest.raises(ValueError):
        validate_ottl_rules("ottlRules: 5")


# Metrics aggregation

_METRICS_PATH = "/api/pipelines/metrics/aggregations/config"


def test_metrics_aggregation_read_of_empty_config_returns_none() -> None:
    routes = _Routes()
    routes.on("GET", _METRICS_PATH, _ok({"value": ""}))
    client = _client(routes)
    try:
        state = MetricsAggregationResource(client).read(MetricsAggregationState(value="aggregations: []\n"))
    finally:
        client.close()

    assert state is None


def test_metrics_aggregation_read_tracks_update_time() -> None:
    routes = _Routes()
    routes.on("GET", _METRICS_PATH, _ok({"value": "aggregations: []\n", "createdTimestamp": "2026-03-01T00:00:00Z"}))
    client = _client(routes)
    try:
        state = MetricsAggregationResource(client).read(MetricsAggregationState(value="aggregations: []\n"))
    finally:
        client.close()

    assert state is not None
    assert state.updated_at == "2026-03-01T00:00:00Z"


# Monitors

_MONITOR_YAML = "title: cpu\nmodel:\n  queries: []\nevaluationInterval:\n  interval: 1m\n"


def _yaml(text: str) -> httpx.Response:
    # The monitors API answers GETs without a YAML content type.
    return httpx.Response(200, content=text.encode(), headers={"Content-Type": "text/plain"})


def test_monitor_create_sends_sorted_yaml_and_keeps_planned_text() -> None:
    routes = _Routes()
    routes.on("POST", "/api/monitors", _ok({"monitorId": "m-1"}))
    client = _client(routes)
    try:
        state = MonitorResource(client).create(MonitorState(monitor_yaml=_MONITOR_YAML))
    finally:
        client.close()

    request = routes.requests[0]
    assert request.headers["content-type"] == "application/x-yaml"
    assert request.content == b"evaluationInterval:\n  interval: 1m\nmodel:\n  queries: []\ntitle: cpu\n"
    assert state == MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1")


def test_monitor_create_without_id_fails() -> None:
    routes = _Routes()
    routes.on("POST", "/api/monitors", _ok({}))
    client = _client(routes)
    try:
        with pytest.raises(GroundcoverError, match="monitor id"):
            MonitorResource(client).create(MonitorState(monitor_yaml=_MONITOR_YAML))
    finally:
        client.close()


def test_monitor_create_rejects_documents_that_are_not_mappings() -> None:
    routes = _Routes()
    client = _client(routes)
    try:
        with pytest.raises(ValueError, match="mapping"):
            MonitorResource(client).create(MonitorState(monitor_yaml="- cpu\n"))
        with pytest.raises(ValueError, match="invalid YAML"):
            MonitorResource(client).create(MonitorState(monitor_yaml="title: [cpu\n"))
    finally:
        client.close()

    assert routes.requests == []


def test_monitor_read_ignores_server_defaults_and_formatting() -> None:
    routes = _Routes()
    server = (
        "evaluationInterval:\n  interval: 1m0s\n  pendingFor: 0s\n"
        "id: m-1\nisPaused: false\nmodel:\n  queries: []\ntitle: cpu\n"
    )
    routes.on("GET", "/api/monitors/m-1", _yaml(server))
    client = _client(routes)
    try:
        state = MonitorResource(client).read(MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1"))
    finally:
        client.close()

    assert state == MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1")


def test_monitor_read_adopts_server_document_on_real_drift() -> None:
    routes = _Routes()
    routes.on("GET", "/api/monitors/m-1", _yaml("title: memory\nmodel:\n  queries: []\n"))
    client = _client(routes)
    try:
        state = MonitorResource(client).read(MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1"))
    finally:
        client.close()

    assert state is not None
    assert yaml.safe_load(state.monitor_yaml) == {"title": "memory", "model": {"queries": []}}


def test_monitor_read_of_missing_id_returns_none_and_delete_is_idempotent() -> None:
    routes = _Routes()
    routes.on("GET", "/api/monitors/m-1", httpx.Response(404))
    routes.on("DELETE", "/api/monitors/m-1", httpx.Response(404))
    client = _client(routes)
    resource = MonitorResource(client)
    state = MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1")
    try:
        assert resource.read(state) is None
        resource.delete(state)
    finally:
        client.close()


def test_monitor_update_and_import() -> None:
    routes = _Routes()
    routes.on("PUT", "/api/monitors/m-1", _ok())
    routes.on("GET", "/api/monitors/m-1", _yaml("title: cpu\nseverity: S2\n"))
    client = _client(routes)
    resource = MonitorResource(client)
    try:
        updated = resource.update(
            MonitorState(monitor_yaml=_MONITOR_YAML, id="m-1"), MonitorState(monitor_yaml="title: cpu\nseverity: S2\n")
        )
        imported = resource.import_state("m-1")
    finally:
        client.close()

    assert routes.requests[0].content == b"severity: S2\ntitle: cpu\n"
    assert updated == MonitorState(monitor_yaml="title: cpu\nseverity: S2\n", id="m-1")
    assert imported.id == "m-1"
    assert yaml.safe_load(imported.monitor_yaml) == {"title": "cpu", "severity": "S2"}


def test_monitor_plan_suppresses_formatting_only_changes() -> None:
    client = _client(_Routes())
    resource = MonitorResource(client)
    stored = "id: m-1\nmodel:\n  queries: []\ntitle: cpu\nevaluationInterval:\n  interval: 1m0s\n"
    state = MonitorState(monitor_yaml=stored, id="m-1")
    try:
        same = resource.modify_plan(state, MonitorState(monitor_yaml=_MONITOR_YAML))
        renamed = resource.modify_plan(state, MonitorState(monitor_yaml=_MONITOR_YAML.replace("cpu", "memory")))
    finally:
        client.close()

    assert same.monitor_yaml == stored
    assert renamed.monitor_yaml == _MONITOR_YAML.replace("cpu", "memory")
