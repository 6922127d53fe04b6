"""Wire data models for groundcover API requests and responses.

Field names are snake_case in Python and camelCase on the wire. Request models
are serialized with ``exclude_unset`` so optional fields that were never set do
not appear in the payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")


class PolicyRef(WireModel):
    uuid: str
    name: str | None = None


# Policies


class PolicyFilter(WireModel):
    op: str
    value: str


class PolicyCondition(WireModel):
    key: str
    origin: str
    type: str
    filters: list[PolicyFilter] = Field(default_factory=list)


class SimpleDataScope(WireModel):
    operator: str
    conditions: list[PolicyCondition] = Field(default_factory=list)


class DataScope(WireModel):
    simple: SimpleDataScope | None = None


class CreatePolicyRequest(WireModel):
    name: str
    role: dict[str, str]
    description: str | None = None
    claim_role: str | None = None
    data_scope: DataScope | None = None


class UpdatePolicyRequest(CreatePolicyRequest):
    current_revision: int


class Policy(WireModel):
    uuid: str
    name: str
    role: dict[str, str] = Field(default_factory=dict)
    description: str | None = None
    claim_role: str | None = None
    data_scope: DataScope | None = None
    revision_number: int = 0
    read_only: bool = False


# Service accounts


class CreateServiceAccountRequest(WireModel):
    name: str
    email: str
    policy_uuids: list[str] = Field(default_factory=list, alias="policyUUIDs")
    description: str | None = None


class ServiceAccountCreated(WireModel):
    service_account_id: str


class UpdateServiceAccountRequest(WireModel):
    service_account_id: str
    email: str | None = None
    policy_uuids: list[str] | None = Field(default=None, alias="policyUUIDs")
    description: str | None = None


class ServiceAccount(WireModel):
    service_account_id: str
    name: str
    email: str | None = None
    description: str | None = None
    policies: list[PolicyRef] = Field(default_factory=list)


# API keys


class CreateApiKeyRequest(WireModel):
    name: str
    service_account_id: str
    description: str | None = None
    expiration_date: str | None = None


class ApiKeyCreated(WireModel):
    id: str
    api_key: str


class ApiKey(WireModel):
    id: str
    name: str
    description: str | None = None
    service_account_id: str | None = None
    created_by: str | None = None
    creation_date: str | None = None
    last_active: str | None = None
    revoked_at: str | None = None
    expired_at: str | None = None
    expiration_date: str | None = None
    policies: list[PolicyRef] = Field(default_factory=list)


# Dashboards


class CreateDashboardRequest(WireModel):
    name: str
    description: str | None = None
    team: str | None = None
    preset: str
    is_provisioned: bool = True


class UpdateDashboardRequest(CreateDashboardRequest):
    current_revision: int
    override: bool = False


class Dashboard(WireModel):
    uuid: str
    name: str
    description: str | None = None
    team: str | None = None
    preset: str = ""
    revision_number: int = 0
    owner: str | None = None
    status: str | None = None


# Silences


class SilenceMatcher(WireModel):
    name: str
    value: str
    is_equal: bool = True
    is_regex: bool = False

    def model_post_init(self, __context: Any) -> None:
        # The API reads a missing flag as false, so both are always sent.
        self.__pydantic_fields_set__.update({"is_equal", "is_regex"})


class SilenceRequest(WireModel):
    starts_at: str
    ends_at: str
    comment: str | None = None
    matchers: list[SilenceMatcher] = Field(default_factory=list)


class Silence(WireModel):
    id: str
    starts_at: str | None = None
    ends_at: str | None = None
    comment: str | None = None
    matchers: list[SilenceMatcher] = Field(default_factory=list)


# Connected apps


class ConnectedAppRequest(WireModel):
    name: str
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class ConnectedAppCreated(WireModel):
    id: str


class ConnectedApp(WireModel):
    id: str
    name: str
    type: str
    data: dict[str, Any] | None = None
    created_by: str | None = None
    created_at: str | None = None
    updated_by: str | None = None
    updated_at: str | None = None


# Data integrations


class DataIntegrationRequest(WireModel):
    config: str
    name: str | None = None
    cluster: str | None = None
    is_paused: bool | None = None
    tags: dict[str, str] | None = None


class DataIntegration(WireModel):
    id: str
    type: str
    config: str = ""
    name: str | None = None
    cluster: str | None = None
    is_paused: bool = False
    tags: dict[str, str] | None = None
    updated_at: str | None = None
    updated_by: str | None = None


# Ingestion keys


class CreateIngestionKeyRequest(WireModel):
    name: str
    type: str
    remote_config: bool | None = None
    tags: list[str] | None = None


class ListIngestionKeysRequest(WireModel):
    name: str | None = None
    type: str | None = None
    remote_config: bool | None = None


class DeleteIngestionKeyRequest(WireModel):
    name: str


class IngestionKey(WireModel):
    name: str
    key: str | None = None
    type: str | None = None
    created_by: str | None = None
    creation_date: str | None = None
    remote_config: bool | None = None
    tags: list[str] | None = None


# Logs pipeline


class OttlRule(WireModel):
    rule_name: str
    rule_disabled: bool = False
    conditions: list[str] = Field(default_factory=list)
    condition_logic_operator: str | None = None
    statements: list[str] = Field(default_factory=list)
    statements_error_mode: str | None = None


class OttlRuleList(WireModel):
    ottl_rules: list[OttlRule] = Field(default_factory=list)


class ConfigEntryRequest(WireModel):
    key: str
    value: str
    description: str | None = None


class ConfigEntry(WireModel):
    id: str | None = None
    key: str | None = None
    value: str | None = None
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


# Metrics aggregation


class MetricsAggregationRequest(WireModel):
    value: str


class MetricsAggregation(WireModel):
    uuid: str | None = None
    value: str | None = None
    created_timestamp: str | None = None


# Monitors


class MonitorCreated(WireModel):
    monitor_id: str = ""
