"""Data integration resource adapter.

Integrations are addressed by type and id; imports use ``"<type>:<id>"``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import NotFoundError
from ..jsonutil import keep_equivalent_json
from ..models import DataIntegration, DataIntegrationRequest
from ._common import compact, delete_ignoring_absence, parse_import_id, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient


@dataclass(slots=True)
class DataIntegrationState:
    type: str
    config: str
    cluster: str | None = None
    env: str | None = None
    instance: str | None = None
    id: str | None = None
    is_paused: bool | None = None
    name: str | None = None
    tags: dict[str, str] | None = None
    updated_at: str | None = None
    updated_by: str | None = None


def _request_for(plan: DataIntegrationState) -> DataIntegrationRequest:
    try:
        json.loads(plan.config)
    except ValueError as error:
        raise ValueError(f"config must be valid JSON: {error}") from error
    return DataIntegrationRequest(config=plan.config, **compact(cluster=plan.cluster))


def _merge(integration: DataIntegration, local: DataIntegrationState) -> DataIntegrationState:
    return DataIntegrationState(
        type=integration.type or local.type,
        config=keep_equivalent_json(local.config, integration.config),
        cluster=integration.cluster if integration.cluster else local.cluster,
        env=local.env,
        instance=local.instance,
        id=integration.id,
        is_paused=integration.is_paused,
        name=integration.name,
        tags=dict(integration.tags) if integration.tags else None,
        updated_at=integration.updated_at,
        updated_by=integration.updated_by,
    )


class DataIntegrationResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.data_integrations

    def create(self, plan: DataIntegrationState) -> DataIntegrationState:
        return _merge(self._api.create(plan.type, _request_for(plan)), plan)

    def read(self, state: DataIntegrationState) -> DataIntegrationState | None:
        integration = read_or_none(
            lambda: self._api.get(state.type, state.id or ""), "data integration", state.id or ""
        )
        # An empty body also means the integration is gone.
        if integration is None:
            return None
        return _merge(integration, state)

    def update(self, state: DataIntegrationState, plan: DataIntegrationState) -> DataIntegrationState:
        return _merge(self._api.update(state.type, state.id or "", _request_for(plan)), plan)

    def delete(self, state: DataIntegrationState) -> None:
        delete_ignoring_absence(
            lambda: self._api.delete(
                state.type, state.id or "", env=state.env, cluster=state.cluster, instance=state.instance
            ),
            "data integration",
            state.id or "",
        )

    def import_state(self, import_id: str) -> DataIntegrationState:
        integration_type, integration_id = parse_import_id(import_id)
        integration = self._api.get(integration_type, integration_id)
        if integration is None:
            raise NotFoundError(
                f"data_integrations.import: data integration '{import_id}' not found",
                operation="data_integrations.import",
                resource_id=import_id,
            )
        return _merge(integration, DataIntegrationState(type=integration_type, config=integration.config))
