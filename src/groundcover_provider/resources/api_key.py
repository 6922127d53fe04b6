"""API key resource adapter.

API keys are immutable once created; changing any attribute replaces the key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import NotFoundError
from ..models import ApiKey, CreateApiKeyRequest, PolicyRef
from ._common import compact, delete_ignoring_absence, require_rfc3339

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiKeyState:
    name: str
    service_account_id: str
    description: str | None = None
    expiration_date: str | None = None
    id: str | None = None
    api_key: str | None = None
    created_by: str | None = None
    creation_date: str | None = None
    last_active: str | None = None
    revoked_at: str | None = None
    expired_at: str | None = None
    policies: list[PolicyRef] = field(default_factory=list)


def _merge(key: ApiKey, state: ApiKeyState) -> ApiKeyState:
    return ApiKeyState(
        name=key.name,
        service_account_id=key.service_account_id or state.service_account_id,
        description=key.description if key.description is not None else state.description,
        expiration_date=key.expiration_date or state.expiration_date,
        id=key.id,
        # The secret is only returned on creation.
        api_key=state.api_key,
        created_by=key.created_by,
        creation_date=key.creation_date,
        last_active=key.last_active,
        revoked_at=key.revoked_at,
        expired_at=key.expired_at,
        policies=list(key.policies),
    )


class ApiKeyResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.api_keys

    def _find(self, api_key_id: str) -> ApiKey | None:
        for key in self._api.list() or []:
            if key.id == api_key_id:
                return key
        for key in self._api.list(with_revoked=True, with_expired=True) or []:
            if key.id == api_key_id:
                return key
        return None

    def create(self, plan: ApiKeyState) -> ApiKeyState:
        if plan.expiration_date is not None:
            require_rfc3339(plan.expiration_date, "expiration_date")

        body = CreateApiKeyRequest(
            name=plan.name,
            service_account_id=plan.service_account_id,
            **compact(description=plan.description, expiration_date=plan.expiration_date),
        )
        created = self._api.create(body)
        state = ApiKeyState(
            name=plan.name,
            service_account_id=plan.service_account_id,
            description=plan.description,
            expiration_date=plan.expiration_date,
            id=created.id,
            api_key=created.api_key,
        )

        key = self._find(created.id)
        if key is None:
            logger.warning("API key %s not visible in listing right after creation", created.id)
            return state
        return _merge(key, state)

    def read(self, state: ApiKeyState) -> ApiKeyState | None:
        key = self._find(state.id or "")
        if key is None:
            logger.warning("API key %s not found, removing from state", state.id)
            return None
        return _merge(key, state)

    def update(self, state: ApiKeyState, plan: ApiKeyState) -> ApiKeyState:
        logger.warning("API key %s cannot be updated in place; changes require replacement", state.id)
        return state

    def delete(self, state: ApiKeyState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.id or ""), "API key", state.id or "")

    def import_state(self, api_key_id: str) -> ApiKeyState:
        key = self._find(api_key_id)
        if key is None:
            raise NotFoundError(
                f"api_keys.import: API key '{api_key_id}' not found",
                operation="api_keys.import",
                resource_id=api_key_id,
            )
        return _merge(key, ApiKeyState(name=key.name, service_account_id=key.service_account_id or ""))
