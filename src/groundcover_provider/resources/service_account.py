"""Service account resource adapter.

The API has no lookup by id, so reads scan the account list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import NotFoundError
from ..models import CreateServiceAccountRequest, ServiceAccount, UpdateServiceAccountRequest
from ._common import compact, delete_ignoring_absence

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceAccountState:
    name: str
    email: str
    policy_uuids: list[str] = field(default_factory=list)
    description: str | None = None
    id: str | None = None


def _from_account(account: ServiceAccount, plan: ServiceAccountState | None = None) -> ServiceAccountState:
    description = account.description
    if description is None and plan is not None:
        description = plan.description
    policy_uuids = sorted(policy.uuid for policy in account.policies)
    # Policy order is not significant upstream.
    if plan is not None and sorted(plan.policy_uuids) == policy_uuids:
        policy_uuids = list(plan.policy_uuids)
    return ServiceAccountState(
        name=account.name,
        email=account.email or (plan.email if plan else ""),
        policy_uuids=policy_uuids,
        description=description,
        id=account.service_account_id,
    )


class ServiceAccountResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.service_accounts

    def _find(self, service_account_id: str) -> ServiceAccount | None:
        for account in self._api.list() or []:
            if account.service_account_id == service_account_id:
                return account
        return None

    def create(self, plan: ServiceAccountState) -> ServiceAccountState:
        body = CreateServiceAccountRequest(
            name=plan.name,
            email=plan.email,
            policy_uuids=list(plan.policy_uuids),
            **compact(description=plan.description),
        )
        created = self._api.create(body)
        logger.debug("created service account %s (%s)", plan.name, created.service_account_id)
        return ServiceAccountState(
            name=plan.name,
            email=plan.email,
            policy_uuids=list(plan.policy_uuids),
            description=plan.description,
            id=created.service_account_id,
        )

    def read(self, state: ServiceAccountState) -> ServiceAccountState | None:
        account = self._find(state.id or "")
        if account is None:
            logger.warning("service account %s not found, removing from state", state.id)
            return None
        return _from_account(account, state)

    def update(self, state: ServiceAccountState, plan: ServiceAccountState) -> ServiceAccountState:
        service_account_id = state.id or ""
        body = UpdateServiceAccountRequest(
            service_account_id=service_account_id,
            email=plan.email,
            policy_uuids=list(plan.policy_uuids),
            **compact(description=plan.description),
        )
        self._api.update(service_account_id, body)

        account = self._find(service_account_id)
        if account is None:
            raise NotFoundError(
                f"service_accounts.update: service account '{service_account_id}' disappeared after update",
                operation="service_accounts.update",
                resource_id=service_account_id,
            )
        return _from_account(account, plan)

    def delete(self, state: ServiceAccountState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.id or ""), "service account", state.id or "")

    def import_state(self, service_account_id: str) -> ServiceAccountState:
        account = self._find(service_account_id)
        if account is None:
            raise NotFoundError(
                f"service_accounts.import: service account '{service_account_id}' not found",
                operation="service_accounts.import",
                resource_id=service_account_id,
            )
        return _from_account(account)
