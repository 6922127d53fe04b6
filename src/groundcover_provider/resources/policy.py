"""RBAC policy resource adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import CreatePolicyRequest, DataScope, Policy, UpdatePolicyRequest
from ._common import compact, delete_ignoring_absence, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PolicyState:
    name: str
    role: dict[str, str] = field(default_factory=dict)
    description: str | None = None
    claim_role: str | None = None
    data_scope: DataScope | None = None
    uuid: str | None = None
    revision_number: int | None = None
    read_only: bool | None = None


def _merge(policy: Policy, plan: PolicyState) -> PolicyState:
    return PolicyState(
        name=policy.name,
        role=dict(policy.role),
        description=policy.description if policy.description is not None else plan.description,
        claim_role=policy.claim_role if policy.claim_role is not None else plan.claim_role,
        data_scope=policy.data_scope if policy.data_scope is not None else plan.data_scope,
        uuid=policy.uuid,
        revision_number=policy.revision_number,
        read_only=policy.read_only,
    )


class PolicyResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.policies

    def create(self, plan: PolicyState) -> PolicyState:
        body = CreatePolicyRequest(
            name=plan.name,
            role=plan.role,
            **compact(description=plan.description, claim_role=plan.claim_role, data_scope=plan.data_scope),
        )
        policy = self._api.create(body)
        logger.debug("created policy %s (%s)", policy.name, policy.uuid)
        return _merge(policy, plan)

    def read(self, state: PolicyState) -> PolicyState | None:
        policy = read_or_none(lambda: self._api.get(state.uuid), "policy", state.uuid or "")
        if policy is None:
            return None
        return _merge(policy, state)

    def update(self, state: PolicyState, plan: PolicyState) -> PolicyState:
        body = UpdatePolicyRequest(
            name=plan.name,
            role=plan.role,
            current_revision=state.revision_number or 0,
            **compact(description=plan.description, claim_role=plan.claim_role, data_scope=plan.data_scope),
        )
        policy = self._api.update(state.uuid or "", body)
        return _merge(policy, plan)

    def delete(self, state: PolicyState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.uuid or ""), "policy", state.uuid or "")

    def import_state(self, uuid: str) -> PolicyState:
        policy = self._api.get(uuid)
        return _merge(policy, PolicyState(name=policy.name))
