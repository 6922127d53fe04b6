"""Logs pipeline resource adapter.

The pipeline is a singleton configuration object. Its ``value`` is a YAML
document listing OTTL rules, validated locally before it is sent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from ..models import ConfigEntry, ConfigEntryRequest, OttlRuleList
from ._common import compact, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LogsPipelineState:
    key: str
    value: str
    description: str | None = None
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


def validate_ottl_rules(value: str) -> OttlRuleList:
    try:
        document = yaml.safe_load(value)
    except yaml.YAMLError as error:
        raise ValueError(f"logs pipeline value is not valid YAML: {error}") from error
    if document is None:
        return OttlRuleList()
    try:
        return OttlRuleList.model_validate(document)
    except ValidationError as error:
        raise ValueError(f"logs pipeline value is not a valid OTTL rule list: {error}") from error


def _request_for(plan: LogsPipelineState) -> ConfigEntryRequest:
    validate_ottl_rules(plan.value)
    return ConfigEntryRequest(key=plan.key, value=plan.value, **compact(description=plan.description))


def _merge(entry: ConfigEntry | None, local: LogsPipelineState) -> LogsPipelineState:
    if entry is None:
        return local
    return LogsPipelineState(
        key=entry.key or local.key,
        value=entry.value if entry.value is not None else local.value,
        description=entry.description if entry.description is not None else local.description,
        id=entry.id or local.id,
        created_at=entry.created_at or local.created_at,
        updated_at=entry.updated_at or local.updated_at,
    )


class LogsPipelineResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.logs_pipeline

    def create(self, plan: LogsPipelineState) -> LogsPipelineState:
        return _merge(self._api.create(_request_for(plan)), plan)

    def read(self, state: LogsPipelineState) -> LogsPipelineState | None:
        entry = read_or_none(self._api.get, "logs pipeline", state.key)
        if entry is None:
            return None
        return _merge(entry, state)

    def update(self, state: LogsPipelineState, plan: LogsPipelineState) -> LogsPipelineState:
        return _merge(self._api.update(_request_for(plan)), plan)

    def delete(self, state: LogsPipelineState) -> None:
        self._api.delete()
        logger.debug("deleted logs pipeline %s", state.key)

    def import_state(self, key: str) -> LogsPipelineState:
        entry = self._api.get()
        return _merge(entry, LogsPipelineState(key=key, value=""))
