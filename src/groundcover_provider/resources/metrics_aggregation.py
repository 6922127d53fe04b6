"""Metrics aggregation resource adapter (singleton configuration)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import yaml

from ..models import MetricsAggregation, MetricsAggregationRequest
from ._common import delete_ignoring_absence, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)

SINGLETON_ID = "metrics-aggregation"


@dataclass(slots=True)
class MetricsAggregationState:
    value: str
    updated_at: str | None = None


def _request_for(plan: MetricsAggregationState) -> MetricsAggregationRequest:
    try:
        yaml.safe_load(plan.value)
    except yaml.YAMLError as error:
        raise ValueError(f"metrics aggregation value is not valid YAML: {error}") from error
    return MetricsAggregationRequest(value=plan.value)


def _merge(config: MetricsAggregation, local: MetricsAggregationState) -> MetricsAggregationState:
    return MetricsAggregationState(
        value=config.value if config.value is not None else local.value,
        updated_at=config.created_timestamp or local.updated_at,
    )


class MetricsAggregationResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.metrics_aggregation

    def create(self, plan: MetricsAggregationState) -> MetricsAggregationState:
        return _merge(self._api.create(_request_for(plan)), plan)

    def read(self, state: MetricsAggregationState) -> MetricsAggregationState | None:
        config = read_or_none(self._api.get, "metrics aggregation", SINGLETON_ID)
        if config is None or not config.value:
            logger.warning("metrics aggregation config is empty, removing from state")
            return None
        return _merge(config, state)

    def update(self, state: MetricsAggregationState, plan: MetricsAggregationState) -> MetricsAggregationState:
        return _merge(self._api.update(_request_for(plan)), plan)

    def delete(self, state: MetricsAggregationState) -> None:
        delete_ignoring_absence(self._api.delete, "metrics aggregation", SINGLETON_ID)

    def import_state(self, _import_id: str = SINGLETON_ID) -> MetricsAggregationState:
        config = self._api.get()
        if config is None:
            return MetricsAggregationState(value="")
        return _merge(config, MetricsAggregationState(value=""))
