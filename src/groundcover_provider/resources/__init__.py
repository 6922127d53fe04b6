"""Resource adapters implementing the create/read/update/delete/import lifecycle."""

from __future__ import annotations

from ._common import parse_import_id
from .api_key import ApiKeyResource, ApiKeyState
from .connected_app import ConnectedAppResource, ConnectedAppState
from .dashboard import DashboardResource, DashboardState
from .data_integration import DataIntegrationResource, DataIntegrationState
from .ingestion_key import IngestionKeyResource, IngestionKeyState
from .logs_pipeline import LogsPipelineResource, LogsPipelineState
from .metrics_aggregation import MetricsAggregationResource, MetricsAggregationState
from .monitor import MonitorResource, MonitorState
from .policy import PolicyResource, PolicyState
from .service_account import ServiceAccountResource, ServiceAccountState
from .silence import SilenceResource, SilenceState

__all__ = [
    "ApiKeyResource",
    "ApiKeyState",
    "ConnectedAppResource",
    "ConnectedAppState",
    "DashboardResource",
    "DashboardState",
    "DataIntegrationResource",
    "DataIntegrationState",
    "IngestionKeyResource",
    "IngestionKeyState",
    "LogsPipelineResource",
    "LogsPipelineState",
    "MetricsAggregationResource",
    "MetricsAggregationState",
    "MonitorResource",
    "MonitorState",
    "PolicyResource",
    "PolicyState",
    "ServiceAccountResource",
    "ServiceAccountState",
    "SilenceResource",
    "SilenceState",
    "parse_import_id",
]
