"""Dashboard resource adapter.

The ``preset`` attribute is JSON text. The server may return it re-formatted,
so the caller's text is kept whenever it is semantically equal to the server's.
"""

from __future__ import annotations

import logging
import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..jsonutil import compare_json_semantically, keep_equivalent_json, normalize_json
from ..models import CreateDashboardRequest, Dashboard, UpdateDashboardRequest
from ._common import compact, delete_ignoring_absence, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardState:
    name: str
    preset: str
    description: str | None = None
    team: str | None = None
    override: bool = False
    uuid: str | None = None
    revision_number: int | None = None
    owner: str | None = None
    status: str | None = None


def _merge(dashboard: Dashboard, local: DashboardState) -> DashboardState:
    team = dashboard.team
    if not team and local.team is None:
        team = None
    return DashboardState(
        name=dashboard.name,
        preset=keep_equivalent_json(local.preset, dashboard.preset),
        description=dashboard.description if dashboard.description is not None else local.description,
        team=team,
        override=local.override,
        uuid=dashboard.uuid,
        revision_number=dashboard.revision_number,
        owner=dashboard.owner,
        status=dashboard.status,
    )


class DashboardResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.dashboards

    def create(self, plan: DashboardState) -> DashboardState:
        body = CreateDashboardRequest(
            name=plan.name,
            preset=plan.preset,
            is_provisioned=True,
            **compact(description=plan.description, team=plan.team),
        )
        dashboard = self._api.create(body)
        logger.debug("created dashboard %s at revision %s", dashboard.uuid, dashboard.revision_number)
        return _merge(dashboard, plan)

    def read(self, state: DashboardState) -> DashboardState | None:
        dashboard = read_or_none(lambda: self._api.get(state.uuid or ""), "dashboard", state.uuid or "")
        if dashboard is None:
            return None
        return _merge(dashboard, state)

    def update(self, state: DashboardState, plan: DashboardState) -> DashboardState:
        uuid = state.uuid or ""
        # Out-of-band edits bump the revision; send the server's current one.
        current = self._api.get(uuid)
        current_revision = current.revision_number
        if state.revision_number is not None and current_revision != state.revision_number:
            logger.warning(
                "dashboard %s revision changed outside of configuration (%s -> %s)",
                uuid,
                state.revision_number,
                current_revision,
            )

        body = UpdateDashboardRequest(
            name=plan.name,
            preset=plan.preset,
            is_provisioned=True,
            current_revision=current_revision,
            override=plan.override,
            **compact(description=plan.description, team=plan.team),
        )
        dashboard = self._api.update(uuid, body)
        if dashboard.revision_number <= current_revision:
            logger.warning(
                "dashboard %s update returned revision %s, expected greater than %s",
                uuid,
                dashboard.revision_number,
                current_revision,
            )
        return _merge(dashboard, plan)

    def delete(self, state: DashboardState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.uuid or ""), "dashboard", state.uuid or "")

    def import_state(self, uuid: str) -> DashboardState:
        dashboard = self._api.get(uuid)
        return _merge(dashboard, DashboardState(name=dashboard.name, preset=dashboard.preset))

    def modify_plan(self, state: DashboardState, plan: DashboardState) -> DashboardState:
        """Keep the stored preset when the planned one only differs in formatting."""
        if plan.preset == state.preset:
            return plan
        try:
            same = compare_json_semantically(normalize_json(plan.preset), normalize_json(state.preset))
        except ValueError as error:
            logger.warning("unable to compare dashboard presets, planning an update: %s", error)
            return plan
        if not same:
            return plan
        logger.debug("dashboard %s preset is semantically unchanged, suppressing diff", state.uuid)
        return dataclasses.replace(plan, preset=state.preset)
