"""Connected app resource adapter.

``data`` is free-form nested configuration and is carried as a ``MapValue``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import ConnectedApp, ConnectedAppRequest
from ..values import MapValue, map_from_wire, to_wire
from ._common import delete_ignoring_absence, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient


@dataclass(slots=True)
class ConnectedAppState:
    name: str
    type: str
    data: MapValue = field(default_factory=MapValue)
    id: str | None = None
    created_by: str | None = None
    created_at: str | None = None
    updated_by: str | None = None
    updated_at: str | None = None


def _request_for(plan: ConnectedAppState) -> ConnectedAppRequest:
    return ConnectedAppRequest(name=plan.name, type=plan.type, data=to_wire(plan.data))


def _merge(app: ConnectedApp, local: ConnectedAppState) -> ConnectedAppState:
    return ConnectedAppState(
        name=app.name,
        type=app.type,
        data=map_from_wire(app.data) if app.data is not None else local.data,
        id=app.id,
        created_by=app.created_by,
        created_at=app.created_at,
        updated_by=app.updated_by,
        updated_at=app.updated_at,
    )


class ConnectedAppResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.connected_apps

    def create(self, plan: ConnectedAppState) -> ConnectedAppState:
        created = self._api.create(_request_for(plan))
        return _merge(self._api.get(created.id), plan)

    def read(self, state: ConnectedAppState) -> ConnectedAppState | None:
        app = read_or_none(lambda: self._api.get(state.id or ""), "connected app", state.id or "")
        if app is None:
            return None
        return _merge(app, state)

    def update(self, state: ConnectedAppState, plan: ConnectedAppState) -> ConnectedAppState:
        app_id = state.id or ""
        self._api.update(app_id, _request_for(plan))
        return _merge(self._api.get(app_id), plan)

    def delete(self, state: ConnectedAppState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.id or ""), "connected app", state.id or "")

    def import_state(self, app_id: str) -> ConnectedAppState:
        app = self._api.get(app_id)
        return _merge(app, ConnectedAppState(name=app.name, type=app.type))
