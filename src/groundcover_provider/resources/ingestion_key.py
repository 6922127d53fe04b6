"""Ingestion key resource adapter.

Keys are identified by name. Newly created keys can take a few seconds to show
up in listings, so reads poll before declaring a key absent. Keys are
immutable; changes require replacement.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import NotFoundError, WaitTimeoutError
from ..models import CreateIngestionKeyRequest, IngestionKey, ListIngestionKeysRequest
from ..wait import poll_until
from ._common import compact, delete_ignoring_absence

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT_SECONDS = 10.0
DEFAULT_READ_INTERVAL_SECONDS = 1.0


@dataclass(slots=True)
class IngestionKeyState:
    name: str
    type: str
    remote_config: bool | None = None
    tags: list[str] | None = None
    id: str | None = None
    key: str | None = None
    created_by: str | None = None
    creation_date: str | None = None


def _merge(found: IngestionKey, local: IngestionKeyState) -> IngestionKeyState:
    return IngestionKeyState(
        name=found.name,
        type=found.type or local.type,
        remote_config=found.remote_config if found.remote_config is not None else local.remote_config,
        tags=list(found.tags) if found.tags is not None else local.tags,
        id=found.name,
        key=found.key or local.key,
        created_by=found.created_by,
        creation_date=found.creation_date,
    )


class IngestionKeyResource:
    def __init__(
        self,
        client: GroundcoverClient,
        *,
        read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS,
        read_interval_seconds: float = DEFAULT_READ_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api = client.ingestion_keys
        self._read_timeout = read_timeout_seconds
        self._read_interval = read_interval_seconds
        self._sleep = sleep

    def _lookup(self, name: str) -> IngestionKey | None:
        for found in self._api.list(ListIngestionKeysRequest(name=name)) or []:
            if found.name == name:
                return found
        return None

    def create(self, plan: IngestionKeyState) -> IngestionKeyState:
        body = CreateIngestionKeyRequest(
            name=plan.name,
            type=plan.type,
            **compact(remote_config=plan.remote_config, tags=plan.tags),
        )
        created = self._api.create(body)
        logger.debug("created ingestion key %s", created.name)
        return _merge(created, plan)

    def read(self, state: IngestionKeyState) -> IngestionKeyState | None:
        name = state.id or state.name
        try:
            found = poll_until(
                lambda: self._lookup(name),
                predicate=lambda value: value is not None,
                timeout_seconds=self._read_timeout,
                interval_seconds=self._read_interval,
                description=f"ingestion key {name}",
                sleep=self._sleep,
            )
        except WaitTimeoutError:
            logger.warning("ingestion key %s not found, removing from state", name)
            return None
        return _merge(found, state)

    def update(self, state: IngestionKeyState, plan: IngestionKeyState) -> IngestionKeyState:
        logger.warning("ingestion key %s cannot be updated in place; changes require replacement", state.name)
        return state

    def delete(self, state: IngestionKeyState) -> None:
        name = state.id or state.name
        delete_ignoring_absence(lambda: self._api.delete(name), "ingestion key", name)

    def import_state(self, name: str) -> IngestionKeyState:
        found = self._lookup(name)
        if found is None:
            raise NotFoundError(
                f"ingestion_keys.import: ingestion key '{name}' not found",
                operation="ingestion_keys.import",
                resource_id=name,
            )
        return _merge(found, IngestionKeyState(name=found.name, type=found.type or ""))
