"""Monitor resource adapter.

Monitors are managed as raw YAML. The server echoes the document back with
sorted keys and added defaults, so reads only adopt the server's copy when it
differs in a field the caller actually set.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..content_types import dump_yaml, load_yaml
from ..errors import GroundcoverError
from ..yamlutil import keep_equivalent_yaml, normalize_yaml, yaml_equivalent_to_template
from ._common import delete_ignoring_absence, read_or_none

if TYPE_CHECKING:
    from ..client import GroundcoverClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MonitorState:
    monitor_yaml: str
    id: str | None = None


def _api_document(monitor_yaml: str) -> tuple[str, str | None]:
    """Return the key-sorted document sent to the API and its title."""
    normalized = normalize_yaml(monitor_yaml)
    document = load_yaml(normalized) if normalized else None
    if not isinstance(document, dict):
        raise ValueError("monitor_yaml must be a YAML mapping")
    title = document.get("title")
    return normalized, title if isinstance(title, str) else None


def _as_text(document: Any) -> str | None:
    if document is None:
        return None
    return dump_yaml(document)


class MonitorResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.monitors

    def create(self, plan: MonitorState) -> MonitorState:
        body, title = _api_document(plan.monitor_yaml)
        created = self._api.create(body, title=title)
        if created is None or not created.monitor_id:
            raise GroundcoverError(
                "monitors.create: response did not contain a monitor id",
                operation="monitors.create",
                resource_id=title,
            )
        logger.debug("created monitor %s (%s)", created.monitor_id, title or "untitled")
        # The caller's text is kept; reads compare it semantically.
        return MonitorState(monitor_yaml=plan.monitor_yaml, id=created.monitor_id)

    def read(self, state: MonitorState) -> MonitorState | None:
        monitor_id = state.id or ""
        # An empty body keeps the stored document.
        document = read_or_none(lambda: self._api.get(monitor_id) or "", "monitor", monitor_id)
        if document is None:
            return None
        remote = _as_text(document)
        if not remote or not state.monitor_yaml:
            return state
        monitor_yaml = keep_equivalent_yaml(state.monitor_yaml, remote)
        if monitor_yaml != state.monitor_yaml:
            logger.info("monitor %s changed outside of configuration", monitor_id)
        return MonitorState(monitor_yaml=monitor_yaml, id=state.id)

    def update(self, state: MonitorState, plan: MonitorState) -> MonitorState:
        body, _ = _api_document(plan.monitor_yaml)
        self._api.update(state.id or "", body)
        return MonitorState(monitor_yaml=plan.monitor_yaml, id=state.id)

    def delete(self, state: MonitorState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.id or ""), "monitor", state.id or "")

    def import_state(self, monitor_id: str) -> MonitorState:
        document = self._api.get(monitor_id)
        return MonitorState(monitor_yaml=_as_text(document) or "", id=monitor_id)

    def modify_plan(self, state: MonitorState, plan: MonitorState) -> MonitorState:
        """Keep the stored document when the plan only reformats it."""
        if plan.monitor_yaml == state.monitor_yaml:
            return plan
        if yaml_equivalent_to_template(plan.monitor_yaml, state.monitor_yaml):
            logger.debug("monitor %s plan is semantically unchanged, suppressing diff", state.id)
            return dataclasses.replace(plan, monitor_yaml=state.monitor_yaml)
        return plan
