"""Alert silence resource adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import Silence, SilenceMatcher, SilenceRequest
from ._common import compact, delete_ignoring_absence, read_or_none, require_rfc3339

if TYPE_CHECKING:
    from ..client import GroundcoverClient


@dataclass(slots=True)
class SilenceState:
    starts_at: str
    ends_at: str
    matchers: list[SilenceMatcher] = field(default_factory=list)
    comment: str | None = None
    id: str | None = None


def _request_for(plan: SilenceState) -> SilenceRequest:
    require_rfc3339(plan.starts_at, "starts_at")
    require_rfc3339(plan.ends_at, "ends_at")
    return SilenceRequest(
        starts_at=plan.starts_at,
        ends_at=plan.ends_at,
        matchers=list(plan.matchers),
        **compact(comment=plan.comment),
    )


def _merge(silence: Silence, local: SilenceState) -> SilenceState:
    return SilenceState(
        starts_at=silence.starts_at or local.starts_at,
        ends_at=silence.ends_at or local.ends_at,
        matchers=list(silence.matchers),
        comment=silence.comment if silence.comment is not None else local.comment,
        id=silence.id,
    )


class SilenceResource:
    def __init__(self, client: GroundcoverClient) -> None:
        self._api = client.silences

    def create(self, plan: SilenceState) -> SilenceState:
        return _merge(self._api.create(_request_for(plan)), plan)

    def read(self, state: SilenceState) -> SilenceState | None:
        silence = read_or_none(lambda: self._api.get(state.id or ""), "silence", state.id or "")
        if silence is None:
            return None
        return _merge(silence, state)

    def update(self, state: SilenceState, plan: SilenceState) -> SilenceState:
        return _merge(self._api.update(state.id or "", _request_for(plan)), plan)

    def delete(self, state: SilenceState) -> None:
        delete_ignoring_absence(lambda: self._api.delete(state.id or ""), "silence", state.id or "")

    def import_state(self, silence_id: str) -> SilenceState:
        silence = self._api.get(silence_id)
        return _merge(silence, SilenceState(starts_at="", ends_at=""))
