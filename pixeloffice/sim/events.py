"""Host lifecycle events and their mapping onto ``OfficeState``."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from pixeloffice.sim.office_state import OfficeState

logger = logging.getLogger(__name__)


class HostEventKind(str, Enum):
    AGENT_CREATED = "agent_created"
    AGENT_REMOVED = "agent_removed"
    AGENT_ACTIVE = "agent_active"
    AGENT_TOOL = "agent_tool"
    SUBAGENT_CREATED = "subagent_created"
    SUBAGENT_REMOVED = "subagent_removed"
    SUBAGENTS_CLEARED = "subagents_cleared"
    PERMISSION_SHOWN = "permission_shown"
    PERMISSION_CLEARED = "permission_cleared"
    WAITING_SHOWN = "waiting_shown"
    BUBBLE_DISMISSED = "bubble_dismissed"


_NEEDS_ACTIVE = {HostEventKind.AGENT_ACTIVE}
_NEEDS_TOOL_ID = {HostEventKind.SUBAGENT_CREATED, HostEventKind.SUBAGENT_REMOVED}


class HostEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: HostEventKind
    agent_id: int
    active: bool | None = None
    tool: str | None = None
    tool_id: str | None = None
    palette: int | None = None
    seat_id: str | None = None

    @model_validator(mode="after")
    def validate_event(self) -> "HostEvent":
        if self.kind in _NEEDS_ACTIVE and self.active is None:
            raise ValueError(f"{self.kind.value} requires active")
        if self.kind in _NEEDS_TOOL_ID and not self.tool_id:
            raise ValueError(f"{self.kind.value} requires tool_id")
        return self


def coerce_event(raw: Any) -> HostEvent | None:
    """Validate a host event or drop it."""
    if isinstance(raw, HostEvent):
        return raw
    try:
        return HostEvent.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Dropping invalid host event %r: %s", raw, exc)
        return None


def apply_event(office: OfficeState, event: HostEvent) -> int | None:
    """Apply one event. Returns the sub-agent id for ``SUBAGENT_CREATED``."""
    kind = event.kind
    agent_id = event.agent_id
    if kind == HostEventKind.AGENT_CREATED:
        office.add_agent(agent_id, event.palette, event.seat_id)
    elif kind == HostEventKind.AGENT_REMOVED:
        office.remove_all_subagents(agent_id)
        office.remove_agent(agent_id)
    elif kind == HostEventKind.AGENT_ACTIVE:
        office.set_agent_active(agent_id, bool(event.active))
    elif kind == HostEventKind.AGENT_TOOL:
        office.set_agent_tool(agent_id, event.tool)
    elif kind == HostEventKind.SUBAGENT_CREATED:
        subagent_id = office.add_subagent(agent_id, event.tool_id or "")
        office.set_agent_tool(subagent_id, event.tool)
        return subagent_id
    elif kind == HostEventKind.SUBAGENT_REMOVED:
        office.remove_subagent(agent_id, event.tool_id or "")
    elif kind == HostEventKind.SUBAGENTS_CLEARED:
        office.remove_all_subagents(agent_id)
    elif kind == HostEventKind.PERMISSION_SHOWN:
        office.show_permission_bubble(agent_id)
    elif kind == HostEventKind.PERMISSION_CLEARED:
        office.clear_permission_bubble(agent_id)
    elif kind == HostEventKind.WAITING_SHOWN:
        office.show_waiting_bubble(agent_id)
    elif kind == HostEventKind.BUBBLE_DISMISSED:
        office.dismiss_bubble(agent_id)
    return None
