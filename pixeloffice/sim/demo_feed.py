"""Deterministic scripted host events for demos and tests."""

from __future__ import annotations

import random
from typing import Any

from pixeloffice.sim.events import HostEventKind

DEMO_TOOLS = ("Edit", "Write", "Bash", "Read", "Grep", "WebFetch")


class DemoFeed:
    """Stand-in for a host integration layer.

    Every ``interval`` ticks one agent gets a new activity: start a tool, go
    idle, spawn or finish a sub-task, or ask for permission.
    """

    def __init__(self, agent_count: int = 3, *, seed: int | None = 0, interval: int = 20) -> None:
        self.agent_count = max(0, agent_count)
        self.interval = max(1, interval)
        self._rng = random.Random(seed)
        self._subtasks: dict[int, list[str]] = {}
        self._next_task = 1

    def initial_events(self) -> list[dict[str, Any]]:
        events: list[dict[str, Any]] = []
        for agent_id in range(1, self.agent_count + 1):
            events.append({"kind": HostEventKind.AGENT_CREATED.value, "agent_id": agent_id})
            events.append(
                {
                    "kind": HostEventKind.AGENT_TOOL.value,
                    "agent_id": agent_id,
                    "tool": self._rng.choice(DEMO_TOOLS),
                }
            )
        return events

    def events_for_tick(self, tick: int) -> list[dict[str, Any]]:
        if self.agent_count == 0 or tick % self.interval != 0:
            return []
        agent_id = self._rng.randint(1, self.agent_count)
        roll = self._rng.random()
        if roll < 0.35:
            return [
                {"kind": HostEventKind.PERMISSION_CLEARED.value, "agent_id": agent_id},
                {"kind": HostEventKind.AGENT_ACTIVE.value, "agent_id": agent_id, "active": True},
                {
                    "kind": HostEventKind.AGENT_TOOL.value,
                    "agent_id": agent_id,
                    "tool": self._rng.choice(DEMO_TOOLS),
                },
            ]
        if roll < 0.6:
            return [
                {"kind": HostEventKind.AGENT_ACTIVE.value, "agent_id": agent_id, "active": False},
                {"kind": HostEventKind.WAITING_SHOWN.value, "agent_id": agent_id},
            ]
        if roll < 0.75:
            tool_id = f"task-{self._next_task}"
            self._next_task += 1
            self._subtasks.setdefault(agent_id, []).append(tool_id)
            return [
                {
                    "kind": HostEventKind.SUBAGENT_CREATED.value,
                    "agent_id": agent_id,
                    "tool_id": tool_id,
                    "tool": self._rng.choice(DEMO_TOOLS),
                }
            ]
        if roll < 0.9 and self._subtasks.get(agent_id):
            tool_id = self._subtasks[agent_id].pop(0)
            return [
                {"kind": HostEventKind.SUBAGENT_REMOVED.value, "agent_id": agent_id, "tool_id": tool_id}
            ]
        return [{"kind": HostEventKind.PERMISSION_SHOWN.value, "agent_id": agent_id}]
