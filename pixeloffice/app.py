"""Application entry for running the office engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from pixeloffice.config import EngineConfig, load_engine_config
from pixeloffice.render.office_viewer import run_office_viewer
from pixeloffice.sim.contracts import OfficeLayout
from pixeloffice.sim.demo_feed import DemoFeed
from pixeloffice.sim.frame import FrameSnapshot
from pixeloffice.sim.layout import create_default_layout, deserialize_layout
from pixeloffice.sim.session import OfficeSession

logger = logging.getLogger(__name__)

DEFAULT_AGENTS = 3
DEFAULT_TICK_DELAY = 0.05


def run_office(
    *,
    ticks: int = 100,
    agents: int | None = None,
    seed: int | None = 0,
    layout: OfficeLayout | None = None,
    tick_delay: float | None = None,
    config: EngineConfig | None = None,
) -> Iterator[FrameSnapshot]:
    """Run the engine headless, yielding one frame per tick."""
    delay = _resolve_tick_delay(tick_delay)
    feed = DemoFeed(_resolve_agents(agents), seed=seed)
    session = OfficeSession(layout, config=config or load_engine_config(), seed=seed)
    with session:
        for event in feed.initial_events():
            session.dispatch(event)
        for _ in range(ticks):
            for event in feed.events_for_tick(session.tick):
                session.dispatch(event)
            session.advance(delay)
            yield session.frame()


def run_office_with_viewer(
    *,
    ticks: int | None = None,
    agents: int | None = None,
    seed: int | None = None,
    layout: OfficeLayout | None = None,
    tick_delay: float | None = None,
    edit_mode: bool = False,
) -> OfficeSession:
    session = OfficeSession(layout, config=load_engine_config(), seed=seed)
    feed = DemoFeed(_resolve_agents(agents), seed=seed)
    run_office_viewer(
        session,
        feed=feed,
        tick_delay=_resolve_tick_delay(tick_delay),
        max_ticks=ticks,
        edit_mode=edit_mode,
    )
    return session


def load_layout_file(path: Path) -> OfficeLayout:
    """Read a saved layout, falling back to the default when it is unusable."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read layout file {path}: {exc}") from exc
    layout = deserialize_layout(raw)
    if layout is None:
        logger.warning("Layout file %s is invalid; using the default layout", path)
        return create_default_layout()
    return layout


def _resolve_agents(agents: int | None) -> int:
    if agents is not None:
        return agents
    value = os.getenv("PIXELOFFICE_AGENTS")
    if value is None:
        return DEFAULT_AGENTS
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring PIXELOFFICE_AGENTS=%r", value)
        return DEFAULT_AGENTS


def _resolve_tick_delay(tick_delay: float | None) -> float:
    if tick_delay is not None:
        return tick_delay
    value = os.getenv("PIXELOFFICE_TICK_DELAY")
    if value is None:
        return DEFAULT_TICK_DELAY
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring PIXELOFFICE_TICK_DELAY=%r", value)
        return DEFAULT_TICK_DELAY
