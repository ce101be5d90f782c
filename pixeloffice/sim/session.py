"""Explicitly owned simulation session with a start/stop lifecycle."""

from __future__ import annotations

import logging
import random
from typing import Any

from pixeloffice.config import EngineConfig
from pixeloffice.sim.contracts import OfficeLayout
from pixeloffice.sim.editor import LayoutEditor
from pixeloffice.sim.events import apply_event, coerce_event
from pixeloffice.sim.frame import FrameSnapshot, build_frame
from pixeloffice.sim.office_state import OfficeState

logger = logging.getLogger(__name__)


class OfficeSession:
    """One office, one editor, one clock.

    Each session is independent, so several can run side by side (tests do).
    Events and ticks delivered while the session is stopped are ignored.
    """

    def __init__(
        self,
        layout: OfficeLayout | None = None,
        *,
        config: EngineConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.office = OfficeState(layout, config=config, rng=random.Random(seed))
        self.editor = LayoutEditor(self.office)
        self.tick = 0
        self.elapsed = 0.0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info("Session started")

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.editor.pointer_leave()
        logger.info("Session stopped after %d ticks", self.tick)

    def dispatch(self, raw: Any) -> int | None:
        if not self._running:
            logger.debug("Ignoring event on stopped session: %r", raw)
            return None
        event = coerce_event(raw)
        if event is None:
            return None
        return apply_event(self.office, event)

    def advance(self, dt: float) -> None:
        if not self._running:
            return
        self.office.update(dt)
        self.tick += 1
        self.elapsed += dt

    def frame(self) -> FrameSnapshot:
        return build_frame(self.office, self.editor, tick=self.tick)

    def __enter__(self) -> "OfficeSession":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
