"""Engine tunables with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)

ENV_PREFIX = "PIXELOFFICE_"


@dataclass(frozen=True)
class EngineConfig:
    tile_size: int = 16
    walk_speed: float = 48.0
    idle_frame_duration: float = 0.6
    walk_frame_duration: float = 0.15
    type_frame_duration: float = 0.3
    wander_pause_min: float = 2.0
    wander_pause_max: float = 5.0
    waiting_bubble_duration: float = 2.0
    dismiss_fade_duration: float = 0.3
    palette_count: int = 6
    hitbox_width: int = 16
    hitbox_height: int = 24
    undo_limit: int = 50
    auto_on_depth: int = 3
    auto_on_side_depth: int = 2

    def tile_center(self, col: int, row: int) -> tuple[float, float]:
        half = self.tile_size / 2
        return (col * self.tile_size + half, row * self.tile_size + half)


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(environ: dict[str, str] | None = None) -> EngineConfig:
    """Build a config from ``PIXELOFFICE_<FIELD>`` variables.

    Unparseable values are ignored and the default is kept.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, int | float] = {}
    for item in fields(EngineConfig):
        raw = env.get(ENV_PREFIX + item.name.upper())
        if raw is None:
            continue
        cast = int if item.type in ("int", int) else float
        try:
            overrides[item.name] = cast(raw)
        except ValueError:
            logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, item.name.upper(), raw)
    if not overrides:
        return DEFAULT_CONFIG
    return replace(DEFAULT_CONFIG, **overrides)
