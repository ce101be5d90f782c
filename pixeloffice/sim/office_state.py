"""Office orchestrator: characters, seats and derived grid state."""

from __future__ import annotations

import logging
import random

from pixeloffice.config import DEFAULT_CONFIG, EngineConfig
from pixeloffice.sim.catalog import footprint_cells, get_on_variant
from pixeloffice.sim.characters import (
    Character,
    create_character,
    sit_down,
    snap_to_cell,
    start_walk,
    update_character,
)
from pixeloffice.sim.contracts import BubbleKind, Cell, Direction, OfficeLayout
from pixeloffice.sim.layout import (
    FurnitureInstance,
    create_default_layout,
    get_blocked_tiles,
    layout_to_furniture_instances,
    layout_to_tile_grid,
)
from pixeloffice.sim.pathfinding import TileGrid, find_path
from pixeloffice.sim.seats import Seat, SeatRegistry

logger = logging.getLogger(__name__)

FACING_STEPS: dict[Direction, Cell] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class OfficeState:
    """Single owner of every character and every structure derived from a layout.

    Callers mutate it from one thread only; each public method either
    completes or does nothing.
    """

    def __init__(
        self,
        layout: OfficeLayout | None = None,
        *,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._rng = rng or random.Random()
        self.characters: dict[int, Character] = {}
        self.selected_agent_id: int | None = None
        # "parent:tool" -> sub-agent id, and the reverse.
        self.subagent_ids: dict[tuple[int, str], int] = {}
        self.subagent_meta: dict[int, tuple[int, str]] = {}
        self._next_subagent_id = -1
        self._next_palette = 0
        self.layout: OfficeLayout
        self.tile_grid: TileGrid
        self.blocked_tiles: set[Cell]
        self.seats: SeatRegistry
        self.walkable_tiles: list[Cell]
        self.furniture: list[FurnitureInstance]
        self._derive(layout or create_default_layout())

    # --- Layout ---

    def _derive(self, layout: OfficeLayout) -> None:
        self.layout = layout
        self.tile_grid = layout_to_tile_grid(layout)
        self.blocked_tiles = get_blocked_tiles(layout.furniture)
        self.seats = SeatRegistry.from_furniture(
            layout.furniture, layout.cols, layout.rows, self.blocked_tiles
        )
        self.walkable_tiles = self.tile_grid.walkable_tiles(self.blocked_tiles)
        self._rebuild_furniture_instances()

    def get_layout(self) -> OfficeLayout:
        return self.layout

    def rebuild_from_layout(self, layout: OfficeLayout) -> None:
        """Recompute derived state and re-seat every existing character."""
        self._derive(layout)
        self.seats.release_all()

        # Keep surviving seats first so their holders never lose them to a newcomer.
        for ch in self.characters.values():
            ch.path = []
            ch.move_progress = 0.0
            seat = self.seats.get(ch.seat_id)
            if seat is not None and not seat.assigned:
                seat.assigned = True
                self._seat_in_place(ch, seat)
            else:
                ch.seat_id = None

        for ch in self.characters.values():
            if ch.seat_id is not None:
                continue
            seat = self.seats.first_free()
            if seat is not None:
                seat.assigned = True
                ch.seat_id = seat.uid
                self._seat_in_place(ch, seat)
            elif not self.tile_grid.is_walkable(ch.tile_col, ch.tile_row, self.blocked_tiles):
                snap_to_cell(ch, *self._random_spawn(), self.config)

        self._rebuild_furniture_instances()
        logger.info(
            "Rebuilt office: %d seats, %d characters", len(self.seats), len(self.characters)
        )

    def _seat_in_place(self, ch: Character, seat: Seat) -> None:
        snap_to_cell(ch, seat.seat_col, seat.seat_row, self.config)
        ch.facing = seat.facing

    # --- Agents ---

    def add_agent(
        self,
        agent_id: int,
        preferred_palette: int | None = None,
        preferred_seat_id: str | None = None,
    ) -> None:
        if agent_id in self.characters:
            return
        if preferred_palette is not None:
            palette = preferred_palette
        else:
            palette = self._next_palette % self.config.palette_count
        self._next_palette = max(self._next_palette, palette + 1)

        seat = None
        if preferred_seat_id is not None:
            seat = self.seats.claim(preferred_seat_id)
        if seat is None:
            seat = self._claim_first_free()
        self.characters[agent_id] = self._spawn(agent_id, palette, seat)
        self._rebuild_furniture_instances()
        logger.info("Added agent %s (seat=%s)", agent_id, seat.uid if seat else None)

    def remove_agent(self, agent_id: int) -> None:
        ch = self.characters.pop(agent_id, None)
        if ch is None:
            return
        self.seats.release(ch.seat_id)
        key = self.subagent_meta.pop(agent_id, None)
        if key is not None:
            self.subagent_ids.pop(key, None)
        if self.selected_agent_id == agent_id:
            self.selected_agent_id = None
        self._rebuild_furniture_instances()
        logger.info("Removed agent %s", agent_id)

    def add_subagent(self, parent_agent_id: int, parent_tool_id: str) -> int:
        key = (parent_agent_id, parent_tool_id)
        existing = self.subagent_ids.get(key)
        if existing is not None:
            return existing

        subagent_id = self._next_subagent_id
        self._next_subagent_id -= 1
        parent = self.characters.get(parent_agent_id)
        palette = parent.palette if parent is not None else 0

        ch = self._spawn(subagent_id, palette, self._claim_first_free())
        ch.is_subagent = True
        ch.parent_agent_id = parent_agent_id
        self.characters[subagent_id] = ch
        self.subagent_ids[key] = subagent_id
        self.subagent_meta[subagent_id] = key
        self._rebuild_furniture_instances()
        logger.info("Added sub-agent %s for %s:%s", subagent_id, parent_agent_id, parent_tool_id)
        return subagent_id

    def remove_subagent(self, parent_agent_id: int, parent_tool_id: str) -> None:
        subagent_id = self.subagent_ids.pop((parent_agent_id, parent_tool_id), None)
        if subagent_id is None:
            return
        self.remove_agent(subagent_id)

    def remove_all_subagents(self, parent_agent_id: int) -> None:
        for key in [k for k in self.subagent_ids if k[0] == parent_agent_id]:
            self.remove_subagent(*key)

    def get_subagent_id(self, parent_agent_id: int, parent_tool_id: str) -> int | None:
        return self.subagent_ids.get((parent_agent_id, parent_tool_id))

    def _spawn(self, character_id: int, palette: int, seat: Seat | None) -> Character:
        if seat is not None:
            return create_character(character_id, palette, seat, config=self.config)
        return create_character(
            character_id, palette, spawn=self._random_spawn(), config=self.config
        )

    def _claim_first_free(self) -> Seat | None:
        seat = self.seats.first_free()
        if seat is None:
            return None
        return self.seats.claim(seat.uid)

    def _random_spawn(self) -> Cell:
        if not self.walkable_tiles:
            return (1, 1)
        return self.walkable_tiles[self._rng.randrange(len(self.walkable_tiles))]

    # --- Seats ---

    def get_seat_at_tile(self, col: int, row: int) -> str | None:
        seat = self.seats.at_tile(col, row)
        return seat.uid if seat is not None else None

    def seat_holder(self, seat_id: str) -> int | None:
        for ch in self.characters.values():
            if ch.seat_id == seat_id:
                return ch.id
        return None

    def reassign_seat(self, agent_id: int, seat_id: str) -> None:
        ch = self.characters.get(agent_id)
        seat = self.seats.get(seat_id)
        if ch is None or seat is None:
            return
        holder = self.seat_holder(seat_id)
        if holder is not None and holder != agent_id:
            logger.debug("Seat %s already held by %s", seat_id, holder)
            return

        if ch.seat_id != seat_id:
            self.seats.release(ch.seat_id)
            seat.assigned = True
            ch.seat_id = seat_id
        self._walk_to_seat(ch, seat)
        self._rebuild_furniture_instances()

    def send_to_seat(self, agent_id: int) -> None:
        ch = self.characters.get(agent_id)
        if ch is None:
            return
        seat = self.seats.get(ch.seat_id)
        if seat is None:
            return
        self._walk_to_seat(ch, seat)

    def _walk_to_seat(self, ch: Character, seat: Seat) -> None:
        path = find_path(ch.cell, seat.cell, self.tile_grid, self.blocked_tiles)
        if path:
            start_walk(ch, path)
        else:
            sit_down(ch, seat)

    # --- Activity ---

    def set_agent_active(self, agent_id: int, active: bool) -> None:
        ch = self.characters.get(agent_id)
        if ch is None:
            return
        ch.is_active = active
        self._rebuild_furniture_instances()

    def set_agent_tool(self, agent_id: int, tool: str | None) -> None:
        ch = self.characters.get(agent_id)
        if ch is not None:
            ch.current_tool = tool

    def _auto_on_tiles(self) -> set[Cell]:
        """Cells in front of active seated characters; powers electronics on."""
        depth = self.config.auto_on_depth
        side_depth = self.config.auto_on_side_depth
        tiles: set[Cell] = set()
        for ch in self.characters.values():
            if not ch.is_active:
                continue
            seat = self.seats.get(ch.seat_id)
            if seat is None:
                continue
            dc, dr = FACING_STEPS[seat.facing]
            for d in range(1, depth + 1):
                tiles.add((seat.seat_col + dc * d, seat.seat_row + dr * d))
            for d in range(1, side_depth + 1):
                base_col = seat.seat_col + dc * d
                base_row = seat.seat_row + dr * d
                if dc != 0:
                    tiles.add((base_col, base_row - 1))
                    tiles.add((base_col, base_row + 1))
                else:
                    tiles.add((base_col - 1, base_row))
                    tiles.add((base_col + 1, base_row))
        return tiles

    def _rebuild_furniture_instances(self) -> None:
        auto_on = self._auto_on_tiles()
        furniture = list(self.layout.furniture)
        if auto_on:
            furniture = [
                item.model_copy(update={"type": get_on_variant(item.type)})
                if any(cell in auto_on for cell in footprint_cells(item.type, item.col, item.row))
                else item
                for item in furniture
            ]
        self.furniture = layout_to_furniture_instances(
            furniture, tile_size=self.config.tile_size
        )

    # --- Bubbles ---

    def show_permission_bubble(self, agent_id: int) -> None:
        ch = self.characters.get(agent_id)
        if ch is not None:
            ch.bubble = BubbleKind.PERMISSION
            ch.bubble_timer = 0.0

    def clear_permission_bubble(self, agent_id: int) -> None:
        ch = self.characters.get(agent_id)
        if ch is not None and ch.bubble == BubbleKind.PERMISSION:
            ch.bubble = None
            ch.bubble_timer = 0.0

    def show_waiting_bubble(self, agent_id: int) -> None:
        ch = self.characters.get(agent_id)
        if ch is not None:
            ch.bubble = BubbleKind.WAITING
            ch.bubble_timer = self.config.waiting_bubble_duration

    def dismiss_bubble(self, agent_id: int) -> None:
        ch = self.characters.get(agent_id)
        if ch is None or ch.bubble is None:
            return
        if ch.bubble == BubbleKind.PERMISSION:
            ch.bubble = None
            ch.bubble_timer = 0.0
        else:
            ch.bubble_timer = min(ch.bubble_timer, self.config.dismiss_fade_duration)

    # --- Tick ---

    def update(self, dt: float) -> None:
        for ch in self.characters.values():
            update_character(
                ch,
                dt,
                walkable=self.walkable_tiles,
                seats=self.seats,
                grid=self.tile_grid,
                blocked=self.blocked_tiles,
                rng=self._rng,
                config=self.config,
            )
            if ch.bubble == BubbleKind.WAITING:
                ch.bubble_timer -= dt
                if ch.bubble_timer <= 0:
                    ch.bubble = None
                    ch.bubble_timer = 0.0

    # --- Queries ---

    def get_characters(self) -> list[Character]:
        return list(self.characters.values())

    def get_character_at(self, world_x: float, world_y: float) -> int | None:
        """Hit-test bottom-centre anchored boxes, front-most (largest y) first."""
        half_w = self.config.hitbox_width / 2
        height = self.config.hitbox_height
        for ch in sorted(self.characters.values(), key=lambda c: c.y, reverse=True):
            if ch.x - half_w <= world_x <= ch.x + half_w and ch.y - height <= world_y <= ch.y:
                return ch.id
        return None

    def select_agent(self, agent_id: int | None) -> None:
        if agent_id is None or agent_id in self.characters:
            self.selected_agent_id = agent_id
