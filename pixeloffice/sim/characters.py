"""Per-character animation and movement state machine."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from pixeloffice.config import DEFAULT_CONFIG, EngineConfig
from pixeloffice.sim.contracts import BubbleKind, Cell, CharacterState, Direction
from pixeloffice.sim.pathfinding import TileGrid, find_path
from pixeloffice.sim.seats import Seat, SeatRegistry

READING_TOOLS = frozenset({"Read", "Grep", "Glob", "WebFetch", "WebSearch"})

FRAME_COUNTS = {
    CharacterState.IDLE: 2,
    CharacterState.WALK: 4,
    CharacterState.TYPE: 2,
}


@dataclass
class Character:
    id: int
    palette: int
    tile_col: int
    tile_row: int
    x: float
    y: float
    state: CharacterState = CharacterState.TYPE
    facing: Direction = Direction.DOWN
    path: list[Cell] = field(default_factory=list)
    move_progress: float = 0.0
    seat_id: str | None = None
    is_active: bool = True
    current_tool: str | None = None
    bubble: BubbleKind | None = None
    bubble_timer: float = 0.0
    is_subagent: bool = False
    parent_agent_id: int | None = None
    frame: int = 0
    frame_timer: float = 0.0
    wander_timer: float = 0.0

    @property
    def cell(self) -> Cell:
        return (self.tile_col, self.tile_row)


def is_reading_tool(tool: str | None) -> bool:
    if not tool:
        return False
    return tool in READING_TOOLS


def animation_name(ch: Character) -> str:
    if ch.state == CharacterState.TYPE:
        return "reading" if is_reading_tool(ch.current_tool) else "typing"
    if ch.state == CharacterState.WALK:
        return "walk"
    return "idle"


def direction_between(start: Cell, end: Cell) -> Direction:
    dc = end[0] - start[0]
    dr = end[1] - start[1]
    if dc > 0:
        return Direction.RIGHT
    if dc < 0:
        return Direction.LEFT
    if dr > 0:
        return Direction.DOWN
    return Direction.UP


def create_character(
    character_id: int,
    palette: int,
    seat: Seat | None = None,
    *,
    spawn: Cell | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Character:
    if seat is not None:
        col, row = seat.cell
        facing = seat.facing
    else:
        col, row = spawn or (1, 1)
        facing = Direction.DOWN
    x, y = config.tile_center(col, row)
    return Character(
        id=character_id,
        palette=palette,
        tile_col=col,
        tile_row=row,
        x=x,
        y=y,
        facing=facing,
        seat_id=seat.uid if seat is not None else None,
    )


def snap_to_cell(ch: Character, col: int, row: int, config: EngineConfig = DEFAULT_CONFIG) -> None:
    ch.tile_col = col
    ch.tile_row = row
    ch.x, ch.y = config.tile_center(col, row)


def start_walk(ch: Character, path: list[Cell]) -> None:
    ch.path = path
    ch.move_progress = 0.0
    _enter(ch, CharacterState.WALK)


def sit_down(ch: Character, seat: Seat | None) -> None:
    _enter(ch, CharacterState.TYPE)
    if seat is not None:
        ch.facing = seat.facing


def update_character(
    ch: Character,
    dt: float,
    *,
    walkable: list[Cell],
    seats: SeatRegistry,
    grid: TileGrid,
    blocked: set[Cell],
    rng: random.Random,
    config: EngineConfig = DEFAULT_CONFIG,
) -> None:
    ch.frame_timer += dt
    if ch.state == CharacterState.TYPE:
        _update_type(ch, rng, config)
    elif ch.state == CharacterState.IDLE:
        _update_idle(ch, dt, walkable, seats, grid, blocked, rng, config)
    else:
        _update_walk(ch, dt, seats, grid, blocked, rng, config)


def _update_type(ch: Character, rng: random.Random, config: EngineConfig) -> None:
    _advance_frame(ch, config.type_frame_duration, CharacterState.TYPE)
    if not ch.is_active:
        _enter(ch, CharacterState.IDLE)
        ch.wander_timer = _wander_pause(rng, config)


def _update_idle(
    ch: Character,
    dt: float,
    walkable: list[Cell],
    seats: SeatRegistry,
    grid: TileGrid,
    blocked: set[Cell],
    rng: random.Random,
    config: EngineConfig,
) -> None:
    _advance_frame(ch, config.idle_frame_duration, CharacterState.IDLE)
    if ch.is_active:
        seat = seats.get(ch.seat_id)
        if seat is None:
            sit_down(ch, None)
            return
        path = find_path(ch.cell, seat.cell, grid, blocked)
        if path:
            start_walk(ch, path)
        else:
            # Already seated, or the seat is unreachable: work where we stand.
            sit_down(ch, seat)
        return

    ch.wander_timer -= dt
    if ch.wander_timer > 0:
        return
    if walkable:
        target = walkable[rng.randrange(len(walkable))]
        path = find_path(ch.cell, target, grid, blocked)
        if path:
            start_walk(ch, path)
    ch.wander_timer = _wander_pause(rng, config)


def _update_walk(
    ch: Character,
    dt: float,
    seats: SeatRegistry,
    grid: TileGrid,
    blocked: set[Cell],
    rng: random.Random,
    config: EngineConfig,
) -> None:
    _advance_frame(ch, config.walk_frame_duration, CharacterState.WALK)

    if not ch.path:
        snap_to_cell(ch, ch.tile_col, ch.tile_row, config)
        seat = seats.get(ch.seat_id)
        if ch.is_active and seat is not None and ch.cell == seat.cell:
            sit_down(ch, seat)
        else:
            _enter(ch, CharacterState.IDLE)
            if not ch.is_active:
                ch.wander_timer = _wander_pause(rng, config)
        return

    next_cell = ch.path[0]
    ch.facing = direction_between(ch.cell, next_cell)
    ch.move_progress += (config.walk_speed / config.tile_size) * dt

    from_x, from_y = config.tile_center(ch.tile_col, ch.tile_row)
    to_x, to_y = config.tile_center(*next_cell)
    t = min(ch.move_progress, 1.0)
    ch.x = from_x + (to_x - from_x) * t
    ch.y = from_y + (to_y - from_y) * t

    if ch.move_progress >= 1.0:
        snap_to_cell(ch, next_cell[0], next_cell[1], config)
        ch.path.pop(0)
        ch.move_progress = 0.0

    if ch.is_active:
        seat = seats.get(ch.seat_id)
        if seat is not None and (not ch.path or ch.path[-1] != seat.cell):
            new_path = find_path(ch.cell, seat.cell, grid, blocked)
            if new_path:
                ch.path = new_path
                ch.move_progress = 0.0


def _advance_frame(ch: Character, duration: float, state: CharacterState) -> None:
    if ch.frame_timer >= duration:
        ch.frame_timer -= duration
        ch.frame = (ch.frame + 1) % FRAME_COUNTS[state]


def _enter(ch: Character, state: CharacterState) -> None:
    ch.state = state
    ch.frame = 0
    ch.frame_timer = 0.0


def _wander_pause(rng: random.Random, config: EngineConfig) -> float:
    return rng.uniform(config.wander_pause_min, config.wander_pause_max)
