import random

from pixeloffice.config import EngineConfig
from pixeloffice.sim.characters import (
    Character,
    animation_name,
    create_character,
    direction_between,
    update_character,
)
from pixeloffice.sim.contracts import CharacterState, Direction
from pixeloffice.sim.office_state import OfficeState
from pixeloffice.sim.pathfinding import TileGrid
from pixeloffice.sim.seats import Seat, SeatRegistry


def _tick(office: OfficeState, count: int, dt: float = 0.05) -> None:
    for _ in range(count):
        office.update(dt)


def test_deactivated_typist_goes_idle_within_one_tick() -> None:
    office = OfficeState(rng=random.Random(1))
    office.add_agent(1)
    ch = office.characters[1]
    assert ch.state == CharacterState.TYPE

    office.set_agent_active(1, False)
    office.update(0.05)

    assert ch.state == CharacterState.IDLE
    assert ch.wander_timer >= office.config.wander_pause_min - 0.05


def test_reactivated_character_returns_to_seat_facing() -> None:
    office = OfficeState(rng=random.Random(2))
    office.add_agent(1)
    ch = office.characters[1]
    seat = office.seats.get(ch.seat_id)

    office.set_agent_active(1, False)
    _tick(office, 200)
    office.set_agent_active(1, True)
    _tick(office, 400)

    assert ch.state == CharacterState.TYPE
    assert ch.cell == seat.cell
    assert ch.facing == seat.facing
    assert (ch.x, ch.y) == office.config.tile_center(*seat.cell)


def test_walk_to_new_seat_arrives_and_sits() -> None:
    office = OfficeState(rng=random.Random(3))
    office.add_agent(1)
    ch = office.characters[1]

    office.reassign_seat(1, "desk-left:bottom")
    assert ch.state == CharacterState.WALK
    assert ch.path[-1] == (5, 5)

    _tick(office, 200)

    assert ch.state == CharacterState.TYPE
    assert ch.cell == (5, 5)
    assert ch.facing == Direction.UP
    assert (ch.x, ch.y) == (88.0, 88.0)
    assert ch.path == []


def test_walk_interpolates_between_cells() -> None:
    config = EngineConfig()
    grid = TileGrid.open_room(4, 4)
    ch = create_character(1, 0, spawn=(0, 0), config=config)
    ch.state = CharacterState.WALK
    ch.path = [(1, 0)]
    ch.is_active = False

    update_character(
        ch,
        1 / 6,
        walkable=grid.walkable_tiles(set()),
        seats=SeatRegistry(),
        grid=grid,
        blocked=set(),
        rng=random.Random(0),
        config=config,
    )

    assert ch.facing == Direction.RIGHT
    assert ch.cell == (0, 0)
    assert 8.0 < ch.x < 24.0
    assert ch.y == 8.0


def test_active_unseated_character_types_in_place() -> None:
    grid = TileGrid.open_room(3, 3)
    ch = create_character(1, 0, spawn=(1, 1))
    ch.state = CharacterState.IDLE

    update_character(
        ch,
        0.1,
        walkable=grid.walkable_tiles(set()),
        seats=SeatRegistry(),
        grid=grid,
        blocked=set(),
        rng=random.Random(0),
    )

    assert ch.state == CharacterState.TYPE
    assert ch.cell == (1, 1)


def test_idle_character_wanders_after_pause() -> None:
    grid = TileGrid.open_room(6, 6)
    ch = create_character(1, 0, spawn=(0, 0))
    ch.state = CharacterState.IDLE
    ch.is_active = False
    ch.wander_timer = 0.05
    walkable = [(5, 5)]

    update_character(
        ch,
        0.1,
        walkable=walkable,
        seats=SeatRegistry(),
        grid=grid,
        blocked=set(),
        rng=random.Random(0),
    )

    assert ch.state == CharacterState.WALK
    assert ch.path[-1] == (5, 5)
    assert 2.0 <= ch.wander_timer <= 5.0


def test_idle_character_without_route_keeps_waiting() -> None:
    grid = TileGrid.open_room(4, 4)
    ch = create_character(1, 0, spawn=(0, 0))
    ch.state = CharacterState.IDLE
    ch.is_active = False
    ch.wander_timer = 0.05

    update_character(
        ch,
        0.1,
        walkable=[(3, 3)],
        seats=SeatRegistry(),
        grid=grid,
        blocked={(3, 3)},
        rng=random.Random(0),
    )

    assert ch.state == CharacterState.IDLE
    assert ch.path == []
    assert 2.0 <= ch.wander_timer <= 5.0


def test_activation_mid_wander_reroutes_to_seat() -> None:
    grid = TileGrid.open_room(6, 6)
    seat = Seat(
        uid="desk-a:top",
        desk_uid="desk-a",
        desk_col=4,
        desk_row=1,
        seat_col=5,
        seat_row=0,
        facing=Direction.DOWN,
        assigned=True,
    )
    ch = create_character(1, 0, spawn=(0, 0))
    ch.seat_id = seat.uid
    ch.state = CharacterState.WALK
    ch.path = [(0, 1), (0, 2)]
    ch.is_active = True

    update_character(
        ch,
        0.05,
        walkable=grid.walkable_tiles(set()),
        seats=SeatRegistry({seat.uid: seat}),
        grid=grid,
        blocked=set(),
        rng=random.Random(0),
    )

    assert ch.state == CharacterState.WALK
    assert ch.path[-1] == seat.cell
    assert ch.move_progress == 0.0


def test_animation_names() -> None:
    ch = Character(id=1, palette=0, tile_col=0, tile_row=0, x=8.0, y=8.0)

    ch.current_tool = "Edit"
    assert animation_name(ch) == "typing"
    ch.current_tool = "Grep"
    assert animation_name(ch) == "reading"
    ch.state = CharacterState.WALK
    assert animation_name(ch) == "walk"
    ch.state = CharacterState.IDLE
    assert animation_name(ch) == "idle"


def test_direction_between() -> None:
    assert direction_between((1, 1), (2, 1)) == Direction.RIGHT
    assert direction_between((1, 1), (0, 1)) == Direction.LEFT
    assert direction_between((1, 1), (1, 2)) == Direction.DOWN
    assert direction_between((1, 1), (1, 0)) == Direction.UP
