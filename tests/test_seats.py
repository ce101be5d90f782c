from pixeloffice.sim.contracts import Direction, PlacedFurniture
from pixeloffice.sim.layout import create_default_layout, get_blocked_tiles
from pixeloffice.sim.seats import SeatRegistry, build_seats


def test_default_layout_has_four_seats_per_desk() -> None:
    layout = create_default_layout()
    blocked = get_blocked_tiles(layout.furniture)
    registry = SeatRegistry.from_furniture(layout.furniture, layout.cols, layout.rows, blocked)

    assert len(registry) == 8
    top = registry.get("desk-left:top")
    assert top is not None
    assert top.cell == (4, 2)
    assert top.facing == Direction.DOWN
    assert registry.get("desk-left:bottom").cell == (5, 5)
    assert registry.get("desk-left:left").cell == (3, 4)
    assert registry.get("desk-left:right").facing == Direction.LEFT
    assert not registry.cells() & blocked


def test_out_of_bounds_and_blocked_candidates_are_dropped() -> None:
    desk = PlacedFurniture(uid="d", type="desk", col=0, row=0)

    seats = build_seats([desk], 4, 4, set())
    assert sorted(seats) == ["d:bottom", "d:right"]
    assert seats["d:bottom"].cell == (1, 2)
    assert seats["d:right"].cell == (2, 0)

    seats = build_seats([desk], 4, 4, {(2, 0)})
    assert list(seats) == ["d:bottom"]


def test_non_seat_furniture_has_no_seats() -> None:
    plant = PlacedFurniture(uid="p", type="plant", col=1, row=1)

    assert build_seats([plant], 4, 4, set()) == {}


def test_claim_and_release() -> None:
    desk = PlacedFurniture(uid="d", type="desk", col=1, row=1)
    registry = SeatRegistry(build_seats([desk], 5, 5, set()))

    first = registry.first_free()
    assert first is not None and first.uid == "d:top"
    assert registry.claim("d:top") is first
    assert registry.claim("d:top") is None
    assert registry.claim("missing") is None
    assert registry.first_free().uid == "d:bottom"

    registry.release("d:top")
    assert not first.assigned
    registry.release(None)
    assert registry.at_tile(1, 0) is first
    assert registry.at_tile(0, 0) is None
