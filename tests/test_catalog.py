from pixeloffice.sim.catalog import (
    FurnitureKind,
    footprint_cells,
    get_catalog_entry,
    get_on_variant,
    placeable_kinds,
)


def test_desk_generates_seats() -> None:
    entry = get_catalog_entry(FurnitureKind.DESK)

    assert entry is not None
    assert (entry.footprint_w, entry.footprint_h) == (2, 2)
    assert entry.generates_seats
    assert not get_catalog_entry("plant").generates_seats


def test_on_variants() -> None:
    assert get_on_variant("pc") == "pc_on"
    assert get_on_variant("lamp") == "lamp_on"
    assert get_on_variant("desk") == "desk"
    assert get_on_variant("sofa") == "sofa"


def test_placeable_kinds_hide_powered_variants() -> None:
    kinds = placeable_kinds()

    assert "desk" in kinds
    assert "pc_on" not in kinds
    assert "lamp_on" not in kinds


def test_footprint_cells() -> None:
    assert footprint_cells("bookshelf", 3, 4) == [(3, 4), (3, 5)]
    assert footprint_cells("whiteboard", 0, 0) == [(0, 0), (1, 0)]
    assert footprint_cells("sofa", 0, 0) == []
