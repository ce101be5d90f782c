"""Layout model: pure edits, default floor plan, serialization."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from pixeloffice.sim.catalog import FurnitureKind, footprint_cells, get_catalog_entry
from pixeloffice.sim.contracts import (
    LAYOUT_VERSION,
    Cell,
    OfficeLayout,
    PlacedFurniture,
    TileKind,
)
from pixeloffice.sim.pathfinding import TileGrid

logger = logging.getLogger(__name__)

DEFAULT_COLS = 20
DEFAULT_ROWS = 11


@dataclass(frozen=True)
class FurnitureInstance:
    """Render-ready furniture: pixel anchor plus a depth key."""

    uid: str
    type: str
    sprite: str
    col: int
    row: int
    footprint_w: int
    footprint_h: int
    x: int
    y: int
    z_y: int


# --- Edits ---


def paint_tile(layout: OfficeLayout, col: int, row: int, kind: TileKind) -> OfficeLayout:
    index = layout.index_of(col, row)
    if index is None:
        return layout
    try:
        kind = TileKind(kind)
    except ValueError:
        logger.debug("Rejected paint with unknown tile kind %r", kind)
        return layout
    if layout.tiles[index] == kind:
        return layout
    tiles = list(layout.tiles)
    tiles[index] = kind
    return layout.model_copy(update={"tiles": tuple(tiles)})


def can_place_furniture(
    layout: OfficeLayout,
    kind: str,
    col: int,
    row: int,
    exclude_uid: str | None = None,
) -> bool:
    entry = get_catalog_entry(kind)
    if entry is None:
        return False
    if (
        col < 0
        or row < 0
        or col + entry.footprint_w > layout.cols
        or row + entry.footprint_h > layout.rows
    ):
        return False

    occupied: set[Cell] = set()
    for item in layout.furniture:
        if exclude_uid is not None and item.uid == exclude_uid:
            continue
        occupied.update(footprint_cells(item.type, item.col, item.row))

    return not any(cell in occupied for cell in footprint_cells(kind, col, row))


def place_furniture(layout: OfficeLayout, item: PlacedFurniture) -> OfficeLayout:
    if layout.find_furniture(item.uid) is not None:
        logger.debug("Rejected placement: uid %s already in use", item.uid)
        return layout
    if not can_place_furniture(layout, item.type, item.col, item.row):
        logger.debug("Rejected placement of %s at %s,%s", item.type, item.col, item.row)
        return layout
    return layout.model_copy(update={"furniture": layout.furniture + (item,)})


def remove_furniture(layout: OfficeLayout, uid: str) -> OfficeLayout:
    kept = tuple(item for item in layout.furniture if item.uid != uid)
    if len(kept) == len(layout.furniture):
        return layout
    return layout.model_copy(update={"furniture": kept})


def move_furniture(layout: OfficeLayout, uid: str, new_col: int, new_row: int) -> OfficeLayout:
    item = layout.find_furniture(uid)
    if item is None:
        return layout
    if not can_place_furniture(layout, item.type, new_col, new_row, exclude_uid=uid):
        logger.debug("Rejected move of %s to %s,%s", uid, new_col, new_row)
        return layout
    moved = item.model_copy(update={"col": new_col, "row": new_row})
    furniture = tuple(moved if f.uid == uid else f for f in layout.furniture)
    return layout.model_copy(update={"furniture": furniture})


# --- Queries ---


def tile_at(layout: OfficeLayout, col: int, row: int) -> TileKind | None:
    index = layout.index_of(col, row)
    if index is None:
        return None
    return layout.tiles[index]


def furniture_at(layout: OfficeLayout, col: int, row: int) -> PlacedFurniture | None:
    """Return the item whose footprint covers the cell; later items win."""
    for item in reversed(layout.furniture):
        if (col, row) in footprint_cells(item.type, item.col, item.row):
            return item
    return None


# --- Derived structures ---


def layout_to_tile_grid(layout: OfficeLayout) -> TileGrid:
    rows = tuple(
        tuple(layout.tiles[r * layout.cols : (r + 1) * layout.cols])
        for r in range(layout.rows)
    )
    return TileGrid(cols=layout.cols, rows=layout.rows, tiles=rows)


def get_blocked_tiles(furniture: tuple[PlacedFurniture, ...] | list[PlacedFurniture]) -> set[Cell]:
    blocked: set[Cell] = set()
    for item in furniture:
        blocked.update(footprint_cells(item.type, item.col, item.row))
    return blocked


def layout_to_furniture_instances(
    furniture: tuple[PlacedFurniture, ...] | list[PlacedFurniture],
    *,
    tile_size: int,
) -> list[FurnitureInstance]:
    instances: list[FurnitureInstance] = []
    for item in furniture:
        entry = get_catalog_entry(item.type)
        if entry is None:
            continue
        x = item.col * tile_size
        y = item.row * tile_size
        instances.append(
            FurnitureInstance(
                uid=item.uid,
                type=entry.type,
                sprite=entry.sprite,
                col=item.col,
                row=item.row,
                footprint_w=entry.footprint_w,
                footprint_h=entry.footprint_h,
                x=x,
                y=y,
                z_y=y + entry.footprint_h * tile_size,
            )
        )
    return instances


# --- Default layout ---


def create_default_layout() -> OfficeLayout:
    """Two rooms split by a wall with a doorway, carpet nook bottom right."""
    tiles: list[TileKind] = []
    for r in range(DEFAULT_ROWS):
        for c in range(DEFAULT_COLS):
            if r in (0, DEFAULT_ROWS - 1) or c in (0, DEFAULT_COLS - 1):
                tiles.append(TileKind.WALL)
            elif c == 10:
                tiles.append(TileKind.DOORWAY if 4 <= r <= 6 else TileKind.WALL)
            elif 15 <= c <= 18 and 7 <= r <= 9:
                tiles.append(TileKind.CARPET)
            elif c < 10:
                tiles.append(TileKind.TILE_FLOOR)
            else:
                tiles.append(TileKind.WOOD_FLOOR)

    furniture = (
        PlacedFurniture(uid="desk-left", type=FurnitureKind.DESK, col=4, row=3),
        PlacedFurniture(uid="desk-right", type=FurnitureKind.DESK, col=13, row=3),
        PlacedFurniture(uid="pc-left", type=FurnitureKind.PC, col=5, row=2),
        PlacedFurniture(uid="pc-right", type=FurnitureKind.PC, col=14, row=2),
        PlacedFurniture(uid="lamp-left", type=FurnitureKind.LAMP, col=3, row=3),
        PlacedFurniture(uid="bookshelf-1", type=FurnitureKind.BOOKSHELF, col=1, row=5),
        PlacedFurniture(uid="plant-left", type=FurnitureKind.PLANT, col=1, row=1),
        PlacedFurniture(uid="cooler-1", type=FurnitureKind.COOLER, col=17, row=7),
        PlacedFurniture(uid="plant-right", type=FurnitureKind.PLANT, col=18, row=1),
        PlacedFurniture(uid="whiteboard-1", type=FurnitureKind.WHITEBOARD, col=15, row=0),
    )
    return OfficeLayout(
        version=LAYOUT_VERSION,
        cols=DEFAULT_COLS,
        rows=DEFAULT_ROWS,
        tiles=tuple(tiles),
        furniture=furniture,
    )


# --- Serialization ---


def serialize_layout(layout: OfficeLayout) -> str:
    return layout.model_dump_json()


def deserialize_layout(text: str) -> OfficeLayout | None:
    """Parse a serialized layout, or return ``None`` if it is not acceptable."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError):
        logger.debug("Layout payload is not valid JSON")
        return None
    if not isinstance(raw, dict):
        return None
    version = raw.get("version")
    if type(version) is not int or version != LAYOUT_VERSION:
        logger.debug("Layout version %r does not match %s", version, LAYOUT_VERSION)
        return None
    if not isinstance(raw.get("tiles"), list) or not isinstance(raw.get("furniture"), list):
        logger.debug("Layout payload is missing tiles or furniture sequences")
        return None
    try:
        return OfficeLayout.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Layout payload failed validation: %s", exc)
        return None
