"""Static furniture catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FurnitureKind(str, Enum):
    DESK = "desk"
    BOOKSHELF = "bookshelf"
    PLANT = "plant"
    COOLER = "cooler"
    WHITEBOARD = "whiteboard"
    CHAIR = "chair"
    PC = "pc"
    PC_ON = "pc_on"
    LAMP = "lamp"
    LAMP_ON = "lamp_on"


@dataclass(frozen=True)
class CatalogEntry:
    type: str
    label: str
    footprint_w: int
    footprint_h: int
    sprite: str
    generates_seats: bool = False
    on_variant: str | None = None
    placeable: bool = True


FURNITURE_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry("desk", "Desk", 2, 2, "desk_square", generates_seats=True),
    CatalogEntry("bookshelf", "Bookshelf", 1, 2, "bookshelf"),
    CatalogEntry("plant", "Plant", 1, 1, "plant"),
    CatalogEntry("cooler", "Cooler", 1, 1, "cooler"),
    CatalogEntry("whiteboard", "Whiteboard", 2, 1, "whiteboard"),
    CatalogEntry("chair", "Chair", 1, 1, "chair"),
    CatalogEntry("pc", "PC", 1, 1, "pc_off", on_variant="pc_on"),
    CatalogEntry("pc_on", "PC (on)", 1, 1, "pc_on", placeable=False),
    CatalogEntry("lamp", "Lamp", 1, 1, "lamp_off", on_variant="lamp_on"),
    CatalogEntry("lamp_on", "Lamp (on)", 1, 1, "lamp_on", placeable=False),
)

_BY_TYPE: dict[str, CatalogEntry] = {entry.type: entry for entry in FURNITURE_CATALOG}


def get_catalog_entry(kind: str) -> CatalogEntry | None:
    return _BY_TYPE.get(_kind_value(kind))


def get_on_variant(kind: str) -> str:
    """Return the powered-on kind for ``kind``, or ``kind`` itself."""
    value = _kind_value(kind)
    entry = _BY_TYPE.get(value)
    if entry is None or entry.on_variant is None:
        return value
    return entry.on_variant


def placeable_kinds() -> list[str]:
    return [entry.type for entry in FURNITURE_CATALOG if entry.placeable]


def footprint_cells(kind: str, col: int, row: int) -> list[tuple[int, int]]:
    entry = get_catalog_entry(kind)
    if entry is None:
        return []
    return [
        (col + dc, row + dr)
        for dr in range(entry.footprint_h)
        for dc in range(entry.footprint_w)
    ]


def _kind_value(kind: str) -> str:
    if isinstance(kind, FurnitureKind):
        return kind.value
    return kind
