"""Core data contracts shared by the engine and its consumers."""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pixeloffice.sim.catalog import footprint_cells, get_catalog_entry

LAYOUT_VERSION = 1

Cell = tuple[int, int]


class TileKind(IntEnum):
    WALL = 0
    TILE_FLOOR = 1
    WOOD_FLOOR = 2
    CARPET = 3
    DOORWAY = 4


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class CharacterState(str, Enum):
    IDLE = "idle"
    WALK = "walk"
    TYPE = "type"


class BubbleKind(str, Enum):
    PERMISSION = "permission"
    WAITING = "waiting"


class PlacedFurniture(BaseModel):
    """A furniture item anchored at its top-left cell.

    ``type`` stays a plain string so kinds unknown to this build survive a
    load/save cycle; the catalog decides whether they take part in anything.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    uid: str
    type: str
    col: int
    row: int

    @field_validator("type", mode="before")
    @classmethod
    def _enum_to_value(cls, value):
        if isinstance(value, Enum):
            return value.value
        return value


class OfficeLayout(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    version: int = LAYOUT_VERSION
    cols: int = Field(ge=1)
    rows: int = Field(ge=1)
    tiles: tuple[TileKind, ...]
    furniture: tuple[PlacedFurniture, ...] = ()

    @model_validator(mode="after")
    def validate_layout(self) -> "OfficeLayout":
        if len(self.tiles) != self.cols * self.rows:
            raise ValueError("tiles must hold exactly cols * rows entries")
        uids = [item.uid for item in self.furniture]
        if len(uids) != len(set(uids)):
            raise ValueError("furniture uids must be unique")
        occupied: set[Cell] = set()
        for item in self.furniture:
            if get_catalog_entry(item.type) is None:
                continue
            cells = footprint_cells(item.type, item.col, item.row)
            if any(not (0 <= c < self.cols and 0 <= r < self.rows) for c, r in cells):
                raise ValueError(f"furniture {item.uid} leaves the grid")
            if occupied.intersection(cells):
                raise ValueError(f"furniture {item.uid} overlaps another item")
            occupied.update(cells)
        return self

    def index_of(self, col: int, row: int) -> int | None:
        if not (0 <= col < self.cols and 0 <= row < self.rows):
            return None
        return row * self.cols + col

    def find_furniture(self, uid: str) -> PlacedFurniture | None:
        for item in self.furniture:
            if item.uid == uid:
                return item
        return None
