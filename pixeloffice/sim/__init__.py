"""Office simulation engine."""

from pixeloffice.sim.catalog import CatalogEntry, FurnitureKind, get_catalog_entry
from pixeloffice.sim.characters import Character, update_character
from pixeloffice.sim.contracts import (
    LAYOUT_VERSION,
    BubbleKind,
    CharacterState,
    Direction,
    OfficeLayout,
    PlacedFurniture,
    TileKind,
)
from pixeloffice.sim.editor import EditorState, EditTool, LayoutEditor
from pixeloffice.sim.events import HostEvent, HostEventKind, apply_event, coerce_event
from pixeloffice.sim.frame import FrameSnapshot, build_frame
from pixeloffice.sim.layout import (
    can_place_furniture,
    create_default_layout,
    deserialize_layout,
    move_furniture,
    paint_tile,
    place_furniture,
    remove_furniture,
    serialize_layout,
)
from pixeloffice.sim.office_state import OfficeState
from pixeloffice.sim.pathfinding import TileGrid, find_path
from pixeloffice.sim.seats import Seat, SeatRegistry
from pixeloffice.sim.session import OfficeSession

__all__ = [
    "BubbleKind",
    "CatalogEntry",
    "Character",
    "CharacterState",
    "Direction",
    "EditTool",
    "EditorState",
    "FrameSnapshot",
    "FurnitureKind",
    "HostEvent",
    "HostEventKind",
    "LAYOUT_VERSION",
    "LayoutEditor",
    "OfficeLayout",
    "OfficeSession",
    "OfficeState",
    "PlacedFurniture",
    "Seat",
    "SeatRegistry",
    "TileGrid",
    "TileKind",
    "apply_event",
    "build_frame",
    "can_place_furniture",
    "coerce_event",
    "create_default_layout",
    "deserialize_layout",
    "find_path",
    "get_catalog_entry",
    "move_furniture",
    "paint_tile",
    "place_furniture",
    "remove_furniture",
    "serialize_layout",
    "update_character",
]
