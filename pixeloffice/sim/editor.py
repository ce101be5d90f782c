"""Edit-mode state, undo history and the layout editing controller."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from pixeloffice.sim.catalog import FurnitureKind, get_catalog_entry, placeable_kinds
from pixeloffice.sim.contracts import Cell, OfficeLayout, PlacedFurniture, TileKind
from pixeloffice.sim.layout import (
    can_place_furniture,
    furniture_at,
    move_furniture,
    paint_tile,
    place_furniture,
    remove_furniture,
)
from pixeloffice.sim.office_state import OfficeState

logger = logging.getLogger(__name__)

UNDO_LIMIT = 50


class EditTool(str, Enum):
    SELECT = "select"
    TILE_PAINT = "tile_paint"
    FURNITURE_PLACE = "furniture_place"
    ERASE = "erase"


@dataclass
class EditorState:
    is_edit_mode: bool = False
    active_tool: EditTool = EditTool.SELECT
    selected_tile_type: TileKind = TileKind.TILE_FLOOR
    selected_furniture_type: str = FurnitureKind.DESK.value
    ghost_col: int = -1
    ghost_row: int = -1
    ghost_valid: bool = False
    selected_furniture_uid: str | None = None
    is_dragging: bool = False
    undo_limit: int = UNDO_LIMIT
    undo_stack: deque[OfficeLayout] = field(init=False)
    redo_stack: deque[OfficeLayout] = field(init=False)

    def __post_init__(self) -> None:
        self.undo_stack = deque(maxlen=self.undo_limit)
        self.redo_stack = deque(maxlen=self.undo_limit)

    def push_undo(self, layout: OfficeLayout) -> None:
        # deque(maxlen) drops the oldest snapshot once full.
        self.undo_stack.append(layout)

    def pop_undo(self) -> OfficeLayout | None:
        if not self.undo_stack:
            return None
        return self.undo_stack.pop()

    def push_redo(self, layout: OfficeLayout) -> None:
        self.redo_stack.append(layout)

    def pop_redo(self) -> OfficeLayout | None:
        if not self.redo_stack:
            return None
        return self.redo_stack.pop()

    @property
    def ghost_cell(self) -> Cell | None:
        if self.ghost_col < 0 or self.ghost_row < 0:
            return None
        return (self.ghost_col, self.ghost_row)

    def clear_selection(self) -> None:
        self.selected_furniture_uid = None

    def clear_ghost(self) -> None:
        self.ghost_col = -1
        self.ghost_row = -1
        self.ghost_valid = False

    def reset(self) -> None:
        self.active_tool = EditTool.SELECT
        self.selected_furniture_uid = None
        self.clear_ghost()
        self.is_dragging = False
        self.undo_stack.clear()
        self.redo_stack.clear()


class LayoutEditor:
    """Turns pointer input into immutable layout edits on an ``OfficeState``."""

    def __init__(self, office: OfficeState, state: EditorState | None = None) -> None:
        self.office = office
        self.state = state or EditorState(undo_limit=office.config.undo_limit)
        self._last_drag_cell: Cell | None = None

    # --- Mode and palette ---

    def toggle_edit_mode(self) -> bool:
        self.state.is_edit_mode = not self.state.is_edit_mode
        if not self.state.is_edit_mode:
            self.state.clear_ghost()
            self.state.clear_selection()
            self.state.is_dragging = False
            self._last_drag_cell = None
        return self.state.is_edit_mode

    def set_tool(self, tool: EditTool) -> None:
        self.state.active_tool = EditTool(tool)
        if self.state.active_tool != EditTool.SELECT:
            self.state.clear_selection()
        self._refresh_ghost()

    def select_tile_kind(self, kind: TileKind) -> None:
        self.state.selected_tile_type = TileKind(kind)
        self._refresh_ghost()

    def select_furniture_kind(self, kind: str) -> None:
        entry = get_catalog_entry(kind)
        if entry is None or not entry.placeable:
            return
        self.state.selected_furniture_type = entry.type
        self._refresh_ghost()

    def cycle_palette(self, delta: int) -> None:
        """Step through tile kinds or furniture kinds depending on the tool."""
        if self.state.active_tool == EditTool.FURNITURE_PLACE:
            kinds = placeable_kinds()
            current = self.state.selected_furniture_type
            index = kinds.index(current) if current in kinds else 0
            self.select_furniture_kind(kinds[(index + delta) % len(kinds)])
            return
        kinds = list(TileKind)
        index = kinds.index(self.state.selected_tile_type)
        self.select_tile_kind(kinds[(index + delta) % len(kinds)])

    # --- Pointer input ---

    def pointer_move(self, col: int, row: int) -> None:
        if not self.state.is_edit_mode:
            return
        if not self._in_bounds(col, row):
            self.pointer_off_map()
            return
        self.state.ghost_col = col
        self.state.ghost_row = row
        self._refresh_ghost()
        if (
            self.state.is_dragging
            and self.state.active_tool == EditTool.TILE_PAINT
            and self._last_drag_cell != (col, row)
        ):
            self._last_drag_cell = (col, row)
            self.apply_at(col, row)

    def pointer_down(self, col: int, row: int) -> None:
        if not self.state.is_edit_mode:
            return
        self.state.is_dragging = True
        if not self._in_bounds(col, row):
            return
        self._last_drag_cell = (col, row)
        self.state.ghost_col = col
        self.state.ghost_row = row
        self.apply_at(col, row)

    def pointer_up(self) -> None:
        self.state.is_dragging = False
        self._last_drag_cell = None

    def pointer_off_map(self) -> None:
        """Pointer left the grid; re-entering any cell paints it again mid-drag."""
        self._last_drag_cell = None
        self.state.clear_ghost()

    def pointer_leave(self) -> None:
        self.pointer_up()
        self.state.clear_ghost()

    # --- Actions ---

    def apply_at(self, col: int, row: int) -> bool:
        """Run the active tool at a cell. Returns True when the layout changed."""
        tool = self.state.active_tool
        layout = self.office.get_layout()
        if tool == EditTool.TILE_PAINT:
            changed = self._commit(paint_tile(layout, col, row, self.state.selected_tile_type))
        elif tool == EditTool.FURNITURE_PLACE:
            kind = self.state.selected_furniture_type
            item = PlacedFurniture(uid=_new_uid(kind), type=kind, col=col, row=row)
            changed = self._commit(place_furniture(layout, item))
        elif tool == EditTool.ERASE:
            target = furniture_at(layout, col, row)
            changed = target is not None and self._commit(remove_furniture(layout, target.uid))
        else:
            target = furniture_at(layout, col, row)
            self.state.selected_furniture_uid = target.uid if target else None
            changed = False
        self._refresh_ghost()
        return changed

    def move_selected(self, col: int, row: int) -> bool:
        uid = self.state.selected_furniture_uid
        if uid is None:
            return False
        return self._commit(move_furniture(self.office.get_layout(), uid, col, row))

    def nudge_selected(self, dc: int, dr: int) -> bool:
        uid = self.state.selected_furniture_uid
        item = self.office.get_layout().find_furniture(uid) if uid else None
        if item is None:
            return False
        return self.move_selected(item.col + dc, item.row + dr)

    def delete_selected(self) -> bool:
        uid = self.state.selected_furniture_uid
        if uid is None:
            return False
        changed = self._commit(remove_furniture(self.office.get_layout(), uid))
        if changed:
            self.state.clear_selection()
        return changed

    def undo(self) -> bool:
        previous = self.state.pop_undo()
        if previous is None:
            return False
        self.state.push_redo(self.office.get_layout())
        self._apply_layout(previous)
        return True

    def redo(self) -> bool:
        following = self.state.pop_redo()
        if following is None:
            return False
        self.state.push_undo(self.office.get_layout())
        self._apply_layout(following)
        return True

    # --- Internals ---

    def _commit(self, new_layout: OfficeLayout) -> bool:
        current = self.office.get_layout()
        if new_layout is current:
            return False
        self.state.push_undo(current)
        self.state.redo_stack.clear()
        self._apply_layout(new_layout)
        return True

    def _apply_layout(self, layout: OfficeLayout) -> None:
        self.office.rebuild_from_layout(layout)
        uid = self.state.selected_furniture_uid
        if uid is not None and layout.find_furniture(uid) is None:
            self.state.clear_selection()

    def _refresh_ghost(self) -> None:
        cell = self.state.ghost_cell
        if cell is None:
            self.state.ghost_valid = False
            return
        self.state.ghost_valid = self._is_valid_at(*cell)

    def _is_valid_at(self, col: int, row: int) -> bool:
        layout = self.office.get_layout()
        if not self._in_bounds(col, row):
            return False
        tool = self.state.active_tool
        if tool == EditTool.FURNITURE_PLACE:
            return can_place_furniture(layout, self.state.selected_furniture_type, col, row)
        if tool == EditTool.ERASE:
            return furniture_at(layout, col, row) is not None
        return True

    def _in_bounds(self, col: int, row: int) -> bool:
        layout = self.office.get_layout()
        return 0 <= col < layout.cols and 0 <= row < layout.rows


def _new_uid(kind: str) -> str:
    return f"{kind}-{uuid4().hex[:8]}"
