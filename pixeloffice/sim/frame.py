"""Per-frame snapshot handed to renderers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pixeloffice.sim.catalog import get_catalog_entry
from pixeloffice.sim.characters import animation_name
from pixeloffice.sim.contracts import BubbleKind, CharacterState, Direction, TileKind
from pixeloffice.sim.editor import EditTool, LayoutEditor
from pixeloffice.sim.office_state import OfficeState


class CharacterView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    x: float
    y: float
    tile_col: int
    tile_row: int
    state: CharacterState
    facing: Direction
    frame: int
    animation: str
    palette: int
    is_active: bool
    is_subagent: bool = False
    parent_agent_id: int | None = None
    current_tool: str | None = None
    bubble: BubbleKind | None = None
    seat_id: str | None = None


class FurnitureView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    uid: str
    type: str
    sprite: str
    col: int
    row: int
    width: int
    height: int
    x: int
    y: int
    z_y: int


class EditorOverlay(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tool: EditTool
    ghost_col: int | None = None
    ghost_row: int | None = None
    ghost_valid: bool = False
    ghost_width: int = 1
    ghost_height: int = 1
    selected_uid: str | None = None
    selected_col: int | None = None
    selected_row: int | None = None
    selected_width: int = 0
    selected_height: int = 0
    undo_depth: int = 0


class FrameSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tick: int
    cols: int
    rows: int
    tile_size: int
    tiles: list[list[TileKind]]
    furniture: list[FurnitureView] = Field(default_factory=list)
    characters: list[CharacterView] = Field(default_factory=list)
    selected_agent_id: int | None = None
    editor: EditorOverlay | None = None

    def character(self, character_id: int) -> CharacterView | None:
        for view in self.characters:
            if view.id == character_id:
                return view
        return None


def build_frame(
    office: OfficeState,
    editor: LayoutEditor | None = None,
    *,
    tick: int = 0,
) -> FrameSnapshot:
    grid = office.tile_grid
    furniture = [
        FurnitureView(
            uid=item.uid,
            type=item.type,
            sprite=item.sprite,
            col=item.col,
            row=item.row,
            width=item.footprint_w,
            height=item.footprint_h,
            x=item.x,
            y=item.y,
            z_y=item.z_y,
        )
        for item in sorted(office.furniture, key=lambda f: f.z_y)
    ]
    characters = [
        CharacterView(
            id=ch.id,
            x=ch.x,
            y=ch.y,
            tile_col=ch.tile_col,
            tile_row=ch.tile_row,
            state=ch.state,
            facing=ch.facing,
            frame=ch.frame,
            animation=animation_name(ch),
            palette=ch.palette,
            is_active=ch.is_active,
            is_subagent=ch.is_subagent,
            parent_agent_id=ch.parent_agent_id,
            current_tool=ch.current_tool,
            bubble=ch.bubble,
            seat_id=ch.seat_id,
        )
        for ch in sorted(office.characters.values(), key=lambda c: c.y)
    ]
    overlay = None
    if editor is not None and editor.state.is_edit_mode:
        overlay = _build_overlay(office, editor)
    return FrameSnapshot(
        tick=tick,
        cols=grid.cols,
        rows=grid.rows,
        tile_size=office.config.tile_size,
        tiles=[list(row) for row in grid.tiles],
        furniture=furniture,
        characters=characters,
        selected_agent_id=office.selected_agent_id,
        editor=overlay,
    )


def _build_overlay(office: OfficeState, editor: LayoutEditor) -> EditorOverlay:
    state = editor.state
    overlay = EditorOverlay(tool=state.active_tool, undo_depth=len(state.undo_stack))
    cell = state.ghost_cell
    if cell is not None:
        overlay.ghost_col, overlay.ghost_row = cell
        overlay.ghost_valid = state.ghost_valid
        if state.active_tool == EditTool.FURNITURE_PLACE:
            entry = get_catalog_entry(state.selected_furniture_type)
            if entry is not None:
                overlay.ghost_width = entry.footprint_w
                overlay.ghost_height = entry.footprint_h
    uid = state.selected_furniture_uid
    item = office.get_layout().find_furniture(uid) if uid else None
    if item is not None:
        entry = get_catalog_entry(item.type)
        overlay.selected_uid = item.uid
        overlay.selected_col = item.col
        overlay.selected_row = item.row
        overlay.selected_width = entry.footprint_w if entry else 1
        overlay.selected_height = entry.footprint_h if entry else 1
    return overlay
