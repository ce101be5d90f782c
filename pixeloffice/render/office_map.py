"""Rich rendering of a frame snapshot, one glyph per tile."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pixeloffice.sim.contracts import BubbleKind, Cell, CharacterState, TileKind
from pixeloffice.sim.frame import CharacterView, FrameSnapshot

TILE_GLYPHS = {
    TileKind.WALL: "#",
    TileKind.TILE_FLOOR: ".",
    TileKind.WOOD_FLOOR: ",",
    TileKind.CARPET: ":",
    TileKind.DOORWAY: "+",
}

TILE_STYLES = {
    TileKind.WALL: "bright_magenta",
    TileKind.TILE_FLOOR: "grey70",
    TileKind.WOOD_FLOOR: "yellow3",
    TileKind.CARPET: "red",
    TileKind.DOORWAY: "yellow",
}

FURNITURE_GLYPHS = {
    "desk": "D",
    "bookshelf": "B",
    "plant": "*",
    "cooler": "c",
    "whiteboard": "W",
    "chair": "h",
    "pc": "p",
    "pc_on": "P",
    "lamp": "l",
    "lamp_on": "L",
}

FURNITURE_STYLE = "bright_yellow"
POWERED_STYLE = "bold bright_green"
PALETTE_STYLES = ("bright_cyan", "bright_red", "bright_green", "bright_blue", "magenta", "orange1")
SELECTED_AGENT_STYLE = "bold reverse"
GHOST_VALID_STYLE = "on dark_green"
GHOST_INVALID_STYLE = "on dark_red"
SELECTION_STYLE = "on grey37"

STATE_GLYPHS = {
    CharacterState.IDLE: "@",
    CharacterState.WALK: "@",
    CharacterState.TYPE: "&",
}

BUBBLE_GLYPHS = {
    BubbleKind.PERMISSION: "!",
    BubbleKind.WAITING: "?",
}


@dataclass(frozen=True)
class Viewport:
    x: int
    y: int
    width: int
    height: int


def compute_viewport(
    cols: int,
    rows: int,
    max_width: int,
    max_height: int,
    *,
    center: Cell | None = None,
    origin: Cell | None = None,
) -> Viewport:
    """Largest window that fits, centred on ``center`` or anchored at ``origin``."""
    width = max(1, min(cols, max_width))
    height = max(1, min(rows, max_height))
    if center is not None:
        x, y = center[0] - width // 2, center[1] - height // 2
    else:
        x, y = origin or (0, 0)
    return Viewport(
        x=_clamp(x, 0, cols - width),
        y=_clamp(y, 0, rows - height),
        width=width,
        height=height,
    )


def full_viewport(frame: FrameSnapshot) -> Viewport:
    return Viewport(x=0, y=0, width=frame.cols, height=frame.rows)


def character_cell(view: CharacterView, tile_size: int) -> tuple[int, int]:
    """Grid cell under the character's current pixel position."""
    return (int(view.x // tile_size), int(view.y // tile_size))


def render_office_lines(
    frame: FrameSnapshot,
    *,
    viewport: Viewport | None = None,
) -> list[Text]:
    viewport = viewport or full_viewport(frame)
    grid = [[TILE_GLYPHS.get(tile, "?") for tile in row] for row in frame.tiles]
    styles = [[TILE_STYLES.get(tile, "grey70") for tile in row] for row in frame.tiles]

    for item in frame.furniture:
        glyph = FURNITURE_GLYPHS.get(item.type, "?")
        style = POWERED_STYLE if item.type.endswith("_on") else FURNITURE_STYLE
        for dr in range(item.height):
            for dc in range(item.width):
                _put(grid, styles, item.col + dc, item.row + dr, glyph, style)

    overlay = frame.editor
    if overlay is not None:
        if overlay.selected_col is not None and overlay.selected_row is not None:
            _apply_area_style(
                styles,
                overlay.selected_col,
                overlay.selected_row,
                overlay.selected_width,
                overlay.selected_height,
                SELECTION_STYLE,
            )
        if overlay.ghost_col is not None and overlay.ghost_row is not None:
            _apply_area_style(
                styles,
                overlay.ghost_col,
                overlay.ghost_row,
                overlay.ghost_width,
                overlay.ghost_height,
                GHOST_VALID_STYLE if overlay.ghost_valid else GHOST_INVALID_STYLE,
            )

    for view in frame.characters:
        col, row = character_cell(view, frame.tile_size)
        glyph = BUBBLE_GLYPHS.get(view.bubble, STATE_GLYPHS[view.state])
        style = PALETTE_STYLES[view.palette % len(PALETTE_STYLES)]
        if view.id == frame.selected_agent_id:
            style = f"{style} {SELECTED_AGENT_STYLE}"
        _put(grid, styles, col, row, glyph, style)

    columns = range(viewport.x, viewport.x + viewport.width)
    return [
        Text.assemble(*((grid[y][x], styles[y][x]) for x in columns))
        for y in range(viewport.y, viewport.y + viewport.height)
    ]


def render_agent_table(frame: FrameSnapshot) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Id")
    table.add_column("State")
    table.add_column("Cell")
    table.add_column("Seat")
    table.add_column("Tool")
    for view in sorted(frame.characters, key=lambda v: (v.is_subagent, abs(v.id))):
        label = f"{view.id}" if not view.is_subagent else f"{view.id} <{view.parent_agent_id}"
        state = view.animation if view.is_active else f"{view.animation} (idle)"
        table.add_row(
            label,
            state,
            f"{view.tile_col},{view.tile_row}",
            view.seat_id or "-",
            view.current_tool or "-",
        )
    if not frame.characters:
        table.add_row("-", "No agents", "", "", "")
    return table


def render_frame_panel(frame: FrameSnapshot) -> RenderableType:
    lines = render_office_lines(frame)
    return Group(
        Panel(Group(*lines), title=f"Office (tick {frame.tick})", expand=False),
        Panel(render_agent_table(frame), title="Agents", expand=False),
    )


def _put(
    grid: list[list[str]],
    styles: list[list[str]],
    col: int,
    row: int,
    glyph: str,
    style: str,
) -> None:
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        grid[row][col] = glyph
        styles[row][col] = style


def _apply_area_style(
    styles: list[list[str]], col: int, row: int, width: int, height: int, style: str
) -> None:
    for r in range(row, row + height):
        for c in range(col, col + width):
            if 0 <= r < len(styles) and 0 <= c < len(styles[r]):
                styles[r][c] = f"{styles[r][c]} {style}"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
