"""Textual widget for the office map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.console import RenderableType
from textual.events import Leave, MouseDown, MouseEvent, MouseMove, MouseUp
from textual.geometry import Size
from textual.message import Message
from textual.widget import Widget

from pixeloffice.render.office_map import Viewport


@dataclass(frozen=True)
class MapRenderResult:
    """What was drawn, and where the grid sits inside the widget."""

    renderable: RenderableType
    viewport: Viewport
    offset_x: int
    offset_y: int

    def cell_at(self, x: int, y: int) -> tuple[int, int] | None:
        col = x - self.offset_x
        row = y - self.offset_y
        if not (0 <= col < self.viewport.width and 0 <= row < self.viewport.height):
            return None
        return (self.viewport.x + col, self.viewport.y + row)


class MapPointer(Message):
    """Pointer activity resolved to grid coordinates.

    ``kind`` is one of ``down``, ``move``, ``up`` or ``leave``; ``cell`` is
    ``None`` when the pointer is outside the drawn map.
    """

    def __init__(self, *, kind: str, cell: tuple[int, int] | None) -> None:
        super().__init__()
        self.kind = kind
        self.cell = cell


class OfficeMapWidget(Widget):
    def __init__(
        self,
        render_map: Callable[[Size, Size], MapRenderResult],
        *,
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self._render_map = render_map
        self._last: MapRenderResult | None = None

    def render(self) -> RenderableType:
        self._last = self._render_map(self.size, self.content_size)
        return self._last.renderable

    def on_mouse_down(self, event: MouseDown) -> None:
        self.capture_mouse()
        self._emit("down", event)

    def on_mouse_move(self, event: MouseMove) -> None:
        self._emit("move", event)

    def on_mouse_up(self, event: MouseUp) -> None:
        self.release_mouse()
        self._emit("up", event)

    def on_leave(self, event: Leave) -> None:
        self.post_message(MapPointer(kind="leave", cell=None))

    def _emit(self, kind: str, event: MouseEvent) -> None:
        offset = event.get_content_offset(self)
        cell = None if offset is None else self.resolve_point(*offset)
        self.post_message(MapPointer(kind=kind, cell=cell))

    def resolve_point(self, x: int, y: int) -> tuple[int, int] | None:
        if self._last is None:
            return None
        return self._last.cell_at(x, y)
