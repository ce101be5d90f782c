"""Textual viewer and editor for a live office session."""

from __future__ import annotations

from dataclasses import dataclass

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import Label, ListItem, ListView, Static

from pixeloffice.render.office_map import (
    compute_viewport,
    render_agent_table,
    render_office_lines,
)
from pixeloffice.render.textual_widgets import MapPointer, MapRenderResult, OfficeMapWidget
from pixeloffice.sim.catalog import get_catalog_entry
from pixeloffice.sim.demo_feed import DemoFeed
from pixeloffice.sim.editor import EditTool
from pixeloffice.sim.frame import FrameSnapshot
from pixeloffice.sim.session import OfficeSession

RIGHT_WIDTH = 40

TOOL_KEYS = {
    "1": EditTool.SELECT,
    "2": EditTool.TILE_PAINT,
    "3": EditTool.FURNITURE_PLACE,
    "4": EditTool.ERASE,
}


@dataclass
class ViewerState:
    paused: bool = False
    last_message: str = ""


class AgentListItem(ListItem):
    def __init__(self, agent_id: int, label: str) -> None:
        super().__init__(Label(label))
        self.agent_id = agent_id


class OfficeViewerScreen(Screen):
    CSS = """
    Screen {
        layout: vertical;
    }
    #main {
        layout: horizontal;
        height: 1fr;
    }
    #office-map {
        width: 1fr;
    }
    #right-pane {
        layout: vertical;
    }
    #status-bar {
        height: 3;
    }
    """

    BINDINGS = [
        ("space", "toggle_pause", "Pause"),
        ("q", "quit", "Quit"),
        ("e", "toggle_edit", "Edit mode"),
        ("1", "tool('1')", "Select"),
        ("2", "tool('2')", "Paint"),
        ("3", "tool('3')", "Place"),
        ("4", "tool('4')", "Erase"),
        ("left_square_bracket", "cycle(-1)", "Prev"),
        ("right_square_bracket", "cycle(1)", "Next"),
        ("u", "undo", "Undo"),
        ("r", "redo", "Redo"),
        ("delete", "delete_selected", "Delete"),
        ("up", "nudge(0, -1)", "Up"),
        ("down", "nudge(0, 1)", "Down"),
        ("left", "nudge(-1, 0)", "Left"),
        ("right", "nudge(1, 0)", "Right"),
    ]

    def __init__(
        self,
        session: OfficeSession,
        *,
        feed: DemoFeed | None = None,
        tick_delay: float = 0.05,
        max_ticks: int | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.feed = feed
        self.tick_delay = tick_delay
        self.max_ticks = max_ticks
        self.state = ViewerState()
        self.frame: FrameSnapshot = session.frame()
        self._timer: Timer | None = None
        self._map_widget: OfficeMapWidget | None = None
        self._agent_list: ListView | None = None
        self._details: Static | None = None
        self._status_bar: Static | None = None
        self._listed_ids: list[int] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            with Horizontal(id="main"):
                yield OfficeMapWidget(self._render_map, id="office-map")
                with Vertical(id="right-pane"):
                    yield ListView(id="agent-list")
                    yield Static(id="details")
            yield Static(id="status-bar")

    def on_mount(self) -> None:
        self._map_widget = self.query_one("#office-map", OfficeMapWidget)
        self._agent_list = self.query_one("#agent-list", ListView)
        self._details = self.query_one("#details", Static)
        self._status_bar = self.query_one("#status-bar", Static)
        self.query_one("#right-pane").styles.width = RIGHT_WIDTH
        self._agent_list.styles.height = "1fr"
        self._agent_list.can_focus = False
        self._details.styles.height = "1fr"

        self.session.start()
        if self.feed is not None:
            for event in self.feed.initial_events():
                self.session.dispatch(event)
        self._timer = self.set_interval(self.tick_delay, self._on_tick)
        self._refresh_ui()

    def on_unmount(self) -> None:
        if self._timer is not None:
            self._timer.stop()
        self.session.stop()

    # --- Clock ---

    def _on_tick(self) -> None:
        if self.state.paused:
            return
        if self.max_ticks is not None and self.session.tick >= self.max_ticks:
            self.app.exit()
            return
        if self.feed is not None:
            for event in self.feed.events_for_tick(self.session.tick):
                self.session.dispatch(event)
        self.session.advance(self.tick_delay)
        self._refresh_ui()

    # --- Input ---

    def on_map_pointer(self, message: MapPointer) -> None:
        editor = self.session.editor
        cell = message.cell
        if message.kind == "leave":
            editor.pointer_leave()
        elif message.kind == "up":
            editor.pointer_up()
        elif cell is None:
            editor.pointer_off_map()
        elif editor.state.is_edit_mode:
            if message.kind == "down":
                editor.pointer_down(*cell)
            else:
                editor.pointer_move(*cell)
        elif message.kind == "down":
            self._select_character_at(cell)
        self._refresh_ui()

    def _select_character_at(self, cell: tuple[int, int]) -> None:
        office = self.session.office
        hit = office.get_character_at(*office.config.tile_center(*cell))
        if hit is None:
            seat_id = office.get_seat_at_tile(*cell)
            selected = office.selected_agent_id
            if seat_id is not None and selected is not None:
                office.reassign_seat(selected, seat_id)
                self.state.last_message = f"Agent {selected} -> seat {seat_id}"
            return
        office.select_agent(hit)
        office.dismiss_bubble(hit)
        self.state.last_message = f"Selected agent {hit}"

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, AgentListItem):
            self.session.office.select_agent(event.item.agent_id)
            self._refresh_ui()

    def action_toggle_pause(self) -> None:
        self.state.paused = not self.state.paused
        self._refresh_ui()

    def action_quit(self) -> None:
        self.app.exit()

    def action_toggle_edit(self) -> None:
        enabled = self.session.editor.toggle_edit_mode()
        self.state.last_message = "Edit mode on" if enabled else "Edit mode off"
        self._refresh_ui()

    def action_tool(self, key: str) -> None:
        editor = self.session.editor
        if not editor.state.is_edit_mode:
            return
        editor.set_tool(TOOL_KEYS[key])
        self._refresh_ui()

    def action_cycle(self, delta: int) -> None:
        if self.session.editor.state.is_edit_mode:
            self.session.editor.cycle_palette(delta)
            self._refresh_ui()

    def action_undo(self) -> None:
        if self.session.editor.undo():
            self.state.last_message = "Undone"
        self._refresh_ui()

    def action_redo(self) -> None:
        if self.session.editor.redo():
            self.state.last_message = "Redone"
        self._refresh_ui()

    def action_delete_selected(self) -> None:
        if self.session.editor.delete_selected():
            self.state.last_message = "Removed furniture"
        self._refresh_ui()

    def action_nudge(self, dc: int, dr: int) -> None:
        editor = self.session.editor
        if editor.state.is_edit_mode and editor.nudge_selected(dc, dr):
            self._refresh_ui()

    # --- Rendering ---

    def _refresh_ui(self) -> None:
        self.frame = self.session.frame()
        self._update_agent_list()
        if self._details is not None:
            self._details.update(Panel(self._details_renderable(), title="Details"))
        if self._status_bar is not None:
            self._status_bar.update(Panel(Text(self._status_text()), padding=(0, 1)))
        if self._map_widget is not None:
            self._map_widget.refresh()

    def _update_agent_list(self) -> None:
        if self._agent_list is None:
            return
        ids = sorted(view.id for view in self.frame.characters)
        if ids == self._listed_ids:
            return
        self._listed_ids = ids
        self._agent_list.clear()
        for agent_id in ids:
            label = f"Agent {agent_id}" if agent_id > 0 else f"Sub-agent {agent_id}"
            self._agent_list.append(AgentListItem(agent_id, label))

    def _details_renderable(self):
        editor = self.session.editor.state
        if not editor.is_edit_mode:
            return render_agent_table(self.frame)
        table = Table(show_header=False)
        table.add_column("Field")
        table.add_column("Value")
        table.add_row("Tool", editor.active_tool.value)
        table.add_row("Tile", editor.selected_tile_type.name)
        entry = get_catalog_entry(editor.selected_furniture_type)
        table.add_row("Furniture", entry.label if entry else editor.selected_furniture_type)
        table.add_row("Selected", editor.selected_furniture_uid or "-")
        table.add_row("Undo", str(len(editor.undo_stack)))
        table.add_row("Redo", str(len(editor.redo_stack)))
        return table

    def _render_map(self, size, content_size) -> MapRenderResult:
        inner_width = max(1, content_size.width - 2)
        inner_height = max(1, content_size.height - 2)
        frame = self.frame
        center = None
        selected = (
            frame.character(frame.selected_agent_id)
            if frame.selected_agent_id is not None
            else None
        )
        if selected is not None:
            center = (selected.tile_col, selected.tile_row)
        viewport = compute_viewport(frame.cols, frame.rows, inner_width, inner_height, center=center)
        lines = render_office_lines(frame, viewport=viewport)
        title = "Office (editing)" if frame.editor is not None else "Office"
        renderable = Panel(
            Align.center(Group(*lines), vertical="middle"), title=title, padding=(0, 0)
        )
        return MapRenderResult(
            renderable=renderable,
            viewport=viewport,
            offset_x=1 + max(0, (inner_width - viewport.width) // 2),
            offset_y=1 + max(0, (inner_height - viewport.height) // 2),
        )

    def _status_text(self) -> str:
        mode = "paused" if self.state.paused else "live"
        base = (
            "space=pause | q=quit | e=edit | click=select/seat | "
            f"tick={self.session.tick} | status={mode}"
        )
        if self.session.editor.state.is_edit_mode:
            base = (
                "EDIT 1=select 2=paint 3=place 4=erase | [/]=palette | "
                "u/r=undo/redo | del=remove | arrows=move"
            )
        if self.state.last_message:
            return f"{base} | {self.state.last_message}"
        return base


class PixelOfficeApp(App):
    """Run one office screen; the session stops when the app exits."""

    def __init__(self, screen: OfficeViewerScreen, *, title: str = "Pixel Office") -> None:
        super().__init__()
        self._initial_screen = screen
        self.title = title

    def on_mount(self) -> None:
        self.push_screen(self._initial_screen)


def run_office_viewer(
    session: OfficeSession,
    *,
    feed: DemoFeed | None = None,
    tick_delay: float = 0.05,
    max_ticks: int | None = None,
    edit_mode: bool = False,
) -> None:
    if edit_mode and not session.editor.state.is_edit_mode:
        session.editor.toggle_edit_mode()
    screen = OfficeViewerScreen(session, feed=feed, tick_delay=tick_delay, max_ticks=max_ticks)
    PixelOfficeApp(screen).run()
