from rich.console import Console

from pixeloffice.render.office_map import (
    compute_viewport,
    render_agent_table,
    render_frame_panel,
    render_office_lines,
)
from pixeloffice.render.textual_widgets import MapRenderResult
from pixeloffice.sim.editor import EditTool
from pixeloffice.sim.session import OfficeSession


def _session() -> OfficeSession:
    session = OfficeSession(seed=0)
    session.start()
    session.dispatch({"kind": "agent_created", "agent_id": 1})
    session.dispatch({"kind": "agent_tool", "agent_id": 1, "tool": "Edit"})
    return session


def test_frame_panel_renders() -> None:
    frame = _session().frame()

    console = Console(width=120, record=True)
    console.print(render_frame_panel(frame))
    output = console.export_text()

    assert "Office (tick 0)" in output
    assert "Agents" in output
    assert "Edit" in output
    assert "desk-left:top" in output


def test_office_lines_match_grid() -> None:
    frame = _session().frame()
    lines = render_office_lines(frame)

    assert len(lines) == frame.rows
    assert all(len(line.plain) == frame.cols for line in lines)
    assert lines[0].plain[0] == "#"
    assert lines[2].plain[4] == "&"
    assert lines[3].plain[4] == "D"


def test_bubbles_replace_character_glyph() -> None:
    session = _session()
    session.dispatch({"kind": "permission_shown", "agent_id": 1})
    lines = render_office_lines(session.frame())
    assert lines[2].plain[4] == "!"

    session.dispatch({"kind": "permission_cleared", "agent_id": 1})
    session.dispatch({"kind": "waiting_shown", "agent_id": 1})
    lines = render_office_lines(session.frame())
    assert lines[2].plain[4] == "?"


def test_empty_office_table() -> None:
    session = OfficeSession(seed=0)

    console = Console(width=80, record=True)
    console.print(render_agent_table(session.frame()))
    assert "No agents" in console.export_text()


def test_edit_overlay_only_in_edit_mode() -> None:
    session = _session()
    assert session.frame().editor is None

    session.editor.toggle_edit_mode()
    session.editor.set_tool(EditTool.FURNITURE_PLACE)
    session.editor.pointer_move(7, 6)
    overlay = session.frame().editor

    assert overlay is not None
    assert (overlay.ghost_col, overlay.ghost_row) == (7, 6)
    assert (overlay.ghost_width, overlay.ghost_height) == (2, 2)
    assert overlay.ghost_valid
    assert len(render_office_lines(session.frame())) == 11


def test_frame_orders_furniture_by_depth() -> None:
    frame = _session().frame()
    depths = [item.z_y for item in frame.furniture]

    assert depths == sorted(depths)


def test_compute_viewport_clamps_to_world() -> None:
    viewport = compute_viewport(20, 11, 10, 5, center=(19, 10))

    assert (viewport.x, viewport.y) == (10, 6)
    assert (viewport.width, viewport.height) == (10, 5)
    assert compute_viewport(20, 11, 40, 40).width == 20


def test_map_render_result_resolves_points() -> None:
    frame = _session().frame()
    viewport = compute_viewport(frame.cols, frame.rows, 10, 5, origin=(3, 2))
    result = MapRenderResult(renderable="", viewport=viewport, offset_x=1, offset_y=1)

    assert result.cell_at(1, 1) == (3, 2)
    assert result.cell_at(5, 3) == (7, 4)
    assert result.cell_at(0, 0) is None
    assert result.cell_at(11, 1) is None
    assert result.cell_at(10, 5) == (12, 6)
