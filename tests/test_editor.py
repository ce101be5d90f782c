import random

from pixeloffice.sim.contracts import TileKind
from pixeloffice.sim.editor import EditorState, EditTool, LayoutEditor
from pixeloffice.sim.layout import create_default_layout, tile_at
from pixeloffice.sim.office_state import OfficeState


def _editor() -> LayoutEditor:
    editor = LayoutEditor(OfficeState(rng=random.Random(0)))
    editor.toggle_edit_mode()
    return editor


def test_undo_stack_is_bounded() -> None:
    state = EditorState()
    layouts = [create_default_layout() for _ in range(51)]
    for layout in layouts:
        state.push_undo(layout)

    assert len(state.undo_stack) == 50
    assert state.undo_stack[0] is layouts[1]
    popped = [state.pop_undo() for _ in range(50)]
    assert popped[0] is layouts[-1]
    assert state.pop_undo() is None


def test_pop_on_empty_stacks_is_none() -> None:
    state = EditorState()

    assert state.pop_undo() is None
    assert state.pop_redo() is None


def test_drag_paints_each_cell_once() -> None:
    editor = _editor()
    editor.set_tool(EditTool.TILE_PAINT)
    editor.select_tile_kind(TileKind.CARPET)

    editor.pointer_down(2, 2)
    editor.pointer_move(2, 2)
    assert len(editor.state.undo_stack) == 1
    editor.pointer_move(3, 2)
    editor.pointer_move(3, 2)
    assert len(editor.state.undo_stack) == 2
    editor.pointer_up()
    editor.pointer_move(4, 2)

    layout = editor.office.get_layout()
    assert tile_at(layout, 2, 2) == TileKind.CARPET
    assert tile_at(layout, 3, 2) == TileKind.CARPET
    assert tile_at(layout, 4, 2) == TileKind.TILE_FLOOR
    assert len(editor.state.undo_stack) == 2


def test_drag_repaints_cell_after_leaving_the_map() -> None:
    editor = _editor()
    editor.set_tool(EditTool.TILE_PAINT)
    editor.select_tile_kind(TileKind.CARPET)

    editor.pointer_down(2, 2)
    editor.pointer_move(-1, 2)
    assert editor.state.is_dragging
    assert editor.state.ghost_cell is None

    editor.select_tile_kind(TileKind.WOOD_FLOOR)
    editor.pointer_move(2, 2)

    assert tile_at(editor.office.get_layout(), 2, 2) == TileKind.WOOD_FLOOR
    assert len(editor.state.undo_stack) == 2


def test_undo_and_redo() -> None:
    editor = _editor()
    editor.set_tool(EditTool.TILE_PAINT)
    editor.select_tile_kind(TileKind.WALL)
    original = editor.office.get_layout()

    assert editor.apply_at(2, 2)
    assert editor.undo()
    assert editor.office.get_layout() is original
    assert editor.redo()
    assert tile_at(editor.office.get_layout(), 2, 2) == TileKind.WALL
    assert not editor.redo()

    editor.undo()
    editor.apply_at(3, 3)
    assert len(editor.state.redo_stack) == 0


def test_unchanged_edit_records_no_history() -> None:
    editor = _editor()
    editor.set_tool(EditTool.TILE_PAINT)
    editor.select_tile_kind(TileKind.TILE_FLOOR)

    assert not editor.apply_at(2, 2)
    assert len(editor.state.undo_stack) == 0


def test_ghost_validity_for_placement() -> None:
    editor = _editor()
    editor.set_tool(EditTool.FURNITURE_PLACE)
    editor.select_furniture_kind("desk")

    editor.pointer_move(4, 3)
    assert editor.state.ghost_cell == (4, 3)
    assert not editor.state.ghost_valid
    editor.pointer_move(7, 6)
    assert editor.state.ghost_valid
    editor.pointer_move(25, 6)
    assert editor.state.ghost_cell is None


def test_place_and_erase_furniture() -> None:
    editor = _editor()
    editor.set_tool(EditTool.FURNITURE_PLACE)
    editor.select_furniture_kind("desk")
    before = len(editor.office.get_layout().furniture)

    editor.pointer_down(7, 6)
    editor.pointer_up()
    layout = editor.office.get_layout()
    assert len(layout.furniture) == before + 1
    assert len(editor.office.seats) == 12
    assert not editor.state.ghost_valid

    editor.set_tool(EditTool.ERASE)
    assert editor.apply_at(8, 7)
    assert len(editor.office.get_layout().furniture) == before
    assert not editor.apply_at(8, 7)


def test_select_move_and_delete() -> None:
    editor = _editor()

    editor.pointer_down(1, 1)
    editor.pointer_up()
    assert editor.state.selected_furniture_uid == "plant-left"

    assert editor.nudge_selected(1, 0)
    assert editor.office.get_layout().find_furniture("plant-left").col == 2
    assert not editor.move_selected(4, 3)

    assert editor.delete_selected()
    assert editor.state.selected_furniture_uid is None
    assert editor.office.get_layout().find_furniture("plant-left") is None

    editor.undo()
    assert editor.office.get_layout().find_furniture("plant-left") is not None


def test_undo_drops_stale_selection() -> None:
    editor = _editor()
    editor.set_tool(EditTool.FURNITURE_PLACE)
    editor.select_furniture_kind("plant")
    editor.apply_at(7, 7)
    editor.set_tool(EditTool.SELECT)
    editor.apply_at(7, 7)
    assert editor.state.selected_furniture_uid is not None

    editor.undo()
    assert editor.state.selected_furniture_uid is None


def test_input_ignored_outside_edit_mode() -> None:
    editor = LayoutEditor(OfficeState(rng=random.Random(0)))
    editor.state.active_tool = EditTool.TILE_PAINT
    layout = editor.office.get_layout()

    editor.pointer_down(2, 2)
    editor.pointer_move(3, 2)

    assert editor.office.get_layout() is layout
    assert editor.state.ghost_cell is None


def test_leaving_edit_mode_clears_transient_state() -> None:
    editor = _editor()
    editor.pointer_down(1, 1)
    assert editor.state.selected_furniture_uid == "plant-left"

    assert not editor.toggle_edit_mode()
    assert editor.state.selected_furniture_uid is None
    assert editor.state.ghost_cell is None
    assert not editor.state.is_dragging


def test_palette_cycling() -> None:
    editor = _editor()
    editor.set_tool(EditTool.TILE_PAINT)

    editor.cycle_palette(1)
    assert editor.state.selected_tile_type == TileKind.WOOD_FLOOR
    editor.cycle_palette(-2)
    assert editor.state.selected_tile_type == TileKind.WALL

    editor.set_tool(EditTool.FURNITURE_PLACE)
    editor.cycle_palette(-1)
    assert editor.state.selected_furniture_type == "lamp"
    editor.select_furniture_kind("pc_on")
    assert editor.state.selected_furniture_type == "lamp"
