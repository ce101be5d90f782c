from pixeloffice.app import load_layout_file, run_office
from pixeloffice.sim.demo_feed import DemoFeed
from pixeloffice.sim.layout import create_default_layout, serialize_layout
from pixeloffice.sim.session import OfficeSession


def test_stopped_session_ignores_input() -> None:
    session = OfficeSession(seed=1)

    assert session.dispatch({"kind": "agent_created", "agent_id": 1}) is None
    session.advance(0.1)
    assert session.office.characters == {}
    assert session.tick == 0


def test_running_session_applies_events_and_ticks() -> None:
    with OfficeSession(seed=1) as session:
        assert session.running
        session.dispatch({"kind": "agent_created", "agent_id": 1})
        sub_id = session.dispatch({"kind": "subagent_created", "agent_id": 1, "tool_id": "t"})
        session.dispatch({"bogus": True})
        session.advance(0.1)
        session.advance(0.1)
        frame = session.frame()

    assert not session.running
    assert sub_id == -1
    assert session.tick == 2
    assert frame.tick == 2
    assert {view.id for view in frame.characters} == {1, -1}


def test_sessions_are_independent() -> None:
    first = OfficeSession(seed=1)
    second = OfficeSession(seed=1)
    first.start()
    second.start()

    first.dispatch({"kind": "agent_created", "agent_id": 1})

    assert 1 in first.office.characters
    assert second.office.characters == {}


def test_demo_feed_is_deterministic() -> None:
    first = DemoFeed(3, seed=5, interval=2)
    second = DemoFeed(3, seed=5, interval=2)

    initial = first.initial_events()
    assert initial == second.initial_events()
    assert len(initial) == 6
    for tick in range(20):
        assert first.events_for_tick(tick) == second.events_for_tick(tick)
    assert DemoFeed(3, seed=5, interval=2).events_for_tick(1) == []
    assert DemoFeed(0).initial_events() == []


def test_run_office_yields_frames() -> None:
    frames = list(run_office(ticks=5, agents=2, seed=3, tick_delay=0.05))

    assert [frame.tick for frame in frames] == [1, 2, 3, 4, 5]
    assert {view.id for view in frames[-1].characters} >= {1, 2}


def test_load_layout_file(tmp_path) -> None:
    good = tmp_path / "layout.json"
    layout = create_default_layout()
    good.write_text(serialize_layout(layout), encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")

    assert load_layout_file(good).model_dump() == layout.model_dump()
    assert load_layout_file(bad).model_dump() == layout.model_dump()
