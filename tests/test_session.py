from __future__ import annotations

from typing import List

from fontseek.errors import EngineError
from fontseek.models import Box, Inspection, ScreenPoint
from fontseek.platforms import Platform
from fontseek.session import InspectionSession

from tests.fakes import FakeEngine


def test_resolve_at_reports_rendered_font_and_color(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(
        None, "p", "Hello", box=Box(10, 10, 300, 40),
        font_family='"Helvetica Neue", Arial, sans-serif',
        font_weight="600", font_size="18px", color="rgb(17, 34, 51)",
    )
    result = InspectionSession(windows_engine).resolve_at(ScreenPoint(20, 20), p)

    assert result.element is p
    assert not result.forced
    assert result.strategy == "ascent"
    assert result.font.family == "Arial"
    assert result.font.weight_numeric == 600
    assert result.font.weight_label == "Semi Bold"
    assert result.font.size_px == 18.0
    assert result.color.hex == "#112233"
    assert result.notes == []


def test_resolve_at_without_text_is_forced(windows_engine: FakeEngine) -> None:
    result = InspectionSession(windows_engine).resolve_at(ScreenPoint(600, 600), None)
    assert result.element is windows_engine.body_node
    assert result.forced
    assert result.strategy is None
    assert result.font.family == "serif"
    assert result.color.hex == "#000000"
    assert result.notes == ["no text target found"]


def test_platform_detection(mac_engine: FakeEngine, linux_engine: FakeEngine) -> None:
    assert InspectionSession(mac_engine).platform is Platform.MAC
    assert InspectionSession(linux_engine).platform is Platform.LINUX


def test_unknown_user_agent_assumes_linux(windows_engine: FakeEngine) -> None:
    def broken():
        raise EngineError("no navigator")

    windows_engine.user_agent = broken
    assert InspectionSession(windows_engine).platform is Platform.LINUX


def test_pick_flow(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(None, "p", "Hello", box=Box(10, 10, 300, 40))
    received: List[Inspection] = []
    session = InspectionSession(windows_engine)

    session.begin(on_result=received.append)
    assert session.active
    windows_engine.click(ScreenPoint(20, 20), p)

    assert len(received) == 1
    assert received[0].element is p
    assert windows_engine.highlighted is p
    assert session.last_result is received[0]


def test_escape_ends_session_and_clears_state(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(None, "p", "Hello", box=Box(10, 10, 300, 40), font_family="Arial")
    session = InspectionSession(windows_engine)
    session.begin()
    windows_engine.click(ScreenPoint(20, 20), p)
    assert session.oracle.verdicts

    windows_engine.press_escape()
    assert not session.active
    assert windows_engine.listeners_removed == 1
    assert windows_engine.highlighted is None
    assert session.last_result is None
    assert session.oracle.verdicts == {}

    windows_engine.click(ScreenPoint(20, 20), p)
    assert session.last_result is None


def test_begin_twice_restarts_instead_of_stacking(windows_engine: FakeEngine) -> None:
    session = InspectionSession(windows_engine)
    session.begin()
    session.begin()
    assert windows_engine.listeners_installed == 2
    assert windows_engine.listeners_removed == 1
    assert session.active


def test_end_is_safe_when_inactive(windows_engine: FakeEngine) -> None:
    session = InspectionSession(windows_engine)
    session.end()
    assert windows_engine.listeners_removed == 0


def test_teardown_failures_do_not_escape(windows_engine: FakeEngine) -> None:
    def broken():
        raise EngineError("page closed")

    session = InspectionSession(windows_engine)
    session.begin()
    windows_engine.clear_highlight = broken
    session.end()
    assert not session.active
    assert windows_engine.listeners_removed == 1


def test_scan_document_fonts(windows_engine: FakeEngine) -> None:
    windows_engine.add(None, "h1", "Title", font_family='"Segoe UI", sans-serif')
    entries = InspectionSession(windows_engine).scan_document_fonts()
    assert [e.name for e in entries] == ["Segoe UI"]
    assert entries[0].is_loaded
