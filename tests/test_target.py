from __future__ import annotations

from fontseek.config import InspectorConfig
from fontseek.models import Box, ScreenPoint
from fontseek.target import (
    TargetContext,
    TargetResolver,
    ascent_strategy,
    pierce_strategy,
    score_candidate,
)

from tests.fakes import FakeEngine, FakeNode


def resolver(engine: FakeEngine, config: InspectorConfig = None) -> TargetResolver:
    return TargetResolver(engine, engine, config)


def context(engine: FakeEngine, initial, point: ScreenPoint, config: InspectorConfig = None) -> TargetContext:
    return TargetContext(initial=initial, point=point, dom=engine, styles=engine, config=config or InspectorConfig())


def test_ascent_climbs_to_text_owner(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(None, "p", "Hello", box=Box(10, 10, 300, 40))
    span = windows_engine.add(p, "span", box=Box(10, 10, 50, 40))
    result = resolver(windows_engine).resolve(span, ScreenPoint(20, 20))
    assert result.element is p
    assert result.strategy == "ascent"
    assert not result.forced


def test_ascent_skips_hidden_elements(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(None, "p", "Hidden", box=Box(10, 10, 300, 40), visibility="hidden")
    assert ascent_strategy(context(windows_engine, p, ScreenPoint(20, 20))) is None


def test_caret_is_used_when_event_target_has_no_text(windows_engine: FakeEngine) -> None:
    div = windows_engine.add(None, "div")
    p = windows_engine.add(None, "p", "Caret text")
    windows_engine.caret_target = p
    result = resolver(windows_engine).resolve(div, ScreenPoint(500, 500))
    assert result.element is p
    assert result.strategy == "caret"
    assert result.forced


def test_scoring_prefers_small_text_element(windows_engine: FakeEngine) -> None:
    div = windows_engine.add(None, "div", box=Box(0, 0, 1280, 600))
    p = windows_engine.add(div, "p", "Hello", box=Box(10, 10, 300, 40))
    result = resolver(windows_engine).resolve(None, ScreenPoint(20, 20))
    assert result.element is p
    assert result.strategy == "scoring"
    assert result.forced


def test_scoring_disqualifies_overlays_and_own_ui(windows_engine: FakeEngine) -> None:
    p = windows_engine.add(None, "p", "Article", box=Box(10, 10, 300, 40))
    windows_engine.add(None, "video", "fallback", box=Box(0, 0, 400, 300))
    windows_engine.add(None, "div", "Cookie banner", box=Box(0, 0, 1280, 800), position="fixed")
    badge = windows_engine.add(None, "span", "FontSeek", box=Box(10, 10, 80, 20))
    badge.own_ui = True
    result = resolver(windows_engine).resolve(None, ScreenPoint(20, 20))
    assert result.element is p


def test_scoring_tie_keeps_topmost(windows_engine: FakeEngine) -> None:
    windows_engine.add(None, "span", "under", box=Box(10, 10, 100, 20))
    top = windows_engine.add(None, "span", "over", box=Box(10, 10, 100, 20))
    assert resolver(windows_engine).resolve(None, ScreenPoint(20, 20)).element is top


def test_score_values(windows_engine: FakeEngine) -> None:
    ctx = context(windows_engine, None, ScreenPoint(20, 20))
    p = windows_engine.add(None, "p", "Hello", box=Box(10, 10, 300, 40))
    wrapper = windows_engine.add(None, "section", box=Box(0, 0, 500, 300))
    windows_engine.add(wrapper, "em", "nested")
    empty = windows_engine.add(None, "div", box=Box(0, 0, 10, 10))

    assert score_candidate(ctx, p) == 50 + 30 + 20 + 15
    assert score_candidate(ctx, wrapper) == 10 + 30 + 10
    assert score_candidate(ctx, empty) == 0


def test_pierce_reaches_into_shadow_roots(windows_engine: FakeEngine) -> None:
    host = windows_engine.add(None, "my-widget", box=Box(0, 0, 400, 100))
    inner = host.attach_shadow(FakeNode("span", text="Shadow text", box=Box(10, 10, 200, 30)))
    result = resolver(windows_engine).resolve(host, ScreenPoint(20, 20))
    assert result.element is inner
    assert result.strategy == "pierce"
    assert result.forced


def test_nearest_text_within_radius(windows_engine: FakeEngine) -> None:
    windows_engine.add(None, "p", "Far", box=Box(900, 600, 100, 20))
    near = windows_engine.add(None, "p", "Near", box=Box(100, 100, 100, 20))
    result = resolver(windows_engine).resolve(None, ScreenPoint(150, 250))
    assert result.element is near
    assert result.strategy == "nearest"


def test_exhaustion_keeps_initial_target(windows_engine: FakeEngine) -> None:
    windows_engine.add(None, "p", "Far", box=Box(100, 100, 100, 20))
    div = windows_engine.add(None, "div")
    result = resolver(windows_engine).resolve(div, ScreenPoint(1000, 700))
    assert result.element is div
    assert result.strategy is None
    assert result.forced


def test_exhaustion_without_target_falls_back_to_body(windows_engine: FakeEngine) -> None:
    result = resolver(windows_engine).resolve(None, ScreenPoint(1000, 700))
    assert result.element is windows_engine.body_node
    assert result.forced


def test_detached_target_does_not_raise(windows_engine: FakeEngine) -> None:
    gone = FakeNode("p", text="gone", detached=True)
    result = resolver(windows_engine).resolve(gone, ScreenPoint(1000, 700))
    assert result.element is gone
    assert result.forced


def test_fixed_full_viewport_element_is_overlay(windows_engine: FakeEngine) -> None:
    ctx = context(windows_engine, None, ScreenPoint(0, 0))
    veil = windows_engine.add(None, "div", box=Box(0, 0, 1280, 780), position="fixed")
    panel = windows_engine.add(None, "div", box=Box(0, 0, 300, 800), position="fixed")
    assert ctx.is_overlay(veil)
    assert not ctx.is_overlay(panel)


def test_pierce_stops_at_depth_limit(windows_engine: FakeEngine) -> None:
    app = windows_engine.add(None, "my-app", box=Box(0, 0, 400, 200))
    panel = app.attach_shadow(FakeNode("my-panel", box=Box(0, 0, 400, 200)))
    label = panel.attach_shadow(FakeNode("my-label", text="Level two", box=Box(0, 0, 300, 100)))
    deepest = label.attach_shadow(FakeNode("span", text="Deepest", box=Box(10, 10, 200, 30)))
    point = ScreenPoint(20, 20)

    assert pierce_strategy(context(windows_engine, None, point, InspectorConfig(pierce_depth=2))) is label
    assert pierce_strategy(context(windows_engine, None, point)) is deepest


def test_pierce_stops_when_hit_does_not_change(windows_engine: FakeEngine) -> None:
    widget = windows_engine.add(None, "my-widget", "Widget text", box=Box(0, 0, 400, 100))
    lookups = []

    def element_at(point, within=None):
        lookups.append(within)
        return widget

    windows_engine.element_at = element_at
    assert pierce_strategy(context(windows_engine, None, ScreenPoint(20, 20))) is widget
    assert lookups == [None, widget]
