from __future__ import annotations

import logging

import pytest

from fontseek.color import FALLBACK_COLOR, ColorResolver, hsl_string, rgba_to_hsl
from fontseek.errors import EngineError
from fontseek.models import ResolvedColor

from tests.fakes import FakeEngine


@pytest.mark.parametrize(
    "css",
    ["#ff0000", "#F00", "rgb(255, 0, 0)", "red", "hsl(0, 100%, 50%)", "oklch(62.8% 0.25774 29.23)"],
)
def test_equivalent_colors_resolve_identically(windows_engine: FakeEngine, css: str) -> None:
    color = ColorResolver(windows_engine).resolve(css)
    assert color == ResolvedColor(255, 0, 0, 255)
    assert color.hex == "#FF0000"


def test_translucent_color_keeps_alpha(windows_engine: FakeEngine) -> None:
    resolver = ColorResolver(windows_engine)
    color = resolver.resolve("rgba(255, 0, 0, 0.5)")
    assert color == resolver.resolve("#ff000080")
    assert color.a == 128
    assert color.hex == "#FF000080"
    assert color.rgb == "rgba(255, 0, 0, 0.502)"


def test_rejected_color_degrades_to_black(windows_engine: FakeEngine, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="fontseek.color"):
        color = ColorResolver(windows_engine).resolve("not-a-color")
    assert color == FALLBACK_COLOR
    assert color.to_dict() == {"r": 0, "g": 0, "b": 0, "a": 255, "hex": "#000000"}
    assert "not-a-color" in caplog.text


@pytest.mark.parametrize("css", [None, "", "   "])
def test_missing_color_is_black(windows_engine: FakeEngine, css) -> None:
    assert ColorResolver(windows_engine).resolve(css) == FALLBACK_COLOR


def test_sampling_failure_is_black() -> None:
    class Broken:
        def sample(self, color):
            raise EngineError("canvas unavailable")

    assert ColorResolver(Broken()).resolve("red") == FALLBACK_COLOR


def test_channels_are_clamped() -> None:
    class Loose:
        def sample(self, color):
            return (300, -5, 10.7, 255)

    assert ColorResolver(Loose()).resolve("whatever") == ResolvedColor(255, 0, 10, 255)


def test_hsl_conversion() -> None:
    h, s, l = rgba_to_hsl(255, 0, 0)
    assert (h, s, l) == (0.0, 1.0, 0.5)
    assert rgba_to_hsl(128, 128, 128)[:2] == (0.0, 0.0)
    assert hsl_string(ResolvedColor(0, 0, 255)) == "hsl(240, 100%, 50%)"
