from __future__ import annotations

import pytest

from fontseek.typography import build_resolved_font, bucket_weight, format_weight, normalize_style


@pytest.mark.parametrize(
    ("weight", "bucket", "label"),
    [
        (550, 600, "Semi Bold"),
        ("bold", 700, "Bold"),
        ("normal", 400, "Regular"),
        (50, 100, "Thin"),
        (1000, 900, "Black"),
        ("349", 300, "Light"),
        ("350", 400, "Regular"),
        ("garbage", 400, "Regular"),
        (None, 400, "Regular"),
    ],
)
def test_format_weight_buckets(weight, bucket: int, label: str) -> None:
    info = format_weight(weight)
    assert info.bucket == bucket
    assert info.label == label
    assert 100 <= info.value <= 900


def test_format_weight_keeps_exact_value() -> None:
    info = format_weight(550)
    assert info.value == 550
    assert str(info) == "550 Semi Bold"


def test_bucket_weight_clamps() -> None:
    assert bucket_weight(0) == 100
    assert bucket_weight(949) == 900
    assert bucket_weight(650) == 700


def test_normalize_style() -> None:
    assert normalize_style("italic") == "italic"
    assert normalize_style("oblique 10deg") == "oblique"
    assert normalize_style("") == "normal"


def test_build_resolved_font_from_computed_style() -> None:
    font = build_resolved_font("Inter", {
        "font-weight": "650",
        "font-style": "italic",
        "font-size": "18.5px",
        "letter-spacing": "0.2px",
        "line-height": "normal",
    })
    assert font.family == "Inter"
    assert font.weight_numeric == 650
    assert font.weight_label == "Bold"
    assert font.style == "italic"
    assert font.size_px == 18.5
    assert font.letter_spacing == "0.2px"
    assert font.to_dict()["weight_label"] == "Bold"
