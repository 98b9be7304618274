from typing import Any, Dict, NamedTuple

from fontseek.models import ResolvedFont
from fontseek.util import parse_px

TYPOGRAPHY_PROPS = [
    "font-family",
    "font-size",
    "font-weight",
    "line-height",
    "letter-spacing",
    "font-style",
    "color",
]

WEIGHT_NAMES = {
    100: "Thin",
    200: "Extra Light",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "Semi Bold",
    700: "Bold",
    800: "Extra Bold",
    900: "Black",
}

WEIGHT_KEYWORDS = {
    "normal": 400,
    "bold": 700,
    # Computed styles report these already resolved; they only show up in raw declarations.
    "lighter": 100,
    "bolder": 700,
}


class WeightInfo(NamedTuple):
    value: int
    bucket: int
    label: str

    def __str__(self) -> str:
        return f"{self.value} {self.label}"


def clamp_weight(n: float) -> int:
    return int(min(900, max(100, n)))


def normalize_weight(weight: Any) -> int:
    if isinstance(weight, bool):
        return 400
    if isinstance(weight, (int, float)):
        return clamp_weight(weight)
    if isinstance(weight, str):
        s = weight.strip().lower()
        if s in WEIGHT_KEYWORDS:
            return WEIGHT_KEYWORDS[s]
        try:
            return clamp_weight(float(s))
        except ValueError:
            return 400
    return 400


def bucket_weight(n: float) -> int:
    # Round half up: 550 lands on 600.
    return min(900, max(100, int((n + 50) // 100) * 100))


def format_weight(weight: Any) -> WeightInfo:
    n = normalize_weight(weight)
    b = bucket_weight(n)
    return WeightInfo(value=n, bucket=b, label=WEIGHT_NAMES.get(b, "Regular"))


def normalize_style(value: str) -> str:
    s = (value or "").strip().lower()
    if s.startswith("oblique"):
        return "oblique"
    if s == "italic":
        return "italic"
    return "normal"


def build_resolved_font(family: str, computed: Dict[str, str]) -> ResolvedFont:
    weight = format_weight(computed.get("font-weight") or "normal")
    return ResolvedFont(
        family=family,
        weight_numeric=weight.value,
        weight_label=weight.label,
        style=normalize_style(computed.get("font-style", "")),
        size_px=parse_px(computed.get("font-size")),
        letter_spacing=computed.get("letter-spacing") or "normal",
        line_height=computed.get("line-height") or "normal",
    )
