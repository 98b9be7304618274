import json
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_VIEWPORT = {"width": 1440, "height": 900}


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    ensure_dir(path.parent)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def parse_viewport(raw: Optional[str]) -> Dict[str, int]:
    if not raw or "x" not in raw.lower():
        return dict(DEFAULT_VIEWPORT)
    width_str, height_str = raw.lower().split("x", 1)
    try:
        return {"width": int(width_str), "height": int(height_str)}
    except ValueError:
        return dict(DEFAULT_VIEWPORT)


def parse_point(raw: str) -> Optional[Dict[str, float]]:
    parts = [p.strip() for p in (raw or "").split(",")]
    if len(parts) != 2:
        return None
    try:
        return {"x": float(parts[0]), "y": float(parts[1])}
    except ValueError:
        return None


def parse_px(value: Any) -> Optional[float]:
    """Parse a computed pixel length such as ``"16px"``; ``None`` for keywords."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    value = str(value).strip().lower()
    if not value or value in {"normal", "auto", "none"}:
        return None
    if value.endswith("px"):
        value = value[:-2]
    try:
        return float(value)
    except ValueError:
        return None
