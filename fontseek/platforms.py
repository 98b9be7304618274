import re
from enum import Enum
from typing import Dict, List, Set


class Platform(Enum):
    WINDOWS = "windows"
    MAC = "mac"
    LINUX = "linux"


# Ordered: the first metric match wins when unmasking an alias.
SYSTEM_FONT_CANDIDATES: Dict[Platform, List[str]] = {
    Platform.WINDOWS: ["Segoe UI Variable", "Segoe UI", "Arial"],
    Platform.MAC: ["SF Pro Text", "SF Pro Display", "Helvetica Neue", "Helvetica", "Arial"],
    Platform.LINUX: ["Ubuntu", "Cantarell", "DejaVu Sans", "Noto Sans", "Liberation Sans", "Arial"],
}

ALWAYS_PRESENT: Dict[Platform, Set[str]] = {
    Platform.WINDOWS: {"segoe ui", "arial", "times new roman", "courier new", "tahoma", "verdana"},
    Platform.MAC: {"helvetica", "helvetica neue", "sf pro", "sf pro text", "times", "courier", "menlo"},
    Platform.LINUX: {"ubuntu", "noto sans", "dejavu sans"},
}

DEFAULT_UI_LABEL: Dict[Platform, str] = {
    Platform.WINDOWS: "Segoe UI",
    Platform.MAC: "SF Pro",
    Platform.LINUX: "system-ui",
}


def detect_platform(user_agent: str) -> Platform:
    ua = user_agent or ""
    if re.search(r"Windows", ua):
        return Platform.WINDOWS
    if re.search(r"Macintosh|Mac OS X", ua):
        return Platform.MAC
    return Platform.LINUX


def system_font_candidates(platform: Platform) -> List[str]:
    return list(SYSTEM_FONT_CANDIDATES[platform])


def is_always_present(platform: Platform, name: str) -> bool:
    return (name or "").strip().lower() in ALWAYS_PRESENT[platform]


def default_ui_label(platform: Platform) -> str:
    return DEFAULT_UI_LABEL[platform]
