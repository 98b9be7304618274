"""Font-family token parsing, categorization and the deduplicated family chain."""

import re
from typing import Dict, Iterable, Iterator, List, Optional

from fontseek.models import FamilyCategory, FontFaceEntry, FontFamilyToken

GENERIC_FAMILIES = {
    "system-ui",
    "ui-sans-serif",
    "ui-serif",
    "ui-monospace",
    "ui-rounded",
    "sans-serif",
    "serif",
    "monospace",
    "cursive",
    "fantasy",
    "emoji",
    "math",
    "fangsong",
}

ALIAS_FAMILIES = {
    "-apple-system",
    "blinkmacsystemfont",
}

ICON_FONT_MARKERS = ("dashicons", "fontawesome", "font awesome", "material icons", "material symbols", "icon")


def strip_quotes(name: str) -> str:
    return re.sub(r"^['\"]|['\"]$", "", (name or "").strip()).strip()


def categorize(name: str) -> FamilyCategory:
    low = name.lower()
    if low in ALIAS_FAMILIES:
        return FamilyCategory.ALIAS
    if low in GENERIC_FAMILIES:
        return FamilyCategory.GENERIC
    return FamilyCategory.NAMED


def is_keyword(name: str) -> bool:
    return categorize(strip_quotes(name)) is not FamilyCategory.NAMED


def is_icon_font(name: str) -> bool:
    low = (name or "").lower()
    return any(marker in low for marker in ICON_FONT_MARKERS)


def parse_families(value: Optional[str]) -> List[FontFamilyToken]:
    """Split a font-family declaration into categorized tokens.

    Declarations that still hold ``var()`` references are dropped token by
    token, since only the engine can substitute them.
    """
    tokens = []
    for part in str(value or "").split(","):
        name = strip_quotes(part)
        if not name or "var(" in name:
            continue
        tokens.append(FontFamilyToken(name=name, category=categorize(name)))
    return tokens


def css_family(name: str) -> str:
    """Render a family name for a font-family declaration, keywords unquoted."""
    name = strip_quotes(name)
    if is_keyword(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class FamilyChain:
    """Ordered family tokens, deduplicated by lowercase name (first occurrence wins)."""

    def __init__(self, tokens: Iterable[FontFamilyToken] = ()):
        self._tokens: List[FontFamilyToken] = []
        self._seen: Dict[str, FontFamilyToken] = {}
        self.extend(tokens)

    def add(self, token: FontFamilyToken) -> bool:
        if token.key in self._seen:
            return False
        self._seen[token.key] = token
        self._tokens.append(token)
        return True

    def extend(self, tokens: Iterable[FontFamilyToken]) -> None:
        for token in tokens:
            self.add(token)

    def names(self) -> List[str]:
        return [t.name for t in self._tokens]

    def first(self, category: FamilyCategory) -> Optional[FontFamilyToken]:
        for token in self._tokens:
            if token.category is category:
                return token
        return None

    def __contains__(self, name: str) -> bool:
        return strip_quotes(name).lower() in self._seen

    def __iter__(self) -> Iterator[FontFamilyToken]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)


def parse_font_faces(css_text: str, source: str = "") -> List[FontFaceEntry]:
    faces = []
    for match in re.finditer(r"@font-face\s*{([^}]*)}", css_text or "", re.IGNORECASE | re.DOTALL):
        block = match.group(1)
        props = {}
        for decl in re.split(r";\s*", block):
            if not decl.strip() or ":" not in decl:
                continue
            name, value = decl.split(":", 1)
            props[name.strip().lower()] = value.strip()
        family = strip_quotes(props.get("font-family", ""))
        if not family:
            continue
        faces.append(FontFaceEntry(
            family=family,
            weight=props.get("font-weight") or "normal",
            style=props.get("font-style") or "normal",
            status="declared",
            source=source,
        ))
    return faces
