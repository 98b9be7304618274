from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

Node = Any


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(self.width, 0.0) * max(self.height, 0.0)

    @property
    def center(self) -> ScreenPoint:
        return ScreenPoint(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, point: ScreenPoint) -> bool:
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )

    def distance_to(self, point: ScreenPoint) -> float:
        c = self.center
        return ((c.x - point.x) ** 2 + (c.y - point.y) ** 2) ** 0.5


@dataclass(frozen=True)
class Extent:
    width: float
    height: float


class FamilyCategory(Enum):
    ALIAS = "alias"
    GENERIC = "generic"
    NAMED = "named"


@dataclass(frozen=True)
class FontFamilyToken:
    name: str
    category: FamilyCategory

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass
class ResolvedFont:
    family: str
    weight_numeric: int
    weight_label: str
    style: str
    size_px: Optional[float]
    letter_spacing: str
    line_height: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "family": self.family,
            "weight": self.weight_numeric,
            "weight_label": self.weight_label,
            "style": self.style,
            "size_px": self.size_px,
            "letter_spacing": self.letter_spacing,
            "line_height": self.line_height,
        }


@dataclass(frozen=True)
class ResolvedColor:
    r: int
    g: int
    b: int
    a: int = 255

    @property
    def hex(self) -> str:
        out = f"#{self.r:02X}{self.g:02X}{self.b:02X}"
        if self.a < 255:
            out += f"{self.a:02X}"
        return out

    @property
    def rgb(self) -> str:
        if self.a < 255:
            return f"rgba({self.r}, {self.g}, {self.b}, {round(self.a / 255.0, 3)})"
        return f"rgb({self.r}, {self.g}, {self.b})"

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a, "hex": self.hex}


@dataclass
class FontFaceEntry:
    family: str
    weight: str = "normal"
    style: str = "normal"
    status: str = "unloaded"
    source: str = ""


class ContextLabel(Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LINK = "link"
    BUTTON = "button"
    LIST = "list"
    TABLE = "table"
    FORM = "form"
    TEXT = "text"
    FONT_FACE = "@font-face"
    LOADED = "loaded"


@dataclass
class FontCensusEntry:
    name: str
    contexts: Set[ContextLabel] = field(default_factory=set)
    weights: Set[str] = field(default_factory=set)
    styles: Set[str] = field(default_factory=set)
    is_loaded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "contexts": sorted(c.value for c in self.contexts),
            "weights": sorted(self.weights),
            "styles": sorted(self.styles),
            "is_loaded": self.is_loaded,
        }


@dataclass
class ElementCandidate:
    node: Node
    score: int


@dataclass
class TargetResolution:
    element: Node
    strategy: Optional[str]
    forced: bool


@dataclass
class Inspection:
    element: Node
    font: ResolvedFont
    color: ResolvedColor
    forced: bool
    strategy: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "font": self.font.to_dict(),
            "color": self.color.to_dict(),
            "forced": self.forced,
            "strategy": self.strategy,
            "notes": list(self.notes),
        }
