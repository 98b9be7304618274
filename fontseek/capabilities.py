"""
Capability protocols the resolution algorithms run against.

The browser backend (``fontseek.engine.PlaywrightEngine``) implements all of
them; tests use an in-memory fake. Nodes are opaque handles: the algorithms
only ever pass them back to the capability that produced them.

Any method may raise ``EngineError`` when the engine cannot answer (detached
node, closed page). Callers treat that as "no evidence".
"""

from typing import Callable, Dict, List, Optional, Protocol, Sequence
from fontseek.models import Box, Extent, FontFaceEntry, Node, ScreenPoint


class TextMeasurer(Protocol):
    def measure(self, text: str, font_size_px: float, family: str, fallback_family: str) -> Extent:
        """Render ``text`` invisibly in ``family`` then ``fallback_family`` and return its box."""
        ...


class StyleReader(Protocol):
    def computed_style(self, node: Node, props: Sequence[str]) -> Dict[str, str]:
        ...

    def inline_style(self, node: Node, prop: str) -> str:
        ...

    def custom_properties(self, node: Node) -> Dict[str, str]:
        ...


class FontRegistry(Protocol):
    def check(self, family: str, font_spec: str) -> Optional[bool]:
        """``None`` when the registry is missing or does not know ``family``."""
        ...

    def entries(self) -> List[FontFaceEntry]:
        ...

    def font_face_rules(self) -> List[FontFaceEntry]:
        """@font-face rules from readable stylesheets; unreadable sheets are skipped."""
        ...


class ColorSampler(Protocol):
    def sample(self, color: str) -> Optional[Sequence[int]]:
        """Paint ``color`` into a 1x1 raster and return its RGBA bytes, ``None`` if rejected."""
        ...


class DomInspector(Protocol):
    def root(self) -> Node:
        ...

    def body(self) -> Optional[Node]:
        ...

    def parent_or_host(self, node: Node) -> Optional[Node]:
        ...

    def same_node(self, a: Optional[Node], b: Optional[Node]) -> bool:
        ...

    def tag_name(self, node: Node) -> str:
        ...

    def has_direct_text(self, node: Node) -> bool:
        ...

    def has_any_text(self, node: Node) -> bool:
        ...

    def bounding_box(self, node: Node) -> Optional[Box]:
        ...

    def viewport(self) -> Box:
        ...

    def user_agent(self) -> str:
        ...

    def elements_at(self, point: ScreenPoint) -> List[Node]:
        """Every element stacked at ``point``, topmost first."""
        ...

    def element_at(self, point: ScreenPoint, within: Optional[Node] = None) -> Optional[Node]:
        """Hit-test the document, or the open shadow root of ``within``."""
        ...

    def caret_parent_at(self, point: ScreenPoint) -> Optional[Node]:
        ...

    def text_elements(self, limit: Optional[int] = None) -> List[Node]:
        """Conventional text-bearing elements that carry visible text, in document order."""
        ...

    def is_own_ui(self, node: Node) -> bool:
        ...


class SessionHooks(Protocol):
    def install_listeners(self, on_pick: Callable[[ScreenPoint, Optional[Node]], None], on_exit: Callable[[], None]) -> None:
        ...

    def remove_listeners(self) -> None:
        ...

    def highlight(self, node: Node) -> None:
        ...

    def clear_highlight(self) -> None:
        ...


class RenderEngine(TextMeasurer, StyleReader, FontRegistry, ColorSampler, DomInspector, SessionHooks, Protocol):
    """Everything a session needs from the host rendering engine."""
    pass
