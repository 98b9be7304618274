"""Page-wide font census: every family the page declares, loads or paints."""

import logging
from typing import Dict, List, Optional

from fontseek.capabilities import DomInspector, FontRegistry, StyleReader
from fontseek.config import InspectorConfig
from fontseek.errors import EngineError
from fontseek.families import is_icon_font, parse_families, strip_quotes
from fontseek.models import ContextLabel, FamilyCategory, FontCensusEntry, Node
from fontseek.oracle import FontAvailabilityOracle
from fontseek.typography import format_weight, normalize_style

logger = logging.getLogger('fontseek.census')

TAG_CONTEXTS = {
    "h1": ContextLabel.HEADING,
    "h2": ContextLabel.HEADING,
    "h3": ContextLabel.HEADING,
    "h4": ContextLabel.HEADING,
    "h5": ContextLabel.HEADING,
    "h6": ContextLabel.HEADING,
    "p": ContextLabel.PARAGRAPH,
    "blockquote": ContextLabel.PARAGRAPH,
    "a": ContextLabel.LINK,
    "button": ContextLabel.BUTTON,
    "li": ContextLabel.LIST,
    "dt": ContextLabel.LIST,
    "dd": ContextLabel.LIST,
    "td": ContextLabel.TABLE,
    "th": ContextLabel.TABLE,
    "label": ContextLabel.FORM,
    "input": ContextLabel.FORM,
    "textarea": ContextLabel.FORM,
    "select": ContextLabel.FORM,
}


def context_for_tag(tag: str) -> ContextLabel:
    return TAG_CONTEXTS.get((tag or "").lower(), ContextLabel.TEXT)


def face_weight_label(weight: str) -> str:
    # Variable faces declare a range ("100 900"); keep it verbatim.
    parts = (weight or "normal").split()
    if len(parts) > 1:
        return " ".join(parts)
    return str(format_weight(parts[0]))


class PageFontCensus:

    def __init__(
        self,
        dom: DomInspector,
        styles: StyleReader,
        registry: Optional[FontRegistry],
        oracle: FontAvailabilityOracle,
        config: Optional[InspectorConfig] = None,
    ):
        self.dom = dom
        self.styles = styles
        self.registry = registry
        self.oracle = oracle
        self.config = config or InspectorConfig()
        self._entries: Dict[str, FontCensusEntry] = {}

    def scan(self) -> List[FontCensusEntry]:
        self._entries = {}
        self._collect_rules()
        self._collect_registry()
        self._collect_dom()

        for entry in self._entries.values():
            entry.is_loaded = self.oracle.is_available(entry.name)

        return sorted(
            self._entries.values(),
            key=lambda e: (not e.is_loaded, -len(e.contexts), e.name.lower()),
        )

    def _entry(self, raw_name: str) -> Optional[FontCensusEntry]:
        name = strip_quotes(raw_name)
        if not name or is_icon_font(name):
            return None
        key = name.lower()
        if key not in self._entries:
            self._entries[key] = FontCensusEntry(name=name)
        return self._entries[key]

    def _collect_rules(self) -> None:
        if self.registry is None:
            return
        try:
            faces = self.registry.font_face_rules()
        except EngineError as exc:
            logger.debug(f"skipping @font-face rules: {exc}")
            return
        for face in faces:
            entry = self._entry(face.family)
            if entry:
                entry.contexts.add(ContextLabel.FONT_FACE)
                entry.weights.add(face_weight_label(face.weight))
                entry.styles.add(normalize_style(face.style))

    def _collect_registry(self) -> None:
        if self.registry is None:
            return
        try:
            faces = self.registry.entries()
        except EngineError as exc:
            logger.debug(f"skipping font registry: {exc}")
            return
        for face in faces:
            if face.status != "loaded":
                continue
            entry = self._entry(face.family)
            if entry:
                entry.contexts.add(ContextLabel.LOADED)
                entry.weights.add(face_weight_label(face.weight))
                entry.styles.add(normalize_style(face.style))

    def _collect_dom(self) -> None:
        try:
            nodes = self.dom.text_elements(self.config.census_sample_limit)
        except EngineError as exc:
            logger.debug(f"skipping DOM sweep: {exc}")
            return
        for node in nodes:
            self._collect_node(node)

    def _collect_node(self, node: Node) -> None:
        try:
            cs = self.styles.computed_style(node, ["font-family", "font-weight", "font-style"])
            tag = self.dom.tag_name(node)
        except EngineError:
            return
        named = [t for t in parse_families(cs.get("font-family")) if t.category is FamilyCategory.NAMED]
        if not named:
            return
        # Credit the family that renders; a chain with none rendered keeps its first name.
        rendered = next((t for t in named if self.oracle.is_available(t.name)), named[0])
        entry = self._entry(rendered.name)
        if entry:
            entry.contexts.add(context_for_tag(tag))
            entry.weights.add(str(format_weight(cs.get("font-weight") or "normal")))
            entry.styles.add(normalize_style(cs.get("font-style", "")))
