"""
Family resolution cascade: which family did the engine really paint?

The declared ``font-family`` chain is scanned first. When it yields nothing
provably rendered, evidence is widened to font custom properties, inline
declarations, the engine's loaded-font registry and ``@font-face`` rules. A
chosen name that the registry did not confirm goes through a reality check
against the platform's system fonts, and alias keywords are unmasked to the
concrete UI font they stand for.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from fontseek.capabilities import DomInspector, FontRegistry, StyleReader, TextMeasurer
from fontseek.config import InspectorConfig
from fontseek.errors import EngineError
from fontseek.families import FamilyChain, categorize, parse_families, strip_quotes
from fontseek.metrics import is_rendered, metrics_equal, renders_as
from fontseek.models import FamilyCategory, FontFaceEntry, Node
from fontseek.oracle import FontAvailabilityOracle
from fontseek.platforms import Platform, default_ui_label, system_font_candidates

logger = logging.getLogger('fontseek.cascade')

FALLBACK_LABEL = "system-ui"

FONT_VARIABLE_RE = re.compile(r"^--(font\b.*|.*-font|.*font-family.*)$", re.IGNORECASE)
NON_FAMILY_VARIABLE_RE = re.compile(r"size|weight|height|spacing|style|feature|variation", re.IGNORECASE)


class _Scan:
    """Bookkeeping for one resolve() call."""

    def __init__(self):
        self.chain = FamilyChain()
        self.chosen: Optional[str] = None
        self.registry_confirmed = False
        self.first_alias: Optional[str] = None
        self.first_generic: Optional[str] = None


class FamilyResolutionCascade:

    def __init__(
        self,
        dom: DomInspector,
        styles: StyleReader,
        measurer: TextMeasurer,
        registry: Optional[FontRegistry],
        oracle: FontAvailabilityOracle,
        platform: Platform,
        config: Optional[InspectorConfig] = None,
    ):
        self.dom = dom
        self.styles = styles
        self.measurer = measurer
        self.registry = registry
        self.oracle = oracle
        self.platform = platform
        self.config = config or InspectorConfig()
        self._rendered: Dict[str, bool] = {}

    def clear(self) -> None:
        self._rendered.clear()

    def resolve(self, start_element: Node) -> str:
        scan = _Scan()
        nodes = self._walk(start_element)

        for node in nodes:
            self._scan_tokens(scan, parse_families(self._computed_family(node)))
        for node in self._document_nodes():
            self._scan_tokens(scan, parse_families(self._computed_family(node)))

        declared = FamilyChain(scan.chain)
        stages = [
            ("custom properties", lambda: self._from_custom_properties(scan, nodes)),
            ("inline styles", lambda: self._from_inline_styles(scan, nodes)),
            ("font registry", lambda: self._from_faces(self._registry_faces(), declared)),
            ("@font-face rules", lambda: self._from_faces(self._font_face_rules(), declared)),
        ]
        for label, stage in stages:
            if scan.chosen:
                break
            found = stage()
            if found:
                logger.debug(f"family {found!r} chosen from {label}")
                scan.chosen = found
                scan.registry_confirmed = label == "font registry"

        if scan.chosen:
            if not scan.registry_confirmed:
                real = self._reality_check(scan.chosen)
                if real:
                    logger.debug(f"{scan.chosen!r} falls back to {real!r}")
                    return real
            return scan.chosen

        if scan.first_alias:
            return self.map_alias(scan.first_alias)
        return scan.first_generic or FALLBACK_LABEL

    def map_alias(self, alias: str) -> str:
        for candidate in self._candidates():
            try:
                if self.oracle.is_available(candidate) and metrics_equal(self.measurer, alias, candidate):
                    return candidate
            except EngineError as exc:
                logger.debug(f"alias comparison {alias!r}/{candidate!r} failed: {exc}")
        return default_ui_label(self.platform)

    def _document_nodes(self) -> List[Node]:
        """Body then document root, whichever the engine can reach."""
        found = []
        for getter in (self.dom.body, self.dom.root):
            try:
                node = getter()
            except EngineError:
                node = None
            found.append(node)
        return [n for n in found if n is not None]

    def _candidates(self) -> List[str]:
        return system_font_candidates(self.platform)

    def _is_rendered(self, candidate: str) -> bool:
        low = candidate.lower()
        if low not in self._rendered:
            self._rendered[low] = is_rendered(self.measurer, candidate, self.config.reality_check_size)
        return self._rendered[low]

    def _walk(self, start: Node) -> List[Node]:
        nodes = []
        node = start
        for _ in range(self.config.ancestor_hops):
            if node is None:
                break
            nodes.append(node)
            try:
                node = self.dom.parent_or_host(node)
            except EngineError:
                break
        return nodes

    def _computed_family(self, node: Node) -> str:
        try:
            return self.styles.computed_style(node, ["font-family"]).get("font-family", "")
        except EngineError:
            return ""

    def _scan_tokens(self, scan: _Scan, tokens) -> None:
        for token in tokens:
            if not scan.chain.add(token):
                continue
            if token.category is FamilyCategory.ALIAS:
                scan.first_alias = scan.first_alias or token.name
            elif token.category is FamilyCategory.GENERIC:
                scan.first_generic = scan.first_generic or token.name
            elif not scan.chosen and self.oracle.is_available(token.name):
                scan.chosen = token.name

    def _first_available(self, scan: _Scan, values: Iterable[str]) -> Optional[str]:
        for value in values:
            self._scan_tokens(scan, parse_families(value))
            if scan.chosen:
                return scan.chosen
        return None

    def _from_custom_properties(self, scan: _Scan, nodes: List[Node]) -> Optional[str]:
        def values():
            for node in nodes + self._document_nodes()[-1:]:
                try:
                    props = self.styles.custom_properties(node)
                except EngineError:
                    continue
                for name, value in props.items():
                    if FONT_VARIABLE_RE.match(name) and not NON_FAMILY_VARIABLE_RE.search(name):
                        yield value
        return self._first_available(scan, values())

    def _from_inline_styles(self, scan: _Scan, nodes: List[Node]) -> Optional[str]:
        def values():
            for node in nodes:
                try:
                    yield self.styles.inline_style(node, "font-family")
                except EngineError:
                    continue
        return self._first_available(scan, values())

    def _registry_faces(self) -> List[FontFaceEntry]:
        if self.registry is None:
            return []
        try:
            return [e for e in self.registry.entries() if e.status == "loaded"]
        except EngineError as exc:
            logger.debug(f"font registry unavailable: {exc}")
            return []

    def _font_face_rules(self) -> List[FontFaceEntry]:
        if self.registry is None:
            return []
        try:
            return self.registry.font_face_rules()
        except EngineError as exc:
            logger.debug(f"@font-face rules unavailable: {exc}")
            return []

    def _from_faces(self, faces: List[FontFaceEntry], declared: FamilyChain) -> Optional[str]:
        names = []
        for face in faces:
            name = strip_quotes(face.family)
            if not name or categorize(name) is not FamilyCategory.NAMED:
                continue
            if name.lower() not in {n.lower() for n in names}:
                names.append(name)
        preferred = [n for n in names if n in declared]
        for pool in (preferred, names):
            for name in pool:
                if self.oracle.is_available(name):
                    return name
        return None

    def _reality_check(self, chosen: str) -> Optional[str]:
        size = self.config.reality_check_size
        for candidate in self._candidates():
            if candidate.lower() == chosen.lower():
                continue
            try:
                # An allowlisted candidate that is not installed measures as plain sans-serif.
                if not self.oracle.is_available(candidate) or not self._is_rendered(candidate):
                    continue
                if renders_as(self.measurer, chosen, candidate, size):
                    return candidate
            except EngineError as exc:
                logger.debug(f"reality check {chosen!r}/{candidate!r} failed: {exc}")
        return None
