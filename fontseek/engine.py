"""
Render engine backed by a live Playwright page.

Every capability is a small script evaluated in the page. Nodes are
``ElementHandle`` objects. Transient probe nodes are created and removed
inside the same script call so nothing leaks into the page, even when the
probe throws.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from playwright.sync_api import ElementHandle, JSHandle, Page
from playwright.sync_api import Error as PlaywrightError

from fontseek.errors import EngineError
from fontseek.families import css_family, parse_font_faces
from fontseek.models import Box, Extent, FontFaceEntry, Node, ScreenPoint
from fontseek.target import TEXT_TAGS

logger = logging.getLogger('fontseek.engine')

UI_ATTRIBUTE = "data-fontseek-ui"
PICK_BINDING = "__fontseekPick"

MEASURE_JS = """({text, size, stack}) => {
    const span = document.createElement('span');
    span.textContent = text;
    Object.assign(span.style, {
        position: 'absolute', left: '-9999px', top: '0',
        fontSize: size + 'px', fontWeight: '400', fontStyle: 'normal',
        letterSpacing: '0', lineHeight: 'normal', whiteSpace: 'nowrap',
        fontFamily: stack,
    });
    span.setAttribute('data-fontseek-ui', 'probe');
    document.documentElement.appendChild(span);
    try {
        const rect = span.getBoundingClientRect();
        return [rect.width, rect.height];
    } finally {
        span.remove();
    }
}"""

SAMPLE_COLOR_JS = """(color) => {
    const canvas = document.createElement('canvas');
    canvas.width = 1;
    canvas.height = 1;
    const ctx = canvas.getContext('2d', { willReadFrequently: true });
    if (!ctx) return null;
    ctx.fillStyle = '#000000';
    ctx.fillStyle = color;
    const first = ctx.fillStyle;
    ctx.fillStyle = '#ffffff';
    ctx.fillStyle = color;
    if (ctx.fillStyle !== first) return null;
    ctx.clearRect(0, 0, 1, 1);
    ctx.fillRect(0, 0, 1, 1);
    return Array.from(ctx.getImageData(0, 0, 1, 1).data);
}"""

COMPUTED_STYLE_JS = """(el, props) => {
    const computed = window.getComputedStyle(el);
    const result = {};
    props.forEach(p => { result[p] = computed.getPropertyValue(p); });
    return result;
}"""

CUSTOM_PROPERTIES_JS = """(el) => {
    const computed = window.getComputedStyle(el);
    const result = {};
    for (let i = 0; i < computed.length; i++) {
        const name = computed[i];
        if (name.startsWith('--')) result[name] = computed.getPropertyValue(name).trim();
    }
    return result;
}"""

REGISTRY_CHECK_JS = """([family, spec]) => {
    if (!document.fonts || typeof document.fonts.check !== 'function') return null;
    const want = family.toLowerCase();
    let known = false;
    document.fonts.forEach(face => {
        if (face.family.replace(/^['"]|['"]$/g, '').toLowerCase() === want) known = true;
    });
    if (!known) return null;
    try { return document.fonts.check(spec); } catch (e) { return null; }
}"""

REGISTRY_ENTRIES_JS = """() => {
    const out = [];
    if (!document.fonts || typeof document.fonts.forEach !== 'function') return out;
    document.fonts.forEach(face => out.push({
        family: face.family, weight: face.weight, style: face.style, status: face.status,
    }));
    return out;
}"""

FONT_FACE_RULES_JS = """() => {
    const rules = [];
    let skipped = 0;
    const walk = (list, href) => {
        for (const rule of Array.from(list)) {
            if (rule.type === CSSRule.FONT_FACE_RULE) rules.push({css: rule.cssText, href});
            else if (rule.cssRules) walk(rule.cssRules, href);
        }
    };
    for (const sheet of Array.from(document.styleSheets)) {
        let list = null;
        try { list = sheet.cssRules; } catch (e) { skipped += 1; continue; }
        if (list) walk(list, sheet.href || 'inline');
    }
    return {rules, skipped};
}"""

PARENT_OR_HOST_JS = """(node) => {
    if (node.parentElement) return node.parentElement;
    const root = node.getRootNode && node.getRootNode();
    return root && root.host ? root.host : null;
}"""

TEXT_PRESENCE_JS = """(el, direct) => {
    if (!direct) return (el.textContent || '').trim().length > 0;
    return Array.from(el.childNodes).some(
        n => n.nodeType === Node.TEXT_NODE && (n.nodeValue || '').trim().length > 0);
}"""

RECT_JS = """(el) => {
    const r = el.getBoundingClientRect();
    return [r.left, r.top, r.width, r.height];
}"""

ELEMENT_AT_JS = """([host, x, y]) => {
    const scope = host ? host.shadowRoot : document;
    if (!scope || typeof scope.elementFromPoint !== 'function') return null;
    return scope.elementFromPoint(x, y);
}"""

CARET_PARENT_JS = """([x, y]) => {
    let node = null;
    if (document.caretPositionFromPoint) {
        const pos = document.caretPositionFromPoint(x, y);
        node = pos && pos.offsetNode;
    } else if (document.caretRangeFromPoint) {
        const range = document.caretRangeFromPoint(x, y);
        node = range && range.startContainer;
    }
    if (!node || node.nodeType !== Node.TEXT_NODE) return null;
    if (!(node.nodeValue || '').trim()) return null;
    return node.parentElement;
}"""

TEXT_ELEMENTS_JS = """([tags, limit]) => {
    const out = [];
    for (const el of Array.from(document.querySelectorAll(tags.join(',')))) {
        if (limit && out.length >= limit) break;
        if (el.closest('[data-fontseek-ui]')) continue;
        if (!(el.innerText || el.textContent || '').trim()) continue;
        const cs = getComputedStyle(el);
        if (cs.display === 'none' || cs.visibility === 'hidden' || cs.fontSize === '0px') continue;
        out.push(el);
    }
    return out;
}"""

INSTALL_LISTENERS_JS = """(binding) => {
    if (window.__fontseekListeners) return;
    const onClick = (e) => {
        if (e.target && e.target.closest && e.target.closest('[data-fontseek-ui]')) return;
        const path = typeof e.composedPath === 'function' ? e.composedPath() : [];
        const target = path.length ? path[0] : e.target;
        e.preventDefault();
        e.stopPropagation();
        window[binding]({kind: 'pick', x: e.clientX, y: e.clientY, target});
    };
    const onKey = (e) => {
        if (e.key === 'Escape') window[binding]({kind: 'exit'});
    };
    document.addEventListener('click', onClick, true);
    window.addEventListener('keydown', onKey, true);
    window.__fontseekListeners = {onClick, onKey};
    document.documentElement.classList.add('fontseek-picking');
}"""

REMOVE_LISTENERS_JS = """() => {
    const l = window.__fontseekListeners;
    if (!l) return;
    document.removeEventListener('click', l.onClick, true);
    window.removeEventListener('keydown', l.onKey, true);
    delete window.__fontseekListeners;
    document.documentElement.classList.remove('fontseek-picking');
}"""

HIGHLIGHT_JS = """(el) => {
    document.querySelectorAll('[data-fontseek-ui="highlight"]').forEach(n => n.remove());
    const r = el.getBoundingClientRect();
    const box = document.createElement('div');
    box.setAttribute('data-fontseek-ui', 'highlight');
    Object.assign(box.style, {
        position: 'absolute', zIndex: '2147483646', pointerEvents: 'none',
        border: '2px solid rgba(99,102,241,.9)', borderRadius: '8px',
        boxShadow: '0 0 0 3px rgba(99,102,241,.25)',
        left: (r.left + window.scrollX - 4) + 'px', top: (r.top + window.scrollY - 4) + 'px',
        width: (r.width + 8) + 'px', height: (r.height + 8) + 'px',
    });
    document.documentElement.appendChild(box);
}"""

CLEAR_UI_JS = """() => {
    document.querySelectorAll('[data-fontseek-ui]').forEach(n => n.remove());
}"""


class PlaywrightEngine:
    """``RenderEngine`` implementation over a synchronous Playwright ``Page``."""

    def __init__(self, page: Page):
        self.page = page
        self._binding_installed = False
        self._on_pick: Optional[Callable[[ScreenPoint, Optional[Node]], None]] = None
        self._on_exit: Optional[Callable[[], None]] = None
        self.skipped_stylesheets = 0

    def _call(self, target: Any, script: str, arg: Any = None) -> Any:
        try:
            if arg is None:
                return target.evaluate(script)
            return target.evaluate(script, arg)
        except PlaywrightError as exc:
            raise EngineError(str(exc)) from exc

    def _element(self, script: str, arg: Any = None) -> Optional[ElementHandle]:
        try:
            handle = self.page.evaluate_handle(script, arg)
        except PlaywrightError as exc:
            raise EngineError(str(exc)) from exc
        return handle.as_element()

    def _elements(self, script: str, arg: Any = None) -> List[ElementHandle]:
        try:
            handle: JSHandle = self.page.evaluate_handle(script, arg)
            props = handle.get_properties()
        except PlaywrightError as exc:
            raise EngineError(str(exc)) from exc
        indexed = sorted((int(k), v) for k, v in props.items() if k.isdigit())
        out = []
        for _, value in indexed:
            el = value.as_element()
            if el is not None:
                out.append(el)
        return out

    # TextMeasurer

    def measure(self, text: str, font_size_px: float, family: str, fallback_family: str) -> Extent:
        stack = f"{css_family(family)}, {fallback_family}"
        width, height = self._call(self.page, MEASURE_JS, {"text": text, "size": font_size_px, "stack": stack})
        return Extent(width=width, height=height)

    # StyleReader

    def computed_style(self, node: Node, props: Sequence[str]) -> Dict[str, str]:
        return self._call(node, COMPUTED_STYLE_JS, list(props))

    def inline_style(self, node: Node, prop: str) -> str:
        return self._call(node, "(el, prop) => el.style ? el.style.getPropertyValue(prop) : ''", prop)

    def custom_properties(self, node: Node) -> Dict[str, str]:
        return self._call(node, CUSTOM_PROPERTIES_JS)

    # FontRegistry

    def check(self, family: str, font_spec: str) -> Optional[bool]:
        return self._call(self.page, REGISTRY_CHECK_JS, [family, font_spec])

    def entries(self) -> List[FontFaceEntry]:
        raw = self._call(self.page, REGISTRY_ENTRIES_JS)
        return [
            FontFaceEntry(
                family=item.get("family", ""),
                weight=str(item.get("weight") or "normal"),
                style=item.get("style") or "normal",
                status=item.get("status") or "unloaded",
                source="document.fonts",
            )
            for item in raw
        ]

    def font_face_rules(self) -> List[FontFaceEntry]:
        raw = self._call(self.page, FONT_FACE_RULES_JS)
        self.skipped_stylesheets = raw.get("skipped", 0)
        if self.skipped_stylesheets:
            logger.debug(f"skipped {self.skipped_stylesheets} unreadable stylesheet(s)")
        faces = []
        for rule in raw.get("rules", []):
            faces.extend(parse_font_faces(rule.get("css", ""), rule.get("href", "")))
        return faces

    # ColorSampler

    def sample(self, color: str) -> Optional[Sequence[int]]:
        return self._call(self.page, SAMPLE_COLOR_JS, color)

    # DomInspector

    def root(self) -> Node:
        return self._element("() => document.documentElement")

    def body(self) -> Optional[Node]:
        return self._element("() => document.body")

    def parent_or_host(self, node: Node) -> Optional[Node]:
        try:
            return node.evaluate_handle(PARENT_OR_HOST_JS).as_element()
        except PlaywrightError as exc:
            raise EngineError(str(exc)) from exc

    def same_node(self, a: Optional[Node], b: Optional[Node]) -> bool:
        if a is None or b is None:
            return a is b
        return bool(self._call(self.page, "([a, b]) => a === b", [a, b]))

    def tag_name(self, node: Node) -> str:
        return self._call(node, "(el) => (el.tagName || '').toLowerCase()")

    def has_direct_text(self, node: Node) -> bool:
        return bool(self._call(node, TEXT_PRESENCE_JS, True))

    def has_any_text(self, node: Node) -> bool:
        return bool(self._call(node, TEXT_PRESENCE_JS, False))

    def bounding_box(self, node: Node) -> Optional[Box]:
        rect = self._call(node, RECT_JS)
        if not rect:
            return None
        return Box(*rect)

    def viewport(self) -> Box:
        width, height = self._call(self.page, "() => [window.innerWidth, window.innerHeight]")
        return Box(0, 0, width, height)

    def user_agent(self) -> str:
        return self._call(self.page, "() => navigator.userAgent")

    def elements_at(self, point: ScreenPoint) -> List[Node]:
        return self._elements("([x, y]) => document.elementsFromPoint(x, y)", [point.x, point.y])

    def element_at(self, point: ScreenPoint, within: Optional[Node] = None) -> Optional[Node]:
        return self._element(ELEMENT_AT_JS, [within, point.x, point.y])

    def caret_parent_at(self, point: ScreenPoint) -> Optional[Node]:
        return self._element(CARET_PARENT_JS, [point.x, point.y])

    def text_elements(self, limit: Optional[int] = None) -> List[Node]:
        return self._elements(TEXT_ELEMENTS_JS, [sorted(TEXT_TAGS), limit or 0])

    def is_own_ui(self, node: Node) -> bool:
        return bool(self._call(node, f"(el) => !!el.closest('[{UI_ATTRIBUTE}]')"))

    # SessionHooks

    def install_listeners(
        self,
        on_pick: Callable[[ScreenPoint, Optional[Node]], None],
        on_exit: Callable[[], None],
    ) -> None:
        self._on_pick = on_pick
        self._on_exit = on_exit
        if not self._binding_installed:
            try:
                self.page.expose_binding(PICK_BINDING, self._dispatch, handle=True)
            except PlaywrightError as exc:
                raise EngineError(str(exc)) from exc
            self._binding_installed = True
        self._call(self.page, INSTALL_LISTENERS_JS, PICK_BINDING)

    def remove_listeners(self) -> None:
        self._on_pick = None
        self._on_exit = None
        self._call(self.page, REMOVE_LISTENERS_JS)

    def highlight(self, node: Node) -> None:
        self._call(node, HIGHLIGHT_JS)

    def clear_highlight(self) -> None:
        self._call(self.page, CLEAR_UI_JS)

    def _dispatch(self, source: Dict[str, Any], payload: JSHandle) -> None:
        kind = payload.get_property("kind").json_value()
        if kind == "exit":
            if self._on_exit:
                self._on_exit()
            return
        if not self._on_pick:
            return
        point = ScreenPoint(
            float(payload.get_property("x").json_value()),
            float(payload.get_property("y").json_value()),
        )
        target = payload.get_property("target").as_element()
        self._on_pick(point, target)
