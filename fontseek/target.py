"""
Target resolution: which element did the user mean at this point?

Five strategies are tried in order and the first hit wins:

1. ``ascent``   walk up from the event target to the first visible node that
                owns text directly
2. ``caret``    the parent of the text node under the caret at the point
3. ``scoring``  score every element stacked at the point
4. ``pierce``   hit-test through nested open shadow roots
5. ``nearest``  the closest text element within a fixed radius

Anything other than ``ascent`` marks the result as forced. When every strategy
comes up empty the initial target is returned unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from fontseek.capabilities import DomInspector, StyleReader
from fontseek.config import InspectorConfig
from fontseek.errors import EngineError
from fontseek.models import ElementCandidate, Node, ScreenPoint, TargetResolution
from fontseek.util import parse_px

logger = logging.getLogger('fontseek.target')

OVERLAY_TAGS = {"video", "iframe", "canvas", "svg", "img", "picture", "source"}

TEXT_TAGS = {
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "a", "li", "td", "th", "label",
    "button", "span", "em", "strong", "b", "i", "small", "blockquote",
    "figcaption", "dt", "dd", "code", "pre",
}

VISIBILITY_PROPS = ["display", "visibility", "font-size", "position"]


@dataclass
class TargetContext:
    initial: Optional[Node]
    point: ScreenPoint
    dom: DomInspector
    styles: StyleReader
    config: InspectorConfig

    def style(self, node: Node):
        try:
            return self.styles.computed_style(node, VISIBILITY_PROPS)
        except EngineError:
            return None

    def is_visible(self, node: Node) -> bool:
        cs = self.style(node)
        if not cs:
            return False
        if cs.get("display") == "none" or cs.get("visibility") == "hidden":
            return False
        size = parse_px(cs.get("font-size"))
        return size is None or size > 0

    def is_overlay(self, node: Node) -> bool:
        try:
            if self.dom.tag_name(node) in OVERLAY_TAGS:
                return True
            cs = self.style(node) or {}
            if cs.get("position") != "fixed":
                return False
            box = self.dom.bounding_box(node)
            viewport = self.dom.viewport()
        except EngineError:
            return False
        if box is None or viewport.width <= 0 or viewport.height <= 0:
            return False
        coverage = self.config.viewport_coverage
        return box.width >= viewport.width * coverage and box.height >= viewport.height * coverage

    def owns_text(self, node: Node) -> bool:
        try:
            return self.dom.has_direct_text(node)
        except EngineError:
            return False

    def is_textual(self, node: Node) -> bool:
        return self.is_visible(node) and self.owns_text(node) and not self.is_overlay(node)

    def ascend_to_text(self, start: Optional[Node]) -> Optional[Node]:
        node = start
        for _ in range(self.config.ancestor_hops):
            if node is None:
                return None
            if self.is_textual(node):
                return node
            try:
                node = self.dom.parent_or_host(node)
            except EngineError:
                return None
        return None


Strategy = Callable[[TargetContext], Optional[Node]]


def ascent_strategy(ctx: TargetContext) -> Optional[Node]:
    return ctx.ascend_to_text(ctx.initial)


def caret_strategy(ctx: TargetContext) -> Optional[Node]:
    try:
        node = ctx.dom.caret_parent_at(ctx.point)
    except EngineError:
        return None
    if node is None or not ctx.is_visible(node) or ctx.is_overlay(node):
        return None
    return node


def score_candidate(ctx: TargetContext, node: Node) -> int:
    """Score one stacked element; 0 disqualifies."""
    try:
        if ctx.dom.has_direct_text(node):
            score = 50
        elif ctx.dom.has_any_text(node):
            score = 10
        else:
            return 0
        if ctx.is_overlay(node):
            return 0
        box = ctx.dom.bounding_box(node)
        if box is not None:
            if box.contains(ctx.point):
                score += 30
            if box.area < ctx.config.small_area:
                score += 20
            elif box.area < ctx.config.medium_area:
                score += 10
        if ctx.dom.tag_name(node) in TEXT_TAGS:
            score += 15
    except EngineError:
        return 0
    return score


def scoring_strategy(ctx: TargetContext) -> Optional[Node]:
    try:
        stacked = ctx.dom.elements_at(ctx.point)
        root, body = ctx.dom.root(), ctx.dom.body()
    except EngineError:
        return None
    best: Optional[ElementCandidate] = None
    for node in stacked:
        try:
            if ctx.dom.is_own_ui(node) or ctx.dom.same_node(node, root) or ctx.dom.same_node(node, body):
                continue
        except EngineError:
            continue
        candidate = ElementCandidate(node=node, score=score_candidate(ctx, node))
        if candidate.score > 0 and (best is None or candidate.score > best.score):
            best = candidate
    return best.node if best else None


def pierce_strategy(ctx: TargetContext) -> Optional[Node]:
    try:
        node = ctx.dom.element_at(ctx.point)
    except EngineError:
        return None
    if node is None:
        return None
    for _ in range(ctx.config.pierce_depth):
        try:
            inner = ctx.dom.element_at(ctx.point, within=node)
        except EngineError:
            break
        if inner is None or ctx.dom.same_node(inner, node):
            break
        node = inner
    if ctx.is_textual(node):
        return node
    return ctx.ascend_to_text(node)


def nearest_strategy(ctx: TargetContext) -> Optional[Node]:
    try:
        elements = ctx.dom.text_elements()
    except EngineError:
        return None
    best: Optional[Tuple[float, Node]] = None
    for node in elements:
        try:
            box = ctx.dom.bounding_box(node)
        except EngineError:
            continue
        if box is None or box.area <= 0:
            continue
        distance = box.distance_to(ctx.point)
        if distance <= ctx.config.nearest_radius and (best is None or distance < best[0]):
            best = (distance, node)
    return best[1] if best else None


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("ascent", ascent_strategy),
    ("caret", caret_strategy),
    ("scoring", scoring_strategy),
    ("pierce", pierce_strategy),
    ("nearest", nearest_strategy),
]


class TargetResolver:

    def __init__(
        self,
        dom: DomInspector,
        styles: StyleReader,
        config: Optional[InspectorConfig] = None,
        strategies: Optional[List[Tuple[str, Strategy]]] = None,
    ):
        self.dom = dom
        self.styles = styles
        self.config = config or InspectorConfig()
        self.strategies = list(strategies or STRATEGIES)

    def resolve(self, initial_target: Optional[Node], point: ScreenPoint) -> TargetResolution:
        ctx = TargetContext(
            initial=initial_target,
            point=point,
            dom=self.dom,
            styles=self.styles,
            config=self.config,
        )
        for index, (name, strategy) in enumerate(self.strategies):
            node = strategy(ctx)
            if node is not None:
                logger.debug(f"target resolved by {name} at ({point.x}, {point.y})")
                return TargetResolution(element=node, strategy=name, forced=index > 0)
        logger.debug(f"no strategy matched at ({point.x}, {point.y}); keeping initial target")
        element = initial_target
        if element is None:
            try:
                element = self.dom.body() or self.dom.root()
            except EngineError:
                element = None
        return TargetResolution(element=element, strategy=None, forced=True)
