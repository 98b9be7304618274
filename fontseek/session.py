"""
Inspection session: the entry point the presentation layer talks to.

A session owns every piece of per-inspection state (the availability cache,
the installed listeners, the highlight) and wires the resolvers to one render
engine. ``begin()`` on an active session restarts it instead of stacking a
second set of listeners.
"""

import logging
from typing import Callable, List, Optional

from fontseek.capabilities import RenderEngine
from fontseek.cascade import FamilyResolutionCascade
from fontseek.census import PageFontCensus
from fontseek.color import ColorResolver
from fontseek.config import InspectorConfig
from fontseek.errors import EngineError
from fontseek.models import FontCensusEntry, Inspection, Node, ScreenPoint
from fontseek.oracle import FontAvailabilityOracle
from fontseek.platforms import Platform, detect_platform
from fontseek.target import TargetResolver
from fontseek.typography import TYPOGRAPHY_PROPS, build_resolved_font

logger = logging.getLogger('fontseek.session')

ResultCallback = Callable[[Inspection], None]


class InspectionSession:

    def __init__(self, engine: RenderEngine, config: Optional[InspectorConfig] = None):
        self.engine = engine
        self.config = config or InspectorConfig()
        self.platform = self._detect_platform()

        self.oracle = FontAvailabilityOracle(engine, engine, self.platform, self.config)
        self.targets = TargetResolver(engine, engine, self.config)
        self.cascade = FamilyResolutionCascade(
            engine, engine, engine, engine, self.oracle, self.platform, self.config,
        )
        self.colors = ColorResolver(engine)
        self.census = PageFontCensus(engine, engine, engine, self.oracle, self.config)

        self._active = False
        self._on_result: Optional[ResultCallback] = None
        self.last_result: Optional[Inspection] = None

    @property
    def active(self) -> bool:
        return self._active

    def _detect_platform(self) -> Platform:
        try:
            return detect_platform(self.engine.user_agent())
        except EngineError as exc:
            logger.debug(f"user agent unavailable, assuming linux: {exc}")
            return Platform.LINUX

    def begin(self, on_result: Optional[ResultCallback] = None) -> None:
        if self._active:
            logger.info("Session already active; restarting")
            self.end()
        self._on_result = on_result
        self.engine.install_listeners(self._handle_pick, self.end)
        self._active = True
        logger.info(f"Inspection session started ({self.platform.value})")

    def end(self) -> None:
        if not self._active:
            return
        self._active = False
        self._on_result = None
        for teardown in (self.engine.remove_listeners, self.engine.clear_highlight):
            try:
                teardown()
            except EngineError as exc:
                logger.debug(f"teardown step failed: {exc}")
        self.oracle.clear()
        self.cascade.clear()
        self.last_result = None
        logger.info("Inspection session ended")

    def resolve_at(self, point: ScreenPoint, initial_target: Optional[Node]) -> Inspection:
        target = self.targets.resolve(initial_target, point)
        element = target.element
        notes: List[str] = []

        computed = {}
        if element is not None:
            try:
                computed = self.engine.computed_style(element, TYPOGRAPHY_PROPS)
            except EngineError as exc:
                notes.append(f"computed style unavailable: {exc}")
        family = self.cascade.resolve(element) if element is not None else "system-ui"
        font = build_resolved_font(family, computed)
        color = self.colors.resolve(computed.get("color"))

        if target.forced:
            notes.append("target chosen by fallback strategy" if target.strategy else "no text target found")
        return Inspection(
            element=element,
            font=font,
            color=color,
            forced=target.forced,
            strategy=target.strategy,
            notes=notes,
        )

    def scan_document_fonts(self) -> List[FontCensusEntry]:
        return self.census.scan()

    def _handle_pick(self, point: ScreenPoint, initial_target: Optional[Node]) -> None:
        if not self._active:
            return
        result = self.resolve_at(point, initial_target)
        self.last_result = result
        if result.element is not None:
            try:
                self.engine.highlight(result.element)
            except EngineError as exc:
                logger.debug(f"highlight failed: {exc}")
        if self._on_result:
            self._on_result(result)
