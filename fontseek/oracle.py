"""
Font availability oracle.

Decides whether a named font is actually rendered by the engine, independent
of what the page declares. Evidence is tried in order, each stage only when
the previous one proved nothing:

1. the engine's font registry ``check()`` for the name at a few sizes/weights
2. the registry's list of loaded faces
3. a measurement differential against a placeholder family, over every
   generic fallback and reference size
4. the per-platform table of fonts that ship with the OS

Verdicts are cached per lowercase name for the lifetime of the session.
"""

import logging
from typing import Dict, Optional

from fontseek.capabilities import FontRegistry, TextMeasurer
from fontseek.config import InspectorConfig
from fontseek.errors import EngineError
from fontseek.families import GENERIC_FAMILIES, strip_quotes
from fontseek.metrics import FALLBACK_FAMILIES, NARROW_TEXT, PLACEHOLDER_FAMILY, WIDE_TEXT
from fontseek.platforms import Platform, is_always_present

logger = logging.getLogger('fontseek.oracle')

CHECK_SPECS = ('16px "{name}"', 'bold 16px "{name}"', '32px "{name}"')


class FontAvailabilityOracle:

    def __init__(
        self,
        measurer: TextMeasurer,
        registry: Optional[FontRegistry],
        platform: Platform,
        config: Optional[InspectorConfig] = None,
    ):
        self.measurer = measurer
        self.registry = registry
        self.platform = platform
        self.config = config or InspectorConfig()
        self._cache: Dict[str, bool] = {}
        self.measure_passes = 0

    @property
    def verdicts(self) -> Dict[str, bool]:
        return dict(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    def is_available(self, name_raw: Optional[str]) -> bool:
        if not name_raw:
            return False
        name = strip_quotes(str(name_raw))
        if not name:
            return False
        low = name.lower()
        if low in self._cache:
            return self._cache[low]
        if low in GENERIC_FAMILIES:
            self._cache[low] = True
            return True

        verdict, stage = self._decide(name)
        logger.debug(f"{name!r}: {'available' if verdict else 'unavailable'} ({stage})")
        self._cache[low] = verdict
        return verdict

    def _decide(self, name: str):
        if self._registry_check(name):
            return True, "registry check"
        if self._registry_loaded(name):
            return True, "registry entries"
        if self._canvas_available(name):
            return True, "measurement"
        if is_always_present(self.platform, name):
            return True, "platform table"
        return False, "no evidence"

    def _registry_check(self, name: str) -> bool:
        if self.registry is None:
            return False
        escaped = name.replace('"', '\\"')
        for template in CHECK_SPECS:
            try:
                answer = self.registry.check(name, template.format(name=escaped))
            except EngineError as exc:
                logger.debug(f"registry check unavailable for {name!r}: {exc}")
                return False
            if answer is None:
                return False
            if answer:
                return True
        return False

    def _registry_loaded(self, name: str) -> bool:
        if self.registry is None:
            return False
        low = name.lower()
        try:
            entries = self.registry.entries()
        except EngineError as exc:
            logger.debug(f"registry enumeration unavailable: {exc}")
            return False
        return any(
            strip_quotes(e.family).lower() == low and e.status == "loaded"
            for e in entries
        )

    def _canvas_available(self, name: str) -> bool:
        self.measure_passes += 1
        sizes = self.config.probe_sizes
        try:
            baseline = {
                (size, fallback): (
                    self.measurer.measure(WIDE_TEXT, size, PLACEHOLDER_FAMILY, fallback),
                    self.measurer.measure(NARROW_TEXT, size, PLACEHOLDER_FAMILY, fallback),
                )
                for size in sizes
                for fallback in FALLBACK_FAMILIES
            }

            def differs_all(text: str, index: int) -> bool:
                for (size, fallback), boxes in baseline.items():
                    if self.measurer.measure(text, size, name, fallback) == boxes[index]:
                        return False
                return True

            return differs_all(WIDE_TEXT, 0) or differs_all(NARROW_TEXT, 1)
        except EngineError as exc:
            logger.debug(f"measurement failed for {name!r}: {exc}")
            return False
