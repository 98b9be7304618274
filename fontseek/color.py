import logging
from typing import Optional, Tuple

from fontseek.capabilities import ColorSampler
from fontseek.errors import EngineError
from fontseek.models import ResolvedColor

logger = logging.getLogger('fontseek.color')

FALLBACK_COLOR = ResolvedColor(0, 0, 0, 255)


def rgba_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    r /= 255.0
    g /= 255.0
    b /= 255.0
    maxc = max(r, g, b)
    minc = min(r, g, b)
    l = (minc + maxc) / 2.0
    if minc == maxc:
        return 0.0, 0.0, l
    if l <= 0.5:
        s = (maxc - minc) / (maxc + minc)
    else:
        s = (maxc - minc) / (2.0 - maxc - minc)
    rc = (maxc - r) / (maxc - minc)
    gc = (maxc - g) / (maxc - minc)
    bc = (maxc - b) / (maxc - minc)
    if r == maxc:
        h = bc - gc
    elif g == maxc:
        h = 2.0 + rc - bc
    else:
        h = 4.0 + gc - rc
    h = (h / 6.0) % 1.0
    return h * 360.0, s, l


def hsl_string(color: ResolvedColor) -> str:
    h, s, l = rgba_to_hsl(color.r, color.g, color.b)
    return f"hsl({round(h)}, {round(s * 100)}%, {round(l * 100)}%)"


class ColorResolver:
    """Normalizes any CSS color by letting the engine paint it and reading the pixel back."""

    def __init__(self, sampler: ColorSampler):
        self.sampler = sampler

    def resolve(self, color: Optional[str]) -> ResolvedColor:
        if not color or not color.strip():
            return FALLBACK_COLOR
        try:
            pixel = self.sampler.sample(color.strip())
        except EngineError as exc:
            logger.warning(f"color sampling failed for {color!r}: {exc}")
            return FALLBACK_COLOR
        if pixel is None or len(pixel) < 4:
            logger.warning(f"engine rejected color {color!r}")
            return FALLBACK_COLOR
        r, g, b, a = (max(0, min(255, int(v))) for v in pixel[:4])
        return ResolvedColor(r, g, b, a)
