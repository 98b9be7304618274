"""Reference strings and metric comparisons built on the ``TextMeasurer`` capability."""

from typing import Sequence

from fontseek.capabilities import TextMeasurer
from fontseek.families import css_family

WIDE_TEXT = "MW@#Il1Oo0WWMWMWmmmmmmmmmmmm"
NARROW_TEXT = ".,;:iIl!|[]()ftjrxn"
COMPARE_TEXT = "MW@#Il1Oo0mmmmWWW"

# Family name no engine will ever have; measuring it yields the fallback's own box.
PLACEHOLDER_FAMILY = "_fs_fake_"

FALLBACK_FAMILIES = ("serif", "sans-serif", "monospace")
COMPARE_SIZE = 40


def metrics_equal(
    measurer: TextMeasurer,
    a: str,
    b: str,
    size: float = COMPARE_SIZE,
    fallbacks: Sequence[str] = FALLBACK_FAMILIES,
) -> bool:
    """True when ``a`` and ``b`` render identically over every generic fallback."""
    for fallback in fallbacks:
        da = measurer.measure(COMPARE_TEXT, size, a, fallback)
        db = measurer.measure(COMPARE_TEXT, size, b, fallback)
        if da != db:
            return False
    return True


def renders_as(measurer: TextMeasurer, chosen: str, candidate: str, size: float = 48) -> bool:
    """True when ``chosen`` is invisible in front of ``candidate``.

    ``"chosen", candidate`` boxing exactly like ``candidate, sans-serif`` means
    the engine skipped ``chosen`` and painted ``candidate``.
    """
    for text in (WIDE_TEXT, NARROW_TEXT):
        stacked = measurer.measure(text, size, chosen, css_family(candidate))
        alone = measurer.measure(text, size, candidate, "sans-serif")
        if stacked != alone:
            return False
    return True


def is_rendered(measurer: TextMeasurer, name: str, size: float = 48) -> bool:
    """True when ``name`` boxes differently from a missing family on ``sans-serif``.

    A name the engine cannot address falls through to the fallback and measures
    exactly like the placeholder.
    """
    for text in (WIDE_TEXT, NARROW_TEXT):
        named = measurer.measure(text, size, name, "sans-serif")
        missing = measurer.measure(text, size, PLACEHOLDER_FAMILY, "sans-serif")
        if named != missing:
            return True
    return False
