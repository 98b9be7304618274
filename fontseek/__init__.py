"""fontseek: find the font family, metrics and color a browser really renders."""

from fontseek.cascade import FamilyResolutionCascade
from fontseek.census import PageFontCensus
from fontseek.color import ColorResolver
from fontseek.config import InspectorConfig
from fontseek.errors import BrowserError, ConfigError, EngineError, FontseekError
from fontseek.models import (
    FontCensusEntry,
    Inspection,
    ResolvedColor,
    ResolvedFont,
    ScreenPoint,
    TargetResolution,
)
from fontseek.oracle import FontAvailabilityOracle
from fontseek.session import InspectionSession
from fontseek.target import TargetResolver
from fontseek.typography import format_weight

__version__ = "0.1.0"

__all__ = [
    "BrowserError",
    "ColorResolver",
    "ConfigError",
    "EngineError",
    "FamilyResolutionCascade",
    "FontAvailabilityOracle",
    "FontCensusEntry",
    "FontseekError",
    "Inspection",
    "InspectionSession",
    "InspectorConfig",
    "PageFontCensus",
    "ResolvedColor",
    "ResolvedFont",
    "ScreenPoint",
    "TargetResolution",
    "TargetResolver",
    "format_weight",
]
