from __future__ import annotations

from complexlens.models.annotation import (
    HoverPayload,
    InlineAnnotation,
    InlineMarker,
    Notification,
)
from complexlens.models.cache import CacheEntry
from complexlens.models.span import FunctionSpan, Position, TextRange
from complexlens.models.tools import (
    AnalyzeSelectionInput,
    AnalyzeSelectionOutput,
    ComplexityReportOutput,
    DocumentInput,
    GetAnnotationsOutput,
    HoverInput,
    HoverOutput,
)
from complexlens.models.verdict import Complexity, ComplexityVerdict, Metrics

__all__ = [
    # verdict
    "Complexity",
    "ComplexityVerdict",
    "Metrics",
    # spans
    "FunctionSpan",
    "Position",
    "TextRange",
    # cache
    "CacheEntry",
    # annotations
    "InlineAnnotation",
    "InlineMarker",
    "HoverPayload",
    "Notification",
    # tools
    "DocumentInput",
    "HoverInput",
    "HoverOutput",
    "AnalyzeSelectionInput",
    "AnalyzeSelectionOutput",
    "GetAnnotationsOutput",
    "ComplexityReportOutput",
]
