"""Formatting of verdicts into renderer and notification payloads.

Pure functions, no I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from complexlens.models.annotation import HoverPayload, InlineMarker, Notification
from complexlens.models.span import Position, TextRange
from complexlens.models.verdict import Complexity

if TYPE_CHECKING:
    from complexlens.errors import ComplexLensError
    from complexlens.models.annotation import InlineAnnotation
    from complexlens.models.verdict import ComplexityVerdict

ICONS: dict[Complexity, str] = {
    Complexity.SIMPLE: "✓",
    Complexity.MODERATE: "⚠️",
    Complexity.COMPLEX: "🔴",
}

COLORS: dict[Complexity, str] = {
    Complexity.SIMPLE: "#22c55e",
    Complexity.MODERATE: "#f59e0b",
    Complexity.COMPLEX: "#ef4444",
}

VIEW_SUGGESTIONS_ACTION = "View Suggestions"
DISMISS_ACTION = "Dismiss"


def build_marker(annotation: InlineAnnotation) -> InlineMarker:
    """Zero-width marker anchored at the start of the function's first line."""
    complexity = annotation.verdict.complexity
    anchor = Position(line=annotation.span.start_line, character=0)
    return InlineMarker(
        range=TextRange(start=anchor, end=anchor),
        display_text=f" {ICONS[complexity]} {complexity}",
        color_hint=COLORS[complexity],
    )


def build_hover(verdict: ComplexityVerdict, *, show_metrics: bool = True) -> HoverPayload:
    complexity = verdict.complexity
    header = (
        f"**{ICONS[complexity]} {complexity.upper()}** "
        f"({verdict.confidence * 100:.0f}% confident)"
    )

    metrics_line = None
    if show_metrics:
        m = verdict.metrics
        metrics_line = (
            f"LOC: {m.lines_of_code} | Cyclomatic: {m.cyclomatic} | Nesting: {m.nesting_depth}"
        )

    suggestions = verdict.suggestion_list()
    return HoverPayload(
        header_text=header,
        metrics_line=metrics_line,
        first_suggestion=suggestions[0] if suggestions else None,
    )


def build_notification(verdict: ComplexityVerdict, *, show_metrics: bool = True) -> Notification:
    """Notification for a manual analysis, e.g. ``🔴 Complexity: COMPLEX (Confidence: 90.0%)``."""
    complexity = verdict.complexity
    message = (
        f"{ICONS[complexity]} Complexity: {complexity.upper()} "
        f"(Confidence: {verdict.confidence * 100:.1f}%)"
    )
    if show_metrics:
        m = verdict.metrics
        message += (
            f"\n\nLOC: {m.lines_of_code}, Cyclomatic: {m.cyclomatic}, Nesting: {m.nesting_depth}"
        )

    actions = [VIEW_SUGGESTIONS_ACTION] if verdict.suggestion_list() else []
    actions.append(DISMISS_ACTION)
    return Notification(level="info", message=message, actions=actions)


def build_error_notification(error: ComplexLensError) -> Notification:
    return Notification(
        level="error",
        message=f"{error.code}: {error.message}. {error.suggestion}".rstrip(),
        actions=[DISMISS_ACTION],
    )
