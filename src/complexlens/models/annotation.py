from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from complexlens.models.span import FunctionSpan, TextRange
from complexlens.models.verdict import ComplexityVerdict


class InlineAnnotation(BaseModel):
    """A located function paired with its verdict. Rebuilt on every pass."""

    model_config = ConfigDict(frozen=True)

    span: FunctionSpan
    verdict: ComplexityVerdict


class InlineMarker(BaseModel):
    """Payload handed to the renderer for one inline marker."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    display_text: str
    color_hint: str


class HoverPayload(BaseModel):
    header_text: str
    metrics_line: str | None = None
    first_suggestion: str | None = None


class Notification(BaseModel):
    """Dismissable notification shown for a manual analysis."""

    level: str = "info"
    message: str
    actions: list[str] = []
