"""Tool handler for hover queries.

Locates the function under the cursor and returns its verdict as a popup
payload. Classifier failures never reach the caller: the hover is simply empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.tools import HoverInput, HoverOutput
from complexlens.presentation import build_hover

if TYPE_CHECKING:
    from complexlens.state import AppState


async def handle(uri: str, line: int, character: int, state: AppState) -> dict:
    """Handle a hover tool call."""
    log = structlog.get_logger().bind(tool="hover", uri=uri, line=line)
    log.debug("handler_called")

    try:
        validated = HoverInput(uri=uri, line=line, character=character)
    except ValueError as exc:
        raise ComplexLensError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide an open document URI and a zero-based line and character.",
            recoverable=False,
        ) from exc

    document = state.documents.require(validated.uri)
    annotation = await state.coordinator.hover(
        validated.uri, document.text, validated.position
    )
    if annotation is None:
        return HoverOutput(uri=validated.uri).model_dump(mode="json")

    output = HoverOutput(
        uri=validated.uri,
        start_line=annotation.span.start_line,
        end_line=annotation.span.end_line,
        hover=build_hover(
            annotation.verdict,
            show_metrics=state.settings.annotations.show_metrics,
        ),
    )
    log.info("hover_complete", complexity=annotation.verdict.complexity)
    return output.model_dump(mode="json")
