"""Tool handler for manual analysis of a selection or a whole document.

Unlike hover, classifier failures propagate as ComplexLensError so that
server.py turns them into a visible error notification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.tools import AnalyzeSelectionInput, AnalyzeSelectionOutput
from complexlens.presentation import build_notification

if TYPE_CHECKING:
    from complexlens.state import AppState


async def handle(
    uri: str,
    state: AppState,
    *,
    start_line: int | None = None,
    start_character: int = 0,
    end_line: int | None = None,
    end_character: int | None = None,
) -> dict:
    """Handle an analyze_selection tool call."""
    log = structlog.get_logger().bind(tool="analyze_selection", uri=uri)
    log.info("handler_called")

    try:
        validated = AnalyzeSelectionInput(
            uri=uri,
            start_line=start_line,
            start_character=start_character,
            end_line=end_line,
            end_character=end_character,
        )
    except ValueError as exc:
        raise ComplexLensError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide zero-based selection bounds with the end at or after the start.",
            recoverable=False,
        ) from exc

    document = state.documents.require(validated.uri)
    verdict = await state.coordinator.analyze_range(document.text, validated.selection)

    # Markers for the newly cached function show up on the next pass.
    state.scheduler.on_document_changed(document.uri)

    output = AnalyzeSelectionOutput(
        uri=validated.uri,
        notification=build_notification(
            verdict, show_metrics=state.settings.annotations.show_metrics
        ),
        verdict=verdict,
        suggestions=verdict.suggestion_list(),
    )
    log.info("analysis_complete", complexity=verdict.complexity, confidence=verdict.confidence)
    return output.model_dump(mode="json", by_alias=True)
