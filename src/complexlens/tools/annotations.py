"""Tool handlers for inline annotations: read the current markers, toggle them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from complexlens.models.tools import GetAnnotationsOutput
from complexlens.tools.documents import validate_document_input

if TYPE_CHECKING:
    from complexlens.state import AppState


async def handle_get(uri: str, state: AppState) -> dict:
    """Handle a get_annotations tool call."""
    validated = validate_document_input(uri)
    state.documents.require(validated.uri)

    output = GetAnnotationsOutput(
        uri=validated.uri,
        enabled=state.scheduler.enabled,
        markers=state.markers.markers_for(validated.uri),
    )
    return output.model_dump(mode="json")


async def handle_toggle(state: AppState) -> dict:
    """Handle a toggle_inline_annotations tool call."""
    enabled = state.scheduler.toggle()
    structlog.get_logger().info("handler_called", tool="toggle_inline_annotations", enabled=enabled)
    return {
        "enabled": enabled,
        "message": f"Inline analysis {'enabled' if enabled else 'disabled'}",
    }
