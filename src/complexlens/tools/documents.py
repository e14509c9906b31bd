"""Tool handlers for the document lifecycle: open, update, close.

Opening a document makes it the active view; updates to the active document
re-arm the annotation scheduler. No MCP or FastMCP imports; server.py
handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.tools import DocumentInput

if TYPE_CHECKING:
    from complexlens.state import AppState


def validate_document_input(uri: str, text: str = "") -> DocumentInput:
    try:
        return DocumentInput(uri=uri, text=text)
    except ValueError as exc:
        raise ComplexLensError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty document URI (max 2048 chars).",
            recoverable=False,
        ) from exc


async def handle_open(uri: str, text: str, state: AppState) -> dict:
    """Handle an open_document tool call."""
    validated = validate_document_input(uri, text)
    log = structlog.get_logger().bind(tool="open_document", uri=validated.uri)

    document = state.documents.open(validated.uri, validated.text)
    state.scheduler.on_view_activated(document.uri)
    log.info("document_opened", version=document.version, length=len(document.text))

    return {
        "uri": document.uri,
        "version": document.version,
        "annotations_enabled": state.scheduler.enabled,
    }


async def handle_update(uri: str, text: str, state: AppState) -> dict:
    """Handle an update_document tool call (full-text replacement)."""
    validated = validate_document_input(uri, text)
    log = structlog.get_logger().bind(tool="update_document", uri=validated.uri)

    document = state.documents.update(validated.uri, validated.text)
    state.scheduler.on_document_changed(document.uri)
    log.debug("document_updated", version=document.version)

    return {
        "uri": document.uri,
        "version": document.version,
        "annotation_state": state.scheduler.state(document.uri),
    }


async def handle_close(uri: str, state: AppState) -> dict:
    """Handle a close_document tool call."""
    validated = validate_document_input(uri)
    log = structlog.get_logger().bind(tool="close_document", uri=validated.uri)

    state.documents.require(validated.uri)
    state.scheduler.on_view_closed(validated.uri)
    state.coordinator.forget_view(validated.uri)
    state.documents.close(validated.uri)
    log.info("document_closed")

    return {"uri": validated.uri, "closed": True}
