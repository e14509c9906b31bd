"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the stdio transport
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import complexlens.tools.analyze_selection as t_analyze
import complexlens.tools.annotations as t_annotations
import complexlens.tools.documents as t_documents
import complexlens.tools.health as t_health
import complexlens.tools.hover as t_hover
import complexlens.tools.report as t_report
from complexlens import __version__
from complexlens.classifier import ClassifierClient, build_http_client
from complexlens.config import Settings
from complexlens.errors import ComplexLensError
from complexlens.presentation import build_error_notification
from complexlens.state import AppState, build_app_state

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr: stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


async def _check_classifier_on_startup(state: AppState) -> None:
    """Probe the classifier once so a misconfigured endpoint shows up in the logs early."""
    if await state.classifier.health_check():
        log.info("classifier_connected", endpoint=state.settings.classifier.endpoint)
    else:
        log.warning(
            "classifier_unreachable",
            endpoint=state.settings.classifier.endpoint,
            message=(
                "Complexity classifier is not responding. Hover and manual analysis "
                "will fail until it is reachable; check the classifier endpoint setting."
            ),
        )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        endpoint=settings.classifier.endpoint,
    )

    http_client = build_http_client(settings.classifier)
    classifier = ClassifierClient(http_client, settings.classifier)
    state = build_app_state(settings, classifier, http_client=http_client)

    health_task = asyncio.create_task(_check_classifier_on_startup(state))

    log.info(
        "server_started",
        version=__version__,
        annotations_enabled=state.scheduler.enabled,
        cache_ttl_minutes=settings.cache.ttl_minutes,
    )

    try:
        yield state
    finally:
        health_task.cancel()
        with suppress(asyncio.CancelledError):
            await health_task
        state.scheduler.shutdown()
        state.cache.clear()
        await http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("complexlens", lifespan=lifespan)
# FastMCP has no version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: ComplexLensError) -> CallToolResult:
    """Convert a ComplexLensError to the MCP tool error result envelope.

    The envelope carries a ready-made notification naming the failure cause.
    """
    payload = error.to_dict()
    payload["notification"] = build_error_notification(error).model_dump(mode="json")
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    try:
        return await call
    except ComplexLensError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


def _state(ctx: Context) -> AppState:
    return ctx.request_context.lifespan_context


@mcp.tool()
async def open_document(uri: str, text: str, ctx: Context) -> object:
    """Open a document (or replace its text) and make it the active view."""
    return await _run_tool("open_document", t_documents.handle_open(uri, text, _state(ctx)))


@mcp.tool()
async def update_document(uri: str, text: str, ctx: Context) -> object:
    """Replace the full text of an open document after an edit."""
    return await _run_tool("update_document", t_documents.handle_update(uri, text, _state(ctx)))


@mcp.tool()
async def close_document(uri: str, ctx: Context) -> object:
    """Close a document and drop its inline markers."""
    return await _run_tool("close_document", t_documents.handle_close(uri, _state(ctx)))


@mcp.tool()
async def hover(uri: str, line: int, ctx: Context, character: int = 0) -> object:
    """Show the complexity of the function at a zero-based line/character position."""
    return await _run_tool("hover", t_hover.handle(uri, line, character, _state(ctx)))


@mcp.tool()
async def analyze_selection(
    uri: str,
    ctx: Context,
    start_line: int | None = None,
    start_character: int = 0,
    end_line: int | None = None,
    end_character: int | None = None,
) -> object:
    """Analyse the selected code, or the whole document when no selection is given.

    Returns a notification with the complexity, confidence, metrics and any
    improvement suggestions.
    """
    return await _run_tool(
        "analyze_selection",
        t_analyze.handle(
            uri,
            _state(ctx),
            start_line=start_line,
            start_character=start_character,
            end_line=end_line,
            end_character=end_character,
        ),
    )


@mcp.tool()
async def toggle_inline_annotations(ctx: Context) -> object:
    """Turn inline complexity markers on or off."""
    return await _run_tool("toggle_inline_annotations", t_annotations.handle_toggle(_state(ctx)))


@mcp.tool()
async def get_annotations(uri: str, ctx: Context) -> object:
    """Return the inline markers currently rendered for a document."""
    return await _run_tool("get_annotations", t_annotations.handle_get(uri, _state(ctx)))


@mcp.tool()
async def complexity_report(uri: str, ctx: Context) -> object:
    """Summarise cached complexity verdicts for every function in a document."""
    return await _run_tool("complexity_report", t_report.handle(uri, _state(ctx)))


@mcp.tool()
async def check_classifier_health(ctx: Context) -> object:
    """Check whether the complexity classifier service is reachable."""
    return await _run_tool("check_classifier_health", t_health.handle(_state(ctx)))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
