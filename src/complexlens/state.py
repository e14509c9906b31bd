"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
The annotation cache is owned here and shared by the coordinator and the
scheduler; its lifetime is the server session's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from complexlens.cache import AnnotationCache
from complexlens.coordinator import QueryCoordinator
from complexlens.documents import DocumentStore
from complexlens.renderer import MarkerBoard
from complexlens.schedulers import SCHEDULER_DEBOUNCE_SECONDS, AnnotationScheduler

if TYPE_CHECKING:
    import httpx

    from complexlens.config import Settings
    from complexlens.protocols import ClassifierProtocol


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    cache: AnnotationCache
    classifier: ClassifierProtocol
    coordinator: QueryCoordinator
    scheduler: AnnotationScheduler
    documents: DocumentStore
    markers: MarkerBoard
    http_client: httpx.AsyncClient | None = None


def build_app_state(
    settings: Settings,
    classifier: ClassifierProtocol,
    *,
    http_client: httpx.AsyncClient | None = None,
    debounce_seconds: float = SCHEDULER_DEBOUNCE_SECONDS,
) -> AppState:
    """Wire the cache, coordinator, scheduler and stores around one classifier."""
    cache = AnnotationCache(settings.cache.ttl, max_entries=settings.cache.max_entries)
    documents = DocumentStore()
    markers = MarkerBoard()
    coordinator = QueryCoordinator(
        cache,
        classifier,
        hover_delay_seconds=settings.annotations.analysis_delay_ms / 1000,
    )
    scheduler = AnnotationScheduler(
        cache,
        markers,
        documents,
        debounce_seconds=debounce_seconds,
        enabled=settings.annotations.enabled,
    )
    return AppState(
        settings=settings,
        cache=cache,
        classifier=classifier,
        coordinator=coordinator,
        scheduler=scheduler,
        documents=documents,
        markers=markers,
        http_client=http_client,
    )
