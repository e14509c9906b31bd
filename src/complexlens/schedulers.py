"""Debounced inline-annotation scheduler.

Each document view moves Idle → Pending → Idle. Activating a view or editing
the active document (re)arms a fixed debounce timer for that view; re-arming
cancels the previous timer, so of a burst of edits only the pass for the last
one ever runs. When the timer fires, the pass reads the document's current
text, locates every function, looks each one up in the cache and replaces all
markers for the view in one go.

Passes only render what is already cached. They never call the classifier;
markers appear once hover or manual analysis has populated the cache.
"""

from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from complexlens.locator import locate_all
from complexlens.models.annotation import InlineAnnotation
from complexlens.presentation import build_marker

if TYPE_CHECKING:
    from complexlens.cache import AnnotationCache
    from complexlens.documents import DocumentStore
    from complexlens.protocols import RendererProtocol

log = structlog.get_logger()

SCHEDULER_DEBOUNCE_SECONDS = 0.5


class ViewState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"


def collect_annotations(text: str, cache: AnnotationCache) -> list[InlineAnnotation]:
    """Pair every located function with its cached verdict; misses are skipped."""
    annotations: list[InlineAnnotation] = []
    for span in locate_all(text):
        verdict = cache.get(span.text)
        if verdict is not None:
            annotations.append(InlineAnnotation(span=span, verdict=verdict))
    return annotations


class AnnotationScheduler:
    def __init__(
        self,
        cache: AnnotationCache,
        renderer: RendererProtocol,
        documents: DocumentStore,
        *,
        debounce_seconds: float = SCHEDULER_DEBOUNCE_SECONDS,
        enabled: bool = True,
    ) -> None:
        self._cache = cache
        self._renderer = renderer
        self._documents = documents
        self._debounce = debounce_seconds
        self._enabled = enabled
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._rendered: set[str] = set()
        self.active_uri: str | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def state(self, uri: str) -> ViewState:
        return ViewState.PENDING if uri in self._timers else ViewState.IDLE

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def on_view_activated(self, uri: str) -> None:
        self.active_uri = uri
        if self._enabled:
            self._schedule(uri)

    def on_document_changed(self, uri: str) -> None:
        if self._enabled and uri == self.active_uri:
            self._schedule(uri)

    def on_view_closed(self, uri: str) -> None:
        self._cancel(uri)
        self._rendered.discard(uri)
        self._renderer.replace_markers(uri, [])
        if self.active_uri == uri:
            self.active_uri = None

    # ------------------------------------------------------------------
    # Enable / disable
    # ------------------------------------------------------------------

    def set_enabled(self, enabled: bool) -> None:
        """Disabling clears every marker and stops scheduling; enabling runs one pass now."""
        if enabled == self._enabled:
            return
        self._enabled = enabled
        log.info("inline_annotations_toggled", enabled=enabled)

        if not enabled:
            for uri in list(self._timers):
                self._cancel(uri)
            for uri in sorted(self._rendered):
                self._renderer.replace_markers(uri, [])
            self._rendered.clear()
            return

        if self.active_uri is not None:
            self.run_pass(self.active_uri)

    def toggle(self) -> bool:
        self.set_enabled(not self._enabled)
        return self._enabled

    def shutdown(self) -> None:
        for uri in list(self._timers):
            self._cancel(uri)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _schedule(self, uri: str) -> None:
        self._cancel(uri)
        loop = asyncio.get_running_loop()
        self._timers[uri] = loop.call_later(self._debounce, self._fire, uri)

    def _cancel(self, uri: str) -> None:
        handle = self._timers.pop(uri, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, uri: str) -> None:
        self._timers.pop(uri, None)
        self.run_pass(uri)

    def run_pass(self, uri: str) -> int:
        """Re-render all markers for ``uri`` from the cache. Returns the marker count.

        Failures are logged and leave the previous markers in place.
        """
        if not self._enabled:
            return 0
        document = self._documents.get(uri)
        if document is None:
            return 0

        try:
            markers = [build_marker(a) for a in collect_annotations(document.text, self._cache)]
        except Exception:
            log.warning("annotation_pass_failed", uri=uri, exc_info=True)
            return 0

        self._renderer.replace_markers(uri, markers)
        self._rendered.add(uri)
        log.debug(
            "annotation_pass_complete",
            uri=uri,
            version=document.version,
            marker_count=len(markers),
        )
        return len(markers)
