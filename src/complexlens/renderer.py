"""In-memory marker board: the rendering collaborator for the MCP host.

Holds the markers most recently drawn for each document view. Every update
replaces the full set for that view; nothing is diffed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

    from complexlens.models.annotation import InlineMarker

log = structlog.get_logger()


class MarkerBoard:
    """RendererProtocol implementation that remembers the current markers."""

    def __init__(self) -> None:
        self._markers: dict[str, tuple[InlineMarker, ...]] = {}

    def replace_markers(self, uri: str, markers: Sequence[InlineMarker]) -> None:
        if markers:
            self._markers[uri] = tuple(markers)
        else:
            self._markers.pop(uri, None)
        log.debug("markers_replaced", uri=uri, marker_count=len(markers))

    def markers_for(self, uri: str) -> list[InlineMarker]:
        return list(self._markers.get(uri, ()))
