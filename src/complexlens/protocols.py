"""Protocol interfaces for swappable components.

The coordinator, scheduler and AppState reference these protocols, not the
concrete implementations. This allows:
- Tests to use lightweight fakes instead of the HTTP classifier
- Other hosts to plug in their own marker rendering
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from complexlens.models.annotation import InlineMarker
    from complexlens.models.verdict import ComplexityVerdict


class ClassifierProtocol(Protocol):
    """Interface for the remote complexity classifier."""

    async def classify(self, code: str) -> ComplexityVerdict: ...

    async def health_check(self) -> bool: ...


class RendererProtocol(Protocol):
    """Interface for whatever draws inline markers in a document view."""

    def replace_markers(self, uri: str, markers: Sequence[InlineMarker]) -> None: ...
