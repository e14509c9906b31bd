"""On-demand analysis shared by hover and manual selection.

Combines the locator, the annotation cache and the classifier. The only
suspension points are classifier calls (and the hover settle delay); cache
hits return without awaiting anything.

Concurrent requests for the same code text share one in-flight classifier
call. The shared call is shielded, so a caller that goes away never cancels it
and a late response still populates the cache.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from complexlens.cache import content_hash
from complexlens.documents import extract_text
from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.locator import locate_containing
from complexlens.models.annotation import InlineAnnotation

if TYPE_CHECKING:
    from complexlens.cache import AnnotationCache
    from complexlens.models.span import Position, TextRange
    from complexlens.models.verdict import ComplexityVerdict
    from complexlens.protocols import ClassifierProtocol

log = structlog.get_logger()


class QueryCoordinator:
    def __init__(
        self,
        cache: AnnotationCache,
        classifier: ClassifierProtocol,
        *,
        hover_delay_seconds: float = 0.0,
    ) -> None:
        self._cache = cache
        self._classifier = classifier
        self._hover_delay = hover_delay_seconds
        self._in_flight: dict[str, asyncio.Task[ComplexityVerdict]] = {}
        self._hover_generation: dict[str, int] = {}

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def analyze_code(self, code: str) -> ComplexityVerdict:
        """Return the verdict for ``code``, from cache or from the classifier.

        Classifier failures propagate as ComplexLensError and leave the cache
        untouched.
        """
        cached = self._cache.get(code)
        if cached is not None:
            log.debug("cache_hit", code_length=len(code))
            return cached

        key = content_hash(code)
        task = self._in_flight.get(key)
        if task is None:
            log.info("cache_miss_classifying", code_length=len(code))
            task = asyncio.create_task(self._classify_and_store(code))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._request_finished(key, done))
        else:
            log.debug("classify_request_coalesced", key=key[:12])

        return await asyncio.shield(task)

    async def _classify_and_store(self, code: str) -> ComplexityVerdict:
        verdict = await self._classifier.classify(code)
        self._cache.put(code, verdict)
        return verdict

    def _request_finished(self, key: str, task: asyncio.Task[ComplexityVerdict]) -> None:
        self._in_flight.pop(key, None)
        # Mark the outcome as retrieved even if every waiter has gone away.
        if not task.cancelled():
            task.exception()

    async def analyze_at_position(self, text: str, position: Position) -> InlineAnnotation | None:
        """Analyse the function enclosing ``position``. None if no function is found."""
        span = locate_containing(text, position)
        if span is None:
            return None
        verdict = await self.analyze_code(span.text)
        return InlineAnnotation(span=span, verdict=verdict)

    async def analyze_range(
        self, text: str, text_range: TextRange | None = None
    ) -> ComplexityVerdict:
        """Manual analysis of an explicit selection, or the whole document for None.

        Bypasses the locator entirely.
        """
        code = extract_text(text, text_range)
        if not code.strip():
            raise ComplexLensError(
                code=ErrorCode.EMPTY_SELECTION,
                message="No code selected.",
                suggestion="Select the code to analyse, or omit the selection to use the whole document.",
                recoverable=True,
            )
        return await self.analyze_code(code)

    async def hover(self, uri: str, text: str, position: Position) -> InlineAnnotation | None:
        """Hover query. Never raises for classifier failures; they are logged only.

        On a cache miss the query waits for the hover settle delay; if a newer
        hover for the same view arrives meanwhile, this one gives up without
        contacting the classifier.
        """
        span = locate_containing(text, position)
        if span is None:
            return None

        cached = self._cache.get(span.text)
        if cached is not None:
            return InlineAnnotation(span=span, verdict=cached)

        if self._hover_delay > 0 and not await self._settle(uri):
            log.debug("hover_superseded", uri=uri, line=position.line)
            return None

        try:
            verdict = await self.analyze_code(span.text)
        except ComplexLensError as exc:
            log.warning("hover_analysis_failed", uri=uri, code=exc.code, message=exc.message)
            return None
        return InlineAnnotation(span=span, verdict=verdict)

    async def _settle(self, uri: str) -> bool:
        generation = self._hover_generation.get(uri, 0) + 1
        self._hover_generation[uri] = generation
        await asyncio.sleep(self._hover_delay)
        return self._hover_generation.get(uri) == generation

    def forget_view(self, uri: str) -> None:
        self._hover_generation.pop(uri, None)
