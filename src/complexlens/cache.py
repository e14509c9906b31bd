"""In-memory, content-addressed cache of classifier verdicts.

Entries are keyed by the SHA-256 of the exact code text (no whitespace
normalisation) and expire lazily: an entry older than the TTL reads as absent
but stays in storage until it is overwritten, evicted, or the cache is cleared.
A least-recently-used bound keeps memory finite in long sessions.

All operations are synchronous and never suspend, so concurrent coroutines
cannot interleave inside a ``get`` or ``put``; the last ``put`` for a hash wins.
"""

from __future__ import annotations

import hashlib
from collections import OrderedDict
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from complexlens.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from complexlens.models.verdict import ComplexityVerdict

log = structlog.get_logger()

DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_MAX_ENTRIES = 1000


def content_hash(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AnnotationCache:
    """Process-wide verdict store shared by the coordinator and the scheduler."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, code: str) -> ComplexityVerdict | None:
        """Return the cached verdict for ``code``, or None if absent or expired."""
        key = content_hash(code)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at > self._ttl:
            log.debug("cache_entry_expired", key=key[:12])
            return None

        self._entries.move_to_end(key)
        return entry.verdict

    def put(self, code: str, verdict: ComplexityVerdict) -> None:
        """Store ``verdict`` for ``code``, replacing any entry with the same hash."""
        key = content_hash(code)
        self._entries[key] = CacheEntry(
            content_hash=key,
            verdict=verdict,
            created_at=self._clock(),
        )
        self._entries.move_to_end(key)

        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("cache_entry_evicted", key=evicted[:12])

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        log.info("cache_cleared", entries=count)
