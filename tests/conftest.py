"""Shared test fixtures for the complexlens test suite."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from complexlens.cache import AnnotationCache
from complexlens.errors import ComplexLensError
from complexlens.models.verdict import ComplexityVerdict


def make_verdict(
    complexity: str = "simple",
    confidence: float = 0.8,
    *,
    suggestions: dict[str, str] | None = None,
    **metrics: int,
) -> ComplexityVerdict:
    """Build a verdict from the classifier's wire format."""
    wire_metrics = {"loc": 3, "cyclomatic": 1, "nesting": 1, "loops": 0, "conditionals": 0}
    wire_metrics.update(metrics)
    return ComplexityVerdict.model_validate(
        {
            "complexity": complexity,
            "confidence": confidence,
            "metrics": wire_metrics,
            "processing_time_ms": 12.5,
            "suggestions": suggestions,
        }
    )


class FakeClock:
    """Manually advanced UTC clock for TTL tests."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FakeClassifier:
    """In-memory ClassifierProtocol implementation that records every call.

    Set ``gate`` to an unset asyncio.Event to hold requests in flight.
    """

    def __init__(
        self,
        verdict: ComplexityVerdict | None = None,
        *,
        error: ComplexLensError | None = None,
        healthy: bool = True,
    ) -> None:
        self.verdict = verdict or make_verdict()
        self.error = error
        self.healthy = healthy
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def classify(self, code: str) -> ComplexityVerdict:
        self.calls.append(code)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.verdict

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> AnnotationCache:
    return AnnotationCache(timedelta(minutes=5), max_entries=100, clock=clock)


@pytest.fixture()
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture()
def verdict_factory():
    return make_verdict
