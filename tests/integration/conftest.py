"""Integration test fixtures.

Provides a fully wired AppState around a real ClassifierClient (HTTP mocked
with respx in the tests) and a baseline environment for subprocess-based MCP
wire tests.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest

from complexlens.classifier import ClassifierClient
from complexlens.config import Settings
from complexlens.state import build_app_state

if TYPE_CHECKING:
    from pathlib import Path

    from complexlens.state import AppState

CLASSIFIER_ENDPOINT = "http://classifier.test"
DEBOUNCE_SECONDS = 0.02


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Points the classifier at a port nothing listens on and keeps stderr quiet.
    """
    env = os.environ.copy()
    env["COMPLEXLENS__CLASSIFIER__ENDPOINT"] = "http://127.0.0.1:1"
    env["COMPLEXLENS__CLASSIFIER__TIMEOUT_SECONDS"] = "2"
    env["COMPLEXLENS__LOGGING__LEVEL"] = "WARNING"
    return env


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        classifier={"endpoint": CLASSIFIER_ENDPOINT, "api_key": "test-key"},
        annotations={"analysis_delay_ms": 0},
    )


@pytest.fixture()
async def app_state(settings: Settings) -> AppState:
    """Full AppState wired the way the server lifespan wires it."""
    async with httpx.AsyncClient() as client:
        classifier = ClassifierClient(client, settings.classifier)
        state = build_app_state(
            settings,
            classifier,
            http_client=client,
            debounce_seconds=DEBOUNCE_SECONDS,
        )
        yield state
        state.scheduler.shutdown()
