"""Tool handler for the classifier health check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from complexlens.state import AppState


async def handle(state: AppState) -> dict:
    """Handle a check_classifier_health tool call. Never raises."""
    healthy = await state.classifier.health_check()
    structlog.get_logger().info("health_check_complete", healthy=healthy)
    return {
        "healthy": healthy,
        "endpoint": state.settings.classifier.endpoint,
    }
