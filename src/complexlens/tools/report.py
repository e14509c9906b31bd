"""Tool handler for the per-document complexity report.

Tallies cached verdicts for every located function. Cache-only: functions
nobody has analysed yet are counted as unanalysed, never sent to the classifier.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

import structlog

from complexlens.locator import locate_all
from complexlens.models.tools import ComplexityReportOutput
from complexlens.tools.documents import validate_document_input

if TYPE_CHECKING:
    from complexlens.state import AppState


async def handle(uri: str, state: AppState) -> dict:
    """Handle a complexity_report tool call."""
    validated = validate_document_input(uri)
    document = state.documents.require(validated.uri)

    spans = locate_all(document.text)
    tally: Counter[str] = Counter()
    for span in spans:
        verdict = state.cache.get(span.text)
        tally[verdict.complexity if verdict is not None else "unanalysed"] += 1

    structlog.get_logger().info(
        "report_complete", tool="complexity_report", uri=validated.uri, functions=len(spans)
    )
    output = ComplexityReportOutput(
        uri=validated.uri,
        function_count=len(spans),
        simple=tally["simple"],
        moderate=tally["moderate"],
        complex=tally["complex"],
        unanalysed=tally["unanalysed"],
    )
    return output.model_dump(mode="json")
