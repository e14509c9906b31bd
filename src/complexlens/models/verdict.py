from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Complexity(StrEnum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class Metrics(BaseModel):
    """Raw metrics reported by the classifier.

    Field aliases match the classifier's wire names (``loc``, ``nesting``, ...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lines_of_code: int = Field(alias="loc", ge=0)
    cyclomatic: int = Field(ge=0)
    nesting_depth: int = Field(alias="nesting", ge=0)
    loop_count: int = Field(default=0, alias="loops", ge=0)
    conditional_count: int = Field(default=0, alias="conditionals", ge=0)


class ComplexityVerdict(BaseModel):
    """Result of classifying one function's text. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    complexity: Complexity
    confidence: float = Field(ge=0.0, le=1.0)
    metrics: Metrics
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    # Opaque key → display text. Key order carries no meaning.
    suggestions: dict[str, str] | None = None

    def suggestion_list(self) -> list[str]:
        return list(self.suggestions.values()) if self.suggestions else []
