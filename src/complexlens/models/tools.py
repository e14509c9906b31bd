"""Input and output models for the MCP tool handlers."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from complexlens.models.annotation import HoverPayload, InlineMarker, Notification
from complexlens.models.span import Position, TextRange
from complexlens.models.verdict import ComplexityVerdict

_MAX_URI_LENGTH = 2048


class DocumentInput(BaseModel):
    uri: str
    text: str = ""

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("uri must not be empty")
        if len(v) > _MAX_URI_LENGTH:
            raise ValueError(f"uri exceeds {_MAX_URI_LENGTH} characters")
        return v


class HoverInput(DocumentInput):
    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)

    @property
    def position(self) -> Position:
        return Position(line=self.line, character=self.character)


class AnalyzeSelectionInput(DocumentInput):
    """Explicit selection; omitting start_line analyses the whole document."""

    start_line: int | None = Field(default=None, ge=0)
    start_character: int = Field(default=0, ge=0)
    end_line: int | None = Field(default=None, ge=0)
    end_character: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_selection(self) -> AnalyzeSelectionInput:
        if self.start_line is None and self.end_line is not None:
            raise ValueError("end_line given without start_line")
        if self.start_line is not None and self.end_line is not None:
            end_character = (
                self.end_character if self.end_character is not None else self.start_character
            )
            if (self.end_line, end_character) < (self.start_line, self.start_character):
                raise ValueError("selection end precedes selection start")
        return self

    @property
    def selection(self) -> TextRange | None:
        if self.start_line is None:
            return None
        end_line = self.end_line if self.end_line is not None else self.start_line
        # A missing end_character selects through the end of end_line.
        end_character = self.end_character if self.end_character is not None else 2**31 - 1
        return TextRange(
            start=Position(line=self.start_line, character=self.start_character),
            end=Position(line=end_line, character=end_character),
        )


class HoverOutput(BaseModel):
    uri: str
    start_line: int | None = None
    end_line: int | None = None
    hover: HoverPayload | None = None


class AnalyzeSelectionOutput(BaseModel):
    uri: str
    notification: Notification
    verdict: ComplexityVerdict
    suggestions: list[str] = []


class GetAnnotationsOutput(BaseModel):
    uri: str
    enabled: bool
    markers: list[InlineMarker]


class ComplexityReportOutput(BaseModel):
    uri: str
    function_count: int
    simple: int = 0
    moderate: int = 0
    complex: int = 0
    unanalysed: int = 0
