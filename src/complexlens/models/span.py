from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Position(BaseModel):
    """Zero-based line/character position in a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)


class TextRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @model_validator(mode="after")
    def _check_order(self) -> TextRange:
        if (self.end.line, self.end.character) < (self.start.line, self.start.character):
            raise ValueError("range end precedes range start")
        return self


class FunctionSpan(BaseModel):
    """One candidate function, from its declaration line to its closing brace.

    Computed fresh by every locator call and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    text: str  # Full lines start_line..end_line joined with "\n"

    @model_validator(mode="after")
    def _check_lines(self) -> FunctionSpan:
        if self.end_line < self.start_line:
            raise ValueError("end_line precedes start_line")
        return self

    @property
    def range(self) -> TextRange:
        last_line = self.text.rsplit("\n", 1)[-1]
        return TextRange(
            start=Position(line=self.start_line, character=0),
            end=Position(line=self.end_line, character=len(last_line)),
        )

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line
