"""Open documents, keyed by URI.

The host pushes full document text on open and on every edit; the scheduler
and the tool handlers read the latest text from here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.locator import split_lines

if TYPE_CHECKING:
    from complexlens.models.span import TextRange


def extract_text(text: str, text_range: TextRange | None) -> str:
    """Return the part of ``text`` covered by ``text_range`` (all of it for None)."""
    if text_range is None:
        return text

    lines = split_lines(text)
    start, end = text_range.start, text_range.end
    if start.line >= len(lines):
        return ""
    if end.line >= len(lines):
        # Past the end of the document: select through the last line.
        end_line = len(lines) - 1
        end_character = len(lines[end_line])
    else:
        end_line, end_character = end.line, end.character
    if start.line == end_line:
        return lines[start.line][start.character : end_character]

    selected = [lines[start.line][start.character :]]
    selected.extend(lines[start.line + 1 : end_line])
    selected.append(lines[end_line][:end_character])
    return "\n".join(selected)


@dataclass
class Document:
    uri: str
    text: str
    version: int = 1


@dataclass
class DocumentStore:
    _documents: dict[str, Document] = field(default_factory=dict)

    def __contains__(self, uri: str) -> bool:
        return uri in self._documents

    def open(self, uri: str, text: str) -> Document:
        """Open (or re-open) a document, resetting its version."""
        document = Document(uri=uri, text=text)
        self._documents[uri] = document
        return document

    def update(self, uri: str, text: str) -> Document:
        document = self.require(uri)
        document.text = text
        document.version += 1
        return document

    def close(self, uri: str) -> None:
        self._documents.pop(uri, None)

    def get(self, uri: str) -> Document | None:
        return self._documents.get(uri)

    def require(self, uri: str) -> Document:
        document = self._documents.get(uri)
        if document is None:
            raise ComplexLensError(
                code=ErrorCode.DOCUMENT_NOT_OPEN,
                message=f"Document '{uri}' is not open.",
                suggestion="Call open_document with the document text first.",
                recoverable=True,
            )
        return document
