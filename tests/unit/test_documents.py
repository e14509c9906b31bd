"""Unit tests for the open-document store."""

from __future__ import annotations

import pytest

from complexlens.documents import DocumentStore, extract_text
from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.span import Position, TextRange

TEXT = "line zero\nline one\r\nline two"


def _range(start: tuple[int, int], end: tuple[int, int]) -> TextRange:
    return TextRange(
        start=Position(line=start[0], character=start[1]),
        end=Position(line=end[0], character=end[1]),
    )


class TestExtractText:
    def test_none_returns_everything(self) -> None:
        assert extract_text(TEXT, None) == TEXT

    def test_single_line(self) -> None:
        assert extract_text(TEXT, _range((1, 5), (1, 8))) == "one"

    def test_multi_line_strips_carriage_returns(self) -> None:
        assert extract_text(TEXT, _range((0, 5), (2, 4))) == "zero\nline one\nline"

    def test_end_beyond_document_clamped(self) -> None:
        assert extract_text(TEXT, _range((2, 0), (9, 99))) == "line two"

    def test_end_line_past_document_keeps_whole_last_line(self) -> None:
        assert extract_text("abc\ndefgh", _range((0, 0), (5, 2))) == "abc\ndefgh"

    def test_start_beyond_document(self) -> None:
        assert extract_text(TEXT, _range((5, 0), (6, 0))) == ""


class TestDocumentStore:
    def test_open_update_close(self) -> None:
        store = DocumentStore()
        store.open("file:///a.js", "v1")
        document = store.update("file:///a.js", "v2")

        assert document.text == "v2"
        assert document.version == 2
        assert "file:///a.js" in store

        store.close("file:///a.js")
        assert store.get("file:///a.js") is None

    def test_reopen_resets_version(self) -> None:
        store = DocumentStore()
        store.open("file:///a.js", "v1")
        store.update("file:///a.js", "v2")
        assert store.open("file:///a.js", "v3").version == 1

    def test_update_unknown_document(self) -> None:
        with pytest.raises(ComplexLensError) as exc_info:
            DocumentStore().update("file:///missing.js", "x")
        assert exc_info.value.code == ErrorCode.DOCUMENT_NOT_OPEN
