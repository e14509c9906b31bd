"""Lexical function-boundary locator.

Finds candidate function spans in JavaScript/TypeScript-style source using a
start-line pattern plus brace counting. There is no tokenizer: braces inside
strings, template literals and comments are counted like any other brace, so
such code can desynchronise the count. Pure and stateless; re-run from scratch
on every call.
"""

from __future__ import annotations

import re

import structlog

from complexlens.models.span import FunctionSpan, Position

log = structlog.get_logger()

_FUNCTION_START_RE = re.compile(
    r"""
    ^\s*
    (?:export\s+(?:default\s+)?)?
    (?:
        (?:async\s+)?function\s*\*?\s*[\w$]+                    # function name(
      | (?:const|let|var)\s+[\w$]+\s*=\s*(?:async\s+)?
        (?:function\b|\([^)]*\)\s*=>|[\w$]+\s*=>)               # name = function / arrow
      | (?!(?:if|for|while|switch|catch|with|return)\b)
        (?:async\s+)?[\w$]+\s*\([^)]*\)\s*\{                    # name(args) {
    )
    """,
    re.VERBOSE,
)


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, so line numbers agree with the editor's."""
    return [line.removesuffix("\r") for line in text.split("\n")]


def is_function_start(line: str) -> bool:
    return _FUNCTION_START_RE.match(line) is not None


def _scan_body(lines: list[str], start_line: int) -> tuple[FunctionSpan | None, bool]:
    """Brace-count forward from start_line to the matching closing brace.

    Returns ``(span, blockless)``. ``blockless`` is True when the start
    statement ends with ``;`` before any brace opens (an expression-bodied
    arrow): the line has no body and is not a function span. Unterminated
    bodies and unbalanced closing braces give ``(None, False)``.
    """
    depth = 0
    opened = False
    for lineno in range(start_line, len(lines)):
        line = lines[lineno]
        for char in line:
            if char == "{":
                depth += 1
                opened = True
            elif char == "}":
                depth -= 1
                if depth < 0:
                    return None, False
                if opened and depth == 0:
                    span = FunctionSpan(
                        start_line=start_line,
                        end_line=lineno,
                        text="\n".join(lines[start_line : lineno + 1]),
                    )
                    return span, False
        if not opened and line.rstrip().endswith(";"):
            return None, True

    log.debug("function_span_unterminated", start_line=start_line)
    return None, False


def locate_containing(text: str, position: Position) -> FunctionSpan | None:
    """Return the innermost function span enclosing ``position``, or None.

    Scans upward from the query line (inclusive). A blank line above the query
    line ends the search. Blockless starts (expression-bodied arrows) and
    candidates that close above the query line are skipped, so the scan
    continues past them; an unterminated candidate ends the search with no
    result.
    """
    lines = split_lines(text)
    if position.line >= len(lines):
        return None

    for lineno in range(position.line, -1, -1):
        line = lines[lineno]
        if lineno < position.line and not line.strip():
            return None
        if not is_function_start(line):
            continue

        span, blockless = _scan_body(lines, lineno)
        if blockless:
            continue
        if span is None:
            return None
        if span.contains_line(position.line):
            return span

    return None


def locate_all(text: str) -> list[FunctionSpan]:
    """Return a span for every terminated function start, in document order.

    Spans may overlap (nested functions, or malformed code); they are not
    reconciled.
    """
    lines = split_lines(text)
    spans: list[FunctionSpan] = []
    for lineno, line in enumerate(lines):
        if not is_function_start(line):
            continue
        span, _ = _scan_body(lines, lineno)
        if span is not None:
            spans.append(span)
    return spans
