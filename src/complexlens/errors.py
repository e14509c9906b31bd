from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    CLASSIFIER_UNAVAILABLE = "CLASSIFIER_UNAVAILABLE"
    CLASSIFIER_AUTH_ERROR = "CLASSIFIER_AUTH_ERROR"
    CLASSIFIER_BAD_RESPONSE = "CLASSIFIER_BAD_RESPONSE"
    DOCUMENT_NOT_OPEN = "DOCUMENT_NOT_OPEN"
    EMPTY_SELECTION = "EMPTY_SELECTION"
    INVALID_INPUT = "INVALID_INPUT"


class ComplexLensError(Exception):
    """Raised for all expected failure conditions.

    Caught by server.py and serialised into the MCP error response, which the
    host shows as a dismissable notification. The hover path and the
    annotation scheduler catch it themselves and only log it.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
