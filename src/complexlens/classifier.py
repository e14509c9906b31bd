"""HTTP client for the remote complexity classifier.

All classifier traffic goes through a single ClassifierClient shared across
requests. The client receives an httpx.AsyncClient via constructor injection;
the lifespan owns the client lifecycle. Request timeouts live on that
httpx client; callers never impose their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from complexlens import __version__
from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.verdict import ComplexityVerdict

if TYPE_CHECKING:
    from complexlens.config import ClassifierSettings

log = structlog.get_logger()

_AUTH_STATUS_CODES = frozenset({401, 403})


def build_http_client(settings: ClassifierSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": f"complexlens/{__version__}"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def _error_detail(response: httpx.Response) -> str | None:
    """Return the service's ``detail`` field from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return None


class ClassifierClient:
    """Stateless request/response boundary to the classifier service."""

    def __init__(self, client: httpx.AsyncClient, settings: ClassifierSettings) -> None:
        self._client = client
        self._endpoint = settings.endpoint.rstrip("/")
        self._api_key = settings.api_key

    def _auth_headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Bearer {self._api_key}"}

    async def classify(self, code: str) -> ComplexityVerdict:
        """Submit ``code`` for classification.

        Raises ComplexLensError with CLASSIFIER_UNAVAILABLE, CLASSIFIER_AUTH_ERROR
        or CLASSIFIER_BAD_RESPONSE.
        """
        url = f"{self._endpoint}/analyze"

        try:
            response = await self._client.post(
                url, json={"code": code}, headers=self._auth_headers()
            )
        except httpx.HTTPError as exc:
            raise ComplexLensError(
                code=ErrorCode.CLASSIFIER_UNAVAILABLE,
                message=f"Network error reaching classifier at {url}: {exc}",
                suggestion="Ensure the classifier service is running and the endpoint is correct.",
                recoverable=True,
            ) from exc

        if response.status_code in _AUTH_STATUS_CODES:
            raise ComplexLensError(
                code=ErrorCode.CLASSIFIER_AUTH_ERROR,
                message=f"Classifier rejected credentials (HTTP {response.status_code})",
                suggestion="Check the classifier API key in your settings.",
                recoverable=False,
            )

        if not response.is_success:
            detail = _error_detail(response)
            message = f"HTTP {response.status_code} from classifier"
            if detail:
                message = f"{message}: {detail}"
            if response.is_server_error:
                raise ComplexLensError(
                    code=ErrorCode.CLASSIFIER_UNAVAILABLE,
                    message=message,
                    suggestion="The classifier service may be temporarily unavailable.",
                    recoverable=True,
                )
            raise ComplexLensError(
                code=ErrorCode.CLASSIFIER_BAD_RESPONSE,
                message=message,
                suggestion="The classifier refused the request; check the submitted code.",
                recoverable=False,
            )

        try:
            verdict = ComplexityVerdict.model_validate(response.json())
        except ValueError as exc:  # JSON decode errors and pydantic.ValidationError
            raise ComplexLensError(
                code=ErrorCode.CLASSIFIER_BAD_RESPONSE,
                message=f"Classifier response is not a complexity verdict: {exc}",
                suggestion="Check that the endpoint points at a compatible classifier version.",
                recoverable=False,
            ) from exc

        log.info(
            "classify_complete",
            complexity=verdict.complexity,
            confidence=verdict.confidence,
            processing_time_ms=verdict.processing_time_ms,
            code_length=len(code),
        )
        return verdict

    async def health_check(self) -> bool:
        """Return True if the classifier answers ``/health`` with HTTP 200. Never raises."""
        try:
            response = await self._client.get(f"{self._endpoint}/health")
        except Exception:
            log.debug("classifier_health_check_failed", endpoint=self._endpoint, exc_info=True)
            return False
        return response.status_code == 200
