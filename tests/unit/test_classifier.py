"""Unit tests for complexlens.classifier."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from complexlens.classifier import ClassifierClient, build_http_client
from complexlens.config import ClassifierSettings
from complexlens.errors import ComplexLensError, ErrorCode
from complexlens.models.verdict import Complexity

ENDPOINT = "http://classifier.test"
CODE = "function add(a,b){ return a+b; }"

VERDICT_BODY = {
    "complexity": "complex",
    "confidence": 0.9,
    "metrics": {"loc": 40, "cyclomatic": 12, "nesting": 4, "loops": 3, "conditionals": 8},
    "processing_time_ms": 41.2,
    "suggestions": {"split": "Extract the validation branch into its own function."},
}


def _settings(api_key: str = "") -> ClassifierSettings:
    return ClassifierSettings(endpoint=ENDPOINT + "/", api_key=api_key)


# ---------------------------------------------------------------------------
# build_http_client
# ---------------------------------------------------------------------------


class TestBuildHttpClient:
    def test_client_configuration(self) -> None:
        client = build_http_client(ClassifierSettings(timeout_seconds=7.5))
        assert isinstance(client, httpx.AsyncClient)
        assert client.timeout.read == 7.5
        assert client.headers["User-Agent"].startswith("complexlens/")


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    async def test_successful_classification(self) -> None:
        with respx.mock:
            route = respx.post(f"{ENDPOINT}/analyze").mock(
                return_value=httpx.Response(200, json=VERDICT_BODY)
            )
            async with httpx.AsyncClient() as client:
                verdict = await ClassifierClient(client, _settings()).classify(CODE)

        assert verdict.complexity == Complexity.COMPLEX
        assert verdict.confidence == 0.9
        assert verdict.metrics.lines_of_code == 40
        assert verdict.metrics.nesting_depth == 4
        assert verdict.metrics.loop_count == 3
        assert verdict.metrics.conditional_count == 8
        assert verdict.suggestion_list() == [
            "Extract the validation branch into its own function."
        ]
        request = route.calls.last.request
        assert json.loads(request.content) == {"code": CODE}
        assert "authorization" not in request.headers

    async def test_bearer_token_sent_when_configured(self) -> None:
        with respx.mock:
            route = respx.post(f"{ENDPOINT}/analyze").mock(
                return_value=httpx.Response(200, json=VERDICT_BODY)
            )
            async with httpx.AsyncClient() as client:
                await ClassifierClient(client, _settings(api_key="s3cret")).classify(CODE)

        assert route.calls.last.request.headers["authorization"] == "Bearer s3cret"

    async def test_suggestions_optional(self) -> None:
        body = {k: v for k, v in VERDICT_BODY.items() if k != "suggestions"}
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(return_value=httpx.Response(200, json=body))
            async with httpx.AsyncClient() as client:
                verdict = await ClassifierClient(client, _settings()).classify(CODE)

        assert verdict.suggestions is None
        assert verdict.suggestion_list() == []

    async def test_network_error_is_unavailable(self) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(
                side_effect=httpx.ConnectError("Connection refused")
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_UNAVAILABLE
        assert exc_info.value.recoverable is True

    async def test_timeout_is_unavailable(self) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(side_effect=httpx.ReadTimeout("slow"))
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_UNAVAILABLE

    @pytest.mark.parametrize("status", [401, 403])
    async def test_rejected_credentials(self, status: int) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(
                return_value=httpx.Response(status, json={"detail": "Invalid API key"})
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_AUTH_ERROR
        assert exc_info.value.recoverable is False

    async def test_server_error_is_unavailable(self) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(return_value=httpx.Response(503))
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_UNAVAILABLE
        assert exc_info.value.recoverable is True

    async def test_client_error_quotes_detail(self) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(
                return_value=httpx.Response(422, json={"detail": "code must not be empty"})
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_BAD_RESPONSE
        assert "code must not be empty" in exc_info.value.message

    async def test_non_json_body_is_bad_response(self) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(
                return_value=httpx.Response(200, text="<html>proxy error</html>")
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_BAD_RESPONSE

    @pytest.mark.parametrize(
        "body",
        [
            {**VERDICT_BODY, "complexity": "extreme"},
            {**VERDICT_BODY, "confidence": 1.5},
            {**VERDICT_BODY, "metrics": {"loc": -1, "cyclomatic": 1, "nesting": 0}},
            {"complexity": "simple"},
            ["not", "an", "object"],
        ],
    )
    async def test_invalid_verdict_is_bad_response(self, body: object) -> None:
        with respx.mock:
            respx.post(f"{ENDPOINT}/analyze").mock(return_value=httpx.Response(200, json=body))
            async with httpx.AsyncClient() as client:
                with pytest.raises(ComplexLensError) as exc_info:
                    await ClassifierClient(client, _settings()).classify(CODE)

        assert exc_info.value.code == ErrorCode.CLASSIFIER_BAD_RESPONSE


# ---------------------------------------------------------------------------
# health_check
# ---------------------------------------------------------------------------


class TestHealthCheck:
    async def test_healthy(self) -> None:
        with respx.mock:
            respx.get(f"{ENDPOINT}/health").mock(return_value=httpx.Response(200))
            async with httpx.AsyncClient() as client:
                assert await ClassifierClient(client, _settings()).health_check() is True

    async def test_non_200_is_unhealthy(self) -> None:
        with respx.mock:
            respx.get(f"{ENDPOINT}/health").mock(return_value=httpx.Response(503))
            async with httpx.AsyncClient() as client:
                assert await ClassifierClient(client, _settings()).health_check() is False

    async def test_network_error_is_unhealthy(self) -> None:
        with respx.mock:
            respx.get(f"{ENDPOINT}/health").mock(side_effect=httpx.ConnectError("refused"))
            async with httpx.AsyncClient() as client:
                assert await ClassifierClient(client, _settings()).health_check() is False
