"""Tests for relay fault classification."""
import asyncio
import json
import httpx
import pytest
from nihongo_kaiwa.services.openrouter import (
    LocalError,
    NoResponseError,
    OpenRouterError,
    UpstreamHTTPError,
    classify_error,
)

REQUEST = httpx.Request("POST", "https://openrouter.test/api/v1/chat/completions")


def status_error(status_code, **kwargs):
    response = httpx.Response(status_code, request=REQUEST, **kwargs)
    return httpx.HTTPStatusError("status error", request=REQUEST, response=response)


def test_http_status_error():
    """Test non-2xx responses keep status and upstream body."""
    body = {"error": {"message": "invalid key"}}

    error = classify_error(status_error(401, json=body))

    assert isinstance(error, UpstreamHTTPError)
    assert error.message == "HTTP 401: Unauthorized - invalid key"
    assert error.status_code == 401
    assert error.details == body
    assert error.kind == "upstream_http"


def test_http_status_error_non_json_body():
    """Test a plain-text error body is kept as text."""
    error = classify_error(status_error(502, text="Bad gateway upstream"))

    assert error.message == "HTTP 502: Bad Gateway"
    assert error.details == "Bad gateway upstream"


@pytest.mark.parametrize("exc", [
    httpx.ReadTimeout("timed out"),
    httpx.ConnectTimeout("timed out"),
    httpx.ConnectError("name resolution failed"),
    httpx.RemoteProtocolError("connection reset"),
])
def test_transport_errors_are_no_response(exc):
    """Test transport faults are classified as no response."""
    error = classify_error(exc)

    assert isinstance(error, NoResponseError)
    assert error.message == "No response received from OpenRouter API"
    assert type(exc).__name__ in error.details


def test_overall_deadline_is_no_response():
    """Test an elapsed asyncio deadline is classified as no response."""
    error = classify_error(asyncio.TimeoutError(), context="OpenRouter API Error")

    assert isinstance(error, NoResponseError)
    assert error.message == "OpenRouter API Error: No response received from OpenRouter API"
    assert "timeout" in error.details


def test_unsupported_protocol_is_local():
    """Test a request that could never be sent is a local fault."""
    error = classify_error(httpx.UnsupportedProtocol("Request URL has an unsupported protocol 'ftp://'"))

    assert isinstance(error, LocalError)


@pytest.mark.parametrize("exc", [
    ValueError("bad value"),
    json.JSONDecodeError("Expecting value", "<html>", 0),
    KeyError("choices"),
])
def test_other_faults_are_local(exc):
    """Test everything else is a local error carrying the original fault."""
    error = classify_error(exc)

    assert isinstance(error, LocalError)
    assert error.details is exc
    assert error.message == str(exc)


def test_empty_message_fallback():
    """Test faults without a message get a readable one."""
    error = classify_error(RuntimeError())

    assert error.message == "Unknown error occurred"


def test_classified_error_passes_through():
    """Test an already-classified error is returned unchanged."""
    original = LocalError("No response choices received from OpenRouter")

    assert classify_error(original) is original


def test_context_prefixes_message():
    """Test context is prepended for every error kind."""
    upstream = classify_error(status_error(500, text="boom"), context="Failed to fetch available models")
    network = classify_error(httpx.ConnectError("refused"), context="Failed to fetch available models")
    rewrapped = classify_error(UpstreamHTTPError("HTTP 404: Not Found", 404), context="ctx")

    assert upstream.message == "Failed to fetch available models: HTTP 500: Internal Server Error"
    assert network.message == "Failed to fetch available models: No response received from OpenRouter API"
    assert isinstance(rewrapped, UpstreamHTTPError)
    assert rewrapped.message == "ctx: HTTP 404: Not Found"
    assert rewrapped.status_code == 404


def test_error_hierarchy():
    """Test every kind derives from the common base and carries a message."""
    for cls in (UpstreamHTTPError, NoResponseError, LocalError):
        assert issubclass(cls, OpenRouterError)
    error = NoResponseError("no response", details="ReadTimeout: timed out")
    assert str(error) == "no response"
    assert error.to_dict() == {"error": "no response", "kind": "no_response"}
