"""OpenRouter error taxonomy and fault classification."""
import asyncio
import json
from typing import Any, Optional
import httpx


class OpenRouterError(Exception):
    """Base exception for relay errors.

    Attributes:
        message: Human-readable description
        details: Diagnostic payload (upstream error body, transport fault, or original exception)
    """

    kind = "error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class UpstreamHTTPError(OpenRouterError):
    """Upstream responded with a non-success status."""

    kind = "upstream_http"

    def __init__(self, message: str, status_code: int, details: Any = None):
        super().__init__(message, details)
        self.status_code = status_code


class NoResponseError(OpenRouterError):
    """Request was sent but no response arrived (timeout, DNS, connection reset)."""

    kind = "no_response"


class LocalError(OpenRouterError):
    """Malformed payload or local fault."""

    kind = "local"


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _with_context(message: str, context: Optional[str]) -> str:
    return f"{context}: {message}" if context else message


def classify_error(exc: BaseException, context: Optional[str] = None) -> OpenRouterError:
    """Map any fault raised while talking to OpenRouter into the relay taxonomy.

    Args:
        exc: The fault to classify
        context: Optional prefix for the resulting message (e.g. "Failed to fetch available models")

    Returns:
        UpstreamHTTPError, NoResponseError or LocalError. Already-classified
        errors are returned as-is unless a context is given.
    """
    if isinstance(exc, OpenRouterError):
        if context is None:
            return exc
        if isinstance(exc, UpstreamHTTPError):
            return UpstreamHTTPError(_with_context(exc.message, context), exc.status_code, exc.details)
        return type(exc)(_with_context(exc.message, context), exc.details)

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        details = _response_details(response)
        message = f"HTTP {response.status_code}: {response.reason_phrase}"
        # OpenRouter uses {"error": {"message": "..."}}
        if isinstance(details, dict) and isinstance(details.get("error"), dict):
            upstream_message = details["error"].get("message")
            if upstream_message:
                message = f"{message} - {upstream_message}"
        return UpstreamHTTPError(
            _with_context(message, context),
            status_code=response.status_code,
            details=details,
        )

    # Overall deadline elapsed before the exchange completed
    if isinstance(exc, asyncio.TimeoutError):
        return NoResponseError(
            _with_context("No response received from OpenRouter API", context),
            details=f"{type(exc).__name__}: request exceeded the configured timeout",
        )

    # Unsupported scheme means the request was never sent
    if isinstance(exc, httpx.TransportError) and not isinstance(exc, httpx.UnsupportedProtocol):
        return NoResponseError(
            _with_context("No response received from OpenRouter API", context),
            details=f"{type(exc).__name__}: {exc}",
        )

    return LocalError(_with_context(str(exc) or "Unknown error occurred", context), details=exc)
