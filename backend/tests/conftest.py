"""Pytest configuration and fixtures."""
import json
import os

# Keep test runs from writing log files or picking up a developer's key
os.environ["LOG_TO_FILE"] = "false"
os.environ["OPENROUTER_API_KEY"] = ""

import httpx
import pytest

from nihongo_kaiwa.services.openrouter import ConversationMessage, Credentials, OpenRouterService

BASE_URL = "https://openrouter.test/api/v1"
PERSONA = ConversationMessage(role="system", content="You are a test persona.")


def completion_payload(content="こんにちは", usage=None):
    """Build an OpenRouter chat completion payload."""
    payload = {
        "id": "gen-123",
        "model": "google/gemma-3-4b-it:free",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }
    if usage is not None:
        payload["usage"] = usage
    return payload


class UpstreamRecorder:
    """Mock OpenRouter transport that records every request it answers."""

    def __init__(self):
        self.requests = []
        self.routes = {}

    def on(self, method, path, response=None, exc=None):
        self.routes[(method, path)] = (response, exc)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.replace("/api/v1", "", 1)
        response, exc = self.routes.get((request.method, path), (None, None))
        if exc is not None:
            raise exc
        if response is None:
            return httpx.Response(404, json={"error": {"message": "not found"}})
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def upstream():
    """Recorder standing in for the OpenRouter API."""
    return UpstreamRecorder()


@pytest.fixture
def make_service(upstream):
    """Factory for relay services wired to the mock upstream."""

    def _make(api_key="sk-or-test", **kwargs):
        kwargs.setdefault("persona", PERSONA)
        return OpenRouterService(
            credentials=Credentials(api_key),
            base_url=BASE_URL,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
            **kwargs,
        )

    return _make


@pytest.fixture
def service(make_service):
    """Relay service with a test key."""
    return make_service()


@pytest.fixture
def completion():
    """Factory for chat completion payloads."""
    return completion_payload
