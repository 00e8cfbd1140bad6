"""
Shared pytest fixtures for chat-protocol tests.

This module provides common fixtures used across all test files,
including sample conversations, completion payloads and helpers for
building fake chat endpoints on top of httpx.MockTransport.
"""

import httpx
import pytest


@pytest.fixture
def endpoint():
    """URL of the fake chat endpoint."""
    return "https://chat.example.com/api/chat"


@pytest.fixture
def sample_messages():
    """A short conversation."""
    return [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "What is NDJSON?"},
    ]


@pytest.fixture
def sample_completion():
    """Non-streaming completion response body."""
    return {
        "message": {
            "role": "assistant",
            "content": "NDJSON is newline-delimited JSON.",
        },
        "context": {"followupQuestions": ["What about JSON Lines?"]},
        "sessionState": {"conversationId": "conv_123"},
    }


@pytest.fixture
def sample_deltas():
    """Streamed completion deltas."""
    return [
        {"delta": {"role": "assistant"}, "sessionState": {"conversationId": "conv_123"}},
        {"delta": {"content": "NDJSON is "}},
        {"delta": {"content": "newline-delimited "}},
        {"delta": {"content": "JSON."}},
    ]


@pytest.fixture
def recorded_requests():
    """List that mock handlers append received requests to."""
    return []


@pytest.fixture
def make_transport(recorded_requests):
    """
    Build an httpx.MockTransport answering every request with a fixed response.

    The factory accepts either an httpx.Response or a callable returning one.
    """

    def factory(response):
        def handler(request):
            recorded_requests.append(request)
            return response(request) if callable(response) else response

        return httpx.MockTransport(handler)

    return factory
