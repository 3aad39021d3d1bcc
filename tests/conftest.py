"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Sequence
from datetime import datetime

import pytest

from palaver.llm import CompletionClient
from palaver.transcript import Message


class FakeCompletionClient(CompletionClient):
    """Completion client that records conversations instead of sending them."""

    def __init__(self, replies: list[str] | None = None, error: Exception | None = None):
        self.reports: list[tuple[str, str, str]] = []
        super().__init__(reporter=lambda *report: self.reports.append(report))
        self.calls: list[list[Message]] = []
        self.closed = False
        self._replies = list(replies or [])
        self._error = error

    def request(self, messages: Sequence[Message]) -> str:
        self.calls.append(list(messages))
        if self._error is not None:
            raise self._error
        return self._replies.pop(0)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fixed_now():
    """Return a fixed timestamp for separators."""
    return datetime(2024, 1, 1, 12, 30, 45)


@pytest.fixture
def fake_client_factory():
    """Return the FakeCompletionClient class for building clients per test."""
    return FakeCompletionClient


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
    }


@pytest.fixture
def sample_transcript():
    """Return a small well-formed transcript."""
    return (
        "---[2024-01-01 00:00:00] system:\n"
        "\n"
        "Be terse.\n"
        "\n"
        "---[2024-01-01 00:00:01] user:\n"
        "\n"
        "Hello"
    )
