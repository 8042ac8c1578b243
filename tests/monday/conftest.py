"""Pytest configuration for board extraction tests."""

from collections.abc import Callable

import pytest


class FakeExecutor:
    """Query executor double that replays canned responses in order."""

    def __init__(self, responses: list[dict]):
        self.responses = list(responses)
        self.calls: list[tuple[str, dict | None]] = []

    def execute(self, query: str, variables: dict | None = None) -> dict:
        self.calls.append((query, variables))
        if not self.responses:
            raise AssertionError(f"Unexpected query: {query!r} {variables!r}")
        return self.responses.pop(0)


@pytest.fixture
def make_executor() -> Callable[..., FakeExecutor]:
    """Build a FakeExecutor that returns the given responses in order."""

    def _make(*responses: dict) -> FakeExecutor:
        return FakeExecutor(list(responses))

    return _make
