"""Shared fixtures for proxy tests."""

from collections.abc import Callable, Mapping
from contextlib import ExitStack

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config
from core.request_types import ResourceKind


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self) -> None:
        self.fetches: list[tuple[str, ResourceKind, int]] = []
        self.errors: list[tuple[str, int, str]] = []
        self.gone: list[tuple[str, dict[str, str]]] = []

    def log_fetch(self, url: str, kind: ResourceKind, status: int) -> None:
        self.fetches.append((url, kind, status))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))

    def log_gone(self, url: str, headers: Mapping[str, str]) -> None:
        self.gone.append((url, dict(headers)))


class Upstream:
    """Mock upstream: serves responses from a handler and records requests."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def proxy(logger):
    """Factory returning (TestClient, Upstream) wired to a mock transport."""
    stack = ExitStack()

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> tuple[TestClient, Upstream]:
        upstream = Upstream(handler)
        app = create_app(Config(), logger, transport=httpx.MockTransport(upstream))
        client = stack.enter_context(TestClient(app))
        return client, upstream

    with stack:
        yield _make
