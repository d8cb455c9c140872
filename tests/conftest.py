"""Shared fixtures: a fake upstream web and an app wired to it."""
from typing import Callable, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from shareproxy.api.deps import get_client, get_log_store
from shareproxy.main import app
from shareproxy.services.log_store import LogStore

Handler = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """Answers requests by exact URL; anything unknown gets a 404."""

    def __init__(self):
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(str(request.url))
        if handler is None:
            return httpx.Response(404, text="not found")
        if callable(handler):
            return handler(request)
        return handler

    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def log_store():
    return LogStore(max_ids=100, ttl_seconds=3600)


@pytest.fixture
def api_client(http_client, log_store):
    app.dependency_overrides[get_client] = lambda: http_client
    app.dependency_overrides[get_log_store] = lambda: log_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
