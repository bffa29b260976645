import sys
from pathlib import Path

import httpx
import pytest

# Add the project root to the Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.loader import Backend  # noqa: E402
from gateway.services import ServiceRegistry  # noqa: E402


@pytest.fixture(scope="session")
def test_project_root():
    """Provide a test project root path."""
    return project_root


@pytest.fixture(autouse=True)
def mock_environment(monkeypatch, request):
    """Start unit tests from a clean slate of service env vars.

    Skipped for tests marked `integration` so real values from .env are used.
    """
    if request.node.get_closest_marker("integration") is not None:
        return
    for backend in Backend:
        monkeypatch.delenv(f"{backend.env_prefix}_URL", raising=False)
        monkeypatch.delenv(f"{backend.env_prefix}_API_KEY", raising=False)
    monkeypatch.delenv("ARR_GATEWAY_LOG_LEVEL", raising=False)


class Recorder:
    """httpx.MockTransport handler that answers from a route table and keeps every request."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        answer = self.routes.get(key)
        if answer is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(answer, httpx.Response):
            return answer
        if callable(answer):
            return answer(request)
        return httpx.Response(200, json=answer)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    return Recorder()


def registry_with(**clients) -> ServiceRegistry:
    return ServiceRegistry({Backend(name): client for name, client in clients.items()})


@pytest.fixture
def make_registry():
    return registry_with


@pytest.fixture
def make_recorder():
    return Recorder
