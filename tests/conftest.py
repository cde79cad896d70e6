# Test configuration
import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from agora_gateway.catalog import build_registry  # noqa: E402
from agora_gateway.config import Settings  # noqa: E402
from agora_gateway.gateway.client import MarketplaceClient  # noqa: E402

API_URL = "https://api.test"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeMarketplace:
    """In-memory stand-in for the marketplace API.

    Routes are keyed by (method, path) where path excludes the ``/v1`` prefix.
    Unrouted requests get a plain-text 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
        text: str | None = None,
    ) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json)

        self.routes[(method, path)] = responder

    def add_handler(self, method: str, path: str, handler: Responder) -> None:
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        responder = self.routes.get((request.method, path))
        if responder is None:
            return httpx.Response(404, text=f"no route for {request.method} {path}")
        return responder(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path == f"/v1{path}"
        ]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        THEAGORA_API_KEY="test-key",
        THEAGORA_API_URL=f"{API_URL}/",
        REQUEST_TIMEOUT_SECONDS=10.0,
    )


@pytest.fixture
def fake_api() -> FakeMarketplace:
    return FakeMarketplace()


@pytest.fixture
def marketplace_client(settings, fake_api) -> MarketplaceClient:
    http_client = httpx.AsyncClient(transport=fake_api.transport)
    return MarketplaceClient(settings, http_client=http_client)


@pytest.fixture
def registry(marketplace_client):
    return build_registry(marketplace_client)
