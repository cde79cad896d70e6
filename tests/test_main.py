"""Integration tests for the main application."""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agora_gateway.catalog import build_registry
from agora_gateway.config import get_settings
from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.exceptions import ConfigurationError
from agora_gateway.main import app, lifespan, settings as app_settings
from agora_gateway.registry import ToolRegistry


@pytest.fixture
def client(settings, fake_api):
    # Lifespan does not run without the context manager, so wire state by hand
    marketplace_client = MarketplaceClient(
        settings,
        http_client=httpx.AsyncClient(transport=fake_api.transport),
    )
    app.state.tool_registry = build_registry(marketplace_client)
    yield TestClient(app)
    del app.state.tool_registry


@pytest.fixture
def clean_settings(monkeypatch):
    monkeypatch.delenv("THEAGORA_API_KEY", raising=False)
    monkeypatch.delenv("THEAGORA_API_URL", raising=False)
    monkeypatch.chdir("/")
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": app_settings.APP_NAME}


def test_tool_not_found_handler(client):
    """Unknown tools on the invoke endpoint map to 404."""
    response = client.post("/mcp/invoke", json={"tool_name": "missing_tool"})

    assert response.status_code == 404
    assert response.json() == {
        "error": "TOOL_NOT_FOUND",
        "message": "Tool 'missing_tool' not found in registry",
    }


def test_invoke_through_app(client, fake_api):
    fake_api.add("GET", "/transactions", json=[])

    response = client.post("/mcp/invoke", json={"tool_name": "my_purchases"})

    assert response.status_code == 200
    assert response.json() == {"content": [{"type": "text", "text": "[]"}], "isError": False}


@pytest.mark.asyncio
async def test_lifespan_requires_api_key(clean_settings):
    """Startup fails before serving anything when the key is missing."""
    with pytest.raises(ConfigurationError):
        async with lifespan(FastAPI()):
            pass


@pytest.mark.asyncio
async def test_lifespan_builds_registry(clean_settings):
    clean_settings.setenv("THEAGORA_API_KEY", "startup-key")
    get_settings.cache_clear()

    test_app = FastAPI()
    async with lifespan(test_app):
        assert isinstance(test_app.state.tool_registry, ToolRegistry)
        assert len(test_app.state.tool_registry) == 32
        assert test_app.state.marketplace_client.session.base_url == "https://api.theagoralabs.ai"
