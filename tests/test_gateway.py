"""Unit tests for the marketplace gateway module."""

import asyncio
from urllib.parse import parse_qsl

import httpx
import pytest

from agora_gateway.config import Settings
from agora_gateway.gateway.client import (
    EXECUTION_WAIT_GRACE_SECONDS,
    EXECUTION_WAIT_SECONDS,
    MarketplaceClient,
    extract_agent_id,
)
from agora_gateway.gateway.exceptions import (
    AgentIdentityError,
    ApiError,
    ApiInvalidResponseError,
    ApiTimeoutError,
    ApiUnavailableError,
    ConfigurationError,
)
from agora_gateway.gateway.schemas import EscrowCreate, FunctionSearch, RequestDescriptor
from agora_gateway.gateway.session import SessionConfig, build_query_string, build_url

from conftest import API_URL, FakeMarketplace, request_json


class TestGatewayExceptions:
    """Tests for gateway exception classes."""

    def test_api_error_attributes(self):
        """ApiError keeps method, path, status and raw body."""
        exc = ApiError(method="GET", path="/escrows/e1", status_code=404, body="<html>nope</html>")

        assert exc.method == "GET"
        assert exc.path == "/escrows/e1"
        assert exc.status_code == 404
        assert exc.body == "<html>nope</html>"
        assert exc.code == "API_ERROR"
        assert exc.message == "API GET /escrows/e1 failed (404): <html>nope</html>"

    def test_api_timeout_error(self):
        exc = ApiTimeoutError(method="POST", path="/escrows", timeout_seconds=35.0)

        assert exc.timeout_seconds == 35.0
        assert "timed out" in exc.message
        assert exc.code == "API_TIMEOUT"

    def test_api_unavailable_error(self):
        exc = ApiUnavailableError(method="GET", path="/me", reason="Connection refused")

        assert exc.reason == "Connection refused"
        assert "unavailable" in exc.message
        assert exc.code == "API_UNAVAILABLE"

    def test_configuration_error(self):
        exc = ConfigurationError("THEAGORA_API_KEY environment variable is required")

        assert exc.code == "CONFIGURATION_ERROR"
        assert "THEAGORA_API_KEY" in str(exc)


class TestSessionConfig:
    """Tests for session configuration."""

    def test_missing_api_key_raises(self):
        with pytest.raises(ConfigurationError):
            SessionConfig.from_settings(Settings(_env_file=None, THEAGORA_API_KEY=None))

    def test_blank_api_key_raises(self):
        with pytest.raises(ConfigurationError):
            SessionConfig.from_settings(Settings(_env_file=None, THEAGORA_API_KEY="   "))

    def test_trailing_slash_stripped(self, settings):
        session = SessionConfig.from_settings(settings)

        assert session.base_url == API_URL

    def test_default_base_url(self):
        session = SessionConfig.from_settings(Settings(_env_file=None, THEAGORA_API_KEY="k"))

        assert session.base_url == "https://api.theagoralabs.ai"

    def test_headers(self, settings):
        headers = SessionConfig.from_settings(settings).headers

        assert headers == {
            "Authorization": "Bearer test-key",
            "Content-Type": "application/json",
            "X-Theagora-Source": "mcp",
        }

    def test_api_key_not_in_repr(self, settings):
        assert "test-key" not in repr(SessionConfig.from_settings(settings))

    def test_session_is_immutable(self, settings):
        session = SessionConfig.from_settings(settings)

        with pytest.raises(Exception):
            session.base_url = "https://elsewhere.test"


class TestQueryString:
    """Tests for query string construction."""

    @pytest.mark.parametrize("empty", [None, ""])
    def test_undefined_and_empty_values_omitted(self, empty):
        query = build_query_string({"q": empty, "limit": 5})

        assert query == "limit=5"
        assert "q" not in dict(parse_qsl(query, keep_blank_values=True))

    def test_all_values_omitted_gives_empty_string(self):
        assert build_query_string({"q": None, "sort": ""}) == ""
        assert build_query_string(None) == ""
        assert build_query_string({}) == ""

    def test_each_defined_value_appears_once_encoded(self):
        query = build_query_string({"q": "code review & lint", "provider": "agent/1", "minPrice": 0})
        pairs = parse_qsl(query, keep_blank_values=True)

        assert pairs == [("q", "code review & lint"), ("provider", "agent/1"), ("minPrice", "0")]
        assert "code+review+%26+lint" in query
        assert "agent%2F1" in query

    def test_scalar_formatting(self):
        query = build_query_string({"flag": True, "off": False, "price": 12.0, "ratio": 0.5})

        assert query == "flag=true&off=false&price=12&ratio=0.5"

    def test_build_url_appends_version_and_query(self):
        url = build_url(API_URL, "/functions", {"q": "ocr", "sort": None})

        assert url == f"{API_URL}/v1/functions?q=ocr"

    def test_build_url_without_query(self):
        assert build_url(API_URL, "/me", {"q": ""}) == f"{API_URL}/v1/me"


class TestMarketplaceClientConstruction:
    """Tests for client construction."""

    def test_missing_credential_fails_before_network(self):
        """Construction without an API key raises and never touches the network."""
        fake_api = FakeMarketplace()
        http_client = httpx.AsyncClient(transport=fake_api.transport)

        with pytest.raises(ConfigurationError):
            MarketplaceClient(Settings(_env_file=None, THEAGORA_API_KEY=None), http_client=http_client)

        assert fake_api.requests == []

    def test_defaults_to_global_settings(self, monkeypatch):
        from agora_gateway.config import get_settings

        monkeypatch.setenv("THEAGORA_API_KEY", "env-key")
        monkeypatch.setenv("THEAGORA_API_URL", "https://env.test/")
        get_settings.cache_clear()
        try:
            client = MarketplaceClient(http_client=httpx.AsyncClient())
        finally:
            get_settings.cache_clear()

        assert client.session.base_url == "https://env.test"
        assert client.session.api_key.get_secret_value() == "env-key"

    @pytest.mark.asyncio
    async def test_owned_http_client_closed(self, settings):
        async with MarketplaceClient(settings) as client:
            http_client = client._http
        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_shared_http_client_left_open(self, settings):
        http_client = httpx.AsyncClient()
        async with MarketplaceClient(settings, http_client=http_client):
            pass
        assert not http_client.is_closed
        await http_client.aclose()


class TestExecute:
    """Tests for request execution."""

    @pytest.mark.asyncio
    async def test_get_request_shape(self, marketplace_client, fake_api):
        fake_api.add("GET", "/functions", json=[{"fid": "ocr"}])

        result = await marketplace_client.list_functions(FunctionSearch(q="ocr", max_price=500))

        assert result == [{"fid": "ocr"}]
        request = fake_api.requests[0]
        assert str(request.url) == f"{API_URL}/v1/functions?q=ocr&maxPrice=500"
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.headers["X-Theagora-Source"] == "mcp"
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, marketplace_client, fake_api):
        fake_api.add("POST", "/disputes", json={"id": "d1"})

        await marketplace_client.execute(
            RequestDescriptor("/disputes", method="POST", body={"escrowId": "e1", "reason": "late"})
        )

        assert request_json(fake_api.requests[0]) == {"escrowId": "e1", "reason": "late"}

    @pytest.mark.asyncio
    async def test_body_not_attached_to_get(self, marketplace_client, fake_api):
        fake_api.add("GET", "/jobs", json=[])

        await marketplace_client.execute(RequestDescriptor("/jobs", body={"ignored": True}))

        assert fake_api.requests[0].content == b""

    @pytest.mark.asyncio
    async def test_post_without_body(self, marketplace_client, fake_api):
        fake_api.add("POST", "/invites/tok-1/accept", json={"escrowId": "e9"})

        result = await marketplace_client.accept_invite("tok-1")

        assert result == {"escrowId": "e9"}
        assert fake_api.requests[0].content == b""

    @pytest.mark.asyncio
    async def test_non_2xx_preserves_raw_body(self, marketplace_client, fake_api):
        fake_api.add("DELETE", "/orders/o1", status_code=409, text="order already filled\n")

        with pytest.raises(ApiError) as exc_info:
            await marketplace_client.cancel_order("o1")

        exc = exc_info.value
        assert exc.method == "DELETE"
        assert exc.path == "/orders/o1"
        assert exc.status_code == 409
        assert exc.body == "order already filled\n"

    @pytest.mark.asyncio
    async def test_non_2xx_json_body_kept_verbatim(self, marketplace_client, fake_api):
        fake_api.add("GET", "/me", status_code=401, text='{"error": "bad key"}')

        with pytest.raises(ApiError) as exc_info:
            await marketplace_client.get_profile()

        assert exc_info.value.body == '{"error": "bad key"}'

    @pytest.mark.asyncio
    async def test_empty_success_body_returns_none(self, marketplace_client, fake_api):
        fake_api.add_handler("DELETE", "/agents/link-identity", lambda request: httpx.Response(204))

        assert await marketplace_client.unlink_identity() is None

    @pytest.mark.asyncio
    async def test_invalid_json_success_raises_invalid_response(self, marketplace_client, fake_api):
        fake_api.add("GET", "/invites", text="not json")

        with pytest.raises(ApiInvalidResponseError) as exc_info:
            await marketplace_client.list_invites()

        exc = exc_info.value
        assert isinstance(exc, ApiError)
        assert exc.status_code == 200
        assert exc.body == "not json"
        assert exc.code == "API_INVALID_RESPONSE"
        assert exc.message == "API GET /invites returned a non-JSON body (200): not json"
        assert "failed" not in exc.message

    @pytest.mark.asyncio
    async def test_timeout_raises_api_timeout_error(self, marketplace_client, fake_api):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fake_api.add_handler("GET", "/transactions", timeout)

        with pytest.raises(ApiTimeoutError) as exc_info:
            await marketplace_client.get_transactions()

        assert exc_info.value.timeout_seconds == 10.0

    @pytest.mark.asyncio
    async def test_connect_error_raises_api_unavailable_error(self, marketplace_client, fake_api):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        fake_api.add_handler("GET", "/disputes", refuse)

        with pytest.raises(ApiUnavailableError):
            await marketplace_client.list_disputes()

    @pytest.mark.asyncio
    async def test_path_identifiers_are_encoded(self, marketplace_client, fake_api):
        # Routes match on the decoded path
        fake_api.add("GET", "/escrows/a/b/output", json={})

        await marketplace_client.get_escrow_output("a/b")

        assert fake_api.requests[0].url.raw_path == b"/v1/escrows/a%2Fb/output"

    @pytest.mark.asyncio
    async def test_escrow_wait_widens_timeout(self, marketplace_client, fake_api):
        fake_api.add("POST", "/escrows", json={"state": "HELD"})

        await marketplace_client.create_escrow(
            EscrowCreate(function_id="ocr", provider_agent_id="p1", wait_for_execution=True)
        )

        timeout = fake_api.requests[0].extensions["timeout"]
        assert timeout["read"] == EXECUTION_WAIT_SECONDS + EXECUTION_WAIT_GRACE_SECONDS

    @pytest.mark.asyncio
    async def test_escrow_without_wait_uses_default_timeout(self, marketplace_client, fake_api):
        fake_api.add("POST", "/escrows", json={"state": "HELD"})

        await marketplace_client.create_escrow(
            EscrowCreate(function_id="ocr", provider_agent_id="p1", wait_for_execution=False)
        )

        assert fake_api.requests[0].extensions["timeout"]["read"] == 10.0


class TestAgentIdCache:
    """Tests for the cached agent identifier."""

    def test_extract_prefers_agent_id(self):
        assert extract_agent_id({"agentId": "a1", "id": "u1"}) == "a1"

    def test_extract_falls_back_to_id(self):
        assert extract_agent_id({"id": "u1"}) == "u1"

    @pytest.mark.parametrize("profile", [{}, {"agentId": ""}, None, ["a1"]])
    def test_extract_without_identifier_raises(self, profile):
        with pytest.raises(AgentIdentityError):
            extract_agent_id(profile)

    @pytest.mark.asyncio
    async def test_second_lookup_uses_cache(self, marketplace_client, fake_api):
        fake_api.add("GET", "/me", json={"agentId": "agent-7"})

        first = await marketplace_client.get_agent_id()
        second = await marketplace_client.get_agent_id()

        assert first == second == "agent-7"
        assert len(fake_api.calls("GET", "/me")) == 1
        assert marketplace_client.cached_agent_id == "agent-7"

    @pytest.mark.asyncio
    async def test_failed_lookup_leaves_cache_empty(self, marketplace_client, fake_api):
        fake_api.add("GET", "/me", status_code=503, text="maintenance")

        with pytest.raises(ApiError):
            await marketplace_client.get_agent_id()
        assert marketplace_client.cached_agent_id is None

        fake_api.add("GET", "/me", json={"id": "agent-8"})
        assert await marketplace_client.get_agent_id() == "agent-8"
        assert len(fake_api.calls("GET", "/me")) == 2

    @pytest.mark.asyncio
    async def test_profile_without_identifier_not_cached(self, marketplace_client, fake_api):
        fake_api.add("GET", "/me", json={"name": "anon"})

        with pytest.raises(AgentIdentityError):
            await marketplace_client.get_agent_id()
        assert marketplace_client.cached_agent_id is None

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, marketplace_client, fake_api):
        fake_api.add("GET", "/me", json={"agentId": "old"})
        assert await marketplace_client.get_agent_id() == "old"

        fake_api.add("GET", "/me", json={"agentId": "new"})
        assert await marketplace_client.get_agent_id() == "old"

        marketplace_client.invalidate_agent_id()
        assert marketplace_client.cached_agent_id is None
        assert await marketplace_client.get_agent_id() == "new"
        assert len(fake_api.calls("GET", "/me")) == 2

    @pytest.mark.asyncio
    async def test_concurrent_first_use_fetches_once(self, settings):
        calls = 0

        async def slow_profile(request):
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"agentId": "agent-9"})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(slow_profile))
        client = MarketplaceClient(settings, http_client=http_client)

        results = await asyncio.gather(*(client.get_agent_id() for _ in range(5)))

        assert results == ["agent-9"] * 5
        assert calls == 1
