"""Unit tests for the Unbound client."""

import logging

import httpx
import pytest

from unbound import ClientConfig, Unbound, create_client
from unbound.environment import Environment
from unbound.exceptions import ExtensionError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("UNBOUND_NAMESPACE", raising=False)


class TestClientConstruction:
    """Tests for the accepted constructor forms."""

    def test_keyword_options(self):
        client = Unbound(namespace="acme", token="abc", call_id="c1", environment="server")

        assert client.namespace == "acme"
        assert client.token == "abc"
        assert client.call_id == "c1"
        assert client.environment is Environment.SERVER
        assert client.base_url == "https://acme.api.unbound.cx"

    def test_mapping_with_legacy_keys(self):
        client = Unbound(
            {"namespace": "acme", "callId": "c1", "fwRequestId": "r1", "url": "example.io"},
            environment="server",
        )

        assert client.call_id == "c1"
        assert client.fw_request_id == "r1"
        assert client.base_url == "https://acme.example.io"

    def test_legacy_positional(self):
        client = Unbound("acme", "c1", "abc", "r1", environment="server")

        assert client.namespace == "acme"
        assert client.call_id == "c1"
        assert client.token == "abc"
        assert client.fw_request_id == "r1"

    def test_legacy_positional_requires_namespace_string(self):
        with pytest.raises(TypeError):
            Unbound({"namespace": "acme"}, "c1")

    def test_config_object(self):
        config = ClientConfig(namespace="acme", token="abc", environment="server", timeout=5)
        client = Unbound(config)

        assert client.config is config
        assert client.token == "abc"

    def test_unknown_option(self):
        with pytest.raises(TypeError, match="Unknown client option"):
            Unbound(namespace="acme", colour="blue")

    def test_defaults_fall_back_to_login(self):
        client = Unbound(environment="server")

        assert client.namespace is None
        assert client.base_url == "https://login.api.unbound.cx"

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "staging.unbound.cx")
        monkeypatch.setenv("UNBOUND_NAMESPACE", "envns")

        client = Unbound(environment="server")

        assert client.base_url == "https://envns.staging.unbound.cx"

    def test_node_means_server(self):
        assert Unbound(environment="node").environment is Environment.SERVER

    def test_browser_prefixes_api_subdomain(self):
        client = Unbound(namespace="acme", environment="browser", domain="unbound.cx")

        assert client.environment is Environment.BROWSER
        assert client.base_url == "https://acme.api.unbound.cx"

    def test_create_client(self):
        client = create_client({"namespace": "acme"}, environment="server")

        assert isinstance(client, Unbound)
        assert client.namespace == "acme"


class TestClientState:
    """Tests for token and namespace changes."""

    def test_set_namespace(self):
        client = Unbound(namespace="acme", environment="server")

        client.set_namespace("globex")
        assert client.base_url == "https://globex.api.unbound.cx"

        client.set_namespace("")
        assert client.base_url == "https://login.api.unbound.cx"

    def test_set_token(self):
        client = Unbound(environment="server")
        client.set_token("new-token")

        assert client.token == "new-token"

    @pytest.mark.asyncio
    async def test_namespace_change_applies_to_next_dispatch(self, client, handler):
        await client.dispatch("/x", "GET")
        client.set_namespace("globex")
        await client.dispatch("/x", "GET")

        assert handler.requests[0].url.host == "acme.api.unbound.cx"
        assert handler.requests[1].url.host == "globex.api.unbound.cx"


class TestClientExtensions:
    """Tests for transports, plugins and extensions."""

    def test_transport_methods_chain(self, fake_transport):
        client = Unbound(environment="server")

        returned = client.add_transport(fake_transport("a")).add_transport(fake_transport("b"))
        assert returned is client
        assert client.transports.names() == ["a", "b"]

        client.remove_transport("a").remove_transport("b")
        assert len(client.transports) == 0

    def test_unnamed_transport_can_be_removed(self):
        class Unnamed:
            def is_available(self):
                return True

            def request(self, endpoint, method, envelope, context):
                return {}

        client = Unbound(environment="server")
        transport = Unnamed()

        client.add_transport(transport).remove_transport(transport.name)

        assert len(client.transports) == 0

    def test_use_function_plugin(self):
        installed = []
        client = Unbound(environment="server")

        assert client.use(installed.append) is client
        assert installed == [client]

    def test_use_install_object(self):
        class Plugin:
            def __init__(self):
                self.client = None

            def install(self, client):
                self.client = client

        plugin = Plugin()
        client = Unbound(environment="server").use(plugin)

        assert plugin.client is client

    def test_use_rejects_other_values(self):
        with pytest.raises(ExtensionError):
            Unbound(environment="server").use(42)

    @pytest.mark.asyncio
    async def test_extend_with_class(self):
        class InternalExtension:
            def __init__(self, client):
                self.internal = {"namespace": client.namespace}
                self._secret = "hidden"

                async def build_master_auth(namespace=None, account_id=None, user_id=None):
                    return {"token": f"master-{account_id}"}

                self.build_master_auth = build_master_auth

        client = Unbound(namespace="acme", environment="server").extend(InternalExtension)

        assert client.internal == {"namespace": "acme"}
        assert not hasattr(client, "_secret")
        assert await client.build_master_auth(account_id="a1") == {"token": "master-a1"}

    def test_extend_with_mapping(self):
        client = Unbound(environment="server").extend({"helper": len})

        assert client.helper is len

    def test_extend_rejects_other_values(self):
        with pytest.raises(ExtensionError):
            Unbound(environment="server").extend(3)

    @pytest.mark.asyncio
    async def test_build_master_auth_requires_extension(self):
        with pytest.raises(ExtensionError, match="internal SDK extension"):
            await Unbound(environment="server").build_master_auth(account_id="a1")


class TestClientUtilities:
    """Tests for status, get_ip, debug and lifecycle."""

    @pytest.mark.asyncio
    async def test_status_healthy(self, client, handler):
        handler.queue(
            httpx.Response(
                200,
                json={"hasAuthorization": True, "authType": "bearer", "transport": "HTTP", "timestamp": "t1"},
            )
        )

        status = await client.status()

        assert str(handler.last.url) == "https://acme.api.unbound.cx/health"
        assert status["healthy"] is True
        assert status["has_authorization"] is True
        assert status["auth_type"] == "bearer"
        assert status["transport"] == "HTTP"
        assert status["namespace"] == "acme"
        assert status["environment"] == "server"
        assert status["status_code"] == 200

    @pytest.mark.asyncio
    async def test_status_reports_http_status(self, client, handler):
        handler.queue(httpx.Response(202, json={"status": "ok", "hasAuthorization": False}))

        status = await client.status()

        assert status["healthy"] is True
        assert status["status_code"] == 202

    @pytest.mark.asyncio
    async def test_status_through_transport(self, client, handler, fake_transport):
        client.add_transport(fake_transport("socket", result={"status": 201, "transport": "socket"}))

        status = await client.status()

        assert status["status_code"] == 201
        assert status["transport"] == "socket"
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_status_never_raises(self, client, handler):
        handler.queue(httpx.Response(503, json={}))

        status = await client.status()

        assert status["healthy"] is False
        assert status["status_code"] == 503
        assert status["error"] == "API Error occurred."

    @pytest.mark.asyncio
    async def test_get_ip_skips_transports(self, client, handler, fake_transport):
        transport = fake_transport("socket")
        client.add_transport(transport)
        handler.queue(httpx.Response(200, json={"ip": "203.0.113.7"}))

        result = await client.get_ip()

        assert result == {"ip": "203.0.113.7"}
        assert transport.calls == []
        assert handler.last.url.path == "/get-ip"

    def test_debug_toggle(self):
        client = Unbound(environment="server")
        logger = logging.getLogger("unbound")

        try:
            assert client.debug() is client
            assert client.debug_mode is True
            assert logger.level == logging.DEBUG

            client.debug(False)
            assert logger.level == logging.NOTSET
        finally:
            logger.setLevel(logging.NOTSET)

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_http_client(self):
        async with Unbound(namespace="acme", environment="server") as client:
            http_client = client._http._get_client()

        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_supplied_http_client_is_left_open(self, handler):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        async with Unbound(namespace="acme", environment="server", http_client=http_client):
            pass

        assert not http_client.is_closed
        await http_client.aclose()

    def test_repr(self):
        client = Unbound(namespace="acme", environment="server")

        assert repr(client) == "Unbound(namespace='acme', base_url='https://acme.api.unbound.cx')"
