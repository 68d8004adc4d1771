"""Unit tests for ClientRegistry."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from api_dispatch.core.client import BearerApiClient, HttpApiClient
from api_dispatch.core.config.settings import DispatchSettings
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.exceptions import InvalidAuthenticationTypeError, MissingProviderConfigError
from api_dispatch.core.registry import ClientRegistry
from api_dispatch.core.transport import HttpxTransport
from tests.config import TEST_CONFIG_TOML, TEST_PROVIDERS


class TestGetOrCreateClient:
    def test_same_instance_for_same_provider(self, registry):
        first = registry.get_or_create_client("mySanctumClient")

        assert registry.get_or_create_client("mySanctumClient") is first

    def test_different_providers_get_different_clients(self, registry):
        sanctum = registry.get_or_create_client("mySanctumClient")
        basic = registry.get_or_create_client("myBasicHttpClient")

        assert sanctum is not basic

    @pytest.mark.parametrize("provider", ["mySanctumClient", "mySanctumClientNoToken"])
    def test_sanctum_builds_bearer_client(self, registry, provider):
        assert isinstance(registry.get_or_create_client(provider), BearerApiClient)

    def test_bearer_type(self):
        registry = ClientRegistry({"p": {"authentication": {"type": "bearer"}}})

        assert isinstance(registry.get_or_create_client("p"), BearerApiClient)

    @pytest.mark.parametrize(
        "provider, expected_type",
        [
            ("myBasicHttpClient", "basic"),
            ("myBasicHttpClientWithCredentials", "basic"),
            ("myQueryHttpClient", "query"),
            ("myQueryHttpClientWithCredentials", "query"),
        ],
    )
    def test_http_types(self, registry, provider, expected_type):
        client = registry.get_or_create_client(provider)

        assert isinstance(client, HttpApiClient)
        assert client.get_authentication_type() == expected_type

    def test_missing_type_defaults_to_basic_http(self, registry):
        client = registry.get_or_create_client("myDefaultClient")

        assert isinstance(client, HttpApiClient)
        assert client.get_authentication_type() == "basic"

    def test_missing_provider(self, registry):
        with pytest.raises(MissingProviderConfigError) as exc_info:
            registry.get_or_create_client("nonExistingProvider")

        assert exc_info.value.provider == "nonExistingProvider"
        assert not registry.client_exists("nonExistingProvider")

    def test_unknown_authentication_type(self, registry):
        with pytest.raises(InvalidAuthenticationTypeError) as exc_info:
            registry.get_or_create_client("myUnknownTypeClient")

        assert exc_info.value.authentication_type == "blabla"
        assert not registry.client_exists("myUnknownTypeClient")

    @pytest.mark.parametrize("authentication_type", [42, ["bearer"], "BEARER"])
    def test_non_string_or_unlisted_type(self, authentication_type):
        registry = ClientRegistry({"p": {"authentication": {"type": authentication_type}}})

        with pytest.raises(InvalidAuthenticationTypeError):
            registry.get_or_create_client("p")

    def test_concurrent_access_returns_one_instance(self, registry):
        with ThreadPoolExecutor(max_workers=8) as pool:
            clients = list(
                pool.map(lambda _: registry.get_or_create_client("mySanctumClient"), range(32))
            )

        assert all(client is clients[0] for client in clients)

    def test_clients_share_registry_transport(self, registry, transport):
        sanctum = registry.get_or_create_client("mySanctumClient")
        basic = registry.get_or_create_client("myBasicHttpClient")

        assert sanctum.transport is transport
        assert basic.transport is transport


class TestForceCreateClient:
    def test_replaces_cached_client(self, registry):
        cached = registry.get_or_create_client("mySanctumClient")

        fresh = registry.force_create_client("mySanctumClient")

        assert fresh is not cached
        assert registry.get_or_create_client("mySanctumClient") is fresh

    def test_discards_runtime_changes(self, registry):
        registry.get_or_create_client("mySanctumClient").with_token("runtime")

        fresh = registry.force_create_client("mySanctumClient")

        assert fresh.get_token() == "my-token-123"

    def test_missing_provider_keeps_cache_untouched(self, registry):
        with pytest.raises(MissingProviderConfigError):
            registry.force_create_client("nonExistingProvider")

        assert not registry.client_exists("nonExistingProvider")


class TestClientExists:
    def test_false_before_creation(self, registry):
        assert not registry.client_exists("mySanctumClient")

    def test_true_after_creation(self, registry):
        registry.get_or_create_client("mySanctumClient")

        assert registry.client_exists("mySanctumClient")

    def test_false_after_clear(self, registry):
        registry.get_or_create_client("mySanctumClient")

        registry.clear()

        assert not registry.client_exists("mySanctumClient")


class TestAdHocClients:
    def test_create_bearer_client_ignores_configured_type(self, registry):
        client = registry.create_bearer_client("myBasicHttpClient", token="abc")

        assert isinstance(client, BearerApiClient)
        assert client.get_token() == "abc"
        assert registry.get_or_create_client("myBasicHttpClient") is client

    def test_create_http_client_with_settings(self, registry):
        client = registry.create_http_client(
            "mySanctumClient", authentication_type="http:query", credentials={"key": "k"}
        )

        assert isinstance(client, HttpApiClient)
        assert client.get_authentication_type() == "query"
        assert client.get_credentials() == {"key": "k"}
        assert registry.get_or_create_client("mySanctumClient") is client

    def test_anonymous_clients_are_not_registered(self, registry):
        bearer = registry.create_bearer_client(token="abc")
        http = registry.create_http_client()

        assert bearer.provider_name is None
        assert http.get_authentication_type() == "basic"
        assert registry._clients == {}

    def test_ad_hoc_client_for_unconfigured_provider(self, registry):
        client = registry.create_bearer_client("nowhere", token="abc")

        assert registry.client_exists("nowhere")
        assert client.get_token() == "abc"


class TestConstruction:
    def test_plain_mapping_is_wrapped(self):
        registry = ClientRegistry(TEST_PROVIDERS)

        assert isinstance(registry.config, ConfigSource)
        assert isinstance(registry.get_or_create_client("mySanctumClient"), BearerApiClient)

    def test_plain_mapping_is_interpolated(self, monkeypatch):
        monkeypatch.setenv("P_TOKEN", "from-env")
        registry = ClientRegistry({"p": {"authentication": {"type": "bearer", "token": "${P_TOKEN}"}}})

        assert registry.get_or_create_client("p").get_token() == "from-env"

    def test_empty_registry(self):
        with pytest.raises(MissingProviderConfigError):
            ClientRegistry().get_or_create_client("mySanctumClient")

    def test_from_settings(self, tmp_path, monkeypatch):
        config_file = tmp_path / "providers.toml"
        config_file.write_text(TEST_CONFIG_TOML)
        monkeypatch.setenv("BILLING_TOKEN", "billing-secret")
        settings = DispatchSettings(
            config_file=str(config_file), log_level="INFO", request_timeout=7.0
        )

        registry = ClientRegistry.from_settings(settings)

        try:
            assert isinstance(registry.transport, HttpxTransport)
            assert registry.transport.timeout == 7.0
            client = registry.get_or_create_client("billing")
            assert client.get_token() == "billing-secret"
            assert isinstance(registry.get_or_create_client("weather"), HttpApiClient)
        finally:
            registry.close()

    def test_from_settings_reads_environment(self, tmp_path, monkeypatch):
        config_file = tmp_path / "providers.toml"
        config_file.write_text(TEST_CONFIG_TOML)
        monkeypatch.setenv("API_DISPATCH_CONFIG_FILE", str(config_file))

        registry = ClientRegistry.from_settings()

        try:
            assert registry.config.provider_names() == ["billing", "weather"]
        finally:
            registry.close()

    def test_from_settings_missing_file(self, tmp_path):
        settings = DispatchSettings(
            config_file=str(tmp_path / "missing.toml"), log_level="INFO", request_timeout=1.0
        )

        with pytest.raises(FileNotFoundError):
            ClientRegistry.from_settings(settings)


class TestTransportLifecycle:
    def test_clients_share_one_created_transport(self, config_source):
        with ClientRegistry(config_source, timeout=3) as registry:
            sanctum = registry.get_or_create_client("mySanctumClient")
            basic = registry.get_or_create_client("myBasicHttpClient")

            assert isinstance(sanctum.transport, HttpxTransport)
            assert sanctum.transport is basic.transport
            assert sanctum.transport.timeout == 3

    def test_force_create_reuses_the_pool(self, config_source):
        with ClientRegistry(config_source) as registry:
            old = registry.get_or_create_client("mySanctumClient")

            new = registry.force_create_client("mySanctumClient")

            assert new.transport is old.transport

    def test_close_releases_the_created_pool(self, config_source, mock_provider_api):
        registry = ClientRegistry(config_source)
        old = registry.get_or_create_client("mySanctumClient")
        old.call_endpoint("getPositions")
        registry.force_create_client("mySanctumClient")
        registry.clear()

        registry.close()

        assert old.transport._client.is_closed
        assert not registry.client_exists("mySanctumClient")

    def test_registry_is_usable_after_close(self, config_source):
        registry = ClientRegistry(config_source)
        first = registry.transport
        registry.close()

        second = registry.transport

        assert second is not first
        registry.close()

    def test_close_leaves_a_borrowed_transport_open(self, config_source, transport):
        with ClientRegistry(config_source, transport=transport) as registry:
            registry.get_or_create_client("mySanctumClient")

        assert registry.transport is transport
        assert not transport._client.is_closed
