"""Tests for the synchronous offline-first client."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from webber.client.sync_client import Webber
from webber.exceptions import InvalidURLError, NetworkError
from webber.keys import offline_key
from webber.models import CacheConfig, FetchStatus, OperationKind, WebberConfig
from webber.output import OutputManager, set_output
from webber.store import DiskStore, KeyValueStore, MemoryStore

SERVER = "https://api.example.com"
RAW = OperationKind.RAW
JSON = OperationKind.JSON_ARRAY


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    """Keep "Webber Error" diagnostics off the test output."""


@pytest.fixture
def make_client(config, store, online, server):
    """Factory for a Webber wired to the in-memory store and mock server."""

    def _make(probe=None, **overrides) -> Webber:
        return Webber(
            overrides.get("config", config),
            store=overrides.get("store", store),
            probe=probe or online,
            transport=server.transport,
        )

    return _make


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_and_exit_closes_http_client(self, make_client) -> None:
        client = make_client()
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_requires_context_manager(self, make_client) -> None:
        with pytest.raises(AssertionError, match="context manager"):
            make_client().get_from_api("users")

    def test_injected_store_is_not_closed(self, config, online) -> None:
        store = MagicMock(spec=KeyValueStore)
        with Webber(config, store=store, probe=online):
            pass
        store.close.assert_not_called()

    def test_default_store_is_disk_under_configured_directory(
        self, tmp_path: Path, online
    ) -> None:
        config = WebberConfig(server=SERVER, cache=CacheConfig(directory=str(tmp_path)))
        with Webber(config, probe=online) as client:
            assert isinstance(client.store, DiskStore)
            assert client.store.directory == tmp_path / "offline"

    def test_default_store_uses_xdg_cache_dir(self, isolated_config: Path, online) -> None:
        with Webber(WebberConfig(server=SERVER), probe=online) as client:
            assert isinstance(client.store, DiskStore)
            assert client.store.directory == isolated_config / "cache" / "webber" / "offline"

    def test_disabled_cache_uses_memory_store(self, online) -> None:
        config = WebberConfig(server=SERVER, cache=CacheConfig(enabled=False))
        with Webber(config, probe=online) as client:
            assert isinstance(client.store, MemoryStore)

    def test_config_is_copied(self, config, store, online) -> None:
        client = Webber(config, store=store, probe=online)
        client.server = "https://other.example.com"
        assert config.server == SERVER


# ---------------------------------------------------------------------------
# Raw text, reachable
# ---------------------------------------------------------------------------


class TestGetFromApiOnline:
    def test_returns_fetched_text(self, make_client, server) -> None:
        server.routes["/users"] = "user-list"
        with make_client() as client:
            assert client.get_from_api("users") == "user-list"
        assert str(server.calls[0].url) == "https://api.example.com/users"

    def test_write_then_read_consistency(self, make_client, server) -> None:
        server.routes["/users"] = "user-list"
        with make_client() as client:
            fetched = client.get_from_api("users")
            assert client.cache_get_from_api("users") == fetched

    def test_stores_under_raw_key(self, make_client, server, store) -> None:
        server.routes["/users"] = "user-list"
        with make_client() as client:
            client.get_from_api("users")
        assert store.get(f"__WEBBER_OFFLINE_getFromAPI_{SERVER}/users") == "user-list"

    def test_cache_false_does_not_write(self, make_client, server, store) -> None:
        server.routes["/users"] = "user-list"
        with make_client() as client:
            assert client.get_from_api("users", cache=False) == "user-list"
        assert len(store) == 0

    def test_always_refetches_while_online(self, make_client, server, store) -> None:
        store.set(offline_key(RAW, SERVER, "users"), "stale")
        server.routes["/users"] = "fresh"
        with make_client() as client:
            assert client.get_from_api("users") == "fresh"
            assert client.get_from_api("users") == "fresh"
        assert len(server.calls) == 2
        assert store.get(offline_key(RAW, SERVER, "users")) == "fresh"

    def test_overwrites_previous_entry(self, make_client, server) -> None:
        with make_client() as client:
            server.routes["/news"] = "first"
            client.get_from_api("news")
            server.routes["/news"] = "second"
            client.get_from_api("news")
            assert client.cache_get_from_api("news") == "second"

    def test_error_status_body_is_returned_and_cached(self, make_client, server, store) -> None:
        server.routes["/a"] = lambda request: httpx.Response(404, text="not found page")
        with make_client() as client:
            assert client.get_from_api("a") == "not found page"
            result = client.fetch_result("a")
        assert result.status is FetchStatus.OK
        assert store.get(offline_key(RAW, SERVER, "a")) == "not found page"

    def test_connection_failure_returns_none_and_keeps_cache(self, make_client, store) -> None:
        store.set(offline_key(RAW, SERVER, "missing"), "old")
        with make_client() as client:
            assert client.get_from_api("missing") is None
            result = client.fetch_result("missing")
        assert result.status is FetchStatus.NETWORK_ERROR
        assert isinstance(result.error, NetworkError)
        assert store.get(offline_key(RAW, SERVER, "missing")) == "old"

    def test_transport_error_returns_none(self, config, store, online) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with Webber(config, store=store, probe=online, transport=httpx.MockTransport(handler)) as client:
            result = client.fetch_result("users")
        assert result.status is FetchStatus.NETWORK_ERROR
        assert result.unwrap() is None
        assert len(store) == 0

    def test_invalid_server_returns_none_without_request(self, make_client, server) -> None:
        with make_client(config=WebberConfig(server="")) as client:
            result = client.fetch_result("users")
        assert result.status is FetchStatus.INVALID_URL
        assert isinstance(result.error, InvalidURLError)
        assert server.calls == []

    def test_leading_slash_is_distinct_entry(self, make_client, server, store) -> None:
        server.routes["//users"] = "slashed"
        with make_client() as client:
            assert client.get_from_api("/users") == "slashed"
            assert client.cache_get_from_api("users") is None
            assert client.cache_get_from_api("/users") == "slashed"

    def test_failure_is_logged(self, make_client, capsys) -> None:
        set_output(OutputManager(no_color=True))
        with make_client() as client:
            client.get_from_api("missing")
        assert "Webber Error: GET https://api.example.com/missing failed: no route for /missing" in (
            capsys.readouterr().err
        )


# ---------------------------------------------------------------------------
# Raw text, unreachable
# ---------------------------------------------------------------------------


class TestGetFromApiOffline:
    @pytest.mark.parametrize("cache", [True, False])
    def test_no_entry_returns_none(self, make_client, offline, server, cache: bool) -> None:
        with make_client(probe=offline) as client:
            assert client.get_from_api("users", cache=cache) is None
        assert server.calls == []

    def test_serves_cached_entry(self, make_client, offline, store, server) -> None:
        store.set(offline_key(RAW, SERVER, "users"), "cached")
        with make_client(probe=offline) as client:
            result = client.fetch_result("users")
        assert result.status is FetchStatus.OK
        assert result.value == "cached"
        assert result.from_cache is True
        assert server.calls == []

    def test_cache_false_ignores_entry(self, make_client, offline, store) -> None:
        store.set(offline_key(RAW, SERVER, "users"), "cached")
        with make_client(probe=offline) as client:
            result = client.fetch_result("users", cache=False)
        assert result.status is FetchStatus.CACHE_MISS
        assert result.unwrap() is None

    def test_cache_miss_is_silent(self, make_client, offline, capsys) -> None:
        set_output(OutputManager(no_color=True))
        with make_client(probe=offline) as client:
            client.get_from_api("users")
        assert capsys.readouterr().err == ""

    def test_round_trip_through_reachability_change(self, make_client, online, server) -> None:
        server.routes["/users"] = "from-network"
        with make_client(probe=online) as client:
            client.get_from_api("users")
            online.reachable = False
            assert client.get_from_api("users") == "from-network"
        assert len(server.calls) == 1


# ---------------------------------------------------------------------------
# Cache-only accessor
# ---------------------------------------------------------------------------


class TestCacheGetFromApi:
    def test_ignores_reachability_and_network(self, make_client, store, server, online) -> None:
        store.set(offline_key(RAW, SERVER, "users"), "cached")
        probe = MagicMock(wraps=online)
        with make_client(probe=probe) as client:
            assert client.cache_get_from_api("users") == "cached"
        probe.is_reachable.assert_not_called()
        assert server.calls == []

    def test_miss(self, make_client) -> None:
        with make_client() as client:
            assert client.cache_get_from_api("users") is None


# ---------------------------------------------------------------------------
# JSON arrays
# ---------------------------------------------------------------------------


class TestJsonArray:
    def test_array_is_decoded(self, make_client, server) -> None:
        server.routes["/numbers"] = "[1,2,3]"
        with make_client() as client:
            assert client.get_json_array_from_api("numbers") == [1, 2, 3]

    def test_object_is_absent_even_though_fetch_succeeded(
        self, make_client, server, store
    ) -> None:
        server.routes["/obj"] = "{}"
        with make_client() as client:
            assert client.get_json_array_from_api("obj") is None
            result = client.fetch_result("obj", JSON)
        assert result.status is FetchStatus.DECODE_ERROR
        # The raw text is cached before decoding.
        assert store.get(offline_key(JSON, SERVER, "obj")) == "{}"

    def test_invalid_json_keeps_failing_from_cache(self, make_client, server) -> None:
        server.routes["/broken"] = "[1,"
        with make_client() as client:
            assert client.get_json_array_from_api("broken") is None
            assert client.cache_get_json_array_from_api("broken") is None
            result = client.cache_result("broken", JSON)
        assert result.status is FetchStatus.DECODE_ERROR
        assert result.from_cache is True

    def test_raw_and_json_entries_are_separate(self, make_client, server, store) -> None:
        server.routes["/items"] = '["a"]'
        with make_client() as client:
            client.get_json_array_from_api("items")
            assert client.cache_get_from_api("items") is None
            assert client.cache_get_json_array_from_api("items") == ["a"]
        assert store.get(offline_key(RAW, SERVER, "items")) is None

    def test_offline_decodes_cached_text(self, make_client, offline, store) -> None:
        store.set(offline_key(JSON, SERVER, "items"), '[{"id": 7}]')
        with make_client(probe=offline) as client:
            assert client.get_json_array_from_api("items") == [{"id": 7}]
            assert client.get_json_array_from_api("items", cache=False) is None

    def test_decode_failure_is_logged(self, make_client, server, capsys) -> None:
        set_output(OutputManager(no_color=True))
        server.routes["/obj"] = '{"a": 1}'
        with make_client() as client:
            client.get_json_array_from_api("obj")
        assert "Webber Error: Expected a JSON array" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Server address
# ---------------------------------------------------------------------------


class TestServerAddress:
    def test_switching_server_switches_cache_namespace(self, make_client, server, store) -> None:
        server.routes["/users"] = "from-a"
        with make_client() as client:
            client.get_from_api("users")
            client.server = "https://b.example.com"
            assert client.cache_get_from_api("users") is None
            client.server = SERVER
            assert client.cache_get_from_api("users") == "from-a"

    def test_new_server_is_used_for_requests(self, make_client, server) -> None:
        server.routes["/users"] = "ok"
        with make_client() as client:
            client.server = "https://b.example.com"
            client.get_from_api("users")
        assert server.calls[0].url.host == "b.example.com"

    def test_two_clients_with_different_servers(self, config, store, online, server) -> None:
        server.routes["/users"] = "shared-store"
        other = WebberConfig(server="https://b.example.com")
        with Webber(config, store=store, probe=online, transport=server.transport) as a, Webber(
            other, store=store, probe=online, transport=server.transport
        ) as b:
            a.get_from_api("users")
            assert b.cache_get_from_api("users") is None
            assert a.cache_get_from_api("users") == "shared-store"
