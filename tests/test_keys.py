"""Tests for cache key derivation."""

from __future__ import annotations

import pytest

from webber.keys import NAMESPACE, build_key, offline_key
from webber.models import OperationKind


class TestBuildKey:
    def test_persisted_layout(self) -> None:
        key = build_key(NAMESPACE, OperationKind.RAW, "https://api.example.com", "users")
        assert key == "__WEBBER_OFFLINE_getFromAPI_https://api.example.com/users"

    def test_json_array_layout(self) -> None:
        key = offline_key(OperationKind.JSON_ARRAY, "https://api.example.com", "users")
        assert key == "__WEBBER_OFFLINE_getJSONArrayFromAPI_https://api.example.com/users"

    def test_accepts_plain_string_kind(self) -> None:
        assert build_key("ns", "custom", "s", "p") == "ns_custom_s/p"

    @pytest.mark.parametrize("path", ["users", "users/1", "", "search?q=a%20b"])
    def test_kinds_never_collide(self, path: str) -> None:
        server = "https://api.example.com"
        assert offline_key(OperationKind.RAW, server, path) != offline_key(
            OperationKind.JSON_ARRAY, server, path
        )

    def test_servers_never_collide(self) -> None:
        a = offline_key(OperationKind.RAW, "https://a.example.com", "users")
        b = offline_key(OperationKind.RAW, "https://b.example.com", "users")
        assert a != b

    def test_leading_slash_is_a_distinct_key(self) -> None:
        server = "https://api.example.com"
        plain = offline_key(OperationKind.RAW, server, "users")
        slashed = offline_key(OperationKind.RAW, server, "/users")
        assert plain != slashed
        assert slashed.endswith("https://api.example.com//users")

    def test_empty_server(self) -> None:
        assert offline_key(OperationKind.RAW, "", "users") == "__WEBBER_OFFLINE_getFromAPI_/users"
