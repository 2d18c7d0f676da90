"""Tests for switchboard.http.request — path normalization and descriptors."""

import pytest

from switchboard.http.request import (
    RequestDescriptor,
    normalize_path,
    parse_headers,
    parse_query,
)


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope dict."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": [],
    }
    base.update(overrides)
    return base


class TestNormalizePath:
    @pytest.mark.parametrize("raw", ["/x/y/", "x/y", "//x/y//", "///x/y"])
    def test_equivalent_forms(self, raw: str) -> None:
        assert normalize_path(raw) == "x/y"

    def test_internal_slashes_preserved(self) -> None:
        assert normalize_path("/api//users/") == "api//users"

    def test_root(self) -> None:
        assert normalize_path("/") == ""
        assert normalize_path("") == ""

    def test_idempotent(self) -> None:
        once = normalize_path("//api/users//")
        assert normalize_path(once) == once


class TestParseQuery:
    def test_flat_pairs(self) -> None:
        assert parse_query(b"phone=555&name=ada") == {"phone": "555", "name": "ada"}

    def test_blank_values_kept(self) -> None:
        assert parse_query(b"flag=") == {"flag": ""}

    def test_repeated_key_becomes_list(self) -> None:
        assert parse_query(b"id=1&id=2") == {"id": ["1", "2"]}

    def test_percent_decoding(self) -> None:
        assert parse_query(b"q=hello%20world") == {"q": "hello world"}

    def test_empty(self) -> None:
        assert parse_query(b"") == {}


class TestParseHeaders:
    def test_names_lower_cased(self) -> None:
        headers = parse_headers([(b"Content-Type", b"application/json")])
        assert headers == {"content-type": "application/json"}

    def test_repeated_header_becomes_list(self) -> None:
        headers = parse_headers([(b"x-tag", b"a"), (b"X-Tag", b"b")])
        assert headers == {"x-tag": ["a", "b"]}


class TestRequestDescriptor:
    def test_from_asgi(self) -> None:
        scope = _make_scope(
            method="POST",
            path="/api/users/",
            query_string=b"limit=5",
            headers=[(b"token", b"abc")],
        )
        request = RequestDescriptor.from_asgi(scope, {"a": 1})

        assert request.path == "api/users"
        assert request.method == "post"
        assert request.query == {"limit": "5"}
        assert request.headers == {"token": "abc"}
        assert request.payload == {"a": 1}

    def test_unrecognized_method_passed_through(self) -> None:
        request = RequestDescriptor.from_asgi(_make_scope(method="PURGE"))
        assert request.method == "purge"

    def test_payload_defaults_to_empty_mapping(self) -> None:
        request = RequestDescriptor.from_asgi(_make_scope())
        assert request.payload == {}

    def test_frozen(self) -> None:
        request = RequestDescriptor.from_asgi(_make_scope())
        with pytest.raises(AttributeError):
            request.path = "other"  # type: ignore[misc]
