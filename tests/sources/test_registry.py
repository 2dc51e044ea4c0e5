"""Tests for source construction from fetch declarations."""

from __future__ import annotations

import pytest

from requeue.constants.sources import VALID_SOURCE_KINDS
from requeue.exceptions import ConfigError
from requeue.sources import SOURCE_REGISTRY, HttpJsonSource, PropertySource, StaticSource, build_source


def test_registry_kinds() -> None:
    assert set(SOURCE_REGISTRY) == {"http_json", "static"}


def test_kind_defaults_to_http_json() -> None:
    source = build_source({"url": "http://svc/${id}", "returns": "tree"}, "<test>")

    assert isinstance(source, HttpJsonSource)
    assert source.url.src == "http://svc/${id}"
    assert source.returns == "tree"
    assert source.timeout == 10.0


def test_http_json_accepts_timeout() -> None:
    source = build_source({"kind": "http_json", "url": "http://svc", "returns": "t", "timeout": 2}, "<test>")

    assert isinstance(source, HttpJsonSource)
    assert source.timeout == 2.0


@pytest.mark.parametrize(
    ("decl", "expected_match"),
    [
        ({"returns": "t"}, "missing required key 'url'"),
        ({"url": "http://svc"}, "missing required key 'returns'"),
        ({"url": "", "returns": "t"}, "'url' must be a non-empty string"),
        ({"url": "http://svc", "returns": "not an id"}, "'returns' must be an identifier"),
        ({"url": "http://svc", "returns": "t", "timeout": 0}, "'timeout' must be a positive number"),
        ({"url": "http://svc", "returns": "t", "timeout": True}, "'timeout' must be a positive number"),
        ({"url": "http://svc", "returns": "t", "method": "POST"}, "unknown fetch keys"),
    ],
    ids=["no_url", "no_returns", "empty_url", "bad_returns", "zero_timeout", "bool_timeout", "unknown_key"],
)
def test_http_json_rejects_invalid_declarations(decl: dict[str, object], expected_match: str) -> None:
    with pytest.raises(ConfigError, match=expected_match):
        build_source(decl, "<test>")


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ConfigError, match="unknown source kind 'ldap'"):
        build_source({"kind": "ldap"}, "<test>")


def test_non_mapping_declaration_is_rejected() -> None:
    with pytest.raises(ConfigError, match="fetch entry must be a mapping"):
        build_source("http://svc", "<test>")


def test_static_source_returns_fresh_copies() -> None:
    source = build_source({"kind": "static", "results": [{"region": "eu"}, {"region": "us"}]}, "<test>")

    first = source.fetch({})
    first[0]["region"] = "mutated"

    assert isinstance(source, StaticSource)
    assert source.fetch({"id": "1"}) == [{"region": "eu"}, {"region": "us"}]
    assert source.keys == frozenset({"region"})


def test_static_source_rejects_non_string_values() -> None:
    with pytest.raises(ConfigError, match=r"results\[1\] must map strings to strings"):
        build_source({"kind": "static", "results": [{"a": "b"}, {"a": 1}]}, "<test>")


def test_sources_satisfy_protocol() -> None:
    http = build_source({"url": "http://svc", "returns": "t"}, "<test>")
    static = build_source({"kind": "static", "results": []}, "<test>")

    assert isinstance(http, PropertySource)
    assert isinstance(static, PropertySource)


def test_registry_covers_every_valid_kind() -> None:
    assert set(SOURCE_REGISTRY) == VALID_SOURCE_KINDS
