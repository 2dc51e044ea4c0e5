"""Registry mapping source kinds to factories.

Only registered kinds can be declared in a rule's ``fetch`` list. Each
factory receives the raw declaration mapping plus a location string for
error messages, and raises ConfigError when the declaration is unusable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from requeue.constants.sources import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SOURCE_KIND,
    HTTP_JSON_ALLOWED_KEYS,
    HTTP_JSON_KIND,
    HTTP_JSON_REQUIRED_KEYS,
    STATIC_ALLOWED_KEYS,
    STATIC_KIND,
    STATIC_REQUIRED_KEYS,
)
from requeue.engine.template import Template
from requeue.exceptions import ConfigError
from requeue.sources.base import PropertySource
from requeue.sources.http_json import HttpJsonSource
from requeue.sources.static import StaticSource

type SourceFactory = Callable[[dict[str, Any], str], PropertySource]


def build_http_json_source(decl: dict[str, Any], where: str) -> HttpJsonSource:
    """Build an :class:`HttpJsonSource` from ``{url, returns, timeout?}``."""
    _check_keys(decl, where, HTTP_JSON_REQUIRED_KEYS, HTTP_JSON_ALLOWED_KEYS)
    url = decl["url"]
    returns = decl["returns"]
    if not isinstance(url, str) or not url.strip():
        raise ConfigError(f"{where}: 'url' must be a non-empty string")
    if not isinstance(returns, str) or not returns.isidentifier():
        raise ConfigError(f"{where}: 'returns' must be an identifier, got {returns!r}")
    timeout = decl.get("timeout", DEFAULT_HTTP_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"{where}: 'timeout' must be a positive number, got {timeout!r}")
    return HttpJsonSource(url=Template(url), returns=returns, timeout=float(timeout))


def build_static_source(decl: dict[str, Any], where: str) -> StaticSource:
    """Build a :class:`StaticSource` from ``{results: [mapping, ...]}``."""
    _check_keys(decl, where, STATIC_REQUIRED_KEYS, STATIC_ALLOWED_KEYS)
    results = decl["results"]
    if not isinstance(results, list):
        raise ConfigError(f"{where}: 'results' must be a list of mappings")
    maps: list[dict[str, str]] = []
    for index, item in enumerate(results):
        if not isinstance(item, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in item.items()
        ):
            raise ConfigError(f"{where}: results[{index}] must map strings to strings")
        maps.append(item)
    return StaticSource.from_maps(maps)


SOURCE_REGISTRY: dict[str, SourceFactory] = {
    HTTP_JSON_KIND: build_http_json_source,
    STATIC_KIND: build_static_source,
}


def build_source(decl: Any, where: str) -> PropertySource:
    """Build the property source described by one ``fetch`` entry."""
    if not isinstance(decl, dict):
        raise ConfigError(f"{where}: fetch entry must be a mapping")
    kind = decl.get("kind", DEFAULT_SOURCE_KIND)
    factory = SOURCE_REGISTRY.get(kind) if isinstance(kind, str) else None
    if factory is None:
        raise ConfigError(f"{where}: unknown source kind {kind!r}, must be one of {sorted(SOURCE_REGISTRY)}")
    return factory(decl, where)


def _check_keys(
    decl: dict[str, Any],
    where: str,
    required: frozenset[str],
    allowed: frozenset[str],
) -> None:
    unknown = set(decl) - allowed
    if unknown:
        raise ConfigError(f"{where}: unknown fetch keys: {sorted(map(str, unknown))}")
    for key in sorted(required):
        if key not in decl:
            raise ConfigError(f"{where}: fetch entry missing required key '{key}'")
