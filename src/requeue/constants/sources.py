"""Property source kinds and their configuration keys."""

from __future__ import annotations

HTTP_JSON_KIND: str = "http_json"
STATIC_KIND: str = "static"
DEFAULT_SOURCE_KIND: str = HTTP_JSON_KIND

VALID_SOURCE_KINDS: frozenset[str] = frozenset({HTTP_JSON_KIND, STATIC_KIND})

HTTP_JSON_REQUIRED_KEYS: frozenset[str] = frozenset({"url", "returns"})
HTTP_JSON_ALLOWED_KEYS: frozenset[str] = HTTP_JSON_REQUIRED_KEYS | {"kind", "timeout"}
STATIC_REQUIRED_KEYS: frozenset[str] = frozenset({"results"})
STATIC_ALLOWED_KEYS: frozenset[str] = STATIC_REQUIRED_KEYS | {"kind"}

DEFAULT_HTTP_TIMEOUT_SECONDS: float = 10.0
RETURNS_SEPARATOR: str = "_"
