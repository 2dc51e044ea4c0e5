"""Cross-module type aliases."""

from __future__ import annotations

type PropertyMap = dict[str, str]

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
