"""Static property source returning a fixed list of property maps."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class StaticSource:
    """Return the configured property maps, whatever the task properties."""

    results: tuple[tuple[tuple[str, str], ...], ...]

    @classmethod
    def from_maps(cls, maps: list[Mapping[str, str]]) -> StaticSource:
        """Build a source from plain mappings."""
        return cls(results=tuple(tuple(sorted(m.items())) for m in maps))

    def fetch(self, props: Mapping[str, str]) -> list[dict[str, str]]:
        return [dict(items) for items in self.results]

    def describe(self) -> str:
        return f"static ({len(self.results)} results)"

    @property
    def keys(self) -> frozenset[str]:
        """Every property name any result provides."""
        return frozenset(key for items in self.results for key, _ in items)
