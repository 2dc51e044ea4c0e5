"""Property source interface.

A property source turns the properties extracted from a task into zero or
more additional property maps, typically by asking an external system.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from requeue.types.common import PropertyMap


@runtime_checkable
class PropertySource(Protocol):
    """Anything able to expand one property map into several.

    Implementations raise :class:`requeue.exceptions.FetchError` on failure
    and must not retry or cache between calls.
    """

    def fetch(self, props: Mapping[str, str]) -> Sequence[PropertyMap]:
        """Return the property maps contributed for *props* (possibly none)."""
        ...

    def describe(self) -> str:
        """Short human-readable description used in logs and errors."""
        ...
