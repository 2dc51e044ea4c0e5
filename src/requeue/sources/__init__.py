"""Property sources: external contributors of task properties."""

from __future__ import annotations

from .base import PropertySource
from .http_json import HttpJsonSource
from .registry import SOURCE_REGISTRY, build_source
from .static import StaticSource

__all__ = ["SOURCE_REGISTRY", "HttpJsonSource", "PropertySource", "StaticSource", "build_source"]
