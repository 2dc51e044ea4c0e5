"""Shared type aliases for requeue."""

from .common import JsonScalar, JsonValue, PropertyMap

__all__ = ["JsonScalar", "JsonValue", "PropertyMap"]
