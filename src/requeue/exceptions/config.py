"""Configuration-related exceptions."""

from __future__ import annotations

from requeue.exceptions.base import RequeueError


class ConfigError(RequeueError, ValueError):
    """Raised when the rule configuration is invalid."""
