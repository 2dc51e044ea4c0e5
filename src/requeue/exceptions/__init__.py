"""Shared exception hierarchy for requeue."""

from __future__ import annotations

from .base import RequeueError
from .config import ConfigError
from .fetch import FetchError
from .rules import RuleError, RuleMismatchError

__all__ = [
    "ConfigError",
    "FetchError",
    "RequeueError",
    "RuleError",
    "RuleMismatchError",
]
