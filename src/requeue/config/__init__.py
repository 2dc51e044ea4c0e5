"""Configuration loading, validation, and rule compilation for requeue."""

from __future__ import annotations

from requeue.config.loader import build_config, compile_rule, load_config
from requeue.config.model import RequeueConfig, WatcherConfig, default_taken_queue
from requeue.config.validator import validate_config_file

__all__ = [
    "RequeueConfig",
    "WatcherConfig",
    "build_config",
    "compile_rule",
    "default_taken_queue",
    "load_config",
    "validate_config_file",
]
