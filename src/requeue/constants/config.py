"""Configuration keys and defaults."""

from __future__ import annotations

ANONYMOUS_RULE_NAME: str = "<anonymous rule>"
INPUT_TASK_PROPERTY: str = "input_task"
DEFAULT_TASK_TEMPLATE: str = "${" + INPUT_TASK_PROPERTY + "}"
TAKEN_QUEUE_SUFFIX: str = "/taken"

DEFAULT_POP_TIMEOUT_SECONDS: int = 5

ALLOWED_TOP_KEYS: frozenset[str] = frozenset({"redis", "listener_channel", "watchers", "task_set"})
ALLOWED_REDIS_KEYS: frozenset[str] = frozenset({"url"})
ALLOWED_WATCHER_KEYS: frozenset[str] = frozenset({"input_queue", "taken_queue", "rules"})
ALLOWED_RULE_KEYS: frozenset[str] = frozenset({"name", "on", "fetch", "make"})
ALLOWED_MAKE_KEYS: frozenset[str] = frozenset({"task", "queue", "set"})

LEGACY_TOP_KEYS: frozenset[str] = frozenset({"task_set"})
