"""Config loading and rule compilation.

The loader is fail-fast: the first problem raises ConfigError and nothing is
returned, so a broken rule can never be silently left out of a rule set.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from requeue.config.model import RequeueConfig, WatcherConfig, default_taken_queue
from requeue.constants.config import (
    ALLOWED_MAKE_KEYS,
    ALLOWED_RULE_KEYS,
    ALLOWED_WATCHER_KEYS,
    ANONYMOUS_RULE_NAME,
    DEFAULT_TASK_TEMPLATE,
    LEGACY_TOP_KEYS,
)
from requeue.engine.rule import Rule
from requeue.engine.ruleset import RuleSet
from requeue.engine.template import Template
from requeue.exceptions import ConfigError
from requeue.sources.registry import build_source

logger = logging.getLogger(__name__)


def load_config(path: Path) -> RequeueConfig:
    """Load a YAML or JSON config file and compile its rules."""
    return build_config(read_config_file(path), str(path))


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse *path* into a mapping. JSON files are read by the YAML parser."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid config file at {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a mapping")
    return raw


def build_config(raw: dict[str, Any], source: str = "<config>") -> RequeueConfig:
    """Build a RequeueConfig from an already-parsed mapping."""
    for key in sorted(LEGACY_TOP_KEYS & raw.keys()):
        logger.warning("Ignoring %r:%r because a global %s isn't supported anymore", key, raw[key], key)

    redis_raw = raw.get("redis")
    if not isinstance(redis_raw, dict):
        raise ConfigError(f"{source}: missing redis/url")
    redis_url = _require_string(redis_raw, "url", f"{source}: redis")

    listener_channel = raw.get("listener_channel")
    if listener_channel is not None and not isinstance(listener_channel, str):
        raise ConfigError(f"{source}: listener_channel must be a string")

    watchers_raw = raw.get("watchers")
    if not isinstance(watchers_raw, list) or not watchers_raw:
        raise ConfigError(f"{source}: watchers must be a non-empty list")

    watchers = tuple(
        compile_watcher(watcher_raw, f"{source}: watchers[{index}]")
        for index, watcher_raw in enumerate(watchers_raw)
    )
    return RequeueConfig(redis_url=redis_url, watchers=watchers, listener_channel=listener_channel)


def compile_watcher(data: Any, where: str) -> WatcherConfig:
    """Compile one watcher block and all of its rules."""
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: watcher must be a mapping")
    _reject_unknown(data, ALLOWED_WATCHER_KEYS, where)

    input_queue = _require_string(data, "input_queue", where)
    taken_queue = data.get("taken_queue")
    if taken_queue is None:
        taken_queue = default_taken_queue(input_queue)
    elif not isinstance(taken_queue, str) or not taken_queue:
        raise ConfigError(f"{where}: taken_queue must be a non-empty string")

    rules_raw = data.get("rules")
    if not isinstance(rules_raw, list):
        raise ConfigError(f"{where}: missing rules list")

    rules = tuple(compile_rule(rule_raw, f"{where}.rules[{index}]") for index, rule_raw in enumerate(rules_raw))
    logger.debug("Compiled %d rule(s) for input queue %s", len(rules), input_queue)
    return WatcherConfig(input_queue=input_queue, taken_queue=taken_queue, ruleset=RuleSet(rules))


def compile_rule(data: Any, where: str = "<rule>") -> Rule:
    """Validate and compile one rule mapping into a Rule."""
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: rule must be a mapping")
    data = normalize_rule_keys(data)
    _reject_unknown(data, ALLOWED_RULE_KEYS, where)

    name = data.get("name")
    if name is None:
        name = ANONYMOUS_RULE_NAME
    elif not isinstance(name, str):
        raise ConfigError(f"{where}: name must be a string")
    where = f"{where} ({name})"

    on = _require_string(data, "on", where)
    try:
        pattern = re.compile(on)
    except re.error as exc:
        raise ConfigError(f"{where}: invalid 'on' pattern {on!r}: {exc}") from exc

    fetch_raw = data.get("fetch")
    if fetch_raw is None:
        fetch_raw = []
    if not isinstance(fetch_raw, list):
        raise ConfigError(f"{where}: fetch must be a list")
    sources = tuple(build_source(decl, f"{where}.fetch[{index}]") for index, decl in enumerate(fetch_raw))

    make = data.get("make")
    if not isinstance(make, dict):
        raise ConfigError(f"{where}: missing make/queue string in rule")
    _reject_unknown(make, ALLOWED_MAKE_KEYS, f"{where}.make")

    queue = make.get("queue")
    if not isinstance(queue, str):
        raise ConfigError(f"{where}: missing make/queue string in rule")

    task = make.get("task")
    if task is None:
        task = DEFAULT_TASK_TEMPLATE
    elif not isinstance(task, str):
        raise ConfigError(f"{where}: make/task must be a string")

    set_src = make.get("set")
    if set_src is not None and not isinstance(set_src, str):
        raise ConfigError(f"{where}: invalid make/set in rule")

    return Rule(
        pattern=pattern,
        queue_template=Template(queue),
        task_template=Template(task),
        set_template=Template(set_src) if set_src is not None else None,
        sources=sources,
        name=name,
    )


def _require_string(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{where}: missing {key}")
    return value


def _reject_unknown(data: dict[str, Any], allowed: frozenset[str], where: str) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"{where}: unknown keys: {sorted(map(str, unknown))}")


def normalize_rule_keys(data: dict[Any, Any]) -> dict[Any, Any]:
    """Undo YAML 1.1 reading an unquoted ``on:`` key as boolean True."""
    if True in data and "on" not in data:
        data = dict(data)
        data["on"] = data.pop(True)
    return data
