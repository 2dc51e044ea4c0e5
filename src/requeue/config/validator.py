"""Collect-all config file validation.

Unlike the loader, which stops at the first problem, this module reports
every problem it can find as a :class:`ValidationError` and never raises.
"""

from __future__ import annotations

import difflib
import re
from pathlib import Path
from typing import Any

import yaml

from requeue.config.loader import normalize_rule_keys
from requeue.constants.config import (
    ALLOWED_MAKE_KEYS,
    ALLOWED_REDIS_KEYS,
    ALLOWED_RULE_KEYS,
    ALLOWED_TOP_KEYS,
    ALLOWED_WATCHER_KEYS,
    DEFAULT_TASK_TEMPLATE,
    INPUT_TASK_PROPERTY,
)
from requeue.constants.sources import VALID_SOURCE_KINDS
from requeue.constants.validation import (
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    RULE001,
    RULE002,
    RULE003,
    RULE004,
    RULE005,
    RULE006,
    RULE007,
    RULE008,
)
from requeue.engine.template import Template
from requeue.exceptions import ConfigError
from requeue.exceptions.validation import ValidationError, sort_errors
from requeue.sources.registry import build_source
from requeue.sources.static import StaticSource


def validate_config_file(path: Path) -> list[ValidationError]:
    """Validate a config file and return all validation errors, sorted."""
    path_str = str(path)
    if not path.is_file():
        return [ValidationError(code=CFG001, path=path_str, field="", message=f"config file not found: {path}")]

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        return [ValidationError(code=CFG002, path=path_str, field="", message=f"unreadable config: {exc}")]

    return validate_config_data(raw, path_str)


def validate_config_data(raw: Any, path_str: str = "<config>") -> list[ValidationError]:
    """Validate an already-parsed configuration value."""
    if not isinstance(raw, dict):
        return [
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a mapping, got {type(raw).__name__}",
            )
        ]

    errors: list[ValidationError] = []
    _check_unknown_keys(raw, ALLOWED_TOP_KEYS, path_str, "", CFG004, errors)

    redis_raw = raw.get("redis")
    if not isinstance(redis_raw, dict):
        errors.append(ValidationError(code=CFG006, path=path_str, field="redis", message="missing `redis` mapping"))
    else:
        _check_unknown_keys(redis_raw, ALLOWED_REDIS_KEYS, path_str, "redis", CFG004, errors)
        if not isinstance(redis_raw.get("url"), str) or not redis_raw["url"]:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field="redis.url",
                    message="missing `redis.url`",
                    hint="e.g. redis://127.0.0.1/",
                )
            )

    if "listener_channel" in raw and not isinstance(raw["listener_channel"], (str, type(None))):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field="listener_channel",
                message="invalid type for `listener_channel`",
                hint="expected a string",
            )
        )

    watchers = raw.get("watchers")
    if not isinstance(watchers, list):
        errors.append(
            ValidationError(code=CFG006, path=path_str, field="watchers", message="missing `watchers` list")
        )
    elif not watchers:
        errors.append(ValidationError(code=CFG007, path=path_str, field="watchers", message="`watchers` is empty"))
    else:
        for index, watcher in enumerate(watchers):
            _validate_watcher(watcher, path_str, f"watchers[{index}]", errors)

    return sort_errors(errors)


def _validate_watcher(watcher: Any, path_str: str, field: str, errors: list[ValidationError]) -> None:
    if not isinstance(watcher, dict):
        errors.append(ValidationError(code=CFG005, path=path_str, field=field, message="watcher must be a mapping"))
        return

    _check_unknown_keys(watcher, ALLOWED_WATCHER_KEYS, path_str, field, CFG004, errors)

    for key in ("input_queue", "taken_queue"):
        value = watcher.get(key)
        if value is None and key == "taken_queue":
            continue
        if not isinstance(value, str) or not value:
            errors.append(
                ValidationError(
                    code=CFG006 if value is None else CFG005,
                    path=path_str,
                    field=f"{field}.{key}",
                    message=f"`{key}` must be a non-empty string",
                )
            )

    rules = watcher.get("rules")
    if not isinstance(rules, list):
        errors.append(
            ValidationError(code=CFG006, path=path_str, field=f"{field}.rules", message="missing `rules` list")
        )
        return
    for index, rule in enumerate(rules):
        _validate_rule(rule, path_str, f"{field}.rules[{index}]", errors)


def _validate_rule(rule: Any, path_str: str, field: str, errors: list[ValidationError]) -> None:
    if not isinstance(rule, dict):
        errors.append(ValidationError(code=RULE001, path=path_str, field=field, message="rule must be a mapping"))
        return

    rule = normalize_rule_keys(rule)
    _check_unknown_keys(rule, ALLOWED_RULE_KEYS, path_str, field, RULE002, errors)

    if rule.get("name") is not None and not isinstance(rule["name"], str):
        errors.append(
            ValidationError(code=RULE005, path=path_str, field=f"{field}.name", message="`name` must be a string")
        )

    pattern = _validate_pattern(rule.get("on"), path_str, f"{field}.on", errors)
    provided = _validate_fetch(rule.get("fetch"), path_str, f"{field}.fetch", errors)

    make = rule.get("make")
    if not isinstance(make, dict):
        errors.append(
            ValidationError(
                code=RULE003,
                path=path_str,
                field=f"{field}.make",
                message="missing `make` mapping",
                hint="`make.queue` is required",
            )
        )
        return

    _check_unknown_keys(make, ALLOWED_MAKE_KEYS, path_str, f"{field}.make", RULE002, errors)

    templates: list[Template] = []
    for key in ("task", "queue", "set"):
        value = make.get(key)
        if value is None:
            if key == "queue":
                errors.append(
                    ValidationError(
                        code=RULE003,
                        path=path_str,
                        field=f"{field}.make.queue",
                        message="missing `make.queue`",
                    )
                )
            elif key == "task":
                templates.append(Template(DEFAULT_TASK_TEMPLATE))
            continue
        if not isinstance(value, str):
            errors.append(
                ValidationError(
                    code=RULE005,
                    path=path_str,
                    field=f"{field}.make.{key}",
                    message=f"`make.{key}` must be a string",
                )
            )
            continue
        templates.append(Template(value))

    if pattern is not None and provided is not None:
        known = set(pattern.groupindex) | provided | {INPUT_TASK_PROPERTY}
        for template in templates:
            for name in sorted(template.placeholders - known):
                errors.append(
                    ValidationError(
                        code=RULE008,
                        path=path_str,
                        field=f"{field}.make",
                        message=f"`${{{name}}}` is never provided and would be left as-is",
                        hint=_suggest_key(name, frozenset(known)),
                    )
                )


def _validate_pattern(
    value: Any,
    path_str: str,
    field: str,
    errors: list[ValidationError],
) -> re.Pattern[str] | None:
    if value is None:
        errors.append(ValidationError(code=RULE003, path=path_str, field=field, message="missing `on` pattern"))
        return None
    if not isinstance(value, str):
        errors.append(ValidationError(code=RULE005, path=path_str, field=field, message="`on` must be a string"))
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        errors.append(
            ValidationError(code=RULE004, path=path_str, field=field, message=f"invalid regular expression: {exc}")
        )
        return None


def _validate_fetch(
    value: Any,
    path_str: str,
    field: str,
    errors: list[ValidationError],
) -> set[str] | None:
    """Validate fetch declarations.

    Returns the property names the sources are known to provide, or None
    when at least one source provides names only known at fetch time.
    """
    if value is None:
        return set()
    if not isinstance(value, list):
        errors.append(ValidationError(code=RULE006, path=path_str, field=field, message="`fetch` must be a list"))
        return None

    provided: set[str] | None = set()
    for index, decl in enumerate(value):
        entry_field = f"{field}[{index}]"
        kind = decl.get("kind") if isinstance(decl, dict) else None
        if kind is not None and (not isinstance(kind, str) or kind not in VALID_SOURCE_KINDS):
            errors.append(
                ValidationError(
                    code=RULE007,
                    path=path_str,
                    field=f"{entry_field}.kind",
                    message=f"unknown source kind {kind!r}",
                    hint=f"expected one of: {', '.join(sorted(VALID_SOURCE_KINDS))}",
                )
            )
            provided = None
            continue
        try:
            source = build_source(decl, entry_field)
        except ConfigError as exc:
            errors.append(ValidationError(code=RULE006, path=path_str, field=entry_field, message=str(exc)))
            provided = None
            continue
        if provided is not None and isinstance(source, StaticSource):
            provided |= source.keys
        else:
            provided = None
    return provided


def _check_unknown_keys(
    data: dict[Any, Any],
    allowed: frozenset[str],
    path_str: str,
    field: str,
    code: str,
    errors: list[ValidationError],
) -> None:
    for key in sorted(map(str, data)):
        if key not in allowed:
            errors.append(
                ValidationError(
                    code=code,
                    path=path_str,
                    field=f"{field}.{key}" if field else key,
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(key, allowed),
                )
            )


def _suggest_key(key: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean' hint if a close match exists."""
    matches = difflib.get_close_matches(key, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
