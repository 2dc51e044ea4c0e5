"""Stable validation error codes for config and rule validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # config file not found
CFG002: str = "CFG002"  # invalid YAML/JSON parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # missing required field
CFG007: str = "CFG007"  # empty watchers list

RULE001: str = "RULE001"  # rule is not a mapping
RULE002: str = "RULE002"  # unknown rule key
RULE003: str = "RULE003"  # missing required rule field
RULE004: str = "RULE004"  # invalid match pattern
RULE005: str = "RULE005"  # invalid template value
RULE006: str = "RULE006"  # invalid fetch declaration
RULE007: str = "RULE007"  # unknown source kind
RULE008: str = "RULE008"  # template references a property no source provides

ALL_CFG_CODES: tuple[str, ...] = (CFG001, CFG002, CFG003, CFG004, CFG005, CFG006, CFG007)

ALL_RULE_CODES: tuple[str, ...] = (
    RULE001,
    RULE002,
    RULE003,
    RULE004,
    RULE005,
    RULE006,
    RULE007,
    RULE008,
)
