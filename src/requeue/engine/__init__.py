"""Rule matching and template expansion engine."""

from __future__ import annotations

from .rule import OutputDescriptor, Rule
from .ruleset import RuleSet
from .template import Template

__all__ = ["OutputDescriptor", "Rule", "RuleSet", "Template"]
