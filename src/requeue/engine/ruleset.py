"""Ordered rule collections scoped to one input queue."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from requeue.engine.rule import OutputDescriptor, Rule


@dataclass(frozen=True)
class RuleSet:
    """All the rules of one input queue, in configuration order."""

    rules: tuple[Rule, ...] = ()

    def select(self, task: str) -> list[Rule]:
        """Return every rule matching *task*, in declaration order."""
        return [rule for rule in self.rules if rule.match(task)]

    def expand_all(self, task: str) -> list[tuple[Rule, list[OutputDescriptor]]]:
        """Expand every matching rule. Fetch errors propagate."""
        return [(rule, rule.expand(task)) for rule in self.select(task)]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)
