"""Rule evaluation exceptions."""

from __future__ import annotations

from requeue.exceptions.base import RequeueError


class RuleError(RequeueError):
    """Base class for rule evaluation errors."""


class RuleMismatchError(RuleError):
    """Raised when a rule is expanded against a task it does not match."""

    def __init__(self, rule_name: str, task: str) -> None:
        super().__init__(f"rule '{rule_name}' does not match task {task!r}")
        self.rule_name = rule_name
        self.task = task
