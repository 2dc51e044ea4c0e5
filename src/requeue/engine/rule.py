"""Rules: match a task, extract its properties and render output descriptors."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from requeue.constants.config import ANONYMOUS_RULE_NAME, INPUT_TASK_PROPERTY
from requeue.engine.template import Template
from requeue.exceptions import RuleMismatchError
from requeue.types.common import PropertyMap

if TYPE_CHECKING:
    from requeue.sources.base import PropertySource


@dataclass(frozen=True)
class OutputDescriptor:
    """Where and as what a task should be re-queued."""

    task: str
    queue: str
    set: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Serialize to a JSON-compatible dict."""
        return {"task": self.task, "queue": self.queue, "set": self.set}


@dataclass(frozen=True)
class Rule:
    """A compiled rewriting rule.

    ``pattern`` is searched anywhere in the task. Its named groups become the
    base properties. When the rule declares property sources, every map they
    fetch is merged under the base properties (the base wins on a shared key)
    and rendered into its own descriptor; the results of the sources are
    concatenated in declaration order.
    """

    pattern: re.Pattern[str]
    queue_template: Template
    task_template: Template
    set_template: Template | None = None
    sources: tuple[PropertySource, ...] = ()
    name: str = ANONYMOUS_RULE_NAME

    def match(self, task: str) -> bool:
        """Return True when the pattern matches anywhere in *task*."""
        return self.pattern.search(task) is not None

    def base_properties(self, task: str) -> PropertyMap:
        """Return the named captures of the match, keyed by group name.

        Groups that did not participate in the match are left out.
        Raises RuleMismatchError when the rule does not match *task*.
        """
        found = self.pattern.search(task)
        if found is None:
            raise RuleMismatchError(self.name, task)
        return {name: value for name, value in found.groupdict().items() if value is not None}

    def expand(self, task: str) -> list[OutputDescriptor]:
        """Evaluate the rule against a matching task.

        Any FetchError raised by a source propagates and no descriptor is
        returned for the task.
        """
        base = self.base_properties(task)
        if not self.sources:
            return [self.render(self._with_input_task(base, task))]

        query_props = self._with_input_task(base, task)
        descriptors: list[OutputDescriptor] = []
        for source in self.sources:
            for fetched in source.fetch(dict(query_props)):
                merged = self._with_input_task({**fetched, **base}, task)
                descriptors.append(self.render(merged))
        return descriptors

    def render(self, props: Mapping[str, str]) -> OutputDescriptor:
        """Render the three templates with *props*."""
        return OutputDescriptor(
            task=self.task_template.render(props),
            queue=self.queue_template.render(props),
            set=self.set_template.render(props) if self.set_template is not None else None,
        )

    @staticmethod
    def _with_input_task(props: PropertyMap, task: str) -> PropertyMap:
        # input_task is implicit and yields to any captured or fetched value.
        return {INPUT_TASK_PROPERTY: task, **props}

    def __str__(self) -> str:
        return f"{self.name} ({self.pattern.pattern})"
