"""Config data model for requeue."""

from __future__ import annotations

from dataclasses import dataclass

from requeue.constants.config import TAKEN_QUEUE_SUFFIX
from requeue.engine.ruleset import RuleSet


def default_taken_queue(input_queue: str) -> str:
    """Name of the queue holding tasks being processed from *input_queue*."""
    return f"{input_queue}{TAKEN_QUEUE_SUFFIX}"


@dataclass(frozen=True)
class WatcherConfig:
    """One input queue and the rules applied to its tasks."""

    input_queue: str
    taken_queue: str
    ruleset: RuleSet


@dataclass(frozen=True)
class RequeueConfig:
    """Resolved configuration."""

    redis_url: str
    watchers: tuple[WatcherConfig, ...]
    listener_channel: str | None = None

    def watcher_for(self, input_queue: str) -> WatcherConfig | None:
        """Return the watcher reading *input_queue*, if any."""
        for watcher in self.watchers:
            if watcher.input_queue == input_queue:
                return watcher
        return None
