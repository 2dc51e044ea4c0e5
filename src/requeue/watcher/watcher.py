"""Queue watcher: pops tasks, applies the rules and pushes the results.

Each popped task is atomically moved to the watcher's taken queue, so a task
whose processing was interrupted is still in Redis and is moved back to the
input queue the next time the watcher starts.
"""

from __future__ import annotations

import json
import logging
import threading

import redis

from requeue.config.model import WatcherConfig
from requeue.constants.config import DEFAULT_POP_TIMEOUT_SECONDS
from requeue.engine.rule import OutputDescriptor
from requeue.exceptions import FetchError

logger = logging.getLogger(__name__)

# KEYS: set, queue. ARGV: task. Returns 0 when the task was already in the set.
PUSH_ONCE_LUA = """
if redis.call("SADD", KEYS[1], ARGV[1]) == 0 then
    return 0
end
redis.call("LPUSH", KEYS[2], ARGV[1])
return 1
"""


class Watcher:
    """Watch one input queue and re-queue its tasks according to its rules."""

    def __init__(
        self,
        config: WatcherConfig,
        client: redis.Redis,
        *,
        listener_channel: str | None = None,
        pop_timeout: int = DEFAULT_POP_TIMEOUT_SECONDS,
    ) -> None:
        self._config = config
        self._client = client
        self._listener_channel = listener_channel
        self._pop_timeout = pop_timeout
        self._stopping = threading.Event()
        self._push_once = client.register_script(PUSH_ONCE_LUA)

    @property
    def input_queue(self) -> str:
        return self._config.input_queue

    @property
    def taken_queue(self) -> str:
        return self._config.taken_queue

    def recover_taken(self) -> int:
        """Move tasks left in the taken queue back to the input queue."""
        recovered = 0
        while True:
            task = self._client.rpoplpush(self.taken_queue, self.input_queue)
            if task is None:
                break
            logger.info("Recovered task %r from %s", task, self.taken_queue)
            recovered += 1
        return recovered

    def run(self) -> None:
        """Recover interrupted tasks, then process tasks until stopped."""
        self.recover_taken()
        logger.info("Watching %s with %d rule(s)", self.input_queue, len(self._config.ruleset))
        for rule in self._config.ruleset:
            sources = ", ".join(source.describe() for source in rule.sources) or "none"
            logger.debug("  %s, sources: %s", rule, sources)
        while not self._stopping.is_set():
            self.run_once()
        logger.info("Stopped watching %s", self.input_queue)

    def stop(self) -> None:
        """Ask the run loop to exit after the current pop."""
        self._stopping.set()

    def run_once(self) -> bool:
        """Wait for one task and process it. Returns False on pop timeout."""
        task = self._client.brpoplpush(self.input_queue, self.taken_queue, timeout=self._pop_timeout)
        if task is None:
            return False
        self.handle(task)
        self._client.lrem(self.taken_queue, 1, task)
        return True

    def handle(self, task: str) -> list[OutputDescriptor]:
        """Apply every matching rule to *task* and dispatch the results.

        Returns the descriptors that were actually pushed to a queue.
        """
        rules = self._config.ruleset.select(task)
        if not rules:
            logger.info("No rule matches task %r from %s", task, self.input_queue)
            return []

        pushed: list[OutputDescriptor] = []
        for rule in rules:
            try:
                descriptors = rule.expand(task)
            except FetchError as exc:
                logger.error("Rule %s skipped for task %r: %s", rule.name, task, exc)
                continue
            logger.debug("Rule %s produced %d result(s) for %r", rule.name, len(descriptors), task)
            for descriptor in descriptors:
                if self.dispatch(task, descriptor):
                    pushed.append(descriptor)
        return pushed

    def dispatch(self, input_task: str, descriptor: OutputDescriptor) -> bool:
        """Push one descriptor. Returns False when its set already held the task."""
        if descriptor.set is None:
            self._client.lpush(descriptor.queue, descriptor.task)
        elif not self._push_once(keys=[descriptor.set, descriptor.queue], args=[descriptor.task]):
            logger.debug("Task %r already in set %s, not pushed", descriptor.task, descriptor.set)
            return False

        logger.info("Pushed %r to %s", descriptor.task, descriptor.queue)

        if self._listener_channel:
            event = {
                "input_queue": self.input_queue,
                "input_task": input_task,
                "queue": descriptor.queue,
                "task": descriptor.task,
            }
            self._client.publish(self._listener_channel, json.dumps(event, sort_keys=True))
        return True
