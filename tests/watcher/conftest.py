"""Shared fixtures for watcher tests."""

from __future__ import annotations

from collections import defaultdict

import pytest


class FakeRedis:
    """In-memory stand-in for the list, set and pub/sub calls a watcher makes."""

    def __init__(self) -> None:
        self.lists: dict[str, list[str]] = defaultdict(list)
        self.sets: dict[str, set[str]] = defaultdict(set)
        self.published: list[tuple[str, str]] = []
        self.scripts: list[str] = []
        self.script_calls: list[tuple[list[str], list[str]]] = []

    def lpush(self, name: str, value: str) -> int:
        self.lists[name].insert(0, value)
        return len(self.lists[name])

    def rpoplpush(self, src: str, dst: str) -> str | None:
        if not self.lists[src]:
            return None
        value = self.lists[src].pop()
        self.lists[dst].insert(0, value)
        return value

    def brpoplpush(self, src: str, dst: str, timeout: int = 0) -> str | None:
        return self.rpoplpush(src, dst)

    def lrem(self, name: str, count: int, value: str) -> int:
        if value in self.lists[name]:
            self.lists[name].remove(value)
            return 1
        return 0

    def sadd(self, name: str, value: str) -> int:
        if value in self.sets[name]:
            return 0
        self.sets[name].add(value)
        return 1

    def register_script(self, script: str):  # type: ignore[no-untyped-def]
        """Run the push-once script as a single step, as Redis does."""
        self.scripts.append(script)

        def push_once(keys: list[str], args: list[str]) -> int:
            self.script_calls.append((keys, args))
            set_name, queue = keys
            if not self.sadd(set_name, args[0]):
                return 0
            self.lpush(queue, args[0])
            return 1

        return push_once

    def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 0


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()
