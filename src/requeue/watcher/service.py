"""Run one watcher thread per configured input queue."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import redis

from requeue.config.model import RequeueConfig
from requeue.watcher.watcher import Watcher

logger = logging.getLogger(__name__)

type ClientFactory = Callable[[str], redis.Redis]


def connect(url: str) -> redis.Redis:
    """Open a Redis client returning ``str`` values."""
    return redis.Redis.from_url(url, decode_responses=True)


class WatcherService:
    """Own the watchers of a configuration and their threads."""

    def __init__(self, config: RequeueConfig, client_factory: ClientFactory = connect) -> None:
        self.watchers: list[Watcher] = [
            Watcher(
                watcher_config,
                client_factory(config.redis_url),
                listener_channel=config.listener_channel,
            )
            for watcher_config in config.watchers
        ]
        self._threads: list[threading.Thread] = []
        self._failures: list[BaseException] = []

    def start(self) -> None:
        """Start every watcher in its own daemon thread."""
        for watcher in self.watchers:
            thread = threading.Thread(
                target=self._run_watcher,
                args=(watcher,),
                name=f"watcher:{watcher.input_queue}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

    def stop(self) -> None:
        """Ask every watcher to stop."""
        for watcher in self.watchers:
            watcher.stop()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the watcher threads to end."""
        for thread in self._threads:
            thread.join(timeout)

    @property
    def failures(self) -> list[BaseException]:
        """Exceptions that ended a watcher thread."""
        return list(self._failures)

    def _run_watcher(self, watcher: Watcher) -> None:
        try:
            watcher.run()
        except redis.RedisError as exc:
            logger.error("Watcher on %s stopped: %s", watcher.input_queue, exc)
            self._failures.append(exc)
            self.stop()
        except Exception as exc:
            logger.exception("Watcher on %s crashed", watcher.input_queue)
            self._failures.append(exc)
            self.stop()
