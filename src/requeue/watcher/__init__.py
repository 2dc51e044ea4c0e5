"""Redis queue watching."""

from __future__ import annotations

from .service import WatcherService, connect
from .watcher import Watcher

__all__ = ["Watcher", "WatcherService", "connect"]
