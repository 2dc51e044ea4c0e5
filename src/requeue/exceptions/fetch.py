"""Property source exceptions."""

from __future__ import annotations

from requeue.exceptions.base import RequeueError


class FetchError(RequeueError):
    """Raised when a property source cannot produce its property maps.

    ``source`` describes the failing source (for HTTP sources, the rendered URL).
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
