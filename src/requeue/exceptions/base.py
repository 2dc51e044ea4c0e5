"""Root of the requeue exception hierarchy."""

from __future__ import annotations


class RequeueError(Exception):
    """Base class for all errors raised by requeue."""
