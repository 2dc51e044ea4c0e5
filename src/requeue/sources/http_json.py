"""HTTP/JSON property source.

Renders a URL template with the task properties, GETs it and reads a JSON
array. Each array element becomes one property map whose keys are prefixed
with the declared ``returns`` name::

    GET http://svc/jobs/42/regions  ->  [{"name": "eu", "zone": 3}]
    returns: region                 ->  [{"region_name": "eu", "region_zone": "3"}]

A scalar element yields a single property named after ``returns`` itself.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from requeue.constants.sources import DEFAULT_HTTP_TIMEOUT_SECONDS, RETURNS_SEPARATOR
from requeue.engine.template import Template
from requeue.exceptions import FetchError
from requeue.types.common import JsonValue, PropertyMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpJsonSource:
    """Fetch property maps from a JSON array served over HTTP."""

    url: Template
    returns: str
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    transport: httpx.BaseTransport | None = field(default=None, compare=False, repr=False)

    def fetch(self, props: Mapping[str, str]) -> list[PropertyMap]:
        """GET the rendered URL and convert the JSON array into property maps."""
        url = self.url.render(props)
        logger.debug("Fetching %s", url)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, f"request failed ({exc})") from exc
        except httpx.InvalidURL as exc:
            raise FetchError(url, f"invalid URL ({exc})") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(url, f"invalid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise FetchError(url, f"expected a JSON array, got {type(payload).__name__}")

        return [self._element_props(element) for element in payload]

    def describe(self) -> str:
        return f"http_json {self.url.src} -> {self.returns}"

    def _element_props(self, element: JsonValue) -> PropertyMap:
        if isinstance(element, dict):
            return {
                f"{self.returns}{RETURNS_SEPARATOR}{key}": _as_property(value) for key, value in element.items()
            }
        return {self.returns: _as_property(element)}


def _as_property(value: Any) -> str:
    """Convert a JSON value to its property string form."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), sort_keys=True)
