"""String templates with ``${name}`` placeholders."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property

PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\$\{([^\W\d]\w*)\}")


@dataclass(frozen=True)
class Template:
    """A raw template string rendered against a property map.

    Rendering is a single left-to-right pass: substituted values are never
    rescanned. A placeholder naming an absent property is kept verbatim, so
    ``render`` is total over every mapping.
    """

    src: str

    def render(self, props: Mapping[str, str]) -> str:
        """Return the template with every known placeholder substituted."""

        def _substitute(match: re.Match[str]) -> str:
            value = props.get(match.group(1))
            return match.group(0) if value is None else value

        return PLACEHOLDER_RE.sub(_substitute, self.src)

    @cached_property
    def placeholders(self) -> frozenset[str]:
        """Names referenced by the template."""
        return frozenset(PLACEHOLDER_RE.findall(self.src))

    def __str__(self) -> str:
        return self.src
