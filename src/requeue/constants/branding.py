"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "REQUEUE"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ REQUEUE",
    "     // declarative task rewriting for redis queues",
)
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} task router"))
