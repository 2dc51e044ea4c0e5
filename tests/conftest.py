"""Shared pytest fixtures for repository-local test data."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest
import yaml

from requeue.exceptions import FetchError


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Return root directory for test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_config_path(fixtures_root: Path) -> Path:
    """Return the sample JSON configuration."""
    return fixtures_root / "requeue.json"


class RecordingSource:
    """Property source returning canned maps and recording its inputs."""

    def __init__(self, results: list[dict[str, str]]) -> None:
        self.results = results
        self.calls: list[dict[str, str]] = []

    def fetch(self, props: Mapping[str, str]) -> list[dict[str, str]]:
        self.calls.append(dict(props))
        return [dict(result) for result in self.results]

    def describe(self) -> str:
        return "recording"


class FailingSource:
    """Property source that always fails."""

    def __init__(self) -> None:
        self.calls = 0

    def fetch(self, props: Mapping[str, str]) -> list[dict[str, str]]:
        self.calls += 1
        raise FetchError("failing", "backend unavailable")

    def describe(self) -> str:
        return "failing"


def _minimal_config(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid config dict, merged with *overrides*."""
    base: dict[str, Any] = {
        "redis": {"url": "redis://127.0.0.1/"},
        "watchers": [
            {
                "input_queue": "trigger",
                "rules": [
                    {
                        "name": "job",
                        "on": r"^job/(?P<id>\d+)$",
                        "make": {"task": "${id}-processed", "queue": "done"},
                    }
                ],
            }
        ],
    }
    base.update(overrides)
    return base


def _write_config(path: Path, data: dict[str, Any]) -> Path:
    """Write *data* as a YAML config file at *path*."""
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path
