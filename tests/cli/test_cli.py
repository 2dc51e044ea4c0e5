"""Tests for CLI parser and main behavior."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from requeue.cli.main import build_parser, main
from requeue.exceptions import ConfigError, FetchError
from requeue.sources import HttpJsonSource

from ..conftest import _minimal_config, _write_config

SCHEMA_PATH: Path = Path(__file__).resolve().parents[2] / "schemas" / "descriptors.schema.json"


@pytest.fixture()
def descriptors_schema() -> dict[str, Any]:
    """Load the simulate output JSON Schema."""
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_build_parser_simulate_arguments(tmp_path: Path) -> None:
    args = build_parser().parse_args(["simulate", "-c", str(tmp_path / "c.json"), "-q", "trigger", "job/1"])

    assert args.command == "simulate"
    assert args.config == tmp_path / "c.json"
    assert args.queue == "trigger"
    assert args.task == "job/1"
    assert args.format == "text"


def test_build_parser_requires_config() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run"])


def test_validate_config_success(sample_config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["validate-config", "-c", str(sample_config_path)]) == 0

    assert "Configuration is valid." in capsys.readouterr().out


def test_validate_config_reports_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_config(tmp_path / "bad.yaml", _minimal_config(redis={}))

    assert main(["validate-config", "-c", str(path)]) == 2

    assert "[CFG006]" in capsys.readouterr().err


def test_simulate_text_output(sample_config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["simulate", "-c", str(sample_config_path), "-q", "trigger", "job/42"])

    out = capsys.readouterr().out
    assert code == 0
    assert "job-processed:\n  42-processed -> done\n" in out
    assert "  42@eu -> regional/eu (set regional/eu/seen)" in out
    assert "  42@us -> regional/us (set regional/us/seen)" in out


def test_simulate_json_output_matches_schema(
    sample_config_path: Path,
    capsys: pytest.CaptureFixture[str],
    descriptors_schema: dict[str, Any],
) -> None:
    code = main(["simulate", "-c", str(sample_config_path), "-q", "trigger", "--format", "json", "ping/1"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    jsonschema.validate(instance=payload, schema=descriptors_schema)
    assert payload["rules"] == [
        {"name": "<anonymous rule>", "results": [{"task": "ping/1", "queue": "pong", "set": None}]}
    ]


def test_simulate_no_match(sample_config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["simulate", "-c", str(sample_config_path), "-q", "trigger", "nothing"]) == 0

    assert "No rule matches 'nothing'" in capsys.readouterr().out


def test_simulate_unknown_queue(sample_config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["simulate", "-c", str(sample_config_path), "-q", "nope", "job/1"]) == 2

    assert "no watcher for queue 'nope'" in capsys.readouterr().err


def test_simulate_fetch_error_returns_1(monkeypatch, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    def _fail(self: HttpJsonSource, props: dict[str, str]) -> list[dict[str, str]]:
        raise FetchError(self.url.render(props), "HTTP 502")

    monkeypatch.setattr(HttpJsonSource, "fetch", _fail)
    data = _minimal_config()
    data["watchers"][0]["rules"][0]["fetch"] = [{"url": "http://mapping.test/${id}", "returns": "x"}]
    path = _write_config(tmp_path / "requeue.yaml", data)

    assert main(["simulate", "-c", str(path), "-q", "trigger", "job/1"]) == 1

    assert "Rule error: http://mapping.test/1: HTTP 502" in capsys.readouterr().err


def test_run_returns_config_error_code(monkeypatch, capsys) -> None:  # type: ignore[no-untyped-def]
    def _raise(path: Path) -> None:
        raise ConfigError("broken rule")

    monkeypatch.setattr("requeue.cli.handlers.load_config", _raise)

    assert main(["run", "-c", "requeue.json"]) == 2
    assert "Configuration error: broken rule" in capsys.readouterr().err


def test_run_starts_and_joins_service(monkeypatch, sample_config_path: Path) -> None:  # type: ignore[no-untyped-def]
    calls: list[str] = []

    class _Service:
        def __init__(self, config: object) -> None:
            calls.append("init")

        def start(self) -> None:
            calls.append("start")

        def join(self) -> None:
            calls.append("join")

        failures: list[BaseException] = []

    monkeypatch.setattr("requeue.cli.handlers.WatcherService", _Service)

    assert main(["run", "-c", str(sample_config_path)]) == 0
    assert calls == ["init", "start", "join"]
