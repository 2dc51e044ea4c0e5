"""CLI entrypoint for requeue."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from requeue import __version__
from requeue.cli.handlers import handle_run, handle_simulate, handle_validate_config
from requeue.constants.branding import CLI_DESCRIPTION


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="requeue",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Watch the configured queues and re-queue their tasks")
    run.add_argument("-c", "--config", type=Path, required=True, help="Config file (YAML or JSON)")
    run.add_argument("-v", "--verbose", action="store_true", help="Log every rule evaluation")

    validate = subparsers.add_parser("validate-config", help="Validate configuration without running")
    validate.add_argument("-c", "--config", type=Path, required=True, help="Config file (YAML or JSON)")

    simulate = subparsers.add_parser("simulate", help="Show what the rules would make of a task")
    simulate.add_argument("-c", "--config", type=Path, required=True, help="Config file (YAML or JSON)")
    simulate.add_argument("-q", "--queue", required=True, help="Input queue whose rules apply")
    simulate.add_argument("task", help="Task string to evaluate")
    simulate.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    simulate.add_argument("-v", "--verbose", action="store_true", help="Show diagnostics")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return handle_validate_config(args)
    if args.command == "simulate":
        return handle_simulate(args)
    if args.command == "run":
        return handle_run(args)

    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
