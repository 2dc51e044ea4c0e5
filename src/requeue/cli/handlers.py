"""CLI subcommand handlers."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from requeue.config import load_config, validate_config_file
from requeue.exceptions import ConfigError, RequeueError
from requeue.exceptions.validation import format_errors
from requeue.watcher import WatcherService

logger = logging.getLogger(__name__)


def handle_validate_config(args: argparse.Namespace) -> int:
    """Run collect-all validation and report results."""
    errors = validate_config_file(args.config)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0


def handle_simulate(args: argparse.Namespace) -> int:
    """Evaluate one task against a watcher's rules without touching Redis."""
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    watcher = config.watcher_for(args.queue)
    if watcher is None:
        known = ", ".join(w.input_queue for w in config.watchers)
        print(f"Configuration error: no watcher for queue {args.queue!r} (known: {known})", file=sys.stderr)
        return 2

    try:
        results = watcher.ruleset.expand_all(args.task)
    except RequeueError as exc:
        print(f"Rule error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        payload = {
            "input_queue": watcher.input_queue,
            "input_task": args.task,
            "rules": [
                {"name": rule.name, "results": [descriptor.to_dict() for descriptor in descriptors]}
                for rule, descriptors in results
            ],
        }
        print(json.dumps(payload, indent=2))
        return 0

    if not results:
        print(f"No rule matches {args.task!r}")
        return 0
    for rule, descriptors in results:
        print(f"{rule.name}:")
        for descriptor in descriptors:
            line = f"  {descriptor.task} -> {descriptor.queue}"
            if descriptor.set is not None:
                line += f" (set {descriptor.set})"
            print(line)
    return 0


def handle_run(args: argparse.Namespace) -> int:
    """Start the watchers and block until interrupted or a watcher fails."""
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    service = WatcherService(config)
    service.start()
    try:
        service.join()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping watchers")
        service.stop()
        service.join()

    if service.failures:
        print(f"Watcher error: {service.failures[0]}", file=sys.stderr)
        return 1
    return 0
