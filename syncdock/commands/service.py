"""Service commands: start, stop, restart."""

import asyncio

from syncdock.commands import (
    exit_on_failure,
    load_config_or_exit,
    make_transport,
    require_prereqs,
)
from syncdock.deploy.orchestrate import run_restart, run_start, run_stop


def _run(args, operation, **kwargs):
    config = load_config_or_exit(args)
    require_prereqs(args)
    run_cmd, _ = make_transport(args)
    exit_on_failure(asyncio.run(operation(run_cmd, config, dry_run=args.dry_run, **kwargs)))


def handle_start(args):
    _run(args, run_start)


def handle_stop(args):
    _run(args, run_stop)


def handle_restart(args):
    _run(args, run_restart)


def register_service_commands(subparsers):
    """Register start, stop and restart."""
    parser = subparsers.add_parser("start", help="Start the service")
    parser.set_defaults(func=handle_start)

    parser = subparsers.add_parser("stop", help="Stop the service")
    parser.set_defaults(func=handle_stop)

    parser = subparsers.add_parser("restart", help="Restart the service")
    parser.set_defaults(func=handle_restart)
