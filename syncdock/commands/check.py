"""Check command: report service, container, directory and folder status."""

import asyncio

from syncdock.commands import exit_on_failure, load_config_or_exit, make_transport, require_prereqs
from syncdock.deploy.orchestrate import run_check


def handle_check(args):
    """Handle the check/status command."""
    config = load_config_or_exit(args)
    require_prereqs(args)
    run_cmd, _ = make_transport(args)
    exit_on_failure(asyncio.run(run_check(run_cmd, config, dry_run=args.dry_run)))


def register_check_command(subparsers):
    parser = subparsers.add_parser("check", aliases=["status"], help="Check status")
    parser.set_defaults(func=handle_check)
