"""Lifecycle commands: install, redeploy, update, uninstall, destroy."""

import asyncio
import logging
import sys

from syncdock.commands import (
    exit_on_failure,
    load_config_or_exit,
    make_transport,
    require_prereqs,
)
from syncdock.deploy.orchestrate import run_destroy, run_install, run_uninstall, run_update

logger = logging.getLogger(__name__)

AFFIRMATIVE = {"y", "yes"}


def handle_install(args):
    """Handle the install command."""
    config = load_config_or_exit(args)
    require_prereqs(args)
    run_cmd, write_file = make_transport(args)
    exit_on_failure(asyncio.run(run_install(run_cmd, write_file, config, dry_run=args.dry_run)))


def handle_redeploy(args):
    logger.info("Redeploy (reinstall) requested...")
    handle_install(args)


def handle_update(args):
    config = load_config_or_exit(args)
    require_prereqs(args)
    run_cmd, _ = make_transport(args)
    exit_on_failure(asyncio.run(run_update(run_cmd, config)))


def handle_uninstall(args):
    config = load_config_or_exit(args)
    require_prereqs(args)
    run_cmd, _ = make_transport(args)
    exit_on_failure(asyncio.run(run_uninstall(run_cmd, config, dry_run=args.dry_run)))


def confirm_destroy(config, reader=input):
    """Show the destroy warning and ask for confirmation.

    Only 'y' or 'yes' (any case) counts as consent; EOF declines.
    """
    logger.warning("!" * 60)
    logger.warning("WARNING !!!".center(60))
    logger.warning("!" * 60)
    logger.warning("This command will REMOVE THE SERVICE, CONTAINER AND")
    logger.warning(f"CONFIG/DB in {config.base_dir}")
    logger.warning("(Your personal files in HOME will not be touched)")
    logger.info("")
    try:
        reply = reader("Are you absolutely sure? (y/N) ")
    except EOFError:
        reply = ""
    return reply.strip().lower() in AFFIRMATIVE


def handle_destroy(args):
    """Handle the destroy command: confirm, uninstall, delete config/state."""
    config = load_config_or_exit(args)
    if not confirm_destroy(config):
        logger.info("Aborted.")
        sys.exit(1)
    require_prereqs(args)
    run_cmd, _ = make_transport(args)
    exit_on_failure(asyncio.run(run_destroy(run_cmd, config, dry_run=args.dry_run)))


def register_lifecycle_commands(subparsers):
    """Register install, redeploy, update, uninstall and destroy."""
    parser = subparsers.add_parser(
        "install",
        help="Install Syncthing (create systemd unit and directories)",
    )
    parser.set_defaults(func=handle_install)

    parser = subparsers.add_parser("redeploy", help="Reinstall (alias for install)")
    parser.set_defaults(func=handle_redeploy)

    parser = subparsers.add_parser("update", help="Update image and restart")
    parser.set_defaults(func=handle_update)

    parser = subparsers.add_parser("uninstall", help="Remove service/container (keep configs)")
    parser.set_defaults(func=handle_uninstall)

    parser = subparsers.add_parser("destroy", help="Remove EVERYTHING (including configs)")
    parser.set_defaults(func=handle_destroy)
