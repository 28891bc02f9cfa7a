"""CLI subcommands and the plumbing they share."""

import logging
import sys

import yaml

from syncdock.config import load_config
from syncdock.host.local import make_run_cmd, make_write_file
from syncdock.host.shell import ensure_prereqs

logger = logging.getLogger(__name__)


def load_config_or_exit(args):
    """Load the deployment config named by --config, exiting 1 on any error."""
    try:
        return load_config(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)


def require_prereqs(args):
    """Exit 1 unless podman and systemctl are available (skipped in dry-run)."""
    if args.dry_run:
        return
    if not ensure_prereqs():
        sys.exit(1)


def make_transport(args):
    """Return (run_cmd, write_file) honoring --dry-run."""
    return make_run_cmd(dry_run=args.dry_run), make_write_file(dry_run=args.dry_run)


def exit_on_failure(success):
    if not success:
        sys.exit(1)


def register_commands(subparsers):
    """Register every lifecycle subcommand."""
    from syncdock.commands.check import register_check_command
    from syncdock.commands.lifecycle import register_lifecycle_commands
    from syncdock.commands.service import register_service_commands

    register_lifecycle_commands(subparsers)
    register_service_commands(subparsers)
    register_check_command(subparsers)
