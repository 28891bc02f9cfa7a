#!/usr/bin/env python3
"""Syncthing-in-Podman deployment tool: CLI entrypoint."""

import argparse
import sys

from syncdock import __version__
from syncdock.commands import register_commands
from syncdock.logging_setup import setup_cli_logging


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits 1 (not 2) on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = _ArgumentParser(
        prog="syncdock",
        description="Run Syncthing in a rootless Podman container as a systemd user service",
    )
    parser.add_argument("--config", default=None, help="YAML file overriding deployment settings")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every executed command")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")
    register_commands(subparsers)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
