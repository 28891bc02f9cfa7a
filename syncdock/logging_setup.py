"""CLI logging setup: plain messages on stdout, prefixed warnings and errors."""

import logging
import sys

_LEVEL_PREFIXES = {
    logging.WARNING: "[!] ",
    logging.ERROR: "[✗] ",
    logging.CRITICAL: "[✗] ",
}


class _CliFormatter(logging.Formatter):
    """INFO/DEBUG render as the bare message; warnings and errors get a marker."""

    def format(self, record):
        return _LEVEL_PREFIXES.get(record.levelno, "") + super().format(record)


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level):
        super().__init__()
        self.max_level = max_level

    def filter(self, record):
        return record.levelno < self.max_level


def setup_cli_logging(verbose=False):
    """Configure the root logger for CLI commands.

    INFO output is identical to print(). Errors go to stderr so scripts can
    separate diagnostics from status text.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()

    formatter = _CliFormatter("%(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_MaxLevelFilter(logging.ERROR))
    root.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
