"""Deploy library: unit generation, folder parsing, lifecycle orchestration."""

from syncdock.deploy.folders import SyncFolder, load_folders, map_to_host, parse_folders
from syncdock.deploy.orchestrate import (
    run_check,
    run_destroy,
    run_install,
    run_restart,
    run_start,
    run_stop,
    run_uninstall,
    run_update,
)
from syncdock.deploy.unit import generate_unit

__all__ = [
    "SyncFolder",
    "generate_unit",
    "load_folders",
    "map_to_host",
    "parse_folders",
    "run_check",
    "run_destroy",
    "run_install",
    "run_restart",
    "run_start",
    "run_stop",
    "run_uninstall",
    "run_update",
]
