"""Host access: subprocess execution, local files, podman, systemd, GUI probe."""

from syncdock.host.health import gui_url, probe_gui
from syncdock.host.local import (
    make_dirs,
    make_run_cmd,
    make_write_file,
    remove_file,
    remove_tree,
)
from syncdock.host.podman import ContainerInfo
from syncdock.host.shell import ensure_prereqs, format_cmd, run_shell_cmd

__all__ = [
    "ContainerInfo",
    "ensure_prereqs",
    "format_cmd",
    "gui_url",
    "make_dirs",
    "make_run_cmd",
    "make_write_file",
    "probe_gui",
    "remove_file",
    "remove_tree",
    "run_shell_cmd",
]
