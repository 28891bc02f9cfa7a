"""syncdock: run Syncthing in a rootless Podman container as a systemd user service."""

__version__ = "0.1.0"
