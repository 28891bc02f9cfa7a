"""Shared pytest fixtures for all test modules."""

import json
import logging
import os
import subprocess
import sys

import pytest

from syncdock.config import DeployConfig
from syncdock.host.local import make_write_file

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def home_dir(tmp_path):
    """A throwaway HOME directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def run_cli(project_root, home_dir):
    """Return a callable that invokes the syncdock CLI as a subprocess with HOME=home_dir."""

    def _run(*args, input=None, env=None):
        full_env = {k: v for k, v in os.environ.items() if k != "SYNCDOCK_CONFIG"}
        full_env["HOME"] = str(home_dir)
        full_env.update(env or {})
        result = subprocess.run(
            [sys.executable, "-m", "syncdock.syncdock", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            input=input,
            env=full_env,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


@pytest.fixture
def config(home_dir):
    """A DeployConfig rooted in the temp HOME with no waiting between polls."""
    return DeployConfig(home=home_dir, start_interval=0, stop_grace=0)


@pytest.fixture
def write_file():
    return make_write_file()


@pytest.fixture
def fake_host(config):
    return FakeHost(container_name=config.container_name, unit=config.service_name)


@pytest.fixture(autouse=True)
def _info_logging(caplog):
    caplog.set_level(logging.INFO)


async def no_gui(port):
    """GUI probe stand-in: nothing is listening."""
    return False


@pytest.fixture
def gui_probe():
    return no_gui


# ── Fake podman/systemd host ────────────────────────────────────────


class FakeHost:
    """In-memory stand-in for podman + systemctl --user + loginctl.

    Called like run_cmd. Keeps just enough state to check idempotence:
    which containers exist (and whether they run) and which units are
    enabled/active.

    Set ``start_on_enable = False`` to simulate a container that never
    comes up, ``stop_leaves_container = True`` to simulate an ExecStop
    that leaves the container running, and add argv prefixes to ``fail``
    to make matching commands exit 1.
    """

    def __init__(self, container_name="syncthing", unit="container-syncthing.service"):
        self.container_name = container_name
        self.unit = unit
        self.commands = []
        self.containers = {}
        self.enabled = set()
        self.active = set()
        self.fail = set()
        self.start_on_enable = True
        self.stop_leaves_container = False
        self.linger = True

    def ran(self, *prefix):
        """Commands whose argv starts with *prefix*."""
        return [c for c in self.commands if tuple(c[: len(prefix)]) == prefix]

    def _activate(self, unit):
        self.active.add(unit)
        if self.start_on_enable:
            self.containers[self.container_name] = "running"

    def _deactivate(self, unit):
        self.active.discard(unit)
        if self.container_name in self.containers and not self.stop_leaves_container:
            del self.containers[self.container_name]

    def _ps(self, command):
        include_stopped = "--all" in command
        name_filter = next(a for a in command if a.startswith("name="))
        wanted = name_filter[len("name=^"):-1]
        entries = []
        for name, state in self.containers.items():
            if name != wanted or (state != "running" and not include_stopped):
                continue
            entries.append(
                {
                    "Id": "0123456789abcdef0123",
                    "Names": [name],
                    "Image": "docker.io/syncthing/syncthing:2",
                    "State": state,
                    "Status": "Up 2 seconds" if state == "running" else "Exited (0)",
                    "Ports": [
                        {"host_ip": "", "container_port": 8384, "host_port": 8384, "range": 1, "protocol": "tcp"},
                    ],
                }
            )
        return 0, json.dumps(entries), ""

    async def __call__(self, command, timeout=600, log_output=False, stderr_level=logging.WARNING):
        command = list(command)
        self.commands.append(command)
        for prefix in self.fail:
            if tuple(command[: len(prefix)]) == prefix:
                return 1, "", "simulated failure"

        if command[0] == "podman":
            return self._podman(command[1:])
        if command[:2] == ["systemctl", "--user"]:
            return self._systemctl(command[2:])
        if command[0] == "loginctl":
            return 0, "yes\n" if self.linger else "no\n", ""
        raise AssertionError(f"unexpected command: {command}")

    def _podman(self, args):
        if args[:2] == ["container", "exists"]:
            return (0 if args[2] in self.containers else 1), "", ""
        if args[:2] == ["rm", "-f"]:
            self.containers.pop(args[2], None)
            return 0, "", ""
        if args[0] == "stop":
            name = args[-1]
            if name not in self.containers:
                return 125, "", f"no container with name {name}"
            self.containers[name] = "exited"
            return 0, "", ""
        if args[0] == "ps":
            return self._ps(args)
        if args[0] == "pull":
            return 0, "sha256:abc\n", ""
        if args[0] == "logs":
            return 0, "fatal: cannot bind 0.0.0.0:8384\n", ""
        raise AssertionError(f"unexpected podman command: {args}")

    def _systemctl(self, args):
        verb = args[0]
        if verb == "daemon-reload":
            return 0, "", ""
        if verb == "enable":
            unit = args[-1]
            self.enabled.add(unit)
            if "--now" in args:
                self._activate(unit)
            return 0, "", ""
        if verb == "disable":
            self.enabled.discard(args[-1])
            return 0, "", ""
        if verb in ("start", "restart"):
            self._activate(args[-1])
            return 0, "", ""
        if verb == "stop":
            self._deactivate(args[-1])
            return 0, "", ""
        if verb == "is-enabled":
            return (0 if args[-1] in self.enabled else 1), "", ""
        if verb == "status":
            unit = args[1]
            if unit in self.active:
                return 0, f"● {unit} - Syncthing\n     Active: active (running)\n", ""
            return 3, f"○ {unit}\n     Active: inactive (dead)\n", ""
        raise AssertionError(f"unexpected systemctl command: {args}")
