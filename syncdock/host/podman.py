"""Podman helpers: query and mutate containers through the podman CLI.

Container listings are read from ``podman ps --format json`` rather than
from the human-readable table.
"""

import json
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

PULL_TIMEOUT = 1800


@dataclass
class ContainerInfo:
    """One entry of ``podman ps --format json``."""

    id: str
    names: list[str] = field(default_factory=list)
    image: str = ""
    state: str = ""
    status: str = ""
    ports: list[dict] = field(default_factory=list)

    @classmethod
    def from_json(cls, d: dict) -> "ContainerInfo":
        names = d.get("Names") or []
        if isinstance(names, str):
            names = [names]
        return cls(
            id=d.get("Id", ""),
            names=list(names),
            image=d.get("Image", ""),
            state=d.get("State", ""),
            status=d.get("Status", ""),
            ports=d.get("Ports") or [],
        )

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def ports_display(self) -> str:
        return format_ports(self.ports)


def format_ports(ports):
    """Render podman port mappings like ``0.0.0.0:8384->8384/tcp``."""
    rendered = []
    for p in ports:
        host_ip = p.get("host_ip") or "0.0.0.0"
        host_port = p.get("host_port")
        container_port = p.get("container_port")
        protocol = p.get("protocol", "tcp")
        if host_port:
            rendered.append(f"{host_ip}:{host_port}->{container_port}/{protocol}")
        else:
            rendered.append(f"{container_port}/{protocol}")
    return ", ".join(rendered)


def parse_ps_json(stdout, name=None):
    """Parse ``podman ps --format json`` output into ContainerInfo entries.

    If *name* is given, only containers with exactly that name are kept
    (podman's ``name=`` filter is a regex match).
    """
    if not stdout.strip():
        return []
    try:
        entries = json.loads(stdout)
    except json.JSONDecodeError as e:
        logger.warning(f"Could not parse podman output: {e}")
        return []
    containers = [ContainerInfo.from_json(e) for e in entries or []]
    if name is not None:
        containers = [c for c in containers if name in c.names]
    return containers


async def list_containers(run_cmd, name, include_stopped=False):
    """List containers named *name*; only running ones unless include_stopped."""
    command = ["podman", "ps"]
    if include_stopped:
        command.append("--all")
    command += ["--filter", f"name=^{name}$", "--format", "json"]
    rc, stdout, _ = await run_cmd(command)
    if rc != 0:
        return []
    return parse_ps_json(stdout, name=name)


async def is_container_running(run_cmd, name):
    return bool(await list_containers(run_cmd, name))


async def container_exists(run_cmd, name):
    rc, _, _ = await run_cmd(["podman", "container", "exists", name])
    return rc == 0


async def remove_container(run_cmd, name):
    """Force-remove a container. Failures are ignored."""
    await run_cmd(["podman", "rm", "-f", name])


async def stop_container(run_cmd, name, timeout=10):
    """Stop a container. Failures are ignored."""
    await run_cmd(["podman", "stop", "-t", str(timeout), name])


async def pull_image(run_cmd, image):
    """Pull *image*. Returns True on success."""
    rc, _, _ = await run_cmd(["podman", "pull", image], timeout=PULL_TIMEOUT, log_output=True)
    return rc == 0


async def show_logs(run_cmd, name, tail=20):
    """Relay the last *tail* lines of the container's log output.

    podman logs replays the container's stderr on stderr, so both streams
    are relayed at INFO.
    """
    await run_cmd(
        ["podman", "logs", "--tail", str(tail), name],
        timeout=60,
        log_output=True,
        stderr_level=logging.INFO,
    )
