"""systemd helpers: drive the user service manager via systemctl and loginctl."""

import logging

logger = logging.getLogger(__name__)


def _systemctl(*args):
    return ["systemctl", "--user", *args]


async def daemon_reload(run_cmd):
    rc, _, stderr = await run_cmd(_systemctl("daemon-reload"))
    if rc != 0:
        logger.error(f"systemctl --user daemon-reload failed: {stderr.strip()}")
    return rc == 0


async def enable_now(run_cmd, unit):
    """Enable and start *unit*. Returns True on success."""
    rc, _, stderr = await run_cmd(_systemctl("enable", "--now", unit))
    if rc != 0:
        logger.error(f"Failed to enable {unit}: {stderr.strip()}")
    return rc == 0


async def disable(run_cmd, unit):
    """Disable *unit*. Failures are ignored."""
    await run_cmd(_systemctl("disable", unit))


async def start(run_cmd, unit):
    rc, _, stderr = await run_cmd(_systemctl("start", unit))
    if rc != 0:
        logger.error(f"Failed to start {unit}: {stderr.strip()}")
    return rc == 0


async def stop(run_cmd, unit):
    """Stop *unit*. Failures are ignored."""
    await run_cmd(_systemctl("stop", unit))


async def restart(run_cmd, unit):
    rc, _, stderr = await run_cmd(_systemctl("restart", unit))
    if rc != 0:
        logger.error(f"Failed to restart {unit}: {stderr.strip()}")
    return rc == 0


async def is_enabled(run_cmd, unit):
    rc, _, _ = await run_cmd(_systemctl("is-enabled", "--quiet", unit))
    return rc == 0


async def status(run_cmd, unit):
    """Return (returncode, text) of ``systemctl --user status``.

    systemctl exits 3 for an inactive unit and 4 for an unknown one, while
    still printing whatever status it has.
    """
    rc, stdout, stderr = await run_cmd(_systemctl("status", unit, "--no-pager"))
    return rc, (stdout or stderr).rstrip("\n")


async def linger_enabled(run_cmd, user):
    """True if logind keeps *user*'s services running without a session."""
    rc, stdout, _ = await run_cmd(["loginctl", "show-user", user, "--property=Linger", "--value"])
    return rc == 0 and stdout.strip() == "yes"
