"""Shell command execution helpers."""

import asyncio
import logging
import shlex
import shutil

logger = logging.getLogger(__name__)

REQUIRED_COMMANDS = ("podman", "systemctl")


def format_cmd(command):
    """Render an argv list as a copy-pasteable shell string."""
    return shlex.join(command)


async def run_shell_cmd(command, dry_run=False, timeout=600):
    """Run a command and return (returncode, stdout, stderr).

    Args:
        command: list of command arguments
        dry_run: if True, log the command instead of executing
        timeout: maximum seconds to wait for the command

    Returns:
        (returncode, stdout, stderr) tuple
    """
    if dry_run:
        logger.info(f"[dry-run] {format_cmd(command)}")
        return 0, "", ""

    logger.debug(f"$ {format_cmd(command)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.error(f"'{command[0]}' not found. Is it installed and on PATH?")
        return 127, "", f"'{command[0]}' not found"

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        logger.error(f"Command timed out after {timeout}s: {format_cmd(command)}")
        proc.kill()
        await proc.wait()
        return 1, "", ""
    stdout = stdout_bytes.decode(errors="replace") if stdout_bytes else ""
    stderr = stderr_bytes.decode(errors="replace") if stderr_bytes else ""
    return proc.returncode, stdout, stderr


def missing_commands(commands=REQUIRED_COMMANDS):
    """Return the subset of *commands* that cannot be found on PATH."""
    return [cmd for cmd in commands if shutil.which(cmd) is None]


def ensure_prereqs(commands=REQUIRED_COMMANDS):
    """Log an error for every missing command. Returns True if all are present."""
    missing = missing_commands(commands)
    for cmd in missing:
        logger.error(f"Command '{cmd}' not found")
    return not missing
