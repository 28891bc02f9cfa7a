"""Local transport: run commands and write or remove files on this host."""

import asyncio
import logging
import os
import shutil

from syncdock.host.shell import format_cmd, run_shell_cmd

logger = logging.getLogger(__name__)


def make_run_cmd(dry_run=False):
    """Create a run_cmd callable for local execution.

    The callable takes an argv list and returns (returncode, stdout, stderr).
    With log_output=True each output line is relayed through the logger as
    it arrives (stdout at INFO, stderr at *stderr_level*) and still collected.
    """

    async def run_cmd(command, timeout=600, log_output=False, stderr_level=logging.WARNING):
        if dry_run or not log_output:
            return await run_shell_cmd(command, dry_run=dry_run, timeout=timeout)

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

        stdout_lines, stderr_lines = [], []

        async def _read_stream(pipe, lines, level):
            async for raw_line in pipe:
                line = raw_line.decode(errors="replace").rstrip("\n")
                logger.log(level, line)
                lines.append(line)

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _read_stream(proc.stdout, stdout_lines, logging.INFO),
                    _read_stream(proc.stderr, stderr_lines, stderr_level),
                    proc.wait(),
                ),
                timeout=timeout,
            )
        except TimeoutError:
            logger.error(f"Command timed out after {timeout}s: {format_cmd(command)}")
            proc.kill()
            await proc.wait()
            return 1, "", ""
        return proc.returncode, "\n".join(stdout_lines), "\n".join(stderr_lines)

    return run_cmd


def make_write_file(dry_run=False):
    """Create a write_file callable for local file writes."""

    async def write_file(path, content):
        path = str(path)
        if dry_run:
            logger.info(f"[dry-run] write {path}")
            return
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            f.write(content)

    return write_file


def make_dirs(path, dry_run=False):
    """mkdir -p, logged instead of executed in dry-run mode."""
    if dry_run:
        logger.info(f"[dry-run] mkdir -p {path}")
        return
    os.makedirs(path, exist_ok=True)


def remove_file(path, dry_run=False):
    """Remove a file if it exists. Returns True if something was (or would be) removed."""
    if not os.path.isfile(path):
        return False
    if dry_run:
        logger.info(f"[dry-run] remove {path}")
        return True
    os.remove(path)
    return True


def remove_tree(path, dry_run=False):
    """Recursively remove a directory if it exists."""
    if not os.path.isdir(path):
        return False
    if dry_run:
        logger.info(f"[dry-run] remove {path}")
        return True
    shutil.rmtree(path)
    return True
