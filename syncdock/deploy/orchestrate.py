"""Deploy orchestration: install, update, start, stop, restart, check, uninstall, destroy.

Every operation takes a ``run_cmd`` callable
(``async (argv, timeout=600, log_output=False, stderr_level=WARNING) -> (rc, stdout, stderr)``)
so the same sequencing runs against the real host, in dry-run mode, or
against a fake in tests. Operations return True on success.
"""

import asyncio
import getpass
import logging
import os

from syncdock.deploy.folders import load_folders
from syncdock.deploy.unit import generate_unit
from syncdock.host import podman, systemd
from syncdock.host.health import gui_url, probe_gui
from syncdock.host.local import make_dirs, remove_file, remove_tree

logger = logging.getLogger(__name__)


# ── Best-effort cleanup ───────────────────────────────────────────


async def _remove_service_if_exists(run_cmd, config, dry_run=False, disable=False):
    if not os.path.isfile(config.unit_path):
        return
    logger.info(f"Removing service file ({config.service_name})...")
    await systemd.stop(run_cmd, config.service_name)
    if disable:
        await systemd.disable(run_cmd, config.service_name)
    remove_file(config.unit_path, dry_run=dry_run)


async def _remove_container_if_exists(run_cmd, config):
    if await podman.container_exists(run_cmd, config.container_name):
        logger.info(f"Removing old container ({config.container_name})...")
        await podman.remove_container(run_cmd, config.container_name)


# ── Reporting helpers ─────────────────────────────────────────────


async def _check_linger(run_cmd, dry_run=False):
    if dry_run:
        return
    user = getpass.getuser()
    if await systemd.linger_enabled(run_cmd, user):
        logger.info(f"Linger already enabled for {user}.")
        return
    logger.warning("Linger is NOT enabled.")
    logger.warning("Run as root:")
    logger.warning(f"  sudo loginctl enable-linger {user}")


def _print_post_install_notes(config):
    logger.info("")
    logger.info("Syncthing configured and started!")
    logger.info("")
    logger.info("GUI:")
    logger.info(f"   {gui_url(config.gui_port)}")
    logger.info("")
    logger.info("Folder Structure:")
    logger.info(f"   Config: {config.config_dir}")
    logger.info(f"   State:  {config.state_dir}")
    logger.info(f"   Data:   {config.home} (Mapped to {config.data_mount} in Syncthing)")
    logger.info("")
    logger.info("NOTE:")
    logger.info(f"   Syncthing will see your HOME at {config.data_mount}.")
    logger.info(f"   In Syncthing GUI, when adding folders, use paths starting with {config.data_mount}/")
    logger.info(f"   Example: {config.data_mount}/Documents")
    logger.info("")


async def _wait_for_container(run_cmd, config, dry_run=False):
    """Poll until the container is running. Returns False after start_attempts tries."""
    for attempt in range(config.start_attempts):
        if dry_run:
            return True
        if await podman.is_container_running(run_cmd, config.container_name):
            return True
        if attempt < config.start_attempts - 1:
            await asyncio.sleep(config.start_interval)
    return False


# ── Operations ────────────────────────────────────────────────────


async def run_install(run_cmd, write_file, config, dry_run=False):
    """Regenerate the unit, (re)create the container, and wait for it to run."""
    logger.info("Preparing directories...")
    try:
        make_dirs(config.config_dir, dry_run=dry_run)
        make_dirs(config.state_dir, dry_run=dry_run)
    except OSError as e:
        logger.error(f"Failed to create directories: {e}")
        return False

    await _remove_service_if_exists(run_cmd, config, dry_run=dry_run)
    await _remove_container_if_exists(run_cmd, config)

    logger.info(f"Creating systemd service file at {config.unit_path}...")
    try:
        await write_file(config.unit_path, generate_unit(config))
    except OSError as e:
        logger.error(f"Failed to write {config.unit_path}: {e}")
        return False

    logger.info("Enabling service...")
    if not await systemd.daemon_reload(run_cmd):
        return False
    if not await systemd.enable_now(run_cmd, config.service_name):
        return False

    logger.info("Waiting for initialization...")
    if await _wait_for_container(run_cmd, config, dry_run=dry_run):
        logger.info("Container started successfully.")
        await _check_linger(run_cmd, dry_run=dry_run)
        _print_post_install_notes(config)
        return True

    timeout = config.start_attempts * config.start_interval
    logger.info("")
    logger.error(f"FAILURE: Container did not start within {timeout:g} seconds.")
    logger.info("Container logs (if any):")
    await podman.show_logs(run_cmd, config.container_name, tail=config.log_tail)
    logger.info("")
    logger.error(f"Check service status: systemctl --user status {config.service_name}")
    return False


async def run_update(run_cmd, config):
    """Pull the configured image and restart the unit to pick it up."""
    logger.info(f"Updating image {config.image}...")
    if not await podman.pull_image(run_cmd, config.image):
        logger.error(f"Failed to pull {config.image}")
        return False

    if not await systemd.is_enabled(run_cmd, config.service_name):
        logger.warning(f"Service {config.service_name} is not enabled; skipping restart.")
        logger.warning("Run 'syncdock install' to deploy it.")
        return True

    logger.info("Restarting service to apply new image...")
    if not await systemd.restart(run_cmd, config.service_name):
        return False
    logger.info("Update complete.")
    return True


async def run_start(run_cmd, config, dry_run=False, probe=probe_gui):
    logger.info(f"Starting service {config.service_name}...")
    if not await systemd.start(run_cmd, config.service_name):
        return False
    logger.info("Start command sent.")
    return await run_check(run_cmd, config, dry_run=dry_run, probe=probe)


async def run_stop(run_cmd, config, dry_run=False):
    """Stop the unit, then force-stop the container if it outlived ExecStop."""
    logger.info(f"Stopping service {config.service_name}...")
    await systemd.stop(run_cmd, config.service_name)

    if not dry_run:
        await asyncio.sleep(config.stop_grace)

    if await podman.is_container_running(run_cmd, config.container_name):
        logger.info("Container still running, forcing stop...")
        await podman.stop_container(run_cmd, config.container_name, timeout=config.stop_timeout)

    logger.info("Stop complete.")
    return True


async def run_restart(run_cmd, config, dry_run=False, probe=probe_gui):
    logger.info(f"Restarting service {config.service_name}...")
    if not await systemd.restart(run_cmd, config.service_name):
        return False
    return await run_check(run_cmd, config, dry_run=dry_run, probe=probe)


async def run_check(run_cmd, config, dry_run=False, probe=probe_gui):
    """Print service, container, directory, GUI and folder status."""
    logger.info("Checking status...")

    logger.info("--- Systemd Service ---")
    rc, text = await systemd.status(run_cmd, config.service_name)
    if text:
        logger.info(text)
    if rc != 0:
        logger.info("Service is not running.")

    logger.info("")
    logger.info("--- Container ---")
    containers = await podman.list_containers(run_cmd, config.container_name, include_stopped=True)
    if containers:
        logger.info(f"{'CONTAINER ID':<14}{'IMAGE':<40}{'STATUS':<24}PORTS")
        for c in containers:
            logger.info(f"{c.short_id:<14}{c.image:<40}{c.status or c.state:<24}{c.ports_display}")
    else:
        logger.info(f"No container named '{config.container_name}'.")

    logger.info("")
    logger.info("--- Directories ---")
    if os.path.isdir(config.config_dir):
        logger.info(f"Config: OK ({config.config_dir})")
    else:
        logger.info("Config: MISSING")
    if os.path.isdir(config.state_dir):
        logger.info(f"State:  OK ({config.state_dir})")
    else:
        logger.info("State:  MISSING")

    logger.info("")
    logger.info("--- GUI ---")
    url = gui_url(config.gui_port)
    if dry_run:
        logger.info(f"[dry-run] probe {url}")
    elif await probe(config.gui_port):
        logger.info(f"GUI: OK ({url})")
    else:
        logger.info(f"GUI: UNREACHABLE ({url})")

    logger.info("")
    logger.info("--- Configured Folders ---")
    folders = load_folders(config)
    if folders is None:
        logger.info(f"Config file not found: {config.syncthing_config_file}")
    elif not folders:
        logger.info("No folders configured.")
    for folder in folders or []:
        logger.info(f"Label:     {folder.label}")
        logger.info(f"ID:        {folder.id}")
        logger.info(f"Sync Path: {folder.path}")
        logger.info(f"Real Path: {folder.real_path}")
        logger.info("-------------------------")
    return True


async def run_uninstall(run_cmd, config, dry_run=False):
    """Remove the unit and container. Configuration and state are kept."""
    logger.info("Uninstall requested...")
    await run_stop(run_cmd, config, dry_run=dry_run)
    await _remove_service_if_exists(run_cmd, config, dry_run=dry_run, disable=True)

    # ExecStopPost normally removes it already
    await podman.remove_container(run_cmd, config.container_name)
    if not await systemd.daemon_reload(run_cmd):
        return False

    logger.info("Uninstall complete.")
    logger.warning(f"Configuration data remains in: {config.base_dir}")
    return True


async def run_destroy(run_cmd, config, dry_run=False):
    """Uninstall, then delete the config/state tree. Caller must confirm first."""
    if not await run_uninstall(run_cmd, config, dry_run=dry_run):
        return False

    if os.path.isdir(config.base_dir):
        logger.info(f"Removing config/state directory: {config.base_dir}")
        try:
            remove_tree(config.base_dir, dry_run=dry_run)
        except OSError as e:
            logger.error(f"Failed to remove {config.base_dir}: {e}")
            return False
        logger.info("Removed.")
    return True
