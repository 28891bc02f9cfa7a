"""Syncthing config.xml parsing: configured sync folders."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class SyncFolder:
    """A <folder> declaration from Syncthing's config.xml."""

    id: str
    label: str
    path: str  # as seen inside the container
    real_path: str  # as seen on the host


def map_to_host(path, data_mount, home):
    """Rewrite a container path under *data_mount* to the host home directory.

    Only whole path components match: with data_mount=/data, ``/data/Docs``
    maps to ``<home>/Docs`` but ``/database`` is left alone.
    """
    mount = data_mount.rstrip("/") or "/"
    home = str(home)
    if path == mount:
        return home
    if path.startswith(mount + "/"):
        return home.rstrip("/") + path[len(mount):]
    return path


def parse_folders(config_file, data_mount, home):
    """Return the SyncFolders declared in *config_file*, in document order.

    Returns an empty list (with a warning) if the file is not valid XML.
    """
    try:
        root = ET.parse(config_file).getroot()
    except (ET.ParseError, OSError) as e:
        logger.warning(f"Could not parse {config_file}: {e}")
        return []

    folders = []
    for elem in root.findall("folder"):
        path = elem.get("path", "")
        folders.append(
            SyncFolder(
                id=elem.get("id", ""),
                label=elem.get("label", ""),
                path=path,
                real_path=map_to_host(path, data_mount, home),
            )
        )
    return folders


def load_folders(config):
    """Parse the folders of the deployment's config.xml, or None if it does not exist."""
    config_file = Path(config.syncthing_config_file)
    if not config_file.is_file():
        return None
    return parse_folders(config_file, config.data_mount, config.home)
