"""Deployment configuration: defaults plus optional YAML overrides."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SYNCDOCK_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/syncdock/config.yaml"

# Container-side ports and mount points baked into the image's defaults.
CONTAINER_GUI_PORT = 8384
CONTAINER_SYNC_PORT = 22000
CONTAINER_DISCOVERY_PORT = 21027
CONTAINER_CONFIG_DIR = "/config"
CONTAINER_STATE_DIR = "/state"

_PATH_FIELDS = ("home", "base_dir", "systemd_user_dir")


def _expand_path(path) -> Path:
    """Expand user home directory and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(str(path))))


def _check_path_type(name, value):
    if not isinstance(value, (str, os.PathLike)):
        raise ValueError(f"{name} must be a path string, got {value!r}")


@dataclass(frozen=True)
class DeployConfig:
    """Everything one deployment needs. Read once, never mutated."""

    container_name: str = "syncthing"
    service_basename: str = "container-syncthing"
    image: str = "docker.io/syncthing/syncthing:2"

    gui_port: int = 8384
    sync_tcp_port: int = 22000
    sync_udp_port: int = 22000
    discovery_udp_port: int = 21027

    home: Path = field(default_factory=Path.home)
    base_dir: Path | None = None  # default: <home>/.local/share/syncthing
    systemd_user_dir: Path | None = None  # default: <home>/.config/systemd/user
    data_mount: str = "/data"  # where <home> appears inside the container

    podman_path: str = "/usr/bin/podman"
    start_attempts: int = 20
    start_interval: float = 1.0
    stop_grace: float = 2.0
    stop_timeout: int = 10
    log_tail: int = 20

    def __post_init__(self):
        for name in _PATH_FIELDS:
            value = getattr(self, name)
            if value is not None:
                _check_path_type(name, value)
        # Frozen dataclass: derived defaults go through object.__setattr__.
        object.__setattr__(self, "home", _expand_path(self.home))
        if self.base_dir is None:
            object.__setattr__(self, "base_dir", self.home / ".local" / "share" / "syncthing")
        else:
            object.__setattr__(self, "base_dir", _expand_path(self.base_dir))
        if self.systemd_user_dir is None:
            object.__setattr__(self, "systemd_user_dir", self.home / ".config" / "systemd" / "user")
        else:
            object.__setattr__(self, "systemd_user_dir", _expand_path(self.systemd_user_dir))
        self.validate()

    @property
    def service_name(self) -> str:
        return f"{self.service_basename}.service"

    @property
    def config_dir(self) -> Path:
        return self.base_dir / "config"

    @property
    def state_dir(self) -> Path:
        return self.base_dir / "state"

    @property
    def unit_path(self) -> Path:
        return self.systemd_user_dir / self.service_name

    @property
    def syncthing_config_file(self) -> Path:
        """Syncthing's own config.xml inside the config directory."""
        return self.config_dir / "config.xml"

    def validate(self) -> None:
        """Raise ValueError for values that would produce a broken unit."""
        for name in ("gui_port", "sync_tcp_port", "sync_udp_port", "discovery_udp_port"):
            port = getattr(self, name)
            if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
                raise ValueError(f"{name} must be an integer between 1 and 65535, got {port!r}")
        for name in ("start_attempts", "stop_timeout", "log_tail"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        for name in ("start_interval", "stop_grace"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {value!r}")
        for name in ("container_name", "service_basename", "image", "data_mount", "podman_path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value or any(c.isspace() for c in value):
                raise ValueError(f"{name} must be a non-empty string without whitespace, got {value!r}")
        if not self.data_mount.startswith("/"):
            raise ValueError(f"data_mount must be an absolute container path, got {self.data_mount!r}")
        for name in _PATH_FIELDS:
            if not getattr(self, name).is_absolute():
                raise ValueError(f"{name} must be an absolute path, got '{getattr(self, name)}'")

    @classmethod
    def from_dict(cls, d: dict) -> "DeployConfig":
        """Build a DeployConfig from an override mapping (keys are field names)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(
                f"Unknown config key(s): {', '.join(unknown)}. Valid keys: {', '.join(sorted(known))}"
            )
        kwargs = {}
        for key, value in d.items():
            if key in _PATH_FIELDS and value is not None:
                _check_path_type(key, value)
                value = _expand_path(value)
            kwargs[key] = value
        return cls(**kwargs)


def resolve_config_path(explicit=None):
    """Pick the override file: --config, then $SYNCDOCK_CONFIG, then the default if present.

    Returns (path, required). A missing file is only an error when it was
    named explicitly.
    """
    if explicit:
        return _expand_path(explicit), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _expand_path(env_path), True
    default = _expand_path(DEFAULT_CONFIG_PATH)
    return default, False


def load_config(config_path=None) -> DeployConfig:
    """Load the deployment configuration, applying YAML overrides if any."""
    path, required = resolve_config_path(config_path)
    if not path.is_file():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return DeployConfig()

    with open(path) as f:
        overrides = yaml.safe_load(f)
    if overrides is None:
        overrides = {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a YAML mapping")

    logger.debug(f"Loaded config overrides from {path}")
    return DeployConfig.from_dict(overrides)
