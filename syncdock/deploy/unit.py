"""systemd unit file generation."""

from syncdock.config import (
    CONTAINER_CONFIG_DIR,
    CONTAINER_DISCOVERY_PORT,
    CONTAINER_GUI_PORT,
    CONTAINER_STATE_DIR,
    CONTAINER_SYNC_PORT,
)


def generate_unit(config):
    """Build the container service unit from the deployment config.

    The container is started in the foreground by ``podman run --replace``
    so systemd supervises it directly; ExecStopPost removes it again.
    """
    podman = config.podman_path
    name = config.container_name

    return f"""[Unit]
Description=Syncthing (Podman, explicit config/data)
Wants=network-online.target
After=network-online.target

[Service]
Restart=always
TimeoutStopSec=60
Environment=PODMAN_SYSTEMD_UNIT=%n

ExecStart={podman} run \\
  --name {name} \\
  --replace \\
  --userns=keep-id \\
  --security-opt label=disable \\
  --unsetenv STHOMEDIR \\
  -v {config.config_dir}:{CONTAINER_CONFIG_DIR} \\
  -v {config.state_dir}:{CONTAINER_STATE_DIR} \\
  -v {config.home}:{config.data_mount} \\
  -p {config.gui_port}:{CONTAINER_GUI_PORT} \\
  -p {config.sync_tcp_port}:{CONTAINER_SYNC_PORT}/tcp \\
  -p {config.sync_udp_port}:{CONTAINER_SYNC_PORT}/udp \\
  -p {config.discovery_udp_port}:{CONTAINER_DISCOVERY_PORT}/udp \\
  {config.image} \\
    --config={CONTAINER_CONFIG_DIR} \\
    --data={CONTAINER_STATE_DIR} \\
    --gui-address=0.0.0.0:{CONTAINER_GUI_PORT}

ExecStop={podman} stop -t {config.stop_timeout} {name}
ExecStopPost={podman} rm -f {name}

[Install]
WantedBy=default.target
"""
