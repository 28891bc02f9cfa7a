"""Syncthing GUI health probe."""

import logging

import httpx

logger = logging.getLogger(__name__)

HEALTH_PATH = "/rest/noauth/health"


def gui_url(port, host="localhost"):
    return f"http://{host}:{port}"


async def probe_gui(port, host="127.0.0.1", timeout=5.0, transport=None):
    """Query Syncthing's unauthenticated health endpoint.

    Returns True if the GUI answered ``{"status": "OK"}``.
    """
    url = f"{gui_url(port, host)}{HEALTH_PATH}"
    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            resp = await client.get(url)
        resp.raise_for_status()
        body = resp.json()
        return isinstance(body, dict) and body.get("status") == "OK"
    except (httpx.HTTPError, ValueError) as e:
        logger.debug(f"GUI health probe {url} failed: {e}")
        return False
