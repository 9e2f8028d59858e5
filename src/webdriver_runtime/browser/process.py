"""Process and port management."""

import socket
from typing import List
from urllib.parse import urlparse

import psutil

import logging
logger = logging.getLogger(__name__)


def _is_port_open(host: str, port: int, timeout: float = 0.25) -> bool:
    """Check if something is accepting connections on host:port."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def get_free_port() -> int:
    """Get a free port by binding to port 0."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def parse_port(remote_url: str) -> int:
    """
    Extract the explicit port from a remote URL.

    Raises:
        ValueError: if the URL is empty or carries no numeric port.
    """
    if not remote_url:
        raise ValueError(f"remote URL cannot be {remote_url!r}")
    parsed = urlparse(remote_url)
    try:
        port = parsed.port
    except ValueError as e:
        raise ValueError(f"failed to parse port from {remote_url!r}: {e}") from e
    if port is None:
        raise ValueError(f"remote URL {remote_url!r} has no port")
    return port


def kill_process_tree(pid: int) -> List[int]:
    """
    Kill a process and all of its descendants.

    Drivers spawn browsers as children; killing only the driver would leave
    them running. Processes that are already gone are skipped.

    Returns:
        PIDs that were signalled.

    Raises:
        psutil.AccessDenied: if a process exists but may not be killed.
    """
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return []

    try:
        children = parent.children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    killed = []
    for p in [parent] + children:
        try:
            p.kill()
            killed.append(p.pid)
        except psutil.NoSuchProcess:
            continue
    return killed


__all__ = [
    "_is_port_open",
    "get_free_port",
    "parse_port",
    "kill_process_tree",
]
