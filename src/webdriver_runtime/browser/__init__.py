"""Browser-driver process management."""

from .driver import Driver, DriverState
from .process import get_free_port, kill_process_tree, parse_port

__all__ = [
    "Driver",
    "DriverState",
    "get_free_port",
    "kill_process_tree",
    "parse_port",
]
