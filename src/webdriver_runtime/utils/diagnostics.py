"""Diagnostics and debugging information utility functions."""

import platform
import shutil
import sys
from typing import Optional

import psutil
import selenium

from ..browser.driver import Driver
from ..config.settings import RuntimeConfig
from ..exceptions import error_message


def collect_diagnostics(
    driver: Optional[Driver] = None,
    exc: Optional[BaseException] = None,
    config: Optional[RuntimeConfig] = None,
) -> str:
    """
    Collect diagnostic information about the driver process and environment.

    Args:
        driver: Supervised driver, if one was created
        exc: Exception that occurred (can be None)
        config: Runtime configuration (defaults are assumed if None)

    Returns:
        str: Formatted diagnostic information
    """
    config = config or RuntimeConfig()
    binary = driver.binary_path if driver else config.webdriver.path
    resolved = shutil.which(binary) or "<not found on PATH>"

    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
        f"Driver binary     : {binary}",
        f"Resolved binary   : {resolved}",
        f"Remote URL        : {driver.remote_url if driver else config.webdriver.url}",
        f"Manual start      : {config.webdriver.manual_start}",
        f"Startup timeout   : {config.webdriver.timeout:g}s",
        f"Soft asserts      : {config.soft_asserts}",
    ]

    if driver:
        parts.append(f"Driver state      : {driver.state.value}")
        pid = driver.pid
        parts.append(f"Driver pid        : {pid if pid is not None else '<none>'}")
        if pid is not None:
            parts.append(f"Driver alive      : {psutil.pid_exists(pid) and driver.is_running()}")

    if exc:
        parts += [
            "---- ERROR ----",
            f"Error type        : {type(exc).__name__}",
            f"Error message     : {error_message(exc)}",
        ]

    return "\n".join(parts)


__all__ = ['collect_diagnostics']
