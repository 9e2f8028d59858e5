"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Driver Startup
# ============================================================================

STARTUP_MARKERS = (
    "was started successfully",  # chromedriver
    "Listening on",              # geckodriver
)
"""Output fragments that mean the driver is accepting connections."""

PORT_CONFLICT_MARKERS = (
    "address already in use",
    "address in use",
)
"""Lower-cased output fragments that mean the driver could not bind its port."""

STOP_WAIT_SECS = float(os.getenv("WEBDRIVER_STOP_WAIT_SECS", "5"))
"""Upper bound for waiting on a killed driver process and its output reader."""

STATUS_POLL_INTERVAL = float(os.getenv("WEBDRIVER_STATUS_POLL_INTERVAL", "0.1"))
"""How often the runtime probes /status while waiting for the driver."""


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_DRIVER_PATH = "chromedriver"
DEFAULT_DRIVER_URL = "http://localhost:4444"
DEFAULT_DRIVER_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_RETRY_TIMEOUT = 5.0
DEFAULT_CONFIG_PATH = "webdriverrc.json"

HTTP_TIMEOUT_SECS = float(os.getenv("WEBDRIVER_HTTP_TIMEOUT", "60"))
"""Socket timeout for a single protocol request."""


# ============================================================================
# Wire Protocol
# ============================================================================

ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"
"""W3C web element identifier key."""


__all__ = [
    "STARTUP_MARKERS",
    "PORT_CONFLICT_MARKERS",
    "STOP_WAIT_SECS",
    "STATUS_POLL_INTERVAL",
    "DEFAULT_DRIVER_PATH",
    "DEFAULT_DRIVER_URL",
    "DEFAULT_DRIVER_TIMEOUT",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_RETRY_TIMEOUT",
    "DEFAULT_CONFIG_PATH",
    "HTTP_TIMEOUT_SECS",
    "ELEMENT_KEY",
]
