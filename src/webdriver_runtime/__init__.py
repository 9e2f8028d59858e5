"""
Client runtime for driving a browser through the W3C WebDriver protocol.

A ``Driver`` launches and supervises the local browser-driver process, a
``ProtocolClient`` sends commands to it, and ``Session``/``Element`` give test
code a soft- or hard-failing surface on top.

## Error Handling

Sessions run in hard mode by default: any failed command raises. In soft mode
(``soft_asserts``) failures are recorded on the session and reported together
by ``Session.raise_errors()``; ``WebDriverRuntime.quit()`` raises them as a
``SoftAssertionError`` when ``raise_errors_automatically`` is on.

## Elements

Elements are lazy. Creating one sends nothing; the first operation looks the
node up, polling until ``retry_timeout``. A stale element reference drops the
cached id so the next operation looks it up again.
"""

from .config import ElementSettings, RuntimeConfig, WebDriverConfig, get_env_config, load_config_file
from .browser import Driver, DriverState
from .element import Element
from .exceptions import (
    DriverError,
    DriverLaunchError,
    DriverPortInUseError,
    DriverStartTimeoutError,
    ElementNotFoundError,
    EmptyValueError,
    ResponseDecodeError,
    SoftAssertionError,
    TransportError,
)
from .protocol import ProtocolClient, Envelope, Value, ValueKind
from .runtime import WebDriverRuntime
from .session import Session

__all__ = [
    "ElementSettings",
    "RuntimeConfig",
    "WebDriverConfig",
    "get_env_config",
    "load_config_file",
    "Driver",
    "DriverState",
    "Element",
    "DriverError",
    "DriverLaunchError",
    "DriverPortInUseError",
    "DriverStartTimeoutError",
    "ElementNotFoundError",
    "EmptyValueError",
    "ResponseDecodeError",
    "SoftAssertionError",
    "TransportError",
    "ProtocolClient",
    "Envelope",
    "Value",
    "ValueKind",
    "WebDriverRuntime",
    "Session",
]
