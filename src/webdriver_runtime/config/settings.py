"""Settings objects handed to the driver, session and element constructors."""

import re
from dataclasses import dataclass, field
from typing import Any, Union

from selenium.webdriver.common.by import By

from ..constants import (
    DEFAULT_DRIVER_PATH,
    DEFAULT_DRIVER_TIMEOUT,
    DEFAULT_DRIVER_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RETRY_TIMEOUT,
)

import logging
logger = logging.getLogger(__name__)


_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}

LOCATOR_ALIASES = {
    "css": By.CSS_SELECTOR,
    "css selector": By.CSS_SELECTOR,
    "xpath": By.XPATH,
}


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Convert a duration to seconds.

    Numbers are taken as seconds. Strings may carry a unit suffix:
    "500ms", "10s", "1.5m", "1h". A bare numeric string is seconds.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"duration cannot be negative: {value!r}")
        return float(value)
    m = _DURATION_RE.match(str(value))
    if not m:
        raise ValueError(f"invalid duration: {value!r}")
    return float(m.group(1)) * _DURATION_UNITS[m.group(2)]


def is_unset(value: Any) -> bool:
    """Missing, null or empty string. Zero is a real value."""
    return value is None or value == ""


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be an object, got {type(value).__name__}")
    return value


def _get_duration(data: dict, key: str, default: float) -> float:
    value = data.get(key)
    return default if is_unset(value) else parse_duration(value)


def _get_bool(data: dict, key: str, default: bool) -> bool:
    """Read an optional JSON boolean. Anything but true, false or a missing key is a ValueError."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def parse_locator(value: str) -> str:
    """Map a configured selector type ("css", "xpath") onto a WebDriver locator strategy."""
    key = str(value or "").strip().lower()
    if key not in LOCATOR_ALIASES:
        raise ValueError(f"unsupported selector type: {value!r}")
    return LOCATOR_ALIASES[key]


@dataclass(frozen=True)
class ElementSettings:
    """Poll/retry policy snapshot an element is created with."""

    poll_interval: float = DEFAULT_POLL_INTERVAL
    retry_timeout: float = DEFAULT_RETRY_TIMEOUT
    ignore_not_found: bool = False
    selector_type: str = By.CSS_SELECTOR

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.retry_timeout < 0:
            raise ValueError("retry_timeout cannot be negative")
        if self.selector_type not in (By.CSS_SELECTOR, By.XPATH):
            raise ValueError(f"unsupported selector type: {self.selector_type!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "ElementSettings":
        defaults = cls()
        return cls(
            poll_interval=_get_duration(data, "poll_interval", defaults.poll_interval),
            retry_timeout=_get_duration(data, "retry_timeout", defaults.retry_timeout),
            ignore_not_found=_get_bool(data, "ignore_not_found", False),
            selector_type=parse_locator(data.get("selector_type") or "css"),
        )

    def to_dict(self) -> dict:
        return {
            "poll_interval": f"{self.poll_interval:g}s",
            "retry_timeout": f"{self.retry_timeout:g}s",
            "ignore_not_found": self.ignore_not_found,
            "selector_type": "xpath" if self.selector_type == By.XPATH else "css",
        }


@dataclass
class WebDriverConfig:
    """Where the driver binary lives, where it listens and how long it may take to start."""

    path: str = DEFAULT_DRIVER_PATH
    url: str = DEFAULT_DRIVER_URL
    timeout: float = DEFAULT_DRIVER_TIMEOUT
    manual_start: bool = False
    capabilities: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "WebDriverConfig":
        return cls(
            path=data.get("path") or DEFAULT_DRIVER_PATH,
            url=data.get("url") or DEFAULT_DRIVER_URL,
            timeout=_get_duration(data, "timeout", DEFAULT_DRIVER_TIMEOUT),
            manual_start=_get_bool(data, "manual_start", False),
            capabilities=dict(_section(data, "capabilities")),
        )

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "url": self.url,
            "timeout": f"{self.timeout:g}s",
            "manual_start": self.manual_start,
            "capabilities": self.capabilities,
        }


@dataclass
class RuntimeConfig:
    """Top-level configuration consumed by ``WebDriverRuntime``."""

    log_level: str = "info"
    soft_asserts: bool = False
    raise_errors_automatically: bool = True
    element_settings: ElementSettings = field(default_factory=ElementSettings)
    webdriver: WebDriverConfig = field(default_factory=WebDriverConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "RuntimeConfig":
        return cls(
            log_level=str(data.get("logging") or "info"),
            soft_asserts=_get_bool(data, "soft_asserts", False),
            raise_errors_automatically=_get_bool(data, "raise_errors_automatically", True),
            element_settings=ElementSettings.from_dict(_section(data, "element_settings")),
            webdriver=WebDriverConfig.from_dict(_section(data, "webdriver")),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "logging": self.log_level,
            "soft_asserts": self.soft_asserts,
            "raise_errors_automatically": self.raise_errors_automatically,
            "element_settings": self.element_settings.to_dict(),
            "webdriver": self.webdriver.to_dict(),
        }
        return data


__all__ = [
    "ElementSettings",
    "WebDriverConfig",
    "RuntimeConfig",
    "parse_duration",
    "parse_locator",
    "is_unset",
    "LOCATOR_ALIASES",
]
