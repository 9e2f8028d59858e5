"""Configuration management for the WebDriver runtime."""

from .settings import (
    ElementSettings,
    WebDriverConfig,
    RuntimeConfig,
    parse_duration,
    parse_locator,
)

from .environment import get_env_config

from .rcfile import load_config_file, write_config_file

__all__ = [
    "ElementSettings",
    "WebDriverConfig",
    "RuntimeConfig",
    "parse_duration",
    "parse_locator",
    "get_env_config",
    "load_config_file",
    "write_config_file",
]
