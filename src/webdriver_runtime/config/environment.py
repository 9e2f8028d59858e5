"""Environment configuration and validation."""

import os

from dotenv import find_dotenv, load_dotenv

from .settings import (
    ElementSettings,
    RuntimeConfig,
    WebDriverConfig,
    parse_duration,
    parse_locator,
)
from ..constants import (
    DEFAULT_DRIVER_PATH,
    DEFAULT_DRIVER_TIMEOUT,
    DEFAULT_DRIVER_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RETRY_TIMEOUT,
)

import logging
logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "True", "yes", "Yes")


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return raw in _TRUTHY


def _env_duration(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return parse_duration(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a valid duration. Using {default:g}s.")
        return default


def get_env_config(load_env_file: bool = True) -> RuntimeConfig:
    """
    Build a RuntimeConfig from environment variables.

    A ``.env`` file found from the current working directory upwards is loaded
    first (existing variables win).

    Optional:   WEBDRIVER_PATH (default 'chromedriver')
                WEBDRIVER_URL (default 'http://localhost:4444')
                WEBDRIVER_TIMEOUT (default '10s')
                WEBDRIVER_MANUAL_START (default off)
                WEBDRIVER_LOG_LEVEL (default 'info')
                WEBDRIVER_SOFT_ASSERTS (default off)
                WEBDRIVER_RAISE_ERRORS_AUTOMATICALLY (default on)
                ELEMENT_POLL_INTERVAL (default '500ms')
                ELEMENT_RETRY_TIMEOUT (default '5s')
                ELEMENT_IGNORE_NOT_FOUND (default off)
                ELEMENT_SELECTOR_TYPE ('css' or 'xpath', default 'css')
    """
    if load_env_file:
        load_dotenv(find_dotenv(filename=".env", usecwd=True))

    selector_raw = (os.getenv("ELEMENT_SELECTOR_TYPE") or "css").strip()
    try:
        selector_type = parse_locator(selector_raw)
    except ValueError:
        raise EnvironmentError(
            f"ELEMENT_SELECTOR_TYPE must be 'css' or 'xpath', got {selector_raw!r}."
        )

    element_settings = ElementSettings(
        poll_interval=_env_duration("ELEMENT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
        retry_timeout=_env_duration("ELEMENT_RETRY_TIMEOUT", DEFAULT_RETRY_TIMEOUT),
        ignore_not_found=_env_flag("ELEMENT_IGNORE_NOT_FOUND", False),
        selector_type=selector_type,
    )

    webdriver = WebDriverConfig(
        path=(os.getenv("WEBDRIVER_PATH") or "").strip() or DEFAULT_DRIVER_PATH,
        url=(os.getenv("WEBDRIVER_URL") or "").strip() or DEFAULT_DRIVER_URL,
        timeout=_env_duration("WEBDRIVER_TIMEOUT", DEFAULT_DRIVER_TIMEOUT),
        manual_start=_env_flag("WEBDRIVER_MANUAL_START", False),
    )

    return RuntimeConfig(
        log_level=(os.getenv("WEBDRIVER_LOG_LEVEL") or "info").strip().lower(),
        soft_asserts=_env_flag("WEBDRIVER_SOFT_ASSERTS", False),
        raise_errors_automatically=_env_flag("WEBDRIVER_RAISE_ERRORS_AUTOMATICALLY", True),
        element_settings=element_settings,
        webdriver=webdriver,
    )
