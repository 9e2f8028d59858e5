"""JSON rc-file loading with defaulting of missing fields."""

import json
from pathlib import Path
from typing import Optional, Union

from .settings import RuntimeConfig, is_unset
from ..constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_DRIVER_PATH,
    DEFAULT_DRIVER_TIMEOUT,
    DEFAULT_DRIVER_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RETRY_TIMEOUT,
)

import logging
logger = logging.getLogger(__name__)


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        value = data[key] = {}
    elif not isinstance(value, dict):
        raise ValueError(f'"{key}" must be a JSON object, got {type(value).__name__}')
    return value


def _fill_defaults(data: dict) -> dict:
    """Default every missing field in place, warning about each one."""
    if not data.get("logging"):
        logger.warning('"logging" is not set. Defaulting to "info".')
        data["logging"] = "info"

    element = _section(data, "element_settings")
    if not element.get("selector_type"):
        logger.warning('"selector_type" is not set. Defaulting to "css".')
        element["selector_type"] = "css"
    if is_unset(element.get("retry_timeout")):
        logger.warning(f'"retry_timeout" is not set. Defaulting to "{DEFAULT_RETRY_TIMEOUT:g}s".')
        element["retry_timeout"] = f"{DEFAULT_RETRY_TIMEOUT:g}s"
    if is_unset(element.get("poll_interval")):
        logger.warning(f'"poll_interval" is not set. Defaulting to "{DEFAULT_POLL_INTERVAL * 1000:g}ms".')
        element["poll_interval"] = f"{DEFAULT_POLL_INTERVAL * 1000:g}ms"

    webdriver = _section(data, "webdriver")
    if not webdriver.get("path"):
        logger.warning(f'"webdriver.path" is not set. Defaulting to "{DEFAULT_DRIVER_PATH}".')
        webdriver["path"] = DEFAULT_DRIVER_PATH
    if is_unset(webdriver.get("timeout")):
        logger.warning(f'"timeout" is not set. Defaulting to "{DEFAULT_DRIVER_TIMEOUT:g}s".')
        webdriver["timeout"] = f"{DEFAULT_DRIVER_TIMEOUT:g}s"
    if not webdriver.get("url"):
        logger.warning(f'"url" is not set. Defaulting to "{DEFAULT_DRIVER_URL}".')
        webdriver["url"] = DEFAULT_DRIVER_URL

    return data


def write_config_file(config: RuntimeConfig, path: Union[str, Path]) -> None:
    """Write the config as indented JSON, replacing the file atomically."""
    p = Path(path)
    tmp = p.with_name(p.name + ".tmp")
    tmp.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    tmp.replace(p)


def load_config_file(path: Optional[Union[str, Path]] = None) -> RuntimeConfig:
    """
    Read a JSON rc file into a RuntimeConfig.

    - If the file does not exist, a default config is written there and returned.
    - Missing fields are defaulted (with a warning) and the completed config is
      written back so the file documents every effective setting.

    Raises:
        ValueError: if the file is not valid JSON or holds invalid values.
    """
    p = Path(path or DEFAULT_CONFIG_PATH)
    if not p.exists():
        logger.info("No config file found. Will create and use default config.")
        config = RuntimeConfig()
        write_config_file(config, p)
        return config

    try:
        data = json.loads(p.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as e:
        raise ValueError(f"failed to parse config file {p}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"config file {p} must contain a JSON object")

    config = RuntimeConfig.from_dict(_fill_defaults(data))
    write_config_file(config, p)
    return config


__all__ = ["load_config_file", "write_config_file"]
