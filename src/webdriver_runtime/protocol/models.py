"""Structured results for endpoints that return objects rather than scalars."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DriverStatus:
    """Body of ``GET /status``."""

    ready: bool
    message: str = ""

    @classmethod
    def from_value(cls, value: Any) -> "DriverStatus":
        if not isinstance(value, dict) or not isinstance(value.get("ready"), bool):
            raise ValueError(f"status value must be an object with a boolean 'ready': {value!r}")
        return cls(ready=value["ready"], message=str(value.get("message") or ""))


@dataclass(frozen=True)
class WindowHandle:
    """A browser window or tab, as returned by ``POST /session/{id}/window/new``."""

    handle: str
    type: str

    @classmethod
    def from_value(cls, value: Any) -> "WindowHandle":
        if not isinstance(value, dict):
            raise TypeError(f"window value must be an object: {value!r}")
        return cls(handle=str(value["handle"]), type=str(value.get("type") or ""))


@dataclass(frozen=True)
class NewSession:
    """Body of ``POST /session``."""

    session_id: str
    capabilities: dict

    @classmethod
    def from_value(cls, value: Any) -> "NewSession":
        if not isinstance(value, dict):
            raise TypeError(f"session value must be an object: {value!r}")
        return cls(
            session_id=str(value["sessionId"]),
            capabilities=dict(value.get("capabilities") or {}),
        )


__all__ = ["DriverStatus", "WindowHandle", "NewSession"]
