"""
WebDriver session: the remote session id, default locator strategy and the
soft-assertion error log.

Commands on a session either raise on failure (hard mode, the default) or
record the failure and carry on (soft mode). ``raise_errors()`` turns the
recorded failures into one report, in the order they happened.

A Session is not safe for concurrent mutation; share one across threads only
with external locking.
"""

import base64
import binascii
import io
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image
from selenium.common.exceptions import ScreenshotException
from selenium.webdriver.common.by import By

from .config.settings import ElementSettings
from .decorators import soft_assertable
from .element import Element
from .exceptions import ResponseDecodeError, error_message
from .protocol.client import ProtocolClient
from .protocol.models import WindowHandle

import logging
logger = logging.getLogger(__name__)

SCREENSHOT_SUFFIXES = (".png", ".jpg", ".jpeg")


class Session:
    def __init__(
        self,
        session_id: str,
        api: ProtocolClient,
        *,
        soft_asserts: bool = False,
        element_settings: Optional[ElementSettings] = None,
    ):
        self._id = session_id
        self.api = api
        self.soft_asserts = soft_asserts
        self.element_settings = element_settings or ElementSettings()
        self._locator = self.element_settings.selector_type
        self._errors: List[str] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def session(self) -> "Session":
        return self

    @property
    def locator(self) -> str:
        """Locator strategy given to elements created from now on."""
        return self._locator

    def path(self, resource: str = "") -> str:
        return f"/session/{self._id}{resource}"

    def __repr__(self) -> str:
        return f"<Session {self._id} locator={self._locator!r} errors={len(self._errors)}>"

    # ------------------------------------------------------------------
    # Error log
    # ------------------------------------------------------------------

    def add_error(self, msg: str) -> None:
        self._errors.append(msg)

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(self._errors)

    def raise_errors(self) -> str:
        """
        Return every recorded error joined by newlines, or "" when there are none.

        The log is not cleared; repeated calls report the same errors until
        ``reset_errors()`` is called.
        """
        return "\n".join(self._errors)

    def reset_errors(self) -> List[str]:
        """Drain the error log and return what it held."""
        drained, self._errors = self._errors, []
        return drained

    def handle_error(self, exc: BaseException) -> None:
        """Record ``exc`` in soft mode; re-raise it in hard mode."""
        if not self.soft_asserts:
            raise exc
        msg = error_message(exc)
        logger.warning(f"Soft assertion failed: {msg}")
        self._errors.append(msg)

    # ------------------------------------------------------------------
    # Locators and elements
    # ------------------------------------------------------------------

    def use_css(self) -> None:
        self._locator = By.CSS_SELECTOR

    def use_xpath(self) -> None:
        self._locator = By.XPATH

    def element(self, selector: str, settings: Optional[ElementSettings] = None) -> Element:
        """Create a lazy element handle; nothing is sent until it is used."""
        return Element(self, selector, settings=settings)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _get_string(self, resource: str, what: str) -> str:
        return self.api.execute_request_void("GET", self.path(resource)).value(str).unwrap(what)

    @soft_assertable(returns_self=True)
    def open_url(self, url: str) -> "Session":
        self.api.execute_request("POST", self.path("/url"), {"url": url})
        return self

    @soft_assertable(default="")
    def get_current_url(self) -> str:
        return self._get_string("/url", "current URL")

    @soft_assertable(returns_self=True)
    def refresh(self) -> "Session":
        self.api.execute_request_void("POST", self.path("/refresh"))
        return self

    @soft_assertable(returns_self=True)
    def back(self) -> "Session":
        self.api.execute_request_void("POST", self.path("/back"))
        return self

    @soft_assertable(returns_self=True)
    def forward(self) -> "Session":
        self.api.execute_request_void("POST", self.path("/forward"))
        return self

    @soft_assertable(default="")
    def get_title(self) -> str:
        return self._get_string("/title", "page title")

    # ------------------------------------------------------------------
    # Windows and frames
    # ------------------------------------------------------------------

    @soft_assertable(default="")
    def get_window_handle(self) -> str:
        return self._get_string("/window", "window handle")

    @soft_assertable(default=())
    def get_window_handles(self) -> Tuple[str, ...]:
        values = self.api.execute_request_void("GET", self.path("/window/handles")).value(list).unwrap("window handles")
        return tuple(v for v in values if isinstance(v, str))

    @soft_assertable(returns_self=True)
    def close_window(self) -> "Session":
        """Close the current window. The driver ends the session when the last one closes."""
        self.api.execute_request_void("DELETE", self.path("/window"))
        return self

    @soft_assertable(returns_self=True)
    def switch_handle(self, handle: str) -> "Session":
        self.api.execute_request("POST", self.path("/window"), {"handle": handle})
        return self

    @soft_assertable
    def new_tab(self) -> Optional[WindowHandle]:
        return self._new_window("tab")

    @soft_assertable
    def new_window(self) -> Optional[WindowHandle]:
        return self._new_window("window")

    def _new_window(self, handle_type: str) -> WindowHandle:
        return self.api.execute_request_custom(
            "POST", self.path("/window/new"), {"type": handle_type}, WindowHandle.from_value
        )

    @soft_assertable(returns_self=True)
    def switch_to_frame(self, element: Optional[Element] = None) -> "Session":
        """Switch into the iframe ``element``, or to the top-level context when None."""
        frame_id = element.reference() if element is not None else None
        self.api.execute_request("POST", self.path("/frame"), {"id": frame_id})
        return self

    @soft_assertable(returns_self=True)
    def switch_to_parent_frame(self) -> "Session":
        self.api.execute_request_void("POST", self.path("/frame/parent"))
        return self

    # ------------------------------------------------------------------
    # Screenshots
    # ------------------------------------------------------------------

    @soft_assertable(returns_self=True)
    def take_screenshot(self, name: str, directory: Union[str, Path] = ".") -> "Session":
        """
        Save a screenshot of the current browsing context to ``directory/name``.

        The name must end with .png, .jpg or .jpeg; JPEG files are re-encoded
        from the PNG the driver returns.
        """
        lowered = name.lower()
        if not lowered.endswith(SCREENSHOT_SUFFIXES):
            raise ScreenshotException("screenshot name must end with .png, .jpg or .jpeg")

        payload = self._get_string("/screenshot", "screenshot")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ResponseDecodeError(f"failed to decode screenshot: {e}") from e

        target = Path(directory) / name
        try:
            if lowered.endswith(".png"):
                target.write_bytes(data)
            else:
                with Image.open(io.BytesIO(data)) as img:
                    img.convert("RGB").save(target, "JPEG", quality=100)
        except OSError as e:
            raise ScreenshotException(f"failed to write screenshot {target}: {e}") from e

        logger.info(f"Screenshot saved to {target}")
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @soft_assertable
    def delete(self) -> None:
        """End the remote session."""
        self.api.execute_request_void("DELETE", self.path())
        logger.info(f"Session {self._id} deleted.")


__all__ = ["Session", "SCREENSHOT_SUFFIXES"]
