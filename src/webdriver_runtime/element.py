"""Lazily-resolved handles to remote DOM elements."""

from typing import TYPE_CHECKING, Any, Dict, Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
)

from .config.settings import ElementSettings
from .constants import ELEMENT_KEY
from .decorators import soft_assertable
from .exceptions import ElementNotFoundError, ResponseDecodeError, TransportError
from .protocol.envelope import Envelope, ValueKind
from .utils.retry import poll_until

if TYPE_CHECKING:
    from .session import Session

import logging
logger = logging.getLogger(__name__)


class Element:
    """
    A reference to a DOM node located by ``using`` + ``selector``.

    Construction only records the locator. The remote element id is looked up
    on first use, polling every ``settings.poll_interval`` until
    ``settings.retry_timeout`` elapses, and is cached afterwards. A stale
    element reference clears the cache so the next operation looks the node up
    again.

    Locator precedence: explicit ``using``, then explicit ``settings``, then the
    session's current default.
    """

    def __init__(
        self,
        session: "Session",
        selector: str,
        *,
        using: Optional[str] = None,
        settings: Optional[ElementSettings] = None,
    ):
        self.session = session
        self.selector = selector
        self.settings = settings if settings is not None else session.element_settings
        self.using = using or (settings.selector_type if settings is not None else session.locator)
        self._web_id: Optional[str] = None

    def __repr__(self) -> str:
        return f"<Element {self.using}={self.selector!r} id={self._web_id}>"

    @property
    def web_id(self) -> Optional[str]:
        """The cached remote id, or None when unresolved or invalidated."""
        return self._web_id

    def invalidate(self) -> None:
        self._web_id = None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _find_once(self) -> str:
        envelope = self.session.api.execute_request(
            "POST", self.session.path("/element"), {"using": self.using, "value": self.selector}
        )
        reference = envelope.value(dict).unwrap("element reference")
        web_id = reference.get(ELEMENT_KEY)
        if not isinstance(web_id, str) or not web_id:
            raise ResponseDecodeError(f"element reference without {ELEMENT_KEY!r}: {reference!r}")
        return web_id

    def _resolve(self) -> str:
        """
        Return the remote id, looking it up if needed.

        Raises:
            ElementNotFoundError: nothing matched before the retry timeout.
            TransportError: the driver stayed unreachable for the whole timeout.
            WebDriverException: any other protocol error (e.g. invalid selector),
                raised on the attempt that produced it.
        """
        if self._web_id is not None:
            return self._web_id

        try:
            web_id = poll_until(
                self._find_once,
                timeout=self.settings.retry_timeout,
                interval=self.settings.poll_interval,
                retry_on=(NoSuchElementException, TransportError),
            )
        except TimeoutError as e:
            if isinstance(e.__cause__, TransportError):
                raise e.__cause__
            raise ElementNotFoundError(
                self.using,
                self.selector,
                self.settings.retry_timeout,
                ignorable=self.settings.ignore_not_found,
            ) from None

        logger.debug(f"Resolved {self.using} {self.selector!r} to {web_id}")
        self._web_id = web_id
        return web_id

    def _execute(self, method: str, resource: str, body: Optional[Any] = None) -> Envelope:
        web_id = self._resolve()
        path = self.session.path(f"/element/{web_id}{resource}")
        try:
            return self.session.api.execute_request(method, path, body)
        except (StaleElementReferenceException, NoSuchElementException):
            logger.debug(f"Element {web_id} ({self.using} {self.selector!r}) went stale; will re-resolve.")
            self._web_id = None
            raise

    def reference(self) -> Dict[str, str]:
        """W3C element reference, as used in frame switching and script arguments."""
        return {ELEMENT_KEY: self._resolve()}

    def is_present(self) -> bool:
        """Whether the locator matches within the retry timeout. Never records an error."""
        try:
            self._resolve()
        except ElementNotFoundError:
            return False
        return True

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    @soft_assertable(returns_self=True)
    def click(self) -> "Element":
        self._execute("POST", "/click")
        return self

    @soft_assertable(returns_self=True)
    def clear(self) -> "Element":
        self._execute("POST", "/clear")
        return self

    @soft_assertable(returns_self=True)
    def send_keys(self, text: str) -> "Element":
        self._execute("POST", "/value", {"text": text})
        return self

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @soft_assertable(default="")
    def get_text(self) -> str:
        return self._execute("GET", "/text").value(str).unwrap("element text")

    @soft_assertable(default="")
    def get_tag_name(self) -> str:
        return self._execute("GET", "/name").value(str).unwrap("tag name")

    @soft_assertable(default="")
    def get_css_value(self, name: str) -> str:
        return self._execute("GET", f"/css/{name}").value(str).unwrap(f"css value {name!r}")

    @soft_assertable
    def get_attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None when the element has no such attribute."""
        value = self._execute("GET", f"/attribute/{name}").value(str)
        if value.kind is ValueKind.NULL:
            return None
        return value.unwrap(f"attribute {name!r}")

    @soft_assertable
    def get_property(self, name: str) -> Any:
        """Property value of any JSON type; None when the property is null or undefined."""
        value = self._execute("GET", f"/property/{name}").value()
        if value.kind is ValueKind.NULL:
            return None
        return value.unwrap(f"property {name!r}")

    @soft_assertable(default=False)
    def is_displayed(self) -> bool:
        return self._execute("GET", "/displayed").value(bool).unwrap("displayed state")

    @soft_assertable(default=False)
    def is_enabled(self) -> bool:
        return self._execute("GET", "/enabled").value(bool).unwrap("enabled state")

    @soft_assertable(default=False)
    def is_selected(self) -> bool:
        return self._execute("GET", "/selected").value(bool).unwrap("selected state")


__all__ = ["Element"]
