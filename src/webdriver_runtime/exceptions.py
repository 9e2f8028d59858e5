"""Exception types raised by the runtime.

Protocol-level errors reuse Selenium's exception classes (see
``webdriver_runtime.protocol.errors``); the classes here cover the failures
that happen around the protocol: launching the driver, reaching it, and
decoding what it sends back.
"""

from typing import Optional

from selenium.common.exceptions import NoSuchElementException, WebDriverException


class DriverError(WebDriverException):
    """The browser-driver process could not be launched or controlled."""


class DriverLaunchError(DriverError):
    """The driver binary could not be spawned or exited before becoming ready."""


class DriverPortInUseError(DriverError):
    """The driver reported that its port is already bound."""

    def __init__(self, port: int):
        super().__init__(f"Cannot start browser driver. Port {port} is already in use.")
        self.port = port


class DriverStartTimeoutError(DriverError):
    """The driver was spawned but did not report readiness in time."""

    def __init__(self, timeout: float):
        super().__init__(f"failed to start driver within {timeout:g}s")
        self.timeout = timeout


class TransportError(WebDriverException):
    """The HTTP request never produced a response (refused, reset, timed out)."""


class ResponseDecodeError(WebDriverException):
    """The response body could not be decoded into the expected shape."""


class EmptyValueError(WebDriverException):
    """The response envelope carried ``"value": null`` where a value was expected."""


class ElementNotFoundError(NoSuchElementException):
    """No element matched the locator before the retry timeout elapsed."""

    def __init__(self, using: str, selector: str, timeout: float, ignorable: bool = False):
        # Skip NoSuchElementException's documentation suffix.
        WebDriverException.__init__(
            self, f"no element found using {using} {selector!r} within {timeout:g}s"
        )
        self.using = using
        self.selector = selector
        self.timeout = timeout
        # Set when the element was created with ignore_not_found.
        self.ignorable = ignorable


class SoftAssertionError(AssertionError):
    """Aggregated report of the errors a soft-assert session recorded."""


def error_message(exc: BaseException) -> str:
    """Return the human-readable message of an exception without Selenium's 'Message:' framing."""
    msg: Optional[str] = getattr(exc, "msg", None)
    return msg if msg else str(exc)


__all__ = [
    "DriverError",
    "DriverLaunchError",
    "DriverPortInUseError",
    "DriverStartTimeoutError",
    "TransportError",
    "ResponseDecodeError",
    "EmptyValueError",
    "ElementNotFoundError",
    "SoftAssertionError",
    "error_message",
]
