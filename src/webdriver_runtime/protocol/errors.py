"""Mapping of W3C WebDriver error codes onto Selenium's exception classes."""

from typing import Any, Optional

from selenium.common.exceptions import (
    DetachedShadowRootException,
    ElementClickInterceptedException,
    ElementNotInteractableException,
    InsecureCertificateException,
    InvalidArgumentException,
    InvalidCookieDomainException,
    InvalidElementStateException,
    InvalidSelectorException,
    InvalidSessionIdException,
    JavascriptException,
    MoveTargetOutOfBoundsException,
    NoAlertPresentException,
    NoSuchCookieException,
    NoSuchElementException,
    NoSuchFrameException,
    NoSuchShadowRootException,
    NoSuchWindowException,
    ScreenshotException,
    SessionNotCreatedException,
    StaleElementReferenceException,
    TimeoutException,
    UnableToSetCookieException,
    UnexpectedAlertPresentException,
    UnknownMethodException,
    WebDriverException,
)

# Mirrors selenium.webdriver.remote.errorhandler (ErrorCode + ErrorHandler.check_response),
# keyed by W3C code string only. Extend it when selenium adds a W3C error code.
ERROR_CODES = {
    "detached shadow root": DetachedShadowRootException,
    "element click intercepted": ElementClickInterceptedException,
    "element not interactable": ElementNotInteractableException,
    "insecure certificate": InsecureCertificateException,
    "invalid argument": InvalidArgumentException,
    "invalid cookie domain": InvalidCookieDomainException,
    "invalid element state": InvalidElementStateException,
    "invalid selector": InvalidSelectorException,
    "invalid session id": InvalidSessionIdException,
    "javascript error": JavascriptException,
    "move target out of bounds": MoveTargetOutOfBoundsException,
    "no such alert": NoAlertPresentException,
    "no such cookie": NoSuchCookieException,
    "no such element": NoSuchElementException,
    "no such frame": NoSuchFrameException,
    "no such shadow root": NoSuchShadowRootException,
    "no such window": NoSuchWindowException,
    "script timeout": TimeoutException,
    "session not created": SessionNotCreatedException,
    "stale element reference": StaleElementReferenceException,
    "timeout": TimeoutException,
    "unable to capture screen": ScreenshotException,
    "unable to set cookie": UnableToSetCookieException,
    "unexpected alert open": UnexpectedAlertPresentException,
    "unknown method": UnknownMethodException,
}
"""W3C error code -> exception class. Codes not listed map to WebDriverException."""


def classify_error(status: int, body: Any) -> WebDriverException:
    """
    Build the exception for a non-2xx response.

    The returned exception carries ``error`` (the W3C code, or None when the
    body holds no error payload) and ``status`` (the HTTP status).
    """
    payload = body.get("value") if isinstance(body, dict) else None
    code: Optional[str] = None
    message = f"HTTP {status}"
    stacktrace = None

    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        code = payload["error"]
        message = payload.get("message") or code
        raw_trace = payload.get("stacktrace")
        if isinstance(raw_trace, str) and raw_trace:
            stacktrace = raw_trace.splitlines()

    cls = ERROR_CODES.get(code or "", WebDriverException)
    exc = cls(msg=message, stacktrace=stacktrace)
    exc.error = code
    exc.status = status
    return exc


__all__ = ["ERROR_CODES", "classify_error"]
