# webdriver_runtime/decorators/soft_assert.py

import functools
from typing import Any, Callable

from selenium.common.exceptions import WebDriverException

from ..exceptions import ElementNotFoundError, error_message

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "soft_assertable",
]


def soft_assertable(_func: Callable = None, *, default: Any = None, returns_self: bool = False):
    """
    Route WebDriver failures of a Session/Element command through the session's error policy.

    The decorated method's owner must expose ``session``. When the command raises
    a ``WebDriverException``:
      - an ignorable ElementNotFoundError is recorded on the session and swallowed;
      - otherwise ``session.handle_error`` records it (soft mode) or re-raises it
        (hard mode).
    When the error does not propagate, the wrapper returns ``self`` if
    ``returns_self`` is set (chainable commands), otherwise ``default``.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except WebDriverException as exc:
                if isinstance(exc, ElementNotFoundError) and exc.ignorable:
                    logger.info(f"{fn.__name__}: {error_message(exc)} (ignored)")
                    self.session.add_error(error_message(exc))
                else:
                    self.session.handle_error(exc)
            return self if returns_self else default
        return wrapper

    return decorator if _func is None else decorator(_func)
