"""Polling helpers shared by element resolution and driver readiness probing."""

import time
from typing import Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


def poll_until(
    fn: Callable[[], Optional[T]],
    timeout: float,
    interval: float,
    retry_on: Tuple[Type[BaseException], ...] = (),
) -> T:
    """
    Call ``fn`` until it returns something other than None.

    - ``fn`` raising one of ``retry_on`` counts as "not yet"; anything else propagates.
    - ``fn`` is always called at least once, even when ``timeout`` <= ``interval``.
    - Sleeps never overshoot the deadline, and one last attempt is made at the
      deadline, so a miss is reported between ``timeout`` and
      ``timeout + interval`` after the first call.

    Raises:
        TimeoutError: no result before the deadline. The last retryable
            exception, if any, is chained as ``__cause__``.
    """
    deadline = time.monotonic() + timeout
    last_exc: Optional[BaseException] = None
    attempts = 0

    while True:
        attempts += 1
        try:
            result = fn()
        except retry_on as e:
            last_exc = e
        else:
            if result is not None:
                return result
            last_exc = None

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        time.sleep(min(interval, remaining))

    raise TimeoutError(f"gave up after {attempts} attempt(s) in {timeout:g}s") from last_exc


__all__ = ["poll_until"]
