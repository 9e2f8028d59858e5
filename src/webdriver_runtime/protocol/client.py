"""HTTP transport for WebDriver commands."""

import http.client
import json
import urllib.error
import urllib.request
from typing import Any, Callable, Optional, TypeVar

from .envelope import Envelope
from .errors import classify_error
from ..constants import HTTP_TIMEOUT_SECS
from ..exceptions import ResponseDecodeError, TransportError

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json;charset=UTF-8",
}


def _decode_body(raw: bytes) -> Any:
    if not raw.strip():
        return {}
    return json.loads(raw.decode("utf-8"))


class ProtocolClient:
    """
    Sends WebDriver commands to ``base_url`` and decodes the ``{"value": ...}`` envelope.

    The client holds no per-request state, so one instance can be shared by
    every session and thread. It never retries: a transport failure raises
    ``TransportError`` and the caller decides whether to try again.
    """

    def __init__(self, base_url: str, timeout: float = HTTP_TIMEOUT_SECS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def execute_request(self, method: str, path: str, body: Optional[Any] = None) -> Envelope:
        """
        Issue ``method base_url+path`` with an optional JSON body.

        Raises:
            TransportError: no complete HTTP response was received.
            WebDriverException (or a subclass): non-2xx response; the W3C error
                code is on ``exc.error`` and the HTTP status on ``exc.status``.
            ResponseDecodeError: a 2xx response whose body is not a JSON object.
        """
        method = method.upper()
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
        elif method == "POST":
            # W3C requires a JSON object on every POST.
            data = b"{}"

        url = self.base_url + path
        req = urllib.request.Request(url, data=data, method=method, headers=_HEADERS)
        logger.debug(f"{method} {url}")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = resp.status
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                raw = e.read() or b""
            except (http.client.HTTPException, OSError):
                raw = b""
            finally:
                e.close()
            try:
                error_body = _decode_body(raw)
            except (UnicodeDecodeError, ValueError):
                error_body = None
            exc = classify_error(e.code, error_body)
            if error_body is None and raw:
                exc.msg = f"{exc.msg}: {raw[:200].decode('utf-8', 'replace')}"
            logger.debug(f"{method} {path} -> {e.code} {exc.error or ''}")
            raise exc from None
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            # HTTPException covers bodies cut short (IncompleteRead) and malformed status lines.
            reason = getattr(e, "reason", None) or e
            raise TransportError(f"{method} {url} failed: {reason}") from e

        try:
            decoded = _decode_body(raw)
        except (UnicodeDecodeError, ValueError) as e:
            raise ResponseDecodeError(f"{method} {path}: response is not valid JSON: {e}") from e
        if not isinstance(decoded, dict):
            raise ResponseDecodeError(f"{method} {path}: response is not a JSON object: {decoded!r}")

        return Envelope(status=status, body=decoded)

    def execute_request_void(self, method: str, path: str) -> Envelope:
        """Issue a command that takes no body."""
        return self.execute_request(method, path, None)

    def execute_request_custom(
        self,
        method: str,
        path: str,
        body: Optional[Any],
        decode: Callable[[Any], T],
    ) -> T:
        """
        Issue a command and decode its value with ``decode``.

        ``decode`` receives the present value and may raise TypeError, KeyError
        or ValueError on a shape mismatch; those surface as ResponseDecodeError.
        """
        value = self.execute_request(method, path, body).value().unwrap(f"{method} {path}")
        try:
            return decode(value)
        except (TypeError, KeyError, ValueError) as e:
            raise ResponseDecodeError(f"{method} {path}: unexpected response shape: {e}") from e


__all__ = ["ProtocolClient"]
