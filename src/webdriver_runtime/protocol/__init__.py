"""WebDriver wire protocol: requests, envelopes and error classification."""

from .client import ProtocolClient
from .envelope import Envelope, Value, ValueKind
from .errors import ERROR_CODES, classify_error
from .models import DriverStatus, NewSession, WindowHandle

__all__ = [
    "ProtocolClient",
    "Envelope",
    "Value",
    "ValueKind",
    "ERROR_CODES",
    "classify_error",
    "DriverStatus",
    "NewSession",
    "WindowHandle",
]
