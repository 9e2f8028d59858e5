"""
The ``{"value": ...}`` response envelope and the tagged result read from it.

Every WebDriver response wraps its payload in ``value``. Callers need to tell
apart four situations that a plain ``body.get("value")`` conflates:

    PRESENT     the value exists and has the expected type
    NULL        the value is JSON ``null``
    WRONG_TYPE  the value exists but is not of the expected type
    ABSENT      the body has no ``value`` key at all

Transport failures never get this far; they raise ``TransportError``.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Type, Union

from ..exceptions import EmptyValueError, ResponseDecodeError


class ValueKind(enum.Enum):
    PRESENT = "present"
    NULL = "null"
    WRONG_TYPE = "wrong_type"
    ABSENT = "absent"


@dataclass(frozen=True)
class Value:
    """Tagged result of reading an envelope's ``value``."""

    kind: ValueKind
    value: Any = None

    @property
    def present(self) -> bool:
        return self.kind is ValueKind.PRESENT

    def unwrap(self, what: str = "value") -> Any:
        """Return the present value, raising a typed error for every other kind."""
        if self.kind is ValueKind.PRESENT:
            return self.value
        if self.kind is ValueKind.NULL:
            raise EmptyValueError(f"failed to get {what}: no value")
        if self.kind is ValueKind.WRONG_TYPE:
            raise ResponseDecodeError(
                f"failed to get {what}: unexpected {type(self.value).__name__} value {self.value!r}"
            )
        raise ResponseDecodeError(f"failed to get {what}: response has no value field")


_MISSING = object()


@dataclass(frozen=True)
class Envelope:
    """A decoded response: HTTP status plus the JSON body."""

    status: int
    body: dict = field(default_factory=dict)

    @property
    def raw_value(self) -> Any:
        return self.body.get("value")

    def value(self, expected: Optional[Union[Type, Tuple[Type, ...]]] = None) -> Value:
        """Classify ``body["value"]``; ``expected`` restricts what counts as PRESENT."""
        raw = self.body.get("value", _MISSING)
        if raw is _MISSING:
            return Value(ValueKind.ABSENT)
        if raw is None:
            return Value(ValueKind.NULL)
        if expected is not None:
            # bool is an int subclass; do not accept it as a number.
            if not isinstance(raw, expected) or (isinstance(raw, bool) and bool not in _as_tuple(expected)):
                return Value(ValueKind.WRONG_TYPE, raw)
        return Value(ValueKind.PRESENT, raw)


def _as_tuple(expected) -> tuple:
    return expected if isinstance(expected, tuple) else (expected,)


__all__ = ["ValueKind", "Value", "Envelope"]
