"""Tests for the tagged value read from response envelopes."""

import pytest

from webdriver_runtime.exceptions import EmptyValueError, ResponseDecodeError
from webdriver_runtime.protocol.envelope import Envelope, ValueKind


@pytest.mark.parametrize("body, expected, kind", [
    ({"value": "abc"}, str, ValueKind.PRESENT),
    ({"value": None}, str, ValueKind.NULL),
    ({"value": 42}, str, ValueKind.WRONG_TYPE),
    ({}, str, ValueKind.ABSENT),
    ({"value": True}, bool, ValueKind.PRESENT),
    ({"value": True}, (int, float), ValueKind.WRONG_TYPE),
    ({"value": [1]}, None, ValueKind.PRESENT),
])
def test_value_kinds(body, expected, kind):
    assert Envelope(200, body).value(expected).kind is kind


def test_unwrap_present_returns_value():
    assert Envelope(200, {"value": "https://example.org/"}).value(str).unwrap() == "https://example.org/"


def test_null_and_absent_are_distinct_errors():
    with pytest.raises(EmptyValueError) as null_info:
        Envelope(200, {"value": None}).value(str).unwrap("page title")
    assert "no value" in null_info.value.msg

    with pytest.raises(ResponseDecodeError) as absent_info:
        Envelope(200, {}).value(str).unwrap("page title")
    assert "no value field" in absent_info.value.msg


def test_wrong_type_reports_the_value():
    with pytest.raises(ResponseDecodeError) as info:
        Envelope(200, {"value": 7}).value(str).unwrap("page title")
    assert "int" in info.value.msg
