from __future__ import annotations

import sys

import pytest

from otel_zipkin_shipper.mapping.values import array_to_json, attributes_to_json, emit
from otel_zipkin_shipper.models.otel import Attribute


@pytest.fixture
def int_digit_limit():
    if not hasattr(sys, "set_int_max_str_digits"):
        pytest.skip("interpreter has no int to str digit limit")
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield
    sys.set_int_max_str_digits(previous)


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, "true"),
        (False, "false"),
        (-7, "-7"),
        (1.5, "1.5"),
        (100000.0, "100000"),
        (1e21, "1e+21"),
        (float("nan"), "NaN"),
        (float("inf"), "+Inf"),
        (float("-inf"), "-Inf"),
        ("text", "text"),
    ],
)
def test_emit_scalars(value, expected):
    assert emit(value) == expected


def test_json_float_format():
    values = [1e-7, 1e-5, 1e-6, -2.5e-5, 1.234e-10, 1.5, 2.0, 1e20, 1e21]
    assert array_to_json(values) == (
        "[1e-7,0.00001,0.000001,-0.000025,1.234e-10,1.5,2,100000000000000000000,1e+21]"
    )


def test_array_none_members_encode_as_null():
    assert array_to_json([1.5, None]) == "[1.5,null]"
    assert array_to_json(["a", None]) == '["a",null]'
    assert array_to_json([None, True]) == "[null,true]"


def test_array_strings_are_escaped():
    assert array_to_json(['say "hi"', "né"]) == '["say \\"hi\\"","né"]'


def test_event_attribute_small_float():
    attrs = [Attribute(key="ratio", value=1e-5), Attribute(key="tiny", value=1e-7)]
    assert attributes_to_json(attrs) == '{"ratio":0.00001,"tiny":1e-7}'


def test_event_attributes_empty_object():
    assert attributes_to_json([]) == "{}"


def test_huge_int_emits_empty_string(int_digit_limit):
    assert emit(10**5000) == ""


def test_huge_int_array_degrades_to_empty_string(int_digit_limit):
    assert array_to_json([1, 10**5000]) == ""
