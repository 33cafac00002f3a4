"""Attribute value coercions shared by the tag, annotation and endpoint mappers.

Zipkin tags are string-to-string, so every typed attribute value needs a
canonical string form. Scalars use `emit`; arrays and event attribute maps are
JSON encoded. JSON output is compact and floats follow the number format of
Go's ``encoding/json``:

- integral floats below 1e21 encode without a trailing ``.0``
  (``[1.0, 2.5]`` becomes ``[1,2.5]``)
- magnitudes in [1e-6, 1e21) are positional (``0.00001``)
- anything smaller or larger uses an exponent without zero padding
  (``1e-7``, ``1e+21``)

Public Functions:
    emit: Canonical string form of a scalar attribute value
    is_array: True for list/tuple attribute values
    array_to_json: JSON list string for an array value ("" on failure)
    attributes_to_json: JSON object string for an event attribute list ("" on failure)

Design Invariant:
    None of these functions raise for attribute values accepted by the input
    model. Values that cannot be encoded (non-finite floats, integers too long
    to print) degrade the affected string to "".
"""
from __future__ import annotations

import json
import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..models.otel import Attribute

logger = logging.getLogger(__name__)

__all__ = ["emit", "is_array", "array_to_json", "attributes_to_json"]

# Beyond this magnitude integral floats switch to exponent notation.
_FLOAT_EXP_THRESHOLD = 1e21
# Below this magnitude JSON floats switch to exponent notation.
_FLOAT_JSON_MIN_POSITIONAL = 1e-6


def _emit_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < _FLOAT_EXP_THRESHOLD:
        return str(int(value))
    return repr(value)


def emit(value: Any) -> str:
    """Return the canonical string emission of a scalar attribute value.

    Booleans render as ``true``/``false``, ints in decimal, floats in their
    shortest round-tripping form and strings verbatim. Arrays are returned as
    JSON (see `array_to_json`).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError as e:
            # past the interpreter's int to str digit limit
            logger.debug("Integer attribute value too long to emit: %s", e)
            return ""
    if isinstance(value, float):
        return _emit_float(value)
    if isinstance(value, str):
        return value
    if is_array(value):
        return array_to_json(value)
    return str(value)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _json_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Out of range float values are not JSON compliant: {value!r}")
    if value.is_integer() and abs(value) < _FLOAT_EXP_THRESHOLD:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if _FLOAT_JSON_MIN_POSITIONAL <= abs(value) < _FLOAT_EXP_THRESHOLD:
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    if exponent.startswith("-0"):
        exponent = "-" + exponent[2:]
    return f"{mantissa}e{exponent}"


def _json_value(value: Any) -> str:
    if isinstance(value, float):
        return _json_float(value)
    if is_array(value):
        return "[" + ",".join(_json_value(v) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def array_to_json(value: Iterable[Any]) -> str:
    try:
        return _json_value(list(value))
    except (TypeError, ValueError) as e:
        logger.debug("JSON encoding of array attribute failed: %s", e)
        return ""


def attributes_to_json(attributes: Iterable[Attribute]) -> str:
    """Encode an attribute list as a flat JSON object.

    Repeated keys resolve last-write-wins and keys are sorted. Values keep
    their native JSON types (numbers, booleans, lists) rather than being
    stringified.
    """
    flat: Dict[str, Any] = {}
    for attr in attributes:
        flat[attr.key] = attr.value
    try:
        members = [
            json.dumps(key, ensure_ascii=False) + ":" + _json_value(flat[key])
            for key in sorted(flat)
        ]
    except (TypeError, ValueError) as e:
        logger.debug("JSON encoding of event attributes failed: %s", e)
        return ""
    return "{" + ",".join(members) + "}"
