"""
Conversion of evaluation results to static types.

Results are classified into a closed set of kinds and converted with an
explicit rule per (kind, target) pair:

    int    integer identity, float truncated toward zero, string parsed as
           an integer literal, bool as 1/0
    bool   bool identity, numeric != 0, string "true"/"1"/"yes"/"on" and
           "false"/"0"/"no"/"off"/"" (case-insensitive)
    float  numeric widened, string parsed as a float literal, bool as 1.0/0.0
    string default textual rendering of any value; whole floats drop the
           trailing ".0"

Numeric strings must be plain ASCII literals: no surrounding whitespace,
no "_" separators and no non-ASCII digits.
"""

import math
import numbers
import re
from enum import Enum
from typing import Any

from ..errors import ConversionError


TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})

INT_LITERAL = re.compile(r"[+-]?[0-9]+")
FLOAT_LITERAL = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


class ValueKind(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    OPAQUE = "opaque"


def classify(value: Any) -> ValueKind:
    """Return the kind of a result. bool is checked before int."""
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, numbers.Integral):
        return ValueKind.INT
    if isinstance(value, numbers.Real):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    return ValueKind.OPAQUE


def to_string(value: Any) -> str:
    """Default textual rendering used for concatenation and string results."""
    kind = classify(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)


def to_int(value: Any) -> int:
    kind = classify(value)
    if kind is ValueKind.INT:
        return int(value)
    if kind is ValueKind.BOOL:
        return 1 if value else 0
    if kind is ValueKind.FLOAT:
        try:
            return int(value)
        except (ValueError, OverflowError) as e:
            raise ConversionError(value, "int", str(e)) from e
    if kind is ValueKind.STRING:
        if not INT_LITERAL.fullmatch(value):
            raise ConversionError(value, "int", "not an integer literal")
        return int(value)
    raise ConversionError(value, "int")


def to_bool(value: Any) -> bool:
    kind = classify(value)
    if kind is ValueKind.BOOL:
        return value
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return value != 0
    if kind is ValueKind.STRING:
        lowered = value.lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    raise ConversionError(value, "bool")


def to_float(value: Any) -> float:
    kind = classify(value)
    if kind is ValueKind.BOOL:
        return 1.0 if value else 0.0
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        try:
            return float(value)
        except OverflowError as e:
            raise ConversionError(value, "float", str(e)) from e
    if kind is ValueKind.STRING:
        if not FLOAT_LITERAL.fullmatch(value):
            raise ConversionError(value, "float", "not a float literal")
        return float(value)
    raise ConversionError(value, "float")


CONVERTERS = {
    "string": to_string,
    "int": to_int,
    "bool": to_bool,
    "float": to_float,
}


def convert(value: Any, target: str) -> Any:
    """Convert value to the named target type ("string", "int", "bool" or "float")."""
    try:
        converter = CONVERTERS[target]
    except KeyError:
        raise ValueError(f"unknown conversion target '{target}'") from None
    return converter(value)
