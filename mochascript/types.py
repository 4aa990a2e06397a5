"""Runtime value helpers for MochaScript.

MochaScript has no declared types: a value is a Python int, float, str or
bool. Arithmetic and comparison coerce their operands with `to_number`,
output goes through `to_string`, and branch decisions use `is_truthy`.
"""

from __future__ import annotations

import math
import re
import sys
from typing import Any, Union

Number = Union[int, float]
Scalar = Union[int, float, str, bool]

NAN = float('nan')

# ints past the largest double become Infinity, like every other overflow
FLOAT_LIMIT = int(sys.float_info.max)

INTEGER_TEXT = re.compile(r'[+-]?[0-9]+')
DECIMAL_TEXT = re.compile(r'[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')
INFINITY_TEXT = re.compile(r'[+-]?Infinity')


def clamp_number(value: Number) -> Number:
    """Turn ints too large for a double into a signed Infinity."""
    if isinstance(value, int) and abs(value) > FLOAT_LIMIT:
        return math.inf if value > 0 else -math.inf
    return value


def number_from_text(text: str) -> Number:
    """Read a plain decimal literal; anything else is NaN."""
    if INTEGER_TEXT.fullmatch(text):
        if len(text) > 400:
            # float() saturates to inf instead of hitting the int digit limit
            return float(text)
        return clamp_number(int(text))
    if DECIMAL_TEXT.fullmatch(text):
        return float(text)
    if INFINITY_TEXT.fullmatch(text):
        return -math.inf if text.startswith('-') else math.inf
    return NAN


def to_number(value: Any) -> Number:
    """Coerce a runtime value to a number.

    Booleans become 0/1, numeric strings their value, the empty string 0.
    Anything else that is not a number coerces to NaN.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if text == '':
            return 0
        return number_from_text(text)
    return NAN


def format_float(value: float) -> str:
    text = repr(value)
    if 'e' not in text:
        return text
    mantissa, exponent = text.split('e')
    sign = exponent[0] if exponent[0] in '+-' else '+'
    return f"{mantissa}e{sign}{exponent.lstrip('+-').lstrip('0') or '0'}"


def to_string(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int) and abs(value) > FLOAT_LIMIT:
        value = clamp_number(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return format_float(value)
    if value is None:
        return ''
    return str(value)


def is_truthy(value: Any) -> bool:
    # falsy iff 0, "" or none; `false == 0` so false is falsy too
    if value is None:
        return False
    if isinstance(value, str):
        return value != ''
    if isinstance(value, (int, float)):
        return value != 0
    return True


def to_exit_code(value: Any) -> int:
    number = to_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return int(number)


def type_name(value: Any) -> str:
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if value is None:
        return 'none'
    return type(value).__name__
