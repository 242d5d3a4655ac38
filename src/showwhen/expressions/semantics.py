"""Value semantics for the showwhen expression language.

Expressions compare values the way browser-side condition code does:
- Values fall into six dynamic types: undefined, null, boolean, number,
  string and object (lists and mappings and anything else)
- ``===`` is type-sensitive, ``==`` coerces numbers, strings and booleans
- Relational operators compare strings lexically and everything else numerically
- Truthiness follows the conventional falsy set (false, 0, NaN, '', null, undefined)

Python ``int``, ``float`` and ``Decimal`` are all "number"; ``bool`` never is.
"""

import math
import re
from decimal import Decimal
from typing import Any


class _Undefined:
    """The absent value produced by member access on a non-object."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

NUMBER_TYPES = (int, float, Decimal)
ARRAY_TYPES = (list, tuple)

_NULLISH = ("undefined", "null")

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_RADIX_LITERAL = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def type_of(value: Any) -> str:
    """Return the dynamic type name of a value."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, NUMBER_TYPES):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def is_array(value: Any) -> bool:
    return isinstance(value, ARRAY_TYPES)


def is_nan(value: Any) -> bool:
    # NaN is the only value not equal to itself
    return isinstance(value, NUMBER_TYPES) and value != value


def is_truthy(value: Any) -> bool:
    """Convert a value to boolean.

    Falsy: False, 0, NaN, '', None and UNDEFINED. Everything else is truthy,
    including empty lists and empty mappings.
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, NUMBER_TYPES):
        return not (value == 0 or is_nan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_string(value: Any) -> str:
    """Render a value the way string conversion does in condition code."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, NUMBER_TYPES):
        return _number_to_string(value)
    if isinstance(value, str):
        return value
    return to_string(to_primitive(value))


def _number_to_string(value: int | float | Decimal) -> str:
    if is_nan(value):
        return "NaN"
    if value in (math.inf, -math.inf):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    # Shortest round-tripping digits, laid out with the decimal point at n
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(float(value)))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    mantissa = digits[0] if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{n - 1:+d}"


def to_primitive(value: Any) -> Any:
    """Convert an object to a primitive; primitives are returned unchanged.

    Arrays join their elements with ',' (null and undefined become '');
    every other object becomes '[object Object]'.
    """
    if type_of(value) != "object":
        return value
    if is_array(value):
        return ",".join(
            "" if item is None or item is UNDEFINED else to_string(item)
            for item in value
        )
    return "[object Object]"


def to_number(value: Any) -> int | float | Decimal:
    """Convert a value to a number (NaN when it has no numeric reading)."""
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, NUMBER_TYPES):
        return value
    if isinstance(value, str):
        return _string_to_number(value)
    return to_number(to_primitive(value))


def _string_to_number(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf

    radix = _RADIX_LITERAL.fullmatch(text)
    if radix:
        return float(int(text[2:], _RADIX_BASES[text[1].lower()]))

    if _DECIMAL_LITERAL.fullmatch(text):
        return float(text)

    return math.nan


# -----------------------------------------------------------------------------
# Equality and ordering
# -----------------------------------------------------------------------------


def strict_equals(left: Any, right: Any) -> bool:
    """Equal only if both values have the same dynamic type and value.

    Objects are equal only when they are the same object.
    """
    left_type = type_of(left)
    if left_type != type_of(right):
        return False
    if left_type == "object":
        return left is right
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    """Equality with coercion between numbers, strings, booleans and objects."""
    left_type = type_of(left)
    right_type = type_of(right)

    if left_type == right_type:
        return strict_equals(left, right)

    # null and undefined only equal each other
    if left_type in _NULLISH or right_type in _NULLISH:
        return left_type in _NULLISH and right_type in _NULLISH

    if left_type == "number" and right_type == "string":
        return left == to_number(right)
    if left_type == "string" and right_type == "number":
        return to_number(left) == right

    if left_type == "boolean":
        return loose_equals(to_number(left), right)
    if right_type == "boolean":
        return loose_equals(left, to_number(right))

    if left_type == "object":
        return loose_equals(to_primitive(left), right)
    if right_type == "object":
        return loose_equals(left, to_primitive(right))

    return False


def compare(operator: str, left: Any, right: Any) -> bool:
    """Apply a relational operator (<, <=, >, >=).

    Two strings compare lexically; anything else compares numerically and
    any NaN operand makes the comparison false.
    """
    left = to_primitive(left)
    right = to_primitive(right)

    if not (isinstance(left, str) and isinstance(right, str)):
        left = to_number(left)
        right = to_number(right)
        if is_nan(left) or is_nan(right):
            return False

    if operator == "<":
        return left < right
    if operator == "<=":
        return left <= right
    if operator == ">":
        return left > right
    if operator == ">=":
        return left >= right

    raise ValueError(f"Not a relational operator: {operator}")
