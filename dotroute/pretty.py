"""
Literal rendering of handler return values.

The value printer mimics a JavaScript object-literal dump rather than JSON:
mapping keys are unquoted when they are identifiers, strings are single-quoted,
and every non-empty container is expanded one item per line with a two-space
indent:

    [
      {
        name: 'two',
        status: 'executed'
      }
    ]

Scalars
- str   → 'text' (double quotes when the text holds ' but no ")
- bool  → true / false
- None  → null
- int   → 3
- float → integral values drop the fraction (2.0 → 2), NaN, Infinity, -Infinity

Containers
- Mapping, dataclass instances and named tuples render as objects.
- list / tuple render as arrays.
- anything else falls back to repr().
"""
import dataclasses
import math
import re
from collections.abc import Mapping

INDENT = "  "

_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


def _quote(text):
    quote = '"' if "'" in text and '"' not in text else "'"
    escaped = "".join(_ESCAPES.get(char, char) for char in text)
    if quote == "'":
        escaped = escaped.replace("'", "\\'")
    return quote + escaped + quote


def _number(number):
    if isinstance(number, bool):
        return "true" if number else "false"
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _key(key):
    if isinstance(key, str) and re.fullmatch(r"[A-Za-z_$][\w$]*", key):
        return key
    if isinstance(key, int | float) and not isinstance(key, bool):
        return _number(key)
    return _quote(str(key))


def _items(value):
    """
    Return (pairs, True) for object-like values, (items, False) for arrays, or None.
    """
    if isinstance(value, Mapping):
        return list(value.items()), True
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return list(value._asdict().items()), True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(field.name, getattr(value, field.name)) for field in dataclasses.fields(value)], True
    if isinstance(value, list | tuple):
        return list(value), False
    return None


def _format(value, depth):
    if value is None:
        return "null"
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, bool | int | float):
        return _number(value)

    if (shape := _items(value)) is None:
        return repr(value)

    items, keyed = shape
    opening, closing = "{}" if keyed else "[]"
    if not items:
        return opening + closing

    inner = INDENT * (depth + 1)
    if keyed:
        lines = ["%s%s: %s" % (inner, _key(key), _format(item, depth + 1)) for key, item in items]
    else:
        lines = ["%s%s" % (inner, _format(item, depth + 1)) for item in items]
    return "%s\n%s\n%s%s" % (opening, ",\n".join(lines), INDENT * depth, closing)


def pformat(value, /):
    """
    Render a value as a JavaScript-style literal (see module docstring).
    """
    return _format(value, 0)


__all__ = (
    "INDENT",
    "pformat",
)
