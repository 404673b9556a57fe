# -*- encoding: utf-8 -*-
# @File   : coerce.py
# @Time   : 2024/11/03 00:12:47
# @Author : Kariko Lin

"""Text <-> typed value conversions for INI values.

Reading is "best effort" like `atoi()`/`strtod()`:
only the leading numeric part counts,
and garbage (or empty text) simply gives zero, never raises.

Fixed width integers and single precision floats are expressed
with `ctypes` types, so that they wrap just like C casts do.
"""

from ctypes import (
    c_bool,
    c_double,
    c_float,
    c_int,
    c_long,
    c_longdouble,
    c_longlong,
    c_short,
    c_uint,
    c_ulong,
    c_ulonglong,
    c_ushort,
)
from re import IGNORECASE
from re import compile as regex
from typing import Any

from .consts import DOUBLE_PRECISION, FLOAT_PRECISION, NEWLINE_CHARS, SPACE_CHARS

INTEGER_CTYPES = (
    c_short, c_ushort,
    c_int, c_uint,
    c_long, c_ulong,
    c_longlong, c_ulonglong,
)
FLOAT_CTYPES = {
    c_float: FLOAT_PRECISION,
    c_double: DOUBLE_PRECISION,
    c_longdouble: DOUBLE_PRECISION,
}
SUPPORTED_TYPES = (str, bool, int, float, c_bool, *INTEGER_CTYPES, *FLOAT_CTYPES)

_INT_PREFIX = regex(r'[ \t\n\r\f\v]*([+-]?[0-9]+)')
_FLOAT_PREFIX = regex(
    r'[ \t\n\r\f\v]*([+-]?(?:'
    r'(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?'
    r'|inf(?:inity)?|nan))',
    IGNORECASE)

_ASCII_FOLD = str.maketrans(
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')


def fold(name: str) -> str:
    """ASCII-only case folding, for section / key lookups."""
    return name.translate(_ASCII_FOLD)


def trim(text: str) -> str:
    return text.strip(SPACE_CHARS)


def single_line(text: str) -> str:
    """Cut at the first line break, then trim."""
    for i, ch in enumerate(text):
        if ch in NEWLINE_CHARS:
            text = text[:i]
            break
    return trim(text)


def parse_int(text: str) -> int:
    if (m := _INT_PREFIX.match(text)) is None:
        return 0
    return int(m.group(1))


def parse_float(text: str) -> float:
    if (m := _FLOAT_PREFIX.match(text)) is None:
        return 0.0
    return float(m.group(1))


def parse_bool(text: str) -> bool:
    match fold(text):
        case 'true':
            return True
        case 'false':
            return False
        case _:
            return parse_int(text) != 0


def from_text(text: str, typ: type = str) -> Any:
    """Convert stored text to `typ`.

    `typ` may be `str`, `bool`, `int`, `float`
    or one of the `ctypes` types in `SUPPORTED_TYPES`.
    """
    if typ is str:
        return text
    if typ is bool or typ is c_bool:
        return parse_bool(text)
    if typ is int:
        return parse_int(text)
    if typ is float:
        return parse_float(text)
    if typ in INTEGER_CTYPES:
        return typ(parse_int(text)).value
    if typ in FLOAT_CTYPES:
        return typ(parse_float(text)).value
    raise TypeError(f'不支持将 INI 值转换为 {typ!r}。')


def format_float(value: float, precision: int = DOUBLE_PRECISION) -> str:
    return format(value, f'.{precision}g')


def to_text(value: object) -> str:
    """Convert a typed value to its single line text form."""
    # bool before int, since bool IS an int.
    if isinstance(value, (bool, c_bool)):
        flag = value.value if isinstance(value, c_bool) else value
        return 'true' if flag else 'false'
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return format_float(value)
    if type(value) in INTEGER_CTYPES:
        return str(value.value)
    if (precision := FLOAT_CTYPES.get(type(value))) is not None:
        return format_float(value.value, precision)
    return single_line(str(value))


def type_of(default: object) -> type:
    """Which type should `default` be read back as."""
    typ = type(default)
    if typ in SUPPORTED_TYPES:
        return typ
    # subclasses, e.g. `IntEnum` members.
    for i in (bool, int, float):
        if isinstance(default, i):
            return i
    return str


def plain(value: object) -> Any:
    """Unwrap `ctypes` instances into Python values."""
    if type(value) in SUPPORTED_TYPES and hasattr(value, 'value'):
        return value.value
    return value
