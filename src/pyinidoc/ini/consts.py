# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/11/02 21:40:12
# @Author : Kariko Lin

from enum import Enum


class NodeKind(int, Enum):
    BLANK = 0x100
    COMMENT = 0x200
    SECTION = 0x300
    KEYVALUE = 0x400


# same as C `isspace()`, NOT `str.strip()` default.
SPACE_CHARS = ' \t\n\r\f\v'
NEWLINE_CHARS = '\r\n'

COMMENT_MARKS = (';', '#')
KEY_FORBIDDEN_CHARS = ';#=' + NEWLINE_CHARS

# significant digits when floats get written back.
FLOAT_PRECISION = 6     # c_float
DOUBLE_PRECISION = 16   # float, c_double, c_longdouble

DEFAULT_CODEC = 'utf-8'
FALLBACK_CODEC = 'gbk'
DETECT_CONFIDENCE = 0.8
