# -*- encoding: utf-8 -*-
# @File   : nodes.py
# @Time   : 2024/11/02 22:05:31
# @Author : Kariko Lin

"""INI 文本行对应的节点。

一行文本（去掉头尾空白之后）按以下顺序尝试识别：

    空行 -> 注释（`;`或`#`开头）-> 小节头（`[...]`）-> 键值对（`key=value`）

都识别不了的行直接丢弃，不报错。
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, TextIO

from .coerce import (
    from_text,
    parse_float,
    parse_int,
    plain,
    to_text,
    trim,
    type_of,
)
from .consts import COMMENT_MARKS, KEY_FORBIDDEN_CHARS, NodeKind


class InvalidKeyName(ValueError):
    """Key names can't be empty, contain `;#=` or line breaks,
    nor look like `[section]`."""
    pass


def is_valid_keyname(name: str) -> bool:
    if not name:
        return False
    if any(ch in KEY_FORBIDDEN_CHARS for ch in name):
        return False
    return not (name[0] == '[' and name[-1] == ']')


@dataclass
class BlankLine:
    kind: ClassVar[NodeKind] = NodeKind.BLANK

    @staticmethod
    def matches(line: str) -> bool:
        return not line

    @classmethod
    def try_create(cls, line: str) -> 'BlankLine | None':
        return cls() if cls.matches(line) else None


@dataclass
class Comment:
    text: str
    kind: ClassVar[NodeKind] = NodeKind.COMMENT

    @staticmethod
    def matches(line: str) -> bool:
        return line.startswith(COMMENT_MARKS)

    @classmethod
    def try_create(cls, line: str) -> 'Comment | None':
        return cls(line) if cls.matches(line) else None


@dataclass
class SectionHeader:
    """Only lives while parsing, and as the header placeholder
    when iterating raw nodes of a section."""
    name: str
    kind: ClassVar[NodeKind] = NodeKind.SECTION

    @staticmethod
    def matches(line: str) -> bool:
        return len(line) > 1 and line[0] == '[' and line[-1] == ']'

    @staticmethod
    def normalize(name: str) -> str:
        """`  [ [name] ]] ` -> `name`.

        Repeats until nothing changes, so a stored name normalizes to itself.
        """
        while (stripped := trim(trim(name).rstrip(']').lstrip('['))) != name:
            name = stripped
        return name

    @classmethod
    def try_create(cls, line: str) -> 'SectionHeader | None':
        if not cls.matches(line):
            return None
        return cls(cls.normalize(line))


class KeyValue:
    """键值对节点，同时也是值的读写入口。

    值总是以单行文本存储，读取时再按需转换类型：

        ```python
        kv = doc['Basic']['Speed']
        kv.set(6.5)          # Speed=6.5
        kv.as_type(int)      # 6
        kv.value(1.0)        # 6.5, 空值时才返回 1.0
        kv.try_value(1.0)    # 同上，但空值时会先把 1.0 写进去
        ```

    实际值发生变化时才会通知所属文档"已修改"。
    """
    kind: ClassVar[NodeKind] = NodeKind.KEYVALUE

    def __init__(
        self, name: str, text: str = '', *,
        on_dirty: Callable[[], None] | None = None
    ) -> None:
        self._name = name
        self._text = text
        self._on_dirty = on_dirty

    @staticmethod
    def matches(line: str) -> bool:
        eq = line.find('=')
        return eq > 0 and is_valid_keyname(trim(line[:eq]))

    @classmethod
    def try_create(cls, line: str) -> 'KeyValue | None':
        if not cls.matches(line):
            return None
        key, val = line.split('=', 1)
        return cls(trim(key), trim(val))

    @property
    def name(self) -> str:
        return self._name

    @property
    def text(self) -> str:
        """The raw stored text."""
        return self._text

    def _bind(self, on_dirty: Callable[[], None] | None) -> None:
        self._on_dirty = on_dirty

    def _assign(self, text: str) -> None:
        if text == self._text:
            return
        self._text = text
        if self._on_dirty is not None:
            self._on_dirty()

    def set(self, value: object) -> None:
        """Write `value`, formatted by `coerce.to_text()`.

        Another `KeyValue` copies its text.
        """
        if isinstance(value, KeyValue):
            value = value.text
        self._assign(to_text(value))

    def as_type(self, typ: type = str) -> Any:
        return from_text(self._text, typ)

    def value(self, default: Any) -> Any:
        """Read as the type of `default`, or `default` if empty.

        Storage would never be touched.
        """
        if not self._text:
            return plain(default)
        return from_text(self._text, type_of(default))

    def try_value(self, default: Any) -> Any:
        """Read as the type of `default`.

        If empty, `default` is written first (and the doc gets dirty).
        """
        if not self._text:
            self.set(default)
        return from_text(self._text, type_of(default))

    def __str__(self) -> str:
        return self._text

    def __int__(self) -> int:
        return parse_int(self._text)

    def __float__(self) -> float:
        return parse_float(self._text)

    def __repr__(self) -> str:
        return f'{self._name}={self._text}'


Node = BlankLine | Comment | KeyValue

_NODE_TYPES = (BlankLine, Comment, SectionHeader, KeyValue)


def make_node(line: str) -> Node | SectionHeader | None:
    """`line` shall be trimmed already."""
    for i in _NODE_TYPES:
        if (node := i.try_create(line)) is not None:
            return node
    return None


def write_node(node: Node | SectionHeader, fp: TextIO) -> None:
    match node.kind:
        case NodeKind.BLANK:
            fp.write('\n')
        case NodeKind.COMMENT:
            fp.write(f'{node.text}\n')
        case NodeKind.KEYVALUE:
            fp.write(f'{node.name}={node.text}\n')
        case NodeKind.SECTION:
            if node.name:
                fp.write(f'[{node.name}]\n')


def check_keyname(name: str) -> str:
    """Trim and validate, for explicit key creation / renaming."""
    key = trim(name)
    if not is_valid_keyname(key):
        raise InvalidKeyName(f'无效的键名："{name}"')
    return key


__all__ = [
    'BlankLine', 'Comment', 'SectionHeader', 'KeyValue', 'Node',
    'InvalidKeyName', 'make_node', 'write_node', 'is_valid_keyname',
    'check_keyname',
]
