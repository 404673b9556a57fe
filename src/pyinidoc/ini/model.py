# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/02 21:58:40
# @Author : Kariko Lin

"""
INI Structure which keeps everything in the text:
blank lines, comments, and the order of sections and keys.

As for reading / merging text, just see `ini.reader`.
"""

import logging
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from io import StringIO, TextIOBase
from os import PathLike, fspath
from typing import Any, TextIO

from .codec import read_file, write_file
from .coerce import fold, trim
from .consts import NEWLINE_CHARS, NodeKind
from .nodes import (
    KeyValue,
    Node,
    SectionHeader,
    check_keyname,
    write_node,
)
from .reader import readstream


class InvalidSectionName(ValueError):
    """Section names can't contain line breaks."""
    pass


class IniSection(MutableMapping[str, KeyValue]):
    """INI 小节。

    按原文顺序维护该小节下的空行、注释、键值对，
    另有一个（忽略大小写的）键名索引，二者始终保持一致。

    `self[key]`在键不存在时会*新建*一个空值的键（但不算修改文档），
    只想判断是否存在的话请用`key in self`或`self.find()`。
    """

    def __init__(
        self, name: str = '', *,
        on_dirty: Callable[[], None] | None = None,
        declared: bool = False
    ) -> None:
        self._name = name
        # comments which describe this section, placed above its header.
        self._leading: list[Node] = []
        self._nodes: list[Node] = []
        self._index: dict[str, KeyValue] = {}
        self._on_dirty = on_dirty
        # whether `[name]` really appears in the text.
        self._declared = declared

    @property
    def name(self) -> str:
        return self._name

    def _notify(self) -> None:
        if self._on_dirty is not None:
            self._on_dirty()

    def _detach(self) -> None:
        """Stop reporting to the owner document, once dropped from it."""
        self._on_dirty = None
        for i in self.keyvalues():
            i._bind(None)

    def find(self, key: str) -> KeyValue | None:
        return self._index.get(fold(trim(key)))

    def get_or_create(self, key: str) -> KeyValue:
        if (kv := self.find(key)) is not None:
            return kv
        kv = KeyValue(check_keyname(key), on_dirty=self._on_dirty)
        self._nodes.append(kv)
        self._index[fold(kv.name)] = kv
        return kv

    def push_node(self, node: Node) -> bool:
        """Append a parsed node.

        Fails if it is a key already in this section (first one wins).
        """
        match node.kind:
            case NodeKind.BLANK | NodeKind.COMMENT:
                self._nodes.append(node)
                return True
            case NodeKind.KEYVALUE:
                if fold(node.name) in self._index:
                    return False
                node._bind(self._on_dirty)
                self._nodes.append(node)
                self._index[fold(node.name)] = node
                return True
            case _:
                return False

    def remove_key(self, key: str) -> bool:
        if (kv := self._index.pop(fold(trim(key)), None)) is None:
            return False
        for idx, i in enumerate(self._nodes):
            if i is kv:
                del self._nodes[idx]
                break
        kv._bind(None)
        self._notify()
        return True

    def rename_key(self, key: str, new_key: str) -> bool:
        """Rename a key, keeping its place.

        Returns:
            `True` if succeed, otherwise `False`.
            May not success if `key` is not found or `new_key` already exists.
        """
        new_key = check_keyname(new_key)
        if (kv := self.find(key)) is None:
            return False
        if new_key == kv.name:
            return True
        other = self._index.get(fold(new_key))
        if other is not None and other is not kv:
            return False

        del self._index[fold(kv.name)]
        kv._name = new_key
        self._index[fold(new_key)] = kv
        self._notify()
        return True

    def has_trailing_blank(self) -> bool:
        return bool(self._nodes) and self._nodes[-1].kind is NodeKind.BLANK

    def pop_trailing_comments(self, dest: list[Node], prepend: bool) -> int:
        """从尾部取出*不属于本小节*的注释，放到`dest`的头部或尾部。

        只有"空行 + 注释"这种被空行隔开的尾部注释才会被取出，
        （最尾端至多容许一个空行）。
        若往回找到了键值对或小节头，说明注释紧贴着本小节的内容，全部放回去。

        Returns:
            取出的节点数量。
        """
        popped: list[Node] = []
        while self._nodes:
            node = self._nodes[-1]
            if node.kind is NodeKind.BLANK:
                if popped:
                    break
                popped.insert(0, self._nodes.pop())
            elif node.kind is NodeKind.COMMENT:
                popped.insert(0, self._nodes.pop())
            else:
                self._nodes.extend(popped)
                popped.clear()
                break
        else:
            # reached the header. the anonymous section has no header.
            if self._name:
                self._nodes.extend(popped)
                popped.clear()

        if prepend:
            dest[:0] = popped
        else:
            dest.extend(popped)
        return len(popped)

    def nodes(self) -> Iterator[Node | SectionHeader]:
        """Raw nodes in text order, the header included (if named)."""
        yield from self._leading
        if self._name:
            yield SectionHeader(self._name)
        yield from self._nodes

    def keyvalues(self) -> Iterator[KeyValue]:
        return (i for i in self._nodes if i.kind is NodeKind.KEYVALUE)

    def is_empty(self) -> bool:
        return not (self._leading or self._nodes or self._declared)

    def write(self, fp: TextIO) -> None:
        for i in self.nodes():
            write_node(i, fp)

    def dumps(self) -> str:
        buf = StringIO()
        self.write(buf)
        return buf.getvalue()

    def __getitem__(self, key: str) -> KeyValue:
        return self.get_or_create(key)

    def __setitem__(self, key: str, value: object) -> None:
        self.get_or_create(key).set(value)

    def __delitem__(self, key: str) -> None:
        if not self.remove_key(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[str]:
        return (i.name for i in self.keyvalues())

    def __str__(self) -> str:
        return f'[{self._name}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self._index))

    def pop(self, key: str, *default: Any) -> Any:
        if (kv := self.find(key)) is None:
            if default:
                return default[0]
            raise KeyError(key)
        self.remove_key(key)
        return kv

    def get(
        self, key: str, converter: type = str, default: Any = None
    ) -> Any:
        """Read without creating the key.

        Missing or empty keys give `default`.
        """
        if (kv := self.find(key)) is None or not kv.text:
            return default
        return kv.as_type(converter)

    def getbool(self, key: str) -> bool | None:
        return self.get(key, bool)


class IniDocument(MutableMapping[str, IniSection]):
    """INI 文件（或字符串流）表示。

        ```ini
        key = val   ; 不属于任何小节的键值对，用 self[''] 访问。

        [section]
        ; comment
        key233 = val666

        [Section]   ; 小节名忽略大小写，这里接着上面的 [section] 继续。
        key114 = val514
        ```

    读写文件请用`load()`/`flush()`，或者直接`with IniDocument(path) as doc:`，
    离开时若有修改会自动保存。
    """

    def __init__(
        self,
        path: str | PathLike[str] | None = None, *,
        encoding: str | None = None
    ) -> None:
        self._sections: list[IniSection] = []
        self._index: dict[str, IniSection] = {}
        self._dirty = False
        # opaque leading bytes, i.e. BOM.
        self.head = b''
        self.path = ''
        self.encoding = encoding
        # what the last `load()` actually decoded with.
        self.codec: str | None = None
        if path is not None:
            self.load(path)

    def is_dirty(self) -> bool:
        return self._dirty

    def set_dirty(self, dirty: bool = True) -> None:
        self._dirty = dirty

    def _mark_dirty(self) -> None:
        self._dirty = True

    @staticmethod
    def _check_name(name: str) -> str:
        if any(ch in NEWLINE_CHARS for ch in name):
            raise InvalidSectionName(f'无效的小节名："{name}"')
        return SectionHeader.normalize(name)

    def _append_section(self, name: str, declared: bool = True) -> IniSection:
        """for `reader.readstream()`."""
        sect = IniSection(name, on_dirty=self._mark_dirty, declared=declared)
        if name:
            self._sections.append(sect)
        else:
            # keys without section shall be written first.
            self._sections.insert(0, sect)
        self._index[fold(name)] = sect
        return sect

    def _last_section(self) -> IniSection | None:
        """for `reader.readstream()`."""
        return self._sections[-1] if self._sections else None

    def _drop_sections(self) -> None:
        for i in self._sections:
            i._detach()
        self._sections.clear()
        self._index.clear()

    def _visible(self) -> Iterator[IniSection]:
        # the anonymous section is a placeholder until it holds anything.
        return (i for i in self._sections if i.name or not i.is_empty())

    def find(self, name: str) -> IniSection | None:
        return self._index.get(fold(SectionHeader.normalize(name)))

    def get_or_create(self, name: str) -> IniSection:
        name = self._check_name(name)
        if (sect := self.find(name)) is not None:
            return sect
        return self._append_section(name, declared=False)

    def rename_section(self, name: str, new_name: str) -> bool:
        """Rename a section.

        Returns:
            `True` if succeed, otherwise `False`.
            May not success if `name` is not found, `new_name` already exists,
            or `new_name` is empty.
        """
        new_name = self._check_name(new_name)
        if not new_name:
            return False
        if (sect := self.find(name)) is None:
            return False
        if new_name == sect.name:
            return True
        other = self._index.get(fold(new_name))
        if other is not None and other is not sect:
            return False

        del self._index[fold(sect.name)]
        sect._name = new_name
        self._index[fold(new_name)] = sect
        self._mark_dirty()
        return True

    def remove_section(self, name: str) -> bool:
        key = fold(SectionHeader.normalize(name))
        if (sect := self._index.pop(key, None)) is None:
            return False
        for idx, i in enumerate(self._sections):
            if i is sect:
                del self._sections[idx]
                break
        sect._detach()
        self._mark_dirty()
        return True

    def section_count(self) -> int:
        return sum(1 for _ in self._visible())

    def section_included(self, name: str) -> bool:
        return self.find(name) is not None

    def key_included(self, section: str, key: str) -> bool:
        sect = self.find(section)
        return sect is not None and key in sect

    def sections(self) -> Iterator[IniSection]:
        return self._visible()

    def __getitem__(self, name: str) -> IniSection:
        return self.get_or_create(name)

    def __setitem__(self, name: str, value: Mapping[str, Any]) -> None:
        """Fill `value` into the section (created if not exists).

        Keys not in `value` stay untouched.
        """
        sect = self.get_or_create(name)
        if value is sect:
            return
        for k, v in value.items():
            sect[k] = v

    def __delitem__(self, name: str) -> None:
        if not self.remove_section(name):
            raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.section_included(name)

    def __len__(self) -> int:
        return self.section_count()

    def __iter__(self) -> Iterator[str]:
        return (i.name for i in self._visible())

    def pop(self, name: str, *default: Any) -> Any:
        if (sect := self.find(name)) is None:
            if default:
                return default[0]
            raise KeyError(name)
        self.remove_section(name)
        return sect

    def clear(self) -> None:
        if self._sections:
            self._mark_dirty()
        self._drop_sections()

    def parse(self, buf: TextIOBase | TextIO) -> 'IniDocument':
        """Append the content of a decoded text stream."""
        return readstream(buf, self)

    def write(self, fp: TextIO) -> None:
        prev: IniSection | None = None
        for sect in self._sections:
            if sect.is_empty():
                continue
            if prev is not None and not prev.has_trailing_blank():
                fp.write('\n')
            sect.write(fp)
            prev = sect

    def dumps(self) -> str:
        buf = StringIO()
        self.write(buf)
        return buf.getvalue()

    def load(self, path: str | PathLike[str]) -> bool:
        """读取 INI 文件，替换当前内容（原内容若有修改，会先保存）。

        读取失败时返回`False`，此时文档为空。
        """
        self.close()
        if not fspath(path):
            return False
        try:
            head, text, codec = read_file(path, self.encoding)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            logging.warning(f'无法读取 INI 文件：\n  {e}')
            return False

        self.path = fspath(path)
        self.head = head
        self.codec = codec
        self.parse(StringIO(text, newline=None))
        self._dirty = False
        return True

    def flush(self, path: str | PathLike[str] | None = None) -> bool:
        """保存到`path`，缺省则保存回`self.path`。

        仅当保存回`self.path`时，才会清除修改标记。
        """
        target = self.path if path is None else fspath(path)
        if not target:
            return False
        try:
            write_file(target, self.head, self.dumps(),
                       self.codec or self.encoding)
        except (OSError, UnicodeEncodeError, LookupError) as e:
            logging.warning(f'无法保存 INI 文件：\n  {e}')
            return False

        if target == self.path:
            self._dirty = False
        return True

    def close(self) -> None:
        """Flush if dirty, then release everything."""
        if self._dirty and self.path:
            self.flush()
        self._drop_sections()
        self.head = b''
        self.path = ''
        self.codec = None
        self._dirty = False

    def __enter__(self) -> 'IniDocument':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return self.dumps()

    def __repr__(self) -> str:
        return f'<IniDocument "{self.path}" {{ .sections = {len(self)} }}>'
