# -*- encoding: utf-8 -*-
# @File   : reader.py
# @Time   : 2024/11/03 17:51:26
# @Author : Kariko Lin

"""逐行解析 INI 文本，并合并到（可能已有内容的）文档里。

同名小节再次出现时，不会新建小节，而是接着往原小节后面追加：

    ```ini
    [s]
    a=1

    [t]
    b=2

    ; 这条注释描述的是下面的 [s]
    [s]
    c=3
    ```

`[t]` 末尾那段（以空行隔开的）注释会跟着搬到`[s]`里，`c=3`之前。
"""

import logging
from io import TextIOBase
from typing import TYPE_CHECKING, TextIO

from .coerce import trim
from .consts import NodeKind
from .nodes import BlankLine, SectionHeader, make_node

if TYPE_CHECKING:
    from .model import IniDocument, IniSection


def _ensure_blank_end(section: 'IniSection') -> None:
    if not section.has_trailing_blank():
        section.push_node(BlankLine())


def _push_section(
    ins: 'IniDocument', header: SectionHeader, current: 'IniSection'
) -> 'IniSection':
    """Returns the section to continue with."""
    found = ins.find(header.name)
    if found is None:
        # comments right above the header describe the new section.
        found = ins._append_section(header.name)
        current.pop_trailing_comments(found._leading, prepend=True)
        ins.set_dirty(True)
    elif found is not current:
        # reopened section, continue after its existing content.
        _ensure_blank_end(found)
        current.pop_trailing_comments(found._nodes, prepend=False)
        _ensure_blank_end(found)
    return found


def readstream(buf: TextIOBase | TextIO, ins: 'IniDocument') -> 'IniDocument':
    """读取解码好的字符串流，追加到`ins`中。

    可以对同一个文档多次调用：
    新内容接在最后一个小节之后，并保证与旧内容之间隔着空行。
    """
    this_sect = ins._last_section()
    if this_sect is None:
        this_sect = ins._append_section('', declared=False)
    else:
        _ensure_blank_end(this_sect)

    lineno = 0
    while i := buf.readline():
        lineno += 1
        line = trim(i)
        # whitespaces after the last line break are not a line.
        if not line and not i.endswith('\n'):
            break

        node = make_node(line)
        if node is None:
            logging.debug(f'第 {lineno} 行无法识别，已忽略：{line!r}')
            continue

        if node.kind is NodeKind.SECTION:
            this_sect = _push_section(ins, node, this_sect)
            continue

        if this_sect.push_node(node):
            ins.set_dirty(True)
        else:
            logging.debug(
                f'第 {lineno} 行的键 "{node.name}" 在 [{this_sect.name}] 中重复，'
                '已忽略（以首次出现的为准）。')
    return ins
