# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/04 00:36:02
# @Author : Kariko Lin

"""File level entries for `IniDocument`.

`IniDocument.load()`/`flush()` only report failures by returning `False`,
while handlers here raise `OSError`, in case you'd rather let it crash.

Split INIs (one "root" file, with others placed around it) could be
merged into a single document via `IniTreeParser.readfiles()`:

    - mod
        - rules.ini
        - ini
            - rules_infantry.ini
            - rules_vehicle.ini

    ```python
    IniTreeParser('mod/rules.ini').readfiles(
        None, 'ini/rules_infantry.ini', 'ini/rules_vehicle.ini')
    ```
"""

from io import StringIO, TextIOBase
from os import PathLike
from os.path import join, split
from typing import TextIO

from ..abstract import FileHandler
from .codec import read_file
from .model import IniDocument
from .reader import readstream


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self, rootfile: str | PathLike[str], encoding: str | None = None
    ) -> None:
        super().__init__(rootfile)
        self._codec = encoding

    @staticmethod
    def readstream(
        buf: TextIOBase | TextIO, ins: IniDocument | None = None
    ) -> IniDocument:
        """读取解码好的字符串流。

        如没有特殊需求，直接调用`self.read()`便是。
        """
        if ins is None:
            ins = IniDocument()
        return readstream(buf, ins)

    def read(self) -> IniDocument:
        """读取`IniParser`实例指定的文件。

        注：欲合并多个拆分 INI，请改用`IniTreeParser`。
        """
        doc = IniDocument(encoding=self._codec)
        if not doc.load(self._fn):
            raise OSError(f'无法读取 INI 文件：{self._fn}')
        return doc

    def write(self, instance: IniDocument) -> None:
        """保存到*一个* INI 文件。

        注：此操作*不会复原*合并过的拆分 INI 树。
        """
        if not instance.flush(self._fn):
            raise OSError(f'无法保存 INI 文件：{self._fn}')

    def __str__(self) -> str:
        return "INI root: " + super().__str__() + f"({self._codec})"


class IniTreeParser(IniParser):
    def __init__(
        self, rootfile: str | PathLike[str], encoding: str | None = None
    ) -> None:
        super().__init__(rootfile, encoding)
        self._root = split(self._fn)[0]

    def readfiles(
        self,
        instance: IniDocument | None = None,
        *splited_stub: str | PathLike[str]
    ) -> IniDocument:
        """除读取`IniTreeParser`实例指定的文件之外（`instance`为`None`时），
        还依次读取`splited_stub`里的拆分 INI，合并进同一个文档。

        注：拆分 INI 的相对路径以根文件所在的文件夹为准。
        """
        if instance is None:
            instance = self.read()
        for i in splited_stub:
            _, text, _ = read_file(join(self._root, i), self._codec)
            instance.parse(StringIO(text, newline=None))
        return instance
