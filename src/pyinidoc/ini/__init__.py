# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:42:09
# @Author : Kariko Lin

from .consts import NodeKind
from .model import IniDocument, IniSection, InvalidSectionName
from .nodes import BlankLine, Comment, InvalidKeyName, KeyValue, SectionHeader
from .parser import IniParser, IniTreeParser

__all__ = [
    'NodeKind',
    'IniDocument', 'IniSection', 'InvalidSectionName',
    'BlankLine', 'Comment', 'KeyValue', 'SectionHeader', 'InvalidKeyName',
    'IniParser', 'IniTreeParser',
]
