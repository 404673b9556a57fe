# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:38:54
# @Author : Kariko Lin

import logging

from .ini import (
    IniDocument,
    IniParser,
    IniSection,
    IniTreeParser,
    InvalidKeyName,
    InvalidSectionName,
    KeyValue,
)

__all__ = [
    'IniDocument', 'IniSection', 'KeyValue',
    'InvalidKeyName', 'InvalidSectionName',
    'IniParser', 'IniTreeParser',
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
