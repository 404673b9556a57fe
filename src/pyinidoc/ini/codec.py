# -*- encoding: utf-8 -*-
# @File   : codec.py
# @Time   : 2024/11/03 15:27:05
# @Author : Kariko Lin

"""Bytes <-> text for INI files.

The leading BOM (if any) is kept as an opaque "head" blob,
and would be written back as is, ahead of the encoded body.
"""

import logging
from codecs import (
    BOM_UTF8,
    BOM_UTF16_BE,
    BOM_UTF16_LE,
    BOM_UTF32_BE,
    BOM_UTF32_LE,
)
from os import PathLike, fspath

import chardet

from .consts import DEFAULT_CODEC, DETECT_CONFIDENCE, FALLBACK_CODEC

# UTF-32 LE shall be checked before UTF-16 LE, they share the prefix.
BOM_CODECS = (
    (BOM_UTF32_LE, 'utf-32-le'),
    (BOM_UTF32_BE, 'utf-32-be'),
    (BOM_UTF8, 'utf-8'),
    (BOM_UTF16_LE, 'utf-16-le'),
    (BOM_UTF16_BE, 'utf-16-be'),
)


def split_head(raw: bytes) -> tuple[bytes, bytes, str | None]:
    """Returns `(head, body, codec_implied_by_head)`.

    Only known BOMs count as head, other leading bytes belong to the body.
    """
    for bom, codec in BOM_CODECS:
        if raw.startswith(bom):
            return raw[:len(bom)], raw[len(bom):], codec
    return b'', raw, None


def decode_body(raw: bytes, encoding: str | None = None) -> tuple[str, str]:
    """Returns `(text, codec_actually_used)`."""
    if encoding is None:
        encoding = DEFAULT_CODEC
    try:
        return raw.decode(encoding), encoding
    except UnicodeDecodeError:
        pass

    codec = chardet.detect(raw)
    if codec['encoding'] is None or codec['confidence'] < DETECT_CONFIDENCE:
        codec = {'encoding': DEFAULT_CODEC}
    logging.debug(f'`{encoding}` 解码失败，尝试 `{codec["encoding"]}`。')

    # fallbacks
    try:
        return raw.decode(codec['encoding']), codec['encoding']
    except UnicodeDecodeError:
        return raw.decode(FALLBACK_CODEC), FALLBACK_CODEC


def read_file(
    filename: str | PathLike[str], encoding: str | None = None
) -> tuple[bytes, str, str]:
    """Returns `(head, text, codec)`.

    May raise `OSError` or `UnicodeDecodeError`.
    """
    with open(fspath(filename), 'rb') as fp:
        raw = fp.read()
    head, body, implied = split_head(raw)
    text, codec = decode_body(body, implied or encoding)
    return head, text, codec


def write_file(
    filename: str | PathLike[str],
    head: bytes, text: str, encoding: str | None = None
) -> None:
    """May raise `OSError` or `UnicodeEncodeError`."""
    # encode before the file gets truncated.
    body = text.encode(encoding or DEFAULT_CODEC)
    with open(fspath(filename), 'wb') as fp:
        fp.write(head)
        fp.write(body)
