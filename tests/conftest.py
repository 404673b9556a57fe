import pytest

from pyinidoc.ini import IniDocument, IniSection
from pyinidoc.ini.coerce import fold


def assert_index_consistent(section: IniSection) -> None:
    keys = list(section.keyvalues())
    assert len(keys) == len(section._index)
    for kv in keys:
        assert section._index[fold(kv.name)] is kv


def assert_doc_consistent(doc: IniDocument) -> None:
    assert len(doc._sections) == len(doc._index)
    for sect in doc._sections:
        assert doc._index[fold(sect.name)] is sect
        assert_index_consistent(sect)


@pytest.fixture
def dirty_log() -> list[int]:
    return []


@pytest.fixture
def section(dirty_log: list[int]) -> IniSection:
    return IniSection("Basic", on_dirty=lambda: dirty_log.append(1),
                      declared=True)
