import io

import pytest

from pyinidoc.ini import BlankLine, Comment, KeyValue, NodeKind, SectionHeader
from pyinidoc.ini.nodes import InvalidKeyName, check_keyname, make_node, write_node


class DirtyCounter:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


def test_make_node_precedence() -> None:
    assert isinstance(make_node(""), BlankLine)
    assert make_node("; note") == Comment("; note")
    assert make_node("# note") == Comment("# note")
    assert make_node("[ Section ]") == SectionHeader("Section")
    assert make_node(";k=v").kind is NodeKind.COMMENT

    kv = make_node("key = a = b")
    assert isinstance(kv, KeyValue)
    assert (kv.name, kv.text) == ("key", "a = b")


@pytest.mark.parametrize("line", ["=1", "a;b=1", "a#b=1", "[x]=1", "just text"])
def test_make_node_drops_unrecognized(line: str) -> None:
    assert make_node(line) is None


def test_section_header_normalize() -> None:
    assert SectionHeader.normalize("  [ name ]] ") == "name"


def test_check_keyname() -> None:
    assert check_keyname("  key ") == "key"
    for bad in ("", "a=b", "a;b", "a\nb", "[s]"):
        with pytest.raises(InvalidKeyName):
            check_keyname(bad)


def test_set_only_dirties_on_change() -> None:
    dirty = DirtyCounter()
    kv = KeyValue("a", "1", on_dirty=dirty)

    kv.set("1")
    kv.set(1)
    assert dirty.count == 0

    kv.set(2)
    assert kv.text == "2"
    assert dirty.count == 1


def test_set_copies_another_keyvalue() -> None:
    kv = KeyValue("a")
    kv.set(KeyValue("b", "hello"))
    assert kv.text == "hello"


def test_value_does_not_touch_storage() -> None:
    dirty = DirtyCounter()
    kv = KeyValue("y", on_dirty=dirty)

    assert kv.value(7) == 7
    assert kv.text == ""
    assert dirty.count == 0


def test_try_value_writes_default_once() -> None:
    dirty = DirtyCounter()
    kv = KeyValue("x", on_dirty=dirty)

    assert kv.try_value(42) == 42
    assert kv.text == "42"
    assert dirty.count == 1

    assert kv.try_value(99) == 42
    assert dirty.count == 1


def test_value_reads_as_type_of_default() -> None:
    kv = KeyValue("speed", "6.5")
    assert kv.value(1.0) == 6.5
    assert kv.value(1) == 6
    assert kv.value("") == "6.5"
    assert kv.as_type(bool) is True


def test_dunder_shortcuts() -> None:
    kv = KeyValue("n", "12.5")
    assert str(kv) == "12.5"
    assert int(kv) == 12
    assert float(kv) == 12.5
    assert repr(kv) == "n=12.5"


def test_write_node() -> None:
    buf = io.StringIO()
    for node in (SectionHeader(""), SectionHeader("s"), Comment("; c"),
                 KeyValue("k", "v"), BlankLine()):
        write_node(node, buf)
    assert buf.getvalue() == "[s]\n; c\nk=v\n\n"


def test_section_header_normalize_is_stable() -> None:
    once = SectionHeader.normalize("[ [a] ]")
    assert once == "a"
    assert SectionHeader.normalize(once) == once
    assert make_node("[ [a] ]") == SectionHeader("a")


def test_value_with_int_enum_default() -> None:
    from enum import IntEnum

    class Level(IntEnum):
        LOW = 1
        HIGH = 2

    assert KeyValue("lv", "2").value(Level.LOW) == 2
    kv = KeyValue("lv")
    assert kv.try_value(Level.HIGH) == 2
    assert kv.text == "2"
