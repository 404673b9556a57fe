import pytest

from conftest import assert_doc_consistent
from pyinidoc import IniDocument, InvalidSectionName


def test_case_insensitive_case_preserving() -> None:
    doc = IniDocument()
    doc["Foo"]["Bar"] = 1

    assert doc["foo"]["bar"] is doc["Foo"]["Bar"]
    assert doc.dumps() == "[Foo]\nBar=1\n"
    assert_doc_consistent(doc)


def test_lazy_creation_is_not_a_modification() -> None:
    doc = IniDocument()
    doc["s"]["k"]
    assert not doc.is_dirty()
    assert doc.section_included("S")
    assert doc.key_included("s", "K")

    doc["s"]["k"] = "v"
    assert doc.is_dirty()


def test_queries_do_not_create() -> None:
    doc = IniDocument()
    assert not doc.section_included("nope")
    assert not doc.key_included("nope", "k")
    assert "nope" not in doc
    assert doc.find("nope") is None
    assert len(doc) == 0


def test_section_names_are_normalized() -> None:
    doc = IniDocument()
    assert doc["  [ Art ] "].name == "Art"
    assert doc["art"] is doc["Art"]
    with pytest.raises(InvalidSectionName):
        doc["bad\nname"]


def test_empty_sections_are_not_written() -> None:
    doc = IniDocument()
    doc["empty"]
    doc["a"]["k"] = 1
    doc["b"]["k"] = 2
    assert doc.dumps() == "[a]\nk=1\n\n[b]\nk=2\n"
    assert str(doc) == doc.dumps()


def test_anonymous_section_is_written_first() -> None:
    doc = IniDocument()
    doc["s"]["k"] = 1
    doc[""]["top"] = "yes"
    assert doc.dumps() == "top=yes\n\n[s]\nk=1\n"
    assert list(doc) == ["", "s"]


def test_setitem_fills_section() -> None:
    doc = IniDocument()
    doc["s"]["keep"] = "me"
    doc["s"] = {"a": 1, "b": True, "c": 0.5}

    sect = doc["s"]
    assert list(sect) == ["keep", "a", "b", "c"]
    assert sect["b"].text == "true"

    doc["copy"] = sect
    assert doc["copy"]["a"].text == "1"
    assert_doc_consistent(doc)


def test_rename_section() -> None:
    doc = IniDocument()
    for name in ("a", "b"):
        doc[name]["k"] = name
    doc.set_dirty(False)

    assert doc.rename_section("a", "Alpha")
    assert list(doc) == ["Alpha", "b"]
    assert doc["alpha"]["k"].text == "a"
    assert doc.is_dirty()
    assert_doc_consistent(doc)

    doc.set_dirty(False)
    assert not doc.rename_section("alpha", "B")
    assert not doc.rename_section("missing", "c")
    assert not doc.rename_section("b", "")
    assert doc.rename_section("b", "b")
    assert not doc.is_dirty()
    assert list(doc) == ["Alpha", "b"]


def test_remove_section() -> None:
    doc = IniDocument()
    doc["a"]["k"] = 1
    doc["b"]["k"] = 2
    doc.set_dirty(False)

    assert doc.remove_section("A")
    assert not doc.remove_section("a")
    assert doc.is_dirty()
    assert list(doc) == ["b"]
    with pytest.raises(KeyError):
        del doc["a"]
    del doc["b"]
    assert doc.section_count() == 0
    assert_doc_consistent(doc)


def test_clear() -> None:
    doc = IniDocument()
    doc["a"]["k"] = 1
    doc.set_dirty(False)

    doc.clear()
    assert doc.is_dirty()
    assert doc.dumps() == ""
    assert_doc_consistent(doc)


def test_try_value_through_document() -> None:
    doc = IniDocument()
    node = doc["s"]["x"]

    assert node.try_value(42) == 42
    assert doc.is_dirty()

    doc.set_dirty(False)
    assert node.try_value(99) == 42
    assert not doc.is_dirty()


def test_default_read_is_non_mutating() -> None:
    doc = IniDocument()
    node = doc["s"]["y"]

    assert node.value(7) == 7
    assert node.text == ""
    assert doc.key_included("s", "y")
    assert not doc.is_dirty()


def test_float_formatting() -> None:
    from ctypes import c_float

    doc = IniDocument()
    doc["n"]["d"] = 3.14159265358979
    doc["n"]["f"] = c_float(3.14159265358979)
    assert doc["n"]["d"].text == "3.14159265358979"
    assert doc["n"]["f"].text == "3.14159"


def test_renamed_section_stays_reachable() -> None:
    doc = IniDocument()
    doc["s"]["k"] = 1

    assert doc.rename_section("s", "[ [a] ]")
    sect = doc.find("a")
    assert sect is not None and sect.name == "a"
    assert doc.find(sect.name) is sect
    assert list(doc) == ["a"]
    assert_doc_consistent(doc)


def test_removed_section_no_longer_dirties() -> None:
    doc = IniDocument()
    kv = doc["s"]["k"]
    doc.remove_section("s")
    doc.set_dirty(False)

    kv.set(5)
    assert not doc.is_dirty()


def test_cleared_section_no_longer_dirties() -> None:
    doc = IniDocument()
    sect = doc["s"]
    kv = sect["k"]
    doc.clear()
    doc.set_dirty(False)

    kv.set(5)
    sect["other"] = 1
    assert not doc.is_dirty()
