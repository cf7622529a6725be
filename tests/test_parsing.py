"""Tests for tree-sitter tag extraction."""

from __future__ import annotations

from pathlib import Path

import pytest

from contextcrumb.languages import LANGUAGES
from contextcrumb.models import SymbolKind, Tag, TagKind
from contextcrumb.parsing import extract_tags

PYTHON = LANGUAGES["python"]


def _parse(tmp_path: Path, code: str) -> list[Tag]:
    f = tmp_path / "mod.py"
    f.write_text(code, encoding="utf-8")
    return extract_tags(f, PYTHON)


def _defs(tags: list[Tag]) -> dict[str, Tag]:
    return {t.name: t for t in tags if t.kind == TagKind.DEFINITION}


def _refs(tags: list[Tag]) -> list[Tag]:
    return [t for t in tags if t.kind == TagKind.REFERENCE]


class TestDefinitions:
    """Definition tags and their kinds."""

    def test_extracts_class_definition(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "class Foo:\n    pass\n"))
        assert list(defs) == ["Foo"]
        assert defs["Foo"].symbol_kind == SymbolKind.CLASS

    def test_extracts_function_definition(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "def bar():\n    pass\n"))
        assert list(defs) == ["bar"]
        assert defs["bar"].symbol_kind == SymbolKind.FUNCTION

    def test_extracts_method_with_class_prefix(self, tmp_path: Path) -> None:
        defs = _defs(
            _parse(tmp_path, "class Foo:\n    def method(self):\n        pass\n")
        )
        assert defs["Foo.method"].symbol_kind == SymbolKind.METHOD

    def test_decorated_method(self, tmp_path: Path) -> None:
        code = "class Foo:\n    @property\n    def size(self):\n        return 1\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["Foo.size"].symbol_kind == SymbolKind.METHOD

    def test_module_constant(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "MAX_SIZE = 10\n"))
        assert defs["MAX_SIZE"].symbol_kind == SymbolKind.CONST

    def test_local_assignment_is_not_a_constant(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "def f():\n    local = 1\n    return local\n"))
        assert "local" not in defs

    def test_protocol_class_is_interface(self, tmp_path: Path) -> None:
        code = "from typing import Protocol\n\nclass Reader(Protocol):\n    pass\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["Reader"].symbol_kind == SymbolKind.INTERFACE

    def test_type_alias_is_type(self, tmp_path: Path) -> None:
        code = "from typing import TypeAlias\n\nUserId: TypeAlias = int\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["UserId"].symbol_kind == SymbolKind.TYPE

    def test_new_type_is_type(self, tmp_path: Path) -> None:
        code = "from typing import NewType\n\nOrderId = NewType('OrderId', int)\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["OrderId"].symbol_kind == SymbolKind.TYPE

    def test_line_numbers_are_one_indexed(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "# comment\ndef foo():\n    pass\n"))
        assert defs["foo"].line == 2


class TestExports:
    """Export detection for definitions."""

    def test_public_top_level_names_are_exported(self, tmp_path: Path) -> None:
        code = "def api():\n    pass\n\nclass Model:\n    pass\n\nLIMIT = 3\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["api"].exported
        assert defs["Model"].exported
        assert defs["LIMIT"].exported

    def test_private_names_are_not_exported(self, tmp_path: Path) -> None:
        defs = _defs(_parse(tmp_path, "def _helper():\n    pass\n"))
        assert not defs["_helper"].exported

    def test_methods_are_not_exported(self, tmp_path: Path) -> None:
        defs = _defs(
            _parse(tmp_path, "class Foo:\n    def method(self):\n        pass\n")
        )
        assert defs["Foo"].exported
        assert not defs["Foo.method"].exported

    def test_nested_functions_are_not_exported(self, tmp_path: Path) -> None:
        code = "def outer():\n    def inner():\n        pass\n    return inner\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["outer"].exported
        assert not defs["inner"].exported

    def test_decorated_function_is_exported(self, tmp_path: Path) -> None:
        code = "import functools\n\n@functools.cache\ndef cached():\n    pass\n"
        defs = _defs(_parse(tmp_path, code))
        assert defs["cached"].exported

    def test_dunder_all_restricts_exports(self, tmp_path: Path) -> None:
        code = (
            '__all__ = ["kept"]\n\n'
            "def kept():\n    pass\n\n"
            "def dropped():\n    pass\n"
        )
        defs = _defs(_parse(tmp_path, code))
        assert defs["kept"].exported
        assert not defs["dropped"].exported
        assert not defs["__all__"].exported


class TestReferences:
    """Reference tags."""

    def test_extracts_call_reference(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "foo()\n"))
        assert [r.name for r in refs] == ["foo"]

    def test_extracts_attribute_call(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "obj.method()\n"))
        assert [r.name for r in refs] == ["method"]

    def test_extracts_import_reference(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "from os import path\n"))
        assert any(r.name == "path" for r in refs)

    def test_extracts_aliased_import(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "from models import User as U\n"))
        assert any(r.name == "User" for r in refs)

    def test_extracts_base_class(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "class Admin(User):\n    pass\n"))
        assert any(r.name == "User" for r in refs)

    def test_extracts_type_annotation(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "def f(cfg: Config) -> Result:\n    pass\n"))
        names = {r.name for r in refs}
        assert {"Config", "Result"} <= names

    def test_same_line_reference_recorded_once(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "foo(foo())\n"))
        assert [r.name for r in refs] == ["foo"]

    def test_references_are_not_exported(self, tmp_path: Path) -> None:
        refs = _refs(_parse(tmp_path, "foo()\n"))
        assert not refs[0].exported


class TestEdgeCases:
    """Empty and missing files."""

    def test_empty_file(self, tmp_path: Path) -> None:
        assert _parse(tmp_path, "") == []

    def test_nonexistent_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            extract_tags(tmp_path / "nope.py", PYTHON)
