"""
Tests for language classification tables.

Covers YAML parsing, validation rules, directory loading with partial
success, and the tables packaged with chunkforge.
"""

import pytest
from pydantic import ValidationError

from chunkforge.core.exceptions import LanguageConfigError
from chunkforge.languages.table import (
    DATA_DIR,
    ClassificationTable,
    load_language_table,
    load_language_tables,
    parse_language_table,
)

PYTHON_TABLE = """
language: python
display_name: Python
extensions: [.py, .PYI]
tree_sitter:
  grammar: python
chunk_mappings:
  class: [class_definition]
  method: [function_definition]
extraction:
  name_field: name
"""


class TestParseLanguageTable:
    def test_parses_nested_layout(self):
        table = parse_language_table(PYTHON_TABLE)

        assert table.language == "python"
        assert table.display_name == "Python"
        assert table.grammar == "python"
        assert table.class_types == frozenset({"class_definition"})
        assert table.method_types == frozenset({"function_definition"})
        assert table.name_field == "name"

    def test_extensions_are_lower_cased(self):
        table = parse_language_table(PYTHON_TABLE)

        assert table.extensions == (".py", ".pyi")

    def test_name_field_defaults(self):
        table = parse_language_table(PYTHON_TABLE.replace("  name_field: name\n", ""))

        assert table.name_field == "name"

    def test_invalid_yaml(self):
        with pytest.raises(LanguageConfigError) as exc_info:
            parse_language_table("language: [unclosed", source="broken.yaml")

        assert exc_info.value.path == "broken.yaml"

    def test_non_mapping(self):
        with pytest.raises(LanguageConfigError):
            parse_language_table("- python\n")

    @pytest.mark.parametrize(
        "old,new",
        [
            ("language: python", "language: ''"),
            ("extensions: [.py, .PYI]", "extensions: []"),
            ("extensions: [.py, .PYI]", "extensions: [py]"),
            ("  grammar: python", "  grammar: ''"),
        ],
    )
    def test_required_fields(self, old, new):
        with pytest.raises(LanguageConfigError):
            parse_language_table(PYTHON_TABLE.replace(old, new))

    def test_requires_a_mapping(self):
        data = PYTHON_TABLE.replace("  class: [class_definition]\n", "").replace(
            "  method: [function_definition]\n", ""
        )

        with pytest.raises(LanguageConfigError):
            parse_language_table(data)

    def test_method_only_table_is_valid(self):
        table = parse_language_table(
            PYTHON_TABLE.replace("  class: [class_definition]\n", "")
        )

        assert table.class_types == frozenset()

    def test_overlapping_types_rejected(self):
        data = PYTHON_TABLE.replace(
            "method: [function_definition]", "method: [class_definition]"
        )

        with pytest.raises(LanguageConfigError):
            parse_language_table(data)

    @pytest.mark.parametrize(
        "old,new",
        [
            ("tree_sitter:\n  grammar: python", "tree_sitter: python"),
            (
                "chunk_mappings:\n  class: [class_definition]\n"
                "  method: [function_definition]",
                "chunk_mappings: [class_definition]",
            ),
            ("extraction:\n  name_field: name", "extraction: name"),
        ],
    )
    def test_scalar_section_rejected(self, old, new):
        data = PYTHON_TABLE.replace(old, new)
        assert new in data

        with pytest.raises(LanguageConfigError) as exc_info:
            parse_language_table(data, source="scalar.yaml")

        assert exc_info.value.path == "scalar.yaml"

    @pytest.mark.parametrize(
        "old,new",
        [
            ("class: [class_definition]", "class: class_definition"),
            ("method: [function_definition]", "method: function_definition"),
            ("extensions: [.py, .PYI]", "extensions: .py"),
        ],
    )
    def test_scalar_list_rejected(self, old, new):
        with pytest.raises(LanguageConfigError):
            parse_language_table(PYTHON_TABLE.replace(old, new))

    def test_null_sections_use_defaults(self):
        data = PYTHON_TABLE.replace("  name_field: name\n", "").replace(
            "  class: [class_definition]\n", "  class:\n"
        )

        table = parse_language_table(data)

        assert table.class_types == frozenset()
        assert table.name_field == "name"


class TestClassificationTable:
    @pytest.fixture
    def table(self) -> ClassificationTable:
        return parse_language_table(PYTHON_TABLE)

    def test_predicates(self, table):
        assert table.is_class_node("class_definition")
        assert not table.is_class_node("function_definition")
        assert table.is_method_node("function_definition")
        assert not table.is_method_node("decorated_definition")

    @pytest.mark.parametrize("ext", [".py", "py", ".PY", "PYI"])
    def test_matches_extension(self, table, ext):
        assert table.matches_extension(ext)

    def test_does_not_match_other_extension(self, table):
        assert not table.matches_extension(".go")

    def test_frozen(self, table):
        with pytest.raises(ValidationError):
            table.language = "go"


class TestLoadLanguageTables:
    def test_load_single_file(self, tmp_path):
        path = tmp_path / "python.yaml"
        path.write_text(PYTHON_TABLE, encoding="utf-8")

        assert load_language_table(path).language == "python"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LanguageConfigError):
            load_language_table(tmp_path / "missing.yaml")

    def test_partial_success(self, tmp_path):
        (tmp_path / "python.yaml").write_text(PYTHON_TABLE, encoding="utf-8")
        (tmp_path / "broken.yml").write_text("language: [", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        tables, errors = load_language_tables(tmp_path)

        assert [t.language for t in tables] == ["python"]
        assert len(errors) == 1
        assert errors[0].path.endswith("broken.yml")

    def test_malformed_section_does_not_abort_directory(self, tmp_path):
        (tmp_path / "a_good.yaml").write_text(PYTHON_TABLE, encoding="utf-8")
        bad = PYTHON_TABLE.replace("tree_sitter:\n  grammar: python", "tree_sitter: python")
        (tmp_path / "b_bad.yaml").write_text(bad, encoding="utf-8")

        tables, errors = load_language_tables(tmp_path)

        assert [t.language for t in tables] == ["python"]
        assert len(errors) == 1
        assert errors[0].path.endswith("b_bad.yaml")

    def test_missing_directory(self, tmp_path):
        tables, errors = load_language_tables(tmp_path / "nope")

        assert tables == []
        assert len(errors) == 1


class TestPackagedTables:
    def test_all_packaged_tables_load(self):
        tables, errors = load_language_tables()

        assert errors == []
        assert {t.language for t in tables} == {
            "csharp",
            "go",
            "java",
            "javascript",
            "lua",
            "php",
            "python",
            "ruby",
            "rust",
            "tsx",
            "typescript",
        }

    def test_default_directory_is_package_data(self):
        assert DATA_DIR.is_dir()

    def test_extensions_do_not_collide(self):
        tables, _ = load_language_tables()
        seen = {}
        for table in tables:
            for ext in table.extensions:
                assert ext not in seen, f"{ext} in {seen.get(ext)} and {table.language}"
                seen[ext] = table.language

    def test_go_methods_are_declared_at_file_scope(self):
        tables, _ = load_language_tables()
        go = next(t for t in tables if t.language == "go")

        assert go.is_class_node("type_spec")
        assert go.is_method_node("method_declaration")
        assert go.is_method_node("function_declaration")
