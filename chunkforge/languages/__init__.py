"""Per-language classification tables and their YAML loader."""

from chunkforge.languages.table import (
    DATA_DIR,
    ClassificationTable,
    load_language_table,
    load_language_tables,
    parse_language_table,
)

__all__ = [
    "DATA_DIR",
    "ClassificationTable",
    "load_language_table",
    "load_language_tables",
    "parse_language_table",
]
