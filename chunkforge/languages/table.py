"""
Language classification tables.

A table tells the generic chunker which tree-sitter node types are
class-like and which are method-like for one language, and which child
field holds a construct's name. Adding a language means adding a YAML file,
not code.

YAML format::

    language: python
    display_name: Python
    extensions: [.py, .pyi]
    tree_sitter:
      grammar: python
    chunk_mappings:
      class: [class_definition]
      method: [function_definition]
    extraction:
      name_field: name

Tables are validated with pydantic and frozen once loaded.
"""

from pathlib import Path
from typing import Annotated, Any, Callable, Dict, FrozenSet, List, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from chunkforge.core.exceptions import LanguageConfigError
from chunkforge.core.logging import get_logger

logger = get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"
TABLE_SUFFIXES = (".yaml", ".yml")


class ClassificationTable(BaseModel):
    """Per-language node classification."""

    model_config = ConfigDict(frozen=True)

    language: str = Field(min_length=1)
    display_name: str = ""
    extensions: Tuple[str, ...] = Field(min_length=1)
    grammar: str = Field(min_length=1)
    class_types: FrozenSet[str] = frozenset()
    method_types: FrozenSet[str] = frozenset()
    name_field: str = "name"

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        normalized = []
        for ext in value:
            if not ext.startswith("."):
                raise ValueError(f"extension {ext!r} must start with '.'")
            normalized.append(ext.lower())
        return tuple(normalized)

    @field_validator("name_field")
    @classmethod
    def _default_name_field(cls, value: str) -> str:
        return value or "name"

    @model_validator(mode="after")
    def _require_mappings(self) -> "ClassificationTable":
        if not self.class_types and not self.method_types:
            raise ValueError("at least one class or method node type is required")
        overlap = self.class_types & self.method_types
        if overlap:
            raise ValueError(
                f"node types cannot be both class and method: {sorted(overlap)}"
            )
        return self

    def is_class_node(self, node_type: str) -> bool:
        """True if ``node_type`` is a class-like construct."""
        return node_type in self.class_types

    def is_method_node(self, node_type: str) -> bool:
        """True if ``node_type`` is a method-like construct."""
        return node_type in self.method_types

    def matches_extension(self, ext: str) -> bool:
        ext = ext.lower()
        if not ext.startswith("."):
            ext = "." + ext
        return ext in self.extensions

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ClassificationTable":
        """Build a table from the nested YAML layout.

        Raises:
            ValidationError: If a section has the wrong shape, e.g. a scalar
                where a mapping or list is expected.
        """
        document = _TableDocument.model_validate(data)
        return cls(
            language=document.language,
            display_name=document.display_name,
            extensions=tuple(document.extensions),
            grammar=document.tree_sitter.grammar,
            class_types=frozenset(document.chunk_mappings.class_),
            method_types=frozenset(document.chunk_mappings.method),
            name_field=document.extraction.name_field,
        )


# ---------------------------------------------------------------------------
# Raw YAML layout
# ---------------------------------------------------------------------------


def _null_as(default: Callable[[], Any]) -> BeforeValidator:
    """Treat an explicit YAML null like a missing key."""
    return BeforeValidator(lambda value: default() if value is None else value)


_Text = Annotated[str, _null_as(str)]
_Names = Annotated[List[str], _null_as(list)]


class _TreeSitterSection(BaseModel):
    grammar: _Text = ""


class _MappingsSection(BaseModel):
    class_: _Names = Field(default_factory=list, alias="class")
    method: _Names = Field(default_factory=list)


class _ExtractionSection(BaseModel):
    name_field: _Text = "name"


class _TableDocument(BaseModel):
    """Shape check for a table file before it becomes a ClassificationTable."""

    language: _Text = ""
    display_name: _Text = ""
    extensions: _Names = Field(default_factory=list)
    tree_sitter: Annotated[_TreeSitterSection, _null_as(dict)] = Field(
        default_factory=_TreeSitterSection
    )
    chunk_mappings: Annotated[_MappingsSection, _null_as(dict)] = Field(
        default_factory=_MappingsSection
    )
    extraction: Annotated[_ExtractionSection, _null_as(dict)] = Field(
        default_factory=_ExtractionSection
    )


def parse_language_table(
    data: Union[str, bytes], source: str = "<string>"
) -> ClassificationTable:
    """Parse one YAML document into a ClassificationTable.

    Raises:
        LanguageConfigError: On YAML syntax errors or failed validation.
    """
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise LanguageConfigError(f"Failed to parse YAML in {source}: {e}", path=source) from e

    if not isinstance(raw, dict):
        raise LanguageConfigError(f"{source} must contain a mapping", path=source)

    try:
        return ClassificationTable.from_mapping(raw)
    except ValidationError as e:
        errors = e.errors()
        locations = sorted(
            {".".join(str(p) for p in err["loc"]) or "table" for err in errors}
        )
        raise LanguageConfigError(
            f"Invalid language table {source}: {', '.join(locations)}: "
            f"{errors[0]['msg']}",
            path=source,
        ) from e


def load_language_table(path: Union[str, Path]) -> ClassificationTable:
    """Read and parse a language table file."""
    table_path = Path(path)
    try:
        data = table_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LanguageConfigError(
            f"Failed to read language table {table_path}: {e}", path=str(table_path)
        ) from e
    return parse_language_table(data, source=str(table_path))


def load_language_tables(
    directory: Union[str, Path, None] = None,
) -> Tuple[List[ClassificationTable], List[LanguageConfigError]]:
    """Load every *.yaml / *.yml table in ``directory``.

    Partial success: valid tables are returned alongside the errors for the
    files that failed. Defaults to the tables packaged with chunkforge.
    """
    table_dir = Path(directory) if directory is not None else DATA_DIR
    if not table_dir.is_dir():
        return [], [
            LanguageConfigError(
                f"Language directory not found: {table_dir}", path=str(table_dir)
            )
        ]

    tables: List[ClassificationTable] = []
    errors: List[LanguageConfigError] = []
    for entry in sorted(table_dir.iterdir()):
        if not entry.is_file() or entry.suffix.lower() not in TABLE_SUFFIXES:
            continue
        try:
            tables.append(load_language_table(entry))
        except LanguageConfigError as e:
            errors.append(e)

    logger.debug(
        "Loaded language tables",
        directory=str(table_dir),
        tables=len(tables),
        errors=len(errors),
    )
    return tables, errors
