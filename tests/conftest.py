"""
Shared pytest fixtures and helpers for ChunkForge tests.

Fixture Organization
--------------------
- **engine / registry**: real tree-sitter parse engine and registry built
  from the packaged language tables (session scoped, grammars load once)
- **fake_table / fake_engine**: a tiny classification table plus an engine
  that returns hand-built syntax trees, so traversal rules can be tested
  without any grammar
- **FakeNode / build_tree**: builders for those hand-built trees
- **make_source**: SourceFile builder from text
"""

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Dict, Generator, List, Optional, Sequence, Tuple

import pytest

from chunkforge.chunking.registry import ChunkerRegistry
from chunkforge.core.logging import configure_logging
from chunkforge.core.models import SourceFile
from chunkforge.languages.table import ClassificationTable
from chunkforge.parsing.engine import ParseEngine


# ============================================================================
# Fake Syntax Trees
# ============================================================================


@dataclass
class FakeNode:
    """Minimal stand-in for a tree-sitter Node."""

    type: str
    start_point: Tuple[int, int]
    end_point: Tuple[int, int]
    start_byte: int
    end_byte: int
    children: List["FakeNode"] = field(default_factory=list)
    fields: Dict[str, "FakeNode"] = field(default_factory=dict)

    @property
    def child_count(self) -> int:
        return len(self.children)

    def child_by_field_name(self, name: str) -> Optional["FakeNode"]:
        return self.fields.get(name)


def _line_offsets(source: bytes) -> List[int]:
    offsets = [0]
    for i, byte in enumerate(source):
        if byte == ord("\n"):
            offsets.append(i + 1)
    return offsets


def span(
    source: bytes,
    node_type: str,
    first_row: int,
    last_row: int,
    name: Optional[str] = None,
    children: Sequence[FakeNode] = (),
) -> FakeNode:
    """A node covering rows ``first_row``..``last_row`` (0-based) of ``source``.

    When ``name`` is given, a ``name`` field child pointing at its first
    space-prefixed occurrence inside the span is attached.
    """
    offsets = _line_offsets(source)
    start = offsets[first_row]
    end = offsets[last_row + 1] - 1 if last_row + 1 < len(offsets) else len(source)
    end_col = end - offsets[last_row]
    node = FakeNode(
        type=node_type,
        start_point=(first_row, 0),
        end_point=(last_row, end_col),
        start_byte=start,
        end_byte=end,
        children=list(children),
    )
    if name is not None:
        at = source.index(b" " + name.encode("utf-8"), start) + 1
        row = first_row + source[start:at].count(b"\n")
        col = at - offsets[row]
        node.fields["name"] = FakeNode(
            type="identifier",
            start_point=(row, col),
            end_point=(row, col + len(name)),
            start_byte=at,
            end_byte=at + len(name),
        )
        node.children.insert(0, node.fields["name"])
    return node


def build_tree(source: bytes, children: Sequence[FakeNode]) -> SimpleNamespace:
    """A tree whose root spans all of ``source``."""
    last_row = max(0, source.count(b"\n") - (1 if source.endswith(b"\n") else 0))
    root = span(source, "module", 0, last_row, children=children)
    return SimpleNamespace(root_node=root)


class FakeEngine:
    """Parse engine double returning prepared trees."""

    def __init__(self, tree: Optional[SimpleNamespace] = None) -> None:
        self.tree = tree
        self.parse_calls = 0

    def load_language(self, language_id: str) -> object:
        return object()

    def parse(self, language_id: str, source: bytes) -> Optional[SimpleNamespace]:
        self.parse_calls += 1
        return self.tree


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Keep log level changes from leaking between tests."""
    yield
    configure_logging(level="WARNING")


@pytest.fixture
def fake_table() -> ClassificationTable:
    return ClassificationTable(
        language="fake",
        display_name="Fake",
        extensions=(".fk",),
        grammar="fake",
        class_types=frozenset({"class"}),
        method_types=frozenset({"method"}),
    )


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture(scope="session")
def engine() -> ParseEngine:
    return ParseEngine()


@pytest.fixture(scope="session")
def registry(engine: ParseEngine) -> ChunkerRegistry:
    return ChunkerRegistry.from_config(engine=engine)


def make_source(path: str, text: str, language: str = "") -> SourceFile:
    return SourceFile(path=path, content=text.encode("utf-8"), language=language)

