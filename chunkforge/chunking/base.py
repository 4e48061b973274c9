"""
Chunker protocol and the chunk-building helpers every strategy shares.

Strategies are interchangeable behind one capability: ``chunk(file, token)``
plus a ``language`` property. No inheritance is required.
"""

from typing import Optional, Protocol, runtime_checkable

from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.models import Chunk, ChunkLevel, ChunkResult, SourceFile
from chunkforge.parsing.engine import SyntaxNode, node_text


@runtime_checkable
class Chunker(Protocol):
    """Protocol for chunking strategies."""

    @property
    def language(self) -> str:
        """Language identifier this strategy handles."""
        ...

    def chunk(
        self, file: SourceFile, token: Optional[CancellationToken] = None
    ) -> ChunkResult:
        """Split one source file into a File/Class/Method hierarchy."""
        ...


def count_lines(content: bytes) -> int:
    """Number of newline-separated lines, never less than 1."""
    return max(1, content.count(b"\n") + 1)


def is_blank(content: bytes) -> bool:
    return not content.strip()


def signature_of(content: str) -> str:
    """Trimmed first line of a chunk's content."""
    return content.split("\n", 1)[0].strip()


def make_file_chunk(file: SourceFile, language: str) -> Chunk:
    """The root chunk spanning the whole file."""
    content = file.content.decode("utf-8", errors="replace")
    return Chunk(
        file_path=file.path,
        start_line=1,
        end_line=count_lines(file.content),
        level=ChunkLevel.FILE,
        language=language,
        content=content,
        name=file.path,
        signature=signature_of(content),
        parent_id=None,
        last_modified=file.last_modified,
    )


def extract_name(node: SyntaxNode, source: bytes, name_field: str) -> Optional[str]:
    """Text of the node's name field, or None when absent or blank."""
    name_node = node.child_by_field_name(name_field)
    if name_node is None:
        return None
    name = node_text(name_node, source).strip()
    return name or None


def make_node_chunk(
    node: SyntaxNode,
    file: SourceFile,
    level: ChunkLevel,
    name: str,
    parent: Chunk,
    language: str,
) -> Optional[Chunk]:
    """Build a class or method chunk for ``node``.

    Returns None when the node's position is malformed or it covers only
    whitespace; callers skip such nodes and keep walking.
    """
    start_row = node.start_point[0]
    end_row = node.end_point[0]
    if start_row < 0 or end_row < start_row or node.end_byte < node.start_byte:
        return None

    content = node_text(node, file.content)
    if not content.strip():
        return None

    return Chunk(
        file_path=file.path,
        start_line=start_row + 1,
        end_line=end_row + 1,
        level=level,
        language=language,
        content=content,
        name=name,
        signature=signature_of(content),
        parent_id=parent.id,
        last_modified=file.last_modified,
    )
