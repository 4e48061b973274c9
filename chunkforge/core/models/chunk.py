"""
Chunk identity model.

A Chunk is an immutable, named line range of one source file at file, class
or method granularity. Two digests are attached to every chunk:

- ``id`` is positional and nominal: it hashes (file path, start line, end
  line, level, language, name) and ignores the body, so editing inside a
  method keeps its id across re-parses.
- ``content_hash`` hashes the content only, so a body edit under a stable
  id is still detectable without looking at modification times.

Both are SHA-256 truncated to 128 bits and rendered as 32 lowercase hex
characters. They are identity keys, not a security boundary.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

# Separator between identity fields; cannot appear in a line number and is
# vanishingly unlikely in a path or identifier.
_ID_FIELD_SEPARATOR = "\x1f"

DIGEST_BYTES = 16


class ChunkLevel(str, Enum):
    """Granularity of a chunk."""

    FILE = "file"
    CLASS = "class"
    METHOD = "method"


def generate_chunk_id(
    file_path: str,
    start_line: int,
    end_line: int,
    level: Union[ChunkLevel, str],
    language: str,
    name: str,
) -> str:
    """Deterministic identity digest for a chunk position and name."""
    level_value = level.value if isinstance(level, ChunkLevel) else str(level)
    data = _ID_FIELD_SEPARATOR.join(
        [file_path, str(start_line), str(end_line), level_value, language, name]
    )
    digest = hashlib.sha256(data.encode("utf-8", errors="surrogatepass"))
    return digest.digest()[:DIGEST_BYTES].hex()


def generate_content_hash(content: str) -> str:
    """Digest of chunk content, used to detect body changes."""
    digest = hashlib.sha256(content.encode("utf-8", errors="surrogatepass"))
    return digest.digest()[:DIGEST_BYTES].hex()


@dataclass(frozen=True)
class SourceFile:
    """A file handed to a chunker."""

    path: str
    content: bytes
    language: str = ""
    last_modified: Optional[datetime] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], language: str = "") -> "SourceFile":
        """Read a file from disk."""
        file_path = Path(path)
        stat = file_path.stat()
        return cls(
            path=str(file_path),
            content=file_path.read_bytes(),
            language=language,
            last_modified=datetime.fromtimestamp(stat.st_mtime),
        )

    @property
    def extension(self) -> str:
        """Lower-cased final suffix including the dot, or ''."""
        return Path(self.path).suffix.lower()

    def with_language(self, language: str) -> "SourceFile":
        return replace(self, language=language)


@dataclass(frozen=True)
class Chunk:
    """A semantic unit of code.

    ``id`` and ``content_hash`` are derived in ``__post_init__`` and cannot
    be passed in.
    """

    file_path: str
    start_line: int
    end_line: int
    level: ChunkLevel
    language: str
    content: str
    name: str
    signature: str = ""
    parent_id: Optional[str] = None
    last_modified: Optional[datetime] = None
    id: str = field(init=False, default="")
    content_hash: str = field(init=False, default="")

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "id",
            generate_chunk_id(
                self.file_path,
                self.start_line,
                self.end_line,
                self.level,
                self.language,
                self.name,
            ),
        )
        object.__setattr__(self, "content_hash", generate_content_hash(self.content))

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def validate(self) -> List[str]:
        """Return invariant violations; empty when the chunk is valid.

        Blank content is a violation. The one chunk that legitimately has
        it is the File chunk FallbackChunker emits for an empty file.
        """
        problems: List[str] = []
        if not self.file_path:
            problems.append("file path is required")
        if self.start_line < 1:
            problems.append("start line must be >= 1")
        if self.end_line < self.start_line:
            problems.append("end line must be >= start line")
        if not self.content or not self.content.strip():
            problems.append("content is required")
        if not self.level:
            problems.append("level is required")
        return problems

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "id": self.id,
            "file_path": self.file_path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "level": self.level.value,
            "language": self.language,
            "name": self.name,
            "signature": self.signature,
            "parent_id": self.parent_id,
            "content_hash": self.content_hash,
            "last_modified": (
                self.last_modified.isoformat() if self.last_modified else None
            ),
            "content": self.content,
        }


@dataclass
class ChunkResult:
    """Chunks extracted from one file, in traversal order."""

    file: SourceFile
    chunks: List[Chunk] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self.chunks)

    @property
    def file_chunk(self) -> Optional[Chunk]:
        for chunk in self.chunks:
            if chunk.level == ChunkLevel.FILE:
                return chunk
        return None

    def by_level(self, level: ChunkLevel) -> List[Chunk]:
        return [c for c in self.chunks if c.level == level]

    def children_of(self, chunk_id: str) -> List[Chunk]:
        return [c for c in self.chunks if c.parent_id == chunk_id]

    def get(self, chunk_id: str) -> Optional[Chunk]:
        for chunk in self.chunks:
            if chunk.id == chunk_id:
                return chunk
        return None

    def validate_hierarchy(self) -> List[str]:
        """Check the single-root forest shape.

        An empty result is valid. Otherwise exactly one parentless File
        chunk must exist and every other parent id must resolve locally.
        """
        if not self.chunks:
            return []

        problems: List[str] = []
        roots = [c for c in self.chunks if c.level == ChunkLevel.FILE]
        if len(roots) != 1:
            problems.append(f"expected exactly one file chunk, found {len(roots)}")
        for root in roots:
            if root.parent_id is not None:
                problems.append(f"file chunk {root.id} has a parent")

        known = {c.id for c in self.chunks}
        for chunk in self.chunks:
            if chunk.level == ChunkLevel.FILE:
                continue
            if chunk.parent_id is None:
                problems.append(f"{chunk.level.value} chunk {chunk.name!r} has no parent")
            elif chunk.parent_id not in known:
                problems.append(
                    f"{chunk.level.value} chunk {chunk.name!r} has unknown parent "
                    f"{chunk.parent_id}"
                )
        return problems
