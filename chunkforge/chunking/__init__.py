"""
Chunking strategies for ChunkForge.

This package turns parsed source files into a File -> Class -> Method chunk
hierarchy.

Architecture Position
---------------------
    CLI (outermost)
        └── **Chunking** (you are here)
                ├── Parsing (tree-sitter engine)
                ├── Languages (classification tables)
                └── Core (models, config, logging, cancellation)

Key Components
--------------
**GenericChunker**
    One table-driven traversal for every configured language.

**FallbackChunker**
    A single file-level chunk for extensions without a table.

**ChunkerRegistry**
    Extension -> strategy map, built once from the language tables.

**LegacyPythonChunker / LegacyGoChunker**
    Hand-written reference chunkers used to cross-check GenericChunker.

**is_minified**
    Heuristic check for generated or minified content.

Usage Example
-------------
    from chunkforge.chunking import ChunkerRegistry
    from chunkforge.core.models import SourceFile

    registry = ChunkerRegistry.from_config()
    result = registry.chunk(SourceFile.from_path("src/app.py"))
    for chunk in result:
        print(chunk.level.value, chunk.name, chunk.start_line, chunk.end_line)
"""

from chunkforge.chunking.base import Chunker
from chunkforge.chunking.fallback import UNKNOWN_LANGUAGE, FallbackChunker
from chunkforge.chunking.generic import GenericChunker
from chunkforge.chunking.legacy import LegacyGoChunker, LegacyPythonChunker
from chunkforge.chunking.minified import (
    MinifiedThresholds,
    is_minified,
    is_minified_extension,
    is_minified_with_thresholds,
)
from chunkforge.chunking.registry import ChunkerRegistry

__all__ = [
    "Chunker",
    "ChunkerRegistry",
    "FallbackChunker",
    "GenericChunker",
    "LegacyGoChunker",
    "LegacyPythonChunker",
    "MinifiedThresholds",
    "UNKNOWN_LANGUAGE",
    "is_minified",
    "is_minified_extension",
    "is_minified_with_thresholds",
]
