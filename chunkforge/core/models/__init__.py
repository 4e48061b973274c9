"""Data models shared by every chunking strategy."""

from chunkforge.core.models.chunk import (
    Chunk,
    ChunkLevel,
    ChunkResult,
    SourceFile,
    generate_chunk_id,
    generate_content_hash,
)

__all__ = [
    "Chunk",
    "ChunkLevel",
    "ChunkResult",
    "SourceFile",
    "generate_chunk_id",
    "generate_content_hash",
]
