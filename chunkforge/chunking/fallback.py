"""Fallback chunking: one file-level chunk for anything."""

from typing import Optional

from chunkforge.chunking.base import make_file_chunk
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.models import ChunkResult, SourceFile

UNKNOWN_LANGUAGE = "unknown"


class FallbackChunker:
    """Emits exactly one File chunk and nothing else.

    Used for extensions without a classification table, so every file is
    indexable at least at file granularity. Unlike the generic chunker it
    emits the file chunk even for empty content. That chunk has empty
    content, so its ``Chunk.validate()`` reports "content is required";
    callers that index fallback output should accept it anyway.
    """

    language = UNKNOWN_LANGUAGE

    def chunk(
        self, file: SourceFile, token: Optional[CancellationToken] = None
    ) -> ChunkResult:
        if token is not None:
            token.check()

        chunk = make_file_chunk(file, file.language or UNKNOWN_LANGUAGE)
        return ChunkResult(file=file, chunks=[chunk])

    def __repr__(self) -> str:
        return "FallbackChunker()"
