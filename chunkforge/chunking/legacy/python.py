"""Reference chunker for Python."""

from typing import List, Optional

from chunkforge.chunking.base import (
    extract_name,
    is_blank,
    make_file_chunk,
    make_node_chunk,
)
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.models import Chunk, ChunkLevel, ChunkResult, SourceFile
from chunkforge.parsing.engine import ParseEngine, SyntaxNode


class LegacyPythonChunker:
    """Extracts classes and functions from Python sources.

    ``def`` inside a class body (at any depth of ``if``/``try`` blocks or
    decorators) belongs to the nearest class; nested classes hang off the
    file chunk.
    """

    language = "python"
    grammar = "python"

    def __init__(self, engine: ParseEngine) -> None:
        self.engine = engine

    def chunk(
        self, file: SourceFile, token: Optional[CancellationToken] = None
    ) -> ChunkResult:
        if token is not None:
            token.check()

        result = ChunkResult(file=file)
        if is_blank(file.content):
            return result

        tree = self.engine.parse(self.grammar, file.content)
        file_chunk = make_file_chunk(file, self.language)
        result.chunks.append(file_chunk)
        for child in tree.root_node.children:
            self._visit(child, file, file_chunk, file_chunk, result.chunks)
        return result

    def _visit(
        self,
        node: SyntaxNode,
        file: SourceFile,
        file_chunk: Chunk,
        owner: Chunk,
        chunks: List[Chunk],
    ) -> None:
        if node.type == "class_definition":
            chunk = self._chunk_for(node, file, ChunkLevel.CLASS, file_chunk)
            if chunk is not None:
                chunks.append(chunk)
                owner = chunk
            for child in node.children:
                self._visit(child, file, file_chunk, owner, chunks)
            return

        if node.type == "function_definition":
            chunk = self._chunk_for(node, file, ChunkLevel.METHOD, owner)
            if chunk is not None:
                chunks.append(chunk)
            return

        for child in node.children:
            self._visit(child, file, file_chunk, owner, chunks)

    def _chunk_for(
        self, node: SyntaxNode, file: SourceFile, level: ChunkLevel, parent: Chunk
    ) -> Optional[Chunk]:
        name = extract_name(node, file.content, "name")
        if name is None:
            return None
        return make_node_chunk(node, file, level, name, parent, self.language)
