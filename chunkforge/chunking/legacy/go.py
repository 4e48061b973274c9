"""Reference chunker for Go."""

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

_FUNCTION_TYPES = ("function_declaration", "method_declaration")


class LegacyGoChunker:
    """Extracts type specs, functions and methods from Go sources.

    Go declares methods beside their receiver type, so every function and
    method is parented to the file chunk.
    """

    language = "go"
    grammar = "go"

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
        self._walk(tree.root_node, file, file_chunk, result.chunks)
        return result

    def _walk(
        self,
        node: SyntaxNode,
        file: SourceFile,
        file_chunk: Chunk,
        chunks: List[Chunk],
    ) -> None:
        for child in node.children:
            if child.type in _FUNCTION_TYPES:
                chunk = self._chunk_for(child, file, ChunkLevel.METHOD, file_chunk)
                if chunk is not None:
                    chunks.append(chunk)
            elif child.type == "type_declaration":
                self._type_declaration(child, file, file_chunk, chunks)
            else:
                self._walk(child, file, file_chunk, chunks)

    def _type_declaration(
        self,
        node: SyntaxNode,
        file: SourceFile,
        file_chunk: Chunk,
        chunks: List[Chunk],
    ) -> None:
        # One declaration may group several specs: type ( A struct{}; B int )
        for child in node.children:
            if child.type != "type_spec":
                continue
            chunk = self._chunk_for(child, file, ChunkLevel.CLASS, file_chunk)
            if chunk is not None:
                chunks.append(chunk)

    def _chunk_for(
        self, node: SyntaxNode, file: SourceFile, level: ChunkLevel, parent: Chunk
    ) -> Optional[Chunk]:
        name = extract_name(node, file.content, "name")
        if name is None:
            return None
        return make_node_chunk(node, file, level, name, parent, self.language)
