"""
Table-driven chunk extraction.

One traversal algorithm serves every language; a ClassificationTable says
which node types are class-like or method-like and which field holds the
name.

Traversal
---------
Depth-first pre-order from the tree root, carrying a stack of "nearest
enclosing chunk" (initially the file chunk):

- class-like node: emit a Class chunk parented to the *file* chunk, push it
  and walk its subtree, then pop. Without a name no chunk is emitted but
  the subtree is still walked.
- method-like node: emit a Method chunk parented to the top of the stack.
  Method bodies are not walked; local closures never become chunks.
- anything else: walk the children, stack unchanged.

Parenting is lexical. Methods written inside a class body land under that
class; methods declared beside their type at file scope (Go receivers) land
under the file. Classes are flattened to depth one even when nested, while
their methods still land under the innermost enclosing class.

The walk runs on an explicit work list rather than Python recursion so
deeply nested trees cannot exhaust the interpreter stack, and it never
mutates the syntax tree.
"""

from typing import List, Optional, Tuple

from chunkforge.chunking.base import (
    count_lines,
    extract_name,
    is_blank,
    make_file_chunk,
    make_node_chunk,
)
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.exceptions import ConfigurationError, UnsupportedLanguageError
from chunkforge.core.logging import get_logger
from chunkforge.core.models import Chunk, ChunkLevel, ChunkResult, SourceFile
from chunkforge.languages.table import ClassificationTable
from chunkforge.parsing.engine import ParseEngine, SyntaxNode

logger = get_logger(__name__)

DEFAULT_CHECK_INTERVAL = 1024

# Work list entries: (node, exiting). An exiting entry pops the enclosing
# chunk pushed when its class node was entered.
_WorkItem = Tuple[SyntaxNode, bool]


class GenericChunker:
    """
    Config-driven chunker for any language with a classification table.

    Example
    -------
        engine = ParseEngine()
        table = load_language_table("languages/python.yaml")
        chunker = GenericChunker(engine, table)
        result = chunker.chunk(SourceFile("app.py", source_bytes))
    """

    def __init__(
        self,
        engine: Optional[ParseEngine],
        table: Optional[ClassificationTable],
        check_interval: int = DEFAULT_CHECK_INTERVAL,
    ) -> None:
        if engine is None:
            raise ConfigurationError("A parse engine is required")
        if table is None:
            raise ConfigurationError("A classification table is required")
        if check_interval < 1:
            raise ConfigurationError("check_interval must be >= 1")

        try:
            engine.load_language(table.grammar)
        except UnsupportedLanguageError as e:
            raise ConfigurationError(
                f"Parse engine cannot load grammar '{table.grammar}' "
                f"for language '{table.language}'"
            ) from e

        self.engine = engine
        self.table = table
        self.check_interval = check_interval

    @property
    def language(self) -> str:
        return self.table.language

    def is_class_node(self, node_type: str) -> bool:
        return self.table.is_class_node(node_type)

    def is_method_node(self, node_type: str) -> bool:
        return self.table.is_method_node(node_type)

    def chunk(
        self, file: SourceFile, token: Optional[CancellationToken] = None
    ) -> ChunkResult:
        """Extract the chunk hierarchy of one file.

        Raises:
            CancelledError / DeadlineExceededError: If ``token`` fires.
            ParseFatalError: If the engine produces no tree.
        """
        if token is not None:
            token.check()

        result = ChunkResult(file=file)
        if is_blank(file.content):
            return result

        tree = self.engine.parse(self.table.grammar, file.content)

        file_chunk = make_file_chunk(file, self.language)
        result.chunks.append(file_chunk)
        self._walk(tree.root_node, file, file_chunk, result.chunks, token)

        logger.debug(
            "Chunked file",
            path=file.path,
            language=self.language,
            lines=count_lines(file.content),
            chunks=len(result.chunks),
        )
        return result

    def _walk(
        self,
        root: SyntaxNode,
        file: SourceFile,
        file_chunk: Chunk,
        chunks: List[Chunk],
        token: Optional[CancellationToken],
    ) -> None:
        enclosing: List[Chunk] = [file_chunk]
        work: List[_WorkItem] = [(root, False)]
        visited = 0

        while work:
            node, exiting = work.pop()
            if exiting:
                enclosing.pop()
                continue

            visited += 1
            if token is not None and visited % self.check_interval == 0:
                token.check()

            node_type = node.type
            if self.is_class_node(node_type):
                chunk = self._extract(node, file, ChunkLevel.CLASS, file_chunk)
                if chunk is not None:
                    chunks.append(chunk)
                    enclosing.append(chunk)
                    work.append((node, True))
                _push_children(work, node)
            elif self.is_method_node(node_type):
                chunk = self._extract(node, file, ChunkLevel.METHOD, enclosing[-1])
                if chunk is not None:
                    chunks.append(chunk)
            else:
                _push_children(work, node)

    def _extract(
        self,
        node: SyntaxNode,
        file: SourceFile,
        level: ChunkLevel,
        parent: Chunk,
    ) -> Optional[Chunk]:
        name = extract_name(node, file.content, self.table.name_field)
        if name is None:
            logger.debug(
                "Skipped unnamed node",
                path=file.path,
                node_type=node.type,
                line=node.start_point[0] + 1,
            )
            return None

        chunk = make_node_chunk(node, file, level, name, parent, self.language)
        if chunk is None:
            logger.debug(
                "Skipped malformed node",
                path=file.path,
                node_type=node.type,
                name=name,
            )
        return chunk

    def __repr__(self) -> str:
        return f"GenericChunker(language={self.language!r})"


def _push_children(work: List[_WorkItem], node: SyntaxNode) -> None:
    """Queue children so they pop in source order."""
    for child in reversed(node.children):
        work.append((child, False))
