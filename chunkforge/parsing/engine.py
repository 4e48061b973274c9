"""
Parse engine over tree-sitter.

Wraps tree-sitter and the grammars shipped by tree-sitter-language-pack
behind one call: ``parse(language_id, source) -> Tree``.

Grammar ``Language`` objects are loaded lazily and cached; they are
immutable and shared between threads. A fresh ``Parser`` is created for
every parse, so concurrent calls never share parse state and no lock is
held while parsing.

Tree-sitter is error-tolerant: malformed source yields a tree containing
ERROR / MISSING nodes rather than an exception. ``ParseFatalError`` is only
raised when no tree comes back at all.
"""

import threading
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from tree_sitter import Language, Parser, Tree
from tree_sitter_language_pack import get_language

from chunkforge.core.exceptions import ParseFatalError, UnsupportedLanguageError
from chunkforge.core.logging import get_logger

logger = get_logger(__name__)


class SyntaxNode(Protocol):
    """The part of a tree-sitter ``Node`` the chunkers rely on."""

    @property
    def type(self) -> str: ...

    @property
    def start_point(self) -> Tuple[int, int]: ...

    @property
    def end_point(self) -> Tuple[int, int]: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def child_count(self) -> int: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    def child_by_field_name(self, name: str) -> Optional["SyntaxNode"]: ...


def node_text(node: SyntaxNode, source: bytes) -> str:
    """Source text covered by a node, decoded leniently."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class ParseEngine:
    """
    Registry of tree-sitter grammars with a thread-safe parse entry point.

    Example
    -------
        engine = ParseEngine()
        tree = engine.parse("python", b"def f():\\n    pass\\n")
        tree.root_node.type  # "module"
    """

    def __init__(self) -> None:
        self._languages: Dict[str, Language] = {}
        self._unsupported: Dict[str, str] = {}
        self._lock = threading.Lock()

    def load_language(self, language_id: str) -> Language:
        """Return the grammar for ``language_id``, loading it on first use.

        Raises:
            UnsupportedLanguageError: If no grammar exists under that name.
        """
        key = language_id.lower()
        language = self._languages.get(key)
        if language is not None:
            return language

        with self._lock:
            if key in self._languages:
                return self._languages[key]
            if key in self._unsupported:
                raise UnsupportedLanguageError(
                    f"Unsupported language: {language_id} ({self._unsupported[key]})",
                    language=language_id,
                )
            try:
                language = get_language(key)
            except Exception as e:  # the language pack raises several types
                self._unsupported[key] = str(e)
                raise UnsupportedLanguageError(
                    f"Unsupported language: {language_id} ({e})",
                    language=language_id,
                ) from e
            self._languages[key] = language
            logger.debug("Loaded grammar", language=key)
            return language

    def supports(self, language_id: str) -> bool:
        """True if a grammar can be loaded for ``language_id``."""
        try:
            self.load_language(language_id)
        except UnsupportedLanguageError:
            return False
        return True

    @property
    def loaded_languages(self) -> List[str]:
        return sorted(self._languages)

    def parse(self, language_id: str, source: bytes) -> Tree:
        """Parse ``source`` with the grammar for ``language_id``.

        Raises:
            UnsupportedLanguageError: If the grammar is unknown.
            ParseFatalError: If tree-sitter returned no tree.
        """
        language = self.load_language(language_id)
        parser = Parser(language)
        try:
            tree = parser.parse(source)
        except (ValueError, TypeError) as e:
            raise ParseFatalError(
                f"Failed to parse {language_id}: {e}", language=language_id
            ) from e
        if tree is None:
            raise ParseFatalError(
                f"Failed to parse {language_id}: no tree produced",
                language=language_id,
            )
        return tree
