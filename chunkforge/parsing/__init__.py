"""Parse engine wrapper around tree-sitter grammars."""

from chunkforge.parsing.engine import ParseEngine, SyntaxNode, node_text

__all__ = ["ParseEngine", "SyntaxNode", "node_text"]
