"""ChunkForge - semantic code chunking over tree-sitter syntax trees.

Turns source files into a File -> Class -> Method hierarchy of chunks with
stable identities, driven by per-language classification tables.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
