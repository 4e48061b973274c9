"""
Hand-written reference chunkers.

These predate the table-driven GenericChunker and are kept only to
cross-check it: for the same input both must agree on chunk counts, names
and hierarchy. The registry never routes files to them and no new languages
are added here.
"""

from chunkforge.chunking.legacy.go import LegacyGoChunker
from chunkforge.chunking.legacy.python import LegacyPythonChunker

__all__ = ["LegacyGoChunker", "LegacyPythonChunker"]
