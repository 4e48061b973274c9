"""
Core Infrastructure for ChunkForge.

The innermost layer: it has no dependencies on other ChunkForge packages.

Architecture Position
---------------------
    CLI (outermost)
      └── Chunking (generic extractor, registry, minification)
            └── Parsing + Languages (tree-sitter engine, classification tables)
                  └── **Core** (innermost - you are here)

Components
----------
**models**: Chunk, ChunkResult, SourceFile and the identity digests.

**exceptions**: ChunkForgeError hierarchy (configuration, cancellation,
parse failures).

**cancellation**: CancellationToken with explicit cancel and deadline.

**config**: dataclass configuration loaded from YAML.

**logging**: StructuredLogger and get_logger().
"""
