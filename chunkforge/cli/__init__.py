"""ChunkForge command-line interface (typer + rich)."""
