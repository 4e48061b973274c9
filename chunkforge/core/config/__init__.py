"""
Configuration Management for ChunkForge.

    from chunkforge.core.config import Config, load_config

    config = load_config()
    registry = ChunkerRegistry.from_config(config)

Layout
------
    config/
    ├── chunking.py      # ChunkingConfig, MinifiedConfig
    └── config.py        # LoggingConfig and the main Config class
"""

from chunkforge.core.config.chunking import ChunkingConfig, MinifiedConfig
from chunkforge.core.config.config import Config, LoggingConfig
from chunkforge.core.config_loaders import expand_env_vars, load_config

__all__ = [
    "Config",
    "ChunkingConfig",
    "MinifiedConfig",
    "LoggingConfig",
    "expand_env_vars",
    "load_config",
]
