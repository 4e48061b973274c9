"""
Main configuration class for ChunkForge.

The Config dataclass aggregates the sub-configs and is usually built once by
load_config() and handed to ChunkerRegistry.from_config() and the CLI.

    chunkforge.yaml
           ↓
    load_config() → Config
           ↓
    ChunkerRegistry.from_config(config), MinifiedThresholds.from_config(...)

Example chunkforge.yaml::

    chunking:
      languages_dir: ${CHUNKFORGE_HOME:~/.chunkforge}/languages
      check_interval: 512
    minified:
      max_avg_line_length: 400
    logging:
      level: INFO
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from chunkforge.core.config.chunking import ChunkingConfig, MinifiedConfig
from chunkforge.core.exceptions import ConfigurationError

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    file: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.level, str):
            raise ConfigurationError(
                f"logging.level must be a string, got: {self.level!r}"
            )
        self.level = self.level.upper()
        if self.level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"logging.level must be one of {sorted(VALID_LOG_LEVELS)}, "
                f"got: {self.level}"
            )


@dataclass
class Config:
    """Main ChunkForge configuration."""

    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    minified: MinifiedConfig = field(default_factory=MinifiedConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    @property
    def languages_path(self) -> Optional[Path]:
        """Language table directory resolved against the config location."""
        languages_dir = self.chunking.languages_dir
        if languages_dir is None:
            return None
        path = Path(languages_dir)
        if path.is_absolute():
            return path
        return self._base_path / path

    @property
    def log_file_path(self) -> Optional[Path]:
        if not self.logging.file:
            return None
        path = Path(self.logging.file).expanduser()
        if path.is_absolute():
            return path
        return self._base_path / path

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: Dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping for {cls_type.__name__}, got {type(data).__name__}"
            )
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        from chunkforge.core.config_loaders import expand_env_vars

        data = expand_env_vars(data or {})

        try:
            config = cls(
                chunking=ChunkingConfig(
                    **cls._filter_fields(ChunkingConfig, data.get("chunking"))
                ),
                minified=MinifiedConfig(
                    **cls._filter_fields(MinifiedConfig, data.get("minified"))
                ),
                logging=LoggingConfig(
                    **cls._filter_fields(LoggingConfig, data.get("logging"))
                ),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        if base_path:
            config._base_path = base_path

        return config
