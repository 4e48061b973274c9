"""
Chunking and minification configuration.

Provides configuration for the chunker registry (where language tables come
from, how often long walks poll for cancellation) and the thresholds used to
recognize minified or generated files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from chunkforge.core.exceptions import ConfigurationError

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def parse_bool(name: str, value: Any) -> bool:
    """Accept a bool or a boolean string (env-expanded values arrive as text)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigurationError(f"{name} must be true or false, got: {value!r}")


@dataclass
class ChunkingConfig:
    """Chunker registry configuration."""

    languages_dir: Optional[Union[str, Path]] = None  # None: packaged tables
    check_interval: int = 1024  # nodes between cancellation checks
    skip_minified: bool = True
    legacy_enabled: bool = True  # build legacy reference chunkers

    def __post_init__(self) -> None:
        self.skip_minified = parse_bool("chunking.skip_minified", self.skip_minified)
        self.legacy_enabled = parse_bool("chunking.legacy_enabled", self.legacy_enabled)
        if self.check_interval < 1:
            raise ConfigurationError(
                f"chunking.check_interval must be >= 1, got: {self.check_interval}"
            )
        if self.languages_dir is not None:
            self.languages_dir = Path(self.languages_dir).expanduser()


@dataclass
class MinifiedConfig:
    """Thresholds for minified/generated file detection."""

    max_avg_line_length: int = 500
    max_single_line_size: int = 10 * 1024
    min_whitespace_ratio: float = 0.05
    min_size_for_whitespace_check: int = 1024

    def __post_init__(self) -> None:
        if self.max_avg_line_length <= 0:
            raise ConfigurationError("minified.max_avg_line_length must be positive")
        if self.max_single_line_size <= 0:
            raise ConfigurationError("minified.max_single_line_size must be positive")
        if not 0.0 <= self.min_whitespace_ratio <= 1.0:
            raise ConfigurationError(
                "minified.min_whitespace_ratio must be between 0 and 1, "
                f"got: {self.min_whitespace_ratio}"
            )
        if self.min_size_for_whitespace_check < 0:
            raise ConfigurationError(
                "minified.min_size_for_whitespace_check must not be negative"
            )
