"""
Configuration Loading Functions.

Handles loading ChunkForge configuration from YAML and applying environment
variable overrides.

Precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment variables
---------------------
CHUNKFORGE_LOG_LEVEL        overrides logging.level
CHUNKFORGE_LANGUAGES_DIR    overrides chunking.languages_dir
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import yaml

from chunkforge.core.exceptions import ConfigurationError
from chunkforge.core.logging import get_logger

if TYPE_CHECKING:
    from chunkforge.core.config import Config

logger = get_logger(__name__)

CONFIG_FILENAMES = ("chunkforge.yaml", "config.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles ``${VAR_NAME}`` and ``${VAR_NAME:default}`` inside strings, and
    walks nested dicts and lists.

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return _ENV_PATTERN.sub(replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _apply_env_overrides(config: "Config") -> "Config":
    """Apply environment variable overrides to configuration."""
    from chunkforge.core.config import LoggingConfig

    level = os.environ.get("CHUNKFORGE_LOG_LEVEL")
    if level:
        config.logging = LoggingConfig(level=level, file=config.logging.file)

    languages_dir = os.environ.get("CHUNKFORGE_LANGUAGES_DIR")
    if languages_dir:
        config.chunking.languages_dir = Path(languages_dir).expanduser()

    return config


def _find_config_file(base_path: Path) -> Optional[Path]:
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to chunkforge.yaml (or
            config.yaml) in base_path. An explicit path must exist.
        base_path: Base path relative paths resolve against. Defaults to the
            config file's directory, else the current directory.

    Returns:
        Config object with all settings.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or holds
            invalid values.
    """
    from chunkforge.core.config import Config

    if config_path is None:
        config_path = _find_config_file(base_path or Path.cwd())
        if config_path is None:
            config = Config()
            config._base_path = base_path or Path.cwd()
            return _apply_env_overrides(config)
    elif not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not load config from {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    config = Config.from_dict(data, base_path or config_path.parent)
    logger.debug("Loaded configuration", path=str(config_path))
    return _apply_env_overrides(config)


def save_config(config: "Config", config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_dict = config.to_dict()
    languages_dir = config_dict["chunking"].get("languages_dir")
    if languages_dir is not None:
        config_dict["chunking"]["languages_dir"] = str(languages_dir)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
