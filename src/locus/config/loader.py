"""Configuration loader with YAML and environment variable support.

This module provides a configuration loader that reads from ~/.config/locus/config.yaml
and allows environment variable overrides using LOCUS_* prefix.

Environment variables:
- LOCUS_DATA_DIR: Override storage.data_dir
- LOCUS_BACKUP_MAX: Override storage.backup_max
- LOCUS_HISTORY_MAX: Override history.max_entries
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from locus.models.config import Config

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "locus" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    A missing config file is not an error: every setting has a default.

    Args:
        config_path: Path to config file. If None, uses ~/.config/locus/config.yaml

    Returns:
        Validated Config object

    Raises:
        ValueError: If config file or an override is invalid
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        data = Config.load(config_path).model_dump()
    else:
        data = {}

    data = _apply_env_overrides(data)

    # Pydantic will validate the structure
    return Config(**data)


def _int_override(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    data.setdefault("storage", {})
    data.setdefault("history", {})

    if env_data_dir := os.getenv("LOCUS_DATA_DIR"):
        data["storage"]["data_dir"] = env_data_dir

    if (backup_max := _int_override("LOCUS_BACKUP_MAX")) is not None:
        data["storage"]["backup_max"] = backup_max

    if (history_max := _int_override("LOCUS_HISTORY_MAX")) is not None:
        data["history"]["max_entries"] = history_max

    return data
