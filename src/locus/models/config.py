"""Configuration models for Locus."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Configuration for the memo file and its backup ring."""

    data_dir: str = Field(
        default="~/.local/share/locus",
        description="Directory holding the memo file and its backups"
    )

    memo_name: str = Field(
        default="memo.cgi",
        description="File name of the live memo file"
    )

    backup_max: int = Field(
        default=10,
        ge=1,
        le=99,
        description="Number of rotating backup slots kept next to the memo file"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Expand ~ and reject paths that exist but are not directories."""
        path = Path(v).expanduser()
        if path.exists() and not path.is_dir():
            raise ValueError(
                f"Data path is not a directory: {path}\n"
                f"Please provide a valid directory path"
            )
        return str(path)

    @field_validator('memo_name')
    @classmethod
    def validate_memo_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"memo_name must be a bare file name: {v!r}")
        return v

    model_config = {"frozen": True}


class HistoryConfig(BaseModel):
    """Configuration for undo/redo history."""

    max_entries: int = Field(
        default=50,
        ge=1,
        description="Maximum number of undo steps kept"
    )

    destructive_threshold: float = Field(
        default=0.10,
        gt=0.0,
        le=1.0,
        description="Fraction of nodes a single edit may remove before confirmation is required"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for the Locus application."""

    storage: StorageConfig = Field(default_factory=StorageConfig, description="Memo file settings")
    history: HistoryConfig = Field(default_factory=HistoryConfig, description="Undo history settings")

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Please create the file with the following format:\n\n"
                f"storage:\n"
                f"  data_dir: ~/.local/share/locus\n"
                f"  backup_max: 10\n\n"
                f"history:\n"
                f"  max_entries: 50\n"
            )

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {path}: expected a mapping, got {type(data).__name__}")

        return cls(**data)

    model_config = {"frozen": True}
