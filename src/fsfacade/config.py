"""Configuration for the filesystem facade."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fsfacade.types import (
    HASH_MD5,
    MODE_DIRECTORY_PRIVATE,
    MODE_DIRECTORY_PUBLIC,
    MODE_FILE_PRIVATE,
    MODE_FILE_PUBLIC,
)

# Default configuration location
CONFIG_DIR = Path.home() / ".fsfacade"
CONFIG_FILE = "config.yaml"


def parse_mode(value: Any) -> int:
    """Parse a permission mode given as an int or an octal string.

    Args:
        value: Mode such as ``0o644``, ``420``, ``"0644"`` or ``"644"``.

    Returns:
        Integer permission bits.

    Raises:
        ValueError: If the value is not a valid octal mode.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid mode: {value!r}")
    if isinstance(value, int):
        mode = value
    elif isinstance(value, str):
        text = value.strip().lower().removeprefix("0o")
        try:
            mode = int(text, 8)
        except ValueError as e:
            raise ValueError(f"Invalid octal mode: {value!r}") from e
    else:
        raise ValueError(f"Invalid mode: {value!r}")

    if not 0 <= mode <= 0o7777:
        raise ValueError(f"Mode out of range: {value!r}")
    return mode


class FsConfig(BaseModel):
    """Defaults applied by the facade when a caller does not pass them."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_mode: int = Field(default=MODE_FILE_PUBLIC, alias="fileMode")
    private_file_mode: int = Field(default=MODE_FILE_PRIVATE, alias="privateFileMode")
    dir_mode: int = Field(default=MODE_DIRECTORY_PUBLIC, alias="dirMode")
    private_dir_mode: int = Field(default=MODE_DIRECTORY_PRIVATE, alias="privateDirMode")
    hash_type: str = Field(default=HASH_MD5, alias="hashType")
    strict_copy: bool = Field(default=False, alias="strictCopy")

    @field_validator(
        "file_mode", "private_file_mode", "dir_mode", "private_dir_mode", mode="before"
    )
    @classmethod
    def _validate_mode(cls, value: Any) -> int:
        return parse_mode(value)

    @classmethod
    def from_file(cls, path: Path) -> FsConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed FsConfig.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the YAML is invalid or fails validation.
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.model_validate(data)


def load_config(path: Path | None = None) -> FsConfig:
    """Load configuration, falling back to defaults.

    Args:
        path: Explicit config file. Defaults to ~/.fsfacade/config.yaml.

    Returns:
        FsConfig from the file, or defaults when the default file is absent.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
    """
    if path is not None:
        return FsConfig.from_file(path)

    default_path = CONFIG_DIR / CONFIG_FILE
    if not default_path.exists():
        return FsConfig()
    return FsConfig.from_file(default_path)
