"""Application context for dependency injection.

CLI commands take their collaborators from an AppContext instead of
creating them, so tests can pass test doubles through ``_context``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fsfacade.config import FsConfig, load_config
from fsfacade.display import Display
from fsfacade.protocols import FileSystem


@dataclass
class AppContext:
    """Container for CLI dependencies.

    The filesystem is typed using the FileSystem Protocol, so a test double
    can be injected without inheritance.
    """

    filesystem: FileSystem
    config: FsConfig = field(default_factory=FsConfig)
    display: Display = field(default_factory=Display)


def create_context(config_path: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Args:
        config_path: Explicit config file. Defaults to ~/.fsfacade/config.yaml.

    Returns:
        Configured AppContext.

    Raises:
        FileNotFoundError: If config_path does not exist.
        ValueError: If the config file is invalid.
    """
    from fsfacade.filesystem import Filesystem

    config = load_config(config_path)
    return AppContext(
        filesystem=Filesystem.create(config),
        config=config,
        display=Display(),
    )
