"""Convenience facade over native filesystem operations."""

__version__ = "0.1.0"

from fsfacade.config import FsConfig, load_config
from fsfacade.export import InvalidExportPathError
from fsfacade.filesystem import Filesystem, FilesystemError
from fsfacade.protocols import FileSystem
from fsfacade.types import (
    HASH_MD5,
    HASH_SHA1,
    MODE_DIRECTORY_PRIVATE,
    MODE_DIRECTORY_PUBLIC,
    MODE_FILE_PRIVATE,
    MODE_FILE_PUBLIC,
    OperationResult,
)

__all__ = [
    "__version__",
    "FileSystem",
    "Filesystem",
    "FilesystemError",
    "FsConfig",
    "HASH_MD5",
    "HASH_SHA1",
    "InvalidExportPathError",
    "MODE_DIRECTORY_PRIVATE",
    "MODE_DIRECTORY_PUBLIC",
    "MODE_FILE_PRIVATE",
    "MODE_FILE_PUBLIC",
    "OperationResult",
    "load_config",
]
