"""Protocol definitions for the filesystem facade.

Code that depends on the facade (the CLI, callers injecting test doubles)
types against FileSystem rather than the concrete Filesystem class.
All concrete implementations satisfy this protocol structurally.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from fsfacade.types import OperationResult

PathLike = str | os.PathLike[str]


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem facade operations."""

    def touch(self, path: PathLike, time: float = 0) -> OperationResult:
        """Update timestamps, creating an empty file if missing."""
        ...

    def create_file(
        self, path: PathLike, mode: int | str | None = None, private: bool = False
    ) -> OperationResult:
        """Create an empty file with the given permission bits."""
        ...

    def create_dir(
        self,
        path: PathLike,
        mode: int | str | None = None,
        recursive: bool = False,
        private: bool = False,
    ) -> OperationResult:
        """Create a directory."""
        ...

    def read_file(
        self,
        path: PathLike,
        lock: bool = False,
        binary: bool = False,
        raise_on_error: bool = False,
    ) -> str | bytes:
        """Read a whole file.

        Args:
            path: File path.
            lock: Read under a shared lock.
            binary: Return bytes instead of text.
            raise_on_error: Raise instead of returning empty content.

        Returns:
            File content.
        """
        ...

    def read_file_lines(self, path: PathLike, skip_empty: bool = False) -> list[str]:
        """Read a file as lines without line endings."""
        ...

    def write_file(self, path: PathLike, content: str | bytes, lock: bool = False) -> OperationResult:
        """Overwrite a file."""
        ...

    def append_file(
        self, path: PathLike, content: str | bytes, lock: bool = False
    ) -> OperationResult:
        """Append to a file."""
        ...

    def prepend_file(
        self, path: PathLike, content: str | bytes, lock: bool = False
    ) -> OperationResult:
        """Insert content at the start of a file."""
        ...

    def size(self, path: PathLike) -> int:
        """Get the recursive size of a path in bytes."""
        ...

    def list_dir(
        self,
        path: PathLike,
        only_files: bool = False,
        extensions: str | Iterable[str] | None = None,
    ) -> list[str]:
        """List immediate child names of a directory.

        Args:
            path: Directory path.
            only_files: Exclude directories.
            extensions: Extensions to keep, applied with only_files.

        Returns:
            Child names.
        """
        ...

    def hash_file(self, path: PathLike, hash_type: str | None = None) -> str | None:
        """Get the hex digest of a file."""
        ...

    def rename(self, from_path: PathLike, to_path: PathLike) -> OperationResult:
        """Rename within one filesystem."""
        ...

    def delete(self, path: PathLike, recursive: bool = False) -> OperationResult:
        """Delete a file or directory."""
        ...

    def copy(
        self,
        from_path: PathLike,
        to_path: PathLike,
        replace: bool = False,
        strict: bool | None = None,
    ) -> OperationResult:
        """Copy a file or directory tree."""
        ...

    def move(self, from_path: PathLike, to_path: PathLike, replace: bool = False) -> OperationResult:
        """Copy then delete the source."""
        ...

    def mimetype(self, path: PathLike) -> str | None:
        """Detect the MIME type of a file."""
        ...

    def get_permissions(self, path: PathLike) -> str | None:
        """Get permission bits as an octal string."""
        ...

    def set_permissions(self, path: PathLike, mode: int | str) -> OperationResult:
        """Set permission bits."""
        ...

    def type(self, path: PathLike) -> str | None:
        """Get the file type name."""
        ...

    def exists(self, path: PathLike) -> bool:
        """Check if a path exists."""
        ...

    def is_file(self, path: PathLike) -> bool:
        """Check if a path is a regular file."""
        ...

    def is_dir(self, path: PathLike) -> bool:
        """Check if a path is a directory."""
        ...

    def is_readable(self, path: PathLike) -> bool:
        """Check if a path is readable."""
        ...

    def is_writable(self, path: PathLike) -> bool:
        """Check if a path is writable."""
        ...

    def atime(self, path: PathLike) -> int:
        """Get last access time."""
        ...

    def ctime(self, path: PathLike) -> int:
        """Get inode change time."""
        ...

    def mtime(self, path: PathLike) -> int:
        """Get last modification time."""
        ...

    def export(self, path: PathLike, data: Any) -> OperationResult:
        """Write structured data to a JSON or YAML file."""
        ...

    def load_export(self, path: PathLike) -> Any:
        """Read back data written by export()."""
        ...
