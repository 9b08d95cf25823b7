"""Filesystem facade over native OS primitives.

Every operation forwards to the standard library with light validation.
Mutating operations report failures as falsy OperationResult values
instead of raising, so a caller can keep the boolean style
(``if fs.copy(a, b): ...``) and still inspect ``result.error``.
"""

from __future__ import annotations

import codecs
import hashlib
import logging
import mimetypes
import os
import shutil
import stat
import time as _time
from collections.abc import Iterable
from contextlib import nullcontext
from pathlib import Path
from typing import Any

from fsfacade.config import FsConfig, load_config, parse_mode
from fsfacade.export import dumps, export_format, loads
from fsfacade.locking import scoped_lock
from fsfacade.types import HASH_MD5, HASH_SHA1, OperationResult

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]
Content = str | bytes

_HASHERS = {
    HASH_MD5: hashlib.md5,
    HASH_SHA1: hashlib.sha1,
}

_FILE_TYPES = (
    (stat.S_ISFIFO, "fifo"),
    (stat.S_ISCHR, "char"),
    (stat.S_ISDIR, "dir"),
    (stat.S_ISBLK, "block"),
    (stat.S_ISLNK, "link"),
    (stat.S_ISREG, "file"),
    (stat.S_ISSOCK, "socket"),
)

_CHUNK_SIZE = 1024 * 1024
_SNIFF_SIZE = 8192

MIME_DIRECTORY = "directory"
MIME_EMPTY = "application/x-empty"
MIME_TEXT = "text/plain"
MIME_BINARY = "application/octet-stream"


class FilesystemError(Exception):
    """Error raised by operations called with raise_on_error=True."""

    pass


def _to_bytes(content: Content) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8", "surrogateescape")
    return bytes(content)


def _extension(name: str) -> str:
    """Get the text after the last dot of a file name ("" if none)."""
    return name.rpartition(".")[2] if "." in name else ""


def _normalize_extensions(extensions: str | Iterable[str] | None) -> set[str] | None:
    if extensions is None:
        return None
    if isinstance(extensions, str):
        extensions = [extensions]
    return {ext[1:] if ext.startswith(".") else ext for ext in extensions}


def _is_within(path: str, parent: str) -> bool:
    """Check whether path is parent itself or lies below it."""
    return Path(path).resolve().is_relative_to(Path(parent).resolve())


class Filesystem:
    """Facade exposing CRUD-style operations over filesystem paths.

    Instances hold only an immutable FsConfig, so they are cheap to create
    and safe to share.
    """

    def __init__(self, config: FsConfig | None = None) -> None:
        """Initialize the facade.

        Args:
            config: Default modes and hash type. Defaults to FsConfig().

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.config = config or FsConfig()

    @classmethod
    def create(cls, config: FsConfig) -> Filesystem:
        """Create a facade with an explicit configuration.

        Args:
            config: Configuration to apply.

        Returns:
            Configured Filesystem instance.
        """
        return cls(config=config)

    @classmethod
    def create_default(cls) -> Filesystem:
        """Create a facade using ~/.fsfacade/config.yaml when it exists.

        Returns:
            Filesystem configured from the default config file or defaults.
        """
        return cls(config=load_config())

    def _failed(self, action: str, path: PathLike, error: OSError | str) -> OperationResult:
        logger.debug("%s failed for %s: %s", action, path, error)
        return OperationResult.fail(os.fspath(path), f"{action} failed: {error}")

    # ========================================================================
    # Creation
    # ========================================================================

    def touch(self, path: PathLike, time: float = 0) -> OperationResult:
        """Set access and modification time, creating an empty file if needed.

        Args:
            path: File or directory path.
            time: Epoch timestamp. Zero or negative means now.

        Returns:
            OperationResult for path.
        """
        stamp = time if time and time > 0 else _time.time()
        try:
            if not os.path.exists(path):
                with open(path, "ab"):
                    pass
            os.utime(path, (stamp, stamp))
        except OSError as e:
            return self._failed("touch", path, e)
        return OperationResult.ok(os.fspath(path))

    def create_file(
        self, path: PathLike, mode: int | str | None = None, private: bool = False
    ) -> OperationResult:
        """Create an empty file and set its permission bits.

        Parent directories are created as needed. An existing file is
        truncated.

        Args:
            path: File path.
            mode: Permission bits. Defaults to the configured file mode.
            private: Use the configured private file mode when mode is not given.

        Returns:
            OperationResult for path.
        """
        result = self.write_file(path, "", lock=True)
        if not result:
            return result
        if mode is None:
            mode = self.config.private_file_mode if private else self.config.file_mode
        return self.set_permissions(path, mode)

    def create_dir(
        self,
        path: PathLike,
        mode: int | str | None = None,
        recursive: bool = False,
        private: bool = False,
    ) -> OperationResult:
        """Create a directory.

        Args:
            path: Directory path.
            mode: Permission bits (subject to umask). Defaults to the
                configured public directory mode.
            recursive: Create missing parent directories.
            private: Use the configured private directory mode when mode is
                not given.

        Returns:
            OperationResult, failed if the directory already exists or a
            parent is missing without recursive.
        """
        if mode is None:
            mode = self.config.private_dir_mode if private else self.config.dir_mode
        bits = parse_mode(mode)
        try:
            if recursive:
                os.makedirs(path, bits)
            else:
                os.mkdir(path, bits)
        except OSError as e:
            return self._failed("create_dir", path, e)
        return OperationResult.ok(os.fspath(path))

    def _ensure_directory_exists(self, path: PathLike) -> None:
        parent = os.path.dirname(os.fspath(path))
        if not parent or self.is_dir(parent):
            return
        # A failure here surfaces as the write error that follows.
        self.create_dir(parent, self.config.dir_mode, recursive=True)

    # ========================================================================
    # Reading
    # ========================================================================

    def read_file(
        self,
        path: PathLike,
        lock: bool = False,
        binary: bool = False,
        raise_on_error: bool = False,
    ) -> str | bytes:
        """Read a whole file.

        With lock, the file is read under a shared lock and the size is taken
        from the open handle after the lock is acquired, so a writer holding
        an exclusive lock cannot be observed half-way.

        Args:
            path: File path.
            lock: Read under a shared advisory lock.
            binary: Return bytes instead of text.
            raise_on_error: Raise FilesystemError instead of returning empty.

        Returns:
            File content. Empty when the file cannot be read, which is
            indistinguishable from an empty file unless raise_on_error is set.

        Raises:
            FilesystemError: If raise_on_error is set and the read fails.
        """
        try:
            if lock:
                with open(path, "rb") as fh, scoped_lock(fh):
                    size = os.fstat(fh.fileno()).st_size
                    data = fh.read(size or 1)
            else:
                with open(path, "rb") as fh:
                    data = fh.read()
        except OSError as e:
            logger.debug("read_file failed for %s: %s", path, e)
            if raise_on_error:
                raise FilesystemError(f"Cannot read {os.fspath(path)}: {e}") from e
            data = b""

        if binary:
            return data
        return data.decode("utf-8", "surrogateescape")

    def read_file_lines(self, path: PathLike, skip_empty: bool = False) -> list[str]:
        """Read a file as a list of lines without line endings.

        Args:
            path: File path.
            skip_empty: Omit blank lines.

        Returns:
            Lines in file order, or an empty list if the file cannot be read.
        """
        try:
            content = self.read_file(path, raise_on_error=True)
        except FilesystemError:
            return []

        lines = content.split("\n")
        if lines[-1] == "":
            lines.pop()
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        if skip_empty:
            lines = [line for line in lines if line]
        return lines

    # ========================================================================
    # Writing
    # ========================================================================

    def _put(
        self, action: str, path: PathLike, content: Content, lock: bool, append: bool
    ) -> OperationResult:
        self._ensure_directory_exists(path)
        data = _to_bytes(content)

        try:
            # Opened in append mode so that taking the lock never truncates
            # a file another writer is still using.
            with open(path, "ab") as fh:
                with scoped_lock(fh, exclusive=True) if lock else nullcontext(fh):
                    if not append:
                        fh.truncate(0)
                    written = fh.write(data)
                    fh.flush()
        except OSError as e:
            return self._failed(action, path, e)

        if written != len(data):
            return self._failed(action, path, f"wrote {written} of {len(data)} bytes")
        return OperationResult.ok(os.fspath(path))

    def write_file(self, path: PathLike, content: Content, lock: bool = False) -> OperationResult:
        """Overwrite a file, creating parent directories as needed.

        Args:
            path: File path.
            content: Text (encoded as UTF-8) or bytes.
            lock: Write under an exclusive advisory lock.

        Returns:
            OperationResult, successful only if all content was written.
        """
        return self._put("write_file", path, content, lock, append=False)

    def append_file(self, path: PathLike, content: Content, lock: bool = False) -> OperationResult:
        """Append to a file, creating it and its parent directories as needed."""
        return self._put("append_file", path, content, lock, append=True)

    def prepend_file(self, path: PathLike, content: Content, lock: bool = False) -> OperationResult:
        """Insert content at the start of a file.

        The existing content is read and the file is rewritten in two
        separately locked steps. A concurrent writer that runs between them
        is lost.

        Args:
            path: File path. Created if missing.
            content: Text or bytes to put in front.
            lock: Lock each of the read and the write.

        Returns:
            OperationResult. An existing file that cannot be read is left
            untouched.
        """
        existing = b""
        if self.exists(path):
            try:
                existing = self.read_file(path, lock=lock, binary=True, raise_on_error=True)
            except FilesystemError as e:
                return self._failed("prepend_file", path, str(e.__cause__ or e))
        return self._put("prepend_file", path, _to_bytes(content) + existing, lock, append=False)

    # ========================================================================
    # Tree walks
    # ========================================================================

    def size(self, path: PathLike) -> int:
        """Get the size of a file, or the recursive size of a directory.

        Directories are walked again on every call.

        Args:
            path: File or directory path.

        Returns:
            Size in bytes, 0 for a missing path.
        """
        if self.is_dir(path):
            return sum(self.size(os.path.join(path, name)) for name in self.list_dir(path))
        if self.is_file(path):
            try:
                return os.path.getsize(path)
            except OSError as e:
                logger.debug("size failed for %s: %s", path, e)
        return 0

    def list_dir(
        self,
        path: PathLike,
        only_files: bool = False,
        extensions: str | Iterable[str] | None = None,
    ) -> list[str]:
        """List the names of the immediate children of a directory.

        Args:
            path: Directory path.
            only_files: Exclude directories.
            extensions: Extension or extensions to keep (without the dot).
                Only applied together with only_files.

        Returns:
            Child names in filesystem order, or an empty list if the
            directory cannot be read.
        """
        wanted = _normalize_extensions(extensions)
        names: list[str] = []

        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    if only_files:
                        if entry.is_dir():
                            continue
                        if wanted is not None and _extension(entry.name) not in wanted:
                            continue
                    names.append(entry.name)
        except OSError as e:
            logger.debug("list_dir failed for %s: %s", path, e)
            return []
        return names

    def delete(self, path: PathLike, recursive: bool = False) -> OperationResult:
        """Delete a file or directory.

        A non-empty directory is only removed with recursive, and is left
        untouched otherwise. A recursive delete removes children in reverse
        listing order, depth first, and keeps going after a failure; the
        directory itself is removed last.

        Args:
            path: File or directory path.
            recursive: Remove directory contents.

        Returns:
            OperationResult whose error lists every path that could not be
            removed.
        """
        failures: list[str] = []
        self._delete(os.fspath(path), recursive, failures)
        if failures:
            return OperationResult.fail(os.fspath(path), "delete failed: " + "; ".join(failures))
        return OperationResult.ok(os.fspath(path))

    def _delete(self, path: str, recursive: bool, failures: list[str]) -> None:
        if self.is_dir(path) and not os.path.islink(path):
            names = self.list_dir(path)
            if names and not recursive:
                failures.append(f"Directory not empty: '{path}'")
                return
            for name in reversed(names):
                self._delete(os.path.join(path, name), recursive, failures)
            try:
                os.rmdir(path)
            except OSError as e:
                logger.debug("rmdir failed for %s: %s", path, e)
                failures.append(str(e))
            return

        try:
            os.unlink(path)
        except OSError as e:
            logger.debug("unlink failed for %s: %s", path, e)
            failures.append(str(e))

    def copy(
        self,
        from_path: PathLike,
        to_path: PathLike,
        replace: bool = False,
        strict: bool | None = None,
    ) -> OperationResult:
        """Copy a file or directory tree.

        A file is not copied over an existing destination unless replace is
        set. A directory destination is always deleted and rebuilt, whatever
        replace says. Permission bits follow the source.

        Success is judged by comparing the total size of source and
        destination, which does not catch content that differs at equal
        size. Use strict to compare content hashes as well.

        Args:
            from_path: Source file or directory.
            to_path: Destination path.
            replace: Overwrite existing destination files.
            strict: Verify content hashes. Defaults to config.strict_copy.

        Returns:
            OperationResult for to_path.
        """
        src, dst = os.fspath(from_path), os.fspath(to_path)
        rejected = self._check_copy(src, dst)
        if rejected is not None:
            return rejected

        result = self._copy(src, dst, replace)
        if not result:
            return result

        src_size, dst_size = self.size(src), self.size(dst)
        if src_size != dst_size:
            return self._failed("copy", dst, f"size mismatch ({src_size} != {dst_size})")

        if self.config.strict_copy if strict is None else strict:
            src_digest = self._tree_digest(src)
            if src_digest is None or src_digest != self._tree_digest(dst):
                return self._failed("copy", dst, "content mismatch")
        return OperationResult.ok(dst)

    def _check_copy(self, src: str, dst: str) -> OperationResult | None:
        """Reject a copy before anything is deleted or written.

        A directory destination is deleted before it is rebuilt, so it must
        not contain the source, and it must not lie inside the source.
        """
        if not self.exists(src):
            return self._failed("copy", dst, f"source not found: '{src}'")
        if self.is_dir(src):
            if _is_within(dst, src):
                return self._failed("copy", dst, f"cannot copy '{src}' into itself")
            if _is_within(src, dst):
                return self._failed("copy", dst, f"cannot copy '{src}' onto its ancestor '{dst}'")
        return None

    def _copy(self, src: str, dst: str, replace: bool) -> OperationResult:
        if self.is_dir(src):
            if self.exists(dst):
                removed = self.delete(dst, recursive=True)
                if not removed:
                    return removed
            created = self.create_dir(dst)
            if not created:
                return created
            for name in self.list_dir(src):
                child = self._copy(os.path.join(src, name), os.path.join(dst, name), replace)
                if not child:
                    return child
        else:
            if self.exists(dst) and not replace:
                return self._failed("copy", dst, f"destination exists: '{dst}'")
            try:
                shutil.copyfile(src, dst)
            except OSError as e:
                return self._failed("copy", dst, e)

        mode = self.get_permissions(src)
        if mode is None:
            return self._failed("copy", dst, f"cannot read permissions of '{src}'")
        return self.set_permissions(dst, mode)

    def _tree_digest(self, path: str) -> str | None:
        """Hash file contents and child names of a tree."""
        if not self.is_dir(path):
            return self.hash_file(path, HASH_SHA1)

        hasher = hashlib.sha1()
        for name in sorted(self.list_dir(path)):
            digest = self._tree_digest(os.path.join(path, name))
            if digest is None:
                return None
            hasher.update(name.encode("utf-8", "surrogateescape"))
            hasher.update(digest.encode("ascii"))
        return hasher.hexdigest()

    def move(self, from_path: PathLike, to_path: PathLike, replace: bool = False) -> OperationResult:
        """Copy then delete the source.

        The source is only deleted after a successful copy. When the copy
        fails, whatever it wrote is removed again: a destination that did
        not exist before, or a destination directory that was already being
        rebuilt. A destination that was replaced cannot be restored.

        Args:
            from_path: Source file or directory.
            to_path: Destination path.
            replace: Overwrite existing destination files.

        Returns:
            OperationResult for to_path.
        """
        src, dst = os.fspath(from_path), os.fspath(to_path)
        rejected = self._check_copy(src, dst)
        if rejected is not None:
            return rejected

        rebuilds = not os.path.lexists(dst) or self.is_dir(src)
        copied = self.copy(src, dst, replace)
        if not copied:
            if rebuilds and os.path.lexists(dst):
                self.delete(dst, recursive=True)
            return copied

        deleted = self.delete(from_path, recursive=True)
        if not deleted:
            return deleted
        return OperationResult.ok(os.fspath(to_path))

    def rename(self, from_path: PathLike, to_path: PathLike) -> OperationResult:
        """Rename within one filesystem. Cross-device renames fail."""
        try:
            os.rename(from_path, to_path)
        except OSError as e:
            return self._failed("rename", from_path, e)
        return OperationResult.ok(os.fspath(to_path))

    # ========================================================================
    # Inspection
    # ========================================================================

    def hash_file(self, path: PathLike, hash_type: str | None = None) -> str | None:
        """Get the hex digest of a file.

        Unknown hash types fall back to md5 without an error.

        Args:
            path: File path.
            hash_type: "md5" or "sha1". Defaults to config.hash_type.

        Returns:
            Hex digest, or None if the file cannot be read.
        """
        hash_type = hash_type or self.config.hash_type
        factory = _HASHERS.get(hash_type)
        if factory is None:
            logger.debug("Unknown hash type %r, using %s", hash_type, HASH_MD5)
            factory = _HASHERS[HASH_MD5]

        hasher = factory()
        try:
            with open(path, "rb") as fh:
                for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                    hasher.update(chunk)
        except OSError as e:
            logger.debug("hash_file failed for %s: %s", path, e)
            return None
        return hasher.hexdigest()

    def mimetype(self, path: PathLike) -> str | None:
        """Detect the MIME type of a file.

        Args:
            path: File path.

        Returns:
            MIME type string, or None if the path does not exist.
        """
        if self.is_dir(path):
            return MIME_DIRECTORY
        if not self.is_file(path):
            return None
        if self.size(path) == 0:
            return MIME_EMPTY

        guessed, _ = mimetypes.guess_type(os.fspath(path))
        if guessed:
            return guessed

        try:
            with open(path, "rb") as fh:
                head = fh.read(_SNIFF_SIZE)
        except OSError as e:
            logger.debug("mimetype failed for %s: %s", path, e)
            return None

        if b"\0" in head:
            return MIME_BINARY
        try:
            codecs.getincrementaldecoder("utf-8")().decode(head, final=False)
        except UnicodeDecodeError:
            return MIME_BINARY
        return MIME_TEXT

    def chmod(self, path: PathLike, mode: int | str = 0) -> OperationResult | str | None:
        """Set permissions when mode is given, otherwise read them.

        Kept as a single entry point for callers of the older API; new code
        should call get_permissions() or set_permissions().

        Args:
            path: File or directory path.
            mode: Permission bits. Zero means read.

        Returns:
            OperationResult when setting, octal string (or None) when reading.
        """
        if mode and parse_mode(mode) > 0:
            return self.set_permissions(path, mode)
        return self.get_permissions(path)

    def get_permissions(self, path: PathLike) -> str | None:
        """Get permission bits as a 4-character octal string such as "0644"."""
        try:
            return format(stat.S_IMODE(os.stat(path).st_mode), "04o")
        except OSError as e:
            logger.debug("get_permissions failed for %s: %s", path, e)
            return None

    def set_permissions(self, path: PathLike, mode: int | str) -> OperationResult:
        """Set permission bits.

        Args:
            path: File or directory path.
            mode: Int bits or octal string ("0644").

        Returns:
            OperationResult for path.

        Raises:
            ValueError: If mode is not a valid octal mode.
        """
        bits = parse_mode(mode)
        try:
            os.chmod(path, bits)
        except OSError as e:
            return self._failed("set_permissions", path, e)
        return OperationResult.ok(os.fspath(path))

    def type(self, path: PathLike) -> str | None:
        """Get the file type without following symlinks.

        Returns:
            One of fifo, char, dir, block, link, file, socket or unknown;
            None if the path does not exist.
        """
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            return None
        for check, name in _FILE_TYPES:
            if check(mode):
                return name
        return "unknown"

    def exists(self, path: PathLike) -> bool:
        """Check if a path exists."""
        return os.path.exists(path)

    def is_file(self, path: PathLike) -> bool:
        """Check if a path is a regular file."""
        return os.path.isfile(path)

    def is_dir(self, path: PathLike) -> bool:
        """Check if a path is a directory."""
        return os.path.isdir(path)

    def is_readable(self, path: PathLike) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: PathLike) -> bool:
        return os.access(path, os.W_OK)

    def _stat_time(self, path: PathLike, field: str) -> int:
        try:
            return int(getattr(os.stat(path), field))
        except OSError:
            return 0

    def atime(self, path: PathLike) -> int:
        """Get last access time as epoch seconds (0 if missing)."""
        return self._stat_time(path, "st_atime")

    def ctime(self, path: PathLike) -> int:
        """Get inode change time as epoch seconds (0 if missing)."""
        return self._stat_time(path, "st_ctime")

    def mtime(self, path: PathLike) -> int:
        """Get last modification time as epoch seconds (0 if missing)."""
        return self._stat_time(path, "st_mtime")

    # ========================================================================
    # Export
    # ========================================================================

    def export(self, path: PathLike, data: Any) -> OperationResult:
        """Write data to a JSON or YAML file chosen by extension.

        Args:
            path: Target path ending in .json, .yaml or .yml.
            data: Nested scalars, lists and string-keyed dicts.

        Returns:
            OperationResult for path.

        Raises:
            InvalidExportPathError: If the extension is not recognized.
            ValueError: If data cannot be serialized.
        """
        fmt = export_format(path)
        return self.write_file(path, dumps(data, fmt), lock=True)

    def load_export(self, path: PathLike) -> Any:
        """Read back data written by export().

        Raises:
            InvalidExportPathError: If the extension is not recognized.
            FilesystemError: If the file cannot be read.
            ValueError: If the content cannot be parsed.
        """
        fmt = export_format(path)
        return loads(self.read_file(path, lock=True, raise_on_error=True), fmt)
