"""CLI commands using Typer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn

if TYPE_CHECKING:
    from fsfacade.context import AppContext
    from fsfacade.types import OperationResult

import typer
from rich.console import Console
from rich.logging import RichHandler

from fsfacade import __version__
from fsfacade.context import create_context
from fsfacade.display import Display, EntryInfo
from fsfacade.filesystem import FilesystemError

app = typer.Typer(
    name="fsfacade",
    help="Convenience commands over native filesystem operations",
    no_args_is_help=True,
)

display = Display()


@dataclass
class _CliState:
    config_path: Path | None = None


state = _CliState()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        display.console.print(f"fsfacade v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log failure causes to stderr")
    ] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file (YAML)")
    ] = None,
) -> None:
    """Convenience commands over native filesystem operations."""
    _configure_logging(verbose)
    state.config_path = config


# ============================================================================
# Helpers
# ============================================================================


def _get_context(context: AppContext | None) -> AppContext:
    """Return the injected context or build one from the CLI options.

    Raises:
        typer.Exit: If the config file cannot be loaded.
    """
    if context is not None:
        return context
    try:
        return create_context(state.config_path)
    except (FileNotFoundError, ValueError) as e:
        display.show_error(str(e))
        raise typer.Exit(1) from e


def _report(ctx: AppContext, result: OperationResult, message: str) -> None:
    """Show the outcome of a mutating operation.

    Raises:
        typer.Exit: If the operation failed.
    """
    if result:
        ctx.display.show_success(message)
        return
    ctx.display.show_error(result.error or f"Operation failed: {result.path}")
    raise typer.Exit(1)


def _fail(ctx: AppContext, message: str) -> NoReturn:
    ctx.display.show_error(message)
    raise typer.Exit(1)


def _warn_replacing(ctx: AppContext, source: Path, destination: Path) -> None:
    """Warn that a directory copy will delete the existing destination first."""
    if ctx.filesystem.is_dir(source) and ctx.filesystem.exists(destination):
        ctx.display.show_warning(f"Replacing existing {destination}")


# ============================================================================
# Creation Commands
# ============================================================================


@app.command()
def touch(
    path: Annotated[Path, typer.Argument(help="File to touch")],
    time: Annotated[int, typer.Option("--time", "-t", help="Epoch timestamp (default: now)")] = 0,
    _context=None,
) -> None:
    """Update timestamps, creating an empty file if missing."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.touch(path, time), f"Touched {path}")


@app.command()
def create(
    path: Annotated[Path, typer.Argument(help="File to create")],
    mode: Annotated[str | None, typer.Option("--mode", "-m", help="Octal mode")] = None,
    private: Annotated[
        bool, typer.Option("--private", help="Use the private mode when --mode is not given")
    ] = False,
    _context=None,
) -> None:
    """Create an empty file."""
    ctx = _get_context(_context)
    try:
        result = ctx.filesystem.create_file(path, mode, private=private)
    except ValueError as e:
        _fail(ctx, str(e))
    _report(ctx, result, f"Created {path}")


@app.command()
def mkdir(
    path: Annotated[Path, typer.Argument(help="Directory to create")],
    mode: Annotated[str | None, typer.Option("--mode", "-m", help="Octal mode")] = None,
    parents: Annotated[
        bool, typer.Option("--parents", "-p", help="Create missing parent directories")
    ] = False,
    private: Annotated[
        bool, typer.Option("--private", help="Use the private mode when --mode is not given")
    ] = False,
    _context=None,
) -> None:
    """Create a directory."""
    ctx = _get_context(_context)
    try:
        result = ctx.filesystem.create_dir(path, mode, recursive=parents, private=private)
    except ValueError as e:
        _fail(ctx, str(e))
    _report(ctx, result, f"Created directory {path}")


# ============================================================================
# Content Commands
# ============================================================================


@app.command()
def read(
    path: Annotated[Path, typer.Argument(help="File to read")],
    lock: Annotated[bool, typer.Option("--lock", "-l", help="Read under a shared lock")] = False,
    _context=None,
) -> None:
    """Print file content."""
    ctx = _get_context(_context)
    try:
        content = ctx.filesystem.read_file(path, lock=lock, raise_on_error=True)
    except FilesystemError as e:
        _fail(ctx, str(e))
    ctx.display.show_raw(content)


@app.command()
def lines(
    path: Annotated[Path, typer.Argument(help="File to read")],
    skip_empty: Annotated[
        bool, typer.Option("--skip-empty", "-s", help="Omit blank lines")
    ] = False,
    _context=None,
) -> None:
    """Print file lines with line numbers."""
    ctx = _get_context(_context)
    if not ctx.filesystem.is_file(path):
        _fail(ctx, f"File not found: {path}")
    for number, line in enumerate(ctx.filesystem.read_file_lines(path, skip_empty), start=1):
        ctx.display.show_raw(f"{number:>6}  {line}\n")


@app.command()
def write(
    path: Annotated[Path, typer.Argument(help="File to write")],
    content: Annotated[str, typer.Argument(help="Content")],
    lock: Annotated[bool, typer.Option("--lock", "-l", help="Write under an exclusive lock")] = False,
    _context=None,
) -> None:
    """Overwrite a file."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.write_file(path, content, lock), f"Wrote {path}")


@app.command()
def append(
    path: Annotated[Path, typer.Argument(help="File to append to")],
    content: Annotated[str, typer.Argument(help="Content")],
    lock: Annotated[bool, typer.Option("--lock", "-l", help="Write under an exclusive lock")] = False,
    _context=None,
) -> None:
    """Append to a file."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.append_file(path, content, lock), f"Appended to {path}")


@app.command()
def prepend(
    path: Annotated[Path, typer.Argument(help="File to prepend to")],
    content: Annotated[str, typer.Argument(help="Content")],
    lock: Annotated[bool, typer.Option("--lock", "-l", help="Lock the read and the write")] = False,
    _context=None,
) -> None:
    """Insert content at the start of a file."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.prepend_file(path, content, lock), f"Prepended to {path}")


# ============================================================================
# Tree Commands
# ============================================================================


@app.command()
def size(
    path: Annotated[Path, typer.Argument(help="File or directory")],
    _context=None,
) -> None:
    """Print the recursive size in bytes."""
    ctx = _get_context(_context)
    if not ctx.filesystem.exists(path):
        _fail(ctx, f"Path not found: {path}")
    ctx.display.show_raw(f"{ctx.filesystem.size(path)}\n")


@app.command("ls")
def list_dir(
    path: Annotated[Path, typer.Argument(help="Directory to list")] = Path("."),
    files: Annotated[bool, typer.Option("--files", "-f", help="Only list files")] = False,
    ext: Annotated[
        list[str] | None,
        typer.Option("--ext", "-e", help="Extension to keep (repeatable, with --files)"),
    ] = None,
    _context=None,
) -> None:
    """List the immediate children of a directory."""
    ctx = _get_context(_context)
    fs = ctx.filesystem
    if not fs.is_dir(path):
        _fail(ctx, f"Not a directory: {path}")

    entries = [
        EntryInfo(
            name=name,
            kind=fs.type(path / name),
            size=fs.size(path / name),
            permissions=fs.get_permissions(path / name),
        )
        for name in fs.list_dir(path, only_files=files, extensions=ext or None)
    ]
    ctx.display.show_listing(str(path), entries)


@app.command("rm")
def delete(
    path: Annotated[Path, typer.Argument(help="File or directory to delete")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Delete directory contents")
    ] = False,
    _context=None,
) -> None:
    """Delete a file or directory."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.delete(path, recursive), f"Deleted {path}")


@app.command("cp")
def copy(
    source: Annotated[Path, typer.Argument(help="Source file or directory")],
    destination: Annotated[Path, typer.Argument(help="Destination path")],
    replace: Annotated[
        bool, typer.Option("--replace", help="Overwrite existing destination files")
    ] = False,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Verify content hashes after copying"),
    ] = None,
    _context=None,
) -> None:
    """Copy a file or directory tree."""
    ctx = _get_context(_context)
    _warn_replacing(ctx, source, destination)
    result = ctx.filesystem.copy(source, destination, replace=replace, strict=strict)
    _report(ctx, result, f"Copied {source} to {destination}")


@app.command("mv")
def move(
    source: Annotated[Path, typer.Argument(help="Source file or directory")],
    destination: Annotated[Path, typer.Argument(help="Destination path")],
    replace: Annotated[
        bool, typer.Option("--replace", help="Overwrite existing destination files")
    ] = False,
    _context=None,
) -> None:
    """Move a file or directory (copy, then delete the source)."""
    ctx = _get_context(_context)
    _warn_replacing(ctx, source, destination)
    result = ctx.filesystem.move(source, destination, replace=replace)
    _report(ctx, result, f"Moved {source} to {destination}")


@app.command()
def rename(
    source: Annotated[Path, typer.Argument(help="Current path")],
    destination: Annotated[Path, typer.Argument(help="New path")],
    _context=None,
) -> None:
    """Rename a path within one filesystem."""
    ctx = _get_context(_context)
    _report(ctx, ctx.filesystem.rename(source, destination), f"Renamed {source} to {destination}")


# ============================================================================
# Inspection Commands
# ============================================================================


@app.command("hash")
def hash_file(
    path: Annotated[Path, typer.Argument(help="File to hash")],
    hash_type: Annotated[
        str | None, typer.Option("--type", "-t", help="md5 or sha1 (default from config)")
    ] = None,
    _context=None,
) -> None:
    """Print the hex digest of a file."""
    ctx = _get_context(_context)
    digest = ctx.filesystem.hash_file(path, hash_type)
    if digest is None:
        _fail(ctx, f"Cannot read {path}")
    ctx.display.show_raw(f"{digest}  {path}\n")


@app.command("mime")
def mimetype(
    path: Annotated[Path, typer.Argument(help="File to inspect")],
    _context=None,
) -> None:
    """Print the MIME type of a file."""
    ctx = _get_context(_context)
    detected = ctx.filesystem.mimetype(path)
    if detected is None:
        _fail(ctx, f"Path not found: {path}")
    ctx.display.show_raw(f"{detected}\n")


@app.command()
def chmod(
    path: Annotated[Path, typer.Argument(help="File or directory")],
    mode: Annotated[str | None, typer.Argument(help="Octal mode (omit to print)")] = None,
    _context=None,
) -> None:
    """Print or set permission bits."""
    ctx = _get_context(_context)
    fs = ctx.filesystem

    if mode is None:
        current = fs.get_permissions(path)
        if current is None:
            _fail(ctx, f"Path not found: {path}")
        ctx.display.show_raw(f"{current}\n")
        return

    try:
        result = fs.set_permissions(path, mode)
    except ValueError as e:
        _fail(ctx, str(e))
    _report(ctx, result, f"Set mode {mode} on {path}")


@app.command()
def stat(
    path: Annotated[Path, typer.Argument(help="File or directory")],
    _context=None,
) -> None:
    """Show type, size, permissions and timestamps."""
    ctx = _get_context(_context)
    fs = ctx.filesystem
    if not fs.exists(path):
        _fail(ctx, f"Path not found: {path}")

    ctx.display.show_stat(
        str(path),
        {
            "type": fs.type(path),
            "size": fs.size(path),
            "mode": fs.get_permissions(path),
            "mimetype": fs.mimetype(path),
            "readable": fs.is_readable(path),
            "writable": fs.is_writable(path),
            "atime": fs.atime(path),
            "ctime": fs.ctime(path),
            "mtime": fs.mtime(path),
        },
    )


# ============================================================================
# Export Commands
# ============================================================================


@app.command()
def export(
    source: Annotated[Path, typer.Argument(help="JSON or YAML file to read")],
    destination: Annotated[Path, typer.Argument(help="JSON or YAML file to write")],
    _context=None,
) -> None:
    """Re-export structured data, converting between JSON and YAML."""
    ctx = _get_context(_context)
    try:
        data = ctx.filesystem.load_export(source)
        result = ctx.filesystem.export(destination, data)
    except (FilesystemError, ValueError) as e:
        _fail(ctx, str(e))
    _report(ctx, result, f"Exported {source} to {destination}")


if __name__ == "__main__":
    app()
