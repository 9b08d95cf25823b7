"""Shared data types for fsfacade."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "HASH_MD5",
    "HASH_SHA1",
    "MODE_DIRECTORY_PRIVATE",
    "MODE_DIRECTORY_PUBLIC",
    "MODE_FILE_PRIVATE",
    "MODE_FILE_PUBLIC",
    "OperationResult",
]

# Hash algorithm identifiers
HASH_MD5 = "md5"
HASH_SHA1 = "sha1"

# Permission presets
MODE_FILE_PRIVATE = 0o600
MODE_FILE_PUBLIC = 0o644
MODE_DIRECTORY_PRIVATE = 0o700
MODE_DIRECTORY_PUBLIC = 0o755


@dataclass
class OperationResult:
    """Result of a mutating filesystem operation.

    Truthy when the operation succeeded, so callers can keep treating
    results as booleans while still having access to the failure cause.

    Attributes:
        success: True if the operation succeeded.
        path: Path the operation acted on.
        error: Error message (None on success).
    """

    success: bool
    path: str
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires error message")

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, path: str) -> OperationResult:
        """Build a successful result for path."""
        return cls(success=True, path=path)

    @classmethod
    def fail(cls, path: str, error: str) -> OperationResult:
        """Build a failed result for path."""
        return cls(success=False, path=path, error=error)
