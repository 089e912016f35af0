from __future__ import annotations

from pathlib import Path
from typing import Optional


class FastbootArchiveError(Exception):
    """Base class for errors raised by the archive-build pipeline."""


class InvalidArgumentError(FastbootArchiveError, ValueError):
    """Raised for a malformed prefix, revision key, bucket or ignore pattern."""


class ConfigError(InvalidArgumentError):
    """Raised when the deploy configuration cannot be validated."""


class SourceNotFoundError(FastbootArchiveError):
    def __init__(self, source_dir: Path, *, detail: Optional[str] = None) -> None:
        message = f"Source directory does not exist: {source_dir}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.source_dir = source_dir
        self.detail = detail


class ArchiveIOError(FastbootArchiveError, OSError):
    """Raised when staging or archiving fails on the filesystem.

    The originating ``OSError`` is always chained as ``__cause__``.
    """

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
