from __future__ import annotations

from typing import Any

from .exceptions import InvalidArgumentError

ARCHIVE_EXTENSION = ".zip"


def _require_text(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"{name} must be a string, got {type(value).__name__}"
        )
    if not value:
        raise InvalidArgumentError(f"{name} must not be empty")
    return value


def archive_file_name(prefix: str, revision_key: str) -> str:
    """Return ``<prefix><revision_key>.zip``."""
    prefix = _require_text(prefix, name="archive prefix")
    revision_key = _require_text(revision_key, name="revision key")
    return f"{prefix}{revision_key}{ARCHIVE_EXTENSION}"


def manifest_fields(bucket: str, revision_key: str) -> dict[str, str]:
    return {
        "bucket": _require_text(bucket, name="bucket"),
        "key": _require_text(revision_key, name="revision key"),
    }
