"""Downloader manifest rendering.

The runtime fetcher reads ``{"bucket": ..., "key": ...}`` to locate the
archive in the storage backend. Field names are part of that contract.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidArgumentError
from .naming import manifest_fields

MANIFEST_FIELDS = ("bucket", "key")


@dataclass(frozen=True)
class ManifestRenderer:
    """Stateless callable turning ``(bucket, key)`` into manifest JSON."""

    def __call__(self, bucket: str, key: str) -> str:
        return json.dumps(manifest_fields(bucket, key))


def make_manifest_renderer() -> ManifestRenderer:
    return ManifestRenderer()


def parse_manifest(text: str) -> dict[str, str]:
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidArgumentError(f"Manifest is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict) or set(payload) != set(MANIFEST_FIELDS):
        raise InvalidArgumentError(
            f"Manifest must be an object with exactly the fields {MANIFEST_FIELDS}"
        )
    return manifest_fields(payload["bucket"], payload["key"])
