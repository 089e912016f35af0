"""Deterministic zip packaging of a build output directory.

Entries are collected from ``source_dir``, filtered through the ignore
predicate, sorted by their POSIX relative path and written with fixed
metadata, so identical trees produce byte-identical archives.

The archive is written to a temporary file next to its final location and
moved into place only once complete. A failed or cancelled run never
leaves a truncated file at ``archive_path``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
import threading
import uuid
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ArchiveIOError, InvalidArgumentError, SourceNotFoundError
from .matcher import IgnorePattern, IgnorePredicate, compile_ignore

logger = logging.getLogger("fastboot_archive.core.archiver")

ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
ZIP_COMPRESSLEVEL = 9
ENTRY_MODE = stat.S_IFREG | 0o644
TEMP_SUFFIX = ".partial"


@dataclass(frozen=True)
class ArchiveRequest:
    source_dir: Path
    output_dir: Path
    archive_name: str
    ignore_pattern: IgnorePattern = None
    entry_root: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_dir", Path(self.source_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if isinstance(self.ignore_pattern, list):
            object.__setattr__(self, "ignore_pattern", tuple(self.ignore_pattern))
        if not isinstance(self.archive_name, str) or not self.archive_name:
            raise InvalidArgumentError("archive_name must be a non-empty string")
        if Path(self.archive_name).name != self.archive_name:
            raise InvalidArgumentError(
                f"archive_name must be a plain file name: {self.archive_name!r}"
            )
        if self.entry_root is not None:
            root = self.entry_root.replace("\\", "/").strip("/")
            if not root or any(part in {".", ".."} for part in root.split("/")):
                raise InvalidArgumentError(f"Invalid entry_root: {self.entry_root!r}")
            object.__setattr__(self, "entry_root", root)

    @property
    def archive_path(self) -> Path:
        return self.output_dir / self.archive_name


@dataclass(frozen=True)
class ArchiveResult:
    archive_name: str
    archive_path: Path
    entries: tuple[str, ...] = ()


class _ArchiveCancelled(Exception):
    pass


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def list_archive_entries(
    source_dir: Path,
    predicate: IgnorePredicate,
    *,
    skip_dir: Optional[Path] = None,
) -> list[tuple[str, Path]]:
    """Return ``(relative_path, absolute_path)`` pairs to store, sorted.

    Only files are returned; directories are implied by their contents.
    A directory that cannot be listed raises instead of being skipped.
    ``skip_dir`` prunes a subtree (the output directory when it lives
    inside the source tree).
    """
    source_dir = Path(source_dir)
    skip_resolved = skip_dir.resolve() if skip_dir is not None else None
    entries: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(
        source_dir, onerror=_raise_walk_error, followlinks=False
    ):
        current = Path(dirpath)
        if skip_resolved is not None:
            dirnames[:] = [
                name
                for name in dirnames
                if not _is_within((current / name).resolve(), skip_resolved)
            ]
        for filename in filenames:
            path = current / filename
            if not path.is_file():
                # Dangling symlinks and special files are not archived.
                continue
            rel = path.relative_to(source_dir).as_posix()
            if predicate(rel):
                continue
            entries.append((rel, path))
    entries.sort(key=lambda item: item[0])
    return entries


def _zip_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(filename=name, date_time=ZIP_EPOCH)
    info.create_system = 3
    info.external_attr = ENTRY_MODE << 16
    info.compress_type = zipfile.ZIP_DEFLATED
    return info


def _write_zip(
    temp_path: Path,
    entries: list[tuple[str, Path]],
    *,
    entry_root: Optional[str],
    cancel_event: threading.Event,
) -> None:
    with zipfile.ZipFile(
        temp_path,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=ZIP_COMPRESSLEVEL,
    ) as zf:
        for rel, path in entries:
            if cancel_event.is_set():
                raise _ArchiveCancelled()
            name = f"{entry_root}/{rel}" if entry_root else rel
            zf.writestr(
                _zip_info(name), path.read_bytes(), compresslevel=ZIP_COMPRESSLEVEL
            )


def _discard(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to remove partial archive %s: %s", temp_path, exc)


def build_archive(
    request: ArchiveRequest,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> ArchiveResult:
    """Synchronous archive build; :func:`archive` runs this in a worker thread."""
    cancel_event = cancel_event or threading.Event()
    source_dir = request.source_dir
    if not source_dir.exists():
        raise SourceNotFoundError(source_dir)
    if not source_dir.is_dir():
        raise SourceNotFoundError(source_dir, detail="not a directory")

    predicate = compile_ignore(request.ignore_pattern)
    output_dir = request.output_dir
    skip_dir = output_dir if _is_within(output_dir.resolve(), source_dir.resolve()) else None

    try:
        entries = list_archive_entries(source_dir, predicate, skip_dir=skip_dir)
    except OSError as exc:
        raise ArchiveIOError(
            f"Failed to read source directory {source_dir}: {exc}", path=source_dir
        ) from exc
    logger.info(
        "Archiving %d file(s) from %s into %s",
        len(entries),
        source_dir,
        request.archive_path,
    )

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArchiveIOError(
            f"Failed to create output directory {output_dir}: {exc}", path=output_dir
        ) from exc

    temp_path = output_dir / f".{request.archive_name}.{uuid.uuid4().hex}{TEMP_SUFFIX}"
    try:
        _write_zip(
            temp_path,
            entries,
            entry_root=request.entry_root,
            cancel_event=cancel_event,
        )
        os.replace(temp_path, request.archive_path)
    except OSError as exc:
        _discard(temp_path)
        raise ArchiveIOError(
            f"Failed to write archive {request.archive_path}: {exc}",
            path=request.archive_path,
        ) from exc
    except BaseException:
        _discard(temp_path)
        raise

    logger.info("Wrote archive %s", request.archive_path)
    return ArchiveResult(
        archive_name=request.archive_name,
        archive_path=request.archive_path,
        entries=tuple(
            f"{request.entry_root}/{rel}" if request.entry_root else rel
            for rel, _ in entries
        ),
    )


async def archive(request: ArchiveRequest) -> ArchiveResult:
    """Build the archive described by ``request`` off the event loop.

    Cancelling the awaiting task stops the worker before its next entry and
    waits for it to remove the partial file before re-raising.
    """
    cancel_event = threading.Event()
    worker = asyncio.ensure_future(
        asyncio.to_thread(build_archive, request, cancel_event=cancel_event)
    )
    try:
        return await asyncio.shield(worker)
    except asyncio.CancelledError:
        cancel_event.set()
        try:
            await worker
        except _ArchiveCancelled:
            logger.info("Archiving of %s cancelled", request.archive_path)
        raise
