"""Glob-based ignore rules evaluated against archive-relative paths.

Patterns follow the usual shell glob syntax, applied per path segment:

- ``*`` and ``?`` never match ``/``
- ``[...]`` character classes behave as in :mod:`fnmatch`
- a segment consisting only of ``**`` matches zero or more whole segments

So ``**/*.map`` excludes ``app.map`` as well as ``assets/js/app.map``.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from .exceptions import InvalidArgumentError

logger = logging.getLogger("fastboot_archive.core.matcher")

IgnorePattern = Union[str, Sequence[str], None]
IgnorePredicate = Callable[[str], bool]

GLOBSTAR = "**"


def normalize_relpath(path: str) -> str:
    rel = path.replace("\\", "/")
    while rel.startswith("./"):
        rel = rel[2:]
    return rel.strip("/")


def split_segments(path: str) -> tuple[str, ...]:
    return tuple(seg for seg in normalize_relpath(path).split("/") if seg)


@dataclass(frozen=True)
class GlobPattern:
    source: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, pattern: str) -> "GlobPattern":
        if not isinstance(pattern, str):
            raise InvalidArgumentError(
                f"Ignore pattern must be a string, got {type(pattern).__name__}"
            )
        segments = split_segments(pattern.strip())
        if not segments:
            raise InvalidArgumentError(f"Ignore pattern must not be empty: {pattern!r}")
        collapsed: list[str] = []
        for seg in segments:
            # Consecutive globstars are equivalent to a single one.
            if seg == GLOBSTAR and collapsed and collapsed[-1] == GLOBSTAR:
                continue
            collapsed.append(seg)
        return cls(source=pattern, segments=tuple(collapsed))

    def matches(self, relative_path: str) -> bool:
        path_segments = split_segments(relative_path)
        if not path_segments:
            return False
        return _match_segments(self.segments, path_segments)


def _match_segments(pattern: tuple[str, ...], path: tuple[str, ...]) -> bool:
    if not pattern:
        return not path
    head, rest = pattern[0], pattern[1:]
    if head == GLOBSTAR:
        # Zero segments, or consume one and keep the globstar active.
        if _match_segments(rest, path):
            return True
        return bool(path) and _match_segments(pattern, path[1:])
    if not path:
        return False
    if not fnmatch.fnmatchcase(path[0], head):
        return False
    return _match_segments(rest, path[1:])


def _coerce_patterns(ignore_pattern: IgnorePattern) -> tuple[str, ...]:
    if ignore_pattern is None:
        return ()
    if isinstance(ignore_pattern, str):
        return (ignore_pattern,)
    if isinstance(ignore_pattern, (bytes, bytearray)):
        raise InvalidArgumentError("Ignore pattern must be text, not bytes")
    try:
        return tuple(ignore_pattern)
    except TypeError as exc:
        raise InvalidArgumentError(
            "Ignore pattern must be a string or a sequence of strings"
        ) from exc


@dataclass(frozen=True)
class IgnoreMatcher:
    patterns: tuple[GlobPattern, ...] = ()

    def __call__(self, relative_path: str) -> bool:
        for pattern in self.patterns:
            if pattern.matches(relative_path):
                logger.debug("excluding %s (matched %r)", relative_path, pattern.source)
                return True
        return False


def compile_ignore(ignore_pattern: IgnorePattern = None) -> IgnoreMatcher:
    """Build the predicate that reports whether a relative path is excluded.

    ``None`` or an empty sequence excludes nothing. Otherwise a path is
    excluded when any of the patterns matches it.
    """
    patterns = _coerce_patterns(ignore_pattern)
    return IgnoreMatcher(patterns=tuple(GlobPattern.parse(p) for p in patterns))
