"""Recursive glob expansion with `**` support.

`glob.glob` is used for every single-level lookup; `**` is expanded here by
walking directory levels one at a time:

    src/**/*.vue  ->  src/*.vue, src/a/*.vue, src/a/b/*.vue, ...

Expansion stops at the first level that contains no directories, so the
walk is bounded by the depth of the tree.
"""

import glob
import logging
import os

logger = logging.getLogger(__name__)

RECURSIVE_MARKER = "**"


class GlobPatternError(ValueError):
    """Raised when `**` is used inside a path segment instead of as one."""


def _validate(pattern: str) -> None:
    for segment in pattern.split("/"):
        if RECURSIVE_MARKER in segment and segment != RECURSIVE_MARKER:
            raise GlobPatternError(
                f"'{RECURSIVE_MARKER}' must be a whole path segment: {pattern!r}"
            )


def _list_dirs(pattern: str) -> list[str]:
    """Single-level glob restricted to directories."""
    return [p for p in glob.glob(pattern) if os.path.isdir(p)]


def _expand_candidates(pattern: str) -> list[str]:
    """Split `pattern` at its first `**` and return one pattern per depth.

    The first candidate is the zero-directories-deep case (`root + rest`).
    """
    position = pattern.index(RECURSIVE_MARKER)
    root = pattern[: max(position - 1, 0)]
    rest = pattern[position + len(RECURSIVE_MARKER):]

    candidates = [root + rest]
    level = root + "/*"
    while dirs := _list_dirs(level):
        # Matched names are literal; escape them before re-globbing
        candidates.extend(glob.escape(d) + rest for d in dirs)
        level += "/*"
    return candidates


def globstar(pattern: str) -> list[str]:
    """Return every path matching `pattern`, sorted and deduplicated.

    Supports shell globs (`*`, `?`, `[...]`) plus `**` for zero or more
    directory levels. A leading `**` is anchored at the current directory.
    Directories are returned as-is, not expanded into their contents.
    A pattern that matches nothing returns an empty list.
    """
    if pattern.startswith(RECURSIVE_MARKER):
        pattern = "./" + pattern

    if RECURSIVE_MARKER not in pattern:
        return sorted(set(glob.glob(pattern)))

    _validate(pattern)

    matches: set[str] = set()
    for candidate in _expand_candidates(pattern):
        matches.update(globstar(candidate))

    logger.debug("globstar %s -> %d matches", pattern, len(matches))
    return sorted(matches)
