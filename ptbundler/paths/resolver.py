"""Anchor bundle-relative paths to a base directory."""

import os
from pathlib import Path


def strip_leading(path: str) -> str:
    """Remove one leading `./` and then one leading `/` from `path`."""
    return path.removeprefix("./").removeprefix("/")


def resolve_relative_path(path: str, basedir: str) -> str:
    """Return `basedir/path` for a path assumed relative to `basedir`.

    `./sub/f.txt`, `sub/f.txt` and `/sub/f.txt` all resolve to the same
    path. Existence is not checked.
    """
    return f"{basedir}/{strip_leading(path)}"


def canonicalize_base_dir(basedir: str | os.PathLike) -> str:
    """Resolve symlinks and `..` segments in an existing directory path.

    Raises:
        FileNotFoundError: If `basedir` does not exist.
        NotADirectoryError: If `basedir` is not a directory.
    """
    resolved = Path(basedir).resolve(strict=True)
    if not resolved.is_dir():
        raise NotADirectoryError(f"Base directory is not a directory: {resolved}")
    return str(resolved)
