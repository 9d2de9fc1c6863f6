"""Filesystem operations used to build and tear down staging trees.

Thin wrappers over `shutil`/`os` with the semantics the staging steps rely
on: removal accepts files, symlinks and directory trees and ignores missing
paths; copies create missing parent directories.
"""

import logging
import os
import shutil
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

IgnoreFn = Callable[[str, list[str]], Iterable[str]]

DEFAULT_DIR_MODE = 0o755


def exists(path: str) -> bool:
    """True if `path` exists, including dangling symlinks."""
    return os.path.lexists(path)


def remove(path: str) -> None:
    """Delete a file, symlink or directory tree. Missing paths are ignored."""
    if os.path.islink(path) or os.path.isfile(path):
        os.unlink(path)
    elif os.path.isdir(path):
        shutil.rmtree(path)
    else:
        return
    logger.debug("Removed %s", path)


def make_dir(path: str, mode: int = DEFAULT_DIR_MODE) -> None:
    """Create `path` and any missing parents."""
    os.makedirs(path, mode=mode, exist_ok=True)


def mirror(source: str, target: str, ignore: Optional[IgnoreFn] = None) -> None:
    """Recursively copy `source` into `target`, keeping symlinks as links.

    Raises:
        FileNotFoundError: If `source` does not exist.
    """
    if not os.path.isdir(source):
        raise FileNotFoundError(f"Cannot mirror missing directory: {source}")
    shutil.copytree(source, target, symlinks=True, ignore=ignore, dirs_exist_ok=True)
    logger.debug("Mirrored %s -> %s", source, target)


def copy_file(source: str, target: str) -> None:
    """Copy a single file, creating the target's parent directories.

    Raises:
        FileNotFoundError: If `source` does not exist.
    """
    if not os.path.isfile(source):
        raise FileNotFoundError(f"Cannot copy missing file: {source}")
    make_dir(os.path.dirname(target) or ".")
    shutil.copy2(source, target)
    logger.debug("Copied %s -> %s", source, target)
