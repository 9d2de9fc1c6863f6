"""Path helpers: recursive globbing and base-directory resolution.

Public API:
    globstar(pattern) -> list[str]
    resolve_relative_path(path, basedir) -> str
    canonicalize_base_dir(basedir) -> str
"""

from ptbundler.paths.globstar import GlobPatternError, globstar
from ptbundler.paths.resolver import (
    canonicalize_base_dir,
    resolve_relative_path,
    strip_leading,
)

__all__ = [
    "GlobPatternError",
    "globstar",
    "canonicalize_base_dir",
    "resolve_relative_path",
    "strip_leading",
]
