"""Version resolution from source control."""

from ptbundler.vcs.version import (
    GitDescribeVersionSource,
    StaticVersionSource,
    VersionSource,
    normalize_version,
)

__all__ = [
    "GitDescribeVersionSource",
    "StaticVersionSource",
    "VersionSource",
    "normalize_version",
]
