"""ZIP archive writer for staged bundles."""

from ptbundler.archive.zipper import archive_directory

__all__ = ["archive_directory"]
