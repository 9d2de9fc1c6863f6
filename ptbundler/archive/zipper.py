"""ZIP archiver for staged bundle folders.

The archived folder includes itself: zipping `/tmp/work/my-plugin` yields
entries `my-plugin/`, `my-plugin/my-plugin.php`, `my-plugin/src/`, ...
so extracting the archive reproduces a `my-plugin` folder rather than its
bare contents.

Entries inside each directory are added in sorted name order, which keeps
two archives of the same tree entry-for-entry identical.
"""

import logging
import os
import zipfile

logger = logging.getLogger(__name__)


def _folder_to_zip(folder: str, zip_file: zipfile.ZipFile, prefix_length: int) -> int:
    """Add the files and sub-directories of `folder` to `zip_file`.

    `prefix_length` characters are stripped from each absolute path to form
    its archive name. Returns the number of entries written.
    """
    written = 0
    for name in sorted(os.listdir(folder)):
        file_path = f"{folder}/{name}"
        local_path = file_path[prefix_length:]
        if os.path.isfile(file_path):
            zip_file.write(file_path, local_path)
            written += 1
        elif os.path.isdir(file_path):
            zip_file.write(file_path, local_path)
            written += 1 + _folder_to_zip(file_path, zip_file, prefix_length)
        else:
            logger.debug("Skipping non-regular entry %s", file_path)
    return written


def archive_directory(source_path: str | os.PathLike, destination_zip_path: str | os.PathLike) -> None:
    """Zip `source_path` (including itself) into `destination_zip_path`.

    An existing destination is overwritten.

    Raises:
        OSError: If the destination cannot be written or the source
            cannot be read.
    """
    source = os.path.normpath(os.fspath(source_path))
    if not os.path.isdir(source):
        raise NotADirectoryError(f"Archive source is not a directory: {source}")

    parent_path, dir_name = os.path.split(source)
    prefix_length = len(parent_path.rstrip("/") + "/") if parent_path else 0

    # Pre-1980 mtimes are clamped to 1980-01-01
    with zipfile.ZipFile(
        destination_zip_path, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False,
    ) as z:
        z.write(source, dir_name)
        count = 1 + _folder_to_zip(source, z, prefix_length)

    logger.info("Archived %s -> %s (%d entries)", source, destination_zip_path, count)
