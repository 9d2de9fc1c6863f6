"""Base class for staging strategies.

A strategy fills an already-created, empty staging root with whatever the
bundle should contain. The pipeline owns everything around that step:
creating and deleting the root, archive-internal cleanup, version
injection and archiving.
"""

from __future__ import annotations

import glob
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional

from ptbundler.paths import globstar, strip_leading
from ptbundler.staging import fsops

if TYPE_CHECKING:
    from ptbundler.pipeline.types import BundleSpec

logger = logging.getLogger(__name__)


class StagingError(Exception):
    """Raised when the staging tree cannot be created or populated."""


def remove_matches(patterns: Iterable[str], basedir: str) -> list[str]:
    """Remove every existing path matching `patterns` relative to `basedir`.

    `basedir` is matched literally, so it may contain glob metacharacters.
    Patterns with no matches are skipped silently.
    Returns the removed paths in removal order.
    """
    removed: list[str] = []
    for pattern in patterns:
        anchored = f"{glob.escape(basedir)}/{strip_leading(pattern)}"
        for path in globstar(anchored):
            if fsops.exists(path):
                fsops.remove(path)
                removed.append(path)
    return removed


def clean_archive_targets(patterns: Iterable[str], staging_root: str) -> list[str]:
    """Remove leftovers from the staged tree before it is archived.

    Patterns resolve against the staging root, never the project, so this
    cannot touch project files.
    """
    removed = remove_matches(patterns, staging_root)
    if removed:
        logger.info("Removed %d archive-internal targets", len(removed))
    return removed


class StagingStrategy(ABC):
    """Inclusion policy deciding what reaches the staging tree."""

    #: Short policy name used in logs and spec files
    name: str = ""

    @abstractmethod
    def assemble(
        self, spec: BundleSpec, staging_root: str, output_dir: Optional[str] = None,
    ) -> None:
        """Populate `staging_root` from `spec.basedir`.

        Args:
            spec: Bundle configuration; only read.
            staging_root: Existing, empty staging directory.
            output_dir: Resolved archive directory, never staged.
                Defaults to `spec.output_dir()`.
        """
        ...
