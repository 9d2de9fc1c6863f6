"""Deny-list staging: mirror the whole project, then delete exclusions."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Iterable, Optional

from ptbundler.staging import fsops
from ptbundler.staging.base import StagingStrategy, remove_matches

if TYPE_CHECKING:
    from ptbundler.pipeline.types import BundleSpec

logger = logging.getLogger(__name__)


def _skip_paths(skipped: Iterable[str]) -> fsops.IgnoreFn:
    """Build a copytree `ignore` callable that drops the given paths.

    Used to keep the staging root and output directory from being mirrored
    into themselves when they live inside the base directory.
    """
    real = {os.path.realpath(p) for p in skipped}

    def ignore(directory: str, names: list[str]) -> list[str]:
        return [n for n in names if os.path.realpath(os.path.join(directory, n)) in real]

    return ignore


class DenyListStrategy(StagingStrategy):
    """Stage everything under `basedir` except `targets_to_exclude`.

    Exclusion patterns resolve against the staging root, so they can never
    delete files from the project itself.
    """

    name = "deny"

    def assemble(
        self, spec: BundleSpec, staging_root: str, output_dir: Optional[str] = None,
    ) -> None:
        fsops.mirror(
            spec.basedir,
            staging_root,
            ignore=_skip_paths([staging_root, output_dir or spec.output_dir()]),
        )

        removed = remove_matches(spec.targets_to_exclude, staging_root)
        logger.info(
            "Mirrored %s into %s, excluded %d paths",
            spec.basedir, staging_root, len(removed),
        )
