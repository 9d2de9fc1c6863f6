"""Allow-list staging: only explicitly listed folders and files are staged."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ptbundler.paths import resolve_relative_path, strip_leading
from ptbundler.staging import fsops
from ptbundler.staging.base import StagingStrategy

if TYPE_CHECKING:
    from ptbundler.pipeline.types import BundleSpec

logger = logging.getLogger(__name__)


class AllowListStrategy(StagingStrategy):
    """Copy `folders_to_include` and `files_to_include` into staging.

    Anything not listed stays out of the bundle. Listed paths keep their
    position relative to the base directory.
    """

    name = "allow"

    def assemble(
        self, spec: BundleSpec, staging_root: str, output_dir: Optional[str] = None,
    ) -> None:
        for folder in spec.folders_to_include:
            relative = strip_leading(folder)
            fsops.mirror(
                resolve_relative_path(relative, spec.basedir),
                f"{staging_root}/{relative}",
            )

        for file in spec.files_to_include:
            relative = strip_leading(file)
            fsops.copy_file(
                resolve_relative_path(relative, spec.basedir),
                f"{staging_root}/{relative}",
            )

        logger.info(
            "Staged %d folders and %d files into %s",
            len(spec.folders_to_include), len(spec.files_to_include), staging_root,
        )
