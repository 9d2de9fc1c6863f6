"""Types for the bundle pipeline.

BundleSpec is the caller-owned configuration of one bundle.
BundleStage names the pipeline states in execution order.
BundleResult is the typed outcome of `BundlePipeline.create_zip_archive()`.
"""

import os
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Optional

from ptbundler.core.config import DEFAULT_OUTDIR
from ptbundler.paths import canonicalize_base_dir

Hook = Callable[[], None]


@dataclass
class BundleSpec:
    """Configuration of one plugin/theme bundle.

    ptname names the staging folder, the archives and the entry file.
    Relative patterns are resolved against `basedir` (project files) or
    against the staging root (exclusions and archive-internal cleanup).
    `basedir` and `workdir` default to the current working directory.
    An unset `outdir` falls back to the pipeline settings.

    WARNING: `clean_before_build` and `clean_after_build` delete files from
    the project itself.
    """

    ptname: str
    basedir: str = ""
    outdir: Optional[str] = None
    workdir: str = ""
    clean_before_build: list[str] = field(default_factory=list)
    clean_after_build: list[str] = field(default_factory=list)
    archive_targets_to_clean: list[str] = field(default_factory=list)
    folders_to_include: list[str] = field(default_factory=list)
    files_to_include: list[str] = field(default_factory=list)
    targets_to_exclude: list[str] = field(default_factory=list)
    build: Optional[Hook] = None
    cleanup: Optional[Hook] = None

    def __post_init__(self) -> None:
        if not self.ptname or "/" in self.ptname or self.ptname in (".", ".."):
            raise ValueError(f"Invalid bundle name: {self.ptname!r}")
        if self.basedir:
            self.set_base_dir(self.basedir)
        else:
            self.basedir = os.getcwd()
        self.workdir = os.path.abspath(self.workdir or os.getcwd())

    def set_base_dir(self, basedir: str | os.PathLike) -> "BundleSpec":
        """Set the project directory, resolving symlinks. Must exist."""
        self.basedir = canonicalize_base_dir(basedir)
        return self

    def staging_root(self) -> str:
        return f"{self.workdir}/{self.ptname}"

    def output_dir(self, default_outdir: str = DEFAULT_OUTDIR) -> str:
        """Absolute output directory; relative `outdir` is under `workdir`."""
        outdir = self.outdir if self.outdir is not None else default_outdir
        return os.path.normpath(os.path.join(self.workdir, outdir.strip()))

    def versioned_archive_name(self, version: str) -> str:
        return f"{self.ptname}.{version}.zip"

    def unversioned_archive_name(self) -> str:
        return f"{self.ptname}.zip"


class BundleStage(StrEnum):
    """Pipeline states, in the order they run."""

    INIT = "init"
    RESOLVE_VERSION = "resolve_version"
    CLEAN_BEFORE = "clean_before"
    RUN_BUILD_HOOK = "run_build_hook"
    CLEAN_AFTER = "clean_after"
    RUN_CLEANUP_HOOK = "run_cleanup_hook"
    CREATE_STAGING_ROOT = "create_staging_root"
    ASSEMBLE_STAGING = "assemble_staging"
    CLEAN_ARCHIVE_INTERNAL = "clean_archive_internal"
    INJECT_VERSION = "inject_version"
    ENSURE_OUTPUT_DIR = "ensure_output_dir"
    WRITE_MARKERS = "write_markers"
    ARCHIVE_VERSIONED = "archive_versioned"
    ARCHIVE_UNVERSIONED = "archive_unversioned"
    DELETE_STAGING_ROOT = "delete_staging_root"
    DONE = "done"


@dataclass
class BundleResult:
    """Outcome of one pipeline run.

    A run is successful only if every stage through DONE completed.
    On failure, `failed_stage` is the stage that raised and `error` its
    message; `stages` lists the stages that completed before it.
    """

    ptname: str
    is_success: bool = False
    version: Optional[str] = None
    error: Optional[str] = None
    failed_stage: Optional[BundleStage] = None
    stages: list[BundleStage] = field(default_factory=list)
    versioned_archive: Optional[str] = None
    unversioned_archive: Optional[str] = None
    marker_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ptname": self.ptname,
            "is_success": self.is_success,
            "version": self.version,
            "error": self.error,
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "stages": [s.value for s in self.stages],
            "versioned_archive": self.versioned_archive,
            "unversioned_archive": self.unversioned_archive,
            "marker_files": self.marker_files,
        }
