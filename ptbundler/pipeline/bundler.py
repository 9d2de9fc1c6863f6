"""Bundle pipeline: turns a project folder into distributable ZIP archives.

Pipeline order:
  1. resolve version (`git describe`, default 1.0.0, leading `v` stripped)
  2. clean before build -> build hook -> clean after build -> cleanup hook
  3. create staging root {workdir}/{ptname}
  4. assemble staging via the injected StagingStrategy
  5. remove archive-internal targets from staging
  6. inject the version into {ptname}/{ptname}.{ext} if present
  7. write marker files, then {ptname}.{version}.zip and {ptname}.zip
  8. delete the staging root

`create_zip_archive()` never raises: any failure is written to the output
stream, logged, and reported through the returned BundleResult.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from ptbundler.archive import archive_directory
from ptbundler.core.config import Settings, get_settings
from ptbundler.core.logging import bind_bundle_id
from ptbundler.pipeline.types import BundleResult, BundleSpec, BundleStage, Hook
from ptbundler.staging import (
    AllowListStrategy,
    DenyListStrategy,
    StagingError,
    StagingStrategy,
    clean_archive_targets,
    fsops,
    remove_matches,
)
from ptbundler.vcs import GitDescribeVersionSource, VersionSource, normalize_version

logger = logging.getLogger(__name__)

STRATEGIES: dict[str, type[StagingStrategy]] = {
    AllowListStrategy.name: AllowListStrategy,
    DenyListStrategy.name: DenyListStrategy,
}


class BundlePipeline:
    """Runs the bundle state machine for one BundleSpec.

    The staging policy is injected; everything else is shared between
    allow-list and deny-list bundles. A pipeline instance must not be run
    concurrently with another run using the same staging root.
    """

    def __init__(
        self,
        spec: BundleSpec,
        strategy: StagingStrategy,
        version_source: Optional[VersionSource] = None,
        settings: Optional[Settings] = None,
        output: Optional[TextIO] = None,
    ):
        self.spec = spec
        self.strategy = strategy
        self.settings = settings or get_settings()
        self.version_source = version_source or GitDescribeVersionSource(
            spec.basedir, timeout=self.settings.git_timeout_seconds,
        )
        self.output = output
        self._current: Optional[BundleStage] = None
        self._completed: list[BundleStage] = []
        self._staging_created = False
        self._running = False

    # ------------------------------------------------------------------
    # State tracking
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._current = BundleStage.INIT
        self._completed = []
        self._staging_created = False

    def _enter(self, stage: BundleStage) -> None:
        if self._current is not None:
            self._completed.append(self._current)
        self._current = stage
        logger.debug("Bundle %s: %s", self.spec.ptname, stage.value)

    @property
    def current_stage(self) -> Optional[BundleStage]:
        return self._current

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def resolve_version(self) -> str:
        """Return the bundle version; never raises."""
        try:
            raw = self.version_source.get_version()
        except Exception as exc:
            logger.debug("Version source failed, using default: %s", exc)
            raw = None
        version = normalize_version(raw, self.settings.default_version)
        logger.info("Resolved version %s for %s", version, self.spec.ptname)
        return version

    def clean_targets(self, patterns: Iterable[str]) -> list[str]:
        """Delete project paths matching `patterns` (base-dir relative)."""
        removed = remove_matches(patterns, self.spec.basedir)
        if removed:
            logger.info("Cleaned %d project paths", len(removed))
        return removed

    def run_hook(self, hook: Optional[Hook], label: str) -> None:
        if hook is None:
            logger.debug("No %s hook configured", label)
            return
        logger.info("Running %s hook", label)
        hook()

    def output_dir(self) -> str:
        """Archive directory, using the settings default when the spec has none."""
        return self.spec.output_dir(self.settings.outdir)

    def create_staging_root(self) -> str:
        staging = self.spec.staging_root()
        if fsops.exists(staging):
            raise StagingError(
                f"Staging folder already exists: {staging}. "
                "Remove it or wait for the other bundle run to finish."
            )
        fsops.make_dir(staging, fsops.DEFAULT_DIR_MODE)
        self._staging_created = True
        return staging

    def inject_version(self, version: str) -> bool:
        """Replace the version placeholder in the plugin entry file.

        Themes have no entry file; a missing file is not an error. A staged
        symlink is replaced by a regular file first so the link target is
        never rewritten.
        Returns True if the file existed and was rewritten.
        """
        entry = Path(self.spec.staging_root()) / (
            f"{self.spec.ptname}.{self.settings.entry_extension}"
        )
        if not entry.is_file():
            logger.debug("No entry file at %s, skipping version injection", entry)
            return False

        placeholder = self.settings.version_placeholder.encode()
        content = entry.read_bytes()
        if entry.is_symlink():
            entry.unlink()
        entry.write_bytes(content.replace(placeholder, version.encode()))
        logger.info("Injected version %s into %s", version, entry.name)
        return True

    def prepare_staging_folder(self, version: str) -> str:
        """Run every step up to and including version injection.

        Returns the staging root. The caller is responsible for calling
        `delete_staging_folder()` when using this outside a full run.
        """
        spec = self.spec
        if not self._running:
            self._reset()

        self._enter(BundleStage.CLEAN_BEFORE)
        self.clean_targets(spec.clean_before_build)

        self._enter(BundleStage.RUN_BUILD_HOOK)
        self.run_hook(spec.build, "build")

        self._enter(BundleStage.CLEAN_AFTER)
        self.clean_targets(spec.clean_after_build)

        self._enter(BundleStage.RUN_CLEANUP_HOOK)
        self.run_hook(spec.cleanup, "cleanup")

        self._enter(BundleStage.CREATE_STAGING_ROOT)
        staging = self.create_staging_root()

        self._enter(BundleStage.ASSEMBLE_STAGING)
        self.strategy.assemble(spec, staging, output_dir=self.output_dir())

        self._enter(BundleStage.CLEAN_ARCHIVE_INTERNAL)
        clean_archive_targets(spec.archive_targets_to_clean, staging)

        self._enter(BundleStage.INJECT_VERSION)
        self.inject_version(version)
        return staging

    def write_markers(self, outdir: str, versioned: str, unversioned: str) -> list[str]:
        """Write the two marker files naming the archives (no newline)."""
        markers = [
            (os.path.join(outdir, self.settings.marker_with_version), versioned),
            (os.path.join(outdir, self.settings.marker_without_version), unversioned),
        ]
        for path, content in markers:
            Path(path).write_text(content, encoding="utf-8")
        return [path for path, _ in markers]

    def delete_staging_folder(self) -> None:
        fsops.remove(self.spec.staging_root())
        self._staging_created = False

    def _discard_staging(self) -> None:
        """Best-effort staging removal after a failed run."""
        if not self._staging_created:
            return
        try:
            self.delete_staging_folder()
        except OSError as exc:
            logger.warning(
                "Could not remove staging folder %s: %s",
                self.spec.staging_root(), exc,
            )

    def _report(self, message: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        print(message, file=stream)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def create_zip_archive(self) -> BundleResult:
        """Build both archives and marker files for the bundle.

        Never raises. Errors are written to the output stream and returned
        in the BundleResult.
        """
        spec = self.spec
        result = BundleResult(ptname=spec.ptname)
        self._reset()
        self._running = True

        with bind_bundle_id(spec.ptname):
            try:
                self._enter(BundleStage.RESOLVE_VERSION)
                version = self.resolve_version()
                result.version = version

                staging = self.prepare_staging_folder(version)

                self._enter(BundleStage.ENSURE_OUTPUT_DIR)
                outdir = self.output_dir()
                if not fsops.exists(outdir):
                    fsops.make_dir(outdir, fsops.DEFAULT_DIR_MODE)

                versioned = spec.versioned_archive_name(version)
                unversioned = spec.unversioned_archive_name()

                self._enter(BundleStage.WRITE_MARKERS)
                result.marker_files = self.write_markers(outdir, versioned, unversioned)

                self._enter(BundleStage.ARCHIVE_VERSIONED)
                result.versioned_archive = os.path.join(outdir, versioned)
                archive_directory(staging, result.versioned_archive)

                self._enter(BundleStage.ARCHIVE_UNVERSIONED)
                result.unversioned_archive = os.path.join(outdir, unversioned)
                archive_directory(staging, result.unversioned_archive)

                self._enter(BundleStage.DELETE_STAGING_ROOT)
                self.delete_staging_folder()

                self._enter(BundleStage.DONE)
                self._completed.append(BundleStage.DONE)
                result.is_success = True
                logger.info(
                    "Bundle %s %s created in %s", spec.ptname, version, outdir,
                )

            except Exception as exc:
                result.error = str(exc)
                result.failed_stage = self._current
                logger.error(
                    "Bundle %s failed at stage %s (%s: %s)",
                    spec.ptname, self._current, type(exc).__name__, exc,
                    exc_info=True,
                )
                self._report(str(exc))
                self._discard_staging()
            finally:
                self._running = False

        result.stages = list(self._completed)
        return result


def allow_list_pipeline(spec: BundleSpec, **kwargs) -> BundlePipeline:
    """Pipeline that stages only `folders_to_include` / `files_to_include`."""
    return BundlePipeline(spec, AllowListStrategy(), **kwargs)


def deny_list_pipeline(spec: BundleSpec, **kwargs) -> BundlePipeline:
    """Pipeline that stages everything except `targets_to_exclude`."""
    return BundlePipeline(spec, DenyListStrategy(), **kwargs)


def pipeline_for_policy(spec: BundleSpec, policy: str, **kwargs) -> BundlePipeline:
    """Build a pipeline for a policy name (`allow` or `deny`).

    Raises:
        ValueError: If the policy name is unknown.
    """
    try:
        strategy_cls = STRATEGIES[policy.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown staging policy {policy!r}; expected one of {sorted(STRATEGIES)}"
        ) from None
    return BundlePipeline(spec, strategy_cls(), **kwargs)
