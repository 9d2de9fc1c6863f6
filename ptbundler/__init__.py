"""Plugin/theme bundler: versioned ZIP archives from a project folder.

Public API:
    BundleSpec             — what to bundle and where
    allow_list_pipeline()  — stage only listed folders/files
    deny_list_pipeline()   — stage everything except exclusions
    BundlePipeline.create_zip_archive() -> BundleResult
    globstar(pattern) -> list[str]
    archive_directory(source, destination)
"""

from ptbundler.archive import archive_directory
from ptbundler.paths import globstar, resolve_relative_path
from ptbundler.pipeline import (
    BundlePipeline,
    BundleResult,
    BundleSpec,
    BundleStage,
    allow_list_pipeline,
    build_pipeline,
    deny_list_pipeline,
    load_bundle_spec,
)

__all__ = [
    "BundlePipeline",
    "BundleResult",
    "BundleSpec",
    "BundleStage",
    "allow_list_pipeline",
    "archive_directory",
    "build_pipeline",
    "deny_list_pipeline",
    "globstar",
    "load_bundle_spec",
    "resolve_relative_path",
]
