"""Bundle pipeline orchestration.

Public API:
    BundlePipeline(spec, strategy).create_zip_archive() -> BundleResult
    allow_list_pipeline(spec) / deny_list_pipeline(spec) -> BundlePipeline
    load_bundle_spec(path) -> (BundleSpec, policy)
"""

from ptbundler.pipeline.bundler import (
    BundlePipeline,
    allow_list_pipeline,
    deny_list_pipeline,
    pipeline_for_policy,
)
from ptbundler.pipeline.hooks import CommandHook, HookError, command_hook
from ptbundler.pipeline.loader import BundleSpecError, build_pipeline, load_bundle_spec
from ptbundler.pipeline.types import BundleResult, BundleSpec, BundleStage

__all__ = [
    "BundlePipeline",
    "BundleResult",
    "BundleSpec",
    "BundleSpecError",
    "BundleStage",
    "CommandHook",
    "HookError",
    "allow_list_pipeline",
    "build_pipeline",
    "command_hook",
    "deny_list_pipeline",
    "load_bundle_spec",
    "pipeline_for_policy",
]
