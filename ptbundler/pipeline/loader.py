"""YAML bundle spec loader.

A spec file describes one bundle:

    ptname: my-plugin
    policy: deny              # allow | deny (default deny)
    basedir: .                # relative to this file
    outdir: bundled
    build: npm run build      # optional shell command
    targets_to_exclude:
      - node_modules
      - src/**/*.test.js
    archive_targets_to_clean:
      - "**/.DS_Store"

Relative `basedir` and `workdir` resolve against the spec file's directory.
Shell-command hooks run in `basedir`.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ptbundler.pipeline.bundler import STRATEGIES, BundlePipeline, pipeline_for_policy
from ptbundler.pipeline.hooks import command_hook
from ptbundler.pipeline.types import BundleSpec

logger = logging.getLogger(__name__)

DEFAULT_POLICY = "deny"

_PATTERN_KEYS = (
    "clean_before_build",
    "clean_after_build",
    "archive_targets_to_clean",
    "folders_to_include",
    "files_to_include",
    "targets_to_exclude",
)
_PATH_KEYS = ("basedir", "workdir")
_KNOWN_KEYS = {"ptname", "outdir", "policy", "build", "cleanup", *_PATTERN_KEYS, *_PATH_KEYS}


class BundleSpecError(Exception):
    """Raised when a spec file is missing, unparsable or invalid."""


def _pattern_list(data: dict, key: str) -> list[str]:
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise BundleSpecError(f"'{key}' must be a list of strings")
    return list(value)


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise BundleSpecError(f"'{key}' must be a non-empty string")
    return value.strip()


def parse_bundle_spec(data: Any, spec_dir: Path) -> tuple[BundleSpec, str]:
    """Build a BundleSpec and policy name from a parsed YAML document."""
    if not isinstance(data, dict):
        raise BundleSpecError("Spec file must contain a mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        logger.warning("Ignoring unknown spec keys: %s", ", ".join(sorted(unknown)))

    ptname = _optional_str(data, "ptname")
    if not ptname:
        raise BundleSpecError("'ptname' is required")

    policy = (_optional_str(data, "policy") or DEFAULT_POLICY).lower()
    if policy not in STRATEGIES:
        raise BundleSpecError(
            f"Unknown policy {policy!r}; expected one of {sorted(STRATEGIES)}"
        )

    paths = {}
    for key in _PATH_KEYS:
        raw = _optional_str(data, key)
        paths[key] = str(spec_dir / raw) if raw else str(spec_dir)

    kwargs: dict[str, Any] = {key: _pattern_list(data, key) for key in _PATTERN_KEYS}
    outdir = _optional_str(data, "outdir")
    if outdir:
        kwargs["outdir"] = outdir

    try:
        spec = BundleSpec(ptname=ptname, **paths, **kwargs)
    except (OSError, ValueError) as exc:
        raise BundleSpecError(f"Invalid bundle spec: {exc}") from exc

    for key in ("build", "cleanup"):
        command = _optional_str(data, key)
        if command:
            setattr(spec, key, command_hook(command, spec.basedir))

    return spec, policy


def load_bundle_spec(path: str | Path) -> tuple[BundleSpec, str]:
    """Read a YAML spec file and return (spec, policy).

    Raises:
        BundleSpecError: If the file cannot be read or is invalid.
    """
    spec_path = Path(path)
    try:
        content = spec_path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise BundleSpecError(f"Cannot read spec file {spec_path}: {exc}") from exc

    spec, policy = parse_bundle_spec(data, spec_path.resolve().parent)
    logger.info("Loaded %s bundle spec for %s from %s", policy, spec.ptname, spec_path)
    return spec, policy


def build_pipeline(path: str | Path, **kwargs) -> BundlePipeline:
    """Load a spec file and return a pipeline ready to run."""
    spec, policy = load_bundle_spec(path)
    return pipeline_for_policy(spec, policy, **kwargs)
