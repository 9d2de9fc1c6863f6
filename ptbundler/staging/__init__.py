"""Staging strategies that decide what goes into a bundle.

Public API:
    AllowListStrategy  — stage only listed folders/files
    DenyListStrategy   — stage everything except excluded patterns
    clean_archive_targets(patterns, staging_root) -> list[str]
"""

from ptbundler.staging.allow_list import AllowListStrategy
from ptbundler.staging.base import (
    StagingError,
    StagingStrategy,
    clean_archive_targets,
    remove_matches,
)
from ptbundler.staging.deny_list import DenyListStrategy

__all__ = [
    "AllowListStrategy",
    "DenyListStrategy",
    "StagingError",
    "StagingStrategy",
    "clean_archive_targets",
    "remove_matches",
]
