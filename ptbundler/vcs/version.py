"""Bundle version resolution from git tags.

`git describe` returns the most recent reachable tag, optionally followed
by a distance and commit suffix (`v1.2.3-4-gabc1234`). That string becomes
the bundle version after one leading `v`/`V` is stripped.

Any git failure (not a repository, no tags, git missing, timeout) yields
no version; the pipeline then falls back to the configured default.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_GIT_TIMEOUT = 30


class VersionSource(Protocol):
    """Anything that can report the current bundle version."""

    def get_version(self) -> Optional[str]:
        """Return a version string, or None if unavailable."""


class GitDescribeVersionSource:
    """Reads the version from `git describe` in a repository directory."""

    def __init__(self, repo_dir: str | Path, timeout: int = DEFAULT_GIT_TIMEOUT):
        self.repo_dir = Path(repo_dir)
        self.timeout = timeout

    def get_version(self) -> Optional[str]:
        try:
            result = subprocess.run(
                ["git", "describe"],
                cwd=str(self.repo_dir),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("git describe could not run in %s: %s", self.repo_dir, exc)
            return None

        if result.returncode != 0:
            logger.debug(
                "git describe failed in %s (exit %d): %s",
                self.repo_dir, result.returncode, result.stderr.strip(),
            )
            return None

        lines = result.stdout.splitlines()
        return lines[0].strip() if lines else None


class StaticVersionSource:
    """Always reports the same version. Useful for tests and CI overrides."""

    def __init__(self, version: Optional[str]):
        self.version = version

    def get_version(self) -> Optional[str]:
        return self.version


def normalize_version(raw: Optional[str], default: str) -> str:
    """Apply the default for empty versions and strip one leading `v`/`V`."""
    version = raw.strip() if raw else ""
    if not version:
        version = default
    if version[:1].lower() == "v":
        version = version[1:]
    return version
