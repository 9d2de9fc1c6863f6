"""Shell-command build hooks.

Spec files describe build and cleanup steps as shell commands. This module
turns such a command into the zero-argument callable the pipeline expects.
The hook raises HookError when the command exits non-zero, which fails the
run at the hook's stage.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Default timeout per hook command (seconds)
DEFAULT_HOOK_TIMEOUT = 600


class HookError(Exception):
    """Raised when a hook command fails or times out."""

    def __init__(self, message: str, stdout: str = "", stderr: str = ""):
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


def _tail(text: str, max_lines: int = 20) -> str:
    return "\n".join(text.splitlines()[-max_lines:])


@dataclass
class CommandHook:
    """Zero-argument hook that runs `command` through the shell in `cwd`."""

    command: str
    cwd: str | Path
    timeout: Optional[int] = DEFAULT_HOOK_TIMEOUT

    def __call__(self) -> None:
        logger.info("Running hook: %s (cwd=%s)", self.command, self.cwd)
        start = time.monotonic()
        try:
            result = subprocess.run(
                self.command,
                shell=True,
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise HookError(
                f"Hook '{self.command}' timed out after {self.timeout} seconds"
            ) from None

        duration = time.monotonic() - start
        if result.returncode != 0:
            logger.warning("Hook '%s' stderr (tail):\n%s", self.command, _tail(result.stderr))
            raise HookError(
                f"Hook '{self.command}' failed with exit code {result.returncode}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        logger.info("Hook '%s' OK (%.1fs)", self.command, duration)


def command_hook(
    command: str,
    cwd: str | Path,
    timeout: Optional[int] = DEFAULT_HOOK_TIMEOUT,
) -> CommandHook:
    """Return a hook that runs `command` through the shell in `cwd`."""
    return CommandHook(command, cwd, timeout)
