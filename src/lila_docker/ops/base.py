"""Shared subprocess helper for external setup commands."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class StepError(RuntimeError):
    """Raised when an external command fails to run or exits non-zero."""


def run_command(cmd: list[str], cwd: Path | None = None) -> None:
    """Run a command, streaming its output to the terminal.

    Raises:
        StepError: If the command cannot be started or exits non-zero.
    """
    logger.info(f"Running: {' '.join(cmd)}" + (f" (in {cwd})" if cwd else ""))
    try:
        result = subprocess.run(cmd, cwd=str(cwd) if cwd else None)
    except FileNotFoundError as e:
        raise StepError(f"'{cmd[0]}' is not installed or not on PATH") from e
    except OSError as e:
        raise StepError(f"Failed to start '{cmd[0]}': {e}") from e

    if result.returncode != 0:
        raise StepError(
            f"'{' '.join(cmd)}' exited with status {result.returncode}"
        )
