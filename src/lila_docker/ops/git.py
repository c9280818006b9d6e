"""Git operations via the git CLI."""

import logging
import shutil
import time
from pathlib import Path

from .base import StepError, run_command

logger = logging.getLogger(__name__)


class GitClient:
    """Clone repositories and initialize submodules with the git binary."""

    def __init__(self, attempts: int = 2, retry_delay: float = 2.0) -> None:
        self.attempts = max(1, attempts)
        self.retry_delay = retry_delay

    @staticmethod
    def is_repository(path: Path) -> bool:
        """Check whether a directory already holds a git checkout."""
        return (path / ".git").exists()

    def clone(self, url: str, destination: Path) -> None:
        """Clone a repository, retrying failed attempts.

        A checkout left behind by a failed attempt is removed before the
        next one. A directory that existed before the clone is never
        removed, and a non-empty one is refused outright.

        Raises:
            StepError: If the destination holds other files or every
                attempt fails.
        """
        existed = destination.exists()
        if existed and (not destination.is_dir() or any(destination.iterdir())):
            raise StepError(
                f"{destination} already exists and is not a git checkout"
            )

        last_error: StepError | None = None
        for attempt in range(1, self.attempts + 1):
            try:
                run_command(["git", "clone", url, str(destination)])
                return
            except StepError as e:
                last_error = e
                logger.warning(
                    f"Clone of {url} failed (attempt {attempt}/{self.attempts}): {e}"
                )
                if not existed and destination.exists():
                    shutil.rmtree(destination, ignore_errors=True)
                if attempt < self.attempts:
                    time.sleep(self.retry_delay * attempt)

        raise StepError(f"Failed to clone {url}: {last_error}") from last_error

    @staticmethod
    def init_submodules(path: Path) -> None:
        """Initialize and update submodules of a checkout.

        Raises:
            StepError: If the git command fails.
        """
        run_command(["git", "submodule", "update", "--init"], cwd=path)
