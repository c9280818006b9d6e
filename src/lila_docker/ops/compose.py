"""Docker compose operations via the docker CLI.

No Python Docker SDK dependency; every call shells out to
``docker compose`` in the project directory.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from .base import run_command

logger = logging.getLogger(__name__)


def compose_command(args: Iterable[str], profiles: Iterable[str] = ()) -> list[str]:
    """Build a ``docker compose`` command line.

    One ``--profile`` flag is emitted per profile; with no profiles only
    the default services are selected.
    """
    cmd = ["docker", "compose"]
    for profile in profiles:
        cmd.extend(["--profile", profile])
    cmd.extend(args)
    return cmd


class ComposeClient:
    """Run docker compose subcommands for the lila-docker project."""

    def __init__(self, project_dir: Path | None = None) -> None:
        self.project_dir = project_dir or Path.cwd()

    def _run(self, args: list[str], profiles: Iterable[str] = ()) -> None:
        run_command(compose_command(args, profiles), cwd=self.project_dir)

    def build(self, profiles: Iterable[str] = ()) -> None:
        """Build images for the default services and the given profiles."""
        self._run(["build"], profiles)

    def up(self, profiles: Iterable[str] = ()) -> None:
        """Start services in the background."""
        self._run(["up", "-d"], profiles)

    def run(
        self, service: str, command: str, profiles: Iterable[str] = ()
    ) -> None:
        """Run a shell command in a throwaway container of a service."""
        self._run(["run", "--rm", service, "bash", "-c", command], profiles)

    def stop(self, profiles: Iterable[str] = ()) -> None:
        """Stop running services without removing them."""
        self._run(["stop"], profiles)

    def down(self, profiles: Iterable[str] = ()) -> None:
        """Stop and remove containers and networks."""
        self._run(["down"], profiles)
