"""External collaborators: git and docker compose."""

from .base import StepError
from .compose import ComposeClient, compose_command
from .git import GitClient

__all__ = ["ComposeClient", "GitClient", "StepError", "compose_command"]
