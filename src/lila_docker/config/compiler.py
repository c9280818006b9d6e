"""Compile selected optional services into a Configuration."""

import logging
from collections.abc import Iterable

from lila_docker.catalog import (
    all_profiles,
    all_repositories,
    profile_canonical_name,
    repo_canonical_name,
)
from lila_docker.services import OptionalService

from .models import Configuration

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"


class ConfigurationError(ValueError):
    """Raised when selections cannot form a valid configuration."""


def compile_configuration(
    selected: Iterable[OptionalService],
    repos_dir: str,
    setup_database: bool,
    su_password: str = "",
    password: str = "",
) -> Configuration:
    """Reduce selected services and preferences to one Configuration.

    Repositories and profiles are unioned across all selected services
    and emitted in catalog order, so the result depends only on which
    services were selected, not on their order or repetition.

    Args:
        selected: Optional services chosen by the user.
        repos_dir: Destination root for repository clones.
        setup_database: Whether the database should be seeded.
        su_password: Admin password; blank means the default.
        password: Regular user password; blank means the default.

    Returns:
        The compiled configuration.

    Raises:
        ConfigurationError: If repos_dir is empty.
    """
    if not repos_dir or not repos_dir.strip():
        raise ConfigurationError("Destination directory for repositories is empty")

    services = list(selected)
    repos = set()
    profiles = set()
    for service in services:
        repos.update(service.repos)
        if service.profile is not None:
            profiles.add(service.profile)

    if setup_database:
        su_password = su_password or DEFAULT_PASSWORD
        password = password or DEFAULT_PASSWORD
    else:
        su_password = ""
        password = ""

    config = Configuration(
        repos_dir=repos_dir,
        repos=[repo_canonical_name(r) for r in all_repositories() if r in repos],
        profiles=[profile_canonical_name(p) for p in all_profiles() if p in profiles],
        setup_database=setup_database,
        su_password=su_password,
        password=password,
    )
    logger.info(
        f"Compiled configuration from {len(services)} services: "
        f"{len(config.repos)} repos, {len(config.profiles)} profiles"
    )
    return config
