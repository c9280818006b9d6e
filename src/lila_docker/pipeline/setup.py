"""The lila-docker setup pipeline: clone, build, compile, start, seed."""

import logging
import shlex

from lila_docker.catalog import (
    PRIMARY_REPOSITORY,
    ComposeProfile,
    Repository,
    profile_canonical_name,
    repo_canonical_name,
    repo_url,
    repository_from_name,
)
from lila_docker.config.models import Configuration
from lila_docker.ops.base import StepError
from lila_docker.ops.compose import ComposeClient
from lila_docker.ops.git import GitClient

from .runner import Pipeline, SkipStep, Step

logger = logging.getLogger(__name__)

UI_SERVICE = "ui"
UI_BUILD_COMMAND = "/lila/ui/build"
CHESSGROUND_BUILD_COMMAND = "cd /chessground && pnpm install && pnpm run compile"

SEED_SERVICE = "python"
SEED_SCRIPT_DIR = "/lila-db-seed/spamdb"
MONGO_URI = "mongodb://mongodb/lichess"
ELASTICSEARCH_HOST = "elasticsearch:9200"

STEP_CLONE = "clone repositories"
STEP_SUBMODULES = "init submodules"
STEP_BUILD = "build images"
STEP_ASSETS = "compile assets"
STEP_START = "start services"
STEP_SEED = "seed database"


def seed_command(config: Configuration) -> str:
    """Shell command that seeds MongoDB (and Elasticsearch with search)."""
    args = [
        "python",
        f"{SEED_SCRIPT_DIR}/spamdb.py",
        f"--uri={MONGO_URI}",
        f"--password={config.password}",
        f"--su-password={config.su_password}",
    ]
    if profile_canonical_name(ComposeProfile.SEARCH) in config.profiles:
        args.extend(["--es", f"--es-host={ELASTICSEARCH_HOST}"])
    install = f"pip install -r {SEED_SCRIPT_DIR}/requirements.txt"
    return f"{install} && {shlex.join(args)}"


class SetupSteps:
    """Step actions for one configuration.

    Holds the set of repositories present after cloning so that the
    submodule step only runs against a checkout that exists.
    """

    def __init__(
        self, config: Configuration, git: GitClient, compose: ComposeClient
    ) -> None:
        self.config = config
        self.git = git
        self.compose = compose
        self.present: set[str] = set()

    def clone_repositories(self) -> str:
        repos_dir = self.config.repos_path
        if not self.config.repos:
            return "no repositories selected"

        try:
            repos_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StepError(f"Cannot create {repos_dir}: {e}") from e

        cloned, existing, failed = [], [], []
        for name in self.config.repos:
            destination = repos_dir / name
            if self.git.is_repository(destination):
                logger.info(f"{name} already cloned at {destination}")
                existing.append(name)
                self.present.add(name)
                continue
            try:
                self.git.clone(repo_url(repository_from_name(name)), destination)
            except StepError as e:
                logger.warning(f"Could not clone {name}: {e}")
                failed.append(name)
                continue
            cloned.append(name)
            self.present.add(name)

        if failed:
            raise StepError(f"Failed to clone: {', '.join(failed)}")
        return f"{len(cloned)} cloned, {len(existing)} already present"

    def init_submodules(self) -> str:
        primary = repo_canonical_name(PRIMARY_REPOSITORY)
        if primary not in self.present:
            raise SkipStep(f"{primary} was not cloned")
        self.git.init_submodules(self.config.repos_path / primary)
        return f"submodules initialized in {primary}"

    def build_images(self) -> None:
        self.compose.build(self.config.profiles)

    def compile_assets(self) -> str:
        builds = [("lila ui", UI_BUILD_COMMAND)]
        if repo_canonical_name(Repository.CHESSGROUND) in self.config.repos:
            builds.append(("chessground", CHESSGROUND_BUILD_COMMAND))

        compiled, failed = [], []
        for label, command in builds:
            try:
                self.compose.run(UI_SERVICE, command)
            except StepError as e:
                logger.warning(f"Could not compile {label}: {e}")
                failed.append(label)
                continue
            compiled.append(label)

        if failed:
            raise StepError(f"Failed to compile: {', '.join(failed)}")
        return f"compiled {', '.join(compiled)}"

    def start_services(self) -> None:
        self.compose.up(self.config.profiles)

    def seed_database(self) -> None:
        if not self.config.setup_database:
            raise SkipStep("database setup not requested")
        self.compose.run(SEED_SERVICE, seed_command(self.config), self.config.profiles)


def build_setup_pipeline(
    config: Configuration,
    git: GitClient | None = None,
    compose: ComposeClient | None = None,
) -> Pipeline:
    """Assemble the six setup steps in their canonical order."""
    steps = SetupSteps(config, git or GitClient(), compose or ComposeClient())
    return Pipeline(
        [
            Step(STEP_CLONE, steps.clone_repositories),
            Step(STEP_SUBMODULES, steps.init_submodules),
            Step(STEP_BUILD, steps.build_images),
            Step(STEP_ASSETS, steps.compile_assets),
            Step(STEP_START, steps.start_services),
            Step(STEP_SEED, steps.seed_database),
        ]
    )
