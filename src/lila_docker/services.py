"""Optional services offered during setup and the user's selections."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .catalog import ComposeProfile, Repository

if TYPE_CHECKING:
    from .config.models import Configuration


@dataclass(frozen=True)
class OptionalService:
    """A selectable feature: an optional compose profile plus repositories.

    A service without a profile is a repository-only selection (a library
    or tool with nothing to run), so it must name at least one repository.
    """

    key: str
    description: str
    profile: ComposeProfile | None = None
    repos: frozenset[Repository] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.repos, frozenset):
            object.__setattr__(self, "repos", frozenset(self.repos))
        if self.profile is None and not self.repos:
            raise ValueError(
                f"Optional service '{self.key}' has no compose profile and no "
                "repositories; selecting it would have no effect"
            )


OPTIONAL_SERVICES: tuple[OptionalService, ...] = (
    OptionalService(
        key="stockfish-play",
        description="Stockfish (for playing against the computer)",
        profile=ComposeProfile.STOCKFISH_PLAY,
        repos=frozenset({Repository.LILA_FISHNET}),
    ),
    OptionalService(
        key="stockfish-analysis",
        description="Stockfish (for requesting computer analysis of games)",
        profile=ComposeProfile.STOCKFISH_ANALYSIS,
    ),
    OptionalService(
        key="external-engine",
        description="External Engine (for connecting a local chess engine to the analysis board)",
        profile=ComposeProfile.EXTERNAL_ENGINE,
        repos=frozenset({Repository.LILA_ENGINE}),
    ),
    OptionalService(
        key="search",
        description="Search (for searching games, forum posts, etc)",
        profile=ComposeProfile.SEARCH,
        repos=frozenset({Repository.LILA_SEARCH}),
    ),
    OptionalService(
        key="gifs",
        description="GIFs (for generating animated GIFs of games)",
        profile=ComposeProfile.GIFS,
        repos=frozenset({Repository.LILA_GIF}),
    ),
    OptionalService(
        key="thumbnails",
        description="Thumbnailer (for resizing images)",
        profile=ComposeProfile.THUMBNAILS,
    ),
    OptionalService(
        key="api-docs",
        description="API docs",
        profile=ComposeProfile.API_DOCS,
        repos=frozenset({Repository.API}),
    ),
    OptionalService(
        key="chessground",
        description="Chessground board UI (standalone development server)",
        profile=ComposeProfile.CHESSGROUND,
        repos=frozenset({Repository.CHESSGROUND}),
    ),
    OptionalService(
        key="pgn-viewer",
        description="PGN Viewer (standalone development server)",
        profile=ComposeProfile.PGN_VIEWER,
        repos=frozenset({Repository.PGN_VIEWER}),
    ),
    OptionalService(
        key="scalachess",
        description="Scalachess library (chess rules and logic)",
        repos=frozenset({Repository.SCALACHESS}),
    ),
    OptionalService(
        key="lifat",
        description="Lifat (large static assets)",
        repos=frozenset({Repository.LIFAT}),
    ),
    OptionalService(
        key="berserk",
        description="Berserk (Python API client)",
        repos=frozenset({Repository.BERSERK}),
    ),
)

# Always cloned, whatever the user picks.
BASE_SERVICES: tuple[OptionalService, ...] = (
    OptionalService(
        key="lila",
        description="Lila (core server)",
        repos=frozenset({Repository.LILA, Repository.LILA_WS}),
    ),
)

DATABASE_SEED_SERVICE = OptionalService(
    key="lila-db-seed",
    description="Database seeding scripts",
    repos=frozenset({Repository.LILA_DB_SEED}),
)


def get_service(key: str) -> OptionalService:
    """Get an optional service by key.

    Raises:
        ValueError: If no optional service has that key.
    """
    for service in OPTIONAL_SERVICES:
        if service.key == key:
            return service
    available = ", ".join(s.key for s in OPTIONAL_SERVICES)
    raise ValueError(f"Service '{key}' not found. Available services: {available}")


@dataclass
class Selections:
    """Answers collected from the interactive setup flow."""

    picks: list[OptionalService] = field(default_factory=list)
    repos_dir: str = ""
    setup_database: bool = False
    su_password: str = ""
    password: str = ""

    def services(self) -> list[OptionalService]:
        """Base services, the seed scripts if requested, then the user's picks."""
        services = list(BASE_SERVICES)
        if self.setup_database:
            services.append(DATABASE_SEED_SERVICE)
        services.extend(self.picks)
        return services

    def compile(self) -> "Configuration":
        """Compile these selections into a Configuration."""
        from .config.compiler import compile_configuration

        return compile_configuration(
            self.services(),
            repos_dir=self.repos_dir,
            setup_database=self.setup_database,
            su_password=self.su_password,
            password=self.password,
        )
