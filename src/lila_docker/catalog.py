"""Repository and compose profile catalog."""

from enum import Enum

GITHUB_OWNER = "lichess-org"


class Repository(str, Enum):
    """Source repositories that can be cloned into the repos directory."""

    LILA = "lila"
    LILA_WS = "lila-ws"
    LILA_DB_SEED = "lila-db-seed"
    LILA_ENGINE = "lila-engine"
    LILA_FISHNET = "lila-fishnet"
    LILA_GIF = "lila-gif"
    LILA_SEARCH = "lila-search"
    LIFAT = "lifat"
    SCALACHESS = "scalachess"
    API = "api"
    PGN_VIEWER = "pgn-viewer"
    CHESSGROUND = "chessground"
    BERSERK = "berserk"


class ComposeProfile(str, Enum):
    """Docker compose profiles for optional services."""

    STOCKFISH_PLAY = "stockfish-play"
    STOCKFISH_ANALYSIS = "stockfish-analysis"
    EXTERNAL_ENGINE = "external-engine"
    SEARCH = "search"
    GIFS = "gifs"
    THUMBNAILS = "thumbnails"
    API_DOCS = "api-docs"
    CHESSGROUND = "chessground"
    PGN_VIEWER = "pgn-viewer"


# Canonical names are the wire format: clone URLs, directory names,
# --profile flags and the persisted config all use them.
_REPO_NAMES: dict[Repository, str] = {
    Repository.LILA: "lila",
    Repository.LILA_WS: "lila-ws",
    Repository.LILA_DB_SEED: "lila-db-seed",
    Repository.LILA_ENGINE: "lila-engine",
    Repository.LILA_FISHNET: "lila-fishnet",
    Repository.LILA_GIF: "lila-gif",
    Repository.LILA_SEARCH: "lila-search",
    Repository.LIFAT: "lifat",
    Repository.SCALACHESS: "scalachess",
    Repository.API: "api",
    Repository.PGN_VIEWER: "pgn-viewer",
    Repository.CHESSGROUND: "chessground",
    Repository.BERSERK: "berserk",
}

_PROFILE_NAMES: dict[ComposeProfile, str] = {
    ComposeProfile.STOCKFISH_PLAY: "stockfish-play",
    ComposeProfile.STOCKFISH_ANALYSIS: "stockfish-analysis",
    ComposeProfile.EXTERNAL_ENGINE: "external-engine",
    ComposeProfile.SEARCH: "search",
    ComposeProfile.GIFS: "gifs",
    ComposeProfile.THUMBNAILS: "thumbnails",
    ComposeProfile.API_DOCS: "api-docs",
    ComposeProfile.CHESSGROUND: "chessground",
    ComposeProfile.PGN_VIEWER: "pgn-viewer",
}


def _check_table(enum_cls: type[Enum], table: dict) -> None:
    missing = [member for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"No canonical name for {enum_cls.__name__}: {missing}")
    names = list(table.values())
    if any(not name for name in names):
        raise RuntimeError(f"Empty canonical name in {enum_cls.__name__} table")
    if len(set(names)) != len(names):
        raise RuntimeError(f"Duplicate canonical names in {enum_cls.__name__} table")


_check_table(Repository, _REPO_NAMES)
_check_table(ComposeProfile, _PROFILE_NAMES)

_REPOS_BY_NAME = {name: repo for repo, name in _REPO_NAMES.items()}
_PROFILES_BY_NAME = {name: profile for profile, name in _PROFILE_NAMES.items()}

# Submodules are initialized for this repository after cloning.
PRIMARY_REPOSITORY = Repository.LILA


def repo_canonical_name(repo: Repository) -> str:
    """Return the canonical name of a repository."""
    return _REPO_NAMES[repo]


def profile_canonical_name(profile: ComposeProfile) -> str:
    """Return the canonical name of a compose profile."""
    return _PROFILE_NAMES[profile]


def all_repositories() -> list[Repository]:
    """List every repository in declaration order."""
    return list(Repository)


def all_profiles() -> list[ComposeProfile]:
    """List every compose profile in declaration order."""
    return list(ComposeProfile)


def repository_from_name(name: str) -> Repository:
    """Look up a repository by canonical name.

    Raises:
        ValueError: If the name is not in the catalog.
    """
    try:
        return _REPOS_BY_NAME[name]
    except KeyError:
        available = ", ".join(_REPOS_BY_NAME)
        raise ValueError(
            f"Unknown repository '{name}'. Available repositories: {available}"
        ) from None


def profile_from_name(name: str) -> ComposeProfile:
    """Look up a compose profile by canonical name.

    Raises:
        ValueError: If the name is not in the catalog.
    """
    try:
        return _PROFILES_BY_NAME[name]
    except KeyError:
        available = ", ".join(_PROFILES_BY_NAME)
        raise ValueError(
            f"Unknown compose profile '{name}'. Available profiles: {available}"
        ) from None


def repo_url(repo: Repository) -> str:
    """Build the HTTPS clone URL for a repository."""
    return f"https://github.com/{GITHUB_OWNER}/{repo_canonical_name(repo)}.git"
