"""Pydantic model for the persisted setup configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lila_docker.catalog import profile_from_name, repository_from_name

CONFIG_VERSION = 1


def _check_unique(values: list[str], label: str) -> list[str]:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"duplicate {label} '{value}'")
        seen.add(value)
    return values


class Configuration(BaseModel):
    """Normalized record of a user's setup choices."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = Field(default=CONFIG_VERSION, ge=1)
    repos_dir: str = Field(min_length=1)
    repos: list[str] = Field(default_factory=list)
    profiles: list[str] = Field(default_factory=list)
    setup_database: bool = False
    su_password: str = ""
    password: str = ""

    @field_validator("repos_dir")
    @classmethod
    def _repos_dir_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("repos_dir must not be blank")
        return value

    @field_validator("repos")
    @classmethod
    def _known_repos(cls, value: list[str]) -> list[str]:
        for name in value:
            repository_from_name(name)
        return _check_unique(value, "repository")

    @field_validator("profiles")
    @classmethod
    def _known_profiles(cls, value: list[str]) -> list[str]:
        for name in value:
            profile_from_name(name)
        return _check_unique(value, "compose profile")

    @model_validator(mode="after")
    def _passwords_need_database(self) -> "Configuration":
        if not self.setup_database and (self.su_password or self.password):
            raise ValueError("passwords must be empty when setup_database is false")
        return self

    @property
    def repos_path(self) -> Path:
        """Destination root for clones, with ``~`` expanded."""
        return Path(self.repos_dir).expanduser()
