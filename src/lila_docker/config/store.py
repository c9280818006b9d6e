"""Persist the setup configuration as YAML in the user's home directory."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import CONFIG_VERSION, Configuration

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "LILA_DOCKER_HOME"
CONFIG_FILENAME = "config.yaml"


def default_home() -> Path:
    """Per-user directory for lila-docker state (config, logs)."""
    override = os.environ.get(HOME_ENV_VAR, "")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".lila-docker"


def default_config_path() -> Path:
    return default_home() / CONFIG_FILENAME


class StoreError(Exception):
    """Raised when the configuration file cannot be saved or loaded."""


class StoreIOError(StoreError):
    """The configuration file could not be written or read."""


class CorruptConfigError(StoreError):
    """The configuration file exists but does not hold a valid configuration."""


class ConfigStore:
    """Save and load the Configuration at a fixed path."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_config_path()

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, config: Configuration) -> None:
        """Write the configuration, replacing any previous one.

        Raises:
            StoreIOError: If the file cannot be written.
        """
        text = yaml.safe_dump(
            config.model_dump(), default_flow_style=False, sort_keys=False
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StoreIOError(
                f"Cannot write configuration to {self.path}: {e}"
            ) from e
        logger.info(f"Configuration saved to {self.path}")

    def load(self) -> Configuration:
        """Read the stored configuration.

        Raises:
            StoreIOError: If the file is missing or unreadable.
            CorruptConfigError: If the content is not a valid configuration.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptConfigError(
                f"Configuration in {self.path} is not valid UTF-8: {e}"
            ) from e
        except OSError as e:
            raise StoreIOError(
                f"Cannot read configuration from {self.path}: {e}"
            ) from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CorruptConfigError(f"Invalid YAML in {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptConfigError(
                f"Expected a mapping in {self.path}, got {type(data).__name__}"
            )

        version = data.get("version", CONFIG_VERSION)
        if isinstance(version, int) and version > CONFIG_VERSION:
            raise CorruptConfigError(
                f"Configuration in {self.path} has version {version}; "
                f"this lila-docker supports up to version {CONFIG_VERSION}"
            )

        try:
            return Configuration(**data)
        except (ValidationError, TypeError) as e:
            raise CorruptConfigError(
                f"Configuration validation failed for {self.path}: {e}"
            ) from e
