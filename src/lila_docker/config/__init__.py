"""Setup configuration: model, compiler and on-disk store."""

from .compiler import ConfigurationError, compile_configuration
from .models import Configuration
from .store import ConfigStore, CorruptConfigError, StoreError, StoreIOError

__all__ = [
    "ConfigStore",
    "Configuration",
    "ConfigurationError",
    "CorruptConfigError",
    "StoreError",
    "StoreIOError",
    "compile_configuration",
]
