"""lila-docker - local development bootstrapper for lichess."""

__version__ = "0.1.0"
