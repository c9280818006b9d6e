"""lila-docker CLI - Main entry point."""

import logging
import logging.handlers
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lila_docker import __version__

console = Console()
logger = logging.getLogger(__name__)

BANNER = r"""
   |\_    _ _      _
   /o \  | (_) ___| |__   ___  ___ ___   ___  _ __ __ _
 (_. ||  | | |/ __| '_ \ / _ \/ __/ __| / _ \| '__/ _` |
   /__\  | | | (__| | | |  __/\__ \__ \| (_) | | | (_| |
  )___(  |_|_|\___|_| |_|\___||___/___(_)___/|_|  \__, |
                                                   |___/
"""

USAGE = "Usage: lila-docker <start|stop|down|resume>"

# Log rotation: 5 MB per file, keep 3 backups (~20 MB max)
_LOG_MAX_BYTES = 5 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_handlers: list[logging.Handler] = []


def reset_logging() -> None:
    """Detach the handlers installed by a previous ``_setup_logging`` call."""
    root_logger = logging.getLogger()
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging with console and rotating file handlers."""
    from lila_docker.config.store import default_home

    reset_logging()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    stream = logging.StreamHandler()
    stream.setLevel(logging.INFO if verbose else logging.WARNING)
    stream.setFormatter(logging.Formatter(_LOG_FORMAT))
    _handlers.append(stream)

    log_dir = default_home() / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "lila-docker.log",
            maxBytes=_LOG_MAX_BYTES,
            backupCount=_LOG_BACKUP_COUNT,
        )
    except OSError as e:
        console.print(f"[yellow]File logging disabled: {escape(str(e))}[/yellow]")
    else:
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        _handlers.append(file_handler)

    for handler in _handlers:
        root_logger.addHandler(handler)


class LilaDockerGroup(click.Group):
    """Command group that reports unknown commands without failing."""

    def resolve_command(self, ctx, args):
        cmd_name = click.utils.make_str(args[0])
        if not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            console.print("Invalid command")
            ctx.exit(0)
        return super().resolve_command(ctx, args)


@click.group(cls=LilaDockerGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="lila-docker")
@click.option("--verbose", is_flag=True, help="Show progress logs on the console.")
@click.option(
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Docker compose project directory (default: current directory).",
)
@click.pass_context
def cli(ctx, verbose, project_dir):
    """lila-docker - local development environment for lichess."""
    if ctx.invoked_subcommand is None:
        console.print(BANNER)
        console.print(USAGE)
        return

    _setup_logging(verbose)
    ctx.obj = {"project_dir": (project_dir or Path.cwd()).resolve()}


@cli.command()
@click.pass_context
def start(ctx):
    """Choose services, save the configuration and set everything up."""
    from lila_docker.cli.prompts import collect_selections
    from lila_docker.config.compiler import ConfigurationError
    from lila_docker.config.store import ConfigStore, StoreError

    project_dir = ctx.obj["project_dir"]
    console.print(BANNER)

    selections = collect_selections(default_repos_dir=project_dir / "repos")

    try:
        config = selections.compile()
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise SystemExit(1)

    store = ConfigStore()
    try:
        store.save(config)
    except StoreError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    console.print(f"Configuration saved to {store.path}")

    _run_pipeline(config, project_dir)


@cli.command()
@click.pass_context
def resume(ctx):
    """Set up again from the saved configuration, without prompting."""
    from lila_docker.config.store import ConfigStore, StoreError

    store = ConfigStore()
    try:
        config = store.load()
    except StoreError as e:
        console.print(f"[yellow]Could not load saved configuration: {escape(str(e))}[/yellow]")
        console.print("Falling back to interactive setup.")
        ctx.invoke(start)
        return

    console.print(f"Resuming with configuration from {store.path}")
    _run_pipeline(config, ctx.obj["project_dir"])


@cli.command()
@click.pass_context
def stop(ctx):
    """Stop running services."""
    _compose_lifecycle(ctx.obj["project_dir"], "stop")


@cli.command()
@click.pass_context
def down(ctx):
    """Stop and remove containers and networks."""
    _compose_lifecycle(ctx.obj["project_dir"], "down")


# --- Internal helpers ---


def _run_pipeline(config, project_dir: Path) -> None:
    """Run the setup pipeline and print a per-step summary."""
    from lila_docker.ops.compose import ComposeClient
    from lila_docker.pipeline.setup import build_setup_pipeline

    pipeline = build_setup_pipeline(config, compose=ComposeClient(project_dir))
    total = len(pipeline.steps)

    def _announce(index, step):
        console.print(f"[bold]({index + 1}/{total}) {step.name.capitalize()}...[/bold]")

    result = pipeline.run(on_step=_announce)

    table = Table(title="Setup Summary")
    table.add_column("Step", style="bold")
    table.add_column("Status")
    table.add_column("Detail")
    table.add_column("Duration", justify="right")

    styles = {"success": "green", "failed": "red", "skipped": "yellow"}
    for outcome in result.outcomes:
        style = styles.get(outcome.status, "white")
        table.add_row(
            outcome.name,
            f"[{style}]{outcome.status}[/{style}]",
            escape(outcome.detail) or "-",
            f"{outcome.duration_s:.1f}s",
        )
    console.print(table)

    if result.all_succeeded:
        console.print(
            f"[green]Setup complete in {result.total_duration_s:.1f}s.[/green]"
        )
    else:
        console.print(
            f"[yellow]Setup finished in {result.total_duration_s:.1f}s with "
            f"{result.failed} failed step(s). "
            f"See the log above for details.[/yellow]"
        )


_LIFECYCLE_VERBS = {
    "stop": ("stop", "stopped"),
    "down": ("remove", "removed"),
}


def _compose_lifecycle(project_dir: Path, action: str) -> None:
    """Run ``docker compose stop|down`` scoped to the saved profiles."""
    from lila_docker.config.store import ConfigStore, StoreError
    from lila_docker.ops.base import StepError
    from lila_docker.ops.compose import ComposeClient

    profiles: list[str] = []
    try:
        profiles = ConfigStore().load().profiles
    except StoreError as e:
        logger.info(f"No saved configuration, using default services: {e}")

    verb, past = _LIFECYCLE_VERBS[action]
    compose = ComposeClient(project_dir)
    try:
        getattr(compose, action)(profiles)
    except StepError as e:
        console.print(f"[red]Failed to {verb} services: {escape(str(e))}[/red]")
        raise SystemExit(1)

    console.print(f"[green]Services {past}.[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
