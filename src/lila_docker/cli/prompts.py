"""Interactive prompts for the setup flow.

Built on click prompts; Ctrl-C or end of input raises ``click.Abort``,
which click reports as a cancelled run.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

import click
from rich.console import Console
from rich.table import Table

from lila_docker.config.compiler import DEFAULT_PASSWORD
from lila_docker.services import OPTIONAL_SERVICES, OptionalService, Selections

console = Console()

T = TypeVar("T")


def parse_selection(answer: str, count: int) -> list[int]:
    """Parse a comma/space separated list of 1-based menu numbers.

    Returns zero-based indices in menu order without duplicates.

    Raises:
        ValueError: If an entry is not a number in range.
    """
    indices: set[int] = set()
    for token in answer.replace(",", " ").split():
        if not token.isdigit():
            raise ValueError(f"'{token}' is not a number")
        number = int(token)
        if not 1 <= number <= count:
            raise ValueError(f"{number} is not between 1 and {count}")
        indices.add(number - 1)
    return sorted(indices)


def multiselect(title: str, options: Sequence[tuple[T, str]]) -> list[T]:
    """Let the user pick any number of options from a numbered menu.

    A blank answer selects nothing.
    """
    table = Table(title=title, show_header=False)
    table.add_column("#", style="bold", justify="right")
    table.add_column("Option")
    for number, (_, label) in enumerate(options, start=1):
        table.add_row(str(number), label)
    console.print(table)

    while True:
        answer = click.prompt(
            "Enter numbers separated by commas (blank for none)",
            default="",
            show_default=False,
        )
        try:
            indices = parse_selection(answer, len(options))
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            continue
        return [options[i][0] for i in indices]


def confirm(text: str, default: bool = True) -> bool:
    return click.confirm(text, default=default)


def text(
    prompt: str, default: str = "", required: bool = False, strip: bool = True
) -> str:
    """Ask for free text; blank input falls back to the default.

    Pass ``strip=False`` for secrets, whose surrounding spaces are kept.
    """
    while True:
        value = click.prompt(prompt, default=default, show_default=bool(default))
        if strip:
            value = value.strip()
        if value.strip() or not required:
            return value
        console.print("[red]A value is required.[/red]")


def collect_selections(
    default_repos_dir: Path,
    services: Sequence[OptionalService] = OPTIONAL_SERVICES,
) -> Selections:
    """Walk the user through the setup questions."""
    selections = Selections()
    selections.picks = multiselect(
        "Select which optional services to run",
        [(service, service.description) for service in services],
    )
    selections.repos_dir = text(
        "Where should repositories be cloned?",
        default=str(default_repos_dir),
        required=True,
    )
    selections.setup_database = confirm(
        "Do you want to seed the database with test users, games, etc?",
        default=True,
    )
    if selections.setup_database:
        selections.su_password = text(
            f"Choose a password for admin users (blank for '{DEFAULT_PASSWORD}')",
            default=DEFAULT_PASSWORD,
            strip=False,
        )
        selections.password = text(
            f"Choose a password for regular users (blank for '{DEFAULT_PASSWORD}')",
            default=DEFAULT_PASSWORD,
            strip=False,
        )
    return selections
