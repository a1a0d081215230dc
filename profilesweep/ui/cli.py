"""Rich-based CLI output formatting."""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from profilesweep.config import Policy
from profilesweep.models import (
    STATUS_CANDIDATE,
    STATUS_EXCLUDED,
    STATUS_LOADED,
    STATUS_RECENT,
    STATUS_RESERVED,
    STATUS_SPECIAL,
    STATUS_UNREADABLE,
    Assessment,
    DeletionCandidate,
    DeletionOutcome,
)


console = Console()

STATUS_STYLES = {
    STATUS_CANDIDATE: ("red", "Stale"),
    STATUS_RECENT: ("green", "Recent"),
    STATUS_LOADED: ("cyan", "Loaded"),
    STATUS_SPECIAL: ("dim", "Special"),
    STATUS_EXCLUDED: ("dim", "Excluded"),
    STATUS_RESERVED: ("dim", "Reserved"),
    STATUS_UNREADABLE: ("yellow", "Unreadable"),
}


def setup_logging(verbose: bool = False) -> None:
    """Route log records through the shared rich console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_header(title: str) -> None:
    """Print a styled header."""
    console.print()
    console.print(Panel(title, style="bold blue"))
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp for table display."""
    if value is None:
        return "—"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def print_policy(policy: Policy) -> None:
    """Print the effective sweep policy."""
    table = Table(title="Sweep Policy", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Maximum profile age", f"{policy.maximum_profile_age_days} days")
    table.add_row("Marker file", policy.marker_file)
    table.add_row("Reserved prefix", policy.reserved_prefix_pattern)
    table.add_row("Run on workstations", "yes" if policy.run_on_workstations else "no")
    table.add_row("Excluded users", ", ".join(sorted(policy.excluded_usernames, key=str.lower)))

    console.print(table)


def print_profile_candidates(candidates: Iterable[DeletionCandidate]) -> None:
    """Print the profiles proposed for deletion."""
    table = Table(title="Profiles To Delete")
    table.add_column("#", justify="right", style="dim")
    table.add_column("User", style="bold")
    table.add_column("Path", style="cyan")
    table.add_column("Last Activity", justify="right", style="yellow")

    for index, candidate in enumerate(candidates, start=1):
        table.add_row(
            str(index),
            candidate.username,
            candidate.local_path,
            format_timestamp(candidate.proxy_last_write_time),
        )

    console.print(table)


def print_profile_inventory(assessments: Iterable[Assessment]) -> None:
    """Print every profile with its eligibility verdict."""
    table = Table(title="Host Profiles")
    table.add_column("Status")
    table.add_column("Path", style="cyan")
    table.add_column("Last Activity", justify="right", style="yellow")
    table.add_column("Last Use (host)", justify="right", style="dim")
    table.add_column("Detail", style="dim")

    for assessment in sorted(assessments, key=lambda a: a.profile.local_path.lower()):
        style, label = STATUS_STYLES.get(assessment.status, ("", assessment.status))
        table.add_row(
            Text(label, style=style),
            assessment.profile.local_path,
            format_timestamp(assessment.proxy_last_write_time),
            format_timestamp(assessment.profile.last_use_time),
            assessment.detail,
        )

    console.print(table)


def print_classification_summary(summary: dict[str, int]) -> None:
    """Print how many profiles fell into each status."""
    table = Table(title="Classification", show_header=False)
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right", style="green")

    for status, (_, label) in STATUS_STYLES.items():
        table.add_row(label, str(summary.get(status, 0)))

    console.print(table)
    console.print(f"\nTotal profiles: [green]{summary.get('total', 0)}[/green]")


def print_outcomes(outcomes: list[DeletionOutcome]) -> None:
    """Print one row per deletion attempt."""
    table = Table(title="Deletion Results")
    table.add_column("User", style="bold")
    table.add_column("Result")
    table.add_column("Error", style="dim", max_width=60)

    for outcome in outcomes:
        if outcome.succeeded:
            result = Text("deleted", style="green")
        else:
            result = Text("failed", style="red")
        table.add_row(outcome.username, result, Text(outcome.error_detail or ""))

    console.print(table)


def print_deletion_summary(summary: dict[str, Any]) -> None:
    """Print the aggregate deletion counts."""
    if summary["success"]:
        print_success(f"Deleted {summary['deleted']} profiles")
    else:
        print_warning(f"Deleted {summary['deleted']}, failed {summary['failed']}")


def create_progress() -> Progress:
    """Create a progress bar for long operations."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    )


def confirm_action(message: str, input_func: Callable[[str], str] | None = None) -> bool:
    """
    Ask for explicit confirmation.

    Only the word ``yes`` (any case) counts. A bare ``y``, an empty line
    or end of input all decline.
    """
    if input_func is None:
        input_func = console.input

    try:
        response = input_func(f"{message} Type 'yes' to continue: ")
    except EOFError:
        return False

    return response.strip().lower() == "yes"
