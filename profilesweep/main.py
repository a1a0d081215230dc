"""CLI entrypoint for profilesweep."""

import sys

import click
from dotenv import load_dotenv

from profilesweep import __version__
from profilesweep.config import load_policy, parse_user_list
from profilesweep.errors import ConfigError, HostQueryError
from profilesweep.inventory import get_inventory
from profilesweep.models import (
    SWEEP_DECLINED,
    SWEEP_DRY_RUN,
    SWEEP_NOTHING_TO_DO,
    SWEEP_SKIPPED,
)
from profilesweep.sweep import (
    assess_profiles,
    confirm_deletion,
    run_sweep,
    summarize_classification,
    summarize_outcomes,
)
from profilesweep.ui.cli import (
    console,
    create_progress,
    print_classification_summary,
    print_deletion_summary,
    print_error,
    print_header,
    print_info,
    print_outcomes,
    print_policy,
    print_profile_candidates,
    print_profile_inventory,
    print_warning,
    setup_logging,
)

# Load environment variables
load_dotenv()


def _load_context(**overrides):
    """Get the host inventory and effective policy, or exit with an error."""
    try:
        inventory = get_inventory()
        policy = load_policy(inventory.current_username()).with_overrides(**overrides)
    except (ConfigError, HostQueryError) as e:
        print_error(str(e))
        sys.exit(1)
    return inventory, policy


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """profilesweep - reclaim stale user profiles on shared hosts."""
    setup_logging(verbose)


@cli.command()
@click.option("--dry-run", is_flag=True, help="List stale profiles without deleting")
@click.option("--max-age-days", type=click.IntRange(min=0), default=None, help="Override maximum profile age")
@click.option("--exclude", default="", help="Extra usernames to protect, comma-separated")
@click.option("--marker-file", default=None, help="Override the activity marker file")
@click.option("--workstations/--no-workstations", default=None, help="Allow running on non-server hosts")
@click.option("--yes", "assume_yes", is_flag=True, help="Skip confirmation prompt")
def sweep(
    dry_run: bool,
    max_age_days: int | None,
    exclude: str,
    marker_file: str | None,
    workstations: bool | None,
    assume_yes: bool,
):
    """Find and delete stale user profiles."""
    print_header("Profile Sweep")

    inventory, policy = _load_context(
        max_age_days=max_age_days,
        extra_excluded=parse_user_list(exclude),
        marker_file=marker_file,
        run_on_workstations=workstations,
    )

    print_info(
        f"Looking for profiles unused for more than {policy.maximum_profile_age_days} days..."
    )

    def approve_without_prompt(candidates) -> bool:
        print_profile_candidates(candidates)
        print_warning("--yes given, skipping confirmation")
        return True

    progress = create_progress()
    task = None

    def update_progress(current: int, total: int):
        nonlocal task
        if task is None:
            progress.start()
            task = progress.add_task("Deleting...", total=total)
        progress.update(task, completed=current)

    try:
        result = run_sweep(
            inventory,
            policy,
            dry_run=dry_run,
            confirm=approve_without_prompt if assume_yes else confirm_deletion,
            progress_callback=update_progress,
        )
    except HostQueryError as e:
        print_error(str(e))
        sys.exit(1)
    finally:
        progress.stop()

    if result.status == SWEEP_SKIPPED:
        print_warning("Host is a workstation. Use --workstations to sweep it anyway.")
        return

    if result.status == SWEEP_NOTHING_TO_DO:
        print_info("No stale profiles found.")
        return

    if result.status == SWEEP_DRY_RUN:
        print_profile_candidates(result.candidates)
        console.print()
        print_warning("DRY RUN - No profiles will be deleted")
        print_info("Run without --dry-run to delete them")
        return

    if result.status == SWEEP_DECLINED:
        print_info("Cancelled")
        return

    console.print()
    print_outcomes(result.outcomes)
    print_deletion_summary(summarize_outcomes(result.outcomes))


@cli.command("list")
@click.option("--max-age-days", type=click.IntRange(min=0), default=None, help="Override maximum profile age")
@click.option("--marker-file", default=None, help="Override the activity marker file")
def list_cmd(max_age_days: int | None, marker_file: str | None):
    """Show every profile and whether it would be swept."""
    print_header("Host Profiles")

    inventory, policy = _load_context(max_age_days=max_age_days, marker_file=marker_file)

    try:
        profiles = inventory.list_profiles()
    except HostQueryError as e:
        print_error(str(e))
        sys.exit(1)

    assessments = assess_profiles(profiles, policy)
    print_profile_inventory(assessments)
    console.print()
    print_classification_summary(summarize_classification(assessments))


@cli.command()
def policy():
    """Show the effective sweep policy."""
    print_header("Sweep Policy")

    _, effective = _load_context()
    print_policy(effective)


def main():
    cli()


if __name__ == "__main__":
    main()
