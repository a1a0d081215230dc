"""Run the full sweep: list, classify, confirm, delete."""

import logging
from datetime import datetime
from typing import Callable, Sequence

from profilesweep.config import Policy
from profilesweep.fs import last_write_time
from profilesweep.inventory import ProfileInventory
from profilesweep.models import (
    SWEEP_COMPLETED,
    SWEEP_DECLINED,
    SWEEP_DRY_RUN,
    SWEEP_NOTHING_TO_DO,
    SWEEP_SKIPPED,
    DeletionCandidate,
    SweepResult,
)

from .confirmation import confirm_deletion
from .eligibility import TimestampReader, classify, sort_candidates
from .executor import delete_profiles

logger = logging.getLogger(__name__)


def run_sweep(
    inventory: ProfileInventory,
    policy: Policy,
    now: datetime | None = None,
    dry_run: bool = False,
    confirm: Callable[[Sequence[DeletionCandidate]], bool] = confirm_deletion,
    progress_callback: Callable[[int, int], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
    read_timestamp: TimestampReader = last_write_time,
) -> SweepResult:
    """
    Sweep stale profiles from the host.

    The inventory is read once and every decision uses that snapshot.
    Deletion only starts after ``confirm`` returns True.

    Args:
        inventory: Host profile inventory.
        policy: Frozen policy for this run.
        now: Reference time for age checks.
        dry_run: Stop after classification.
        confirm: Confirmation gate, called with the sorted candidates.
        progress_callback: Forwarded to the executor.
        should_stop: Forwarded to the executor.
        read_timestamp: Reader for marker file timestamps.

    Returns:
        SweepResult describing where the run stopped.

    Raises:
        HostQueryError: If the inventory or host type cannot be read.
    """
    if not policy.run_on_workstations and not inventory.is_server():
        logger.info("Host is a workstation and workstation sweeps are disabled")
        return SweepResult(status=SWEEP_SKIPPED)

    profiles = inventory.list_profiles()
    logger.info("Found %d profiles on host", len(profiles))

    candidates = sort_candidates(classify(profiles, policy, now, read_timestamp))
    logger.info(
        "%d profiles unused for more than %d days",
        len(candidates),
        policy.maximum_profile_age_days,
    )

    if not candidates:
        return SweepResult(status=SWEEP_NOTHING_TO_DO)

    if dry_run:
        return SweepResult(status=SWEEP_DRY_RUN, candidates=candidates)

    if not confirm(candidates):
        logger.info("Deletion declined by operator")
        return SweepResult(status=SWEEP_DECLINED, candidates=candidates)

    outcomes = delete_profiles(
        candidates,
        inventory,
        progress_callback=progress_callback,
        should_stop=should_stop,
    )
    return SweepResult(status=SWEEP_COMPLETED, candidates=candidates, outcomes=outcomes)
