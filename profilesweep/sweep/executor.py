"""Execute profile deletions against the host inventory."""

import logging
from typing import Any, Callable, Sequence

from profilesweep.errors import DeletionError
from profilesweep.inventory import ProfileInventory
from profilesweep.models import DeletionCandidate, DeletionOutcome

logger = logging.getLogger(__name__)


def delete_profiles(
    candidates: Sequence[DeletionCandidate],
    inventory: ProfileInventory,
    progress_callback: Callable[[int, int], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> list[DeletionOutcome]:
    """
    Delete confirmed profiles one at a time.

    A failure on one profile is recorded and the loop moves on to the
    next. Nothing is raised for failed deletions; callers inspect the
    returned outcomes.

    Args:
        candidates: Confirmed candidates, in the order they were shown.
        inventory: Host inventory that performs the removal.
        progress_callback: Called with (current, total) after each profile.
        should_stop: Checked before each profile; True ends the run early.

    Returns:
        One outcome per processed candidate, in processing order.
    """
    outcomes: list[DeletionOutcome] = []
    total = len(candidates)

    for i, candidate in enumerate(candidates):
        if should_stop and should_stop():
            logger.warning("Stopped after %d of %d profiles", i, total)
            break

        outcomes.append(_delete_single_profile(inventory, candidate))

        if progress_callback:
            progress_callback(i + 1, total)

    summary = summarize_outcomes(outcomes)
    logger.info(
        "Profile deletion finished: %d deleted, %d failed",
        summary["deleted"],
        summary["failed"],
    )
    return outcomes


def _delete_single_profile(
    inventory: ProfileInventory,
    candidate: DeletionCandidate,
) -> DeletionOutcome:
    """Attempt one removal, turning any failure into a failed outcome."""
    try:
        inventory.remove(candidate.identifier)
    except DeletionError as e:
        logger.error("Failed to delete profile %s: %s", candidate.username, e.reason)
        return DeletionOutcome(candidate.username, candidate.identifier, False, e.reason)
    except Exception as e:
        logger.error("Failed to delete profile %s: %s", candidate.username, e)
        return DeletionOutcome(candidate.username, candidate.identifier, False, str(e) or type(e).__name__)

    logger.info("Deleted profile %s (%s)", candidate.username, candidate.local_path)
    return DeletionOutcome(candidate.username, candidate.identifier, True)


def summarize_outcomes(outcomes: Sequence[DeletionOutcome]) -> dict[str, Any]:
    """
    Aggregate deletion outcomes.

    Returns:
        Dictionary with success flag, counts and per-profile errors.
    """
    errors = [
        {"username": o.username, "identifier": o.identifier, "error": o.error_detail}
        for o in outcomes
        if not o.succeeded
    ]
    return {
        "success": not errors,
        "deleted": len(outcomes) - len(errors),
        "failed": len(errors),
        "errors": errors,
    }
