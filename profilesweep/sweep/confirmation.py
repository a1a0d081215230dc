"""Operator confirmation before any profile is deleted."""

import logging
from typing import Callable, Sequence

from profilesweep.models import DeletionCandidate
from profilesweep.ui.cli import confirm_action, print_profile_candidates

from .eligibility import sort_candidates

logger = logging.getLogger(__name__)


def confirm_deletion(
    candidates: Sequence[DeletionCandidate],
    input_func: Callable[[str], str] | None = None,
) -> bool:
    """
    Show the candidates and wait for the operator's answer.

    This blocks until a line is entered. There is no retry: any answer
    other than an explicit yes declines the whole run.

    Args:
        candidates: Profiles proposed for deletion.
        input_func: Optional prompt override for tests and other UIs.

    Returns:
        True only if there is something to delete and the operator agreed.
    """
    if not candidates:
        return False

    print_profile_candidates(sort_candidates(candidates))

    approved = confirm_action(
        f"Delete {len(candidates)} profile(s)? This cannot be undone.",
        input_func=input_func,
    )
    logger.debug("Operator %s deletion of %d profiles", "approved" if approved else "declined", len(candidates))
    return approved
