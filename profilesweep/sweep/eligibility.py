"""Decide which profiles are stale enough to delete."""

import logging
import os
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from profilesweep.config import Policy
from profilesweep.errors import ProfileReadError
from profilesweep.fs import last_write_time
from profilesweep.inventory import ProfileRecord
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
)

logger = logging.getLogger(__name__)

TimestampReader = Callable[[str], datetime]


def derive_username(local_path: str) -> str:
    """
    Get the username from a profile path.

    Handles both Windows and POSIX separators, so
    ``C:\\Users\\alice`` and ``/home/alice/`` both give ``alice``.
    """
    trimmed = local_path.rstrip("\\/")
    return re.split(r"[\\/]", trimmed)[-1] if trimmed else ""


def age_cutoff(now: datetime, max_age_days: int) -> datetime:
    """Get the instant before which a profile counts as stale."""
    return now - timedelta(days=max_age_days)


def assess_profile(
    profile: ProfileRecord,
    policy: Policy,
    cutoff: datetime,
    read_timestamp: TimestampReader = last_write_time,
) -> Assessment:
    """
    Run every eligibility check against a single profile.

    Checks run cheapest first and stop at the first rejection. A profile
    whose marker file cannot be read is rejected, never assumed stale.

    Args:
        profile: Profile snapshot from the inventory.
        policy: Sweep policy for this run.
        cutoff: Marker writes strictly before this instant are stale.
        read_timestamp: Reader for the marker file's last write time.

    Returns:
        Assessment with the verdict and any derived data.
    """
    if profile.is_special:
        return Assessment(profile, STATUS_SPECIAL)

    if profile.is_loaded:
        return Assessment(profile, STATUS_LOADED)

    username = derive_username(profile.local_path)

    if username in policy.excluded_usernames:
        return Assessment(profile, STATUS_EXCLUDED, username=username)

    if re.match(policy.reserved_prefix_pattern, username):
        return Assessment(profile, STATUS_RESERVED, username=username)

    if not username:
        logger.warning("Profile %s has a malformed path %r", profile.identifier, profile.local_path)
        return Assessment(profile, STATUS_UNREADABLE, detail="malformed path")

    marker_path = os.path.join(profile.local_path, policy.marker_file)
    try:
        written = read_timestamp(marker_path)
    except ProfileReadError as e:
        logger.warning("Cannot read age of profile %s: %s", username, e)
        return Assessment(profile, STATUS_UNREADABLE, username=username, detail=e.reason)

    if written.tzinfo is None:
        written = written.replace(tzinfo=timezone.utc)

    status = STATUS_CANDIDATE if written < cutoff else STATUS_RECENT
    return Assessment(profile, status, username=username, proxy_last_write_time=written)


def assess_profiles(
    profiles: Iterable[ProfileRecord],
    policy: Policy,
    now: datetime | None = None,
    read_timestamp: TimestampReader = last_write_time,
) -> list[Assessment]:
    """Assess every profile against the policy, in input order."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = age_cutoff(now, policy.maximum_profile_age_days)
    return [assess_profile(p, policy, cutoff, read_timestamp) for p in profiles]


def classify(
    profiles: Iterable[ProfileRecord],
    policy: Policy,
    now: datetime | None = None,
    read_timestamp: TimestampReader = last_write_time,
) -> list[DeletionCandidate]:
    """
    Find the profiles that are candidates for deletion.

    Args:
        profiles: Profile snapshot from the inventory.
        policy: Sweep policy for this run.
        now: Reference time. Defaults to the current UTC time.
        read_timestamp: Reader for the marker file's last write time.

    Returns:
        Candidates whose marker file is older than the maximum age.
    """
    return [
        DeletionCandidate(
            profile=a.profile,
            username=a.username,
            proxy_last_write_time=a.proxy_last_write_time,
        )
        for a in assess_profiles(profiles, policy, now, read_timestamp)
        if a.status == STATUS_CANDIDATE
    ]


def sort_candidates(candidates: Iterable[DeletionCandidate]) -> list[DeletionCandidate]:
    """Order candidates by profile path, case-insensitively."""
    return sorted(candidates, key=lambda c: c.local_path.lower())


def summarize_classification(assessments: Iterable[Assessment]) -> dict[str, int]:
    """
    Count assessments by status.

    Returns:
        Dictionary with a count for every status plus the total.
    """
    counts = {
        STATUS_SPECIAL: 0,
        STATUS_LOADED: 0,
        STATUS_EXCLUDED: 0,
        STATUS_RESERVED: 0,
        STATUS_UNREADABLE: 0,
        STATUS_RECENT: 0,
        STATUS_CANDIDATE: 0,
    }
    total = 0
    for assessment in assessments:
        counts[assessment.status] += 1
        total += 1

    counts["total"] = total
    return counts
