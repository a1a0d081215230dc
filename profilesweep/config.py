"""Policy configuration loaded from the environment."""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath, PureWindowsPath
from typing import Iterable

from .errors import ConfigError

DEFAULT_EXCLUDED_USERS = (
    "Default",
    "Default User",
    "Public",
    "All Users",
    "Administrator",
)

DEFAULT_MAX_AGE_DAYS = 90
DEFAULT_MARKER_FILE = "NTUSER.DAT"

# Azure AD provisioned accounts, never ordinary local profiles
DEFAULT_RESERVED_PREFIX = r"^AAD_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Policy:
    """Immutable sweep policy, built once per run."""

    excluded_usernames: frozenset[str] = field(default_factory=frozenset)
    maximum_profile_age_days: int = DEFAULT_MAX_AGE_DAYS
    run_on_workstations: bool = False
    marker_file: str = DEFAULT_MARKER_FILE
    reserved_prefix_pattern: str = DEFAULT_RESERVED_PREFIX

    def __post_init__(self):
        if self.maximum_profile_age_days < 0:
            raise ConfigError(
                f"Maximum profile age must be >= 0, got {self.maximum_profile_age_days}"
            )
        try:
            re.compile(self.reserved_prefix_pattern)
        except re.error as e:
            raise ConfigError(
                f"Invalid reserved prefix pattern {self.reserved_prefix_pattern!r}: {e}"
            ) from e
        validate_marker_file(self.marker_file)

    def with_overrides(
        self,
        max_age_days: int | None = None,
        extra_excluded: Iterable[str] = (),
        marker_file: str | None = None,
        run_on_workstations: bool | None = None,
    ) -> "Policy":
        """
        Return a copy of this policy with command-line overrides applied.

        Exclusions are only ever added, never removed.
        """
        changes = {}
        if max_age_days is not None:
            changes["maximum_profile_age_days"] = max_age_days
        extra = {name for name in extra_excluded if name}
        if extra:
            changes["excluded_usernames"] = self.excluded_usernames | extra
        if marker_file:
            changes["marker_file"] = marker_file
        if run_on_workstations is not None:
            changes["run_on_workstations"] = run_on_workstations
        return replace(self, **changes) if changes else self


def parse_user_list(raw: str) -> list[str]:
    """Split a comma-separated user list, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def get_excluded_users() -> list[str]:
    """Get the statically excluded usernames from environment."""
    raw = os.getenv("PROFILE_EXCLUDED_USERS")
    if raw is None:
        return list(DEFAULT_EXCLUDED_USERS)
    return parse_user_list(raw)


def get_max_age_days() -> int:
    """Get the maximum profile age in days from environment."""
    raw = os.getenv("PROFILE_MAX_AGE_DAYS", str(DEFAULT_MAX_AGE_DAYS))
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"PROFILE_MAX_AGE_DAYS must be an integer, got {raw!r}")


def get_run_on_workstations() -> bool:
    """Check whether sweeping non-server hosts is allowed."""
    raw = os.getenv("PROFILE_RUN_ON_WORKSTATIONS", "false").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"PROFILE_RUN_ON_WORKSTATIONS must be a boolean, got {raw!r}")


def get_marker_file() -> str:
    """Get the marker file used as the profile activity signal."""
    return os.getenv("PROFILE_MARKER_FILE", DEFAULT_MARKER_FILE)


def get_reserved_prefix() -> str:
    """Get the reserved username prefix pattern."""
    return os.getenv("PROFILE_RESERVED_PREFIX", DEFAULT_RESERVED_PREFIX)


def load_policy(current_user: str) -> Policy:
    """
    Build the run policy from environment.

    Args:
        current_user: Username of the invoking operator. Always excluded.

    Returns:
        Frozen Policy for this run.

    Raises:
        ConfigError: If an environment value is invalid.
    """
    excluded = set(get_excluded_users())
    if current_user:
        excluded.add(current_user)

    return Policy(
        excluded_usernames=frozenset(excluded),
        maximum_profile_age_days=get_max_age_days(),
        run_on_workstations=get_run_on_workstations(),
        marker_file=get_marker_file(),
        reserved_prefix_pattern=get_reserved_prefix(),
    )


def validate_marker_file(marker_file: str) -> None:
    """
    Check that a marker file path stays inside the profile directory.

    Raises:
        ConfigError: If the path is empty, anchored or climbs out with ``..``.
    """
    if not marker_file or not marker_file.strip():
        raise ConfigError("Marker file must not be empty")

    windows_path = PureWindowsPath(marker_file)
    if os.path.isabs(marker_file) or windows_path.anchor or PurePosixPath(marker_file).anchor:
        raise ConfigError(f"Marker file must be relative to the profile, got {marker_file!r}")

    if ".." in windows_path.parts:
        raise ConfigError(f"Marker file must not leave the profile directory, got {marker_file!r}")
