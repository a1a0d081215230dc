"""Profile records as reported by the host."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProfileRecord:
    """
    Read-only snapshot of one user profile known to the host.

    Attributes:
        identifier: Stable host handle for the profile (a SID on Windows).
        local_path: Filesystem path of the profile's home directory.
        is_special: True for system and service profiles.
        is_loaded: True if the profile is currently in use.
        last_use_time: Host-reported last use. Informational only.
    """

    identifier: str
    local_path: str
    is_special: bool = False
    is_loaded: bool = False
    last_use_time: datetime | None = None
