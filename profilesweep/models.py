"""Decision and result types for the sweep pipeline."""

from dataclasses import dataclass, field
from datetime import datetime

from profilesweep.inventory import ProfileRecord

# Eligibility statuses
STATUS_SPECIAL = "special"
STATUS_LOADED = "loaded"
STATUS_EXCLUDED = "excluded"
STATUS_RESERVED = "reserved"
STATUS_UNREADABLE = "unreadable"
STATUS_RECENT = "recent"
STATUS_CANDIDATE = "candidate"

# Terminal sweep statuses
SWEEP_SKIPPED = "skipped"
SWEEP_NOTHING_TO_DO = "nothing_to_do"
SWEEP_DRY_RUN = "dry_run"
SWEEP_DECLINED = "declined"
SWEEP_COMPLETED = "completed"


@dataclass(frozen=True)
class Assessment:
    """Eligibility verdict for a single profile."""

    profile: ProfileRecord
    status: str
    username: str = ""
    proxy_last_write_time: datetime | None = None
    detail: str = ""


@dataclass(frozen=True)
class DeletionCandidate:
    """A profile that passed every eligibility check."""

    profile: ProfileRecord
    username: str
    proxy_last_write_time: datetime

    @property
    def identifier(self) -> str:
        return self.profile.identifier

    @property
    def local_path(self) -> str:
        return self.profile.local_path


@dataclass(frozen=True)
class DeletionOutcome:
    """Result of one deletion attempt."""

    username: str
    identifier: str
    succeeded: bool
    error_detail: str | None = None


@dataclass
class SweepResult:
    """What a sweep run did and why it stopped."""

    status: str
    candidates: list[DeletionCandidate] = field(default_factory=list)
    outcomes: list[DeletionOutcome] = field(default_factory=list)

    @property
    def deleted(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)
