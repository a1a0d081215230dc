"""Stale profile sweeping."""

from .confirmation import confirm_deletion
from .eligibility import (
    assess_profiles,
    classify,
    derive_username,
    sort_candidates,
    summarize_classification,
)
from .executor import delete_profiles, summarize_outcomes
from .pipeline import run_sweep

__all__ = [
    "assess_profiles",
    "classify",
    "confirm_deletion",
    "delete_profiles",
    "derive_username",
    "run_sweep",
    "sort_candidates",
    "summarize_classification",
    "summarize_outcomes",
]
