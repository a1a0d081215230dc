"""Tests for the deletion executor."""

import pytest

from profilesweep.errors import DeletionError
from profilesweep.sweep import classify, delete_profiles, sort_candidates, summarize_outcomes


@pytest.fixture
def candidates(profile_factory, policy, now):
    profiles = [
        profile_factory("p1", age_days=50, identifier="SID-P1"),
        profile_factory("p4", age_days=60, identifier="SID-P4"),
        profile_factory("p7", age_days=70, identifier="SID-P7"),
    ]
    return sort_candidates(classify(profiles, policy, now))


class TestDeleteProfiles:
    """Tests for sequential deletion with per-profile isolation."""

    def test_all_succeed(self, candidates, inventory_factory):
        inventory = inventory_factory([c.profile for c in candidates])

        outcomes = delete_profiles(candidates, inventory)

        assert [o.succeeded for o in outcomes] == [True, True, True]
        assert inventory.removed == ["SID-P1", "SID-P4", "SID-P7"]
        assert inventory.profiles == {}

    def test_failure_does_not_stop_remaining(self, candidates, inventory_factory):
        """Access denied on P1 still lets P4 and P7 be deleted."""
        inventory = inventory_factory(
            [c.profile for c in candidates],
            failures={"SID-P1": DeletionError("SID-P1", "access denied")},
        )

        outcomes = delete_profiles(candidates, inventory)

        assert [(o.username, o.succeeded, o.error_detail) for o in outcomes] == [
            ("p1", False, "access denied"),
            ("p4", True, None),
            ("p7", True, None),
        ]
        assert inventory.removed == ["SID-P4", "SID-P7"]

    def test_unexpected_exception_is_contained(self, candidates, inventory_factory):
        inventory = inventory_factory(
            [c.profile for c in candidates],
            failures={"SID-P4": OSError("sharing violation")},
        )

        outcomes = delete_profiles(candidates, inventory)

        assert [o.succeeded for o in outcomes] == [True, False, True]
        assert outcomes[1].error_detail == "sharing violation"

    def test_vanished_profile_is_item_failure(self, candidates, inventory_factory):
        """A profile removed since enumeration fails only its own item."""
        inventory = inventory_factory([c.profile for c in candidates[1:]])

        outcomes = delete_profiles(candidates, inventory)

        assert outcomes[0].succeeded is False
        assert outcomes[0].error_detail == "profile not found"
        assert all(o.succeeded for o in outcomes[1:])

    def test_every_deletion_fails_without_raising(self, candidates, inventory_factory):
        inventory = inventory_factory(
            [],
            failures={c.identifier: DeletionError(c.identifier, "denied") for c in candidates},
        )

        outcomes = delete_profiles(candidates, inventory)

        assert len(outcomes) == 3
        assert not any(o.succeeded for o in outcomes)

    def test_progress_reported_after_each_item(self, candidates, inventory_factory):
        inventory = inventory_factory(
            [c.profile for c in candidates],
            failures={"SID-P4": DeletionError("SID-P4", "denied")},
        )
        calls = []

        delete_profiles(candidates, inventory, progress_callback=lambda cur, tot: calls.append((cur, tot)))

        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_should_stop_checked_before_each_item(self, candidates, inventory_factory):
        inventory = inventory_factory([c.profile for c in candidates])

        outcomes = delete_profiles(
            candidates,
            inventory,
            should_stop=lambda: len(inventory.removed) >= 1,
        )

        assert [o.username for o in outcomes] == ["p1"]
        assert inventory.removed == ["SID-P1"]

    def test_empty_candidates(self, inventory_factory):
        assert delete_profiles([], inventory_factory()) == []


class TestSummarizeOutcomes:
    """Tests for outcome aggregation."""

    def test_summary_counts(self, candidates, inventory_factory):
        inventory = inventory_factory(
            [c.profile for c in candidates],
            failures={"SID-P1": DeletionError("SID-P1", "access denied")},
        )

        summary = summarize_outcomes(delete_profiles(candidates, inventory))

        assert summary["success"] is False
        assert summary["deleted"] == 2
        assert summary["failed"] == 1
        assert summary["errors"] == [
            {"username": "p1", "identifier": "SID-P1", "error": "access denied"}
        ]

    def test_empty_summary_is_success(self):
        summary = summarize_outcomes([])

        assert summary == {"success": True, "deleted": 0, "failed": 0, "errors": []}
