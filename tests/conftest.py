"""Shared fixtures for profilesweep tests."""

import os
from datetime import datetime, timedelta, timezone

import pytest

from profilesweep.config import Policy
from profilesweep.errors import DeletionError, HostQueryError
from profilesweep.inventory import ProfileRecord

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeInventory:
    """In-memory profile inventory."""

    def __init__(self, profiles=None, failures=None, server=True, username="operator", broken=False):
        self.profiles = {p.identifier: p for p in profiles or []}
        self.failures = dict(failures or {})
        self.server = server
        self.username = username
        self.broken = broken
        self.removed = []
        self.list_calls = 0

    def list_profiles(self):
        self.list_calls += 1
        if self.broken:
            raise HostQueryError("access denied reading profile list")
        return list(self.profiles.values())

    def remove(self, identifier):
        if identifier in self.failures:
            raise self.failures[identifier]
        if identifier not in self.profiles:
            raise DeletionError(identifier, "profile not found")
        del self.profiles[identifier]
        self.removed.append(identifier)

    def is_server(self):
        return self.server

    def current_username(self):
        return self.username


def make_profile(tmp_path, name, age_days=None, identifier=None, **kwargs):
    """Create a profile directory with a marker file aged ``age_days``."""
    home = tmp_path / name
    home.mkdir(parents=True, exist_ok=True)
    if age_days is not None:
        marker = home / "NTUSER.DAT"
        marker.write_bytes(b"")
        stamp = (NOW - timedelta(days=age_days)).timestamp()
        os.utime(marker, (stamp, stamp))
    return ProfileRecord(
        identifier=identifier or f"S-1-5-21-1000-{name}",
        local_path=str(home),
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    """Policy with a 30 day threshold and the operator excluded."""
    return Policy(
        excluded_usernames=frozenset({"Default", "Public", "operator"}),
        maximum_profile_age_days=30,
    )


@pytest.fixture
def profile_factory(tmp_path):
    """Build profiles under a temporary directory."""

    def factory(name, age_days=None, **kwargs):
        return make_profile(tmp_path, name, age_days, **kwargs)

    return factory


@pytest.fixture
def inventory_factory():
    return FakeInventory
