"""Tests for policy configuration."""

import pytest

from profilesweep.config import (
    DEFAULT_EXCLUDED_USERS,
    Policy,
    load_policy,
    parse_user_list,
)
from profilesweep.errors import ConfigError

ENV_VARS = [
    "PROFILE_EXCLUDED_USERS",
    "PROFILE_MAX_AGE_DAYS",
    "PROFILE_RUN_ON_WORKSTATIONS",
    "PROFILE_MARKER_FILE",
    "PROFILE_RESERVED_PREFIX",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadPolicy:
    """Tests for building the policy from environment."""

    def test_defaults(self):
        policy = load_policy("alice")

        assert policy.maximum_profile_age_days == 90
        assert policy.run_on_workstations is False
        assert policy.marker_file == "NTUSER.DAT"
        assert policy.reserved_prefix_pattern == "^AAD_"
        assert policy.excluded_usernames == frozenset(DEFAULT_EXCLUDED_USERS) | {"alice"}

    def test_current_user_always_excluded(self, monkeypatch):
        monkeypatch.setenv("PROFILE_EXCLUDED_USERS", "svc_backup")

        policy = load_policy("bob")

        assert policy.excluded_usernames == frozenset({"svc_backup", "bob"})

    def test_empty_exclusion_list_still_has_operator(self, monkeypatch):
        monkeypatch.setenv("PROFILE_EXCLUDED_USERS", "")

        assert load_policy("bob").excluded_usernames == frozenset({"bob"})

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PROFILE_MAX_AGE_DAYS", "30")
        monkeypatch.setenv("PROFILE_RUN_ON_WORKSTATIONS", "yes")
        monkeypatch.setenv("PROFILE_MARKER_FILE", "AppData\\Local\\IconCache.db")
        monkeypatch.setenv("PROFILE_RESERVED_PREFIX", "^svc")

        policy = load_policy("alice")

        assert policy.maximum_profile_age_days == 30
        assert policy.run_on_workstations is True
        assert policy.marker_file == "AppData\\Local\\IconCache.db"
        assert policy.reserved_prefix_pattern == "^svc"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PROFILE_MAX_AGE_DAYS", "ninety"),
            ("PROFILE_MAX_AGE_DAYS", "-1"),
            ("PROFILE_RUN_ON_WORKSTATIONS", "maybe"),
            ("PROFILE_RESERVED_PREFIX", "(["),
            ("PROFILE_MARKER_FILE", "C:\\Temp\\old.dat"),
        ],
    )
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigError):
            load_policy("alice")


class TestPolicy:
    """Tests for the Policy value."""

    def test_frozen(self):
        policy = Policy()

        with pytest.raises(AttributeError):
            policy.maximum_profile_age_days = 5

    def test_overrides_only_add_exclusions(self):
        policy = Policy(excluded_usernames=frozenset({"alice"}))

        updated = policy.with_overrides(extra_excluded=["bob", ""])

        assert updated.excluded_usernames == frozenset({"alice", "bob"})
        assert policy.excluded_usernames == frozenset({"alice"})

    def test_overrides(self):
        policy = Policy().with_overrides(max_age_days=7, marker_file="x.dat", run_on_workstations=True)

        assert policy.maximum_profile_age_days == 7
        assert policy.marker_file == "x.dat"
        assert policy.run_on_workstations is True

    def test_no_overrides_returns_same_policy(self):
        policy = Policy()

        assert policy.with_overrides() is policy

    @pytest.mark.parametrize(
        "marker_file",
        [
            "",
            "   ",
            "C:\\old.dat",
            "C:old.dat",
            "/tmp/old.dat",
            "\\\\server\\share\\old.dat",
            "..\\other\\NTUSER.DAT",
            "../other/NTUSER.DAT",
            "AppData/../../other/NTUSER.DAT",
        ],
    )
    def test_marker_file_must_stay_in_profile(self, marker_file):
        with pytest.raises(ConfigError):
            Policy(marker_file=marker_file)

    def test_marker_file_override_is_validated(self):
        with pytest.raises(ConfigError):
            Policy().with_overrides(marker_file="/var/old.dat")

    @pytest.mark.parametrize(
        "marker_file",
        ["NTUSER.DAT", "AppData\\Local\\IconCache.db", "AppData/Local/x.db", "..hidden"],
    )
    def test_relative_marker_file_accepted(self, marker_file):
        assert Policy(marker_file=marker_file).marker_file == marker_file


def test_parse_user_list():
    assert parse_user_list(" alice, bob,,carol ") == ["alice", "bob", "carol"]
    assert parse_user_list("") == []
