"""Registry-backed profile inventory for Windows hosts."""

import ctypes
import getpass
import logging
import os
from datetime import datetime, timedelta, timezone

from profilesweep.errors import DeletionError, HostQueryError

from .models import ProfileRecord

try:
    import winreg
except ImportError:
    winreg = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

PROFILE_LIST_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\ProfileList"
PRODUCT_OPTIONS_KEY = r"SYSTEM\CurrentControlSet\Control\ProductOptions"

# LocalSystem, LocalService, NetworkService
WELL_KNOWN_SERVICE_SIDS = {"S-1-5-18", "S-1-5-19", "S-1-5-20"}

# Local/domain accounts and Azure AD accounts
USER_SID_PREFIXES = ("S-1-5-21-", "S-1-12-1-")

# Suffix left on a ProfileList entry after a temporary-profile logon
BACKUP_SID_SUFFIX = ".bak"

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def filetime_to_datetime(high: int, low: int) -> datetime | None:
    """Convert a split FILETIME registry pair into an aware datetime."""
    ticks = (high << 32) | low
    if ticks == 0:
        return None
    return _FILETIME_EPOCH + timedelta(microseconds=ticks // 10)


def is_special_sid(sid: str) -> bool:
    """Check if a SID belongs to a system or service account."""
    if sid in WELL_KNOWN_SERVICE_SIDS:
        return True
    if sid.lower().endswith(BACKUP_SID_SUFFIX):
        return True
    return not sid.startswith(USER_SID_PREFIXES)


def _read_value(key, name: str, default=None):
    try:
        value, _ = winreg.QueryValueEx(key, name)
        return value
    except FileNotFoundError:
        return default


class WindowsProfileInventory:
    """Profile inventory backed by the ProfileList registry key."""

    def _ensure_winreg(self) -> None:
        if winreg is None:
            raise HostQueryError("Windows registry APIs are unavailable on this platform")

    def list_profiles(self) -> list[ProfileRecord]:
        """
        Enumerate profiles registered under ProfileList.

        Returns:
            List of ProfileRecord snapshots.

        Raises:
            HostQueryError: If the registry key cannot be opened or read.
        """
        self._ensure_winreg()

        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, PROFILE_LIST_KEY) as root:
                subkey_count, _, _ = winreg.QueryInfoKey(root)
                sids = [winreg.EnumKey(root, index) for index in range(subkey_count)]
                profiles = []
                for sid in sids:
                    try:
                        profile = self._read_profile(root, sid)
                    except OSError as e:
                        logger.warning("Skipping profile %s: %s", sid, e)
                        continue
                    if profile is not None:
                        profiles.append(profile)
        except OSError as e:
            raise HostQueryError(f"Cannot read profile inventory: {e}") from e

        logger.debug("Enumerated %d profiles from registry", len(profiles))
        return profiles

    def _read_profile(self, root, sid: str) -> ProfileRecord | None:
        with winreg.OpenKey(root, sid) as key:
            image_path = _read_value(key, "ProfileImagePath")
            if not image_path:
                logger.debug("Profile %s has no ProfileImagePath, skipping", sid)
                return None

            last_use = filetime_to_datetime(
                _read_value(key, "LocalProfileLoadTimeHigh", 0),
                _read_value(key, "LocalProfileLoadTimeLow", 0),
            )

        return ProfileRecord(
            identifier=sid,
            local_path=os.path.expandvars(image_path),
            is_special=is_special_sid(sid),
            is_loaded=self._is_hive_loaded(sid),
            last_use_time=last_use,
        )

    def _is_hive_loaded(self, sid: str) -> bool:
        try:
            with winreg.OpenKey(winreg.HKEY_USERS, sid):
                return True
        except OSError:
            return False

    def remove(self, identifier: str) -> None:
        """
        Delete a profile through userenv.DeleteProfileW.

        Removes the ProfileList entry and the profile directory tree.

        Raises:
            DeletionError: If the profile is now loaded or the call fails.
        """
        self._ensure_winreg()

        if self._is_hive_loaded(identifier):
            raise DeletionError(identifier, "profile is currently loaded")

        userenv = ctypes.WinDLL("userenv", use_last_error=True)  # type: ignore[attr-defined]
        if not userenv.DeleteProfileW(ctypes.c_wchar_p(identifier), None, None):
            code = ctypes.get_last_error()  # type: ignore[attr-defined]
            raise DeletionError(identifier, ctypes.FormatError(code).strip())  # type: ignore[attr-defined]

    def is_server(self) -> bool:
        """Check ProductType: WinNT is a workstation, anything else a server."""
        self._ensure_winreg()

        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, PRODUCT_OPTIONS_KEY) as key:
                product_type = _read_value(key, "ProductType", "WinNT")
        except OSError as e:
            raise HostQueryError(f"Cannot read product type: {e}") from e

        return product_type != "WinNT"

    def current_username(self) -> str:
        """Get the invoking operator's username."""
        return os.environ.get("USERNAME") or getpass.getuser()
