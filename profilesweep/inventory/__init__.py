"""Host profile inventories."""

import sys

from profilesweep.errors import HostQueryError

from .base import ProfileInventory
from .models import ProfileRecord
from .windows import WindowsProfileInventory


def get_inventory() -> ProfileInventory:
    """
    Get the profile inventory for the current host.

    Raises:
        HostQueryError: If the host platform is not supported.
    """
    if sys.platform == "win32":
        return WindowsProfileInventory()
    raise HostQueryError(f"No profile inventory available for platform {sys.platform!r}")


__all__ = [
    "ProfileInventory",
    "ProfileRecord",
    "WindowsProfileInventory",
    "get_inventory",
]
