"""Host profile inventory interface."""

from typing import Protocol

from .models import ProfileRecord


class ProfileInventory(Protocol):
    """Host collaborator that lists and removes user profiles."""

    def list_profiles(self) -> list[ProfileRecord]:
        """
        Enumerate every profile known to the host.

        Returns:
            A fully materialized snapshot, not a live view.

        Raises:
            HostQueryError: If the inventory cannot be read.
        """
        ...

    def remove(self, identifier: str) -> None:
        """
        Remove a profile's host registration and directory tree.

        Raises:
            DeletionError: If the host refuses or the profile is gone.
        """
        ...

    def is_server(self) -> bool:
        """Check whether the host is a server edition."""
        ...

    def current_username(self) -> str:
        """Get the username of the invoking operator."""
        ...
