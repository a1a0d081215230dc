"""Exception types for profile sweeping."""


class ProfileSweepError(Exception):
    """Base class for all profilesweep errors."""


class ConfigError(ProfileSweepError):
    """Raised when the environment holds an invalid policy value."""


class HostQueryError(ProfileSweepError):
    """Raised when the host profile inventory cannot be read."""


class ProfileReadError(ProfileSweepError):
    """Raised when a profile's marker file timestamp cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DeletionError(ProfileSweepError):
    """Raised when the host refuses to remove a profile."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{identifier}: {reason}")
