"""Filesystem metadata reads for profile directories."""

import os
from datetime import datetime, timezone

from .errors import ProfileReadError


def last_write_time(path: str) -> datetime:
    """
    Get a file's last modification time.

    Args:
        path: File to stat.

    Returns:
        Timezone-aware UTC datetime of the last write.

    Raises:
        ProfileReadError: If the file is missing, inaccessible or the
            path is malformed.
    """
    try:
        mtime = os.stat(path).st_mtime
    except FileNotFoundError:
        raise ProfileReadError(path, "not found")
    except PermissionError:
        raise ProfileReadError(path, "access denied")
    except (OSError, ValueError) as e:
        raise ProfileReadError(path, str(e))

    return datetime.fromtimestamp(mtime, tz=timezone.utc)
