"""profilesweep - reclaim stale user profiles on shared hosts."""

__version__ = "0.1.0"
