"""
Replay store backends.

Usage:
    # In-process (default)
    store = create_store("memory://")

    # SQLite file
    store = create_store("sqlite:///var/lib/lnpaywall/used.db")
"""

from lnpaywall.errors import ConfigError
from lnpaywall.storage.base import ReplayStore
from lnpaywall.storage.memory import MemoryReplayStore
from lnpaywall.storage.sqlite import SQLiteReplayStore

MEMORY_SCHEME = "memory://"
SQLITE_SCHEME = "sqlite://"


def create_store(url: str, timeout: float = 5.0) -> ReplayStore:
    """Create a replay store from a URL.

    Args:
        url: ``memory://`` or ``sqlite://<path>``; ``sqlite:///tmp/x.db`` is the
            absolute path ``/tmp/x.db`` and ``sqlite://x.db`` is relative
        timeout: Backend timeout in seconds (SQLite busy timeout)

    Returns:
        A replay store instance

    Raises:
        ConfigError: If the URL scheme is unknown or the path is missing
    """
    if url == MEMORY_SCHEME:
        return MemoryReplayStore()
    if url.startswith(SQLITE_SCHEME):
        path = url[len(SQLITE_SCHEME):]
        if not path:
            raise ConfigError(f"SQLite storage URL needs a file path: {url}")
        return SQLiteReplayStore(path, timeout=timeout)
    raise ConfigError(f"Unsupported storage URL: {url}")


__all__ = [
    "ReplayStore",
    "MemoryReplayStore",
    "SQLiteReplayStore",
    "create_store",
]
