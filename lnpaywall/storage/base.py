"""Replay store protocol."""

from typing import Protocol


class ReplayStore(Protocol):
    """Remembers which preimages have already been spent.

    Keys are hex encoded payment hashes. Records never expire. Implementations
    are shared between concurrent requests and must be thread-safe.
    """

    def was_used(self, key: str) -> bool:
        """Return True if ``key`` has been recorded.

        Raises:
            StorageUnavailable: If the backend fails
        """
        ...

    def mark_used(self, key: str) -> None:
        """Record ``key``. Recording an existing key is a no-op.

        Raises:
            StorageUnavailable: If the backend fails
        """
        ...

    def try_claim(self, key: str) -> bool:
        """Atomically record ``key`` if it is absent.

        Returns:
            True if the key was already recorded (a replay), False if this call
            created the record

        Raises:
            StorageUnavailable: If the backend fails
        """
        ...
