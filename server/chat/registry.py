"""
Client registry module.

Tracks which usernames are currently connected so a second connection cannot
claim a name that is already in use.
"""

import threading
from typing import Set


class ClientRegistry:
    """Set of connected usernames guarded by a single lock."""

    def __init__(self):
        self._names: Set[str] = set()
        self.lock = threading.Lock()  # Protect shared state

    def try_register(self, name: str) -> bool:
        """
        Claim a username.

        Returns False, leaving the registry untouched, if the name is taken.
        The membership check and the insert happen in one critical section.
        """
        with self.lock:
            if name in self._names:
                return False
            self._names.add(name)
            return True

    def unregister(self, name: str):
        """Release a username. Releasing an unknown name is a no-op."""
        with self.lock:
            self._names.discard(name)

    def snapshot(self) -> Set[str]:
        """Copy of the current usernames."""
        with self.lock:
            return set(self._names)

    def __contains__(self, name):
        with self.lock:
            return name in self._names

    def __len__(self):
        with self.lock:
            return len(self._names)
