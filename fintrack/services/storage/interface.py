"""
Abstract Identity Storage Interface

The only thing the client ever persists is the id of the logged-in user.
Everything else is fetched from the backend and thrown away on logout.

DESIGN DECISION: The store sits behind an interface so that:
1. The Streamlit app can keep it in a file
2. Tests can keep it in memory
3. A browser-backed store can be dropped in later
"""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityStoreInterface(ABC):
    """Remembers a single user identifier between runs."""

    @abstractmethod
    def load(self) -> Optional[int]:
        """
        Return the stored user id, or None when nothing usable is stored.

        A corrupt entry counts as nothing stored.
        """
        pass

    @abstractmethod
    def save(self, user_id: int) -> None:
        """
        Replace the stored user id.

        Raises:
            StorageError: If the id cannot be written
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored user id. Clearing an empty store is a no-op."""
        pass


class StorageError(Exception):
    """Base exception for identity storage operations."""
    pass
