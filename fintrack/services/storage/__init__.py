"""
Storage Services Package

Persists the one durable artifact of the client: the logged-in user id.
"""

from fintrack.services.storage.interface import (
    IdentityStoreInterface,
    StorageError,
)
from fintrack.services.storage.file_store import (
    FileIdentityStore,
    InMemoryIdentityStore,
)

__all__ = [
    # Interfaces
    "IdentityStoreInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "FileIdentityStore",
    "InMemoryIdentityStore",
]
