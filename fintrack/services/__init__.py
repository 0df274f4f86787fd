"""Services package."""

from fintrack.services.gateway import (
    AuthError,
    LedgerError,
    LedgerGatewayInterface,
    NotFoundError,
    PayloadValidationError,
    RestLedgerGateway,
    TransportError,
    ValidationError,
)
from fintrack.services.storage import (
    FileIdentityStore,
    IdentityStoreInterface,
    InMemoryIdentityStore,
    StorageError,
)

__all__ = [
    # Gateway
    "AuthError",
    "LedgerError",
    "LedgerGatewayInterface",
    "NotFoundError",
    "PayloadValidationError",
    "RestLedgerGateway",
    "TransportError",
    "ValidationError",
    # Identity storage
    "FileIdentityStore",
    "IdentityStoreInterface",
    "InMemoryIdentityStore",
    "StorageError",
]
