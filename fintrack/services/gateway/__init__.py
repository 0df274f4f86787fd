"""
Ledger Gateway Package

Typed request/response boundary to the ledger backend.
"""

from fintrack.services.gateway.interface import (
    AuthError,
    LedgerError,
    LedgerGatewayInterface,
    NotFoundError,
    PayloadValidationError,
    TransportError,
    ValidationError,
)
from fintrack.services.gateway.rest import RestLedgerGateway

__all__ = [
    # Interface
    "LedgerGatewayInterface",
    # Exceptions
    "AuthError",
    "LedgerError",
    "NotFoundError",
    "PayloadValidationError",
    "TransportError",
    "ValidationError",
    # REST implementation
    "RestLedgerGateway",
]
