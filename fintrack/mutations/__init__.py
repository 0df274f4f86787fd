"""Mutation coordination package."""

from fintrack.mutations.coordinator import LedgerMirror, MutationCoordinator

__all__ = ["LedgerMirror", "MutationCoordinator"]
