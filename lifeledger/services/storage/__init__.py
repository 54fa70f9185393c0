"""
Storage Services Package

Provides the abstract ledger/audit storage interfaces and the in-memory
reference implementation.
"""

from lifeledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerCollection,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from lifeledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerCollection",
    "LedgerStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
]
