"""Services package."""

from lifeledger.services.receipts import (
    CompressedReceipt,
    ReceiptCompressionError,
    ReceiptCompressor,
    ReceiptTooLargeError,
    UnreadableReceiptError,
)
from lifeledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerCollection,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Receipt services
    "CompressedReceipt",
    "ReceiptCompressionError",
    "ReceiptCompressor",
    "ReceiptTooLargeError",
    "UnreadableReceiptError",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "LedgerCollection",
    "LedgerStorageInterface",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
]
