"""
Abstract Storage Interface

DESIGN DECISION: The ledger store is an external collaborator. The core only
assumes an ordered key-value store with single-record create/read/update/
delete over typed collections. This allows us to:
1. Use in-memory storage for testing
2. Swap in a browser database, SQLite or anything else later
3. Keep business logic decoupled from storage implementation

Each write is atomic on its own. Nothing here offers multi-record
transactions, so callers must tolerate partial application of
multi-step operations.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from lifeledger.models.audit import AuditEvent
from lifeledger.models.ledger import (
    Account,
    Budget,
    Category,
    DiaryEntry,
    HolidayBalance,
    Plan,
    Task,
    Transaction,
    UserSettings,
)


class LedgerCollection(str, Enum):
    """Typed collections kept by the ledger store."""
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    ACCOUNTS = "accounts"
    BUDGETS = "budgets"
    SETTINGS = "settings"
    TASKS = "tasks"
    PLANS = "plans"
    HOLIDAY_BALANCE = "holiday_balance"
    DIARY = "diary"

    @property
    def model(self) -> type[BaseModel]:
        """Record model stored in this collection."""
        return _COLLECTION_MODELS[self]


_COLLECTION_MODELS: dict[LedgerCollection, type[BaseModel]] = {
    LedgerCollection.TRANSACTIONS: Transaction,
    LedgerCollection.CATEGORIES: Category,
    LedgerCollection.ACCOUNTS: Account,
    LedgerCollection.BUDGETS: Budget,
    LedgerCollection.SETTINGS: UserSettings,
    LedgerCollection.TASKS: Task,
    LedgerCollection.PLANS: Plan,
    LedgerCollection.HOLIDAY_BALANCE: HolidayBalance,
    LedgerCollection.DIARY: DiaryEntry,
}


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation must implement these methods. Implementations
    set the `id` of new records and, where the record has them, the
    `created_at`/`updated_at` timestamps.
    """

    @abstractmethod
    async def add(self, collection: LedgerCollection, record: BaseModel) -> BaseModel:
        """
        Insert a record.

        Returns:
            The stored copy, with its identifier assigned

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get(self, collection: LedgerCollection, record_id: int) -> Optional[BaseModel]:
        """
        Retrieve a record by id.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: LedgerCollection,
        record_id: int,
        changes: dict[str, Any],
    ) -> BaseModel:
        """
        Apply a partial update to a record.

        Returns:
            The updated record

        Raises:
            NotFoundError: If the record doesn't exist
            StorageError: If the update fails or produces an invalid record
        """
        pass

    @abstractmethod
    async def delete(self, collection: LedgerCollection, record_id: int) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was deleted, False if it didn't exist
        """
        pass

    @abstractmethod
    async def list_records(self, collection: LedgerCollection) -> list[BaseModel]:
        """
        All records of a collection in insertion order.
        """
        pass

    async def count(self, collection: LedgerCollection) -> int:
        return len(await self.list_records(collection))


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., the writes of one transfer).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in storage."""
    pass


class StorageUnavailableError(StorageError):
    """Could not reach the storage backend."""
    pass
