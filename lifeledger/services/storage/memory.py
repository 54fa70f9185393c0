"""
In-Memory Storage Implementation

Reference implementation of the ledger store, used by tests and for
running the engine without a real database.

TRADEOFFS:
- Nothing survives the process (persistence is somebody else's job)
- Records are copied in and out, so callers can never mutate stored state
- Identifiers are auto-incremented integers per collection, starting at 1
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import UUID

from pydantic import BaseModel, ValidationError

from lifeledger.models.audit import AuditEvent
from lifeledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerCollection,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Dictionary-backed ledger store.

    Each collection is an insertion-ordered dict of id -> record.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._records: dict[LedgerCollection, dict[int, BaseModel]] = defaultdict(dict)
        self._next_ids: dict[LedgerCollection, int] = defaultdict(lambda: 1)
        self._clock = clock

    def _check_type(self, collection: LedgerCollection, record: BaseModel) -> None:
        if not isinstance(record, collection.model):
            raise StorageError(
                f"Cannot store {type(record).__name__} in {collection.value}"
            )

    async def add(self, collection: LedgerCollection, record: BaseModel) -> BaseModel:
        collection = LedgerCollection(collection)
        self._check_type(collection, record)

        record_id = self._next_ids[collection]
        self._next_ids[collection] = record_id + 1

        stamps: dict[str, Any] = {"id": record_id}
        fields = type(record).model_fields
        now = self._clock()
        if "created_at" in fields:
            stamps["created_at"] = now
        if "updated_at" in fields:
            stamps["updated_at"] = now

        stored = record.model_copy(update=stamps, deep=True)
        self._records[collection][record_id] = stored
        return stored.model_copy(deep=True)

    async def get(self, collection: LedgerCollection, record_id: int) -> Optional[BaseModel]:
        record = self._records[LedgerCollection(collection)].get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def update(
        self,
        collection: LedgerCollection,
        record_id: int,
        changes: dict[str, Any],
    ) -> BaseModel:
        collection = LedgerCollection(collection)
        current = self._records[collection].get(record_id)
        if current is None:
            raise NotFoundError(f"{collection.value} #{record_id} not found")

        model = collection.model
        unknown = set(changes) - set(model.model_fields)
        if unknown:
            raise StorageError(
                f"Unknown fields for {collection.value}: {sorted(unknown)}"
            )

        data = current.model_dump()
        data.update(changes)
        data["id"] = record_id
        if "updated_at" in model.model_fields:
            data["updated_at"] = self._clock()

        try:
            updated = model.model_validate(data)
        except ValidationError as e:
            raise StorageError(
                f"Invalid update for {collection.value} #{record_id}: {e}"
            ) from e

        self._records[collection][record_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, collection: LedgerCollection, record_id: int) -> bool:
        return self._records[LedgerCollection(collection)].pop(record_id, None) is not None

    async def list_records(self, collection: LedgerCollection) -> list[BaseModel]:
        return [
            record.model_copy(deep=True)
            for record in self._records[LedgerCollection(collection)].values()
        ]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
