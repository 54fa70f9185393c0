"""
Audit Logger

DESIGN DECISION: Every write to the ledger is logged.
This provides:
1. A trail for account balances, which change outside transactions
2. Debugging capability when a command is misread
3. A record of refused deletes

The audit logger:
- Is async so it sits naturally in the service flows
- Gracefully handles failures (a failed audit write never fails the ledger write)
- Supports correlation IDs to tie together the writes of one user action
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from lifeledger.models.audit import AuditEvent, AuditEventBuilder
from lifeledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_record_created(
        self,
        entity_type: str,
        entity_id: int,
        correlation_id: Optional[UUID] = None,
        details: Optional[dict] = None,
    ) -> None:
        event = AuditEventBuilder.record_created(
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            details=details,
        )
        await self.log(event)

    async def log_record_updated(
        self,
        entity_type: str,
        entity_id: int,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.record_updated(
            entity_type=entity_type,
            entity_id=entity_id,
            fields=fields,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_deleted(
        self,
        entity_type: str,
        entity_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.record_deleted(
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_delete_forbidden(
        self,
        entity_type: str,
        entity_id: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a refused delete."""
        event = AuditEventBuilder.delete_forbidden(
            entity_type=entity_type,
            entity_id=entity_id,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        entity_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            entity_type=entity_type,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_updated(
        self,
        account_id: int,
        operation: str,
        amount: str,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.balance_updated(
            account_id=account_id,
            operation=operation,
            amount=amount,
            new_balance=new_balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transfer_completed(
        self,
        transaction_id: int,
        from_account_id: int,
        to_account_id: int,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.transfer_completed(
            transaction_id=transaction_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_consistency_warning(
        self,
        entity_type: str,
        entity_id: Optional[int],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log references that don't line up on a saved record."""
        event = AuditEventBuilder.consistency_warning(
            entity_type=entity_type,
            entity_id=entity_id,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_command_received(
        self,
        text: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.command_received(
            text=text,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_command_parsed(
        self,
        intent: str,
        confidence: float,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.command_parsed(
            intent=intent,
            confidence=confidence,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_command_rejected(
        self,
        text: str,
        intent: str,
        confidence: float,
        correlation_id: UUID,
    ) -> None:
        """Log a command that was not understood well enough to act on."""
        event = AuditEventBuilder.command_rejected(
            text=text,
            intent=intent,
            confidence=confidence,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_export_generated(
        self,
        export_format: str,
        record_count: int,
    ) -> None:
        event = AuditEventBuilder.export_generated(
            export_format=export_format,
            record_count=record_count,
        )
        await self.log(event)

    async def log_import_completed(
        self,
        import_format: str,
        record_count: int,
    ) -> None:
        event = AuditEventBuilder.import_completed(
            import_format=import_format,
            record_count=record_count,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (a command, a transfer) and pass
    it through all subsequent writes.
    """
    return uuid4()
