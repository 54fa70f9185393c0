"""
Audit Models for Life Ledger

Every write to the ledger and every command submission is logged.
This provides:
1. Traceability of balance changes (transfers are several independent writes)
2. Debugging information when a command is misunderstood
3. A record of refused operations (forbidden deletes)

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger writes
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    DELETE_FORBIDDEN = "delete_forbidden"
    SAVE_FAILED = "save_failed"

    # Accounts
    BALANCE_UPDATED = "balance_updated"
    TRANSFER_COMPLETED = "transfer_completed"

    # Consistency
    CONSISTENCY_WARNING = "consistency_warning"

    # Commands
    COMMAND_RECEIVED = "command_received"
    COMMAND_PARSED = "command_parsed"
    COMMAND_REJECTED = "command_rejected"

    # Data export
    EXPORT_GENERATED = "export_generated"
    IMPORT_COMPLETED = "import_completed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Collection of the record (e.g., 'transactions', 'budgets')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Identifier of the record this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., the writes of one transfer)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("transactions", 12, correlation_id)
        event = AuditEventBuilder.command_rejected(text, "unknown", 0.0, correlation_id)
    """

    @staticmethod
    def record_created(
        entity_type: str,
        entity_id: int,
        correlation_id: Optional[UUID] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Created {entity_type} #{entity_id}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: int,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Updated {entity_type} #{entity_id}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Deleted {entity_type} #{entity_id}",
            is_user_action=True,
        )

    @staticmethod
    def delete_forbidden(
        entity_type: str,
        entity_id: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_FORBIDDEN,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Refused to delete {entity_type} #{entity_id}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        entity_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Failed to save {entity_type}",
            error_message=error_message,
        )

    @staticmethod
    def balance_updated(
        account_id: int,
        operation: str,
        amount: str,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_UPDATED,
            entity_type="accounts",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account #{account_id} balance {operation} {amount}",
            details={
                "operation": operation,
                "amount": amount,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def transfer_completed(
        transaction_id: int,
        from_account_id: int,
        to_account_id: int,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_COMPLETED,
            entity_type="transactions",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transferred {amount} from #{from_account_id} to #{to_account_id}",
            details={
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def consistency_warning(
        entity_type: str,
        entity_id: Optional[int],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONSISTENCY_WARNING,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type} saved with {len(issues)} consistency issues",
            details={"issues": issues},
        )

    @staticmethod
    def command_received(
        text: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            entity_type="command",
            correlation_id=correlation_id,
            description="Command received",
            details={"text": text},
            is_user_action=True,
        )

    @staticmethod
    def command_parsed(
        intent: str,
        confidence: float,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_PARSED,
            entity_type="command",
            correlation_id=correlation_id,
            description=f"Command parsed as {intent} with {confidence:.0%} confidence",
            details={
                "intent": intent,
                "confidence": confidence,
            },
        )

    @staticmethod
    def command_rejected(
        text: str,
        intent: str,
        confidence: float,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="command",
            correlation_id=correlation_id,
            description="Command not understood",
            details={
                "text": text,
                "intent": intent,
                "confidence": confidence,
            },
        )

    @staticmethod
    def export_generated(
        export_format: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="transactions",
            description=f"Exported {record_count} transactions as {export_format}",
            details={
                "format": export_format,
                "record_count": record_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_completed(
        import_format: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="transactions",
            description=f"Imported {record_count} transactions from {import_format}",
            details={
                "format": import_format,
                "record_count": record_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
