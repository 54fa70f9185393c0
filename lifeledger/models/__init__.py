"""
Data Models Package

This package contains all Pydantic models used in Life Ledger.
All data flowing through the system must conform to these schemas.
"""

from lifeledger.models.ledger import (
    TRANSFER_CATEGORY_ID,
    Account,
    AccountType,
    BalanceOperation,
    Budget,
    BudgetPeriod,
    Category,
    CategoryType,
    ChecklistItem,
    DiaryEntry,
    HolidayBalance,
    ItineraryDay,
    Mood,
    PeriodKind,
    Plan,
    PlanStatus,
    PlanType,
    Recurrence,
    RecurrenceFrequency,
    Task,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    Theme,
    Transaction,
    TransactionType,
    UserSettings,
)
from lifeledger.models.analytics import (
    BudgetAlertLevel,
    BudgetProgress,
    BudgetStatus,
    CategoryTotal,
    MonthlyTrendPoint,
    PeriodSummary,
    PeriodWindow,
)
from lifeledger.models.commands import (
    BudgetCommand,
    BudgetDraft,
    CommandIntent,
    CommandOutcome,
    CommandStatus,
    DiaryCommand,
    DiaryDraft,
    ExpenseCommand,
    IncomeCommand,
    ParsedCommand,
    TaskCommand,
    TaskDraft,
    TransactionDraft,
    UnknownCommand,
)
from lifeledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from lifeledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "TRANSFER_CATEGORY_ID",
    "Account",
    "AccountType",
    "BalanceOperation",
    "Budget",
    "BudgetPeriod",
    "Category",
    "CategoryType",
    "ChecklistItem",
    "DiaryEntry",
    "HolidayBalance",
    "ItineraryDay",
    "Mood",
    "PeriodKind",
    "Plan",
    "PlanStatus",
    "PlanType",
    "Recurrence",
    "RecurrenceFrequency",
    "Task",
    "TaskCategory",
    "TaskPriority",
    "TaskStatus",
    "Theme",
    "Transaction",
    "TransactionType",
    "UserSettings",
    # Analytics results
    "BudgetAlertLevel",
    "BudgetProgress",
    "BudgetStatus",
    "CategoryTotal",
    "MonthlyTrendPoint",
    "PeriodSummary",
    "PeriodWindow",
    # Commands
    "BudgetCommand",
    "BudgetDraft",
    "CommandIntent",
    "CommandOutcome",
    "CommandStatus",
    "DiaryCommand",
    "DiaryDraft",
    "ExpenseCommand",
    "IncomeCommand",
    "ParsedCommand",
    "TaskCommand",
    "TaskDraft",
    "TransactionDraft",
    "UnknownCommand",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
