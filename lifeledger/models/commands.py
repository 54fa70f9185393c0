"""
Command Models

A free-text command (typed or transcribed) is classified into one intent and
turned into a draft record. The result is a tagged union keyed by `intent`,
one payload shape per variant, so callers dispatch on the intent and get the
matching draft type.

CRITICAL: A draft is PROPOSED data. Nothing here is persisted until the
caller hands the draft to the ledger's create operation.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from lifeledger.models.ledger import (
    DESCRIPTION_MAX_LENGTH,
    DIARY_TITLE_MAX_LENGTH,
    TASK_TITLE_MAX_LENGTH,
    BudgetPeriod,
    Mood,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    TransactionType,
)


class CommandIntent(str, Enum):
    """What a command is asking for."""
    TASK = "task"
    EXPENSE = "expense"
    INCOME = "income"
    DIARY = "diary"
    BUDGET = "budget"
    UNKNOWN = "unknown"


# =============================================================================
# DRAFTS - shaped like the ledger create operations expect
# =============================================================================

class TaskDraft(BaseModel):
    title: str = Field(..., max_length=TASK_TITLE_MAX_LENGTH)
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[date] = None
    category: TaskCategory = TaskCategory.WORK


class TransactionDraft(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    category_id: int = Field(..., ge=1)
    account_id: int = Field(..., ge=1)
    description: str = Field(..., max_length=DESCRIPTION_MAX_LENGTH)
    date: datetime
    currency: str
    tags: list[str] = Field(default_factory=list)


class DiaryDraft(BaseModel):
    title: str = Field(..., max_length=DIARY_TITLE_MAX_LENGTH)
    content: str
    mood: Mood = Mood.OKAY
    date: datetime
    tags: list[str] = Field(default_factory=list)


class BudgetDraft(BaseModel):
    category_id: int = Field(..., ge=1)
    amount: Decimal = Field(..., ge=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: datetime
    alert_threshold: float = 80.0
    currency: str


# =============================================================================
# PARSED COMMANDS
# =============================================================================

class _ParsedCommandBase(BaseModel):
    text: str = Field(
        default="",
        description="Original command text"
    )
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="How reliably the text was mapped to this intent"
    )

    def is_actionable(self, min_confidence: float = 0.5) -> bool:
        """Whether the caller may persist the draft."""
        return self.confidence >= min_confidence


class TaskCommand(_ParsedCommandBase):
    intent: Literal[CommandIntent.TASK] = CommandIntent.TASK
    draft: TaskDraft


class ExpenseCommand(_ParsedCommandBase):
    intent: Literal[CommandIntent.EXPENSE] = CommandIntent.EXPENSE
    draft: TransactionDraft


class IncomeCommand(_ParsedCommandBase):
    intent: Literal[CommandIntent.INCOME] = CommandIntent.INCOME
    draft: TransactionDraft


class DiaryCommand(_ParsedCommandBase):
    intent: Literal[CommandIntent.DIARY] = CommandIntent.DIARY
    draft: DiaryDraft


class BudgetCommand(_ParsedCommandBase):
    intent: Literal[CommandIntent.BUDGET] = CommandIntent.BUDGET
    draft: BudgetDraft


class UnknownCommand(_ParsedCommandBase):
    """Text that matched no intent. Never actionable."""
    intent: Literal[CommandIntent.UNKNOWN] = CommandIntent.UNKNOWN
    confidence: float = 0.0
    draft: None = None

    def is_actionable(self, min_confidence: float = 0.5) -> bool:
        return False


ParsedCommand = Annotated[
    Union[
        TaskCommand,
        ExpenseCommand,
        IncomeCommand,
        DiaryCommand,
        BudgetCommand,
        UnknownCommand,
    ],
    Field(discriminator="intent"),
]


class CommandStatus(str, Enum):
    """Terminal state of one command submission."""
    SUCCESS = "success"
    REJECTED = "rejected"  # not understood, user should retry
    FAILED = "failed"      # understood but could not be saved


class CommandOutcome(BaseModel):
    """What the caller shows the user after a submission."""

    status: CommandStatus
    message: str
    text: str = Field(
        default="",
        description="Submitted text, kept so the user can retry"
    )
    command: Optional[ParsedCommand] = None
    record_id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == CommandStatus.SUCCESS
