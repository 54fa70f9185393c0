"""
Core Data Models for Life Ledger

These models define the schemas for every record kept in the ledger store:
transactions, categories, accounts, budgets, tasks, plans, the yearly
holiday balance, diary entries and the user's settings.

DESIGN DECISION: Structural rules (a transfer has two accounts, an expense
has a real category) are enforced here. Cross-record consistency (does the
category exist, does its type match) is NOT enforced at write time; the
aggregation engine tolerates mismatches and the validator reports them.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Category id reserved for the "Transfer" pseudo-category
TRANSFER_CATEGORY_ID = 0

# Longest free text accepted on records created from commands
TASK_TITLE_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 1000
DIARY_TITLE_MAX_LENGTH = 200


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Kind of money movement."""
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


class CategoryType(str, Enum):
    """
    Categories are never shared between expenses and income.
    """
    EXPENSE = "expense"
    INCOME = "income"


class PeriodKind(str, Enum):
    """Calendar period used to scope aggregation."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class BudgetPeriod(str, Enum):
    """Budget recurrence period."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def period_kind(self) -> PeriodKind:
        """The calendar period this budget period is evaluated over."""
        return {
            BudgetPeriod.WEEKLY: PeriodKind.WEEK,
            BudgetPeriod.MONTHLY: PeriodKind.MONTH,
            BudgetPeriod.YEARLY: PeriodKind.YEAR,
        }[self]


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class AccountType(str, Enum):
    CASH = "cash"
    BANK = "bank"
    CREDIT_CARD = "credit_card"
    DIGITAL_WALLET = "digital_wallet"
    INVESTMENT = "investment"
    OTHER = "other"


class BalanceOperation(str, Enum):
    """Explicit account balance mutation."""
    ADD = "add"
    SUBTRACT = "subtract"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    HEALTH = "health"
    SHOPPING = "shopping"
    FINANCE = "finance"
    OTHER = "other"


class PlanType(str, Enum):
    TRIP = "trip"
    EVENT = "event"
    GOAL = "goal"
    PROJECT = "project"


class PlanStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Mood(str, Enum):
    """Diary mood bands, best to worst."""
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    BAD = "bad"
    TERRIBLE = "terrible"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


# =============================================================================
# FINANCE RECORDS
# =============================================================================

class Recurrence(BaseModel):
    """Recurrence descriptor attached to a transaction or task."""

    frequency: RecurrenceFrequency
    end_date: Optional[datetime] = None


class Category(BaseModel):
    """
    Spending or income category.

    Default categories are seeded on first start and cannot be deleted.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    icon: str = Field(
        default="MoreHorizontal",
        description="Icon reference"
    )
    color: str = Field(
        default="#95A5A6",
        description="Display color"
    )
    type: CategoryType
    is_default: bool = False


class Account(BaseModel):
    """
    A place money is kept.

    The balance is never recomputed from transaction history; it only moves
    through explicit add/subtract operations and transfers.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = AccountType.CASH
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Signed balance"
    )
    currency: str = Field(default="USD", min_length=3, max_length=3)
    icon: str = "Wallet"
    color: str = "#10b981"
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Transaction(BaseModel):
    """
    A single ledger entry.

    Amounts are non-negative; the type carries the direction. Dates are
    kept exactly as given, with no implicit timezone conversion; aggregates
    read their wall-clock fields.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount in the transaction currency"
    )
    type: TransactionType
    category_id: int = Field(
        ...,
        ge=0,
        description="Category reference, 0 for transfers"
    )
    account_id: int
    date: datetime
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    tags: list[str] = Field(default_factory=list)
    receipt: Optional[str] = Field(
        default=None,
        description="Compressed receipt image as a data URL"
    )
    recurring: Optional[Recurrence] = None
    currency: str = Field(default="USD", min_length=3, max_length=3)

    # Transfer specific fields
    from_account_id: Optional[int] = None
    to_account_id: Optional[int] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_shape(self) -> 'Transaction':
        """Validate type-specific references."""
        if self.type == TransactionType.TRANSFER:
            if self.from_account_id is None or self.to_account_id is None:
                raise ValueError("Transfers need both from and to accounts")
            if self.category_id != TRANSFER_CATEGORY_ID:
                raise ValueError("Transfers must use the transfer category (0)")
        elif self.category_id == TRANSFER_CATEGORY_ID:
            raise ValueError(
                f"{self.type.value.capitalize()} transactions need a category"
            )
        return self


class Budget(BaseModel):
    """
    Spending ceiling for one expense category.

    `start_date` anchors the window the budget is evaluated over; spending
    is computed fresh from the ledger on every read.
    """

    id: Optional[int] = None
    category_id: int = Field(..., ge=1)
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Ceiling for one period"
    )
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: datetime
    alert_threshold: float = Field(
        default=80.0,
        ge=0.0,
        description="Warn when this percentage of the budget is used"
    )
    currency: str = Field(default="USD", min_length=3, max_length=3)


class UserSettings(BaseModel):
    """Single settings record. Drives display only, never stored amounts."""

    id: Optional[int] = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    theme: Theme = Theme.AUTO
    notifications: bool = True
    budget_alerts: bool = True
    language: str = "en"


# =============================================================================
# ORGANIZER RECORDS
# =============================================================================

class Task(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=TASK_TITLE_MAX_LENGTH)
    description: str = ""
    category: TaskCategory = TaskCategory.OTHER
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    recurring: Optional[Recurrence] = None
    tags: list[str] = Field(default_factory=list)
    reminder: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChecklistItem(BaseModel):
    id: str
    text: str
    completed: bool = False


class ItineraryDay(BaseModel):
    day: int = Field(..., ge=1)
    date: date
    activities: list[str] = Field(default_factory=list)
    notes: str = ""


class Plan(BaseModel):
    """
    Trip, event, goal or project.

    `budget` and `spent` are maintained by hand and are NOT derived from
    ledger transactions.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    type: PlanType = PlanType.TRIP
    destination: Optional[str] = None
    start_date: datetime
    end_date: datetime
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    spent: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    status: PlanStatus = PlanStatus.PLANNING
    checklist: list[ChecklistItem] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    holidays_used: int = Field(
        default=0,
        ge=0,
        description="Leave days this plan consumes"
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_dates(self) -> 'Plan':
        if self.end_date < self.start_date:
            raise ValueError("Plan end date cannot be before start date")
        return self


class HolidayBalance(BaseModel):
    """
    Leave-day balance for one calendar year.

    `planned_days` is recomputed from confirmed trips and only stored at the
    moment of an explicit update.
    """

    id: Optional[int] = None
    year: int = Field(..., ge=1970)
    total_days: int = Field(default=20, ge=0)
    used_days: int = Field(default=0, ge=0)
    planned_days: int = Field(default=0, ge=0)
    available_days: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DiaryEntry(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    date: datetime
    title: str = Field(..., max_length=DIARY_TITLE_MAX_LENGTH)
    content: str = ""
    mood: Mood = Mood.OKAY
    tags: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
