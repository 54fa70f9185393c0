"""
Main Orchestrator for Life Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Ledger writes (create/update/delete with deletion protection, balance
   changes, transfers, holiday bookkeeping)
2. Commands (text -> interpret -> gate on confidence -> persist -> outcome)
3. Reads (period summaries, budget report, trend, export/import)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing from a command persists unless it was understood with enough
  confidence
- Protected records (default categories, anything with transactions
  pointing at it) are never deleted
- Every write is audited

Multi-record operations are NOT atomic. A transfer is three independent
writes (source balance, destination balance, transfer record); if the
process dies in between, the writes already done stay done. The shared
correlation id in the audit trail shows which writes belong together.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ValidationError

from lifeledger.analytics import (
    budget_alert_level,
    budget_progress,
    category_breakdown,
    compute_available_days,
    filter_by_window,
    monthly_trend,
    planned_holiday_days,
    resolve_period,
    summarize_period,
    wall_clock,
)
from lifeledger.audit import AuditLogger, create_correlation_id
from lifeledger.config import LedgerSettings, get_settings
from lifeledger.defaults import (
    default_accounts,
    default_categories,
    default_user_settings,
)
from lifeledger.export import (
    export_ledger_json,
    export_transactions_csv,
    import_ledger_json,
    import_transactions_csv,
)
from lifeledger.formatting import format_currency
from lifeledger.interpreter import CommandInterpreter
from lifeledger.models import (
    TRANSFER_CATEGORY_ID,
    Account,
    BalanceOperation,
    Budget,
    BudgetCommand,
    BudgetStatus,
    Category,
    CategoryTotal,
    CategoryType,
    CommandOutcome,
    CommandStatus,
    DiaryCommand,
    DiaryEntry,
    ExpenseCommand,
    HolidayBalance,
    IncomeCommand,
    MonthlyTrendPoint,
    ParsedCommand,
    PeriodKind,
    PeriodSummary,
    Plan,
    Task,
    TaskCommand,
    TaskStatus,
    Transaction,
    TransactionType,
    UserSettings,
)
from lifeledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerCollection,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from lifeledger.validation import UNCATEGORIZED_LABEL, LedgerValidator


REJECTED_MESSAGE = "Could not understand the command. Please try again."
FAILED_MESSAGE = "Failed to execute command. Please try again."


class ForbiddenError(Exception):
    """A delete was refused because the record is protected."""
    pass


class LedgerService:
    """
    All ledger writes and ledger-wide reads.

    Analytics are recomputed from the full store on every call; nothing is
    cached between calls.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._validator = validator or LedgerValidator()
        self._settings = settings or get_settings().ledger
        self._clock = clock

    # -------------------------------------------------------------------------
    # Generic record writes
    # -------------------------------------------------------------------------

    async def _create(
        self,
        collection: LedgerCollection,
        record: BaseModel,
        correlation_id: Optional[UUID] = None,
    ) -> Any:
        try:
            stored = await self._storage.add(collection, record)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    entity_type=collection.value,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_record_created(
                entity_type=collection.value,
                entity_id=stored.id,
                correlation_id=correlation_id,
            )
        return stored

    async def _update(
        self,
        collection: LedgerCollection,
        record_id: int,
        changes: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Any:
        try:
            updated = await self._storage.update(collection, record_id, changes)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    entity_type=collection.value,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_record_updated(
                entity_type=collection.value,
                entity_id=record_id,
                fields=sorted(changes),
                correlation_id=correlation_id,
            )
        return updated

    async def _delete(
        self,
        collection: LedgerCollection,
        record_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        deleted = await self._storage.delete(collection, record_id)
        if deleted and self._audit_logger:
            await self._audit_logger.log_record_deleted(
                entity_type=collection.value,
                entity_id=record_id,
                correlation_id=correlation_id,
            )
        return deleted

    async def _forbid(
        self,
        collection: LedgerCollection,
        record_id: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_delete_forbidden(
                entity_type=collection.value,
                entity_id=record_id,
                reason=reason,
                correlation_id=correlation_id,
            )
        raise ForbiddenError(reason)

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    async def initialize_defaults(self) -> bool:
        """
        Seed default categories, accounts and settings into empty collections.

        Returns True if anything was seeded.
        """
        seeded = False
        currency = self._settings.default_currency

        if not await self._storage.count(LedgerCollection.CATEGORIES):
            for category in default_categories():
                await self._create(LedgerCollection.CATEGORIES, category)
            seeded = True

        if not await self._storage.count(LedgerCollection.ACCOUNTS):
            for account in default_accounts(currency):
                await self._create(LedgerCollection.ACCOUNTS, account)
            seeded = True

        if not await self._storage.count(LedgerCollection.SETTINGS):
            await self._create(LedgerCollection.SETTINGS, default_user_settings(currency))
            seeded = True

        return seeded

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_transactions(self) -> list[Transaction]:
        return await self._storage.list_records(LedgerCollection.TRANSACTIONS)

    async def list_categories(self) -> list[Category]:
        return await self._storage.list_records(LedgerCollection.CATEGORIES)

    async def list_accounts(self) -> list[Account]:
        return await self._storage.list_records(LedgerCollection.ACCOUNTS)

    async def list_budgets(self) -> list[Budget]:
        return await self._storage.list_records(LedgerCollection.BUDGETS)

    async def list_tasks(self) -> list[Task]:
        return await self._storage.list_records(LedgerCollection.TASKS)

    async def list_plans(self) -> list[Plan]:
        return await self._storage.list_records(LedgerCollection.PLANS)

    async def list_diary_entries(self) -> list[DiaryEntry]:
        """Newest first."""
        entries = await self._storage.list_records(LedgerCollection.DIARY)
        return sorted(entries, key=lambda e: wall_clock(e.date), reverse=True)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def _check_consistency(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Report dangling or mismatched references. Never blocks the write."""
        if not self._audit_logger:
            return

        result = self._validator.check_transaction(
            transaction,
            await self.list_categories(),
            await self.list_accounts(),
        )
        if result.issues:
            await self._audit_logger.log_consistency_warning(
                entity_type=result.entity_type,
                entity_id=result.entity_id,
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )

    async def add_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        stored = await self._create(LedgerCollection.TRANSACTIONS, transaction, correlation_id)
        await self._check_consistency(stored, correlation_id)
        return stored

    async def update_transaction(
        self,
        transaction_id: int,
        changes: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        updated = await self._update(
            LedgerCollection.TRANSACTIONS, transaction_id, changes, correlation_id
        )
        await self._check_consistency(updated, correlation_id)
        return updated

    async def delete_transaction(self, transaction_id: int) -> bool:
        return await self._delete(LedgerCollection.TRANSACTIONS, transaction_id)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def add_category(self, category: Category) -> Category:
        return await self._create(LedgerCollection.CATEGORIES, category)

    async def update_category(self, category_id: int, changes: dict[str, Any]) -> Category:
        return await self._update(LedgerCollection.CATEGORIES, category_id, changes)

    async def delete_category(self, category_id: int) -> bool:
        """
        Delete a category.

        Raises:
            ForbiddenError: For default categories and categories that
                transactions still point at
        """
        category = await self._storage.get(LedgerCollection.CATEGORIES, category_id)
        if category is None:
            return False

        if category.is_default:
            await self._forbid(
                LedgerCollection.CATEGORIES, category_id,
                "Cannot delete default categories",
            )

        in_use = any(
            t.category_id == category_id and t.type != TransactionType.TRANSFER
            for t in await self.list_transactions()
        )
        if in_use:
            await self._forbid(
                LedgerCollection.CATEGORIES, category_id,
                "Cannot delete category with existing transactions",
            )

        return await self._delete(LedgerCollection.CATEGORIES, category_id)

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def add_budget(self, budget: Budget, correlation_id: Optional[UUID] = None) -> Budget:
        stored = await self._create(LedgerCollection.BUDGETS, budget, correlation_id)

        if self._audit_logger:
            result = self._validator.check_budget(stored, await self.list_categories())
            if result.issues:
                await self._audit_logger.log_consistency_warning(
                    entity_type=result.entity_type,
                    entity_id=result.entity_id,
                    issues=[issue.model_dump() for issue in result.issues],
                    correlation_id=correlation_id,
                )
        return stored

    async def update_budget(self, budget_id: int, changes: dict[str, Any]) -> Budget:
        return await self._update(LedgerCollection.BUDGETS, budget_id, changes)

    async def delete_budget(self, budget_id: int) -> bool:
        return await self._delete(LedgerCollection.BUDGETS, budget_id)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def add_account(self, account: Account) -> Account:
        return await self._create(LedgerCollection.ACCOUNTS, account)

    async def update_account(self, account_id: int, changes: dict[str, Any]) -> Account:
        return await self._update(LedgerCollection.ACCOUNTS, account_id, changes)

    async def delete_account(self, account_id: int) -> bool:
        """
        Delete an account with no transactions.

        `is_default` plays no part here; only transaction references do.

        Raises:
            ForbiddenError: If any transaction references the account
        """
        in_use = any(
            account_id in (t.account_id, t.from_account_id, t.to_account_id)
            for t in await self.list_transactions()
        )
        if in_use:
            await self._forbid(
                LedgerCollection.ACCOUNTS, account_id,
                "Cannot delete account with existing transactions",
            )

        return await self._delete(LedgerCollection.ACCOUNTS, account_id)

    async def _get_account(self, account_id: int) -> Account:
        account = await self._storage.get(LedgerCollection.ACCOUNTS, account_id)
        if account is None:
            raise NotFoundError(f"Account #{account_id} not found")
        return account

    async def update_account_balance(
        self,
        account_id: int,
        amount: Decimal,
        operation: BalanceOperation,
        correlation_id: Optional[UUID] = None,
    ) -> Account:
        """
        Move an account balance explicitly.

        This is the only way balances change besides transfers; recording an
        expense or income does NOT touch any balance.
        """
        account = await self._get_account(account_id)
        amount = Decimal(str(amount))

        if BalanceOperation(operation) == BalanceOperation.ADD:
            new_balance = account.balance + amount
        else:
            new_balance = account.balance - amount

        updated = await self._update(
            LedgerCollection.ACCOUNTS, account_id, {"balance": new_balance}, correlation_id
        )

        if self._audit_logger:
            await self._audit_logger.log_balance_updated(
                account_id=account_id,
                operation=BalanceOperation(operation).value,
                amount=str(amount),
                new_balance=str(new_balance),
                correlation_id=correlation_id,
            )
        return updated

    async def transfer_between_accounts(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal,
        description: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Move money between two accounts and record a transfer transaction.

        Three independent writes, in this order: debit the source, credit
        the destination, insert the transfer record. A failure part-way
        leaves the earlier writes in place.

        Raises:
            ValueError: For a non-positive amount or identical accounts
            NotFoundError: If either account doesn't exist
        """
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValueError("Transfer amount must be positive")
        if from_account_id == to_account_id:
            raise ValueError("Cannot transfer to the same account")

        correlation_id = correlation_id or create_correlation_id()

        from_account = await self._get_account(from_account_id)
        to_account = await self._get_account(to_account_id)

        await self._update(
            LedgerCollection.ACCOUNTS, from_account_id,
            {"balance": from_account.balance - amount}, correlation_id,
        )
        await self._update(
            LedgerCollection.ACCOUNTS, to_account_id,
            {"balance": to_account.balance + amount}, correlation_id,
        )

        transfer = Transaction(
            amount=amount,
            type=TransactionType.TRANSFER,
            category_id=TRANSFER_CATEGORY_ID,
            account_id=from_account_id,
            date=self._clock(),
            description=description,
            tags=["transfer"],
            currency=from_account.currency,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
        )
        stored = await self._create(LedgerCollection.TRANSACTIONS, transfer, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_transfer_completed(
                transaction_id=stored.id,
                from_account_id=from_account_id,
                to_account_id=to_account_id,
                amount=str(amount),
                correlation_id=correlation_id,
            )
        return stored

    # -------------------------------------------------------------------------
    # Tasks, plans, diary
    # -------------------------------------------------------------------------

    async def add_task(self, task: Task, correlation_id: Optional[UUID] = None) -> Task:
        return await self._create(LedgerCollection.TASKS, task, correlation_id)

    async def update_task(self, task_id: int, changes: dict[str, Any]) -> Task:
        return await self._update(LedgerCollection.TASKS, task_id, changes)

    async def delete_task(self, task_id: int) -> bool:
        return await self._delete(LedgerCollection.TASKS, task_id)

    async def toggle_task_status(self, task_id: int) -> Task:
        """Completed tasks go back to pending; anything else is completed."""
        task = await self._storage.get(LedgerCollection.TASKS, task_id)
        if task is None:
            raise NotFoundError(f"Task #{task_id} not found")

        if task.status == TaskStatus.COMPLETED:
            changes = {"status": TaskStatus.PENDING, "completed_at": None}
        else:
            changes = {"status": TaskStatus.COMPLETED, "completed_at": self._clock()}

        return await self._update(LedgerCollection.TASKS, task_id, changes)

    async def add_plan(self, plan: Plan) -> Plan:
        return await self._create(LedgerCollection.PLANS, plan)

    async def update_plan(self, plan_id: int, changes: dict[str, Any]) -> Plan:
        return await self._update(LedgerCollection.PLANS, plan_id, changes)

    async def delete_plan(self, plan_id: int) -> bool:
        return await self._delete(LedgerCollection.PLANS, plan_id)

    async def add_diary_entry(
        self,
        entry: DiaryEntry,
        correlation_id: Optional[UUID] = None,
    ) -> DiaryEntry:
        return await self._create(LedgerCollection.DIARY, entry, correlation_id)

    async def update_diary_entry(self, entry_id: int, changes: dict[str, Any]) -> DiaryEntry:
        return await self._update(LedgerCollection.DIARY, entry_id, changes)

    async def delete_diary_entry(self, entry_id: int) -> bool:
        return await self._delete(LedgerCollection.DIARY, entry_id)

    # -------------------------------------------------------------------------
    # Holidays
    # -------------------------------------------------------------------------

    async def get_holiday_balance(self, year: Optional[int] = None) -> Optional[HolidayBalance]:
        year = year or self._clock().year
        for balance in await self._storage.list_records(LedgerCollection.HOLIDAY_BALANCE):
            if balance.year == year:
                return balance
        return None

    async def update_holiday_balance(
        self,
        total_days: Optional[int] = None,
        used_days: Optional[int] = None,
        planned_days: Optional[int] = None,
        year: Optional[int] = None,
    ) -> HolidayBalance:
        """
        Create or update the balance for `year` (default: this year).

        `available_days` is recomputed on every write.
        """
        year = year or self._clock().year
        existing = await self.get_holiday_balance(year)

        if existing is None:
            total = total_days if total_days is not None else self._settings.default_holiday_days
            used = used_days or 0
            planned = planned_days or 0
            balance = HolidayBalance(
                year=year,
                total_days=total,
                used_days=used,
                planned_days=planned,
                available_days=compute_available_days(total, used, planned),
            )
            return await self._create(LedgerCollection.HOLIDAY_BALANCE, balance)

        changes = {
            field: value
            for field, value in (
                ("total_days", total_days),
                ("used_days", used_days),
                ("planned_days", planned_days),
            )
            if value is not None
        }
        merged = existing.model_copy(update=changes)
        changes["available_days"] = compute_available_days(
            merged.total_days, merged.used_days, merged.planned_days
        )
        return await self._update(LedgerCollection.HOLIDAY_BALANCE, existing.id, changes)

    async def sync_planned_holidays(self, year: Optional[int] = None) -> HolidayBalance:
        """Store the leave days currently committed by confirmed trips."""
        planned = planned_holiday_days(await self.list_plans())
        return await self.update_holiday_balance(planned_days=planned, year=year)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    async def get_user_settings(self) -> Optional[UserSettings]:
        records = await self._storage.list_records(LedgerCollection.SETTINGS)
        return records[0] if records else None

    async def update_user_settings(self, changes: dict[str, Any]) -> UserSettings:
        current = await self.get_user_settings()
        if current is None:
            return await self._create(LedgerCollection.SETTINGS, UserSettings(**changes))
        return await self._update(LedgerCollection.SETTINGS, current.id, changes)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def create_from_command(
        self,
        command: ParsedCommand,
        correlation_id: Optional[UUID] = None,
    ) -> Union[Task, Transaction, DiaryEntry, Budget]:
        """
        Persist the draft of an interpreted command.

        The caller is responsible for checking the command is actionable.
        """
        if isinstance(command, TaskCommand):
            return await self.add_task(
                Task(**command.draft.model_dump()), correlation_id
            )
        if isinstance(command, (ExpenseCommand, IncomeCommand)):
            return await self.add_transaction(
                Transaction(**command.draft.model_dump()), correlation_id
            )
        if isinstance(command, DiaryCommand):
            return await self.add_diary_entry(
                DiaryEntry(**command.draft.model_dump()), correlation_id
            )
        if isinstance(command, BudgetCommand):
            return await self.add_budget(
                Budget(**command.draft.model_dump()), correlation_id
            )
        raise ValueError(f"Nothing to create for a {command.intent.value} command")

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    async def period_summary(
        self,
        kind: PeriodKind = PeriodKind.MONTH,
        reference: Optional[Union[date, datetime]] = None,
    ) -> PeriodSummary:
        return summarize_period(
            await self.list_transactions(),
            kind,
            reference or self._clock(),
        )

    async def period_breakdown(
        self,
        kind: PeriodKind = PeriodKind.MONTH,
        reference: Optional[Union[date, datetime]] = None,
        category_type: CategoryType = CategoryType.EXPENSE,
    ) -> list[CategoryTotal]:
        """Category breakdown of one type over the period containing `reference`."""
        window = resolve_period(kind, reference or self._clock())
        in_window = filter_by_window(await self.list_transactions(), window)
        categories = [c for c in await self.list_categories() if c.type == category_type]
        return category_breakdown(in_window, categories)

    async def budget_report(self) -> list[BudgetStatus]:
        transactions = await self.list_transactions()
        names = {c.id: c.name for c in await self.list_categories()}

        report = []
        for budget in await self.list_budgets():
            progress = budget_progress(budget, transactions)
            report.append(BudgetStatus(
                budget=budget,
                category_name=names.get(budget.category_id, UNCATEGORIZED_LABEL),
                progress=progress,
                alert_level=budget_alert_level(budget, progress),
            ))
        return report

    async def trend(self, month_count: Optional[int] = None) -> list[MonthlyTrendPoint]:
        return monthly_trend(
            await self.list_transactions(),
            month_count if month_count is not None else self._settings.trend_months,
            now=self._clock(),
        )

    # -------------------------------------------------------------------------
    # Export / import
    # -------------------------------------------------------------------------

    async def export_csv(self) -> str:
        transactions = await self.list_transactions()
        content = export_transactions_csv(transactions, await self.list_categories())
        if self._audit_logger:
            await self._audit_logger.log_export_generated("csv", len(transactions))
        return content

    async def export_json(self) -> str:
        transactions = await self.list_transactions()
        content = export_ledger_json(
            transactions, await self.list_categories(), exported_at=self._clock()
        )
        if self._audit_logger:
            await self._audit_logger.log_export_generated("json", len(transactions))
        return content

    async def import_csv(
        self,
        content: str,
        account_id: int,
        fallback_category_id: Optional[int] = None,
    ) -> list[Transaction]:
        """
        Add every row of a CSV export as a new transaction.

        The file is parsed completely before anything is written, so a
        malformed file adds nothing.
        """
        parsed = import_transactions_csv(
            content,
            await self.list_categories(),
            account_id,
            fallback_category_id,
        )
        stored = [await self.add_transaction(t) for t in parsed]
        if self._audit_logger:
            await self._audit_logger.log_import_completed("csv", len(stored))
        return stored

    async def import_json(self, content: str) -> list[Transaction]:
        """
        Add the transactions of a JSON export.

        Exported categories are matched to existing ones by name and type;
        unmatched ones are created first so every transaction keeps its
        category.
        """
        snapshot = import_ledger_json(content)

        existing = {
            (c.type, c.name.lower()): c.id for c in await self.list_categories()
        }
        category_ids = {}
        for category in snapshot.categories:
            key = (category.type, category.name.lower())
            if key not in existing:
                created = await self.add_category(
                    category.model_copy(update={"id": None, "is_default": False})
                )
                existing[key] = created.id
            category_ids[category.id] = existing[key]

        stored = []
        for transaction in snapshot.transactions:
            changes: dict[str, Any] = {"id": None}
            if transaction.type != TransactionType.TRANSFER:
                changes["category_id"] = category_ids.get(
                    transaction.category_id, transaction.category_id
                )
            stored.append(await self.add_transaction(transaction.model_copy(update=changes)))

        if self._audit_logger:
            await self._audit_logger.log_import_completed("json", len(stored))
        return stored


class CommandFlow:
    """
    Orchestrates one command submission.

    Flow:
    1. Interpret → classify the text and extract a draft
    2. Gate → unknown or low-confidence results are rejected, nothing saved
    3. Persist → hand the draft to the ledger
    4. Report → success, rejected or failed

    On failure the submitted text is returned in the outcome so the user
    can retry without retyping.
    """

    def __init__(
        self,
        service: LedgerService,
        interpreter: Optional[CommandInterpreter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._service = service
        self._interpreter = interpreter or CommandInterpreter()
        self._audit_logger = audit_logger

    async def submit(
        self,
        text: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> CommandOutcome:
        correlation_id = correlation_id or create_correlation_id()
        text = text or ""

        if self._audit_logger:
            await self._audit_logger.log_command_received(text, correlation_id)

        try:
            categories = await self._service.list_categories()
        except StorageError as e:
            return await self._failed(text, None, e, correlation_id)

        command = self._interpreter.interpret(text, categories)

        if not command.is_actionable(self._interpreter.min_confidence):
            if self._audit_logger:
                await self._audit_logger.log_command_rejected(
                    text=text,
                    intent=command.intent.value,
                    confidence=command.confidence,
                    correlation_id=correlation_id,
                )
            return CommandOutcome(
                status=CommandStatus.REJECTED,
                message=REJECTED_MESSAGE,
                text=text,
                command=command,
            )

        if self._audit_logger:
            await self._audit_logger.log_command_parsed(
                intent=command.intent.value,
                confidence=command.confidence,
                correlation_id=correlation_id,
            )

        try:
            record = await self._service.create_from_command(command, correlation_id)
        except (StorageError, ValidationError) as e:
            return await self._failed(text, command, e, correlation_id)

        return CommandOutcome(
            status=CommandStatus.SUCCESS,
            message=success_message(command),
            text=text,
            command=command,
            record_id=record.id,
        )

    async def _failed(
        self,
        text: str,
        command: Optional[ParsedCommand],
        error: Exception,
        correlation_id: UUID,
    ) -> CommandOutcome:
        if self._audit_logger:
            await self._audit_logger.log_error(
                error_type=type(error).__name__,
                error_message=str(error),
                details={"text": text},
                correlation_id=correlation_id,
            )
        return CommandOutcome(
            status=CommandStatus.FAILED,
            message=FAILED_MESSAGE,
            text=text,
            command=command,
        )


def success_message(command: ParsedCommand) -> str:
    if isinstance(command, TaskCommand):
        return "Task created successfully!"
    if isinstance(command, ExpenseCommand):
        amount = format_currency(command.draft.amount, command.draft.currency)
        return f"Expense of {amount} recorded!"
    if isinstance(command, IncomeCommand):
        amount = format_currency(command.draft.amount, command.draft.currency)
        return f"Income of {amount} recorded!"
    if isinstance(command, DiaryCommand):
        return "Diary entry saved!"
    if isinstance(command, BudgetCommand):
        amount = format_currency(command.draft.amount, command.draft.currency)
        return f"Budget of {amount} set!"
    return ""


def create_app_components() -> tuple[LedgerService, CommandFlow]:
    """
    Factory function to create all application components.

    Uses the in-memory stores; a persistent backend is plugged in by
    constructing `LedgerService` with another `LedgerStorageInterface`.

    Returns:
        (ledger_service, command_flow)
    """
    settings = get_settings()

    # structlog renders the JSON itself; stdlib logging only filters and prints
    logging.basicConfig(format="%(message)s", level=settings.app.log_level)

    audit_logger = AuditLogger(InMemoryAuditStorage())
    service = LedgerService(
        storage=InMemoryLedgerStorage(),
        audit_logger=audit_logger,
        settings=settings.ledger,
    )
    command_flow = CommandFlow(
        service=service,
        interpreter=CommandInterpreter(settings=settings.interpreter),
        audit_logger=audit_logger,
    )
    return service, command_flow
