"""
Integration tests for the ledger service and the command flow,
run against the in-memory stores.
"""

import asyncio
import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from lifeledger.audit import AuditLogger
from lifeledger.config import InterpreterSettings, LedgerSettings
from lifeledger.interpreter import CommandInterpreter
from lifeledger.models import (
    AuditEventType,
    BalanceOperation,
    Budget,
    BudgetAlertLevel,
    Category,
    CategoryType,
    CommandStatus,
    PeriodKind,
    Plan,
    PlanStatus,
    PlanType,
    Task,
    TaskStatus,
    Transaction,
    TransactionType,
)
from lifeledger.orchestrator import (
    FAILED_MESSAGE,
    REJECTED_MESSAGE,
    CommandFlow,
    ForbiddenError,
    LedgerService,
    create_app_components,
)
from lifeledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    NotFoundError,
    StorageError,
)


NOW = datetime(2024, 5, 15, 10, 30)


class FailingLedgerStorage(InMemoryLedgerStorage):
    """Store whose writes start failing once `fail_writes` is set."""

    fail_writes = False

    async def add(self, collection, record):
        if self.fail_writes:
            raise StorageError("disk full")
        return await super().add(collection, record)


def _build(storage=None):
    storage = storage or InMemoryLedgerStorage(clock=lambda: NOW)
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)
    service = LedgerService(
        storage=storage,
        audit_logger=audit_logger,
        settings=LedgerSettings(),
        clock=lambda: NOW,
    )
    flow = CommandFlow(
        service=service,
        interpreter=CommandInterpreter(settings=InterpreterSettings(), clock=lambda: NOW),
        audit_logger=audit_logger,
    )
    return service, flow, audit_storage


def _expense(amount, when=NOW, category_id=1, account_id=1):
    return Transaction(
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        category_id=category_id,
        account_id=account_id,
        date=when,
    )


async def _event_types(audit_storage):
    return [e.event_type for e in await audit_storage.get_recent_events(limit=1000)]


class TestSeeding:
    """Tests for default records."""

    def test_initialize_defaults_once(self):
        async def scenario():
            service, _, _ = _build()
            first = await service.initialize_defaults()
            second = await service.initialize_defaults()
            return (
                first,
                second,
                await service.list_categories(),
                await service.list_accounts(),
                await service.get_user_settings(),
            )

        first, second, categories, accounts, settings = asyncio.run(scenario())
        assert first is True
        assert second is False
        assert len(categories) == 15
        assert categories[0].name == "Food & Dining"
        assert all(c.is_default for c in categories)
        assert len([c for c in categories if c.type == CategoryType.INCOME]) == 5
        assert [a.name for a in accounts] == ["Cash", "Bank Account", "Credit Card"]
        assert settings.currency == "USD"


class TestDeletionProtection:
    """Tests for forbidden deletes."""

    def test_default_category_cannot_be_deleted(self):
        async def scenario():
            service, _, audit_storage = _build()
            await service.initialize_defaults()
            with pytest.raises(ForbiddenError, match="Cannot delete default categories"):
                await service.delete_category(1)
            return await service.list_categories(), await _event_types(audit_storage)

        categories, event_types = asyncio.run(scenario())
        assert len(categories) == 15
        assert AuditEventType.DELETE_FORBIDDEN in event_types

    def test_unused_custom_category_is_deleted(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            pets = await service.add_category(Category(name="Pets", type=CategoryType.EXPENSE))
            deleted = await service.delete_category(pets.id)
            return deleted, await service.list_categories()

        deleted, categories = asyncio.run(scenario())
        assert deleted is True
        assert "Pets" not in [c.name for c in categories]

    def test_category_with_transactions_cannot_be_deleted(self):
        async def scenario():
            service, _, _ = _build()
            pets = await service.add_category(Category(name="Pets", type=CategoryType.EXPENSE))
            await service.add_transaction(_expense("15", category_id=pets.id))
            await service.delete_category(pets.id)

        with pytest.raises(ForbiddenError, match="existing transactions"):
            asyncio.run(scenario())

    def test_deleting_missing_category(self):
        async def scenario():
            service, _, _ = _build()
            return await service.delete_category(99)

        assert asyncio.run(scenario()) is False

    def test_account_with_transactions_cannot_be_deleted(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.add_transaction(_expense("15", account_id=2))
            with pytest.raises(ForbiddenError):
                await service.delete_account(2)
            # default flag alone doesn't protect an account
            return await service.delete_account(3)

        assert asyncio.run(scenario()) is True

    def test_transfer_destination_protects_account(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.transfer_between_accounts(1, 3, Decimal("5"))
            await service.delete_account(3)

        with pytest.raises(ForbiddenError):
            asyncio.run(scenario())


class TestAccounts:
    """Tests for balance operations and transfers."""

    def test_update_account_balance(self):
        async def scenario():
            service, _, audit_storage = _build()
            await service.initialize_defaults()
            await service.update_account_balance(1, Decimal("100"), BalanceOperation.ADD)
            account = await service.update_account_balance(
                1, Decimal("30.50"), BalanceOperation.SUBTRACT
            )
            return account, await _event_types(audit_storage)

        account, event_types = asyncio.run(scenario())
        assert account.balance == Decimal("69.50")
        assert event_types.count(AuditEventType.BALANCE_UPDATED) == 2

    def test_recording_an_expense_leaves_balance_alone(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.add_transaction(_expense("40"))
            return (await service.list_accounts())[0]

        assert asyncio.run(scenario()).balance == Decimal("0")

    def test_transfer_moves_money_and_records_transfer(self):
        async def scenario():
            service, _, audit_storage = _build()
            await service.initialize_defaults()
            await service.update_account_balance(2, Decimal("500"), BalanceOperation.ADD)
            transfer = await service.transfer_between_accounts(2, 1, Decimal("120"), "ATM")
            accounts = await service.list_accounts()
            related = await audit_storage.get_events_by_correlation_id(
                (await audit_storage.get_recent_events(limit=1))[0].correlation_id
            )
            return transfer, accounts, related

        transfer, accounts, related = asyncio.run(scenario())
        balances = {a.id: a.balance for a in accounts}
        assert balances[1] == Decimal("120")
        assert balances[2] == Decimal("380")

        assert transfer.type == TransactionType.TRANSFER
        assert transfer.category_id == 0
        assert transfer.account_id == 2
        assert (transfer.from_account_id, transfer.to_account_id) == (2, 1)
        assert transfer.tags == ["transfer"]
        assert transfer.date == NOW

        event_types = [e.event_type for e in related]
        assert event_types.count(AuditEventType.RECORD_UPDATED) == 2
        assert event_types[-1] == AuditEventType.TRANSFER_COMPLETED

    def test_transfer_is_not_income_or_expense(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.transfer_between_accounts(1, 2, Decimal("75"))
            return await service.period_summary(PeriodKind.MONTH)

        summary = asyncio.run(scenario())
        assert summary.income == 0
        assert summary.expense == 0

    def test_transfer_to_same_account(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.transfer_between_accounts(1, 1, Decimal("5"))

        with pytest.raises(ValueError, match="same account"):
            asyncio.run(scenario())

    def test_transfer_to_missing_account_changes_nothing(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            with pytest.raises(NotFoundError):
                await service.transfer_between_accounts(1, 99, Decimal("5"))
            return await service.list_accounts(), await service.list_transactions()

        accounts, transactions = asyncio.run(scenario())
        assert all(a.balance == 0 for a in accounts)
        assert transactions == []


class TestOrganizer:
    """Tests for tasks and holiday bookkeeping."""

    def test_toggle_task_status(self):
        async def scenario():
            service, _, _ = _build()
            task = await service.add_task(Task(title="Renew passport"))
            done = await service.toggle_task_status(task.id)
            undone = await service.toggle_task_status(task.id)
            return done, undone

        done, undone = asyncio.run(scenario())
        assert done.status == TaskStatus.COMPLETED
        assert done.completed_at == NOW
        assert undone.status == TaskStatus.PENDING
        assert undone.completed_at is None

    def test_toggle_missing_task(self):
        async def scenario():
            service, _, _ = _build()
            await service.toggle_task_status(5)

        with pytest.raises(NotFoundError):
            asyncio.run(scenario())

    def test_holiday_balance_lifecycle(self):
        async def scenario():
            service, _, _ = _build()
            created = await service.update_holiday_balance()
            await service.add_plan(Plan(
                title="Goa",
                type=PlanType.TRIP,
                status=PlanStatus.CONFIRMED,
                start_date=datetime(2024, 6, 1),
                end_date=datetime(2024, 6, 6),
                holidays_used=5,
            ))
            await service.add_plan(Plan(
                title="Maybe Paris",
                type=PlanType.TRIP,
                status=PlanStatus.PLANNING,
                start_date=datetime(2024, 9, 1),
                end_date=datetime(2024, 9, 4),
                holidays_used=3,
            ))
            synced = await service.sync_planned_holidays()
            used = await service.update_holiday_balance(used_days=2)
            stored = await service.get_holiday_balance(2024)
            return created, synced, used, stored

        created, synced, used, stored = asyncio.run(scenario())
        assert created.year == 2024
        assert created.total_days == 20
        assert created.available_days == 20
        assert synced.planned_days == 5
        assert synced.available_days == 15
        assert used.available_days == 13
        assert stored.available_days == 13
        assert stored.id == created.id


class TestReports:
    """Tests for the read-side helpers."""

    def test_budget_report(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.add_budget(Budget(
                category_id=1,
                amount=Decimal("100"),
                start_date=datetime(2024, 5, 1),
            ))
            await service.add_transaction(_expense("90", when=datetime(2024, 5, 3)))
            await service.add_transaction(_expense("500", when=datetime(2024, 4, 30)))
            return await service.budget_report()

        report = asyncio.run(scenario())
        assert len(report) == 1
        assert report[0].category_name == "Food & Dining"
        assert report[0].progress.spent == Decimal("90")
        assert report[0].alert_level == BudgetAlertLevel.WARNING

    def test_period_breakdown_and_trend(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.add_transaction(_expense("30", category_id=1))
            await service.add_transaction(_expense("10", category_id=2))
            return await service.period_breakdown(), await service.trend()

        breakdown, trend = asyncio.run(scenario())
        assert [entry.total for entry in breakdown] == [Decimal("30"), Decimal("10")]
        assert [entry.percentage for entry in breakdown] == [75.0, 25.0]
        assert len(trend) == 6
        assert trend[-1].label == "May 2024"
        assert trend[-1].expense == Decimal("40")

    def test_reports_with_timezone_aware_dates(self):
        async def scenario():
            service, _, _ = _build()
            await service.initialize_defaults()
            await service.add_budget(Budget(
                category_id=1,
                amount=Decimal("100"),
                start_date=datetime(2024, 5, 1),
            ))
            await service.add_transaction(
                _expense("25", when=datetime(2024, 5, 3, tzinfo=timezone.utc))
            )
            await service.add_transaction(_expense("5", when=datetime(2024, 5, 4)))
            return (
                await service.period_summary(),
                await service.period_breakdown(),
                await service.budget_report(),
                await service.trend(),
            )

        summary, breakdown, report, trend = asyncio.run(scenario())
        assert summary.expense == Decimal("30")
        assert breakdown[0].total == Decimal("30")
        assert report[0].progress.spent == Decimal("30")
        assert trend[-1].expense == Decimal("30")

    def test_dangling_category_is_reported_not_rejected(self):
        async def scenario():
            service, _, audit_storage = _build()
            await service.initialize_defaults()
            stored = await service.add_transaction(_expense("5", category_id=77))
            return stored, await _event_types(audit_storage)

        stored, event_types = asyncio.run(scenario())
        assert stored.id is not None
        assert AuditEventType.CONSISTENCY_WARNING in event_types


class TestExportImport:
    """Tests for moving the ledger through CSV and JSON."""

    async def _populated(self):
        service, _, _ = _build()
        await service.initialize_defaults()
        await service.add_transaction(_expense("30", category_id=1))
        await service.add_transaction(_expense("12.75", category_id=2))
        await service.add_transaction(Transaction(
            amount=Decimal("1000"),
            type=TransactionType.INCOME,
            category_id=11,
            account_id=1,
            date=datetime(2024, 5, 1, 9, 0),
        ))
        return service

    def test_csv_round_trip_keeps_aggregates(self):
        async def scenario():
            source = await self._populated()
            content = await source.export_csv()

            target, _, _ = _build()
            await target.initialize_defaults()
            imported = await target.import_csv(content, account_id=1)
            return (
                imported,
                await source.period_summary(),
                await target.period_summary(),
                await source.period_breakdown(),
                await target.period_breakdown(),
            )

        imported, source_summary, target_summary, source_breakdown, target_breakdown = (
            asyncio.run(scenario())
        )
        assert len(imported) == 3
        assert target_summary == source_summary
        assert [(e.category.name, e.total) for e in target_breakdown] == [
            (e.category.name, e.total) for e in source_breakdown
        ]

    def test_json_round_trip_into_empty_ledger(self):
        async def scenario():
            source = await self._populated()
            content = await source.export_json()

            target, _, audit_storage = _build()
            imported = await target.import_json(content)
            return (
                imported,
                await source.period_summary(),
                await target.period_summary(),
                await target.list_categories(),
                await _event_types(audit_storage),
            )

        imported, source_summary, target_summary, categories, event_types = (
            asyncio.run(scenario())
        )
        assert len(imported) == 3
        assert target_summary == source_summary
        assert len(categories) == 15
        assert not any(c.is_default for c in categories)
        assert AuditEventType.IMPORT_COMPLETED in event_types


class TestCommandFlow:
    """Tests for end-to-end command submission."""

    def test_expense_command_is_saved(self):
        async def scenario():
            service, flow, _ = _build()
            await service.initialize_defaults()
            outcome = await flow.submit("Today I spent 100 rupees for food")
            return outcome, await service.list_transactions()

        outcome, transactions = asyncio.run(scenario())
        assert outcome.status == CommandStatus.SUCCESS
        assert outcome.succeeded
        assert outcome.message == "Expense of $100.00 recorded!"
        assert outcome.record_id == transactions[0].id
        assert transactions[0].amount == Decimal("100")
        assert transactions[0].category_id == 1
        assert transactions[0].currency == "USD"

    def test_task_command_is_saved(self):
        async def scenario():
            service, flow, _ = _build()
            outcome = await flow.submit(
                "My task is to finish the report with high priority deadline tomorrow"
            )
            return outcome, await service.list_tasks()

        outcome, tasks = asyncio.run(scenario())
        assert outcome.message == "Task created successfully!"
        assert tasks[0].title == "finish the report"
        assert tasks[0].status == TaskStatus.PENDING
        assert tasks[0].due_date == date(2024, 5, 15) + timedelta(days=1)

    def test_diary_and_budget_commands(self):
        async def scenario():
            service, flow, _ = _build()
            await service.initialize_defaults()
            diary = await flow.submit("Today was a good day")
            budget = await flow.submit("set budget of 300 dollars for entertainment")
            return diary, budget, await service.list_diary_entries(), await service.list_budgets()

        diary, budget, entries, budgets = asyncio.run(scenario())
        assert diary.message == "Diary entry saved!"
        assert entries[0].title == "Today was a good day"
        assert budget.message == "Budget of $300.00 set!"
        assert budgets[0].category_id == 4  # Entertainment

    @pytest.mark.parametrize("text", ["blah blah nothing meaningful", "", None])
    def test_unknown_command_is_rejected(self, text):
        async def scenario():
            service, flow, audit_storage = _build()
            await service.initialize_defaults()
            outcome = await flow.submit(text)
            return outcome, await service.list_transactions(), await _event_types(audit_storage)

        outcome, transactions, event_types = asyncio.run(scenario())
        assert outcome.status == CommandStatus.REJECTED
        assert outcome.message == REJECTED_MESSAGE
        assert outcome.text == (text or "")
        assert outcome.record_id is None
        assert transactions == []
        assert AuditEventType.COMMAND_REJECTED in event_types

    def test_low_confidence_is_rejected(self):
        async def scenario():
            service, _, audit_storage = _build()
            flow = CommandFlow(
                service=service,
                interpreter=CommandInterpreter(
                    settings=InterpreterSettings(min_confidence=0.6),
                    clock=lambda: NOW,
                ),
            )
            await service.initialize_defaults()
            outcome = await flow.submit("I paid for the taxi")
            return outcome, await service.list_transactions()

        outcome, transactions = asyncio.run(scenario())
        assert outcome.status == CommandStatus.REJECTED
        assert transactions == []

    def test_storage_failure_keeps_text_for_retry(self):
        async def scenario():
            storage = FailingLedgerStorage(clock=lambda: NOW)
            service, flow, audit_storage = _build(storage)
            await service.initialize_defaults()
            storage.fail_writes = True
            outcome = await flow.submit("spent 20 dollars on lunch")
            return outcome, await _event_types(audit_storage)

        outcome, event_types = asyncio.run(scenario())
        assert outcome.status == CommandStatus.FAILED
        assert outcome.message == FAILED_MESSAGE
        assert outcome.text == "spent 20 dollars on lunch"
        assert outcome.command is not None
        assert AuditEventType.SAVE_FAILED in event_types
        assert AuditEventType.SYSTEM_ERROR in event_types

    def test_long_task_command_is_saved(self):
        async def scenario():
            service, flow, _ = _build()
            outcome = await flow.submit("add a task " + "word " * 120)
            return outcome, await service.list_tasks()

        outcome, tasks = asyncio.run(scenario())
        assert outcome.status == CommandStatus.SUCCESS
        assert len(tasks[0].title) == 500

    def test_invalid_record_keeps_text_for_retry(self, monkeypatch):
        async def scenario():
            service, flow, audit_storage = _build()

            async def reject(command, correlation_id=None):
                return Task(title="")

            monkeypatch.setattr(service, "create_from_command", reject)
            outcome = await flow.submit("todo water the plants")
            return outcome, await service.list_tasks(), await _event_types(audit_storage)

        outcome, tasks, event_types = asyncio.run(scenario())
        assert outcome.status == CommandStatus.FAILED
        assert outcome.message == FAILED_MESSAGE
        assert outcome.text == "todo water the plants"
        assert tasks == []
        assert AuditEventType.SYSTEM_ERROR in event_types


class TestAppComponents:
    """Tests for the component factory."""

    def test_create_app_components(self):
        service, flow = create_app_components()

        async def scenario():
            await service.initialize_defaults()
            return await flow.submit("spent 5 dollars on coffee")

        outcome = asyncio.run(scenario())
        assert outcome.succeeded


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
