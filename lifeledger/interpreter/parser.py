"""
Command Interpreter

Turns one free-text command (typed, or transcribed by an external speech
capability) into a ParsedCommand: an intent, a draft record and a
confidence score.

State machine over a single utterance, terminal in one pass:
1. CLASSIFY  - ordered keyword rules, first match wins
2. EXTRACT   - intent-specific field extraction into a draft
3. SCORE     - confidence in [0, 1]; callers reject anything below the
               configured minimum (and anything "unknown")

CRITICAL: Malformed, empty or missing text never raises. It degrades to an
UnknownCommand with confidence 0, which the caller treats as "please retry".
"""

import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

import structlog

from lifeledger.config import InterpreterSettings, get_settings
from lifeledger.interpreter.vocabulary import (
    CategoryRule,
    InterpreterVocabulary,
    first_match,
)
from lifeledger.models.commands import (
    BudgetCommand,
    BudgetDraft,
    CommandIntent,
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
from lifeledger.models.ledger import (
    DESCRIPTION_MAX_LENGTH,
    TASK_TITLE_MAX_LENGTH,
    BudgetPeriod,
    Category,
    CategoryType,
    TransactionType,
)


logger = structlog.get_logger(__name__)


TASK_CONFIDENCE = 0.9
DIARY_CONFIDENCE = 0.8
AMOUNT_CONFIDENCE = 0.9
NO_AMOUNT_CONFIDENCE = 0.5


class CommandInterpreter:
    """
    Keyword-driven command interpreter.

    Performs no I/O. The category list is passed per call so the
    interpreter always resolves against the live ledger.
    """

    def __init__(
        self,
        vocabulary: Optional[InterpreterVocabulary] = None,
        settings: Optional[InterpreterSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._settings = settings or get_settings().interpreter
        self._vocabulary = vocabulary or self._load_vocabulary()
        self._clock = clock

        words = "|".join(re.escape(w) for w in self._vocabulary.currency_words)
        self._amount_pattern = re.compile(rf"(\d+)\s*(?:{words})", re.IGNORECASE)

        stops = "|".join(re.escape(w) for w in self._vocabulary.task_title_stop_words)
        marker = re.escape(self._vocabulary.task_title_marker)
        stop_clause = rf"\s+(?:{stops})|$" if stops else "$"
        self._title_pattern = re.compile(
            rf"{marker}\s+(.+?)(?:{stop_clause})",
            re.IGNORECASE,
        )

    def _load_vocabulary(self) -> InterpreterVocabulary:
        path = self._settings.vocabulary_path
        if path:
            try:
                return InterpreterVocabulary.from_json_file(path)
            except FileNotFoundError:
                logger.warning("vocabulary_file_missing", path=path)
        return InterpreterVocabulary()

    @property
    def min_confidence(self) -> float:
        return self._settings.min_confidence

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(self, text: Optional[str]) -> CommandIntent:
        """Intent of the first keyword rule the text matches."""
        if not text or not text.strip():
            return CommandIntent.UNKNOWN

        rule = first_match(self._vocabulary.intents, text.lower())
        return rule.intent if rule else CommandIntent.UNKNOWN

    def interpret(
        self,
        text: Optional[str],
        categories: Sequence[Category] = (),
    ) -> ParsedCommand:
        """Classify `text` and extract the matching draft."""
        intent = self.classify(text)

        if intent == CommandIntent.TASK:
            command = self._parse_task(text)
        elif intent == CommandIntent.EXPENSE:
            command = self._parse_transaction(text, TransactionType.EXPENSE, categories)
        elif intent == CommandIntent.INCOME:
            command = self._parse_transaction(text, TransactionType.INCOME, categories)
        elif intent == CommandIntent.DIARY:
            command = self._parse_diary(text)
        elif intent == CommandIntent.BUDGET:
            command = self._parse_budget(text, categories)
        else:
            command = UnknownCommand(text=text or "")

        logger.debug(
            "command_interpreted",
            intent=command.intent.value,
            confidence=command.confidence,
        )
        return command

    # -------------------------------------------------------------------------
    # Field extraction
    # -------------------------------------------------------------------------

    def extract_amount(self, text: str) -> Decimal:
        """First integer followed by a currency word, 0 when there is none."""
        match = self._amount_pattern.search(text)
        return Decimal(match.group(1)) if match else Decimal("0")

    def _parse_task(self, text: str) -> TaskCommand:
        lowered = text.lower()
        vocabulary = self._vocabulary

        title = text
        match = self._title_pattern.search(text)
        if match and match.group(1).strip():
            title = match.group(1).strip()

        priority_rule = first_match(vocabulary.priorities, lowered)
        priority = priority_rule.priority if priority_rule else vocabulary.default_priority

        due_date = None
        due_rule = first_match(vocabulary.due_dates, lowered)
        if due_rule:
            due_date = self._clock().date() + timedelta(days=due_rule.days_ahead)

        return TaskCommand(
            text=text,
            confidence=TASK_CONFIDENCE,
            draft=TaskDraft(
                title=title.strip()[:TASK_TITLE_MAX_LENGTH].rstrip(),
                priority=priority,
                due_date=due_date,
            ),
        )

    def _parse_transaction(
        self,
        text: str,
        transaction_type: TransactionType,
        categories: Sequence[Category],
    ) -> ParsedCommand:
        amount = self.extract_amount(text)
        category_type = CategoryType(transaction_type.value)

        if transaction_type == TransactionType.EXPENSE:
            rules = self._vocabulary.expense_categories
            fallback = self._vocabulary.expense_fallback
        else:
            rules = self._vocabulary.income_categories
            fallback = self._vocabulary.income_fallback

        label = self._category_label(text, rules, fallback)
        category = (
            find_category(categories, label, category_type)
            or first_of_type(categories, category_type)
        )

        draft = TransactionDraft(
            type=transaction_type,
            amount=amount,
            category_id=self._category_id(category),
            account_id=self._settings.default_account_id,
            description=text[:DESCRIPTION_MAX_LENGTH],
            date=self._clock(),
            currency=self._settings.default_currency,
        )
        confidence = AMOUNT_CONFIDENCE if amount > 0 else NO_AMOUNT_CONFIDENCE

        if transaction_type == TransactionType.EXPENSE:
            return ExpenseCommand(text=text, confidence=confidence, draft=draft)
        return IncomeCommand(text=text, confidence=confidence, draft=draft)

    def _parse_diary(self, text: str) -> DiaryCommand:
        vocabulary = self._vocabulary

        mood_rule = first_match(vocabulary.moods, text.lower())
        mood = mood_rule.mood if mood_rule else vocabulary.default_mood

        title = " ".join(text.split(" ")[:vocabulary.diary_title_words])
        if len(title) > vocabulary.diary_title_max_length:
            title = title[:vocabulary.diary_title_max_length] + "..."

        return DiaryCommand(
            text=text,
            confidence=DIARY_CONFIDENCE,
            draft=DiaryDraft(
                title=title,
                content=text,
                mood=mood,
                date=self._clock(),
            ),
        )

    def _parse_budget(
        self,
        text: str,
        categories: Sequence[Category],
    ) -> BudgetCommand:
        amount = self.extract_amount(text)

        label = self._category_label(
            text,
            self._vocabulary.budget_categories,
            self._vocabulary.budget_fallback,
        )
        # expense categories before any other, see budget fallback in DESIGN.md
        category = (
            find_category(categories, label, CategoryType.EXPENSE)
            or first_of_type(categories, CategoryType.EXPENSE)
            or next(iter(categories), None)
        )

        return BudgetCommand(
            text=text,
            confidence=AMOUNT_CONFIDENCE if amount > 0 else NO_AMOUNT_CONFIDENCE,
            draft=BudgetDraft(
                category_id=self._category_id(category),
                amount=amount,
                period=BudgetPeriod.MONTHLY,
                start_date=self._clock(),
                currency=self._settings.default_currency,
            ),
        )

    # -------------------------------------------------------------------------
    # Category resolution
    # -------------------------------------------------------------------------

    def _category_label(
        self,
        text: str,
        rules: list[CategoryRule],
        fallback: Optional[str],
    ) -> Optional[str]:
        rule = first_match(rules, text.lower())
        return rule.category if rule else fallback

    def _category_id(self, category: Optional[Category]) -> int:
        if category is not None and category.id:
            return category.id
        return self._settings.default_category_id


def find_category(
    categories: Iterable[Category],
    label: Optional[str],
    category_type: CategoryType,
) -> Optional[Category]:
    """
    Category of `category_type` named `label`.

    An exact (case-insensitive) name wins; otherwise the first category
    whose name starts with the label, so "Food" finds "Food & Dining".
    """
    if not label:
        return None

    candidates = [c for c in categories if c.type == category_type]
    wanted = label.strip().lower()

    for category in candidates:
        if category.name.lower() == wanted:
            return category
    for category in candidates:
        if category.name.lower().startswith(wanted):
            return category
    return None


def first_of_type(
    categories: Iterable[Category],
    category_type: CategoryType,
) -> Optional[Category]:
    return next((c for c in categories if c.type == category_type), None)
