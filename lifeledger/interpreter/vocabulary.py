"""
Keyword Vocabulary for the Command Interpreter

DESIGN DECISION: Every keyword the interpreter reacts to lives in this data
model rather than in code. The built-in vocabulary reproduces the English
phrasing the app ships with; a JSON file with the same shape can replace it
(see InterpreterSettings.vocabulary_path).

Order matters everywhere: rules are evaluated top to bottom and the first
match wins. There is no scoring across rules.
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

from lifeledger.models.commands import CommandIntent
from lifeledger.models.ledger import DIARY_TITLE_MAX_LENGTH, Mood, TaskPriority


class KeywordRule(BaseModel):
    """Matches when any keyword is a substring of the lowercased text."""

    keywords: list[str] = Field(..., min_length=1)

    def matches(self, lowered_text: str) -> bool:
        return any(keyword.lower() in lowered_text for keyword in self.keywords)


class IntentRule(KeywordRule):
    intent: CommandIntent


class CategoryRule(KeywordRule):
    category: str = Field(
        ...,
        description="Category name (or name prefix) the keywords point to"
    )


class MoodRule(KeywordRule):
    mood: Mood


class PriorityRule(KeywordRule):
    priority: TaskPriority


class DueDateRule(KeywordRule):
    days_ahead: int = Field(..., ge=0)


def first_match(rules: list, lowered_text: str):
    """First rule matching the text, or None."""
    for rule in rules:
        if rule.matches(lowered_text):
            return rule
    return None


class InterpreterVocabulary(BaseModel):
    """All keyword data the interpreter uses."""

    intents: list[IntentRule] = Field(default_factory=lambda: [
        IntentRule(intent=CommandIntent.TASK, keywords=["task", "todo", "to do"]),
        IntentRule(intent=CommandIntent.EXPENSE, keywords=["spent", "paid", "expense"]),
        IntentRule(
            intent=CommandIntent.INCOME,
            keywords=["received", "earned", "income", "salary"],
        ),
        IntentRule(
            intent=CommandIntent.DIARY,
            keywords=["feel", "diary", "journal", "today was"],
        ),
        IntentRule(intent=CommandIntent.BUDGET, keywords=["budget", "set budget"]),
    ])

    # Amounts: an integer immediately followed by one of these words
    currency_words: list[str] = Field(
        default_factory=lambda: ["rupees", "rs", "dollars", "$"],
        min_length=1,
    )

    expense_categories: list[CategoryRule] = Field(default_factory=lambda: [
        CategoryRule(category="Food", keywords=["food", "lunch", "dinner"]),
        CategoryRule(category="Transportation", keywords=["transport", "uber", "taxi"]),
        CategoryRule(category="Shopping", keywords=["shopping", "clothes"]),
        CategoryRule(category="Entertainment", keywords=["entertainment", "movie"]),
    ])
    expense_fallback: Optional[str] = "Other"

    income_categories: list[CategoryRule] = Field(default_factory=lambda: [
        CategoryRule(category="Freelance", keywords=["freelance", "project"]),
        CategoryRule(category="Investment", keywords=["investment", "dividend"]),
    ])
    income_fallback: Optional[str] = "Salary"

    budget_categories: list[CategoryRule] = Field(default_factory=lambda: [
        CategoryRule(category="Food", keywords=["food", "groceries"]),
        CategoryRule(category="Transportation", keywords=["transport"]),
        CategoryRule(category="Entertainment", keywords=["entertainment"]),
    ])
    budget_fallback: Optional[str] = None

    # Tasks
    task_title_marker: str = "task is to"
    task_title_stop_words: list[str] = Field(
        default_factory=lambda: ["with", "deadline", "priority"]
    )
    priorities: list[PriorityRule] = Field(default_factory=lambda: [
        PriorityRule(priority=TaskPriority.HIGH, keywords=["high priority", "urgent"]),
        PriorityRule(priority=TaskPriority.LOW, keywords=["low priority"]),
    ])
    default_priority: TaskPriority = TaskPriority.MEDIUM
    due_dates: list[DueDateRule] = Field(default_factory=lambda: [
        DueDateRule(keywords=["today"], days_ahead=0),
        DueDateRule(keywords=["tomorrow"], days_ahead=1),
        DueDateRule(keywords=["next week"], days_ahead=7),
    ])

    # Diary
    moods: list[MoodRule] = Field(default_factory=lambda: [
        MoodRule(mood=Mood.GREAT, keywords=["great", "amazing", "wonderful", "excellent"]),
        MoodRule(mood=Mood.GOOD, keywords=["good", "happy", "nice"]),
        MoodRule(mood=Mood.BAD, keywords=["bad", "sad", "difficult"]),
        MoodRule(mood=Mood.TERRIBLE, keywords=["terrible", "awful", "horrible"]),
    ])
    default_mood: Mood = Mood.OKAY
    diary_title_words: int = Field(default=5, ge=1)
    # room for the "..." suffix
    diary_title_max_length: int = Field(default=30, ge=1, le=DIARY_TITLE_MAX_LENGTH - 3)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InterpreterVocabulary":
        """Load a vocabulary from a JSON file; omitted sections keep their defaults."""
        with open(path, encoding="utf-8") as handle:
            return cls.model_validate(json.load(handle))
