"""Natural-language command interpreter."""

from lifeledger.interpreter.parser import (
    CommandInterpreter,
    find_category,
    first_of_type,
)
from lifeledger.interpreter.vocabulary import (
    CategoryRule,
    DueDateRule,
    IntentRule,
    InterpreterVocabulary,
    KeywordRule,
    MoodRule,
    PriorityRule,
)

__all__ = [
    "CategoryRule",
    "CommandInterpreter",
    "DueDateRule",
    "IntentRule",
    "InterpreterVocabulary",
    "KeywordRule",
    "MoodRule",
    "PriorityRule",
    "find_category",
    "first_of_type",
]
