"""
Question type handlers for quiz authoring and grading.

Each question type has its own module whose handler provides:
- validate(): Check a question definition against the type's schema
- validate_answer(): Check a submitted answer's shape
- score(): Correctness of an already-validated answer

Adding a type means adding a module with a @register'ed handler and an
entry in QuestionType; existing handlers are untouched.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import QuestionHandler


class QuestionType(str, Enum):
    """Supported question types."""
    MULTIPLE_CHOICE = "multiple_choice"
    MULTI_SELECT = "multi_select"
    SHORT_ANSWER = "short_answer"
    TRUE_FALSE = "true_false"


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: Any) -> "QuestionHandler | None":
    """Get the handler for a question type tag, or None if unknown."""
    if isinstance(question_type, QuestionType):
        return HANDLERS.get(question_type)
    if not isinstance(question_type, str):
        return None
    try:
        question_type = QuestionType(question_type)
    except ValueError:
        return None
    return HANDLERS.get(question_type)


def validate_question_definition(question: Any) -> str | None:
    """
    Check a question definition against the schema of its type.

    Returns:
        None if valid, otherwise a short error message.
    """
    if not isinstance(question, dict):
        return "Question must be an object"
    if "type" not in question:
        return "Invalid/missing field type"
    handler = get_handler(question["type"])
    if handler is None:
        return f"Unknown question type '{question['type']}'"
    return handler.validate(question)


def validate_answer(question_type: Any, answer: Any) -> str | None:
    """
    Check an answer's shape against what its question type expects.

    Returns:
        None if valid, otherwise a short error message.
    """
    handler = get_handler(question_type)
    if handler is None:
        return f"Unknown question type '{question_type}'"
    return handler.validate_answer(answer)


# Import handlers to trigger registration
from . import multiple_choice
from . import multi_select
from . import short_answer
from . import true_false

__all__ = [
    "QuestionType",
    "HANDLERS",
    "get_handler",
    "register",
    "validate_question_definition",
    "validate_answer",
]
