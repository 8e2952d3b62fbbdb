"""
True/False question handler.
"""

from typing import Any

from pydantic import StrictBool, TypeAdapter

from . import QuestionType, register
from .base import QuestionModel, SchemaHandler


class TrueFalseQuestion(QuestionModel):
    correct: StrictBool


@register(QuestionType.TRUE_FALSE)
class TrueFalseHandler(SchemaHandler):
    """Handler for true/false statements."""

    question_model = TrueFalseQuestion
    answer_adapter = TypeAdapter(StrictBool)

    def score(self, question: dict, answer: Any) -> float:
        return 1.0 if answer is self.parse(question).correct else 0.0
