"""
Short answer handler.

Free text graded against a list of accepted values. Matching ignores case
and differences in whitespace ("  The  Giver" matches "the giver").
"""

from typing import Any

from pydantic import Field, StrictStr, TypeAdapter, field_validator

from . import QuestionType, register
from .base import QuestionModel, SchemaHandler, normalize_text


class ShortAnswerQuestion(QuestionModel):
    accepted_values: list[StrictStr] = Field(min_length=1)

    @field_validator("accepted_values")
    @classmethod
    def _no_blank_values(cls, values: list[str]) -> list[str]:
        if any(not v.strip() for v in values):
            raise ValueError("accepted values must not be blank")
        return values


@register(QuestionType.SHORT_ANSWER)
class ShortAnswerHandler(SchemaHandler):
    """Handler for free-text short answer questions."""

    question_model = ShortAnswerQuestion
    answer_adapter = TypeAdapter(StrictStr)

    def score(self, question: dict, answer: Any) -> float:
        parsed = self.parse(question)
        accepted = {normalize_text(v) for v in parsed.accepted_values}
        return 1.0 if normalize_text(answer) in accepted else 0.0
