"""
Multiple choice question handler.

- Question lists its options and the index of the single correct one.
- Answer is the index the student picked.
"""

from typing import Annotated, Any

from pydantic import Field, StrictInt, StrictStr, TypeAdapter, model_validator

from . import QuestionType, register
from .base import QuestionModel, SchemaHandler


class MultipleChoiceQuestion(QuestionModel):
    options: list[StrictStr] = Field(min_length=2)
    correct_index: StrictInt = Field(ge=0)

    @model_validator(mode="after")
    def _correct_index_in_range(self):
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} is out of range for {len(self.options)} options"
            )
        return self


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceHandler(SchemaHandler):
    """Handler for single-answer multiple choice questions."""

    question_model = MultipleChoiceQuestion
    answer_adapter = TypeAdapter(Annotated[StrictInt, Field(ge=0)])

    def score(self, question: dict, answer: Any) -> float:
        parsed = self.parse(question)
        return 1.0 if answer == parsed.correct_index else 0.0
