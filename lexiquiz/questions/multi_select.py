"""
Multi-select question handler.

The student must pick exactly the set of correct options. There is no
partial credit: a missing or an extra selection scores 0.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, Field, StrictInt, StrictStr, TypeAdapter, field_validator, model_validator

from . import QuestionType, register
from .base import QuestionModel, SchemaHandler

Indices = list[Annotated[StrictInt, Field(ge=0)]]


def _unique(indices: list[int]) -> list[int]:
    if len(set(indices)) != len(indices):
        raise ValueError("indices must not repeat")
    return indices


class MultiSelectQuestion(QuestionModel):
    options: list[StrictStr] = Field(min_length=2)
    correct_indices: Indices = Field(min_length=1)

    @field_validator("correct_indices")
    @classmethod
    def _unique_correct(cls, indices: list[int]) -> list[int]:
        return _unique(indices)

    @model_validator(mode="after")
    def _correct_indices_in_range(self):
        out_of_range = [i for i in self.correct_indices if i >= len(self.options)]
        if out_of_range:
            raise ValueError(
                f"correct_indices {out_of_range} are out of range for {len(self.options)} options"
            )
        return self


@register(QuestionType.MULTI_SELECT)
class MultiSelectHandler(SchemaHandler):
    """Handler for questions with several correct options."""

    question_model = MultiSelectQuestion
    answer_adapter = TypeAdapter(Annotated[Indices, AfterValidator(_unique)])

    def score(self, question: dict, answer: Any) -> float:
        parsed = self.parse(question)
        return 1.0 if set(answer) == set(parsed.correct_indices) else 0.0
