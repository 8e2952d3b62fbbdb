"""
Base protocol and shared helpers for question handlers.
"""

from __future__ import annotations

import re
from typing import Any, ClassVar, Protocol

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    def validate(self, question: dict) -> str | None:
        """Check a question definition. Returns an error message or None."""
        ...

    def validate_answer(self, answer: Any) -> str | None:
        """Check an answer's shape. Returns an error message or None."""
        ...

    def score(self, question: dict, answer: Any) -> float:
        """Correctness of a validated answer, 1.0 or 0.0."""
        ...


class QuestionModel(BaseModel):
    """Fields shared by every question type. Unknown extra fields are kept."""

    model_config = ConfigDict(extra="allow")

    type: StrictStr
    prompt: StrictStr = Field(min_length=1)


def describe_validation_error(exc: ValidationError) -> str:
    """
    Reduce a pydantic error to one short client-facing message.

    Clients should not receive a raw pydantic dump, just something like
    'Invalid/missing field options: List should have at least 2 items'.
    """
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first["loc"])
    if not loc:
        return f"Invalid value: {first['msg']}"
    return f"Invalid/missing field {loc}: {first['msg']}"


_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    """Casefold and collapse runs of whitespace."""
    return _WHITESPACE.sub(" ", value).strip().casefold()


class SchemaHandler:
    """
    Handler whose checks are driven by a pydantic question model and an answer adapter.

    Subclasses set ``question_model`` / ``answer_adapter`` and implement ``score``.
    """

    question_model: ClassVar[type[QuestionModel]]
    answer_adapter: ClassVar[TypeAdapter]

    def validate(self, question: dict) -> str | None:
        try:
            self.question_model.model_validate(question)
        except ValidationError as e:
            return describe_validation_error(e)
        return None

    def validate_answer(self, answer: Any) -> str | None:
        try:
            self.answer_adapter.validate_python(answer)
        except ValidationError as e:
            return describe_validation_error(e)
        return None

    def parse(self, question: dict) -> QuestionModel:
        return self.question_model.model_validate(question)

    def score(self, question: dict, answer: Any) -> float:
        raise NotImplementedError
