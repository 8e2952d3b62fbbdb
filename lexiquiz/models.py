"""
Domain models for quizzes, submissions, books and students.

Questions and answers stay loosely typed (plain dicts / Any) on these models:
their shape depends on the question type and is checked by the handler
registry in ``lexiquiz.questions``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictInt, TypeAdapter

GenreInterest = Annotated[StrictInt, Field(ge=1, le=4)]
GenreInterestMap = dict[str, GenreInterest]

genre_interests_adapter = TypeAdapter(GenreInterestMap)

NEUTRAL_GENRE_INTEREST = 3


def new_id() -> str:
    """Generate a short opaque identifier for new entities."""
    return uuid4().hex[:12]


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Convert to UTC. Naive datetimes (e.g. read back from SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class UserType(str, Enum):
    """Roles a principal can act under."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class Principal(BaseModel):
    """The identity performing an operation."""

    id: str
    type: UserType


class User(BaseModel):
    id: str
    type: UserType
    name: str = ""
    initial_lexile_measure: float | None = None
    genre_interests: GenreInterestMap = Field(default_factory=dict)


class Book(BaseModel):
    id: str
    title: str = ""
    genres: list[str] = Field(default_factory=list)
    amazon_popularity: float = Field(default=0.0, ge=0, le=5)
    lexile_measure: float | None = None


class QuizDraft(BaseModel):
    """Authoring payload for a quiz before it is stored."""

    model_config = ConfigDict(extra="ignore")

    questions: list[dict[str, Any]]
    book_id: str | None = None


class Quiz(QuizDraft):
    """A stored quiz. Generic when ``book_id`` is None."""

    id: str
    date_created: UtcDatetime


class SubmissionRequest(BaseModel):
    """A student's answers to a quiz, as received from a caller."""

    quiz_id: str
    student_id: str
    book_id: str
    answers: list[Any]


class QuizSubmission(BaseModel):
    """A graded attempt. Created once; only ``comprehension`` changes later."""

    id: str
    quiz_id: str
    student_id: str
    book_id: str
    answers: list[Any]
    date_created: UtcDatetime
    score: int = Field(ge=0, le=100)
    passed: bool
    attempt: int = Field(default=1, ge=1)
    comprehension: int | None = Field(default=None, ge=1, le=5)


class BookReview(BaseModel):
    """A student's comprehension rating of a book they were quizzed on."""

    book_lexile_measure: float
    comprehension: int = Field(ge=1, le=5)
    date_submitted: UtcDatetime


class LexileRange(BaseModel):
    min: float
    max: float

    def contains(self, measure: float) -> bool:
        return self.min <= measure <= self.max
