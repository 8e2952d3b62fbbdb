"""
SQLAlchemy table models for users, books, quizzes and quiz submissions.

Question and answer payloads are stored as JSON; their shape is enforced by
the question handlers, not by the database.

The (student_id, book_id, attempt) unique constraint on quiz_submissions makes
two concurrent submissions for the same attempt slot impossible: the second
insert fails instead of sneaking past the attempt limit.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(Text, default="")
    initial_lexile_measure: Mapped[float | None] = mapped_column(Float)
    genre_interests: Mapped[dict] = mapped_column(JSON, default=dict)

    def __repr__(self) -> str:
        return f"<UserRow(id={self.id}, type={self.type})>"


class BookRow(Base):
    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(Text, default="")
    genres: Mapped[list] = mapped_column(JSON, default=list)
    amazon_popularity: Mapped[float] = mapped_column(Float, default=0.0)
    lexile_measure: Mapped[float | None] = mapped_column(Float)

    def __repr__(self) -> str:
        return f"<BookRow(id={self.id}, title={self.title!r})>"


class QuizRow(Base):
    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    # NULL book_id marks the generic fallback quiz
    book_id: Mapped[str | None] = mapped_column(String(32), index=True)
    questions: Mapped[list] = mapped_column(JSON, nullable=False)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<QuizRow(id={self.id}, book_id={self.book_id})>"


class QuizSubmissionRow(Base):
    __tablename__ = "quiz_submissions"
    __table_args__ = (
        UniqueConstraint("student_id", "book_id", "attempt", name="uq_submission_attempt"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    quiz_id: Mapped[str] = mapped_column(String(32), nullable=False)
    student_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    book_id: Mapped[str] = mapped_column(String(32), nullable=False)
    attempt: Mapped[int] = mapped_column(Integer, nullable=False)
    answers: Mapped[list] = mapped_column(JSON, nullable=False)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    comprehension: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<QuizSubmissionRow(id={self.id}, score={self.score}, passed={self.passed})>"
