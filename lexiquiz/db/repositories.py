"""
SQLAlchemy-backed repositories.

One ``SqlStore`` implements the user, book, quiz and submission contracts
from ``lexiquiz.repositories``; each call runs in its own transaction.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from lexiquiz.db.database import session_scope
from lexiquiz.db.models import BookRow, QuizRow, QuizSubmissionRow, UserRow
from lexiquiz.errors import PolicyReason, PolicyViolationError
from lexiquiz.models import Book, Quiz, QuizSubmission, User


def _user(row: UserRow) -> User:
    return User(
        id=row.id,
        type=row.type,
        name=row.name or "",
        initial_lexile_measure=row.initial_lexile_measure,
        genre_interests=row.genre_interests or {},
    )


def _book(row: BookRow) -> Book:
    return Book(
        id=row.id,
        title=row.title or "",
        genres=row.genres or [],
        amazon_popularity=row.amazon_popularity,
        lexile_measure=row.lexile_measure,
    )


def _quiz(row: QuizRow) -> Quiz:
    return Quiz(id=row.id, book_id=row.book_id, questions=row.questions, date_created=row.date_created)


def _submission(row: QuizSubmissionRow) -> QuizSubmission:
    return QuizSubmission(
        id=row.id,
        quiz_id=row.quiz_id,
        student_id=row.student_id,
        book_id=row.book_id,
        answers=row.answers,
        date_created=row.date_created,
        score=row.score,
        passed=row.passed,
        attempt=row.attempt,
        comprehension=row.comprehension,
    )


class SqlStore:
    """Repository adapter over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._factory = session_factory

    # users

    def get_user(self, user_id: str) -> User | None:
        with session_scope(self._factory) as session:
            row = session.get(UserRow, user_id)
            return _user(row) if row else None

    def add_user(self, user: User) -> User:
        with session_scope(self._factory) as session:
            session.merge(
                UserRow(
                    id=user.id,
                    type=user.type.value,
                    name=user.name,
                    initial_lexile_measure=user.initial_lexile_measure,
                    genre_interests=dict(user.genre_interests),
                )
            )
        return user

    # books

    def get_book(self, book_id: str) -> Book | None:
        with session_scope(self._factory) as session:
            row = session.get(BookRow, book_id)
            return _book(row) if row else None

    def list_books(self) -> list[Book]:
        with session_scope(self._factory) as session:
            return [_book(row) for row in session.scalars(select(BookRow).order_by(BookRow.id))]

    def add_book(self, book: Book) -> Book:
        with session_scope(self._factory) as session:
            session.merge(
                BookRow(
                    id=book.id,
                    title=book.title,
                    genres=list(book.genres),
                    amazon_popularity=book.amazon_popularity,
                    lexile_measure=book.lexile_measure,
                )
            )
        return book

    # quizzes

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        with session_scope(self._factory) as session:
            row = session.get(QuizRow, quiz_id)
            return _quiz(row) if row else None

    def get_quiz_for_book(self, book_id: str) -> Quiz | None:
        with session_scope(self._factory) as session:
            row = session.scalars(
                select(QuizRow).where(QuizRow.book_id == book_id).order_by(QuizRow.date_created)
            ).first()
            return _quiz(row) if row else None

    def get_generic_quiz(self) -> Quiz | None:
        with session_scope(self._factory) as session:
            row = session.scalars(
                select(QuizRow).where(QuizRow.book_id.is_(None)).order_by(QuizRow.date_created)
            ).first()
            return _quiz(row) if row else None

    def create_quiz(self, quiz: Quiz) -> Quiz:
        with session_scope(self._factory) as session:
            session.add(
                QuizRow(
                    id=quiz.id,
                    book_id=quiz.book_id,
                    questions=quiz.questions,
                    date_created=quiz.date_created,
                )
            )
        return quiz

    def update_quiz(self, quiz: Quiz) -> Quiz | None:
        with session_scope(self._factory) as session:
            row = session.get(QuizRow, quiz.id)
            if row is None:
                return None
            row.book_id = quiz.book_id
            row.questions = quiz.questions
            row.date_created = quiz.date_created
        return quiz

    def delete_quiz(self, quiz_id: str) -> Quiz | None:
        with session_scope(self._factory) as session:
            row = session.get(QuizRow, quiz_id)
            if row is None:
                return None
            deleted = _quiz(row)
            session.delete(row)
        return deleted

    def list_quizzes(self) -> list[Quiz]:
        with session_scope(self._factory) as session:
            return [_quiz(row) for row in session.scalars(select(QuizRow).order_by(QuizRow.date_created))]

    # submissions

    def get_submission(self, submission_id: str) -> QuizSubmission | None:
        with session_scope(self._factory) as session:
            row = session.get(QuizSubmissionRow, submission_id)
            return _submission(row) if row else None

    def list_submissions_for_student(self, student_id: str) -> list[QuizSubmission]:
        with session_scope(self._factory) as session:
            rows = session.scalars(
                select(QuizSubmissionRow)
                .where(QuizSubmissionRow.student_id == student_id)
                .order_by(QuizSubmissionRow.date_created)
            )
            return [_submission(row) for row in rows]

    def create_submission(self, submission: QuizSubmission) -> QuizSubmission:
        try:
            with session_scope(self._factory) as session:
                session.add(
                    QuizSubmissionRow(
                        id=submission.id,
                        quiz_id=submission.quiz_id,
                        student_id=submission.student_id,
                        book_id=submission.book_id,
                        attempt=submission.attempt,
                        answers=submission.answers,
                        date_created=submission.date_created,
                        score=submission.score,
                        passed=submission.passed,
                        comprehension=submission.comprehension,
                    )
                )
        except IntegrityError as e:
            logger.warning(f"Rejected duplicate attempt slot for {submission.student_id}: {e.orig}")
            raise PolicyViolationError(
                f"Attempt {submission.attempt} for book {submission.book_id} was already recorded",
                PolicyReason.CONCURRENT_ATTEMPT,
            ) from e
        return submission

    def update_submission(self, submission: QuizSubmission) -> QuizSubmission | None:
        with session_scope(self._factory) as session:
            row = session.get(QuizSubmissionRow, submission.id)
            if row is None:
                return None
            row.comprehension = submission.comprehension
        return submission
