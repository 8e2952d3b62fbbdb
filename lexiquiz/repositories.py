"""
Repository contracts consumed by the quiz service, plus an in-memory adapter.

The core never talks to storage directly; it reads point-in-time snapshots
through these protocols. ``lexiquiz.db.repositories`` provides a SQLAlchemy
implementation of the same contracts.
"""

from __future__ import annotations

from typing import Protocol

from lexiquiz.errors import PolicyReason, PolicyViolationError
from lexiquiz.models import Book, Quiz, QuizSubmission, User


class UserRepository(Protocol):
    def get_user(self, user_id: str) -> User | None: ...


class BookRepository(Protocol):
    def get_book(self, book_id: str) -> Book | None: ...

    def list_books(self) -> list[Book]: ...


class QuizRepository(Protocol):
    def get_quiz(self, quiz_id: str) -> Quiz | None: ...

    def get_quiz_for_book(self, book_id: str) -> Quiz | None: ...

    def get_generic_quiz(self) -> Quiz | None: ...

    def create_quiz(self, quiz: Quiz) -> Quiz: ...

    def update_quiz(self, quiz: Quiz) -> Quiz | None:
        """Replace a stored quiz. Returns None if it no longer exists."""
        ...

    def delete_quiz(self, quiz_id: str) -> Quiz | None:
        """Remove a quiz. Returns the removed quiz, or None if absent."""
        ...

    def list_quizzes(self) -> list[Quiz]: ...


class SubmissionRepository(Protocol):
    def get_submission(self, submission_id: str) -> QuizSubmission | None: ...

    def list_submissions_for_student(self, student_id: str) -> list[QuizSubmission]: ...

    def create_submission(self, submission: QuizSubmission) -> QuizSubmission:
        """
        Store a new submission.

        Raises:
            PolicyViolationError: If an attempt with the same
                (student_id, book_id, attempt) already exists
        """
        ...

    def update_submission(self, submission: QuizSubmission) -> QuizSubmission | None:
        """Persist a comprehension change. Returns None if it no longer exists."""
        ...


# ========================================
# In-memory adapter
# ========================================


class InMemoryStore:
    """Dict-backed implementation of all four repositories.

    Quizzes and submissions are stored as deep copies, so callers cannot
    change stored records except through update calls.
    """

    def __init__(
        self,
        users: list[User] | None = None,
        books: list[Book] | None = None,
        quizzes: list[Quiz] | None = None,
        submissions: list[QuizSubmission] | None = None,
    ):
        self.users: dict[str, User] = {u.id: u for u in users or []}
        self.books: dict[str, Book] = {b.id: b for b in books or []}
        self.quizzes: dict[str, Quiz] = {q.id: q for q in quizzes or []}
        self.submissions: dict[str, QuizSubmission] = {s.id: s for s in submissions or []}

    # users

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    # books

    def get_book(self, book_id: str) -> Book | None:
        return self.books.get(book_id)

    def list_books(self) -> list[Book]:
        return list(self.books.values())

    def add_book(self, book: Book) -> Book:
        self.books[book.id] = book
        return book

    # quizzes

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        return self.quizzes.get(quiz_id)

    def get_quiz_for_book(self, book_id: str) -> Quiz | None:
        return next((q for q in self.quizzes.values() if q.book_id == book_id), None)

    def get_generic_quiz(self) -> Quiz | None:
        return next((q for q in self.quizzes.values() if q.book_id is None), None)

    def create_quiz(self, quiz: Quiz) -> Quiz:
        self.quizzes[quiz.id] = quiz.model_copy(deep=True)
        return quiz

    def update_quiz(self, quiz: Quiz) -> Quiz | None:
        if quiz.id not in self.quizzes:
            return None
        self.quizzes[quiz.id] = quiz.model_copy(deep=True)
        return quiz

    def delete_quiz(self, quiz_id: str) -> Quiz | None:
        return self.quizzes.pop(quiz_id, None)

    def list_quizzes(self) -> list[Quiz]:
        return list(self.quizzes.values())

    # submissions

    def get_submission(self, submission_id: str) -> QuizSubmission | None:
        return self.submissions.get(submission_id)

    def list_submissions_for_student(self, student_id: str) -> list[QuizSubmission]:
        return [s for s in self.submissions.values() if s.student_id == student_id]

    def create_submission(self, submission: QuizSubmission) -> QuizSubmission:
        for existing in self.submissions.values():
            if (existing.student_id, existing.book_id, existing.attempt) == (
                submission.student_id,
                submission.book_id,
                submission.attempt,
            ):
                raise PolicyViolationError(
                    f"Attempt {submission.attempt} for book {submission.book_id} was already recorded",
                    PolicyReason.CONCURRENT_ATTEMPT,
                )
        self.submissions[submission.id] = submission.model_copy(deep=True)
        return submission

    def update_submission(self, submission: QuizSubmission) -> QuizSubmission | None:
        if submission.id not in self.submissions:
            return None
        self.submissions[submission.id] = submission.model_copy(deep=True)
        return submission
