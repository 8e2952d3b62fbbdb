"""
Quiz service: orchestrates repositories around the pure quiz core.

Each operation fetches a snapshot from the repositories, hands it to the
core (registry, grader, eligibility policy, calibrator, match scorer) and
writes back the result. Failures surface as ``lexiquiz.errors`` exceptions.

Check-then-create on submissions is not locked here; the submission
repository rejects a second write for the same attempt slot.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from lexiquiz.calibration import compute_current_lexile_measure
from lexiquiz.eligibility import QuizPolicy, admit_submission
from lexiquiz.errors import (
    InvalidInputError,
    NotModifiedError,
    PolicyReason,
    PolicyViolationError,
    ReferenceNotFoundError,
)
from lexiquiz.models import (
    Book,
    BookReview,
    Principal,
    Quiz,
    QuizDraft,
    QuizSubmission,
    SubmissionRequest,
    UserType,
    new_id,
    utcnow,
)
from lexiquiz.questions import validate_question_definition
from lexiquiz.recommendation import recommend_books
from lexiquiz.repositories import (
    BookRepository,
    QuizRepository,
    SubmissionRepository,
    UserRepository,
)

COMPREHENSION_RATINGS = (1, 2, 3, 4, 5)


class QuizService:
    """Quiz authoring, submission and reading-level operations."""

    def __init__(
        self,
        users: UserRepository,
        books: BookRepository,
        quizzes: QuizRepository,
        submissions: SubmissionRepository,
        policy: QuizPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
        default_lexile_measure: float = 500,
        recommendation_limit: int = 10,
    ):
        self.users = users
        self.books = books
        self.quizzes = quizzes
        self.submissions = submissions
        self.policy = policy or QuizPolicy()
        self.clock = clock
        self.default_lexile_measure = default_lexile_measure
        self.recommendation_limit = recommendation_limit

    @classmethod
    def from_settings(cls, users, books, quizzes, submissions, settings=None, clock=utcnow) -> QuizService:
        """Wire a service over the given repositories using application settings."""
        if settings is None:
            from config import get_settings
            settings = get_settings()
        return cls(
            users,
            books,
            quizzes,
            submissions,
            policy=QuizPolicy.from_settings(settings),
            clock=clock,
            default_lexile_measure=settings.default_lexile_measure,
            recommendation_limit=settings.recommendation_limit,
        )

    # ========================================
    # Quiz authoring
    # ========================================

    def _check_quiz_body(self, draft: QuizDraft) -> None:
        count = len(draft.questions)
        if not self.policy.min_questions_in_quiz <= count <= self.policy.max_questions_in_quiz:
            raise InvalidInputError(
                f"A quiz must have between {self.policy.min_questions_in_quiz} and "
                f"{self.policy.max_questions_in_quiz} questions, got {count}"
            )

        if draft.book_id is not None and self.books.get_book(draft.book_id) is None:
            raise ReferenceNotFoundError(f"No book with id {draft.book_id} exists")

        for question in draft.questions:
            error = validate_question_definition(question)
            if error is not None:
                raise InvalidInputError(
                    f"Question with prompt '{question.get('prompt')}' is not a valid "
                    f"{question.get('type')} question. Error: {error}"
                )

    def create_quiz(self, draft: QuizDraft) -> Quiz:
        self._check_quiz_body(draft)
        quiz = Quiz(
            id=new_id(),
            questions=copy.deepcopy(draft.questions),
            book_id=draft.book_id,
            date_created=self.clock(),
        )
        created = self.quizzes.create_quiz(quiz)
        logger.info(f"Created quiz {created.id} with {len(created.questions)} questions (book={created.book_id})")
        return created

    def update_quiz(self, quiz: Quiz) -> Quiz:
        """Replace a quiz in full. Its id is kept."""
        self._check_quiz_body(quiz)
        updated = self.quizzes.update_quiz(quiz)
        if updated is None:
            raise NotModifiedError(f"No quiz was updated: quiz {quiz.id} does not exist")
        logger.info(f"Updated quiz {quiz.id}")
        return updated

    def delete_quiz(self, quiz_id: str) -> Quiz:
        deleted = self.quizzes.delete_quiz(quiz_id)
        if deleted is None:
            raise NotModifiedError(f"No quiz was deleted: quiz {quiz_id} does not exist")
        logger.info(f"Deleted quiz {quiz_id}")
        return deleted

    def list_quizzes(self) -> list[Quiz]:
        return self.quizzes.list_quizzes()

    def get_quiz_for_book(self, book_id: str) -> Quiz:
        """The quiz bound to a book, falling back to the generic quiz."""
        quiz = self.quizzes.get_quiz_for_book(book_id)
        if quiz is not None:
            return quiz
        generic = self.quizzes.get_generic_quiz()
        if generic is None:
            raise ReferenceNotFoundError(f"No quiz exists for book {book_id} and no generic quiz is defined")
        return generic

    # ========================================
    # Submissions
    # ========================================

    def get_submissions_for_student(self, student_id: str) -> list[QuizSubmission]:
        return self.submissions.list_submissions_for_student(student_id)

    def submit_quiz(self, actor: Principal, request: SubmissionRequest) -> QuizSubmission:
        """Check eligibility, grade and store a quiz attempt."""
        student = self.users.get_user(request.student_id)
        book = self.books.get_book(request.book_id)
        quiz = self.quizzes.get_quiz(request.quiz_id)
        history = tuple(self.submissions.list_submissions_for_student(request.student_id))

        try:
            submission = admit_submission(
                request,
                actor=actor,
                student=student,
                book=book,
                quiz=quiz,
                history=history,
                policy=self.policy,
                now=self.clock(),
            )
        except PolicyViolationError as e:
            logger.warning(f"Submission by {request.student_id} for book {request.book_id} rejected: {e.reason.value}")
            raise

        created = self.submissions.create_submission(submission)
        logger.info(
            f"Recorded submission {created.id}: student={created.student_id} book={created.book_id} "
            f"attempt={created.attempt} score={created.score} passed={created.passed}"
        )
        return created

    def set_comprehension(self, actor: Principal, submission_id: str, comprehension: int) -> QuizSubmission:
        """Record the student's 1-5 comprehension rating on one of their submissions."""
        if (
            not isinstance(comprehension, int)
            or isinstance(comprehension, bool)
            or comprehension not in COMPREHENSION_RATINGS
        ):
            raise InvalidInputError("Invalid/missing field comprehension")

        submission = self.submissions.get_submission(submission_id)
        if submission is None:
            raise ReferenceNotFoundError(f"Quiz submission with id {submission_id} does not exist.")

        if actor.type == UserType.STUDENT and actor.id != submission.student_id:
            raise PolicyViolationError(
                "Students cannot update comprehension for submissions by other students",
                PolicyReason.CROSS_STUDENT,
            )

        if submission.comprehension is not None:
            raise PolicyViolationError(
                f"Comprehension for submission {submission_id} was already recorded",
                PolicyReason.COMPREHENSION_ALREADY_SET,
            )

        updated = self.submissions.update_submission(submission.model_copy(update={"comprehension": comprehension}))
        if updated is None:
            raise NotModifiedError(f"Quiz submission {submission_id} was removed before it could be updated")
        logger.info(f"Set comprehension {comprehension} on submission {submission_id}")
        return updated

    # ========================================
    # Reading level & recommendations
    # ========================================

    def get_book_reviews(self, student_id: str) -> list[BookReview]:
        """Rated submissions whose book has a Lexile measure, as book reviews."""
        reviews = []
        books: dict[str, Book | None] = {}
        for submission in self.submissions.list_submissions_for_student(student_id):
            if submission.comprehension is None:
                continue
            if submission.book_id not in books:
                books[submission.book_id] = self.books.get_book(submission.book_id)
            book = books[submission.book_id]
            if book is None or book.lexile_measure is None:
                continue
            reviews.append(
                BookReview(
                    book_lexile_measure=book.lexile_measure,
                    comprehension=submission.comprehension,
                    date_submitted=submission.date_created,
                )
            )
        return reviews

    def current_lexile_measure(self, student_id: str) -> float:
        student = self.users.get_user(student_id)
        if student is None:
            raise ReferenceNotFoundError(f"User {student_id} does not exist.")
        initial = student.initial_lexile_measure
        if initial is None:
            initial = self.default_lexile_measure
        return compute_current_lexile_measure(initial, self.get_book_reviews(student_id))

    def recommend_books(self, student_id: str, limit: int | None = None) -> list[tuple[Book, float]]:
        student = self.users.get_user(student_id)
        if student is None:
            raise ReferenceNotFoundError(f"User {student_id} does not exist.")
        measure = self.current_lexile_measure(student_id)
        if limit is None:
            limit = self.recommendation_limit
        return recommend_books(student.genre_interests, measure, self.books.list_books(), limit=limit)
