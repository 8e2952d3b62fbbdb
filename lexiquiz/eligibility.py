"""
Submission eligibility policy.

Decides whether a student may submit a quiz attempt for a book, given a
point-in-time snapshot of their submission history. Checks run in a fixed
order and the first failure wins:

1. identity       - students submit only for themselves
2. existence      - student (with the student role), book and quiz exist
3. cooldown       - pacing since the most recent submission for ANY book
4. already passed - no retakes of a book already passed
5. attempts       - at most ``max_quiz_attempts`` per book
6. shape          - one answer per question
7. answer schema  - each answer fits its question's type

The cooldown is platform-wide while the pass/attempt limits are per book.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from lexiquiz.errors import (
    InvalidInputError,
    PolicyReason,
    PolicyViolationError,
    ReferenceNotFoundError,
)
from lexiquiz.grading import grade_quiz
from lexiquiz.models import (
    Book,
    Principal,
    Quiz,
    QuizSubmission,
    SubmissionRequest,
    User,
    UserType,
    ensure_utc,
    new_id,
)
from lexiquiz.questions import validate_answer


@dataclass(frozen=True)
class QuizPolicy:
    """Tunable quiz policy constants."""

    passing_quiz_grade: int = 70
    max_quiz_attempts: int = 3
    min_hours_between_attempts: float = 24
    min_questions_in_quiz: int = 1
    max_questions_in_quiz: int = 30

    def __post_init__(self):
        if self.min_questions_in_quiz > self.max_questions_in_quiz:
            raise ValueError("min_questions_in_quiz must not exceed max_questions_in_quiz")

    @classmethod
    def from_settings(cls, settings=None) -> QuizPolicy:
        """Build the policy from application settings."""
        if settings is None:
            from config import get_settings
            settings = get_settings()
        return cls(**settings.get_quiz_config())


def check_submission_eligibility(
    request: SubmissionRequest,
    *,
    actor: Principal,
    student: User | None,
    book: Book | None,
    quiz: Quiz | None,
    history: Sequence[QuizSubmission],
    policy: QuizPolicy,
    now: datetime,
) -> None:
    """
    Raise the first policy failure for this attempt, or return None if eligible.

    Args:
        request: The attempt being made
        actor: Who is making the request
        student, book, quiz: Looked-up references (None when missing)
        history: All prior submissions of the student, across every book
        policy: Policy constants
        now: Evaluation time (timezone-aware)
    """
    now = ensure_utc(now)

    # identity

    if actor.type == UserType.STUDENT and actor.id != request.student_id:
        raise PolicyViolationError(
            "Students cannot submit quizzes for other students",
            PolicyReason.CROSS_STUDENT,
        )

    # existence

    if student is None:
        raise ReferenceNotFoundError(f"User {request.student_id} does not exist.")
    if student.type != UserType.STUDENT:
        raise InvalidInputError(f"User {request.student_id} is not a student.")
    if book is None:
        raise ReferenceNotFoundError(f"No book with id {request.book_id} exists")
    if quiz is None:
        raise ReferenceNotFoundError(f"No quiz with id {request.quiz_id} exists")

    # cooldown, across all books

    if history:
        most_recent = max(history, key=lambda s: s.date_created)
        must_wait_until = most_recent.date_created + timedelta(hours=policy.min_hours_between_attempts)
        if now < must_wait_until:
            raise PolicyViolationError(
                f"User must wait till {must_wait_until.isoformat()} to attempt another quiz.",
                PolicyReason.COOLDOWN_ACTIVE,
                retry_at=must_wait_until,
            )

    # per-book history

    prev_for_book = [s for s in history if s.book_id == request.book_id]

    if any(s.passed for s in prev_for_book):
        raise PolicyViolationError(
            f"User has already passed quiz for book {request.book_id}",
            PolicyReason.ALREADY_PASSED,
        )

    if len(prev_for_book) >= policy.max_quiz_attempts:
        raise PolicyViolationError(
            f"User has exhausted all attempts to pass quiz for book {request.book_id}",
            PolicyReason.ATTEMPTS_EXHAUSTED,
        )

    # answers

    if len(quiz.questions) != len(request.answers):
        raise PolicyViolationError(
            f"There are {len(quiz.questions)} quiz questions, "
            f"yet {len(request.answers)} answers were submitted",
            PolicyReason.ANSWER_COUNT_MISMATCH,
        )

    for question, answer in zip(quiz.questions, request.answers):
        error = validate_answer(question.get("type"), answer)
        if error is not None:
            raise InvalidInputError(
                f"The answer to question '{question.get('prompt')}' of type "
                f"{question.get('type')} has invalid schema. Error: {error}"
            )


def admit_submission(
    request: SubmissionRequest,
    *,
    actor: Principal,
    student: User | None,
    book: Book | None,
    quiz: Quiz | None,
    history: Sequence[QuizSubmission],
    policy: QuizPolicy,
    now: datetime,
) -> QuizSubmission:
    """
    Run the eligibility checks, grade the attempt and build the new submission.

    The returned submission is not persisted; storing it is the caller's job.
    """
    check_submission_eligibility(
        request,
        actor=actor,
        student=student,
        book=book,
        quiz=quiz,
        history=history,
        policy=policy,
        now=now,
    )

    score = grade_quiz(quiz, request.answers)
    attempt = sum(1 for s in history if s.book_id == request.book_id) + 1

    submission = QuizSubmission(
        id=new_id(),
        quiz_id=request.quiz_id,
        student_id=request.student_id,
        book_id=request.book_id,
        answers=list(request.answers),
        date_created=now,
        score=score,
        passed=score >= policy.passing_quiz_grade,
        attempt=attempt,
    )
    logger.debug(
        f"Admitted attempt {attempt} by {request.student_id} for book {request.book_id}: "
        f"score={score} passed={submission.passed}"
    )
    return submission
