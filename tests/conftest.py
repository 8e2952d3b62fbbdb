"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from lexiquiz.eligibility import QuizPolicy
from lexiquiz.models import Book, Principal, Quiz, QuizSubmission, User, UserType


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    return QuizPolicy(
        passing_quiz_grade=70,
        max_quiz_attempts=3,
        min_hours_between_attempts=24,
        min_questions_in_quiz=1,
        max_questions_in_quiz=10,
    )


@pytest.fixture
def sample_questions():
    """One question of every built-in type."""
    return [
        {
            "type": "multiple_choice",
            "prompt": "Who narrates Charlotte's Web?",
            "options": ["Wilbur", "A third-person narrator", "Charlotte"],
            "correct_index": 1,
        },
        {
            "type": "multi_select",
            "prompt": "Which animals live on the Zuckerman farm?",
            "options": ["Wilbur", "Templeton", "Aslan", "Charlotte"],
            "correct_indices": [0, 1, 3],
        },
        {
            "type": "short_answer",
            "prompt": "What is the name of the girl who saves Wilbur?",
            "accepted_values": ["Fern", "Fern Arable"],
        },
        {
            "type": "true_false",
            "prompt": "Charlotte is a spider.",
            "correct": True,
        },
    ]


@pytest.fixture
def correct_answers():
    return [1, [3, 0, 1], "  fern   ARABLE ", True]


@pytest.fixture
def wrong_answers():
    return [0, [0, 1], "Avery", False]


@pytest.fixture
def student():
    return User(
        id="stu1",
        type=UserType.STUDENT,
        name="Sam",
        initial_lexile_measure=600,
        genre_interests={"fantasy": 4, "history": 1},
    )


@pytest.fixture
def student_actor(student):
    return Principal(id=student.id, type=UserType.STUDENT)


@pytest.fixture
def admin_actor():
    return Principal(id="admin1", type=UserType.ADMIN)


@pytest.fixture
def book():
    return Book(id="book1", title="Charlotte's Web", genres=["fantasy"], amazon_popularity=4.5, lexile_measure=680)


@pytest.fixture
def quiz(sample_questions, book):
    return Quiz(id="quiz1", questions=sample_questions, book_id=book.id, date_created=NOW - timedelta(days=30))


def make_submission(
    book_id: str,
    date_created: datetime,
    passed: bool = False,
    attempt: int = 1,
    student_id: str = "stu1",
    comprehension: int | None = None,
    sid: str | None = None,
) -> QuizSubmission:
    return QuizSubmission(
        id=sid or f"sub-{book_id}-{attempt}-{date_created.timestamp():.0f}",
        quiz_id="quiz1",
        student_id=student_id,
        book_id=book_id,
        answers=[],
        date_created=date_created,
        score=90 if passed else 20,
        passed=passed,
        attempt=attempt,
        comprehension=comprehension,
    )


@pytest.fixture
def submission_factory():
    """Build prior submissions for history snapshots."""
    return make_submission
