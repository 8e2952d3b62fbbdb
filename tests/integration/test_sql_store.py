"""
Integration tests for the SQLAlchemy repository adapter.

Runs against a throwaway SQLite database file.
"""

from datetime import datetime, timedelta, timezone

import pytest

from lexiquiz.db import SqlStore, init_db, make_engine, make_session_factory
from lexiquiz.errors import PolicyReason, PolicyViolationError
from lexiquiz.models import Quiz, QuizDraft, SubmissionRequest
from lexiquiz.service import QuizService


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'lexiquiz.db'}", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine, student, book):
    store = SqlStore(make_session_factory(engine))
    store.add_user(student)
    store.add_book(book)
    return store


class TestSqlStore:

    def test_user_round_trip(self, store, student):
        assert store.get_user(student.id) == student
        assert store.get_user("missing") is None

    def test_book_round_trip(self, store, book):
        assert store.get_book(book.id) == book
        assert store.list_books() == [book]

    def test_quiz_lifecycle(self, store, quiz, sample_questions, now):
        store.create_quiz(quiz)
        loaded = store.get_quiz(quiz.id)
        assert loaded.questions == sample_questions
        assert loaded.date_created == quiz.date_created
        assert loaded.date_created.tzinfo is not None

        assert store.get_quiz_for_book(quiz.book_id).id == quiz.id
        assert store.get_generic_quiz() is None

        generic = Quiz(id="generic", questions=sample_questions[:1], date_created=now)
        store.create_quiz(generic)
        assert store.get_generic_quiz().id == "generic"
        assert {q.id for q in store.list_quizzes()} == {quiz.id, "generic"}

        replaced = quiz.model_copy(update={"questions": sample_questions[:2]})
        assert store.update_quiz(replaced) is not None
        assert store.get_quiz(quiz.id).questions == sample_questions[:2]

        assert store.delete_quiz(quiz.id).id == quiz.id
        assert store.delete_quiz(quiz.id) is None
        assert store.update_quiz(replaced) is None

    def test_submission_unique_attempt(self, store, submission_factory, now):
        first = submission_factory("book1", now, sid="s1")
        store.create_submission(first)
        with pytest.raises(PolicyViolationError) as exc:
            store.create_submission(submission_factory("book1", now + timedelta(hours=1), sid="s2"))
        assert exc.value.reason == PolicyReason.CONCURRENT_ATTEMPT
        assert [s.id for s in store.list_submissions_for_student("stu1")] == ["s1"]

    def test_update_submission_comprehension(self, store, submission_factory, now):
        submission = store.create_submission(submission_factory("book1", now, sid="s1"))
        store.update_submission(submission.model_copy(update={"comprehension": 4}))
        assert store.get_submission("s1").comprehension == 4
        ghost = submission.model_copy(update={"id": "ghost"})
        assert store.update_submission(ghost) is None


class TestServiceOverSql:

    def test_submission_flow(self, store, policy, now, sample_questions, correct_answers, student_actor):
        clock_times = iter([now, now, now + timedelta(hours=1)])
        service = QuizService(store, store, store, store, policy=policy, clock=lambda: next(clock_times))

        quiz = service.create_quiz(QuizDraft(questions=sample_questions, book_id="book1"))
        request = SubmissionRequest(quiz_id=quiz.id, student_id="stu1", book_id="book1", answers=correct_answers)
        submission = service.submit_quiz(student_actor, request)
        assert submission.passed

        with pytest.raises(PolicyViolationError) as exc:
            service.submit_quiz(student_actor, request)
        assert exc.value.reason == PolicyReason.COOLDOWN_ACTIVE

        rated = service.set_comprehension(student_actor, submission.id, 5)
        assert store.get_submission(rated.id).comprehension == 5


PLUS_FIVE = timezone(timedelta(hours=5))


class TestNonUtcTimestamps:

    def test_submission_time_read_back_as_same_instant(self, store, submission_factory):
        local = datetime(2024, 3, 1, 17, 0, tzinfo=PLUS_FIVE)
        store.create_submission(submission_factory("book1", local, sid="s1"))
        loaded = store.get_submission("s1").date_created
        assert loaded == local
        assert loaded.utcoffset() == timedelta(0)
        assert loaded.hour == 12

    def test_cooldown_over_sql_with_local_clock(self, store, policy, sample_questions, wrong_answers, student_actor):
        start = datetime(2024, 3, 1, 17, 0, tzinfo=PLUS_FIVE)
        clock_times = iter([start, start, start + timedelta(hours=25)])
        service = QuizService(store, store, store, store, policy=policy, clock=lambda: next(clock_times))

        quiz = service.create_quiz(QuizDraft(questions=sample_questions, book_id="book1"))
        request = SubmissionRequest(quiz_id=quiz.id, student_id="stu1", book_id="book1", answers=wrong_answers)
        first = service.submit_quiz(student_actor, request)
        assert not first.passed

        second = service.submit_quiz(student_actor, request)
        assert second.attempt == 2
