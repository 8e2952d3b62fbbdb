# SQLAlchemy storage adapter
from .database import init_db, make_engine, make_session_factory, session_scope
from .models import Base, BookRow, QuizRow, QuizSubmissionRow, UserRow
from .repositories import SqlStore

__all__ = [
    "Base",
    "BookRow",
    "QuizRow",
    "QuizSubmissionRow",
    "SqlStore",
    "UserRow",
    "init_db",
    "make_engine",
    "make_session_factory",
    "session_scope",
]
