"""
lexiquiz: reading-comprehension quiz core.

Components:
- questions: Question type registry (validation + per-question scoring)
- grading: Quiz score from validated answers
- eligibility: Attempt gating (cooldown, retakes, attempt cap) and admission
- calibration: Lexile re-estimation from recent comprehension ratings
- recommendation: Book match score and ranking
- service: Repository-backed orchestration of the above
"""

from lexiquiz.calibration import compute_current_lexile_measure, get_lexile_range
from lexiquiz.eligibility import QuizPolicy, admit_submission, check_submission_eligibility
from lexiquiz.grading import grade_quiz, score_answers
from lexiquiz.questions import QuestionType, validate_answer, validate_question_definition
from lexiquiz.recommendation import compute_match_score, recommend_books

__version__ = "1.0.0"

__all__ = [
    "QuestionType",
    "QuizPolicy",
    "admit_submission",
    "check_submission_eligibility",
    "compute_current_lexile_measure",
    "compute_match_score",
    "get_lexile_range",
    "grade_quiz",
    "recommend_books",
    "score_answers",
    "validate_answer",
    "validate_question_definition",
]
