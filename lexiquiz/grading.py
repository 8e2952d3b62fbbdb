"""
Quiz grading.

Turns a quiz and an aligned list of already-validated answers into a 0-100
score. Every question is worth the same; a question is either right (1.0) or
wrong (0.0). Grading is pure: identical inputs always give identical scores.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from loguru import logger

from lexiquiz.errors import InvalidInputError
from lexiquiz.models import Quiz
from lexiquiz.questions import get_handler


def score_answers(questions: Sequence[dict], answers: Sequence[Any]) -> list[float]:
    """
    Per-question correctness values, in question order.

    Args:
        questions: Question definitions that passed validate_question_definition
        answers: One answer per question that passed validate_answer

    Returns:
        List of 1.0 / 0.0 values aligned with ``questions``
    """
    if len(questions) != len(answers):
        raise InvalidInputError(
            f"There are {len(questions)} quiz questions, yet {len(answers)} answers were submitted"
        )

    results = []
    for question, answer in zip(questions, answers):
        handler = get_handler(question.get("type"))
        if handler is None:
            raise InvalidInputError(f"Unknown question type '{question.get('type')}'")
        results.append(handler.score(question, answer))
    return results


def grade_quiz(quiz: Quiz, answers: Sequence[Any]) -> int:
    """
    Grade a submission.

    Returns:
        ``100 * correct / total`` rounded half-up to an integer
    """
    if not quiz.questions:
        raise InvalidInputError(f"Quiz {quiz.id} has no questions to grade")

    results = score_answers(quiz.questions, answers)
    score = math.floor(100 * sum(results) / len(results) + 0.5)
    logger.debug(f"Graded quiz {quiz.id}: {int(sum(results))}/{len(results)} correct, score={score}")
    return score
