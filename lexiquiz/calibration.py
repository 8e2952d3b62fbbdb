"""
Lexile calibration.

A student's reading level is re-estimated from the books they most recently
reviewed: each review shifts the book's own Lexile measure by how well the
student says they understood it. Only the latest reviews count, so older
evidence is forgotten as the student's level drifts.
"""

from __future__ import annotations

from collections.abc import Sequence

from lexiquiz.models import BookReview, LexileRange

REVIEW_WINDOW = 3
COMPREHENSION_BASELINE = 4  # rating that leaves the book's measure unchanged
LEXILE_STEP_PER_RATING = 50

LEXILE_RANGE_BELOW = 100
LEXILE_RANGE_ABOVE = 50


def adjusted_lexile_signal(review: BookReview) -> float:
    """Book measure moved 50 points per comprehension point away from 4."""
    return review.book_lexile_measure + LEXILE_STEP_PER_RATING * (
        review.comprehension - COMPREHENSION_BASELINE
    )


def compute_current_lexile_measure(
    initial_lexile_measure: float,
    book_reviews: Sequence[BookReview],
) -> float:
    """
    Estimate a student's current Lexile measure.

    With fewer than 3 reviews the initial measure is kept, since there is not
    enough signal. Otherwise the result is the mean adjusted signal of the 3
    most recent reviews by ``date_submitted``.
    """
    if len(book_reviews) < REVIEW_WINDOW:
        return initial_lexile_measure

    recent = sorted(book_reviews, key=lambda r: r.date_submitted, reverse=True)[:REVIEW_WINDOW]
    return sum(adjusted_lexile_signal(r) for r in recent) / len(recent)


def get_lexile_range(measure: float) -> LexileRange:
    """Band of book measures considered readable for a student at ``measure``."""
    return LexileRange(min=measure - LEXILE_RANGE_BELOW, max=measure + LEXILE_RANGE_ABOVE)
