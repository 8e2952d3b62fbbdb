"""
Book match scoring and recommendation ranking.

Match score blends how popular a book is with how much the student likes its
genres:

    score = amazon_popularity * mean(interest per genre) / 20

Popularity is in [0, 5] and interest in [1, 4], so the score is in [0, 1].
"""

from __future__ import annotations

from collections.abc import Iterable
from statistics import fmean

from loguru import logger

from lexiquiz.calibration import get_lexile_range
from lexiquiz.errors import InvalidInputError
from lexiquiz.models import NEUTRAL_GENRE_INTEREST, Book, GenreInterestMap

MAX_POPULARITY = 5.0
MAX_INTEREST = 4.0
SCORE_NORMALIZER = MAX_POPULARITY * MAX_INTEREST


def compute_match_score(genre_interests: GenreInterestMap, book: Book) -> float:
    """
    Score how well ``book`` suits a student with ``genre_interests``.

    Genres the student never rated count as neutral interest (3).

    Raises:
        InvalidInputError: If the book has no genres
    """
    if not book.genres:
        raise InvalidInputError(f"Book {book.id} has no genres to match against")

    interests = [genre_interests.get(genre_id, NEUTRAL_GENRE_INTEREST) for genre_id in book.genres]
    interest_factor = fmean(interests)
    return book.amazon_popularity * interest_factor / SCORE_NORMALIZER


def recommend_books(
    genre_interests: GenreInterestMap,
    lexile_measure: float,
    books: Iterable[Book],
    limit: int = 10,
) -> list[tuple[Book, float]]:
    """
    Rank readable books for a student by match score.

    Books without genres are skipped. Books with a known Lexile measure
    outside the student's readable range are skipped; books with no measure
    are kept.

    Returns:
        Up to ``limit`` (book, score) pairs, best first, ties broken by book id
    """
    lexile_range = get_lexile_range(lexile_measure)
    scored = []
    skipped = 0

    for book in books:
        if not book.genres:
            skipped += 1
            continue
        if book.lexile_measure is not None and not lexile_range.contains(book.lexile_measure):
            skipped += 1
            continue
        scored.append((book, compute_match_score(genre_interests, book)))

    scored.sort(key=lambda pair: (-pair[1], pair[0].id))
    logger.debug(
        f"Ranked {len(scored)} books for lexile {lexile_measure:.0f} "
        f"(range {lexile_range.min:.0f}-{lexile_range.max:.0f}), skipped {skipped}"
    )
    return scored[:limit]
