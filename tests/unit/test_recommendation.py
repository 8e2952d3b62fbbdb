"""
Unit tests for book match scoring and ranking.
"""

import pytest

from lexiquiz.errors import InvalidInputError
from lexiquiz.models import Book
from lexiquiz.recommendation import compute_match_score, recommend_books


def book(book_id="b", genres=("fantasy",), popularity=5.0, lexile=None):
    return Book(id=book_id, genres=list(genres), amazon_popularity=popularity, lexile_measure=lexile)


class TestComputeMatchScore:

    def test_max_score(self):
        assert compute_match_score({"fantasy": 4}, book()) == pytest.approx(1.0)

    def test_zero_popularity(self):
        assert compute_match_score({"fantasy": 4}, book(popularity=0)) == 0.0

    def test_unrated_genre_is_neutral(self):
        assert compute_match_score({}, book(popularity=4)) == pytest.approx(4 * 3 / 20)

    def test_mean_over_genres(self):
        interests = {"fantasy": 4, "history": 1}
        score = compute_match_score(interests, book(genres=["fantasy", "history", "mystery"], popularity=5))
        assert score == pytest.approx(5 * ((4 + 1 + 3) / 3) / 20)

    @pytest.mark.parametrize("low,high", [(0, 1), (1, 2.5), (2.5, 5)])
    def test_monotone_in_popularity(self, low, high):
        interests = {"fantasy": 2}
        assert compute_match_score(interests, book(popularity=low)) <= compute_match_score(
            interests, book(popularity=high)
        )

    @pytest.mark.parametrize("low,high", [(1, 2), (2, 3), (3, 4)])
    def test_monotone_in_interest(self, low, high):
        assert compute_match_score({"fantasy": low}, book(popularity=3)) <= compute_match_score(
            {"fantasy": high}, book(popularity=3)
        )

    def test_book_without_genres_rejected(self):
        with pytest.raises(InvalidInputError):
            compute_match_score({}, book(genres=()))


class TestRecommendBooks:

    @pytest.fixture
    def catalog(self):
        return [
            book("a", ["fantasy"], 4.0, lexile=650),
            book("b", ["history"], 5.0, lexile=640),
            book("c", ["fantasy"], 5.0, lexile=1200),  # too hard
            book("d", ["mystery"], 3.0),  # unknown lexile, kept
            book("e", [], 5.0, lexile=650),  # no genres, skipped
        ]

    def test_ranks_and_filters(self, catalog):
        ranked = recommend_books({"fantasy": 4, "history": 1}, 650, catalog)
        assert [b.id for b, _ in ranked] == ["a", "d", "b"]
        assert ranked[0][1] == pytest.approx(4 * 4 / 20)

    def test_limit(self, catalog):
        assert len(recommend_books({}, 650, catalog, limit=1)) == 1

    def test_ties_broken_by_id(self):
        ranked = recommend_books({}, 500, [book("z"), book("m")])
        assert [b.id for b, _ in ranked] == ["m", "z"]
