import pytest

from trustcheck.detectors.distance import levenshtein, similarity


class TestLevenshtein:

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("kitten", "sitting", 3),
            ("", "abc", 3),
            ("abc", "", 3),
            ("binance.com", "binanse.com", 1),
            ("binance.com", "binance.com", 0),
            ("paypal.com", "paypaI.com", 1),
        ],
    )
    def test_known_distances(self, a, b, expected):
        """Classic edit distances."""
        assert levenshtein(a, b) == expected

    def test_symmetric(self):
        """Argument order does not matter."""
        assert levenshtein("flaw", "lawn") == levenshtein("lawn", "flaw") == 2

    def test_case_sensitive(self):
        """Raw code points are compared."""
        assert levenshtein("Binance", "binance") == 1


class TestSimilarity:

    def test_one_edit_on_eleven_chars(self):
        """(11 - 1) / 11 of the longer string survives."""
        assert similarity("binance.com", "binanse.com") == pytest.approx(90.909, abs=0.001)

    def test_identical(self):
        assert similarity("a", "a") == 100.0

    def test_empty_strings(self):
        assert similarity("", "") == 100.0

    def test_reuses_given_distance(self):
        """A precomputed distance is used as is."""
        assert similarity("abcd", "wxyz", distance=1) == 75.0
