"""Tests for quartiles, median and mode."""

from app.services.summary_stats import Quantiles, median, mode, quantiles


class TestQuantiles:
    def test_odd_sample(self):
        assert quantiles([1, 2, 3, 4, 100]) == (2.0, 3.0, 4.0)

    def test_interpolates_between_ranks(self):
        q = quantiles([1, 2, 3, 4])
        assert q.q1 == 1.75
        assert q.q2 == 2.5
        assert q.q3 == 3.25

    def test_unsorted_input(self):
        assert quantiles([4, 1, 3, 2]) == quantiles([1, 2, 3, 4])

    def test_single_value(self):
        assert quantiles([5]) == (5.0, 5.0, 5.0)

    def test_empty_input(self):
        assert quantiles([]) == Quantiles(0.0, 0.0, 0.0)

    def test_named_fields(self):
        q = quantiles([1, 2, 3, 4, 100])
        assert q.median == 3.0
        assert q.iqr == 2.0


class TestMedian:
    def test_even_sample(self):
        assert median([10, 30]) == 20.0


class TestMode:
    def test_most_frequent(self):
        assert mode([1, 2, 2, 3]) == 2

    def test_tie_goes_to_first_seen(self):
        assert mode(["b", "a", "b", "a"]) == "b"
        assert mode(["Alice", "alice"]) == "Alice"

    def test_booleans(self):
        assert mode([True, False, True]) is True
        assert mode([False, True]) is False

    def test_accepts_generators(self):
        assert mode(x for x in "abca") == "a"

    def test_empty_input(self):
        assert mode([]) is None
