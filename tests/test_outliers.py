"""Tests for IQR fences and winsorization."""

from app.services.outliers import IQR_MULTIPLIER, WINSORIZE_MIN_SAMPLES, iqr_bounds, winsorize


class TestIqrBounds:
    def test_default_multiplier(self):
        assert iqr_bounds([1, 2, 3, 4, 100]) == (-1.0, 7.0)

    def test_custom_multiplier(self):
        assert iqr_bounds([1, 2, 3, 4, 100], multiplier=3.0) == (-4.0, 10.0)


class TestWinsorize:
    def test_defaults(self):
        assert WINSORIZE_MIN_SAMPLES == 5
        assert IQR_MULTIPLIER == 1.5

    def test_clips_high_outlier(self):
        assert winsorize([1, 2, 3, 4, 100]) == [1, 2, 3, 4, 7.0]

    def test_clips_low_outlier(self):
        assert winsorize([-100, 1, 2, 3, 4]) == [-2.0, 1, 2, 3, 4]

    def test_keeps_order(self):
        assert winsorize([100, 4, 3, 2, 1]) == [7.0, 4, 3, 2, 1]

    def test_small_sample_unchanged(self):
        values = [10, 20, 1000]
        clipped = winsorize(values)
        assert clipped == [10, 20, 1000]
        assert clipped is not values

    def test_min_samples_override(self):
        assert winsorize([1, 2, 3, 4, 100], min_samples=6) == [1, 2, 3, 4, 100]

    def test_values_inside_fence_untouched(self):
        values = [1.5, 2.5, 3.5, 4.5, 5.5]
        clipped = winsorize(values)
        assert all(a is b for a, b in zip(values, clipped))

    def test_constant_column(self):
        assert winsorize([5, 5, 5, 5, 5]) == [5, 5, 5, 5, 5]

    def test_clipped_values_within_bounds(self):
        values = [3, -40, 8, 9, 10, 11, 12, 250, 7]
        lower, upper = iqr_bounds(values)
        assert all(lower <= v <= upper for v in winsorize(values))
