"""Tests for the completeness/consistency quality score."""

from app.services.quality import calculate_quality_score


class TestQualityScore:
    def test_complete_consistent_data(self):
        rows = [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
        assert calculate_quality_score(rows, ["a", "b"]) == 100.0

    def test_missing_cells_lower_completeness(self):
        rows = [{"a": 1, "b": "x"}, {"a": None, "b": "y"}]
        assert calculate_quality_score(rows, ["a", "b"]) == 85.0

    def test_mixed_kinds_lower_consistency(self):
        rows = [{"a": 1}, {"a": "x"}]
        assert calculate_quality_score(rows, ["a"]) == 60.0

    def test_only_listed_columns_count(self):
        rows = [{"a": 1, "noise": None}]
        assert calculate_quality_score(rows, ["a"]) == 100.0

    def test_empty_input(self):
        assert calculate_quality_score([], ["a"]) == 0.0
        assert calculate_quality_score([{"a": 1}], []) == 0.0
