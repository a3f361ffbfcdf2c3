"""Unit tests for pole geometry."""

import pytest

from easypoleattach.calculations.pole import (
    calculate_burial_depth,
    get_pole_burial_data,
    pole_class_capacity,
    recommend_pole_class,
    recommend_pole_replacement,
    typical_class_for_height,
)


class TestBurial:
    """Test burial depth and above-ground height."""

    @pytest.mark.parametrize(
        "height, buried, above",
        [(45, 6.5, 38.5), (40, 6.0, 34.0), (20, 5.0, 15.0), (30, 5.0, 25.0), (60, 8.0, 52.0)],
    )
    def test_burial_rule(self, height, buried, above):
        """Test buried = max(5, 0.1h + 2) and above = h - buried."""
        pole = get_pole_burial_data(height)
        assert pole.buried_ft == pytest.approx(buried)
        assert pole.above_ground_ft == pytest.approx(above)

    def test_short_pole_clamps_to_zero(self):
        """Test a pole shorter than its burial has no above-ground height."""
        pole = get_pole_burial_data(3)
        assert pole.buried_ft == 5.0
        assert pole.above_ground_ft == 0.0

    def test_invariants_over_grid(self):
        for tenth in range(0, 1200):
            height = tenth / 10
            pole = get_pole_burial_data(height)
            assert pole.buried_ft >= 5.0
            assert pole.above_ground_ft >= 0.0
            assert pole.above_ground_ft == pytest.approx(max(0.0, height - pole.buried_ft))

    def test_non_finite_height(self):
        assert calculate_burial_depth(float("nan")) == 5.0

    def test_class_label(self):
        """Test a given class is kept and a blank one uses the typical class."""
        assert get_pole_burial_data(45, "Class 3").class_label == "Class 3"
        pole = get_pole_burial_data(45)
        assert pole.class_label == pole.recommended_class_label == "Class 2-3 typical"
        assert typical_class_for_height(70) == "Class 1-2 typical"


class TestPoleClass:
    """Test class capacity lookups."""

    def test_capacity_lookup(self):
        assert pole_class_capacity("Class 3") == 2400.0
        assert pole_class_capacity("class 1") == 3800.0
        assert pole_class_capacity("4") == 2000.0
        assert pole_class_capacity("") is None
        assert pole_class_capacity("Class 2-3 typical") is None

    def test_recommend_weakest_sufficient_class(self):
        assert recommend_pole_class(1000) == "Class 5"
        assert recommend_pole_class(2100) == "Class 3"
        assert recommend_pole_class(3800) == "Class 1"
        assert recommend_pole_class(5000) is None


class TestPoleReplacement:
    """Test replacement recommendations."""

    def test_enough_margin(self):
        """Test no replacement with at least 2 ft of margin."""
        result = recommend_pole_replacement(40, 30)
        assert not result.replace
        assert result.margin_ft == pytest.approx(4.0)
        assert result.suggested_height_ft == 40

    def test_replacement_suggested(self):
        """Test the suggestion is the shortest 5 ft step restoring margin."""
        result = recommend_pole_replacement(40, 33)
        assert result.replace
        assert result.suggested_height_ft == 45.0
        above = get_pole_burial_data(result.suggested_height_ft).above_ground_ft
        assert above - 33 >= 2.0
        shorter = get_pole_burial_data(result.suggested_height_ft - 5).above_ground_ft
        assert shorter - 33 < 2.0

    def test_suggestion_always_restores_margin(self):
        for required in range(5, 80, 3):
            result = recommend_pole_replacement(30, required)
            if result.replace:
                above = get_pole_burial_data(result.suggested_height_ft).above_ground_ft
                assert above - required >= 2.0 - 1e-9
