"""Unit tests for core data models."""

import json

import pytest

from easypoleattach.core.models import (
    AnalysisFailure,
    AnalysisInputs,
    CableSpec,
    ClearanceOverrides,
    ExistingLine,
    SpanSegment,
    UtilityPreset,
    VoltageClass,
)


class TestCableSpec:
    """Test CableSpec model."""

    def test_catalogue_entry(self):
        cable = CableSpec.from_catalogue("coax")
        assert cable.unit_weight_lb_per_ft == 0.12
        assert cable.rated_tension_lb == 1500.0
        assert cable.diameter_in == 0.75

    def test_unknown_key_falls_back_to_first(self):
        assert CableSpec.from_catalogue("unknown").key == "adss"
        assert CableSpec.from_catalogue(None).key == "adss"

    def test_validation(self):
        """Test invalid reference data raises."""
        with pytest.raises(ValueError, match="weight must be positive"):
            CableSpec("x", "x", 0.0, 1000.0, 0.5)
        with pytest.raises(ValueError, match="tension must be positive"):
            CableSpec("x", "x", 0.1, -1.0, 0.5)
        with pytest.raises(ValueError, match="diameter must be positive"):
            CableSpec("x", "x", 0.1, 1000.0, 0.0)


class TestUtilityPreset:
    """Test UtilityPreset model."""

    def test_from_dict(self):
        preset = UtilityPreset.from_dict("x", {"comm_to_power_in": 44.0})
        assert preset.label == "x"
        assert preset.voltage == "distribution"
        assert preset.min_top_space_ft is None

    def test_validation(self):
        with pytest.raises(ValueError):
            UtilityPreset(key="bad", label="bad", comm_to_power_in=-1.0)
        with pytest.raises(ValueError):
            UtilityPreset(key="bad", label="bad", environment_targets={"road": 0.0})


class TestVoltageClass:
    """Test voltage coercion."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("distribution", VoltageClass.DISTRIBUTION),
            (" Transmission ", VoltageClass.TRANSMISSION),
            (VoltageClass.DISTRIBUTION, VoltageClass.DISTRIBUTION),
            ("bogus", VoltageClass.COMMUNICATION),
            (None, VoltageClass.COMMUNICATION),
        ],
    )
    def test_coerce(self, value, expected):
        assert VoltageClass.coerce(value) is expected


class TestAnalysisInputs:
    """Test building inputs from dictionaries."""

    def test_defaults(self):
        inputs = AnalysisInputs()
        assert inputs.existing_power_voltage == "distribution"
        assert inputs.attachment_type == "communication"
        assert inputs.span_environment == "road"
        assert inputs.evaluate_guying is True
        assert inputs.existing_lines == []

    def test_from_mapping_converts_nested(self):
        inputs = AnalysisInputs.from_mapping(
            {
                "pole_height": "45",
                "existing_lines": [
                    {"type": "CATV", "height": "25'", "make_ready": True},
                    None,
                ],
                "span_segments": [{"env": "railroad", "portion": 20}],
                "overrides": {"min_top_space": "3", "unknown": 1},
                "not_a_field": True,
            }
        )
        assert inputs.pole_height == "45"
        assert inputs.existing_lines == [
            ExistingLine(type="CATV", height="25'", make_ready=True)
        ]
        assert inputs.span_segments == [SpanSegment(env="railroad", portion=20)]
        assert inputs.overrides == ClearanceOverrides(min_top_space="3")

    def test_from_empty_mapping(self):
        assert AnalysisInputs.from_mapping(None) == AnalysisInputs()

    def test_nested_records_ignore_unknown_keys(self):
        """Test extra keys and stray entries in nested records are dropped."""
        inputs = AnalysisInputs.from_mapping(
            {
                "existing_lines": [
                    {"type": "drop", "height": "22'", "owner_id": 7},
                    "CATV at 25'",
                    42,
                ],
                "span_segments": [
                    {"env": "road", "portion": 50, "length_ft": 100},
                    {"environment": "waterway", "portion": "half"},
                    ["field", 50],
                ],
                "overrides": "strict",
            }
        )
        assert inputs.existing_lines == [ExistingLine(type="drop", height="22'")]
        assert inputs.span_segments == [
            SpanSegment(env="road", portion=50.0),
            SpanSegment(env="waterway"),
        ]
        assert inputs.overrides is None

    def test_nested_records_must_be_lists(self):
        inputs = AnalysisInputs.from_mapping({"existing_lines": 3, "span_segments": "road"})
        assert inputs.existing_lines == []
        assert inputs.span_segments == []


class TestSpanSegment:
    """Test span segment records."""

    def test_from_mapping(self):
        segment = SpanSegment.from_mapping({"env": " wvHighway ", "portion": "25"})
        assert segment == SpanSegment(env="wvHighway", portion=25.0)

    def test_non_finite_portion_dropped(self):
        assert SpanSegment.from_mapping({"env": "road", "portion": "inf"}).portion is None

    def test_missing_env(self):
        assert SpanSegment.from_mapping({}).env == ""


class TestOutcomes:
    """Test the failure/success union."""

    def test_failure(self):
        failure = AnalysisFailure(errors={"pole_height": "required"})
        assert not failure.ok
        assert failure.to_dict() == {"errors": {"pole_height": "required"}}
        json.dumps(failure.to_dict())
