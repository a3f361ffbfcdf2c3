"""Unit tests for clearance rule resolution."""

from dataclasses import fields

import pytest

from easypoleattach.calculations.clearances import (
    PRESETS,
    apply_overrides,
    apply_preset_object,
    apply_preset_to_clearances,
    controlling_environment,
    controlling_ground_target,
    get_environment_target,
    get_nesc_clearances,
    lookup_preset,
    preset_for_owner,
    resolve_clearances,
)
from easypoleattach.core.models import ClearanceOverrides, SpanSegment, VoltageClass


class TestBaseline:
    """Test the code-baseline profile."""

    def test_distribution_road(self):
        """Test road environments use the road ground clearance."""
        profile = get_nesc_clearances("distribution", "road")
        assert profile.voltage == "distribution"
        assert profile.ground_clearance == 23.0
        assert profile.minimum_pole_top_space == 2.0
        assert profile.power_clearance_distribution == pytest.approx(40 / 12)

    def test_distribution_field(self):
        """Test other environments use the lower ground clearance."""
        profile = get_nesc_clearances("distribution", "field")
        assert profile.ground_clearance == 18.0

    def test_unknown_voltage_falls_back(self):
        """Test an unknown voltage uses the communication table."""
        profile = get_nesc_clearances("bogus", "road")
        assert profile.voltage == VoltageClass.COMMUNICATION.value
        assert profile.ground_clearance == 15.5

    def test_power_raises_railroad_target(self):
        """Test power voltages carry the higher railroad target."""
        assert get_nesc_clearances("communication").environment_target("railroad") == 23.5
        assert get_nesc_clearances("distribution").environment_target("railroad") == 27.0

    def test_fresh_profile_each_call(self):
        """Test callers cannot corrupt the shared tables."""
        first = get_nesc_clearances("distribution", "road")
        first.environment_targets["road"] = 99.0
        second = get_nesc_clearances("distribution", "road")
        assert second.environment_target("road") == 15.5

    def test_everything_sourced_from_baseline(self):
        profile = get_nesc_clearances("transmission", "road")
        assert profile.source_of("ground_clearance") == "baseline"


class TestPresets:
    """Test utility preset layering."""

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PRESETS["new"] = PRESETS["duke"]  # type: ignore[index]

    @pytest.mark.parametrize("key", sorted(PRESETS))
    def test_every_preset_value_is_applied(self, key):
        """Test each value a registered preset carries reaches the profile."""
        preset = PRESETS[key]
        profile = apply_preset_object(get_nesc_clearances("distribution", "road"), preset)
        applied = {
            "min_top_space_ft": "minimum_pole_top_space",
            "road_clearance_ft": "road_clearance",
            "comm_to_power_in": "power_clearance_distribution",
        }
        for field_name, profile_key in applied.items():
            if getattr(preset, field_name) is not None:
                assert profile.source_of(profile_key) == "preset"
        for env in preset.environment_targets:
            assert profile.source_of(f"env:{env}") == "preset"
        assert {f.name for f in fields(preset)} == {
            "key",
            "label",
            "voltage",
            "environment_targets",
            *applied,
        }

    def test_named_preset(self):
        """Test a named preset sets its separation on the distribution tier."""
        profile = apply_preset_to_clearances(get_nesc_clearances("distribution"), "pse")
        assert profile.power_clearance_distribution == pytest.approx(42 / 12)
        assert profile.preset_key == "pse"
        assert profile.source_of("power_clearance_distribution") == "preset"

    def test_unknown_preset_keeps_baseline(self):
        """Test an unknown preset name is not an error."""
        baseline = get_nesc_clearances("distribution", "road")
        profile = apply_preset_to_clearances(baseline, "bogus")
        assert profile == baseline
        assert lookup_preset("bogus") is None
        assert lookup_preset(None) is None

    def test_preset_environment_target(self):
        """Test preset environment targets are layered in."""
        profile = apply_preset_to_clearances(
            get_nesc_clearances("distribution", "road"), "firstEnergyMonPower"
        )
        assert get_environment_target(profile, "wvHighway") == 18.0
        assert profile.source_of("env:wvHighway") == "preset"

    def test_preset_does_not_mutate_input(self):
        baseline = get_nesc_clearances("distribution", "road")
        apply_preset_to_clearances(baseline, "firstEnergy")
        assert baseline.power_clearance_distribution == pytest.approx(40 / 12)
        assert baseline.preset_key is None

    @pytest.mark.parametrize(
        "owner", ["FirstEnergy", "Mon Power", "Ohio Edison", "Penelec Inc."]
    )
    def test_owner_implies_first_energy(self, owner):
        """Test FirstEnergy subsidiaries imply the FirstEnergy preset."""
        assert preset_for_owner(owner) == "firstEnergy"
        profile = resolve_clearances("distribution", "road", job_owner=owner)
        assert profile.power_clearance_distribution == pytest.approx(44 / 12)

    def test_other_owner_has_no_preset(self):
        assert preset_for_owner("Duke Energy") is None
        assert preset_for_owner("") is None

    def test_explicit_key_beats_owner(self):
        profile = resolve_clearances(
            "distribution", "road", preset_key="duke", job_owner="FirstEnergy"
        )
        assert profile.preset_key == "duke"
        assert profile.power_clearance_distribution == pytest.approx(40 / 12)


class TestOverridePrecedence:
    """Test baseline < preset < job override."""

    def test_three_layers(self):
        """Test the job override wins, then the preset, then the baseline."""
        baseline = get_nesc_clearances("communication", "road")
        assert baseline.road_clearance == 18.0

        preset = {"key": "custom", "road_clearance_ft": 20.0}
        with_preset = apply_preset_object(baseline, preset)
        assert with_preset.road_clearance == 20.0

        with_override = apply_overrides(with_preset, ClearanceOverrides(road_clearance=22))
        assert with_override.road_clearance == 22.0
        assert with_override.source_of("road_clearance") == "override"

        without_preset = apply_overrides(baseline, ClearanceOverrides())
        assert without_preset.road_clearance == 18.0

    @pytest.mark.parametrize("blank", [None, "", "  ", "n/a", float("nan")])
    def test_blank_override_falls_through(self, blank):
        """Test blank or unparseable overrides leave the value untouched."""
        profile = resolve_clearances(
            "distribution",
            "road",
            preset_key="firstEnergy",
            overrides=ClearanceOverrides(comm_to_power_in=blank, min_top_space=blank),
        )
        assert profile.power_clearance_distribution == pytest.approx(44 / 12)
        assert profile.minimum_pole_top_space == 2.0

    def test_separation_override_in_inches(self):
        profile = resolve_clearances(
            "distribution", "road", overrides=ClearanceOverrides(comm_to_power_in="48")
        )
        assert profile.power_clearance_distribution == pytest.approx(4.0)

    def test_feet_inches_override(self):
        profile = resolve_clearances(
            "distribution", "road", overrides=ClearanceOverrides(min_top_space="2' 6\"")
        )
        assert profile.minimum_pole_top_space == pytest.approx(2.5)

    def test_environment_target_sets_ground_clearance(self):
        """Test a target override for the job environment drives ground clearance."""
        overrides = ClearanceOverrides(environment_targets={"road": "20'"})
        profile = resolve_clearances("communication", "road", overrides=overrides)
        assert profile.ground_clearance == 20.0
        assert profile.environment_target("road") == 20.0

    def test_other_environment_target_leaves_ground(self):
        overrides = ClearanceOverrides(environment_targets={"waterway": 16})
        profile = resolve_clearances("communication", "road", overrides=overrides)
        assert profile.ground_clearance == 15.5
        assert profile.environment_target("waterway") == 16.0

    def test_explicit_ground_beats_environment_target(self):
        overrides = ClearanceOverrides(
            ground_clearance=19, environment_targets={"road": 20}
        )
        profile = resolve_clearances("communication", "road", overrides=overrides)
        assert profile.ground_clearance == 19.0


class TestControllingEnvironment:
    """Test environment selection across span segments."""

    def test_highest_segment_target_controls(self):
        profile = get_nesc_clearances("distribution", "field")
        segments = [SpanSegment(env="field"), {"env": "railroad", "portion": 10}]
        env, target = controlling_environment(profile, segments, "field")
        assert env == "railroad"
        assert target == 27.0

    def test_no_segments_uses_fallback(self):
        profile = get_nesc_clearances("communication", "pedestrian")
        assert controlling_ground_target(profile, [], "pedestrian") == 9.5

    def test_unknown_environment(self):
        profile = get_nesc_clearances("communication", "road")
        assert controlling_environment(profile, [{"env": "moon"}], "road") == (None, None)
