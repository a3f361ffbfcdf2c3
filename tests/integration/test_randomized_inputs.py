"""Robustness of the analysis over randomized realistic inputs."""

import math
from typing import Any, Dict, Iterator

import numpy as np
import pytest

from easypoleattach import compute_analysis
from easypoleattach.core.models import AnalysisFailure, AnalysisSuccess

VOLTAGES = ["communication", "distribution", "transmission", "unknown"]
ENVIRONMENTS = ["road", "field", "pedestrian", "railroad", "interstate", "waterway"]
CABLES = ["adss", "coax", "copper", "triplex", "communication"]
LINE_TYPES = ["communication", "drop", "neutral", "power"]
PRESETS = [None, "firstEnergy", "pse", "duke", "bogus"]


def _numeric_leaves(value: Any) -> Iterator[float]:
    """Yield every numeric leaf of a nested dict/list structure."""
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return
    if isinstance(value, (int, float)):
        yield float(value)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _numeric_leaves(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _numeric_leaves(item)


def _random_inputs(rng: np.random.Generator) -> Dict[str, Any]:
    height = float(rng.uniform(20, 90))
    inputs: Dict[str, Any] = {
        "pole_height": height,
        "pole_class": str(rng.choice(["", "Class 1", "Class 3", "Class 5"])),
        "existing_power_height": float(rng.uniform(0.3, 1.0) * height),
        "existing_power_voltage": str(rng.choice(VOLTAGES)),
        "span_distance": float(rng.uniform(50, 400)),
        "is_new_construction": bool(rng.random() < 0.3),
        "attachment_type": str(rng.choice(CABLES)),
        "wind_speed": float(rng.uniform(40, 120)),
        "ice_thickness_in": float(rng.choice([0.0, 0.25, 0.5])),
        "span_environment": str(rng.choice(ENVIRONMENTS)),
        "has_transformer": bool(rng.random() < 0.2),
        "preset_profile": rng.choice(PRESETS),
    }
    if rng.random() < 0.5:
        inputs["adjacent_pole_height"] = float(rng.uniform(20, 90))
    if rng.random() < 0.5:
        inputs["incoming_bearing_deg"] = float(rng.uniform(-360, 720))
        inputs["outgoing_bearing_deg"] = float(rng.uniform(-360, 720))
    if rng.random() < 0.3:
        inputs["street_light_height"] = float(rng.uniform(10, 40))
    if rng.random() < 0.3:
        inputs["proposed_line_height"] = float(rng.uniform(0, height))
    if rng.random() < 0.5:
        inputs["existing_lines"] = [
            {
                "type": str(rng.choice(LINE_TYPES)),
                "height": float(rng.uniform(5, height)),
                "make_ready": bool(rng.random() < 0.5),
                "make_ready_height": (
                    float(rng.uniform(5, height)) if rng.random() < 0.3 else None
                ),
            }
            for _ in range(int(rng.integers(1, 4)))
        ]
    if rng.random() < 0.2:
        inputs["overrides"] = {
            "min_top_space": float(rng.uniform(0, 5)),
            "comm_to_power_in": float(rng.uniform(12, 72)),
            "min_comm_attach": float(rng.uniform(10, 30)),
        }
    if inputs["preset_profile"] is not None:
        inputs["preset_profile"] = str(inputs["preset_profile"])
    return inputs


class TestRandomizedInputs:
    """Test the analysis never raises and never returns non-finite numbers."""

    def test_thousand_random_inputs(self):
        rng = np.random.default_rng(20240611)
        for _ in range(1000):
            inputs = _random_inputs(rng)
            outcome = compute_analysis(inputs)
            assert isinstance(outcome, (AnalysisFailure, AnalysisSuccess))
            if not outcome.ok:
                assert outcome.errors
                continue
            for leaf in _numeric_leaves(outcome.to_dict()):
                assert math.isfinite(leaf), inputs

    @pytest.mark.parametrize(
        "inputs",
        [
            {"pole_height": "nan", "existing_power_height": "30"},
            {"pole_height": 1e308, "existing_power_height": 1e308, "span_distance": 1e308},
            {"pole_height": 45, "existing_power_height": -50, "span_distance": -10},
            {"pole_height": 45, "is_new_construction": True, "wind_speed": "fast"},
            {"pole_height": 45, "is_new_construction": True, "span_distance": "1e6"},
            {
                "pole_height": 45,
                "existing_power_height": 30,
                "span_distance": 200,
                "wind_speed": 1e200,
            },
            {
                "pole_height": 45,
                "existing_power_height": 30,
                "span_distance": 200,
                "ice_thickness_in": 1e200,
            },
            {
                "pole_height": 45,
                "existing_power_height": 30,
                "proposed_line_height": 1e308,
                "street_light_height": -1e308,
            },
            {
                "pole_height": 45,
                "existing_power_height": 30,
                "existing_lines": [
                    {"type": "drop", "height": 26, "make_ready": True, "make_ready_height": 1e308},
                    {"type": "communication", "height": -1e308, "make_ready": True},
                    "drop",
                ],
                "span_segments": [{"env": "road", "length_ft": 100}, None, 5],
                "overrides": {"min_top_space": 1e308, "comm_to_power_in": 1e308},
            },
        ],
    )
    def test_degenerate_inputs(self, inputs):
        """Test extreme values degrade to errors or finite results."""
        outcome = compute_analysis(inputs)
        if outcome.ok:
            for leaf in _numeric_leaves(outcome.to_dict()):
                assert math.isfinite(leaf)
