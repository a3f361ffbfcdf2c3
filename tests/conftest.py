"""Pytest configuration and fixtures."""

from typing import Any, Dict

import pytest

from easypoleattach.core.models import CableSpec


@pytest.fixture
def comm_cable() -> CableSpec:
    """Return the generic communication cable."""
    return CableSpec.from_catalogue("communication")


@pytest.fixture
def existing_pole_inputs() -> Dict[str, Any]:
    """Return inputs for a 45 ft pole with distribution power at 30 ft."""
    return {
        "pole_height": "45",
        "pole_class": "Class 3",
        "existing_power_height": "30' 0\"",
        "existing_power_voltage": "distribution",
        "span_distance": "200",
        "span_environment": "road",
        "wind_speed": 90,
    }


@pytest.fixture
def new_pole_inputs() -> Dict[str, Any]:
    """Return inputs for a new 40 ft pole without power."""
    return {
        "pole_height": 40,
        "is_new_construction": True,
        "span_distance": 100,
        "span_environment": "field",
    }
