"""Configuration settings for easypoleattach."""

# Environmental loading defaults
DEFAULT_WIND_SPEED_MPH = 90.0
DEFAULT_ICE_THICKNESS_IN = 0.0
DEFAULT_CABLE_TENSION_LB = 1200.0
DEFAULT_CABLE_DIAMETER_IN = 0.5
WIND_PRESSURE_COEFFICIENT = 0.00256  # psf per mph^2
ICE_DENSITY_LB_FT3 = 57.0

# Attachment cable catalogue (weight lb/ft, rated tension lb, diameter in)
CABLE_TYPES = [
    {"key": "adss", "label": 'ADSS (0.5")', "weight": 0.08, "tension": 1200.0, "diameter": 0.5},
    {"key": "coax", "label": 'Coax (0.75")', "weight": 0.12, "tension": 1500.0, "diameter": 0.75},
    {"key": "copper", "label": 'Copper (0.5")', "weight": 0.10, "tension": 1400.0, "diameter": 0.5},
    {"key": "triplex", "label": 'Triplex (1.0")', "weight": 0.20, "tension": 1800.0, "diameter": 1.0},
    {
        "key": "communication",
        "label": 'Generic Comm (0.6")',
        "weight": 0.10,
        "tension": 1400.0,
        "diameter": 0.6,
    },
]

# Baseline code clearances by voltage class (feet)
NESC_CLEARANCES = {
    "communication": {
        "ground_road": 15.5,
        "ground_other": 9.5,
        "road_clearance": 18.0,
        "minimum_pole_top_space": 1.0,
        "power_clearance_distribution": 40 / 12,
        "power_clearance_transmission": 6.0,
        "comm_to_comm_vertical": 1.0,
        "comm_to_comm_midspan": 0.5,
        "neutral_clearance": 20 / 12,
        "drop_wire_clearance": 6 / 12,
    },
    "distribution": {
        "ground_road": 23.0,
        "ground_other": 18.0,
        "road_clearance": 25.0,
        "minimum_pole_top_space": 2.0,
        "power_clearance_distribution": 40 / 12,
        "power_clearance_transmission": 4.0,
    },
    "transmission": {
        "ground_road": 28.5,
        "ground_other": 23.0,
        "road_clearance": 30.0,
        "minimum_pole_top_space": 4.0,
        "power_clearance_distribution": 40 / 12,
        "power_clearance_transmission": 6.0,
    },
}

# Midspan ground clearance targets by span environment (feet, NESC 232-1)
ENVIRONMENT_TARGETS = {
    "road": 15.5,
    "residential": 15.5,
    "pedestrian": 9.5,
    "field": 15.5,
    "residentialYard": 9.5,
    "residentialDriveway": 15.5,
    "nonResidentialDriveway": 15.5,
    "waterway": 14.0,
    "wvHighway": 18.0,
    "paHighway": 18.0,
    "ohHighway": 18.0,
    "mdHighway": 18.0,
    "interstate": 18.0,
    "interstateNewCrossing": 21.0,
    "railroad": 23.5,
}

# Power voltages raise the railroad crossing target
POWER_RAILROAD_TARGET = 27.0

# Environments that are judged against the road ground clearance
ROAD_LIKE_ENVIRONMENTS = frozenset(
    {
        "road",
        "wvHighway",
        "paHighway",
        "ohHighway",
        "mdHighway",
        "interstate",
        "interstateNewCrossing",
    }
)

# Utility clearance conventions layered over the code baseline
UTILITY_PRESETS = {
    "firstEnergy": {
        "label": "FirstEnergy",
        "voltage": "distribution",
        "comm_to_power_in": 44.0,
        "min_top_space_ft": 2.0,
        "road_clearance_ft": 18.0,
    },
    "firstEnergyMonPower": {
        "label": "FirstEnergy (Mon Power)",
        "voltage": "distribution",
        "comm_to_power_in": 44.0,
        "min_top_space_ft": 2.0,
        "road_clearance_ft": 18.0,
        "environment_targets": {"wvHighway": 18.0},
    },
    "pse": {
        "label": "PSE",
        "voltage": "distribution",
        "comm_to_power_in": 42.0,
        "min_top_space_ft": 2.0,
        "road_clearance_ft": 18.0,
    },
    "duke": {
        "label": "Duke",
        "voltage": "distribution",
        "comm_to_power_in": 40.0,
        "min_top_space_ft": 2.0,
        "road_clearance_ft": 18.0,
    },
    "nationalGrid": {
        "label": "National Grid",
        "voltage": "distribution",
        "comm_to_power_in": 40.0,
        "min_top_space_ft": 2.0,
        "road_clearance_ft": 18.0,
    },
}

# Job owners that imply the FirstEnergy preset when none is chosen
FIRST_ENERGY_OWNER_HINTS = [
    "firstenergy",
    "mon power",
    "monongahela",
    "potomac edison",
    "penelec",
    "met-ed",
    "penn power",
    "west penn power",
    "jcp&l",
    "ohio edison",
    "toledo edison",
    "illuminating",
]

# Required separation to existing lines: (at pole, midspan) in inches
LINE_SEPARATION_IN = {
    "drop": (6.0, 4.0),
    "neutral": (20.0, 15.0),
    "power": (40.0, 30.0),
    "communication": (12.0, 9.0),
}

# Street light / drip loop clearance below which the proposed line must sit
LIGHT_CLEARANCE_IN = 20.0

# Pole burial rule: 10% of height + 2 ft, never shallower than 5 ft
BURIAL_FRACTION = 0.1
BURIAL_OFFSET_FT = 2.0
MIN_BURIAL_FT = 5.0
REPLACEMENT_MARGIN_FT = 2.0
STANDARD_POLE_STEP_FT = 5

# Nominal wood pole class capacities (lbf at 2 ft below top)
POLE_CLASS_CAPACITY_LBF = {
    "Class 1": 3800.0,
    "Class 2": 3000.0,
    "Class 3": 2400.0,
    "Class 4": 2000.0,
    "Class 5": 1600.0,
}

# Down guy design
GUY_ANGLE_RANGE = {"min": 30.0, "max": 60.0}  # degrees from the pole
GUY_DEFAULT_ANGLE_DEG = 45.0
GUY_ATTACH_FRACTION = 0.85
GUY_UNBALANCED_FRACTION = 0.1
GUY_REQUIRED_TENSION_LB = 500.0
DEFAULT_PULL_BASE_SPAN_FT = 100.0

# Cost model (USD)
COSTS = {
    "new_construction": 150.0,
    "existing_construction": 200.0,
    "transformer": 300.0,
    "long_span": 500.0,
    "make_ready_per_inch": 12.5,
    "guy_base": 350.0,
    "guy_max_variable": 650.0,
    "guy_per_10_lb": 1.0,
}

# Span limits
LONG_SPAN_FT = 300.0
COMM_SUPPORT_SPAN_FT = 150.0
