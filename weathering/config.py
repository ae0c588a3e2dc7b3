"""
Terrain Weathering - Configuration and Constants
Contains lookup tables, model weights and parameter objects for
weathering projection and erosion simulation.
"""

from enum import Enum
from typing import Dict, List, Tuple
from pydantic import BaseModel, Field

# =============================================================================
# ENUMERATIONS
# =============================================================================

class RockType(str, Enum):
    """Bedrock types with a documented hardness index"""
    GRANITE = "granite"
    LIMESTONE = "limestone"
    SANDSTONE = "sandstone"
    SHALE = "shale"
    OTHER = "other"


# =============================================================================
# LOOKUP TABLES
# =============================================================================

# Rock hardness index for physical weathering (higher = weathers faster)
ROCK_HARDNESS_INDEX: Dict[str, float] = {
    RockType.GRANITE.value: 0.2,
    RockType.LIMESTONE.value: 0.6,
    RockType.SANDSTONE.value: 0.8,
    RockType.SHALE.value: 0.9,
}
DEFAULT_ROCK_HARDNESS = 0.5

# Chemical reactivity per mineral (0 = inert, 1 = highly reactive)
MINERAL_REACTIVITY_INDEX: Dict[str, float] = {
    "quartz": 0.1,
    "feldspar": 0.7,
    "mica": 0.5,
    "calcite": 0.9,
    "dolomite": 0.8,
}
DEFAULT_MINERAL_REACTIVITY = 0.5

# =============================================================================
# RATE MODEL NORMALIZATION & WEIGHTS
# =============================================================================

# Physical weathering
TEMP_RANGE_NORMALIZER = 40.0          # °C annual range
FREEZE_THAW_NORMALIZER = 100.0        # cycles per year
PRECIPITATION_NORMALIZER = 2000.0     # mm per year
PHYSICAL_WEIGHTS = (0.4, 0.4, 0.2)    # temp range, freeze-thaw, precipitation

# Chemical weathering
CHEMICAL_TEMPERATURE_NORMALIZER = 30.0  # °C
NEUTRAL_PH = 7.0
CHEMICAL_WEIGHTS = (0.3, 0.3, 0.3, 0.1)  # temperature, precipitation, minerals, pH

# Biological weathering
COVERAGE_NORMALIZER = 100.0           # percent
ROOT_DEPTH_NORMALIZER = 10.0          # meters
BIOLOGICAL_OPTIMUM_TEMP = 25.0        # °C, peak of the triangular response
BIOLOGICAL_TEMP_HALF_WIDTH = 25.0     # °C from peak to zero response
BIOLOGICAL_WEIGHTS = (0.4, 0.3, 0.3)  # coverage, root depth, temperature

# Combined rate
TOTAL_RATE_WEIGHTS = (0.4, 0.4, 0.2)  # physical, chemical, biological
TOTAL_RATE_SCALE = 1000.0             # converts the blend to meters per year

# =============================================================================
# TIME STEP LADDERS
# =============================================================================

TIME_STEP_LADDERS: List[Tuple[int, List[int]]] = [
    (100, [0, 10, 25, 50, 100]),
    (1000, [0, 100, 250, 500, 1000]),
]
LONG_TERM_TIME_STEPS = [0, 1000, 5000, 10000, 50000, 100000]

# =============================================================================
# COLOR LEGEND
# =============================================================================

ELEVATION_LEGEND: List[Tuple[float, str]] = [
    (0, "#0077be"),     # Water blue
    (50, "#c2b280"),    # Sand
    (100, "#567d46"),   # Low vegetation
    (300, "#8B4513"),   # Mountain brown
    (600, "#a9a9a9"),   # Rock grey
    (1000, "#FFFFFF"),  # Snow white
]

WEATHERING_LEGEND: List[Tuple[float, str]] = [
    (0, "#FFFFFF"),     # No weathering
    (0.2, "#FFFF00"),   # Low weathering
    (0.5, "#FFA500"),   # Medium weathering
    (1.0, "#FF0000"),   # High weathering
]

# =============================================================================
# SIMULATION PARAMETERS
# =============================================================================

class ProjectionParams(BaseModel):
    """
    Per-cell modulation of the base weathering intensity.
    Defaults reproduce the reference weathering law.
    """
    slope_reference_deg: float = Field(45.0, gt=0.0, description="Slope at which weathering doubles")
    aspect_weight: float = Field(0.2, ge=0.0, description="Amplitude of sin(aspect) modulation")
    base_elevation_m: float = Field(500.0, description="Elevation above which weathering increases")
    elevation_span_m: float = Field(2000.0, gt=0.0, description="Elevation span for the altitude ramp")
    elevation_weight: float = Field(0.5, ge=0.0, description="Extra weathering per elevation span")
    apply_erosion: bool = Field(True, description="Run the erosion/deposition pass after weathering")


class ErosionParams(BaseModel):
    """Coefficients for the flow-driven erosion and deposition passes."""
    erosion_rate: float = Field(0.00005, ge=0.0, description="Erosion in meters per year")
    deposition_rate: float = Field(0.00002, ge=0.0, description="Deposition in meters per year")
    slope_reference_deg: float = Field(45.0, gt=0.0, description="Slope normalizer for erosion")
    deposition_slope_limit_deg: float = Field(10.0, ge=0.0, le=90.0, description="Deposition only below this slope")
    deposition_slope_normalizer_deg: float = Field(90.0, gt=0.0, description="Slope normalizer for deposition")
