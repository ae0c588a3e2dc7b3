"""
Terrain Weathering - Environmental Dataset Models
Typed climate, geology and vegetation records consumed by the rate model.
Instances are immutable once constructed.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from weathering.config import RockType


# =============================================================================
# CLIMATE
# =============================================================================

class ClimateProfile(BaseModel):
    """Annual climate summary for the study area"""
    temperature: float = Field(..., description="Mean annual temperature in Celsius")
    temp_range: float = Field(..., ge=0.0, description="Annual temperature range in Celsius")
    precipitation: float = Field(..., ge=0.0, description="Annual precipitation in mm")
    freeze_thaw_cycles: float = Field(..., ge=0.0, description="Freeze-thaw cycles per year")
    ph: float = Field(..., ge=0.0, le=14.0, description="Mean precipitation pH")

    # Carried through as metadata, not used by the rate model
    prevailing_wind_direction: Optional[float] = Field(None, ge=0.0, lt=360.0, description="Degrees")
    wind_speed: Optional[float] = Field(None, ge=0.0, description="Mean wind speed in m/s")

    class Config:
        frozen = True
        allow_inf_nan = False


# =============================================================================
# GEOLOGY
# =============================================================================

class GeologyProfile(BaseModel):
    """Bedrock type and mineral makeup"""
    rock_type: str = Field(..., description="Bedrock type; unknown values are treated as 'other'")
    mineral_composition: Dict[str, float] = Field(
        ..., description="Mineral name -> fractional abundance in [0, 1]"
    )

    fault_lines: List[List[Tuple[float, float]]] = Field(default_factory=list)
    rock_hardness: Optional[float] = Field(None, ge=1.0, le=10.0, description="Mohs hardness")

    class Config:
        frozen = True
        allow_inf_nan = False

    @field_validator("rock_type")
    @classmethod
    def normalize_rock_type(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("rock_type must not be empty")
        return value

    @field_validator("mineral_composition")
    @classmethod
    def check_composition(cls, value: Dict[str, float]) -> Dict[str, float]:
        if not value:
            raise ValueError("mineral_composition must list at least one mineral")
        normalized = {}
        for mineral, abundance in value.items():
            if not 0.0 <= abundance <= 1.0:
                raise ValueError(f"abundance of {mineral!r} must be in [0, 1], got {abundance}")
            key = mineral.strip().lower()
            if key in normalized:
                raise ValueError(f"mineral {key!r} is listed more than once")
            normalized[key] = float(abundance)
        return normalized

    @property
    def known_rock_type(self) -> RockType:
        """Rock type as a RockType member (OTHER for unrecognized names)."""
        try:
            return RockType(self.rock_type)
        except ValueError:
            return RockType.OTHER


# =============================================================================
# VEGETATION
# =============================================================================

class VegetationProfile(BaseModel):
    """Vegetation cover summary"""
    coverage: float = Field(..., ge=0.0, le=100.0, description="Percent of area covered")
    root_depth: float = Field(..., ge=0.0, description="Average root depth in meters")

    types: List[str] = Field(default_factory=list)
    leaf_area_index: Optional[float] = Field(None, ge=0.0)

    class Config:
        frozen = True
        allow_inf_nan = False


# =============================================================================
# DERIVED RATES
# =============================================================================

class WeatheringRates(BaseModel):
    """
    Dimensionless weathering rates derived from the datasets.
    Values are not clamped; the biological rate can be negative in
    climates far from the biological optimum.
    """
    physical: float
    chemical: float
    biological: float

    class Config:
        frozen = True
        allow_inf_nan = False

    @property
    def total(self) -> float:
        """Combined elevation loss scale in meters per year."""
        from weathering.generation.rates import total_weathering_rate
        return total_weathering_rate(self)
