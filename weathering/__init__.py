"""
Terrain Weathering - Long-term Terrain Evolution

This package projects how a terrain surface changes over time:
- Weathering rates from climate, geology and vegetation
- Per-cell weathering modulated by slope, aspect and elevation
- D8 flow routing with erosion and deposition
"""

from weathering.models import (
    ClimateProfile,
    GeologyProfile,
    VegetationProfile,
    WeatheringRates,
    TerrainGrid,
    FlowDirection,
    FlowField,
)
from weathering.generation import (
    compute_rates,
    ErosionSimulator,
    WeatheringProjector,
    WeatheringPipeline,
    WeatheringSession,
    select_time_steps,
)

__version__ = "0.1.0"
__all__ = [
    "ClimateProfile",
    "GeologyProfile",
    "VegetationProfile",
    "WeatheringRates",
    "TerrainGrid",
    "FlowDirection",
    "FlowField",
    "compute_rates",
    "ErosionSimulator",
    "WeatheringProjector",
    "WeatheringPipeline",
    "WeatheringSession",
    "select_time_steps",
]
