"""
Terrain Weathering - Data Models
"""

from weathering.models.datasets import (
    ClimateProfile,
    GeologyProfile,
    VegetationProfile,
    WeatheringRates,
)
from weathering.models.terrain import TerrainGrid, FlowDirection, FlowField, FLOW_OFFSETS

__all__ = [
    "ClimateProfile",
    "GeologyProfile",
    "VegetationProfile",
    "WeatheringRates",
    "TerrainGrid",
    "FlowDirection",
    "FlowField",
    "FLOW_OFFSETS",
]
