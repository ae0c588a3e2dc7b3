"""
Terrain Weathering - Generation Package
Contains the rate model, weathering projector, erosion simulator and pipeline.
"""

from weathering.generation.rates import compute_rates, total_weathering_rate
from weathering.generation.erosion import ErosionSimulator, compute_flow_field
from weathering.generation.projection import WeatheringProjector, select_time_steps
from weathering.generation.pipeline import WeatheringPipeline, WeatheringSession

__all__ = [
    "compute_rates",
    "total_weathering_rate",
    "ErosionSimulator",
    "compute_flow_field",
    "WeatheringProjector",
    "select_time_steps",
    "WeatheringPipeline",
    "WeatheringSession",
]
