"""
Terrain Weathering - Dataset Providers
Sources for the elevation, geology, climate and vegetation records of a
study area. The engine only consumes the typed records; providers decide
where they come from.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from scipy.ndimage import gaussian_filter

from weathering.exceptions import WeatheringInputError
from weathering.generation.pipeline import WeatheringSession
from weathering.models.datasets import ClimateProfile, GeologyProfile, VegetationProfile
from weathering.models.terrain import TerrainGrid
from weathering.settings import get_settings

logger = logging.getLogger(__name__)


def _check_query(lat: float, lng: float, radius_km: float):
    if not -90.0 <= lat <= 90.0:
        raise WeatheringInputError(f"latitude must be in [-90, 90], got {lat}")
    if not -180.0 <= lng <= 180.0:
        raise WeatheringInputError(f"longitude must be in [-180, 180], got {lng}")
    if not radius_km > 0:
        raise WeatheringInputError(f"radius must be positive, got {radius_km}")


class DatasetProvider(ABC):
    """
    Interface for dataset sources.
    Each fetch receives the query center and radius in kilometers.
    """

    @abstractmethod
    async def fetch_elevation(self, lat: float, lng: float, radius_km: float) -> TerrainGrid:
        pass

    @abstractmethod
    async def fetch_geology(self, lat: float, lng: float, radius_km: float) -> GeologyProfile:
        pass

    @abstractmethod
    async def fetch_climate(self, lat: float, lng: float, radius_km: float) -> ClimateProfile:
        pass

    @abstractmethod
    async def fetch_vegetation(self, lat: float, lng: float, radius_km: float) -> VegetationProfile:
        pass


class SyntheticDatasetProvider(DatasetProvider):
    """
    Deterministic stand-in data: a bell-shaped hill on a 100 m plain with
    smoothed noise, limestone bedrock, a temperate climate and mixed
    forest/shrub cover.
    """

    def __init__(
        self,
        grid_size: Optional[int] = None,
        seed: Optional[int] = None,
        noise_m: Optional[float] = None,
    ):
        settings = get_settings()
        self.grid_size = grid_size if grid_size is not None else settings.synthetic_grid_size
        self.seed = seed if seed is not None else settings.synthetic_seed
        self.noise_m = noise_m if noise_m is not None else settings.synthetic_noise_m

        if self.grid_size < 3:
            raise WeatheringInputError(f"grid_size must be at least 3, got {self.grid_size}")

    async def fetch_elevation(self, lat: float, lng: float, radius_km: float) -> TerrainGrid:
        _check_query(lat, lng, radius_km)
        size = self.grid_size
        cell_size = (radius_km * 2) / size

        yy, xx = np.mgrid[0:size, 0:size].astype(np.float64)
        dx = xx - size / 2
        dy = yy - size / 2
        distance_sq = dx**2 + dy**2

        base_elevation = 100.0
        hill = 500.0 * np.exp(-distance_sq / (size * 5))

        rng = np.random.default_rng(self.seed)
        noise = rng.random((size, size)) * self.noise_m
        noise = gaussian_filter(noise, sigma=1.0)

        elevation = base_elevation + hill + noise
        logger.debug(f"Synthetic elevation {size}x{size}, cell size {cell_size:.3f}")
        return TerrainGrid(size, size, cell_size, elevation)

    async def fetch_geology(self, lat: float, lng: float, radius_km: float) -> GeologyProfile:
        _check_query(lat, lng, radius_km)
        return GeologyProfile(
            rock_type="limestone",
            mineral_composition={"calcite": 0.8, "quartz": 0.1, "feldspar": 0.1},
            fault_lines=[],
            rock_hardness=3,
        )

    async def fetch_climate(self, lat: float, lng: float, radius_km: float) -> ClimateProfile:
        _check_query(lat, lng, radius_km)
        return ClimateProfile(
            temperature=15,
            temp_range=25,
            precipitation=1000,
            freeze_thaw_cycles=30,
            ph=6.5,
            prevailing_wind_direction=270,
            wind_speed=5,
        )

    async def fetch_vegetation(self, lat: float, lng: float, radius_km: float) -> VegetationProfile:
        _check_query(lat, lng, radius_km)
        return VegetationProfile(
            coverage=70,
            root_depth=3,
            types=["forest", "shrub"],
            leaf_area_index=2.3,
        )


async def load_session(
    provider: DatasetProvider,
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
) -> WeatheringSession:
    """
    Fetch all four datasets concurrently and bundle them into a session.

    Args:
        provider: Dataset source
        lat, lng: Query center in degrees
        radius_km: Area radius (defaults to settings.default_radius_km)

    Returns:
        Validated WeatheringSession
    """
    if radius_km is None:
        radius_km = get_settings().default_radius_km

    logger.info(f"Loading datasets for ({lat}, {lng}), radius {radius_km} km")

    elevation, geology, climate, vegetation = await asyncio.gather(
        provider.fetch_elevation(lat, lng, radius_km),
        provider.fetch_geology(lat, lng, radius_km),
        provider.fetch_climate(lat, lng, radius_km),
        provider.fetch_vegetation(lat, lng, radius_km),
    )

    return WeatheringSession(
        elevation=elevation,
        geology=geology,
        climate=climate,
        vegetation=vegetation,
    )
