"""
Shared fixtures for the weathering engine tests.
"""

import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from weathering.models.datasets import ClimateProfile, GeologyProfile, VegetationProfile
from weathering.models.terrain import TerrainGrid


@pytest.fixture
def climate():
    """Temperate climate used by the synthetic provider"""
    return ClimateProfile(
        temperature=15,
        temp_range=25,
        precipitation=1000,
        freeze_thaw_cycles=30,
        ph=6.5,
    )


@pytest.fixture
def geology():
    """Limestone with a calcite-dominated mineral mix"""
    return GeologyProfile(
        rock_type="limestone",
        mineral_composition={"calcite": 0.8, "quartz": 0.1, "feldspar": 0.1},
    )


@pytest.fixture
def vegetation():
    return VegetationProfile(coverage=70, root_depth=3)


@pytest.fixture
def flat_grid():
    """6x5 grid at a uniform 200 m"""
    return TerrainGrid(6, 5, 10.0, np.full((5, 6), 200.0))


@pytest.fixture
def hill_grid():
    """Create a simple 5x5 DEM with a hill in the middle"""
    dem = np.array([
        [10, 10, 10, 10, 10],
        [10, 12, 14, 12, 10],
        [10, 14, 16, 14, 10],
        [10, 12, 14, 12, 10],
        [10, 10, 10, 10, 10]
    ], dtype=np.float64)
    return TerrainGrid.from_array(dem, cell_size=1.0)


@pytest.fixture
def rough_grid():
    """Random 12x9 terrain with relief of a few hundred meters"""
    rng = np.random.default_rng(7)
    dem = 300.0 + rng.normal(0, 40.0, (9, 12))
    return TerrainGrid.from_array(dem, cell_size=5.0)
