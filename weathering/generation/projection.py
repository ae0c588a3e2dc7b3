"""
Terrain Weathering - Weathering Projection
Applies cumulative weathering to a cloned terrain snapshot for a given
time horizon, then hands the snapshot to the erosion simulator.
"""

import logging
import numpy as np
from typing import List, Optional

from weathering.config import (
    ProjectionParams,
    TIME_STEP_LADDERS,
    LONG_TERM_TIME_STEPS,
)
from weathering.exceptions import GridValidationError
from weathering.generation.erosion import ErosionSimulator, check_years
from weathering.generation.rates import total_weathering_rate
from weathering.models.datasets import WeatheringRates
from weathering.models.terrain import TerrainGrid
from weathering.utils.spatial import slope_field, aspect_field

logger = logging.getLogger(__name__)


def select_time_steps(max_years: float) -> List[int]:
    """
    Pick the snapshot years for a projection horizon.

    Args:
        max_years: Longest horizon requested

    Returns:
        Ascending list of years from the matching ladder, limited to <= max_years
    """
    max_years = check_years(max_years)

    for ceiling, ladder in TIME_STEP_LADDERS:
        if max_years <= ceiling:
            return [t for t in ladder if t <= max_years]
    return [t for t in LONG_TERM_TIME_STEPS if t <= max_years]


class WeatheringProjector:
    """
    Projects weathered terrain snapshots from a read-only base grid.
    """

    def __init__(
        self,
        params: Optional[ProjectionParams] = None,
        erosion: Optional[ErosionSimulator] = None,
    ):
        self.params = params or ProjectionParams()
        self.erosion = erosion or ErosionSimulator()

    def elevation_factor(self, elevation: np.ndarray) -> np.ndarray:
        """
        Altitude modifier: 1.0 below the base elevation, then a linear ramp
        of +50% per 2000 m.
        """
        P = self.params
        ramp = 1.0 + ((elevation - P.base_elevation_m) / P.elevation_span_m) * P.elevation_weight
        return np.where(elevation < P.base_elevation_m, 1.0, ramp)

    def weathering_loss(self, base_grid: TerrainGrid, rates: WeatheringRates, years: float) -> np.ndarray:
        """
        Per-cell elevation loss from weathering alone.

        Slope, aspect and elevation are all sampled from the base grid.

        Args:
            base_grid: Unmodified terrain
            rates: Weathering rates
            years: Time span in years

        Returns:
            Loss in meters, shape (height, width)
        """
        if base_grid is None:
            raise GridValidationError("base grid is missing")
        years = check_years(years)
        P = self.params

        intensity = years * total_weathering_rate(rates)

        slope = slope_field(base_grid)
        aspect = aspect_field(base_grid)

        # Steeper slopes shed weathered material faster (45° doubles the loss)
        slope_factor = 1.0 + slope / P.slope_reference_deg
        aspect_factor = 1.0 + np.sin(aspect) * P.aspect_weight
        elevation_factor = self.elevation_factor(base_grid.elevation)

        return intensity * slope_factor * aspect_factor * elevation_factor

    def project(self, base_grid: TerrainGrid, rates: WeatheringRates, years: float) -> TerrainGrid:
        """
        Project weathering effects for a specific time in the future.

        Args:
            base_grid: Terrain to start from; never modified
            rates: Weathering rates
            years: Years in the future

        Returns:
            New TerrainGrid owned by the caller
        """
        loss = self.weathering_loss(base_grid, rates, years)

        weathered = base_grid.clone()
        weathered.elevation -= loss

        if self.params.apply_erosion:
            self.erosion.simulate(weathered, check_years(years))

        logger.debug(
            f"Projected {years} years: mean loss {loss.mean():.4f} m, "
            f"elevation range {weathered.elevation.min():.1f} - {weathered.elevation.max():.1f} m"
        )
        return weathered
