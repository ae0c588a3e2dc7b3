"""
Terrain Weathering - Erosion Simulation
Routes water over the terrain with D8 flow and applies erosion on steep,
wet cells and deposition on flat, wet cells.
"""

import logging
import math
import numpy as np
from typing import Optional

from weathering.config import ErosionParams
from weathering.exceptions import WeatheringInputError
from weathering.models.terrain import TerrainGrid, FlowField
from weathering.utils.spatial import (
    slope_field,
    calculate_flow_direction_d8,
    calculate_flow_accumulation,
)

logger = logging.getLogger(__name__)


def check_years(years: float) -> float:
    """Validate a time span; returns it as a float."""
    if years is None or isinstance(years, bool):
        raise WeatheringInputError(f"years must be a number, got {years!r}")
    years = float(years)
    if not math.isfinite(years) or years < 0:
        raise WeatheringInputError(f"years must be a non-negative finite number, got {years}")
    return years


def compute_flow_field(grid: TerrainGrid) -> FlowField:
    """
    Steepest-descent directions and upstream accumulation for the grid's
    current elevation.
    """
    direction = calculate_flow_direction_d8(grid)
    accumulation = calculate_flow_accumulation(grid.elevation, direction)
    return FlowField(direction, accumulation)


class ErosionSimulator:
    """
    Applies erosion and deposition to a grid in place.

    The grid passed to simulate() must be exclusively owned by the caller
    (the projector hands over a freshly cloned snapshot).
    """

    def __init__(self, params: Optional[ErosionParams] = None):
        self.params = params or ErosionParams()

    def simulate(self, grid: TerrainGrid, years: float) -> None:
        """
        Simulate erosion and material transport.

        Args:
            grid: Terrain grid to mutate
            years: Time span in years
        """
        years = check_years(years)

        flow = compute_flow_field(grid)
        logger.debug(
            f"Flow field: {len(flow.sinks())} sinks, "
            f"max accumulation {flow.accumulation.max():.0f}"
        )

        eroded = self.apply_erosion(grid, flow.accumulation, years)
        deposited = self.apply_deposition(grid, flow.accumulation, years)

        logger.debug(f"Erosion removed {eroded:.4f} m, deposition added {deposited:.4f} m (grid totals)")

    def apply_erosion(self, grid: TerrainGrid, accumulation: np.ndarray, years: float) -> float:
        """
        Lower each cell in proportion to flow and slope.
        No floor is applied, so elevations can go negative.

        Returns:
            Total material removed (sum over cells, meters)
        """
        P = self.params
        erosion_rate = P.erosion_rate * years

        # More water flow and steeper slopes increase erosion
        slope = slope_field(grid)
        erosion_amount = erosion_rate * np.sqrt(accumulation) * (slope / P.slope_reference_deg)

        grid.elevation -= erosion_amount
        return float(erosion_amount.sum())

    def apply_deposition(self, grid: TerrainGrid, accumulation: np.ndarray, years: float) -> float:
        """
        Raise flat cells in proportion to flow; steep cells are untouched.

        Returns:
            Total material deposited (sum over cells, meters)
        """
        P = self.params
        deposition_rate = P.deposition_rate * years

        # Slope is re-sampled after the erosion pass
        slope = slope_field(grid)
        deposition_amount = deposition_rate * np.sqrt(accumulation) * (1.0 - slope / P.deposition_slope_normalizer_deg)
        deposition_amount = np.where(
            slope < P.deposition_slope_limit_deg,
            np.maximum(0.0, deposition_amount),
            0.0,
        )

        grid.elevation += deposition_amount
        return float(deposition_amount.sum())
