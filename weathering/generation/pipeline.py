"""
Terrain Weathering - Projection Pipeline
Main orchestrator: holds the validated datasets for a study area and
produces one weathered terrain snapshot per time step.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from weathering.config import ProjectionParams, ErosionParams
from weathering.exceptions import DatasetValidationError
from weathering.generation.erosion import ErosionSimulator
from weathering.generation.projection import WeatheringProjector, select_time_steps
from weathering.generation.rates import compute_rates
from weathering.models.datasets import (
    ClimateProfile,
    GeologyProfile,
    VegetationProfile,
    WeatheringRates,
)
from weathering.models.terrain import TerrainGrid

logger = logging.getLogger(__name__)


# =============================================================================
# SESSION
# =============================================================================

@dataclass(frozen=True)
class WeatheringSession:
    """
    Immutable bundle of the four datasets for one study area.

    The elevation grid is stored as a read-only copy. Rates are derived on
    every access, so a session can never hold rates that disagree with its
    datasets; build a new session when a dataset changes.
    """
    elevation: TerrainGrid
    geology: GeologyProfile
    climate: ClimateProfile
    vegetation: VegetationProfile

    def __post_init__(self):
        checks = (
            ("elevation", self.elevation, TerrainGrid),
            ("geology", self.geology, GeologyProfile),
            ("climate", self.climate, ClimateProfile),
            ("vegetation", self.vegetation, VegetationProfile),
        )
        for name, value, expected in checks:
            if value is None:
                raise DatasetValidationError(f"{name} dataset is missing")
            if not isinstance(value, expected):
                raise DatasetValidationError(
                    f"{name} dataset must be a {expected.__name__}, got {type(value).__name__}"
                )

        base = self.elevation.clone()
        base.elevation.flags.writeable = False
        object.__setattr__(self, "elevation", base)

    @classmethod
    def from_raw(
        cls,
        elevation: Union[TerrainGrid, Mapping[str, Any]],
        geology: Union[GeologyProfile, Mapping[str, Any]],
        climate: Union[ClimateProfile, Mapping[str, Any]],
        vegetation: Union[VegetationProfile, Mapping[str, Any]],
    ) -> "WeatheringSession":
        """
        Build a session from plain dictionaries (or already typed records).

        Elevation dictionaries use the keys width, height, cell_size and
        elevation (nested rows).

        Raises:
            DatasetValidationError: If any dataset is missing or malformed
        """
        try:
            if isinstance(elevation, Mapping):
                missing = {"width", "height", "cell_size", "elevation"} - set(elevation)
                if missing:
                    raise DatasetValidationError(f"elevation dataset is missing keys: {sorted(missing)}")
                elevation = TerrainGrid(
                    elevation["width"],
                    elevation["height"],
                    elevation["cell_size"],
                    elevation["elevation"],
                )
            if isinstance(geology, Mapping):
                geology = GeologyProfile(**geology)
            if isinstance(climate, Mapping):
                climate = ClimateProfile(**climate)
            if isinstance(vegetation, Mapping):
                vegetation = VegetationProfile(**vegetation)
        except ValidationError as e:
            raise DatasetValidationError(f"invalid dataset: {e}") from e

        return cls(elevation=elevation, geology=geology, climate=climate, vegetation=vegetation)

    @property
    def rates(self) -> WeatheringRates:
        """Weathering rates for the current datasets."""
        return compute_rates(self.climate, self.geology, self.vegetation)

    def generate_models(
        self,
        years: float,
        projection_params: Optional[ProjectionParams] = None,
        erosion_params: Optional[ErosionParams] = None,
    ) -> Dict[int, TerrainGrid]:
        """One projected grid per selected time step, keyed by year."""
        pipeline = WeatheringPipeline(self, projection_params, erosion_params)
        return pipeline.generate(years)


# =============================================================================
# PIPELINE
# =============================================================================

class WeatheringPipeline:
    """
    Runs the projector for every time step of a horizon.
    Tracks per-step timings and reports progress.
    """

    def __init__(
        self,
        session: WeatheringSession,
        projection_params: Optional[ProjectionParams] = None,
        erosion_params: Optional[ErosionParams] = None,
        progress_callback: Optional[Callable[[int, float], None]] = None
    ):
        """
        Initialize projection pipeline.

        Args:
            session: Validated datasets
            projection_params: Weathering modulation parameters
            erosion_params: Erosion/deposition coefficients
            progress_callback: Optional callback for progress updates (time_step, percent)
        """
        if session is None:
            raise DatasetValidationError("session is missing")

        self.session = session
        self.progress_callback = progress_callback
        self.projector = WeatheringProjector(
            params=projection_params,
            erosion=ErosionSimulator(erosion_params),
        )

        self.status = "pending"
        self.step_timings: Dict[int, float] = {}

    def generate(self, years: float) -> Dict[int, TerrainGrid]:
        """
        Project the terrain at every time step up to ``years``.

        Returns:
            Mapping of time step (years) -> projected TerrainGrid, ascending
        """
        self.status = "generating"
        self.step_timings = {}
        start_time = time.time()

        rates = self.session.rates
        base = self.session.elevation

        models: Dict[int, TerrainGrid] = {}
        try:
            time_steps = select_time_steps(years)
            logger.info(
                f"Projecting {base.width}x{base.height} grid over {len(time_steps)} time steps "
                f"(total rate {rates.total:.6f} m/yr)"
            )

            for i, time_step in enumerate(time_steps):
                step_start = time.time()

                models[time_step] = self.projector.project(base, rates, time_step)

                self.step_timings[time_step] = time.time() - step_start
                progress = (i + 1) / len(time_steps) * 100.0
                logger.debug(f"[{progress:5.1f}%] {time_step} years in {self.step_timings[time_step]:.3f}s")

                if self.progress_callback:
                    self.progress_callback(time_step, progress)

        except Exception as e:
            self.status = "failed"
            logger.error(f"Projection failed: {e}")
            raise

        self.status = "ready"
        total_time = time.time() - start_time
        logger.info(f"Projection complete in {total_time:.2f}s")
        for time_step, duration in self.step_timings.items():
            logger.debug(f"  {time_step:>7d} years {duration:8.3f}s")

        return models
