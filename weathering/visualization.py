"""
Terrain Weathering - Visualization Payload
Packages projected grids, rates and color legends for a rendering client.
Nothing here draws; it only prepares data.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np
from pydantic import BaseModel

from weathering.config import ELEVATION_LEGEND, WEATHERING_LEGEND
from weathering.exceptions import WeatheringInputError
from weathering.models.datasets import WeatheringRates
from weathering.models.terrain import TerrainGrid


class LegendEntry(BaseModel):
    """One breakpoint of a color ramp"""
    value: float
    color: str

    class Config:
        frozen = True


def generate_color_legend() -> Dict[str, List[LegendEntry]]:
    """Fixed elevation and weathering color ramps, ascending by value."""
    return {
        "elevation": [LegendEntry(value=v, color=c) for v, c in ELEVATION_LEGEND],
        "weathering": [LegendEntry(value=v, color=c) for v, c in WEATHERING_LEGEND],
    }


def legend_color(breakpoints: Sequence[LegendEntry], value: float) -> str:
    """
    Color of the highest breakpoint at or below ``value``.
    Values under the first breakpoint take the first color.
    """
    if not breakpoints:
        raise WeatheringInputError("legend has no breakpoints")

    color = breakpoints[0].color
    for entry in breakpoints:
        if entry.value <= value:
            color = entry.color
        else:
            break
    return color


def colorize(values: np.ndarray, breakpoints: Sequence[LegendEntry]) -> np.ndarray:
    """
    Vectorized legend_color over an array.

    Returns:
        Array of hex color strings with the same shape as ``values``
    """
    if not breakpoints:
        raise WeatheringInputError("legend has no breakpoints")

    thresholds = np.array([entry.value for entry in breakpoints], dtype=np.float64)
    colors = np.array([entry.color for entry in breakpoints])

    index = np.searchsorted(thresholds, values, side="right") - 1
    index = np.clip(index, 0, len(breakpoints) - 1)
    return colors[index]


@dataclass
class VisualizationPayload:
    """Everything a renderer needs for a weathering time series."""
    models: Dict[int, TerrainGrid]
    legend: Dict[str, List[LegendEntry]]
    metadata: Dict[str, float] = field(default_factory=dict)

    @property
    def time_steps(self) -> List[int]:
        return sorted(self.models)

    def elevation_change(self, time_step: int) -> np.ndarray:
        """Elevation at ``time_step`` minus elevation at the earliest step."""
        if time_step not in self.models:
            raise WeatheringInputError(f"no model for time step {time_step}")
        first = self.models[self.time_steps[0]]
        return self.models[time_step].elevation - first.elevation

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dictionary form with grids as nested lists."""
        return {
            "models": {str(step): grid.to_dict() for step, grid in sorted(self.models.items())},
            "legend": {
                name: [entry.model_dump() for entry in entries]
                for name, entries in self.legend.items()
            },
            "metadata": dict(self.metadata),
        }


def build_visualization(models: Dict[int, TerrainGrid], rates: WeatheringRates) -> VisualizationPayload:
    """
    Bundle projected models with the legend and rate metadata.

    Args:
        models: Time step -> projected grid
        rates: Rates the models were projected with

    Returns:
        VisualizationPayload
    """
    if not models:
        raise WeatheringInputError("no models to visualize")

    metadata = {
        "total_weathering_rate": rates.total,
        "physical_rate": rates.physical,
        "chemical_rate": rates.chemical,
        "biological_rate": rates.biological,
    }
    return VisualizationPayload(
        models=dict(sorted(models.items())),
        legend=generate_color_legend(),
        metadata=metadata,
    )
