#!/usr/bin/env python3
"""
Terrain Weathering - Demo Script

Loads synthetic datasets for a location, projects weathering over a time
horizon and prints a summary of the resulting terrain snapshots.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from weathering.datasets import DatasetProvider, SyntheticDatasetProvider, load_session
from weathering.settings import get_settings
from weathering.visualization import build_visualization

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None):
    """Configure root logging (level defaults to settings.log_level)."""
    level = level or get_settings().log_level
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def create_weathering_map(
    latitude: float,
    longitude: float,
    years: float,
    provider: Optional[DatasetProvider] = None,
    radius_km: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Load datasets, project weathering and prepare visualization data.

    Args:
        latitude, longitude: Study area center
        years: Projection horizon
        provider: Dataset source (synthetic data when omitted)
        radius_km: Area radius

    Returns:
        Dictionary with "models", "visualization" and "weathering_rates"
    """
    provider = provider or SyntheticDatasetProvider()

    session = await load_session(provider, latitude, longitude, radius_km)

    logger.info(f"Generating weathering models for {years} years")
    models = session.generate_models(years)

    rates = session.rates
    visualization = build_visualization(models, rates)

    return {
        "models": models,
        "visualization": visualization,
        "weathering_rates": rates,
    }


def print_statistics(result: Dict[str, Any]):
    """Print a summary of the projected snapshots"""
    rates = result["weathering_rates"]
    models = result["models"]

    print("\n" + "=" * 60)
    print(" WEATHERING PROJECTION COMPLETE")
    print("=" * 60)

    print(f"\nRates:")
    print(f"  Physical:   {rates.physical:.4f}")
    print(f"  Chemical:   {rates.chemical:.4f}")
    print(f"  Biological: {rates.biological:.4f}")
    print(f"  Total:      {rates.total * 1000:.4f} mm/year")

    print(f"\nSnapshots:")
    for time_step, grid in models.items():
        stats = grid.statistics()
        print(
            f"  {time_step:>7d} years  min {stats['min']:8.2f}m  "
            f"max {stats['max']:8.2f}m  mean {stats['mean']:8.2f}m"
        )

    print("\n" + "=" * 60)


if __name__ == "__main__":
    configure_logging()
    result = asyncio.run(create_weathering_map(37.7749, -122.4194, 1000))
    print_statistics(result)
