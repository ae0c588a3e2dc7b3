"""
Terrain Weathering - Environmental Rate Model
Derives physical, chemical and biological weathering rates from climate,
geology and vegetation.

All functions are pure. Factors are deliberately left unclamped except
where noted (chemical temperature and precipitation factors are capped at
1); the biological temperature factor turns negative below 0°C and above
50°C and that sign is passed through to the rates.
"""

import logging
from typing import Dict

from weathering.config import (
    ROCK_HARDNESS_INDEX,
    DEFAULT_ROCK_HARDNESS,
    MINERAL_REACTIVITY_INDEX,
    DEFAULT_MINERAL_REACTIVITY,
    TEMP_RANGE_NORMALIZER,
    FREEZE_THAW_NORMALIZER,
    PRECIPITATION_NORMALIZER,
    PHYSICAL_WEIGHTS,
    CHEMICAL_TEMPERATURE_NORMALIZER,
    NEUTRAL_PH,
    CHEMICAL_WEIGHTS,
    COVERAGE_NORMALIZER,
    ROOT_DEPTH_NORMALIZER,
    BIOLOGICAL_OPTIMUM_TEMP,
    BIOLOGICAL_TEMP_HALF_WIDTH,
    BIOLOGICAL_WEIGHTS,
    TOTAL_RATE_WEIGHTS,
    TOTAL_RATE_SCALE,
)
from weathering.exceptions import DatasetValidationError
from weathering.models.datasets import (
    ClimateProfile,
    GeologyProfile,
    VegetationProfile,
    WeatheringRates,
)

logger = logging.getLogger(__name__)


# =============================================================================
# LOOKUPS
# =============================================================================

def rock_hardness(rock_type: str) -> float:
    """Hardness multiplier for physical weathering; 0.5 for unknown rock types."""
    hardness = ROCK_HARDNESS_INDEX.get(rock_type.strip().lower())
    if hardness is None:
        logger.warning(f"Unknown rock type {rock_type!r}, using default hardness {DEFAULT_ROCK_HARDNESS}")
        return DEFAULT_ROCK_HARDNESS
    return hardness


def mineral_reactivity(mineral_composition: Dict[str, float]) -> float:
    """
    Abundance-weighted mean reactivity of the recognized minerals.

    Minerals missing from the reactivity table are left out of both the
    weighted sum and the total abundance.

    Args:
        mineral_composition: Mineral name -> fractional abundance

    Returns:
        Mean reactivity, or 0.5 when no recognized mineral is present
    """
    total_reactivity = 0.0
    total_abundance = 0.0

    for mineral, abundance in mineral_composition.items():
        reactivity = MINERAL_REACTIVITY_INDEX.get(mineral.strip().lower())
        if reactivity is None:
            logger.debug(f"Ignoring mineral without reactivity data: {mineral!r}")
            continue
        total_reactivity += reactivity * abundance
        total_abundance += abundance

    if total_abundance > 0:
        return total_reactivity / total_abundance

    logger.warning(
        f"No recognized minerals in {sorted(mineral_composition)}, "
        f"using default reactivity {DEFAULT_MINERAL_REACTIVITY}"
    )
    return DEFAULT_MINERAL_REACTIVITY


def biological_temperature_factor(temperature: float) -> float:
    """
    Triangular response peaking at 25°C and reaching 0 at 0°C and 50°C.
    Not clamped: colder or hotter climates yield negative values.
    """
    return 1.0 - abs(temperature - BIOLOGICAL_OPTIMUM_TEMP) / BIOLOGICAL_TEMP_HALF_WIDTH


# =============================================================================
# PER-PROCESS RATES
# =============================================================================

def physical_rate(climate: ClimateProfile, geology: GeologyProfile) -> float:
    """Frost shattering, thermal stress and wetting, scaled by rock hardness."""
    temp_factor = climate.temp_range / TEMP_RANGE_NORMALIZER
    freeze_thaw_factor = climate.freeze_thaw_cycles / FREEZE_THAW_NORMALIZER
    precip_factor = climate.precipitation / PRECIPITATION_NORMALIZER

    w_temp, w_freeze, w_precip = PHYSICAL_WEIGHTS
    blend = temp_factor * w_temp + freeze_thaw_factor * w_freeze + precip_factor * w_precip
    return blend * rock_hardness(geology.rock_type)


def chemical_rate(climate: ClimateProfile, geology: GeologyProfile) -> float:
    """Dissolution and hydrolysis driven by warmth, water, minerals and pH."""
    temp_factor = min(climate.temperature / CHEMICAL_TEMPERATURE_NORMALIZER, 1.0)
    precip_factor = min(climate.precipitation / PRECIPITATION_NORMALIZER, 1.0)
    mineral_factor = mineral_reactivity(geology.mineral_composition)
    ph_factor = abs(climate.ph - NEUTRAL_PH) / NEUTRAL_PH

    w_temp, w_precip, w_mineral, w_ph = CHEMICAL_WEIGHTS
    return (
        temp_factor * w_temp
        + precip_factor * w_precip
        + mineral_factor * w_mineral
        + ph_factor * w_ph
    )


def biological_rate(vegetation: VegetationProfile, climate: ClimateProfile) -> float:
    """Root wedging and organic acids; temperature factor may be negative."""
    coverage_factor = vegetation.coverage / COVERAGE_NORMALIZER
    root_factor = vegetation.root_depth / ROOT_DEPTH_NORMALIZER
    temp_factor = biological_temperature_factor(climate.temperature)

    w_coverage, w_root, w_temp = BIOLOGICAL_WEIGHTS
    return coverage_factor * w_coverage + root_factor * w_root + temp_factor * w_temp


# =============================================================================
# COMBINED
# =============================================================================

def compute_rates(
    climate: ClimateProfile,
    geology: GeologyProfile,
    vegetation: VegetationProfile,
) -> WeatheringRates:
    """
    Compute all three weathering rates.

    Args:
        climate: Climate profile
        geology: Geology profile
        vegetation: Vegetation profile

    Returns:
        WeatheringRates

    Raises:
        DatasetValidationError: If any dataset is missing
    """
    for name, dataset in (("climate", climate), ("geology", geology), ("vegetation", vegetation)):
        if dataset is None:
            raise DatasetValidationError(f"{name} dataset is missing")

    rates = WeatheringRates(
        physical=physical_rate(climate, geology),
        chemical=chemical_rate(climate, geology),
        biological=biological_rate(vegetation, climate),
    )

    logger.debug(
        f"Weathering rates: physical={rates.physical:.4f} "
        f"chemical={rates.chemical:.4f} biological={rates.biological:.4f}"
    )
    return rates


def total_weathering_rate(rates: WeatheringRates) -> float:
    """Weighted blend of the three rates, in meters of elevation loss per year."""
    w_physical, w_chemical, w_biological = TOTAL_RATE_WEIGHTS
    return (
        rates.physical * w_physical
        + rates.chemical * w_chemical
        + rates.biological * w_biological
    ) / TOTAL_RATE_SCALE
