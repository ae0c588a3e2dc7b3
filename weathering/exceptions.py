"""
Terrain Weathering - Exceptions
"""


class WeatheringError(Exception):
    """Base class for all weathering engine errors."""


class DatasetValidationError(WeatheringError, ValueError):
    """An input dataset is missing or malformed."""


class GridValidationError(DatasetValidationError):
    """A terrain grid violates its shape or value invariants."""


class WeatheringInputError(WeatheringError, ValueError):
    """A call argument (years, coordinates, ...) is out of range."""
