"""
Terrain Weathering - Terrain Data Models
Elevation grid and flow field containers backed by NumPy arrays.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np

from weathering.exceptions import GridValidationError


# =============================================================================
# TERRAIN GRID
# =============================================================================

class TerrainGrid:
    """
    Regular elevation grid.

    ``elevation`` is indexed ``[y, x]`` (row-major, y outer / x inner) and has
    shape ``(height, width)``. A grid owns its buffer: use ``clone()`` before
    mutating a grid that anything else still refers to.
    """

    def __init__(self, width: int, height: int, cell_size: float, elevation: np.ndarray):
        if elevation is None:
            raise GridValidationError("elevation data is missing")

        try:
            elevation = np.array(elevation, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise GridValidationError(f"elevation is not a numeric 2D grid: {e}") from e

        if width < 1 or height < 1:
            raise GridValidationError(f"grid must have at least one cell, got {width}x{height}")
        if elevation.ndim != 2:
            raise GridValidationError(f"elevation must be 2D, got {elevation.ndim}D")
        if elevation.shape != (height, width):
            raise GridValidationError(
                f"elevation shape {elevation.shape} does not match height x width ({height}, {width})"
            )
        if not cell_size > 0:
            raise GridValidationError(f"cell_size must be positive, got {cell_size}")
        if not np.all(np.isfinite(elevation)):
            raise GridValidationError("elevation contains NaN or infinite values")

        self.width = int(width)
        self.height = int(height)
        self.cell_size = float(cell_size)
        self.elevation = elevation

    @classmethod
    def from_array(cls, elevation: np.ndarray, cell_size: float) -> "TerrainGrid":
        """Build a grid whose dimensions are taken from the array shape."""
        if elevation is None:
            raise GridValidationError("elevation data is missing")
        arr = np.asarray(elevation, dtype=np.float64)
        if arr.ndim != 2:
            raise GridValidationError(f"elevation must be 2D, got {arr.ndim}D")
        height, width = arr.shape
        return cls(width, height, cell_size, arr)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], cell_size: float) -> "TerrainGrid":
        """Build a grid from nested rows of elevations (rows must be equal length)."""
        if rows is None or len(rows) == 0:
            raise GridValidationError("elevation rows are empty")
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise GridValidationError(f"elevation rows have unequal lengths: {sorted(widths)}")
        return cls.from_array(np.array(rows, dtype=np.float64), cell_size)

    def clone(self) -> "TerrainGrid":
        """Deep copy with an independent elevation buffer."""
        return TerrainGrid(self.width, self.height, self.cell_size, self.elevation.copy())

    def contains(self, x: int, y: int) -> bool:
        """Check if coordinates are within grid bounds"""
        return 0 <= x < self.width and 0 <= y < self.height

    def is_edge(self, x: int, y: int) -> bool:
        """True for cells on the outer ring of the grid"""
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def elevation_at(self, x: int, y: int) -> float:
        if not self.contains(x, y):
            raise GridValidationError(f"cell ({x}, {y}) is outside a {self.width}x{self.height} grid")
        return float(self.elevation[y, x])

    def statistics(self) -> Dict[str, float]:
        return {
            "min": float(self.elevation.min()),
            "max": float(self.elevation.max()),
            "mean": float(self.elevation.mean()),
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert grid to a plain dictionary for downstream consumers.
        The elevation array is converted to nested lists.
        """
        return {
            "width": self.width,
            "height": self.height,
            "cell_size": self.cell_size,
            "elevation": self.elevation.tolist(),
        }

    def __repr__(self) -> str:
        return f"<TerrainGrid {self.width}x{self.height} cell_size={self.cell_size}>"


# =============================================================================
# FLOW FIELD
# =============================================================================

class FlowDirection(IntEnum):
    """
    D8 flow directions. Member order is the tie-break priority.

        NW  N  NE
         W  .  E
        SW  S  SE
    """
    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7
    NONE = 8  # Sink: no lower neighbor

    @property
    def offset(self) -> Tuple[int, int]:
        """(dy, dx) step to the downstream neighbor"""
        return FLOW_OFFSETS[self.value] if self is not FlowDirection.NONE else (0, 0)


# (dy, dx) per octant, indexed by FlowDirection value; y grows southward
FLOW_OFFSETS: List[Tuple[int, int]] = [
    (-1, 0),   # N
    (-1, 1),   # NE
    (0, 1),    # E
    (1, 1),    # SE
    (1, 0),    # S
    (1, -1),   # SW
    (0, -1),   # W
    (-1, -1),  # NW
]


class FlowField:
    """Per-cell flow direction and upstream accumulation for one grid state."""

    def __init__(self, direction: np.ndarray, accumulation: np.ndarray):
        if direction.shape != accumulation.shape:
            raise GridValidationError(
                f"direction shape {direction.shape} does not match accumulation shape {accumulation.shape}"
            )
        self.direction = direction
        self.accumulation = accumulation

    @property
    def shape(self) -> Tuple[int, int]:
        return self.direction.shape

    def direction_at(self, x: int, y: int) -> FlowDirection:
        return FlowDirection(int(self.direction[y, x]))

    def downstream(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """(x, y) of the cell this cell drains into, or None for sinks"""
        direction = self.direction_at(x, y)
        if direction is FlowDirection.NONE:
            return None
        dy, dx = direction.offset
        return x + dx, y + dy

    def sinks(self) -> List[Tuple[int, int]]:
        """Coordinates (x, y) of cells with no downstream neighbor"""
        ys, xs = np.nonzero(self.direction == FlowDirection.NONE)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]
