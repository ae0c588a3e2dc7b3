"""
Terrain Weathering - Spatial Utilities
Slope/aspect sampling and D8 flow routing on terrain grids.
"""

import math
import numpy as np
from typing import Optional, Tuple
from numba import jit

from weathering.exceptions import GridValidationError
from weathering.models.terrain import TerrainGrid, FlowDirection, FLOW_OFFSETS

# D8 offsets as an array for the JIT kernels, indexed by FlowDirection value
_OFFSETS = np.array(FLOW_OFFSETS, dtype=np.int64)
_SINK = int(FlowDirection.NONE)


# =============================================================================
# PER-CELL SAMPLING
# =============================================================================

def _cell_gradient(grid: TerrainGrid, x: int, y: int) -> Optional[Tuple[float, float]]:
    """
    Centered finite differences (dz/dx, dz/dy) at an interior cell.
    Returns None on the grid edge.
    """
    if not grid.contains(x, y):
        raise GridValidationError(f"cell ({x}, {y}) is outside a {grid.width}x{grid.height} grid")
    if grid.is_edge(x, y):
        return None

    z = grid.elevation
    spacing = 2.0 * grid.cell_size
    dz_dx = (z[y, x + 1] - z[y, x - 1]) / spacing
    dz_dy = (z[y + 1, x] - z[y - 1, x]) / spacing
    return float(dz_dx), float(dz_dy)


def slope_degrees(grid: TerrainGrid, x: int, y: int) -> float:
    """
    Local slope at (x, y) in degrees.

    Args:
        grid: Terrain grid to sample
        x, y: Cell coordinates

    Returns:
        Slope in degrees; 0.0 on the grid edge
    """
    gradient = _cell_gradient(grid, x, y)
    if gradient is None:
        return 0.0
    dz_dx, dz_dy = gradient
    return math.degrees(math.atan(math.sqrt(dz_dx * dz_dx + dz_dy * dz_dy)))


def aspect_radians(grid: TerrainGrid, x: int, y: int) -> float:
    """
    Direction the slope faces at (x, y).

    Returns:
        Aspect in radians (0 = east, increasing counterclockwise);
        0.0 on the grid edge
    """
    gradient = _cell_gradient(grid, x, y)
    if gradient is None:
        return 0.0
    dz_dx, dz_dy = gradient
    return math.atan2(-dz_dy, dz_dx)


# =============================================================================
# WHOLE-GRID SAMPLING
# =============================================================================

def calculate_gradient(grid: TerrainGrid) -> Tuple[np.ndarray, np.ndarray]:
    """
    Centered finite differences for every interior cell.

    Args:
        grid: Terrain grid

    Returns:
        Tuple of (dz_dx, dz_dy) arrays; edge cells are 0
    """
    z = grid.elevation
    dz_dx = np.zeros_like(z)
    dz_dy = np.zeros_like(z)
    spacing = 2.0 * grid.cell_size

    if grid.width >= 3 and grid.height >= 3:
        dz_dx[1:-1, 1:-1] = (z[1:-1, 2:] - z[1:-1, :-2]) / spacing
        dz_dy[1:-1, 1:-1] = (z[2:, 1:-1] - z[:-2, 1:-1]) / spacing

    return dz_dx, dz_dy


def slope_field(grid: TerrainGrid) -> np.ndarray:
    """Slope in degrees for every cell (same rule as slope_degrees)."""
    dz_dx, dz_dy = calculate_gradient(grid)
    return np.degrees(np.arctan(np.sqrt(dz_dx**2 + dz_dy**2)))


def aspect_field(grid: TerrainGrid) -> np.ndarray:
    """Aspect in radians for every cell (same rule as aspect_radians)."""
    dz_dx, dz_dy = calculate_gradient(grid)
    aspect = np.arctan2(-dz_dy, dz_dx)

    # Edges are neutral by contract
    aspect[0, :] = 0.0
    aspect[-1, :] = 0.0
    aspect[:, 0] = 0.0
    aspect[:, -1] = 0.0
    return aspect


# =============================================================================
# D8 FLOW ROUTING
# =============================================================================

def calculate_flow_direction_d8(grid: TerrainGrid) -> np.ndarray:
    """
    Calculate D8 flow direction for each cell.
    Each cell flows to its steepest downhill neighbor; ties keep the
    first direction in FlowDirection order. Cells with no lower
    neighbor are sinks.

    Args:
        grid: Terrain grid

    Returns:
        uint8 array of FlowDirection values, shape (height, width)
    """
    return _flow_direction_kernel(grid.elevation, grid.cell_size, _OFFSETS)


def calculate_flow_accumulation(
    elevation: np.ndarray,
    flow_direction: np.ndarray,
    weights: np.ndarray = None
) -> np.ndarray:
    """
    Calculate flow accumulation based on D8 flow direction.

    Cells are visited from highest to lowest elevation so every upstream
    cell is settled before its downstream neighbor receives its total.

    Args:
        elevation: 2D elevation array the directions were derived from
        flow_direction: D8 flow direction array
        weights: Optional weights for each cell (defaults to 1 per cell)

    Returns:
        Flow accumulation array (upstream contributing weight, self included)
    """
    if elevation.shape != flow_direction.shape:
        raise GridValidationError(
            f"elevation shape {elevation.shape} does not match flow direction shape {flow_direction.shape}"
        )

    if weights is None:
        accumulation = np.ones(elevation.shape, dtype=np.float64)
    else:
        accumulation = np.array(weights, dtype=np.float64)
        if accumulation.shape != elevation.shape:
            raise GridValidationError(
                f"weights shape {accumulation.shape} does not match elevation shape {elevation.shape}"
            )

    # Descending elevation; stable so ties resolve in row-major order
    order = np.argsort(-elevation, axis=None, kind="stable")
    _accumulate_kernel(order, flow_direction, _OFFSETS, accumulation)
    return accumulation


@jit(nopython=True)
def _flow_direction_kernel(elevation: np.ndarray, cell_size: float, offsets: np.ndarray) -> np.ndarray:
    """
    JIT-compiled steepest-descent search over the 8 neighbors.

    Compares gradients, not raw drops: diagonal drops are divided by
    cell_size * sqrt(2), so a slightly lower diagonal neighbor can lose to
    a cardinal one.
    """
    height, width = elevation.shape
    flow_dir = np.empty((height, width), dtype=np.uint8)
    diagonal = cell_size * np.sqrt(2.0)

    for y in range(height):
        for x in range(width):
            current = elevation[y, x]
            steepest_drop = 0.0
            steepest_dir = _SINK

            for direction in range(8):
                dy = offsets[direction, 0]
                dx = offsets[direction, 1]
                ny = y + dy
                nx = x + dx
                if ny < 0 or ny >= height or nx < 0 or nx >= width:
                    continue

                distance = diagonal if (dx != 0 and dy != 0) else cell_size
                drop = (current - elevation[ny, nx]) / distance

                # Strict comparison keeps the earlier direction on ties
                if drop > steepest_drop:
                    steepest_drop = drop
                    steepest_dir = direction

            flow_dir[y, x] = steepest_dir

    return flow_dir


@jit(nopython=True)
def _accumulate_kernel(
    order: np.ndarray,
    flow_direction: np.ndarray,
    offsets: np.ndarray,
    accumulation: np.ndarray
):
    """
    JIT-compiled accumulation pass over cells in topological order.
    """
    width = flow_direction.shape[1]

    for i in range(order.shape[0]):
        index = order[i]
        y = index // width
        x = index % width

        direction = flow_direction[y, x]
        if direction == _SINK:
            continue

        ny = y + offsets[direction, 0]
        nx = x + offsets[direction, 1]
        accumulation[ny, nx] += accumulation[y, x]
