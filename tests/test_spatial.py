"""
Terrain grid, slope/aspect sampling and D8 flow routing tests.
"""

import math

import numpy as np
import pytest

from weathering.exceptions import GridValidationError
from weathering.models.terrain import TerrainGrid, FlowDirection
from weathering.generation.erosion import compute_flow_field
from weathering.utils.spatial import (
    slope_degrees,
    aspect_radians,
    slope_field,
    aspect_field,
    calculate_flow_direction_d8,
    calculate_flow_accumulation,
)


def _edge_cells(grid):
    for x in range(grid.width):
        yield x, 0
        yield x, grid.height - 1
    for y in range(grid.height):
        yield 0, y
        yield grid.width - 1, y


class TestTerrainGrid:

    def test_shape_mismatch_rejected(self):
        with pytest.raises(GridValidationError, match="does not match"):
            TerrainGrid(4, 3, 1.0, np.zeros((4, 3)))

    def test_ragged_elevation_rejected(self):
        with pytest.raises(GridValidationError, match="numeric 2D grid"):
            TerrainGrid(3, 2, 1.0, [[1, 2, 3], [4, 5]])

    @pytest.mark.parametrize("cell_size", [0.0, -1.0])
    def test_non_positive_cell_size_rejected(self, cell_size):
        with pytest.raises(GridValidationError):
            TerrainGrid(2, 2, cell_size, np.zeros((2, 2)))

    def test_missing_elevation_rejected(self):
        with pytest.raises(GridValidationError, match="missing"):
            TerrainGrid(2, 2, 1.0, None)

    def test_non_finite_elevation_rejected(self):
        dem = np.zeros((3, 3))
        dem[1, 1] = np.nan
        with pytest.raises(GridValidationError):
            TerrainGrid.from_array(dem, 1.0)

    def test_unequal_rows_rejected(self):
        with pytest.raises(GridValidationError):
            TerrainGrid.from_rows([[1, 2, 3], [1, 2]], 1.0)

    def test_from_rows_is_row_major(self):
        grid = TerrainGrid.from_rows([[1, 2, 3], [4, 5, 6]], 2.0)
        assert (grid.width, grid.height) == (3, 2)
        assert grid.elevation_at(2, 0) == 3
        assert grid.elevation_at(0, 1) == 4

    def test_clone_is_independent(self, hill_grid):
        clone = hill_grid.clone()
        clone.elevation[2, 2] = -1.0
        assert hill_grid.elevation[2, 2] == 16.0
        assert (clone.width, clone.height, clone.cell_size) == (5, 5, 1.0)

    def test_to_dict(self, hill_grid):
        data = hill_grid.to_dict()
        assert data["width"] == 5
        assert data["elevation"][2][2] == 16.0


class TestTerrainSampler:

    def test_edges_are_zero(self, hill_grid):
        for x, y in _edge_cells(hill_grid):
            assert slope_degrees(hill_grid, x, y) == 0.0
            assert aspect_radians(hill_grid, x, y) == 0.0

    def test_edges_are_zero_on_random_terrain(self, rough_grid):
        slope = slope_field(rough_grid)
        aspect = aspect_field(rough_grid)
        for x, y in _edge_cells(rough_grid):
            assert slope_degrees(rough_grid, x, y) == 0.0
            assert aspect_radians(rough_grid, x, y) == 0.0
            assert slope[y, x] == 0.0
            assert aspect[y, x] == 0.0

    def test_flat_grid_has_no_slope(self, flat_grid):
        assert np.all(slope_field(flat_grid) == 0.0)
        for y in range(flat_grid.height):
            for x in range(flat_grid.width):
                assert slope_degrees(flat_grid, x, y) == 0.0

    def test_plane_rising_east(self):
        # dz/dx = 1 -> 45 degrees, aspect along +x
        grid = TerrainGrid.from_array(np.tile(np.arange(5, dtype=float), (4, 1)), cell_size=1.0)
        assert slope_degrees(grid, 2, 1) == pytest.approx(45.0)
        assert aspect_radians(grid, 2, 1) == pytest.approx(0.0)

    def test_plane_rising_south(self):
        # Row index grows southward: dz/dy = 1 -> aspect -pi/2
        grid = TerrainGrid.from_array(np.repeat(np.arange(5, dtype=float)[:, None], 4, axis=1), cell_size=1.0)
        assert slope_degrees(grid, 1, 2) == pytest.approx(45.0)
        assert aspect_radians(grid, 1, 2) == pytest.approx(-math.pi / 2)

    def test_cell_size_scales_slope(self):
        dem = np.tile(np.arange(5, dtype=float) * 10.0, (3, 1))
        grid = TerrainGrid.from_array(dem, cell_size=10.0)
        assert slope_degrees(grid, 2, 1) == pytest.approx(45.0)

    def test_fields_match_per_cell_sampling(self, rough_grid):
        slope = slope_field(rough_grid)
        aspect = aspect_field(rough_grid)
        for y in range(rough_grid.height):
            for x in range(rough_grid.width):
                assert slope[y, x] == pytest.approx(slope_degrees(rough_grid, x, y))
                assert aspect[y, x] == pytest.approx(aspect_radians(rough_grid, x, y))

    def test_hill_is_steeper_inside(self, hill_grid):
        slope = slope_field(hill_grid)
        assert np.mean(slope[1:4, 1:4]) > np.mean(slope[0, :])

    def test_out_of_bounds_rejected(self, hill_grid):
        with pytest.raises(GridValidationError):
            slope_degrees(hill_grid, 5, 0)
        with pytest.raises(GridValidationError):
            aspect_radians(hill_grid, 0, -1)


class TestFlowRouting:

    def test_plane_drains_downhill(self):
        # Elevation rises to the east: every cell but the west column flows west
        grid = TerrainGrid.from_array(np.tile(np.arange(5, dtype=float), (3, 1)), cell_size=1.0)
        direction = calculate_flow_direction_d8(grid)
        assert np.all(direction[:, 1:] == FlowDirection.W)
        assert np.all(direction[:, 0] == FlowDirection.NONE)

        accumulation = calculate_flow_accumulation(grid.elevation, direction)
        assert np.all(accumulation[:, 0] == 5)
        assert np.all(accumulation[:, 4] == 1)

    def test_bowl_has_single_outlet(self):
        yy, xx = np.mgrid[0:5, 0:5]
        dem = ((xx - 2) ** 2 + (yy - 2) ** 2).astype(float)
        flow = compute_flow_field(TerrainGrid.from_array(dem, cell_size=1.0))

        assert flow.sinks() == [(2, 2)]
        assert flow.accumulation[2, 2] == 25
        assert flow.direction_at(0, 0) is FlowDirection.SE
        assert flow.downstream(0, 0) == (1, 1)
        assert flow.downstream(2, 2) is None

    def test_valley_outlet_collects_everything(self):
        # V-shaped valley along x=2 that falls toward the north edge
        yy, xx = np.mgrid[0:4, 0:5]
        dem = (2 * np.abs(xx - 2) + yy).astype(float)
        flow = compute_flow_field(TerrainGrid.from_array(dem, cell_size=1.0))

        assert flow.sinks() == [(2, 0)]
        assert flow.accumulation[0, 2] == 20
        assert flow.direction_at(2, 3) is FlowDirection.N
        assert flow.direction_at(1, 2) is FlowDirection.NE

    def test_tie_prefers_priority_order(self):
        dem = np.array([
            [1, 0, 1],
            [1, 1, 1],
            [1, 0, 1],
        ], dtype=float)
        direction = calculate_flow_direction_d8(TerrainGrid.from_array(dem, cell_size=1.0))
        assert direction[1, 1] == FlowDirection.N

    def test_diagonal_distance(self):
        # Same drop to E and SE: the shorter cardinal step is steeper
        dem = np.array([
            [5, 5, 5],
            [5, 5, 4],
            [5, 5, 4],
        ], dtype=float)
        direction = calculate_flow_direction_d8(TerrainGrid.from_array(dem, cell_size=1.0))
        assert direction[1, 1] == FlowDirection.E

    def test_steepest_gradient_beats_lowest_neighbor(self):
        # SE is the lowest cell, but its drop per unit distance is smaller
        dem = np.array([
            [10, 10, 10],
            [10, 10, 9],
            [10, 10, 8.7],
        ], dtype=float)
        direction = calculate_flow_direction_d8(TerrainGrid.from_array(dem, cell_size=1.0))
        assert direction[1, 1] == FlowDirection.E

    def test_flat_grid_is_all_sinks(self, flat_grid):
        flow = compute_flow_field(flat_grid)
        assert np.all(flow.direction == FlowDirection.NONE)
        assert np.all(flow.accumulation == 1)

    def test_accumulation_conserves_cells(self, rough_grid):
        flow = compute_flow_field(rough_grid)
        total_at_sinks = sum(flow.accumulation[y, x] for x, y in flow.sinks())
        assert total_at_sinks == rough_grid.width * rough_grid.height
        assert np.all(flow.accumulation >= 1)

    def test_routing_is_deterministic(self, rough_grid):
        first = compute_flow_field(rough_grid)
        second = compute_flow_field(rough_grid)
        assert np.array_equal(first.direction, second.direction)
        assert np.array_equal(first.accumulation, second.accumulation)

    def test_weights(self):
        grid = TerrainGrid.from_array(np.tile(np.arange(4, dtype=float), (2, 1)), cell_size=1.0)
        direction = calculate_flow_direction_d8(grid)
        weights = np.full((2, 4), 2.0)
        accumulation = calculate_flow_accumulation(grid.elevation, direction, weights)
        assert np.all(accumulation[:, 0] == 8.0)

    def test_shape_mismatch_rejected(self, hill_grid):
        with pytest.raises(GridValidationError):
            calculate_flow_accumulation(hill_grid.elevation, np.zeros((2, 2), dtype=np.uint8))
