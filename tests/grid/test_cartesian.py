"""
Tests for the cartesian grid factories.

Tests cover:
1. Cell, face and node counts for 2D and 3D grids
2. Cell volumes / areas equal the spacing product
3. Face sharing between neighbouring cells
4. Invalid counts and spacings return None
"""

import numpy as np
import pytest

from cpgrid.grid.cartesian import (
    create_grid_cart2d,
    create_grid_cart3d,
    create_grid_hexa3d,
)


class TestCart2D:
    """Tests for create_grid_cart2d."""
    
    @pytest.mark.parametrize("nx,ny", [(1, 1), (3, 2), (5, 7)])
    def test_counts(self, nx, ny):
        grid = create_grid_cart2d(nx, ny)
        
        assert grid.dimensions == 2
        assert grid.number_of_cells == nx * ny
        assert grid.number_of_nodes == (nx + 1) * (ny + 1)
        assert grid.number_of_faces == (nx + 1) * ny + nx * (ny + 1)
        assert grid.cartdims == (nx, ny, 1)
    
    def test_areas(self):
        grid = create_grid_cart2d(4, 3, 0.5, 2.0)
        np.testing.assert_allclose(grid.cell_volumes, 1.0)
    
    def test_centroids(self):
        grid = create_grid_cart2d(2, 1, 2.0, 1.0)
        np.testing.assert_allclose(grid.cell_centroids, [[1.0, 0.5], [3.0, 0.5]])
    
    def test_shared_face(self):
        """Two cells side by side share exactly one face."""
        grid = create_grid_cart2d(2, 1)
        interior = np.all(grid.face_cells >= 0, axis=1)
        assert np.count_nonzero(interior) == 1
        f = np.flatnonzero(interior)[0]
        assert set(grid.face_cells[f]) == {0, 1}
        # I+ face of cell 0 is the I- face of cell 1
        assert grid.cell_faces[0, 1] == grid.cell_faces[1, 0] == f
    
    @pytest.mark.parametrize("args", [(0, 3), (3, -1), (2, 2, 0.0, 1.0), (2, 2, 1.0, -1.0)])
    def test_invalid_returns_none(self, args):
        assert create_grid_cart2d(*args) is None


class TestCart3D:
    """Tests for create_grid_cart3d and create_grid_hexa3d."""
    
    @pytest.mark.parametrize("nx,ny,nz", [(1, 1, 1), (2, 3, 4), (4, 1, 2)])
    def test_counts(self, nx, ny, nz):
        grid = create_grid_cart3d(nx, ny, nz)
        
        assert grid.dimensions == 3
        assert grid.number_of_cells == nx * ny * nz
        assert grid.number_of_nodes == (nx + 1) * (ny + 1) * (nz + 1)
        expected_faces = (nx + 1) * ny * nz + nx * (ny + 1) * nz + nx * ny * (nz + 1)
        assert grid.number_of_faces == expected_faces
        np.testing.assert_array_equal(grid.global_cell, np.arange(nx * ny * nz))
    
    def test_unit_volumes(self):
        grid = create_grid_cart3d(3, 2, 2)
        np.testing.assert_allclose(grid.cell_volumes, 1.0)
    
    def test_hexa_volumes(self):
        grid = create_grid_hexa3d(2, 2, 2, 2.0, 3.0, 0.5)
        np.testing.assert_allclose(grid.cell_volumes, 3.0)
        np.testing.assert_allclose(grid.node_coordinates.max(axis=0), [4.0, 6.0, 1.0])
    
    def test_every_cell_has_six_faces(self):
        grid = create_grid_cart3d(2, 2, 2)
        assert grid.cell_faces.shape == (8, 6)
        assert np.all(grid.cell_faces >= 0)
    
    def test_invalid_returns_none(self):
        assert create_grid_cart3d(0, 1, 1) is None
        assert create_grid_hexa3d(1, 1, 1, 1.0, 0.0, 1.0) is None
