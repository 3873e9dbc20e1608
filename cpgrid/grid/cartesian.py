"""
Regular cartesian grid factories.

Each factory returns None instead of a grid when the counts or spacings
are not positive.
"""

from typing import Optional

import numpy as np
from loguru import logger

from .unstructured import UnstructuredGrid


def _lattice_cell_nodes(nx: int, ny: int, nz: Optional[int] = None) -> np.ndarray:
    """Corner node indices of each lattice cell, corners numbered di + 2*dj (+ 4*dk)."""
    if nz is None:
        j, i = np.meshgrid(np.arange(ny), np.arange(nx), indexing='ij')
        i, j = i.ravel(), j.ravel()
        offsets = [(di, dj) for dj in (0, 1) for di in (0, 1)]
        return np.stack(
            [(i + di) + (nx + 1) * (j + dj) for di, dj in offsets], axis=1
        )

    k, j, i = np.meshgrid(np.arange(nz), np.arange(ny), np.arange(nx), indexing='ij')
    i, j, k = i.ravel(), j.ravel(), k.ravel()
    offsets = [(di, dj, dk) for dk in (0, 1) for dj in (0, 1) for di in (0, 1)]
    return np.stack(
        [(i + di) + (nx + 1) * ((j + dj) + (ny + 1) * (k + dk)) for di, dj, dk in offsets],
        axis=1,
    )


def create_grid_cart2d(nx: int, ny: int, dx: float = 1.0, dy: float = 1.0) -> Optional[UnstructuredGrid]:
    """
    Create a 2D cartesian grid of nx x ny cells of size dx x dy.

    Returns
    -------
    UnstructuredGrid or None
        None if any count or spacing is not positive.
    """
    if nx <= 0 or ny <= 0 or dx <= 0.0 or dy <= 0.0:
        logger.warning(f"Invalid 2D cartesian grid: n=({nx}, {ny}), d=({dx}, {dy})")
        return None

    y, x = np.meshgrid(np.arange(ny + 1) * dy, np.arange(nx + 1) * dx, indexing='ij')
    nodes = np.column_stack([x.ravel(), y.ravel()])

    return UnstructuredGrid.from_cells(
        dimensions=2,
        cartdims=(nx, ny, 1),
        node_coordinates=nodes,
        cell_nodes=_lattice_cell_nodes(nx, ny),
        global_cell=np.arange(nx * ny),
    )


def create_grid_hexa3d(
    nx: int, ny: int, nz: int,
    dx: float = 1.0, dy: float = 1.0, dz: float = 1.0,
) -> Optional[UnstructuredGrid]:
    """
    Create a 3D cartesian grid of nx x ny x nz hexahedra of size dx x dy x dz.

    Returns
    -------
    UnstructuredGrid or None
        None if any count or spacing is not positive.
    """
    if min(nx, ny, nz) <= 0 or min(dx, dy, dz) <= 0.0:
        logger.warning(f"Invalid 3D cartesian grid: n=({nx}, {ny}, {nz}), d=({dx}, {dy}, {dz})")
        return None

    z, y, x = np.meshgrid(
        np.arange(nz + 1) * dz,
        np.arange(ny + 1) * dy,
        np.arange(nx + 1) * dx,
        indexing='ij',
    )
    nodes = np.column_stack([x.ravel(), y.ravel(), z.ravel()])

    return UnstructuredGrid.from_cells(
        dimensions=3,
        cartdims=(nx, ny, nz),
        node_coordinates=nodes,
        cell_nodes=_lattice_cell_nodes(nx, ny, nz),
        global_cell=np.arange(nx * ny * nz),
    )


def create_grid_cart3d(nx: int, ny: int, nz: int) -> Optional[UnstructuredGrid]:
    """Create a 3D cartesian grid of unit cells."""
    return create_grid_hexa3d(nx, ny, nz, 1.0, 1.0, 1.0)
