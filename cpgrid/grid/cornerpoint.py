"""
Corner-point grid assembly.

Turns a GeologicalGridDescription into an UnstructuredGrid of hexahedral
cells. Corners on the same pillar closer than the vertical tolerance are
welded into one node; cells whose four pillar thicknesses are all within
the tolerance are pinched out.
"""

from typing import Optional

import numpy as np
from loguru import logger

from ..constants import VALUES_PER_PILLAR
from .description import GeologicalGridDescription
from .unstructured import UnstructuredGrid


def cell_corner_elevations(zcorn: np.ndarray, dims) -> np.ndarray:
    """
    Rearrange ZCORN into per-cell corner lists.

    Returns
    -------
    ndarray, shape (nx*ny*nz, 8)
        Corner elevations in cartesian cell order, corners numbered
        di + 2*dj + 4*dk (first four on the top face).
    """
    nx, ny, nz = dims
    zc = np.asarray(zcorn, dtype=np.float64).reshape(2 * nz, 2 * ny, 2 * nx)
    corners = np.empty((nz, ny, nx, 8))
    for dk in (0, 1):
        for dj in (0, 1):
            for di in (0, 1):
                corners[..., di + 2 * dj + 4 * dk] = zc[dk::2, dj::2, di::2]
    return corners.reshape(-1, 8)


def apply_mapaxes(xy: np.ndarray, mapaxes: np.ndarray) -> np.ndarray:
    """
    Transform local (x, y) into map coordinates.

    MAPAXES = (X1, Y1, X2, Y2, X3, Y3): (X2, Y2) is the origin, (X1, Y1) a
    point on the y-axis and (X3, Y3) a point on the x-axis.
    """
    x1, y1, x2, y2, x3, y3 = np.asarray(mapaxes, dtype=np.float64)
    origin = np.array([x2, y2])
    ex = np.array([x3 - x2, y3 - y2])
    ey = np.array([x1 - x2, y1 - y2])
    ex /= np.linalg.norm(ex)
    ey /= np.linalg.norm(ey)
    return origin + xy[:, :1] * ex + xy[:, 1:2] * ey


def _pillar_points(coord: np.ndarray, pillars: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Points at elevation z on the given pillars, shape (n, 3)."""
    lines = np.asarray(coord, dtype=np.float64).reshape(-1, VALUES_PER_PILLAR)[pillars]
    top, bottom = lines[:, :3], lines[:, 3:]
    dz = bottom[:, 2] - top[:, 2]

    # Vertical extent zero means a degenerate pillar: use its top point
    t = np.divide(z - top[:, 2], dz, out=np.zeros_like(z), where=dz != 0.0)
    xy = top[:, :2] + t[:, None] * (bottom[:, :2] - top[:, :2])
    return np.column_stack([xy, z])


def create_grid_cornerpoint(
    grdecl: GeologicalGridDescription,
    z_tolerance: float,
) -> Optional[UnstructuredGrid]:
    """
    Assemble an unstructured grid from a corner-point description.

    Parameters
    ----------
    grdecl : GeologicalGridDescription
        Corner-point geometry and activity.
    z_tolerance : float
        Vertical merge tolerance. Corners on a pillar within this distance
        of each other become one node; cells no thicker than this on every
        pillar are removed. 0.0 merges only identical elevations.

    Returns
    -------
    UnstructuredGrid or None
        None if the description is invalid or the tolerance is negative.
    """
    problems = grdecl.validation_errors()
    if z_tolerance < 0.0:
        problems.append(f"Negative vertical tolerance {z_tolerance}")
    if problems:
        for problem in problems:
            logger.warning(f"Cannot build corner-point grid: {problem}")
        return None

    nx, ny, nz = (int(n) for n in grdecl.dims)
    corners = cell_corner_elevations(grdecl.zcorn, (nx, ny, nz))

    thickness = np.abs(corners[:, 4:] - corners[:, :4])
    pinched = np.all(thickness <= z_tolerance, axis=1)
    keep = grdecl.active_mask() & ~pinched
    global_cell = np.flatnonzero(keep)

    n_pinched = int(np.count_nonzero(pinched & grdecl.active_mask()))
    if n_pinched:
        logger.debug(f"Pinched out {n_pinched} active cell(s) at tolerance {z_tolerance:g}")

    # Pillar of every corner of every kept cell
    k, rem = np.divmod(global_cell, nx * ny)
    j, i = np.divmod(rem, nx)
    pillar_offsets = np.array([di + (nx + 1) * dj for dk in (0, 1) for dj in (0, 1) for di in (0, 1)])
    pillars = (i + (nx + 1) * j)[:, None] + pillar_offsets[None, :]

    P = pillars.ravel()
    Z = corners[global_cell].ravel()

    # Weld: sort by (pillar, z), start a new node where the pillar changes
    # or the elevation jumps by more than the tolerance
    order = np.lexsort((Z, P))
    Ps, Zs = P[order], Z[order]
    new_node = np.ones(Ps.size, dtype=bool)
    if Ps.size > 1:
        new_node[1:] = (Ps[1:] != Ps[:-1]) | (Zs[1:] - Zs[:-1] > z_tolerance)
    node_id = np.cumsum(new_node) - 1

    node_of = np.empty_like(node_id)
    node_of[order] = node_id
    cell_nodes = node_of.reshape(-1, 8)

    first = np.flatnonzero(new_node)
    nodes = _pillar_points(grdecl.coord, Ps[first], Zs[first])

    mapaxes = None
    if grdecl.mapaxes is not None:
        mapaxes = np.array(grdecl.mapaxes, dtype=np.float64)
        nodes[:, :2] = apply_mapaxes(nodes[:, :2], mapaxes)

    grid = UnstructuredGrid.from_cells(
        dimensions=3,
        cartdims=(nx, ny, nz),
        node_coordinates=nodes,
        cell_nodes=cell_nodes,
        global_cell=global_cell,
        mapaxes=mapaxes,
    )
    logger.debug(
        f"Corner-point grid: {grid.number_of_cells} cells, "
        f"{grid.number_of_faces} faces, {grid.number_of_nodes} nodes"
    )
    return grid


def attach_zcorn_copy(grid: UnstructuredGrid, zcorn: np.ndarray) -> None:
    """Store an independent copy of ``zcorn`` on the grid."""
    if grid.locked:
        raise RuntimeError("Cannot attach ZCORN to a locked grid")
    grid.zcorn = np.array(zcorn, dtype=np.float64, copy=True)
