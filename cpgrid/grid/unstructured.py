"""
Unstructured grid representation shared by every grid factory.

An UnstructuredGrid is the handle produced by the corner-point assembler,
the cartesian factories and the file reader. It is released exactly once
through destroy_grid().
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import HEX_FACES, QUAD_FACES


# Hexahedron split into six tetrahedra around the 0-7 diagonal
_HEX_TETS = (
    (0, 1, 3, 7),
    (0, 3, 2, 7),
    (0, 2, 6, 7),
    (0, 6, 4, 7),
    (0, 4, 5, 7),
    (0, 5, 1, 7),
)

# Quadrilateral corners in counter-clockwise order
_QUAD_LOOP = (0, 1, 3, 2)


@dataclass(eq=False)
class UnstructuredGrid:
    """
    Cell/face/node topology and geometry of a grid.

    Cells are hexahedra (3D) or quadrilaterals (2D) with corners numbered
    di + 2*dj (+ 4*dk). Faces are stored once and shared between the two
    cells they separate; boundary faces have -1 as second cell.
    """

    dimensions: int
    cartdims: Tuple[int, ...]
    node_coordinates: np.ndarray      # (n_nodes, dimensions)
    cell_nodes: np.ndarray            # (n_cells, 2**dimensions)
    face_nodes: np.ndarray            # (n_faces, 2**(dimensions-1))
    face_cells: np.ndarray            # (n_faces, 2)
    cell_faces: np.ndarray            # (n_cells, 2*dimensions), -1 for degenerate faces
    global_cell: np.ndarray           # (n_cells,) cartesian index of each cell
    zcorn: Optional[np.ndarray] = None
    mapaxes: Optional[np.ndarray] = None
    released: bool = field(default=False, init=False)
    locked: bool = field(default=False, init=False)

    @classmethod
    def from_cells(
        cls,
        dimensions: int,
        cartdims: Sequence[int],
        node_coordinates: np.ndarray,
        cell_nodes: np.ndarray,
        global_cell: np.ndarray,
        mapaxes: Optional[np.ndarray] = None,
    ) -> "UnstructuredGrid":
        """Build a grid from nodes and cell corners, deriving the faces."""
        local_faces = HEX_FACES if dimensions == 3 else QUAD_FACES
        cell_nodes = np.asarray(cell_nodes, dtype=np.int64)
        face_nodes, face_cells, cell_faces = build_faces(cell_nodes, local_faces, dimensions)
        return cls(
            dimensions=dimensions,
            cartdims=tuple(int(n) for n in cartdims),
            node_coordinates=np.asarray(node_coordinates, dtype=np.float64),
            cell_nodes=cell_nodes,
            face_nodes=face_nodes,
            face_cells=face_cells,
            cell_faces=cell_faces,
            global_cell=np.asarray(global_cell, dtype=np.int64),
            mapaxes=mapaxes,
        )

    @property
    def number_of_cells(self) -> int:
        return int(self.cell_nodes.shape[0])

    @property
    def number_of_faces(self) -> int:
        return int(self.face_nodes.shape[0])

    @property
    def number_of_nodes(self) -> int:
        return int(self.node_coordinates.shape[0])

    @property
    def cell_volumes(self) -> np.ndarray:
        """Cell volumes (areas in 2D)."""
        corners = self.node_coordinates[self.cell_nodes]

        if self.dimensions == 2:
            loop = corners[:, _QUAD_LOOP, :]
            x, y = loop[..., 0], loop[..., 1]
            return 0.5 * np.abs(np.sum(x * np.roll(y, -1, axis=1) - np.roll(x, -1, axis=1) * y, axis=1))

        volume = np.zeros(self.number_of_cells)
        for a, b, c, d in _HEX_TETS:
            edges = np.stack([
                corners[:, b] - corners[:, a],
                corners[:, c] - corners[:, a],
                corners[:, d] - corners[:, a],
            ], axis=1)
            volume += np.abs(np.linalg.det(edges)) / 6.0
        return volume

    @property
    def cell_centroids(self) -> np.ndarray:
        """Vertex-averaged cell centres, shape (n_cells, dimensions)."""
        return self.node_coordinates[self.cell_nodes].mean(axis=1)

    def _arrays(self) -> List[np.ndarray]:
        return [
            getattr(self, f.name) for f in fields(self)
            if isinstance(getattr(self, f.name), np.ndarray)
        ]

    def lock(self) -> None:
        """Make every array read-only. A locked grid can no longer be modified."""
        for array in self._arrays():
            array.flags.writeable = False
        self.locked = True


def build_faces(
    cell_nodes: np.ndarray,
    local_faces: Sequence[Sequence[int]],
    dimensions: int,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Derive unique faces from cell corner lists.

    Two cells share a face when the face has the same set of nodes in both.
    Faces with fewer than ``dimensions`` distinct nodes (collapsed by vertex
    welding) are dropped and marked -1 in ``cell_faces``.

    Parameters
    ----------
    cell_nodes : ndarray, shape (n_cells, n_corners)
        Node indices of each cell's corners.
    local_faces : sequence of tuples
        Local corner indices of each face.
    dimensions : int
        Grid dimension (2 or 3).

    Returns
    -------
    face_nodes : ndarray, shape (n_faces, nodes_per_face)
    face_cells : ndarray, shape (n_faces, 2)
    cell_faces : ndarray, shape (n_cells, len(local_faces))
    """
    n_cells = cell_nodes.shape[0]
    nodes_per_face = len(local_faces[0])
    cell_faces = np.full((n_cells, len(local_faces)), -1, dtype=np.int64)

    face_index: Dict[Tuple[int, ...], int] = {}
    face_nodes: List[List[int]] = []
    face_cells: List[List[int]] = []

    corners = cell_nodes[:, np.asarray(local_faces)].tolist()
    for c, cell in enumerate(corners):
        for lf, nodes in enumerate(cell):
            key = tuple(sorted(set(nodes)))
            if len(key) < dimensions:
                continue
            f = face_index.get(key)
            if f is None:
                f = len(face_nodes)
                face_index[key] = f
                face_nodes.append(nodes)
                face_cells.append([c, -1])
            elif face_cells[f][1] == -1:
                face_cells[f][1] = c
            cell_faces[c, lf] = f

    return (
        np.array(face_nodes, dtype=np.int64).reshape(-1, nodes_per_face),
        np.array(face_cells, dtype=np.int64).reshape(-1, 2),
        cell_faces,
    )


def destroy_grid(grid: UnstructuredGrid) -> None:
    """
    Release a grid handle.

    Drops the grid's arrays and marks it released. Releasing the same
    handle twice is an error.
    """
    if grid.released:
        raise RuntimeError("Grid has already been released")

    for f in fields(grid):
        if isinstance(getattr(grid, f.name), np.ndarray):
            setattr(grid, f.name, None)
    grid.released = True
