"""
Grid ownership.

GridManager builds an UnstructuredGrid through one of its factory
classmethods and owns it until release. A manager never exists without a
valid grid: every factory builds the grid first and raises
ConstructionError instead of returning a manager when that fails.
"""

import weakref
from pathlib import Path
from typing import Optional, Union

import numpy as np
from loguru import logger

from ..config.schema import MinpvConfig, PinchConfig
from .cartesian import create_grid_cart2d, create_grid_cart3d, create_grid_hexa3d
from .cornerpoint import attach_zcorn_copy, create_grid_cornerpoint
from .deck import Deck
from .description import GeologicalGridDescription
from .eclipse_grid import EclipseGrid, GeologicalSource, compute_z_tolerance
from .errors import ConstructionError
from .extraction import create_grdecl, extract_description
from .grid_io import read_grid
from .minpv import MinpvProcessor
from .unstructured import UnstructuredGrid, destroy_grid


def _release(grid: UnstructuredGrid) -> None:
    destroy_grid(grid)


class GridManager:
    """
    Sole owner of an UnstructuredGrid.

    The grid is released exactly once: by close(), on leaving a ``with``
    block, or when the manager is garbage collected, whichever comes first.
    Managers cannot be copied or pickled.

    Example
    -------
    >>> with GridManager.cartesian_3d(4, 3, 2) as manager:
    ...     manager.grid.number_of_cells
    24
    """

    def __init__(self, grid: Optional[UnstructuredGrid], message: str = "Failed to construct grid."):
        """
        Take ownership of ``grid``. Prefer the factory classmethods.

        Raises
        ------
        ConstructionError
            If ``grid`` is None, already owned (locked) or released.
        """
        if grid is None:
            raise ConstructionError(message)
        # A locked grid belongs to another manager
        if grid.locked or grid.released:
            raise ConstructionError("Grid is already owned by a GridManager or released")
        grid.lock()
        self._grid = grid
        self._finalizer = weakref.finalize(self, _release, grid)

    @classmethod
    def from_eclipse_grid(
        cls,
        input_grid: GeologicalSource,
        pore_volumes: Optional[np.ndarray] = None,
    ) -> "GridManager":
        """
        Build a corner-point grid from a geological source.

        Parameters
        ----------
        input_grid : GeologicalSource
            Grid geometry with its pinch and minpv settings.
        pore_volumes : ndarray, optional
            Pore volume per cell. Minimum pore volume filtering runs only
            when this is non-empty and the source's minpv mode is not
            "inactive".
        """
        grdecl = extract_description(input_grid)

        cells_modified = 0
        if pore_volumes is not None and np.size(pore_volumes) > 0 \
                and input_grid.minpv_mode != "inactive":
            cells_modified = filter_pore_volumes(grdecl, pore_volumes, input_grid.minpv_value)

        z_tolerance = compute_z_tolerance(input_grid)
        grid = create_grid_cornerpoint(grdecl, z_tolerance)
        if grid is None:
            raise ConstructionError("Failed to construct grid.")

        # The assembler does not keep ZCORN; attach the filtered one
        if cells_modified > 0:
            attach_zcorn_copy(grid, grdecl.zcorn)

        logger.info(
            f"Corner-point grid {grdecl.dims}: {grid.number_of_cells} active cells "
            f"(z tolerance {z_tolerance:g}, {cells_modified} cell(s) removed by minpv)"
        )
        return cls(grid)

    @classmethod
    def from_deck(
        cls,
        deck: Deck,
        pore_volumes: Optional[np.ndarray] = None,
        minpv: Optional[MinpvConfig] = None,
        pinch: Optional[PinchConfig] = None,
    ) -> "GridManager":
        """Build a corner-point grid from deck keywords, see EclipseGrid.from_deck()."""
        return cls.from_eclipse_grid(EclipseGrid.from_deck(deck, minpv=minpv, pinch=pinch), pore_volumes)

    @classmethod
    def cartesian_2d(cls, nx: int, ny: int, dx: float = 1.0, dy: float = 1.0) -> "GridManager":
        """Build a 2D cartesian grid of nx x ny cells."""
        return cls(create_grid_cart2d(nx, ny, dx, dy))

    @classmethod
    def cartesian_3d(
        cls,
        nx: int, ny: int, nz: int,
        dx: Optional[float] = None,
        dy: Optional[float] = None,
        dz: Optional[float] = None,
    ) -> "GridManager":
        """
        Build a 3D cartesian grid of nx x ny x nz cells.

        Cells are unit cubes unless a spacing is given; unspecified spacings
        default to 1.0.
        """
        if dx is None and dy is None and dz is None:
            return cls(create_grid_cart3d(nx, ny, nz))
        return cls(create_grid_hexa3d(
            nx, ny, nz,
            1.0 if dx is None else dx,
            1.0 if dy is None else dy,
            1.0 if dz is None else dz,
        ))

    @classmethod
    def from_file(cls, filename: Union[str, Path]) -> "GridManager":
        """Read a grid written by cpgrid.grid.grid_io.write_grid()."""
        return cls(read_grid(filename), f"Failed to read grid from file {filename}")

    @staticmethod
    def create_grdecl(deck: Deck) -> GeologicalGridDescription:
        """Corner-point description straight from deck keywords, see extraction.create_grdecl()."""
        return create_grdecl(deck)

    @property
    def grid(self) -> UnstructuredGrid:
        """The managed grid (read-only arrays). Invalid once the manager is closed."""
        if not self._finalizer.alive:
            raise RuntimeError("Grid has been released")
        return self._grid

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Release the grid. Further calls do nothing."""
        self._finalizer()

    def __enter__(self) -> "GridManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __copy__(self):
        raise TypeError("GridManager owns its grid and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("GridManager owns its grid and cannot be copied")

    def __reduce__(self):
        raise TypeError("GridManager owns its grid and cannot be pickled")

    def __repr__(self) -> str:
        if self.released:
            return "GridManager(<released>)"
        return (
            f"GridManager({self._grid.dimensions}D, cartdims={self._grid.cartdims}, "
            f"cells={self._grid.number_of_cells})"
        )


def filter_pore_volumes(
    grdecl: GeologicalGridDescription,
    pore_volumes: np.ndarray,
    minpv: float,
) -> int:
    """
    Run minimum pore volume filtering on a description in place.

    ``grdecl.actnum`` is materialized as all ones if absent. The description's
    ``actnum`` and ``zcorn`` are the arrays later handed to the assembler.

    Returns
    -------
    int
        Number of cells modified.
    """
    nx, ny, nz = grdecl.dims
    if grdecl.actnum is None:
        grdecl.actnum = np.ones(nx * ny * nz, dtype=np.int32)
    grdecl.actnum = np.ascontiguousarray(grdecl.actnum)
    grdecl.zcorn = np.ascontiguousarray(grdecl.zcorn, dtype=np.float64)

    processor = MinpvProcessor(nx, ny, nz)
    # Only the OPM fill strategy is used here; the pinch processor
    # strategy (opmfil=False) is never selected
    return processor.process(pore_volumes, minpv, grdecl.actnum, True, grdecl.zcorn)
