"""
Corner-point grid description (the GRDECL input contract).
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import numpy.typing as npt

from ..constants import CORNERS_PER_CELL, MAPAXES_SIZE, VALUES_PER_PILLAR

NDArrayFloat = npt.NDArray[np.floating]
NDArrayInt = npt.NDArray[np.integer]


@dataclass
class GeologicalGridDescription:
    """
    Corner-point geometry handed to the corner-point assembler.
    
    Attributes
    ----------
    dims : tuple of int
        Number of cells (nx, ny, nz).
    coord : ndarray
        Pillar coordinates, 6 values per pillar, (nx+1)*(ny+1) pillars.
    zcorn : ndarray
        Corner elevations, 8 values per cell.
    actnum : ndarray or None
        Activity flags, one per cell. None means every cell is active.
    mapaxes : ndarray or None
        Areal transform (6 values). The array is owned by this
        description: extractors allocate a fresh buffer for it and
        keep no other reference, so callers may modify or drop it freely.
    """
    
    dims: Tuple[int, int, int]
    coord: NDArrayFloat
    zcorn: NDArrayFloat
    actnum: Optional[NDArrayInt] = None
    mapaxes: Optional[NDArrayFloat] = None
    
    @property
    def number_of_cells(self) -> int:
        nx, ny, nz = self.dims
        return nx * ny * nz
    
    @property
    def number_of_pillars(self) -> int:
        nx, ny, _ = self.dims
        return (nx + 1) * (ny + 1)
    
    def active_mask(self) -> np.ndarray:
        """Boolean activity per cell; all True when actnum is absent."""
        if self.actnum is None:
            return np.ones(self.number_of_cells, dtype=bool)
        return np.asarray(self.actnum).ravel() != 0
    
    def validation_errors(self) -> List[str]:
        """
        Check array sizes against the dimensions.
        
        Returns
        -------
        list of str
            One message per violated invariant; empty if the description is valid.
        """
        errors: List[str] = []
        
        if len(self.dims) != 3 or any(int(n) <= 0 for n in self.dims):
            errors.append(f"Dimensions must be three positive integers, got {tuple(self.dims)}")
            return errors
        
        n_coord = VALUES_PER_PILLAR * self.number_of_pillars
        if np.size(self.coord) != n_coord:
            errors.append(f"COORD has {np.size(self.coord)} values, expected {n_coord}")
        
        n_zcorn = CORNERS_PER_CELL * self.number_of_cells
        if np.size(self.zcorn) != n_zcorn:
            errors.append(f"ZCORN has {np.size(self.zcorn)} values, expected {n_zcorn}")
        
        if self.actnum is not None and np.size(self.actnum) != self.number_of_cells:
            errors.append(
                f"ACTNUM has {np.size(self.actnum)} values, expected {self.number_of_cells}"
            )
        
        if self.mapaxes is not None and np.size(self.mapaxes) != MAPAXES_SIZE:
            errors.append(f"MAPAXES has {np.size(self.mapaxes)} values, expected {MAPAXES_SIZE}")
        
        return errors
