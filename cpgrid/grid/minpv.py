"""
Minimum pore volume processing.

Cells whose pore volume is below the threshold are collapsed onto their
top face and deactivated. With the OPM fill strategy the first active cell
below in the same column is extended upwards to close the gap.
"""

import numpy as np
from loguru import logger


class MinpvProcessor:
    """
    Minimum pore volume filter for a corner-point grid of nx x ny x nz cells.

    Example
    -------
    >>> mp = MinpvProcessor(nx, ny, nz)
    >>> n_modified = mp.process(pv, 1e3, actnum, True, zcorn)
    """

    def __init__(self, nx: int, ny: int, nz: int):
        self.dims = (int(nx), int(ny), int(nz))

    @property
    def number_of_cells(self) -> int:
        nx, ny, nz = self.dims
        return nx * ny * nz

    def process(
        self,
        pore_volumes: np.ndarray,
        minpv: float,
        actnum: np.ndarray,
        opmfil: bool,
        zcorn: np.ndarray,
    ) -> int:
        """
        Collapse and deactivate cells with pore volume below ``minpv``.

        Layers are processed from top (k=0) to bottom, so a gap closed by
        extending a cell that is itself below the threshold is passed on
        to the next active cell further down.

        Parameters
        ----------
        pore_volumes : ndarray, shape (nx*ny*nz,)
            Pore volume of each cell in cartesian order.
        minpv : float
            Threshold pore volume.
        actnum : ndarray, shape (nx*ny*nz,)
            Activity flags, modified in place.
        opmfil : bool
            If True, extend the next active cell below over the collapsed
            cell. If False (pinch processor strategy), only collapse.
        zcorn : ndarray, shape (8*nx*ny*nz,)
            Corner elevations, modified in place.

        Returns
        -------
        int
            Number of cells collapsed and deactivated.
        """
        nx, ny, nz = self.dims
        n_cells = self.number_of_cells

        pv = np.asarray(pore_volumes, dtype=np.float64).ravel()
        if pv.size != n_cells:
            raise ValueError(f"Expected {n_cells} pore volumes, got {pv.size}")
        if actnum.size != n_cells:
            raise ValueError(f"Expected {n_cells} ACTNUM values, got {actnum.size}")
        if zcorn.size != 8 * n_cells:
            raise ValueError(f"Expected {8 * n_cells} ZCORN values, got {zcorn.size}")
        if not (actnum.flags.c_contiguous and zcorn.flags.c_contiguous):
            raise ValueError("ACTNUM and ZCORN must be C-contiguous to be updated in place")

        # Views: writes go straight to the caller's arrays
        act = actnum.reshape(nz, ny, nx)
        zc = zcorn.reshape(2 * nz, 2 * ny, 2 * nx)
        small = pv.reshape(nz, ny, nx) < minpv

        cells_modified = 0
        for k in range(nz):
            collapse = small[k] & (act[k] != 0)
            if not collapse.any():
                continue

            corners = np.repeat(np.repeat(collapse, 2, axis=0), 2, axis=1)
            top = zc[2 * k]
            zc[2 * k + 1][corners] = top[corners]
            act[k][collapse] = 0
            cells_modified += int(collapse.sum())

            if opmfil:
                pending = collapse.copy()
                for k_below in range(k + 1, nz):
                    hit = pending & (act[k_below] != 0)
                    if hit.any():
                        hit_corners = np.repeat(np.repeat(hit, 2, axis=0), 2, axis=1)
                        zc[2 * k_below][hit_corners] = top[hit_corners]
                        pending &= ~hit
                    if not pending.any():
                        break

        logger.debug(f"Minpv {minpv:g}: {cells_modified} cell(s) collapsed (opmfil={opmfil})")
        return cells_modified
