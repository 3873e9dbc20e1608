"""
Shared pytest fixtures for the test suite.

Provides builders for "layer cake" corner-point grids: vertical pillars on
a regular areal lattice and flat layers of given thicknesses.
"""

import pytest
import numpy as np
from typing import Optional, Sequence, Tuple

from cpgrid.grid.deck import Deck


# =============================================================================
# Corner-point builders
# =============================================================================

def make_layer_cake(
    nx: int, ny: int, nz: int,
    dx: float = 1.0, dy: float = 1.0,
    thicknesses: Optional[Sequence[float]] = None,
    top: float = 0.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build COORD and ZCORN for flat layers on vertical pillars.
    
    Parameters
    ----------
    nx, ny, nz : int
        Number of cells.
    dx, dy : float
        Areal cell size.
    thicknesses : sequence of float, optional
        Thickness of each layer (default 1.0 each).
    top : float
        Elevation of the top surface.
        
    Returns
    -------
    coord : ndarray, shape (6*(nx+1)*(ny+1),)
    zcorn : ndarray, shape (8*nx*ny*nz,)
    """
    if thicknesses is None:
        thicknesses = [1.0] * nz
    levels = top + np.concatenate([[0.0], np.cumsum(thicknesses)])
    
    j, i = np.meshgrid(np.arange(ny + 1), np.arange(nx + 1), indexing='ij')
    x = (i * dx).ravel().astype(float)
    y = (j * dy).ravel().astype(float)
    coord = np.column_stack([
        x, y, np.full_like(x, levels[0]),
        x, y, np.full_like(x, levels[-1]),
    ]).ravel()
    
    z_layers = np.array([levels[k + dk] for k in range(nz) for dk in (0, 1)])
    zcorn = np.broadcast_to(z_layers[:, None, None], (2 * nz, 2 * ny, 2 * nx)).ravel().copy()
    
    return coord, zcorn


@pytest.fixture
def layer_cake():
    """Factory fixture: make_layer_cake(nx, ny, nz, ...) -> (coord, zcorn)."""
    return make_layer_cake


@pytest.fixture
def layer_cake_deck():
    """
    Factory fixture building a METRIC deck with DIMENS, COORD and ZCORN.
    
    Extra keyword arguments are passed to make_layer_cake().
    """
    def build(nx: int, ny: int, nz: int, unit_system: str = "METRIC", **kwargs) -> Deck:
        coord, zcorn = make_layer_cake(nx, ny, nz, **kwargs)
        return Deck.from_dict({
            "DIMENS": [[nx, ny, nz]],
            "COORD": [coord.tolist()],
            "ZCORN": [zcorn.tolist()],
        }, unit_system=unit_system)
    
    return build
