"""
Grid construction module.

This module provides tools for:
- Extracting corner-point descriptions from geological grids and decks
- Minimum pore volume filtering
- Assembling corner-point and cartesian grids
- Owning grid handles through GridManager
"""

from .errors import (
    GridError,
    ConstructionError,
    SchemaError,
)

from .deck import (
    Deck,
    DeckKeyword,
    DeckRecord,
    DeckItem,
)

from .description import GeologicalGridDescription

from .eclipse_grid import (
    GeologicalSource,
    EclipseGrid,
    compute_z_tolerance,
)

from .extraction import (
    extract_description,
    create_grdecl,
)

from .minpv import MinpvProcessor

from .unstructured import (
    UnstructuredGrid,
    destroy_grid,
)

from .cornerpoint import (
    create_grid_cornerpoint,
    attach_zcorn_copy,
)

from .cartesian import (
    create_grid_cart2d,
    create_grid_cart3d,
    create_grid_hexa3d,
)

from .grid_io import (
    read_grid,
    write_grid,
)

from .manager import (
    GridManager,
    filter_pore_volumes,
)

from .loader import load_or_build_grid

__all__ = [
    # Errors
    'GridError',
    'ConstructionError',
    'SchemaError',
    # Deck
    'Deck',
    'DeckKeyword',
    'DeckRecord',
    'DeckItem',
    # Sources and extraction
    'GeologicalGridDescription',
    'GeologicalSource',
    'EclipseGrid',
    'compute_z_tolerance',
    'extract_description',
    'create_grdecl',
    # Processing and assembly
    'MinpvProcessor',
    'UnstructuredGrid',
    'destroy_grid',
    'create_grid_cornerpoint',
    'attach_zcorn_copy',
    'create_grid_cart2d',
    'create_grid_cart3d',
    'create_grid_hexa3d',
    'read_grid',
    'write_grid',
    # Ownership
    'GridManager',
    'filter_pore_volumes',
    'load_or_build_grid',
]
