"""
Grid loading utilities.
"""

from pathlib import Path
from typing import Optional, Union

import numpy as np
from loguru import logger

from ..config.schema import GridManagerConfig
from ..utils.logging import setup_logging
from .deck import Deck
from .manager import GridManager


def load_or_build_grid(
    config: Optional[GridManagerConfig] = None,
    deck: Optional[Deck] = None,
    pore_volumes: Optional[np.ndarray] = None,
    grid_file: Optional[Union[str, Path]] = None,
    configure_logging: bool = False,
) -> GridManager:
    """Load a grid from file, build it from a deck, or build a cartesian grid.
    
    The first available source wins: ``grid_file`` (or ``config.grid_file``),
    then ``deck``, then ``config.cartesian``.
    
    Parameters
    ----------
    config : GridManagerConfig, optional
        Processing and fallback grid settings. Defaults are used if omitted.
    deck : Deck, optional
        Corner-point deck. MINPV/PINCH settings come from ``config``, not
        from the deck's keywords.
    pore_volumes : ndarray, optional
        Pore volume per cell for minimum pore volume filtering (deck only).
    grid_file : str or Path, optional
        Grid file written by write_grid().
    configure_logging : bool
        Install the project log handler using ``config.logging``.
    
    Returns
    -------
    GridManager
        Owner of the constructed grid.
    
    Raises
    ------
    ConstructionError
        If the grid cannot be built or read.
    SchemaError
        If the deck lacks required keywords.
    """
    if config is None:
        config = GridManagerConfig()
    
    if configure_logging:
        setup_logging(config.logging.level, config.logging.show_time)
    
    if grid_file is None and config.grid_file is not None:
        grid_file = config.grid_file
    
    if grid_file is not None:
        logger.info(f"Loading grid from: {grid_file}")
        return GridManager.from_file(grid_file)
    
    if deck is not None:
        logger.info("Building corner-point grid from deck")
        return GridManager.from_deck(
            deck,
            pore_volumes=pore_volumes,
            minpv=config.minpv,
            pinch=config.pinch,
        )
    
    cart = config.cartesian
    logger.info(f"Building {cart.dimensions}D cartesian grid")
    if cart.dimensions == 2:
        return GridManager.cartesian_2d(cart.nx, cart.ny, cart.dx, cart.dy)
    if cart.dimensions == 3:
        return GridManager.cartesian_3d(cart.nx, cart.ny, cart.nz, cart.dx, cart.dy, cart.dz)
    raise ValueError(f"Cartesian grid dimension must be 2 or 3, got {cart.dimensions}")
