"""
Tests for the config-driven grid entry point.
"""

import numpy as np
import pytest

from cpgrid.config import GridManagerConfig, from_dict
from cpgrid.grid import ConstructionError, create_grid_cart3d, load_or_build_grid, write_grid


class TestLoadOrBuildGrid:
    """Source selection in load_or_build_grid."""
    
    def test_default_cartesian(self):
        with load_or_build_grid() as manager:
            assert manager.grid.number_of_cells == 100
    
    def test_cartesian_2d_from_config(self):
        config = from_dict({'cartesian': {'dimensions': 2, 'nx': 3, 'ny': 4, 'dx': 2.0}})
        
        with load_or_build_grid(config) as manager:
            assert manager.grid.dimensions == 2
            assert manager.grid.number_of_cells == 12
            np.testing.assert_allclose(manager.grid.cell_volumes, 2.0)
    
    def test_invalid_cartesian_dimension(self):
        config = from_dict({'cartesian': {'dimensions': 4}})
        with pytest.raises(ValueError, match="2 or 3"):
            load_or_build_grid(config)
    
    def test_deck_uses_config_processing(self, layer_cake_deck):
        deck = layer_cake_deck(1, 1, 3, thicknesses=[1.0, 0.01, 1.0])
        config = from_dict({
            'minpv': {'mode': 'opmfil', 'threshold': 1.0},
            'pinch': {'active': False},
        })
        
        with load_or_build_grid(config, deck=deck, pore_volumes=np.array([5.0, 0.5, 5.0])) as manager:
            assert manager.grid.number_of_cells == 2
            assert manager.grid.zcorn is not None
    
    def test_grid_file_wins(self, tmp_path, layer_cake_deck):
        filename = tmp_path / "cube.grid"
        write_grid(create_grid_cart3d(2, 2, 2), filename)
        config = GridManagerConfig(grid_file=str(filename))
        
        with load_or_build_grid(config, deck=layer_cake_deck(1, 1, 1)) as manager:
            assert manager.grid.number_of_cells == 8
    
    def test_missing_grid_file(self, tmp_path):
        with pytest.raises(ConstructionError, match="absent.grid"):
            load_or_build_grid(grid_file=tmp_path / "absent.grid")
    
    def test_configure_logging(self):
        config = from_dict({'logging': {'level': 'WARNING', 'show_time': False}})
        with load_or_build_grid(config, configure_logging=True) as manager:
            assert manager.grid.number_of_cells == 100
