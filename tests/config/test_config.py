"""
Tests for YAML configuration loading.
"""

import pytest

from cpgrid.config import (
    GridManagerConfig,
    MinpvConfig,
    PinchConfig,
    apply_overrides,
    from_dict,
    load_yaml,
    save_yaml,
)


class TestSchema:
    """Dataclass defaults and validation."""
    
    def test_defaults(self):
        config = GridManagerConfig()
        
        assert config.minpv.mode == "inactive"
        assert config.minpv.opmfil
        assert not config.pinch.active
        assert config.pinch.threshold_thickness == pytest.approx(0.001)
        assert config.grid_file is None

    def test_invalid_minpv_mode(self):
        with pytest.raises(ValueError, match="minpv mode"):
            MinpvConfig(mode="sometimes")

    def test_pinch_fields(self):
        config = PinchConfig(active=True, threshold_thickness=0.3)
        assert config.active
        assert config.threshold_thickness == 0.3


class TestLoader:
    """from_dict / load_yaml / save_yaml."""
    
    def test_from_dict(self):
        config = from_dict({
            'minpv': {'mode': 'eclstd', 'threshold': '1e3', 'unknown': 1},
            'pinch': {'active': True, 'threshold_thickness': 1},
            'cartesian': {'nx': '4'},
        })
        
        assert config.minpv.mode == 'eclstd'
        assert config.minpv.threshold == 1000.0
        assert isinstance(config.pinch.threshold_thickness, float)
        assert config.cartesian.nx == 4
        assert config.cartesian.ny == 10
    
    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            from_dict({'pinch': True})
    
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "grid.yaml"
        path.write_text(
            "minpv:\n"
            "  mode: opmfil\n"
            "  threshold: 5.0\n"
            "pinch:\n"
            "  active: true\n"
            "grid_file: cube.grid\n"
        )
        
        config = load_yaml(path)
        
        assert config.minpv.mode == "opmfil"
        assert config.minpv.threshold == 5.0
        assert config.pinch.active
        assert config.pinch.threshold_thickness == pytest.approx(0.001)
        assert config.grid_file == "cube.grid"
    
    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        
        assert load_yaml(path).minpv.mode == "inactive"
    
    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "missing.yaml")
    
    def test_invalid_mode_in_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("minpv:\n  mode: never\n")
        
        with pytest.raises(ValueError):
            load_yaml(path)
    
    def test_save_and_load(self, tmp_path):
        config = from_dict({'pinch': {'active': True, 'threshold_thickness': 0.02}})
        path = tmp_path / "out" / "config.yaml"
        
        save_yaml(config, path)
        
        assert load_yaml(path).to_dict() == config.to_dict()
    
    def test_apply_overrides(self):
        base = GridManagerConfig()
        updated = apply_overrides(base, {'minpv': {'mode': 'opmfil'}})
        
        assert updated.minpv.mode == 'opmfil'
        assert base.minpv.mode == 'inactive'
        assert updated.cartesian == base.cartesian
