"""
YAML configuration loader with validation.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Union
from dataclasses import fields, is_dataclass

from .schema import (
    GridManagerConfig, MinpvConfig, PinchConfig,
    CartesianConfig, LoggingConfig,
)


_SECTIONS = {
    'minpv': MinpvConfig,
    'pinch': PinchConfig,
    'cartesian': CartesianConfig,
    'logging': LoggingConfig,
}


def _merge_dict(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def _coerce_type(value, field_type):
    """Coerce value to the expected field type."""
    # YAML reads "1e6" without a dot as a string
    if field_type in (float, 'float') and isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    if field_type in (int, 'int') and isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return value
    if field_type in (float, 'float') and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def _dict_to_dataclass(cls, data: dict):
    """Convert a flat dictionary to a dataclass instance."""
    if not is_dataclass(cls):
        return data
    
    field_types = {f.name: f.type for f in fields(cls)}
    kwargs = {}
    
    for key, value in data.items():
        if key not in field_types:
            continue  # Skip unknown fields
        kwargs[key] = _coerce_type(value, field_types[key])
    
    return cls(**kwargs)


def load_yaml(path: Union[str, Path]) -> GridManagerConfig:
    """
    Load grid configuration from a YAML file.
    
    Args:
        path: Path to YAML configuration file
        
    Returns:
        GridManagerConfig instance
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If a value fails schema validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    
    with open(path) as f:
        data = yaml.safe_load(f)
    
    if data is None:
        data = {}
    
    return from_dict(data)


def from_dict(data: Dict[str, Any]) -> GridManagerConfig:
    """
    Create GridManagerConfig from a dictionary.
    
    Sections missing from ``data`` get their defaults.
    """
    config_dict = {}
    
    for name, cls in _SECTIONS.items():
        section = data.get(name)
        if section is None:
            continue
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
        config_dict[name] = _dict_to_dataclass(cls, section)
    
    if data.get('grid_file') is not None:
        config_dict['grid_file'] = str(data['grid_file'])
    
    return GridManagerConfig(**config_dict)


def apply_overrides(config: GridManagerConfig, overrides: Dict[str, Any]) -> GridManagerConfig:
    """
    Apply nested overrides (e.g. ``{'pinch': {'active': True}}``) to a config.
    
    Returns a new GridManagerConfig; the input is not modified.
    """
    merged = _merge_dict(config.to_dict(), overrides)
    return from_dict(merged)


def save_yaml(config: GridManagerConfig, path: Union[str, Path]) -> None:
    """Save configuration to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    
    with open(path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
