"""
Configuration module for grid construction.

Provides YAML-based configuration with dataclass schema.
"""

from .schema import (
    GridManagerConfig,
    MinpvConfig,
    PinchConfig,
    CartesianConfig,
    LoggingConfig,
    MINPV_MODES,
)

from .loader import (
    load_yaml,
    from_dict,
    apply_overrides,
    save_yaml,
)

__all__ = [
    # Schema classes
    'GridManagerConfig',
    'MinpvConfig',
    'PinchConfig',
    'CartesianConfig',
    'LoggingConfig',
    'MINPV_MODES',
    # Loader functions
    'load_yaml',
    'from_dict',
    'apply_overrides',
    'save_yaml',
]
