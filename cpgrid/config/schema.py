"""
Configuration schema for corner-point grid processing.

Dataclass-based configuration that can be loaded from YAML or constructed programmatically.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional

from ..constants import DEFAULT_PINCH_THICKNESS


# Minimum pore volume modes:
# - "inactive": no filtering
# - "eclstd":   MINPV keyword semantics
# - "opmfil":   MINPVFIL keyword semantics
MINPV_MODES = ("inactive", "eclstd", "opmfil")


@dataclass
class MinpvConfig:
    """Minimum pore volume filtering configuration."""
    
    mode: str = "inactive"
    threshold: float = 0.0     # Pore volume threshold [m^3]
    
    # Merging strategy: True fills the collapsed gap from the cell below,
    # False selects the pinch processor strategy. Currently ignored:
    # GridManager always filters with True whatever this is set to
    opmfil: bool = True

    def __post_init__(self):
        if self.mode not in MINPV_MODES:
            raise ValueError(
                f"Unknown minpv mode '{self.mode}', expected one of {MINPV_MODES}"
            )


@dataclass
class PinchConfig:
    """Pinch-out configuration."""

    active: bool = False
    threshold_thickness: float = DEFAULT_PINCH_THICKNESS  # [m]


@dataclass
class CartesianConfig:
    """Regular grid configuration, used when no deck is supplied."""
    
    nx: int = 10
    ny: int = 10
    nz: int = 1
    dx: float = 1.0
    dy: float = 1.0
    dz: float = 1.0
    dimensions: int = 3        # 2 or 3


@dataclass
class LoggingConfig:
    """Logging configuration."""
    
    level: str = "INFO"
    show_time: bool = True


@dataclass
class GridManagerConfig:
    """Complete grid construction configuration."""
    
    minpv: MinpvConfig = field(default_factory=MinpvConfig)
    pinch: PinchConfig = field(default_factory=PinchConfig)
    cartesian: CartesianConfig = field(default_factory=CartesianConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    grid_file: Optional[str] = None
    
    def to_dict(self) -> dict:
        """Convert to nested dictionary."""
        return asdict(self)
