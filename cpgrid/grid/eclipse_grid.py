"""
Structured geological grid sources.

GeologicalSource is the interface GridManager.from_eclipse_grid() reads
from. EclipseGrid is the in-package implementation, built from arrays or
from a Deck.
"""

from typing import Optional, Protocol, Tuple, runtime_checkable

import numpy as np
from loguru import logger

from ..config.schema import MinpvConfig, PinchConfig
from ..constants import DEFAULT_PINCH_THICKNESS
from .deck import Deck
from .extraction import create_grdecl


@runtime_checkable
class GeologicalSource(Protocol):
    """Read-only view of a corner-point geological grid."""

    @property
    def dims(self) -> Tuple[int, int, int]: ...

    def export_coord(self) -> np.ndarray: ...

    def export_zcorn(self) -> np.ndarray: ...

    def export_actnum(self) -> np.ndarray: ...

    def export_mapaxes(self) -> Optional[np.ndarray]: ...

    @property
    def pinch_active(self) -> bool: ...

    @property
    def pinch_threshold_thickness(self) -> float: ...

    @property
    def minpv_mode(self) -> str: ...

    @property
    def minpv_value(self) -> float: ...


class EclipseGrid:
    """
    Corner-point grid with its pinch and minimum pore volume settings.

    The export_* methods return copies; the grid itself is never modified
    by grid construction.

    Example
    -------
    >>> grid = EclipseGrid.from_deck(deck, pinch=PinchConfig(active=True))
    >>> manager = GridManager.from_eclipse_grid(grid, pore_volumes)
    """

    def __init__(
        self,
        dims: Tuple[int, int, int],
        coord: np.ndarray,
        zcorn: np.ndarray,
        actnum: Optional[np.ndarray] = None,
        mapaxes: Optional[np.ndarray] = None,
        minpv: Optional[MinpvConfig] = None,
        pinch: Optional[PinchConfig] = None,
    ):
        self._dims = tuple(int(n) for n in dims)
        self._coord = np.array(coord, dtype=np.float64)
        self._zcorn = np.array(zcorn, dtype=np.float64)
        self._actnum = None if actnum is None else np.array(actnum, dtype=np.int32)
        self._mapaxes = None if mapaxes is None else np.array(mapaxes, dtype=np.float64)
        self.minpv = minpv if minpv is not None else MinpvConfig()
        self.pinch = pinch if pinch is not None else PinchConfig()

    @classmethod
    def from_deck(
        cls,
        deck: Deck,
        minpv: Optional[MinpvConfig] = None,
        pinch: Optional[PinchConfig] = None,
    ) -> "EclipseGrid":
        """
        Build a grid from deck keywords.

        Grid geometry comes from create_grdecl(). Processing options are read
        from MINPV / MINPVFIL and PINCH unless given explicitly.
        """
        grdecl = create_grdecl(deck)

        if minpv is None:
            minpv = _minpv_from_deck(deck)
        if pinch is None:
            pinch = _pinch_from_deck(deck)

        logger.debug(f"EclipseGrid from deck: minpv={minpv}, pinch={pinch}")
        return cls(
            grdecl.dims,
            grdecl.coord,
            grdecl.zcorn,
            actnum=grdecl.actnum,
            mapaxes=grdecl.mapaxes,
            minpv=minpv,
            pinch=pinch,
        )

    @property
    def dims(self) -> Tuple[int, int, int]:
        return self._dims

    @property
    def nx(self) -> int:
        return self._dims[0]

    @property
    def ny(self) -> int:
        return self._dims[1]

    @property
    def nz(self) -> int:
        return self._dims[2]

    def export_coord(self) -> np.ndarray:
        return self._coord.copy()

    def export_zcorn(self) -> np.ndarray:
        return self._zcorn.copy()

    def export_actnum(self) -> np.ndarray:
        """Activity flags; all ones when the grid has no ACTNUM."""
        if self._actnum is None:
            return np.ones(self.nx * self.ny * self.nz, dtype=np.int32)
        return self._actnum.copy()

    def export_mapaxes(self) -> Optional[np.ndarray]:
        return None if self._mapaxes is None else self._mapaxes.copy()

    @property
    def pinch_active(self) -> bool:
        return self.pinch.active

    @property
    def pinch_threshold_thickness(self) -> float:
        return self.pinch.threshold_thickness

    @property
    def minpv_mode(self) -> str:
        return self.minpv.mode

    @property
    def minpv_value(self) -> float:
        return self.minpv.threshold


def _minpv_from_deck(deck: Deck) -> MinpvConfig:
    # MINPVFIL wins over MINPV
    for name, mode in (("MINPVFIL", "opmfil"), ("MINPV", "eclstd")):
        if deck.has_keyword(name):
            value = deck.get_keyword(name).get_record(0).get_item(0).get_si_double(0)
            return MinpvConfig(mode=mode, threshold=value)
    return MinpvConfig()


def _pinch_from_deck(deck: Deck) -> PinchConfig:
    if not deck.has_keyword("PINCH"):
        return PinchConfig(active=False)

    record = deck.get_keyword("PINCH").get_record(0)
    thickness = DEFAULT_PINCH_THICKNESS
    if record.size() > 0 and record.get_item(0).get(0) is not None:
        thickness = record.get_item(0).get_si_double(0)
    return PinchConfig(active=True, threshold_thickness=thickness)


def compute_z_tolerance(source: GeologicalSource) -> float:
    """Vertical merge tolerance: the pinch thickness if pinch is active, else 0.0."""
    return float(source.pinch_threshold_thickness) if source.pinch_active else 0.0
