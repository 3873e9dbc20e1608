"""
Extraction of corner-point descriptions from geological sources and decks.
"""

from typing import TYPE_CHECKING, Tuple

import numpy as np
from loguru import logger

from ..constants import DIMS_SIZE
from .deck import Deck
from .description import GeologicalGridDescription
from .errors import SchemaError

if TYPE_CHECKING:
    from .eclipse_grid import GeologicalSource


def extract_description(source: "GeologicalSource") -> GeologicalGridDescription:
    """
    Project a structured geological source onto a GeologicalGridDescription.

    Every array comes from the source's export_* methods, which return fresh
    copies, so later filtering of the description never touches the source.
    """
    mapaxes = source.export_mapaxes()
    if mapaxes is not None and np.size(mapaxes) == 0:
        mapaxes = None

    description = GeologicalGridDescription(
        dims=tuple(int(n) for n in source.dims),
        coord=source.export_coord(),
        zcorn=source.export_zcorn(),
        actnum=source.export_actnum(),
        mapaxes=mapaxes,
    )
    logger.debug(
        f"Extracted corner-point description {description.dims}, "
        f"mapaxes={'yes' if mapaxes is not None else 'no'}"
    )
    return description


def _read_dims(deck: Deck, name: str) -> Tuple[int, int, int]:
    record = deck.get_keyword(name).get_record(0)
    return tuple(int(record.get_item(i).get(0)) for i in range(DIMS_SIZE))


def create_grdecl(deck: Deck) -> GeologicalGridDescription:
    """
    Build a corner-point description directly from deck keywords.

    Parameters
    ----------
    deck : Deck
        Keyword source. Must contain ZCORN, COORD and either DIMENS or
        SPECGRID; ACTNUM and MAPAXES are optional.

    Returns
    -------
    GeologicalGridDescription
        ACTNUM absent gives ``actnum=None`` (all active). MAPAXES present
        gives a newly allocated array owned by the description; it shares
        no memory with the deck.

    Raises
    ------
    SchemaError
        If neither DIMENS nor SPECGRID is present, or ZCORN/COORD is missing.
    """
    if deck.has_keyword("DIMENS"):
        dims = _read_dims(deck, "DIMENS")
    elif deck.has_keyword("SPECGRID"):
        dims = _read_dims(deck, "SPECGRID")
    else:
        raise SchemaError("Deck must have either DIMENS or SPECGRID.")

    missing = [name for name in ("ZCORN", "COORD") if not deck.has_keyword(name)]
    if missing:
        raise SchemaError(f"Deck is missing required keyword(s): {', '.join(missing)}")

    zcorn = deck.get_keyword("ZCORN").get_si_double_data()
    coord = deck.get_keyword("COORD").get_si_double_data()

    actnum = None
    if deck.has_keyword("ACTNUM"):
        actnum = deck.get_keyword("ACTNUM").get_int_data()

    mapaxes = None
    if deck.has_keyword("MAPAXES"):
        record = deck.get_keyword("MAPAXES").get_record(0)
        mapaxes = np.empty(record.size(), dtype=np.float64)
        for i in range(record.size()):
            mapaxes[i] = record.get_item(i).get_si_double(0)

    logger.debug(
        f"Deck grid {dims}: actnum={'yes' if actnum is not None else 'all active'}, "
        f"mapaxes={'yes' if mapaxes is not None else 'no'}"
    )

    return GeologicalGridDescription(
        dims=dims,
        coord=coord,
        zcorn=zcorn,
        actnum=actnum,
        mapaxes=mapaxes,
    )
