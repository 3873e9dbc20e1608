"""
In-memory deck of keywords.

A Deck holds keywords in input order; each keyword has records, each
record has items, and each item holds one or more raw values in deck
units. SI conversion happens on read through the get_si_* accessors,
using the deck's unit system and the item dimensions in KEYWORD_DIMENSIONS.

Parsing deck text is not handled here; decks are built with
Deck.add_keyword() or Deck.from_dict().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from ..constants import LENGTH_UNITS


# Physical dimension of each item, per keyword. Keywords not listed are
# dimensionless; a single entry applies to every item of the record.
KEYWORD_DIMENSIONS: Dict[str, List[Optional[str]]] = {
    "ZCORN": ["length"],
    "COORD": ["length"],
    "MAPAXES": ["length"],
    "PINCH": ["length", None, "length", None, None],
    "MINPV": ["volume"],
    "MINPVFIL": ["volume"],
}

# Keywords whose single record is one flat data item
DATA_KEYWORDS = ("ZCORN", "COORD", "ACTNUM", "PORV")


def si_factor(unit_system: str, dimension: Optional[str]) -> float:
    """Multiplier converting a value of the given dimension to SI."""
    try:
        length = LENGTH_UNITS[unit_system]
    except KeyError:
        raise ValueError(
            f"Unknown unit system '{unit_system}', expected one of {tuple(LENGTH_UNITS)}"
        ) from None

    if dimension is None:
        return 1.0
    if dimension == "length":
        return length
    if dimension == "volume":
        return length ** 3
    raise ValueError(f"Unknown dimension '{dimension}'")


@dataclass
class DeckItem:
    """One item of a record: a list of raw values in deck units."""

    values: List[Any]
    dimension: Optional[str] = None
    unit_system: str = "METRIC"

    def size(self) -> int:
        return len(self.values)

    def get(self, index: int) -> Any:
        return self.values[index]

    def get_si_double(self, index: int) -> float:
        return float(self.values[index]) * si_factor(self.unit_system, self.dimension)

    def get_si_double_data(self) -> np.ndarray:
        data = np.asarray(self.values, dtype=np.float64)
        return data * si_factor(self.unit_system, self.dimension)

    def get_int_data(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.int32)


@dataclass
class DeckRecord:
    """A record: an ordered list of items."""

    items: List[DeckItem]

    def size(self) -> int:
        return len(self.items)

    def get_item(self, index: int) -> DeckItem:
        return self.items[index]


@dataclass
class DeckKeyword:
    """A named keyword with its records."""

    name: str
    records: List[DeckRecord] = field(default_factory=list)

    @classmethod
    def from_values(
        cls,
        name: str,
        records: Sequence[Sequence[Any]],
        unit_system: str = "METRIC",
    ) -> "DeckKeyword":
        """
        Build a keyword from plain values.

        Parameters
        ----------
        name : str
            Keyword name (case-insensitive, stored upper case).
        records : sequence of sequences
            One entry per record. For data keywords (ZCORN, COORD, ACTNUM,
            PORV) the record's values form a single item; otherwise every
            value is its own item.
        unit_system : str
            Unit system of the raw values.
        """
        name = name.upper()
        dims = KEYWORD_DIMENSIONS.get(name, [])

        def dimension_of(index: int) -> Optional[str]:
            if len(dims) == 1:
                return dims[0]
            return dims[index] if index < len(dims) else None

        deck_records = []
        for values in records:
            if name in DATA_KEYWORDS:
                items = [DeckItem(list(values), dimension_of(0), unit_system)]
            else:
                items = [
                    DeckItem([value], dimension_of(i), unit_system)
                    for i, value in enumerate(values)
                ]
            deck_records.append(DeckRecord(items))

        return cls(name, deck_records)

    def size(self) -> int:
        return len(self.records)

    def get_record(self, index: int) -> DeckRecord:
        return self.records[index]

    def get_data_item(self) -> DeckItem:
        if len(self.records) != 1 or self.records[0].size() != 1:
            raise ValueError(f"Keyword {self.name} is not a data keyword")
        return self.records[0].get_item(0)

    def get_si_double_data(self) -> np.ndarray:
        """All values of a data keyword, converted to SI. Returns a new array."""
        return self.get_data_item().get_si_double_data()

    def get_int_data(self) -> np.ndarray:
        return self.get_data_item().get_int_data()


class Deck:
    """
    Ordered collection of keywords.

    Example
    -------
    >>> deck = Deck.from_dict({
    ...     "DIMENS": [[1, 1, 1]],
    ...     "COORD": [[0, 0, 0, 0, 0, 1,  1, 0, 0, 1, 0, 1,
    ...                0, 1, 0, 0, 1, 1,  1, 1, 0, 1, 1, 1]],
    ...     "ZCORN": [[0.0] * 4 + [1.0] * 4],
    ... })
    >>> deck.has_keyword("ACTNUM")
    False
    """

    def __init__(self, unit_system: str = "METRIC"):
        unit_system = unit_system.upper()
        si_factor(unit_system, None)  # validates
        self.unit_system = unit_system
        self._keywords: List[DeckKeyword] = []

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[Sequence[Any]]], unit_system: str = "METRIC") -> "Deck":
        """Build a deck from ``{keyword: [record_values, ...]}`` in mapping order."""
        deck = cls(unit_system)
        for name, records in data.items():
            deck.add_keyword(name, records)
        return deck

    def add_keyword(self, name: str, records: Sequence[Sequence[Any]]) -> DeckKeyword:
        keyword = DeckKeyword.from_values(name, records, self.unit_system)
        self._keywords.append(keyword)
        return keyword

    def has_keyword(self, name: str) -> bool:
        name = name.upper()
        return any(kw.name == name for kw in self._keywords)

    def get_keyword(self, name: str) -> DeckKeyword:
        """Return the last occurrence of a keyword. Raises KeyError if absent."""
        name = name.upper()
        for keyword in reversed(self._keywords):
            if keyword.name == name:
                return keyword
        raise KeyError(f"Keyword {name} not in deck")

    def keyword_names(self) -> List[str]:
        return [kw.name for kw in self._keywords]

    def __len__(self) -> int:
        return len(self._keywords)
