"""
Tests for deck keyword extraction (create_grdecl).

Tests cover:
1. DIMENS takes precedence over SPECGRID
2. Missing dimension or geometry keywords raise SchemaError
3. ACTNUM and MAPAXES are None when absent
4. MAPAXES is copied into a new, independent buffer
5. SI scaling of FIELD decks
"""

import numpy as np
import pytest

from cpgrid.grid.deck import Deck
from cpgrid.grid.errors import SchemaError
from cpgrid.grid.extraction import create_grdecl


class TestDimensions:
    """Dimension keyword resolution."""
    
    def test_dimens(self, layer_cake_deck):
        deck = layer_cake_deck(2, 3, 1)
        assert create_grdecl(deck).dims == (2, 3, 1)
    
    def test_dimens_wins_over_specgrid(self, layer_cake_deck):
        deck = layer_cake_deck(2, 3, 1)
        deck.add_keyword("SPECGRID", [[5, 6, 7, 1, "F"]])
        
        assert create_grdecl(deck).dims == (2, 3, 1)
    
    def test_specgrid_fallback(self, layer_cake):
        coord, zcorn = layer_cake(2, 1, 2)
        deck = Deck.from_dict({
            "SPECGRID": [[2, 1, 2, 1, "F"]],
            "COORD": [coord.tolist()],
            "ZCORN": [zcorn.tolist()],
        })
        
        assert create_grdecl(deck).dims == (2, 1, 2)
    
    def test_no_dimensions_raises(self, layer_cake):
        coord, zcorn = layer_cake(1, 1, 1)
        deck = Deck.from_dict({"COORD": [coord.tolist()], "ZCORN": [zcorn.tolist()]})
        
        with pytest.raises(SchemaError, match="DIMENS or SPECGRID"):
            create_grdecl(deck)


class TestGeometryKeywords:
    """ZCORN, COORD, ACTNUM and MAPAXES handling."""
    
    def test_missing_zcorn_raises(self, layer_cake):
        coord, _ = layer_cake(1, 1, 1)
        deck = Deck.from_dict({"DIMENS": [[1, 1, 1]], "COORD": [coord.tolist()]})
        
        with pytest.raises(SchemaError, match="ZCORN"):
            create_grdecl(deck)
    
    def test_arrays(self, layer_cake_deck, layer_cake):
        coord, zcorn = layer_cake(2, 2, 2)
        grdecl = create_grdecl(layer_cake_deck(2, 2, 2))
        
        np.testing.assert_allclose(grdecl.coord, coord)
        np.testing.assert_allclose(grdecl.zcorn, zcorn)
        assert grdecl.validation_errors() == []
    
    def test_actnum_absent_is_none(self, layer_cake_deck):
        grdecl = create_grdecl(layer_cake_deck(2, 1, 1))
        
        assert grdecl.actnum is None
        assert grdecl.active_mask().all()
    
    def test_actnum_present(self, layer_cake_deck):
        deck = layer_cake_deck(2, 1, 1)
        deck.add_keyword("ACTNUM", [[1, 0]])
        
        np.testing.assert_array_equal(create_grdecl(deck).actnum, [1, 0])
    
    def test_mapaxes_absent_is_none(self, layer_cake_deck):
        assert create_grdecl(layer_cake_deck(1, 1, 1)).mapaxes is None
    
    def test_mapaxes_is_independent_buffer(self, layer_cake_deck):
        deck = layer_cake_deck(1, 1, 1)
        deck.add_keyword("MAPAXES", [[0.0, 100.0, 0.0, 0.0, 100.0, 0.0]])
        
        grdecl = create_grdecl(deck)
        np.testing.assert_allclose(grdecl.mapaxes, [0.0, 100.0, 0.0, 0.0, 100.0, 0.0])
        
        grdecl.mapaxes[:] = -1.0
        record = deck.get_keyword("MAPAXES").get_record(0)
        assert [record.get_item(i).get(0) for i in range(6)] == [0.0, 100.0, 0.0, 0.0, 100.0, 0.0]
        
        # A second extraction gets its own buffer
        again = create_grdecl(deck)
        assert not np.shares_memory(again.mapaxes, grdecl.mapaxes)
        assert again.mapaxes[1] == 100.0


class TestUnits:
    """SI scaling of deck values."""
    
    def test_field_units(self, layer_cake_deck):
        deck = layer_cake_deck(1, 1, 1, unit_system="FIELD", dx=10.0, dy=10.0, thicknesses=[10.0])
        deck.add_keyword("MAPAXES", [[0.0, 1.0, 0.0, 0.0, 1.0, 0.0]])
        grdecl = create_grdecl(deck)
        
        assert grdecl.zcorn.max() == pytest.approx(3.048)
        assert grdecl.coord.max() == pytest.approx(3.048)
        assert grdecl.mapaxes[1] == pytest.approx(0.3048)
    
    def test_unknown_unit_system(self):
        with pytest.raises(ValueError, match="unit system"):
            Deck("IMPERIAL")


class TestDeck:
    """Deck container behaviour."""
    
    def test_last_occurrence_wins(self):
        deck = Deck()
        deck.add_keyword("DIMENS", [[1, 1, 1]])
        deck.add_keyword("DIMENS", [[2, 2, 2]])
        
        assert deck.get_keyword("dimens").get_record(0).get_item(0).get(0) == 2
        assert deck.keyword_names() == ["DIMENS", "DIMENS"]
    
    def test_missing_keyword(self):
        with pytest.raises(KeyError):
            Deck().get_keyword("ZCORN")
