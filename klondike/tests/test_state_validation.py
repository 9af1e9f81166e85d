"""
Tests for state validation and state accessors.

Tests:
- Dealt states are valid
- Each invariant violation is reported
- Location lookups
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.cards import Suit
from ..engine_core.reducer import reduce
from ..engine_core.state import Location, PileKind
from ..engine_core.validation import StateValidationError, assert_valid_state, validate_state
from .factories import card, cards, foundation_upto, hidden, make_state


class TestValidateState:
    """Tests for invariant checking."""

    def test_dealt_state_is_valid(self, dealt_state):
        result = validate_state(dealt_state)
        assert result.valid
        assert result.errors == []

    def test_finishing_state_is_valid(self, finishing_state):
        assert validate_state(finishing_state).valid

    def test_missing_cards_reported(self):
        result = validate_state(make_state(waste=cards("AS")))
        assert not result.valid
        assert any("missing" in e for e in result.errors)

    def test_duplicate_reported(self, dealt_state):
        duplicated = dealt_state._copy_with(waste=(dealt_state.tableau[0][0],))
        result = validate_state(duplicated)
        assert any("more than once" in e for e in result.errors)

    def test_foundation_order_reported(self, finishing_state):
        state = finishing_state._copy_with(
            foundations=(cards("2S"),) + finishing_state.foundations[1:]
        )
        errors = validate_state(state).errors
        assert any("Foundation 0" in e for e in errors)

    def test_foundation_wrong_suit_reported(self):
        state = make_state(foundations=[(), cards("AS")])
        errors = validate_state(state).errors
        assert any("expected only" in e for e in errors)

    def test_face_up_stock_reported(self):
        state = make_state(stock=cards("AS"))
        assert any("Stock card" in e for e in validate_state(state).errors)

    def test_face_down_waste_reported(self):
        state = make_state(waste=hidden("AS"))
        assert any("Waste card" in e for e in validate_state(state).errors)

    def test_hidden_card_above_face_up_reported(self):
        state = make_state(tableau=[cards("KS") + hidden("QH") + cards("JC")])
        assert any("above a face-up" in e for e in validate_state(state).errors)

    def test_nested_history_reported(self, dealt_state):
        drawn = reduce(dealt_state, Action.draw())
        nested = drawn._copy_with(history=(drawn,))
        assert any("nested history" in e for e in validate_state(nested).errors)

    def test_bad_draw_mode_reported(self, dealt_state):
        state = dealt_state._copy_with(draw_mode=2)
        assert any("draw_mode" in e for e in validate_state(state).errors)

    def test_assert_valid_state(self, dealt_state):
        assert assert_valid_state(dealt_state) is dealt_state
        with pytest.raises(StateValidationError) as exc_info:
            assert_valid_state(make_state())
        assert exc_info.value.errors


class TestStateAccessors:
    """Tests for GameState helpers."""

    def test_find_card_in_each_pile(self):
        state = make_state(
            stock=hidden("2D"),
            waste=cards("3D"),
            tableau=[(), hidden("4D") + cards("5C")],
            foundations=[foundation_upto(Suit.SPADES, 2)],
        )
        assert state.find_card("diamonds-2") == Location.stock()
        assert state.find_card("diamonds-3") == Location.waste()
        assert state.find_card("diamonds-4") == Location.tableau(1, 0)
        assert state.find_card("clubs-5") == Location.tableau(1, 1)
        assert state.find_card("spades-2") == Location.foundation(0)
        assert state.find_card("hearts-9") is None

    def test_top_of(self):
        state = make_state(waste=cards("3D", "8S"))
        assert state.top_of(PileKind.WASTE) == card("8S")
        assert state.top_of(PileKind.TABLEAU, 3) is None

    def test_with_pile_leaves_original(self):
        state = make_state(tableau=[cards("KS")])
        new_state = state.with_pile(Location.tableau(0), ())
        assert state.tableau[0] == cards("KS")
        assert new_state.tableau[0] == ()

    def test_foundation_for_suit(self):
        assert Location.foundation_for(Suit.DIAMONDS) == Location.foundation(2)

    def test_snapshot_clears_history(self, dealt_state):
        drawn = reduce(dealt_state, Action.draw())
        assert drawn.snapshot().history == ()
        assert drawn.snapshot().stock == drawn.stock
