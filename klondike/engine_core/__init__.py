"""
Engine Core - Immutable Klondike state and the rules that move it.

The engine is the runtime that:
1. Deals a GameState from an injected random source
2. Evaluates placements with pure rule predicates
3. Applies actions via the reducer
4. Drains a finished board with auto-complete
5. Keeps a flat undo history
"""

from .cards import (
    Card,
    Suit,
    SUIT_ORDER,
    InvalidReferenceError,
    InvalidCardError,
    create_deck,
    shuffle,
    is_red,
    opposite_color,
    card_from_id,
)
from .state import GameState, Location, PileKind, InvalidLocationError
from .action import Action, ActionType, ActionPayload
from .rules import (
    can_move_to_tableau,
    can_move_to_foundation,
    get_movable_cards,
    find_auto_move_target,
    is_game_won,
    can_auto_complete,
)
from .reducer import Reducer, reduce, deal, initial_state
from .auto_complete import auto_complete
from .action_generator import ActionGenerator, legal_actions
from .validation import validate_state, assert_valid_state, StateValidationError

__all__ = [
    "Card",
    "Suit",
    "SUIT_ORDER",
    "InvalidReferenceError",
    "InvalidCardError",
    "InvalidLocationError",
    "create_deck",
    "shuffle",
    "is_red",
    "opposite_color",
    "card_from_id",
    "GameState",
    "Location",
    "PileKind",
    "Action",
    "ActionType",
    "ActionPayload",
    "can_move_to_tableau",
    "can_move_to_foundation",
    "get_movable_cards",
    "find_auto_move_target",
    "is_game_won",
    "can_auto_complete",
    "Reducer",
    "reduce",
    "deal",
    "initial_state",
    "auto_complete",
    "ActionGenerator",
    "legal_actions",
    "validate_state",
    "assert_valid_state",
    "StateValidationError",
]
