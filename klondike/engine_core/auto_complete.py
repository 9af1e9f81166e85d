"""
Auto-complete - Drain the board into the foundations.

Each pass scans the waste top, then the tableau tops left to right, and
moves the first card any foundation accepts. Every move goes through
apply_move, so each one lands on history separately and can be undone
one step at a time.
"""

from __future__ import annotations
import logging

from .rules import find_foundation_target
from .state import TABLEAU_COLUMNS, GameState, Location
from .reducer import apply_move

logger = logging.getLogger(__name__)

# Each move puts one more card on a foundation, so 52 passes always suffice
MAX_AUTO_COMPLETE_MOVES = 52


def next_foundation_move(state: GameState) -> tuple[Location, Location] | None:
    """The (source, target) of the next auto-complete move, or None when stuck or done."""
    candidates = [Location.waste()] + [Location.tableau(idx) for idx in range(TABLEAU_COLUMNS)]
    for source in candidates:
        cards = state.pile(source)
        if not cards or not cards[-1].face_up:
            continue
        target = find_foundation_target(cards[-1], state)
        if target is not None:
            return source, target
    return None


def auto_complete(state: GameState) -> GameState:
    """Apply foundation moves until none is left."""
    moves = 0
    for _ in range(MAX_AUTO_COMPLETE_MOVES):
        if state.game_won:
            break
        move = next_foundation_move(state)
        if move is None:
            break
        state = apply_move(state, *move)
        moves += 1
    logger.debug("Auto-complete made %d move(s)", moves)
    return state
