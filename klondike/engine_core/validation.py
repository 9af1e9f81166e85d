"""
State Validation - Invariant checks for game states.

Validates that:
1. All 52 card identities are present exactly once
2. Foundations run Ace upward in their own suit
3. Stock is face down, waste is face up
4. Face-up tableau cards form the top of each column
5. History snapshots carry no history of their own

The reducer keeps these by construction; the checker exists for tests,
hosts that build states by hand, and debugging.
"""

from __future__ import annotations
from dataclasses import dataclass

from .cards import ACE, CARD_IDS, SUIT_ORDER
from .state import DRAW_MODES, FOUNDATION_COUNT, TABLEAU_COLUMNS, GameState


class StateValidationError(Exception):
    """Raised when state validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"State validation failed with {len(errors)} error(s): {errors[0]}")


@dataclass
class ValidationResult:
    """Result of validation, with errors."""
    valid: bool
    errors: list[str]


def validate_state(state: GameState, check_history: bool = True) -> ValidationResult:
    """
    Validate a complete game state.

    Returns ValidationResult with errors.
    """
    errors: list[str] = []

    if state.draw_mode not in DRAW_MODES:
        errors.append(f"draw_mode must be one of {DRAW_MODES}")
    if len(state.tableau) != TABLEAU_COLUMNS:
        errors.append(f"Expected {TABLEAU_COLUMNS} tableau columns, found {len(state.tableau)}")
    if len(state.foundations) != FOUNDATION_COUNT:
        errors.append(f"Expected {FOUNDATION_COUNT} foundations, found {len(state.foundations)}")
    if state.win_count < 0:
        errors.append("win_count must be >= 0")

    errors.extend(_validate_conservation(state))
    errors.extend(_validate_foundations(state))
    errors.extend(_validate_orientation(state))

    if check_history:
        for idx, snapshot in enumerate(state.history):
            if snapshot.history:
                errors.append(f"History snapshot {idx} carries a nested history")

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def assert_valid_state(state: GameState) -> GameState:
    """Return ``state`` unchanged, or raise StateValidationError."""
    result = validate_state(state)
    if not result.valid:
        raise StateValidationError(result.errors)
    return state


def _validate_conservation(state: GameState) -> list[str]:
    errors = []
    ids = [card.id for card in state.all_cards()]
    seen = set()
    for card_id in ids:
        if card_id in seen:
            errors.append(f"Card {card_id} appears more than once")
        seen.add(card_id)
    missing = CARD_IDS - seen
    if missing:
        errors.append(f"{len(missing)} card(s) missing: {', '.join(sorted(missing))}")
    return errors


def _validate_foundations(state: GameState) -> list[str]:
    errors = []
    for idx, foundation in enumerate(state.foundations):
        suit = SUIT_ORDER[idx] if idx < len(SUIT_ORDER) else None
        for pos, card in enumerate(foundation):
            if card.suit != suit:
                errors.append(f"Foundation {idx} holds {card.id}, expected only {suit}")
            if card.rank != ACE + pos:
                errors.append(f"Foundation {idx} position {pos} holds rank {card.rank}")
            if not card.face_up:
                errors.append(f"Foundation {idx} holds face-down {card.id}")
    return errors


def _validate_orientation(state: GameState) -> list[str]:
    errors = []
    for card in state.stock:
        if card.face_up:
            errors.append(f"Stock card {card.id} is face up")
    for card in state.waste:
        if not card.face_up:
            errors.append(f"Waste card {card.id} is face down")
    for col_idx, column in enumerate(state.tableau):
        seen_face_up = False
        for card in column:
            if card.face_up:
                seen_face_up = True
            elif seen_face_up:
                errors.append(f"Column {col_idx} has face-down {card.id} above a face-up card")
        if column and not column[-1].face_up:
            errors.append(f"Column {col_idx} top card {column[-1].id} is face down")
    return errors
