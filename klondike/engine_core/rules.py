"""
Rules - Pure predicates and searches over a GameState.

Nothing here builds a new state. The reducer consults these before
every change and never places a card without them.

Search order is fixed and observable: foundations before tableau,
foundations in suit order (spades, hearts, diamonds, clubs), tableau
columns left to right.
"""

from __future__ import annotations
from typing import Sequence

from .cards import ACE, KING, Card, SUIT_ORDER, Suit, opposite_color
from .state import (
    FOUNDATION_COUNT,
    TABLEAU_COLUMNS,
    GameState,
    Location,
    PileKind,
)


def can_move_to_tableau(card: Card, column: Sequence[Card]) -> bool:
    """Kings go on empty columns; otherwise one lower, opposite color, onto a face-up card."""
    if not column:
        return card.rank == KING
    top = column[-1]
    return (
        top.face_up
        and opposite_color(card.suit, top.suit)
        and card.rank == top.rank - 1
    )


def can_move_to_foundation(
    card: Card,
    foundation: Sequence[Card],
    suit: Suit | None = None,
) -> bool:
    """
    Aces start a foundation; after that, same suit and one higher.

    When ``suit`` is given the foundation is reserved for that suit and
    refuses cards of any other.
    """
    if suit is not None and card.suit != suit:
        return False
    if not foundation:
        return card.rank == ACE
    top = foundation[-1]
    return card.suit == top.suit and card.rank == top.rank + 1


def is_valid_run(cards: Sequence[Card]) -> bool:
    """Face-up, alternating colors, each card one rank below the card beneath it."""
    if not all(card.face_up for card in cards):
        return False
    for lower, upper in zip(cards, cards[1:]):
        if not opposite_color(lower.suit, upper.suit) or upper.rank != lower.rank - 1:
            return False
    return True


def get_movable_cards(source: Location, state: GameState) -> tuple[Card, ...]:
    """
    Resolve ``source`` to the cards that would move together.

    Stock never yields cards (it only empties through DRAW). Waste and
    foundations yield their top card. A tableau location yields the card
    at ``position`` plus everything above it, or the top card when no
    position is given, but only if that stretch is a valid run.
    """
    if source.pile == PileKind.STOCK:
        return ()

    cards = state.pile(source)
    if not cards:
        return ()

    if source.pile in (PileKind.WASTE, PileKind.FOUNDATION):
        top = cards[-1]
        return (top,) if top.face_up else ()

    position = len(cards) - 1 if source.position is None else source.position
    if position >= len(cards):
        return ()
    run = cards[position:]
    return run if is_valid_run(run) else ()


def is_legal_placement(cards: Sequence[Card], target: Location, state: GameState) -> bool:
    """Whether ``cards`` (bottom card first) may be placed on ``target``."""
    if not cards:
        return False
    lead = cards[0]
    if target.pile == PileKind.TABLEAU:
        return can_move_to_tableau(lead, state.tableau[target.index])
    if target.pile == PileKind.FOUNDATION:
        # Foundations take one card at a time
        if len(cards) != 1:
            return False
        return can_move_to_foundation(
            lead, state.foundations[target.index], suit=SUIT_ORDER[target.index]
        )
    return False


def find_foundation_target(card: Card, state: GameState) -> Location | None:
    """First foundation, in suit order, that accepts ``card``."""
    for idx in range(FOUNDATION_COUNT):
        if can_move_to_foundation(card, state.foundations[idx], suit=SUIT_ORDER[idx]):
            return Location.foundation(idx)
    return None


def find_auto_move_target(
    card: Card,
    state: GameState,
    run_length: int = 1,
) -> Location | None:
    """
    Best destination for ``card``: foundations first, then tableau left to right.

    ``run_length`` is the number of cards moving with ``card``; a run of
    more than one card skips the foundations.
    """
    if run_length == 1:
        target = find_foundation_target(card, state)
        if target is not None:
            return target
    for idx in range(TABLEAU_COLUMNS):
        if can_move_to_tableau(card, state.tableau[idx]):
            return Location.tableau(idx)
    return None


def is_game_won(state: GameState) -> bool:
    """Every foundation holds all 13 cards of its suit."""
    return all(len(foundation) == KING for foundation in state.foundations)


def can_auto_complete(state: GameState) -> bool:
    """No hidden information left: stock and waste empty, every tableau card face up."""
    if state.stock or state.waste:
        return False
    return all(card.face_up for column in state.tableau for card in column)
