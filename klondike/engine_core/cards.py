"""
Cards - The 52-card domain object and pure deck helpers.

Cards are immutable values. Identity is suit + rank, so a card keeps
its id while it moves between piles and flips face up or down.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, replace
from enum import Enum


class Suit(str, Enum):
    """Card suits, in foundation order."""
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"

    @property
    def symbol(self) -> str:
        return {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }[self]


# Foundation index i holds SUIT_ORDER[i]
SUIT_ORDER: tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

ACE = 1
JACK = 11
QUEEN = 12
KING = 13
RANKS = range(ACE, KING + 1)

_RANK_LABELS = {ACE: "A", JACK: "J", QUEEN: "Q", KING: "K"}


class InvalidReferenceError(ValueError):
    """A card or location that cannot exist in a well-formed 52-card game."""


class InvalidCardError(InvalidReferenceError):
    """Raised for a card id outside the 52-card universe."""


@dataclass(frozen=True)
class Card:
    """
    A playing card.

    Equality includes face orientation, so two snapshots compare equal
    only when every card is also turned the same way.
    """
    suit: Suit
    rank: int
    face_up: bool = False

    @property
    def id(self) -> str:
        """Stable identity, e.g. ``"spades-1"``."""
        return f"{self.suit.value}-{self.rank}"

    @property
    def is_red(self) -> bool:
        return is_red(self.suit)

    def flipped(self, face_up: bool) -> Card:
        """Return the same card turned the given way."""
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    def __str__(self) -> str:
        label = _RANK_LABELS.get(self.rank, str(self.rank))
        return f"{label}{self.suit.symbol}"


def is_red(suit: Suit) -> bool:
    """Hearts and diamonds are red; spades and clubs are black."""
    return suit in (Suit.HEARTS, Suit.DIAMONDS)


def opposite_color(a: Suit, b: Suit) -> bool:
    """True iff exactly one of the two suits is red."""
    return is_red(a) != is_red(b)


def create_deck() -> list[Card]:
    """All 52 cards, face down, in suit then rank order."""
    return [Card(suit=suit, rank=rank) for suit in SUIT_ORDER for rank in RANKS]


def shuffle(cards: list[Card], rng: random.Random | None = None) -> list[Card]:
    """
    Return a uniformly random permutation of ``cards``.

    The input is left untouched. Pass a seeded ``random.Random`` to get
    a reproducible order.
    """
    rng = rng or random.Random()
    shuffled = list(cards)
    # Fisher-Yates
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


CARD_IDS: frozenset[str] = frozenset(card.id for card in create_deck())


def card_from_id(card_id: str) -> Card:
    """
    Parse a card id back into a face-down Card.

    Raises InvalidCardError for anything outside the 52-card universe.
    """
    if card_id not in CARD_IDS:
        raise InvalidCardError(f"Unknown card id: {card_id!r}")
    suit_value, rank = card_id.rsplit("-", 1)
    return Card(suit=Suit(suit_value), rank=int(rank))
