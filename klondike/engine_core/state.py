"""
Game State - Immutable Klondike snapshot.

Design principles:
- Immutable: every transition returns a new GameState, old values are
  never touched
- Flat history: snapshots pushed onto ``history`` carry an empty history
  of their own, so undo storage grows linearly with moves
- Piles are tuples, top of pile = last element
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator

from .cards import Card, InvalidReferenceError, SUIT_ORDER, Suit

TABLEAU_COLUMNS = 7
FOUNDATION_COUNT = 4
DRAW_MODES = (1, 3)

# Longest possible tableau column: six face-down cards under a King-to-Ace run
MAX_COLUMN_LENGTH = 6 + 13


class InvalidLocationError(InvalidReferenceError):
    """Raised for a Location that cannot exist in a well-formed game."""


class PileKind(str, Enum):
    """The four kinds of pile on the table."""
    STOCK = "stock"
    WASTE = "waste"
    TABLEAU = "tableau"
    FOUNDATION = "foundation"


_PILE_COUNTS = {
    PileKind.STOCK: 1,
    PileKind.WASTE: 1,
    PileKind.TABLEAU: TABLEAU_COLUMNS,
    PileKind.FOUNDATION: FOUNDATION_COUNT,
}


def _is_int(value) -> bool:
    # bool is an int subclass but never a pile index
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Location:
    """
    A reference to a pile, and optionally a position within a tableau column.

    ``position`` indexes from the bottom of the column (0 = deepest card).
    Construction fails fast on references no well-formed game can have.
    """
    pile: PileKind
    index: int = 0
    position: int | None = None

    def __post_init__(self):
        try:
            pile = PileKind(self.pile)
        except ValueError:
            raise InvalidLocationError(f"Unknown pile kind: {self.pile!r}") from None
        object.__setattr__(self, "pile", pile)

        if not _is_int(self.index) or not 0 <= self.index < _PILE_COUNTS[pile]:
            raise InvalidLocationError(f"Pile index {self.index!r} out of range for {pile.value}")

        if self.position is not None:
            if pile != PileKind.TABLEAU:
                raise InvalidLocationError(f"Position is only meaningful for tableau, not {pile.value}")
            if not _is_int(self.position) or not 0 <= self.position < MAX_COLUMN_LENGTH:
                raise InvalidLocationError(f"Tableau position {self.position!r} out of range")

    @classmethod
    def stock(cls) -> Location:
        return cls(PileKind.STOCK)

    @classmethod
    def waste(cls) -> Location:
        return cls(PileKind.WASTE)

    @classmethod
    def tableau(cls, index: int, position: int | None = None) -> Location:
        return cls(PileKind.TABLEAU, index, position)

    @classmethod
    def foundation(cls, index: int) -> Location:
        return cls(PileKind.FOUNDATION, index)

    @classmethod
    def foundation_for(cls, suit: Suit) -> Location:
        """The foundation reserved for ``suit``."""
        return cls(PileKind.FOUNDATION, SUIT_ORDER.index(suit))

    def pile_only(self) -> Location:
        """The same pile without a position."""
        if self.position is None:
            return self
        return Location(self.pile, self.index)

    def __str__(self) -> str:
        text = self.pile.value
        if self.pile in (PileKind.TABLEAU, PileKind.FOUNDATION):
            text += f"[{self.index}]"
        if self.position is not None:
            text += f"@{self.position}"
        return text


Pile = tuple[Card, ...]


def _empty_piles(count: int) -> tuple[Pile, ...]:
    return tuple(() for _ in range(count))


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical value the reducer operates on.
    All state changes go through the reducer.
    """
    stock: Pile = ()
    waste: Pile = ()
    tableau: tuple[Pile, ...] = field(default_factory=lambda: _empty_piles(TABLEAU_COLUMNS))
    foundations: tuple[Pile, ...] = field(default_factory=lambda: _empty_piles(FOUNDATION_COUNT))
    draw_mode: int = 1

    # Snapshots for undo, each with an empty history of its own
    history: tuple[GameState, ...] = ()

    game_won: bool = False
    # Survives NEW_GAME and never decreases
    win_count: int = 0

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def face_up_count(self) -> int:
        return sum(1 for card in self.all_cards() if card.face_up)

    def pile(self, location: Location) -> Pile:
        """Cards of the pile ``location`` refers to (position is ignored)."""
        if location.pile == PileKind.STOCK:
            return self.stock
        if location.pile == PileKind.WASTE:
            return self.waste
        if location.pile == PileKind.TABLEAU:
            return self.tableau[location.index]
        return self.foundations[location.index]

    def top_of(self, kind: PileKind, index: int = 0) -> Card | None:
        """Top card of a pile, or None when the pile is empty."""
        cards = self.pile(Location(kind, index))
        return cards[-1] if cards else None

    def all_cards(self) -> Iterator[Card]:
        yield from self.stock
        yield from self.waste
        for column in self.tableau:
            yield from column
        for foundation in self.foundations:
            yield from foundation

    def find_card(self, card_id: str) -> Location | None:
        """
        Locate a card by id.

        Tableau cards get a position; other piles only report the pile.
        """
        for card in self.stock:
            if card.id == card_id:
                return Location.stock()
        for card in self.waste:
            if card.id == card_id:
                return Location.waste()
        for col_idx, column in enumerate(self.tableau):
            for pos, card in enumerate(column):
                if card.id == card_id:
                    return Location.tableau(col_idx, pos)
        for f_idx, foundation in enumerate(self.foundations):
            for card in foundation:
                if card.id == card_id:
                    return Location.foundation(f_idx)
        return None

    def with_pile(self, location: Location, cards: Pile) -> GameState:
        """Return new state with one pile replaced."""
        cards = tuple(cards)
        if location.pile == PileKind.STOCK:
            return self._copy_with(stock=cards)
        if location.pile == PileKind.WASTE:
            return self._copy_with(waste=cards)
        if location.pile == PileKind.TABLEAU:
            tableau = list(self.tableau)
            tableau[location.index] = cards
            return self._copy_with(tableau=tuple(tableau))
        foundations = list(self.foundations)
        foundations[location.index] = cards
        return self._copy_with(foundations=tuple(foundations))

    def snapshot(self) -> GameState:
        """This state with its history cleared, ready to be pushed onto a history."""
        if not self.history:
            return self
        return self._copy_with(history=())

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
