"""
Action System - The actions a host can dispatch to the reducer.

All state changes flow through actions:
1. Dealing (new game)
2. Stock handling (draw / recycle)
3. Card moves (explicit, auto-move, auto-complete)
4. Undo
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import Location


class ActionType(Enum):
    """Types of actions in the system."""
    NEW_GAME = "new_game"
    DRAW = "draw"
    MOVE = "move"
    AUTO_MOVE = "auto_move"
    UNDO = "undo"
    AUTO_COMPLETE = "auto_complete"


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; the reducer reads only
    the ones its handler needs.
    """
    # NEW_GAME
    draw_mode: int | None = None
    seed: int | None = None

    # MOVE
    source: Location | None = None
    target: Location | None = None

    # AUTO_MOVE
    card_id: str | None = None


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Build actions with the factories rather than by hand.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def new_game(cls, draw_mode: int | None = None, seed: int | None = None) -> Action:
        """
        Factory for dealing a new game.

        Without ``draw_mode`` the current game's mode is kept. ``seed``
        overrides the reducer's random source.
        """
        return cls(
            action_type=ActionType.NEW_GAME,
            payload=ActionPayload(draw_mode=draw_mode, seed=seed),
        )

    @classmethod
    def draw(cls) -> Action:
        """Factory for draw (or recycle, when the stock is empty)."""
        return cls(action_type=ActionType.DRAW)

    @classmethod
    def move(cls, source: Location, target: Location) -> Action:
        """Factory for moving the card(s) at ``source`` onto ``target``."""
        return cls(
            action_type=ActionType.MOVE,
            payload=ActionPayload(source=source, target=target),
        )

    @classmethod
    def auto_move(cls, card_id: str) -> Action:
        """Factory for sending a card to its best destination."""
        return cls(
            action_type=ActionType.AUTO_MOVE,
            payload=ActionPayload(card_id=card_id),
        )

    @classmethod
    def undo(cls) -> Action:
        return cls(action_type=ActionType.UNDO)

    @classmethod
    def auto_complete(cls) -> Action:
        return cls(action_type=ActionType.AUTO_COMPLETE)

    def __str__(self) -> str:
        p = self.payload
        if self.action_type == ActionType.MOVE:
            return f"move {p.source} -> {p.target}"
        if self.action_type == ActionType.AUTO_MOVE:
            return f"auto_move {p.card_id}"
        if self.action_type == ActionType.NEW_GAME:
            return f"new_game draw={p.draw_mode}"
        return self.action_type.value
