"""
Pydantic Schemas - Request/response models for UI hosts.

These models define the JSON contract between a front end and the
engine: actions arrive as ActionRequest, the board goes out as
GameStateResponse. Malformed input is rejected here with a pydantic
ValidationError before it reaches the reducer.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..engine_core.action import Action, ActionType
from ..engine_core.cards import Card
from ..engine_core.rules import can_auto_complete
from ..engine_core.state import (
    FOUNDATION_COUNT,
    MAX_COLUMN_LENGTH,
    TABLEAU_COLUMNS,
    GameState,
    Location,
    PileKind,
)


# =============================================================================
# Enums
# =============================================================================

class PileType(str, Enum):
    """Pile kinds as they appear on the wire."""
    STOCK = "stock"
    WASTE = "waste"
    TABLEAU = "tableau"
    FOUNDATION = "foundation"


# =============================================================================
# Shared Models
# =============================================================================

class LocationModel(BaseModel):
    """A pile reference, with an optional position inside a tableau column."""
    pile: PileType
    index: int = Field(0, ge=0, le=TABLEAU_COLUMNS - 1)
    position: Optional[int] = Field(None, ge=0, lt=MAX_COLUMN_LENGTH)

    @model_validator(mode="after")
    def _check_pile_bounds(self):
        if self.pile in (PileType.STOCK, PileType.WASTE) and self.index != 0:
            raise ValueError(f"{self.pile.value} has a single pile, index must be 0")
        if self.pile == PileType.FOUNDATION and self.index >= FOUNDATION_COUNT:
            raise ValueError(f"Foundation index must be below {FOUNDATION_COUNT}")
        if self.position is not None and self.pile != PileType.TABLEAU:
            raise ValueError("position is only allowed on tableau piles")
        return self

    def to_location(self) -> Location:
        return Location(PileKind(self.pile.value), self.index, self.position)

    @classmethod
    def from_location(cls, location: Location) -> "LocationModel":
        return cls(pile=PileType(location.pile.value), index=location.index, position=location.position)


class CardInfo(BaseModel):
    """Card information for display. Face-down cards hide suit and rank."""
    card_id: Optional[str] = None
    suit: Optional[str] = None
    rank: Optional[int] = None
    face_up: bool
    label: Optional[str] = None

    @classmethod
    def from_card(cls, card: Card, reveal: bool = False) -> "CardInfo":
        if not card.face_up and not reveal:
            return cls(face_up=False)
        return cls(
            card_id=card.id,
            suit=card.suit.value,
            rank=card.rank,
            face_up=card.face_up,
            label=str(card),
        )


class PileInfo(BaseModel):
    """One pile, bottom card first."""
    pile: PileType
    index: int = 0
    card_count: int = 0
    cards: list[CardInfo] = Field(default_factory=list)

    @classmethod
    def from_cards(cls, pile: PileType, index: int, cards, reveal: bool = False) -> "PileInfo":
        return cls(
            pile=pile,
            index=index,
            card_count=len(cards),
            cards=[CardInfo.from_card(card, reveal=reveal) for card in cards],
        )


# =============================================================================
# Request Models
# =============================================================================

class ActionRequest(BaseModel):
    """
    An action dispatched by a front end.

    Which fields are required depends on ``type``.
    """
    type: Literal["new_game", "draw", "move", "auto_move", "undo", "auto_complete"]
    draw_mode: Optional[Literal[1, 3]] = None
    seed: Optional[int] = None
    source: Optional[LocationModel] = Field(None, alias="from")
    target: Optional[LocationModel] = Field(None, alias="to")
    card_id: Optional[str] = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_required_fields(self):
        if self.type == "move" and (self.source is None or self.target is None):
            raise ValueError("move requires 'from' and 'to'")
        if self.type == "auto_move" and not self.card_id:
            raise ValueError("auto_move requires 'card_id'")
        return self

    def to_action(self) -> Action:
        """Build the engine Action for this request."""
        action_type = ActionType(self.type)
        if action_type == ActionType.NEW_GAME:
            return Action.new_game(draw_mode=self.draw_mode, seed=self.seed)
        if action_type == ActionType.MOVE:
            return Action.move(self.source.to_location(), self.target.to_location())
        if action_type == ActionType.AUTO_MOVE:
            return Action.auto_move(self.card_id)
        return Action(action_type=action_type)


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Everything a renderer needs to draw the table."""
    stock: PileInfo
    waste: PileInfo
    tableau: list[PileInfo]
    foundations: list[PileInfo]
    draw_mode: int
    game_won: bool = False
    win_count: int = 0
    can_undo: bool = False
    history_length: int = 0
    can_auto_complete: bool = False

    @classmethod
    def from_state(cls, state: GameState, reveal: bool = False) -> "GameStateResponse":
        """
        Build the response from a GameState.

        Face-down cards are sent without identity unless ``reveal`` is set.
        """
        return cls(
            stock=PileInfo.from_cards(PileType.STOCK, 0, state.stock, reveal),
            waste=PileInfo.from_cards(PileType.WASTE, 0, state.waste, reveal),
            tableau=[
                PileInfo.from_cards(PileType.TABLEAU, idx, column, reveal)
                for idx, column in enumerate(state.tableau)
            ],
            foundations=[
                PileInfo.from_cards(PileType.FOUNDATION, idx, foundation, reveal)
                for idx, foundation in enumerate(state.foundations)
            ],
            draw_mode=state.draw_mode,
            game_won=state.game_won,
            win_count=state.win_count,
            can_undo=state.can_undo,
            history_length=len(state.history),
            can_auto_complete=can_auto_complete(state),
        )


class DispatchResponse(BaseModel):
    """Result of one dispatch: what happened and the table afterwards."""
    outcome: str = Field(description="new_game, drawn, recycled, moved, rejected, undone, no_op, won")
    changed: bool
    state: GameStateResponse

    @classmethod
    def from_result(cls, result) -> "DispatchResponse":
        """Build the response from a session DispatchResult."""
        return cls(
            outcome=result.outcome.value,
            changed=result.changed,
            state=GameStateResponse.from_state(result.state),
        )
