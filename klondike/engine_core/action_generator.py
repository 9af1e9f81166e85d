"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. UI hints (is there anything left to do?)
3. is_legal, which answers the same question for any single action

Design: Generates fully specified MOVE actions, one per movable run and
legal destination, plus DRAW when the stock or waste holds cards.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action, ActionType
from .auto_complete import next_foundation_move
from .cards import card_from_id
from .rules import find_auto_move_target, get_movable_cards, is_legal_placement
from .state import DRAW_MODES, FOUNDATION_COUNT, TABLEAU_COLUMNS, GameState, Location


@dataclass
class ActionGenerator:
    """
    Generates legal actions for a game state.

    Only actions that would change the state are produced.
    """

    def generate(self, state: GameState) -> list[Action]:
        """Generate all legal actions, moves first, DRAW last."""
        if state.game_won:
            return []

        actions = []
        for source in self._sources(state):
            actions.extend(self._generate_moves_from(state, source))

        if state.stock or state.waste:
            actions.append(Action.draw())
        return actions

    def _sources(self, state: GameState) -> list[Location]:
        """Every location whose card(s) could be picked up."""
        sources = [Location.waste()]
        for col_idx, column in enumerate(state.tableau):
            for pos, card in enumerate(column):
                if card.face_up:
                    sources.append(Location.tableau(col_idx, pos))
        sources.extend(Location.foundation(idx) for idx in range(FOUNDATION_COUNT))
        return sources

    def _targets(self) -> list[Location]:
        return [Location.foundation(idx) for idx in range(FOUNDATION_COUNT)] + [
            Location.tableau(idx) for idx in range(TABLEAU_COLUMNS)
        ]

    def _generate_moves_from(self, state: GameState, source: Location) -> list[Action]:
        cards = get_movable_cards(source, state)
        if not cards:
            return []
        return [
            Action.move(source, target)
            for target in self._targets()
            if target.pile_only() != source.pile_only()
            and is_legal_placement(cards, target, state)
        ]


def legal_actions(state: GameState) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator()
    return generator.generate(state)


def is_legal(state: GameState, action: Action) -> bool:
    """
    Check if a specific action would change the state.

    Malformed references raise, as they do in the reducer.
    """
    action_type = action.action_type
    payload = action.payload

    if action_type == ActionType.NEW_GAME:
        return payload.draw_mode is None or payload.draw_mode in DRAW_MODES
    if action_type == ActionType.UNDO:
        return bool(state.history)
    if state.game_won:
        return False

    if action_type == ActionType.DRAW:
        return bool(state.stock or state.waste)
    if action_type == ActionType.MOVE:
        source, target = payload.source, payload.target
        if source is None or target is None:
            raise ValueError("MOVE requires both a source and a target")
        if source.pile_only() == target.pile_only():
            return False
        return is_legal_placement(get_movable_cards(source, state), target, state)
    if action_type == ActionType.AUTO_MOVE:
        if payload.card_id is None:
            raise ValueError("AUTO_MOVE requires a card id")
        card_from_id(payload.card_id)
        source = state.find_card(payload.card_id)
        if source is None:
            raise ValueError(f"Card {payload.card_id} missing from state")
        cards = get_movable_cards(source, state)
        if not cards or cards[0].id != payload.card_id:
            return False
        return find_auto_move_target(cards[0], state, run_length=len(cards)) is not None
    if action_type == ActionType.AUTO_COMPLETE:
        return next_foundation_move(state) is not None
    return False
