"""
Greedy Policy - Plays the locally best-looking move.

Preference order:
1. Anything onto a foundation
2. Tableau moves that turn up a hidden card, more hidden cards first
3. Tableau moves that empty a column
4. Waste to tableau
5. Drawing

Moves that cannot make progress (a King shuffled between empty columns,
a run moved off a face-up card, cards taken back off a foundation) are
never chosen, so a game can only cycle through repeated draws.
"""

from __future__ import annotations

from ..engine_core.action import Action, ActionType
from ..engine_core.cards import KING
from ..engine_core.state import GameState, PileKind
from .policy import BotDecision, BotPolicy, NoActionError

FOUNDATION_SCORE = 100.0
REVEAL_SCORE = 80.0
EMPTY_COLUMN_SCORE = 30.0
WASTE_TO_TABLEAU_SCORE = 50.0
DRAW_SCORE = 1.0


def score_action(state: GameState, action: Action) -> float | None:
    """Heuristic value of ``action``; None for moves the policy never makes."""
    if action.action_type == ActionType.DRAW:
        return DRAW_SCORE
    if action.action_type != ActionType.MOVE:
        return None

    source, target = action.payload.source, action.payload.target
    if source.pile == PileKind.FOUNDATION:
        return None
    if target.pile == PileKind.FOUNDATION:
        return FOUNDATION_SCORE
    if source.pile == PileKind.WASTE:
        return WASTE_TO_TABLEAU_SCORE

    column = state.tableau[source.index]
    position = len(column) - 1 if source.position is None else source.position
    if position == 0:
        if column[0].rank == KING:
            return None
        return EMPTY_COLUMN_SCORE
    if column[position - 1].face_up:
        return None
    hidden = sum(1 for card in column[:position] if not card.face_up)
    return REVEAL_SCORE + hidden


class GreedyPolicy(BotPolicy):
    """
    Greedy policy - highest heuristic score wins, first one on ties.

    Used for:
    - CLI play-outs
    - Whole-game engine tests
    """

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        scored = []
        for action in legal_actions:
            score = score_action(state, action)
            if score is not None:
                scored.append((score, action))

        if not scored:
            raise NoActionError("No useful actions available")

        best_score, best = max(scored, key=lambda item: item[0])
        return BotDecision(
            action=best,
            explanation=f"Best heuristic score {best_score}",
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details={str(action): score for score, action in scored},
        )
