"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through reduce().

Design principles:
- Pure function: (state, action) -> new_state, the input is never modified
- Validates with the rules module before changing anything
- Illegal moves and empty undo return the input state object unchanged
  and push nothing onto history
- Malformed references (bad pile index, unknown card id) raise
- Randomness comes only from the injected random source
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field

from .action import Action, ActionType
from .cards import create_deck, card_from_id, shuffle
from .rules import (
    find_auto_move_target,
    get_movable_cards,
    is_game_won,
    is_legal_placement,
)
from .state import (
    DRAW_MODES,
    FOUNDATION_COUNT,
    TABLEAU_COLUMNS,
    GameState,
    Location,
    PileKind,
)

logger = logging.getLogger(__name__)


def _check_draw_mode(draw_mode: int) -> int:
    if draw_mode not in DRAW_MODES:
        raise ValueError(f"Draw mode must be one of {DRAW_MODES}, got {draw_mode!r}")
    return draw_mode


def deal(draw_mode: int = 1, rng: random.Random | None = None, win_count: int = 0) -> GameState:
    """
    Deal a fresh game from a shuffled deck.

    Column i receives i + 1 cards with only the last one face up; the
    remaining 24 cards form the face-down stock.
    """
    _check_draw_mode(draw_mode)
    deck = shuffle(create_deck(), rng)

    tableau = []
    next_card = 0
    for col_idx in range(TABLEAU_COLUMNS):
        column = deck[next_card:next_card + col_idx + 1]
        next_card += col_idx + 1
        column[-1] = column[-1].flipped(True)
        tableau.append(tuple(column))

    return GameState(
        stock=tuple(deck[next_card:]),
        waste=(),
        tableau=tuple(tableau),
        foundations=tuple(() for _ in range(FOUNDATION_COUNT)),
        draw_mode=draw_mode,
        history=(),
        game_won=False,
        win_count=win_count,
    )


def initial_state(
    draw_mode: int = 1,
    rng: random.Random | None = None,
    win_count: int = 0,
) -> GameState:
    """The first state of a session, equivalent to NEW_GAME with no prior state."""
    return deal(draw_mode, rng, win_count)


def push_history(previous: GameState, new_state: GameState) -> GameState:
    """Attach ``previous`` (history cleared) as the latest undo step of ``new_state``."""
    return new_state._copy_with(history=previous.history + (previous.snapshot(),))


def apply_move(state: GameState, source: Location, target: Location) -> GameState:
    """
    Move the card(s) at ``source`` onto ``target`` if the rules allow it.

    Returns ``state`` itself when nothing moves. On success the
    pre-move state goes onto history, a face-down card left on top of
    the source column is turned up, and the win is recomputed.
    """
    if state.game_won:
        logger.debug("Move %s -> %s ignored: game already won", source, target)
        return state

    cards = get_movable_cards(source, state)
    if not cards:
        logger.debug("Move %s -> %s rejected: nothing movable", source, target)
        return state
    if source.pile_only() == target.pile_only():
        return state
    if not is_legal_placement(cards, target, state):
        logger.debug("Move %s -> %s rejected: illegal placement of %s", source, target, cards[0])
        return state

    source_pile = state.pile(source)
    remaining = source_pile[:len(source_pile) - len(cards)]
    if source.pile == PileKind.TABLEAU and remaining and not remaining[-1].face_up:
        remaining = remaining[:-1] + (remaining[-1].flipped(True),)

    new_state = state.with_pile(source, remaining)
    new_state = new_state.with_pile(target, new_state.pile(target) + tuple(cards))
    new_state = _with_win_check(state, new_state)
    return push_history(state, new_state)


def _with_win_check(before: GameState, after: GameState) -> GameState:
    won = is_game_won(after)
    if won and not before.game_won:
        logger.info("Game won (win #%d)", before.win_count + 1)
        return after._copy_with(game_won=True, win_count=before.win_count + 1)
    return after._copy_with(game_won=won)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source used for dealing; all game
    state is in GameState.
    """
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: GameState, action: Action) -> GameState:
        """
        Apply an action to the game state.

        Returns the new state, or ``state`` itself when the action is a no-op.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            raise ValueError(f"No handler for action type: {action.action_type}")
        return handler(state, action)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.NEW_GAME: self._handle_new_game,
            ActionType.DRAW: self._handle_draw,
            ActionType.MOVE: self._handle_move,
            ActionType.AUTO_MOVE: self._handle_auto_move,
            ActionType.UNDO: self._handle_undo,
            ActionType.AUTO_COMPLETE: self._handle_auto_complete,
        }
        return handlers.get(action_type)

    def _handle_new_game(self, state: GameState, action: Action) -> GameState:
        """Deal a new game, keeping only the win count."""
        payload = action.payload
        draw_mode = payload.draw_mode if payload.draw_mode is not None else state.draw_mode
        rng = random.Random(payload.seed) if payload.seed is not None else self.rng
        new_state = deal(draw_mode, rng, win_count=state.win_count)
        logger.info("New game dealt (draw %d)", draw_mode)
        return new_state

    def _handle_draw(self, state: GameState, action: Action) -> GameState:
        """
        Handle draw action.

        Draws up to ``draw_mode`` cards one at a time, so the last card
        drawn ends up on top of the waste. With an empty stock the waste
        is turned over to become the new stock.
        """
        if state.game_won:
            return state

        if not state.stock:
            if not state.waste:
                logger.debug("Draw ignored: stock and waste both empty")
                return state
            new_stock = tuple(card.flipped(False) for card in reversed(state.waste))
            new_state = state._copy_with(stock=new_stock, waste=())
            return push_history(state, new_state)

        count = min(state.draw_mode, len(state.stock))
        drawn = state.stock[-count:]
        new_waste = state.waste + tuple(card.flipped(True) for card in reversed(drawn))
        new_state = state._copy_with(stock=state.stock[:-count], waste=new_waste)
        return push_history(state, new_state)

    def _handle_move(self, state: GameState, action: Action) -> GameState:
        source = action.payload.source
        target = action.payload.target
        if source is None or target is None:
            raise ValueError("MOVE requires both a source and a target location")
        return apply_move(state, source, target)

    def _handle_auto_move(self, state: GameState, action: Action) -> GameState:
        """Send a card to the first legal destination found by find_auto_move_target."""
        card_id = action.payload.card_id
        if card_id is None:
            raise ValueError("AUTO_MOVE requires a card id")
        card_from_id(card_id)

        source = state.find_card(card_id)
        if source is None:
            # A well-formed state always holds all 52 cards
            raise ValueError(f"Card {card_id} missing from state")

        cards = get_movable_cards(source, state)
        if not cards or cards[0].id != card_id:
            logger.debug("Auto-move of %s ignored: card is not movable", card_id)
            return state

        target = find_auto_move_target(cards[0], state, run_length=len(cards))
        if target is None:
            logger.debug("Auto-move of %s ignored: no legal destination", card_id)
            return state
        return apply_move(state, source, target)

    def _handle_undo(self, state: GameState, action: Action) -> GameState:
        """
        Restore the most recent snapshot.

        The win count is a tally of finished games, so the restored state
        keeps the higher of the two counts.
        """
        if not state.history:
            return state
        previous = state.history[-1]
        return previous._copy_with(
            history=state.history[:-1],
            win_count=max(state.win_count, previous.win_count),
        )

    def _handle_auto_complete(self, state: GameState, action: Action) -> GameState:
        from .auto_complete import auto_complete
        return auto_complete(state)


def reduce(state: GameState, action: Action, rng: random.Random | None = None) -> GameState:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng) if rng is not None else Reducer()
    return reducer.apply(state, action)
