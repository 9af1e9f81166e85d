"""
Whole-game property tests.

Random play over several seeded deals, checking after every action that:
- All 52 cards are still present exactly once
- Foundations stay ordered
- Undo returns the state the action started from
- Rejected moves leave history alone
"""

import random

import pytest

from ..bots.policy import RandomPolicy
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import is_legal, legal_actions
from ..engine_core.reducer import Reducer, initial_state, reduce
from ..engine_core.state import Location, TABLEAU_COLUMNS
from ..engine_core.validation import validate_state


def _without_win_count(state):
    return state._copy_with(win_count=0)


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("draw_mode", [1, 3])
def test_random_play_keeps_invariants(seed, draw_mode):
    rng = random.Random(seed)
    state = initial_state(draw_mode=draw_mode, rng=rng)
    policy = RandomPolicy(seed=seed)

    for _ in range(150):
        actions = legal_actions(state)
        if not actions:
            break
        action = policy.select_action(state, actions).action
        new_state = reduce(state, action)

        result = validate_state(new_state)
        assert result.valid, result.errors
        assert new_state is not state

        undone = reduce(new_state, Action.undo())
        assert _without_win_count(undone) == _without_win_count(state)
        state = new_state


@pytest.mark.parametrize("seed", [11, 12, 13])
def test_auto_move_every_face_up_card(seed):
    """Auto-moving any card either changes nothing or makes one undoable step."""
    state = initial_state(rng=random.Random(seed))
    for _ in range(10):
        state = reduce(state, Action.draw())

    for card in list(state.all_cards()):
        new_state = reduce(state, Action.auto_move(card.id))
        assert is_legal(state, Action.auto_move(card.id)) == (new_state is not state)
        if new_state is state:
            continue
        assert validate_state(new_state).valid
        assert len(new_state.history) == len(state.history) + 1
        assert reduce(new_state, Action.undo()) == state


@pytest.mark.parametrize("seed", [21, 22])
def test_invalid_moves_are_idempotent(seed):
    state = initial_state(rng=random.Random(seed))
    for col in range(TABLEAU_COLUMNS):
        for target in range(TABLEAU_COLUMNS):
            action = Action.move(Location.tableau(col), Location.tableau(target))
            if is_legal(state, action):
                continue
            once = reduce(state, action)
            twice = reduce(once, action)
            assert once is state
            assert twice is state
            assert len(twice.history) == len(state.history)


def test_generated_actions_all_change_state(dealt_state):
    for action in legal_actions(dealt_state):
        assert reduce(dealt_state, action) is not dealt_state
        if action.action_type == ActionType.MOVE:
            assert is_legal(dealt_state, action)


def test_draw_cycle_returns_to_start(draw_three_state):
    """Drawing through the stock and recycling restores the stock order."""
    reducer = Reducer()
    state = draw_three_state
    draws = -(-len(state.stock) // 3)
    for _ in range(draws):
        state = reducer.apply(state, Action.draw())
    assert state.stock == ()
    state = reducer.apply(state, Action.draw())
    assert state.stock == draw_three_state.stock
    assert state.waste == ()
