"""
Tests for sessions and bot play-outs.

Tests:
- Dispatch classification
- Undo lock after a win
- Session lifecycle
- Game loop termination
"""

import random
import threading

import pytest

from ..bots import GreedyPolicy, NoActionError, RandomPolicy
from ..bots.greedy import score_action
from ..engine_core.action import Action
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Suit
from ..engine_core.reducer import Reducer
from ..engine_core.state import Location
from ..engine_core.validation import validate_state
from ..session import DispatchOutcome, GameLoop, GameSession, LoopState, SessionManager
from .factories import cards, foundation_upto, hidden, make_state


class TestDispatchOutcome:
    """Tests for classifying dispatches."""

    def test_draw_and_recycle(self):
        session = GameSession.from_state(make_state(stock=hidden("4C")))
        assert session.dispatch(Action.draw()).outcome == DispatchOutcome.DRAWN
        assert session.dispatch(Action.draw()).outcome == DispatchOutcome.RECYCLED

    def test_moved_and_rejected(self):
        session = GameSession.from_state(make_state(waste=cards("9H"), tableau=[cards("10S"), cards("10H")]))
        rejected = session.dispatch(Action.move(Location.waste(), Location.tableau(1)))
        assert rejected.outcome == DispatchOutcome.REJECTED
        assert not rejected.changed

        moved = session.dispatch(Action.move(Location.waste(), Location.tableau(0)))
        assert moved.outcome == DispatchOutcome.MOVED
        assert session.state is moved.state

    def test_undo_and_noop(self):
        session = GameSession.from_state(make_state(stock=hidden("4C")))
        assert session.dispatch(Action.undo()).outcome == DispatchOutcome.NO_OP
        session.dispatch(Action.draw())
        assert session.dispatch(Action.undo()).outcome == DispatchOutcome.UNDONE

    def test_won(self, finishing_state):
        session = GameSession.from_state(finishing_state)
        result = session.dispatch(Action.auto_complete())
        assert result.outcome == DispatchOutcome.WON
        assert result.state.win_count == finishing_state.win_count + 1

    def test_new_game(self, finishing_state):
        session = GameSession.from_state(finishing_state, reducer=Reducer(rng=random.Random(3)))
        result = session.dispatch(Action.new_game(draw_mode=3))
        assert result.outcome == DispatchOutcome.NEW_GAME
        assert result.state.win_count == finishing_state.win_count
        assert result.state.draw_mode == 3


class TestUndoAfterWin:
    """Tests for the undo lock once a game is won."""

    def _won_session(self, **kwargs):
        foundations = [foundation_upto(suit, 13) for suit in Suit]
        foundations[2] = foundations[2][:-1]
        session = GameSession.from_state(make_state(foundations=foundations, waste=cards("KD")), **kwargs)
        session.dispatch(Action.auto_move("diamonds-13"))
        assert session.state.game_won
        return session

    def test_undo_refused_after_win(self):
        session = self._won_session()
        result = session.dispatch(Action.undo())
        assert result.outcome == DispatchOutcome.NO_OP
        assert session.state.game_won

    def test_undo_allowed_when_unlocked(self):
        session = self._won_session(lock_undo_after_win=False)
        result = session.dispatch(Action.undo())
        assert result.outcome == DispatchOutcome.UNDONE
        assert not session.state.game_won
        assert session.state.win_count == 1


class TestSessionManager:
    """Tests for the session registry."""

    def test_lifecycle(self):
        manager = SessionManager()
        session = manager.create_session(draw_mode=3, seed=8)

        assert session.session_id in manager.list_active_sessions()
        assert manager.get_session(session.session_id) is session
        assert session.state.draw_mode == 3

        manager.end_session(session.session_id)
        assert session.session_id not in manager.list_active_sessions()
        assert manager.get_session(session.session_id) is None

    def test_seeded_sessions_deal_the_same(self):
        manager = SessionManager()
        a = manager.create_session(seed=77)
        b = manager.create_session(seed=77)
        assert a.state == b.state
        assert a.session_id != b.session_id

    def test_concurrent_dispatch_is_serialized(self):
        session = SessionManager().create_session(seed=5)
        stock_size = len(session.state.stock)

        threads = [
            threading.Thread(target=lambda: [session.dispatch(Action.draw()) for _ in range(3)])
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(session.state.history) == 12
        assert len(session.state.stock) == stock_size - 12
        assert validate_state(session.state).valid


class TestGreedyPolicy:
    """Tests for the greedy bot."""

    def test_prefers_foundation(self):
        state = make_state(waste=cards("AS"), tableau=[cards("2H"), cards("9C")])
        decision = GreedyPolicy().select_action(state, legal_actions(state))
        assert decision.action == Action.move(Location.waste(), Location.foundation(0))
        assert decision.best_score == decision.evaluation_details[str(decision.action)]
        to_tableau = str(Action.move(Location.waste(), Location.tableau(0)))
        assert decision.evaluation_details[to_tableau] < decision.best_score

    def test_skips_pointless_king_move(self):
        state = make_state(tableau=[cards("KS"), ()])
        action = Action.move(Location.tableau(0, 0), Location.tableau(1))
        assert score_action(state, action) is None

    def test_prefers_reveal_over_draw(self):
        state = make_state(stock=hidden("2C"), tableau=[hidden("5D") + cards("9H"), cards("10S")])
        decision = GreedyPolicy().select_action(state, legal_actions(state))
        assert decision.action == Action.move(Location.tableau(0, 1), Location.tableau(1))

    def test_nothing_useful_raises(self):
        state = make_state(tableau=[cards("KS")])
        with pytest.raises(NoActionError):
            GreedyPolicy().select_action(state, legal_actions(state))


class TestGameLoop:
    """Tests for bot play-outs."""

    def test_finishing_board_is_won(self, finishing_state):
        session = GameSession.from_state(finishing_state)
        result = GameLoop(session, GreedyPolicy()).run()
        assert result.won
        assert session.state.win_count == finishing_state.win_count + 1

    @pytest.mark.parametrize("seed", [1, 2, 3, 4])
    def test_greedy_playout_terminates(self, seed):
        session = SessionManager().create_session(seed=seed)
        result = GameLoop(session, GreedyPolicy()).run()

        assert result.loop_state in (LoopState.WON, LoopState.STUCK)
        assert validate_state(session.state).valid

    def test_random_playout_respects_step_limit(self):
        session = SessionManager().create_session(seed=9)
        result = GameLoop(session, RandomPolicy(seed=9), max_steps=50).run()

        assert result.steps <= 50
        assert result.loop_state in (LoopState.WON, LoopState.STUCK, LoopState.STEP_LIMIT)
        assert validate_state(session.state).valid
