"""
Session Manager - Hosts game states and serializes dispatch.

The engine is a pure function; something has to own the single
long-lived "current state" value. A GameSession does that:
- Holds the current GameState behind a lock so each dispatch is applied
  fully before the next one starts
- Classifies every dispatch (moved, rejected, drew, won, ...) by
  comparing consecutive states, for sound and celebration layers
- Applies the UI-side rule that a won game cannot be undone

No persistence - sessions are in-memory only.
"""

from __future__ import annotations
import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..engine_core.action import Action, ActionType
from ..engine_core.reducer import Reducer, initial_state
from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class DispatchOutcome(str, Enum):
    """What a dispatch did, as seen by feedback layers."""
    NEW_GAME = "new_game"
    DRAWN = "drawn"
    RECYCLED = "recycled"
    MOVED = "moved"
    REJECTED = "rejected"  # Move or auto-move that changed nothing
    UNDONE = "undone"
    NO_OP = "no_op"
    WON = "won"


@dataclass(frozen=True)
class DispatchResult:
    """
    Result of dispatching an action through a session.

    ``previous`` and ``state`` are the states before and after.
    """
    outcome: DispatchOutcome
    state: GameState
    previous: GameState
    action: Action

    @property
    def changed(self) -> bool:
        return self.state is not self.previous


def classify(previous: GameState, state: GameState, action: Action) -> DispatchOutcome:
    """Work out what a transition from ``previous`` to ``state`` did."""
    action_type = action.action_type
    if action_type == ActionType.NEW_GAME:
        return DispatchOutcome.NEW_GAME
    if state is previous:
        if action_type in (ActionType.MOVE, ActionType.AUTO_MOVE):
            return DispatchOutcome.REJECTED
        return DispatchOutcome.NO_OP
    if state.win_count > previous.win_count:
        return DispatchOutcome.WON
    if action_type == ActionType.UNDO:
        return DispatchOutcome.UNDONE
    if action_type == ActionType.DRAW:
        return DispatchOutcome.RECYCLED if not previous.stock else DispatchOutcome.DRAWN
    return DispatchOutcome.MOVED


@dataclass
class GameSession:
    """
    An in-memory game session.

    Contains:
    - The reducer (and through it the random source for dealing)
    - The current state
    - Session metadata

    ``lock_undo_after_win`` keeps UNDO from reopening a game whose win
    has already been counted.
    """
    session_id: str
    created_at: float
    reducer: Reducer = field(default_factory=Reducer)
    lock_undo_after_win: bool = True

    _state: GameState | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self._state is None:
            self._state = initial_state(rng=self.reducer.rng)

    @classmethod
    def from_state(cls, state: GameState, reducer: Reducer | None = None, **kwargs) -> GameSession:
        """Host an existing state, e.g. one built by hand in a test."""
        return cls(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            reducer=reducer or Reducer(),
            _state=state,
            **kwargs,
        )

    @property
    def state(self) -> GameState:
        """The current state; safe to read while another dispatch runs."""
        return self._state

    def dispatch(self, action: Action) -> DispatchResult:
        """Apply ``action`` to the current state and replace it."""
        with self._lock:
            previous = self._state
            if (
                action.action_type == ActionType.UNDO
                and self.lock_undo_after_win
                and previous.game_won
            ):
                new_state = previous
            else:
                new_state = self.reducer.apply(previous, action)
            self._state = new_state

        outcome = classify(previous, new_state, action)
        logger.debug("Session %s: %s -> %s", self.session_id, action, outcome.value)
        return DispatchResult(outcome=outcome, state=new_state, previous=previous, action=action)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own random source
    - Track active sessions
    - Drop ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, GameSession] = {}

    def create_session(
        self,
        draw_mode: int = 1,
        seed: int | None = None,
        lock_undo_after_win: bool = True,
    ) -> GameSession:
        """
        Create a new game session with a freshly dealt game.

        Args:
            draw_mode: Cards revealed per draw (1 or 3)
            seed: Seed for the session's random source, for replays
            lock_undo_after_win: Refuse UNDO once the game is won

        Returns:
            New Session ready to play
        """
        rng = random.Random(seed)
        reducer = Reducer(rng=rng)
        session = GameSession(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            reducer=reducer,
            lock_undo_after_win=lock_undo_after_win,
            _state=initial_state(draw_mode=draw_mode, rng=rng),
        )
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str):
        """End a session and forget it."""
        self._sessions.pop(session_id, None)

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return list(self._sessions)
