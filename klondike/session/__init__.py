"""
Session - Hosting the current game state.

Sessions own the one long-lived state value and serialize dispatch.
Game loops drive a session with a bot policy.
"""

from .manager import GameSession, SessionManager, DispatchOutcome, DispatchResult
from .game_loop import GameLoop, LoopState, PlayoutResult

__all__ = [
    "GameSession",
    "SessionManager",
    "DispatchOutcome",
    "DispatchResult",
    "GameLoop",
    "LoopState",
    "PlayoutResult",
]
