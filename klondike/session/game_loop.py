"""
Game Loop - Drives a session with a bot until the game ends.

The loop:
1. Ask the engine for the legal actions
2. Let the policy pick one
3. Dispatch it through the session
4. Hand the board to auto-complete as soon as nothing is hidden
5. Stop on a win, when the policy has nothing useful, or when a full
   pass through the stock brings no progress
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.rules import can_auto_complete
from ..bots.policy import NoActionError

if TYPE_CHECKING:
    from .manager import GameSession
    from ..bots.policy import BotPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 5000


class LoopState(Enum):
    """How a play-out ended."""
    RUNNING = "running"
    WON = "won"
    STUCK = "stuck"
    STEP_LIMIT = "step_limit"


@dataclass
class PlayoutResult:
    """
    Result of a play-out.

    ``actions`` lists every dispatched action as text.
    """
    loop_state: LoopState
    steps: int = 0
    actions: list[str] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.loop_state == LoopState.WON


class GameLoop:
    """
    The play-out driver.

    Usage:
        loop = GameLoop(session, GreedyPolicy())
        result = loop.run()
    """

    def __init__(self, session: GameSession, policy: BotPolicy, max_steps: int = DEFAULT_MAX_STEPS):
        self.session = session
        self.policy = policy
        self.max_steps = max_steps

    def run(self) -> PlayoutResult:
        """Play until the game is won or no progress is possible."""
        result = PlayoutResult(loop_state=LoopState.RUNNING)
        draws_without_progress = 0

        while result.steps < self.max_steps:
            state = self.session.state
            if state.game_won:
                result.loop_state = LoopState.WON
                break

            if can_auto_complete(state):
                dispatched = self.session.dispatch(Action.auto_complete())
                if dispatched.changed:
                    result.steps += 1
                    result.actions.append(str(dispatched.action))
                    continue

            try:
                decision = self.policy.select_action(state, legal_actions(state))
            except NoActionError:
                result.loop_state = LoopState.STUCK
                break
            action = decision.action

            dispatched = self.session.dispatch(action)
            result.steps += 1
            result.actions.append(str(action))

            if not dispatched.changed:
                result.loop_state = LoopState.STUCK
                break

            if action.action_type == ActionType.DRAW:
                draws_without_progress += 1
                # One more draw than cards in circulation covers a full cycle
                if draws_without_progress > len(state.stock) + len(state.waste) + 1:
                    result.loop_state = LoopState.STUCK
                    break
            else:
                draws_without_progress = 0
        else:
            result.loop_state = LoopState.STEP_LIMIT

        if self.session.state.game_won:
            result.loop_state = LoopState.WON
        logger.info(
            "Play-out with %s ended %s after %d step(s)",
            self.policy.get_name(), result.loop_state.value, result.steps,
        )
        return result
