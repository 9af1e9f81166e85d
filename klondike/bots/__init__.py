"""
Bots - Automated players for play-outs.

Policies pick one of the legal actions for a state.
"""

from .policy import BotPolicy, BotDecision, NoActionError, RandomPolicy
from .greedy import GreedyPolicy

__all__ = [
    "BotPolicy",
    "BotDecision",
    "NoActionError",
    "RandomPolicy",
    "GreedyPolicy",
]
