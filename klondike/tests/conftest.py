"""
Pytest fixtures for Klondike tests.
"""

import random

import pytest

from ..engine_core.reducer import Reducer, initial_state
from ..engine_core.state import GameState
from .factories import ready_to_finish_state


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible deals."""
    return random.Random(1234)


@pytest.fixture
def reducer(rng: random.Random) -> Reducer:
    return Reducer(rng=rng)


@pytest.fixture
def dealt_state(rng: random.Random) -> GameState:
    """A fresh draw-1 deal."""
    return initial_state(draw_mode=1, rng=rng)


@pytest.fixture
def draw_three_state(rng: random.Random) -> GameState:
    """A fresh draw-3 deal."""
    return initial_state(draw_mode=3, rng=rng)


@pytest.fixture
def finishing_state() -> GameState:
    """Every card face up in the tableau, ready for auto-complete."""
    return ready_to_finish_state(win_count=2)
