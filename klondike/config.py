"""
Configuration - Environment settings for hosts and the CLI.

The engine never reads these on its own; hosts read them and pass the
values in (draw mode to NEW_GAME, seed to the random source).

    KLONDIKE_DRAW_MODE   1 or 3 (default 1)
    KLONDIKE_SEED        integer seed for the default random source (default unset)
    KLONDIKE_LOG_LEVEL   logging level name (default WARNING)
"""

import logging
import os
import random

# Environment configuration
KLONDIKE_DRAW_MODE = os.getenv("KLONDIKE_DRAW_MODE", "1")
KLONDIKE_SEED = os.getenv("KLONDIKE_SEED", None)
KLONDIKE_LOG_LEVEL = os.getenv("KLONDIKE_LOG_LEVEL", "WARNING")


def default_draw_mode() -> int:
    """Draw mode from KLONDIKE_DRAW_MODE; anything but 1 or 3 is an error."""
    try:
        draw_mode = int(KLONDIKE_DRAW_MODE)
    except ValueError:
        raise ValueError(f"KLONDIKE_DRAW_MODE must be 1 or 3, got {KLONDIKE_DRAW_MODE!r}") from None
    if draw_mode not in (1, 3):
        raise ValueError(f"KLONDIKE_DRAW_MODE must be 1 or 3, got {draw_mode}")
    return draw_mode


def default_rng(seed: int | None = None) -> random.Random:
    """Random source seeded from ``seed``, else KLONDIKE_SEED, else the OS."""
    if seed is None and KLONDIKE_SEED:
        seed = int(KLONDIKE_SEED)
    return random.Random(seed)


def configure_logging(level: str | None = None):
    """Apply basic logging config at ``level`` or KLONDIKE_LOG_LEVEL."""
    logging.basicConfig(
        level=(level or KLONDIKE_LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
